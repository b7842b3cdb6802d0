"""Ordered step status bookkeeping for one run."""

from __future__ import annotations

from typing import Iterable, Optional

from .models import RunResult, RunStatus


class RunStatusTracker:
    """Maps step ids to their status while keeping declaration order.

    ``upsert`` replaces an existing entry in place, so the order fixed by
    ``seed`` survives every later status update.
    """

    def __init__(self) -> None:
        self._results: list[RunResult] = []
        self._positions: dict[str, int] = {}

    def seed(self, step_ids: Iterable[str]) -> None:
        for step_id in step_ids:
            self.upsert(step_id, RunStatus.NOT_RUN)

    def upsert(self, step_id: str, status: RunStatus) -> RunResult:
        result = RunResult(step_id=step_id, status=RunStatus(status))
        position = self._positions.get(step_id)
        if position is None:
            self._positions[step_id] = len(self._results)
            self._results.append(result)
        else:
            self._results[position] = result
        return result

    def status_of(self, step_id: str) -> Optional[RunStatus]:
        position = self._positions.get(step_id)
        if position is None:
            return None
        return self._results[position].status

    @property
    def results(self) -> tuple[RunResult, ...]:
        return tuple(self._results)

    def counts(self) -> dict[RunStatus, int]:
        totals = {status: 0 for status in RunStatus}
        for result in self._results:
            totals[result.status] += 1
        return totals

    def reset(self) -> None:
        self._results.clear()
        self._positions.clear()

    def __len__(self) -> int:
        return len(self._results)
