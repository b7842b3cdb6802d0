from __future__ import annotations

from apit.models import RunStatus
from apit.tracker import RunStatusTracker


def test_seed_keeps_declaration_order() -> None:
    tracker = RunStatusTracker()

    tracker.seed(["A", "B", "C"])

    assert [(r.step_id, r.status) for r in tracker.results] == [
        ("A", RunStatus.NOT_RUN),
        ("B", RunStatus.NOT_RUN),
        ("C", RunStatus.NOT_RUN),
    ]


def test_upsert_replaces_in_place() -> None:
    tracker = RunStatusTracker()
    tracker.seed(["A", "B", "C"])

    tracker.upsert("B", RunStatus.FAILED)
    tracker.upsert("B", RunStatus.SUCCESS)

    assert len(tracker) == 3
    assert [r.step_id for r in tracker.results] == ["A", "B", "C"]
    assert tracker.status_of("B") == RunStatus.SUCCESS


def test_upsert_appends_unknown_ids() -> None:
    tracker = RunStatusTracker()
    tracker.seed(["A"])

    tracker.upsert("Z", "failed")

    assert [r.step_id for r in tracker.results] == ["A", "Z"]
    assert tracker.status_of("Z") == RunStatus.FAILED
    assert tracker.status_of("unknown") is None


def test_duplicate_seed_ids_collapse_to_first_position() -> None:
    tracker = RunStatusTracker()

    tracker.seed(["A", "B", "A"])

    assert [r.step_id for r in tracker.results] == ["A", "B"]


def test_counts_and_reset() -> None:
    tracker = RunStatusTracker()
    tracker.seed(["A", "B", "C"])
    tracker.upsert("A", RunStatus.SUCCESS)
    tracker.upsert("B", RunStatus.FAILED)

    assert tracker.counts() == {
        RunStatus.NOT_RUN: 1,
        RunStatus.SUCCESS: 1,
        RunStatus.FAILED: 1,
    }

    tracker.reset()
    assert tracker.results == ()


def test_results_view_is_a_snapshot() -> None:
    tracker = RunStatusTracker()
    tracker.seed(["A"])
    snapshot = tracker.results

    tracker.upsert("A", RunStatus.SUCCESS)

    assert snapshot[0].status == RunStatus.NOT_RUN
    assert tracker.results[0].status == RunStatus.SUCCESS
