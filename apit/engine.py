"""Flow execution engine."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional
import asyncio
import time
import traceback

import structlog

from .config import RunnerSettings
from .console_reporter import ConsoleReporter
from .models import CapturedValue, Flow, RunStatus, RunSummary, StepLog, TestStep
from .report import MarkdownReport, write_mermaid_report
from .resolver import ValueResolver
from .tracker import RunStatusTracker
from .transport import (
    HttpxTransport,
    Transport,
    TransportError,
    TransportRequest,
    default_validate_status,
)

LOGGER = structlog.get_logger("apit")


class FlowEngine:
    """Runs registered flows and records per-step outcomes.

    Flows run concurrently with each other; the steps of one flow run strictly
    one after another so later steps can use earlier responses. A failing step
    never stops its flow or the run.
    """

    def __init__(
        self,
        *,
        transport: Optional[Transport] = None,
        markdown_report: Optional[MarkdownReport] = None,
        reporter: Optional[ConsoleReporter] = None,
        settings: Optional[RunnerSettings] = None,
    ) -> None:
        self.settings = settings or RunnerSettings()
        self._owns_transport = transport is None
        self._transport = transport
        self._markdown_report = markdown_report or MarkdownReport(self.settings.report_file)
        self._reporter = reporter or ConsoleReporter(output_format=self.settings.output_format)
        self._flows: list[Flow] = []
        self._captured: list[CapturedValue] = []
        self._logs: list[StepLog] = []
        self.tracker = RunStatusTracker()
        self.resolver = ValueResolver(self._captured)

    @property
    def flows(self) -> tuple[Flow, ...]:
        return tuple(self._flows)

    @property
    def captured(self) -> tuple[CapturedValue, ...]:
        return tuple(self._captured)

    @property
    def logs(self) -> tuple[StepLog, ...]:
        return tuple(self._logs)

    def add(self, flow: Flow) -> None:
        self._flows.append(flow)

    async def run(self) -> RunSummary:
        """Execute every registered flow and wait for all of them to settle."""

        self._reset()
        self._markdown_report.start()

        self.tracker.seed(step.id for flow in self._flows for step in flow.steps)
        self._reporter.start_run(total_steps=len(self.tracker), flow_count=len(self._flows))

        started = time.perf_counter()
        transport = self._transport
        if transport is None:
            transport = HttpxTransport(timeout=self.settings.timeout)
        try:
            await asyncio.gather(*(self._run_flow(flow, transport) for flow in self._flows))
        finally:
            if self._owns_transport:
                await transport.aclose()
        duration_ms = round((time.perf_counter() - started) * 1000, 3)

        summary = self._build_summary(duration_ms)
        LOGGER.info(
            "run_finished",
            total=summary.total_steps,
            passed=summary.passed_steps,
            failed=summary.failed_steps,
            duration_ms=summary.duration_ms,
        )
        self._reporter.finish_run(summary)
        return summary

    def generate_mermaid_report(self, path: Optional[Path] = None) -> str:
        """Write the status chain diagram and return its content."""

        return write_mermaid_report(self.tracker.results, path or self.settings.mermaid_report_file)

    def _reset(self) -> None:
        self._captured.clear()
        self._logs.clear()
        self.tracker.reset()
        for flow in self._flows:
            for step in flow.steps:
                step.last_response = None

    async def _run_flow(self, flow: Flow, transport: Transport) -> None:
        LOGGER.info("flow_started", flow=flow.name, steps=len(flow.steps))
        self._reporter.report_flow_start(flow.name)
        for step in flow.steps:
            await self._run_step(flow, step, transport)
        LOGGER.info("flow_finished", flow=flow.name)

    async def _run_step(self, flow: Flow, step: TestStep, transport: Transport) -> None:
        service = step.service
        logger = LOGGER.bind(flow=flow.name, step=step.id, service=service.id)
        url = service.endpoint
        body: Any = step.body
        headers: dict[str, str] = dict(step.headers or {})
        status_code: Optional[int] = None
        response_data: Any = None
        timer = time.perf_counter()

        try:
            url = self.resolver.resolve_endpoint(service.endpoint, step.params)
            body = self.resolver.resolve_body(step.body, step.params)
            headers = self.resolver.resolve_headers(step.headers)
            response = await transport.send(
                TransportRequest(
                    method=service.method.value,
                    url=url,
                    body=body,
                    headers=headers,
                    max_redirects=service.max_redirects,
                    validate_status=service.validate_status or default_validate_status,
                )
            )
            status_code = response.status_code
            response_data = response.data
            step.expects(response.data)
        except (KeyboardInterrupt, SystemExit, asyncio.CancelledError):
            raise
        except BaseException as exc:
            if isinstance(exc, TransportError):
                status_code = exc.status_code
                response_data = exc.data
            self.tracker.upsert(step.id, RunStatus.FAILED)
            log = self._record(
                flow, step, url, body, headers, timer,
                success=False,
                status_code=status_code,
                response=response_data,
                error=str(exc) or type(exc).__name__,
                traceback_text=traceback.format_exc(),
            )
            logger.warning("step_failed", url=url, status=status_code, error=log.error)
            return

        self.tracker.upsert(step.id, RunStatus.SUCCESS)
        self._captured.append(CapturedValue(step_id=step.id, value=response_data))
        step.last_response = response_data
        self._record(
            flow, step, url, body, headers, timer,
            success=True,
            status_code=status_code,
            response=response_data,
        )
        logger.info("step_succeeded", url=url, status=status_code)

    def _record(
        self,
        flow: Flow,
        step: TestStep,
        url: str,
        body: Any,
        headers: dict[str, str],
        timer: float,
        *,
        success: bool,
        status_code: Optional[int],
        response: Any,
        error: Optional[str] = None,
        traceback_text: Optional[str] = None,
    ) -> StepLog:
        log = StepLog(
            step_id=step.id,
            service_id=step.service.id,
            flow=flow.name,
            method=step.service.method.value,
            url=url,
            headers=headers,
            body=body,
            success=success,
            status_code=status_code,
            response=response,
            error=error,
            traceback=traceback_text,
            duration_ms=round((time.perf_counter() - timer) * 1000, 3),
        )
        self._logs.append(log)
        self._markdown_report.append(log)
        self._reporter.report_step_result(log)
        return log

    def _build_summary(self, duration_ms: float) -> RunSummary:
        counts = self.tracker.counts()
        return RunSummary(
            total_steps=len(self.tracker),
            passed_steps=counts[RunStatus.SUCCESS],
            failed_steps=counts[RunStatus.FAILED],
            not_run_steps=counts[RunStatus.NOT_RUN],
            duration_ms=duration_ms,
            results=list(self.tracker.results),
            logs=list(self._logs),
        )
