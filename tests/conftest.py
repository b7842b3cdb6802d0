"""Shared fixtures for the apit test-suite."""

from __future__ import annotations

import inspect
from pathlib import Path
from typing import Any, Callable

import pytest
import structlog

from apit.console_reporter import ConsoleReporter
from apit.engine import FlowEngine
from apit.output_config import OutputFormat
from apit.report import MarkdownReport
from apit.transport import TransportError, TransportRequest, TransportResponse

Handler = Callable[[TransportRequest], Any]


class FakeTransport:
    """Records requests and answers them through a handler.

    The handler returns ``(status, data)`` (optionally from a coroutine) or
    raises; the request's status validator is applied like the real transport.
    """

    def __init__(self, handler: Handler) -> None:
        self._handler = handler
        self.requests: list[TransportRequest] = []

    async def send(self, request: TransportRequest) -> TransportResponse:
        self.requests.append(request)
        outcome = self._handler(request)
        if inspect.isawaitable(outcome):
            outcome = await outcome
        status, data = outcome
        if not request.validate_status(status):
            raise TransportError(f"Request failed with status code {status}", status_code=status, data=data)
        return TransportResponse(status_code=status, data=data)

    def urls(self) -> list[str]:
        return [request.url for request in self.requests]


def routes(table: dict[str, Any]) -> Handler:
    """Handler answering ``200`` with ``table[url]``; unknown urls get ``404``."""

    def _handler(request: TransportRequest) -> tuple[int, Any]:
        if request.url not in table:
            return 404, {"error": "not found"}
        return 200, table[request.url]

    return _handler


@pytest.fixture
def make_engine(tmp_path: Path) -> Callable[..., tuple[FlowEngine, FakeTransport]]:
    def _factory(handler: Handler, **kwargs: Any) -> tuple[FlowEngine, FakeTransport]:
        kwargs.setdefault("markdown_report", MarkdownReport(tmp_path / "test-report.md"))
        transport = FakeTransport(handler)
        engine = FlowEngine(
            transport=transport,
            reporter=ConsoleReporter(output_format=OutputFormat.PLAIN),
            **kwargs,
        )
        return engine, transport

    return _factory


@pytest.fixture(autouse=True)
def _reset_structlog():
    yield
    structlog.reset_defaults()
