"""Chained API flow testing with Markdown and Mermaid reports."""

from .engine import FlowEngine
from .factory import create_flow, create_service, create_test
from .models import (
    CapturedValue,
    Flow,
    HttpMethod,
    RunResult,
    RunStatus,
    RunSummary,
    Service,
    StepLog,
    TestStep,
)
from .report import MarkdownReport, render_mermaid, write_junit_report, write_mermaid_report
from .resolver import ValueResolver
from .tracker import RunStatusTracker
from .transport import HttpxTransport, TransportError, TransportRequest, TransportResponse

__all__ = [
    "CapturedValue",
    "Flow",
    "FlowEngine",
    "HttpMethod",
    "HttpxTransport",
    "MarkdownReport",
    "RunResult",
    "RunStatus",
    "RunStatusTracker",
    "RunSummary",
    "Service",
    "StepLog",
    "TestStep",
    "TransportError",
    "TransportRequest",
    "TransportResponse",
    "ValueResolver",
    "create_flow",
    "create_service",
    "create_test",
    "render_mermaid",
    "write_junit_report",
    "write_mermaid_report",
]
