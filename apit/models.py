"""Service, test step and flow descriptors plus run records."""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, ClassVar, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, JsonValue

ParamValue = Union[str, Callable[[], str]]


class HttpMethod(str, Enum):
    """HTTP methods a service can be declared with."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    OPTIONS = "OPTIONS"
    HEAD = "HEAD"


class Service(BaseModel):
    """Named, reusable HTTP endpoint template."""

    model_config = ConfigDict(frozen=True)

    id: str
    endpoint: str
    method: HttpMethod = HttpMethod.GET
    max_redirects: Optional[int] = Field(default=None, ge=0)
    validate_status: Optional[Callable[[int], bool]] = None


class TestStep(BaseModel):
    """One executable request bound to a service.

    ``last_response`` stays ``None`` until the step succeeds during a run; later
    steps may read it from ``params`` callables.
    """

    __test__: ClassVar[bool] = False

    id: str
    service: Service
    expects: Callable[[Any], Any]
    body: Optional[JsonValue] = None
    headers: Optional[dict[str, str]] = None
    params: Optional[dict[str, ParamValue]] = None
    last_response: Optional[JsonValue] = None


class Flow(BaseModel):
    """Ordered, named chain of test steps."""

    name: str
    steps: list[TestStep] = Field(default_factory=list)


class CapturedValue(BaseModel):
    """Response payload of a successful step, keyed by step id."""

    model_config = ConfigDict(frozen=True)

    step_id: str
    value: Any = None


class RunStatus(str, Enum):
    NOT_RUN = "not-run"
    SUCCESS = "success"
    FAILED = "failed"


class RunResult(BaseModel):
    """Current status of one step within a run."""

    model_config = ConfigDict(frozen=True)

    step_id: str
    status: RunStatus = RunStatus.NOT_RUN


class StepLog(BaseModel):
    """Request/response record of one executed step."""

    step_id: str
    service_id: str
    flow: str
    method: str
    url: str
    headers: dict[str, str] = Field(default_factory=dict)
    body: Any = None
    success: bool
    status_code: Optional[int] = None
    response: Any = None
    error: Optional[str] = None
    traceback: Optional[str] = None
    duration_ms: float = 0.0

    def request_summary(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "method": self.method,
            "headers": self.headers,
            "body": self.body,
        }


class RunSummary(BaseModel):
    """Aggregated outcome of one engine run."""

    total_steps: int
    passed_steps: int
    failed_steps: int
    not_run_steps: int
    duration_ms: float
    results: list[RunResult] = Field(default_factory=list)
    logs: list[StepLog] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.failed_steps == 0 and self.not_run_steps == 0
