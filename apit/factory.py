"""Declaration helpers for services, tests and flows."""

from __future__ import annotations

from typing import Any, Callable, Optional

from .models import Flow, HttpMethod, ParamValue, Service, TestStep


def create_service(
    id: str,
    endpoint: str,
    method: HttpMethod | str = HttpMethod.GET,
    *,
    max_redirects: int = 0,
    validate_status: Optional[Callable[[int], bool]] = None,
) -> Service:
    """Declare an endpoint template.

    ``endpoint`` may contain ``{param}`` placeholders filled from a test's
    params and ``@@STEP.path`` placeholders filled from earlier responses.
    Redirects are not followed unless ``max_redirects`` is raised above zero.
    """

    if isinstance(method, str) and not isinstance(method, HttpMethod):
        method = HttpMethod(method.upper())
    return Service(
        id=id,
        endpoint=endpoint,
        method=method,
        max_redirects=max_redirects,
        validate_status=validate_status,
    )


def create_test(
    id: str,
    service: Service,
    expects: Callable[[Any], Any],
    *,
    body: Any = None,
    headers: Optional[dict[str, str]] = None,
    params: Optional[dict[str, ParamValue]] = None,
) -> TestStep:
    """Bind a service to a body, headers and an expectation callback.

    ``expects`` receives the parsed response body and signals failure by raising.
    """

    return TestStep(
        id=id,
        service=service,
        expects=expects,
        body=body,
        headers=headers,
        params=params,
    )


def create_flow(name: str, steps: list[TestStep]) -> Flow:
    """Chain tests; they run in the given order."""

    return Flow(name=name, steps=list(steps))
