"""HTTP transport used by the flow engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Protocol

import httpx
import structlog

from .config import DEFAULT_TIMEOUT

LOGGER = structlog.get_logger("apit.transport")

StatusValidator = Callable[[int], bool]
_BODYLESS_METHODS = {"GET", "HEAD"}


def default_validate_status(status: int) -> bool:
    """Accept 2xx and 3xx responses."""

    return 200 <= status < 400


@dataclass
class TransportRequest:
    method: str
    url: str
    body: Any = None
    headers: dict[str, str] = field(default_factory=dict)
    max_redirects: Optional[int] = None
    validate_status: StatusValidator = default_validate_status


@dataclass
class TransportResponse:
    """Response accepted by the request's status validator."""

    status_code: int
    data: Any = None
    headers: dict[str, str] = field(default_factory=dict)


class TransportError(RuntimeError):
    """Request could not be sent or its status was rejected."""

    def __init__(self, message: str, *, status_code: int | None = None, data: Any = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.data = data


class Transport(Protocol):
    async def send(self, request: TransportRequest) -> TransportResponse:
        ...


class HttpxTransport:
    """Sends requests through ``httpx.AsyncClient``.

    One client is kept per redirect limit because httpx configures redirects on
    the client. ``max_redirects`` of 0 disables following; ``None`` keeps the
    httpx default.
    """

    def __init__(
        self,
        timeout: float | None = DEFAULT_TIMEOUT,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._timeout = httpx.Timeout(timeout)
        self._transport = transport
        self._clients: dict[Optional[int], httpx.AsyncClient] = {}

    def _client_for(self, max_redirects: Optional[int]) -> httpx.AsyncClient:
        client = self._clients.get(max_redirects)
        if client is None:
            options: dict[str, Any] = {"timeout": self._timeout, "transport": self._transport}
            if max_redirects is None:
                options["follow_redirects"] = True
            else:
                options["follow_redirects"] = max_redirects > 0
                options["max_redirects"] = max_redirects
            client = httpx.AsyncClient(**options)
            self._clients[max_redirects] = client
        return client

    async def send(self, request: TransportRequest) -> TransportResponse:
        method = request.method.upper()
        client = self._client_for(request.max_redirects)
        content_kwargs = _encode_body(method, request.body)
        headers = httpx.Headers({"Accept": "application/json"})
        headers.update(request.headers)
        LOGGER.debug("http_request", method=method, url=request.url)
        try:
            response = await client.request(method, request.url, headers=headers, **content_kwargs)
        except httpx.HTTPError as exc:
            raise TransportError(f"HTTP request failed for {method} {request.url}: {exc}") from exc

        data = _decode_body(response)
        validator = request.validate_status or default_validate_status
        if not validator(response.status_code):
            raise TransportError(
                f"Request failed with status code {response.status_code}",
                status_code=response.status_code,
                data=data,
            )
        return TransportResponse(
            status_code=response.status_code,
            data=data,
            headers=dict(response.headers),
        )

    async def aclose(self) -> None:
        clients = list(self._clients.values())
        self._clients.clear()
        for client in clients:
            await client.aclose()

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()


def _encode_body(method: str, body: Any) -> dict[str, Any]:
    if method in _BODYLESS_METHODS or body is None:
        return {}
    if isinstance(body, (bytes, str)):
        return {"content": body}
    return {"json": body}


def _decode_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text
