"""
HTTP transport for the VSS client (async).

- `Transport` is the contract the client relies on: send one request description,
  get back a status code and a body, or fail with `TransportError`.
- `HttpxTransport` implements it over a pooled `httpx.AsyncClient`, streaming the
  response so a body larger than `max_body_size` is abandoned instead of buffered.

httpx does not pipeline HTTP/1.1 requests, so the `pipelining` hint is honored
trivially (a non-replayable request is never pipelined). Custom transports may
act on it.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Protocol, runtime_checkable

import httpx

from .config import DEFAULT_CLIENT_CAPACITY
from .errors import TransportError

__all__ = ["HttpRequest", "HttpResponse", "Transport", "HttpxTransport"]


@dataclass(frozen=True)
class HttpRequest:
    """One outgoing POST as handed to a Transport."""

    url: str
    body: bytes
    headers: Mapping[str, str] = field(default_factory=dict)
    timeout: float = 10.0
    max_body_size: int = 1024 * 1024 * 1024
    pipelining: bool = False


@dataclass(frozen=True)
class HttpResponse:
    status_code: int
    body: bytes = b""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


@runtime_checkable
class Transport(Protocol):
    async def send(self, request: HttpRequest) -> HttpResponse: ...

    async def aclose(self) -> None: ...


class HttpxTransport:
    """
    Transport backed by `httpx.AsyncClient`; safe to share across tasks.

    Each request runs under one deadline of `request.timeout` seconds covering
    connect, upload and the whole response body.

    `capacity` and `headers` configure the client this transport creates. They
    cannot be combined with an injected `client`, which is used as-is.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        *,
        capacity: Optional[int] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._owns_client = client is None
        if client is None:
            if capacity is None:
                capacity = DEFAULT_CLIENT_CAPACITY
            limits = httpx.Limits(max_connections=capacity, max_keepalive_connections=capacity)
            client = httpx.AsyncClient(limits=limits, headers=dict(headers or {}))
        elif capacity is not None or headers is not None:
            raise ValueError("capacity and headers apply only when no client is injected")
        self._client = client

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def send(self, request: HttpRequest) -> HttpResponse:
        try:
            return await asyncio.wait_for(self._send_once(request), timeout=request.timeout)
        except (httpx.TimeoutException, asyncio.TimeoutError) as e:
            raise TransportError(f"timed out after {request.timeout}s: {e!r}", url=request.url) from e
        except httpx.HTTPError as e:
            raise TransportError(f"network error: {e}", url=request.url) from e

    async def _send_once(self, request: HttpRequest) -> HttpResponse:
        headers: Dict[str, str] = dict(request.headers)
        async with self._client.stream(
            "POST",
            request.url,
            content=request.body,
            headers=headers,
            timeout=request.timeout,
        ) as resp:
            declared = resp.headers.get("content-length")
            if declared is not None and declared.isdigit() and int(declared) > request.max_body_size:
                raise TransportError(
                    f"response body of {declared} bytes exceeds limit of {request.max_body_size}",
                    url=request.url,
                )
            chunks = []
            received = 0
            async for chunk in resp.aiter_bytes():
                received += len(chunk)
                if received > request.max_body_size:
                    raise TransportError(
                        f"response body exceeds limit of {request.max_body_size} bytes",
                        url=request.url,
                    )
                chunks.append(chunk)
            return HttpResponse(status_code=resp.status_code, body=b"".join(chunks))
