# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Eul Bite

"""
HTTP transport seam for the Log Analytics client.

The client never talks to aiohttp directly. It hands an HttpRequest to a
Transport and gets an HttpResponse back, which keeps the signing logic
testable with a fake transport and lets callers bring their own session.

Any object with an ``async execute(request) -> HttpResponse`` method is a
transport. ``close()`` is optional and may be sync or async.
"""

import asyncio
import inspect
import logging
from dataclasses import dataclass, field
from typing import Protocol

import aiohttp

from .errors import TransportError

logger = logging.getLogger(__name__)


@dataclass
class HttpRequest:
    """Fully assembled outgoing request."""
    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""


@dataclass
class HttpResponse:
    """Response with the body already read."""
    status_code: int
    reason: str = ""
    headers: dict[str, str] = field(default_factory=dict)
    text: str = ""


class Transport(Protocol):
    """Executes one request and returns the complete response."""

    async def execute(self, request: HttpRequest) -> HttpResponse:
        ...


def is_transport(obj: object) -> bool:
    """True if obj can be used as a transport (has a callable execute)."""
    return callable(getattr(obj, "execute", None))


async def release_transport(transport: object) -> None:
    """Release a transport if it exposes close(); no-op otherwise."""
    close = getattr(transport, "close", None)
    if not callable(close):
        return
    result = close()
    if inspect.isawaitable(result):
        await result


class AiohttpTransport:
    """
    Default transport backed by an aiohttp.ClientSession.

    Session defaults:
    - DummyCookieJar (no cookie management)
    - auto_decompress=False and no Accept-Encoding (no content compression)
    - No default auth (every request carries its own Authorization header)

    The session is created lazily on the first request, so constructing the
    transport needs neither network I/O nor a running event loop.

    Usage:
        transport = AiohttpTransport(timeout_ms=10000)
        response = await transport.execute(request)
        await transport.close()
    """

    def __init__(
        self,
        timeout_ms: int = 5000,
        session: aiohttp.ClientSession | None = None,
    ):
        self.timeout_ms = timeout_ms
        self._session = session
        # A caller-provided session belongs to the caller
        self._owns_session = session is None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(
                total=self.timeout_ms / 1000,
                connect=2.0,
            )
            self._session = aiohttp.ClientSession(
                timeout=timeout,
                cookie_jar=aiohttp.DummyCookieJar(),
                auto_decompress=False,
                skip_auto_headers=("Accept-Encoding",),
            )
            self._owns_session = True
        return self._session

    async def execute(self, request: HttpRequest) -> HttpResponse:
        """
        Send the request and read the full response.

        Raises:
            TransportError: On connection, DNS, TLS or timeout failures
        """
        session = await self._get_session()
        try:
            async with session.request(
                request.method,
                request.url,
                data=request.body,
                headers=request.headers,
            ) as response:
                text = await response.text(errors="replace")
                return HttpResponse(
                    status_code=response.status,
                    reason=response.reason or "",
                    headers=dict(response.headers),
                    text=text,
                )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning(f"HTTP {request.method} {request.url} failed: {e!r}")
            raise TransportError(f"{type(e).__name__}: {e}") from e

    @property
    def closed(self) -> bool:
        return self._session is None or self._session.closed

    async def close(self) -> None:
        """Close the session if this transport created it."""
        if self._session and self._owns_session and not self._session.closed:
            await self._session.close()
            logger.info("aiohttp session closed")

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
        return False
