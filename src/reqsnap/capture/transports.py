from __future__ import annotations

import typing as t

import httpx

from .._models import Record
from ._base import RequestCapture

OnRequest = t.Callable[[httpx.Request], None]


class CapturingTransport(httpx.BaseTransport):
    """Reports every request to `on_request` before handing it to the wrapped transport"""

    def __init__(self, on_request: OnRequest, wrapped: httpx.BaseTransport | None = None) -> None:
        self._on_request = on_request
        self._wrapped = wrapped or httpx.HTTPTransport()

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self._on_request(request)
        return self._wrapped.handle_request(request)

    def close(self) -> None:
        self._wrapped.close()


class AsyncCapturingTransport(httpx.AsyncBaseTransport):
    def __init__(self, on_request: OnRequest, wrapped: httpx.AsyncBaseTransport | None = None) -> None:
        self._on_request = on_request
        self._wrapped = wrapped or httpx.AsyncHTTPTransport()

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        await request.aread()
        self._on_request(request)
        return await self._wrapped.handle_async_request(request)

    async def aclose(self) -> None:
        await self._wrapped.aclose()


class HttpxRequestCapture(RequestCapture):
    """
    Captures requests sent by `httpx` clients built on top of its transports.

    e.g.
        capture = HttpxRequestCapture()
        client = httpx.Client(transport=capture.transport)
        async_client = httpx.AsyncClient(transport=capture.async_transport)

    It can also be plugged as an event hook: `httpx.Client(event_hooks={"request": [capture.observe]})`
    """

    def __init__(
        self,
        transport: httpx.BaseTransport | None = None,
        async_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__()
        self._wrapped_transport = transport
        self._wrapped_async_transport = async_transport
        self._transport: CapturingTransport | None = None
        self._async_transport: AsyncCapturingTransport | None = None

    @property
    def transport(self) -> CapturingTransport:
        if self._transport is None:
            self._transport = CapturingTransport(self.observe, self._wrapped_transport)

        return self._transport

    @property
    def async_transport(self) -> AsyncCapturingTransport:
        if self._async_transport is None:
            self._async_transport = AsyncCapturingTransport(self.observe, self._wrapped_async_transport)

        return self._async_transport

    def observe(self, request: httpx.Request) -> None:
        if self.is_capturing:
            self.add(Record.from_httpx(request))
