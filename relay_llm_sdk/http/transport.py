"""
HTTP transport collaborator.

The provider adapters never talk to httpx directly; they go through a
``Transport`` which offers exactly two operations: a one-shot request
returning status and body, and a streamed request yielding text lines.
Transports raise library exceptions unchanged; the caller maps them with
``ErrorMapper``.
"""

from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncContextManager, AsyncIterator, Mapping, Optional

import httpx


@dataclass(frozen=True)
class TransportResponse:
    """Status code and raw body of a completed request."""
    status_code: int
    content: bytes

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code <= 299


class StreamConnection(ABC):
    """An open, line-oriented response held by a single reader."""

    status_code: int

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code <= 299

    @abstractmethod
    def aiter_lines(self) -> AsyncIterator[str]:
        """Yield decoded text lines as they arrive."""

    @abstractmethod
    async def aclose(self) -> None:
        """Close the underlying connection."""


class Transport(ABC):
    """Abstract HTTP transport used by the provider adapters."""

    @abstractmethod
    async def send(
        self,
        url: str,
        method: str,
        headers: Mapping[str, str],
        body: Optional[bytes] = None,
        timeout: Optional[float] = None,
    ) -> TransportResponse:
        """Issue a single request and return its status and body."""

    @abstractmethod
    def open_stream(
        self,
        url: str,
        method: str,
        headers: Mapping[str, str],
        body: Optional[bytes] = None,
        timeout: Optional[float] = None,
    ) -> AsyncContextManager[StreamConnection]:
        """Open a request held for line-by-line reads.

        The connection is closed when the context exits, including on
        cancellation.
        """

    async def aclose(self) -> None:
        """Release pooled resources. Optional for implementations."""
        return None


class HttpxStreamConnection(StreamConnection):
    """StreamConnection over a streamed ``httpx.Response``."""

    def __init__(self, response: httpx.Response):
        self._response = response
        self.status_code = response.status_code

    def aiter_lines(self) -> AsyncIterator[str]:
        return self._response.aiter_lines()

    async def aclose(self) -> None:
        await self._response.aclose()


class HttpxTransport(Transport):
    """Transport backed by a shared ``httpx.AsyncClient``."""

    def __init__(self, client: Optional[httpx.AsyncClient] = None):
        self._client = client
        self._owns_client = client is None

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy initialization of the httpx client."""
        if self._client is None:
            self._client = httpx.AsyncClient()
        return self._client

    async def send(self, url, method, headers, body=None, timeout=None) -> TransportResponse:
        response = await self.client.request(
            method,
            url,
            headers=dict(headers),
            content=body,
            timeout=timeout,
        )
        return TransportResponse(status_code=response.status_code, content=response.content)

    @asynccontextmanager
    async def open_stream(self, url, method, headers, body=None, timeout=None):
        request = self.client.build_request(
            method,
            url,
            headers=dict(headers),
            content=body,
            timeout=timeout,
        )
        response = await self.client.send(request, stream=True)
        connection = HttpxStreamConnection(response)
        try:
            yield connection
        finally:
            await connection.aclose()

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
