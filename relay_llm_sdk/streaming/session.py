"""
Streaming session: one long-lived read of server-sent event lines.

A ``StreamSession`` owns a single reader task. The task holds the
transport connection and the accumulation buffer exclusively, and hands
immutable ``UnifiedResponse`` snapshots to the consumer through a bounded
queue, so a slow consumer pauses the reader instead of growing a backlog.

Usage::

    async with adapter.stream(config) as stream:
        async for fragment in stream:
            print(fragment.text)

Every fragment carries the full text accumulated so far. The last item is
either a terminal fragment (``streaming=False``) or a ``ProviderError``
raised from the iterator; nothing follows either.

A session that is dropped without ``aclose()`` cancels its reader when it
is garbage collected, which releases the connection.
"""

from __future__ import annotations

import asyncio
import time
import weakref
from typing import Optional

from .types import EventInterpreter, PreparedRequest, SessionState, extract_data_payload
from ..errors import ErrorMapper, InvalidDataError, ProviderError, ServerError
from ..http.transport import Transport
from ..models.events import StreamTermination
from ..models.generation import UnifiedResponse
from ..models.streaming import StreamingOptions
from ..observability.logging import ProviderLogger


_CLOSED = object()
"""Queued by ``aclose`` to wake a consumer blocked on an empty queue."""


def _cancel_reader(task: asyncio.Task) -> None:
    if not task.done() and not task.get_loop().is_closed():
        task.cancel()


class _StreamReader:
    """Producer half of a session.

    Kept apart from ``StreamSession`` so the running task never holds a
    reference to the session it feeds.
    """

    def __init__(
        self,
        transport: Transport,
        request: PreparedRequest,
        interpret: EventInterpreter,
        provider: str,
        model: Optional[str],
        options: StreamingOptions,
        logger: ProviderLogger,
        request_id: str,
    ):
        self.transport = transport
        self.request = request
        self.interpret = interpret
        self.provider = provider
        self.model = model
        self.options = options
        self.logger = logger
        self.request_id = request_id

        self.state = SessionState.IDLE
        self.skipped_lines = 0
        self.queue: Optional[asyncio.Queue] = None

    async def run(self) -> None:
        request = self.request
        accumulated = ""
        chunks = 0
        start_time = time.time()

        self.state = SessionState.CONNECTING
        self.logger.debug(
            "Opening stream",
            model=self.model,
            request_id=self.request_id,
            url=request.url
        )
        try:
            async with self.transport.open_stream(
                request.url,
                request.method,
                request.headers,
                request.body,
                request.timeout,
            ) as connection:
                if not connection.is_success:
                    raise ServerError(connection.status_code, provider=self.provider)
                self.state = SessionState.READING

                async for line in connection.aiter_lines():
                    payload = extract_data_payload(line)
                    if payload is None:
                        continue

                    event = self.interpret(payload)
                    if event is None:
                        self._record_skipped(payload)
                        continue

                    if isinstance(event, StreamTermination):
                        accumulated += event.text
                        await self.queue.put(UnifiedResponse(
                            role="assistant",
                            text=accumulated,
                            streaming=False,
                            raw_response=event.raw,
                        ))
                        self.state = SessionState.TERMINATED
                        if self.options.log_streaming_metrics:
                            self.logger.log_streaming_metrics(
                                chunks,
                                len(accumulated),
                                time.time() - start_time,
                                self.model,
                                self.request_id,
                                skipped_lines=self.skipped_lines,
                            )
                        return

                    if event.text:
                        accumulated += event.text
                        chunks += 1
                        await self.queue.put(UnifiedResponse(
                            role=event.role or "assistant",
                            text=accumulated,
                            streaming=True,
                            raw_response=event.raw,
                        ))

                raise InvalidDataError(
                    "Stream ended before a completion signal",
                    provider=self.provider,
                )
        except asyncio.CancelledError:
            if self.state != SessionState.TERMINATED:
                self.state = SessionState.DISCONNECTED
            raise
        except Exception as exc:
            if self.state == SessionState.TERMINATED:
                # Failure while releasing an already completed stream.
                self.logger.warning(
                    "Error closing completed stream",
                    model=self.model,
                    request_id=self.request_id,
                    error_type=type(exc).__name__
                )
                return
            error = ErrorMapper.map_transport_error(exc, self.provider)
            error.partial = UnifiedResponse(
                role="assistant",
                text=accumulated,
                streaming=False,
                disconnect=True,
            )
            self.state = SessionState.DISCONNECTED
            self.logger.error(
                "Stream disconnected",
                model=self.model,
                request_id=self.request_id,
                error=error,
                chunks=chunks
            )
            await self.queue.put(error)

    def _record_skipped(self, payload: str) -> None:
        self.skipped_lines += 1
        if self.options.log_skipped_lines:
            self.logger.log_skipped_line(payload, self.model, self.request_id)
        if self.options.on_skipped_line is not None:
            self.options.on_skipped_line(payload)


class StreamSession:
    """Pull-based iterator over one streamed generation request."""

    def __init__(
        self,
        transport: Transport,
        request: PreparedRequest,
        interpret: EventInterpreter,
        provider: str,
        model: Optional[str] = None,
        options: Optional[StreamingOptions] = None,
        logger: Optional[ProviderLogger] = None,
    ):
        self.provider = provider
        self.model = model
        self.options = options or StreamingOptions()
        self._logger = logger or ProviderLogger(provider)
        self.request_id = ProviderLogger.new_request_id()

        self._reader = _StreamReader(
            transport,
            request,
            interpret,
            provider,
            model,
            self.options,
            self._logger,
            self.request_id,
        )
        self._task: Optional[asyncio.Task] = None
        self._finished = False

    @property
    def state(self) -> SessionState:
        return self._reader.state

    @property
    def skipped_lines(self) -> int:
        """Data lines that decoded to no known event."""
        return self._reader.skipped_lines

    # Consumer side

    def __aiter__(self) -> "StreamSession":
        return self

    async def __anext__(self) -> UnifiedResponse:
        if self._finished:
            raise StopAsyncIteration
        self._start()
        item = await self._reader.queue.get()
        if item is _CLOSED or self._finished:
            raise StopAsyncIteration
        if isinstance(item, ProviderError):
            await self._finish()
            raise item
        if not item.streaming:
            await self._finish()
        return item

    async def __aenter__(self) -> "StreamSession":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    @property
    def closed(self) -> bool:
        return self._finished

    async def aclose(self) -> None:
        """Stop reading, close the connection and end the sequence.

        Safe to call at any point, more than once and from a task other
        than the one iterating. No fragment is delivered after this returns.
        """
        self._finished = True
        if self._task is None or self._task.done():
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        queue = self._reader.queue
        if queue.empty():
            queue.put_nowait(_CLOSED)
        if self._reader.state != SessionState.TERMINATED:
            self._reader.state = SessionState.DISCONNECTED
            self._logger.debug(
                "Stream closed by consumer",
                model=self.model,
                request_id=self.request_id
            )

    def _start(self) -> None:
        if self._task is not None:
            return
        self._reader.queue = asyncio.Queue(maxsize=self.options.max_buffered_fragments)
        self._task = asyncio.ensure_future(self._reader.run())
        finalizer = weakref.finalize(self, _cancel_reader, self._task)
        finalizer.atexit = False

    async def _finish(self) -> None:
        # The reader puts nothing after a terminal item, so this only
        # waits for the connection to be released.
        self._finished = True
        if self._task is not None:
            await self._task
