"""Streaming session: one open event connection folded into one response."""
from enum import Enum
from typing import Any, AsyncIterator, Generic, List, Optional, TypeVar

import httpx
from pydantic import BaseModel

from llmwire.core.errors import DecodeError, LLMWireError, StreamError
from llmwire.core.logger import LoggerService
from .accumulator import StreamAccumulator
from .base_mapper import BaseMapper
from .envelope import Err

R = TypeVar("R", bound=BaseModel)
E = TypeVar("E", bound=BaseModel)


class SessionState(str, Enum):
    """Lifecycle of a streaming session."""

    OPEN = "open"
    ACCUMULATING = "accumulating"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


TERMINAL_STATES = frozenset(
    {SessionState.COMPLETED, SessionState.FAILED, SessionState.CANCELLED}
)


class StreamSession(Generic[E, R]):
    """Single-pass consumer of a provider event stream.

    Iterating the session yields each decoded event after it has been
    folded into the accumulator. Lines are read and processed one at a
    time, in arrival order. The finished response is available from
    ``collect()`` once the provider ends the stream; a failed session never
    hands out a partial response.

    Usage::

        async with await client.stream_completion(request) as session:
            async for event in session:
                ...
            response = session.result
    """

    def __init__(
        self,
        response: httpx.Response,
        mapper: BaseMapper[R, E],
        accumulator: StreamAccumulator[E, R],
        logger: LoggerService,
        request_id: str,
    ) -> None:
        """Initialize session over an open streaming response.

        Args:
            response: Open response, its body not yet read
            mapper: Mapper of the provider that sent the stream
            accumulator: Empty accumulator owned by this session
            logger: Logger service instance
            request_id: Request ID for log correlation
        """
        self.state = SessionState.OPEN
        self.request_id = request_id
        self.logger = logger.get_logger(__name__)
        self._response = response
        self._mapper = mapper
        self._accumulator = accumulator
        self._payloads: AsyncIterator[str] = self._read_events()
        self._result: Optional[R] = None
        self._error: Optional[LLMWireError] = None

    @property
    def events_processed(self) -> int:
        return self._accumulator.events_folded

    @property
    def result(self) -> R:
        """Finished response.

        Raises:
            LLMWireError: The error that failed the session
            StreamError: If the session was cancelled or is not finished
        """
        if self.state == SessionState.FAILED and self._error is not None:
            raise self._error
        if self.state == SessionState.CANCELLED:
            raise StreamError(
                "Stream was cancelled", events_processed=self.events_processed
            )
        if self._result is None:
            raise StreamError(
                "Stream has not completed", events_processed=self.events_processed
            )
        return self._result

    def __aiter__(self) -> "StreamSession[E, R]":
        return self

    async def __anext__(self) -> E:
        while True:
            if self.state == SessionState.FAILED and self._error is not None:
                raise self._error
            if self.state in TERMINAL_STATES:
                raise StopAsyncIteration

            try:
                payload = await self._payloads.__anext__()
            except StopAsyncIteration:
                # Connection closed without error, unless cancel closed it
                if self.state != SessionState.CANCELLED:
                    await self._complete("connection closed")
                raise
            except (httpx.HTTPError, httpx.StreamError) as e:
                if self.state == SessionState.CANCELLED:
                    raise StopAsyncIteration
                raise await self._fail(
                    StreamError(
                        f"Stream interrupted: {e}",
                        events_processed=self.events_processed,
                        cause="transport",
                    )
                ) from e

            # A cancel issued while waiting for the event discards it
            if self.state in TERMINAL_STATES:
                continue

            try:
                data = self._mapper.parse_sse_data(payload)
                if data is None:
                    continue
                if data.get("event") == "done":
                    await self._complete("done marker")
                    raise StopAsyncIteration
                envelope = self._mapper.map_provider_stream_event(data)
            except DecodeError as e:
                raise await self._fail(
                    StreamError(
                        f"Failed to decode stream event: {e.message}",
                        events_processed=self.events_processed,
                        cause="decode",
                    )
                ) from e

            if isinstance(envelope, Err):
                raise await self._fail(envelope.error.to_exception())

            event = envelope.unwrap()
            self._accumulator.add(event)
            self.state = SessionState.ACCUMULATING
            if self._mapper.is_terminal_event(event):
                await self._complete("terminal event")
            return event

    async def collect(self) -> R:
        """Drain the remaining events and return the finished response."""
        async for _ in self:
            pass
        return self.result

    async def cancel(self) -> None:
        """Close the connection; buffered events are discarded unfolded."""
        if self.state in TERMINAL_STATES:
            return
        self.state = SessionState.CANCELLED
        await self._response.aclose()
        self.logger.info(
            "Stream cancelled",
            extra={
                "request_id": self.request_id,
                "events_processed": self.events_processed,
            },
        )

    async def __aenter__(self) -> "StreamSession[E, R]":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        if self.state in TERMINAL_STATES:
            await self._response.aclose()
        else:
            await self.cancel()

    async def _read_events(self) -> AsyncIterator[str]:
        """Yield the data of each SSE event, in arrival order.

        An event may spread its data over several ``data:`` lines; they are
        joined with ``\\n`` and dispatched at the blank line ending the event,
        or when the connection closes.
        """
        data: List[str] = []
        async for line in self._response.aiter_lines():
            self.logger.debug(
                "Stream line received",
                extra={"request_id": self.request_id, "line": line},
            )
            if not line.strip():
                if data:
                    yield "\n".join(data)
                    data = []
                continue
            payload = self._mapper.sse_data(line)
            if payload is not None:
                data.append(payload)
        if data:
            yield "\n".join(data)

    async def _complete(self, reason: str) -> None:
        if self.state in TERMINAL_STATES:
            return
        await self._response.aclose()
        try:
            self._result = self._accumulator.finalize()
        except StreamError as e:
            e.events_processed = self.events_processed
            raise await self._fail(e)
        self.state = SessionState.COMPLETED
        self.logger.info(
            "Stream completed",
            extra={
                "request_id": self.request_id,
                "reason": reason,
                "events_processed": self.events_processed,
            },
        )

    async def _fail(self, error: LLMWireError) -> LLMWireError:
        """Move to FAILED and return the error for the caller to raise."""
        self.state = SessionState.FAILED
        self._error = error
        await self._response.aclose()
        self.logger.error(
            "Stream failed",
            extra={
                "request_id": self.request_id,
                "error": error.message,
                "error_type": type(error).__name__,
                "events_processed": self.events_processed,
            },
        )
        return error
