"""Base mapper for provider request/response mapping."""
import json
from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, Optional, Type, TypeVar, cast

from pydantic import BaseModel

from llmwire.core.errors import DecodeError
from llmwire.core.logger import LoggerService
from llmwire.core.settings import Settings
from .accumulator import StreamAccumulator
from .envelope import Envelope, RawBody, decode_envelope
from .models import CompletionRequest

R = TypeVar("R", bound=BaseModel)
E = TypeVar("E", bound=BaseModel)

DONE_EVENT: Dict[str, Any] = {"event": "done"}


class BaseMapper(ABC, Generic[R, E]):
    """Base class for provider mappers.

    A mapper owns everything that differs between wire protocols: the
    route, the request body, the response and stream event shapes and the
    accumulator that folds events back into a response.
    """

    route: str
    response_model: Type[R]
    stream_event_model: Type[E]

    def __init__(self, settings: Settings, logger: LoggerService) -> None:
        """Initialize mapper.

        Args:
            settings: Settings instance
            logger: Logger service instance
        """
        self.settings = settings
        self.logger = logger.get_logger(__name__)

    @abstractmethod
    def map_to_provider_request(
        self, request: CompletionRequest, stream: bool = False
    ) -> Dict[str, Any]:
        """Map provider-agnostic request to provider-specific format.

        Args:
            request: Provider-agnostic request
            stream: Whether to ask for a streamed response

        Returns:
            Provider-specific request dictionary
        """
        pass

    @abstractmethod
    def create_accumulator(self) -> StreamAccumulator[E, R]:
        """Create an empty accumulator for one stream."""
        pass

    def map_provider_response(
        self, raw: RawBody, status_code: Optional[int] = None
    ) -> Envelope[R]:
        """Decode a full response body."""
        return decode_envelope(raw, self.response_model, status_code)

    def map_provider_stream_event(self, data: Dict[str, Any]) -> Envelope[E]:
        """Decode one parsed stream event."""
        return decode_envelope(data, self.stream_event_model)

    def is_terminal_event(self, event: E) -> bool:
        """Check whether event ends the stream."""
        return False

    def sse_data(self, line: str) -> Optional[str]:
        """Return the payload of an SSE ``data:`` line, None for other lines.

        ``event:``, ``id:``, ``retry:`` and comment lines carry nothing the
        mapper needs.
        """
        line = line.rstrip("\r\n")
        if not line.startswith("data:"):
            return None
        payload = line[5:]
        return payload[1:] if payload.startswith(" ") else payload

    def parse_sse_data(self, payload: str) -> Optional[Dict[str, Any]]:
        """Parse the data of one SSE event.

        Args:
            payload: Data lines of the event joined with ``\\n``

        Returns:
            Parsed event data, ``{"event": "done"}`` for ``[DONE]``, or None
            for an empty payload

        Raises:
            DecodeError: If the payload does not hold a JSON object
        """
        payload = payload.strip()
        if not payload:
            return None
        if payload == "[DONE]":
            return dict(DONE_EVENT)

        try:
            data = json.loads(payload)
        except json.JSONDecodeError as e:
            raise DecodeError(str(e), body=payload)
        if not isinstance(data, dict):
            raise DecodeError("Stream event is not a JSON object", body=payload)
        return cast(Dict[str, Any], data)
