"""OpenAI-compatible request and response mappers."""
from typing import Any, Dict

from llmwire.core.logger import LoggerService
from llmwire.core.settings import Settings
from ..base_mapper import BaseMapper
from ..models import CompletionRequest, Message
from .accumulator import OpenAIAccumulator
from .models import ChatCompletion, ChatCompletionChunk

# Request fields that never go on the wire as-is
EXCLUDED_FIELDS = {"model", "system", "messages", "credentials"}

# List fields omitted when empty
OPTIONAL_LIST_FIELDS = ("stop", "functions", "tools")


class OpenAIMapper(BaseMapper[ChatCompletion, ChatCompletionChunk]):
    """Mapper for the chat completions protocol."""

    route = "chat/completions"
    response_model = ChatCompletion
    stream_event_model = ChatCompletionChunk

    def __init__(self, settings: Settings, logger: LoggerService) -> None:
        super().__init__(settings=settings, logger=logger)

    def map_to_provider_request(
        self, request: CompletionRequest, stream: bool = False
    ) -> Dict[str, Any]:
        """Map request to a chat completions body.

        The system prompt becomes a leading system message; unset
        parameters are left out.

        Args:
            request: Provider-agnostic request
            stream: Whether to ask for a streamed response

        Returns:
            Chat completions request body
        """
        messages = [message.to_payload() for message in request.messages]
        if request.system is not None:
            messages.insert(0, Message.system(request.system).to_payload())

        params = request.model_dump(
            mode="json", exclude_none=True, exclude=EXCLUDED_FIELDS
        )
        for key in OPTIONAL_LIST_FIELDS:
            if not params.get(key):
                params.pop(key, None)

        payload: Dict[str, Any] = {"model": request.model, "messages": messages}
        payload.update(params)
        if stream:
            payload["stream"] = True

        self.logger.debug(
            "Mapped request to chat completions format",
            extra={
                "model": request.model,
                "message_count": len(messages),
                "has_tools": bool(request.tools),
                "stream": stream,
            },
        )
        return payload

    def create_accumulator(self) -> OpenAIAccumulator:
        return OpenAIAccumulator()
