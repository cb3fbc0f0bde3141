"""Anthropic Messages API request and response mappers."""
import json
from typing import Any, Dict, List, Optional

from llmwire.core.logger import LoggerService
from llmwire.core.settings import Settings
from ..base_mapper import BaseMapper
from ..models import CompletionRequest, Message, Role, ToolChoice
from .accumulator import AnthropicAccumulator
from .models import AnthropicChatCompletion, AnthropicStreamEvent

# Sampling parameters the Messages API has no counterpart for
UNSUPPORTED_FIELDS = (
    "n",
    "seed",
    "presence_penalty",
    "frequency_penalty",
    "logit_bias",
    "functions",
    "function_call",
    "response_format",
)

TOOL_CHOICES = {"auto": "auto", "required": "any", "none": "none"}


def map_tool_choice(choice: ToolChoice) -> Dict[str, Any]:
    """Map an OpenAI-style tool choice to a Messages API one."""
    if isinstance(choice, str):
        return {"type": TOOL_CHOICES[choice]}
    return {"type": "tool", "name": choice.function.name}


def _parse_arguments(arguments: str) -> Dict[str, Any]:
    if not arguments:
        return {}
    try:
        parsed = json.loads(arguments)
    except json.JSONDecodeError:
        return {"arguments": arguments}
    return parsed if isinstance(parsed, dict) else {"arguments": parsed}


class AnthropicMapper(BaseMapper[AnthropicChatCompletion, AnthropicStreamEvent]):
    """Mapper for the Messages protocol."""

    route = "messages"
    response_model = AnthropicChatCompletion
    stream_event_model = AnthropicStreamEvent

    def __init__(self, settings: Settings, logger: LoggerService) -> None:
        super().__init__(settings=settings, logger=logger)

    def map_message(self, message: Message) -> Dict[str, Any]:
        """Map a non-system message to a Messages API message.

        Tool results travel as ``tool_result`` blocks of a user turn and
        assistant tool calls as ``tool_use`` blocks.
        """
        if message.role == Role.TOOL:
            return {
                "role": "user",
                "content": [
                    {
                        "type": "tool_result",
                        "tool_use_id": message.tool_call_id,
                        "content": message.content or "",
                    }
                ],
            }

        role = "assistant" if message.role == Role.ASSISTANT else "user"
        if not message.tool_calls:
            return {"role": role, "content": message.content or ""}

        content: List[Dict[str, Any]] = []
        if message.content:
            content.append({"type": "text", "text": message.content})
        for tool_call in message.tool_calls:
            content.append(
                {
                    "type": "tool_use",
                    "id": tool_call.id,
                    "name": tool_call.function.name,
                    "input": _parse_arguments(tool_call.function.arguments),
                }
            )
        return {"role": role, "content": content}

    def map_to_provider_request(
        self, request: CompletionRequest, stream: bool = False
    ) -> Dict[str, Any]:
        """Map request to a Messages API body.

        The system prompt and any system-role messages are joined into the
        top-level ``system`` field. ``max_tokens`` is required by the API and
        falls back to ``ANTHROPIC_DEFAULT_MAX_TOKENS``.

        Args:
            request: Provider-agnostic request
            stream: Whether to ask for a streamed response

        Returns:
            Messages API request body
        """
        system_parts: List[str] = [request.system] if request.system else []
        messages: List[Dict[str, Any]] = []
        for message in request.messages:
            if message.role == Role.SYSTEM:
                if message.content:
                    system_parts.append(message.content)
                continue
            messages.append(self.map_message(message))

        payload: Dict[str, Any] = {
            "model": request.model,
            "messages": messages,
            "max_tokens": request.max_tokens
            or self.settings.ANTHROPIC_DEFAULT_MAX_TOKENS,
        }
        system: Optional[str] = "\n\n".join(system_parts) if system_parts else None
        if system:
            payload["system"] = system
        if request.temperature is not None:
            payload["temperature"] = request.temperature
        if request.top_p is not None:
            payload["top_p"] = request.top_p
        if request.stop:
            payload["stop_sequences"] = list(request.stop)
        if request.user:
            payload["metadata"] = {"user_id": request.user}
        if request.tools:
            payload["tools"] = [
                {
                    "name": tool.function.name,
                    "description": tool.function.description or "",
                    "input_schema": tool.function.parameters
                    or {"type": "object", "properties": {}},
                }
                for tool in request.tools
            ]
        if request.tool_choice is not None:
            payload["tool_choice"] = map_tool_choice(request.tool_choice)
        if stream:
            payload["stream"] = True

        dropped: List[str] = [
            name for name in UNSUPPORTED_FIELDS if self._is_set(getattr(request, name))
        ]
        if dropped:
            self.logger.warning(
                "Dropping parameters unsupported by the Messages API",
                extra={"model": request.model, "fields": dropped},
            )
        self.logger.debug(
            "Mapped request to Messages API format",
            extra={
                "model": request.model,
                "message_count": len(messages),
                "has_system": system is not None,
                "stream": stream,
            },
        )
        return payload

    @staticmethod
    def _is_set(value: Any) -> bool:
        return value is not None and value != []

    def create_accumulator(self) -> AnthropicAccumulator:
        return AnthropicAccumulator()

    def is_terminal_event(self, event: AnthropicStreamEvent) -> bool:
        return event.type == "message_stop"
