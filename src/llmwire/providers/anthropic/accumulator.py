"""Folds Anthropic Messages stream events into a message."""
import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from llmwire.core.errors import StreamError
from ..accumulator import StreamAccumulator, first_non_empty
from .models import (
    AnthropicChatCompletion,
    AnthropicStreamEvent,
    AnthropicUsage,
    ContentBlock,
)

# Block type implied by a delta that arrives before its content_block_start
DELTA_BLOCK_TYPES = {"text_delta": "text", "input_json_delta": "tool_use"}


@dataclass
class _BlockBuilder:
    type: str
    text: List[str] = field(default_factory=list)
    id: Optional[str] = None
    name: Optional[str] = None
    input: Optional[Dict[str, Any]] = None
    partial_json: List[str] = field(default_factory=list)

    def build(self) -> ContentBlock:
        if self.type != "tool_use":
            return ContentBlock(type=self.type, text="".join(self.text))

        tool_input = self.input
        if self.partial_json:
            raw = "".join(self.partial_json)
            try:
                tool_input = json.loads(raw)
            except json.JSONDecodeError as e:
                raise StreamError(
                    f"Invalid tool input for block {self.id}: {e}", cause="decode"
                )
        return ContentBlock(
            type=self.type, id=self.id, name=self.name, input=tool_input or {}
        )


class AnthropicAccumulator(
    StreamAccumulator[AnthropicStreamEvent, AnthropicChatCompletion]
):
    """Accumulator for Messages API streams.

    ``message_start`` seeds the message, ``content_block_*`` events build
    the content blocks by index and ``message_delta`` carries the stop
    reason and the final usage.
    """

    def __init__(self) -> None:
        super().__init__()
        self.id: Optional[str] = None
        self.type = "message"
        self.role: Optional[str] = None
        self.model: Optional[str] = None
        self.stop_reason: Optional[str] = None
        self.stop_sequence: Optional[str] = None
        self.usage: Optional[AnthropicUsage] = None
        self.blocks: Dict[int, _BlockBuilder] = {}

    def _merge_usage(self, usage: Optional[AnthropicUsage]) -> None:
        if usage is None:
            return
        self.usage = self.usage.merged(usage) if self.usage else usage

    def fold(self, event: AnthropicStreamEvent) -> None:
        index = event.index or 0

        if event.type == "message_start" and event.message is not None:
            self.id = first_non_empty(self.id, event.message.id)
            self.role = first_non_empty(self.role, event.message.role)
            self.model = first_non_empty(self.model, event.message.model)
            self._merge_usage(event.message.usage)

        elif event.type == "content_block_start" and event.content_block is not None:
            start = event.content_block
            block = self.blocks.setdefault(index, _BlockBuilder(type=start.type))
            block.id = first_non_empty(block.id, start.id)
            block.name = first_non_empty(block.name, start.name)
            if block.input is None:
                block.input = start.input
            if start.text:
                block.text.append(start.text)

        elif event.type == "content_block_delta" and event.delta is not None:
            delta = event.delta
            block = self.blocks.setdefault(
                index,
                _BlockBuilder(type=DELTA_BLOCK_TYPES.get(delta.type or "", "text")),
            )
            if delta.text:
                block.text.append(delta.text)
            if delta.partial_json:
                block.partial_json.append(delta.partial_json)

        elif event.type == "message_delta":
            if event.delta is not None:
                if event.delta.stop_reason is not None:
                    self.stop_reason = event.delta.stop_reason
                if event.delta.stop_sequence is not None:
                    self.stop_sequence = event.delta.stop_sequence
            self._merge_usage(event.usage)

        # ping, content_block_stop and message_stop carry nothing to fold

    def finalize(self) -> AnthropicChatCompletion:
        if not self.events_folded:
            raise StreamError("Stream ended before any event was received")
        return AnthropicChatCompletion(
            id=self.id or "",
            type=self.type,
            role=self.role or "assistant",
            model=self.model or "",
            content=[self.blocks[i].build() for i in sorted(self.blocks)],
            stop_reason=self.stop_reason,
            stop_sequence=self.stop_sequence,
            usage=self.usage,
        )
