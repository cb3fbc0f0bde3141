"""Anthropic Messages API wire models."""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from ..models import ErrorPayload


class AnthropicUsage(BaseModel):
    """Token accounting, reported as sent by the provider.

    Streaming events carry partial usage (``message_delta`` only reports
    output tokens), so every counter is optional.
    """

    input_tokens: Optional[int] = Field(None, description="Prompt tokens")
    output_tokens: Optional[int] = Field(None, description="Generated tokens")
    cache_creation_input_tokens: Optional[int] = Field(
        None, description="Tokens written to the prompt cache"
    )
    cache_read_input_tokens: Optional[int] = Field(
        None, description="Tokens read from the prompt cache"
    )

    def merged(self, update: "AnthropicUsage") -> "AnthropicUsage":
        """Return usage with every counter present in update overwritten."""
        return self.model_copy(update=update.model_dump(exclude_none=True))


class ContentBlock(BaseModel):
    """Typed content block of a message."""

    type: str = Field(description="Block type, ``text`` or ``tool_use``")
    text: Optional[str] = Field(None, description="Text of a text block")
    id: Optional[str] = Field(None, description="Tool use ID")
    name: Optional[str] = Field(None, description="Tool name")
    input: Optional[Dict[str, Any]] = Field(None, description="Tool arguments")


class AnthropicChatCompletion(BaseModel):
    """Full Messages API response."""

    id: str = Field(..., description="Unique message identifier")
    type: str = Field(..., description="Object type, always ``message``")
    role: str = Field(..., description="Author role, always ``assistant``")
    model: str = Field(..., description="Model that produced the message")
    content: List[ContentBlock] = Field(..., description="Content blocks")
    stop_reason: Optional[str] = Field(None, description="Why generation stopped")
    stop_sequence: Optional[str] = Field(
        None, description="Stop sequence that was hit, if any"
    )
    usage: Optional[AnthropicUsage] = Field(None, description="Token usage")

    @property
    def text(self) -> str:
        """Concatenated text of all text blocks."""
        return "".join(block.text or "" for block in self.content if block.type == "text")


class ContentDelta(BaseModel):
    """Delta payload of ``content_block_delta`` and ``message_delta`` events."""

    type: Optional[str] = Field(
        None, description="``text_delta`` or ``input_json_delta``"
    )
    text: Optional[str] = Field(None, description="Text fragment")
    partial_json: Optional[str] = Field(None, description="Tool input fragment")
    stop_reason: Optional[str] = Field(None, description="Stop reason")
    stop_sequence: Optional[str] = Field(None, description="Stop sequence hit")


class MessageStart(BaseModel):
    """Message skeleton sent by ``message_start``."""

    id: str
    type: str = "message"
    role: str = "assistant"
    model: str
    content: List[ContentBlock] = Field(default_factory=list)
    stop_reason: Optional[str] = None
    stop_sequence: Optional[str] = None
    usage: Optional[AnthropicUsage] = None


class AnthropicStreamEvent(BaseModel):
    """One server-sent event of a Messages stream."""

    type: str = Field(description="Event type")
    index: Optional[int] = Field(None, description="Content block index")
    message: Optional[MessageStart] = Field(None, description="Message skeleton")
    content_block: Optional[ContentBlock] = Field(None, description="Started block")
    delta: Optional[ContentDelta] = Field(None, description="Fragment")
    usage: Optional[AnthropicUsage] = Field(None, description="Usage update")
    error: Optional[ErrorPayload] = Field(None, description="Error event payload")


class ModelData(BaseModel):
    """Entry of the models list."""

    id: str
    type: str = "model"
    display_name: Optional[str] = None
    created_at: Optional[str] = None


class ModelList(BaseModel):
    """Response of ``GET models``."""

    data: List[ModelData]
    has_more: bool = False
    first_id: Optional[str] = None
    last_id: Optional[str] = None
