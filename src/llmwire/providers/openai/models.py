"""OpenAI-compatible chat completion wire models."""
from typing import List, Optional

from pydantic import BaseModel, Field

from ..models import Message, MessageDelta


class Usage(BaseModel):
    """Token accounting, reported as sent by the provider."""

    prompt_tokens: int = Field(description="Tokens in the prompt")
    completion_tokens: int = Field(description="Tokens in the completion")
    total_tokens: int = Field(description="Prompt plus completion tokens")


class ChatCompletionChoice(BaseModel):
    """One generated completion."""

    index: int = Field(0, description="Index of this choice")
    message: Message = Field(description="The generated message")
    finish_reason: Optional[str] = Field(
        None, description="Why the model stopped generating"
    )


class ChatCompletion(BaseModel):
    """Full chat completion response."""

    id: str = Field(..., description="Unique identifier for this completion")
    object: str = Field("chat.completion", description="Object type")
    created: int = Field(0, description="Creation time as a unix timestamp")
    model: str = Field(..., description="Model that produced the completion")
    choices: List[ChatCompletionChoice] = Field(
        ..., description="The list of generated completions"
    )
    usage: Optional[Usage] = Field(None, description="Token usage")

    @property
    def text(self) -> Optional[str]:
        """Content of the first choice."""
        if not self.choices:
            return None
        return self.choices[0].message.content


class ChunkChoice(BaseModel):
    """Streaming choice carrying a message delta."""

    index: int = Field(0, description="Index of the choice this delta extends")
    delta: MessageDelta = Field(
        default_factory=MessageDelta, description="Message fragment"
    )
    finish_reason: Optional[str] = Field(
        None, description="Set on the last chunk of the choice"
    )


class ChatCompletionChunk(BaseModel):
    """Streaming chat completion chunk."""

    id: str = Field(..., description="Completion identifier, same on every chunk")
    object: Optional[str] = Field(None, description="Object type")
    created: Optional[int] = Field(None, description="Creation time")
    model: Optional[str] = Field(None, description="Model producing the stream")
    choices: List[ChunkChoice] = Field(
        default_factory=list,
        description="Deltas in this chunk, empty on a usage-only chunk",
    )
    usage: Optional[Usage] = Field(None, description="Usage, on the final chunk")


class ModelData(BaseModel):
    """Entry of the models list."""

    id: str
    object: str = "model"
    created: Optional[int] = None
    owned_by: Optional[str] = None


class ModelList(BaseModel):
    """Response of ``GET models``."""

    object: str = "list"
    data: List[ModelData]
