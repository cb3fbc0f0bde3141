"""Provider-agnostic completion request."""
from typing import Any, Dict, List, Optional, Sequence, Union

from pydantic import BaseModel, Field, field_validator

from llmwire.core.credentials import Credentials
from .messages import Message
from .tools import FunctionDefinition, ResponseFormat, Tool, ToolChoice


class CompletionRequest(BaseModel):
    """Conversation plus sampling parameters, independent of wire shape."""

    model: str = Field(..., description="ID of the model to use")
    system: Optional[str] = Field(
        None, description="System prompt, kept apart from the message list"
    )
    messages: List[Message] = Field(
        ...,
        description="A list of messages comprising the conversation so far",
    )
    temperature: Optional[float] = Field(
        None,
        description="Sampling temperature, higher values make output more random",
    )
    top_p: Optional[float] = Field(
        None,
        description=(
            "Nucleus sampling parameter, sets probability mass of tokens to consider"
        ),
    )
    n: Optional[int] = Field(
        None, description="How many completion choices to generate"
    )
    stop: List[str] = Field(
        default_factory=list,
        description="Up to 4 sequences where the API will stop generating",
    )
    seed: Optional[int] = Field(
        None, description="Seed for best-effort deterministic sampling"
    )
    max_tokens: Optional[int] = Field(
        None, description="The maximum number of tokens to generate"
    )
    presence_penalty: Optional[float] = Field(
        None,
        description=(
            "Positive values penalize new tokens based on whether they appear "
            "in the text so far"
        ),
    )
    frequency_penalty: Optional[float] = Field(
        None,
        description=(
            "Positive values penalize new tokens based on their existing frequency "
            "in the text so far"
        ),
    )
    logit_bias: Optional[Dict[str, float]] = Field(
        None,
        description="Modify the likelihood of specified tokens appearing",
    )
    user: Optional[str] = Field(
        None, description="A unique identifier representing your end-user"
    )
    functions: List[FunctionDefinition] = Field(
        default_factory=list, description="Functions the model may call"
    )
    function_call: Optional[Union[str, Dict[str, Any]]] = Field(
        None, description="Controls how the model calls functions"
    )
    tools: List[Tool] = Field(
        default_factory=list, description="Tools the model may call"
    )
    tool_choice: Optional[ToolChoice] = Field(
        None, description="Controls which tool is called by the model"
    )
    response_format: Optional[ResponseFormat] = Field(
        None, description="Format the model must produce"
    )
    credentials: Optional[Credentials] = Field(
        None,
        exclude=True,
        description="Credentials for this call only, overriding the default",
    )

    @field_validator("stop", mode="before")
    @classmethod
    def normalize_stop(cls, v: Any) -> Any:
        """Accept a single stop sequence as well as a list."""
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        return v

    @classmethod
    def builder(
        cls,
        model: str,
        messages: Sequence[Message],
        system: Optional[str] = None,
        **params: Any,
    ) -> "CompletionRequest":
        """Create a request from a model, a conversation and optional parameters.

        Args:
            model: Model ID, e.g. ``gpt-4o`` or ``claude-3-5-sonnet-20241022``
            messages: Conversation so far
            system: Optional system prompt
            **params: Any other request field

        Returns:
            Completion request
        """
        return cls(model=model, messages=list(messages), system=system, **params)
