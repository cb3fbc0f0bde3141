"""Message models for chat completion functionality."""
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from .tools import FunctionCall, FunctionCallDelta, ToolCall, ToolCallDelta


class Role(str, Enum):
    """Role of a message's author."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    FUNCTION = "function"
    TOOL = "tool"


class Message(BaseModel):
    """Provider-agnostic conversation turn."""

    role: Role = Field(description="The role of the message's author")
    content: Optional[str] = Field(
        None,
        description=(
            "The contents of the message. Optional for assistant messages "
            "with function or tool calls"
        ),
    )
    name: Optional[str] = Field(
        None,
        description=(
            "An optional name for the participant. Provides the model information "
            "to differentiate between participants of the same role"
        ),
    )
    function_call: Optional[FunctionCall] = Field(
        None, description="The function the assistant called"
    )
    tool_call_id: Optional[str] = Field(
        None,
        description="Tool call that this message is responding to. Tool role only",
    )
    tool_calls: List[ToolCall] = Field(
        default_factory=list,
        description="Tool calls the assistant requests. Assistant role only",
    )

    @field_validator("tool_calls", mode="before")
    @classmethod
    def null_tool_calls(cls, v: Any) -> Any:
        """Treat an explicit null as no tool calls."""
        return [] if v is None else v

    @model_validator(mode="after")
    def validate_role_fields(self) -> "Message":
        """Validate that tool fields match the role."""
        if self.tool_call_id is not None and self.role != Role.TOOL:
            raise ValueError("tool_call_id is only allowed on tool messages")
        if self.tool_calls and self.role != Role.ASSISTANT:
            raise ValueError("tool_calls are only allowed on assistant messages")
        return self

    @classmethod
    def system(cls, content: str) -> "Message":
        return cls(role=Role.SYSTEM, content=content)

    @classmethod
    def user(cls, content: str, name: Optional[str] = None) -> "Message":
        return cls(role=Role.USER, content=content, name=name)

    @classmethod
    def assistant(
        cls, content: Optional[str] = None, tool_calls: Optional[List[ToolCall]] = None
    ) -> "Message":
        return cls(role=Role.ASSISTANT, content=content, tool_calls=tool_calls or [])

    @classmethod
    def tool(cls, content: str, tool_call_id: str) -> "Message":
        return cls(role=Role.TOOL, content=content, tool_call_id=tool_call_id)

    def to_payload(self) -> Dict[str, Any]:
        """Dump the message for the wire, omitting unset fields."""
        payload = self.model_dump(mode="json", exclude_none=True)
        if not payload.get("tool_calls"):
            payload.pop("tool_calls", None)
        return payload


class MessageDelta(BaseModel):
    """Partial message received while streaming.

    Every field is optional; a chunk carries only what changed.
    """

    role: Optional[Role] = Field(None, description="Role, sent on the first chunk")
    content: Optional[str] = Field(None, description="Fragment of the content")
    name: Optional[str] = Field(None, description="Participant name")
    function_call: Optional[FunctionCallDelta] = Field(
        None, description="Partial function call"
    )
    tool_call_id: Optional[str] = Field(None, description="Tool call being answered")
    tool_calls: List[ToolCallDelta] = Field(
        default_factory=list, description="Partial tool calls"
    )

    @field_validator("tool_calls", mode="before")
    @classmethod
    def null_tool_calls(cls, v: Any) -> Any:
        """Treat an explicit null as no tool calls."""
        return [] if v is None else v
