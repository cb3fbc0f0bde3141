"""Base models package."""

from .messages import Message, MessageDelta, Role
from .request import CompletionRequest
from .tools import (
    FunctionCall,
    FunctionCallDelta,
    FunctionDefinition,
    ResponseFormat,
    Tool,
    ToolCall,
    ToolCallDelta,
    ToolChoice,
    ToolChoiceFunction,
    ToolChoiceObject,
    ToolChoiceType,
)

__all__ = [
    "CompletionRequest",
    "FunctionCall",
    "FunctionCallDelta",
    "FunctionDefinition",
    "Message",
    "MessageDelta",
    "ResponseFormat",
    "Role",
    "Tool",
    "ToolCall",
    "ToolCallDelta",
    "ToolChoice",
    "ToolChoiceFunction",
    "ToolChoiceObject",
    "ToolChoiceType",
]
