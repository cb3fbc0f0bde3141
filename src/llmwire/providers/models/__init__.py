"""Provider models package."""

from .api import (
    ConfigurationError,
    DecodeError,
    ErrorPayload,
    LLMWireError,
    ProviderError,
    StreamError,
    TransportError,
)
from .base import (
    CompletionRequest,
    FunctionCall,
    FunctionCallDelta,
    FunctionDefinition,
    Message,
    MessageDelta,
    ResponseFormat,
    Role,
    Tool,
    ToolCall,
    ToolCallDelta,
    ToolChoice,
    ToolChoiceFunction,
    ToolChoiceObject,
)
from .model import ProviderModel

__all__ = [
    "CompletionRequest",
    "ConfigurationError",
    "DecodeError",
    "ErrorPayload",
    "FunctionCall",
    "FunctionCallDelta",
    "FunctionDefinition",
    "LLMWireError",
    "Message",
    "MessageDelta",
    "ProviderError",
    "ProviderModel",
    "ResponseFormat",
    "Role",
    "StreamError",
    "Tool",
    "ToolCall",
    "ToolCallDelta",
    "ToolChoice",
    "ToolChoiceFunction",
    "ToolChoiceObject",
    "TransportError",
]
