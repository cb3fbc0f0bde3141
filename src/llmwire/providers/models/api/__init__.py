"""Provider API models package.

This package contains the error payload shared by both protocols and
re-exports the exception classes raised while talking to providers.
"""

from llmwire.core.errors import (
    ConfigurationError,
    DecodeError,
    LLMWireError,
    ProviderError,
    StreamError,
    TransportError,
)
from .errors import ErrorPayload

__all__ = [
    "ConfigurationError",
    "DecodeError",
    "ErrorPayload",
    "LLMWireError",
    "ProviderError",
    "StreamError",
    "TransportError",
]
