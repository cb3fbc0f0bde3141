"""Async client for OpenAI-compatible and Anthropic completion APIs.

Calls go through a module-level dependency container. Credentials come from
the call (``credentials=`` or ``CompletionRequest.credentials``) or, failing
that, from ``OPENAI_KEY`` / ``OPENAI_BASE_URL`` in the environment.
"""
from typing import Any, List, Optional

from llmwire.core import (
    DEFAULT_BASE_URL,
    ApiProvider,
    ConfigurationError,
    Credentials,
    DecodeError,
    LLMWireError,
    ProviderError,
    Settings,
    StreamError,
    TransportError,
)
from llmwire.di import Container, container
from llmwire.providers.anthropic.models import AnthropicChatCompletion
from llmwire.providers.base import CompletionResponse
from llmwire.providers.models import (
    CompletionRequest,
    FunctionCall,
    FunctionDefinition,
    Message,
    ProviderModel,
    Role,
    Tool,
    ToolCall,
)
from llmwire.providers.openai.models import ChatCompletion
from llmwire.providers.streaming import SessionState, StreamSession

__version__ = "0.1.0"


async def create_completion(
    request: CompletionRequest, credentials: Optional[Credentials] = None
) -> CompletionResponse:
    """Send request and return the whole response.

    Raises:
        ConfigurationError: If no credentials are given or configured
        TransportError: On connection failure
        DecodeError: If the body matches neither shape
        ProviderError: If the provider returned an error envelope
    """
    return await container.provider_manager().create_completion(request, credentials)


async def stream_completion(
    request: CompletionRequest, credentials: Optional[Credentials] = None
) -> StreamSession[Any, Any]:
    """Send request and return a session over the streamed response."""
    return await container.provider_manager().stream_completion(request, credentials)


async def list_models(credentials: Optional[Credentials] = None) -> List[ProviderModel]:
    """List the models available with the resolved credentials."""
    return await container.provider_manager().get_models(credentials)


def set_key(value: str) -> None:
    """Replace the API key of the default credentials.

    Deprecated: pass ``Credentials`` with the request instead.
    """
    container.credential_store().set_key(value)


def set_base_url(value: str) -> None:
    """Replace the base URL of the default credentials; empty is ignored.

    Deprecated: pass ``Credentials`` with the request instead.
    """
    container.credential_store().set_base_url(value)


async def aclose() -> None:
    """Close the shared HTTP client and drop the container's singletons."""
    await container.transport().aclose()
    container.reset_singletons()


__all__ = [
    "AnthropicChatCompletion",
    "ApiProvider",
    "ChatCompletion",
    "CompletionRequest",
    "CompletionResponse",
    "ConfigurationError",
    "Container",
    "Credentials",
    "DEFAULT_BASE_URL",
    "DecodeError",
    "FunctionCall",
    "FunctionDefinition",
    "LLMWireError",
    "Message",
    "ProviderError",
    "ProviderModel",
    "Role",
    "SessionState",
    "Settings",
    "StreamError",
    "StreamSession",
    "Tool",
    "ToolCall",
    "TransportError",
    "aclose",
    "create_completion",
    "list_models",
    "set_base_url",
    "set_key",
    "stream_completion",
]
