"""Base provider interface."""
from abc import ABC, abstractmethod
from typing import Any, List, Union

from llmwire.core.credentials import ApiProvider, Credentials
from .anthropic.models import AnthropicChatCompletion
from .models import CompletionRequest, ProviderModel
from .openai.models import ChatCompletion
from .streaming import StreamSession

CompletionResponse = Union[ChatCompletion, AnthropicChatCompletion]


class Provider(ABC):
    """Base class for all providers.

    This class defines the contract that all providers must implement.
    Each provider is responsible for:
    - Creating completions (single response and streaming)
    - Listing models
    - Provider-specific request mapping
    """

    def __init__(self, provider: ApiProvider) -> None:
        """Initialize provider.

        Args:
            provider: Provider protocol this instance speaks
        """
        self._provider = provider

    @property
    def provider(self) -> ApiProvider:
        return self._provider

    @abstractmethod
    async def create_completion(
        self, request: CompletionRequest, credentials: Credentials
    ) -> CompletionResponse:
        """Create a completion and wait for the whole response.

        Args:
            request: Provider-agnostic request
            credentials: Resolved credentials for this call

        Returns:
            Provider response

        Raises:
            TransportError: On connection failure
            DecodeError: If the body matches neither shape
            ProviderError: If the provider returned an error envelope
        """
        raise NotImplementedError

    @abstractmethod
    async def stream_completion(
        self, request: CompletionRequest, credentials: Credentials
    ) -> StreamSession[Any, Any]:
        """Open a streamed completion.

        Args:
            request: Provider-agnostic request
            credentials: Resolved credentials for this call

        Returns:
            Session over the open stream

        Raises:
            TransportError: On connection failure
            DecodeError: If an error status carries an undecodable body
            ProviderError: If the stream could not be opened
        """
        raise NotImplementedError

    @abstractmethod
    async def get_models(self, credentials: Credentials) -> List[ProviderModel]:
        """Get list of available models.

        Returns:
            List of available provider models

        Raises:
            ProviderError: If models retrieval fails
        """
        raise NotImplementedError
