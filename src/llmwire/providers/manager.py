"""Provider manager implementation."""
from typing import Any, Dict, List, Optional

from llmwire.core.credentials import ApiProvider, CredentialStore, Credentials
from llmwire.core.logger import LoggerService
from .base import CompletionResponse, Provider
from .factory import ProviderFactory
from .mapper_factory import MapperFactory
from .model_mapper_factory import ModelMapperFactory
from .models import CompletionRequest, ProviderModel
from .streaming import StreamSession


class ProviderManager:
    """Resolves credentials for a call and dispatches it to its provider.

    One provider instance is kept per protocol; all of them share one
    transport. Nothing about an individual call is stored here.
    """

    def __init__(
        self,
        logger: LoggerService,
        credential_store: CredentialStore,
        provider_factory: ProviderFactory,
        mapper_factory: MapperFactory,
        model_mapper_factory: ModelMapperFactory,
    ) -> None:
        """Initialize provider manager.

        Args:
            logger: Logger service instance for logging operations
            credential_store: Holder of the default credentials
            provider_factory: Factory for creating provider instances
            mapper_factory: Factory for creating provider-specific mappers
            model_mapper_factory: Factory for creating provider-specific model mappers
        """
        self.logger = logger.get_logger(__name__)
        self.credential_store = credential_store
        self.provider_factory = provider_factory
        self.mapper_factory = mapper_factory
        self.model_mapper_factory = model_mapper_factory
        self._providers: Dict[ApiProvider, Provider] = {}

    def get_provider(self, provider: ApiProvider) -> Provider:
        """Get the provider instance for a protocol, creating it on first use.

        Raises:
            ConfigurationError: If the protocol is not supported
        """
        if provider not in self._providers:
            self._providers[provider] = self.provider_factory.create(
                provider,
                self.mapper_factory.create(provider),
                self.model_mapper_factory.create(provider),
            )
        return self._providers[provider]

    def resolve_credentials(
        self,
        request: Optional[CompletionRequest] = None,
        credentials: Optional[Credentials] = None,
    ) -> Credentials:
        """Pick explicit credentials, then the request's own, then the default.

        Raises:
            ConfigurationError: If the default is needed and not configured
        """
        explicit = credentials
        if explicit is None and request is not None:
            explicit = request.credentials
        return self.credential_store.resolve(explicit)

    async def create_completion(
        self,
        request: CompletionRequest,
        credentials: Optional[Credentials] = None,
    ) -> CompletionResponse:
        """Create a completion with the provider the credentials select."""
        resolved = self.resolve_credentials(request, credentials)
        self.logger.info(
            "Dispatching completion",
            extra={"provider": resolved.provider.value, "model": request.model},
        )
        provider = self.get_provider(resolved.provider)
        return await provider.create_completion(request, resolved)

    async def stream_completion(
        self,
        request: CompletionRequest,
        credentials: Optional[Credentials] = None,
    ) -> StreamSession[Any, Any]:
        """Open a streamed completion with the provider the credentials select."""
        resolved = self.resolve_credentials(request, credentials)
        self.logger.info(
            "Dispatching streamed completion",
            extra={"provider": resolved.provider.value, "model": request.model},
        )
        provider = self.get_provider(resolved.provider)
        return await provider.stream_completion(request, resolved)

    async def get_models(
        self, credentials: Optional[Credentials] = None
    ) -> List[ProviderModel]:
        """List the models of the provider the credentials select."""
        resolved = self.resolve_credentials(credentials=credentials)
        provider = self.get_provider(resolved.provider)
        return await provider.get_models(resolved)
