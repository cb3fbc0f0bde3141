"""Provider factory implementation."""
from typing import Any, Dict, Tuple, Type

from llmwire.core.credentials import ApiProvider
from llmwire.core.errors import ConfigurationError
from llmwire.core.logger import LoggerService
from .anthropic.mapper import AnthropicMapper
from .anthropic.model_mapper import AnthropicModelMapper
from .base import Provider
from .base_mapper import BaseMapper
from .base_model_mapper import BaseModelMapper
from .chat import ChatProvider
from .openai.mapper import OpenAIMapper
from .openai.model_mapper import OpenAIModelMapper
from .transport import Transport

PROVIDERS: Dict[
    ApiProvider, Tuple[Type[ChatProvider], Type[BaseMapper[Any, Any]], Type[BaseModelMapper]]
] = {
    ApiProvider.OPENAI: (ChatProvider, OpenAIMapper, OpenAIModelMapper),
    ApiProvider.ANTHROPIC: (ChatProvider, AnthropicMapper, AnthropicModelMapper),
}


class ProviderFactory:
    """Factory for creating provider instances."""

    def __init__(self, logger: LoggerService, transport: Transport) -> None:
        """Initialize provider factory.

        Args:
            logger: Logger service instance
            transport: HTTP transport shared by every provider
        """
        self.transport = transport
        self.logger = logger.get_logger(__name__)
        self.instance_logger = logger

    def create(
        self,
        provider: ApiProvider,
        mapper: BaseMapper[Any, Any],
        model_mapper: BaseModelMapper,
    ) -> Provider:
        """Create provider instance.

        Args:
            provider: Provider protocol
            mapper: Provider-specific mapper instance
            model_mapper: Provider-specific model mapper instance

        Returns:
            Provider instance

        Raises:
            ConfigurationError: If provider is not supported or the mappers
                belong to another provider
        """
        self.logger.info(f"Creating new provider instance for: {provider.value}")

        if provider not in PROVIDERS:
            error_msg = f"Unsupported provider: {provider}"
            self.logger.error(error_msg)
            raise ConfigurationError(error_msg, field="provider")

        provider_class, mapper_class, model_mapper_class = PROVIDERS[provider]

        if not isinstance(mapper, mapper_class):
            error_msg = (
                f"Invalid mapper type for {provider.value} provider: {type(mapper)}"
            )
            self.logger.error(error_msg)
            raise ConfigurationError(error_msg, field="mapper")

        if not isinstance(model_mapper, model_mapper_class):
            error_msg = (
                f"Invalid model mapper type for {provider.value} "
                f"provider: {type(model_mapper)}"
            )
            self.logger.error(error_msg)
            raise ConfigurationError(error_msg, field="model_mapper")

        return provider_class(
            provider=provider,
            transport=self.transport,
            mapper=mapper,
            model_mapper=model_mapper,
            logger=self.instance_logger,
        )
