"""Provider model mapper factory."""
from typing import Dict, Type

from llmwire.core.credentials import ApiProvider
from llmwire.core.errors import ConfigurationError
from llmwire.core.logger import LoggerService
from .anthropic.model_mapper import AnthropicModelMapper
from .base_model_mapper import BaseModelMapper
from .openai.model_mapper import OpenAIModelMapper

MODEL_MAPPERS: Dict[ApiProvider, Type[BaseModelMapper]] = {
    ApiProvider.OPENAI: OpenAIModelMapper,
    ApiProvider.ANTHROPIC: AnthropicModelMapper,
}


class ModelMapperFactory:
    """Factory for creating provider-specific model mappers."""

    def __init__(self, logger: LoggerService) -> None:
        self.logger = logger.get_logger(__name__)
        self.instance_logger = logger

    def create(self, provider: ApiProvider) -> BaseModelMapper:
        """Create model mapper instance for provider.

        Raises:
            ConfigurationError: If provider is not supported
        """
        if provider not in MODEL_MAPPERS:
            error_msg = f"Unsupported provider model mapper: {provider}"
            self.logger.error(error_msg)
            raise ConfigurationError(error_msg, field="provider")

        return MODEL_MAPPERS[provider](provider=provider, logger=self.instance_logger)
