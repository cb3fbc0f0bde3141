"""Provider mapper factory."""
from typing import Any, Dict, Type

from llmwire.core.credentials import ApiProvider
from llmwire.core.errors import ConfigurationError
from llmwire.core.logger import LoggerService
from llmwire.core.settings import Settings
from .anthropic.mapper import AnthropicMapper
from .base_mapper import BaseMapper
from .openai.mapper import OpenAIMapper

MAPPERS: Dict[ApiProvider, Type[BaseMapper[Any, Any]]] = {
    ApiProvider.OPENAI: OpenAIMapper,
    ApiProvider.ANTHROPIC: AnthropicMapper,
}


class MapperFactory:
    """Factory for creating provider-specific mappers."""

    def __init__(self, settings: Settings, logger: LoggerService) -> None:
        """Initialize mapper factory.

        Args:
            settings: Settings instance
            logger: Logger service instance
        """
        self.settings = settings
        self.logger = logger.get_logger(__name__)
        self.instance_logger = logger

    def create(self, provider: ApiProvider) -> BaseMapper[Any, Any]:
        """Create mapper instance for provider.

        Raises:
            ConfigurationError: If provider is not supported
        """
        if provider not in MAPPERS:
            error_msg = f"Unsupported provider mapper: {provider}"
            self.logger.error(error_msg)
            raise ConfigurationError(error_msg, field="provider")

        self.logger.debug(f"Creating mapper instance for: {provider.value}")
        return MAPPERS[provider](settings=self.settings, logger=self.instance_logger)
