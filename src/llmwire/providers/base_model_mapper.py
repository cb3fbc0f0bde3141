"""Base mapper for provider model mapping."""
from typing import List, Type

from pydantic import BaseModel

from llmwire.core.credentials import ApiProvider
from llmwire.core.logger import LoggerService
from .models import ProviderModel


class BaseModelMapper:
    """Base mapper class for provider model mapping."""

    route = "models"
    models_model: Type[BaseModel]

    def __init__(self, provider: ApiProvider, logger: LoggerService) -> None:
        """Initialize mapper.

        Args:
            provider: Provider whose model list is mapped
            logger: Logger service instance
        """
        self.provider = provider
        self.logger = logger.get_logger(__name__)

    def map_provider_models(self, models_data: BaseModel) -> List[ProviderModel]:
        """Map provider models response to provider-agnostic format.

        Args:
            models_data: Decoded models response

        Returns:
            List of provider models
        """
        raise NotImplementedError("Subclasses must implement map_provider_models")
