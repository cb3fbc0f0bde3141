"""OpenAI-compatible model mapper."""
from typing import List

from ..base_model_mapper import BaseModelMapper
from ..models import ProviderModel
from .models import ModelList


class OpenAIModelMapper(BaseModelMapper):
    """Mapper for ``GET models`` of the chat completions protocol."""

    models_model = ModelList

    def map_provider_models(self, models_data: ModelList) -> List[ProviderModel]:  # type: ignore[override]
        """Map models list response to provider models.

        API returns: data[].id, object, created, owned_by.
        """
        models = [
            ProviderModel(
                model_id=model.id,
                name=model.id,
                provider=self.provider,
                created=model.created,
                owned_by=model.owned_by,
            )
            for model in models_data.data
        ]
        self.logger.debug("Mapped models", extra={"count": len(models)})
        return models
