"""Anthropic model mapper."""
from datetime import datetime
from typing import List, Optional

from ..base_model_mapper import BaseModelMapper
from ..models import ProviderModel
from .models import ModelList


def _timestamp(created_at: Optional[str]) -> Optional[int]:
    """Convert an RFC 3339 creation time to a unix timestamp."""
    if not created_at:
        return None
    try:
        return int(datetime.fromisoformat(created_at.replace("Z", "+00:00")).timestamp())
    except ValueError:
        return None


class AnthropicModelMapper(BaseModelMapper):
    """Mapper for ``GET models`` of the Messages protocol."""

    models_model = ModelList

    def map_provider_models(self, models_data: ModelList) -> List[ProviderModel]:  # type: ignore[override]
        """Map models list response to provider models.

        API returns: data[].id, type, display_name, created_at.
        """
        models = [
            ProviderModel(
                model_id=model.id,
                name=model.display_name or model.id,
                provider=self.provider,
                created=_timestamp(model.created_at),
                owned_by="anthropic",
            )
            for model in models_data.data
        ]
        self.logger.debug("Mapped models", extra={"count": len(models)})
        return models
