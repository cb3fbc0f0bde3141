"""Provider model schemas."""
from typing import Optional

from pydantic import BaseModel, Field

from llmwire.core.credentials import ApiProvider


class ProviderModel(BaseModel):
    """Model offered by a provider."""

    model_id: str = Field(..., description="Model identifier sent in requests")
    name: str = Field(..., description="Human-readable model name")
    provider: ApiProvider = Field(..., description="Provider serving the model")
    created: Optional[int] = Field(
        None, description="Creation time as a unix timestamp"
    )
    owned_by: Optional[str] = Field(None, description="Owning organization")
