"""Error payload returned by providers.

Both protocols wrap failures as ``{"error": {"message": ..., "type": ...}}``;
``param`` and ``code`` are only sent by the OpenAI-compatible protocol.
"""
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from llmwire.core.errors import ProviderError


class ErrorPayload(BaseModel):
    """Body of an error envelope."""

    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(description="Human-readable error message")
    error_type: str = Field(alias="type", description="Error type")
    param: Optional[str] = Field(None, description="Parameter the error refers to")
    code: Optional[str] = Field(None, description="Provider error code")

    @field_validator("code", "param", mode="before")
    @classmethod
    def stringify(cls, v: Any) -> Any:
        """Some providers send numeric codes."""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    def to_exception(self, status_code: Optional[int] = None) -> ProviderError:
        """Build the exception raised for this payload."""
        return ProviderError(
            message=self.message,
            error_type=self.error_type,
            param=self.param,
            code=self.code,
            status_code=status_code,
        )
