"""Application settings."""
import json
from typing import Annotated, List, Optional, Union

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        extra="ignore",
        env_file=".env",
        env_file_encoding="utf-8",
    )
    """Library settings."""

    # OpenAI-compatible provider
    OPENAI_KEY: str = ""
    OPENAI_BASE_URL: str = ""

    # Anthropic provider
    ANTHROPIC_KEY: str = ""
    ANTHROPIC_URL: str = ""
    ANTHROPIC_VERSION: str = "2023-06-01"
    ANTHROPIC_DEFAULT_MAX_TOKENS: int = 4096

    # Transport
    PROVIDER_TIMEOUT: Optional[float] = None  # seconds, None waits forever
    DISABLE_SSL_VERIFICATION: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"  # Available formats: json, text, structured
    LOG_EXTRA_FIELDS: Annotated[List[str], NoDecode] = []  # Additional fields for logs

    @field_validator("LOG_EXTRA_FIELDS", mode="before")
    @classmethod
    def parse_extra_fields(cls, v: Union[str, List[str]]) -> List[str]:
        """Parse extra log fields from a JSON list or a comma-separated string."""
        if isinstance(v, str):
            if v.startswith("["):
                try:
                    parsed = json.loads(v)
                except json.JSONDecodeError:
                    return []
                return [str(item) for item in parsed] if isinstance(parsed, list) else []
            return [i.strip() for i in v.split(",") if i.strip()]
        elif isinstance(v, list):
            return [str(item) for item in v]
        return []

    @field_validator("LOG_FORMAT")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format name."""
        if v not in ("json", "text", "structured"):
            raise ValueError(f"Unknown log format: {v}")
        return v
