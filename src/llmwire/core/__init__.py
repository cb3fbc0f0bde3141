"""Core services: settings, logging, credentials and errors."""

from .credentials import (
    DEFAULT_BASE_URL,
    ApiProvider,
    CredentialStore,
    Credentials,
    infer_provider,
    normalize_base_url,
)
from .errors import (
    ConfigurationError,
    DecodeError,
    LLMWireError,
    ProviderError,
    StreamError,
    TransportError,
)
from .logger import LoggerService
from .settings import Settings

__all__ = [
    "ApiProvider",
    "ConfigurationError",
    "CredentialStore",
    "Credentials",
    "DEFAULT_BASE_URL",
    "DecodeError",
    "LLMWireError",
    "LoggerService",
    "ProviderError",
    "Settings",
    "StreamError",
    "TransportError",
    "infer_provider",
    "normalize_base_url",
]
