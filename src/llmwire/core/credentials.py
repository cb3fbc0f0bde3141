"""Provider credentials and the process-wide default."""
import warnings
from enum import Enum
from typing import Callable, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import ConfigurationError
from .locks import ReadWriteLock
from .settings import Settings

DEFAULT_BASE_URL = "https://api.openai.com/v1/"


class ApiProvider(str, Enum):
    """Supported provider protocols.

    The value doubles as the marker searched for in a base URL.
    """

    OPENAI = "openai"
    ANTHROPIC = "anthropic"


# Settings attributes holding (api key, base url) for each provider
ENV_VARS: Dict[ApiProvider, Tuple[str, str]] = {
    ApiProvider.OPENAI: ("OPENAI_KEY", "OPENAI_BASE_URL"),
    ApiProvider.ANTHROPIC: ("ANTHROPIC_KEY", "ANTHROPIC_URL"),
}


def normalize_base_url(url: str) -> str:
    """Append a trailing slash to url unless it already ends with one."""
    if not url.endswith("/"):
        url += "/"
    return url


def infer_provider(base_url: str) -> ApiProvider:
    """Infer the provider from a marker substring in the base URL.

    Args:
        base_url: Provider base URL

    Returns:
        Provider whose marker the URL contains

    Raises:
        ConfigurationError: If the URL contains no known marker
    """
    for provider in ApiProvider:
        if provider.value in base_url:
            return provider
    raise ConfigurationError(
        f"Unrecognized base URL: {base_url}", field="base_url"
    )


class Credentials(BaseModel):
    """API key and base URL for one provider.

    Instances are immutable; a call receives a value, never a reference to
    shared mutable state.
    """

    model_config = ConfigDict(frozen=True)

    provider: ApiProvider = Field(description="Provider protocol to speak")
    api_key: str = Field(repr=False, description="Provider API key")
    base_url: str = Field(description="Base URL, always ending with a slash")

    @field_validator("base_url")
    @classmethod
    def ensure_trailing_slash(cls, v: str) -> str:
        """Normalize base URL."""
        return normalize_base_url(v)

    @classmethod
    def create(
        cls,
        api_key: str,
        base_url: str,
        provider: Optional[ApiProvider] = None,
    ) -> "Credentials":
        """Create credentials, inferring the provider from the URL if needed.

        Raises:
            ConfigurationError: If provider is omitted and cannot be inferred
        """
        base_url = normalize_base_url(base_url)
        if provider is None:
            provider = infer_provider(base_url)
        return cls(provider=provider, api_key=api_key, base_url=base_url)

    @classmethod
    def from_environment(
        cls, provider: ApiProvider, settings: Optional[Settings] = None
    ) -> "Credentials":
        """Read credentials for provider from the environment.

        Args:
            provider: Provider whose variables to read
            settings: Settings to read from, loaded from the environment if omitted

        Raises:
            ConfigurationError: If the key or the base URL is not set
        """
        settings = settings or Settings()
        key_var, url_var = ENV_VARS[provider]
        api_key = getattr(settings, key_var)
        if not api_key:
            raise ConfigurationError(
                f"Environment variable {key_var} is not set", field=key_var
            )
        base_url = getattr(settings, url_var)
        if not base_url:
            raise ConfigurationError(
                f"Environment variable {url_var} is not set", field=url_var
            )
        return cls(provider=provider, api_key=api_key, base_url=base_url)


class CredentialStore:
    """Holder of the default credentials used when a call passes none.

    The default is built lazily on first use. Reads take the lock in shared
    mode; only the deprecated ``set_key`` and ``set_base_url`` take it
    exclusively, and they swap in a new immutable value instead of mutating
    the old one.
    """

    def __init__(
        self,
        factory: Optional[Callable[[], Credentials]] = None,
        settings: Optional[Settings] = None,
        provider: ApiProvider = ApiProvider.OPENAI,
    ) -> None:
        self._settings = settings
        self._factory = factory or (
            lambda: Credentials.from_environment(provider, self._settings)
        )
        self._lock = ReadWriteLock()
        self._default: Optional[Credentials] = None

    def snapshot(self) -> Credentials:
        """Return the current default credentials.

        Raises:
            ConfigurationError: If the default must be built and the
                environment does not provide it
        """
        with self._lock.read():
            if self._default is not None:
                return self._default
        with self._lock.write():
            if self._default is None:
                self._default = self._factory()
            return self._default

    def resolve(self, explicit: Optional[Credentials] = None) -> Credentials:
        """Return explicit credentials if given, otherwise the default."""
        if explicit is not None:
            return explicit
        return self.snapshot()

    def replace(self, credentials: Credentials) -> None:
        """Install credentials as the new default."""
        with self._lock.write():
            self._default = credentials

    def set_key(self, value: str) -> None:
        """Replace the API key of the default credentials."""
        warnings.warn(
            "set_key is deprecated, pass Credentials with the request instead",
            DeprecationWarning,
            stacklevel=2,
        )
        current = self.snapshot()
        with self._lock.write():
            self._default = (self._default or current).model_copy(
                update={"api_key": value}
            )

    def set_base_url(self, value: str) -> None:
        """Replace the base URL of the default credentials; empty is ignored."""
        warnings.warn(
            "set_base_url is deprecated, pass Credentials with the request instead",
            DeprecationWarning,
            stacklevel=2,
        )
        if not value:
            return
        value = normalize_base_url(value)
        current = self.snapshot()
        with self._lock.write():
            self._default = (self._default or current).model_copy(
                update={"base_url": value}
            )
