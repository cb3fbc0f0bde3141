"""Error classes raised by llmwire.

Every failure a caller can observe is one of the classes below. None of
them is retried or recovered internally; they propagate to the caller with
their details intact.
"""
from typing import Any, Dict, Optional


class LLMWireError(Exception):
    """Base error with a numeric code, a message and optional details."""

    def __init__(
        self,
        code: int,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Initialize error.

        Args:
            code: Error code, an HTTP status where one applies
            message: Error message
            details: Optional error details
        """
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ConfigurationError(LLMWireError):
    """Missing or invalid credentials, raised before any network call."""

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        """Initialize configuration error.

        Args:
            message: Error message
            field: Setting or environment variable at fault
        """
        super().__init__(
            code=500,
            message=message,
            details={"field": field} if field else {},
        )
        self.field = field


class TransportError(LLMWireError):
    """Connection, timeout or TLS failure talking to the provider."""

    def __init__(self, message: str, url: Optional[str] = None) -> None:
        """Initialize transport error.

        Args:
            message: Message of the underlying HTTP client error
            url: Request URL, when known
        """
        super().__init__(
            code=503,
            message=message,
            details={"url": url} if url else {},
        )
        self.url = url


class DecodeError(LLMWireError):
    """Body matched neither the success shape nor the error shape."""

    def __init__(
        self,
        message: str,
        body: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        """Initialize decode error.

        Args:
            message: Parser message
            body: Raw body that failed to decode
            status_code: HTTP status of the response, when known
        """
        super().__init__(
            code=status_code or 502,
            message=message,
            details={"body": body} if body is not None else {},
        )
        self.error_type = "json_parse_error"
        self.body = body
        self.status_code = status_code


class ProviderError(LLMWireError):
    """Well-formed error envelope returned by the provider."""

    def __init__(
        self,
        message: str,
        error_type: str,
        param: Optional[str] = None,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        """Initialize provider error.

        Args:
            message: Provider error message
            error_type: Provider error type, e.g. ``authentication_error``
            param: Request parameter the error refers to
            code: Provider error code
            status_code: HTTP status of the response, when known
        """
        super().__init__(
            code=status_code or 400,
            message=message,
            details={"type": error_type, "param": param, "code": code},
        )
        # ``code`` holds the provider's own code, the numeric one moves aside
        self.status_code = status_code
        self.error_type = error_type
        self.param = param
        self.code = code  # type: ignore[assignment]


class StreamError(LLMWireError):
    """Decode or transport failure in the middle of a stream."""

    def __init__(
        self,
        message: str,
        events_processed: int = 0,
        cause: Optional[str] = None,
    ) -> None:
        """Initialize stream error.

        Args:
            message: Error message
            events_processed: Events folded before the failure
            cause: Kind of failure, ``decode`` or ``transport``
        """
        super().__init__(
            code=502,
            message=message,
            details={"events_processed": events_processed, "cause": cause},
        )
        self.events_processed = events_processed
        self.cause = cause
