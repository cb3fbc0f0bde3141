"""HTTP transport shared by all providers."""
from typing import Any, Callable, Dict, Mapping, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel

from llmwire.core.credentials import ApiProvider, Credentials
from llmwire.core.errors import TransportError
from llmwire.core.logger import LoggerService
from llmwire.core.settings import Settings
from .envelope import decode_envelope

T = TypeVar("T", bound=BaseModel)

# Fills the keyword arguments of ``httpx.AsyncClient.build_request``
BodyBuilder = Callable[[Dict[str, Any]], None]


def json_body(payload: Mapping[str, Any]) -> BodyBuilder:
    """Send payload as a JSON body."""

    def build(kwargs: Dict[str, Any]) -> None:
        kwargs["json"] = payload

    return build


def multipart_body(
    files: Mapping[str, Any], data: Optional[Mapping[str, Any]] = None
) -> BodyBuilder:
    """Send files and form fields as a multipart body."""

    def build(kwargs: Dict[str, Any]) -> None:
        kwargs["files"] = files
        if data:
            kwargs["data"] = data

    return build


def no_body() -> BodyBuilder:
    """Send no body."""

    def build(kwargs: Dict[str, Any]) -> None:
        return None

    return build


def auth_headers(
    credentials: Credentials, anthropic_version: str = "2023-06-01"
) -> Dict[str, str]:
    """Get the authentication headers of the credentials' provider.

    Args:
        credentials: Credentials to authenticate with
        anthropic_version: Value of the ``anthropic-version`` header

    Returns:
        Headers for the provider's auth scheme
    """
    if credentials.provider == ApiProvider.ANTHROPIC:
        return {
            "x-api-key": credentials.api_key,
            "anthropic-version": anthropic_version,
            "content-type": "application/json",
        }
    return {"Authorization": f"Bearer {credentials.api_key}"}


class Transport:
    """Single request/response exchange against ``base_url + route``.

    Failures are surfaced immediately; nothing is retried.
    """

    def __init__(
        self,
        settings: Settings,
        logger: LoggerService,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """Initialize transport.

        Args:
            settings: Settings instance
            logger: Logger service instance
            client: HTTP client to use instead of a new one
        """
        self.settings = settings
        self.logger = logger.get_logger(__name__)
        self._client = client or httpx.AsyncClient(
            timeout=settings.PROVIDER_TIMEOUT,
            verify=not settings.DISABLE_SSL_VERIFICATION,
        )
        self.logger.debug(
            "Initialized transport",
            extra={
                "timeout": settings.PROVIDER_TIMEOUT,
                "client_id": id(self._client),
            },
        )

    def build_request(
        self,
        method: str,
        route: str,
        body: BodyBuilder,
        credentials: Credentials,
        headers: Optional[Dict[str, str]] = None,
    ) -> httpx.Request:
        """Build a request; the body builder runs first, auth headers last."""
        kwargs: Dict[str, Any] = {"headers": dict(headers or {})}
        body(kwargs)
        kwargs["headers"].update(
            auth_headers(credentials, self.settings.ANTHROPIC_VERSION)
        )
        return self._client.build_request(
            method, f"{credentials.base_url}{route}", **kwargs
        )

    async def send(
        self,
        method: str,
        route: str,
        body: BodyBuilder,
        credentials: Credentials,
        request_id: Optional[str] = None,
        stream: bool = False,
        headers: Optional[Dict[str, str]] = None,
    ) -> httpx.Response:
        """Perform one exchange and return the raw response.

        Args:
            method: HTTP method
            route: Path relative to the credentials' base URL
            body: Body builder
            credentials: Credentials selecting URL and auth scheme
            request_id: Request ID for log correlation
            stream: Return before the body is read
            headers: Extra request headers

        Returns:
            Raw HTTP response, whatever its status

        Raises:
            TransportError: On connection, timeout or TLS failure
        """
        request = self.build_request(method, route, body, credentials, headers)
        self.logger.info(
            "Sending request",
            extra={
                "request_id": request_id,
                "method": method,
                "url": str(request.url),
                "provider": credentials.provider.value,
                "stream": stream,
            },
        )
        try:
            response = await self._client.send(request, stream=stream)
        except httpx.TransportError as e:
            self.logger.error(
                "Transport error",
                extra={
                    "request_id": request_id,
                    "url": str(request.url),
                    "error": str(e),
                    "error_type": type(e).__name__,
                },
            )
            raise TransportError(
                str(e) or type(e).__name__, url=str(request.url)
            ) from e

        self.logger.info(
            "Got response",
            extra={"request_id": request_id, "status_code": response.status_code},
        )
        return response

    async def open_stream(
        self,
        method: str,
        route: str,
        body: BodyBuilder,
        credentials: Credentials,
        request_id: Optional[str] = None,
    ) -> httpx.Response:
        """Open an event stream; the caller owns closing the response."""
        return await self.send(
            method,
            route,
            body,
            credentials,
            request_id=request_id,
            stream=True,
            headers={"Accept": "text/event-stream"},
        )

    async def request_json(
        self,
        method: str,
        route: str,
        body: BodyBuilder,
        credentials: Credentials,
        model: Type[T],
        request_id: Optional[str] = None,
    ) -> T:
        """Send a request and decode the response envelope.

        Raises:
            TransportError: On connection failure
            DecodeError: If the body matches neither shape
            ProviderError: If the provider returned an error envelope
        """
        response = await self.send(
            method, route, body, credentials, request_id=request_id
        )
        self.logger.debug(
            "Response body",
            extra={"request_id": request_id, "body": response.text},
        )
        envelope = decode_envelope(response.content, model, response.status_code)
        return envelope.unwrap()

    async def get(
        self,
        route: str,
        credentials: Credentials,
        model: Type[T],
        request_id: Optional[str] = None,
    ) -> T:
        return await self.request_json(
            "GET", route, no_body(), credentials, model, request_id
        )

    async def post(
        self,
        route: str,
        payload: Mapping[str, Any],
        credentials: Credentials,
        model: Type[T],
        request_id: Optional[str] = None,
    ) -> T:
        return await self.request_json(
            "POST", route, json_body(payload), credentials, model, request_id
        )

    async def delete(
        self,
        route: str,
        credentials: Credentials,
        model: Type[T],
        request_id: Optional[str] = None,
    ) -> T:
        return await self.request_json(
            "DELETE", route, no_body(), credentials, model, request_id
        )

    async def post_multipart(
        self,
        route: str,
        files: Mapping[str, Any],
        credentials: Credentials,
        model: Type[T],
        data: Optional[Mapping[str, Any]] = None,
        request_id: Optional[str] = None,
    ) -> T:
        return await self.request_json(
            "POST",
            route,
            multipart_body(files, data),
            credentials,
            model,
            request_id,
        )

    async def aclose(self) -> None:
        """Close HTTP client."""
        await self._client.aclose()
        self.logger.info("Transport HTTP client closed")
