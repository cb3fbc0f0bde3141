"""Provider implementation shared by both protocols."""
import uuid
from typing import Any, List

import httpx

from llmwire.core.credentials import ApiProvider, Credentials
from llmwire.core.errors import DecodeError, TransportError
from llmwire.core.logger import LoggerService
from .base import CompletionResponse, Provider
from .base_mapper import BaseMapper
from .base_model_mapper import BaseModelMapper
from .envelope import Err
from .models import CompletionRequest, ProviderModel
from .streaming import StreamSession
from .transport import Transport, json_body


class ChatProvider(Provider):
    """Completion provider driven by a protocol mapper.

    Everything protocol-specific lives in the mapper; this class sends the
    mapped body and hands the response to the envelope decoder or to a
    streaming session.
    """

    def __init__(
        self,
        provider: ApiProvider,
        transport: Transport,
        mapper: BaseMapper[Any, Any],
        model_mapper: BaseModelMapper,
        logger: LoggerService,
    ) -> None:
        """Initialize provider.

        Args:
            provider: Provider protocol
            transport: Shared HTTP transport
            mapper: Provider-specific mapper instance
            model_mapper: Provider-specific model mapper instance
            logger: Logger service instance
        """
        super().__init__(provider=provider)
        self.transport = transport
        self.mapper = mapper
        self.model_mapper = model_mapper
        self.logger_service = logger
        self.logger = logger.get_logger(__name__)

    async def create_completion(
        self, request: CompletionRequest, credentials: Credentials
    ) -> CompletionResponse:
        request_id = str(uuid.uuid4())
        body = self.mapper.map_to_provider_request(request)
        self.logger.info(
            "Mapped request",
            extra={
                "request_id": request_id,
                "provider": self._provider.value,
                "model": request.model,
                "stream": False,
            },
        )
        self.logger.debug(
            "Request details", extra={"request_id": request_id, "request": body}
        )

        response = await self.transport.send(
            "POST", self.mapper.route, json_body(body), credentials, request_id
        )
        self.logger.debug(
            "Response body",
            extra={"request_id": request_id, "body": response.text},
        )
        envelope = self.mapper.map_provider_response(
            response.content, response.status_code
        )
        if isinstance(envelope, Err):
            self.logger.error(
                "Provider returned error",
                extra={
                    "request_id": request_id,
                    "status_code": response.status_code,
                    "error": envelope.error.message,
                    "error_type": envelope.error.error_type,
                },
            )
        return envelope.unwrap()

    async def stream_completion(
        self, request: CompletionRequest, credentials: Credentials
    ) -> StreamSession[Any, Any]:
        request_id = str(uuid.uuid4())
        body = self.mapper.map_to_provider_request(request, stream=True)
        self.logger.info(
            "Mapped request",
            extra={
                "request_id": request_id,
                "provider": self._provider.value,
                "model": request.model,
                "stream": True,
            },
        )
        self.logger.debug(
            "Request details", extra={"request_id": request_id, "request": body}
        )

        response = await self.transport.open_stream(
            "POST", self.mapper.route, json_body(body), credentials, request_id
        )
        if not response.is_success:
            # Read error response before closing
            try:
                error_body = await response.aread()
            except httpx.TransportError as e:
                self.logger.error(
                    "Transport error reading error response",
                    extra={
                        "request_id": request_id,
                        "status_code": response.status_code,
                        "error": str(e),
                        "error_type": type(e).__name__,
                    },
                )
                raise TransportError(
                    str(e) or type(e).__name__, url=str(response.request.url)
                ) from e
            finally:
                await response.aclose()
            self.logger.error(
                "Error response on stream open",
                extra={
                    "request_id": request_id,
                    "status_code": response.status_code,
                    "error_text": error_body.decode("utf-8", errors="replace"),
                },
            )
            envelope = self.mapper.map_provider_response(
                error_body, response.status_code
            )
            envelope.unwrap()
            raise DecodeError(
                f"Unexpected status {response.status_code} for stream",
                body=error_body.decode("utf-8", errors="replace"),
                status_code=response.status_code,
            )

        self.logger.info("Stream opened", extra={"request_id": request_id})
        return StreamSession(
            response=response,
            mapper=self.mapper,
            accumulator=self.mapper.create_accumulator(),
            logger=self.logger_service,
            request_id=request_id,
        )

    async def get_models(self, credentials: Credentials) -> List[ProviderModel]:
        request_id = str(uuid.uuid4())
        self.logger.info(
            "Getting models list from API",
            extra={"request_id": request_id, "base_url": credentials.base_url},
        )
        models_data = await self.transport.get(
            self.model_mapper.route,
            credentials,
            self.model_mapper.models_model,
            request_id=request_id,
        )
        models = self.model_mapper.map_provider_models(models_data)
        self.logger.info(
            "Got models", extra={"request_id": request_id, "count": len(models)}
        )
        return models
