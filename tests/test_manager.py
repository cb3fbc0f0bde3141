"""End-to-end tests through the provider manager and the package facade."""
from typing import Iterator

import httpx
import pytest
from dependency_injector import providers

import llmwire
from llmwire.core.credentials import ApiProvider, CredentialStore, Credentials
from llmwire.core.errors import ConfigurationError, DecodeError, ProviderError
from llmwire.core.logger import LoggerService
from llmwire.core.settings import Settings
from llmwire.providers import mapper_factory
from llmwire.providers.anthropic.mapper import AnthropicMapper
from llmwire.providers.anthropic.models import AnthropicChatCompletion
from llmwire.providers.factory import ProviderFactory
from llmwire.providers.mapper_factory import MapperFactory
from llmwire.providers.models import CompletionRequest, Message
from llmwire.providers.openai.model_mapper import OpenAIModelMapper
from llmwire.providers.openai.models import ChatCompletion
from tests.conftest import (
    ANTHROPIC_URL,
    OPENAI_URL,
    RecordingHandler,
    make_container,
    make_transport,
)

OPENAI_COMPLETION = {
    "id": "chatcmpl-1",
    "object": "chat.completion",
    "created": 1700000000,
    "model": "gpt-4o",
    "choices": [
        {
            "index": 0,
            "message": {"role": "assistant", "content": "Hello!"},
            "finish_reason": "stop",
        }
    ],
    "usage": {"prompt_tokens": 9, "completion_tokens": 3, "total_tokens": 12},
}

ANTHROPIC_COMPLETION = {
    "id": "msg_1",
    "type": "message",
    "role": "assistant",
    "model": "claude-3-5-sonnet-20241022",
    "content": [{"type": "text", "text": "Hello!"}],
    "stop_reason": "end_turn",
    "stop_sequence": None,
    "usage": {"input_tokens": 10, "output_tokens": 3},
}

GPT = CompletionRequest(model="gpt-4o", messages=[Message.user("Hello!")])
CLAUDE = CompletionRequest(
    model="claude-3-5-sonnet-20241022", messages=[Message.user("Hello!")]
)


@pytest.mark.asyncio
async def test_openai_completion(
    settings: Settings, openai_credentials: Credentials
) -> None:
    handler = RecordingHandler(httpx.Response(200, json=OPENAI_COMPLETION))
    manager = make_container(handler, settings).provider_manager()

    response = await manager.create_completion(GPT, openai_credentials)

    assert isinstance(response, ChatCompletion)
    assert response.choices[0].message.content == "Hello!"
    assert response.usage is not None
    assert (
        response.usage.prompt_tokens + response.usage.completion_tokens
        == response.usage.total_tokens
    )
    request = handler.requests[0]
    assert str(request.url) == "https://api.openai.com/v1/chat/completions"
    assert handler.last_body == {
        "model": "gpt-4o",
        "messages": [{"role": "user", "content": "Hello!"}],
    }


@pytest.mark.asyncio
async def test_anthropic_completion(
    settings: Settings, anthropic_credentials: Credentials
) -> None:
    handler = RecordingHandler(httpx.Response(200, json=ANTHROPIC_COMPLETION))
    manager = make_container(handler, settings).provider_manager()

    response = await manager.create_completion(CLAUDE, anthropic_credentials)

    assert isinstance(response, AnthropicChatCompletion)
    assert len(response.content) == 1
    assert response.content[0].type == "text"
    assert response.text == "Hello!"
    request = handler.requests[0]
    assert str(request.url) == "https://api.anthropic.com/v1/messages"
    assert request.headers["x-api-key"] == "ak-test"
    assert handler.last_body["max_tokens"] == 4096


@pytest.mark.asyncio
async def test_error_envelope_raises_provider_error(
    settings: Settings, openai_credentials: Credentials
) -> None:
    handler = RecordingHandler(
        httpx.Response(
            401,
            json={
                "error": {"message": "invalid_api_key", "type": "authentication_error"}
            },
        )
    )
    manager = make_container(handler, settings).provider_manager()

    with pytest.raises(ProviderError) as exc_info:
        await manager.create_completion(GPT, openai_credentials)

    error = exc_info.value
    assert error.message == "invalid_api_key"
    assert error.error_type == "authentication_error"
    assert error.param is None
    assert error.code is None
    assert error.status_code == 401


@pytest.mark.asyncio
async def test_unparseable_body_raises_decode_error(
    settings: Settings, openai_credentials: Credentials
) -> None:
    handler = RecordingHandler(httpx.Response(200, content=b"not json"))
    manager = make_container(handler, settings).provider_manager()

    with pytest.raises(DecodeError):
        await manager.create_completion(GPT, openai_credentials)


@pytest.mark.asyncio
async def test_request_credentials_override_default(settings: Settings) -> None:
    handler = RecordingHandler(httpx.Response(200, json=ANTHROPIC_COMPLETION))
    store = CredentialStore(factory=lambda: Credentials.create("sk-default", OPENAI_URL))
    manager = make_container(handler, settings, store).provider_manager()
    request = CLAUDE.model_copy(
        update={"credentials": Credentials.create("ak-request", ANTHROPIC_URL)}
    )

    await manager.create_completion(request)

    assert handler.requests[0].headers["x-api-key"] == "ak-request"


@pytest.mark.asyncio
async def test_default_credentials_are_used_when_none_given(settings: Settings) -> None:
    handler = RecordingHandler(httpx.Response(200, json=OPENAI_COMPLETION))
    store = CredentialStore(factory=lambda: Credentials.create("sk-default", OPENAI_URL))
    manager = make_container(handler, settings, store).provider_manager()

    await manager.create_completion(GPT)

    assert handler.requests[0].headers["authorization"] == "Bearer sk-default"


@pytest.mark.asyncio
async def test_missing_default_credentials_fail_before_network(
    settings: Settings,
) -> None:
    handler = RecordingHandler()
    manager = make_container(
        handler, settings, CredentialStore(settings=settings)
    ).provider_manager()

    with pytest.raises(ConfigurationError) as exc_info:
        await manager.create_completion(GPT)

    assert exc_info.value.field == "OPENAI_KEY"
    assert handler.requests == []


def test_provider_instances_are_reused(settings: Settings) -> None:
    manager = make_container(RecordingHandler(), settings).provider_manager()
    assert manager.get_provider(ApiProvider.OPENAI) is manager.get_provider(
        ApiProvider.OPENAI
    )
    assert manager.get_provider(ApiProvider.OPENAI) is not manager.get_provider(
        ApiProvider.ANTHROPIC
    )


@pytest.mark.asyncio
async def test_list_openai_models(
    settings: Settings, openai_credentials: Credentials
) -> None:
    handler = RecordingHandler(
        httpx.Response(
            200,
            json={
                "object": "list",
                "data": [
                    {"id": "gpt-4o", "object": "model", "created": 1715367049, "owned_by": "system"},
                    {"id": "gpt-4o-mini", "object": "model", "created": 1721172741, "owned_by": "system"},
                ],
            },
        )
    )
    manager = make_container(handler, settings).provider_manager()

    models = await manager.get_models(openai_credentials)

    assert [model.model_id for model in models] == ["gpt-4o", "gpt-4o-mini"]
    assert models[0].provider == ApiProvider.OPENAI
    assert models[0].owned_by == "system"
    assert str(handler.requests[0].url) == "https://api.openai.com/v1/models"


@pytest.mark.asyncio
async def test_list_anthropic_models(
    settings: Settings, anthropic_credentials: Credentials
) -> None:
    handler = RecordingHandler(
        httpx.Response(
            200,
            json={
                "data": [
                    {
                        "id": "claude-3-5-sonnet-20241022",
                        "type": "model",
                        "display_name": "Claude 3.5 Sonnet",
                        "created_at": "2024-10-22T00:00:00Z",
                    }
                ],
                "has_more": False,
                "first_id": "claude-3-5-sonnet-20241022",
                "last_id": "claude-3-5-sonnet-20241022",
            },
        )
    )
    manager = make_container(handler, settings).provider_manager()

    models = await manager.get_models(anthropic_credentials)

    assert len(models) == 1
    assert models[0].name == "Claude 3.5 Sonnet"
    assert models[0].created == 1729555200
    assert models[0].owned_by == "anthropic"


def test_unsupported_provider_mapper(
    settings: Settings,
    logger_service: LoggerService,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.delitem(mapper_factory.MAPPERS, ApiProvider.ANTHROPIC)
    factory = MapperFactory(settings, logger_service)

    with pytest.raises(ConfigurationError):
        factory.create(ApiProvider.ANTHROPIC)


def test_provider_factory_rejects_foreign_mapper(
    settings: Settings, logger_service: LoggerService
) -> None:
    transport = make_transport(RecordingHandler(), settings, logger_service)
    factory = ProviderFactory(logger_service, transport)

    with pytest.raises(ConfigurationError) as exc_info:
        factory.create(
            ApiProvider.OPENAI,
            AnthropicMapper(settings=settings, logger=logger_service),
            OpenAIModelMapper(ApiProvider.OPENAI, logger_service),
        )
    assert exc_info.value.field == "mapper"


# =============================================================================
# Package facade
# =============================================================================


@pytest.fixture
def facade(settings: Settings) -> Iterator[RecordingHandler]:
    """Serve the module-level container from a recording handler."""
    handler = RecordingHandler(httpx.Response(200, json=OPENAI_COMPLETION))
    store = CredentialStore(factory=lambda: Credentials.create("sk-env", OPENAI_URL))
    llmwire.container.reset_singletons()
    llmwire.container.settings.override(providers.Object(settings))
    llmwire.container.http_client.override(
        providers.Object(httpx.AsyncClient(transport=httpx.MockTransport(handler)))
    )
    llmwire.container.credential_store.override(providers.Object(store))
    yield handler
    llmwire.container.reset_override()
    llmwire.container.reset_singletons()


@pytest.mark.asyncio
async def test_facade_create_completion(facade: RecordingHandler) -> None:
    response = await llmwire.create_completion(GPT)

    assert response.text == "Hello!"
    assert facade.requests[0].headers["authorization"] == "Bearer sk-env"
    await llmwire.aclose()


@pytest.mark.asyncio
async def test_facade_set_key_changes_later_calls(facade: RecordingHandler) -> None:
    facade.responses.append(httpx.Response(200, json=OPENAI_COMPLETION))

    await llmwire.create_completion(GPT)
    with pytest.warns(DeprecationWarning):
        llmwire.set_key("sk-rotated")
    await llmwire.create_completion(GPT)

    assert facade.requests[0].headers["authorization"] == "Bearer sk-env"
    assert facade.requests[1].headers["authorization"] == "Bearer sk-rotated"
    await llmwire.aclose()
