"""Pytest configuration and fixtures.

Network access is replaced by ``httpx.MockTransport``. Provider credentials
are removed from the environment and settings skip the ``.env`` file.
"""
import asyncio
import json
from typing import Any, Callable, Dict, Iterable, List, Optional

import httpx
import pytest
from dependency_injector import providers

from llmwire.core.credentials import Credentials, CredentialStore
from llmwire.core.logger import LoggerService
from llmwire.core.settings import Settings
from llmwire.di import Container
from llmwire.providers.transport import Transport

OPENAI_URL = "https://api.openai.com/v1"
ANTHROPIC_URL = "https://api.anthropic.com/v1"

ENV_VARS = (
    "OPENAI_KEY",
    "OPENAI_BASE_URL",
    "ANTHROPIC_KEY",
    "ANTHROPIC_URL",
)

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove provider credentials from the environment."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, LOG_FORMAT="text", LOG_LEVEL="DEBUG")


@pytest.fixture
def logger_service(settings: Settings) -> LoggerService:
    return LoggerService(settings)


@pytest.fixture
def openai_credentials() -> Credentials:
    return Credentials.create("sk-test", OPENAI_URL)


@pytest.fixture
def anthropic_credentials() -> Credentials:
    return Credentials.create("ak-test", ANTHROPIC_URL)


def sse(*events: Dict[str, Any], done: bool = False, named: bool = False) -> bytes:
    """Encode events as a server-sent event body."""
    lines: List[str] = []
    for event in events:
        if named:
            lines.append(f"event: {event.get('type', 'message')}")
        lines.append(f"data: {json.dumps(event)}")
        lines.append("")
    if done:
        lines.extend(["data: [DONE]", ""])
    return ("\n".join(lines) + "\n").encode()


def mock_client(handler: Handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def make_transport(
    handler: Handler, settings: Settings, logger_service: LoggerService
) -> Transport:
    return Transport(settings, logger_service, client=mock_client(handler))


def make_container(
    handler: Handler,
    settings: Settings,
    credential_store: Optional[CredentialStore] = None,
) -> Container:
    """Build a container whose HTTP client is served by handler."""
    container = Container()
    container.settings.override(providers.Object(settings))
    container.http_client.override(providers.Object(mock_client(handler)))
    if credential_store is not None:
        container.credential_store.override(providers.Object(credential_store))
    return container


class FailingStream(httpx.AsyncByteStream):
    """Body that yields some chunks and then loses the connection."""

    def __init__(self, chunks: Iterable[bytes]) -> None:
        self._chunks = list(chunks)

    async def __aiter__(self):
        for chunk in self._chunks:
            yield chunk
        raise httpx.ReadError("connection reset")

    async def aclose(self) -> None:
        pass


class GatedStream(httpx.AsyncByteStream):
    """Body that yields its first chunk, then waits for the gate to open."""

    def __init__(self, first: bytes, rest: bytes, gate: asyncio.Event) -> None:
        self._first = first
        self._rest = rest
        self._gate = gate
        self.reading_rest = asyncio.Event()

    async def __aiter__(self):
        yield self._first
        self.reading_rest.set()
        await self._gate.wait()
        if self._rest:
            yield self._rest

    async def aclose(self) -> None:
        pass


class RecordingHandler:
    """Mock transport handler that records requests and replays responses."""

    def __init__(self, *responses: httpx.Response) -> None:
        self.responses = list(responses)
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responses.pop(0)

    @property
    def last_body(self) -> Dict[str, Any]:
        return json.loads(self.requests[-1].content)
