"""LLM module test fixtures."""

from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import dataclass, field
from types import SimpleNamespace
from typing import Any

import httpx
import pytest

from uiforge.llm.backend.base import (
    GenerationConfig,
    GenerationResult,
    LLMBackend,
    ReferencePart,
)
from uiforge.llm.backend.factory import ProviderRoute

# =============================================================================
# Recording Backend
# =============================================================================


@dataclass
class RecordedCall:
    """Arguments of one ``generate`` call."""

    prompt: str
    system_prompt: str | None
    config: GenerationConfig | None
    reference_parts: tuple[ReferencePart, ...]


class RecordingBackend(LLMBackend):
    """Backend returning canned content and recording every call."""

    def __init__(
        self,
        content: str = "",
        model: str = "mock-model-v1",
        provider: str = "mock",
        error: Exception | None = None,
    ):
        self._content = content
        self._model = model
        self._provider = provider
        self._error = error
        self.calls: list[RecordedCall] = []
        self.closed = False

    @property
    def model_name(self) -> str:
        return self._model

    @property
    def provider(self) -> str:
        return self._provider

    async def generate(
        self,
        prompt: str,
        *,
        system_prompt: str | None = None,
        config: GenerationConfig | None = None,
        reference_parts: Sequence[ReferencePart] = (),
    ) -> GenerationResult:
        self.calls.append(
            RecordedCall(prompt, system_prompt, config, tuple(reference_parts))
        )
        if self._error is not None:
            raise self._error
        return GenerationResult(content=self._content, model=self._model, finish_reason="stop")

    async def aclose(self) -> None:
        self.closed = True


class RecordingBackendFactory:
    """Backend factory that records routes and hands out RecordingBackends.

    Set ``content`` or ``error`` before the call under test.
    """

    def __init__(self, content: str = "", error: Exception | None = None):
        self.content = content
        self.error = error
        self.routes: list[ProviderRoute] = []
        self.backends: list[RecordingBackend] = []

    def __call__(self, route: ProviderRoute) -> RecordingBackend:
        self.routes.append(route)
        backend = RecordingBackend(
            content=self.content,
            model=route.model,
            provider=route.provider.value,
            error=self.error,
        )
        self.backends.append(backend)
        return backend

    @property
    def last_route(self) -> ProviderRoute:
        return self.routes[-1]

    @property
    def last_call(self) -> RecordedCall:
        return self.backends[-1].calls[-1]


# =============================================================================
# Provider SDK Doubles
# =============================================================================


class FakeGenaiClient:
    """Stand-in for ``genai.Client`` exposing ``aio.models.generate_content``."""

    def __init__(self, text: str | None = "", error: Exception | None = None):
        self.text = text
        self.error = error
        self.requests: list[dict[str, Any]] = []
        self.aio = SimpleNamespace(models=SimpleNamespace(generate_content=self._generate))

    async def _generate(self, **kwargs: Any) -> Any:
        self.requests.append(kwargs)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(
            text=self.text,
            usage_metadata=SimpleNamespace(total_token_count=42),
        )


def chat_completion_body(content: str, model: str = "openai/gpt-4o") -> dict[str, Any]:
    """Build a minimal OpenAI-compatible chat completion response body."""
    return {
        "id": "gen-test",
        "object": "chat.completion",
        "created": 0,
        "model": model,
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
        "usage": {"prompt_tokens": 10, "completion_tokens": 5, "total_tokens": 15},
    }


class OpenRouterStub:
    """httpx handler recording requests and replying with a fixed response."""

    def __init__(self, status_code: int = 200, content: str = "{}", body: str | None = None):
        self.status_code = status_code
        self.content = content
        self.body = body
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.body is not None:
            return httpx.Response(self.status_code, text=self.body)
        return httpx.Response(self.status_code, json=chat_completion_body(self.content))

    @property
    def last_json(self) -> dict[str, Any]:
        return json.loads(self.requests[-1].content)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def default_api_key() -> str:
    """Provide the injected default credential for tests."""
    return "default-key-12345"


@pytest.fixture
def mock_api_key() -> str:
    """Provide a caller-supplied API key for tests."""
    return "caller-key-67890"


@pytest.fixture
def backend_factory() -> RecordingBackendFactory:
    """Create a recording backend factory with empty canned content."""
    return RecordingBackendFactory()


@pytest.fixture
def fake_genai_client() -> FakeGenaiClient:
    """Create a fake google-genai client."""
    return FakeGenaiClient(text='{"name": "Home", "markup": "<div></div>"}')


@pytest.fixture
def openrouter_stub() -> OpenRouterStub:
    """Create an OpenRouter HTTP stub answering with a JSON screen draft."""
    return OpenRouterStub(content='{"name": "Home", "markup": "<div></div>"}')
