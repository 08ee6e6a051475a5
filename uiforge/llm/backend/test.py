"""Tests for LLM backend implementations, routing and transport."""

import base64

import pytest

from uiforge.project import ProviderName
from uiforge.schema import SCREEN_DRAFT_SCHEMA, SchemaType

from .base import (
    AuthenticationError,
    GenerationConfig,
    LLMError,
    ReferencePart,
    TransportError,
)
from .factory import (
    CUSTOM_MODEL_SENTINEL,
    DEFAULT_MODEL,
    ProviderRoute,
    create_llm_backend,
    resolve_provider_route,
)
from .gemini import GeminiBackend, to_gemini_schema
from .openrouter import OPENROUTER_BASE_URL, OpenRouterBackend
from .transport import ProviderTransport


class TestResolveProviderRoute:
    """Tests for credential and provider precedence."""

    @pytest.mark.unit
    def test_caller_key_keeps_provider_and_model(self):
        """A non-empty caller key is used with the requested route verbatim."""
        route = resolve_provider_route(
            "anthropic/claude-3.5-sonnet", "sk-or-1", ProviderName.OPENROUTER, "default"
        )
        assert route == ProviderRoute(
            provider=ProviderName.OPENROUTER,
            model="anthropic/claude-3.5-sonnet",
            api_key="sk-or-1",
            uses_default_key=False,
        )

    @pytest.mark.unit
    def test_caller_key_with_gemini_provider(self):
        """A caller key on the Gemini route keeps the requested model."""
        route = resolve_provider_route("gemini-2.5-pro", "user-key", "gemini", "default")
        assert route.provider == ProviderName.GEMINI
        assert route.model == "gemini-2.5-pro"
        assert route.api_key == "user-key"

    @pytest.mark.unit
    def test_missing_key_forces_gemini_and_default_model(self):
        """OpenRouter without a key falls back to Gemini and the default model."""
        route = resolve_provider_route(
            "openai/gpt-4o", None, ProviderName.OPENROUTER, "default"
        )
        assert route.provider == ProviderName.GEMINI
        assert route.model == DEFAULT_MODEL == "gemini-3-flash-preview"
        assert route.api_key == "default"
        assert route.uses_default_key

    @pytest.mark.unit
    @pytest.mark.parametrize("blank", ["", "   ", "\t\n"])
    def test_blank_key_uses_default(self, blank):
        """Whitespace-only keys count as absent."""
        route = resolve_provider_route("gemini-2.5-pro", blank, "openrouter", "default")
        assert route.provider == ProviderName.GEMINI
        assert route.api_key == "default"
        assert route.model == "gemini-2.5-pro"

    @pytest.mark.unit
    def test_custom_sentinel_replaced_on_fallback(self):
        """The "custom" model name is replaced when using the default key."""
        route = resolve_provider_route(CUSTOM_MODEL_SENTINEL, "", "gemini", "default")
        assert route.model == DEFAULT_MODEL

    @pytest.mark.unit
    def test_custom_sentinel_kept_with_caller_key(self):
        """The "custom" model name passes through with a caller key."""
        route = resolve_provider_route(CUSTOM_MODEL_SENTINEL, "k", "openrouter", "default")
        assert route.model == CUSTOM_MODEL_SENTINEL

    @pytest.mark.unit
    def test_none_model_selects_default(self):
        """A missing model name selects the default model."""
        route = resolve_provider_route(None, None, "gemini", "default")
        assert route.model == DEFAULT_MODEL

    @pytest.mark.unit
    def test_describe_omits_credential(self):
        """Route descriptions never include the key."""
        route = resolve_provider_route("openai/gpt-4o", "secret-key", "openrouter", "d")
        assert "secret-key" not in route.describe()
        assert "openrouter:openai/gpt-4o" in route.describe()


class TestCreateLLMBackend:
    """Tests for backend construction from a route."""

    @pytest.mark.unit
    def test_creates_gemini_backend(self):
        """Gemini routes build a GeminiBackend."""
        route = ProviderRoute(ProviderName.GEMINI, "gemini-2.5-pro", "k", False)
        backend = create_llm_backend(route)
        assert isinstance(backend, GeminiBackend)
        assert backend.name == "gemini:gemini-2.5-pro"

    @pytest.mark.unit
    def test_creates_openrouter_backend(self):
        """OpenRouter routes build an OpenRouterBackend."""
        route = ProviderRoute(ProviderName.OPENROUTER, "openai/gpt-4o", "k", False)
        backend = create_llm_backend(route)
        assert isinstance(backend, OpenRouterBackend)
        assert backend.base_url == OPENROUTER_BASE_URL

    @pytest.mark.unit
    def test_custom_openrouter_url(self):
        """A custom OpenRouter endpoint is forwarded."""
        route = ProviderRoute(ProviderName.OPENROUTER, "openai/gpt-4o", "k", False)
        backend = create_llm_backend(route, openrouter_base_url="http://localhost:9000/v1")
        assert backend.base_url == "http://localhost:9000/v1"


class TestGeminiSchema:
    """Tests for SchemaNode to google-genai schema translation."""

    @pytest.mark.unit
    def test_translates_screen_draft_schema(self):
        """Object nodes keep properties and required names."""
        from google.genai import types

        schema = to_gemini_schema(SCREEN_DRAFT_SCHEMA)
        assert schema.type == types.Type.OBJECT
        assert set(schema.properties) == {"name", "markup"}
        assert schema.properties["markup"].type == types.Type.STRING
        assert schema.required == ["name", "markup"]

    @pytest.mark.unit
    def test_translates_arrays(self):
        """Array nodes carry their item schema."""
        from google.genai import types

        from uiforge.schema import array_schema, string_schema

        schema = to_gemini_schema(array_schema(string_schema()))
        assert schema.type == types.Type.ARRAY
        assert schema.items.type == types.Type(SchemaType.STRING.value.upper())


class TestGeminiBackend:
    """Tests for GeminiBackend against a fake client."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_sends_structured_request(self, fake_genai_client):
        """Prompt, system instruction, temperature and schema reach the SDK."""
        backend = GeminiBackend(api_key="k", model="gemini-2.5-pro", client=fake_genai_client)
        result = await backend.generate(
            "Generate a login screen",
            system_prompt="Return JSON.",
            config=GenerationConfig(response_schema=SCREEN_DRAFT_SCHEMA),
        )

        assert result.content == '{"name": "Home", "markup": "<div></div>"}'
        assert result.usage == {"total_tokens": 42}

        request = fake_genai_client.requests[0]
        assert request["model"] == "gemini-2.5-pro"
        assert request["contents"][0].parts[0].text == "Generate a login screen"
        config = request["config"]
        assert config.system_instruction == "Return JSON."
        assert config.temperature == 0.3
        assert config.response_mime_type == "application/json"
        assert config.response_schema is not None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_appends_inline_image_parts(self, fake_genai_client):
        """Reference parts follow the text part as inline data."""
        raw = b"\x89PNG fake image"
        part = ReferencePart(data=base64.b64encode(raw).decode(), mime_type="image/jpeg")
        backend = GeminiBackend(api_key="k", client=fake_genai_client)

        await backend.generate("prompt", reference_parts=[part])

        parts = fake_genai_client.requests[0]["contents"][0].parts
        assert len(parts) == 2
        assert parts[1].inline_data.mime_type == "image/jpeg"
        assert parts[1].inline_data.data == raw

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_free_text_request_has_no_json_mode(self, fake_genai_client):
        """Without JSON mode no mime type or schema is requested."""
        backend = GeminiBackend(api_key="k", client=fake_genai_client)
        await backend.generate(
            "Refine app idea", config=GenerationConfig(temperature=None, json_mode=False)
        )
        assert fake_genai_client.requests[0]["config"] is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_missing_text_returns_empty_string(self, fake_genai_client):
        """A response without text yields empty content."""
        fake_genai_client.text = None
        backend = GeminiBackend(api_key="k", client=fake_genai_client)
        result = await backend.generate("prompt")
        assert result.content == ""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_invalid_base64_part_raises(self, fake_genai_client):
        """Undecodable reference data fails before the request."""
        backend = GeminiBackend(api_key="k", client=fake_genai_client)
        with pytest.raises(LLMError, match="base64"):
            await backend.generate("prompt", reference_parts=[ReferencePart(data="%%%")])
        assert fake_genai_client.requests == []

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_line_wrapped_base64_part_accepted(self, fake_genai_client):
        """MIME-style base64 with line breaks decodes to the original bytes."""
        raw = b"x" * 100
        wrapped = base64.encodebytes(raw).decode()
        assert "\n" in wrapped.strip()
        backend = GeminiBackend(api_key="k", client=fake_genai_client)

        await backend.generate("prompt", reference_parts=[ReferencePart(data=wrapped)])

        parts = fake_genai_client.requests[0]["contents"][0].parts
        assert parts[1].inline_data.data == raw

    @pytest.mark.unit
    @pytest.mark.asyncio
    @pytest.mark.parametrize("blank", ["", "   "])
    async def test_blank_key_ignores_environment_keys(self, monkeypatch, blank):
        """A blank key is rejected instead of using SDK environment keys."""
        monkeypatch.setenv("GOOGLE_API_KEY", "ambient-secret")
        monkeypatch.setenv("GEMINI_API_KEY", "ambient-secret")
        backend = GeminiBackend(api_key=blank)

        with pytest.raises(AuthenticationError, match="empty key"):
            await backend.generate("prompt")
        assert backend._client is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_key_errors_become_authentication_errors(self, fake_genai_client):
        """Errors naming the API key are surfaced as AuthenticationError."""
        fake_genai_client.error = RuntimeError("API key not valid. Please pass a valid API key.")
        backend = GeminiBackend(api_key="bad", client=fake_genai_client)
        with pytest.raises(AuthenticationError) as exc_info:
            await backend.generate("prompt")
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_other_errors_wrapped(self, fake_genai_client):
        """Unexpected SDK failures are wrapped in LLMError."""
        fake_genai_client.error = RuntimeError("connection reset")
        backend = GeminiBackend(api_key="k", client=fake_genai_client)
        with pytest.raises(LLMError, match="connection reset"):
            await backend.generate("prompt")

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_api_status_errors_become_transport_errors(self, fake_genai_client):
        """API errors with a status code keep the code."""
        from google.genai import errors as genai_errors

        fake_genai_client.error = genai_errors.ServerError(
            500, {"error": {"code": 500, "message": "internal", "status": "INTERNAL"}}
        )
        backend = GeminiBackend(api_key="k", client=fake_genai_client)
        with pytest.raises(TransportError) as exc_info:
            await backend.generate("prompt")
        assert exc_info.value.status_code == 500


class TestOpenRouterBackend:
    """Tests for OpenRouterBackend over a mocked HTTP transport."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_posts_chat_completion(self, openrouter_stub):
        """The request hits the chat endpoint with bearer auth and JSON mode."""
        backend = OpenRouterBackend(
            api_key="sk-or-test", model="openai/gpt-4o", http_client=openrouter_stub.client()
        )
        result = await backend.generate(
            'USER REQUEST: "todo app"',
            system_prompt="Return JSON.",
            config=GenerationConfig(response_schema=SCREEN_DRAFT_SCHEMA),
        )

        assert result.content == '{"name": "Home", "markup": "<div></div>"}'
        assert result.usage["total_tokens"] == 15

        request = openrouter_stub.requests[0]
        assert request.method == "POST"
        assert str(request.url) == f"{OPENROUTER_BASE_URL}/chat/completions"
        assert request.headers["Authorization"] == "Bearer sk-or-test"

        body = openrouter_stub.last_json
        assert body["model"] == "openai/gpt-4o"
        assert body["messages"] == [
            {"role": "system", "content": "Return JSON."},
            {"role": "user", "content": 'USER REQUEST: "todo app"'},
        ]
        assert body["response_format"] == {"type": "json_object"}

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_free_text_omits_response_format(self, openrouter_stub):
        """Free-text requests do not ask for JSON."""
        backend = OpenRouterBackend(
            api_key="k", model="openai/gpt-4o", http_client=openrouter_stub.client()
        )
        await backend.generate("prompt", config=GenerationConfig(json_mode=False))
        assert "response_format" not in openrouter_stub.last_json

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_error_status_surfaces_body(self, openrouter_stub):
        """A 500 response raises TransportError quoting the raw body."""
        openrouter_stub.status_code = 500
        openrouter_stub.body = "rate limited"
        backend = OpenRouterBackend(
            api_key="k", model="openai/gpt-4o", http_client=openrouter_stub.client()
        )

        with pytest.raises(TransportError) as exc_info:
            await backend.generate("prompt")

        assert str(exc_info.value) == "OpenRouter Error: rate limited"
        assert exc_info.value.status_code == 500
        assert exc_info.value.body == "rate limited"
        assert len(openrouter_stub.requests) == 1

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_unauthorized_is_transport_error(self, openrouter_stub):
        """Rejected keys surface as a status error with the provider body."""
        openrouter_stub.status_code = 401
        openrouter_stub.body = '{"error": {"message": "No auth credentials found"}}'
        backend = OpenRouterBackend(
            api_key="bad", model="openai/gpt-4o", http_client=openrouter_stub.client()
        )
        with pytest.raises(TransportError, match="No auth credentials found"):
            await backend.generate("prompt")

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_reference_parts_dropped(self, openrouter_stub, caplog):
        """Reference parts are not sent and a warning is logged."""
        backend = OpenRouterBackend(
            api_key="k", model="openai/gpt-4o", http_client=openrouter_stub.client()
        )
        with caplog.at_level("WARNING", logger="uiforge.llm.backend.openrouter"):
            await backend.generate("prompt", reference_parts=[ReferencePart(data="AAAA")])

        assert "dropping 1" in caplog.text
        assert len(openrouter_stub.last_json["messages"]) == 2


class TestProviderTransport:
    """Tests for ProviderTransport routing and request shaping."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_returns_raw_text(self, backend_factory, default_api_key):
        """The transport returns provider text without parsing it."""
        backend_factory.content = "not json"
        transport = ProviderTransport(default_api_key, backend_factory=backend_factory)

        text = await transport.call("sys", "user", SCREEN_DRAFT_SCHEMA, None)

        assert text == "not json"
        assert backend_factory.backends[0].closed

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_schema_enables_json_mode(self, backend_factory, default_api_key):
        """A response schema requests JSON mode at temperature 0.3."""
        transport = ProviderTransport(default_api_key, backend_factory=backend_factory)
        await transport.call("sys", "user", SCREEN_DRAFT_SCHEMA, "gemini-2.5-pro")

        call = backend_factory.last_call
        assert call.prompt == "user"
        assert call.system_prompt == "sys"
        assert call.config.json_mode
        assert call.config.response_schema is SCREEN_DRAFT_SCHEMA
        assert call.config.temperature == 0.3

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_free_text_disables_json_mode(self, backend_factory, default_api_key):
        """No schema means no JSON mode and no system slot."""
        transport = ProviderTransport(default_api_key, backend_factory=backend_factory)
        await transport.call("", "user", None, None, temperature=None)

        call = backend_factory.last_call
        assert call.system_prompt is None
        assert not call.config.json_mode
        assert call.config.temperature is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_openrouter_without_key_routes_to_gemini(
        self, backend_factory, default_api_key
    ):
        """OpenRouter requested without a key reaches Gemini with the default key."""
        transport = ProviderTransport(default_api_key, backend_factory=backend_factory)
        await transport.call(
            "sys", "user", None, "openai/gpt-4o", api_key="", provider="openrouter"
        )

        route = backend_factory.last_route
        assert route.provider == ProviderName.GEMINI
        assert route.model == DEFAULT_MODEL
        assert route.api_key == default_api_key

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_backend_closed_on_error(self, backend_factory, default_api_key):
        """Backends are closed even when generation fails."""
        backend_factory.error = TransportError("OpenRouter Error: boom", 502, "boom")
        transport = ProviderTransport(default_api_key, backend_factory=backend_factory)

        with pytest.raises(TransportError):
            await transport.call("sys", "user", None, "m", api_key="k", provider="openrouter")
        assert backend_factory.backends[0].closed

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_end_to_end_openrouter(self, openrouter_stub):
        """A caller key on the OpenRouter route reaches the HTTP endpoint."""
        http_client = openrouter_stub.client()

        def factory(route):
            return OpenRouterBackend(route.api_key, route.model, http_client=http_client)

        transport = ProviderTransport("", backend_factory=factory)
        text = await transport.call(
            "sys", "user", SCREEN_DRAFT_SCHEMA, "openai/gpt-4o",
            api_key="sk-or-caller", provider=ProviderName.OPENROUTER,
        )

        assert text == '{"name": "Home", "markup": "<div></div>"}'
        assert openrouter_stub.requests[0].headers["Authorization"] == "Bearer sk-or-caller"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_prompt_logging(self, backend_factory, default_api_key, caplog):
        """Composed prompts are logged at debug only when enabled."""
        transport = ProviderTransport(
            default_api_key, backend_factory=backend_factory, log_prompts=True
        )
        with caplog.at_level("DEBUG", logger="uiforge.llm.backend.transport"):
            await transport.call("SYSTEM TEXT", "USER TEXT", None, None)

        assert "SYSTEM TEXT" in caplog.text
        assert "USER TEXT" in caplog.text
        assert default_api_key not in caplog.text
