"""Tests for the MockupGenerator orchestrator and asset conversion."""

import asyncio
import json

import pytest
from pydantic import ValidationError

from uiforge.project import (
    ChatMessage,
    ProjectDocument,
    ProviderName,
    ReferenceAsset,
    ScreenDraft,
)
from uiforge.prompt import NO_EXISTING_SCREENS
from uiforge.schema import PROJECT_RESPONSE_SCHEMA, SCREEN_DRAFT_SCHEMA

from ..backend import (
    DEFAULT_MODEL,
    InvalidResponseError,
    SchemaViolationError,
    TransportError,
    UnsupportedAssetError,
)
from .assets import split_data_uri, to_reference_parts
from .lib import ArtifactRequest, MockupGenerator, ProjectContext

SCREEN_JSON = '{"name": "Settings", "markup": "<div class=\\"relative\\">Settings</div>"}'


@pytest.fixture
def generator(backend_factory, default_api_key) -> MockupGenerator:
    """Create a generator backed by the recording backend factory."""
    return MockupGenerator(default_api_key, backend_factory=backend_factory)


class TestSplitDataUri:
    """Tests for data-URI prefix handling."""

    @pytest.mark.unit
    def test_strips_prefix_and_reads_mime(self):
        """The prefix up to the first comma is removed."""
        assert split_data_uri("data:image/jpeg;base64,/9j/4AAQ") == ("image/jpeg", "/9j/4AAQ")

    @pytest.mark.unit
    def test_plain_payload_unchanged(self):
        """Data without a comma is used as-is with the default mime type."""
        assert split_data_uri("iVBORw0KGgo") == ("image/png", "iVBORw0KGgo")

    @pytest.mark.unit
    def test_non_data_prefix_uses_default_mime(self):
        """Any prefix is stripped, but only data URIs declare a mime type."""
        assert split_data_uri("base64,AAAA") == ("image/png", "AAAA")

    @pytest.mark.unit
    def test_empty_declared_mime_uses_default(self):
        """A data URI without a media type falls back to image/png."""
        assert split_data_uri("data:;base64,AAAA") == ("image/png", "AAAA")


class TestToReferenceParts:
    """Tests for reference asset conversion."""

    @pytest.mark.unit
    def test_converts_images(self):
        """Image assets become inline parts."""
        parts = to_reference_parts(
            [
                ReferenceAsset(type="image", data="data:image/webp;base64,UklGR"),
                ReferenceAsset(type="image", data="iVBORw0KGgo", name="logo"),
            ]
        )
        assert [(p.mime_type, p.data) for p in parts] == [
            ("image/webp", "UklGR"),
            ("image/png", "iVBORw0KGgo"),
        ]

    @pytest.mark.unit
    def test_none_gives_no_parts(self):
        """Missing assets produce no parts."""
        assert to_reference_parts(None) == []

    @pytest.mark.unit
    def test_html_rejected(self):
        """html assets cannot be forwarded."""
        assets = [
            ReferenceAsset(type="image", data="AAAA"),
            ReferenceAsset(type="html", data="<div></div>", name="landing"),
        ]
        with pytest.raises(UnsupportedAssetError, match="'landing' of type 'html'"):
            to_reference_parts(assets)


class TestRequestBundles:
    """Tests for closed request bundles."""

    @pytest.mark.unit
    def test_accepts_camel_case_keys(self):
        """Wire-style keys populate the bundle."""
        request = ArtifactRequest.model_validate(
            {"architecture": "web", "apiKey": "k", "existingScreens": [], "provider": "openrouter"}
        )
        assert request.api_key == "k"
        assert request.existing_screens == []
        assert request.provider == ProviderName.OPENROUTER

    @pytest.mark.unit
    def test_rejects_unknown_keys(self):
        """Unknown options fail instead of being ignored."""
        with pytest.raises(ValidationError, match="temperature"):
            ArtifactRequest.model_validate({"architecture": "app", "temperature": 0.9})

    @pytest.mark.unit
    def test_requires_architecture(self):
        """Architecture has no default."""
        with pytest.raises(ValidationError):
            ArtifactRequest.model_validate({})

    @pytest.mark.unit
    def test_project_context_defaults(self, sample_document):
        """Existing screens default to an empty list."""
        context = ProjectContext(overview=sample_document.overview)
        assert context.existing_screens == []
        assert context.chat_history is None


class TestGenerateProductArtifacts:
    """Tests for full project generation."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_habit_tracker_round_trip(
        self, generator, backend_factory, sample_document_dict
    ):
        """A conforming document is returned with no fields dropped or coerced."""
        backend_factory.content = json.dumps(sample_document_dict)

        document = await generator.generate_product_artifacts(
            "a habit tracker app", "dark", {"architecture": "app"}
        )

        assert isinstance(document, ProjectDocument)
        assert document.to_wire() == sample_document_dict
        assert [screen.id for screen in document.screens] == ["home", "stats"]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_composes_prompts(self, generator, backend_factory, sample_document_dict):
        """Theme, architecture and the request reach the provider."""
        backend_factory.content = json.dumps(sample_document_dict)

        await generator.generate_product_artifacts(
            "a habit tracker app", "dark", {"architecture": "app"}
        )

        call = backend_factory.last_call
        assert call.prompt == 'USER REQUEST: "a habit tracker app"'
        assert "rendered in DARK MODE" in call.system_prompt
        assert "Architecture: APP." in call.system_prompt
        assert "Return ENTIRE project state" in call.system_prompt
        assert NO_EXISTING_SCREENS in call.system_prompt
        assert call.config.response_schema is PROJECT_RESPONSE_SCHEMA
        assert call.config.temperature == 0.3

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_default_route(
        self, generator, backend_factory, default_api_key, sample_document_dict
    ):
        """Without overrides the default key and model on Gemini are used."""
        backend_factory.content = json.dumps(sample_document_dict)

        await generator.generate_product_artifacts("todo", "light", {"architecture": "web"})

        route = backend_factory.last_route
        assert route.provider == ProviderName.GEMINI
        assert route.model == DEFAULT_MODEL
        assert route.api_key == default_api_key

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_existing_screens_listed_verbatim(
        self, generator, backend_factory, sample_document, sample_document_dict
    ):
        """Prior screens appear by name, id and exact markup."""
        backend_factory.content = json.dumps(sample_document_dict)

        await generator.generate_product_artifacts(
            "add a profile",
            "dark",
            ArtifactRequest(architecture="app", existing_screens=sample_document.screens),
        )

        system_prompt = backend_factory.last_call.system_prompt
        for screen in sample_document.screens:
            assert f"SCREEN: {screen.name} (ID: {screen.id})\nMARKUP:\n{screen.markup}" in system_prompt
        assert NO_EXISTING_SCREENS not in system_prompt

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_chat_history_included(self, generator, backend_factory, sample_document_dict):
        """Chat turns are rendered as ROLE: content lines."""
        backend_factory.content = json.dumps(sample_document_dict)

        await generator.generate_product_artifacts(
            "todo",
            "dark",
            {
                "architecture": "app",
                "chatHistory": [
                    {"role": "user", "content": "Make it purple"},
                    {"role": "assistant", "content": "Done"},
                ],
            },
        )

        assert "USER: Make it purple\nASSISTANT: Done" in backend_factory.last_call.system_prompt

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_image_assets_forwarded(self, generator, backend_factory, sample_document_dict):
        """Image assets are sent as inline parts without their prefix."""
        backend_factory.content = json.dumps(sample_document_dict)

        await generator.generate_product_artifacts(
            "todo",
            "dark",
            {
                "architecture": "app",
                "referenceAssets": [{"type": "image", "data": "data:image/jpeg;base64,/9j/AA"}],
            },
        )

        parts = backend_factory.last_call.reference_parts
        assert len(parts) == 1
        assert parts[0].data == "/9j/AA"
        assert parts[0].mime_type == "image/jpeg"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_html_asset_rejected_before_call(self, generator, backend_factory):
        """html assets fail before any provider is contacted."""
        with pytest.raises(UnsupportedAssetError):
            await generator.generate_product_artifacts(
                "todo",
                "dark",
                {"architecture": "app", "referenceAssets": [{"type": "html", "data": "<div/>"}]},
            )
        assert backend_factory.routes == []

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_unknown_config_key_rejected(self, generator, backend_factory):
        """Malformed bundles fail before any provider is contacted."""
        with pytest.raises(ValidationError):
            await generator.generate_product_artifacts(
                "todo", "dark", {"architecture": "app", "screens": []}
            )
        assert backend_factory.routes == []

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_not_json_raises(self, generator, backend_factory):
        """Non-JSON text raises InvalidResponseError chained to the decode error."""
        backend_factory.content = "not json"

        with pytest.raises(InvalidResponseError) as exc_info:
            await generator.generate_product_artifacts("todo", "dark", {"architecture": "app"})

        assert not isinstance(exc_info.value, SchemaViolationError)
        assert isinstance(exc_info.value.__cause__, json.JSONDecodeError)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_missing_fields_raise_schema_violation(
        self, generator, backend_factory, sample_document_dict
    ):
        """A document without screens violates the contract."""
        del sample_document_dict["screens"]
        backend_factory.content = json.dumps(sample_document_dict)

        with pytest.raises(SchemaViolationError) as exc_info:
            await generator.generate_product_artifacts("todo", "dark", {"architecture": "app"})

        assert [issue.location for issue in exc_info.value.issues] == ["screens"]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_values_not_coerced(self, generator, backend_factory, sample_document_dict):
        """A number where markup is expected is rejected, not converted."""
        sample_document_dict["screens"][0]["markup"] = 42
        backend_factory.content = json.dumps(sample_document_dict)

        with pytest.raises(SchemaViolationError) as exc_info:
            await generator.generate_product_artifacts("todo", "dark", {"architecture": "app"})

        assert exc_info.value.issues[0].location == "screens.0.markup"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_extra_keys_preserved(self, generator, backend_factory, sample_document_dict):
        """Connections and unknown keys survive the round trip."""
        sample_document_dict["connections"] = [{"from": "home", "to": "stats", "label": "View"}]
        sample_document_dict["screens"][0]["position"] = {"x": 0.0, "y": 120.5}
        sample_document_dict["version"] = "2"
        backend_factory.content = json.dumps(sample_document_dict)

        document = await generator.generate_product_artifacts(
            "todo", "dark", {"architecture": "app"}
        )

        assert document.connections[0].source == "home"
        assert document.to_wire() == sample_document_dict

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_transport_errors_propagate(self, generator, backend_factory):
        """Provider failures reach the caller unchanged."""
        backend_factory.error = TransportError("OpenRouter Error: rate limited", 500, "rate limited")

        with pytest.raises(TransportError, match="rate limited"):
            await generator.generate_product_artifacts(
                "todo",
                "dark",
                {"architecture": "app", "apiKey": "k", "provider": "openrouter", "model": "x/y"},
            )

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_concurrent_calls_independent(
        self, generator, backend_factory, sample_document_dict
    ):
        """Concurrent operations share no state."""
        backend_factory.content = json.dumps(sample_document_dict)

        first, second = await asyncio.gather(
            generator.generate_product_artifacts("a", "dark", {"architecture": "app"}),
            generator.generate_product_artifacts("b", "light", {"architecture": "web"}),
        )

        assert first == second
        prompts = sorted(backend.calls[0].prompt for backend in backend_factory.backends)
        assert prompts == ['USER REQUEST: "a"', 'USER REQUEST: "b"']


class TestGenerateNewScreen:
    """Tests for single-screen generation."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_returns_screen_draft(self, generator, backend_factory, sample_document):
        """The response is parsed into a ScreenDraft."""
        backend_factory.content = SCREEN_JSON

        draft = await generator.generate_new_screen(
            "Account settings",
            sample_document.design_system,
            "app",
            ProjectContext(overview=sample_document.overview, existing_screens=sample_document.screens),
        )

        assert draft == ScreenDraft(name="Settings", markup='<div class="relative">Settings</div>')

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_composes_prompt(self, generator, backend_factory, sample_document):
        """Project name, purpose, screens and design system are in the prompt."""
        backend_factory.content = SCREEN_JSON

        await generator.generate_new_screen(
            "Account settings",
            sample_document.design_system,
            "app",
            {"overview": sample_document.overview, "existingScreens": sample_document.screens},
        )

        call = backend_factory.last_call
        assert call.system_prompt == "Elite UI/UX engineer. Return JSON."
        assert 'Generate ONE new screen for "Streak".' in call.prompt
        assert "PURPOSE: Account settings" in call.prompt
        for screen in sample_document.screens:
            assert f"SCREEN: {screen.name}\n{screen.markup}" in call.prompt
        assert '"primary": "#7C3AED"' in call.prompt
        assert call.config.response_schema is SCREEN_DRAFT_SCHEMA

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_existing_screens_untouched(self, generator, backend_factory, sample_document):
        """Feeding screens back in is purely additive context."""
        backend_factory.content = SCREEN_JSON
        before = sample_document.model_dump(by_alias=True)

        await generator.generate_new_screen(
            "Account settings",
            sample_document.design_system,
            "app",
            {"overview": sample_document.overview, "existingScreens": sample_document.screens},
        )

        assert sample_document.model_dump(by_alias=True) == before
        assert len(sample_document.screens) == 2

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_caller_key_routes_to_openrouter(self, generator, backend_factory, sample_document):
        """A caller key keeps the requested provider and model."""
        backend_factory.content = SCREEN_JSON

        await generator.generate_new_screen(
            "Settings",
            sample_document.design_system,
            "web",
            {"overview": sample_document.overview},
            model="anthropic/claude-3.5-sonnet",
            api_key="sk-or-user",
            provider="openrouter",
        )

        route = backend_factory.last_route
        assert route.provider == ProviderName.OPENROUTER
        assert route.model == "anthropic/claude-3.5-sonnet"
        assert route.api_key == "sk-or-user"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_openrouter_without_key_falls_back(
        self, generator, backend_factory, default_api_key, sample_document
    ):
        """OpenRouter without a key is served by Gemini with the default model."""
        backend_factory.content = SCREEN_JSON

        await generator.generate_new_screen(
            "Settings",
            sample_document.design_system,
            "web",
            {"overview": sample_document.overview},
            model="anthropic/claude-3.5-sonnet",
            api_key="  ",
            provider="openrouter",
        )

        route = backend_factory.last_route
        assert route.provider == ProviderName.GEMINI
        assert route.model == DEFAULT_MODEL
        assert route.api_key == default_api_key

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_missing_markup_rejected(self, generator, backend_factory, sample_document):
        """A draft without markup violates the contract."""
        backend_factory.content = '{"name": "Settings"}'

        with pytest.raises(SchemaViolationError) as exc_info:
            await generator.generate_new_screen(
                "Settings", sample_document.design_system, "app",
                {"overview": sample_document.overview},
            )
        assert exc_info.value.issues[0].location == "markup"


class TestModifyScreen:
    """Tests for screen refinement."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_composes_prompt(self, generator, backend_factory, sample_document):
        """Instruction, chat context and verbatim markup are in the prompt."""
        backend_factory.content = SCREEN_JSON
        screen = sample_document.screens[0]

        draft = await generator.modify_screen(
            screen.name,
            screen.markup,
            "Add a streak counter",
            sample_document.design_system,
            chat_history=[ChatMessage(role="user", content="Keep the tabs")],
        )

        call = backend_factory.last_call
        assert call.system_prompt == "Refine this screen while maintaining structure."
        assert "Refine screen: Home" in call.prompt
        assert "INSTRUCTION: Add a streak counter" in call.prompt
        assert "USER: Keep the tabs" in call.prompt
        assert call.prompt.endswith(f"CURRENT MARKUP:\n{screen.markup}\n")
        assert draft.name == "Settings"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_design_system_not_in_prompt(self, generator, backend_factory, sample_document):
        """The design system is validated but not sent."""
        backend_factory.content = SCREEN_JSON

        await generator.modify_screen(
            "Home", "<div></div>", "Darker", sample_document.design_system
        )

        assert "#7C3AED" not in backend_factory.last_call.prompt

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_invalid_design_system_rejected(self, generator, backend_factory):
        """A malformed design system fails before any provider call."""
        with pytest.raises(ValidationError):
            await generator.modify_screen("Home", "<div></div>", "Darker", {"font": "Inter"})
        assert backend_factory.routes == []

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_dict_chat_history(self, generator, backend_factory, sample_design_system):
        """Chat history may be given as plain dicts."""
        backend_factory.content = SCREEN_JSON

        await generator.modify_screen(
            "Home", "<div></div>", "Darker", sample_design_system,
            chat_history=[{"role": "assistant", "content": "Sure"}],
        )

        assert "ASSISTANT: Sure" in backend_factory.last_call.prompt


class TestRefinePrompt:
    """Tests for free-text idea refinement."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_returns_stripped_text(self, generator, backend_factory):
        """Surrounding whitespace is removed from the answer."""
        backend_factory.content = "  A habit tracker with streaks and reminders.\n"

        text = await generator.refine_prompt("habits app")

        assert text == "A habit tracker with streaks and reminders."

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_uses_default_route_and_free_text(
        self, generator, backend_factory, default_api_key
    ):
        """Refinement always uses the default credential and model on Gemini."""
        backend_factory.content = "refined"

        await generator.refine_prompt("habits app")

        route = backend_factory.last_route
        assert route.provider == ProviderName.GEMINI
        assert route.model == DEFAULT_MODEL
        assert route.api_key == default_api_key

        call = backend_factory.last_call
        assert call.prompt == 'Refine app idea: "habits app"'
        assert call.system_prompt is None
        assert not call.config.json_mode
        assert call.config.response_schema is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_non_json_text_accepted(self, generator, backend_factory):
        """Free text is never parsed."""
        backend_factory.content = "not json"
        assert await generator.refine_prompt("x") == "not json"


class TestFromEnvironment:
    """Tests for environment-based construction."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_reads_default_key(self, monkeypatch, backend_factory):
        """API_KEY becomes the injected default credential."""
        monkeypatch.setenv("API_KEY", "env-key")
        generator = MockupGenerator.from_environment(backend_factory=backend_factory)
        monkeypatch.setenv("API_KEY", "changed-later")

        backend_factory.content = "ok"
        await generator.refine_prompt("x")

        assert backend_factory.last_route.api_key == "env-key"

    @pytest.mark.unit
    def test_keyword_overrides_environment(self, monkeypatch):
        """Explicit arguments win over the environment."""
        monkeypatch.setenv("API_KEY", "env-key")
        generator = MockupGenerator.from_environment(default_api_key="explicit")
        assert generator.transport.resolve(None).api_key == "explicit"
