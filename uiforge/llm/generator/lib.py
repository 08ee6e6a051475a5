"""MockupGenerator orchestrator for LLM-powered UI mockup generation.

Integrates PromptBuilder, the provider transport and boundary validation to
produce typed project documents and screen drafts from natural language.
"""

from __future__ import annotations

import logging
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from uiforge.config import EnvVar, get_default_api_key, get_environment
from uiforge.project import (
    Architecture,
    ChatMessage,
    DesignSystem,
    Overview,
    ProjectDocument,
    ProviderName,
    ReferenceAsset,
    ScreenDefinition,
    ScreenDraft,
    Theme,
)
from uiforge.prompt import PromptBuilder
from uiforge.schema import PROJECT_RESPONSE_SCHEMA, SCREEN_DRAFT_SCHEMA
from uiforge.validation import (
    DocumentT,
    ValidationResult,
    validate_project_document,
    validate_screen_draft,
)

from ..backend import (
    BackendFactory,
    InvalidResponseError,
    ProviderTransport,
    SchemaViolationError,
)
from ..backend.factory import DEFAULT_MODEL
from .assets import to_reference_parts

logger = logging.getLogger(__name__)


# =============================================================================
# Request Bundles
# =============================================================================


class _RequestModel(BaseModel):
    """Base for caller-supplied bundles: camelCase or snake_case keys, no extras."""

    model_config = ConfigDict(
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )


class ArtifactRequest(_RequestModel):
    """Options for full project generation.

    Attributes:
        architecture: Target platform.
        reference_assets: Images shown to the model alongside the prompt.
        chat_history: Conversation so far.
        existing_screens: Prior screens to carry over in an incremental update.
        model: Model override. None selects the default model.
        api_key: Caller credential. Blank selects the default credential.
        provider: Requested provider.
    """

    architecture: Architecture
    reference_assets: list[ReferenceAsset] = Field(default_factory=list)
    chat_history: list[ChatMessage] = Field(default_factory=list)
    existing_screens: list[ScreenDefinition] | None = None
    model: str | None = None
    api_key: str | None = None
    provider: ProviderName = ProviderName.GEMINI


class ProjectContext(_RequestModel):
    """Project state a new screen must stay consistent with."""

    overview: Overview
    existing_screens: list[ScreenDefinition] = Field(default_factory=list)
    chat_history: list[ChatMessage] | None = None


# =============================================================================
# Generator
# =============================================================================


class MockupGenerator:
    """Orchestrates LLM-based UI mockup generation.

    Each operation composes a prompt, performs exactly one provider call and
    validates the response before returning it. No state is kept between
    calls; concurrent use from several tasks is safe.

    Pipeline:
        1. Build the system instruction and user prompt
        2. Route to a provider and fetch the raw text
        3. Parse and validate against the operation's document model
        4. Return the typed document

    Example:
        >>> generator = MockupGenerator.from_environment()
        >>> project = await generator.generate_product_artifacts(
        ...     "a habit tracker app", Theme.DARK, {"architecture": "app"}
        ... )
        >>> [screen.name for screen in project.screens]
        ['Home', 'Stats']

        >>> # Explicit credential, e.g. in tests
        >>> generator = MockupGenerator(default_api_key="test-key")
    """

    def __init__(
        self,
        default_api_key: str = "",
        *,
        transport: ProviderTransport | None = None,
        backend_factory: BackendFactory | None = None,
        prompt_builder: PromptBuilder | None = None,
        openrouter_base_url: str | None = None,
        log_prompts: bool = False,
    ):
        """Initialize MockupGenerator.

        Args:
            default_api_key: Credential used whenever a call supplies none.
            transport: Preconfigured transport. Built from the other
                arguments if None.
            backend_factory: Backend factory for the default transport.
            prompt_builder: Prompt builder. Creates default if None.
            openrouter_base_url: Optional custom OpenRouter endpoint.
            log_prompts: Debug-log composed prompts.
        """
        self._transport = transport or ProviderTransport(
            default_api_key,
            openrouter_base_url=openrouter_base_url,
            backend_factory=backend_factory,
            log_prompts=log_prompts,
        )
        self._prompts = prompt_builder or PromptBuilder()

    @classmethod
    def from_environment(cls, **kwargs: Any) -> MockupGenerator:
        """Create a generator configured from environment variables.

        Loads a ``.env`` file if present (existing variables win), then reads
        API_KEY, OPENROUTER_BASE_URL and UIFORGE_LOG_PROMPTS once. Keyword
        arguments take precedence over the environment.
        """
        load_dotenv()
        kwargs.setdefault("default_api_key", get_default_api_key())
        kwargs.setdefault("openrouter_base_url", get_environment(EnvVar.OPENROUTER_BASE_URL))
        kwargs.setdefault("log_prompts", get_environment(EnvVar.UIFORGE_LOG_PROMPTS))
        return cls(**kwargs)

    @property
    def transport(self) -> ProviderTransport:
        """Get the provider transport."""
        return self._transport

    async def generate_product_artifacts(
        self,
        prompt: str,
        theme: Theme | str,
        config: ArtifactRequest | dict[str, Any],
    ) -> ProjectDocument:
        """Generate a complete project document.

        Args:
            prompt: Natural language product description.
            theme: Mandatory color mode ("light" or "dark").
            config: ArtifactRequest or an equivalent dict (camelCase or
                snake_case keys; unknown keys are rejected).

        Returns:
            Validated ProjectDocument.

        Raises:
            pydantic.ValidationError: If the request bundle is malformed.
            UnsupportedAssetError: If a reference asset is not an image.
            InvalidResponseError: If the response is not JSON.
            SchemaViolationError: If the response breaks the document contract.
            LLMError: Any provider failure.
        """
        request = ArtifactRequest.model_validate(config)
        theme = Theme(theme)
        reference_parts = to_reference_parts(request.reference_assets)

        pair = self._prompts.build_artifact_prompt(
            prompt,
            theme,
            request.architecture,
            existing_screens=request.existing_screens,
            chat_history=request.chat_history,
        )

        logger.info(
            f"Generating project: theme={theme.value}, "
            f"architecture={request.architecture.value}, "
            f"existing_screens={len(request.existing_screens or [])}, "
            f"reference_parts={len(reference_parts)}"
        )

        text = await self._transport.call(
            pair.system_instruction,
            pair.user_prompt,
            PROJECT_RESPONSE_SCHEMA,
            request.model or DEFAULT_MODEL,
            api_key=request.api_key,
            provider=request.provider,
            reference_parts=reference_parts,
        )

        document = self._unwrap(validate_project_document(text), "project document")
        logger.info(
            f"Generated project '{document.overview.name}' "
            f"with {len(document.screens)} screen(s)"
        )
        return document

    async def generate_new_screen(
        self,
        purpose: str,
        design_system: DesignSystem | dict[str, Any],
        architecture: Architecture | str,
        project_context: ProjectContext | dict[str, Any],
        model: str | None = None,
        api_key: str | None = None,
        provider: ProviderName | str = ProviderName.GEMINI,
    ) -> ScreenDraft:
        """Generate one new screen consistent with an existing project.

        Existing screens are read as context only and are never modified.

        Args:
            purpose: What the new screen is for.
            design_system: Tokens the screen must use.
            architecture: Target platform. Validated; the screen prompt
                relies on the navigation of the existing screens instead.
            project_context: Overview and existing screens.
            model: Model override.
            api_key: Caller credential.
            provider: Requested provider.

        Returns:
            ScreenDraft without an id; the caller assigns one.
        """
        design_system = DesignSystem.model_validate(design_system)
        architecture = Architecture(architecture)
        context = ProjectContext.model_validate(project_context)

        pair = self._prompts.build_new_screen_prompt(
            purpose,
            design_system,
            context.overview,
            context.existing_screens,
        )

        logger.info(
            f"Generating screen for '{context.overview.name}' "
            f"({architecture.value}, {len(context.existing_screens)} existing)"
        )

        text = await self._transport.call(
            pair.system_instruction,
            pair.user_prompt,
            SCREEN_DRAFT_SCHEMA,
            model or DEFAULT_MODEL,
            api_key=api_key,
            provider=provider,
        )
        return self._unwrap(validate_screen_draft(text), "screen")

    async def modify_screen(
        self,
        screen_name: str,
        current_markup: str,
        instruction: str,
        design_system: DesignSystem | dict[str, Any],
        chat_history: list[ChatMessage] | list[dict[str, Any]] | None = None,
        model: str | None = None,
        api_key: str | None = None,
        provider: ProviderName | str = ProviderName.GEMINI,
    ) -> ScreenDraft:
        """Rewrite one screen's markup according to an instruction.

        Args:
            screen_name: Name of the screen being refined.
            current_markup: Markup to refine, quoted verbatim in the prompt.
            instruction: Requested change.
            design_system: Validated but not included in the prompt; the
                current markup already carries the tokens.
            chat_history: Conversation so far.
            model: Model override.
            api_key: Caller credential.
            provider: Requested provider.

        Returns:
            ScreenDraft replacing the screen entirely.
        """
        DesignSystem.model_validate(design_system)
        history = [ChatMessage.model_validate(message) for message in chat_history or []]

        pair = self._prompts.build_modify_prompt(
            screen_name,
            current_markup,
            instruction,
            chat_history=history,
        )

        logger.info(f"Modifying screen '{screen_name}'")

        text = await self._transport.call(
            pair.system_instruction,
            pair.user_prompt,
            SCREEN_DRAFT_SCHEMA,
            model or DEFAULT_MODEL,
            api_key=api_key,
            provider=provider,
        )
        return self._unwrap(validate_screen_draft(text), "screen")

    async def refine_prompt(self, rough_prompt: str) -> str:
        """Rewrite a rough product idea into a clearer prompt.

        Always uses the default credential and model on Gemini, with no
        schema and no system instruction.

        Returns:
            The refined idea with surrounding whitespace removed.
        """
        pair = self._prompts.build_refine_prompt(rough_prompt)
        text = await self._transport.call(
            pair.system_instruction,
            pair.user_prompt,
            None,
            DEFAULT_MODEL,
            api_key=None,
            provider=ProviderName.GEMINI,
            temperature=None,
        )
        return text.strip()

    def _unwrap(self, result: ValidationResult[DocumentT], label: str) -> DocumentT:
        """Return the validated document or raise the matching error.

        Raises:
            InvalidResponseError: If the text is not JSON.
            SchemaViolationError: If the JSON breaks the document contract.
        """
        if result.json_error is not None:
            logger.error(f"Provider returned non-JSON {label}: {result.raw_text[:200]!r}")
            raise InvalidResponseError(
                f"Cannot parse {label} response as JSON: {result.json_error}"
            ) from result.json_error

        if not result.ok:
            details = result.format_issues()
            logger.error(f"Provider {label} violates the document contract:\n{details}")
            raise SchemaViolationError(
                f"Invalid {label} response:\n{details}", issues=result.issues
            )

        return result.document


__all__ = [
    "MockupGenerator",
    "ArtifactRequest",
    "ProjectContext",
]
