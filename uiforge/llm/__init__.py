"""LLM integration layer for UI mockup generation.

This module turns natural language product descriptions into UI project
documents by calling a generative model and validating its JSON.

Main components:
- MockupGenerator: Orchestrates prompt building, provider calls, and validation
- ProviderTransport: Routes one request to a provider and returns raw text
- LLMBackend: Abstract interface for providers

Supported providers:
- Google Gemini (default credential and model)
- OpenRouter (caller-supplied key only)

Example:
    >>> from uiforge.llm import MockupGenerator
    >>> generator = MockupGenerator.from_environment()
    >>> project = await generator.generate_product_artifacts(
    ...     "a habit tracker app", "dark", {"architecture": "app"}
    ... )

    >>> # Caller key on OpenRouter
    >>> draft = await generator.generate_new_screen(
    ...     "Settings", project.design_system, "app",
    ...     {"overview": project.overview, "existingScreens": project.screens},
    ...     model="anthropic/claude-3.5-sonnet", api_key="sk-or-...",
    ...     provider="openrouter",
    ... )
"""

from .backend import (
    DEFAULT_MODEL,
    AuthenticationError,
    GenerationConfig,
    GenerationResult,
    InvalidResponseError,
    LLMBackend,
    LLMError,
    ProviderRoute,
    ProviderTransport,
    SchemaViolationError,
    TransportError,
    UnsupportedAssetError,
    create_llm_backend,
    resolve_provider_route,
)
from .generator import ArtifactRequest, MockupGenerator, ProjectContext

__all__ = [
    # Main API
    "MockupGenerator",
    "ArtifactRequest",
    "ProjectContext",
    # Routing
    "ProviderTransport",
    "ProviderRoute",
    "resolve_provider_route",
    "create_llm_backend",
    # Backend types
    "LLMBackend",
    "GenerationConfig",
    "GenerationResult",
    # Defaults
    "DEFAULT_MODEL",
    # Exceptions
    "LLMError",
    "TransportError",
    "AuthenticationError",
    "InvalidResponseError",
    "SchemaViolationError",
    "UnsupportedAssetError",
]
