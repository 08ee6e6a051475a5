"""Provider routing and backend construction.

Decides which provider, model and credential serve a request, then builds
the matching backend. Routing is a pure function of its inputs so the
precedence rules can be tested without any network access.
"""

from __future__ import annotations

from dataclasses import dataclass

from uiforge.project import ProviderName

from .base import LLMBackend
from .gemini import DEFAULT_GEMINI_MODEL

DEFAULT_MODEL = DEFAULT_GEMINI_MODEL
CUSTOM_MODEL_SENTINEL = "custom"


@dataclass(frozen=True)
class ProviderRoute:
    """Resolved destination of one provider call.

    Attributes:
        provider: Backend that will serve the call.
        model: Model identifier sent to the backend.
        api_key: Credential sent to the backend.
        uses_default_key: True when the caller supplied no usable key.
    """

    provider: ProviderName
    model: str
    api_key: str
    uses_default_key: bool

    def describe(self) -> str:
        """Loggable summary that never includes the credential."""
        source = "default" if self.uses_default_key else "caller"
        return f"{self.provider.value}:{self.model} (key={source})"


def _is_gemini_incompatible(model_name: str) -> bool:
    """Check whether a model name can only be served by another provider."""
    return "/" in model_name or model_name == CUSTOM_MODEL_SENTINEL


def resolve_provider_route(
    model_name: str | None,
    api_key: str | None,
    provider: ProviderName | str,
    default_api_key: str,
) -> ProviderRoute:
    """Apply credential and provider precedence.

    A caller key (non-empty after trimming) is used with the caller's
    provider and model verbatim. Otherwise the default key is used and the
    provider is forced to Gemini; OpenRouter-style names ("vendor/model")
    and the "custom" sentinel are then replaced by the default model.

    Args:
        model_name: Requested model. None selects the default model.
        api_key: Caller-supplied credential, possibly blank.
        provider: Requested provider.
        default_api_key: Injected default credential.

    Returns:
        ProviderRoute for the call.

    Example:
        >>> route = resolve_provider_route("openai/gpt-4o", "", "openrouter", "k")
        >>> route.provider, route.model
        (<ProviderName.GEMINI: 'gemini'>, 'gemini-3-flash-preview')
    """
    model = model_name or DEFAULT_MODEL

    if api_key and api_key.strip():
        return ProviderRoute(
            provider=ProviderName(provider),
            model=model,
            api_key=api_key,
            uses_default_key=False,
        )

    if _is_gemini_incompatible(model):
        model = DEFAULT_MODEL

    return ProviderRoute(
        provider=ProviderName.GEMINI,
        model=model,
        api_key=default_api_key,
        uses_default_key=True,
    )


def create_llm_backend(
    route: ProviderRoute,
    *,
    openrouter_base_url: str | None = None,
) -> LLMBackend:
    """Create the backend serving a resolved route.

    Args:
        route: Output of ``resolve_provider_route``.
        openrouter_base_url: Optional custom OpenRouter endpoint.

    Returns:
        Configured LLMBackend instance.

    Raises:
        ValueError: If the route names an unsupported provider.
    """
    if route.provider == ProviderName.OPENROUTER:
        from .openrouter import OpenRouterBackend

        return OpenRouterBackend(
            api_key=route.api_key,
            model=route.model,
            base_url=openrouter_base_url,
        )

    if route.provider == ProviderName.GEMINI:
        from .gemini import GeminiBackend

        return GeminiBackend(api_key=route.api_key, model=route.model)

    raise ValueError(f"Unsupported provider: {route.provider}")


__all__ = [
    "DEFAULT_MODEL",
    "CUSTOM_MODEL_SENTINEL",
    "ProviderRoute",
    "resolve_provider_route",
    "create_llm_backend",
]
