"""Shared provider transport.

Every generation operation funnels through ``ProviderTransport.call``: route
the request, build a backend, send one request, return the raw text.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from uiforge.project import ProviderName
from uiforge.schema import SchemaNode

from .base import DEFAULT_TEMPERATURE, GenerationConfig, LLMBackend, ReferencePart
from .factory import ProviderRoute, create_llm_backend, resolve_provider_route

logger = logging.getLogger(__name__)

BackendFactory = Callable[[ProviderRoute], LLMBackend]


class ProviderTransport:
    """Routes prompts to a provider and returns the unparsed response text.

    The transport holds only immutable configuration; a fresh backend is
    created for each call and closed afterwards.

    Example:
        >>> transport = ProviderTransport(default_api_key="...")
        >>> text = await transport.call(
        ...     "Return JSON.", 'USER REQUEST: "a habit tracker"',
        ...     SCREEN_DRAFT_SCHEMA, None,
        ... )
    """

    def __init__(
        self,
        default_api_key: str = "",
        *,
        openrouter_base_url: str | None = None,
        backend_factory: BackendFactory | None = None,
        log_prompts: bool = False,
    ):
        """Initialize ProviderTransport.

        Args:
            default_api_key: Credential used when the caller supplies none.
            openrouter_base_url: Optional custom OpenRouter endpoint.
            backend_factory: Builds a backend for a route. Defaults to
                ``create_llm_backend``.
            log_prompts: Debug-log composed prompts.
        """
        self._default_api_key = default_api_key
        self._openrouter_base_url = openrouter_base_url
        self._backend_factory = backend_factory or self._create_backend
        self._log_prompts = log_prompts

    def _create_backend(self, route: ProviderRoute) -> LLMBackend:
        return create_llm_backend(route, openrouter_base_url=self._openrouter_base_url)

    def resolve(
        self,
        model_name: str | None,
        api_key: str | None = None,
        provider: ProviderName | str = ProviderName.GEMINI,
    ) -> ProviderRoute:
        """Resolve the route a call with these arguments would take."""
        return resolve_provider_route(model_name, api_key, provider, self._default_api_key)

    async def call(
        self,
        system_instruction: str,
        user_prompt: str,
        response_schema: SchemaNode | None,
        model_name: str | None,
        api_key: str | None = None,
        provider: ProviderName | str = ProviderName.GEMINI,
        reference_parts: Sequence[ReferencePart] = (),
        temperature: float | None = DEFAULT_TEMPERATURE,
    ) -> str:
        """Send one request and return the raw response text.

        Args:
            system_instruction: System slot text. Empty means none.
            user_prompt: User turn text.
            response_schema: Requested output shape. None requests free text.
            model_name: Requested model, None for the default.
            api_key: Caller credential, blank to use the default.
            provider: Requested provider.
            reference_parts: Inline images for providers that accept them.
            temperature: Sampling temperature, None for the provider default.

        Returns:
            Response text exactly as returned by the provider.

        Raises:
            LLMError: Any provider failure, see ``uiforge.llm.backend.base``.
        """
        route = self.resolve(model_name, api_key, provider)
        logger.debug(f"Routing request to {route.describe()}")
        if self._log_prompts:
            logger.debug(f"System instruction:\n{system_instruction}")
            logger.debug(f"User prompt:\n{user_prompt}")

        config = GenerationConfig(
            temperature=temperature,
            json_mode=response_schema is not None,
            response_schema=response_schema,
        )

        backend = self._backend_factory(route)
        try:
            result = await backend.generate(
                user_prompt,
                system_prompt=system_instruction or None,
                config=config,
                reference_parts=reference_parts,
            )
        finally:
            await backend.aclose()

        logger.debug(f"{backend.name} returned {len(result.content)} chars")
        return result.content


__all__ = ["ProviderTransport", "BackendFactory"]
