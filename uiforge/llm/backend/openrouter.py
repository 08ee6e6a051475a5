"""OpenRouter backend implementation (OpenAI-compatible API).

OpenRouter exposes an OpenAI-compatible chat completion endpoint, so this
backend drives it through the ``openai`` SDK with a custom base URL.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from .base import (
    GenerationConfig,
    GenerationResult,
    InvalidResponseError,
    LLMBackend,
    LLMError,
    ReferencePart,
    TransportError,
)

logger = logging.getLogger(__name__)

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"


class OpenRouterBackend(LLMBackend):
    """OpenRouter backend using the OpenAI SDK.

    SDK retries are disabled: every ``generate`` call is exactly one request.
    Sampling temperature is not forwarded; OpenRouter applies the routed
    model's default.

    Example:
        >>> backend = OpenRouterBackend(api_key="sk-or-...", model="openai/gpt-4o")
        >>> result = await backend.generate("Generate a login screen as JSON")
        >>> print(result.content)
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str | None = None,
        http_client: Any = None,
    ):
        """Initialize OpenRouter backend.

        Args:
            api_key: OpenRouter key, sent as a bearer token.
            model: Model identifier (e.g. "anthropic/claude-3.5-sonnet").
            base_url: API endpoint. Defaults to the public OpenRouter URL.
            http_client: Optional ``httpx.AsyncClient`` (mainly for tests).
                Injected clients are left open by ``aclose``.
        """
        self._api_key = api_key
        self._model = model
        self._base_url = base_url or OPENROUTER_BASE_URL
        self._http_client = http_client
        self._client: Any = None

    def _get_client(self) -> Any:
        """Lazily initialize the AsyncOpenAI client."""
        if self._client is None:
            from openai import AsyncOpenAI

            self._client = AsyncOpenAI(
                api_key=self._api_key,
                base_url=self._base_url,
                max_retries=0,
                http_client=self._http_client,
            )
        return self._client

    @property
    def model_name(self) -> str:
        """Get the model identifier."""
        return self._model

    @property
    def provider(self) -> str:
        """Get the provider identifier."""
        return "openrouter"

    @property
    def base_url(self) -> str:
        """Get the API endpoint."""
        return self._base_url

    async def generate(
        self,
        prompt: str,
        *,
        system_prompt: str | None = None,
        config: GenerationConfig | None = None,
        reference_parts: Sequence[ReferencePart] = (),
    ) -> GenerationResult:
        """Generate text using the OpenRouter chat completion API.

        Args:
            prompt: User prompt text.
            system_prompt: System instruction, sent as the first message.
            config: Generation configuration. Only ``json_mode`` is honored.
            reference_parts: Not supported by this route; dropped with a warning.

        Returns:
            GenerationResult with the first choice's message content.

        Raises:
            TransportError: If OpenRouter answers with a non-success status.
            InvalidResponseError: If the answer carries no message content.
            LLMError: If the request could not be delivered.
        """
        import openai

        config = config or GenerationConfig()
        client = self._get_client()

        if reference_parts:
            logger.warning(
                f"OpenRouter route does not forward reference parts; "
                f"dropping {len(reference_parts)}"
            )

        messages = [
            {"role": "system", "content": system_prompt or ""},
            {"role": "user", "content": prompt},
        ]
        kwargs: dict[str, Any] = {"model": self._model, "messages": messages}
        if config.json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        logger.debug(f"OpenRouter request: model={self._model}, url={self._base_url}")

        try:
            response = await client.chat.completions.create(**kwargs)
        except openai.APIError as e:
            self._handle_error(e)
            raise

        if not response.choices or response.choices[0].message.content is None:
            raise InvalidResponseError(
                f"OpenRouter response for {self._model} has no message content"
            )

        choice = response.choices[0]
        usage: dict[str, int] = {}
        if response.usage is not None:
            usage = {
                "prompt_tokens": response.usage.prompt_tokens,
                "completion_tokens": response.usage.completion_tokens,
                "total_tokens": response.usage.total_tokens,
            }

        return GenerationResult(
            content=choice.message.content,
            model=response.model or self._model,
            finish_reason=choice.finish_reason or "unknown",
            usage=usage,
            raw_response=response,
        )

    def _handle_error(self, error: Exception) -> None:
        """Convert OpenAI SDK errors to standard exceptions.

        Raises:
            TransportError: For non-success statuses, quoting the raw body.
            LLMError: For connection failures and other SDK errors.
        """
        import openai

        if isinstance(error, openai.APIStatusError):
            body = error.response.text
            logger.error(f"OpenRouter returned {error.status_code}: {body}")
            raise TransportError(
                f"OpenRouter Error: {body}",
                status_code=error.status_code,
                body=body,
            ) from error

        logger.error(f"OpenRouter request failed: {error}")
        raise LLMError(f"OpenRouter Error: {error}") from error

    async def aclose(self) -> None:
        """Close the SDK client if this backend created its HTTP transport."""
        if self._client is not None and self._http_client is None:
            await self._client.close()
        self._client = None


__all__ = ["OpenRouterBackend", "OPENROUTER_BASE_URL"]
