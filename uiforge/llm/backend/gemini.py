"""Google Gemini backend implementation.

Uses the google-genai SDK with structured output: JSON mime type plus an
explicit response schema translated from the SchemaNode tree.
"""

from __future__ import annotations

import base64
import binascii
import logging
from collections.abc import Sequence
from typing import Any

from uiforge.schema import SchemaNode

from .base import (
    AuthenticationError,
    GenerationConfig,
    GenerationResult,
    LLMBackend,
    LLMError,
    ReferencePart,
    TransportError,
)

logger = logging.getLogger(__name__)

DEFAULT_GEMINI_MODEL = "gemini-3-flash-preview"


def to_gemini_schema(node: SchemaNode) -> Any:
    """Translate a SchemaNode tree into a google-genai ``types.Schema``."""
    from google.genai import types

    kwargs: dict[str, Any] = {"type": types.Type(node.type.value.upper())}
    if node.description:
        kwargs["description"] = node.description
    if node.properties:
        kwargs["properties"] = {
            name: to_gemini_schema(child) for name, child in node.properties.items()
        }
    if node.required:
        kwargs["required"] = list(node.required)
    if node.items is not None:
        kwargs["items"] = to_gemini_schema(node.items)
    return types.Schema(**kwargs)


class GeminiBackend(LLMBackend):
    """Gemini backend.

    Uses ``client.aio.models.generate_content`` so calls suspend instead of
    blocking the event loop.

    Example:
        >>> backend = GeminiBackend(api_key="...")
        >>> result = await backend.generate(
        ...     'USER REQUEST: "a habit tracker app"',
        ...     system_prompt="Return JSON.",
        ...     config=GenerationConfig(response_schema=SCREEN_DRAFT_SCHEMA),
        ... )
    """

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_GEMINI_MODEL,
        client: Any = None,
    ):
        """Initialize Gemini backend.

        Args:
            api_key: Gemini API key. A blank key raises AuthenticationError
                on first use instead of falling back to SDK environment keys.
            model: Gemini model name.
            client: Pre-built ``genai.Client`` (mainly for tests).
        """
        self._api_key = api_key
        self._model = model
        self._client = client

    def _get_client(self) -> Any:
        """Lazily initialize the genai client.

        Raises:
            AuthenticationError: If the key is blank or the SDK refuses it.
        """
        if self._client is None:
            from google import genai

            # The SDK reads GOOGLE_API_KEY/GEMINI_API_KEY when given an empty key.
            if not self._api_key.strip():
                raise AuthenticationError("Gemini client rejected API key: empty key")
            try:
                self._client = genai.Client(api_key=self._api_key)
            except ValueError as e:
                raise AuthenticationError(f"Gemini client rejected API key: {e}") from e
        return self._client

    @property
    def model_name(self) -> str:
        """Get the model identifier."""
        return self._model

    @property
    def provider(self) -> str:
        """Get the provider identifier."""
        return "gemini"

    async def generate(
        self,
        prompt: str,
        *,
        system_prompt: str | None = None,
        config: GenerationConfig | None = None,
        reference_parts: Sequence[ReferencePart] = (),
    ) -> GenerationResult:
        """Generate text using the Gemini API.

        Args:
            prompt: User prompt text, sent as the first content part.
            system_prompt: Optional system instruction.
            config: Generation configuration.
            reference_parts: Inline images appended after the prompt.

        Returns:
            GenerationResult whose content is ``response.text`` or "".
        """
        from google.genai import types

        config = config or GenerationConfig()
        client = self._get_client()

        parts = [types.Part.from_text(text=prompt)]
        parts.extend(self._to_part(part) for part in reference_parts)
        contents = [types.Content(role="user", parts=parts)]

        config_kwargs: dict[str, Any] = {}
        if system_prompt:
            config_kwargs["system_instruction"] = system_prompt
        if config.temperature is not None:
            config_kwargs["temperature"] = config.temperature
        if config.json_mode:
            config_kwargs["response_mime_type"] = "application/json"
        if config.response_schema is not None:
            config_kwargs["response_schema"] = to_gemini_schema(config.response_schema)

        logger.debug(
            f"Gemini request: model={self._model}, parts={len(parts)}, "
            f"schema={config.response_schema is not None}"
        )

        try:
            response = await client.aio.models.generate_content(
                model=self._model,
                contents=contents,
                config=types.GenerateContentConfig(**config_kwargs) if config_kwargs else None,
            )
        except Exception as e:
            self._handle_error(e)
            raise

        usage_metadata = getattr(response, "usage_metadata", None)
        usage: dict[str, int] = {}
        if usage_metadata is not None:
            usage["total_tokens"] = getattr(usage_metadata, "total_token_count", 0) or 0

        return GenerationResult(
            content=response.text or "",
            model=self._model,
            usage=usage,
            raw_response=response,
        )

    @staticmethod
    def _to_part(part: ReferencePart) -> Any:
        """Decode a base64 reference part into an inline-data Part.

        Line breaks and other whitespace in the payload are ignored.
        """
        from google.genai import types

        try:
            data = base64.b64decode("".join(part.data.split()), validate=True)
        except (binascii.Error, ValueError) as e:
            raise LLMError(f"Reference part is not valid base64: {e}") from e
        return types.Part.from_bytes(data=data, mime_type=part.mime_type)

    def _handle_error(self, error: Exception) -> None:
        """Convert google-genai errors to standard exceptions.

        Raises:
            AuthenticationError: For rejected or missing keys.
            TransportError: For failure statuses reported by the API.
            LLMError: For other errors.
        """
        from google.genai import errors as genai_errors

        if isinstance(error, LLMError):
            raise error

        message = str(error)
        code = error.code if isinstance(error, genai_errors.APIError) else None
        logger.error(f"Gemini request failed ({code}): {message}")

        if code in (401, 403) or "api key" in message.lower():
            raise AuthenticationError(f"Gemini Error: {message}") from error
        if code is not None:
            raise TransportError(
                f"Gemini Error: {message}", status_code=code, body=message
            ) from error
        raise LLMError(f"Gemini Error: {message}") from error


__all__ = ["GeminiBackend", "DEFAULT_GEMINI_MODEL", "to_gemini_schema"]
