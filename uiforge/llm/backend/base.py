"""Abstract base class for LLM backends.

Defines the interface that all provider implementations must follow, along
with the error taxonomy shared by the whole generation pipeline.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from uiforge.schema import SchemaNode

if TYPE_CHECKING:
    from uiforge.validation import ValidationIssue

DEFAULT_TEMPERATURE = 0.3


@dataclass
class GenerationConfig:
    """Configuration for one generation request.

    Attributes:
        temperature: Sampling temperature. None leaves the provider default.
        json_mode: Whether to request JSON output.
        response_schema: Structured-output schema, for providers that accept one.
    """

    temperature: float | None = DEFAULT_TEMPERATURE
    json_mode: bool = True
    response_schema: SchemaNode | None = None


@dataclass(frozen=True)
class ReferencePart:
    """Inline binary attachment forwarded alongside the user prompt.

    Attributes:
        data: Base64 payload with any data-URI prefix removed.
        mime_type: Media type of the decoded payload.
    """

    data: str
    mime_type: str = "image/png"


@dataclass
class GenerationResult:
    """Result from LLM text generation.

    Attributes:
        content: Generated text content, unparsed.
        model: Model identifier that was used.
        finish_reason: Why generation stopped, when the provider reports it.
        usage: Token usage dict (prompt_tokens, completion_tokens, total_tokens).
        raw_response: Provider-specific raw response for debugging.
    """

    content: str
    model: str
    finish_reason: str = "unknown"
    usage: dict[str, int] = field(default_factory=dict)
    raw_response: Any = None


class LLMBackend(ABC):
    """Abstract interface for provider backends.

    Backends perform exactly one request per ``generate`` call and never
    parse the returned text.

    Example:
        >>> backend = GeminiBackend(api_key="...")
        >>> result = await backend.generate("Generate a login screen")
        >>> print(result.content)
    """

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        *,
        system_prompt: str | None = None,
        config: GenerationConfig | None = None,
        reference_parts: Sequence[ReferencePart] = (),
    ) -> GenerationResult:
        """Generate text from a prompt.

        Args:
            prompt: User prompt text.
            system_prompt: Optional system instruction.
            config: Generation configuration options.
            reference_parts: Inline attachments appended after the prompt.

        Returns:
            GenerationResult with the raw generated text.

        Raises:
            TransportError: If the provider answers with a failure status.
            AuthenticationError: If the provider rejects the credential.
            LLMError: For any other provider failure.
        """

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Get the model identifier."""

    @property
    @abstractmethod
    def provider(self) -> str:
        """Get the provider identifier (e.g., 'gemini', 'openrouter')."""

    @property
    def name(self) -> str:
        """Get backend identifier for logging, as 'provider:model'."""
        return f"{self.provider}:{self.model_name}"

    async def aclose(self) -> None:
        """Release network resources owned by the backend."""


class LLMError(Exception):
    """Base exception for generation errors."""


class TransportError(LLMError):
    """Raised when a provider answers with a non-success status.

    Attributes:
        status_code: HTTP status returned by the provider, if known.
        body: Raw response body text.
    """

    def __init__(self, message: str, status_code: int | None = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class AuthenticationError(LLMError):
    """Raised when the provider rejects or cannot use the credential."""


class InvalidResponseError(LLMError):
    """Raised when a response cannot be parsed as JSON."""


class SchemaViolationError(InvalidResponseError):
    """Raised when a JSON response breaks the document contract.

    Attributes:
        issues: Individual contract violations.
    """

    def __init__(self, message: str, issues: list[ValidationIssue] | None = None):
        super().__init__(message)
        self.issues = issues or []


class UnsupportedAssetError(LLMError):
    """Raised when a reference asset cannot be forwarded to any provider."""


__all__ = [
    "DEFAULT_TEMPERATURE",
    "LLMBackend",
    "GenerationConfig",
    "GenerationResult",
    "ReferencePart",
    "LLMError",
    "TransportError",
    "AuthenticationError",
    "InvalidResponseError",
    "SchemaViolationError",
    "UnsupportedAssetError",
]
