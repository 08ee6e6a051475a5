"""LLM backend implementations.

Provides the abstract backend interface, the error taxonomy, concrete
Gemini and OpenRouter backends, provider routing and the shared transport.
"""

from .base import (
    DEFAULT_TEMPERATURE,
    AuthenticationError,
    GenerationConfig,
    GenerationResult,
    InvalidResponseError,
    LLMBackend,
    LLMError,
    ReferencePart,
    SchemaViolationError,
    TransportError,
    UnsupportedAssetError,
)
from .factory import (
    CUSTOM_MODEL_SENTINEL,
    DEFAULT_MODEL,
    ProviderRoute,
    create_llm_backend,
    resolve_provider_route,
)
from .gemini import GeminiBackend
from .openrouter import OPENROUTER_BASE_URL, OpenRouterBackend
from .transport import BackendFactory, ProviderTransport

__all__ = [
    # Base classes and types
    "LLMBackend",
    "GenerationConfig",
    "GenerationResult",
    "ReferencePart",
    # Exceptions
    "LLMError",
    "TransportError",
    "AuthenticationError",
    "InvalidResponseError",
    "SchemaViolationError",
    "UnsupportedAssetError",
    # Backends
    "GeminiBackend",
    "OpenRouterBackend",
    # Routing
    "ProviderRoute",
    "resolve_provider_route",
    "create_llm_backend",
    "ProviderTransport",
    "BackendFactory",
    # Defaults
    "DEFAULT_MODEL",
    "DEFAULT_TEMPERATURE",
    "CUSTOM_MODEL_SENTINEL",
    "OPENROUTER_BASE_URL",
]
