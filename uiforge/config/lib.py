"""Centralized environment configuration management for uiforge.

Provides a unified interface for all environment variables with:
- Single `get_environment()` function for all configuration
- Type-safe enum with metadata (default, type, description)
- Consistent resolution: override > environment > default

Environment lookups happen once, where a client is constructed. Nothing in the
generation pipeline reads the environment at call time.

Example:
    >>> from uiforge.config import EnvVar, get_environment
    >>>
    >>> api_key = get_environment(EnvVar.API_KEY)  # Returns str | None
    >>> log_prompts = get_environment(EnvVar.UIFORGE_LOG_PROMPTS)  # Returns bool
    >>>
    >>> # Override at runtime
    >>> api_key = get_environment(EnvVar.API_KEY, override="test-key")
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, overload

# =============================================================================
# Environment Variable Configuration
# =============================================================================


@dataclass(frozen=True)
class EnvConfig:
    """Metadata for an environment variable.

    Attributes:
        name: Environment variable name (e.g., "API_KEY").
        default: Default value if not set in environment.
        var_type: Python type for value conversion (str, bool).
        description: Human-readable description.
        category: Grouping category for documentation.
    """

    name: str
    default: Any
    var_type: type
    description: str = ""
    category: str = "general"


class EnvVar(Enum):
    """All environment variables used by uiforge.

    Each member contains an EnvConfig with name, default, type, and description.
    Use with `get_environment()` for type-safe access.

    Categories:
        - llm: Provider credentials and endpoints
        - logging: Log level and prompt tracing
    """

    # -------------------------------------------------------------------------
    # LLM Credentials and Endpoints
    # -------------------------------------------------------------------------
    API_KEY = EnvConfig(
        name="API_KEY",
        default=None,
        var_type=str,
        description="Default Gemini API key used when callers supply no key",
        category="llm",
    )
    OPENROUTER_BASE_URL = EnvConfig(
        name="OPENROUTER_BASE_URL",
        default="https://openrouter.ai/api/v1",
        var_type=str,
        description="OpenRouter OpenAI-compatible API root",
        category="llm",
    )

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------
    UIFORGE_LOG_LEVEL = EnvConfig(
        name="UIFORGE_LOG_LEVEL",
        default="INFO",
        var_type=str,
        description="Root log level (DEBUG, INFO, WARNING, ERROR)",
        category="logging",
    )
    UIFORGE_LOG_PROMPTS = EnvConfig(
        name="UIFORGE_LOG_PROMPTS",
        default=False,
        var_type=bool,
        description="Log fully composed prompts at DEBUG level",
        category="logging",
    )


# =============================================================================
# Type Conversion Helpers
# =============================================================================


def _parse_bool(value: str) -> bool | None:
    """Parse string to boolean.

    Recognizes: true/false, 1/0, yes/no (case-insensitive).
    Returns None for unrecognized values.
    """
    normalized = value.lower().strip()
    if normalized in ("true", "1", "yes"):
        return True
    if normalized in ("false", "0", "no"):
        return False
    return None


def _convert_value(value: str | None, var_type: type, default: Any) -> Any:
    """Convert string value to target type.

    Args:
        value: Raw string value from environment (or None).
        var_type: Target Python type.
        default: Default value if conversion fails or value is None.

    Returns:
        Converted value or default.
    """
    if value is None:
        return default

    if var_type is bool:
        result = _parse_bool(value)
        return result if result is not None else default

    return value


# =============================================================================
# Main Interface
# =============================================================================


@overload
def get_environment(env_var: EnvVar, override: str) -> str: ...
@overload
def get_environment(env_var: EnvVar, override: bool) -> bool: ...
@overload
def get_environment(env_var: EnvVar, override: None = None) -> Any: ...


def get_environment(env_var: EnvVar, override: Any = None) -> Any:
    """Get environment variable value with type conversion.

    Resolution priority:
        1. Explicit override parameter (highest)
        2. Environment variable value
        3. Default from EnvConfig (lowest)

    Args:
        env_var: Environment variable enum member.
        override: Optional override value (bypasses env lookup).

    Returns:
        Value converted to the appropriate type (str or bool).

    Example:
        >>> get_environment(EnvVar.OPENROUTER_BASE_URL)
        'https://openrouter.ai/api/v1'
        >>> get_environment(EnvVar.UIFORGE_LOG_PROMPTS, override=True)
        True
    """
    config: EnvConfig = env_var.value

    if override is not None:
        return override

    raw_value = os.environ.get(config.name)
    return _convert_value(raw_value, config.var_type, config.default)


def get_environment_info(env_var: EnvVar) -> EnvConfig:
    """Get metadata for an environment variable."""
    return env_var.value


def get_default_api_key(override: str | None = None) -> str:
    """Get the process-wide default credential.

    Resolution: override > API_KEY > "" (an empty key is passed through to the
    provider, which reports the authentication failure).
    """
    return get_environment(EnvVar.API_KEY, override=override) or ""


def list_environment_variables(category: str | None = None) -> list[EnvVar]:
    """List all environment variables, optionally filtered by category.

    Args:
        category: Filter by category (llm, logging). None returns all variables.

    Returns:
        List of EnvVar enum members.
    """
    if category is None:
        return list(EnvVar)

    return [var for var in EnvVar if var.value.category == category]


__all__ = [
    # Core types
    "EnvConfig",
    "EnvVar",
    # Main interface
    "get_environment",
    "get_environment_info",
    # Convenience functions
    "get_default_api_key",
    # Introspection
    "list_environment_variables",
]
