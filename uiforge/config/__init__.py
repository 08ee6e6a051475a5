"""Centralized configuration management for uiforge.

Provides unified access to all configuration via the `get_environment()` function.

Example:
    >>> from uiforge.config import EnvVar, get_environment
    >>>
    >>> api_key = get_environment(EnvVar.API_KEY)  # Returns str | None
    >>>
    >>> # List available variables by category
    >>> for var in list_environment_variables("llm"):
    ...     info = get_environment_info(var)
    ...     print(f"{info.name}: {info.description}")

Environment Variable Categories:
    llm: Default credential and provider endpoints
    logging: Log level and prompt tracing
"""

from .lib import (
    # Core types
    EnvConfig,
    EnvVar,
    # Main interface
    get_default_api_key,
    get_environment,
    get_environment_info,
    # Introspection
    list_environment_variables,
)

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
