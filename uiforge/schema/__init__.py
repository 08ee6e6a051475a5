"""Response schema module for schema-constrained generation.

Example:
    >>> from uiforge.schema import PROJECT_RESPONSE_SCHEMA
    >>> PROJECT_RESPONSE_SCHEMA.to_dict()["required"]
    ['overview', 'designSystem', 'screens']
"""

from .lib import (
    PALETTE_KEYS,
    PROJECT_RESPONSE_SCHEMA,
    SCREEN_DRAFT_SCHEMA,
    SchemaNode,
    SchemaType,
    array_schema,
    object_schema,
    string_schema,
)

__all__ = [
    "SchemaType",
    "SchemaNode",
    "string_schema",
    "array_schema",
    "object_schema",
    "PALETTE_KEYS",
    "PROJECT_RESPONSE_SCHEMA",
    "SCREEN_DRAFT_SCHEMA",
]
