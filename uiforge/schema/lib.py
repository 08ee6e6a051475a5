"""Response schema definitions for schema-constrained generation.

This module is the single source of truth for the JSON shapes providers are
asked to emit. Schemas are expressed as a closed tree of ``SchemaNode`` values
rather than free-form dicts, so malformed schemas fail at construction and
backends can translate them to their own SDK types without guessing.

Two fixed schemas are exported:
- PROJECT_RESPONSE_SCHEMA: overview, design system and screens
- SCREEN_DRAFT_SCHEMA: a single screen's name and markup
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class SchemaType(str, Enum):
    """Primitive and structural node types."""

    OBJECT = "object"
    ARRAY = "array"
    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"


_NODE_KEYS = frozenset({"type", "properties", "items", "required", "description"})


@dataclass(frozen=True)
class SchemaNode:
    """One node of a response schema tree.

    Attributes:
        type: Node type.
        properties: Child schemas by property name (objects only).
        items: Element schema (arrays only, required for arrays).
        required: Property names that must be present (objects only).
        description: Optional hint forwarded to the provider.
    """

    type: SchemaType
    properties: dict[str, SchemaNode] = field(default_factory=dict)
    items: SchemaNode | None = None
    required: tuple[str, ...] = ()
    description: str = ""

    def __post_init__(self) -> None:
        """Reject structurally impossible nodes."""
        if self.type != SchemaType.OBJECT and (self.properties or self.required):
            raise ValueError(f"{self.type.value} schema cannot declare properties")
        if self.type == SchemaType.ARRAY and self.items is None:
            raise ValueError("array schema requires an items schema")
        if self.type != SchemaType.ARRAY and self.items is not None:
            raise ValueError(f"{self.type.value} schema cannot declare items")
        unknown = [name for name in self.required if name not in self.properties]
        if unknown:
            raise ValueError(f"required names not in properties: {unknown}")

    def to_dict(self) -> dict[str, Any]:
        """Export as a JSON-schema style dict."""
        result: dict[str, Any] = {"type": self.type.value}
        if self.description:
            result["description"] = self.description
        if self.type == SchemaType.OBJECT:
            result["properties"] = {
                name: child.to_dict() for name, child in self.properties.items()
            }
            if self.required:
                result["required"] = list(self.required)
        if self.items is not None:
            result["items"] = self.items.to_dict()
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SchemaNode:
        """Build a node tree from a dict, rejecting unknown keys and types.

        Raises:
            ValueError: If the dict contains keys or types outside the tree.
        """
        unknown = set(data) - _NODE_KEYS
        if unknown:
            raise ValueError(f"Unknown schema keys: {sorted(unknown)}")
        try:
            node_type = SchemaType(str(data["type"]).lower())
        except KeyError as e:
            raise ValueError("Schema node missing 'type'") from e

        items = data.get("items")
        return cls(
            type=node_type,
            properties={
                name: cls.from_dict(child)
                for name, child in data.get("properties", {}).items()
            },
            items=cls.from_dict(items) if items is not None else None,
            required=tuple(data.get("required", ())),
            description=data.get("description", ""),
        )


# =============================================================================
# Builders
# =============================================================================


def string_schema(description: str = "") -> SchemaNode:
    """Create a string node."""
    return SchemaNode(type=SchemaType.STRING, description=description)


def array_schema(items: SchemaNode) -> SchemaNode:
    """Create an array node."""
    return SchemaNode(type=SchemaType.ARRAY, items=items)


def object_schema(
    properties: dict[str, SchemaNode],
    required: tuple[str, ...] | None = None,
) -> SchemaNode:
    """Create an object node.

    Args:
        properties: Child schemas by name.
        required: Required names. Defaults to every property.
    """
    return SchemaNode(
        type=SchemaType.OBJECT,
        properties=properties,
        required=tuple(properties) if required is None else required,
    )


# =============================================================================
# Fixed Response Schemas
# =============================================================================

PALETTE_KEYS: tuple[str, ...] = (
    "primary",
    "secondary",
    "background",
    "surface",
    "text",
    "accent",
    "muted",
    "border",
)

PROJECT_RESPONSE_SCHEMA = object_schema(
    {
        "overview": object_schema(
            {
                "name": string_schema(),
                "description": string_schema(),
                "targetUsers": array_schema(string_schema()),
            }
        ),
        "designSystem": object_schema(
            {
                "colors": object_schema({key: string_schema() for key in PALETTE_KEYS}),
                "radius": string_schema(),
                "font": string_schema(),
            }
        ),
        "screens": array_schema(
            object_schema(
                {
                    "id": string_schema(),
                    "name": string_schema(),
                    "purpose": string_schema(),
                    "markup": string_schema(),
                }
            )
        ),
    }
)

SCREEN_DRAFT_SCHEMA = object_schema(
    {
        "name": string_schema(),
        "markup": string_schema(),
    }
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
