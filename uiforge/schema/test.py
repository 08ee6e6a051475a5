"""Unit tests for the Schema module."""

import pytest

from uiforge.schema import (
    PALETTE_KEYS,
    PROJECT_RESPONSE_SCHEMA,
    SCREEN_DRAFT_SCHEMA,
    SchemaNode,
    SchemaType,
    array_schema,
    object_schema,
    string_schema,
)


class TestSchemaNode:
    """Tests for SchemaNode construction rules."""

    @pytest.mark.unit
    def test_array_requires_items(self):
        """Arrays without an items schema are rejected."""
        with pytest.raises(ValueError, match="items"):
            SchemaNode(type=SchemaType.ARRAY)

    @pytest.mark.unit
    def test_string_cannot_have_properties(self):
        """Only objects declare properties."""
        with pytest.raises(ValueError, match="properties"):
            SchemaNode(type=SchemaType.STRING, properties={"a": string_schema()})

    @pytest.mark.unit
    def test_required_must_be_declared(self):
        """Required names must exist in properties."""
        with pytest.raises(ValueError, match="required"):
            object_schema({"name": string_schema()}, required=("name", "id"))

    @pytest.mark.unit
    def test_object_requires_all_by_default(self):
        """object_schema marks every property required by default."""
        node = object_schema({"a": string_schema(), "b": string_schema()})
        assert node.required == ("a", "b")

    @pytest.mark.unit
    def test_to_dict(self):
        """Nodes export as JSON-schema style dicts."""
        node = object_schema({"tags": array_schema(string_schema("tag"))})
        assert node.to_dict() == {
            "type": "object",
            "properties": {
                "tags": {
                    "type": "array",
                    "items": {"type": "string", "description": "tag"},
                }
            },
            "required": ["tags"],
        }


class TestSchemaFromDict:
    """Tests for parsing dict schemas at the boundary."""

    @pytest.mark.unit
    def test_accepts_uppercase_types(self):
        """SDK-style upper-case type names are accepted."""
        node = SchemaNode.from_dict(
            {
                "type": "OBJECT",
                "properties": {"name": {"type": "STRING"}},
                "required": ["name"],
            }
        )
        assert node.type == SchemaType.OBJECT
        assert node.properties["name"].type == SchemaType.STRING

    @pytest.mark.unit
    def test_rejects_unknown_keys(self):
        """Keys outside the closed tree are rejected."""
        with pytest.raises(ValueError, match="Unknown schema keys"):
            SchemaNode.from_dict({"type": "string", "format": "email"})

    @pytest.mark.unit
    def test_rejects_unknown_type(self):
        with pytest.raises(ValueError):
            SchemaNode.from_dict({"type": "tuple"})

    @pytest.mark.unit
    def test_rejects_missing_type(self):
        with pytest.raises(ValueError, match="missing 'type'"):
            SchemaNode.from_dict({"properties": {}})

    @pytest.mark.unit
    def test_export_is_reparsable(self):
        """An exported schema parses back to an equal tree."""
        assert SchemaNode.from_dict(SCREEN_DRAFT_SCHEMA.to_dict()) == SCREEN_DRAFT_SCHEMA


class TestFixedSchemas:
    """Tests for the exported response schemas."""

    @pytest.mark.unit
    def test_project_top_level_required(self):
        assert PROJECT_RESPONSE_SCHEMA.required == ("overview", "designSystem", "screens")

    @pytest.mark.unit
    def test_palette_has_eight_required_colors(self):
        colors = PROJECT_RESPONSE_SCHEMA.properties["designSystem"].properties["colors"]
        assert len(PALETTE_KEYS) == 8
        assert colors.required == PALETTE_KEYS

    @pytest.mark.unit
    def test_screen_items_fields(self):
        screens = PROJECT_RESPONSE_SCHEMA.properties["screens"]
        assert screens.type == SchemaType.ARRAY
        assert screens.items.required == ("id", "name", "purpose", "markup")

    @pytest.mark.unit
    def test_screen_draft_has_no_id(self):
        assert SCREEN_DRAFT_SCHEMA.required == ("name", "markup")
        assert "id" not in SCREEN_DRAFT_SCHEMA.properties
