"""Tests for provider output validation."""

import json

import pytest

from uiforge.project import ProjectDocument, ScreenDraft

from .lib import (
    ValidationResult,
    is_valid,
    validate_document,
    validate_project_document,
    validate_screen_draft,
)


class TestValidateProjectDocument:
    """Tests for full project validation."""

    @pytest.mark.unit
    def test_valid_document(self, sample_document_dict):
        """A conforming document validates with no issues."""
        result = validate_project_document(json.dumps(sample_document_dict))

        assert result.ok
        assert isinstance(result.document, ProjectDocument)
        assert result.issues == []
        assert result.json_error is None

    @pytest.mark.unit
    def test_round_trip_keeps_every_field(self, sample_document_dict):
        """Validated documents serialize back to the exact input."""
        result = validate_project_document(json.dumps(sample_document_dict))
        assert result.document.to_wire() == sample_document_dict

    @pytest.mark.unit
    def test_missing_required_field(self, sample_document_dict):
        """Missing required fields are reported with their location."""
        del sample_document_dict["designSystem"]["colors"]["border"]
        result = validate_project_document(json.dumps(sample_document_dict))

        assert not result.ok
        assert result.document is None
        locations = [issue.location for issue in result.issues]
        assert "designSystem.colors.border" in locations

    @pytest.mark.unit
    def test_no_coercion(self, sample_document_dict):
        """Numbers are not coerced into strings."""
        sample_document_dict["screens"][0]["id"] = 7
        result = validate_project_document(json.dumps(sample_document_dict))

        assert not result.ok
        assert result.issues[0].location == "screens.0.id"
        assert result.issues[0].error_type == "string_type"

    @pytest.mark.unit
    def test_not_json(self):
        """Non-JSON text records the decode error."""
        result = validate_project_document("not json")

        assert not result.ok
        assert isinstance(result.json_error, json.JSONDecodeError)
        assert result.issues[0].error_type == "invalid_json"

    @pytest.mark.unit
    def test_text_is_decoded_once(self):
        """Escapes accepted by the JSON decoder are not re-judged by pydantic."""
        result = validate_screen_draft('{"name": "Home", "markup": "<p>\\ud800</p>"}')

        assert result.ok
        assert result.json_error is None
        assert result.document.markup == "<p>\ud800</p>"

    @pytest.mark.unit
    def test_json_array_is_rejected(self):
        """Valid JSON that is not an object fails validation."""
        result = validate_project_document("[]")
        assert not result.ok
        assert result.json_error is None

    @pytest.mark.unit
    def test_extra_keys_are_kept(self, sample_document_dict):
        """Unknown keys from the provider are preserved, not dropped."""
        sample_document_dict["connections"] = [
            {"from": "home", "to": "stats", "label": "View stats"}
        ]
        sample_document_dict["version"] = "2"
        result = validate_project_document(json.dumps(sample_document_dict))

        assert result.ok
        assert result.document.connections[0].source == "home"
        assert result.document.to_wire()["version"] == "2"


class TestValidateScreenDraft:
    """Tests for single-screen validation."""

    @pytest.mark.unit
    def test_valid_draft(self):
        result = validate_screen_draft('{"name": "Settings", "markup": "<div></div>"}')
        assert result.ok
        assert result.document == ScreenDraft(name="Settings", markup="<div></div>")

    @pytest.mark.unit
    def test_missing_markup(self):
        result = validate_screen_draft('{"name": "Settings"}')
        assert not result.ok
        assert result.issues[0].location == "markup"
        assert "markup" in result.format_issues()


class TestHelpers:
    """Tests for convenience helpers."""

    @pytest.mark.unit
    def test_is_valid(self):
        assert is_valid('{"name": "a", "markup": "b"}', ScreenDraft)
        assert not is_valid("{}", ScreenDraft)

    @pytest.mark.unit
    def test_validate_document_generic(self):
        result = validate_document('{"name": "a", "markup": "b"}', ScreenDraft)
        assert isinstance(result, ValidationResult)
        assert result.raw_text == '{"name": "a", "markup": "b"}'

    @pytest.mark.unit
    def test_format_issues_root(self):
        result = validate_document("nope", ScreenDraft)
        assert result.format_issues().startswith("- <root>:")
