"""Unit tests for the project document models."""

import pytest
from pydantic import ValidationError

from uiforge.project import (
    AssetType,
    ChatMessage,
    ChatRole,
    Connection,
    ProjectDocument,
    ReferenceAsset,
    ScreenDefinition,
    Snapshot,
)


class TestProjectDocument:
    """Tests for ProjectDocument parsing and serialization."""

    @pytest.mark.unit
    def test_parse_wire_format(self, sample_document):
        """camelCase wire keys map onto snake_case attributes."""
        assert sample_document.overview.target_users == ["Students", "Remote workers"]
        assert sample_document.design_system.font == "Inter"
        assert [s.id for s in sample_document.screens] == ["home", "stats"]
        assert sample_document.connections is None

    @pytest.mark.unit
    def test_to_wire_round_trip(self, sample_document, sample_document_dict):
        """Serialization reproduces the wire document exactly."""
        assert sample_document.to_wire() == sample_document_dict

    @pytest.mark.unit
    def test_to_wire_keeps_explicit_nulls(self, sample_document_dict):
        """Keys the provider set to null are emitted, unset ones are not."""
        sample_document_dict["connections"] = None
        sample_document_dict["screens"][0]["position"] = None
        document = ProjectDocument.model_validate(sample_document_dict)

        wire = document.to_wire()

        assert wire == sample_document_dict
        assert wire["connections"] is None
        assert "position" in wire["screens"][0]
        assert "position" not in wire["screens"][1]

    @pytest.mark.unit
    def test_get_screen(self, sample_document):
        assert sample_document.get_screen("stats").name == "Stats"
        assert sample_document.get_screen("missing") is None

    @pytest.mark.unit
    def test_missing_palette_key(self, sample_document_dict):
        """The palette requires all eight tokens."""
        del sample_document_dict["designSystem"]["colors"]["muted"]
        with pytest.raises(ValidationError):
            ProjectDocument.model_validate(sample_document_dict)

    @pytest.mark.unit
    def test_duplicate_screen_ids_allowed(self, sample_document_dict):
        """Id uniqueness is a caller invariant, not a model rule."""
        sample_document_dict["screens"][1]["id"] = "home"
        document = ProjectDocument.model_validate(sample_document_dict)
        assert len(document.screens) == 2


class TestConnection:
    """Tests for navigation edges."""

    @pytest.mark.unit
    def test_from_to_aliases(self):
        edge = Connection.model_validate({"from": "a", "to": "b", "label": "Open"})
        assert edge.source == "a"
        assert edge.target == "b"
        assert edge.model_dump(by_alias=True) == {"from": "a", "to": "b", "label": "Open"}

    @pytest.mark.unit
    def test_dangling_reference_allowed(self, sample_document_dict):
        """Connections are not checked against screen ids."""
        sample_document_dict["connections"] = [
            {"from": "home", "to": "nowhere", "label": "Broken"}
        ]
        document = ProjectDocument.model_validate(sample_document_dict)
        assert document.connections[0].target == "nowhere"


class TestScreenDefinition:
    """Tests for screens."""

    @pytest.mark.unit
    def test_optional_position(self):
        screen = ScreenDefinition(
            id="s1",
            name="Login",
            purpose="Sign in",
            markup="<div></div>",
            position={"x": 10, "y": 20.5},
        )
        assert screen.position.x == 10.0
        assert screen.position.y == 20.5


class TestInputs:
    """Tests for chat messages and reference assets."""

    @pytest.mark.unit
    def test_chat_message_roles(self):
        message = ChatMessage(role="assistant", content="Done")
        assert message.role == ChatRole.ASSISTANT

    @pytest.mark.unit
    def test_chat_message_rejects_system_role(self):
        with pytest.raises(ValidationError):
            ChatMessage(role="system", content="nope")

    @pytest.mark.unit
    def test_chat_message_is_frozen(self):
        message = ChatMessage(role="user", content="Hi")
        with pytest.raises(ValidationError):
            message.content = "changed"

    @pytest.mark.unit
    def test_reference_asset(self):
        asset = ReferenceAsset(type="html", data="<div></div>")
        assert asset.type == AssetType.HTML
        assert asset.name is None

    @pytest.mark.unit
    def test_reference_asset_rejects_unknown_type(self):
        with pytest.raises(ValidationError):
            ReferenceAsset(type="video", data="...")


class TestSnapshot:
    """Tests for Snapshot capture."""

    @pytest.mark.unit
    def test_capture(self, sample_document):
        snapshot = Snapshot.capture(sample_document, "First draft")

        assert snapshot.name == "First draft"
        assert snapshot.timestamp > 0
        assert len(snapshot.id) == 36
        assert snapshot.data == sample_document

    @pytest.mark.unit
    def test_capture_is_independent_copy(self, sample_document):
        """Later edits to the document do not leak into the snapshot."""
        snapshot = Snapshot.capture(sample_document, "Before edit")
        sample_document.screens[0].markup = "<div>edited</div>"
        assert snapshot.data.screens[0].markup != "<div>edited</div>"

    @pytest.mark.unit
    def test_unique_ids(self, sample_document):
        first = Snapshot.capture(sample_document, "a")
        second = Snapshot.capture(sample_document, "b")
        assert first.id != second.id
