"""Tests for PromptBuilder module."""

import json

import pytest

from uiforge.project import Architecture, ChatMessage, ScreenDefinition, Theme
from uiforge.prompt import (
    DESIGN_RULES,
    NO_EXISTING_SCREENS,
    PromptBuilder,
    PromptPair,
    format_chat_history,
    format_existing_screens,
)


@pytest.fixture
def builder():
    """Create a PromptBuilder with the default rules."""
    return PromptBuilder()


@pytest.fixture
def history():
    """Short design conversation."""
    return [
        ChatMessage(role="user", content="Make it purple"),
        ChatMessage(role="assistant", content="Switched the primary color"),
    ]


class TestFormatting:
    """Tests for listing helpers."""

    @pytest.mark.unit
    def test_chat_history_lines(self, history):
        assert format_chat_history(history) == (
            "USER: Make it purple\nASSISTANT: Switched the primary color"
        )

    @pytest.mark.unit
    def test_empty_chat_history(self):
        assert format_chat_history(None) == ""
        assert format_chat_history([]) == ""

    @pytest.mark.unit
    def test_no_existing_screens(self):
        assert format_existing_screens(None) == "No existing screens."
        assert format_existing_screens([]) == NO_EXISTING_SCREENS

    @pytest.mark.unit
    def test_existing_screens_listing(self, sample_document):
        listing = format_existing_screens(sample_document.screens)
        assert listing.count("---") == 1
        assert listing.startswith("SCREEN: Home (ID: home)\nMARKUP:\n<div")


class TestArtifactPrompt:
    """Tests for full project prompts."""

    @pytest.mark.unit
    def test_user_request_is_quoted(self, builder):
        pair = builder.build_artifact_prompt("a habit tracker app", Theme.DARK, Architecture.APP)
        assert pair.user_prompt == 'USER REQUEST: "a habit tracker app"'

    @pytest.mark.unit
    def test_theme_and_architecture(self, builder):
        pair = builder.build_artifact_prompt("x", Theme.LIGHT, Architecture.WEB)
        assert "rendered in LIGHT MODE" in pair.system_instruction
        assert "Theme: LIGHT" in pair.system_instruction
        assert "Architecture: WEB." in pair.system_instruction

    @pytest.mark.unit
    def test_includes_rules_and_incremental_directive(self, builder):
        pair = builder.build_artifact_prompt("x", Theme.DARK, Architecture.APP)
        assert DESIGN_RULES in pair.system_instruction
        assert "Return ENTIRE project state" in pair.system_instruction
        assert "Lead Cross-Platform UI/UX Designer" in pair.system_instruction

    @pytest.mark.unit
    def test_no_existing_screens_statement(self, builder):
        pair = builder.build_artifact_prompt("x", Theme.DARK, Architecture.APP)
        assert "No existing screens." in pair.system_instruction

    @pytest.mark.unit
    def test_existing_screens_verbatim(self, builder, sample_document):
        pair = builder.build_artifact_prompt(
            "x", Theme.DARK, Architecture.APP, existing_screens=sample_document.screens
        )
        for screen in sample_document.screens:
            assert screen.name in pair.system_instruction
            assert f"(ID: {screen.id})" in pair.system_instruction
            assert screen.markup in pair.system_instruction
        assert "No existing screens." not in pair.system_instruction

    @pytest.mark.unit
    def test_chat_context(self, builder, history):
        pair = builder.build_artifact_prompt(
            "x", Theme.DARK, Architecture.APP, chat_history=history
        )
        assert "# CHAT CONTEXT\nUSER: Make it purple" in pair.system_instruction

    @pytest.mark.unit
    def test_token_estimate(self, builder):
        pair = builder.build_artifact_prompt("x", Theme.DARK, Architecture.APP)
        assert pair.total_tokens_estimate > 0


class TestScreenPrompts:
    """Tests for new-screen, modify and refine prompts."""

    @pytest.mark.unit
    def test_new_screen_prompt(self, builder, sample_document):
        pair = builder.build_new_screen_prompt(
            "Settings with notification toggles",
            sample_document.design_system,
            sample_document.overview,
            sample_document.screens,
        )
        assert pair.system_instruction == "Elite UI/UX engineer. Return JSON."
        assert 'Generate ONE new screen for "Streak".' in pair.user_prompt
        assert "PURPOSE: Settings with notification toggles" in pair.user_prompt
        assert "copy the navigation block" in pair.user_prompt
        assert "SCREEN: Stats\n" in pair.user_prompt
        design_json = json.dumps(sample_document.design_system.model_dump(by_alias=True))
        assert design_json in pair.user_prompt
        assert DESIGN_RULES in pair.user_prompt

    @pytest.mark.unit
    def test_new_screen_does_not_mutate_inputs(self, builder, sample_document):
        screens = list(sample_document.screens)
        before = [s.model_dump() for s in screens]
        builder.build_new_screen_prompt(
            "Profile", sample_document.design_system, sample_document.overview, screens
        )
        assert [s.model_dump() for s in screens] == before

    @pytest.mark.unit
    def test_modify_prompt(self, builder, history):
        markup = '<div id="root"><h1>Hi</h1></div>'
        pair = builder.build_modify_prompt("Home", markup, "Add a search bar", history)
        assert pair.system_instruction == "Refine this screen while maintaining structure."
        assert "Refine screen: Home" in pair.user_prompt
        assert "INSTRUCTION: Add a search bar" in pair.user_prompt
        assert "USER: Make it purple" in pair.user_prompt
        assert pair.user_prompt.endswith(f"CURRENT MARKUP:\n{markup}\n")

    @pytest.mark.unit
    def test_refine_prompt(self, builder):
        pair = builder.build_refine_prompt("todo app but fun")
        assert pair == PromptPair(
            system_instruction="", user_prompt='Refine app idea: "todo app but fun"'
        )

    @pytest.mark.unit
    def test_custom_rules(self, sample_document):
        builder = PromptBuilder(design_rules="ONLY GREYSCALE")
        pair = builder.build_modify_prompt("Home", "<div/>", "tweak")
        assert "ONLY GREYSCALE" in pair.user_prompt
        assert DESIGN_RULES not in pair.user_prompt
