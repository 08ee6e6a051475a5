"""Prompt construction for UI mockup generation."""

from .lib import (
    ANALYSIS_DIRECTIVE,
    DESIGN_RULES,
    NO_EXISTING_SCREENS,
    PromptBuilder,
    PromptPair,
    format_chat_history,
    format_existing_screens,
)

__all__ = [
    "PromptBuilder",
    "PromptPair",
    "format_chat_history",
    "format_existing_screens",
    "DESIGN_RULES",
    "ANALYSIS_DIRECTIVE",
    "NO_EXISTING_SCREENS",
]
