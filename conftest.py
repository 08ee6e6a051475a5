"""Root pytest configuration and fixtures.

This module provides:
- Environment setup (loads .env)
- Sample project documents shared across packages
"""

from __future__ import annotations

import copy
from typing import Any

import pytest
from dotenv import load_dotenv

from uiforge.project import DesignSystem, ProjectDocument

# Load environment variables from .env file
load_dotenv()


# =============================================================================
# Sample Documents
# =============================================================================

HABIT_TRACKER_DOCUMENT: dict[str, Any] = {
    "overview": {
        "name": "Streak",
        "description": "A habit tracker that keeps daily routines visible.",
        "targetUsers": ["Students", "Remote workers"],
    },
    "designSystem": {
        "colors": {
            "primary": "#7C3AED",
            "secondary": "#06B6D4",
            "background": "#0B0B12",
            "surface": "#161622",
            "text": "#F4F4F5",
            "accent": "#F472B6",
            "muted": "#71717A",
            "border": "#27272A",
        },
        "radius": "16px",
        "font": "Inter",
    },
    "screens": [
        {
            "id": "home",
            "name": "Home",
            "purpose": "Today's habits and streaks",
            "markup": '<div class="relative w-full min-h-screen"><nav id="tabs">Home</nav></div>',
        },
        {
            "id": "stats",
            "name": "Stats",
            "purpose": "Weekly completion charts",
            "markup": '<div class="relative w-full min-h-screen"><svg></svg><nav id="tabs">Stats</nav></div>',
        },
    ],
}


@pytest.fixture
def sample_document_dict() -> dict[str, Any]:
    """Wire-format project document matching the response schema exactly."""
    return copy.deepcopy(HABIT_TRACKER_DOCUMENT)


@pytest.fixture
def sample_document(sample_document_dict: dict[str, Any]) -> ProjectDocument:
    """Parsed sample project document."""
    return ProjectDocument.model_validate(sample_document_dict)


@pytest.fixture
def sample_design_system(sample_document: ProjectDocument) -> DesignSystem:
    """Design system of the sample document."""
    return sample_document.design_system
