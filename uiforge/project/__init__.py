"""UI project document models.

Example:
    >>> from uiforge.project import ProjectDocument, Snapshot
    >>> document = ProjectDocument.model_validate(payload)
    >>> snapshot = Snapshot.capture(document, "Before dark mode")
"""

from .lib import (
    Architecture,
    AssetType,
    ChatMessage,
    ChatRole,
    ColorPalette,
    Connection,
    DesignSystem,
    Overview,
    ProjectDocument,
    ProviderName,
    ReferenceAsset,
    ScreenDefinition,
    ScreenDraft,
    ScreenPosition,
    Snapshot,
    Theme,
)

__all__ = [
    # Enums
    "Theme",
    "Architecture",
    "ProviderName",
    "AssetType",
    "ChatRole",
    # Inputs
    "ChatMessage",
    "ReferenceAsset",
    # Document
    "ColorPalette",
    "DesignSystem",
    "Overview",
    "ScreenPosition",
    "ScreenDefinition",
    "Connection",
    "ProjectDocument",
    "ScreenDraft",
    # History
    "Snapshot",
]
