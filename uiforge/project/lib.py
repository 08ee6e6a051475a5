"""UI project document models.

Defines the canonical document produced by generation (overview, design system,
screens, connections) together with the conversational inputs that steer it
(chat messages, reference assets) and the snapshot shape a consumer may persist.

Response models keep unknown keys (``extra="allow"``) so a provider document
round-trips through ``model_dump(by_alias=True, exclude_unset=True)`` without
losing fields. Strictness is applied at the validation boundary, see
``uiforge.validation``.
"""

from __future__ import annotations

import time
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

# =============================================================================
# Enumerations
# =============================================================================


class Theme(str, Enum):
    """Color mode the generated product must be rendered in."""

    LIGHT = "light"
    DARK = "dark"


class Architecture(str, Enum):
    """Target platform of the generated screens.

    - WEB: Desktop-first layouts with sidebar or top bar navigation
    - APP: Mobile layouts with floating bottom navigation
    """

    WEB = "web"
    APP = "app"


class ProviderName(str, Enum):
    """Generative-AI backends a request can be routed to."""

    GEMINI = "gemini"
    OPENROUTER = "openrouter"


class AssetType(str, Enum):
    """Kind of caller-supplied reference material."""

    IMAGE = "image"
    HTML = "html"


class ChatRole(str, Enum):
    """Speaker of a chat transcript entry."""

    USER = "user"
    ASSISTANT = "assistant"


# =============================================================================
# Conversational Inputs
# =============================================================================


class ChatMessage(BaseModel):
    """A single turn of the design conversation, used only as context."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    role: ChatRole
    content: str


class ReferenceAsset(BaseModel):
    """Visual or markup context supplied by the caller.

    Attributes:
        type: Asset kind. Only images can be forwarded to a provider.
        data: Raw payload, possibly a ``data:<mime>;base64,`` URI.
        name: Optional display name.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: AssetType
    data: str
    name: str | None = None


# =============================================================================
# Project Document
# =============================================================================


class _DocumentModel(BaseModel):
    """Base for provider-produced documents."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)


class ColorPalette(_DocumentModel):
    """Fixed eight-token palette shared by every screen."""

    primary: str
    secondary: str
    background: str
    surface: str
    text: str
    accent: str
    muted: str
    border: str


class DesignSystem(_DocumentModel):
    """Design tokens applied across all generated screens.

    Attributes:
        colors: Eight-key color palette.
        radius: CSS length used for corner rounding (e.g. "12px").
        font: A single font family name, without fallbacks.
    """

    colors: ColorPalette
    radius: str
    font: str


class Overview(_DocumentModel):
    """Product summary."""

    name: str
    description: str
    target_users: list[str] = Field(alias="targetUsers")


class ScreenPosition(_DocumentModel):
    """Canvas placement of a screen."""

    x: float
    y: float


class ScreenDefinition(_DocumentModel):
    """One generated screen.

    Id uniqueness across a project is the caller's responsibility.
    """

    id: str
    name: str
    purpose: str
    markup: str
    position: ScreenPosition | None = None


class Connection(_DocumentModel):
    """Navigation edge between two screens, referenced by screen id."""

    source: str = Field(alias="from")
    target: str = Field(alias="to")
    label: str


class ProjectDocument(_DocumentModel):
    """Complete UI project state returned by artifact generation."""

    overview: Overview
    design_system: DesignSystem = Field(alias="designSystem")
    screens: list[ScreenDefinition]
    connections: list[Connection] | None = None

    def get_screen(self, screen_id: str) -> ScreenDefinition | None:
        """Return the first screen with the given id, if any."""
        for screen in self.screens:
            if screen.id == screen_id:
                return screen
        return None

    def to_wire(self) -> dict:
        """Serialize using the camelCase field names of the wire format.

        Only keys that were set are emitted, so explicit nulls survive and
        unset optional fields stay absent.
        """
        return self.model_dump(by_alias=True, exclude_unset=True)


class ScreenDraft(_DocumentModel):
    """Single screen produced by new-screen and modify operations.

    Carries no id; the caller assigns one when adding it to a project.
    """

    name: str
    markup: str


# =============================================================================
# Snapshot
# =============================================================================


class Snapshot(BaseModel):
    """Named, timestamped copy of a project document.

    Attributes:
        id: Unique snapshot identifier.
        name: Human-readable label.
        timestamp: Capture time in epoch milliseconds.
        data: The captured project document.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    timestamp: int
    data: ProjectDocument

    @classmethod
    def capture(cls, document: ProjectDocument, name: str) -> Snapshot:
        """Snapshot a document under a fresh id and the current time."""
        return cls(
            id=str(uuid4()),
            name=name,
            timestamp=int(time.time() * 1000),
            data=document.model_copy(deep=True),
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
