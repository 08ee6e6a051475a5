"""uiforge: natural language to structured UI mockup documents."""

from uiforge.llm import (
    ArtifactRequest,
    LLMError,
    MockupGenerator,
    ProjectContext,
)
from uiforge.project import (
    Architecture,
    ChatMessage,
    DesignSystem,
    ProjectDocument,
    ProviderName,
    ReferenceAsset,
    ScreenDefinition,
    ScreenDraft,
    Snapshot,
    Theme,
)
from uiforge.validation import ValidationResult, is_valid, validate_project_document

__all__ = [
    # Generation
    "MockupGenerator",
    "ArtifactRequest",
    "ProjectContext",
    "LLMError",
    # Documents
    "ProjectDocument",
    "DesignSystem",
    "ScreenDefinition",
    "ScreenDraft",
    "Snapshot",
    "ChatMessage",
    "ReferenceAsset",
    # Enums
    "Theme",
    "Architecture",
    "ProviderName",
    # Validation
    "validate_project_document",
    "is_valid",
    "ValidationResult",
]
