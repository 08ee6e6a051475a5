"""Provider output validation.

This module validates raw provider text against the project document
contracts before it reaches callers.
"""

from .lib import (
    DocumentT,
    ValidationIssue,
    ValidationResult,
    is_valid,
    validate_document,
    validate_project_document,
    validate_screen_draft,
)

__all__ = [
    "DocumentT",
    "ValidationIssue",
    "ValidationResult",
    "validate_document",
    "validate_project_document",
    "validate_screen_draft",
    "is_valid",
]
