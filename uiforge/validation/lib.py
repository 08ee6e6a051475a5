"""Boundary validation of provider output.

This module turns the raw text returned by a provider into typed documents,
producing an explicit success/failure value instead of trusting provider
compliance with the requested schema. Validation is strict: values are never
coerced (a number where a string is expected is an issue, not a conversion).
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from uiforge.project import ProjectDocument, ScreenDraft

DocumentT = TypeVar("DocumentT", bound=BaseModel)


@dataclass
class ValidationIssue:
    """Represents one contract violation in a provider document.

    Attributes:
        location: Dotted path to the offending value (e.g. "screens.0.markup").
        message: Human-readable error description.
        error_type: Category of the error (pydantic error type or "invalid_json").
    """

    location: str
    message: str
    error_type: str


@dataclass
class ValidationResult(Generic[DocumentT]):
    """Outcome of validating provider text against a document model.

    Attributes:
        raw_text: Text exactly as returned by the provider.
        document: Parsed document when validation succeeded.
        issues: Contract violations (empty on success).
        json_error: Decode error when the text was not JSON at all.
    """

    raw_text: str
    document: DocumentT | None = None
    issues: list[ValidationIssue] = field(default_factory=list)
    json_error: json.JSONDecodeError | None = None

    @property
    def ok(self) -> bool:
        """True when a document was produced without issues."""
        return self.document is not None and not self.issues

    def format_issues(self) -> str:
        """Format issues one per line for error messages and logs."""
        return "\n".join(
            f"- {issue.location or '<root>'}: {issue.message}" for issue in self.issues
        )


def validate_document(text: str, model: type[DocumentT]) -> ValidationResult[DocumentT]:
    """Validate provider text against a document model.

    Args:
        text: Raw provider output.
        model: Pydantic model describing the expected document.

    Returns:
        ValidationResult carrying either the document or the issues found.

    Example:
        >>> result = validate_document('{"name": "Home", "markup": "<div/>"}', ScreenDraft)
        >>> result.ok
        True
    """
    result: ValidationResult[DocumentT] = ValidationResult(raw_text=text)

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        result.json_error = e
        result.issues.append(
            ValidationIssue(location="", message=str(e), error_type="invalid_json")
        )
        return result

    try:
        result.document = model.model_validate(data, strict=True)
    except PydanticValidationError as e:
        for error in e.errors():
            result.issues.append(
                ValidationIssue(
                    location=".".join(str(part) for part in error["loc"]),
                    message=error["msg"],
                    error_type=error["type"],
                )
            )

    return result


def validate_project_document(text: str) -> ValidationResult[ProjectDocument]:
    """Validate a full project document."""
    return validate_document(text, ProjectDocument)


def validate_screen_draft(text: str) -> ValidationResult[ScreenDraft]:
    """Validate a single-screen {name, markup} document."""
    return validate_document(text, ScreenDraft)


def is_valid(text: str, model: type[BaseModel]) -> bool:
    """Check whether provider text satisfies a document model."""
    return validate_document(text, model).ok


__all__ = [
    "DocumentT",
    "ValidationIssue",
    "ValidationResult",
    "validate_document",
    "validate_project_document",
    "validate_screen_draft",
    "is_valid",
]
