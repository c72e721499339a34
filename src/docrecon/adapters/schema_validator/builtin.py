"""In-process schema checks for the well-known documentation files.

Each document type has a short list of keyword checks. A document with any
violation is invalid and gets the type's reduced confidence.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from docrecon.domain.model import DocumentType
from docrecon.domain.ports import (
    SchemaValidationResult,
    SchemaViolation,
    ViolationSeverity,
)

if TYPE_CHECKING:
    from collections.abc import Callable

type Check = Callable[[str], SchemaViolation | None]

ERROR = ViolationSeverity.ERROR
WARNING = ViolationSeverity.WARNING


def _contains_any(content: str, needles: tuple[str, ...]) -> bool:
    return any(needle in content for needle in needles)


def _require(
    needles: tuple[str, ...],
    field: str,
    message: str,
    severity: ViolationSeverity,
    *,
    window: int | None = None,
) -> Check:
    def check(content: str) -> SchemaViolation | None:
        haystack = content if window is None else content[:window]
        if _contains_any(haystack, needles):
            return None
        return SchemaViolation(field=field, message=message, severity=severity)

    return check


def _not_empty(label: str) -> Check:
    def check(content: str) -> SchemaViolation | None:
        if content.strip():
            return None
        return SchemaViolation(field="content", message=f"{label} cannot be empty", severity=ERROR)

    return check


@dataclass(frozen=True, slots=True)
class TypeSchema:
    checks: tuple[Check, ...]
    failure_confidence: float


SCHEMAS: Final[dict[str, TypeSchema]] = {
    DocumentType.LICENSE: TypeSchema(
        checks=(
            _not_empty("License file"),
            _require(
                ("license", "License", "LICENSE"),
                "content",
                "License file should contain the word 'license'",
                WARNING,
            ),
            _require(
                ("Copyright", "copyright", "©"),
                "copyright",
                "License should include a copyright notice",
                WARNING,
            ),
        ),
        failure_confidence=0.5,
    ),
    DocumentType.SECURITY: TypeSchema(
        checks=(
            _not_empty("SECURITY.md"),
            _require(
                ("Reporting", "reporting", "Report"),
                "structure",
                "SECURITY.md should include reporting instructions",
                ERROR,
            ),
            _require(
                ("email", "Email", "contact", "Contact"),
                "contact",
                "SECURITY.md should include contact information",
                WARNING,
            ),
            _require(
                ("vulnerability", "Vulnerability", "security issue"),
                "content",
                "SECURITY.md should mention vulnerabilities or security issues",
                WARNING,
            ),
        ),
        failure_confidence=0.6,
    ),
    DocumentType.CONTRIBUTING: TypeSchema(
        checks=(
            _not_empty("CONTRIBUTING.md"),
            _require(
                ("contribute", "Contribute", "Contributing"),
                "structure",
                "CONTRIBUTING.md should mention how to contribute",
                ERROR,
            ),
            _require(
                ("pull request", "Pull Request", "PR"),
                "content",
                "CONTRIBUTING.md should include pull request guidelines",
                WARNING,
            ),
        ),
        failure_confidence=0.7,
    ),
    DocumentType.README: TypeSchema(
        checks=(
            _not_empty("README.md"),
            _require(
                ("#", "Title"),
                "structure",
                "README.md should start with a title (# heading)",
                WARNING,
                window=100,
            ),
            _require(
                ("install", "Install", "Installation", "Setup", "setup"),
                "content",
                "README.md should include installation or setup instructions",
                WARNING,
            ),
        ),
        failure_confidence=0.8,
    ),
    DocumentType.FUNDING: TypeSchema(
        checks=(
            _not_empty("FUNDING.yml"),
            _require(
                ("github", "patreon", "open_collective", "custom"),
                "platforms",
                "FUNDING.yml should specify at least one funding platform",
                ERROR,
            ),
        ),
        failure_confidence=0.9,
    ),
    DocumentType.CITATION: TypeSchema(
        checks=(
            _not_empty("CITATION.cff"),
            _require(
                ("cff-version", "title", "authors"),
                "format",
                "CITATION.cff should include required fields (cff-version, title, authors)",
                ERROR,
            ),
        ),
        failure_confidence=0.85,
    ),
}


class BuiltinSchemaValidator:
    """``SchemaValidator`` evaluating ``SCHEMAS`` in process; unknown types always pass."""

    def validate(self, document_type: str, content: str) -> SchemaValidationResult:
        schema = SCHEMAS.get(document_type)
        if schema is None:
            return SchemaValidationResult(is_valid=True)

        violations = tuple(
            violation for check in schema.checks if (violation := check(content)) is not None
        )
        if violations:
            return SchemaValidationResult(
                is_valid=False, violations=violations, confidence=schema.failure_confidence
            )
        return SchemaValidationResult(is_valid=True)
