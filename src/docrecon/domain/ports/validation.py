"""Ports for per-document schema validation and bundle rule evaluation."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from docrecon.domain.model import Document


class SchemaValidationError(Exception):
    """The validator could not produce a result."""


class ViolationSeverity(StrEnum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True, slots=True)
class SchemaViolation:
    field: str
    message: str
    severity: ViolationSeverity = ViolationSeverity.ERROR


@dataclass(frozen=True, slots=True)
class SchemaValidationResult:
    is_valid: bool
    violations: tuple[SchemaViolation, ...] = ()
    confidence: float = 1.0


@runtime_checkable
class SchemaValidator(Protocol):
    """Validate raw content against the schema of its document type."""

    def validate(self, document_type: str, content: str) -> SchemaValidationResult: ...


@dataclass(frozen=True, slots=True)
class ValidationMessage:
    message: str
    path: str | None = None
    rule: str | None = None


@dataclass(frozen=True, slots=True)
class BundleValidationResult:
    success: bool
    errors: tuple[ValidationMessage, ...] = ()
    warnings: tuple[ValidationMessage, ...] = ()
    suggestions: tuple[ValidationMessage, ...] = ()


@runtime_checkable
class RuleEvaluator(Protocol):
    """Evaluate a bundle rule script against a set of documents."""

    def evaluate(self, script: str, documents: Sequence[Document]) -> BundleValidationResult: ...


__all__ = [
    "BundleValidationResult",
    "RuleEvaluator",
    "SchemaValidationError",
    "SchemaValidationResult",
    "SchemaValidator",
    "SchemaViolation",
    "ValidationMessage",
    "ViolationSeverity",
]
