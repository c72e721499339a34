"""Domain port definitions for adapters."""

from __future__ import annotations

from .persistence import PersistenceError, ReconciliationStore
from .scanning import RepositoryScanner, ScanError
from .validation import (
    BundleValidationResult,
    RuleEvaluator,
    SchemaValidationError,
    SchemaValidationResult,
    SchemaValidator,
    SchemaViolation,
    ValidationMessage,
    ViolationSeverity,
)

__all__ = [
    "BundleValidationResult",
    "PersistenceError",
    "ReconciliationStore",
    "RepositoryScanner",
    "RuleEvaluator",
    "ScanError",
    "SchemaValidationError",
    "SchemaValidationResult",
    "SchemaValidator",
    "SchemaViolation",
    "ValidationMessage",
    "ViolationSeverity",
]
