"""Conflict detection and rule-based resolution."""

from __future__ import annotations

from .detect import (
    canonical_conflict_id,
    detect_canonical_conflicts,
    detect_conflicts,
    detect_duplicate_conflicts,
    detect_version_conflicts,
    duplicate_conflict_id,
    version_conflict_id,
)
from .resolve import (
    ExplainConflict,
    create_superseded_edges,
    resolve_conflict,
    resolve_conflicts,
)
from .rules import RESOLUTION_RULES, ResolutionRule, find_applicable_rule

__all__ = [
    "RESOLUTION_RULES",
    "ExplainConflict",
    "ResolutionRule",
    "canonical_conflict_id",
    "create_superseded_edges",
    "detect_canonical_conflicts",
    "detect_conflicts",
    "detect_duplicate_conflicts",
    "detect_version_conflicts",
    "duplicate_conflict_id",
    "find_applicable_rule",
    "resolve_conflict",
    "resolve_conflicts",
    "version_conflict_id",
]
