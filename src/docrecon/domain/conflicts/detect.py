"""Conflict detection over a normalized document set.

Three independent passes run over the same input, so a document can appear
in several conflicts. Output order is every duplicate conflict (first-seen
hash order), then version conflicts, then canonical conflicts (first-seen
document type order).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from docrecon.domain.clock import utcnow
from docrecon.domain.deduplication import group_by_hash
from docrecon.domain.model import (
    Conflict,
    ConflictType,
    ResolutionStrategy,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from datetime import datetime

    from docrecon.domain.clock import Clock
    from docrecon.domain.model import Document

DUPLICATE_CONFIDENCE: Final[float] = 1.0
VERSION_CONFIDENCE: Final[float] = 0.8
CANONICAL_CONFIDENCE: Final[float] = 0.7


def duplicate_conflict_id(content_hash: str) -> str:
    return f"{content_hash}_duplicate"


def version_conflict_id(document_type: str) -> str:
    return f"{document_type}_version_conflict"


def canonical_conflict_id(document_type: str) -> str:
    return f"{document_type}_canonical_conflict"


def _group_by_type(documents: Iterable[Document]) -> dict[str, list[Document]]:
    groups: dict[str, list[Document]] = {}
    for document in documents:
        groups.setdefault(document.metadata.document_type_name, []).append(document)
    return groups


def detect_duplicate_conflicts(
    documents: Iterable[Document], *, detected_at: datetime
) -> list[Conflict]:
    conflicts: list[Conflict] = []
    for content_hash, group in group_by_hash(documents).items():
        if len(group) < 2 or len({document.metadata.path for document in group}) < 2:
            continue
        conflicts.append(
            Conflict(
                id=duplicate_conflict_id(content_hash),
                conflict_type=ConflictType.DUPLICATE_CONTENT,
                documents=tuple(group),
                detected_at=detected_at,
                confidence=DUPLICATE_CONFIDENCE,
                suggested_strategy=ResolutionStrategy.KEEP_LATEST,
            )
        )
    return conflicts


def detect_version_conflicts(
    documents: Iterable[Document], *, detected_at: datetime
) -> list[Conflict]:
    conflicts: list[Conflict] = []
    for type_name, group in _group_by_type(documents).items():
        versions = [
            document.metadata.version
            for document in group
            if document.metadata.version is not None
        ]
        if len(versions) < 2 or len(set(versions)) < 2:
            continue
        conflicts.append(
            Conflict(
                id=version_conflict_id(type_name),
                conflict_type=ConflictType.VERSION_MISMATCH,
                documents=tuple(group),
                detected_at=detected_at,
                confidence=VERSION_CONFIDENCE,
                suggested_strategy=ResolutionStrategy.KEEP_HIGHEST_VERSION,
            )
        )
    return conflicts


def detect_canonical_conflicts(
    documents: Iterable[Document], *, detected_at: datetime
) -> list[Conflict]:
    conflicts: list[Conflict] = []
    for type_name, group in _group_by_type(documents).items():
        sourced = [
            document
            for document in group
            if not document.metadata.canonical_source.is_inferred
        ]
        if len(sourced) < 2:
            continue
        conflicts.append(
            Conflict(
                id=canonical_conflict_id(type_name),
                conflict_type=ConflictType.CANONICAL_CONFLICT,
                documents=tuple(sourced),
                detected_at=detected_at,
                confidence=CANONICAL_CONFIDENCE,
                suggested_strategy=ResolutionStrategy.KEEP_CANONICAL,
            )
        )
    return conflicts


def detect_conflicts(documents: Sequence[Document], *, clock: Clock = utcnow) -> list[Conflict]:
    """Run the duplicate, version and canonical passes over ``documents``."""

    detected_at = clock()
    return [
        *detect_duplicate_conflicts(documents, detected_at=detected_at),
        *detect_version_conflicts(documents, detected_at=detected_at),
        *detect_canonical_conflicts(documents, detected_at=detected_at),
    ]
