"""Ordered resolution rule table.

Each rule is a plain record carrying two pure functions; the table order is
the tie-break between rules of equal priority.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from docrecon.domain.deduplication import find_canonical, find_latest
from docrecon.domain.model import (
    CanonicalSourceKind,
    ConflictType,
    DocumentType,
    ResolutionStrategy,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from docrecon.domain.model import Conflict, Document


@dataclass(frozen=True, slots=True, kw_only=True)
class ResolutionRule:
    name: str
    priority: int
    confidence: float
    strategy: ResolutionStrategy
    applies: Callable[[Conflict], bool]
    resolve: Callable[[Conflict], Document | None]


def _first(conflict: Conflict, predicate: Callable[[Document], bool]) -> Document | None:
    return next((document for document in conflict.documents if predicate(document)), None)


def _is_explicit(document: Document) -> bool:
    return document.metadata.canonical_source.is_explicit


def _is_funding_yaml(document: Document) -> bool:
    metadata = document.metadata
    return (
        metadata.document_type is DocumentType.FUNDING
        and metadata.canonical_source.kind is CanonicalSourceKind.FUNDING_YAML
    )


def _is_license_file(document: Document) -> bool:
    metadata = document.metadata
    return (
        metadata.document_type is DocumentType.LICENSE
        and metadata.canonical_source.kind is CanonicalSourceKind.LICENSE_FILE
    )


def _is_sourced(document: Document) -> bool:
    return not document.metadata.canonical_source.is_inferred


def _highest_version(conflict: Conflict) -> Document | None:
    best: Document | None = None
    for document in conflict.documents:
        version = document.metadata.version
        if version is None:
            continue
        if best is None or (best.metadata.version is not None and version > best.metadata.version):
            best = document
    return best


RESOLUTION_RULES: Final[tuple[ResolutionRule, ...]] = (
    ResolutionRule(
        name="duplicate-keep-latest",
        priority=100,
        confidence=1.0,
        strategy=ResolutionStrategy.KEEP_LATEST,
        applies=lambda c: c.conflict_type is ConflictType.DUPLICATE_CONTENT,
        resolve=lambda c: find_latest(c.documents),
    ),
    ResolutionRule(
        name="explicit-canonical",
        priority=100,
        confidence=1.0,
        strategy=ResolutionStrategy.KEEP_CANONICAL,
        applies=lambda c: any(_is_explicit(d) for d in c.documents),
        resolve=lambda c: _first(c, _is_explicit),
    ),
    ResolutionRule(
        name="funding-yaml-canonical",
        priority=98,
        confidence=0.98,
        strategy=ResolutionStrategy.KEEP_CANONICAL,
        applies=lambda c: any(_is_funding_yaml(d) for d in c.documents),
        resolve=lambda c: _first(c, _is_funding_yaml),
    ),
    ResolutionRule(
        name="license-file-canonical",
        priority=95,
        confidence=0.95,
        strategy=ResolutionStrategy.KEEP_CANONICAL,
        applies=lambda c: any(_is_license_file(d) for d in c.documents),
        resolve=lambda c: _first(c, _is_license_file),
    ),
    ResolutionRule(
        name="keep-highest-semver",
        priority=85,
        confidence=0.85,
        strategy=ResolutionStrategy.KEEP_HIGHEST_VERSION,
        applies=lambda c: all(d.metadata.version is not None for d in c.documents),
        resolve=_highest_version,
    ),
    ResolutionRule(
        name="canonical-over-inferred",
        priority=80,
        confidence=0.80,
        strategy=ResolutionStrategy.KEEP_CANONICAL,
        applies=lambda c: any(_is_sourced(d) for d in c.documents),
        resolve=lambda c: find_canonical(c.documents),
    ),
)


def find_applicable_rule(
    conflict: Conflict, rules: tuple[ResolutionRule, ...] = RESOLUTION_RULES
) -> ResolutionRule | None:
    """Highest-priority rule whose predicate holds; table order breaks ties."""

    candidates = [rule for rule in rules if rule.applies(conflict)]
    if not candidates:
        return None
    # sorted() is stable, so equal priorities keep table order
    return sorted(candidates, key=lambda rule: rule.priority, reverse=True)[0]
