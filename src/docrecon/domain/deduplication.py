"""Hash-keyed deduplication and canonical-source selection.

All functions are pure over their inputs; ordering is always the order in
which documents were handed in.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

from docrecon.domain.model import CanonicalSourceKind, Edge, EdgeType

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from docrecon.domain.model import CanonicalSource, ContentHash, Document

DUPLICATE_EDGE_CONFIDENCE: Final[float] = 1.0

CANONICAL_PRIORITY: Final[dict[CanonicalSourceKind, int]] = {
    CanonicalSourceKind.EXPLICIT: 100,
    CanonicalSourceKind.FUNDING_YAML: 98,
    CanonicalSourceKind.LICENSE_FILE: 95,
    CanonicalSourceKind.SECURITY_MD: 90,
    CanonicalSourceKind.CITATION_CFF: 90,
    CanonicalSourceKind.PACKAGE_JSON: 85,
    CanonicalSourceKind.CARGO_TOML: 85,
    CanonicalSourceKind.INFERRED: 50,
}


@dataclass(frozen=True, slots=True)
class DuplicatePair:
    duplicate: Document
    original: Document


@dataclass(frozen=True, slots=True)
class DeduplicationStats:
    total_processed: int = 0
    unique_count: int = 0
    duplicate_count: int = 0
    spaces_saved: int = 0


@dataclass(frozen=True, slots=True)
class DeduplicationResult:
    unique: tuple[Document, ...] = ()
    duplicates: tuple[DuplicatePair, ...] = ()
    stats: DeduplicationStats = field(default_factory=DeduplicationStats)


def _content_size(document: Document) -> int:
    return len(document.content.encode("utf-8"))


def deduplicate(documents: Sequence[Document]) -> DeduplicationResult:
    """Split ``documents`` into first-seen uniques and (duplicate, original) pairs."""

    first_seen: dict[ContentHash, Document] = {}
    duplicates: list[DuplicatePair] = []
    total_bytes = 0
    unique_bytes = 0

    for document in documents:
        size = _content_size(document)
        total_bytes += size
        original = first_seen.get(document.hash)
        if original is None:
            first_seen[document.hash] = document
            unique_bytes += size
            continue
        duplicates.append(DuplicatePair(duplicate=document, original=original))

    unique = tuple(first_seen.values())
    stats = DeduplicationStats(
        total_processed=len(documents),
        unique_count=len(unique),
        duplicate_count=len(duplicates),
        spaces_saved=total_bytes - unique_bytes,
    )
    return DeduplicationResult(unique=unique, duplicates=tuple(duplicates), stats=stats)


def find_duplicates(target: Document, documents: Iterable[Document]) -> list[Document]:
    """Documents with the same hash as ``target`` stored at a different path."""

    return [
        document
        for document in documents
        if document is not target
        and document.hash == target.hash
        and document.metadata.path != target.metadata.path
    ]


def is_duplicate(left: Document, right: Document) -> bool:
    return left.hash == right.hash


def group_by_hash(documents: Iterable[Document]) -> dict[ContentHash, list[Document]]:
    groups: dict[ContentHash, list[Document]] = {}
    for document in documents:
        groups.setdefault(document.hash, []).append(document)
    return groups


def find_latest(documents: Iterable[Document]) -> Document | None:
    """Most recently modified document; the first one wins ties."""

    latest: Document | None = None
    for document in documents:
        if latest is None or document.metadata.last_modified > latest.metadata.last_modified:
            latest = document
    return latest


def get_canonical_priority(source: CanonicalSource) -> int:
    return CANONICAL_PRIORITY[source.kind]


def find_canonical(documents: Iterable[Document]) -> Document | None:
    """Highest canonical priority; equal priorities prefer the later ``last_modified``."""

    best: Document | None = None
    best_priority = -1
    for document in documents:
        priority = get_canonical_priority(document.metadata.canonical_source)
        if best is None or priority > best_priority:
            best, best_priority = document, priority
        elif (
            priority == best_priority
            and document.metadata.last_modified > best.metadata.last_modified
        ):
            best = document
    return best


def create_duplicate_edges(pairs: Iterable[DuplicatePair]) -> list[Edge]:
    return [
        Edge(
            from_hash=pair.duplicate.hash,
            to_hash=pair.original.hash,
            edge_type=EdgeType.DUPLICATE_OF,
            confidence=DUPLICATE_EDGE_CONFIDENCE,
            metadata={
                "duplicate_path": pair.duplicate.metadata.path,
                "original_path": pair.original.metadata.path,
            },
        )
        for pair in pairs
    ]
