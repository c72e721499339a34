from __future__ import annotations

from typing import TYPE_CHECKING

from docrecon.adapters.records import edge_key
from docrecon.adapters.sqlalchemy import (
    SqlAlchemyConflictRepository,
    SqlAlchemyDocumentRepository,
    SqlAlchemyEdgeRepository,
    SqlAlchemyResolutionRepository,
)
from docrecon.domain.conflicts import detect_conflicts, resolve_conflict
from docrecon.domain.model import CanonicalSource, Edge, EdgeType
from tests.helpers.documents import FIXED_NOW, fixed_clock, make_document

if TYPE_CHECKING:
    from sqlalchemy.orm import Session


def test_document_upsert_replaces_by_hash(sqlite_session: Session) -> None:
    repository = SqlAlchemyDocumentRepository(sqlite_session)
    first = make_document("same", path="README.md", version="1.0.0")
    moved = make_document("same", path="docs/README.md", source=CanonicalSource.explicit("up"))

    repository.add(first)
    repository.add(moved)
    sqlite_session.commit()

    assert repository.count() == 1
    record = repository.get(first.hash)
    assert record is not None
    assert record.path == "docs/README.md"
    assert record.canonical_source == "Explicit(up)"
    assert record.version is None
    assert record.created_at == FIXED_NOW


def test_edge_repository_keys_by_endpoints_and_type(sqlite_session: Session) -> None:
    repository = SqlAlchemyEdgeRepository(sqlite_session)
    edge = Edge(
        from_hash="a",
        to_hash="b",
        edge_type=EdgeType.DUPLICATE_OF,
        confidence=1.0,
        metadata={"duplicate_path": "x"},
    )
    other = Edge(from_hash="a", to_hash="b", edge_type=EdgeType.SUPERSEDED_BY, confidence=0.85)

    repository.add(edge)
    repository.add(edge)
    repository.add(other)
    sqlite_session.commit()

    assert repository.count() == 2
    record = repository.get(edge_key(edge))
    assert record is not None
    assert record.edge_metadata == {"duplicate_path": "x"}
    assert record.edge_type == "DuplicateOf"


def test_conflict_and_resolution_round_trip(sqlite_session: Session) -> None:
    a = make_document("same", path="README.md", modified=1000)
    b = make_document("same", path="docs/README.md", modified=2000)
    (conflict,) = detect_conflicts([a, b], clock=fixed_clock)
    resolution = resolve_conflict(conflict, 0.9, clock=fixed_clock)

    conflicts = SqlAlchemyConflictRepository(sqlite_session)
    resolutions = SqlAlchemyResolutionRepository(sqlite_session)
    conflicts.add(conflict)
    resolutions.add(resolution)
    sqlite_session.commit()

    stored_conflict = conflicts.get(conflict.id)
    assert stored_conflict is not None
    assert stored_conflict.document_hashes == [a.hash, b.hash]
    assert stored_conflict.conflict_type == "DuplicateContent"
    assert stored_conflict.detected_at == FIXED_NOW

    (stored_resolution,) = resolutions.list_all()
    assert stored_resolution.conflict_id == conflict.id
    assert stored_resolution.selected_hash == b.hash
    assert stored_resolution.strategy == "KeepLatest"
    assert stored_resolution.requires_approval is False
