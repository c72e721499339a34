"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import func, select

from docrecon.adapters.records import edge_key
from docrecon.adapters.sqlalchemy.mappings import (
    ConflictRecord,
    DocumentRecord,
    EdgeRecord,
    ResolutionRecord,
)

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

    from docrecon.domain.model import Conflict, Document, Edge, ResolutionResult


def document_to_record(document: Document) -> DocumentRecord:
    metadata = document.metadata
    return DocumentRecord(
        hash=document.hash,
        content=document.content,
        path=metadata.path,
        document_type=metadata.document_type_name,
        canonical_source=str(metadata.canonical_source),
        last_modified=metadata.last_modified,
        version=str(metadata.version) if metadata.version is not None else None,
        repository=metadata.repository,
        branch=metadata.branch,
        created_at=document.created_at,
    )


def edge_to_record(edge: Edge) -> EdgeRecord:
    return EdgeRecord(
        key=edge_key(edge),
        from_hash=edge.from_hash,
        to_hash=edge.to_hash,
        edge_type=str(edge.edge_type),
        confidence=edge.confidence,
        edge_metadata=dict(edge.metadata),
    )


def conflict_to_record(conflict: Conflict) -> ConflictRecord:
    return ConflictRecord(
        id=conflict.id,
        conflict_type=str(conflict.conflict_type),
        document_hashes=[document.hash for document in conflict.documents],
        detected_at=conflict.detected_at,
        confidence=conflict.confidence,
        suggested_strategy=str(conflict.suggested_strategy),
    )


def resolution_to_record(resolution: ResolutionResult) -> ResolutionRecord:
    selected = resolution.selected_document
    return ResolutionRecord(
        conflict_id=resolution.conflict_id,
        strategy=str(resolution.strategy),
        selected_hash=selected.hash if selected is not None else None,
        confidence=resolution.confidence,
        requires_approval=resolution.requires_approval,
        reasoning=resolution.reasoning,
        timestamp=resolution.timestamp,
    )


class _SqlAlchemyRecordRepository[TRecord]:
    """Upsert-by-primary-key access to one record table."""

    def __init__(self, session: Session, record_cls: type[TRecord]) -> None:
        self.session = session
        self._record_cls = record_cls

    def upsert(self, record: TRecord) -> None:
        self.session.merge(record)

    def get(self, key: str) -> TRecord | None:
        return self.session.get(self._record_cls, key)

    def list_all(self) -> list[TRecord]:
        return list(self.session.scalars(select(self._record_cls)))

    def count(self) -> int:
        stmt = select(func.count()).select_from(self._record_cls)
        return self.session.execute(stmt).scalar_one()


class SqlAlchemyDocumentRepository(_SqlAlchemyRecordRepository[DocumentRecord]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, DocumentRecord)

    def add(self, document: Document) -> None:
        self.upsert(document_to_record(document))


class SqlAlchemyEdgeRepository(_SqlAlchemyRecordRepository[EdgeRecord]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, EdgeRecord)

    def add(self, edge: Edge) -> None:
        self.upsert(edge_to_record(edge))


class SqlAlchemyConflictRepository(_SqlAlchemyRecordRepository[ConflictRecord]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, ConflictRecord)

    def add(self, conflict: Conflict) -> None:
        self.upsert(conflict_to_record(conflict))


class SqlAlchemyResolutionRepository(_SqlAlchemyRecordRepository[ResolutionRecord]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, ResolutionRecord)

    def add(self, resolution: ResolutionResult) -> None:
        self.upsert(resolution_to_record(resolution))
