"""SQLAlchemy tables and imperatively mapped store records."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from functools import cache
from typing import TYPE_CHECKING

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Dialect,
    Float,
    Index,
    String,
    Table,
    Text,
    TypeDecorator,
    orm,
)
from sqlalchemy.orm import configure_mappers

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


# Mapped records are plain mutable dataclasses; the ORM instruments them.


@dataclass(kw_only=True)
class DocumentRecord:
    hash: str
    content: str
    path: str
    document_type: str
    canonical_source: str
    last_modified: datetime
    version: str | None
    repository: str
    branch: str
    created_at: datetime


@dataclass(kw_only=True)
class EdgeRecord:
    key: str
    from_hash: str
    to_hash: str
    edge_type: str
    confidence: float
    edge_metadata: dict[str, str] = field(default_factory=dict[str, str])


@dataclass(kw_only=True)
class ConflictRecord:
    id: str
    conflict_type: str
    document_hashes: list[str]
    detected_at: datetime
    confidence: float
    suggested_strategy: str


@dataclass(kw_only=True)
class ResolutionRecord:
    conflict_id: str
    strategy: str
    selected_hash: str | None
    confidence: float
    requires_approval: bool
    reasoning: str
    timestamp: datetime


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

document_table = Table(
    "documents",
    mapper_registry.metadata,
    Column("hash", String(128), primary_key=True),
    Column("content", Text, nullable=False),
    Column("path", String(1024), nullable=False),
    Column("document_type", String(64), nullable=False),
    Column("canonical_source", String(128), nullable=False),
    Column("last_modified", UTCDateTime(), nullable=False),
    Column("version", String(32), nullable=True),
    Column("repository", String(256), nullable=False),
    Column("branch", String(256), nullable=False),
    Column("created_at", UTCDateTime(), nullable=False),
    Index("ix_documents_document_type", "document_type"),
)

edge_table = Table(
    "edges",
    mapper_registry.metadata,
    Column("key", String(64), primary_key=True),
    Column("from_hash", String(256), nullable=False),
    Column("to_hash", String(128), nullable=False),
    Column("edge_type", String(32), nullable=False),
    Column("confidence", Float, nullable=False),
    Column("edge_metadata", JSON, nullable=False),
    Index("ix_edges_from_hash", "from_hash"),
    Index("ix_edges_to_hash", "to_hash"),
)

conflict_table = Table(
    "conflicts",
    mapper_registry.metadata,
    Column("id", String(256), primary_key=True),
    Column("conflict_type", String(32), nullable=False),
    Column("document_hashes", JSON, nullable=False),
    Column("detected_at", UTCDateTime(), nullable=False),
    Column("confidence", Float, nullable=False),
    Column("suggested_strategy", String(32), nullable=False),
)

resolution_table = Table(
    "resolutions",
    mapper_registry.metadata,
    Column("conflict_id", String(256), primary_key=True),
    Column("strategy", String(32), nullable=False),
    Column("selected_hash", String(128), nullable=True),
    Column("confidence", Float, nullable=False),
    Column("requires_approval", Boolean, nullable=False),
    Column("reasoning", Text, nullable=False),
    Column("timestamp", UTCDateTime(), nullable=False),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the store records."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(DocumentRecord, document_table)
    mapper_registry.map_imperatively(EdgeRecord, edge_table)
    mapper_registry.map_imperatively(ConflictRecord, conflict_table)
    mapper_registry.map_imperatively(ResolutionRecord, resolution_table)

    configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)
