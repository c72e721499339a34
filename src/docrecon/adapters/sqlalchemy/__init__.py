"""SQLAlchemy adapter package for docrecon."""

from __future__ import annotations

from .mappings import (
    ConflictRecord,
    DocumentRecord,
    EdgeRecord,
    ResolutionRecord,
    create_all_tables,
    mapper_registry,
    start_mappers,
)
from .repositories import (
    SqlAlchemyConflictRepository,
    SqlAlchemyDocumentRepository,
    SqlAlchemyEdgeRepository,
    SqlAlchemyResolutionRepository,
)

__all__ = [
    "ConflictRecord",
    "DocumentRecord",
    "EdgeRecord",
    "ResolutionRecord",
    "SqlAlchemyConflictRepository",
    "SqlAlchemyDocumentRepository",
    "SqlAlchemyEdgeRepository",
    "SqlAlchemyResolutionRepository",
    "create_all_tables",
    "mapper_registry",
    "start_mappers",
]
