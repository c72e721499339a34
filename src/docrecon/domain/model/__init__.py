"""Public domain model API."""

from __future__ import annotations

from .conflict import Conflict, ResolutionResult
from .document import (
    AnyDocumentType,
    CanonicalSource,
    CustomDocumentType,
    Document,
    DocumentMetadata,
    document_type_name,
)
from .edge import Edge
from .enums import (
    CanonicalSourceKind,
    ConflictType,
    DocumentType,
    EdgeType,
    ResolutionStrategy,
)
from .primitives import ContentHash, Version, compare_versions

__all__ = [
    "AnyDocumentType",
    "CanonicalSource",
    "CanonicalSourceKind",
    "Conflict",
    "ConflictType",
    "ContentHash",
    "CustomDocumentType",
    "Document",
    "DocumentMetadata",
    "DocumentType",
    "Edge",
    "EdgeType",
    "ResolutionResult",
    "ResolutionStrategy",
    "Version",
    "compare_versions",
    "document_type_name",
]
