"""Documents and their scan metadata."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .enums import CanonicalSourceKind, DocumentType

if TYPE_CHECKING:
    from datetime import datetime

    from .primitives import ContentHash, Version


@dataclass(frozen=True, slots=True)
class CustomDocumentType:
    """Open-ended document type outside the well-known set."""

    name: str

    def __str__(self) -> str:
        return self.name


type AnyDocumentType = DocumentType | CustomDocumentType


def document_type_name(document_type: AnyDocumentType) -> str:
    return str(document_type)


@dataclass(frozen=True, slots=True)
class CanonicalSource:
    """Authority tag set by the scanner; ``name`` is only meaningful for ``EXPLICIT``."""

    kind: CanonicalSourceKind = CanonicalSourceKind.INFERRED
    name: str | None = None

    def __post_init__(self) -> None:
        if self.kind is CanonicalSourceKind.EXPLICIT and not self.name:
            raise ValueError("Explicit canonical sources require a name")
        if self.kind is not CanonicalSourceKind.EXPLICIT and self.name is not None:
            raise ValueError(f"Only explicit canonical sources carry a name, got {self.kind}")

    def __str__(self) -> str:
        if self.kind is CanonicalSourceKind.EXPLICIT:
            return f"{self.kind}({self.name})"
        return str(self.kind)

    @classmethod
    def explicit(cls, name: str) -> CanonicalSource:
        return cls(CanonicalSourceKind.EXPLICIT, name)

    @property
    def is_inferred(self) -> bool:
        return self.kind is CanonicalSourceKind.INFERRED

    @property
    def is_explicit(self) -> bool:
        return self.kind is CanonicalSourceKind.EXPLICIT


@dataclass(frozen=True, slots=True, kw_only=True)
class DocumentMetadata:
    path: str
    document_type: AnyDocumentType
    last_modified: datetime
    version: Version | None = None
    canonical_source: CanonicalSource = CanonicalSource()
    repository: str = ""
    branch: str = ""

    @property
    def document_type_name(self) -> str:
        return document_type_name(self.document_type)


@dataclass(frozen=True, slots=True)
class Document:
    """Normalized document content addressed by its hash.

    Instances come from ``docrecon.domain.addressing.create_document``; two
    documents with equal ``hash`` are interchangeable for deduplication.
    """

    hash: ContentHash
    content: str
    metadata: DocumentMetadata
    created_at: datetime

    @property
    def path(self) -> str:
        return self.metadata.path
