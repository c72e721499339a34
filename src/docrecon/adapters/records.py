"""Store record shapes shared by the persistence adapters.

Documents are keyed by content hash, edges by a digest of their endpoints,
type and metadata, and conflicts and resolutions by conflict id. Writing the
same record twice replaces it.
"""

from __future__ import annotations

import hashlib
import json
from typing import TYPE_CHECKING, Any, Final

if TYPE_CHECKING:
    from docrecon.domain.model import Conflict, Document, Edge, ResolutionResult

DOCUMENTS_COLLECTION: Final[str] = "documents"
EDGES_COLLECTION: Final[str] = "edges"
CONFLICTS_COLLECTION: Final[str] = "conflicts"
RESOLUTIONS_COLLECTION: Final[str] = "resolutions"

type Record = dict[str, Any]


def edge_key(edge: Edge) -> str:
    """Digest of endpoints, type and metadata.

    Duplicate edges of one hash share both endpoints; the per-pair paths in
    the metadata keep them apart.
    """

    metadata = json.dumps(dict(edge.metadata), sort_keys=True, default=str)
    return hashlib.sha256(
        f"{edge.from_hash}|{edge.to_hash}|{edge.edge_type}|{metadata}".encode()
    ).hexdigest()


def document_handle(content_hash: str) -> str:
    return f"{DOCUMENTS_COLLECTION}/{content_hash}"


def document_record(document: Document) -> Record:
    metadata = document.metadata
    return {
        "_key": document.hash,
        "hash": document.hash,
        "content": document.content,
        "path": metadata.path,
        "documentType": metadata.document_type_name,
        "canonicalSource": str(metadata.canonical_source),
        "lastModified": metadata.last_modified.isoformat(),
        "version": str(metadata.version) if metadata.version is not None else None,
        "repository": metadata.repository,
        "branch": metadata.branch,
        "createdAt": document.created_at.isoformat(),
    }


def edge_record(edge: Edge) -> Record:
    return {
        "_key": edge_key(edge),
        "_from": document_handle(edge.from_hash),
        "_to": document_handle(edge.to_hash),
        "type": str(edge.edge_type),
        "confidence": edge.confidence,
        "metadata": dict(edge.metadata),
    }


def conflict_record(conflict: Conflict) -> Record:
    return {
        "_key": conflict.id,
        "conflictType": str(conflict.conflict_type),
        "documents": [document.hash for document in conflict.documents],
        "detectedAt": conflict.detected_at.isoformat(),
        "confidence": conflict.confidence,
        "suggestedStrategy": str(conflict.suggested_strategy),
    }


def resolution_record(resolution: ResolutionResult) -> Record:
    selected = resolution.selected_document
    return {
        "_key": resolution.conflict_id,
        "conflictId": resolution.conflict_id,
        "strategy": str(resolution.strategy),
        "selectedDocument": selected.hash if selected is not None else None,
        "confidence": resolution.confidence,
        "requiresApproval": resolution.requires_approval,
        "reasoning": resolution.reasoning,
        "timestamp": resolution.timestamp.isoformat(),
    }
