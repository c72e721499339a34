"""Public interface for the graph store adapter."""

from __future__ import annotations

from .client import GraphStoreAPIError, GraphStoreClient
from .schema import DocumentWriteResult, ErrorResponse
from .store import GraphReconciliationStore

__all__ = [
    "DocumentWriteResult",
    "ErrorResponse",
    "GraphReconciliationStore",
    "GraphStoreAPIError",
    "GraphStoreClient",
]
