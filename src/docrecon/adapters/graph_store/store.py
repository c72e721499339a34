"""Reconciliation store writing to the graph store's document collections."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx

from docrecon.adapters.records import (
    CONFLICTS_COLLECTION,
    DOCUMENTS_COLLECTION,
    EDGES_COLLECTION,
    RESOLUTIONS_COLLECTION,
    conflict_record,
    document_record,
    edge_record,
    resolution_record,
)
from docrecon.domain.ports import PersistenceError

from .client import GraphStoreAPIError, GraphStoreClient

if TYPE_CHECKING:
    from collections.abc import Sequence

    from docrecon.adapters.records import Record
    from docrecon.config.graph_store import GraphStoreConfig
    from docrecon.domain.model import Conflict, Document, Edge, ResolutionResult


class GraphReconciliationStore:
    """``ReconciliationStore`` on top of the graph store HTTP API."""

    def __init__(self, client: GraphStoreClient) -> None:
        self.client = client

    @classmethod
    def from_config(cls, config: GraphStoreConfig) -> GraphReconciliationStore:
        return cls(GraphStoreClient(config))

    async def insert_documents(self, documents: Sequence[Document]) -> None:
        await self._insert(DOCUMENTS_COLLECTION, [document_record(d) for d in documents])

    async def insert_edges(self, edges: Sequence[Edge]) -> None:
        await self._insert(EDGES_COLLECTION, [edge_record(edge) for edge in edges])

    async def store_conflict(self, conflict: Conflict) -> None:
        await self._insert(CONFLICTS_COLLECTION, [conflict_record(conflict)])

    async def store_resolution(self, resolution: ResolutionResult) -> None:
        await self._insert(RESOLUTIONS_COLLECTION, [resolution_record(resolution)])

    async def _insert(self, collection: str, records: list[Record]) -> None:
        try:
            await self.client.insert(collection, records)
        except (httpx.HTTPError, GraphStoreAPIError, ValueError) as exc:
            raise PersistenceError(f"Graph store write to {collection} failed: {exc}") from exc
