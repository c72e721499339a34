"""Port for the document/graph store the pipeline writes to."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from docrecon.domain.model import Conflict, Document, Edge, ResolutionResult


class PersistenceError(Exception):
    """The store was unavailable or rejected a write."""


@runtime_checkable
class ReconciliationStore(Protocol):
    """Async persistence contract; every write is an upsert keyed by identity.

    Implementations raise ``PersistenceError`` for any failure.
    """

    async def insert_documents(self, documents: Sequence[Document]) -> None: ...

    async def insert_edges(self, edges: Sequence[Edge]) -> None: ...

    async def store_conflict(self, conflict: Conflict) -> None: ...

    async def store_resolution(self, resolution: ResolutionResult) -> None: ...


__all__ = ["PersistenceError", "ReconciliationStore"]
