"""Reconciliation store backed by the SQLAlchemy unit of work."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError

from docrecon.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork, StartupError
from docrecon.domain.ports import PersistenceError

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from docrecon.adapters.sqlalchemy.unit_of_work import ReconciliationRepositories
    from docrecon.domain.model import Conflict, Document, Edge, ResolutionResult

log = logging.getLogger(__name__)


class SqlAlchemyReconciliationStore:
    """Relational implementation of ``ReconciliationStore``.

    Each call runs in its own unit of work on a worker thread and commits on
    success. Writes are merges by primary key, so repeated runs leave one row
    per identity.
    """

    def __init__(self, uow_factory: Callable[[], SqlAlchemyUnitOfWork] = SqlAlchemyUnitOfWork):
        self._uow_factory = uow_factory

    async def insert_documents(self, documents: Sequence[Document]) -> None:
        def write(repositories: ReconciliationRepositories) -> None:
            for document in documents:
                repositories.documents.add(document)

        await asyncio.to_thread(self._write, f"{len(documents)} document(s)", write)

    async def insert_edges(self, edges: Sequence[Edge]) -> None:
        def write(repositories: ReconciliationRepositories) -> None:
            for edge in edges:
                repositories.edges.add(edge)

        await asyncio.to_thread(self._write, f"{len(edges)} edge(s)", write)

    async def store_conflict(self, conflict: Conflict) -> None:
        await asyncio.to_thread(
            self._write,
            f"conflict {conflict.id}",
            lambda repositories: repositories.conflicts.add(conflict),
        )

    async def store_resolution(self, resolution: ResolutionResult) -> None:
        await asyncio.to_thread(
            self._write,
            f"resolution {resolution.conflict_id}",
            lambda repositories: repositories.resolutions.add(resolution),
        )

    def _write(
        self, description: str, action: Callable[[ReconciliationRepositories], None]
    ) -> None:
        try:
            with self._uow_factory() as uow:
                action(uow.repositories)
                uow.commit()
        except (SQLAlchemyError, StartupError) as exc:
            raise PersistenceError(f"Database write of {description} failed: {exc}") from exc
        log.debug("Stored %s", description)
