from __future__ import annotations

import asyncio
import threading
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from docrecon.adapters.sqlalchemy.store import SqlAlchemyReconciliationStore
from docrecon.adapters.sqlalchemy.unit_of_work import shutdown
from docrecon.domain.model import CanonicalSourceKind, DocumentType
from docrecon.domain.pipeline import PipelineContext, ReconciliationPipeline
from docrecon.domain.ports import PersistenceError, ReconciliationStore
from tests.helpers.documents import FakeScanner, fixed_clock, make_document

if TYPE_CHECKING:
    from collections.abc import Callable

    from docrecon.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork


def _scanner() -> FakeScanner:
    return FakeScanner(
        documents={
            "alpha": [
                make_document("same", path="alpha/README.md", modified=1000),
                make_document(
                    "MIT",
                    path="alpha/LICENSE",
                    document_type=DocumentType.LICENSE,
                    source=CanonicalSourceKind.LICENSE_FILE,
                ),
            ],
            "beta": [
                make_document("same", path="beta/README.md", modified=2000),
                make_document(
                    "Apache",
                    path="beta/LICENSE",
                    document_type=DocumentType.LICENSE,
                    source=CanonicalSourceKind.CARGO_TOML,
                ),
            ],
        }
    )


def test_store_satisfies_port() -> None:
    assert isinstance(SqlAlchemyReconciliationStore(), ReconciliationStore)


def test_pipeline_reruns_are_idempotent(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    store = SqlAlchemyReconciliationStore(sqlite_unit_of_work)
    context = PipelineContext(
        repositories=(Path("alpha"), Path("beta")),
        scanner=_scanner(),
        store=store,
        clock=fixed_clock,
    )
    pipeline = ReconciliationPipeline(context)

    first = asyncio.run(pipeline.run())
    second = asyncio.run(pipeline.run())

    assert first.errors == ()
    assert second.errors == ()
    with sqlite_unit_of_work() as uow:
        repositories = uow.repositories
        assert repositories.documents.count() == 3
        assert repositories.conflicts.count() == 1
        assert repositories.resolutions.count() == 1
        # one duplicate edge plus one superseded edge
        assert repositories.edges.count() == 2


def test_store_reports_missing_startup_as_persistence_error() -> None:
    shutdown()
    store = SqlAlchemyReconciliationStore()

    with pytest.raises(PersistenceError, match="not initialised"):
        asyncio.run(store.insert_documents([make_document()]))


def test_store_writes_run_off_the_event_loop_thread(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    threads: list[threading.Thread] = []

    def factory() -> SqlAlchemyUnitOfWork:
        threads.append(threading.current_thread())
        return sqlite_unit_of_work()

    store = SqlAlchemyReconciliationStore(factory)

    asyncio.run(store.insert_documents([make_document()]))

    assert len(threads) == 1
    assert threads[0] is not threading.main_thread()
    with sqlite_unit_of_work() as uow:
        assert uow.repositories.documents.count() == 1


def test_every_duplicate_pair_is_stored_as_its_own_edge(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    scanner = FakeScanner(
        documents={
            name: [make_document("same", path=f"{name}/README.md", modified=index)]
            for index, name in enumerate(("alpha", "beta", "gamma"))
        }
    )
    context = PipelineContext(
        repositories=(Path("alpha"), Path("beta"), Path("gamma")),
        scanner=scanner,
        store=SqlAlchemyReconciliationStore(sqlite_unit_of_work),
        clock=fixed_clock,
    )
    pipeline = ReconciliationPipeline(context)

    first = asyncio.run(pipeline.run())
    asyncio.run(pipeline.run())

    assert first.deduplication is not None
    assert first.deduplication.stats.duplicate_count == 2
    with sqlite_unit_of_work() as uow:
        assert uow.repositories.edges.count() == 2
