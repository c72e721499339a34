from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from docrecon import app as app_module
from docrecon.adapters.graph_store import GraphReconciliationStore
from docrecon.adapters.schema_validator import BuiltinSchemaValidator, SubprocessSchemaValidator
from docrecon.adapters.sqlalchemy.store import SqlAlchemyReconciliationStore
from docrecon.adapters.sqlalchemy.unit_of_work import is_started, shutdown
from docrecon.config import get_graph_store_config, get_pipeline_config
from docrecon.domain.pipeline import PipelineState
from tests.helpers.documents import FakeScanner, FakeStore, make_document


def _scanner() -> FakeScanner:
    return FakeScanner(
        documents={
            "alpha": [make_document("same", path="alpha/README.md", modified=1)],
            "beta": [make_document("same", path="beta/README.md", modified=2)],
        }
    )


def test_reconcile_runs_pipeline_once() -> None:
    store = FakeStore()
    config = get_pipeline_config(["alpha", "beta"])

    state = app_module.reconcile(config, store=store, scanner=_scanner())

    assert state.is_complete
    assert state.errors == ()
    assert len(store.documents) == 1
    assert state.report is not None
    assert "beta/README.md -> alpha/README.md" in state.report


def test_reconcile_continuously_until_stopped() -> None:
    config = get_pipeline_config(["alpha", "beta"], interval=0.01)
    stop = asyncio.Event()
    states: list[PipelineState] = []

    def on_complete(state: PipelineState) -> None:
        states.append(state)
        stop.set()

    runs = app_module.reconcile_continuously(
        config, store=FakeStore(), scanner=_scanner(), stop=stop, on_complete=on_complete
    )

    assert runs == 1
    assert states[0].is_complete


def test_build_schema_validator() -> None:
    assert isinstance(app_module.build_schema_validator("builtin"), BuiltinSchemaValidator)
    assert app_module.build_schema_validator("none") is None
    external = app_module.build_schema_validator("none", command=["bridge", "--stdin"])
    assert isinstance(external, SubprocessSchemaValidator)
    assert external.command == ("bridge", "--stdin")

    with pytest.raises(ValueError, match="Unknown schema validator"):
        app_module.build_schema_validator("regex")


def test_build_store_prefers_graph_store() -> None:
    config = get_graph_store_config(url="http://db:8529")

    assert isinstance(app_module.build_store(graph_store=config), GraphReconciliationStore)


def test_build_store_starts_database() -> None:
    shutdown()
    try:
        store = app_module.build_store(database_uri="sqlite+pysqlite:///:memory:")

        assert isinstance(store, SqlAlchemyReconciliationStore)
        assert is_started()
    finally:
        shutdown()


def test_build_pipeline_uses_filesystem_scanner_by_default(tmp_path: Path) -> None:
    (tmp_path / "README.md").write_text("# Hello")
    config = get_pipeline_config([str(tmp_path)])

    state = app_module.reconcile(config, store=FakeStore())

    assert [Path(document.path).name for document in state.documents] == ["README.md"]
