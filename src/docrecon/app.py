"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

from docrecon.adapters.filesystem import FilesystemScanner
from docrecon.adapters.graph_store import GraphReconciliationStore
from docrecon.adapters.schema_validator import BuiltinSchemaValidator, SubprocessSchemaValidator
from docrecon.adapters.sqlalchemy.store import SqlAlchemyReconciliationStore
from docrecon.adapters.sqlalchemy.unit_of_work import is_started, startup
from docrecon.config.pipeline import DEFAULT_SCAN_INTERVAL_SECONDS
from docrecon.domain.pipeline import PipelineContext, ReconciliationPipeline

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from docrecon.config import GraphStoreConfig, PipelineConfig
    from docrecon.domain.pipeline import PipelineState
    from docrecon.domain.ports import (
        ReconciliationStore,
        RepositoryScanner,
        RuleEvaluator,
        SchemaValidator,
    )

log = getLogger(__name__)

BUILTIN_VALIDATOR = "builtin"
NO_VALIDATOR = "none"


def build_store(
    *,
    database_uri: str | None = None,
    graph_store: GraphStoreConfig | None = None,
) -> ReconciliationStore:
    """Graph store when configured, otherwise the SQLAlchemy store (migrated on first use)."""

    if graph_store is not None:
        log.info("Using graph store at %s (database %s)", graph_store.url, graph_store.database)
        return GraphReconciliationStore.from_config(graph_store)

    if not is_started():
        startup(database_uri=database_uri)
    return SqlAlchemyReconciliationStore()


def build_schema_validator(
    kind: str = BUILTIN_VALIDATOR,
    *,
    command: Sequence[str] | None = None,
) -> SchemaValidator | None:
    if command:
        return SubprocessSchemaValidator(tuple(command))
    if kind == BUILTIN_VALIDATOR:
        return BuiltinSchemaValidator()
    if kind == NO_VALIDATOR:
        return None
    raise ValueError(f"Unknown schema validator: {kind}")


def build_pipeline(
    config: PipelineConfig,
    *,
    store: ReconciliationStore | None = None,
    scanner: RepositoryScanner | None = None,
    schema_validator: SchemaValidator | None = None,
    rule_evaluator: RuleEvaluator | None = None,
    rule_script: str | None = None,
) -> ReconciliationPipeline:
    context = PipelineContext(
        repositories=config.repository_paths,
        scanner=scanner or FilesystemScanner(),
        auto_resolve_threshold=config.auto_resolve_threshold,
        max_scan_workers=config.max_scan_workers,
        store=store,
        schema_validator=schema_validator,
        rule_evaluator=rule_evaluator,
        rule_script=rule_script,
    )
    return ReconciliationPipeline(context)


def reconcile(
    config: PipelineConfig,
    *,
    store: ReconciliationStore | None = None,
    scanner: RepositoryScanner | None = None,
    schema_validator: SchemaValidator | None = None,
    rule_evaluator: RuleEvaluator | None = None,
    rule_script: str | None = None,
) -> PipelineState:
    """Run the pipeline once over the configured repositories."""

    log.info(
        "Starting reconciliation: repositories=%s, threshold=%s",
        [str(path) for path in config.repository_paths],
        config.auto_resolve_threshold,
    )
    pipeline = build_pipeline(
        config,
        store=store,
        scanner=scanner,
        schema_validator=schema_validator,
        rule_evaluator=rule_evaluator,
        rule_script=rule_script,
    )
    state = asyncio.run(pipeline.run())
    log.info(
        f"Finished reconciliation: documents={len(state.documents)}, "
        f"conflicts={len(state.conflicts)}, errors={len(state.errors)}"
    )
    return state


def reconcile_continuously(
    config: PipelineConfig,
    *,
    store: ReconciliationStore | None = None,
    scanner: RepositoryScanner | None = None,
    schema_validator: SchemaValidator | None = None,
    stop: asyncio.Event | None = None,
    on_complete: Callable[[PipelineState], None] | None = None,
) -> int:
    """Rerun the pipeline on ``config.scan_interval`` until ``stop`` is set; return the run count."""

    interval = config.scan_interval or DEFAULT_SCAN_INTERVAL_SECONDS
    pipeline = build_pipeline(
        config, store=store, scanner=scanner, schema_validator=schema_validator
    )
    log.info("Starting daemon: interval=%ss", interval)

    async def run() -> int:
        return await pipeline.run_continuous(
            interval, stop or asyncio.Event(), on_complete=on_complete
        )

    return asyncio.run(run())
