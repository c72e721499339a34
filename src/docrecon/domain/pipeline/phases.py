"""The seven pipeline stages.

Every phase returns a new ``PipelineState``. I/O failures are recorded in
``state.errors``; no phase raises for scan or persistence problems.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from typing import TYPE_CHECKING, Protocol

from docrecon.domain.conflicts import (
    create_superseded_edges,
    detect_conflicts,
    resolve_conflicts,
)
from docrecon.domain.deduplication import create_duplicate_edges, deduplicate
from docrecon.domain.inference import (
    inference_to_edges,
    infer_relationships,
    reason_about_conflict,
)
from docrecon.domain.ports import PersistenceError, ScanError, SchemaValidationError

from .report import render_report
from .state import PipelineStage

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Sequence
    from pathlib import Path

    from docrecon.domain.model import Document
    from docrecon.domain.ports import BundleValidationResult

    from .context import PipelineContext
    from .state import PipelineState

log = logging.getLogger(__name__)


class PipelinePhase(Protocol):
    """Contract implemented by each pipeline stage."""

    stage: PipelineStage

    async def run(self, state: PipelineState, *, context: PipelineContext) -> PipelineState: ...


async def _best_effort(
    description: str, action: Callable[[], Awaitable[None]]
) -> list[str]:
    """Run a store call; a ``PersistenceError`` becomes an error message."""

    try:
        await action()
    except PersistenceError as exc:
        log.warning("Failed to persist %s: %s", description, exc)
        return [f"Failed to persist {description}: {exc}"]
    return []


class ScanPhase:
    stage = PipelineStage.SCAN

    async def run(self, state: PipelineState, *, context: PipelineContext) -> PipelineState:
        semaphore = asyncio.Semaphore(context.max_scan_workers)

        async def scan(root: Path) -> list[Document]:
            async with semaphore:
                return await asyncio.to_thread(context.scanner, root)

        results = await asyncio.gather(
            *(scan(root) for root in context.repositories), return_exceptions=True
        )

        documents: list[Document] = []
        errors: list[str] = []
        for root, result in zip(context.repositories, results, strict=True):
            if isinstance(result, ScanError):
                log.warning("%s", result)
                errors.append(str(result))
            elif isinstance(result, Exception):
                log.error("Failed to scan %s", root, exc_info=result)
                errors.append(f"Failed to scan {root}: {result}")
            elif isinstance(result, BaseException):
                raise result
            else:
                log.info("Scanned %s: %d document(s)", root, len(result))
                documents.extend(result)
        return replace(state, documents=tuple(documents)).with_errors(*errors)


class NormalizePhase:
    """Documents are normalized on construction; this stage passes them through."""

    stage = PipelineStage.NORMALIZE

    async def run(self, state: PipelineState, *, context: PipelineContext) -> PipelineState:
        return state


class DeduplicatePhase:
    stage = PipelineStage.DEDUPLICATE

    async def run(self, state: PipelineState, *, context: PipelineContext) -> PipelineState:
        result = deduplicate(state.documents)
        log.info(
            "Deduplicated %d document(s): %d unique, %d duplicate(s)",
            result.stats.total_processed,
            result.stats.unique_count,
            result.stats.duplicate_count,
        )
        errors: list[str] = []
        edges = create_duplicate_edges(result.duplicates)
        store = context.store
        if store is not None and edges:
            errors += await _best_effort("duplicate edges", lambda: store.insert_edges(edges))
        return replace(state, documents=result.unique, deduplication=result).with_errors(*errors)


class DetectConflictsPhase:
    stage = PipelineStage.DETECT_CONFLICTS

    async def run(self, state: PipelineState, *, context: PipelineContext) -> PipelineState:
        conflicts = detect_conflicts(state.documents, clock=context.clock)
        relationships = infer_relationships(state.documents)
        log.info(
            "Detected %d conflict(s), inferred %d relationship(s)",
            len(conflicts),
            len(relationships),
        )

        errors: list[str] = []
        store = context.store
        if store is not None:
            for conflict in conflicts:
                errors += await _best_effort(
                    f"conflict {conflict.id}",
                    lambda conflict=conflict: store.store_conflict(conflict),
                )
            edges = inference_to_edges(relationships)
            if edges:
                errors += await _best_effort("inferred edges", lambda: store.insert_edges(edges))
        return replace(
            state, conflicts=tuple(conflicts), relationships=tuple(relationships)
        ).with_errors(*errors)


class ResolveConflictsPhase:
    stage = PipelineStage.RESOLVE_CONFLICTS

    async def run(self, state: PipelineState, *, context: PipelineContext) -> PipelineState:
        resolutions = resolve_conflicts(
            state.conflicts,
            context.auto_resolve_threshold,
            explain=reason_about_conflict,
            clock=context.clock,
        )
        log.info(
            "Resolved %d conflict(s), %d require approval",
            len(resolutions),
            sum(1 for resolution in resolutions if resolution.requires_approval),
        )

        errors: list[str] = []
        store = context.store
        if store is not None:
            for resolution in resolutions:
                errors += await _best_effort(
                    f"resolution {resolution.conflict_id}",
                    lambda resolution=resolution: store.store_resolution(resolution),
                )
            edges = create_superseded_edges(resolutions)
            if edges:
                errors += await _best_effort("superseded edges", lambda: store.insert_edges(edges))
        return replace(state, resolutions=tuple(resolutions)).with_errors(*errors)


class IngestPhase:
    stage = PipelineStage.INGEST

    async def run(self, state: PipelineState, *, context: PipelineContext) -> PipelineState:
        store = context.store
        if store is None:
            message = (
                f"No persistence store configured; {len(state.documents)} document(s) not ingested"
            )
            log.warning(message)
            return state.with_errors(message)

        documents = state.documents
        errors = await _best_effort(
            f"{len(documents)} document(s)", lambda: store.insert_documents(documents)
        )
        if not errors:
            log.info("Ingested %d document(s)", len(documents))
        return state.with_errors(*errors)


class ReportPhase:
    stage = PipelineStage.REPORT

    async def run(self, state: PipelineState, *, context: PipelineContext) -> PipelineState:
        validations = [
            *await self._validate_schemas(state.documents, context=context),
            *self._evaluate_rules(state.documents, context=context),
        ]
        state = replace(state, validations=tuple(validations))
        return replace(state, report=render_report(state), completed_at=context.clock())

    async def _validate_schemas(
        self, documents: Sequence[Document], *, context: PipelineContext
    ) -> list[str]:
        validator = context.schema_validator
        if validator is None:
            return []

        findings: list[str] = []
        for document in documents:
            try:
                result = await asyncio.to_thread(
                    validator.validate, document.metadata.document_type_name, document.content
                )
            except SchemaValidationError as exc:
                log.warning("Schema validation failed for %s: %s", document.metadata.path, exc)
                continue
            findings.extend(
                f"{document.metadata.path}: [{violation.severity}] "
                f"{violation.field}: {violation.message}"
                for violation in result.violations
            )
        return findings

    def _evaluate_rules(
        self, documents: Sequence[Document], *, context: PipelineContext
    ) -> list[str]:
        if context.rule_evaluator is None or context.rule_script is None:
            return []
        result = context.rule_evaluator.evaluate(context.rule_script, documents)
        return _bundle_findings(result)


def _bundle_findings(result: BundleValidationResult) -> list[str]:
    findings: list[str] = []
    for label, messages in (
        ("error", result.errors),
        ("warning", result.warnings),
        ("suggestion", result.suggestions),
    ):
        for message in messages:
            where = f"{message.path}: " if message.path else ""
            rule = f" ({message.rule})" if message.rule else ""
            findings.append(f"{where}[{label}] {message.message}{rule}")
    return findings


DEFAULT_PHASES: tuple[PipelinePhase, ...] = (
    ScanPhase(),
    NormalizePhase(),
    DeduplicatePhase(),
    DetectConflictsPhase(),
    ResolveConflictsPhase(),
    IngestPhase(),
    ReportPhase(),
)
