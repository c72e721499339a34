"""Collaborators and settings shared by every pipeline stage."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from docrecon.domain.clock import utcnow

if TYPE_CHECKING:
    from pathlib import Path

    from docrecon.domain.clock import Clock
    from docrecon.domain.ports import (
        ReconciliationStore,
        RepositoryScanner,
        RuleEvaluator,
        SchemaValidator,
    )


@dataclass(frozen=True, slots=True, kw_only=True)
class PipelineContext:
    repositories: tuple[Path, ...]
    scanner: RepositoryScanner
    auto_resolve_threshold: float = 0.9
    max_scan_workers: int = 4
    store: ReconciliationStore | None = None
    schema_validator: SchemaValidator | None = None
    rule_evaluator: RuleEvaluator | None = None
    rule_script: str | None = None
    clock: Clock = utcnow
