"""Immutable run state threaded through the pipeline stages."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import StrEnum
from typing import TYPE_CHECKING

from docrecon.domain.clock import utcnow

if TYPE_CHECKING:
    from datetime import datetime

    from docrecon.domain.clock import Clock
    from docrecon.domain.deduplication import DeduplicationResult
    from docrecon.domain.inference import InferredRelationship
    from docrecon.domain.model import Conflict, Document, ResolutionResult


class PipelineStage(StrEnum):
    SCAN = "Scan"
    NORMALIZE = "Normalize"
    DEDUPLICATE = "Deduplicate"
    DETECT_CONFLICTS = "DetectConflicts"
    RESOLVE_CONFLICTS = "ResolveConflicts"
    INGEST = "Ingest"
    REPORT = "Report"

    @property
    def successor(self) -> PipelineStage | None:
        """The stage that runs after this one; ``None`` for the terminal stage."""

        stages = list(PipelineStage)
        index = stages.index(self)
        return stages[index + 1] if index + 1 < len(stages) else None


@dataclass(frozen=True, slots=True, kw_only=True)
class PipelineState:
    """Snapshot of one run; ``stage`` names the next stage to execute.

    Each transition returns a new value. ``completed_at`` is only set once the
    Report stage has finished.
    """

    stage: PipelineStage = PipelineStage.SCAN
    documents: tuple[Document, ...] = ()
    conflicts: tuple[Conflict, ...] = ()
    resolutions: tuple[ResolutionResult, ...] = ()
    errors: tuple[str, ...] = ()
    started_at: datetime
    completed_at: datetime | None = None
    deduplication: DeduplicationResult | None = None
    relationships: tuple[InferredRelationship, ...] = ()
    validations: tuple[str, ...] = ()
    report: str | None = None

    @classmethod
    def start(cls, *, clock: Clock = utcnow) -> PipelineState:
        return cls(started_at=clock())

    @property
    def is_complete(self) -> bool:
        return self.completed_at is not None

    def with_errors(self, *messages: str) -> PipelineState:
        if not messages:
            return self
        return replace(self, errors=(*self.errors, *messages))
