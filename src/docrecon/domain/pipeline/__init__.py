"""Seven-stage reconciliation pipeline."""

from __future__ import annotations

from .context import PipelineContext
from .orchestrator import ReconciliationPipeline
from .phases import (
    DEFAULT_PHASES,
    DeduplicatePhase,
    DetectConflictsPhase,
    IngestPhase,
    NormalizePhase,
    PipelinePhase,
    ReportPhase,
    ResolveConflictsPhase,
    ScanPhase,
)
from .report import render_report
from .state import PipelineStage, PipelineState

__all__ = [
    "DEFAULT_PHASES",
    "DeduplicatePhase",
    "DetectConflictsPhase",
    "IngestPhase",
    "NormalizePhase",
    "PipelineContext",
    "PipelinePhase",
    "PipelineStage",
    "PipelineState",
    "ReconciliationPipeline",
    "ReportPhase",
    "ResolveConflictsPhase",
    "ScanPhase",
    "render_report",
]
