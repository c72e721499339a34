from __future__ import annotations

import asyncio
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from docrecon.domain.model import DocumentType
from docrecon.domain.pipeline import (
    DeduplicatePhase,
    DetectConflictsPhase,
    NormalizePhase,
    PipelineContext,
    PipelineStage,
    PipelineState,
    ReportPhase,
    ScanPhase,
)
from docrecon.domain.ports import (
    BundleValidationResult,
    SchemaValidationError,
    SchemaValidationResult,
    SchemaViolation,
    ValidationMessage,
    ViolationSeverity,
)
from tests.helpers.documents import FakeScanner, FakeStore, fixed_clock, make_document

if TYPE_CHECKING:
    from collections.abc import Sequence

    from docrecon.domain.model import Document


def _context(**overrides: object) -> PipelineContext:
    base = PipelineContext(repositories=(), scanner=FakeScanner(documents={}), clock=fixed_clock)
    return replace(base, **overrides)


def _state(*documents: Document) -> PipelineState:
    return replace(PipelineState.start(clock=fixed_clock), documents=documents)


@dataclass
class RecordingValidator:
    calls: list[tuple[str, str]] = field(default_factory=list[tuple[str, str]])

    def validate(self, document_type: str, content: str) -> SchemaValidationResult:
        self.calls.append((document_type, content))
        if content == "explode":
            raise SchemaValidationError("validator crashed")
        if content:
            return SchemaValidationResult(is_valid=True)
        return SchemaValidationResult(
            is_valid=False,
            violations=(
                SchemaViolation("content", "cannot be empty"),
                SchemaViolation("structure", "missing title", ViolationSeverity.WARNING),
            ),
            confidence=0.5,
        )


@dataclass
class CannedRuleEvaluator:
    result: BundleValidationResult
    seen: list[tuple[str, int]] = field(default_factory=list[tuple[str, int]])

    def evaluate(self, script: str, documents: Sequence[Document]) -> BundleValidationResult:
        self.seen.append((script, len(documents)))
        return self.result


def test_scan_merges_results_in_repository_order() -> None:
    a = make_document("a", path="a/README.md")
    b = make_document("b", path="b/README.md")
    scanner = FakeScanner(documents={"b": [b], "a": [a]})
    context = _context(repositories=(Path("a"), Path("b")), scanner=scanner, max_scan_workers=1)

    state = asyncio.run(ScanPhase().run(_state(), context=context))

    assert state.documents == (a, b)


def test_normalize_is_pass_through() -> None:
    state = _state(make_document("x"))

    assert asyncio.run(NormalizePhase().run(state, context=_context())) is state


def test_deduplicate_without_store_skips_edges() -> None:
    a = make_document("x", path="a")
    b = make_document("x", path="b")

    state = asyncio.run(DeduplicatePhase().run(_state(a, b), context=_context()))

    assert state.documents == (a,)
    assert state.errors == ()


def test_detect_conflicts_stores_inferred_edges() -> None:
    old = make_document("old", path="a", document_type=DocumentType.CHANGELOG, version="1.0.0")
    new = make_document("new", path="b", document_type=DocumentType.CHANGELOG, version="2.0.0")
    store = FakeStore()

    state = asyncio.run(DetectConflictsPhase().run(_state(old, new), context=_context(store=store)))

    assert [c.id for c in state.conflicts] == ["CHANGELOG_version_conflict"]
    assert len(state.relationships) == 1
    assert [edge.metadata for edge in store.edges] == [{"relation": "supersedes"}]
    assert store.conflicts == list(state.conflicts)


def test_report_collects_schema_findings() -> None:
    validator = RecordingValidator()
    documents = (
        make_document("", path="empty/README.md"),
        make_document("fine", path="ok/README.md"),
    )
    context = _context(schema_validator=validator)

    state = asyncio.run(ReportPhase().run(_state(*documents), context=context))

    assert validator.calls == [("README", ""), ("README", "fine")]
    assert state.validations == (
        "empty/README.md: [error] content: cannot be empty",
        "empty/README.md: [warning] structure: missing title",
    )
    assert state.report is not None
    assert "=== Validation ===" in state.report
    assert state.is_complete


def test_report_skips_documents_the_validator_cannot_handle(
    caplog: pytest.LogCaptureFixture,
) -> None:
    context = _context(schema_validator=RecordingValidator())

    state = asyncio.run(
        ReportPhase().run(_state(make_document("explode", path="README.md")), context=context)
    )

    assert state.validations == ()
    assert state.errors == ()
    assert "validator crashed" in caplog.text


def test_report_includes_rule_evaluation() -> None:
    result = BundleValidationResult(
        success=False,
        errors=(ValidationMessage("missing LICENSE", rule="require-license"),),
        warnings=(ValidationMessage("short README", path="README.md"),),
        suggestions=(ValidationMessage("add SECURITY.md"),),
    )
    evaluator = CannedRuleEvaluator(result)
    context = _context(rule_evaluator=evaluator, rule_script="require LICENSE")

    state = asyncio.run(ReportPhase().run(_state(make_document("x")), context=context))

    assert evaluator.seen == [("require LICENSE", 1)]
    assert state.validations == (
        "[error] missing LICENSE (require-license)",
        "README.md: [warning] short README",
        "[suggestion] add SECURITY.md",
    )


def test_rule_evaluator_needs_a_script() -> None:
    evaluator = CannedRuleEvaluator(BundleValidationResult(success=True))
    context = _context(rule_evaluator=evaluator)

    state = asyncio.run(ReportPhase().run(_state(), context=context))

    assert evaluator.seen == []
    assert state.validations == ()


def test_phases_declare_their_stage() -> None:
    assert ScanPhase.stage is PipelineStage.SCAN
    assert ReportPhase.stage is PipelineStage.REPORT
