from __future__ import annotations

from docrecon.domain.conflicts import resolve_conflicts
from docrecon.domain.deduplication import deduplicate
from docrecon.domain.inference import infer_relationships
from docrecon.domain.model import Conflict, ConflictType, DocumentType, ResolutionStrategy
from docrecon.domain.pipeline import PipelineState, render_report
from docrecon.domain.pipeline.report import (
    render_deduplication_report,
    render_resolution_report,
    render_supersessions,
)
from tests.helpers.documents import FIXED_NOW, fixed_clock, make_document


def test_deduplication_report_lists_pairs() -> None:
    result = deduplicate(
        [
            make_document("same", path="README.md"),
            make_document("same", path="docs/README.md"),
        ]
    )

    assert render_deduplication_report(result) == (
        "=== Deduplication Report ===\n"
        "Total processed: 2\n"
        "Unique: 1\n"
        "Duplicates: 1\n"
        "Space saved: 4 bytes\n"
        "\n"
        "Duplicates:\n"
        "  docs/README.md -> README.md"
    )


def test_deduplication_report_before_dedup_ran() -> None:
    assert render_deduplication_report(None).endswith("Deduplication did not run.")


def test_resolution_report_tags_auto_and_manual() -> None:
    root = make_document("same", path="README.md", modified=1000)
    docs = make_document("same", path="docs/README.md", modified=5000)
    conflicts = [
        Conflict(
            id="dup",
            conflict_type=ConflictType.DUPLICATE_CONTENT,
            documents=(root, docs),
            detected_at=FIXED_NOW,
            confidence=1.0,
            suggested_strategy=ResolutionStrategy.KEEP_LATEST,
        ),
        Conflict(
            id="odd",
            conflict_type=ConflictType.STRUCTURAL_CONFLICT,
            documents=(root,),
            detected_at=FIXED_NOW,
            confidence=0.3,
            suggested_strategy=ResolutionStrategy.REQUIRE_MANUAL,
        ),
    ]

    report = render_resolution_report(resolve_conflicts(conflicts, 0.9, clock=fixed_clock))

    lines = report.splitlines()
    assert lines[:4] == [
        "=== Conflict Resolution Report ===",
        "Total conflicts: 2",
        "Auto-resolved: 1",
        "Manual review: 1",
    ]
    assert "[AUTO] dup: KeepLatest (confidence: 1.00)" in lines
    assert "[MANUAL] odd: RequireManual (confidence: 0.00)" in lines
    assert "  No resolution rule applies to odd; manual review required" in lines


def test_supersessions_section() -> None:
    old = make_document(
        "old", path="CHANGELOG.md", document_type=DocumentType.CHANGELOG, version="1.0.0"
    )
    new = make_document(
        "new", path="pkg/CHANGELOG.md", document_type=DocumentType.CHANGELOG, version="1.2.0"
    )
    documents = [old, new]

    section = render_supersessions(documents, infer_relationships(documents))

    assert section == (
        "=== Inferred Supersessions ===\n"
        "  pkg/CHANGELOG.md (1.2.0) supersedes CHANGELOG.md (1.0.0)"
    )
    assert render_supersessions([old], []) is None


def test_render_report_omits_empty_sections() -> None:
    state = PipelineState(started_at=FIXED_NOW, errors=("Failed to scan x: gone",))

    report = render_report(state)

    assert report.endswith("=== Errors ===\n  - Failed to scan x: gone\n")
    assert "=== Validation ===" not in report
    assert "=== Inferred Supersessions ===" not in report
