"""Plain-text run report."""

from __future__ import annotations

from typing import TYPE_CHECKING

from docrecon.domain.inference import (
    SUPERSEDES,
    knowledge_base_from_documents,
    related_documents,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from docrecon.domain.deduplication import DeduplicationResult
    from docrecon.domain.inference import InferredRelationship
    from docrecon.domain.model import Document, ResolutionResult

    from .state import PipelineState


def render_deduplication_report(result: DeduplicationResult | None) -> str:
    lines = ["=== Deduplication Report ==="]
    if result is None:
        lines.append("Deduplication did not run.")
        return "\n".join(lines)

    stats = result.stats
    lines.extend(
        [
            f"Total processed: {stats.total_processed}",
            f"Unique: {stats.unique_count}",
            f"Duplicates: {stats.duplicate_count}",
            f"Space saved: {stats.spaces_saved} bytes",
        ]
    )
    if result.duplicates:
        lines.append("")
        lines.append("Duplicates:")
        lines.extend(
            f"  {pair.duplicate.metadata.path} -> {pair.original.metadata.path}"
            for pair in result.duplicates
        )
    return "\n".join(lines)


def render_resolution_report(resolutions: Sequence[ResolutionResult]) -> str:
    auto = sum(1 for resolution in resolutions if not resolution.requires_approval)
    lines = [
        "=== Conflict Resolution Report ===",
        f"Total conflicts: {len(resolutions)}",
        f"Auto-resolved: {auto}",
        f"Manual review: {len(resolutions) - auto}",
    ]
    for resolution in resolutions:
        tag = "MANUAL" if resolution.requires_approval else "AUTO"
        lines.append("")
        lines.append(
            f"[{tag}] {resolution.conflict_id}: {resolution.strategy} "
            f"(confidence: {resolution.confidence:.2f})"
        )
        lines.append(f"  {resolution.reasoning}")
    return "\n".join(lines)


def _describe(document: Document) -> str:
    version = document.metadata.version
    return f"{document.metadata.path} ({version})" if version is not None else document.metadata.path


def render_supersessions(
    documents: Sequence[Document], relationships: Iterable[InferredRelationship]
) -> str | None:
    kb = knowledge_base_from_documents(documents, relationships)
    lines: list[str] = []
    for document in documents:
        lines.extend(
            f"  {_describe(document)} supersedes {_describe(older)}"
            for older in related_documents(kb, SUPERSEDES, document)
        )
    if not lines:
        return None
    return "\n".join(["=== Inferred Supersessions ===", *lines])


def _render_list(title: str, items: Sequence[str]) -> str | None:
    if not items:
        return None
    return "\n".join([f"=== {title} ===", *(f"  - {item}" for item in items)])


def render_report(state: PipelineState) -> str:
    sections = [
        render_deduplication_report(state.deduplication),
        render_resolution_report(state.resolutions),
        render_supersessions(state.documents, state.relationships),
        _render_list("Validation", state.validations),
        _render_list("Errors", state.errors),
    ]
    return "\n\n".join(section for section in sections if section is not None) + "\n"
