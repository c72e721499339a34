"""Apply the rule table to conflicts and derive superseded-by edges."""

from __future__ import annotations

from typing import TYPE_CHECKING

from docrecon.domain.clock import utcnow
from docrecon.domain.model import Edge, EdgeType, ResolutionResult, ResolutionStrategy

from .rules import RESOLUTION_RULES, find_applicable_rule

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from docrecon.domain.clock import Clock
    from docrecon.domain.model import Conflict

    from .rules import ResolutionRule

type ExplainConflict = Callable[[Conflict], str]


def resolve_conflict(
    conflict: Conflict,
    threshold: float,
    *,
    explain: ExplainConflict | None = None,
    rules: tuple[ResolutionRule, ...] = RESOLUTION_RULES,
    clock: Clock = utcnow,
) -> ResolutionResult:
    """Resolve ``conflict`` with the first applicable rule, or defer to a human.

    ``requires_approval`` is exactly ``confidence < threshold``; a conflict no
    rule applies to always requires approval with confidence 0.0.
    """

    rule = find_applicable_rule(conflict, rules)
    extra = explain(conflict) if explain is not None else ""

    if rule is None:
        reasoning = f"No resolution rule applies to {conflict.id}; manual review required"
        return ResolutionResult(
            conflict_id=conflict.id,
            strategy=ResolutionStrategy.REQUIRE_MANUAL,
            selected_document=None,
            confidence=0.0,
            requires_approval=True,
            reasoning=f"{reasoning}. {extra}" if extra else reasoning,
            timestamp=clock(),
        )

    selected = rule.resolve(conflict)
    parts = [
        f"Applied rule '{rule.name}' (priority {rule.priority}) "
        f"with confidence {rule.confidence:.2f}",
        f"selected {selected.metadata.path}" if selected is not None else "no document selected",
    ]
    if extra:
        parts.append(extra)
    return ResolutionResult(
        conflict_id=conflict.id,
        strategy=rule.strategy,
        selected_document=selected,
        confidence=rule.confidence,
        requires_approval=rule.confidence < threshold,
        reasoning="; ".join(parts),
        timestamp=clock(),
    )


def resolve_conflicts(
    conflicts: Iterable[Conflict],
    threshold: float,
    *,
    explain: ExplainConflict | None = None,
    clock: Clock = utcnow,
) -> list[ResolutionResult]:
    return [
        resolve_conflict(conflict, threshold, explain=explain, clock=clock)
        for conflict in conflicts
    ]


def create_superseded_edges(resolutions: Iterable[ResolutionResult]) -> list[Edge]:
    """One ``SupersededBy`` edge per resolution with a selection.

    The edge source is the conflict id rather than a document hash.
    """

    return [
        Edge(
            from_hash=resolution.conflict_id,
            to_hash=resolution.selected_document.hash,
            edge_type=EdgeType.SUPERSEDED_BY,
            confidence=resolution.confidence,
            metadata={"strategy": str(resolution.strategy)},
        )
        for resolution in resolutions
        if resolution.selected_document is not None
    ]
