"""Conflicts between documents and the resolutions chosen for them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime

    from .document import Document
    from .enums import ConflictType, ResolutionStrategy


@dataclass(frozen=True, slots=True, kw_only=True)
class Conflict:
    """One detected disagreement; consumed exactly once by the resolver."""

    id: str
    conflict_type: ConflictType
    documents: tuple[Document, ...]
    detected_at: datetime
    confidence: float
    suggested_strategy: ResolutionStrategy

    def __post_init__(self) -> None:
        if not self.documents:
            raise ValueError("Conflict must include at least one document")


@dataclass(frozen=True, slots=True, kw_only=True)
class ResolutionResult:
    conflict_id: str
    strategy: ResolutionStrategy
    selected_document: Document | None
    confidence: float
    requires_approval: bool
    reasoning: str
    timestamp: datetime
