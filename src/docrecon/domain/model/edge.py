"""Derived graph relationships handed to the store."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .enums import EdgeType


@dataclass(frozen=True, slots=True, kw_only=True)
class Edge:
    """Directed relationship between two hashes (or a conflict id and a hash)."""

    from_hash: str
    to_hash: str
    edge_type: EdgeType
    confidence: float
    metadata: dict[str, str] = field(default_factory=dict[str, str])
