"""Wall-clock injection point for timestamped domain values."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

type Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(UTC)
