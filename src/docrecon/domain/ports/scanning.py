"""Port for discovering documentation files in a repository."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pathlib import Path

    from docrecon.domain.model import Document


class ScanError(Exception):
    """A repository could not be scanned at all (missing root, permission failure)."""

    def __init__(self, repository: Path | str, reason: str) -> None:
        super().__init__(f"Failed to scan {repository}: {reason}")
        self.repository = str(repository)
        self.reason = reason


@runtime_checkable
class RepositoryScanner(Protocol):
    """Blocking callable returning one ``Document`` per recognised file under ``root``.

    Unreadable files are skipped; only a failure of the whole repository raises
    ``ScanError``.
    """

    def __call__(self, root: Path) -> list[Document]: ...


__all__ = ["RepositoryScanner", "ScanError"]
