"""Filesystem scanner: walk a repository and build documents for known files."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING, Final

from docrecon.domain.addressing import create_document
from docrecon.domain.clock import utcnow
from docrecon.domain.model import (
    CanonicalSource,
    CanonicalSourceKind,
    DocumentMetadata,
    DocumentType,
    Version,
)
from docrecon.domain.ports import ScanError

if TYPE_CHECKING:
    from docrecon.domain.addressing import ContentHasher
    from docrecon.domain.clock import Clock
    from docrecon.domain.model import Document

log = logging.getLogger(__name__)

UNKNOWN_BRANCH: Final[str] = "unknown"
SKIPPED_DIRECTORIES: Final[frozenset[str]] = frozenset(
    {".git", "node_modules", ".venv", "__pycache__"}
)

_INFERRED = CanonicalSourceKind.INFERRED

# Lower-cased file name -> (document type, canonical source kind).
FILENAME_TABLE: Final[dict[str, tuple[DocumentType, CanonicalSourceKind]]] = {
    "readme": (DocumentType.README, _INFERRED),
    "readme.md": (DocumentType.README, _INFERRED),
    "readme.rst": (DocumentType.README, _INFERRED),
    "readme.txt": (DocumentType.README, _INFERRED),
    "license": (DocumentType.LICENSE, CanonicalSourceKind.LICENSE_FILE),
    "license.md": (DocumentType.LICENSE, CanonicalSourceKind.LICENSE_FILE),
    "license.txt": (DocumentType.LICENSE, CanonicalSourceKind.LICENSE_FILE),
    "copying": (DocumentType.LICENSE, CanonicalSourceKind.LICENSE_FILE),
    "security.md": (DocumentType.SECURITY, CanonicalSourceKind.SECURITY_MD),
    "contributing.md": (DocumentType.CONTRIBUTING, _INFERRED),
    "code_of_conduct.md": (DocumentType.CODE_OF_CONDUCT, _INFERRED),
    "funding.yml": (DocumentType.FUNDING, CanonicalSourceKind.FUNDING_YAML),
    "funding.yaml": (DocumentType.FUNDING, CanonicalSourceKind.FUNDING_YAML),
    "citation.cff": (DocumentType.CITATION, CanonicalSourceKind.CITATION_CFF),
    "changelog.md": (DocumentType.CHANGELOG, _INFERRED),
    "changelog": (DocumentType.CHANGELOG, _INFERRED),
    "history.md": (DocumentType.CHANGELOG, _INFERRED),
    "authors": (DocumentType.AUTHORS, _INFERRED),
    "authors.md": (DocumentType.AUTHORS, _INFERRED),
    "support.md": (DocumentType.SUPPORT, _INFERRED),
}

_CITATION_VERSION: Final = re.compile(r"^version:\s*[\"']?v?(\d+\.\d+\.\d+)[\"']?\s*$", re.M)
_CHANGELOG_HEADING: Final = re.compile(r"^##\s+\[?v?(\d+\.\d+\.\d+)\]?", re.M)


def classify(filename: str) -> tuple[DocumentType, CanonicalSourceKind] | None:
    """Look up ``filename`` case-insensitively; ``None`` for unrecognised files."""

    return FILENAME_TABLE.get(filename.lower())


def extract_version(document_type: DocumentType, content: str) -> Version | None:
    """Version declared by a CITATION.cff ``version:`` line or the first CHANGELOG release."""

    if document_type is DocumentType.CITATION:
        match = _CITATION_VERSION.search(content)
    elif document_type is DocumentType.CHANGELOG:
        match = _CHANGELOG_HEADING.search(content)
    else:
        return None
    return Version.parse(match.group(1)) if match else None


def read_branch(root: Path) -> str:
    """Branch checked out in ``root``, from ``.git/HEAD``; ``unknown`` when detached or absent."""

    head = root / ".git" / "HEAD"
    try:
        text = head.read_text(encoding="utf-8").strip()
    except OSError:
        return UNKNOWN_BRANCH
    prefix = "ref: refs/heads/"
    return text.removeprefix(prefix) if text.startswith(prefix) else UNKNOWN_BRANCH


@dataclass(frozen=True, slots=True)
class FilesystemScanner:
    """``RepositoryScanner`` walking a local checkout."""

    hasher: ContentHasher | None = None
    clock: Clock = utcnow
    skipped_directories: frozenset[str] = field(default=SKIPPED_DIRECTORIES)

    def __call__(self, root: Path) -> list[Document]:
        root = Path(root)
        if not root.is_dir():
            raise ScanError(root, "not a directory")

        repository = root.resolve().name
        branch = read_branch(root)
        documents: list[Document] = []
        try:
            next(root.iterdir(), None)
        except OSError as exc:
            raise ScanError(root, str(exc)) from exc

        for directory, dirnames, filenames in root.walk(on_error=_log_walk_error):
            dirnames[:] = sorted(d for d in dirnames if d not in self.skipped_directories)
            for filename in sorted(filenames):
                document = self._load(directory / filename, repository=repository, branch=branch)
                if document is not None:
                    documents.append(document)

        log.debug("Found %d document(s) in %s", len(documents), root)
        return documents

    def _load(self, path: Path, *, repository: str, branch: str) -> Document | None:
        classification = classify(path.name)
        if classification is None:
            return None
        document_type, source_kind = classification

        try:
            raw = path.read_text(encoding="utf-8")
            modified = datetime.fromtimestamp(path.stat().st_mtime, tz=UTC)
        except (OSError, UnicodeDecodeError) as exc:
            log.debug("Skipping unreadable file %s: %s", path, exc)
            return None

        metadata = DocumentMetadata(
            path=path.as_posix(),
            document_type=document_type,
            last_modified=modified,
            version=extract_version(document_type, raw),
            canonical_source=CanonicalSource(source_kind),
            repository=repository,
            branch=branch,
        )
        return create_document(raw, metadata, hasher=self.hasher, clock=self.clock)


def _log_walk_error(error: OSError) -> None:
    log.debug("Skipping unreadable directory %s: %s", error.filename, error)
