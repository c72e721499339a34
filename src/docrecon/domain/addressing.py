"""Content addressing: normalization, hashing and document construction.

Every document's identity is the digest of its *normalized* text, so two
copies that only differ in line endings or trailing whitespace collapse onto
the same hash.
"""

from __future__ import annotations

import hashlib
import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final, Protocol

from docrecon.domain.clock import utcnow
from docrecon.domain.model import Document

if TYPE_CHECKING:
    from docrecon.domain.clock import Clock
    from docrecon.domain.model import ContentHash, DocumentMetadata

log = logging.getLogger(__name__)

DEFAULT_HASH_ALGORITHM: Final[str] = "sha256"
_FALLBACK_PREFIX_LENGTH: Final[int] = 32
_EXCESS_NEWLINES: Final = re.compile(r"\n{3,}")


class ContentHasher(Protocol):
    """Digest function for normalized content."""

    @property
    def degraded(self) -> bool: ...

    def __call__(self, content: str) -> ContentHash: ...


@dataclass(frozen=True, slots=True)
class HashlibHasher:
    algorithm: str = DEFAULT_HASH_ALGORITHM

    @property
    def degraded(self) -> bool:
        return False

    def __call__(self, content: str) -> ContentHash:
        return hashlib.new(self.algorithm, content.encode("utf-8")).hexdigest()


@dataclass(frozen=True, slots=True)
class FallbackHasher:
    """Length+prefix identity for environments without a usable digest.

    Not collision resistant; only useful for diagnostics.
    """

    @property
    def degraded(self) -> bool:
        return True

    def __call__(self, content: str) -> ContentHash:
        prefix = content[:_FALLBACK_PREFIX_LENGTH].encode("utf-8").hex()
        return f"fallback:{len(content)}:{prefix}"


SHA256_HASHER: Final = HashlibHasher()


def resolve_hasher(algorithm: str = DEFAULT_HASH_ALGORITHM) -> ContentHasher:
    """Return a hasher for ``algorithm``, degrading to the fallback if it is unavailable."""

    try:
        hashlib.new(algorithm)
    except ValueError:
        log.warning(
            "Hash algorithm %r unavailable; using degraded length+prefix fallback "
            "(not safe for production use)",
            algorithm,
        )
        return FallbackHasher()
    return HashlibHasher(algorithm)


def normalize(raw: str) -> str:
    """Canonical text form used for hashing.

    CRLF becomes LF, trailing whitespace is stripped from every line, the
    whole text is trimmed and runs of three or more newlines collapse to two.
    ``normalize(normalize(x)) == normalize(x)`` for every input.
    """

    text = raw.replace("\r\n", "\n")
    text = "\n".join(line.rstrip() for line in text.split("\n"))
    text = text.strip()
    return _EXCESS_NEWLINES.sub("\n\n", text)


def hash_content(content: str, *, hasher: ContentHasher | None = None) -> ContentHash:
    """Digest ``content`` as given; callers normalize first."""

    return (hasher or SHA256_HASHER)(content)


def create_document(
    raw: str,
    metadata: DocumentMetadata,
    *,
    hasher: ContentHasher | None = None,
    clock: Clock = utcnow,
) -> Document:
    """Build a ``Document``; the only place a content hash is assigned."""

    content = normalize(raw)
    return Document(
        hash=hash_content(content, hasher=hasher),
        content=content,
        metadata=metadata,
        created_at=clock(),
    )
