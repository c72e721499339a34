from __future__ import annotations

import hashlib

import pytest

from docrecon.domain.addressing import (
    FallbackHasher,
    HashlibHasher,
    create_document,
    hash_content,
    normalize,
    resolve_hasher,
)
from docrecon.domain.model import DocumentMetadata, DocumentType
from tests.helpers.documents import FIXED_NOW, at, fixed_clock

SAMPLES = [
    "",
    "plain",
    "line one\r\nline two\r\n",
    "trailing   \nspaces\t\n",
    "\n\n\nleading and trailing\n\n\n\n",
    "a\n\n\n\n\nb\r\n\r\n\r\nc",
    "  indented\n    kept  \n",
    "mixed\r\n\n\r\n\n\nend",
]


@pytest.mark.parametrize("raw", SAMPLES)
def test_normalize_is_idempotent(raw: str) -> None:
    once = normalize(raw)

    assert normalize(once) == once
    assert "\r\n" not in once
    assert "\n\n\n" not in once


def test_normalize_strips_trailing_whitespace_and_collapses_blank_lines() -> None:
    assert normalize("# Title  \r\n\r\n\r\n\r\nBody\t\n") == "# Title\n\nBody"


def test_normalize_keeps_leading_indentation_inside_text() -> None:
    assert normalize("a\n  b\n") == "a\n  b"


def test_hash_content_is_stable_sha256() -> None:
    content = normalize("same body")

    assert hash_content(content) == hash_content(content)
    assert hash_content(content) == hashlib.sha256(b"same body").hexdigest()


def test_equivalent_texts_share_a_hash() -> None:
    assert hash_content(normalize("a\r\nb  \n")) == hash_content(normalize("a\nb"))


def test_resolve_hasher_falls_back_for_unknown_algorithm(caplog: pytest.LogCaptureFixture) -> None:
    hasher = resolve_hasher("definitely-not-a-digest")

    assert isinstance(hasher, FallbackHasher)
    assert hasher.degraded
    assert "degraded" in caplog.text
    assert hasher("abc") == "fallback:3:616263"


def test_resolve_hasher_uses_hashlib_when_available() -> None:
    hasher = resolve_hasher("sha256")

    assert hasher == HashlibHasher("sha256")
    assert not hasher.degraded


def test_create_document_normalizes_and_hashes() -> None:
    metadata = DocumentMetadata(
        path="README.md", document_type=DocumentType.README, last_modified=at(10)
    )

    document = create_document("Hello\r\n\r\n\r\n", metadata, clock=fixed_clock)

    assert document.content == "Hello"
    assert document.hash == hash_content("Hello")
    assert document.created_at == FIXED_NOW
    assert document.path == "README.md"


def test_create_document_accepts_custom_hasher() -> None:
    metadata = DocumentMetadata(
        path="README.md", document_type=DocumentType.README, last_modified=at(10)
    )

    document = create_document("abc", metadata, hasher=FallbackHasher(), clock=fixed_clock)

    assert document.hash.startswith("fallback:")
