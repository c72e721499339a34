from __future__ import annotations

import pytest

from docrecon.domain.deduplication import (
    CANONICAL_PRIORITY,
    create_duplicate_edges,
    deduplicate,
    find_canonical,
    find_duplicates,
    find_latest,
    get_canonical_priority,
    group_by_hash,
    is_duplicate,
)
from docrecon.domain.model import CanonicalSource, CanonicalSourceKind, EdgeType
from tests.helpers.documents import make_document


def test_deduplicate_empty_input() -> None:
    result = deduplicate([])

    assert result.unique == ()
    assert result.duplicates == ()
    assert result.stats.total_processed == 0
    assert result.stats.unique_count == 0
    assert result.stats.duplicate_count == 0
    assert result.stats.spaces_saved == 0


def test_deduplicate_keeps_first_seen_document() -> None:
    first = make_document("same body", path="README.md")
    second = make_document("other", path="CONTRIBUTING.md")
    third = make_document("same body", path="docs/README.md")

    result = deduplicate([first, second, third])

    assert result.unique == (first, second)
    assert len(result.duplicates) == 1
    assert result.duplicates[0].duplicate is third
    assert result.duplicates[0].original is first
    assert result.stats.spaces_saved == len(b"same body")


@pytest.mark.parametrize("copies", [1, 2, 5])
def test_deduplicate_counts_add_up(copies: int) -> None:
    documents = [make_document("x", path=f"{i}/README.md") for i in range(copies)]
    documents.append(make_document("y", path="LICENSE"))

    stats = deduplicate(documents).stats

    assert stats.unique_count + stats.duplicate_count == stats.total_processed
    assert stats.unique_count == 2


def test_spaces_saved_counts_utf8_bytes() -> None:
    documents = [make_document("café", path="a"), make_document("café", path="b")]

    assert deduplicate(documents).stats.spaces_saved == len("café".encode())


def test_find_duplicates_requires_distinct_path() -> None:
    target = make_document("x", path="README.md")
    same_path = make_document("x", path="README.md")
    elsewhere = make_document("x", path="docs/README.md")
    different = make_document("y", path="other/README.md")

    assert find_duplicates(target, [target, same_path, elsewhere, different]) == [elsewhere]


def test_is_duplicate_and_group_by_hash() -> None:
    a = make_document("x", path="a")
    b = make_document("x", path="b")
    c = make_document("y", path="c")

    assert is_duplicate(a, b)
    assert not is_duplicate(a, c)
    assert group_by_hash([a, c, b]) == {a.hash: [a, b], c.hash: [c]}


def test_find_latest_prefers_first_on_tie() -> None:
    early = make_document("x", path="a", modified=1000)
    late = make_document("x", path="b", modified=5000)
    tie = make_document("x", path="c", modified=5000)

    assert find_latest([early, late, tie]) is late
    assert find_latest([]) is None


def test_canonical_priority_ordering() -> None:
    def priority(kind: CanonicalSourceKind) -> int:
        if kind is CanonicalSourceKind.EXPLICIT:
            return get_canonical_priority(CanonicalSource.explicit("upstream"))
        return get_canonical_priority(CanonicalSource(kind))

    assert (
        priority(CanonicalSourceKind.EXPLICIT)
        > priority(CanonicalSourceKind.FUNDING_YAML)
        > priority(CanonicalSourceKind.LICENSE_FILE)
        > priority(CanonicalSourceKind.SECURITY_MD)
        == priority(CanonicalSourceKind.CITATION_CFF)
        > priority(CanonicalSourceKind.PACKAGE_JSON)
        == priority(CanonicalSourceKind.CARGO_TOML)
        > priority(CanonicalSourceKind.INFERRED)
    )
    assert set(CANONICAL_PRIORITY) == set(CanonicalSourceKind)


def test_find_canonical_prefers_priority_then_recency() -> None:
    inferred = make_document("a", path="a", modified=9000)
    cargo_old = make_document("b", path="b", source=CanonicalSourceKind.CARGO_TOML, modified=1000)
    package_new = make_document(
        "c", path="c", source=CanonicalSourceKind.PACKAGE_JSON, modified=2000
    )

    assert find_canonical([inferred, cargo_old, package_new]) is package_new
    assert find_canonical([inferred]) is inferred
    assert find_canonical([]) is None


def test_create_duplicate_edges() -> None:
    original = make_document("x", path="README.md")
    duplicate = make_document("x", path="docs/README.md")
    pairs = deduplicate([original, duplicate]).duplicates

    (edge,) = create_duplicate_edges(pairs)

    assert edge.edge_type is EdgeType.DUPLICATE_OF
    assert edge.confidence == 1.0
    assert edge.metadata == {"duplicate_path": "docs/README.md", "original_path": "README.md"}
