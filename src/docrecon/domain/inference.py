"""Fact lookup with unification over documents.

This is *not* a logic-programming solver: ``query`` matches a
goal against clause heads only and never proves rule bodies. The knowledge
base exists to name relationships between documents and to explain conflicts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from itertools import count
from typing import TYPE_CHECKING, Final

from docrecon.domain.deduplication import find_canonical
from docrecon.domain.model import (
    Edge,
    EdgeType,
    compare_versions,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from docrecon.domain.model import AnyDocumentType, Conflict, Document

INFERENCE_EDGE_CONFIDENCE: Final[float] = 0.85

DUPLICATE_OF: Final[str] = "duplicate_of"
SUPERSEDES: Final[str] = "supersedes"

_RELATION_EDGE_TYPES: Final[dict[str, EdgeType]] = {
    DUPLICATE_OF: EdgeType.DUPLICATE_OF,
    SUPERSEDES: EdgeType.SUPERSEDED_BY,
}


# Terms ---------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Var:
    name: str


@dataclass(frozen=True, slots=True)
class Atom:
    value: str


@dataclass(frozen=True, slots=True)
class Compound:
    functor: str
    args: tuple[Term, ...] = ()


@dataclass(frozen=True, slots=True)
class DocRef:
    """Reference to a document; equal when the hashes are."""

    document: Document


type Term = Var | Atom | Compound | DocRef
type Substitution = Mapping[str, Term]


def walk(term: Term, substitution: Substitution) -> Term:
    """Follow variable bindings until an unbound variable or a non-variable."""

    while isinstance(term, Var) and term.name in substitution:
        term = substitution[term.name]
    return term


def unify(left: Term, right: Term, substitution: Substitution | None = None) -> Substitution | None:
    """Return the extended substitution unifying both terms, or ``None``.

    The input substitution is never modified. No occurs check is performed.
    """

    bindings = dict(substitution or {})
    if _unify_into(left, right, bindings):
        return bindings
    return None


def _unify_into(left: Term, right: Term, bindings: dict[str, Term]) -> bool:
    left = walk(left, bindings)
    right = walk(right, bindings)

    if isinstance(left, Var) and isinstance(right, Var) and left.name == right.name:
        return True
    if isinstance(left, Var):
        bindings[left.name] = right
        return True
    if isinstance(right, Var):
        bindings[right.name] = left
        return True

    match left, right:
        case Atom(value=a), Atom(value=b):
            return a == b
        case DocRef(document=a), DocRef(document=b):
            return a.hash == b.hash
        case Compound(functor=f, args=a_args), Compound(functor=g, args=b_args):
            if f != g or len(a_args) != len(b_args):
                return False
            return all(_unify_into(a, b, bindings) for a, b in zip(a_args, b_args, strict=True))
        case _:
            return False


def resolve_term(term: Term, substitution: Substitution) -> Term:
    """Apply ``substitution`` throughout ``term``."""

    term = walk(term, substitution)
    if isinstance(term, Compound):
        return Compound(term.functor, tuple(resolve_term(arg, substitution) for arg in term.args))
    return term


# Knowledge base ------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Clause:
    """``head :- body``; a fact when ``body`` is empty."""

    head: Term
    body: tuple[Term, ...] = ()

    @property
    def is_fact(self) -> bool:
        return not self.body


@dataclass(slots=True)
class KnowledgeBase:
    clauses: list[Clause] = field(default_factory=list[Clause])

    def add_fact(self, head: Term) -> None:
        self.clauses.append(Clause(head))

    def add_rule(self, head: Term, *body: Term) -> None:
        self.clauses.append(Clause(head, tuple(body)))

    def __len__(self) -> int:
        return len(self.clauses)


def _rename(term: Term, suffix: str) -> Term:
    match term:
        case Var(name=name):
            return Var(f"{name}{suffix}")
        case Compound(functor=functor, args=args):
            return Compound(functor, tuple(_rename(arg, suffix) for arg in args))
        case _:
            return term


def query(kb: KnowledgeBase, goal: Term) -> list[Substitution]:
    """All substitutions under which ``goal`` matches a clause head, in clause order.

    Rule bodies are not evaluated. Clause variables are renamed apart from the
    goal's so a rule head like ``p(X)`` does not capture a goal variable ``X``.
    """

    results: list[Substitution] = []
    counter = count()
    for clause in kb.clauses:
        head = _rename(clause.head, f"#{next(counter)}")
        substitution = unify(goal, head, {})
        if substitution is not None:
            results.append(substitution)
    return results


def fact(functor: str, *args: Term) -> Compound:
    return Compound(functor, tuple(args))


# Relationships -------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class InferredRelationship:
    """``source`` stands in ``relation`` to ``target``."""

    source: Document
    target: Document
    relation: str


def infer_relationships(documents: Sequence[Document]) -> list[InferredRelationship]:
    """Pairwise scan emitting ``duplicate_of`` and ``supersedes`` relationships.

    For a duplicate pair the later document is recorded as the duplicate of the
    earlier one. ``supersedes`` points from the higher version to the lower.
    """

    relationships: list[InferredRelationship] = []
    for i, first in enumerate(documents):
        for second in documents[i + 1 :]:
            if first.hash == second.hash and first.metadata.path != second.metadata.path:
                relationships.append(InferredRelationship(second, first, DUPLICATE_OF))

            if first.metadata.document_type != second.metadata.document_type:
                continue
            first_version = first.metadata.version
            second_version = second.metadata.version
            if first_version is None or second_version is None:
                continue
            order = compare_versions(first_version, second_version)
            if order > 0:
                relationships.append(InferredRelationship(first, second, SUPERSEDES))
            elif order < 0:
                relationships.append(InferredRelationship(second, first, SUPERSEDES))
    return relationships


def find_canonical_for_type(
    documents: Iterable[Document], document_type: AnyDocumentType
) -> Document | None:
    return find_canonical(
        document for document in documents if document.metadata.document_type == document_type
    )


def reason_about_conflict(conflict: Conflict) -> str:
    """Deterministic explanation of what the documents in ``conflict`` have in common."""

    documents = conflict.documents
    parts: list[str] = []
    if len({document.hash for document in documents}) == 1:
        parts.append("All documents have identical content (pure duplication)")
    else:
        parts.append("Documents differ in content (semantic conflict)")

    canonical = sum(
        1
        for document in documents
        if not document.metadata.canonical_source.is_inferred
    )
    if canonical:
        parts.append(f"{canonical} document(s) have explicit canonical sources")

    versioned = sum(1 for document in documents if document.metadata.version is not None)
    if versioned:
        parts.append(f"{versioned} document(s) have version information")

    return "; ".join(parts)


def inference_to_edges(relationships: Iterable[InferredRelationship]) -> list[Edge]:
    return [
        Edge(
            from_hash=relationship.source.hash,
            to_hash=relationship.target.hash,
            edge_type=_RELATION_EDGE_TYPES.get(relationship.relation, EdgeType.CONFLICTS_WITH),
            confidence=INFERENCE_EDGE_CONFIDENCE,
            metadata={"relation": relationship.relation},
        )
        for relationship in relationships
    ]


def knowledge_base_from_documents(
    documents: Iterable[Document],
    relationships: Iterable[InferredRelationship] = (),
) -> KnowledgeBase:
    """Assert descriptive facts for each document plus one fact per relationship."""

    kb = KnowledgeBase()
    for document in documents:
        ref = DocRef(document)
        metadata = document.metadata
        kb.add_fact(fact("document", ref))
        kb.add_fact(fact("document_type", ref, Atom(metadata.document_type_name)))
        kb.add_fact(fact("canonical_source", ref, Atom(str(metadata.canonical_source))))
        if metadata.version is not None:
            kb.add_fact(fact("version", ref, Atom(str(metadata.version))))
    for relationship in relationships:
        kb.add_fact(
            fact(relationship.relation, DocRef(relationship.source), DocRef(relationship.target))
        )
    return kb


def related_documents(kb: KnowledgeBase, relation: str, document: Document) -> list[Document]:
    """Documents ``X`` for which ``relation(document, X)`` holds in ``kb``."""

    target = Var("Target")
    related: list[Document] = []
    for substitution in query(kb, fact(relation, DocRef(document), target)):
        bound = walk(target, substitution)
        if isinstance(bound, DocRef):
            related.append(bound.document)
    return related
