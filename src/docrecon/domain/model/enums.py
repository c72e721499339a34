"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class DocumentType(StrEnum):
    """Closed set of well-known documentation files."""

    README = "README"
    LICENSE = "LICENSE"
    SECURITY = "SECURITY"
    CONTRIBUTING = "CONTRIBUTING"
    CODE_OF_CONDUCT = "CODE_OF_CONDUCT"
    FUNDING = "FUNDING"
    CITATION = "CITATION"
    CHANGELOG = "CHANGELOG"
    AUTHORS = "AUTHORS"
    SUPPORT = "SUPPORT"


class CanonicalSourceKind(StrEnum):
    """Which well-known file is authoritative for a document."""

    LICENSE_FILE = "LicenseFile"
    FUNDING_YAML = "FundingYaml"
    SECURITY_MD = "SecurityMd"
    CITATION_CFF = "CitationCff"
    PACKAGE_JSON = "PackageJson"
    CARGO_TOML = "CargoToml"
    EXPLICIT = "Explicit"
    INFERRED = "Inferred"


class ConflictType(StrEnum):
    DUPLICATE_CONTENT = "DuplicateContent"
    VERSION_MISMATCH = "VersionMismatch"
    CANONICAL_CONFLICT = "CanonicalConflict"
    STRUCTURAL_CONFLICT = "StructuralConflict"
    SEMANTIC_CONFLICT = "SemanticConflict"


class ResolutionStrategy(StrEnum):
    KEEP_LATEST = "KeepLatest"
    KEEP_HIGHEST_VERSION = "KeepHighestVersion"
    KEEP_CANONICAL = "KeepCanonical"
    MERGE = "Merge"
    REQUIRE_MANUAL = "RequireManual"


class EdgeType(StrEnum):
    CONFLICTS_WITH = "ConflictsWith"
    SUPERSEDED_BY = "SupersededBy"
    DUPLICATE_OF = "DuplicateOf"
    CANONICAL_FOR = "CanonicalFor"
    DERIVED_FROM = "DerivedFrom"
