"""Structural errors: failures that abort a whole manifest ingestion.

Per-item problems are never raised; they become failed ItemOutcomes.
"""

from __future__ import annotations


class StructuralError(Exception):
    """Base class for errors that abort ingestion of a manifest."""


class ManifestLoadError(StructuralError):
    """Raised when a manifest cannot be read or parsed."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load manifest '{path}': {reason}")


class UnknownSectionError(ManifestLoadError):
    """Raised when a top-level manifest key is not a known declaration kind."""

    def __init__(self, path: str, key: str):
        self.key = key
        super().__init__(path, f"unrecognized section {key!r}")


class PackageInspectorError(StructuralError):
    """Raised when package metadata cannot be resolved."""

    def __init__(self, pkgid: str, query: str, reason: str = "not available"):
        self.pkgid = pkgid
        self.query = query
        self.reason = reason
        super().__init__(f"Failed to get {query} of package '{pkgid}': {reason}")
