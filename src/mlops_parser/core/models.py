"""Core data models for manifest ingestion.

These models define the contract between components:
- The loader produces a Manifest of classified Sections
- The normalizer turns a Section value into items (or ItemFailures)
- The dispatcher consumes items and produces an IngestionReport
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Any

MANIFEST_FILENAME = "rpk_config.json"


class DeclarationKind(StrEnum):
    """Category a manifest section belongs to."""

    MODEL = "model"
    PIPELINE = "pipeline"
    RESOURCE = "resource"


# =============================================================================
# Items (Contract: normalizer → dispatcher)
# =============================================================================


@dataclass(frozen=True)
class ModelItem:
    """A model file to register under a name."""

    name: str
    model: str  # file path or URI
    description: str = ""
    active: bool = False

    kind = DeclarationKind.MODEL


@dataclass(frozen=True)
class PipelineItem:
    """A named pipeline description."""

    name: str
    pipeline: str

    kind = DeclarationKind.PIPELINE


@dataclass(frozen=True)
class ResourceItem:
    """One resource path. Multi-path declarations expand into several of these."""

    name: str
    path: str
    description: str = ""

    kind = DeclarationKind.RESOURCE


@dataclass(frozen=True)
class ItemFailure:
    """A manifest element that could not be turned into a registration call."""

    kind: DeclarationKind
    index: int  # position in the section array (0 for a single object)
    reason: str
    name: str | None = None
    path_index: int | None = None


Item = ModelItem | PipelineItem | ResourceItem


# =============================================================================
# Package context
# =============================================================================


@dataclass(frozen=True)
class PackageContext:
    """Identity of the package whose manifest is being ingested.

    Attached to every model and resource registration so the registry can
    attribute ownership.
    """

    pkg_id: str
    res_type: str
    res_version: str
    app_id: str = ""
    is_rpk: bool = True

    def to_dict(self) -> dict[str, str]:
        return {
            "is_rpk": "T" if self.is_rpk else "F",
            "pkg_id": self.pkg_id,
            "app_id": self.app_id or "",
            "res_type": self.res_type,
            "res_version": self.res_version,
        }

    def to_json(self) -> str:
        """Application info string stored alongside each registered entry."""
        return json.dumps(self.to_dict(), indent=2)


def manifest_path(root: str | Path, res_type: str, filename: str = MANIFEST_FILENAME) -> Path:
    """Expected manifest location inside an installed package. No I/O."""
    return Path(root) / "res" / "global" / res_type / filename


# =============================================================================
# Manifest
# =============================================================================


@dataclass(frozen=True)
class Section:
    """A top-level manifest member, already classified."""

    key: str
    kind: DeclarationKind
    value: Any  # raw JSON value: object or array of objects


@dataclass(frozen=True)
class Manifest:
    """A parsed manifest. Sections keep document order."""

    path: Path | None
    sections: tuple[Section, ...] = ()

    def sections_of(self, kind: DeclarationKind) -> list[Section]:
        return [s for s in self.sections if s.kind is kind]


# =============================================================================
# Outcomes (Contract: dispatcher → caller)
# =============================================================================


@dataclass(frozen=True)
class ItemOutcome:
    """Result of one dispatched unit (one registry call, or one skipped element)."""

    kind: DeclarationKind
    name: str | None
    ok: bool
    detail: str = ""
    version: int | None = None  # assigned model version
    path: str | None = None  # resource path for expanded resources


@dataclass
class IngestionReport:
    """Ordered per-item outcomes of one manifest ingestion."""

    outcomes: list[ItemOutcome] = field(default_factory=list)
    source: Path | None = None

    def add(self, outcome: ItemOutcome) -> None:
        self.outcomes.append(outcome)

    def extend(self, other: IngestionReport) -> None:
        self.outcomes.extend(other.outcomes)

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def succeeded(self) -> int:
        return sum(1 for o in self.outcomes if o.ok)

    @property
    def failed(self) -> int:
        return self.total - self.succeeded

    @property
    def failures(self) -> list[ItemOutcome]:
        return [o for o in self.outcomes if not o.ok]

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": str(self.source) if self.source else None,
            "total": self.total,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "outcomes": [
                {
                    "kind": o.kind.value,
                    "name": o.name,
                    "ok": o.ok,
                    "detail": o.detail,
                    "version": o.version,
                    "path": o.path,
                }
                for o in self.outcomes
            ],
        }
