"""Manifest ingestion engine: load → classify → normalize → dispatch."""

from mlops_parser.core.classifier import classify_section, known_sections
from mlops_parser.core.dispatcher import Dispatcher
from mlops_parser.core.errors import (
    ManifestLoadError,
    PackageInspectorError,
    StructuralError,
    UnknownSectionError,
)
from mlops_parser.core.loader import load_manifest, loads_manifest, parse_manifest
from mlops_parser.core.models import (
    MANIFEST_FILENAME,
    DeclarationKind,
    IngestionReport,
    ItemFailure,
    ItemOutcome,
    Manifest,
    ModelItem,
    PackageContext,
    PipelineItem,
    ResourceItem,
    Section,
    manifest_path,
)
from mlops_parser.core.normalizer import iter_items

__all__ = [
    "MANIFEST_FILENAME",
    "DeclarationKind",
    "Dispatcher",
    "IngestionReport",
    "ItemFailure",
    "ItemOutcome",
    "Manifest",
    "ManifestLoadError",
    "ModelItem",
    "PackageContext",
    "PackageInspectorError",
    "PipelineItem",
    "ResourceItem",
    "Section",
    "StructuralError",
    "UnknownSectionError",
    "classify_section",
    "iter_items",
    "known_sections",
    "load_manifest",
    "loads_manifest",
    "manifest_path",
    "parse_manifest",
]
