"""mlops_parser: register ML models, pipelines and resources from package manifests.

A package ships a JSON manifest (res/global/<res_type>/rpk_config.json).
At install time the lifecycle gate loads it and registers every declared
item with the ML registry service:

    from mlops_parser import PackageGate, InMemoryRegistry, StaticPackageInspector

    gate = PackageGate(StaticPackageInspector.from_yaml(path), InMemoryRegistry())
    status = gate.install("org.example.mnist")   # 0 or -1
"""

from mlops_parser.config import ParserConfig
from mlops_parser.core import (
    DeclarationKind,
    Dispatcher,
    IngestionReport,
    ItemOutcome,
    Manifest,
    ManifestLoadError,
    PackageContext,
    PackageInspectorError,
    StructuralError,
    UnknownSectionError,
    classify_section,
    iter_items,
    load_manifest,
    manifest_path,
)
from mlops_parser.inspector import PackageInfo, PackageInspector, StaticPackageInspector
from mlops_parser.lifecycle import LifecycleEvent, PackageGate
from mlops_parser.registry import InMemoryRegistry, RegistryError, RegistryService

__version__ = "0.1.0"

__all__ = [
    "DeclarationKind",
    "Dispatcher",
    "InMemoryRegistry",
    "IngestionReport",
    "ItemOutcome",
    "LifecycleEvent",
    "Manifest",
    "ManifestLoadError",
    "PackageContext",
    "PackageGate",
    "PackageInfo",
    "PackageInspector",
    "PackageInspectorError",
    "ParserConfig",
    "RegistryError",
    "RegistryService",
    "StaticPackageInspector",
    "StructuralError",
    "UnknownSectionError",
    "classify_section",
    "iter_items",
    "load_manifest",
    "manifest_path",
]
