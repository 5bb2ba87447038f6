"""Package inspectors: resolve package ids to install-time metadata."""

from mlops_parser.inspector.base import PackageInfo, PackageInspector
from mlops_parser.inspector.static import StaticPackageInspector

__all__ = ["PackageInfo", "PackageInspector", "StaticPackageInspector"]
