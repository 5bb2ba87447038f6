"""Table-backed package inspector.

Serves package metadata from a dict, optionally loaded from YAML:

    org.example.mnist:
      type: rpk
      root_path: /opt/usr/globalapps/org.example.mnist
      res_type: ml
      res_version: 1.0.0
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from mlops_parser.core.errors import PackageInspectorError

from .base import PackageInfo

logger = logging.getLogger(__name__)


class StaticPackageInspector:
    """PackageInspector over a fixed set of packages."""

    def __init__(self, packages: Mapping[str, PackageInfo] | None = None) -> None:
        self._packages: dict[str, PackageInfo] = dict(packages or {})

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> StaticPackageInspector:
        packages: dict[str, PackageInfo] = {}
        for pkgid, entry in raw.items():
            if not isinstance(entry, Mapping):
                raise ValueError(f"Package entry for {pkgid!r} must be a mapping")
            packages[str(pkgid)] = PackageInfo(
                pkg_id=str(pkgid),
                pkg_type=str(entry.get("type", "")),
                root_path=str(entry.get("root_path", "")),
                res_type=str(entry.get("res_type", "")),
                res_version=str(entry.get("res_version", "")),
            )
        return cls(packages)

    @classmethod
    def from_yaml(cls, path: Path) -> StaticPackageInspector:
        """Load a package table from YAML. A missing file yields an empty table."""
        if not path.exists():
            logger.warning("Package table %s not found; no packages known", path)
            return cls()
        raw = yaml.safe_load(path.read_text()) or {}
        if not isinstance(raw, dict):
            raise ValueError(f"Package table {path} must be a mapping of package ids")
        return cls.from_dict(raw)

    def add(self, info: PackageInfo) -> None:
        self._packages[info.pkg_id] = info

    def list_packages(self) -> list[str]:
        return list(self._packages)

    def _lookup(self, pkgid: str, query: str) -> PackageInfo:
        info = self._packages.get(pkgid)
        if info is None:
            raise PackageInspectorError(pkgid, query, "unknown package")
        return info

    def _field(self, pkgid: str, query: str, value_of: str) -> str:
        value = getattr(self._lookup(pkgid, query), value_of)
        if not value:
            raise PackageInspectorError(pkgid, query)
        return value

    def get_package_type(self, pkgid: str) -> str:
        return self._field(pkgid, "package type", "pkg_type")

    def get_root_path(self, pkgid: str) -> str:
        return self._field(pkgid, "root path", "root_path")

    def get_resource_type(self, pkgid: str) -> str:
        return self._field(pkgid, "res type", "res_type")

    def get_resource_version(self, pkgid: str) -> str:
        return self._field(pkgid, "res version", "res_version")
