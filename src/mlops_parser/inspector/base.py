"""Package inspector protocol.

Resolves a package id to install-time metadata. Failures raise
PackageInspectorError, which aborts the lifecycle event.
"""

from __future__ import annotations

from abc import abstractmethod
from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class PackageInfo:
    """Install-time metadata of one package."""

    pkg_id: str
    pkg_type: str
    root_path: str = ""
    res_type: str = ""
    res_version: str = ""


@runtime_checkable
class PackageInspector(Protocol):
    """Read-only view of the host package database."""

    @abstractmethod
    def get_package_type(self, pkgid: str) -> str:
        ...

    @abstractmethod
    def get_root_path(self, pkgid: str) -> str:
        ...

    @abstractmethod
    def get_resource_type(self, pkgid: str) -> str:
        ...

    @abstractmethod
    def get_resource_version(self, pkgid: str) -> str:
        ...
