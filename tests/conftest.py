"""Shared fixtures: recording registry, package trees, manifests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from mlops_parser.core.models import PackageContext, manifest_path
from mlops_parser.inspector.base import PackageInfo
from mlops_parser.inspector.static import StaticPackageInspector
from mlops_parser.observability.logging import shutdown_logging
from mlops_parser.registry.base import RegistryError
from mlops_parser.registry.memory import InMemoryRegistry

# =============================================================================
# Test doubles
# =============================================================================


class RecordingRegistry:
    """RegistryService that records every call.

    Names in fail_on make the matching call raise RegistryError.
    """

    def __init__(self, fail_on: set[str] | None = None) -> None:
        self.calls: list[tuple[Any, ...]] = []
        self.fail_on = fail_on or set()
        self.connects = 0
        self.disconnects = 0
        self._connected = False
        self._versions: dict[str, int] = {}

    def connect(self) -> None:
        self.connects += 1
        self._connected = True

    def disconnect(self) -> None:
        self.disconnects += 1
        self._connected = False

    def is_connected(self) -> bool:
        return self._connected

    def _check(self, name: str) -> None:
        if name in self.fail_on:
            raise RegistryError(f"refused {name}", -5)

    def register_model(self, name, path, active, description, app_info) -> int:
        self.calls.append(("register_model", name, path, active, description, app_info))
        self._check(name)
        self._versions[name] = self._versions.get(name, 0) + 1
        return self._versions[name]

    def set_pipeline_description(self, name, description) -> None:
        self.calls.append(("set_pipeline_description", name, description))
        self._check(name)

    def add_resource(self, name, path, description, app_info) -> None:
        self.calls.append(("add_resource", name, path, description, app_info))
        self._check(name)

    def calls_to(self, op: str) -> list[tuple[Any, ...]]:
        return [c for c in self.calls if c[0] == op]


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def _reset_logging():
    """Keep root logger handlers from leaking between tests."""
    shutdown_logging()
    yield
    shutdown_logging()


@pytest.fixture
def recorder() -> RecordingRegistry:
    return RecordingRegistry()


@pytest.fixture
def registry() -> InMemoryRegistry:
    reg = InMemoryRegistry()
    reg.connect()
    return reg


@pytest.fixture
def context() -> PackageContext:
    return PackageContext(
        pkg_id="org.example.mnist",
        app_id="org.example.app",
        res_type="ml",
        res_version="1.0.0",
    )


@pytest.fixture
def write_manifest(tmp_path: Path):
    """Write a manifest dict (or raw text) to a file and return its path."""

    def _write(content: dict | str, name: str = "rpk_config.json") -> Path:
        path = tmp_path / name
        text = content if isinstance(content, str) else json.dumps(content)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def package_root(tmp_path: Path) -> Path:
    root = tmp_path / "apps" / "org.example.mnist"
    root.mkdir(parents=True)
    return root


@pytest.fixture
def install_manifest(package_root: Path):
    """Place a manifest where the gate expects it for res_type 'ml'."""

    def _install(content: dict | str, res_type: str = "ml") -> Path:
        path = manifest_path(package_root, res_type)
        path.parent.mkdir(parents=True, exist_ok=True)
        text = content if isinstance(content, str) else json.dumps(content)
        path.write_text(text, encoding="utf-8")
        return path

    return _install


@pytest.fixture
def inspector(package_root: Path) -> StaticPackageInspector:
    return StaticPackageInspector(
        {
            "org.example.mnist": PackageInfo(
                pkg_id="org.example.mnist",
                pkg_type="rpk",
                root_path=str(package_root),
                res_type="ml",
                res_version="1.0.0",
            ),
            "org.example.tpk": PackageInfo(
                pkg_id="org.example.tpk",
                pkg_type="tpk",
                root_path=str(package_root),
                res_type="ml",
                res_version="1.0.0",
            ),
        }
    )
