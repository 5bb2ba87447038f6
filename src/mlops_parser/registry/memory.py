"""In-memory registry for testing and local runs.

Implements the full model interface of the ML service (register, update
description, activate, get, get activated, get all, delete) plus pipeline
descriptions and resources, using Python dicts.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, replace

from .base import (
    STATUS_INVALID,
    STATUS_NOT_FOUND,
    STATUS_UNAVAILABLE,
    ModelRecord,
    RegistryError,
    ResourceRecord,
)

logger = logging.getLogger(__name__)


class InMemoryRegistry:
    """Full RegistryService implementation using Python dicts.

    Model versions start at 1 per name and are never reused after deletion.
    At most one version per name is active.
    """

    def __init__(self) -> None:
        self._connected = False
        self._models: dict[str, dict[int, ModelRecord]] = {}
        self._next_version: dict[str, int] = {}
        self._pipelines: dict[str, str] = {}
        self._resources: dict[str, list[ResourceRecord]] = {}

    # -------------------------------------------------------------------------
    # Connection
    # -------------------------------------------------------------------------

    def connect(self) -> None:
        self._connected = True

    def disconnect(self) -> None:
        self._connected = False

    def is_connected(self) -> bool:
        return self._connected

    def _require_connection(self) -> None:
        if not self._connected:
            raise RegistryError("registry is not connected", STATUS_UNAVAILABLE)

    @staticmethod
    def _require_name(name: str) -> None:
        if not name:
            raise RegistryError("name must not be empty", STATUS_INVALID)

    # -------------------------------------------------------------------------
    # Models
    # -------------------------------------------------------------------------

    def register_model(
        self, name: str, path: str, active: bool, description: str, app_info: str
    ) -> int:
        self._require_connection()
        self._require_name(name)
        if not path:
            raise RegistryError(f"model '{name}' has an empty path", STATUS_INVALID)

        version = self._next_version.get(name, 1)
        self._next_version[name] = version + 1
        versions = self._models.setdefault(name, {})
        if active:
            self._deactivate_all(name)
        versions[version] = ModelRecord(
            name=name,
            version=version,
            path=path,
            active=active,
            description=description,
            app_info=app_info,
        )
        logger.debug("model %s v%d stored (active=%s)", name, version, active)
        return version

    def update_model_description(self, name: str, version: int, description: str) -> None:
        self._require_connection()
        record = self._get_record(name, version)
        self._models[name][version] = replace(record, description=description)

    def activate_model(self, name: str, version: int) -> None:
        self._require_connection()
        record = self._get_record(name, version)
        self._deactivate_all(name)
        self._models[name][version] = replace(record, active=True)

    def get_model(self, name: str, version: int) -> ModelRecord:
        self._require_connection()
        return self._get_record(name, version)

    def get_activated_model(self, name: str) -> ModelRecord:
        self._require_connection()
        for record in self._models.get(name, {}).values():
            if record.active:
                return record
        raise RegistryError(f"no activated model named '{name}'", STATUS_NOT_FOUND)

    def get_all_models(self, name: str) -> list[ModelRecord]:
        self._require_connection()
        versions = self._models.get(name)
        if not versions:
            raise RegistryError(f"no model named '{name}'", STATUS_NOT_FOUND)
        return [versions[v] for v in sorted(versions)]

    def delete_model(self, name: str, version: int, force: bool = False) -> None:
        """Delete one version, or every version of the name when version is 0."""
        self._require_connection()
        if version == 0:
            versions = self._models.get(name)
            if not versions:
                raise RegistryError(f"no model named '{name}'", STATUS_NOT_FOUND)
            if not force and any(r.active for r in versions.values()):
                raise RegistryError(
                    f"model '{name}' has an activated version; use force", STATUS_INVALID
                )
            del self._models[name]
            return

        record = self._get_record(name, version)
        if record.active and not force:
            raise RegistryError(
                f"model '{name}' v{version} is activated; use force", STATUS_INVALID
            )
        del self._models[name][version]
        if not self._models[name]:
            del self._models[name]

    def _get_record(self, name: str, version: int) -> ModelRecord:
        try:
            return self._models[name][version]
        except KeyError:
            raise RegistryError(
                f"no model named '{name}' with version {version}", STATUS_NOT_FOUND
            ) from None

    def _deactivate_all(self, name: str) -> None:
        versions = self._models.get(name, {})
        for v, record in versions.items():
            if record.active:
                versions[v] = replace(record, active=False)

    # -------------------------------------------------------------------------
    # Pipelines
    # -------------------------------------------------------------------------

    def set_pipeline_description(self, name: str, description: str) -> None:
        self._require_connection()
        self._require_name(name)
        if not description:
            raise RegistryError(f"pipeline '{name}' has an empty description", STATUS_INVALID)
        self._pipelines[name] = description

    def get_pipeline_description(self, name: str) -> str:
        self._require_connection()
        try:
            return self._pipelines[name]
        except KeyError:
            raise RegistryError(f"no pipeline named '{name}'", STATUS_NOT_FOUND) from None

    def delete_pipeline_description(self, name: str) -> None:
        self._require_connection()
        if self._pipelines.pop(name, None) is None:
            raise RegistryError(f"no pipeline named '{name}'", STATUS_NOT_FOUND)

    # -------------------------------------------------------------------------
    # Resources
    # -------------------------------------------------------------------------

    def add_resource(self, name: str, path: str, description: str, app_info: str) -> None:
        self._require_connection()
        self._require_name(name)
        if not path:
            raise RegistryError(f"resource '{name}' has an empty path", STATUS_INVALID)
        entries = self._resources.setdefault(name, [])
        record = ResourceRecord(name=name, path=path, description=description, app_info=app_info)
        # Same (name, path) replaces the earlier entry in place
        for i, existing in enumerate(entries):
            if existing.path == path:
                entries[i] = record
                return
        entries.append(record)

    def get_resources(self, name: str) -> list[ResourceRecord]:
        self._require_connection()
        entries = self._resources.get(name)
        if not entries:
            raise RegistryError(f"no resource named '{name}'", STATUS_NOT_FOUND)
        return list(entries)

    def delete_resources(self, name: str) -> None:
        self._require_connection()
        if self._resources.pop(name, None) is None:
            raise RegistryError(f"no resource named '{name}'", STATUS_NOT_FOUND)

    # -------------------------------------------------------------------------
    # Inspection
    # -------------------------------------------------------------------------

    def snapshot(self) -> dict:
        """JSON-safe view of everything stored. Works while disconnected."""
        return {
            "models": {
                name: [asdict(versions[v]) for v in sorted(versions)]
                for name, versions in self._models.items()
            },
            "pipelines": dict(self._pipelines),
            "resources": {
                name: [asdict(r) for r in entries] for name, entries in self._resources.items()
            },
        }

    def to_json(self) -> str:
        return json.dumps(self.snapshot(), indent=2)
