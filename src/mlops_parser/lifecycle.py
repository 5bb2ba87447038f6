"""Package lifecycle front end.

The host package manager calls one hook per lifecycle event with
(pkgid, appid, metadata). Only INSTALL (and the events that reduce to it)
ingest a manifest; the rest are no-ops.

    INSTALL           → gate on package type, load manifest, dispatch
    UNINSTALL         → no-op (registered entries are not retracted)
    UPGRADE           → UNINSTALL, then INSTALL
    RECOVERINSTALL    → UNINSTALL
    RECOVERUPGRADE    → UPGRADE
    RECOVERUNINSTALL  → INSTALL
    CLEAN, UNDO       → no-op

Hooks return 0 on success and -1 on a structural failure or an unreachable
registry. Per-item failures are logged and do not change the status.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from enum import StrEnum

from mlops_parser.config import ParserConfig
from mlops_parser.core.dispatcher import Dispatcher
from mlops_parser.core.errors import StructuralError
from mlops_parser.core.loader import load_manifest
from mlops_parser.core.models import IngestionReport, PackageContext, manifest_path
from mlops_parser.inspector.base import PackageInspector
from mlops_parser.observability.logging import get_logger
from mlops_parser.registry.base import RegistryError, RegistryService, registry_session

logger = get_logger(__name__)

HOOK_OK = 0
HOOK_FAILED = -1

Metadata = Iterable[tuple[str, str]]
Hook = Callable[..., int]


class LifecycleEvent(StrEnum):
    """Events the host package manager fires."""

    INSTALL = "install"
    UNINSTALL = "uninstall"
    UPGRADE = "upgrade"
    RECOVERINSTALL = "recoverinstall"
    RECOVERUPGRADE = "recoverupgrade"
    RECOVERUNINSTALL = "recoveruninstall"
    CLEAN = "clean"
    UNDO = "undo"


class PackageGate:
    """Runs manifest ingestion for lifecycle events of one host.

    The gate owns its registry handle and connects it only for the duration
    of an ingestion.
    """

    def __init__(
        self,
        inspector: PackageInspector,
        registry: RegistryService,
        config: ParserConfig | None = None,
    ) -> None:
        self._inspector = inspector
        self._registry = registry
        self._config = config or ParserConfig()
        self._hooks: dict[LifecycleEvent, Hook] = {
            LifecycleEvent.INSTALL: self.install,
            LifecycleEvent.UNINSTALL: self.uninstall,
            LifecycleEvent.UPGRADE: self.upgrade,
            LifecycleEvent.RECOVERINSTALL: self.recoverinstall,
            LifecycleEvent.RECOVERUPGRADE: self.recoverupgrade,
            LifecycleEvent.RECOVERUNINSTALL: self.recoveruninstall,
            LifecycleEvent.CLEAN: self.clean,
            LifecycleEvent.UNDO: self.undo,
        }

    @property
    def config(self) -> ParserConfig:
        return self._config

    # -------------------------------------------------------------------------
    # Ingestion
    # -------------------------------------------------------------------------

    def build_context(self, pkgid: str, appid: str | None = None) -> PackageContext:
        """Query the inspector for resource metadata. Raises PackageInspectorError."""
        return PackageContext(
            pkg_id=pkgid,
            app_id=appid or "",
            res_type=self._inspector.get_resource_type(pkgid),
            res_version=self._inspector.get_resource_version(pkgid),
        )

    def ingest(self, pkgid: str, appid: str | None = None) -> IngestionReport | None:
        """Ingest the manifest of a package.

        Returns None when the package type carries no manifest. Raises
        StructuralError when metadata or the manifest cannot be resolved,
        and RegistryError when the registry cannot be connected.
        """
        pkg_type = self._inspector.get_package_type(pkgid)
        if pkg_type != self._config.package_type:
            logger.info("package.skipped", pkg_id=pkgid, pkg_type=pkg_type)
            return None

        root = self._inspector.get_root_path(pkgid)
        context = self.build_context(pkgid, appid)
        path = manifest_path(root, context.res_type, self._config.manifest_filename)
        logger.info(
            "package.manifest",
            pkg_id=pkgid,
            root_path=root,
            res_type=context.res_type,
            res_version=context.res_version,
            manifest=str(path),
        )

        manifest = load_manifest(path)
        with registry_session(self._registry) as registry:
            return Dispatcher(registry, context).dispatch(manifest)

    # -------------------------------------------------------------------------
    # Hooks
    # -------------------------------------------------------------------------

    def install(self, pkgid: str, appid: str | None = None, metadata: Metadata | None = None) -> int:
        _log_hook(LifecycleEvent.INSTALL, pkgid, appid)
        return self._install(LifecycleEvent.INSTALL, pkgid, appid, metadata)

    def uninstall(
        self, pkgid: str, appid: str | None = None, metadata: Metadata | None = None
    ) -> int:
        _log_hook(LifecycleEvent.UNINSTALL, pkgid, appid)
        return self._uninstall(pkgid)

    def upgrade(self, pkgid: str, appid: str | None = None, metadata: Metadata | None = None) -> int:
        _log_hook(LifecycleEvent.UPGRADE, pkgid, appid)
        return self._upgrade(LifecycleEvent.UPGRADE, pkgid, appid, metadata)

    def recoverinstall(
        self, pkgid: str, appid: str | None = None, metadata: Metadata | None = None
    ) -> int:
        _log_hook(LifecycleEvent.RECOVERINSTALL, pkgid, appid)
        return self._uninstall(pkgid)

    def recoverupgrade(
        self, pkgid: str, appid: str | None = None, metadata: Metadata | None = None
    ) -> int:
        _log_hook(LifecycleEvent.RECOVERUPGRADE, pkgid, appid)
        return self._upgrade(LifecycleEvent.RECOVERUPGRADE, pkgid, appid, metadata)

    def recoveruninstall(
        self, pkgid: str, appid: str | None = None, metadata: Metadata | None = None
    ) -> int:
        _log_hook(LifecycleEvent.RECOVERUNINSTALL, pkgid, appid)
        return self._install(LifecycleEvent.RECOVERUNINSTALL, pkgid, appid, metadata)

    def clean(self, pkgid: str, appid: str | None = None, metadata: Metadata | None = None) -> int:
        _log_hook(LifecycleEvent.CLEAN, pkgid, appid)
        return HOOK_OK

    def undo(self, pkgid: str, appid: str | None = None, metadata: Metadata | None = None) -> int:
        _log_hook(LifecycleEvent.UNDO, pkgid, appid)
        return HOOK_OK

    # -------------------------------------------------------------------------
    # Hook bodies (no entry logging; shared by the composite events)
    # -------------------------------------------------------------------------

    def _install(
        self,
        hook: LifecycleEvent,
        pkgid: str,
        appid: str | None,
        metadata: Metadata | None,
    ) -> int:
        for key, value in metadata or ():
            logger.info("lifecycle.metadata", key=key, value=value)

        try:
            report = self.ingest(pkgid, appid)
        except (StructuralError, RegistryError) as e:
            logger.error("lifecycle.failed", hook=hook.value, pkg_id=pkgid, error=str(e))
            return HOOK_FAILED

        if report is not None and report.failed:
            logger.warning(
                "lifecycle.partial",
                hook=hook.value,
                pkg_id=pkgid,
                failed=report.failed,
                total=report.total,
            )
        return HOOK_OK

    def _uninstall(self, pkgid: str) -> int:
        # TODO: retract entries registered by this package once the registry
        # records ownership queries (app_info is already stored per entry).
        return HOOK_OK

    def _upgrade(
        self,
        hook: LifecycleEvent,
        pkgid: str,
        appid: str | None,
        metadata: Metadata | None,
    ) -> int:
        self._uninstall(pkgid)
        return self._install(hook, pkgid, appid, metadata)

    def handle(
        self,
        event: LifecycleEvent | str,
        pkgid: str,
        appid: str | None = None,
        metadata: Metadata | None = None,
    ) -> int:
        """Run the hook for an event. Raises ValueError for unknown event names."""
        return self._hooks[LifecycleEvent(str(event).lower())](pkgid, appid, metadata)


def _log_hook(hook: LifecycleEvent, pkgid: str, appid: str | None) -> None:
    logger.info("lifecycle.hook", hook=hook.value, pkg_id=pkgid, app_id=appid)
