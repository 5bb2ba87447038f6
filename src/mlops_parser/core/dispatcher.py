"""Dispatcher: turn normalized items into registry calls.

The dispatch loop is a fold: each item produces exactly one ItemOutcome and
the loop never stops early. RegistryError from the registry becomes a failed
outcome; any other exception is a bug and propagates.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from mlops_parser.observability.logging import get_logger
from mlops_parser.registry.base import RegistryError, RegistryService

from .models import (
    IngestionReport,
    ItemFailure,
    ItemOutcome,
    Manifest,
    ModelItem,
    PackageContext,
    PipelineItem,
    ResourceItem,
    Section,
)
from .normalizer import Normalized, iter_items

logger = get_logger(__name__)


class Dispatcher:
    """Registers manifest items against a registry on behalf of one package.

    Usage::

        dispatcher = Dispatcher(registry, context)
        report = dispatcher.dispatch(load_manifest(path))
    """

    def __init__(self, registry: RegistryService, context: PackageContext | None = None) -> None:
        self._registry = registry
        self._context = context
        self._app_info = context.to_json() if context is not None else ""
        self._handlers: dict[type, Callable[[Normalized], ItemOutcome]] = {
            ModelItem: self._register_model,
            PipelineItem: self._register_pipeline,
            ResourceItem: self._register_resource,
            ItemFailure: self._skip,
        }

    @property
    def context(self) -> PackageContext | None:
        return self._context

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def dispatch(self, manifest: Manifest) -> IngestionReport:
        """Dispatch every section of a manifest, in document order."""
        report = IngestionReport(source=manifest.path)
        for section in manifest.sections:
            report.extend(self.dispatch_section(section))

        logger.info(
            "ingestion.completed",
            source=str(manifest.path) if manifest.path else None,
            total=report.total,
            succeeded=report.succeeded,
            failed=report.failed,
        )
        return report

    def dispatch_section(self, section: Section) -> IngestionReport:
        """Dispatch the items of a single section."""
        return self.dispatch_items(iter_items(section.kind, section.value))

    def dispatch_items(self, items: Iterable[Normalized]) -> IngestionReport:
        report = IngestionReport()
        for item in items:
            report.add(self.dispatch_one(item))
        return report

    def dispatch_one(self, item: Normalized) -> ItemOutcome:
        """Run one item. Always returns an outcome."""
        handler = self._handlers[type(item)]
        try:
            return handler(item)
        except RegistryError as e:
            outcome = ItemOutcome(
                kind=item.kind,
                name=item.name,
                ok=False,
                detail=f"registry error ({e.status}): {e}",
                path=getattr(item, "path", None),
            )
            logger.error(
                "item.failed",
                kind=item.kind.value,
                name=item.name,
                path=outcome.path,
                status=e.status,
                error=str(e),
            )
            return outcome

    # -------------------------------------------------------------------------
    # Handlers
    # -------------------------------------------------------------------------

    def _register_model(self, item: ModelItem) -> ItemOutcome:
        version = self._registry.register_model(
            item.name, item.model, item.active, item.description, self._app_info
        )
        logger.info(
            "model.registered", name=item.name, version=version, active=item.active
        )
        return ItemOutcome(
            kind=item.kind,
            name=item.name,
            ok=True,
            detail=f"registered as version {version}",
            version=version,
        )

    def _register_pipeline(self, item: PipelineItem) -> ItemOutcome:
        self._registry.set_pipeline_description(item.name, item.pipeline)
        logger.info("pipeline.registered", name=item.name)
        return ItemOutcome(kind=item.kind, name=item.name, ok=True, detail="registered")

    def _register_resource(self, item: ResourceItem) -> ItemOutcome:
        self._registry.add_resource(item.name, item.path, item.description, self._app_info)
        logger.info("resource.registered", name=item.name, path=item.path)
        return ItemOutcome(
            kind=item.kind, name=item.name, ok=True, detail="registered", path=item.path
        )

    def _skip(self, item: ItemFailure) -> ItemOutcome:
        logger.error(
            "item.failed",
            kind=item.kind.value,
            name=item.name,
            index=item.index,
            path_index=item.path_index,
            error=item.reason,
        )
        return ItemOutcome(kind=item.kind, name=item.name, ok=False, detail=item.reason)
