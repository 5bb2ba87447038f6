"""Normalize a section value into a stream of registrable items.

A section value is a single JSON object or an array of them. Each object is
checked for its kind's required fields; resource objects with a list of paths
fan out into one ResourceItem per path.

Problems with an individual element never stop iteration. They are yielded as
ItemFailure values in the position the element occupied, so the consumer sees
one ordered stream of work and failures.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any

from .models import (
    DeclarationKind,
    ItemFailure,
    ModelItem,
    PipelineItem,
    ResourceItem,
)

Normalized = ModelItem | PipelineItem | ResourceItem | ItemFailure


def _str_member(obj: dict[str, Any], key: str) -> str | None:
    """String member of a JSON object, or None when absent or not a string."""
    value = obj.get(key)
    return value if isinstance(value, str) else None


def _is_true(value: Any) -> bool:
    return isinstance(value, str) and value.lower() == "true"


# ---------------------------------------------------------------------------
# Per-kind element handlers
# ---------------------------------------------------------------------------


def _model_items(obj: dict[str, Any], index: int) -> Iterator[Normalized]:
    name = _str_member(obj, "name")
    model = _str_member(obj, "model")
    if name is None or model is None:
        yield ItemFailure(
            DeclarationKind.MODEL, index, "missing 'name' or 'model'", name=name
        )
        return
    yield ModelItem(
        name=name,
        model=model,
        description=_str_member(obj, "description") or "",
        active=_is_true(obj.get("activate")),
    )


def _pipeline_items(obj: dict[str, Any], index: int) -> Iterator[Normalized]:
    name = _str_member(obj, "name")
    pipeline = _str_member(obj, "pipeline")
    if name is None or pipeline is None:
        yield ItemFailure(
            DeclarationKind.PIPELINE, index, "missing 'name' or 'pipeline'", name=name
        )
        return
    yield PipelineItem(name=name, pipeline=pipeline)


def _resource_items(obj: dict[str, Any], index: int) -> Iterator[Normalized]:
    name = _str_member(obj, "name")
    if name is None:
        yield ItemFailure(DeclarationKind.RESOURCE, index, "missing 'name'")
        return

    description = _str_member(obj, "description") or ""
    path = obj.get("path")

    if isinstance(path, str):
        yield ResourceItem(name=name, path=path, description=description)
        return

    if not isinstance(path, list) or not path:
        yield ItemFailure(DeclarationKind.RESOURCE, index, "missing 'path'", name=name)
        return

    for pidx, entry in enumerate(path):
        if not isinstance(entry, str):
            yield ItemFailure(
                DeclarationKind.RESOURCE,
                index,
                f"path at index {pidx} is not a string",
                name=name,
                path_index=pidx,
            )
            continue
        yield ResourceItem(name=name, path=entry, description=description)


_HANDLERS: dict[DeclarationKind, Callable[[dict[str, Any], int], Iterator[Normalized]]] = {
    DeclarationKind.MODEL: _model_items,
    DeclarationKind.PIPELINE: _pipeline_items,
    DeclarationKind.RESOURCE: _resource_items,
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def iter_items(kind: DeclarationKind, value: Any) -> Iterator[Normalized]:
    """Yield items (and per-element failures) for one section value.

    Order: array order, then path-array order within a resource.
    Calling again with the same arguments yields the same sequence.
    """
    handler = _HANDLERS[kind]
    elements = value if isinstance(value, list) else [value]

    for index, element in enumerate(elements):
        if not isinstance(element, dict):
            yield ItemFailure(
                kind, index, f"expected an object, got {type(element).__name__}"
            )
            continue
        yield from handler(element, index)
