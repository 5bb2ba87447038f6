"""Manifest loader: read, parse and classify a manifest file.

Every failure here is structural. The loader classifies all top-level keys
before returning, so a manifest with an unknown section is rejected before
any of its items reach the registry.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from .classifier import classify_section
from .errors import ManifestLoadError, UnknownSectionError
from .models import Manifest, Section

logger = logging.getLogger(__name__)


def parse_manifest(data: dict[str, Any], path: Path | None = None) -> Manifest:
    """Classify the members of an already-decoded manifest object."""
    where = str(path) if path is not None else "<memory>"
    if not isinstance(data, dict):
        raise ManifestLoadError(where, "top-level JSON value is not an object")

    sections: list[Section] = []
    for key, value in data.items():
        kind = classify_section(key)
        if kind is None:
            raise UnknownSectionError(where, key)
        sections.append(Section(key=key, kind=kind, value=value))

    logger.debug("Classified %d section(s) in %s", len(sections), where)
    return Manifest(path=path, sections=tuple(sections))


def loads_manifest(text: str, path: Path | None = None) -> Manifest:
    """Parse manifest JSON text."""
    where = str(path) if path is not None else "<memory>"
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ManifestLoadError(where, f"Invalid JSON: {e}") from e
    except RecursionError as e:
        raise ManifestLoadError(where, "Invalid JSON: nested too deeply") from e
    return parse_manifest(data, path)


def load_manifest(path: str | Path) -> Manifest:
    """Read a manifest file from disk.

    Raises:
        ManifestLoadError: missing file, not a regular file, unreadable,
            invalid JSON or a non-object top level.
        UnknownSectionError: a top-level key is not a known section.
    """
    path = Path(path)
    if not path.is_file():
        raise ManifestLoadError(str(path), "not an existing regular file")

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestLoadError(str(path), f"cannot read file: {e}") from e

    manifest = loads_manifest(text, path)
    logger.info("Loaded manifest %s (%d section(s))", path, len(manifest.sections))
    return manifest
