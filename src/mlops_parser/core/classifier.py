"""Map top-level manifest keys to declaration kinds."""

from __future__ import annotations

from .models import DeclarationKind

_SPELLINGS: dict[str, DeclarationKind] = {
    "model": DeclarationKind.MODEL,
    "models": DeclarationKind.MODEL,
    "pipeline": DeclarationKind.PIPELINE,
    "pipelines": DeclarationKind.PIPELINE,
    "resource": DeclarationKind.RESOURCE,
    "resources": DeclarationKind.RESOURCE,
}


def classify_section(key: str) -> DeclarationKind | None:
    """Return the kind for a section key, or None if the key is not recognized.

    Case-insensitive exact match on the singular or plural kind name.
    """
    if not isinstance(key, str):
        return None
    # ASCII case folding only
    if not key.isascii():
        return None
    return _SPELLINGS.get(key.lower())


def known_sections() -> list[str]:
    """All accepted spellings, lower-case."""
    return list(_SPELLINGS)
