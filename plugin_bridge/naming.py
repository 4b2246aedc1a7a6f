"""Turn free-form plugin names into safe, unique slugs."""

from __future__ import annotations

import re

FALLBACK_NAME = "item"

_SEPARATORS = re.compile(r"[\\/]+")
_COLONS_AND_SPACE = re.compile(r"[:\s]+")
_DISALLOWED = re.compile(r"[^a-z0-9_-]+")
_HYPHEN_RUNS = re.compile(r"-+")


def normalize_name(value: str) -> str:
    """Normalize a name into a lowercase slug.

    Path separators, colons and whitespace become hyphens, any other
    character outside ``[a-z0-9_-]`` is replaced with a hyphen, and runs of
    hyphens collapse into one. Names with nothing usable left become
    ``"item"``.
    """
    trimmed = value.strip()
    if not trimmed:
        return FALLBACK_NAME

    normalized = trimmed.lower()
    normalized = _SEPARATORS.sub("-", normalized)
    normalized = _COLONS_AND_SPACE.sub("-", normalized)
    normalized = _DISALLOWED.sub("-", normalized)
    normalized = _HYPHEN_RUNS.sub("-", normalized)
    normalized = normalized.strip("-")

    return normalized or FALLBACK_NAME


def unique_name(base: str, used: set[str]) -> str:
    """Return ``base`` or the first free ``base-N`` (N >= 2), recording it in ``used``."""
    if base not in used:
        used.add(base)
        return base

    index = 2
    while f"{base}-{index}" in used:
        index += 1

    name = f"{base}-{index}"
    used.add(name)
    return name
