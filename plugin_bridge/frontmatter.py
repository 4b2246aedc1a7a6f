"""Read and write YAML frontmatter on markdown documents."""

from __future__ import annotations

import re
from typing import Any, Mapping, Optional

import yaml

_FRONTMATTER_PATTERN = re.compile(r"^---\s*\n(.*?)\n---\s*\n(.*)$", re.DOTALL)


def format_frontmatter(fields: Mapping[str, Any], body: str) -> str:
    """Render ``fields`` as a YAML header followed by ``body``.

    Fields that are ``None`` or empty are left out. The remaining keys keep
    the order of ``fields``. The body is trimmed and separated from the
    header by one blank line.

    Example:
        >>> format_frontmatter({"description": None, "argument-hint": "[x]"}, "body")
        "---\\nargument-hint: '[x]'\\n---\\n\\nbody\\n"
    """
    present = {key: value for key, value in fields.items() if not _is_absent(value)}
    body = body.strip()

    if not present:
        return f"{body}\n"

    header = yaml.safe_dump(
        present,
        default_flow_style=False,
        allow_unicode=True,
        sort_keys=False,
        width=float("inf"),
    )
    return f"---\n{header}---\n\n{body}\n"


def split_frontmatter(content: str) -> tuple[Optional[str], str]:
    """Split markdown into frontmatter and body.

    Returns:
        Tuple of (frontmatter_yaml, body) where frontmatter may be None
    """
    match = _FRONTMATTER_PATTERN.match(content)

    if match:
        return match.group(1), match.group(2)

    return None, content


def parse_frontmatter(content: str) -> tuple[dict[str, Any], str]:
    """Parse a markdown document into (metadata, body).

    Documents without a header, or whose header is not a YAML mapping, come
    back as an empty mapping and the untouched content.
    """
    frontmatter, body = split_frontmatter(content)
    if frontmatter is None:
        return {}, content

    try:
        data = yaml.safe_load(frontmatter)
    except yaml.YAMLError:
        return {}, content

    if not isinstance(data, dict):
        return {}, content

    return data, body


def _is_absent(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (str, list, tuple, dict)) and len(value) == 0:
        return True
    return False
