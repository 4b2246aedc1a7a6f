"""Known conversion targets."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

from plugin_bridge.codex import convert_to_codex
from plugin_bridge.opencode import convert_to_opencode
from plugin_bridge.parser import ClaudePlugin
from plugin_bridge.policy import ConversionOptions
from plugin_bridge.writer import write_codex_bundle, write_opencode_bundle


class UnknownTargetError(ValueError):
    """Raised for a target name that is not registered."""


class TargetNotImplementedError(ValueError):
    """Raised for a registered target whose converter is not available yet."""


@dataclass(frozen=True)
class Target:
    """A conversion target: ``convert`` builds a bundle, ``write`` persists it.

    Callers must check ``implemented`` before calling ``convert``.
    """

    name: str
    implemented: bool
    convert: Callable[[ClaudePlugin, ConversionOptions], Any]
    write: Callable[[Path, Any], None]


TARGETS: dict[str, Target] = {
    "opencode": Target(
        name="opencode",
        implemented=True,
        convert=convert_to_opencode,
        write=write_opencode_bundle,
    ),
    "codex": Target(
        name="codex",
        implemented=True,
        convert=convert_to_codex,
        write=write_codex_bundle,
    ),
}


def target_names() -> list[str]:
    return list(TARGETS)


def get_target(name: str) -> Target:
    """Look up a target by name.

    Raises:
        UnknownTargetError: If no target has that name
    """
    target = TARGETS.get(name)
    if target is None:
        raise UnknownTargetError(f"Unknown target: {name}")
    return target


def require_target(name: str) -> Target:
    """Look up a target that can be converted to.

    Raises:
        UnknownTargetError: If no target has that name
        TargetNotImplementedError: If the target exists but is not implemented
    """
    target = get_target(name)
    if not target.implemented:
        raise TargetNotImplementedError(f"Target {name} is registered but not implemented yet.")
    return target
