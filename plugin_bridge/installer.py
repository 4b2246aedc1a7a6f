"""Install Claude Code plugins into other assistants' formats."""

from __future__ import annotations

import json
import logging
import shutil
import subprocess
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional

from plugin_bridge.parser import ClaudePlugin, find_manifest, parse_plugin
from plugin_bridge.policy import ConversionOptions
from plugin_bridge.registry import require_target

logger = logging.getLogger(__name__)


@dataclass
class InstallResult:
    """Result of converting a plugin for one target."""

    success: bool
    plugin_name: str
    target: str
    message: str
    output_root: Optional[Path] = None
    warnings: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        if self.success:
            return self.message
        return f"Skipping {self.target}: {self.message}"


def install_plugin(
    source: str,
    output_root: Path,
    target: str = "opencode",
    also: Iterable[str] = (),
    options: ConversionOptions | None = None,
) -> list[InstallResult]:
    """Install a Claude Code plugin for one or more targets.

    The primary target is written to ``output_root``; each extra target goes
    to ``output_root/<target>``.

    Args:
        source: Plugin name under ./plugins, local path, or git URL
        output_root: Project root to write into
        target: Primary target name
        also: Extra target names
        options: Conversion options (defaults when None)

    Returns:
        One InstallResult per target, primary first

    Raises:
        ValueError: If the source cannot be resolved or the primary target
            cannot be converted
    """
    plugin_path, clone_dir = _resolve_source(source)
    try:
        plugin = parse_plugin(plugin_path)
        return convert_plugin(plugin, output_root, target, also, options, verb="Installed")
    finally:
        if clone_dir is not None:
            logger.debug("Removing clone %s", clone_dir)
            shutil.rmtree(clone_dir, ignore_errors=True)


def convert_plugin(
    plugin: ClaudePlugin,
    output_root: Path,
    target: str = "opencode",
    also: Iterable[str] = (),
    options: ConversionOptions | None = None,
    verb: str = "Converted",
) -> list[InstallResult]:
    """Convert and write an already parsed plugin.

    A failing extra target is reported as a skipped result and does not stop
    the remaining ones.
    """
    if options is None:
        options = ConversionOptions()
    output_root = Path(output_root).resolve()

    results = [_run_target(plugin, target, output_root, options, verb)]

    for extra in also:
        try:
            results.append(_run_target(plugin, extra, output_root / extra, options, verb))
        except Exception as e:
            logger.warning("Skipping %s: %s", extra, e)
            results.append(
                InstallResult(
                    success=False,
                    plugin_name=plugin.manifest.name,
                    target=extra,
                    message=str(e),
                )
            )

    return results


def resolve_plugin_path(source: str, plugins_root: Path | None = None) -> Path:
    """Resolve a source string to a local path.

    Supports:
    - Local paths: /path/to/plugin or ./plugin
    - Plugin names under ./plugins: my-plugin
    - GitHub shorthand: github.com/owner/repo
    - Git URLs: git+https://github.com/owner/repo

    A cloned repository is left in place; the caller owns it.
    """
    return _resolve_source(source, plugins_root)[0]


def list_plugins(plugins_root: Path | None = None) -> list[tuple[str, Path]]:
    """Find plugins under ``plugins_root`` (default ./plugins).

    Returns:
        Sorted (name, path) pairs, named from each plugin.json
    """
    if plugins_root is None:
        plugins_root = Path.cwd() / "plugins"
    if not plugins_root.is_dir():
        return []

    found = []
    for plugin_dir in sorted(plugins_root.iterdir()):
        if not plugin_dir.is_dir():
            continue
        manifest_path = find_manifest(plugin_dir)
        if manifest_path is None:
            continue
        try:
            with open(manifest_path) as f:
                name = json.load(f).get("name") or plugin_dir.name
        except json.JSONDecodeError as e:
            logger.warning("Ignoring %s: %s", manifest_path, e)
            continue
        found.append((name, plugin_dir))

    return sorted(found)


def _resolve_source(source: str, plugins_root: Path | None = None) -> tuple[Path, Optional[Path]]:
    """Resolve ``source`` and return the plugin path plus the clone dir, if one was made."""
    local_path = Path(source).expanduser()
    if local_path.exists():
        return local_path.resolve(), None

    if plugins_root is None:
        plugins_root = Path.cwd() / "plugins"
    named_path = plugins_root / source
    if named_path.exists():
        return named_path.resolve(), None

    if source.startswith("git+") or source.startswith("https://") or "github.com" in source:
        clone_dir = _clone_repo(source)
        return clone_dir, clone_dir

    raise ValueError(f"Could not find plugin at {source}")


def _run_target(
    plugin: ClaudePlugin,
    target_name: str,
    output_root: Path,
    options: ConversionOptions,
    verb: str,
) -> InstallResult:
    target = require_target(target_name)
    bundle = target.convert(plugin, options)
    target.write(output_root, bundle)
    logger.debug("%s %s for %s at %s", verb, plugin.manifest.name, target_name, output_root)
    return InstallResult(
        success=True,
        plugin_name=plugin.manifest.name,
        target=target_name,
        message=f"{verb} {plugin.manifest.name} to {output_root}",
        output_root=output_root,
    )


def _clone_repo(source: str) -> Path:
    """Clone a git repository to a temporary location."""
    # Normalize URL
    url = source
    if url.startswith("git+"):
        url = url[4:]
    if not url.startswith("https://"):
        url = f"https://{url}"
    if not url.endswith(".git"):
        url = f"{url}.git"

    temp_dir = tempfile.mkdtemp(prefix="plugin-bridge-")
    logger.debug("Cloning %s into %s", url, temp_dir)
    try:
        subprocess.run(
            ["git", "clone", "--depth=1", url, temp_dir],
            check=True,
            capture_output=True,
        )
    except subprocess.CalledProcessError as e:
        shutil.rmtree(temp_dir, ignore_errors=True)
        raise ValueError(f"Could not clone {url}: {e.stderr.decode(errors='replace').strip()}") from e

    return Path(temp_dir)
