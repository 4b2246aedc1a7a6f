"""CLI for converting Claude Code plugins to other assistants."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import click

from plugin_bridge.installer import convert_plugin, install_plugin, list_plugins
from plugin_bridge.parser import parse_plugin
from plugin_bridge.policy import AGENT_MODES, PERMISSION_MODES, ConversionOptions
from plugin_bridge.registry import target_names


def conversion_options(func):
    """Options shared by install and convert."""
    options = [
        click.option("--to", "target", default="opencode", show_default=True, help=f"Target format ({' | '.join(target_names())})"),
        click.option(
            "--output",
            "-o",
            type=click.Path(file_okay=False, path_type=Path),
            default=Path("."),
            show_default=True,
            help="Output directory (project root)",
        ),
        click.option("--also", default=None, help="Comma-separated extra targets to generate (ex: codex)"),
        click.option(
            "--permissions",
            type=click.Choice(PERMISSION_MODES),
            default="broad",
            show_default=True,
            help="Permission mapping",
        ),
        click.option(
            "--agent-mode",
            type=click.Choice(AGENT_MODES),
            default="subagent",
            show_default=True,
            help="Default agent mode",
        ),
        click.option(
            "--infer-temperature/--no-infer-temperature",
            default=True,
            show_default=True,
            help="Infer agent temperature from name/description",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group()
@click.version_option(package_name="plugin-bridge")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
def main(verbose: bool) -> None:
    """Convert Claude Code plugins to OpenCode and Codex."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("plugin")
@conversion_options
def install(
    plugin: str,
    target: str,
    output: Path,
    also: Optional[str],
    permissions: str,
    agent_mode: str,
    infer_temperature: bool,
) -> None:
    """Install and convert a local Claude plugin.

    PLUGIN can be:
    - Plugin name under ./plugins
    - Local path: /path/to/plugin or ./plugin
    - GitHub: github.com/owner/repo
    - Git URL: git+https://github.com/owner/repo
    """
    options = ConversionOptions(permissions=permissions, agent_mode=agent_mode, infer_temperature=infer_temperature)
    try:
        results = install_plugin(plugin, output, target, _parse_extra_targets(also), options)
    except Exception as e:
        click.secho(f"✗ {e}", fg="red", err=True)
        raise SystemExit(1)

    _report(results)


@main.command()
@click.argument("path", type=click.Path(exists=True, file_okay=False, path_type=Path))
@conversion_options
def convert(
    path: Path,
    target: str,
    output: Path,
    also: Optional[str],
    permissions: str,
    agent_mode: str,
    infer_temperature: bool,
) -> None:
    """Convert a Claude plugin directory without installing it."""
    options = ConversionOptions(permissions=permissions, agent_mode=agent_mode, infer_temperature=infer_temperature)
    try:
        plugin = parse_plugin(path)
        results = convert_plugin(plugin, output, target, _parse_extra_targets(also), options)
    except Exception as e:
        click.secho(f"✗ {e}", fg="red", err=True)
        raise SystemExit(1)

    _report(results)


@main.command(name="list")
@click.option(
    "--plugins-root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding plugins (defaults to ./plugins)",
)
def list_command(plugins_root: Optional[Path]) -> None:
    """List plugins under ./plugins."""
    plugins = list_plugins(plugins_root)

    if not plugins:
        click.echo("No plugins found.")
        return

    for name, path in plugins:
        click.secho(f"  {name}", fg="cyan", bold=True, nl=False)
        click.echo(f"  {path}")


@main.command()
@click.argument("path", type=click.Path(exists=True, path_type=Path))
def validate(path: Path) -> None:
    """Validate a Claude Code plugin structure."""
    click.echo(f"Validating plugin at {path}...")

    try:
        plugin = parse_plugin(path)
    except Exception as e:
        click.secho(f"✗ Invalid plugin: {e}", fg="red")
        raise SystemExit(1)

    click.secho(f"✓ Valid plugin: {plugin.manifest.name}", fg="green")
    click.echo(f"  Version: {plugin.manifest.version}")
    click.echo(f"  Description: {plugin.manifest.description}")
    click.echo()

    summary = plugin.summary()
    click.echo("  Components:")
    click.echo(f"    Skills: {summary['skills']}")
    click.echo(f"    Agents: {summary['agents']}")
    click.echo(f"    Commands: {summary['commands']}")
    click.echo(f"    Hooks: {'yes' if summary['has_hooks'] else 'no'}")
    click.echo(f"    MCP: {'yes' if summary['has_mcp'] else 'no'}")


def _report(results) -> None:
    for result in results:
        if result.success:
            click.secho(str(result), fg="green")
        else:
            click.secho(str(result), fg="yellow", err=True)


def _parse_extra_targets(value: Optional[str]) -> list[str]:
    if not value:
        return []
    return [entry.strip() for entry in value.split(",") if entry.strip()]


if __name__ == "__main__":
    main()
