"""Write converted bundles to disk."""

from __future__ import annotations

import json
import logging
import shutil
from pathlib import Path

import toml

from plugin_bridge.codex import CodexBundle
from plugin_bridge.naming import normalize_name
from plugin_bridge.opencode import OpenCodeBundle

logger = logging.getLogger(__name__)


def write_opencode_bundle(output_root: Path, bundle: OpenCodeBundle) -> None:
    """Write an OpenCode bundle under ``output_root``.

    opencode.json is merged over any existing file; keys from the bundle win.
    """
    output_root = Path(output_root)
    opencode_dir = output_root / ".opencode"

    config_path = output_root / "opencode.json"
    config: dict = {}
    if config_path.exists():
        with open(config_path) as f:
            config = json.load(f)
    config.update(bundle.config)

    output_root.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w") as f:
        json.dump(config, f, indent=2)
        f.write("\n")

    agents_dir = opencode_dir / "agents"
    for agent in bundle.agents:
        _write_text(agents_dir / f"{agent.name}.md", agent.content)

    plugins_dir = opencode_dir / "plugins"
    for plugin in bundle.plugins:
        _write_text(plugins_dir / plugin.name, plugin.content)

    skills_dir = opencode_dir / "skills"
    for skill in bundle.skill_dirs:
        _copy_skill(skill.source_dir, skills_dir, skill.name)

    logger.debug("Wrote OpenCode bundle to %s", output_root)


def write_codex_bundle(output_root: Path, bundle: CodexBundle) -> None:
    """Write a Codex bundle under ``output_root``/.codex."""
    codex_dir = Path(output_root) / ".codex"

    prompts_dir = codex_dir / "prompts"
    for prompt in bundle.prompts:
        _write_text(prompts_dir / f"{prompt.name}.md", prompt.content)

    skills_dir = codex_dir / "skills"
    for skill in bundle.skill_dirs:
        _copy_skill(skill.source_dir, skills_dir, skill.name)

    for generated in bundle.generated_skills:
        _write_text(skills_dir / generated.name / "SKILL.md", generated.content)

    config = render_codex_config(bundle.mcp_servers)
    if config:
        _write_text(codex_dir / "config.toml", config)

    logger.debug("Wrote Codex bundle to %s", output_root)


def render_codex_config(mcp_servers: dict | None) -> str:
    """Render MCP servers as Codex ``[mcp_servers.<name>]`` tables.

    Returns an empty string when there is nothing to write.
    """
    tables = {}
    for name, server in (mcp_servers or {}).items():
        if not isinstance(server, dict):
            continue
        entry = {}
        if server.get("command"):
            entry["command"] = server["command"]
            if server.get("args"):
                entry["args"] = list(server["args"])
            if server.get("env"):
                entry["env"] = dict(server["env"])
        elif server.get("url"):
            entry["url"] = server["url"]
            if server.get("headers"):
                entry["http_headers"] = dict(server["headers"])
        else:
            logger.debug("Skipping MCP server %s with no command or url", name)
            continue
        tables[name] = entry

    if not tables:
        return ""
    header = "# Generated by plugin-bridge\n\n"
    return header + toml.dumps({"mcp_servers": tables})


def _write_text(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def _copy_skill(source_dir: Path, skills_dir: Path, name: str) -> None:
    """Copy a skill directory to ``skills_dir/<slug>``, replacing an older copy.

    Skill names come straight from SKILL.md, so they are slugged and the
    target must stay inside ``skills_dir``.
    """
    target_dir = skills_dir / normalize_name(name)
    if target_dir.resolve().parent != skills_dir.resolve():
        raise ValueError(f"Skill {name!r} resolves outside {skills_dir}")
    if target_dir.exists():
        shutil.rmtree(target_dir)
    shutil.copytree(source_dir, target_dir)
