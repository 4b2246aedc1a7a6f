"""Parse Claude Code plugin structure."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from plugin_bridge.frontmatter import parse_frontmatter

logger = logging.getLogger(__name__)


@dataclass
class PluginManifest:
    """Parsed plugin.json manifest."""

    name: str
    version: str
    description: str
    author: Optional[dict] = None
    homepage: Optional[str] = None
    repository: Optional[str] = None
    license: Optional[str] = None
    keywords: list[str] = field(default_factory=list)
    extra: dict = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> PluginManifest:
        """Create manifest from parsed JSON."""
        known = {
            "name",
            "version",
            "description",
            "author",
            "homepage",
            "repository",
            "license",
            "keywords",
        }
        return cls(
            name=data.get("name", "unknown"),
            version=data.get("version", "0.0.0"),
            description=data.get("description", ""),
            author=data.get("author"),
            homepage=data.get("homepage"),
            repository=data.get("repository"),
            license=data.get("license"),
            keywords=data.get("keywords", []),
            extra={key: value for key, value in data.items() if key not in known},
        )


@dataclass(frozen=True)
class ClaudeCommand:
    """A slash command: a prompt template with optional metadata."""

    name: str
    body: str
    description: Optional[str] = None
    argument_hint: Optional[str] = None
    model: Optional[str] = None
    allowed_tools: tuple[str, ...] = ()
    source_path: Optional[Path] = None


@dataclass(frozen=True)
class ClaudeAgent:
    """A subagent definition.

    ``mode`` and ``temperature`` are only set when the agent's frontmatter
    declares them explicitly.
    """

    name: str
    body: str
    description: Optional[str] = None
    capabilities: tuple[str, ...] = ()
    model: Optional[str] = None
    mode: Optional[str] = None
    temperature: Optional[float] = None
    tools: tuple[str, ...] = ()
    source_path: Optional[Path] = None


@dataclass(frozen=True)
class ClaudeSkill:
    """A skill directory, copied as-is by the writers."""

    name: str
    source_dir: Path
    description: Optional[str] = None


@dataclass
class ClaudePlugin:
    """Fully parsed Claude Code plugin."""

    root: Path
    manifest: PluginManifest
    commands: list[ClaudeCommand] = field(default_factory=list)
    agents: list[ClaudeAgent] = field(default_factory=list)
    skills: list[ClaudeSkill] = field(default_factory=list)
    hooks: Optional[dict] = None
    mcp_servers: Optional[dict] = None

    @property
    def has_skills(self) -> bool:
        return len(self.skills) > 0

    @property
    def has_agents(self) -> bool:
        return len(self.agents) > 0

    @property
    def has_commands(self) -> bool:
        return len(self.commands) > 0

    @property
    def has_hooks(self) -> bool:
        return bool(self.hooks and self.hooks.get("hooks"))

    @property
    def has_mcp(self) -> bool:
        return bool(self.mcp_servers)

    def summary(self) -> dict:
        """Return a summary of plugin components."""
        return {
            "name": self.manifest.name,
            "version": self.manifest.version,
            "skills": len(self.skills),
            "agents": len(self.agents),
            "commands": len(self.commands),
            "has_hooks": self.has_hooks,
            "has_mcp": self.has_mcp,
        }


def parse_plugin(plugin_path: Path) -> ClaudePlugin:
    """Parse a Claude Code plugin directory.

    Args:
        plugin_path: Path to the plugin root directory

    Returns:
        ClaudePlugin with all discovered components loaded

    Raises:
        ValueError: If plugin structure is invalid
    """
    plugin_path = Path(plugin_path).resolve()

    if not plugin_path.is_dir():
        raise ValueError(f"Plugin path is not a directory: {plugin_path}")

    manifest = _parse_manifest(plugin_path)

    plugin = ClaudePlugin(
        root=plugin_path,
        manifest=manifest,
        commands=_load_commands(plugin_path),
        agents=_load_agents(plugin_path),
        skills=_load_skills(plugin_path),
        hooks=_load_hooks(plugin_path, manifest),
        mcp_servers=_load_mcp_servers(plugin_path, manifest),
    )
    logger.debug("Parsed plugin %s: %s", manifest.name, plugin.summary())
    return plugin


def find_manifest(plugin_path: Path) -> Optional[Path]:
    """Locate plugin.json, preferring the .claude-plugin directory."""
    for candidate in (plugin_path / ".claude-plugin" / "plugin.json", plugin_path / "plugin.json"):
        if candidate.exists():
            return candidate
    return None


def _parse_manifest(plugin_path: Path) -> PluginManifest:
    """Parse the plugin.json manifest."""
    manifest_path = find_manifest(plugin_path)

    if manifest_path is None:
        raise ValueError(f"No plugin.json found in {plugin_path}")

    with open(manifest_path) as f:
        data = json.load(f)

    return PluginManifest.from_dict(data)


def _load_commands(plugin_path: Path) -> list[ClaudeCommand]:
    """Load commands/**/*.md; nested directories become ``ns:name`` command names."""
    commands_dir = plugin_path / "commands"
    if not commands_dir.exists():
        return []

    commands = []
    for path in sorted(commands_dir.rglob("*.md")):
        data, body = parse_frontmatter(path.read_text(encoding="utf-8"))
        default_name = ":".join(path.relative_to(commands_dir).with_suffix("").parts)
        commands.append(
            ClaudeCommand(
                name=_as_text(data.get("name")) or default_name,
                body=body,
                description=_as_text(data.get("description")),
                argument_hint=_as_text(data.get("argument-hint")),
                model=_as_text(data.get("model")),
                allowed_tools=_as_list(data.get("allowed-tools")),
                source_path=path,
            )
        )

    return commands


def _load_agents(plugin_path: Path) -> list[ClaudeAgent]:
    """Load agents/**/*.md."""
    agents_dir = plugin_path / "agents"
    if not agents_dir.exists():
        return []

    agents = []
    for path in sorted(agents_dir.rglob("*.md")):
        data, body = parse_frontmatter(path.read_text(encoding="utf-8"))
        agents.append(
            ClaudeAgent(
                name=_as_text(data.get("name")) or path.stem,
                body=body,
                description=_as_text(data.get("description")),
                capabilities=_as_list(data.get("capabilities")),
                model=_as_text(data.get("model")),
                mode=_as_text(data.get("mode")),
                temperature=_as_float(data.get("temperature")),
                tools=_as_list(data.get("tools")),
                source_path=path,
            )
        )

    return agents


def _load_skills(plugin_path: Path) -> list[ClaudeSkill]:
    """Find all SKILL.md files in skills/ directory."""
    skills_dir = plugin_path / "skills"
    if not skills_dir.exists():
        return []

    skills = []
    for skill_dir in sorted(skills_dir.iterdir()):
        if not skill_dir.is_dir():
            continue
        skill_file = skill_dir / "SKILL.md"
        if not skill_file.exists():
            continue
        data, _ = parse_frontmatter(skill_file.read_text(encoding="utf-8"))
        skills.append(
            ClaudeSkill(
                name=_as_text(data.get("name")) or skill_dir.name,
                source_dir=skill_dir,
                description=_as_text(data.get("description")),
            )
        )

    return skills


def _load_hooks(plugin_path: Path, manifest: PluginManifest) -> Optional[dict]:
    """Load hooks/hooks.json, falling back to an inline ``hooks`` manifest entry."""
    hooks = _load_json_config(plugin_path / "hooks" / "hooks.json")
    if hooks is None:
        inline = manifest.extra.get("hooks")
        hooks = inline if isinstance(inline, dict) else None

    if hooks is None:
        return None

    # hooks.json may hold the event map directly or under a "hooks" key
    if "hooks" not in hooks:
        hooks = {"hooks": hooks}
    return hooks


def _load_mcp_servers(plugin_path: Path, manifest: PluginManifest) -> Optional[dict]:
    """Load .mcp.json, falling back to an inline ``mcpServers`` manifest entry."""
    config = _load_json_config(plugin_path / ".mcp.json")
    if config is not None:
        servers = config.get("mcpServers", config)
        return servers or None

    inline = manifest.extra.get("mcpServers")
    if isinstance(inline, dict) and inline:
        return inline
    return None


def _load_json_config(path: Path) -> Optional[dict]:
    """Load a JSON config file if it exists."""
    if not path.exists():
        return None

    with open(path) as f:
        return json.load(f)


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def _as_list(value: Any) -> tuple[str, ...]:
    """Accept a YAML list or a comma-separated string."""
    if value is None:
        return ()
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, (list, tuple)):
        items = [str(item) for item in value]
    else:
        items = [str(value)]
    return tuple(item.strip() for item in items if item.strip())


def _as_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.debug("Ignoring non-numeric temperature %r", value)
        return None
