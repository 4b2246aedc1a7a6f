"""Convert a parsed Claude plugin into an OpenCode bundle.

Output structure (written by ``installer.write_opencode_bundle``):
- opencode.json (commands, MCP servers, permissions)
- .opencode/agents/*.md (agents with frontmatter: mode, tools, permission)
- .opencode/plugins/converted-hooks.ts
- .opencode/skills/<skill-name>/

Reference: https://opencode.ai/docs/config/
           https://opencode.ai/docs/agents/
           https://opencode.ai/docs/plugins/
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Sequence

from plugin_bridge.codex import agent_body, agent_description
from plugin_bridge.frontmatter import format_frontmatter
from plugin_bridge.naming import normalize_name, unique_name
from plugin_bridge.parser import ClaudeAgent, ClaudeCommand, ClaudePlugin
from plugin_bridge.policy import (
    ConversionOptions,
    agent_tool_specs,
    normalize_model,
    resolve_agent_mode,
    resolve_permissions,
    resolve_temperature,
)
from plugin_bridge.translator import HOOKS_PLUGIN_NAME, translate_hooks, translate_mcp_servers

logger = logging.getLogger(__name__)

CONFIG_SCHEMA = "https://opencode.ai/config.json"


@dataclass(frozen=True)
class OpenCodeAgentFile:
    name: str
    content: str


@dataclass(frozen=True)
class OpenCodePluginFile:
    name: str
    content: str


@dataclass(frozen=True)
class OpenCodeSkillDir:
    name: str
    source_dir: Path


@dataclass
class OpenCodeBundle:
    """In-memory OpenCode output, ready for the writer."""

    config: dict = field(default_factory=dict)
    agents: list[OpenCodeAgentFile] = field(default_factory=list)
    plugins: list[OpenCodePluginFile] = field(default_factory=list)
    skill_dirs: list[OpenCodeSkillDir] = field(default_factory=list)


def convert_to_opencode(plugin: ClaudePlugin, options: ConversionOptions) -> OpenCodeBundle:
    """Map commands into opencode.json, agents into agent files and hooks into a plugin.

    Agent names are unique among agents only; skills live in their own
    directory and never collide with them.
    """
    agent_names: set[str] = set()
    agents = [convert_agent(agent, plugin.commands, options, agent_names) for agent in plugin.agents]

    plugins = []
    if plugin.has_hooks:
        plugins.append(OpenCodePluginFile(name=HOOKS_PLUGIN_NAME, content=translate_hooks(plugin.hooks)))

    skill_dirs = [OpenCodeSkillDir(name=skill.name, source_dir=skill.source_dir) for skill in plugin.skills]

    logger.debug(
        "OpenCode bundle for %s: %d agents, %d plugins, %d skill dirs",
        plugin.manifest.name,
        len(agents),
        len(plugins),
        len(skill_dirs),
    )
    return OpenCodeBundle(
        config=build_config(plugin, options),
        agents=agents,
        plugins=plugins,
        skill_dirs=skill_dirs,
    )


def build_config(plugin: ClaudePlugin, options: ConversionOptions) -> dict:
    """Assemble opencode.json, leaving out empty sections."""
    config: dict[str, Any] = {"$schema": CONFIG_SCHEMA}

    commands = convert_commands(plugin.commands)
    if commands:
        config["command"] = commands

    mcp = translate_mcp_servers(plugin.mcp_servers or {})
    if mcp:
        config["mcp"] = mcp

    tool_specs = [spec for command in plugin.commands for spec in command.allowed_tools]
    policy = resolve_permissions(options.permissions, tool_specs)
    if policy is not None:
        config["permission"] = policy.permission
        config["tools"] = policy.tools

    return config


def convert_commands(commands: Sequence[ClaudeCommand]) -> dict:
    used_names: set[str] = set()
    result = {}
    for command in commands:
        name = unique_name(normalize_name(command.name), used_names)
        entry: dict[str, Any] = {"template": command.body.strip()}
        if command.description:
            entry = {"description": command.description, **entry}
        model = normalize_model(command.model)
        if model:
            entry["model"] = model
        result[name] = entry
    return result


def convert_agent(
    agent: ClaudeAgent,
    commands: Sequence[ClaudeCommand],
    options: ConversionOptions,
    used_names: set[str],
) -> OpenCodeAgentFile:
    name = unique_name(normalize_name(agent.name), used_names)
    frontmatter: dict[str, Any] = {
        "description": agent_description(agent),
        "mode": resolve_agent_mode(agent, options),
        "model": normalize_model(agent.model),
        "temperature": resolve_temperature(agent, options),
    }

    policy = resolve_permissions(options.permissions, agent_tool_specs(agent, commands))
    if policy is not None:
        frontmatter["tools"] = policy.tools
        frontmatter["permission"] = policy.permission

    return OpenCodeAgentFile(name=name, content=format_frontmatter(frontmatter, agent_body(agent)))
