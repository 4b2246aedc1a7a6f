"""Convert a parsed Claude plugin into a Codex bundle.

Codex output layout (written by ``installer.write_codex_bundle``):
    .codex/prompts/<name>.md          one per command
    .codex/skills/<name>/             copied skill directories
    .codex/skills/<name>/SKILL.md     one per agent, generated
    .codex/config.toml                MCP servers

Skill directories and generated skills share ``.codex/skills``, so agent
names are made unique against the skill names as well.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from plugin_bridge.frontmatter import format_frontmatter
from plugin_bridge.naming import normalize_name, unique_name
from plugin_bridge.parser import ClaudeAgent, ClaudeCommand, ClaudePlugin
from plugin_bridge.policy import ConversionOptions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CodexPrompt:
    name: str
    content: str


@dataclass(frozen=True)
class CodexSkillDir:
    name: str
    source_dir: Path


@dataclass(frozen=True)
class CodexGeneratedSkill:
    name: str
    content: str


@dataclass
class CodexBundle:
    """In-memory Codex output, ready for the writer."""

    prompts: list[CodexPrompt] = field(default_factory=list)
    skill_dirs: list[CodexSkillDir] = field(default_factory=list)
    generated_skills: list[CodexGeneratedSkill] = field(default_factory=list)
    mcp_servers: Optional[dict] = None


def convert_to_codex(plugin: ClaudePlugin, options: ConversionOptions) -> CodexBundle:
    """Map commands to prompts and agents to generated skills.

    Codex has no notion of agent mode, permissions or temperature, so
    ``options`` does not change the output.
    """
    prompt_names: set[str] = set()
    prompts = [convert_command(command, prompt_names) for command in plugin.commands]

    skill_dirs = [CodexSkillDir(name=skill.name, source_dir=skill.source_dir) for skill in plugin.skills]

    skill_names = {normalize_name(skill.name) for skill in skill_dirs}
    generated_skills = [convert_agent(agent, skill_names) for agent in plugin.agents]

    logger.debug(
        "Codex bundle for %s: %d prompts, %d skill dirs, %d generated skills",
        plugin.manifest.name,
        len(prompts),
        len(skill_dirs),
        len(generated_skills),
    )
    return CodexBundle(
        prompts=prompts,
        skill_dirs=skill_dirs,
        generated_skills=generated_skills,
        mcp_servers=plugin.mcp_servers,
    )


def convert_command(command: ClaudeCommand, used_names: set[str]) -> CodexPrompt:
    name = unique_name(normalize_name(command.name), used_names)
    frontmatter = {
        "description": command.description,
        "argument-hint": command.argument_hint,
    }
    return CodexPrompt(name=name, content=format_frontmatter(frontmatter, command.body))


def convert_agent(agent: ClaudeAgent, used_names: set[str]) -> CodexGeneratedSkill:
    name = unique_name(normalize_name(agent.name), used_names)
    frontmatter = {
        "name": name,
        "description": agent_description(agent),
    }
    return CodexGeneratedSkill(name=name, content=format_frontmatter(frontmatter, agent_body(agent)))


def agent_description(agent: ClaudeAgent) -> str:
    if agent.description is not None:
        return agent.description
    return f"Converted from Claude agent {agent.name}"


def agent_body(agent: ClaudeAgent) -> str:
    """Trimmed agent body, prefixed with a Capabilities section when present.

    Agents that end up with no text get a one-line placeholder.
    """
    body = agent.body.strip()
    if agent.capabilities:
        capabilities = "\n".join(f"- {capability}" for capability in agent.capabilities)
        body = f"## Capabilities\n{capabilities}\n\n{body}".strip()
    if not body:
        body = f"Instructions converted from the {agent.name} agent."
    return body
