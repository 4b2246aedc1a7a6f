"""Conversion options and the rules that map them onto target fields.

Everything here is a pure function of its arguments: permission scopes,
agent execution mode, sampling temperature and model names.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence, Union

from plugin_bridge.naming import normalize_name
from plugin_bridge.parser import ClaudeAgent, ClaudeCommand

PERMISSION_NONE = "none"
PERMISSION_BROAD = "broad"
PERMISSION_FROM_COMMANDS = "from-commands"
PERMISSION_MODES = (PERMISSION_NONE, PERMISSION_BROAD, PERMISSION_FROM_COMMANDS)

AGENT_MODE_PRIMARY = "primary"
AGENT_MODE_SUBAGENT = "subagent"
AGENT_MODES = (AGENT_MODE_PRIMARY, AGENT_MODE_SUBAGENT)

# Target tool names, in the order they are emitted.
SOURCE_TOOLS = (
    "read",
    "write",
    "edit",
    "bash",
    "grep",
    "glob",
    "list",
    "webfetch",
    "skill",
    "patch",
    "task",
    "question",
    "todowrite",
    "todoread",
)

# Claude tool name (lowercased) -> target tool name
TOOL_MAP = {
    "bash": "bash",
    "read": "read",
    "write": "write",
    "edit": "edit",
    "multiedit": "edit",
    "notebookedit": "edit",
    "grep": "grep",
    "glob": "glob",
    "ls": "list",
    "list": "list",
    "webfetch": "webfetch",
    "websearch": "webfetch",
    "skill": "skill",
    "patch": "patch",
    "task": "task",
    "askuserquestion": "question",
    "question": "question",
    "todowrite": "todowrite",
    "todoread": "todoread",
}

PermissionRule = Union[str, dict]


@dataclass(frozen=True)
class ConversionOptions:
    """Options shared by every target converter."""

    permissions: str = PERMISSION_BROAD
    agent_mode: str = AGENT_MODE_SUBAGENT
    infer_temperature: bool = True

    @classmethod
    def from_dict(cls, data: dict) -> ConversionOptions:
        """Build options from loose key/value input, validating enum values.

        Raises:
            ValueError: If the permission or agent mode is not recognised
        """
        permissions = str(data.get("permissions", PERMISSION_BROAD))
        if permissions not in PERMISSION_MODES:
            raise ValueError(f"Unknown permissions mode: {permissions}")

        agent_mode = str(data.get("agent_mode", data.get("agentMode", AGENT_MODE_SUBAGENT)))
        if agent_mode not in AGENT_MODES:
            raise ValueError(f"Unknown agent mode: {agent_mode}")

        infer = data.get("infer_temperature", data.get("inferTemperature", True))
        return cls(permissions=permissions, agent_mode=agent_mode, infer_temperature=bool(infer))


@dataclass(frozen=True)
class ToolPolicy:
    """Declared tool switches and permission rules, keyed in SOURCE_TOOLS order."""

    tools: dict[str, bool] = field(default_factory=dict)
    permission: dict[str, PermissionRule] = field(default_factory=dict)


def parse_tool_spec(raw: str) -> tuple[Optional[str], Optional[str]]:
    """Split a Claude tool spec such as ``Bash(git diff:*)`` into (tool, pattern).

    The tool is None when the name has no target equivalent.
    """
    trimmed = raw.strip()
    if not trimmed:
        return None, None

    name_part, _, rest = trimmed.partition("(")
    tool = TOOL_MAP.get(name_part.strip().lower())
    if not rest:
        return tool, None

    pattern = rest.rstrip().removesuffix(")").strip()
    if not pattern:
        return tool, None
    return tool, _normalize_pattern(tool, pattern)


def resolve_permissions(mode: str, tool_specs: Iterable[str]) -> Optional[ToolPolicy]:
    """Compute the tool policy for a permission mode.

    ``none`` declares nothing, ``broad`` enables and allows every tool, and
    ``from-commands`` enables only the tools named in ``tool_specs``. Tools
    referenced with a pattern get a ``{"*": "deny", pattern: "allow"}`` rule.
    """
    if mode == PERMISSION_NONE:
        return None

    if mode == PERMISSION_BROAD:
        return ToolPolicy(
            tools={tool: True for tool in SOURCE_TOOLS},
            permission={tool: "allow" for tool in SOURCE_TOOLS},
        )

    enabled: set[str] = set()
    patterns: dict[str, set[str]] = {}
    for spec in tool_specs:
        tool, pattern = parse_tool_spec(spec)
        if tool is None:
            continue
        enabled.add(tool)
        if pattern:
            patterns.setdefault(tool, set()).add(pattern)

    # write and edit are one capability on the target side
    if "write" in enabled or "edit" in enabled:
        enabled.update(("write", "edit"))
        merged = patterns.get("write", set()) | patterns.get("edit", set())
        if merged:
            patterns["write"] = merged
            patterns["edit"] = merged

    permission: dict[str, PermissionRule] = {}
    for tool in SOURCE_TOOLS:
        if patterns.get(tool):
            permission[tool] = _pattern_rule(patterns[tool])
        else:
            permission[tool] = "allow" if tool in enabled else "deny"

    return ToolPolicy(
        tools={tool: tool in enabled for tool in SOURCE_TOOLS},
        permission=permission,
    )


def agent_tool_specs(agent: ClaudeAgent, commands: Sequence[ClaudeCommand]) -> list[str]:
    """Collect the tool specs an agent is scoped to, sorted and de-duplicated.

    Sources are the agent's own ``tools``, capabilities that name a known
    tool, and the ``allowed_tools`` of commands whose body mentions the agent.
    """
    specs = set(agent.tools)

    for capability in agent.capabilities:
        tool, _ = parse_tool_spec(capability)
        if tool is not None:
            specs.add(capability.strip())

    references = {agent.name.strip().lower(), normalize_name(agent.name)}
    references.discard("")
    for command in commands:
        body = command.body.lower()
        if any(_mentions(body, reference) for reference in references):
            specs.update(command.allowed_tools)

    return sorted(spec for spec in specs if spec.strip())


def resolve_agent_mode(agent: ClaudeAgent, options: ConversionOptions) -> str:
    """Use the agent's own mode hint when valid, else the configured default."""
    if agent.mode:
        hint = agent.mode.strip().lower()
        if hint in AGENT_MODES:
            return hint
    return options.agent_mode


# First matching cue wins; anything else gets DEFAULT_TEMPERATURE.
TEMPERATURE_CUES = (
    (re.compile(r"review|audit|security|sentinel|oracle|lint|verification|guardian"), 0.1),
    (re.compile(r"plan|planning|architecture|strategist|analysis|research"), 0.2),
    (re.compile(r"doc|readme|changelog|editor|writer"), 0.3),
    (re.compile(r"brainstorm|creative|ideate|design|concept"), 0.6),
)
DEFAULT_TEMPERATURE = 0.3


def infer_temperature(agent: ClaudeAgent) -> float:
    """Guess a sampling temperature from lexical cues in name and description."""
    sample = f"{agent.name} {agent.description or ''}".lower()
    for pattern, temperature in TEMPERATURE_CUES:
        if pattern.search(sample):
            return temperature
    return DEFAULT_TEMPERATURE


def resolve_temperature(agent: ClaudeAgent, options: ConversionOptions) -> Optional[float]:
    if agent.temperature is not None:
        return agent.temperature
    if options.infer_temperature:
        return infer_temperature(agent)
    return None


def normalize_model(model: Optional[str]) -> Optional[str]:
    """Qualify a Claude model name with its provider prefix.

    ``inherit`` and missing models return None so the field is omitted.
    """
    if not model or model.strip() == "inherit":
        return None
    model = model.strip()
    if "/" in model:
        return model
    if model.startswith("claude-"):
        return f"anthropic/{model}"
    if model.startswith(("gpt-", "o1-", "o3-")):
        return f"openai/{model}"
    if model.startswith("gemini-"):
        return f"google/{model}"
    return f"anthropic/{model}"


def _normalize_pattern(tool: Optional[str], pattern: str) -> str:
    # Claude writes "git diff:*", the target expects "git diff *"
    if tool == "bash":
        return pattern.replace(":", " ").strip()
    return pattern


def _pattern_rule(patterns: set[str]) -> dict[str, str]:
    rule = {"*": "deny"}
    for pattern in sorted(patterns):
        rule[pattern] = "allow"
    return rule


def _mentions(body: str, reference: str) -> bool:
    return re.search(rf"(?<![\w-]){re.escape(reference)}(?![\w-])", body) is not None
