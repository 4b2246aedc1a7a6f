"""Translate Claude Code hooks and MCP servers to OpenCode formats."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from plugin_bridge.policy import TOOL_MAP

HOOKS_PLUGIN_NAME = "converted-hooks.ts"


@dataclass(frozen=True)
class HookEventMapping:
    """How one Claude hook event is expressed as OpenCode plugin events."""

    events: tuple[str, ...]
    kind: str
    require_error: bool = False
    note: Optional[str] = None

    @property
    def matches_tools(self) -> bool:
        return self.kind in ("tool", "permission")


HOOK_EVENT_MAP = {
    "PreToolUse": HookEventMapping(("tool.execute.before",), "tool"),
    "PostToolUse": HookEventMapping(("tool.execute.after",), "tool"),
    "PostToolUseFailure": HookEventMapping(
        ("tool.execute.after",),
        "tool",
        require_error=True,
        note="Claude PostToolUseFailure mapped to tool.execute.after with error guard",
    ),
    "SessionStart": HookEventMapping(("session.created",), "session"),
    "SessionEnd": HookEventMapping(("session.deleted",), "session"),
    "Stop": HookEventMapping(("session.idle",), "session"),
    "PreCompact": HookEventMapping(("experimental.session.compacting",), "session"),
    "PermissionRequest": HookEventMapping(
        ("permission.requested", "permission.replied"),
        "permission",
        note="Claude PermissionRequest may differ from OpenCode permission events",
    ),
    "UserPromptSubmit": HookEventMapping(
        ("message.created", "message.updated"),
        "message",
        note="Claude UserPromptSubmit approximated with message events",
    ),
    "Notification": HookEventMapping(
        ("message.updated",),
        "message",
        note="Claude Notification approximated with message updates",
    ),
    "Setup": HookEventMapping(
        ("session.created",),
        "session",
        note="Claude Setup approximated with session start",
    ),
    "SubagentStart": HookEventMapping(
        ("message.updated",),
        "message",
        note="Claude SubagentStart approximated with message updates",
    ),
    "SubagentStop": HookEventMapping(
        ("message.updated",),
        "message",
        note="Claude SubagentStop approximated with message updates",
    ),
}


def translate_hooks(hooks_config: dict) -> str:
    """Convert Claude Code hooks.json to an OpenCode plugin script.

    Claude Code format:
        {
          "hooks": {
            "PreToolUse": [{
              "matcher": "Write|Edit",
              "hooks": [{"type": "command", "command": "npm run lint"}]
            }]
          }
        }

    OpenCode format:
        export const ConvertedHooks: Plugin = async ({ $ }) => {
          return {
            "tool.execute.before": async (input) => {
              if (input.tool === "write" || input.tool === "edit") { await $`npm run lint` }
            }
          }
        }

    Claude events sharing an OpenCode event are rendered into one handler,
    in source order. Events with no OpenCode counterpart are listed in a
    leading comment.

    Args:
        hooks_config: Parsed hooks.json content

    Returns:
        TypeScript source of the plugin
    """
    handler_lines: dict[str, list[str]] = {}
    unmapped = []

    for cc_event, matchers in hooks_config.get("hooks", {}).items():
        mapping = HOOK_EVENT_MAP.get(cc_event)
        if mapping is None:
            unmapped.append(cc_event)
            continue
        if not isinstance(matchers, list) or not matchers:
            continue
        lines = _render_section(matchers, mapping)
        if not lines:
            continue
        for event in mapping.events:
            handler_lines.setdefault(event, []).extend(lines)

    header = f"// Unmapped Claude hook events: {', '.join(unmapped)}\n" if unmapped else ""
    handlers = ",\n".join(_render_handler(event, lines) for event, lines in handler_lines.items())
    return (
        f"{header}"
        'import type { Plugin } from "@opencode-ai/plugin"\n'
        "\n"
        "export const ConvertedHooks: Plugin = async ({ $ }) => {\n"
        "  return {\n"
        f"{handlers}\n"
        "  }\n"
        "}\n"
        "\n"
        "export default ConvertedHooks\n"
    )


def translate_mcp_servers(servers: dict) -> dict:
    """Convert Claude ``mcpServers`` entries to OpenCode ``mcp`` entries.

    Local servers get their command and args folded into one list; remote
    servers keep url and headers. Entries with neither are dropped.
    """
    result = {}
    for name, server in servers.items():
        if not isinstance(server, dict):
            continue
        if server.get("command"):
            entry = {
                "type": "local",
                "command": [server["command"], *server.get("args", [])],
            }
            if server.get("env"):
                entry["environment"] = server["env"]
            entry["enabled"] = True
            result[name] = entry
        elif server.get("url"):
            entry = {"type": "remote", "url": server["url"]}
            if server.get("headers"):
                entry["headers"] = server["headers"]
            entry["enabled"] = True
            result[name] = entry
    return result


def _render_handler(event: str, lines: list[str]) -> str:
    body = "\n".join(lines)
    return f'    "{event}": async (input) => {{\n{body}\n    }}'


def _render_section(matchers: list, mapping: HookEventMapping) -> list[str]:
    """Render one Claude event's statements as indented handler lines."""
    statements = []
    for matcher in matchers:
        statements.extend(_render_statements(matcher, mapping.matches_tools))
    if not statements:
        return []

    lines = [f"      // {mapping.note}"] if mapping.note else []
    if mapping.require_error:
        lines.append("      if (input?.error) {")
        lines.extend(f"        {statement}" for statement in statements)
        lines.append("      }")
    else:
        lines.extend(f"      {statement}" for statement in statements)
    return lines


def _render_statements(matcher: dict, use_tool_matcher: bool) -> list[str]:
    if not isinstance(matcher, dict):
        return []
    hooks = matcher.get("hooks") or []
    if not isinstance(hooks, list) or not hooks:
        return []

    pattern = str(matcher.get("matcher", "") or "")
    tools = []
    for raw in pattern.split("|"):
        name = raw.strip().lower()
        if not name:
            continue
        tool = TOOL_MAP.get(name, name)
        if tool not in tools:
            tools.append(tool)
    condition = None
    if use_tool_matcher and tools and "*" not in tools:
        condition = " || ".join(f'input.tool === "{tool}"' for tool in tools)

    statements = []
    for hook in hooks:
        if not isinstance(hook, dict):
            continue
        hook_type = hook.get("type")
        if hook_type == "command":
            command = _escape_template(hook.get("command", ""))
            if condition:
                statements.append(f"if ({condition}) {{ await $`{command}` }}")
            else:
                statements.append(f"await $`{command}`")
            if hook.get("timeout"):
                statements.append(f"// timeout: {hook['timeout']}s (not enforced)")
        elif hook_type == "prompt":
            prompt = str(hook.get("prompt", "")).replace("\n", " ")
            statements.append(f"// Prompt hook for {pattern or '*'}: {prompt}")
        else:
            statements.append(f"// Agent hook for {pattern or '*'}: {hook.get('agent', '')}")
    return statements


def _escape_template(command: str) -> str:
    """Escape a shell command for a JS template literal.

    ``${VAR}`` stays literal so the shell expands it, not JavaScript.
    """
    return command.replace("\\", "\\\\").replace("`", "\\`").replace("${", "\\${")
