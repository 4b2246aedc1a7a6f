"""Tests for translator module."""

from __future__ import annotations

from plugin_bridge.translator import translate_hooks, translate_mcp_servers


class TestTranslateHooks:
    def test_session_start_hook(self) -> None:
        hooks_config = {
            "hooks": {
                "SessionStart": [
                    {
                        "matcher": "startup|resume",
                        "hooks": [{"type": "command", "command": "./hooks/start.sh"}],
                    }
                ]
            }
        }

        result = translate_hooks(hooks_config)

        assert result.startswith('import type { Plugin } from "@opencode-ai/plugin"')
        assert '"session.created": async (input) => {\n      await $`./hooks/start.sh`\n    }' in result
        # session events never filter on tool names
        assert "input.tool" not in result
        assert result.endswith("export default ConvertedHooks\n")

    def test_wildcard_matcher_runs_unconditionally(self) -> None:
        hooks_config = {
            "hooks": {"PostToolUse": [{"matcher": "*", "hooks": [{"type": "command", "command": "echo done"}]}]}
        }

        result = translate_hooks(hooks_config)

        assert "      await $`echo done`" in result
        assert "input.tool" not in result

    def test_failure_hook_is_guarded(self) -> None:
        hooks_config = {
            "hooks": {
                "PostToolUseFailure": [
                    {"matcher": "Bash", "hooks": [{"type": "command", "command": "notify", "timeout": 5}]}
                ]
            }
        }

        result = translate_hooks(hooks_config)

        assert "      // Claude PostToolUseFailure mapped to tool.execute.after with error guard" in result
        assert '      if (input?.error) {\n        if (input.tool === "bash") { await $`notify` }' in result
        assert "// timeout: 5s (not enforced)" in result

    def test_shared_event_gets_one_handler(self) -> None:
        hooks_config = {
            "hooks": {
                "PostToolUse": [{"matcher": "Write", "hooks": [{"type": "command", "command": "npm run fmt"}]}],
                "PostToolUseFailure": [
                    {"matcher": "Bash", "hooks": [{"type": "command", "command": "notify fail"}]}
                ],
            }
        }

        result = translate_hooks(hooks_config)

        assert result.count('"tool.execute.after"') == 1
        assert (
            '    "tool.execute.after": async (input) => {\n'
            '      if (input.tool === "write") { await $`npm run fmt` }\n'
            "      // Claude PostToolUseFailure mapped to tool.execute.after with error guard\n"
            "      if (input?.error) {\n"
            '        if (input.tool === "bash") { await $`notify fail` }\n'
            "      }\n"
            "    }"
        ) in result

    def test_message_events_are_merged(self) -> None:
        hooks_config = {
            "hooks": {
                "UserPromptSubmit": [{"hooks": [{"type": "command", "command": "on-prompt"}]}],
                "Notification": [{"hooks": [{"type": "command", "command": "on-notify"}]}],
                "SubagentStop": [{"hooks": [{"type": "command", "command": "on-stop"}]}],
            }
        }

        result = translate_hooks(hooks_config)

        assert result.count('"message.updated"') == 1
        assert result.count('"message.created"') == 1
        updated = result.split('"message.updated"')[1]
        assert updated.index("on-prompt") < updated.index("on-notify") < updated.index("on-stop")

    def test_matcher_tools_use_opencode_names(self) -> None:
        hooks_config = {
            "hooks": {
                "PreToolUse": [
                    {"matcher": "LS|MultiEdit|Edit|WebSearch", "hooks": [{"type": "command", "command": "check"}]}
                ]
            }
        }

        result = translate_hooks(hooks_config)

        assert (
            'if (input.tool === "list" || input.tool === "edit" || input.tool === "webfetch") { await $`check` }'
        ) in result

    def test_one_claude_event_to_many(self) -> None:
        hooks_config = {
            "hooks": {"UserPromptSubmit": [{"matcher": "", "hooks": [{"type": "prompt", "prompt": "Check\nthis"}]}]}
        }

        result = translate_hooks(hooks_config)

        assert '"message.created"' in result
        assert '"message.updated"' in result
        assert "// Prompt hook for *: Check this" in result

    def test_unmapped_events_listed(self) -> None:
        hooks_config = {
            "hooks": {
                "MadeUpEvent": [{"matcher": "", "hooks": [{"type": "command", "command": "x"}]}],
                "Stop": [{"matcher": "", "hooks": [{"type": "agent", "agent": "closer"}]}],
            }
        }

        result = translate_hooks(hooks_config)

        assert result.startswith("// Unmapped Claude hook events: MadeUpEvent\n")
        assert '"session.idle"' in result
        assert "// Agent hook for *: closer" in result

    def test_command_is_escaped_for_template_literal(self) -> None:
        hooks_config = {
            "hooks": {
                "Stop": [
                    {"hooks": [{"type": "command", "command": "${CLAUDE_PLUGIN_ROOT}/hooks/stop.sh `date`"}]}
                ]
            }
        }

        result = translate_hooks(hooks_config)

        assert "await $`\\${CLAUDE_PLUGIN_ROOT}/hooks/stop.sh \\`date\\``" in result

    def test_empty_hooks(self) -> None:
        result = translate_hooks({})

        assert "ConvertedHooks" in result
        assert "Unmapped" not in result


class TestTranslateMcpServers:
    def test_local_and_remote(self) -> None:
        servers = {
            "fs": {"command": "npx", "args": ["srv"]},
            "api": {"url": "https://example.com"},
        }

        assert translate_mcp_servers(servers) == {
            "fs": {"type": "local", "command": ["npx", "srv"], "enabled": True},
            "api": {"type": "remote", "url": "https://example.com", "enabled": True},
        }

    def test_skips_unusable_entries(self) -> None:
        assert translate_mcp_servers({"bad": {}, "worse": "nope"}) == {}
