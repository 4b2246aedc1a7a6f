"""Tests for plugin parser."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from plugin_bridge.parser import (
    PluginManifest,
    parse_plugin,
)


class TestPluginManifest:
    def test_from_dict_minimal(self) -> None:
        data = {"name": "test", "version": "1.0.0", "description": "Test"}
        manifest = PluginManifest.from_dict(data)

        assert manifest.name == "test"
        assert manifest.version == "1.0.0"
        assert manifest.description == "Test"
        assert manifest.author is None
        assert manifest.keywords == []
        assert manifest.extra == {}

    def test_from_dict_keeps_unknown_keys(self) -> None:
        data = {"name": "test", "mcpServers": {"a": {"url": "https://x"}}}
        manifest = PluginManifest.from_dict(data)

        assert manifest.version == "0.0.0"
        assert manifest.extra == {"mcpServers": {"a": {"url": "https://x"}}}


class TestParsePlugin:
    def test_parse_valid_plugin(self, sample_plugin_dir: Path) -> None:
        plugin = parse_plugin(sample_plugin_dir)

        assert plugin.manifest.name == "sample-plugin"
        assert plugin.manifest.version == "1.0.0"
        assert len(plugin.skills) == 1
        assert len(plugin.agents) == 2
        assert len(plugin.commands) == 2

    def test_parse_nonexistent_path(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="not a directory"):
            parse_plugin(tmp_path / "nonexistent")

    def test_parse_missing_manifest(self, tmp_path: Path) -> None:
        plugin_dir = tmp_path / "no-manifest"
        plugin_dir.mkdir()

        with pytest.raises(ValueError, match="No plugin.json"):
            parse_plugin(plugin_dir)

    def test_command_fields(self, sample_plugin_dir: Path) -> None:
        plugin = parse_plugin(sample_plugin_dir)
        command = plugin.commands[0]

        assert command.name == "Command One"
        assert command.description == "d"
        assert command.argument_hint == "[x]"
        assert command.allowed_tools == ("Read", "Bash(git diff:*)")
        assert command.body.strip() == "do thing with security-reviewer"

    def test_nested_command_name_uses_colon(self, sample_plugin_dir: Path) -> None:
        plugin = parse_plugin(sample_plugin_dir)

        assert plugin.commands[1].name == "workflows:plan"

    def test_agent_fields(self, sample_plugin_dir: Path) -> None:
        plugin = parse_plugin(sample_plugin_dir)
        agent_one, reviewer = plugin.agents

        assert agent_one.name == "Agent One"
        assert agent_one.model == "claude-sonnet-4"
        assert agent_one.mode is None
        assert reviewer.capabilities == ("audit",)
        assert reviewer.description is None

    def test_agent_without_frontmatter_uses_stem(self, sample_plugin_dir: Path) -> None:
        (sample_plugin_dir / "agents" / "plain.md").write_text("Just instructions.")
        plugin = parse_plugin(sample_plugin_dir)

        plain = [agent for agent in plugin.agents if agent.name == "plain"]
        assert len(plain) == 1
        assert plain[0].body == "Just instructions."

    def test_hooks_and_mcp(self, sample_plugin_dir: Path) -> None:
        plugin = parse_plugin(sample_plugin_dir)

        assert plugin.has_hooks
        assert "PreToolUse" in plugin.hooks["hooks"]
        assert plugin.mcp_servers == {"github": {"command": "npx", "args": ["-y", "server-github"]}}

    def test_inline_mcp_servers_in_manifest(self, tmp_path: Path) -> None:
        plugin_dir = tmp_path / "inline"
        (plugin_dir / ".claude-plugin").mkdir(parents=True)
        manifest = {"name": "inline", "mcpServers": {"remote": {"url": "https://example.com/mcp"}}}
        (plugin_dir / ".claude-plugin" / "plugin.json").write_text(json.dumps(manifest))

        plugin = parse_plugin(plugin_dir)

        assert plugin.mcp_servers == {"remote": {"url": "https://example.com/mcp"}}
        assert not plugin.has_hooks
        assert not plugin.has_skills

    def test_summary(self, sample_plugin_dir: Path) -> None:
        summary = parse_plugin(sample_plugin_dir).summary()

        assert summary["name"] == "sample-plugin"
        assert summary["skills"] == 1
        assert summary["agents"] == 2
        assert summary["commands"] == 2
        assert summary["has_hooks"] is True
        assert summary["has_mcp"] is True
