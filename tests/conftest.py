"""Shared fixtures for tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest


def create_test_plugin(tmp_path: Path) -> Path:
    """Create a small plugin covering every component type."""
    plugin_dir = tmp_path / "sample-plugin"
    plugin_dir.mkdir()

    manifest_dir = plugin_dir / ".claude-plugin"
    manifest_dir.mkdir()
    manifest = {
        "name": "sample-plugin",
        "version": "1.0.0",
        "description": "A sample plugin",
    }
    (manifest_dir / "plugin.json").write_text(json.dumps(manifest))

    commands_dir = plugin_dir / "commands"
    (commands_dir / "workflows").mkdir(parents=True)
    (commands_dir / "command-one.md").write_text(
        "---\n"
        "name: Command One\n"
        "description: d\n"
        'argument-hint: "[x]"\n'
        "allowed-tools: Read, Bash(git diff:*)\n"
        "---\n\n"
        "do thing with security-reviewer\n"
    )
    (commands_dir / "workflows" / "plan.md").write_text("---\ndescription: Plan work\n---\n\nMake a plan.\n")

    agents_dir = plugin_dir / "agents"
    agents_dir.mkdir()
    (agents_dir / "agent-one.md").write_text(
        "---\nname: Agent One\ndescription: Brainstorm ideas\nmodel: claude-sonnet-4\n---\n\nYou brainstorm.\n"
    )
    (agents_dir / "security-reviewer.md").write_text(
        "---\n"
        "name: Security Reviewer\n"
        "capabilities:\n"
        "  - audit\n"
        "---\n\n"
        "Review code.\n"
    )

    skill_dir = plugin_dir / "skills" / "skill-one"
    skill_dir.mkdir(parents=True)
    (skill_dir / "SKILL.md").write_text("---\nname: skill-one\ndescription: A skill\n---\n\n# Skill One\n")

    hooks_dir = plugin_dir / "hooks"
    hooks_dir.mkdir()
    hooks = {
        "hooks": {
            "PreToolUse": [
                {
                    "matcher": "Write|Edit",
                    "hooks": [{"type": "command", "command": "npm run lint"}],
                }
            ]
        }
    }
    (hooks_dir / "hooks.json").write_text(json.dumps(hooks))

    mcp = {"mcpServers": {"github": {"command": "npx", "args": ["-y", "server-github"]}}}
    (plugin_dir / ".mcp.json").write_text(json.dumps(mcp))

    return plugin_dir


@pytest.fixture
def sample_plugin_dir(tmp_path: Path) -> Path:
    return create_test_plugin(tmp_path)
