"""Claude Code plugin conversion.

This package converts Claude Code plugins (commands, agents, skills, hooks
and MCP servers) into the equivalent OpenCode and Codex layouts.
"""

from plugin_bridge.parser import ClaudePlugin, PluginManifest, parse_plugin
from plugin_bridge.policy import ConversionOptions
from plugin_bridge.codex import CodexBundle, convert_to_codex
from plugin_bridge.opencode import OpenCodeBundle, convert_to_opencode
from plugin_bridge.registry import TARGETS, get_target, require_target
from plugin_bridge.installer import install_plugin, InstallResult

__version__ = "0.1.0"

__all__ = [
    "ClaudePlugin",
    "PluginManifest",
    "parse_plugin",
    "ConversionOptions",
    "CodexBundle",
    "convert_to_codex",
    "OpenCodeBundle",
    "convert_to_opencode",
    "TARGETS",
    "get_target",
    "require_target",
    "install_plugin",
    "InstallResult",
]
