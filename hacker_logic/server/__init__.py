"""
Hacker Logic MCP server package.

This package provides the companion process spawned by the editor host:
a Model Context Protocol server over stdio exposing time, arithmetic,
workspace file, system, git and process tools.
"""

from .mcp_server import ModularMCPServer
from .registry.tool_registry import ToolRegistry, create_default_handlers
from .security.security_manager import SecurityManager
from .config.config_manager import ConfigManager, ServerConfig, config_manager
from .core.interfaces import BaseToolHandler
from .core.models import ToolResult, ToolDefinition

__all__ = [
    "ModularMCPServer",
    "ToolRegistry",
    "create_default_handlers",
    "SecurityManager",
    "ConfigManager",
    "ServerConfig",
    "config_manager",
    "BaseToolHandler",
    "ToolResult",
    "ToolDefinition",
]
