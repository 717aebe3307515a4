"""
Configuration package for the Hacker Logic MCP server.
"""

from .config_manager import (
    ConfigManager,
    ServerConfig,
    SecurityConfig,
    MCPConfig,
    GitHubConfig,
    config_manager,
)

__all__ = [
    "ConfigManager",
    "ServerConfig",
    "SecurityConfig",
    "MCPConfig",
    "GitHubConfig",
    "config_manager",
]
