"""
Security package for the Hacker Logic MCP server.

This package provides the workspace sandbox and input sanitization used by
the tool handlers.
"""

from .security_manager import (
    SecurityManager,
    DEFAULT_MAX_FILE_SIZE,
    MAX_PATH_LENGTH,
    SUSPICIOUS_PATH_PATTERNS,
)

__all__ = [
    "SecurityManager",
    "DEFAULT_MAX_FILE_SIZE",
    "MAX_PATH_LENGTH",
    "SUSPICIOUS_PATH_PATTERNS",
]
