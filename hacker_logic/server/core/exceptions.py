"""
Exception classes for the Hacker Logic MCP server.

This module defines the exception hierarchy used by the server, the tool
handlers and the host-side supervisor, providing clear error handling and
debugging information.
"""

from typing import Optional, Dict, Any
from datetime import datetime, timezone


class HackerLogicError(Exception):
    """Base exception for all Hacker Logic errors.

    This is the root exception class that all other exceptions inherit from.
    It provides common functionality for error tracking and debugging.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}
        self.timestamp = datetime.now(timezone.utc)

    def __str__(self) -> str:
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "context": self.context,
            "timestamp": self.timestamp.isoformat()
        }


class ConfigurationError(HackerLogicError):
    """Exception raised when configuration loading or validation fails."""
    pass


# Security-related exceptions
class SecurityViolationError(HackerLogicError):
    """Base exception for rejected inputs."""
    pass


class PathValidationError(SecurityViolationError):
    """Exception raised when a requested path fails workspace validation."""

    def __init__(
        self,
        message: str,
        requested_path: Optional[str] = None,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, error_code, context)
        self.requested_path = requested_path


class FileSizeError(SecurityViolationError):
    """Exception raised when a file or payload exceeds the size limit."""
    pass


class ExpressionValidationError(SecurityViolationError):
    """Exception raised when a math expression fails sanitization."""
    pass


# Tool-related exceptions
class ToolError(HackerLogicError):
    """Base exception for tool-related errors."""

    def __init__(
        self,
        message: str,
        tool_name: Optional[str] = None,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, error_code, context)
        self.tool_name = tool_name


class ToolNotFoundError(ToolError):
    """Exception raised when a requested tool is not registered."""
    pass


class ToolExecutionError(ToolError):
    """Exception raised when a tool operation fails."""
    pass


# Host-side exceptions
class SupervisorError(HackerLogicError):
    """Base exception for server process supervision errors."""
    pass


class ServerStartError(SupervisorError):
    """Exception raised when the server subprocess cannot be spawned."""
    pass
