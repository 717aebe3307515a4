"""
Core components of the Hacker Logic MCP server.
"""

from .enums import (
    FileOperation, SystemInfoType, GitOperation, ProcessOperation, ContentType, LogLevel
)
from .models import (
    ToolContent, ToolResult, ToolDefinition,
    TimeToolInput, CalculateToolInput, FileOperationInput,
    SystemInfoInput, GitToolInput, ProcessToolInput
)
from .exceptions import (
    HackerLogicError, ConfigurationError,
    SecurityViolationError, PathValidationError, FileSizeError, ExpressionValidationError,
    ToolError, ToolNotFoundError, ToolExecutionError,
    SupervisorError, ServerStartError
)
from .interfaces import BaseToolHandler, SecurityContext

__all__ = [
    "FileOperation",
    "SystemInfoType",
    "GitOperation",
    "ProcessOperation",
    "ContentType",
    "LogLevel",
    "ToolContent",
    "ToolResult",
    "ToolDefinition",
    "TimeToolInput",
    "CalculateToolInput",
    "FileOperationInput",
    "SystemInfoInput",
    "GitToolInput",
    "ProcessToolInput",
    "HackerLogicError",
    "ConfigurationError",
    "SecurityViolationError",
    "PathValidationError",
    "FileSizeError",
    "ExpressionValidationError",
    "ToolError",
    "ToolNotFoundError",
    "ToolExecutionError",
    "SupervisorError",
    "ServerStartError",
    "BaseToolHandler",
    "SecurityContext",
]
