"""
Tools package for the Hacker Logic MCP server.

Each module provides one tool handler exposed over the Model Context
Protocol.
"""

from .time_tool import TimeToolHandler
from .calculate_tool import CalculateToolHandler
from .file_operation_tool import FileOperationToolHandler
from .system_info_tool import SystemInfoToolHandler
from .git_tool import GitToolHandler
from .process_tool import ProcessToolHandler

__all__ = [
    "TimeToolHandler",
    "CalculateToolHandler",
    "FileOperationToolHandler",
    "SystemInfoToolHandler",
    "GitToolHandler",
    "ProcessToolHandler",
]
