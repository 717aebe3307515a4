"""
Core data models for the Hacker Logic MCP server.

This module defines the tool result and definition structures exchanged
with the MCP SDK, and the argument models each tool validates its input
against.
"""

from typing import Dict, Any, List, Optional
from datetime import datetime, timezone
from pydantic import BaseModel, Field, ConfigDict, field_validator
from mcp.types import Content, TextContent, ImageContent, Tool

from .enums import (
    ContentType, FileOperation, SystemInfoType, GitOperation, ProcessOperation
)


class ToolContent(BaseModel):
    """A single content item of a tool result."""

    model_config = ConfigDict(extra='forbid')

    type: ContentType = Field(default=ContentType.TEXT, description="Content type")
    text: Optional[str] = Field(None, description="Text payload")
    data: Optional[str] = Field(None, description="Base64 payload for binary content")
    mime_type: Optional[str] = Field(None, description="MIME type of binary content")


class ToolResult(BaseModel):
    """Result returned by a tool handler."""

    model_config = ConfigDict(extra='forbid')

    content: List[ToolContent] = Field(default_factory=list, description="Result content items")
    is_error: bool = Field(default=False, description="Whether the tool failed")
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Result creation time"
    )

    @classmethod
    def success(cls, text: str) -> "ToolResult":
        """Build a successful single-text result."""
        return cls(content=[ToolContent(text=text)])

    @classmethod
    def failure(cls, message: str) -> "ToolResult":
        """Build an error result; the text is prefixed with ``Error: ``."""
        return cls(content=[ToolContent(text=f"Error: {message}")], is_error=True)

    @property
    def text(self) -> str:
        """Concatenated text of all text content items."""
        return "\n".join(item.text for item in self.content if item.text is not None)

    def to_mcp_content(self) -> List[Content]:
        """Convert to the content list understood by the MCP SDK."""
        converted: List[Content] = []
        for item in self.content:
            if item.type == ContentType.IMAGE and item.data is not None:
                converted.append(ImageContent(
                    type="image",
                    data=item.data,
                    mimeType=item.mime_type or "application/octet-stream"
                ))
            else:
                converted.append(TextContent(type="text", text=item.text or ""))
        return converted


class ToolDefinition(BaseModel):
    """Tool metadata advertised through ``tools/list``."""

    model_config = ConfigDict(
        str_strip_whitespace=True,
        extra='forbid'
    )

    name: str = Field(..., description="Tool name", min_length=1, max_length=100)
    description: str = Field(..., description="Tool description", min_length=1, max_length=1000)
    input_schema: Dict[str, Any] = Field(..., description="JSON Schema for input parameters")

    def to_mcp_tool(self) -> Tool:
        """Convert to an ``mcp.types.Tool``."""
        return Tool(name=self.name, description=self.description, inputSchema=self.input_schema)


# Tool argument models

class TimeToolInput(BaseModel):
    """Arguments of the ``get_time`` tool."""

    model_config = ConfigDict(str_strip_whitespace=True, extra='ignore')

    timezone: str = Field(default="UTC", description="Timezone to get time for (e.g., UTC, EST, America/New_York)")


class CalculateToolInput(BaseModel):
    """Arguments of the ``calculate`` tool."""

    model_config = ConfigDict(extra='ignore')

    expression: str = Field(..., description="Mathematical expression to calculate")


class FileOperationInput(BaseModel):
    """Arguments of the ``file_operation`` tool."""

    model_config = ConfigDict(extra='ignore')

    operation: FileOperation = Field(..., description="File operation to perform")
    path: str = Field(..., description="File or directory path (relative to workspace)")
    content: Optional[str] = Field(None, description="Content to write (only for write operation)")


class SystemInfoInput(BaseModel):
    """Arguments of the ``system_info`` tool."""

    model_config = ConfigDict(extra='ignore')

    type: SystemInfoType = Field(..., description="Type of system information to retrieve")


class GitToolInput(BaseModel):
    """Arguments of the ``git`` tool."""

    model_config = ConfigDict(extra='ignore')

    operation: GitOperation = Field(..., description="Git operation to perform")
    args: List[str] = Field(default_factory=list, description="Additional arguments for the git command")
    message: Optional[str] = Field(None, description="Commit message (required for commit operation)")


class ProcessToolInput(BaseModel):
    """Arguments of the ``process`` tool."""

    model_config = ConfigDict(str_strip_whitespace=True, extra='ignore')

    operation: ProcessOperation = Field(..., description="Process operation to perform")
    filter: Optional[str] = Field(None, description="Filter processes by name or pattern")
    pid: Optional[int] = Field(None, description="Process ID (required for kill operation)")
    signal: str = Field(default="TERM", description="Signal to send (default: TERM)")

    @field_validator("signal")
    @classmethod
    def normalize_signal(cls, value: str) -> str:
        """Accept both ``TERM`` and ``SIGTERM`` spellings."""
        value = value.upper()
        if value.startswith("SIG"):
            value = value[3:]
        return value
