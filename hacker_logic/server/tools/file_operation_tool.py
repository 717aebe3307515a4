"""
File operation tool: read, write and list inside the workspace root.

Every path goes through ``SecurityManager.validate_path`` before the
filesystem is touched, and error messages returned to the client never
contain the absolute workspace root.
"""

import logging
import os
from typing import Dict, Any, Optional

from ..core.interfaces import BaseToolHandler, SecurityContext
from ..core.models import ToolResult, FileOperationInput
from ..core.enums import FileOperation
from ..core.exceptions import HackerLogicError, ToolExecutionError

logger = logging.getLogger(__name__)

MAX_LIST_ITEMS = 1000


class FileOperationToolHandler(BaseToolHandler):
    """Handler for the ``file_operation`` tool."""

    def __init__(self, security: SecurityContext):
        super().__init__(
            "file_operation",
            "Perform secure file operations (read, write, list) within workspace only",
            {
                "type": "object",
                "properties": {
                    "operation": {
                        "type": "string",
                        "enum": [op.value for op in FileOperation],
                        "description": "File operation to perform",
                    },
                    "path": {
                        "type": "string",
                        "description": "File or directory path (relative to workspace)",
                        "maxLength": 1000,
                    },
                    "content": {
                        "type": "string",
                        "description": "Content to write (only for write operation)",
                    },
                },
                "required": ["operation", "path"],
            },
            security,
        )

    async def execute(self, arguments: Optional[Dict[str, Any]]) -> ToolResult:
        requested_path = (arguments or {}).get("path", "")
        try:
            args = self.parse_arguments(FileOperationInput, arguments)
            operation = args.operation
            requested_path = args.path

            if not self.security.is_operation_allowed(operation.value):
                raise ToolExecutionError(f"Invalid operation: {operation.value}", tool_name=self.name)

            safe_path = self.security.validate_path(requested_path)

            logger.info(f"Operation: {operation.value}, Path: {requested_path}")

            if operation == FileOperation.READ:
                return self._handle_read(safe_path, requested_path)
            if operation == FileOperation.WRITE:
                return self._handle_write(safe_path, requested_path, args.content)
            return self._handle_list(safe_path, requested_path)

        except HackerLogicError as e:
            return self._error(e.message)
        except FileNotFoundError:
            return self._error(f"Path not found: {requested_path}")
        except PermissionError:
            return self._error(f"Permission denied: {requested_path}")
        except OSError as e:
            return self._error(e.strerror or str(e))

    def _error(self, message: str) -> ToolResult:
        safe_message = self.security.sanitize_error_message(message)
        logger.error(f"File operation failed: {safe_message}")
        return self.create_error_result(safe_message)

    def _handle_read(self, safe_path: str, requested_path: str) -> ToolResult:
        if not os.path.isfile(safe_path):
            if not os.path.exists(safe_path):
                raise FileNotFoundError(safe_path)
            raise ToolExecutionError("Path is not a file", tool_name=self.name)

        self.security.validate_file_size(safe_path)
        with open(safe_path, "r", encoding="utf-8", errors="replace") as f:
            content = f.read()

        logger.info(f"Read {len(content)} characters from {requested_path}")
        return self.create_success_result(f"Content of {requested_path}:\n{content}")

    def _handle_write(self, safe_path: str, requested_path: str, content: Optional[str]) -> ToolResult:
        if not content:
            raise ToolExecutionError("Content is required for write operation", tool_name=self.name)

        size = self.security.validate_content_size(content)

        if os.path.isdir(safe_path):
            raise ToolExecutionError("Path is a directory", tool_name=self.name)

        os.makedirs(os.path.dirname(safe_path), exist_ok=True)
        with open(safe_path, "w", encoding="utf-8") as f:
            f.write(content)

        logger.info(f"Wrote {size} bytes to {requested_path}")
        return self.create_success_result(f"Successfully wrote {size} bytes to {requested_path}")

    def _handle_list(self, safe_path: str, requested_path: str) -> ToolResult:
        if not os.path.isdir(safe_path):
            if not os.path.exists(safe_path):
                raise FileNotFoundError(safe_path)
            raise ToolExecutionError("Path is not a directory", tool_name=self.name)

        items = sorted(os.listdir(safe_path))
        display_items = items[:MAX_LIST_ITEMS]
        truncated = len(items) > MAX_LIST_ITEMS

        logger.info(f"Listed {len(items)} items in {requested_path}")

        text = f"Contents of {requested_path} ({len(items)} items):\n" + "\n".join(display_items)
        if truncated:
            text += "\n... (truncated)"
        return self.create_success_result(text)
