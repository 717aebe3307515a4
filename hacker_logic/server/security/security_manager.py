"""
Security Manager for sandboxing tool operations.

This module provides the security controls shared by the tool handlers:
- Workspace path validation (traversal and containment checks)
- File and payload size limits
- Math expression sanitization
- Error message scrubbing
"""

import logging
import os
import re
from typing import Optional, Sequence, Tuple

from ..core.enums import FileOperation
from ..core.exceptions import (
    PathValidationError, FileSizeError, ExpressionValidationError
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB
MAX_PATH_LENGTH = 1000
DEFAULT_MAX_EXPRESSION_LENGTH = 1000
MAX_EXPRESSION_OPERATORS = 100

SUSPICIOUS_PATH_PATTERNS: Tuple[str, ...] = ("..", "./", "\\", "~")

_EXPRESSION_PATTERN = re.compile(r'^[0-9+\-*/().]+$')
_OPERATOR_PATTERN = re.compile(r'[+\-*/]')
_WHITESPACE_PATTERN = re.compile(r'\s')


class SecurityManager:
    """
    Security boundary for tool operations.

    All file access performed by the tools goes through ``validate_path``,
    which guarantees the returned absolute path is the workspace root itself
    or lies strictly below it.
    """

    def __init__(
        self,
        workspace_root: Optional[str] = None,
        max_file_size: int = DEFAULT_MAX_FILE_SIZE,
        allowed_operations: Sequence[str] = tuple(op.value for op in FileOperation),
        strict_path_validation: bool = True,
        allow_absolute_paths: bool = False,
        max_expression_length: int = DEFAULT_MAX_EXPRESSION_LENGTH
    ):
        root = workspace_root or os.getcwd()
        self.workspace_root = os.path.realpath(os.path.abspath(root))
        self.max_file_size = max_file_size
        self.allowed_operations: Tuple[str, ...] = tuple(str(op) for op in allowed_operations)
        self.strict_path_validation = strict_path_validation
        self.allow_absolute_paths = allow_absolute_paths
        self.max_expression_length = max_expression_length

        logger.info(f"Workspace root: {self.workspace_root}")
        logger.info(f"Max file size: {self.max_file_size} bytes")

    def is_operation_allowed(self, operation: str) -> bool:
        """Check if a file operation is enabled."""
        return str(operation) in self.allowed_operations

    def is_within_workspace(self, resolved_path: str) -> bool:
        """Check if an absolute, resolved path is the root or below it."""
        if resolved_path == self.workspace_root:
            return True
        prefix = self.workspace_root
        if not prefix.endswith(os.sep):
            prefix += os.sep
        return resolved_path.startswith(prefix)

    def validate_path(self, requested_path: str) -> str:
        """
        Validate and resolve a path to prevent path traversal attacks.

        Args:
            requested_path: Path supplied by the client, relative to the workspace

        Returns:
            Resolved absolute path inside the workspace

        Raises:
            PathValidationError: If the path is invalid, suspicious or outside the workspace
        """
        if not requested_path or not isinstance(requested_path, str):
            raise PathValidationError("Invalid path: path must be a non-empty string")

        if len(requested_path) > MAX_PATH_LENGTH:
            raise PathValidationError(
                f"Path too long (max {MAX_PATH_LENGTH} characters)",
                requested_path=requested_path[:50]
            )

        if "\0" in requested_path:
            raise PathValidationError("Invalid path: null bytes not allowed")

        if self.strict_path_validation:
            for pattern in SUSPICIOUS_PATH_PATTERNS:
                if pattern in requested_path:
                    raise PathValidationError(
                        f'Security violation: "{pattern}" not allowed in paths',
                        requested_path=requested_path
                    )

        normalized = os.path.normpath(requested_path)
        # Symlinks are resolved so a link inside the workspace cannot point out of it
        resolved = os.path.realpath(os.path.join(self.workspace_root, normalized))

        if not self.is_within_workspace(resolved):
            raise PathValidationError(
                "Access denied: Path is outside workspace boundary",
                requested_path=requested_path
            )

        if os.path.isabs(requested_path) and not self.allow_absolute_paths:
            raise PathValidationError(
                "Absolute paths not allowed. Use paths relative to workspace",
                requested_path=requested_path
            )

        logger.debug(f"Path validated: {requested_path} -> {resolved}")
        return resolved

    def validate_file_size(self, file_path: str) -> None:
        """
        Validate file size against the configured limit.

        Raises:
            FileSizeError: If the file is larger than ``max_file_size``
            OSError: If the file cannot be stat'ed
        """
        size = os.stat(file_path).st_size
        if size > self.max_file_size:
            raise FileSizeError(f"File too large: {size} bytes (max {self.max_file_size})")

    def validate_content_size(self, content: str) -> int:
        """
        Validate the encoded size of content about to be written.

        Returns:
            Size of the content in bytes

        Raises:
            FileSizeError: If the content is larger than ``max_file_size``
        """
        size = len(content.encode("utf-8"))
        if size > self.max_file_size:
            raise FileSizeError(f"Content too large: {size} bytes (max {self.max_file_size})")
        return size

    def sanitize_math_expression(self, expression: str) -> str:
        """
        Sanitize a mathematical expression before evaluation.

        Only digits, ``+ - * / ( ) .`` survive; whitespace is removed.

        Returns:
            The whitespace-free expression

        Raises:
            ExpressionValidationError: If the expression is rejected
        """
        if len(expression) > self.max_expression_length:
            raise ExpressionValidationError(
                f"Expression too long (max {self.max_expression_length} characters)"
            )

        sanitized = _WHITESPACE_PATTERN.sub("", expression)

        if not _EXPRESSION_PATTERN.match(sanitized):
            raise ExpressionValidationError(
                "Expression contains invalid characters. Only numbers and +, -, *, /, (, ) are allowed"
            )

        if ".." in sanitized:
            raise ExpressionValidationError("Invalid expression pattern")

        operator_count = len(_OPERATOR_PATTERN.findall(sanitized))
        if operator_count > MAX_EXPRESSION_OPERATORS:
            raise ExpressionValidationError(
                f"Expression too complex (max {MAX_EXPRESSION_OPERATORS} operations)"
            )

        depth = 0
        for char in sanitized:
            if char == "(":
                depth += 1
            elif char == ")":
                depth -= 1
            if depth < 0:
                raise ExpressionValidationError("Unbalanced parentheses")
        if depth != 0:
            raise ExpressionValidationError("Unbalanced parentheses")

        return sanitized

    def sanitize_error_message(self, message: str) -> str:
        """Hide the absolute workspace root in messages returned to clients."""
        return message.replace(self.workspace_root, "[workspace]")
