"""
Git tool: a fixed set of git subcommands run in the workspace root.
"""

import logging
import re
from typing import Dict, Any, List, Optional

from ..core.interfaces import BaseToolHandler, SecurityContext
from ..core.models import ToolResult, GitToolInput
from ..core.enums import GitOperation
from ..core.exceptions import ToolExecutionError
from .command_runner import run_command

logger = logging.getLogger(__name__)

GIT_TIMEOUT = 15.0
GIT_MAX_OUTPUT = 1024 * 1024

_UNSAFE_ARG_CHARS = re.compile(r'[;&|`$()]')


def sanitize_git_args(args: List[str]) -> List[str]:
    """Strip shell metacharacters from extra arguments and drop empty ones."""
    sanitized = []
    for arg in args:
        if not isinstance(arg, str) or not arg:
            continue
        cleaned = _UNSAFE_ARG_CHARS.sub("", arg)
        if cleaned:
            sanitized.append(cleaned)
    return sanitized


def build_git_command(operation: GitOperation, extra_args: List[str], message: Optional[str] = None) -> List[str]:
    """
    Build the argv for a git operation.

    Raises:
        ToolExecutionError: If ``commit`` is requested without a message
    """
    command = ["git", operation.value]

    if operation == GitOperation.COMMIT:
        if not message:
            raise ToolExecutionError("Commit message is required for commit operation", tool_name="git")
        command.extend(["-m", message])
    elif operation == GitOperation.LOG:
        command.extend(["--oneline", "-10"])
    elif operation == GitOperation.DIFF:
        command.append("--stat")

    command.extend(sanitize_git_args(extra_args))
    return command


class GitToolHandler(BaseToolHandler):
    """Handler for the ``git`` tool."""

    def __init__(self, security: SecurityContext):
        super().__init__(
            "git",
            "Perform Git operations (status, log, branch, diff, add, commit, push, pull)",
            {
                "type": "object",
                "properties": {
                    "operation": {
                        "type": "string",
                        "enum": [op.value for op in GitOperation],
                        "description": "Git operation to perform",
                    },
                    "args": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "Additional arguments for the git command",
                    },
                    "message": {
                        "type": "string",
                        "description": "Commit message (required for commit operation)",
                    },
                },
                "required": ["operation"],
            },
            security,
        )

    async def execute(self, arguments: Optional[Dict[str, Any]]) -> ToolResult:
        try:
            args = self.parse_arguments(GitToolInput, arguments)
            operation = args.operation
            command = build_git_command(operation, args.args, args.message)

            logger.info(f"Executing: {' '.join(command)}")

            result = await run_command(
                command,
                cwd=self.security.workspace_root,
                timeout=GIT_TIMEOUT,
                max_output=GIT_MAX_OUTPUT,
            )

            output = result.stdout.strip()
            if result.stderr.strip():
                output += f"\nWarnings/Errors:\n{result.stderr.strip()}"
            if not output:
                output = f"Git {operation.value} completed successfully (no output)"

            logger.info(f"Operation {operation.value} completed")
            return self.create_success_result(f"Git {operation.value} result:\n{output}")

        except ToolExecutionError as e:
            message = e.message
            logger.error(f"Git operation failed: {message}")
            if "not a git repository" in message:
                return self.create_error_result(
                    'This directory is not a Git repository. Run "git init" to initialize one.'
                )
            return self.create_error_result(f"Git operation failed: {message}")
        except Exception as e:
            logger.error(f"Git operation failed: {e}")
            return self.create_error_result(f"Git operation failed: {e}")
