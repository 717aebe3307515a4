"""
Process tool: list, inspect and signal operating-system processes.
"""

import logging
import os
import re
import signal as signal_module
from typing import Dict, Any, List, Optional

import psutil

from ..core.interfaces import BaseToolHandler, SecurityContext
from ..core.models import ToolResult, ProcessToolInput
from ..core.enums import ProcessOperation
from ..core.exceptions import ToolExecutionError
from .command_runner import run_command

logger = logging.getLogger(__name__)

ALLOWED_SIGNALS = ("TERM", "KILL", "HUP", "INT", "QUIT", "USR1", "USR2")
CRITICAL_PIDS = (1, 2)  # init, kthreadd
MAX_PID = 999999
LIST_LIMIT = 20
FILTERED_LIST_LIMIT = 10
DEFAULT_INFO_FILTER = "python"
PS_TIMEOUT = 5.0
PS_LIST_COMMAND = "ps aux --sort=-%cpu"

_UNSAFE_FILTER_CHARS = re.compile(r'[;&|`$()]')


def sanitize_filter(value: Optional[str]) -> str:
    """Strip shell metacharacters from a process filter."""
    if not value:
        return ""
    return _UNSAFE_FILTER_CHARS.sub("", value).strip()


def describe_process(process: psutil.Process) -> str:
    """Render one process in the layout of ``ps -o pid,ppid,cmd``."""
    with process.oneshot():
        try:
            command = " ".join(process.cmdline())
        except psutil.AccessDenied:
            command = ""
        if not command:
            # Kernel threads have no command line
            command = f"[{process.name()}]"
        return f"PID PPID CMD\n{process.pid} {process.ppid()} {command}"


class ProcessToolHandler(BaseToolHandler):
    """Handler for the ``process`` tool."""

    def __init__(self, security: Optional[SecurityContext] = None):
        super().__init__(
            "process",
            "Manage system processes (list, info, kill) with safety restrictions",
            {
                "type": "object",
                "properties": {
                    "operation": {
                        "type": "string",
                        "enum": [op.value for op in ProcessOperation],
                        "description": "Process operation to perform",
                    },
                    "filter": {
                        "type": "string",
                        "description": "Filter processes by name or pattern",
                    },
                    "pid": {
                        "type": "number",
                        "description": "Process ID (required for kill operation)",
                    },
                    "signal": {
                        "type": "string",
                        "description": "Signal to send (default: TERM)",
                    },
                },
                "required": ["operation"],
            },
            security,
        )

    async def execute(self, arguments: Optional[Dict[str, Any]]) -> ToolResult:
        try:
            args = self.parse_arguments(ProcessToolInput, arguments)

            if args.operation == ProcessOperation.LIST:
                return await self._list_processes(args.filter)
            if args.operation == ProcessOperation.INFO:
                return await self._get_process_info(args.filter or DEFAULT_INFO_FILTER)
            return await self._kill_process(args.pid, args.signal)

        except Exception as e:
            message = getattr(e, "message", str(e))
            logger.error(f"Process operation failed: {message}")
            return self.create_error_result(message)

    async def _ps_lines(self) -> List[str]:
        result = await run_command(PS_LIST_COMMAND.split(), timeout=PS_TIMEOUT)
        return result.stdout.strip().splitlines()

    async def _matching_processes(self, pattern: str) -> List[str]:
        lines = await self._ps_lines()
        # Skip the header and the ps invocation itself
        return [
            line for line in lines[1:]
            if pattern in line and PS_LIST_COMMAND not in line
        ]

    async def _list_processes(self, filter_value: Optional[str]) -> ToolResult:
        pattern = sanitize_filter(filter_value)

        if pattern:
            matches = await self._matching_processes(pattern)
            output = "\n".join(matches[:FILTERED_LIST_LIMIT])
            logger.info(f"Listed processes (filtered: {pattern})")
            return self.create_success_result(f"Process List (filtered: {pattern}):\n{output}")

        lines = await self._ps_lines()
        output = "\n".join(lines[:LIST_LIMIT])
        logger.info("Listed processes")
        return self.create_success_result(f"Process List (top {LIST_LIMIT} by CPU):\n{output}")

    async def _get_process_info(self, filter_value: str) -> ToolResult:
        pattern = sanitize_filter(filter_value)
        if not pattern:
            raise ToolExecutionError("Filter is empty after sanitization", tool_name=self.name)

        matches = await self._matching_processes(pattern)
        if not matches:
            return self.create_success_result(f"No processes found matching: {pattern}")

        logger.info(f"Retrieved info for processes matching: {pattern}")
        return self.create_success_result(f"Process Info ({pattern}):\n" + "\n".join(matches))

    async def _kill_process(self, pid: Optional[int], signal_name: str) -> ToolResult:
        if not pid:
            raise ToolExecutionError("Process ID (pid) is required for kill operation", tool_name=self.name)

        if pid <= 0 or pid > MAX_PID:
            raise ToolExecutionError("Invalid process ID", tool_name=self.name)

        if signal_name not in ALLOWED_SIGNALS:
            raise ToolExecutionError(
                f"Invalid signal: {signal_name}. Allowed: {', '.join(ALLOWED_SIGNALS)}",
                tool_name=self.name
            )

        if pid in CRITICAL_PIDS:
            raise ToolExecutionError("Cannot kill critical system processes", tool_name=self.name)

        if pid == os.getpid():
            raise ToolExecutionError("Cannot kill the MCP server process itself", tool_name=self.name)

        signal_value = getattr(signal_module, f"SIG{signal_name}", None)
        if signal_value is None:
            raise ToolExecutionError(f"Signal {signal_name} is not supported on this platform", tool_name=self.name)

        try:
            process = psutil.Process(pid)
            info = describe_process(process)
        except psutil.NoSuchProcess:
            raise ToolExecutionError(f"Process {pid} not found", tool_name=self.name)

        try:
            process.send_signal(signal_value)
        except psutil.NoSuchProcess:
            raise ToolExecutionError(f"Process {pid} not found or already terminated", tool_name=self.name)
        except psutil.AccessDenied:
            raise ToolExecutionError(f"Permission denied sending {signal_name} to process {pid}", tool_name=self.name)

        logger.info(f"Sent {signal_name} signal to process {pid}")
        return self.create_success_result(
            f"Successfully sent {signal_name} signal to process {pid}\n"
            f"Process info:\n{info}"
        )
