"""
Subprocess execution helper shared by the command-backed tools.

Commands run through ``asyncio`` subprocesses with a timeout and an output
cap; a non-zero exit status raises ``CommandError`` carrying stderr.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Union

from ..core.exceptions import ToolExecutionError

logger = logging.getLogger(__name__)

DEFAULT_MAX_OUTPUT = 1024 * 1024  # 1MB
TRUNCATION_MARKER = "\n... (output truncated)"


class CommandError(ToolExecutionError):
    """Raised when a command exits with a non-zero status or times out."""

    def __init__(self, message: str, returncode: Optional[int] = None, stderr: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


@dataclass
class CommandResult:
    """Captured output of a finished command."""
    stdout: str
    stderr: str
    returncode: int


def _decode(data: bytes, max_output: int) -> str:
    if len(data) > max_output:
        return data[:max_output].decode("utf-8", errors="replace") + TRUNCATION_MARKER
    return data.decode("utf-8", errors="replace")


async def run_command(
    command: Union[str, Sequence[str]],
    *,
    cwd: Optional[str] = None,
    timeout: float = 5.0,
    max_output: int = DEFAULT_MAX_OUTPUT,
    check: bool = True
) -> CommandResult:
    """
    Run a command and capture its output.

    Args:
        command: A fixed shell command string, or an argv sequence run without a shell
        cwd: Working directory
        timeout: Seconds before the command is killed
        max_output: Maximum bytes kept per stream
        check: Raise ``CommandError`` on non-zero exit

    Returns:
        Command result with decoded output

    Raises:
        CommandError: On timeout, or non-zero exit when ``check`` is set
    """
    if isinstance(command, str):
        display = command
        proc = await asyncio.create_subprocess_shell(
            command,
            cwd=cwd,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    else:
        display = " ".join(command)
        proc = await asyncio.create_subprocess_exec(
            *command,
            cwd=cwd,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )

    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        proc.kill()
        await proc.wait()
        logger.warning(f"Command timed out after {timeout}s: {display}")
        raise CommandError(f"Command timed out after {timeout}s: {display}")

    result = CommandResult(
        stdout=_decode(stdout, max_output),
        stderr=_decode(stderr, max_output),
        returncode=proc.returncode if proc.returncode is not None else -1,
    )

    if check and result.returncode != 0:
        detail = result.stderr.strip() or result.stdout.strip()
        message = f"Command failed: {display}"
        if detail:
            message += f"\n{detail}"
        raise CommandError(message, returncode=result.returncode, stderr=result.stderr)

    return result
