"""
System information tool.

Only the fixed commands in ``SYSTEM_INFO_COMMANDS`` are ever executed; the
client chooses a category, never a command.
"""

import logging
from typing import Dict, Any, Optional

from ..core.interfaces import BaseToolHandler, SecurityContext
from ..core.models import ToolResult, SystemInfoInput
from ..core.enums import SystemInfoType
from .command_runner import run_command

logger = logging.getLogger(__name__)

SYSTEM_INFO_COMMANDS: Dict[SystemInfoType, str] = {
    SystemInfoType.OS: "uname -a",
    SystemInfoType.CPU: 'grep -m 1 "model name" /proc/cpuinfo',
    SystemInfoType.MEMORY: "free -h",
    SystemInfoType.DISK: "df -h /",
    SystemInfoType.NETWORK: "ip route | head -5",
}

COMMAND_TIMEOUT = 5.0


class SystemInfoToolHandler(BaseToolHandler):
    """Handler for the ``system_info`` tool."""

    def __init__(self, security: Optional[SecurityContext] = None):
        super().__init__(
            "system_info",
            "Get system information (OS, CPU, memory, disk, network)",
            {
                "type": "object",
                "properties": {
                    "type": {
                        "type": "string",
                        "enum": [info_type.value for info_type in SystemInfoType],
                        "description": "Type of system information to retrieve",
                    },
                },
                "required": ["type"],
            },
            security,
        )

    async def execute(self, arguments: Optional[Dict[str, Any]]) -> ToolResult:
        try:
            args = self.parse_arguments(SystemInfoInput, arguments)

            if args.type == SystemInfoType.ALL:
                return await self._get_all_system_info()

            command = SYSTEM_INFO_COMMANDS[args.type]
            result = await run_command(command, timeout=COMMAND_TIMEOUT)
            if result.stderr:
                logger.warning(f"{args.type.value}: {result.stderr.strip()}")

            logger.info(f"Retrieved {args.type.value} information")
            return self.create_success_result(
                f"System {args.type.value} information:\n{result.stdout.strip()}"
            )

        except Exception as e:
            logger.error(f"Failed to get system info: {e}")
            return self.create_error_result(e)

    async def _get_all_system_info(self) -> ToolResult:
        sections = []
        for info_type, command in SYSTEM_INFO_COMMANDS.items():
            header = f"=== {info_type.value.upper()} ==="
            try:
                result = await run_command(command, timeout=COMMAND_TIMEOUT)
                sections.append(f"{header}\n{result.stdout.strip()}")
            except Exception as e:
                message = getattr(e, "message", str(e))
                sections.append(f"{header}\nError: {message}")

        logger.info("Retrieved all system information")
        return self.create_success_result(
            "Complete System Information:\n\n" + "\n\n".join(sections)
        )
