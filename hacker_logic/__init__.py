"""
Hacker Logic - an MCP companion server and its host-side supervisor.

The ``server`` package is the process spawned by the editor host; the
``host`` package launches, supervises and probes it.
"""

__version__ = "1.0.0"

from .host import (
    HealthReport,
    MCPServerDefinition,
    MCPServerProvider,
    ProcessSupervisor,
    check_server_health,
)
from .server import ModularMCPServer, SecurityManager, ServerConfig, ToolResult

__all__ = [
    "__version__",
    "HealthReport",
    "MCPServerDefinition",
    "MCPServerProvider",
    "ProcessSupervisor",
    "check_server_health",
    "ModularMCPServer",
    "SecurityManager",
    "ServerConfig",
    "ToolResult",
]
