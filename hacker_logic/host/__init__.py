"""
Host side of the Hacker Logic extension.

Provides the server definition, the supervisor that owns the spawned
server process, and a health probe.
"""

from .server_provider import MCPServerDefinition, MCPServerProvider
from .process_supervisor import ProcessSupervisor
from .health_check import HealthReport, check_server_health

__all__ = [
    "MCPServerDefinition",
    "MCPServerProvider",
    "ProcessSupervisor",
    "HealthReport",
    "check_server_health",
]
