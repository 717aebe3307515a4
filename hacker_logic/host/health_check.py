"""
Health probe for the MCP server.

Launches the server through ``fastmcp.Client`` over stdio, lists its tools
and calls ``get_time`` as a smoke test.
"""

import asyncio
import logging
import time
from typing import Any, Dict, List, Optional

from fastmcp import Client
from mcp.types import TextContent
from pydantic import BaseModel, Field

from .server_provider import MCPServerDefinition

logger = logging.getLogger(__name__)

PROBE_TOOL = "get_time"
PROBE_ARGUMENTS: Dict[str, Any] = {"timezone": "UTC"}
DEFAULT_PROBE_TIMEOUT = 30.0


class HealthReport(BaseModel):
    """Outcome of a server health probe."""

    healthy: bool = Field(..., description="Whether every probe step succeeded")
    tools: List[str] = Field(default_factory=list, description="Tool names advertised by the server")
    probe_output: Optional[str] = Field(None, description="Text returned by the probe tool")
    error: Optional[str] = Field(None, description="Failure description")
    duration_ms: int = Field(default=0, ge=0, description="Probe duration in milliseconds")

    def summary(self) -> str:
        """Human-readable summary."""
        if not self.healthy:
            return f"MCP server test failed: {self.error}"
        lines = [
            f"MCP server is healthy ({len(self.tools)} tools, {self.duration_ms}ms)",
            f"Tools: {', '.join(self.tools)}",
        ]
        if self.probe_output:
            lines.append(f"Probe: {self.probe_output}")
        return "\n".join(lines)


def _extract_text(result: Any) -> str:
    # Older fastmcp releases return a content list, newer ones a CallToolResult
    content = getattr(result, "content", result)
    return "\n".join(item.text for item in content if isinstance(item, TextContent))


async def _probe(client: Client) -> Dict[str, Any]:
    async with client:
        tools = await client.list_tools()
        tool_names = [tool.name for tool in tools]
        if PROBE_TOOL not in tool_names:
            raise RuntimeError(f"Server does not provide the {PROBE_TOOL} tool")
        result = await client.call_tool(PROBE_TOOL, PROBE_ARGUMENTS)
        return {"tools": tool_names, "probe_output": _extract_text(result)}


async def check_server_health(
    definition: MCPServerDefinition,
    timeout: float = DEFAULT_PROBE_TIMEOUT
) -> HealthReport:
    """
    Probe an MCP server.

    Args:
        definition: How to launch the server
        timeout: Maximum seconds for the whole probe

    Returns:
        HealthReport; failures are reported, not raised
    """
    started = time.monotonic()
    client = Client(definition.to_client_config())

    try:
        outcome = await asyncio.wait_for(_probe(client), timeout)
    except asyncio.TimeoutError:
        error = f"Health check timed out after {timeout}s"
        logger.error(error)
        return HealthReport(healthy=False, error=error, duration_ms=_elapsed_ms(started))
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        return HealthReport(healthy=False, error=str(e), duration_ms=_elapsed_ms(started))

    report = HealthReport(healthy=True, duration_ms=_elapsed_ms(started), **outcome)
    logger.info(f"Health check passed with {len(report.tools)} tools in {report.duration_ms}ms")
    return report


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)
