"""
Modular MCP server.

Wires the tool registry into the MCP SDK's low-level ``Server``: the SDK
owns JSON-RPC framing and request dispatch, this module owns the mapping
from tool name to handler and the stdio lifecycle.
"""

import asyncio
import logging
import os
import signal
import time
from typing import Any, Dict, List, Optional

from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server
from mcp.types import Content, Tool

from .config.config_manager import ServerConfig
from .core.interfaces import BaseToolHandler
from .core.models import ToolResult
from .core.exceptions import ToolExecutionError, ToolNotFoundError
from .registry.tool_registry import ToolRegistry, create_default_handlers

logger = logging.getLogger(__name__)

SHUTDOWN_GRACE_PERIOD = 2.0


class ModularMCPServer:
    """
    MCP server exposing the registered tool handlers.

    Usage:
        server = ModularMCPServer(ConfigManager.get_instance().load_config())
        await server.run()
    """

    def __init__(self, config: Optional[ServerConfig] = None):
        self.config = config or ServerConfig()
        self.security = self.config.create_security_manager()
        self.registry = ToolRegistry()

        for handler in create_default_handlers(self.security, self.config.mcp.enabled_tools):
            self.registry.register(handler)

        self.server: Server = Server(self.config.mcp.name, version=self.config.mcp.version)
        self._setup_request_handlers()

        self._serve_task: Optional[asyncio.Task] = None
        self._shutdown_signal: Optional[str] = None
        self._shutdown_event: Optional[asyncio.Event] = None
        self.shutdown_grace_period = SHUTDOWN_GRACE_PERIOD

        logger.info(f"Initialized {self.config.mcp.name} v{self.config.mcp.version}")
        logger.info(f"Enabled tools: {', '.join(self.registry.names())}")

    @property
    def name(self) -> str:
        return self.config.mcp.name

    @property
    def version(self) -> str:
        return self.config.mcp.version

    def _setup_request_handlers(self) -> None:
        @self.server.list_tools()
        async def handle_list_tools() -> List[Tool]:
            return self.list_tools()

        @self.server.call_tool()
        async def handle_call_tool(name: str, arguments: Optional[Dict[str, Any]]) -> List[Content]:
            result = await self.call_tool(name, arguments)
            if result.is_error:
                # The SDK reports raised exceptions as isError results
                raise ToolExecutionError(result.text, tool_name=name)
            return result.to_mcp_content()

    def list_tools(self) -> List[Tool]:
        """Get the MCP tool list for every registered handler."""
        tools = [definition.to_mcp_tool() for definition in self.registry.list_definitions()]
        logger.info(f"Listed {len(tools)} available tools")
        return tools

    async def call_tool(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> ToolResult:
        """
        Execute a tool by name.

        Unknown tools and unexpected handler failures are returned as error
        results rather than raised.
        """
        started = time.monotonic()
        try:
            handler = self.registry.require(name)
            logger.info(f"Executing tool: {name}")
            result = await handler.execute(arguments or {})
            duration_ms = int((time.monotonic() - started) * 1000)
            logger.info(f"Tool {name} completed in {duration_ms}ms")
            return result

        except ToolNotFoundError as e:
            logger.error(f"Tool execution failed: {e.message}")
            return ToolResult.failure(e.message)
        except Exception as e:
            duration_ms = int((time.monotonic() - started) * 1000)
            logger.error(f"Tool execution failed after {duration_ms}ms: {e}")
            return ToolResult.failure(str(e))

    def register_tool(self, handler: BaseToolHandler) -> None:
        """Register a custom tool handler."""
        self.registry.register(handler)
        logger.info(f"Registered custom tool: {handler.name}")

    def unregister_tool(self, name: str) -> bool:
        """Remove a tool handler. Returns False if it was not registered."""
        return self.registry.unregister(name)

    async def _serve_stdio(self) -> None:
        async with stdio_server() as (read_stream, write_stream):
            logger.info(f"{self.name} running on stdio")
            await self.server.run(
                read_stream,
                write_stream,
                self.server.create_initialization_options()
            )

    def request_shutdown(self, signal_name: str = "shutdown") -> None:
        """Stop serving; used by the SIGINT / SIGTERM handlers."""
        logger.info(f"Received {signal_name}, shutting down gracefully...")
        self._shutdown_signal = signal_name
        if self._shutdown_event is not None:
            self._shutdown_event.set()

    @property
    def shutdown_signal(self) -> Optional[str]:
        """Name of the signal that stopped the server, if any."""
        return self._shutdown_signal

    async def run(self) -> None:
        """
        Serve on stdio until the client disconnects or a shutdown signal arrives.

        After a signal the serve task gets ``shutdown_grace_period`` seconds to
        finish. The stdio reader thread stays blocked while the client keeps
        stdin open, so if the task is still pending the process exits with
        code 0 right away.
        """
        loop = asyncio.get_running_loop()
        self._shutdown_event = asyncio.Event()
        if self._shutdown_signal is not None:
            self._shutdown_event.set()
        self._serve_task = asyncio.create_task(self._serve_stdio())
        shutdown_wait = asyncio.create_task(self._shutdown_event.wait())

        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, self.request_shutdown, sig.name)
            except (NotImplementedError, RuntimeError):
                # Not supported by the Windows event loop
                logger.debug(f"Signal handler for {sig.name} not installed")

        try:
            await asyncio.wait({self._serve_task, shutdown_wait}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            shutdown_wait.cancel()
            for sig in (signal.SIGINT, signal.SIGTERM):
                try:
                    loop.remove_signal_handler(sig)
                except (NotImplementedError, RuntimeError):
                    pass

        if self._shutdown_signal is None:
            self._serve_task.result()
            logger.info("Server closed successfully")
            return

        self._serve_task.cancel()
        done, _ = await asyncio.wait({self._serve_task}, timeout=self.shutdown_grace_period)
        if not done:
            logger.info("Server closed successfully")
            exit_process(0)
            return
        if not self._serve_task.cancelled():
            self._serve_task.result()
        logger.info("Server closed successfully")


def exit_process(code: int) -> None:
    """Flush logging and end the process without waiting for blocked threads."""
    logging.shutdown()
    os._exit(code)
