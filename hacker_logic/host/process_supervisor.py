"""
Process supervisor for the spawned MCP server.

Features:
- At most one supervised server process at a time
- stdout / stderr of the child forwarded to logging
- Exit watcher that clears the handle when the child dies on its own
- Graceful stop (SIGTERM) with a forced kill after a grace period
"""

import asyncio
import logging
import os
from typing import List, Optional

from ..server.core.exceptions import ServerStartError
from .server_provider import MCPServerDefinition, MCPServerProvider

logger = logging.getLogger(__name__)

DEFAULT_STOP_TIMEOUT = 5.0


class ProcessSupervisor:
    """
    Supervises the lifecycle of a single MCP server subprocess.

    Usage:
        supervisor = ProcessSupervisor(MCPServerProvider())
        await supervisor.start()
        ...
        await supervisor.deactivate()

    Or as an async context manager:
        async with ProcessSupervisor() as supervisor:
            ...
    """

    def __init__(
        self,
        provider: Optional[MCPServerProvider] = None,
        stop_timeout: float = DEFAULT_STOP_TIMEOUT
    ):
        self.provider = provider or MCPServerProvider()
        self.stop_timeout = stop_timeout

        self._process: Optional[asyncio.subprocess.Process] = None
        self._last_returncode: Optional[int] = None
        self._io_tasks: List[asyncio.Task] = []
        self._lock = asyncio.Lock()

    @property
    def is_running(self) -> bool:
        return self._process is not None and self._process.returncode is None

    @property
    def pid(self) -> Optional[int]:
        return self._process.pid if self._process is not None else None

    @property
    def returncode(self) -> Optional[int]:
        """Exit code of the current process, or of the last one that exited."""
        if self._process is not None:
            return self._process.returncode
        return self._last_returncode

    @property
    def process(self) -> Optional[asyncio.subprocess.Process]:
        return self._process

    def _definition(self) -> MCPServerDefinition:
        definitions = self.provider.provide_server_definitions()
        if not definitions:
            raise ServerStartError("No MCP server definition available")
        return self.provider.resolve_server_definition(definitions[0])

    async def start(self) -> asyncio.subprocess.Process:
        """
        Spawn the MCP server, replacing any process already supervised.

        Returns:
            The spawned process

        Raises:
            ServerStartError: If the process cannot be spawned
        """
        async with self._lock:
            if self._process is not None:
                logger.info(f"Terminating existing MCP server process (pid {self._process.pid})")
                await self._shutdown_current(self.stop_timeout)

            definition = self._definition()
            env = dict(os.environ)
            env.update(definition.env)

            logger.info(f"Starting {definition.label}: {' '.join(definition.argv())}")
            try:
                process = await asyncio.create_subprocess_exec(
                    definition.command,
                    *definition.args,
                    stdin=asyncio.subprocess.PIPE,
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.PIPE,
                    env=env,
                    cwd=definition.cwd,
                )
            except OSError as e:
                logger.error(f"Failed to start MCP server: {e}")
                raise ServerStartError(
                    f"Failed to start MCP server: {e}",
                    context={"command": definition.command, "args": definition.args}
                ) from e

            self._process = process
            self._last_returncode = None
            self._io_tasks = [
                asyncio.create_task(self._forward_output(process.stdout, "stdout")),
                asyncio.create_task(self._forward_output(process.stderr, "stderr")),
                asyncio.create_task(self._watch_exit(process)),
            ]

            logger.info(f"MCP Server started successfully (pid {process.pid})")
            return process

    async def stop(self, timeout: Optional[float] = None) -> Optional[int]:
        """
        Stop the supervised process.

        Sends SIGTERM and waits up to ``timeout`` seconds before sending
        SIGKILL. Does nothing when no process is supervised.

        Returns:
            Exit code of the stopped process, or None if nothing was running
        """
        async with self._lock:
            if self._process is None:
                return None
            return await self._shutdown_current(self.stop_timeout if timeout is None else timeout)

    async def deactivate(self) -> None:
        """Host shutdown hook."""
        logger.info("Deactivating MCP server supervisor")
        await self.stop()

    async def wait(self) -> Optional[int]:
        """Wait for the supervised process to exit on its own."""
        process = self._process
        if process is None:
            return self._last_returncode
        return await process.wait()

    async def _shutdown_current(self, timeout: float) -> int:
        process = self._process
        self._process = None

        returncode = await self._terminate(process, timeout)
        self._last_returncode = returncode

        for task in self._io_tasks:
            task.cancel()
        await asyncio.gather(*self._io_tasks, return_exceptions=True)
        self._io_tasks = []

        return returncode

    async def _terminate(self, process: asyncio.subprocess.Process, timeout: float) -> int:
        if process.returncode is not None:
            return process.returncode

        if process.stdin is not None and not process.stdin.is_closing():
            process.stdin.close()

        try:
            process.terminate()
        except ProcessLookupError:
            return await process.wait()

        try:
            return await asyncio.wait_for(process.wait(), timeout)
        except asyncio.TimeoutError:
            logger.warning(f"MCP server (pid {process.pid}) did not exit after {timeout}s, killing")
            try:
                process.kill()
            except ProcessLookupError:
                pass
            return await process.wait()

    async def _forward_output(self, stream: Optional[asyncio.StreamReader], name: str) -> None:
        if stream is None:
            return
        while True:
            try:
                line = await stream.readline()
            except ValueError:
                # Line longer than the stream limit; the reader already dropped it
                logger.warning(f"[MCP Server {name}] line too long, discarded")
                continue
            if not line:
                return
            text = line.decode("utf-8", errors="replace").rstrip()
            if not text:
                continue
            if name == "stderr":
                logger.info(f"[MCP Server stderr] {text}")
            else:
                logger.debug(f"[MCP Server stdout] {text}")

    async def _watch_exit(self, process: asyncio.subprocess.Process) -> None:
        returncode = await process.wait()
        if returncode < 0:
            logger.info(f"MCP Server process killed by signal {-returncode}")
        else:
            logger.info(f"MCP Server process exited with code {returncode}")

        if self._process is process:
            self._process = None
            self._last_returncode = returncode

    async def __aenter__(self) -> "ProcessSupervisor":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.deactivate()
