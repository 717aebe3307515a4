"""
Test cases for the process supervisor.

The supervised child is a short Python script run by the current
interpreter, so these tests spawn real processes.
"""

import asyncio
import logging
import signal
import sys
import pytest
from pathlib import Path
from typing import Dict, List, Optional

from hacker_logic.host.process_supervisor import ProcessSupervisor
from hacker_logic.host.server_provider import MCPServerDefinition, MCPServerProvider
from hacker_logic.server.core.exceptions import ServerStartError

SLEEPER = "import time; time.sleep(60)"


class ScriptProvider(MCPServerProvider):
    """Provider launching an inline Python script instead of the MCP server."""

    def __init__(self, script: str, command: Optional[str] = None, env: Optional[Dict[str, str]] = None):
        super().__init__()
        self.script = script
        self.command = command or sys.executable
        self.env = env or {"HACKER_LOGIC_ENV": "test"}

    def provide_server_definitions(self) -> List[MCPServerDefinition]:
        return [MCPServerDefinition(command=self.command, args=["-c", self.script], env=self.env)]


async def wait_until(predicate, timeout: float = 5.0) -> None:
    """Poll ``predicate`` until it holds or fail the test."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            pytest.fail("Condition not met in time")
        await asyncio.sleep(0.05)


class TestProcessSupervisor:
    """Test cases for ProcessSupervisor."""

    async def test_start_and_stop(self):
        supervisor = ProcessSupervisor(ScriptProvider(SLEEPER))
        process = await supervisor.start()

        assert supervisor.is_running
        assert supervisor.pid == process.pid

        returncode = await supervisor.stop()

        assert returncode == -signal.SIGTERM
        assert not supervisor.is_running
        assert supervisor.pid is None
        assert supervisor.process is None
        assert supervisor.returncode == -signal.SIGTERM
        assert process.returncode is not None

    async def test_stop_without_process(self):
        supervisor = ProcessSupervisor(ScriptProvider(SLEEPER))
        assert await supervisor.stop() is None
        await supervisor.deactivate()
        assert supervisor.returncode is None

    async def test_restart_replaces_process(self):
        supervisor = ProcessSupervisor(ScriptProvider(SLEEPER))
        first = await supervisor.start()
        second = await supervisor.start()

        try:
            assert first.returncode is not None
            assert second.returncode is None
            assert supervisor.pid == second.pid != first.pid
        finally:
            await supervisor.deactivate()

        assert second.returncode is not None

    async def test_forced_kill_after_timeout(self, tmp_path: Path):
        marker = tmp_path / "ready"
        script = (
            "import signal, time, pathlib\n"
            "signal.signal(signal.SIGTERM, signal.SIG_IGN)\n"
            f"pathlib.Path({str(marker)!r}).touch()\n"
            "time.sleep(60)\n"
        )
        supervisor = ProcessSupervisor(ScriptProvider(script), stop_timeout=0.5)
        await supervisor.start()
        await wait_until(marker.exists)

        returncode = await supervisor.stop()

        assert returncode == -signal.SIGKILL
        assert not supervisor.is_running

    async def test_stop_timeout_override(self, tmp_path: Path):
        marker = tmp_path / "ready"
        script = (
            "import signal, time, pathlib\n"
            "signal.signal(signal.SIGTERM, signal.SIG_IGN)\n"
            f"pathlib.Path({str(marker)!r}).touch()\n"
            "time.sleep(60)\n"
        )
        supervisor = ProcessSupervisor(ScriptProvider(script), stop_timeout=60)
        await supervisor.start()
        await wait_until(marker.exists)

        assert await supervisor.stop(timeout=0.2) == -signal.SIGKILL

    async def test_exit_clears_handle(self):
        supervisor = ProcessSupervisor(ScriptProvider("import sys; sys.exit(3)"))
        await supervisor.start()

        assert await supervisor.wait() == 3
        await wait_until(lambda: supervisor.process is None)

        assert not supervisor.is_running
        assert supervisor.returncode == 3
        assert await supervisor.stop() is None

    async def test_spawn_failure(self, tmp_path: Path):
        supervisor = ProcessSupervisor(ScriptProvider(SLEEPER, command=str(tmp_path / "missing-binary")))

        with pytest.raises(ServerStartError, match="Failed to start MCP server"):
            await supervisor.start()

        assert supervisor.process is None
        assert not supervisor.is_running

    async def test_environment_passed(self, tmp_path: Path):
        output = tmp_path / "env.txt"
        script = f"import os, pathlib; pathlib.Path({str(output)!r}).write_text(os.environ['HACKER_LOGIC_ENV'])"
        supervisor = ProcessSupervisor(ScriptProvider(script, env={"HACKER_LOGIC_ENV": "production"}))
        await supervisor.start()
        await supervisor.wait()

        assert output.read_text() == "production"

    async def test_stderr_logged(self, caplog):
        caplog.set_level(logging.INFO, logger="hacker_logic.host.process_supervisor")
        script = "import sys; sys.stderr.write('server warming up\\n'); sys.stderr.flush()"
        supervisor = ProcessSupervisor(ScriptProvider(script))
        await supervisor.start()
        await supervisor.wait()

        await wait_until(lambda: "[MCP Server stderr] server warming up" in caplog.text)

    async def test_context_manager(self):
        async with ProcessSupervisor(ScriptProvider(SLEEPER)) as supervisor:
            process = supervisor.process
            assert supervisor.is_running

        assert process.returncode is not None
        assert not supervisor.is_running

    async def test_output_logged_per_line(self, caplog):
        caplog.set_level(logging.INFO, logger="hacker_logic.host.process_supervisor")
        script = "import sys; sys.stderr.write('first\\nsecond\\n'); sys.stderr.flush()"
        supervisor = ProcessSupervisor(ScriptProvider(script))
        await supervisor.start()
        await supervisor.wait()

        def forwarded():
            return [r.getMessage() for r in caplog.records if r.getMessage().startswith("[MCP Server stderr]")]

        await wait_until(lambda: len(forwarded()) >= 2)
        assert forwarded() == ["[MCP Server stderr] first", "[MCP Server stderr] second"]

    async def test_overlong_line_skipped(self, caplog):
        caplog.set_level(logging.INFO, logger="hacker_logic.host.process_supervisor")
        script = "import sys; sys.stderr.write('x' * 200000 + '\\nafter\\n'); sys.stderr.flush()"
        supervisor = ProcessSupervisor(ScriptProvider(script))
        await supervisor.start()
        await supervisor.wait()

        await wait_until(lambda: "[MCP Server stderr] after" in caplog.text)
        assert "[MCP Server stderr] line too long, discarded" in caplog.text
