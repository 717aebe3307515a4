"""
Test cases for the command-line interface.
"""

import json
import sys
import pytest
from unittest.mock import AsyncMock, patch

from hacker_logic import cli
from hacker_logic.host.health_check import HealthReport
from hacker_logic.server.core.exceptions import ServerStartError


class TestParser:
    """Test cases for argument parsing."""

    def test_command_required(self):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args([])

    def test_start_timeout(self):
        args = cli.build_parser().parse_args(["start", "--timeout", "2.5"])
        assert args.timeout == 2.5
        assert args.func is cli.cmd_start

    def test_check_defaults(self):
        args = cli.build_parser().parse_args(["check"])
        assert args.timeout == 30.0
        assert args.workspace is None


class TestCommands:
    """Test cases for the subcommands."""

    def test_definition(self, capsys, tmp_path):
        assert cli.main(["definition", "--workspace", str(tmp_path)]) == 0

        definitions = json.loads(capsys.readouterr().out)
        assert definitions[0]["command"] == sys.executable
        assert definitions[0]["args"] == ["-m", "hacker_logic.server"]
        assert definitions[0]["env"]["HACKER_LOGIC_ENV"] == "production"
        assert definitions[0]["env"]["WORKSPACE_ROOT"] == str(tmp_path)

    def test_config(self, capsys, workspace, monkeypatch):
        monkeypatch.setenv("GITHUB_PERSONAL_ACCESS_TOKEN", "ghp_secret")
        monkeypatch.setenv("WORKSPACE_ROOT", str(workspace))

        assert cli.main(["config"]) == 0

        output = capsys.readouterr().out
        assert "ghp_secret" not in output
        sanitized = json.loads(output)
        assert sanitized["github"]["has_token"] is True
        assert sanitized["mcp"]["name"] == "hacker-logic-mcp-server"

    def test_config_invalid(self, monkeypatch):
        monkeypatch.setenv("MAX_FILE_SIZE", "not-a-number")
        assert cli.main(["config"]) == 1

    def test_check_healthy(self, capsys):
        report = HealthReport(healthy=True, tools=["get_time"], probe_output="ok", duration_ms=5)
        with patch("hacker_logic.cli.check_server_health", new_callable=AsyncMock, return_value=report) as probe:
            assert cli.main(["check", "--timeout", "3"]) == 0

        assert probe.await_args.kwargs["timeout"] == 3.0
        assert "MCP server is healthy" in capsys.readouterr().out

    def test_check_unhealthy(self, capsys):
        report = HealthReport(healthy=False, error="server exited")
        with patch("hacker_logic.cli.check_server_health", new_callable=AsyncMock, return_value=report):
            assert cli.main(["check"]) == 1

        assert "MCP server test failed: server exited" in capsys.readouterr().out

    def test_start_exits_with_server(self):
        with patch("hacker_logic.cli._supervise", new_callable=AsyncMock, return_value=0):
            assert cli.main(["start"]) == 0

    def test_start_server_crash(self):
        with patch("hacker_logic.cli._supervise", new_callable=AsyncMock, return_value=2):
            assert cli.main(["start"]) == 1

    def test_start_failure(self):
        with patch("hacker_logic.cli._supervise", new_callable=AsyncMock,
                   side_effect=ServerStartError("Failed to start MCP server: boom")):
            assert cli.main(["start"]) == 1

    def test_serve_delegates(self):
        with patch("hacker_logic.cli.serve", return_value=0) as serve:
            assert cli.main(["serve", "--config", "cfg.json"]) == 0
        serve.assert_called_once_with("cfg.json")


class TestSupervise:
    """Test cases for the supervision loop used by ``start``."""

    async def test_returns_when_server_exits(self):
        supervisor = AsyncMock()
        supervisor.wait.return_value = 4

        assert await cli._supervise(supervisor) == 4
        supervisor.start.assert_awaited_once()
        supervisor.deactivate.assert_awaited_once()

    async def test_deactivates_on_start_failure(self):
        supervisor = AsyncMock()
        supervisor.start.side_effect = ServerStartError("Failed to start MCP server: boom")

        with pytest.raises(ServerStartError):
            await cli._supervise(supervisor)
        supervisor.deactivate.assert_awaited_once()
