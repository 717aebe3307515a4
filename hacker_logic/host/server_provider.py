"""
Server definition provider.

Describes how the editor host launches the companion MCP server: which
interpreter, which module, and which extra environment variables.
"""

import logging
import os
import sys
from typing import Dict, Any, List, Optional

from pydantic import BaseModel, Field, ConfigDict

logger = logging.getLogger(__name__)

SERVER_MODULE = "hacker_logic.server"
SERVER_LABEL = "Hacker Logic MCP Server"
SERVER_ID = "hacker-logic"


class MCPServerDefinition(BaseModel):
    """How to launch an MCP server over stdio."""

    model_config = ConfigDict(
        str_strip_whitespace=True,
        validate_assignment=True,
        extra='forbid'
    )

    server_id: str = Field(default=SERVER_ID, description="Identifier used in client configuration", min_length=1)
    label: str = Field(default=SERVER_LABEL, description="Human-readable label", min_length=1)
    command: str = Field(..., description="Executable to run", min_length=1)
    args: List[str] = Field(default_factory=list, description="Command arguments")
    env: Dict[str, str] = Field(default_factory=dict, description="Extra environment variables")
    cwd: Optional[str] = Field(None, description="Working directory for the process")

    def argv(self) -> List[str]:
        """Full command line."""
        return [self.command, *self.args]

    def to_client_config(self) -> Dict[str, Any]:
        """Render as an ``mcpServers`` client configuration."""
        server: Dict[str, Any] = {
            "command": self.command,
            "args": list(self.args),
            "env": dict(self.env),
        }
        if self.cwd:
            server["cwd"] = self.cwd
        return {"mcpServers": {self.server_id: server}}


class MCPServerProvider:
    """
    Provides the server definitions the host can launch.

    Usage:
        provider = MCPServerProvider(workspace_root="/path/to/project")
        definition = provider.provide_server_definitions()[0]
    """

    def __init__(
        self,
        python_executable: Optional[str] = None,
        workspace_root: Optional[str] = None,
        config_path: Optional[str] = None,
        extra_env: Optional[Dict[str, str]] = None
    ):
        self.python_executable = python_executable or sys.executable
        self.workspace_root = os.path.abspath(workspace_root) if workspace_root else None
        self.config_path = os.path.abspath(config_path) if config_path else None
        self.extra_env = dict(extra_env or {})

    def provide_server_definitions(self) -> List[MCPServerDefinition]:
        """Get the definitions of every server this host offers."""
        args = ["-m", SERVER_MODULE]
        if self.config_path:
            args.extend(["--config", self.config_path])

        env = {"HACKER_LOGIC_ENV": "production"}
        if self.workspace_root:
            env["WORKSPACE_ROOT"] = self.workspace_root
        env.update(self.extra_env)

        return [
            MCPServerDefinition(
                command=self.python_executable,
                args=args,
                env=env,
                cwd=self.workspace_root,
            )
        ]

    def resolve_server_definition(self, definition: MCPServerDefinition) -> MCPServerDefinition:
        """Resolve a definition just before launch. Definitions need no late binding."""
        return definition
