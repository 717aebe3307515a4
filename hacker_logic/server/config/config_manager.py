"""
Configuration manager for the Hacker Logic MCP server.

Configuration is assembled from an optional JSON file and environment
variables (environment wins), then validated with pydantic. The GitHub token
is never logged; ``get_sanitized_config`` is the only view meant for output.
"""

import json
import logging
import os
from typing import Dict, Any, List, Mapping, Optional

from pydantic import BaseModel, Field, ConfigDict, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from ..core.enums import FileOperation, LogLevel
from ..core.exceptions import ConfigurationError
from ..registry.tool_registry import DEFAULT_ENABLED_TOOLS
from ..security.security_manager import DEFAULT_MAX_FILE_SIZE, SecurityManager

logger = logging.getLogger(__name__)

DEFAULT_SERVER_NAME = "hacker-logic-mcp-server"
DEFAULT_SERVER_VERSION = "1.0.0"


class SecurityConfig(BaseModel):
    """Workspace sandbox configuration."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
        extra='forbid'
    )

    workspace_root: str = Field(default_factory=os.getcwd, description="Workspace root directory", min_length=1)
    max_file_size: int = Field(default=DEFAULT_MAX_FILE_SIZE, description="Maximum file size in bytes", gt=0)
    strict_path_validation: bool = Field(default=True, description="Reject suspicious path substrings")
    allow_absolute_paths: bool = Field(default=False, description="Accept absolute paths inside the workspace")
    allowed_operations: List[FileOperation] = Field(
        default_factory=lambda: list(FileOperation),
        description="Enabled file operations"
    )
    max_expression_length: int = Field(default=1000, description="Maximum calculate expression length", gt=0)

    @field_validator("allowed_operations", mode="before")
    @classmethod
    def split_operations(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value


class MCPConfig(BaseModel):
    """MCP server identity and runtime options."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
        extra='forbid'
    )

    name: str = Field(default=DEFAULT_SERVER_NAME, description="Server name", min_length=1)
    version: str = Field(default=DEFAULT_SERVER_VERSION, description="Server version", min_length=1)
    log_level: LogLevel = Field(default=LogLevel.INFO, description="Log level")
    enabled_tools: List[str] = Field(
        default_factory=lambda: list(DEFAULT_ENABLED_TOOLS),
        description="Tools registered at startup"
    )

    @field_validator("enabled_tools", mode="before")
    @classmethod
    def split_tools(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value


class GitHubConfig(BaseModel):
    """GitHub integration settings."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra='forbid'
    )

    personal_access_token: Optional[str] = Field(None, description="GitHub personal access token", repr=False)
    toolsets: str = Field(default="", description="Enabled GitHub toolsets")
    read_only: bool = Field(default=True, description="Restrict GitHub access to read operations")


class ServerConfig(BaseModel):
    """Complete server configuration."""

    model_config = ConfigDict(extra='forbid')

    security: SecurityConfig = Field(default_factory=SecurityConfig)
    mcp: MCPConfig = Field(default_factory=MCPConfig)
    github: GitHubConfig = Field(default_factory=GitHubConfig)

    def create_security_manager(self) -> SecurityManager:
        """Build the security manager described by this configuration."""
        return SecurityManager(
            workspace_root=self.security.workspace_root,
            max_file_size=self.security.max_file_size,
            allowed_operations=[op.value for op in self.security.allowed_operations],
            strict_path_validation=self.security.strict_path_validation,
            allow_absolute_paths=self.security.allow_absolute_paths,
            max_expression_length=self.security.max_expression_length,
        )


# section -> field -> environment variable names, first set one wins
ENVIRONMENT_VARIABLES: Dict[str, Dict[str, List[str]]] = {
    "security": {
        "workspace_root": ["WORKSPACE_ROOT", "MCP_WORKSPACE_ROOT"],
        "max_file_size": ["MAX_FILE_SIZE", "MCP_MAX_FILE_SIZE"],
        "strict_path_validation": ["STRICT_PATH_VALIDATION"],
        "allow_absolute_paths": ["ALLOW_ABSOLUTE_PATHS"],
        "allowed_operations": ["ALLOWED_OPERATIONS"],
        "max_expression_length": ["MAX_EXPRESSION_LENGTH"],
    },
    "mcp": {
        "name": ["MCP_SERVER_NAME"],
        "version": ["MCP_SERVER_VERSION"],
        "log_level": ["MCP_LOG_LEVEL"],
        "enabled_tools": ["MCP_ENABLED_TOOLS"],
    },
    "github": {
        "personal_access_token": ["GITHUB_PERSONAL_ACCESS_TOKEN"],
        "toolsets": ["GITHUB_TOOLSETS"],
        "read_only": ["GITHUB_READ_ONLY"],
    },
}


class ConfigManager:
    """
    Loads, validates and caches the server configuration.

    Usage:
        config = ConfigManager.get_instance().load_config("hacker-logic.json")
        security = config.create_security_manager()
    """

    _instance: Optional["ConfigManager"] = None

    def __init__(self):
        self._config: Optional[ServerConfig] = None

    @classmethod
    def get_instance(cls) -> "ConfigManager":
        """Get the process-wide configuration manager."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def load_config(
        self,
        config_path: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None
    ) -> ServerConfig:
        """
        Load configuration from a JSON file and the environment.

        Args:
            config_path: Optional JSON file; a missing file is ignored
            environ: Environment mapping (defaults to ``os.environ``)

        Returns:
            Validated configuration (cached after the first successful load)

        Raises:
            ConfigurationError: If the file or any value is invalid
        """
        if self._config is not None:
            return self._config

        env = os.environ if environ is None else environ

        try:
            raw = self._load_from_file(config_path) if config_path else {}
            for section, values in self._load_from_environment(env).items():
                merged = dict(raw.get(section) or {})
                for field_name, value in values.items():
                    # Drop any file-provided spelling of the same field
                    merged.pop(to_camel(field_name), None)
                    merged[field_name] = value
                raw[section] = merged

            self._config = ServerConfig.model_validate(raw)

        except ValidationError as e:
            message = "; ".join(
                f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            logger.error(f"Error loading configuration: {message}")
            raise ConfigurationError(f"Configuration error: {message}")
        except (OSError, ValueError) as e:
            logger.error(f"Error loading configuration: {e}")
            raise ConfigurationError(f"Configuration error: {e}")

        logger.info("Configuration loaded successfully")
        logger.info(f"Workspace: {self._display_path(self._config.security.workspace_root)}")
        logger.info(
            f"GitHub integration: {'enabled' if self._config.github.personal_access_token else 'disabled'}"
        )
        return self._config

    def _load_from_environment(self, env: Mapping[str, str]) -> Dict[str, Dict[str, Any]]:
        values: Dict[str, Dict[str, Any]] = {}
        for section, fields in ENVIRONMENT_VARIABLES.items():
            for field_name, names in fields.items():
                for name in names:
                    value = env.get(name)
                    if value is not None and value != "":
                        values.setdefault(section, {})[field_name] = value
                        break
        return values

    def _load_from_file(self, config_path: str) -> Dict[str, Any]:
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            logger.warning(f"Config file not found: {config_path}")
            return {}
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {config_path}: {e}")

        if not isinstance(data, dict):
            raise ValueError(f"Config file must contain a JSON object: {config_path}")
        return data

    def get_config(self) -> ServerConfig:
        """
        Get the loaded configuration.

        Raises:
            ConfigurationError: If ``load_config`` has not been called
        """
        if self._config is None:
            raise ConfigurationError("Configuration not loaded. Call load_config() first.")
        return self._config

    def get_sanitized_config(self) -> Dict[str, Any]:
        """Get configuration safe for logging (no token, no absolute workspace path)."""
        if self._config is None:
            return {}

        security = self._config.security.model_dump(mode="json")
        security["workspace_root"] = self._display_path(self._config.security.workspace_root)

        return {
            "security": security,
            "mcp": self._config.mcp.model_dump(mode="json"),
            "github": {
                "has_token": bool(self._config.github.personal_access_token),
                "toolsets": self._config.github.toolsets,
                "read_only": self._config.github.read_only,
            },
        }

    def validate_environment(self, environ: Optional[Mapping[str, str]] = None) -> List[str]:
        """Return warnings about missing optional environment variables."""
        env = os.environ if environ is None else environ
        warnings: List[str] = []

        if not env.get("GITHUB_PERSONAL_ACCESS_TOKEN"):
            warnings.append("GITHUB_PERSONAL_ACCESS_TOKEN not set - GitHub integration will be disabled")

        if not env.get("WORKSPACE_ROOT") and not env.get("MCP_WORKSPACE_ROOT"):
            warnings.append("WORKSPACE_ROOT not set - using current directory")

        return warnings

    def reset(self) -> None:
        """Forget the cached configuration."""
        self._config = None

    @staticmethod
    def _display_path(absolute_path: str) -> str:
        cwd = os.getcwd()
        absolute_path = os.path.abspath(absolute_path)
        if absolute_path == cwd:
            return "./"
        if absolute_path.startswith(cwd + os.sep):
            return "./" + os.path.relpath(absolute_path, cwd)
        return "[EXTERNAL_PATH]"


config_manager = ConfigManager.get_instance()
