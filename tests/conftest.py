"""
Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests.
"""

import os
import pytest
from pathlib import Path

from hacker_logic.server.config.config_manager import ConfigManager, ServerConfig, SecurityConfig
from hacker_logic.server.security.security_manager import SecurityManager


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Create a small workspace tree for testing."""
    root = tmp_path / "workspace"
    root.mkdir()
    (root / "hello.txt").write_text("Hello, workspace!\n", encoding="utf-8")
    (root / "src").mkdir()
    (root / "src" / "main.py").write_text("print('hi')\n", encoding="utf-8")
    (root / "docs").mkdir()
    return Path(os.path.realpath(root))


@pytest.fixture
def security_manager(workspace: Path) -> SecurityManager:
    """Create a security manager rooted at the test workspace."""
    return SecurityManager(workspace_root=str(workspace))


@pytest.fixture
def server_config(workspace: Path) -> ServerConfig:
    """Create a server configuration rooted at the test workspace."""
    return ServerConfig(security=SecurityConfig(workspace_root=str(workspace)))


@pytest.fixture
def config_manager() -> ConfigManager:
    """Create a fresh (non-singleton) configuration manager."""
    return ConfigManager()


@pytest.fixture(autouse=True)
def reset_global_config():
    """Keep the module-level configuration manager from leaking between tests."""
    yield
    ConfigManager.get_instance().reset()
