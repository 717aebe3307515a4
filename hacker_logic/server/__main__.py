#!/usr/bin/env python3
"""
Entry point of the spawned MCP server process.

Run with ``python -m hacker_logic.server``. stdout carries the protocol,
so logging goes to stderr.
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from .config.config_manager import config_manager
from .core.exceptions import ConfigurationError
from .mcp_server import ModularMCPServer

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_logging(level: int = logging.INFO) -> None:
    """Send log records to stderr so they never mix with protocol traffic."""
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr, force=True)


def serve(config_path: Optional[str] = None) -> int:
    """Load configuration and serve on stdio. Returns the process exit code."""
    configure_logging()

    try:
        config = config_manager.load_config(config_path)
    except ConfigurationError as e:
        logger.error(str(e))
        return 1

    logging.getLogger().setLevel(config.mcp.log_level.to_logging_level())
    for warning in config_manager.validate_environment():
        logger.warning(warning)

    server = ModularMCPServer(config)
    try:
        asyncio.run(server.run())
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        return 1
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="hacker-logic-server",
        description="Hacker Logic MCP server (stdio transport)"
    )
    parser.add_argument("--config", help="Path to a JSON configuration file")
    args = parser.parse_args(argv)
    return serve(args.config)


if __name__ == "__main__":
    sys.exit(main())
