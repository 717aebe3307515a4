#!/usr/bin/env python3
"""
Command-line interface for Hacker Logic.

Subcommands:
    serve       Run the MCP server on stdio
    definition  Print the server definition as JSON
    start       Spawn and supervise the server until interrupted
    check       Launch the server and probe it over MCP
    config      Print the sanitized configuration
"""

import argparse
import asyncio
import json
import logging
import signal
import sys
from typing import List, Optional

from .host.health_check import DEFAULT_PROBE_TIMEOUT, check_server_health
from .host.process_supervisor import DEFAULT_STOP_TIMEOUT, ProcessSupervisor
from .host.server_provider import MCPServerProvider
from .server.__main__ import LOG_FORMAT, serve
from .server.config.config_manager import config_manager
from .server.core.exceptions import ConfigurationError, HackerLogicError

logger = logging.getLogger(__name__)


def _provider(args: argparse.Namespace) -> MCPServerProvider:
    return MCPServerProvider(
        workspace_root=getattr(args, "workspace", None),
        config_path=getattr(args, "config", None),
    )


def cmd_serve(args: argparse.Namespace) -> int:
    return serve(args.config)


def cmd_definition(args: argparse.Namespace) -> int:
    definitions = _provider(args).provide_server_definitions()
    print(json.dumps([definition.model_dump() for definition in definitions], indent=2))
    return 0


async def _supervise(supervisor: ProcessSupervisor) -> Optional[int]:
    loop = asyncio.get_running_loop()
    stop_requested = asyncio.Event()
    installed = []

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop_requested.set)
            installed.append(sig)
        except (NotImplementedError, RuntimeError):
            logger.debug(f"Signal handler for {sig.name} not installed")

    try:
        await supervisor.start()
        exited = asyncio.create_task(supervisor.wait())
        interrupted = asyncio.create_task(stop_requested.wait())
        done, pending = await asyncio.wait({exited, interrupted}, return_when=asyncio.FIRST_COMPLETED)
        for task in pending:
            task.cancel()

        if exited in done:
            logger.warning(f"MCP server exited with code {exited.result()}")
            return exited.result()
        return None
    finally:
        await supervisor.deactivate()
        for sig in installed:
            loop.remove_signal_handler(sig)


def cmd_start(args: argparse.Namespace) -> int:
    supervisor = ProcessSupervisor(_provider(args), stop_timeout=args.timeout)
    try:
        returncode = asyncio.run(_supervise(supervisor))
    except HackerLogicError as e:
        logger.error(e.message)
        return 1

    if returncode not in (None, 0):
        return 1
    return 0


def cmd_check(args: argparse.Namespace) -> int:
    definition = _provider(args).provide_server_definitions()[0]
    report = asyncio.run(check_server_health(definition, timeout=args.timeout))
    print(report.summary())
    return 0 if report.healthy else 1


def cmd_config(args: argparse.Namespace) -> int:
    try:
        config_manager.load_config(args.config)
    except ConfigurationError as e:
        logger.error(e.message)
        return 1

    print(json.dumps(config_manager.get_sanitized_config(), indent=2))
    for warning in config_manager.validate_environment():
        logger.warning(warning)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hacker-logic",
        description="Hacker Logic MCP server and supervisor"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser("serve", help="Run the MCP server on stdio")
    serve_parser.add_argument("--config", help="Path to a JSON configuration file")
    serve_parser.set_defaults(func=cmd_serve)

    for name, func, help_text in (
        ("definition", cmd_definition, "Print the server definition as JSON"),
        ("start", cmd_start, "Spawn and supervise the MCP server until interrupted"),
        ("check", cmd_check, "Launch the MCP server and run a health probe"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("--workspace", help="Workspace root passed to the server")
        sub.add_argument("--config", help="Configuration file passed to the server")
        sub.set_defaults(func=func)
        if name == "start":
            sub.add_argument(
                "--timeout", type=float, default=DEFAULT_STOP_TIMEOUT,
                help="Seconds to wait after SIGTERM before killing the server"
            )
        elif name == "check":
            sub.add_argument(
                "--timeout", type=float, default=DEFAULT_PROBE_TIMEOUT,
                help="Seconds allowed for the health probe"
            )

    config_parser = subparsers.add_parser("config", help="Print the sanitized configuration")
    config_parser.add_argument("--config", help="Path to a JSON configuration file")
    config_parser.set_defaults(func=cmd_config)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command != "serve":
        logging.basicConfig(
            level=logging.DEBUG if args.verbose else logging.INFO,
            format=LOG_FORMAT,
            stream=sys.stderr
        )

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
