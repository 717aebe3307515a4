"""
Enumerations for the Hacker Logic MCP server.

This module defines the enums used by the tool handlers and configuration,
giving each tool's operation set a single, typed definition.
"""

import logging
from enum import Enum


class FileOperation(str, Enum):
    """File operation enumeration.

    Defines the operations accepted by the ``file_operation`` tool:
    - READ: Read a text file
    - WRITE: Write a text file, creating parent directories
    - LIST: List the entries of a directory
    """
    READ = "read"
    WRITE = "write"
    LIST = "list"

    def __str__(self) -> str:
        return self.value


class SystemInfoType(str, Enum):
    """System information category enumeration."""
    OS = "os"
    CPU = "cpu"
    MEMORY = "memory"
    DISK = "disk"
    NETWORK = "network"
    ALL = "all"

    def __str__(self) -> str:
        return self.value


class GitOperation(str, Enum):
    """Git operation enumeration.

    Defines the git subcommands the ``git`` tool is allowed to run.
    """
    STATUS = "status"
    LOG = "log"
    BRANCH = "branch"
    DIFF = "diff"
    ADD = "add"
    COMMIT = "commit"
    PUSH = "push"
    PULL = "pull"

    def __str__(self) -> str:
        return self.value


class ProcessOperation(str, Enum):
    """Process operation enumeration.

    Defines the operations accepted by the ``process`` tool:
    - LIST: Top processes by CPU, optionally filtered
    - INFO: All processes matching a filter
    - KILL: Send a signal to a single process
    """
    LIST = "list"
    INFO = "info"
    KILL = "kill"

    def __str__(self) -> str:
        return self.value


class ContentType(str, Enum):
    """Tool result content type."""
    TEXT = "text"
    IMAGE = "image"
    RESOURCE = "resource"

    def __str__(self) -> str:
        return self.value


class LogLevel(str, Enum):
    """Server log level enumeration."""
    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    DEBUG = "debug"

    def to_logging_level(self) -> int:
        """Map to the corresponding ``logging`` module level."""
        return {
            LogLevel.ERROR: logging.ERROR,
            LogLevel.WARN: logging.WARNING,
            LogLevel.INFO: logging.INFO,
            LogLevel.DEBUG: logging.DEBUG,
        }[self]

    def __str__(self) -> str:
        return self.value
