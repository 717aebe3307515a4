"""
Tool registry package.
"""

from .tool_registry import (
    ToolRegistry,
    create_default_handlers,
    BUILTIN_TOOL_FACTORIES,
    DEFAULT_ENABLED_TOOLS,
)

__all__ = [
    "ToolRegistry",
    "create_default_handlers",
    "BUILTIN_TOOL_FACTORIES",
    "DEFAULT_ENABLED_TOOLS",
]
