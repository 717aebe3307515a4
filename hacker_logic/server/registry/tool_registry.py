"""
Tool registry for managing MCP tool handlers.

This module provides the name-to-handler map the server dispatches
``tools/call`` requests through, plus the factory table for the built-in
tools.
"""

import logging
from typing import Callable, Dict, Iterable, Iterator, List, Optional
from threading import Lock

from ..core.interfaces import BaseToolHandler
from ..core.models import ToolDefinition
from ..core.exceptions import ToolNotFoundError
from ..security.security_manager import SecurityManager
from ..tools import (
    TimeToolHandler, CalculateToolHandler, FileOperationToolHandler,
    SystemInfoToolHandler, GitToolHandler, ProcessToolHandler
)

logger = logging.getLogger(__name__)

HandlerFactory = Callable[[SecurityManager], BaseToolHandler]

BUILTIN_TOOL_FACTORIES: Dict[str, HandlerFactory] = {
    "get_time": lambda security: TimeToolHandler(),
    "calculate": CalculateToolHandler,
    "file_operation": FileOperationToolHandler,
    "system_info": SystemInfoToolHandler,
    "git": GitToolHandler,
    "process": ProcessToolHandler,
}

DEFAULT_ENABLED_TOOLS: List[str] = list(BUILTIN_TOOL_FACTORIES.keys())


class ToolRegistry:
    """Registry for tool handlers.

    This class provides a centralized, thread-safe map from tool name to
    handler. Registration order is preserved so ``tools/list`` is stable.
    """

    def __init__(self):
        self._handlers: Dict[str, BaseToolHandler] = {}
        self._lock = Lock()

    def register(self, handler: BaseToolHandler) -> None:
        """Register a tool handler.

        Args:
            handler: The handler instance; its ``name`` is the registry key

        Raises:
            ValueError: If the handler name is empty
        """
        if not handler.name or not handler.name.strip():
            raise ValueError("Tool name cannot be empty")

        with self._lock:
            if handler.name in self._handlers:
                logger.warning(f"Overriding existing tool: {handler.name}")
            self._handlers[handler.name] = handler
            logger.info(f"Registered tool: {handler.name}")

    def unregister(self, name: str) -> bool:
        """Unregister a tool handler.

        Returns:
            True if the tool was removed, False if it was not registered
        """
        with self._lock:
            if name not in self._handlers:
                return False
            del self._handlers[name]
            logger.info(f"Unregistered tool: {name}")
            return True

    def get(self, name: str) -> Optional[BaseToolHandler]:
        """Get a handler by name, or None."""
        return self._handlers.get(name)

    def require(self, name: str) -> BaseToolHandler:
        """Get a handler by name.

        Raises:
            ToolNotFoundError: If no handler is registered under ``name``
        """
        handler = self._handlers.get(name)
        if handler is None:
            raise ToolNotFoundError(f"Unknown tool: {name}", tool_name=name)
        return handler

    def has(self, name: str) -> bool:
        """Check if a tool is registered."""
        return name in self._handlers

    def names(self) -> List[str]:
        """List registered tool names in registration order."""
        return list(self._handlers.keys())

    def list_definitions(self) -> List[ToolDefinition]:
        """Get the definitions of all registered tools."""
        return [handler.definition() for handler in self._handlers.values()]

    def __contains__(self, name: object) -> bool:
        return name in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)

    def __iter__(self) -> Iterator[BaseToolHandler]:
        return iter(list(self._handlers.values()))


def create_default_handlers(
    security: SecurityManager,
    enabled_tools: Optional[Iterable[str]] = None
) -> List[BaseToolHandler]:
    """Instantiate the enabled built-in tool handlers.

    Unknown tool names are logged and skipped.
    """
    handlers: List[BaseToolHandler] = []
    for tool_name in (DEFAULT_ENABLED_TOOLS if enabled_tools is None else enabled_tools):
        factory = BUILTIN_TOOL_FACTORIES.get(tool_name)
        if factory is None:
            logger.warning(f'Unknown tool "{tool_name}" skipped')
            continue
        handlers.append(factory(security))
    return handlers
