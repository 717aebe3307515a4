"""
Core interfaces for the Hacker Logic MCP server.

This module defines the contract every tool handler implements and the
security context handlers consult before touching the filesystem or
running commands.
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, Optional, Sequence, Type, TypeVar, Protocol, runtime_checkable

from pydantic import BaseModel, ValidationError

from .models import ToolResult, ToolDefinition
from .exceptions import ToolExecutionError

ArgsModel = TypeVar("ArgsModel", bound=BaseModel)


@runtime_checkable
class SecurityContext(Protocol):
    """Security boundary shared by the tool handlers."""

    workspace_root: str
    max_file_size: int
    max_expression_length: int
    allowed_operations: Sequence[str]

    def is_operation_allowed(self, operation: str) -> bool:
        ...

    def validate_path(self, requested_path: str) -> str:
        ...

    def validate_file_size(self, file_path: str) -> None:
        ...

    def validate_content_size(self, content: str) -> int:
        ...

    def sanitize_math_expression(self, expression: str) -> str:
        ...

    def sanitize_error_message(self, message: str) -> str:
        ...


class BaseToolHandler(ABC):
    """Abstract base class for tool handlers.

    A handler exposes one named operation with a declared JSON input schema.
    Handlers never raise out of ``execute``: failures are reported as error
    results so the MCP client always receives a readable message.
    """

    def __init__(
        self,
        name: str,
        description: str,
        input_schema: Dict[str, Any],
        security: Optional[SecurityContext] = None
    ):
        self.name = name
        self.description = description
        self.input_schema = input_schema
        self._security = security

    @property
    def security(self) -> SecurityContext:
        """Security context the handler was built with.

        Raises:
            ToolExecutionError: If the handler was created without one
        """
        if self._security is None:
            raise ToolExecutionError("Security context not configured", tool_name=self.name)
        return self._security

    @abstractmethod
    async def execute(self, arguments: Optional[Dict[str, Any]]) -> ToolResult:
        """Execute the tool.

        Args:
            arguments: Raw tool arguments from the ``tools/call`` request

        Returns:
            Tool result (``is_error`` set on failure)
        """
        pass

    def definition(self) -> ToolDefinition:
        """Get the tool definition advertised to clients."""
        return ToolDefinition(
            name=self.name,
            description=self.description,
            input_schema=self.input_schema
        )

    def parse_arguments(self, model: Type[ArgsModel], arguments: Optional[Dict[str, Any]]) -> ArgsModel:
        """Validate raw arguments against an argument model.

        Raises:
            ToolExecutionError: If the arguments do not match the model
        """
        try:
            return model.model_validate(arguments or {})
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(part) for part in err['loc']) or 'arguments'}: {err['msg']}"
                for err in e.errors()
            )
            raise ToolExecutionError(f"Invalid arguments: {problems}", tool_name=self.name)

    def create_success_result(self, text: str) -> ToolResult:
        """Wrap text in a successful result."""
        return ToolResult.success(text)

    def create_error_result(self, error: Any) -> ToolResult:
        """Wrap an error (exception or message) in an error result."""
        message = error.message if hasattr(error, "message") else str(error)
        return ToolResult.failure(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"
