"""
Calculate tool: arithmetic evaluation with strict input sanitization.

Expressions are first reduced to digits and ``+ - * / ( ) .`` by the
security manager, then evaluated by walking the ``ast`` of the expression.
Only numeric constants, unary ``+``/``-`` and binary ``+ - * /`` nodes are
accepted; anything else is rejected before any arithmetic happens.
"""

import ast
import logging
import math
import operator
import re
from typing import Dict, Any, Optional, Union

from ..core.interfaces import BaseToolHandler, SecurityContext
from ..core.models import ToolResult, CalculateToolInput
from ..core.exceptions import ExpressionValidationError, ToolExecutionError

logger = logging.getLogger(__name__)

Number = Union[int, float]

_BINARY_OPERATORS = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
}

_UNARY_OPERATORS = {
    ast.UAdd: operator.pos,
    ast.USub: operator.neg,
}

# Zeros leading an integer part; Python rejects literals like 0123
_LEADING_ZEROS = re.compile(r"(?<![\d.])0+(?=\d)")


def _evaluate_node(node: ast.AST) -> Number:
    if isinstance(node, ast.Constant) and isinstance(node.value, (int, float)) \
            and not isinstance(node.value, bool):
        return node.value
    if isinstance(node, ast.UnaryOp) and type(node.op) in _UNARY_OPERATORS:
        return _UNARY_OPERATORS[type(node.op)](_evaluate_node(node.operand))
    if isinstance(node, ast.BinOp) and type(node.op) in _BINARY_OPERATORS:
        left = _evaluate_node(node.left)
        right = _evaluate_node(node.right)
        return _BINARY_OPERATORS[type(node.op)](left, right)
    raise ExpressionValidationError(f"Unsupported expression element: {type(node).__name__}")


def evaluate_expression(expression: str) -> Number:
    """
    Evaluate a sanitized arithmetic expression.

    Leading zeros are dropped, so ``0123`` reads as decimal 123.

    Raises:
        ExpressionValidationError: If the expression is malformed, uses an
            unsupported operator, or does not produce a finite number
    """
    try:
        tree = ast.parse(_LEADING_ZEROS.sub("", expression), mode="eval")
    except SyntaxError:
        raise ExpressionValidationError("Invalid expression syntax")

    try:
        result = _evaluate_node(tree.body)
    except ZeroDivisionError:
        raise ExpressionValidationError("Result is not a finite number")

    try:
        finite = math.isfinite(result)
    except OverflowError:
        finite = False
    if not finite:
        raise ExpressionValidationError("Result is not a finite number")

    return result


def format_number(value: Number) -> str:
    """Render integral floats without a trailing ``.0``."""
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return str(value)


class CalculateToolHandler(BaseToolHandler):
    """Handler for the ``calculate`` tool."""

    def __init__(self, security: SecurityContext):
        super().__init__(
            "calculate",
            "Perform mathematical calculations with strict security validation",
            {
                "type": "object",
                "properties": {
                    "expression": {
                        "type": "string",
                        "description": 'Mathematical expression to calculate (e.g., "2 + 2", "(10 + 5) * 2")',
                        "maxLength": 1000,
                    },
                },
                "required": ["expression"],
            },
            security,
        )

    async def execute(self, arguments: Optional[Dict[str, Any]]) -> ToolResult:
        try:
            args = self.parse_arguments(CalculateToolInput, arguments)
            sanitized = self.security.sanitize_math_expression(args.expression)
            result = format_number(evaluate_expression(sanitized))

            logger.info(f"{args.expression} = {result}")
            return self.create_success_result(f"{args.expression} = {result}")

        except (ExpressionValidationError, ToolExecutionError) as e:
            logger.error(f"Calculation rejected: {e.message}")
            return self.create_error_result(e)
        except Exception as e:
            logger.error(f"Calculation failed: {e}")
            return self.create_error_result(f"Calculation failed: {e}")
