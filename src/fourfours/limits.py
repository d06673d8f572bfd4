"""
Resource limits for expression parsing and evaluation.

These limits protect against resource exhaustion (deep recursion,
combinatorial blow-up of factorials and powers) and fix the rendering
precision of non-terminating results.
"""

from dataclasses import dataclass
from typing import Optional

from .errors import LimitExceededError


@dataclass(frozen=True)
class ExpressionLimits:
    """Expression limits configuration."""

    # Maximum expression string length in characters
    max_expression_length: int = 4096

    # Maximum nesting (brackets and prefix operators) while parsing
    max_ast_depth: int = 64

    # Maximum number of AST nodes
    max_ast_nodes: int = 1024

    # Maximum decimal digits of a Sum operand
    max_sum_digits: int = 12

    # Maximum decimal digits of a Factorial operand
    max_factorial_digits: int = 2

    # Maximum decimal digits of an exponent (sign excluded)
    max_exponent_digits: int = 4

    # Fractional digits kept when rendering a non-terminating value
    decimal_places: int = 20

    # Longest result a puzzle check shows untruncated
    max_result_length: int = 16


# Default expression limits.
DEFAULT_EXPRESSION_LIMITS = ExpressionLimits()


def check_expression_length(
    expression: str, limits: Optional[ExpressionLimits] = None
) -> None:
    """Validates that expression length is within limits."""
    limits = limits or DEFAULT_EXPRESSION_LIMITS
    if len(expression) > limits.max_expression_length:
        raise LimitExceededError(
            "expression length", limits.max_expression_length, len(expression)
        )


def check_ast_depth(
    depth: int,
    limits: Optional[ExpressionLimits] = None,
    position: Optional[int] = None,
    expression: Optional[str] = None,
) -> None:
    """Validates nesting depth during parsing."""
    limits = limits or DEFAULT_EXPRESSION_LIMITS
    if depth > limits.max_ast_depth:
        raise LimitExceededError(
            "nesting depth", limits.max_ast_depth, depth, position, expression
        )


def check_ast_node_count(
    count: int, limits: Optional[ExpressionLimits] = None
) -> None:
    """Validates AST node count after parsing."""
    limits = limits or DEFAULT_EXPRESSION_LIMITS
    if count > limits.max_ast_nodes:
        raise LimitExceededError("AST node count", limits.max_ast_nodes, count)
