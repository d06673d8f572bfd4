"""
Expression evaluator.

Reduces an AST bottom-up to an exact value through the numeric backend
and renders the final value as a decimal string.

Numeric policy:
- S and ! need non-negative integer operands of bounded size.
- R needs a non-negative operand; irrational results stay symbolic.
- ^ needs an integer exponent of bounded size; 0^0 is undefined.
- Division by an exact zero is an error, also when reached through 0^-n.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, cast

from . import numeric
from .ast import (
    AstNode,
    BinaryOpNode,
    ConstantNode,
    DecimalConstantNode,
    UnaryOpNode,
)
from .errors import EvaluationError, ExpressionError, InternalError
from .limits import DEFAULT_EXPRESSION_LIMITS, ExpressionLimits
from .numeric import ExactValue
from .parser import parse
from .tokenizer import normalize

logger = logging.getLogger(__name__)


@dataclass
class EvaluationResult:
    """Result of expression evaluation."""

    value: Optional[str]
    """The rendered value."""

    success: bool
    """Whether evaluation succeeded."""

    error: Optional[str] = None
    """Error message if evaluation failed."""

    error_kind: Optional[str] = None
    """Name of the error class if evaluation failed."""


class Evaluator:
    """Evaluates an AST node and returns its exact value."""

    def __init__(
        self,
        limits: Optional[ExpressionLimits] = None,
        source: Optional[str] = None,
    ):
        self._limits = limits or DEFAULT_EXPRESSION_LIMITS
        self._source = source

    def evaluate(self, node: AstNode) -> ExactValue:
        """Evaluates an AST node and returns the exact value."""
        node_type = getattr(node, "type", None)

        if node_type == "Constant":
            return self._evaluate_constant(cast(ConstantNode, node))

        if node_type == "DecimalConstant":
            n = cast(DecimalConstantNode, node)
            return numeric.decimal_fraction(n.integer_part, n.fraction_digits, n.repeating)

        if node_type == "UnaryOp":
            n = cast(UnaryOpNode, node)
            return self._evaluate_unary_op(n)

        if node_type == "BinaryOp":
            n = cast(BinaryOpNode, node)
            return self._evaluate_binary_op(n)

        raise InternalError(f"unexpected expression node: {node!r}")

    def render(self, value: ExactValue) -> str:
        """Renders an exact value as a canonical decimal string."""
        return numeric.render(value, self._limits.decimal_places)

    def _error(self, message: str, node: AstNode) -> EvaluationError:
        return EvaluationError(message, node.position, self._source)

    def _evaluate_constant(self, node: ConstantNode) -> ExactValue:
        if isinstance(node.value, bool) or not isinstance(node.value, int):
            raise InternalError(f"constant must hold an integer: {node.value!r}")
        return numeric.integer(node.value)

    def _require_integer(
        self,
        value: ExactValue,
        node: AstNode,
        what: str,
        max_digits: int,
        allow_negative: bool = False,
    ) -> int:
        """Checks that an operand is a (non-negative) integer of bounded size."""
        integer = numeric.as_integer(value)
        if integer is None:
            raise self._error(f"{what} must be an integer", node)
        if integer < 0 and not allow_negative:
            raise self._error(f"{what} must be non-negative", node)
        if numeric.digit_count(integer) > max_digits:
            raise self._error(f"{what} is too large (max {max_digits} digits)", node)
        return integer

    def _evaluate_unary_op(self, node: UnaryOpNode) -> ExactValue:
        """Evaluates a unary operation."""
        operand = self.evaluate(node.operand)
        operator = node.operator

        if operator == "Sum":
            n = self._require_integer(
                operand, node, "operand of S operator", self._limits.max_sum_digits
            )
            return numeric.triangular(n)

        if operator == "Factorial":
            n = self._require_integer(
                operand, node, "operand of ! operator", self._limits.max_factorial_digits
            )
            return numeric.factorial(n)

        if operator == "Root":
            if numeric.is_negative(operand):
                raise self._error("operand of R operator must be non-negative", node)
            return numeric.square_root(operand)

        if operator == "Negate":
            return -operand

        raise InternalError(f"unexpected unary operator: {operator!r}", node.position)

    def _evaluate_binary_op(self, node: BinaryOpNode) -> ExactValue:
        """Evaluates a binary operation."""
        operator = node.operator
        if not node.operands:
            raise InternalError(f"{operator} node without operands", node.position)

        values = [self.evaluate(operand) for operand in node.operands]

        if operator == "Add":
            result = values[0]
            for value in values[1:]:
                result = result + value
            return result

        if operator == "Multiply":
            result = values[0]
            for value in values[1:]:
                result = result * value
            return result

        if operator == "Divide":
            return self._evaluate_divide(node, values)

        if operator == "Power":
            return self._evaluate_power(node, values)

        raise InternalError(f"unexpected binary operator: {operator!r}", node.position)

    def _evaluate_divide(
        self, node: BinaryOpNode, values: Sequence[ExactValue]
    ) -> ExactValue:
        result = values[0]
        for divisor, operand in zip(values[1:], node.operands[1:]):
            if numeric.is_zero(divisor):
                raise self._error("division by zero", operand)
            result = result / divisor
        return result

    def _evaluate_power(
        self, node: BinaryOpNode, values: Sequence[ExactValue]
    ) -> ExactValue:
        if len(values) != 2:
            raise InternalError(
                f"Power node needs 2 operands, got {len(values)}", node.position
            )

        base, exponent_value = values
        exponent = self._require_integer(
            exponent_value,
            node.operands[1],
            "exponent",
            self._limits.max_exponent_digits,
            allow_negative=True,
        )

        if numeric.is_zero(base):
            if exponent == 0:
                raise self._error("zero to the power of zero is undefined", node)
            if exponent < 0:
                raise self._error("division by zero", node)

        return numeric.power(base, exponent)


def evaluate(source: str, limits: Optional[ExpressionLimits] = None) -> str:
    """
    Parses and evaluates an expression string.

    Args:
        source: The expression string
        limits: Optional expression limits

    Returns:
        The value as an integer string or a terminating decimal string

    Raises:
        ExpressionSyntaxError: If the expression is malformed
        EvaluationError: If an operand is semantically invalid
        InternalError: If an engine invariant is violated
    """
    normalized = normalize(source)
    ast = parse(normalized, limits)
    evaluator = Evaluator(limits, normalized)
    value = evaluator.render(evaluator.evaluate(ast))
    logger.debug(
        "expression_evaluated", extra={"expression": normalized, "value": value}
    )
    return value


def try_evaluate(
    source: str, limits: Optional[ExpressionLimits] = None
) -> EvaluationResult:
    """
    Evaluates an expression string without raising.

    Args:
        source: The expression string
        limits: Optional expression limits

    Returns:
        The evaluation result with value and success status
    """
    try:
        return EvaluationResult(value=evaluate(source, limits), success=True)
    except ExpressionError as error:
        if isinstance(error, InternalError):
            logger.error(
                "internal_evaluation_error",
                extra={"expression": source, "error": str(error)},
                exc_info=True,
            )
        return EvaluationResult(
            value=None,
            success=False,
            error=str(error),
            error_kind=type(error).__name__,
        )
