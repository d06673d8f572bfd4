"""
Display formatter.

Projects an AST onto KaTeX markup. Brackets are decided purely by the
(parent kind, child kind) pair, never by values, so the same tree always
renders the same way.
"""

import logging
from typing import Dict, FrozenSet, Optional, cast

from .ast import (
    AstNode,
    BinaryOpNode,
    ConstantNode,
    DecimalConstantNode,
    UnaryOpNode,
    node_kind,
)
from .errors import InternalError
from .limits import ExpressionLimits
from .numeric import format_digits
from .parser import parse

logger = logging.getLogger(__name__)

# Child kinds that get wrapped in brackets, per parent kind. Under Power
# this applies to the base only.
WRAPPED_CHILDREN: Dict[str, FrozenSet[str]] = {
    "Add": frozenset(),
    "Multiply": frozenset({"Add", "Negate"}),
    "Divide": frozenset(),
    "Power": frozenset(
        {"Add", "Multiply", "Divide", "Power", "Negate", "Factorial", "Sum"}
    ),
    "Negate": frozenset({"Add", "Negate"}),
    "Sum": frozenset({"Add", "Multiply", "Divide", "Power", "Negate"}),
    "Root": frozenset(),
    "Factorial": frozenset(
        {
            "DecimalConstant",
            "Add",
            "Multiply",
            "Divide",
            "Power",
            "Negate",
            "Factorial",
            "Sum",
            "Root",
        }
    ),
}


def needs_brackets(parent_kind: str, child_kind: str) -> bool:
    """Whether a child of the given kind is bracketed under the given parent."""
    return child_kind in WRAPPED_CHILDREN.get(parent_kind, frozenset())


class DisplayFormatter:
    """Formats an AST as KaTeX markup."""

    def format(self, node: AstNode) -> str:
        node_type = node.type

        if node_type == "Constant":
            return format_digits(cast(ConstantNode, node).value)

        if node_type == "DecimalConstant":
            n = cast(DecimalConstantNode, node)
            if n.repeating:
                return f"{n.integer_part}.\\overline{{{n.fraction_digits}}}"
            return f"{n.integer_part}.{n.fraction_digits}"

        if node_type == "UnaryOp":
            return self._format_unary_op(cast(UnaryOpNode, node))

        if node_type == "BinaryOp":
            return self._format_binary_op(cast(BinaryOpNode, node))

        raise InternalError(f"unexpected expression node: {node!r}")

    def _child(self, parent_kind: str, child: AstNode) -> str:
        markup = self.format(child)
        if needs_brackets(parent_kind, node_kind(child)):
            return f"\\left({markup}\\right)"
        return markup

    def _format_unary_op(self, node: UnaryOpNode) -> str:
        operator = node.operator

        if operator == "Negate":
            return f"-{self._child(operator, node.operand)}"
        if operator == "Sum":
            return f"\\Sigma {self._child(operator, node.operand)}"
        if operator == "Root":
            return f"\\sqrt{{{self._child(operator, node.operand)}}}"
        if operator == "Factorial":
            return f"{self._child(operator, node.operand)}!"

        raise InternalError(f"unexpected unary operator: {operator!r}")

    def _format_binary_op(self, node: BinaryOpNode) -> str:
        operator = node.operator
        operands = node.operands

        if operator == "Add":
            parts = []
            for index, operand in enumerate(operands):
                if operand.type == "UnaryOp" and operand.operator == "Negate":
                    # Subtraction: a - b is stored as a + Negate(b)
                    negated = self._child("Negate", operand.operand)
                    parts.append(f"-{negated}" if index == 0 else f" - {negated}")
                else:
                    markup = self._child(operator, operand)
                    parts.append(markup if index == 0 else f" + {markup}")
            return "".join(parts)

        if operator == "Multiply":
            if len(operands) == 1:
                # Lone numerator or denominator of a Divide
                return self.format(operands[0])
            return " \\times ".join(self._child(operator, o) for o in operands)

        if operator == "Divide":
            numerator, denominator = operands
            return (
                f"\\frac{{{self._child(operator, numerator)}}}"
                f"{{{self._child(operator, denominator)}}}"
            )

        if operator == "Power":
            base, exponent = operands
            # The braces already group the exponent; only the base is wrapped
            return f"{self._child(operator, base)}^{{{self.format(exponent)}}}"

        raise InternalError(f"unexpected binary operator: {operator!r}")


def to_display_markup(source: str, limits: Optional[ExpressionLimits] = None) -> str:
    """
    Converts an expression string into KaTeX markup.

    Never raises: any failure to parse or format yields an empty string.
    """
    try:
        return DisplayFormatter().format(parse(source, limits))
    except Exception as error:
        logger.debug(
            "display_markup_failed", extra={"expression": source, "error": str(error)}
        )
        return ""
