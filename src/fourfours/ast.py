"""
Abstract Syntax Tree (AST) node types for the four fours language.

The AST is produced by the parser and consumed by the evaluator and the
display formatter. Subtraction has no node of its own: the parser folds
``a - b`` into ``Add(a, Negate(b))``.
"""

from abc import ABC
from dataclasses import dataclass
from typing import Literal, Sequence, Union

# ============================================================
# Operator Types
# ============================================================

UnaryOperator = Literal["Sum", "Root", "Factorial", "Negate"]

BinaryOperator = Literal["Add", "Multiply", "Divide", "Power"]


# ============================================================
# AST Node Types
# ============================================================


@dataclass(frozen=True)
class AstNodeBase(ABC):
    """Base class for all AST nodes."""

    position: int
    """Position in the normalized expression (for error reporting)."""


@dataclass(frozen=True)
class ConstantNode(AstNodeBase):
    """Integer literal node."""

    value: int

    @property
    def type(self) -> Literal["Constant"]:
        return "Constant"


@dataclass(frozen=True)
class DecimalConstantNode(AstNodeBase):
    """Decimal literal node (e.g., 4.4, .4, .(4))."""

    integer_part: str
    """Digits before the point; empty for literals such as ``.4``."""

    fraction_digits: str
    """Digits after the point, or the repeating block."""

    repeating: bool
    """Whether ``fraction_digits`` repeats infinitely."""

    @property
    def type(self) -> Literal["DecimalConstant"]:
        return "DecimalConstant"

    @property
    def literal(self) -> str:
        if self.repeating:
            return f"{self.integer_part}.({self.fraction_digits})"
        return f"{self.integer_part}.{self.fraction_digits}"


@dataclass(frozen=True)
class UnaryOpNode(AstNodeBase):
    """Unary operator node."""

    operator: UnaryOperator
    operand: "AstNode"

    @property
    def type(self) -> Literal["UnaryOp"]:
        return "UnaryOp"


@dataclass(frozen=True)
class BinaryOpNode(AstNodeBase):
    """Binary operator node folding one or more operands."""

    operator: BinaryOperator
    operands: Sequence["AstNode"]

    @property
    def type(self) -> Literal["BinaryOp"]:
        return "BinaryOp"


# Union type for all AST nodes
AstNode = Union[
    ConstantNode,
    DecimalConstantNode,
    UnaryOpNode,
    BinaryOpNode,
]


def node_kind(node: AstNode) -> str:
    """Returns the operator name of an operation, or the type of a leaf."""
    if node.type in ("UnaryOp", "BinaryOp"):
        return node.operator  # type: ignore[union-attr]
    return node.type


# ============================================================
# AST Utilities
# ============================================================


def count_ast_nodes(node: AstNode) -> int:
    """Counts the total number of nodes in an AST."""
    count = 1

    if node.type in ("Constant", "DecimalConstant"):
        return count

    if node.type == "UnaryOp":
        node = node  # type: UnaryOpNode
        return count + count_ast_nodes(node.operand)

    if node.type == "BinaryOp":
        node = node  # type: BinaryOpNode
        for operand in node.operands:
            count += count_ast_nodes(operand)
        return count

    return count


def calculate_ast_depth(node: AstNode) -> int:
    """Calculates the maximum depth of an AST."""
    if node.type in ("Constant", "DecimalConstant"):
        return 1

    if node.type == "UnaryOp":
        node = node  # type: UnaryOpNode
        return 1 + calculate_ast_depth(node.operand)

    if node.type == "BinaryOp":
        node = node  # type: BinaryOpNode
        return 1 + max(calculate_ast_depth(operand) for operand in node.operands)

    return 1


def ast_to_string(node: AstNode, indent: int = 0) -> str:
    """Returns a human-readable representation of an AST node for debugging."""
    prefix = "  " * indent

    if node.type == "Constant":
        node = node  # type: ConstantNode
        return f"{prefix}Constant: {node.value}"

    if node.type == "DecimalConstant":
        node = node  # type: DecimalConstantNode
        return f"{prefix}DecimalConstant: {node.literal}"

    if node.type == "UnaryOp":
        node = node  # type: UnaryOpNode
        return f"{prefix}{node.operator}:\n{ast_to_string(node.operand, indent + 1)}"

    if node.type == "BinaryOp":
        node = node  # type: BinaryOpNode
        operands_str = "\n".join(ast_to_string(o, indent + 1) for o in node.operands)
        return f"{prefix}{node.operator}:\n{operands_str}"

    return f"{prefix}Unknown: {node}"
