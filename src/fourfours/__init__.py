"""
Four fours expression engine.

This package parses, evaluates and formats expressions of the four fours
puzzle with exact arithmetic, and searches answers for target numbers.
"""

# Answers
from .answers import MAX_ANSWER, AnswerSolver, get_answer

# Core types and utilities
from .ast import (
    AstNode,
    AstNodeBase,
    BinaryOperator,
    BinaryOpNode,
    ConstantNode,
    DecimalConstantNode,
    UnaryOperator,
    UnaryOpNode,
    ast_to_string,
    calculate_ast_depth,
    count_ast_nodes,
    node_kind,
)

# Display
from .display import DisplayFormatter, needs_brackets, to_display_markup
from .errors import (
    EvaluationError,
    ExpressionError,
    ExpressionSyntaxError,
    InternalError,
    LimitExceededError,
    ParseError,
    TokenizerError,
)

# Evaluator
from .evaluator import (
    EvaluationResult,
    Evaluator,
    evaluate,
    try_evaluate,
)
from .limits import (
    DEFAULT_EXPRESSION_LIMITS,
    ExpressionLimits,
    check_ast_depth,
    check_ast_node_count,
    check_expression_length,
)

# Parser
from .parser import (
    Parser,
    parse,
)

# Puzzle rules
from .puzzle import PuzzleCheck, check_expression
from .simplify import remove_redundant_parentheses

# Tokenizer
from .tokenizer import (
    Token,
    Tokenizer,
    TokenType,
    normalize,
    tokenize,
)

__all__ = [
    # AST types
    "AstNode",
    "AstNodeBase",
    "ConstantNode",
    "DecimalConstantNode",
    "UnaryOpNode",
    "BinaryOpNode",
    "UnaryOperator",
    "BinaryOperator",
    "node_kind",
    "count_ast_nodes",
    "calculate_ast_depth",
    "ast_to_string",
    # Errors
    "ExpressionError",
    "ExpressionSyntaxError",
    "TokenizerError",
    "ParseError",
    "LimitExceededError",
    "EvaluationError",
    "InternalError",
    # Limits
    "ExpressionLimits",
    "DEFAULT_EXPRESSION_LIMITS",
    "check_expression_length",
    "check_ast_depth",
    "check_ast_node_count",
    # Tokenizer
    "Token",
    "TokenType",
    "Tokenizer",
    "normalize",
    "tokenize",
    # Parser
    "Parser",
    "parse",
    # Evaluator
    "EvaluationResult",
    "Evaluator",
    "evaluate",
    "try_evaluate",
    # Display
    "DisplayFormatter",
    "needs_brackets",
    "to_display_markup",
    # Answers
    "MAX_ANSWER",
    "AnswerSolver",
    "get_answer",
    "remove_redundant_parentheses",
    # Puzzle rules
    "PuzzleCheck",
    "check_expression",
]
