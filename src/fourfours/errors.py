"""
Error types for the four fours expression engine.

All expression errors extend ExpressionError for consistent handling.
Syntax errors come from normalization, tokenization and parsing;
evaluation errors from the semantic checks of the evaluator. Internal
errors flag a defect in the engine itself and are never expected for
trees produced by the parser.
"""

from typing import Optional


class ExpressionError(Exception):
    """
    Base error class for all expression-related errors.
    """

    prefix: str = ""

    def __init__(
        self,
        message: str,
        position: Optional[int] = None,
        expression: Optional[str] = None,
    ):
        super().__init__(f"{self.prefix}: {message}" if self.prefix else message)
        self.message = message
        self.position = position
        self.expression = expression

    def format_with_context(self) -> str:
        """
        Returns a formatted error message with position context.
        """
        if self.expression is None or self.position is None:
            return str(self)

        pointer = " " * self.position + "^"
        return f"{self}\n  {self.expression}\n  {pointer}"


class ExpressionSyntaxError(ExpressionError):
    """
    Error thrown when the input is not a well-formed expression.
    """

    prefix = "syntax error"


class TokenizerError(ExpressionSyntaxError):
    """
    Error thrown during normalization and tokenization (lexical analysis).
    """

    pass


class ParseError(ExpressionSyntaxError):
    """
    Error thrown during parsing (syntax analysis).
    """

    pass


class LimitExceededError(ExpressionSyntaxError):
    """
    Error thrown when expression limits are exceeded.
    """

    def __init__(
        self,
        limit_name: str,
        limit: int,
        actual: int,
        position: Optional[int] = None,
        expression: Optional[str] = None,
    ):
        message = f"limit exceeded: {limit_name} (limit: {limit}, actual: {actual})"
        super().__init__(message, position, expression)
        self.limit_name = limit_name
        self.limit = limit
        self.actual = actual


class EvaluationError(ExpressionError):
    """
    Error thrown during evaluation for semantically invalid operands.
    """

    prefix = "evaluation error"


class InternalError(ExpressionError):
    """
    Error thrown when an engine invariant is violated.
    """

    prefix = "internal error"
