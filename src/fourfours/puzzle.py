"""
Puzzle rule check.

Evaluates a player's input and reports the rendered result, the error
that blocks it from counting as an answer, and the first puzzle rule it
breaks.
"""

import re
from dataclasses import dataclass
from typing import Optional

from .errors import ExpressionError
from .evaluator import evaluate
from .limits import DEFAULT_EXPRESSION_LIMITS, ExpressionLimits
from .numeric import format_digits
from .tokenizer import ALLOWED_CHARACTERS, SYMBOL_SUBSTITUTIONS

WARNING_EMPTY = "Input something above"
WARNING_ONLY_FOURS = "Only the number 4 is allowed in the expression"
WARNING_FOUR_FOURS = "You must use exactly four 4s in the expression"
WARNING_NOT_MATCH = "Not match"

ERROR_NOT_INTEGER = "Result is not an integer"
ERROR_TOO_LONG = "Result is too long"

_OTHER_DIGITS = re.compile(r"[0-35-9]")


@dataclass
class PuzzleCheck:
    """Outcome of checking one puzzle input."""

    expression: str
    """The input with characters outside the language dropped."""

    result: Optional[str] = None
    """The rendered result, truncated when it is not a valid answer."""

    error: Optional[str] = None
    """Why the result does not count as an answer."""

    warning: Optional[str] = None
    """The first puzzle rule the input breaks."""


def truncate(text: str, length: int) -> str:
    """Cuts text to ``length`` characters, marking the cut with ``...``."""
    if len(text) <= length:
        return text
    return text[:length] + "..."


def sanitize(raw: str) -> str:
    """Drops whitespace and every character outside the language."""
    chars = []
    for ch in raw:
        ch = SYMBOL_SUBSTITUTIONS.get(ch, ch).upper()
        if ch in ALLOWED_CHARACTERS:
            chars.append(ch)
    return "".join(chars)


def check_expression(
    expression: str,
    target: Optional[int] = None,
    limits: Optional[ExpressionLimits] = None,
) -> PuzzleCheck:
    """
    Checks a puzzle input against the four fours rules.

    Args:
        expression: The input as typed
        target: The number the input should produce, if any
        limits: Optional expression limits

    Returns:
        The puzzle check with result, error and warning
    """
    limits = limits or DEFAULT_EXPRESSION_LIMITS
    check = PuzzleCheck(expression=sanitize(expression))
    source = check.expression

    if source:
        try:
            value = evaluate(source, limits)
        except ExpressionError as error:
            check.error = str(error)
        else:
            if "." in value:
                check.result = truncate(value, limits.max_result_length)
                check.error = ERROR_NOT_INTEGER
            elif len(value) > limits.max_result_length:
                check.result = truncate(value, limits.max_result_length)
                check.error = ERROR_TOO_LONG
            else:
                check.result = value

    if not source:
        check.warning = WARNING_EMPTY
    elif _OTHER_DIGITS.search(source):
        check.warning = WARNING_ONLY_FOURS
    elif source.count("4") != 4:
        check.warning = WARNING_FOUR_FOURS
    elif target is not None and check.result and check.result != format_digits(target):
        check.warning = WARNING_NOT_MATCH

    return check
