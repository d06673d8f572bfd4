"""
Redundant bracket removal.
"""

import logging
from typing import List, Optional, Tuple

from .errors import ExpressionError
from .evaluator import evaluate
from .limits import ExpressionLimits
from .tokenizer import normalize

logger = logging.getLogger(__name__)


def _bracket_pairs(expression: str) -> List[Tuple[int, int]]:
    """Positions of matching bracket pairs, in order of their closing bracket."""
    openings: List[int] = []
    pairs: List[Tuple[int, int]] = []
    for index, ch in enumerate(expression):
        if ch == "(":
            openings.append(index)
        elif ch == ")" and openings:
            pairs.append((openings.pop(), index))
    return pairs


def _without_pair(expression: str, start: int, end: int) -> str:
    return expression[:start] + expression[start + 1 : end] + expression[end + 1 :]


def remove_redundant_parentheses(
    expression: str, limits: Optional[ExpressionLimits] = None
) -> str:
    """
    Drops every bracket pair whose removal keeps the evaluated result.

    Pairs are tried innermost first; after each successful removal the
    scan starts over on the shorter expression, until no pair can be
    removed. Candidates that no longer parse or evaluate are skipped.

    Args:
        expression: The expression string
        limits: Optional expression limits

    Returns:
        The normalized expression with redundant brackets removed

    Raises:
        ExpressionError: If the input expression itself does not evaluate
    """
    current = normalize(expression)
    expected = evaluate(current, limits)

    removed = True
    while removed:
        removed = False
        for start, end in _bracket_pairs(current):
            candidate = _without_pair(current, start, end)
            try:
                value = evaluate(candidate, limits)
            except ExpressionError:
                continue
            if value == expected:
                current = candidate
                removed = True
                break

    logger.debug(
        "redundant_brackets_removed",
        extra={"expression": expression, "simplified": current},
    )
    return current
