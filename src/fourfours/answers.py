"""
Four fours answer search.

Finds, for a target integer, one expression that uses exactly four 4s and
evaluates to the target.

The search tabulates every value reachable with one, two and three fours
(digit literals and decimals, combined with + - * / ^ and closed under R,
S and small factorials), keeping the first expression found per value.
Values are exact fractions and the tables are pruned by magnitude. An
answer for four fours is then found by inverting the last binary
operation against the smaller table, optionally under one final R, S or
!. A few targets need longer unary chains on a single four than the
tables hold; those come from KNOWN_ANSWERS. Every answer is checked with
the evaluator before it is returned.
"""

import logging
import math
from dataclasses import dataclass
from fractions import Fraction
from functools import lru_cache
from typing import Dict, Iterator, List, Optional, Tuple

from .evaluator import try_evaluate
from .limits import ExpressionLimits

logger = logging.getLogger(__name__)

# Largest target served by get_answer
MAX_ANSWER = 3000

# Binding strength of an expression string, used to place brackets
PRIMARY = 4  # literal, bracketed expression, postfix !
PREFIX = 3  # R x, S x
POWER = 2
PRODUCT = 1
SUM = 0

LITERALS: Dict[int, Tuple[str, ...]] = {
    1: ("4", ".4", ".(4)"),
    2: ("44", "4.4", ".44", "4.(4)"),
    3: ("444", "44.4", "4.44", ".444", "44.(4)"),
    4: ("4444", "444.4", "44.44", "4.444", ".4444"),
}

MAX_NUMERATOR = 10**7
MAX_DENOMINATOR = 10**4
MAX_SUM_OPERAND = 4000
MAX_FACTORIAL_OPERAND = 10
MAX_SEARCH_EXPONENT = 20
UNARY_ROUNDS = 3

OPERATORS = ("+", "-", "*", "/", "^")

# Targets outside the search, built on S(SR4)! = 21, SS(SR4)! = 231 and
# (SR4)!! = 720
KNOWN_ANSWERS: Dict[int, str] = {
    2227: "SS(S(SR4)!-S4)+4*4",
    2379: "S(S4!-SS(SR4)!)-S(4+4)",
    2459: "S(S4!-SS(SR4)!)+44",
    2587: "S(SS4+(SR4)!)+(SR4)!!-4!",
    2617: "S(4!*SR4)-S(SR4)!+S4",
    2669: "(S(S(SR4)!*(SR4)!)+(SR4)!)/SR4",
    2867: "S(S4!/4)+S(SR4)!-4",
    2879: "(SR4)!!*4-4/4",
    2933: "S(SS4+S(SR4)!)+S(SR4)!/SR4",
}


@dataclass(frozen=True)
class Candidate:
    """An expression string together with its binding strength."""

    expression: str
    level: int


Table = Dict[Fraction, Candidate]


def _literal_value(literal: str) -> Fraction:
    integer_part, point, fraction = literal.partition(".")
    whole = Fraction(int(integer_part or "0"))
    if not point:
        return whole
    if fraction.startswith("("):
        block = fraction[1:-1]
        return whole + Fraction(int(block), 10 ** len(block) - 1)
    return whole + Fraction(int(fraction), 10 ** len(fraction))


def _in_bounds(value: Fraction) -> bool:
    return abs(value.numerator) <= MAX_NUMERATOR and value.denominator <= MAX_DENOMINATOR


def _wrap(candidate: Candidate, level: int) -> str:
    if candidate.level >= level:
        return candidate.expression
    return f"({candidate.expression})"


def _exact_sqrt(value: Fraction) -> Optional[Fraction]:
    if value < 0:
        return None
    numerator = math.isqrt(value.numerator)
    denominator = math.isqrt(value.denominator)
    if numerator * numerator != value.numerator:
        return None
    if denominator * denominator != value.denominator:
        return None
    return Fraction(numerator, denominator)


def _exact_root(value: Fraction, degree: int) -> Optional[Fraction]:
    """Rational ``degree``-th root of value, if one exists."""
    if degree < 0:
        if value == 0:
            return None
        value, degree = 1 / value, -degree
    if value < 0:
        if degree % 2 == 0:
            return None
        root = _exact_root(-value, degree)
        return -root if root is not None else None

    parts = []
    for part in (value.numerator, value.denominator):
        guess = round(part ** (1.0 / degree))
        found = None
        for candidate in (guess - 1, guess, guess + 1):
            if candidate >= 0 and candidate**degree == part:
                found = candidate
        if found is None:
            return None
        parts.append(found)
    return Fraction(parts[0], parts[1])


def _power(base: Fraction, exponent: Fraction) -> Optional[Fraction]:
    if exponent.denominator != 1:
        return None
    e = int(exponent)
    if abs(e) > MAX_SEARCH_EXPONENT or (base == 0 and e <= 0):
        return None
    digits = max(len(str(abs(base.numerator))), len(str(base.denominator)))
    if abs(base) != 1 and (digits - 1) * abs(e) > 8:
        return None
    return base**e


def _apply(operator: str, left: Fraction, right: Fraction) -> Optional[Fraction]:
    if operator == "+":
        return left + right
    if operator == "-":
        return left - right
    if operator == "*":
        return left * right
    if operator == "/":
        return left / right if right != 0 else None
    return _power(left, right)


def _format(operator: str, left: Candidate, right: Candidate) -> Candidate:
    if operator == "+":
        return Candidate(f"{left.expression}+{right.expression}", SUM)
    if operator == "-":
        return Candidate(f"{left.expression}-{_wrap(right, PRODUCT)}", SUM)
    if operator == "*":
        return Candidate(f"{_wrap(left, PRODUCT)}*{_wrap(right, PRODUCT)}", PRODUCT)
    if operator == "/":
        return Candidate(f"{_wrap(left, PRODUCT)}/{_wrap(right, POWER)}", PRODUCT)
    return Candidate(f"{_wrap(left, PREFIX)}^{_wrap(right, POWER)}", POWER)


def _unary_variants(
    value: Fraction, candidate: Candidate
) -> Iterator[Tuple[Fraction, Candidate]]:
    root = _exact_sqrt(value)
    if root is not None:
        yield root, Candidate(f"R{_wrap(candidate, PREFIX)}", PREFIX)

    if value.denominator != 1 or value < 0:
        return
    n = int(value)
    if n <= MAX_SUM_OPERAND:
        yield Fraction(n * (n + 1) // 2), Candidate(f"S{_wrap(candidate, PREFIX)}", PREFIX)
    if n <= MAX_FACTORIAL_OPERAND:
        yield Fraction(math.factorial(n)), Candidate(f"{_wrap(candidate, PRIMARY)}!", PRIMARY)


def _unary_preimages(target: Fraction) -> Iterator[Tuple[Fraction, str]]:
    """Operand values that one final unary operator maps onto the target."""
    if target < 0 or target.denominator != 1:
        return
    t = int(target)

    yield Fraction(t * t), "R"

    m = (math.isqrt(8 * t + 1) - 1) // 2
    if m * (m + 1) // 2 == t:
        yield Fraction(m), "S"

    for k in range(MAX_FACTORIAL_OPERAND + 1):
        if math.factorial(k) == t:
            yield Fraction(k), "!"
            break


class AnswerSolver:
    """Searches four fours expressions for target integers."""

    def __init__(self, limits: Optional[ExpressionLimits] = None):
        self._limits = limits
        self._tables: Dict[int, Table] = {}
        self._answers: Dict[int, str] = {}

    def table(self, count: int) -> Table:
        """Values reachable with ``count`` fours (1 to 3)."""
        if count not in self._tables:
            self._tables[count] = self._build_table(count)
            logger.debug(
                "answer_table_built",
                extra={"fours": count, "size": len(self._tables[count])},
            )
        return self._tables[count]

    def _build_table(self, count: int) -> Table:
        table: Table = {}
        for literal in LITERALS[count]:
            table.setdefault(_literal_value(literal), Candidate(literal, PRIMARY))

        for left_count in range(1, count):
            left_table = self.table(left_count)
            right_table = self.table(count - left_count)
            for left_value, left in left_table.items():
                for right_value, right in right_table.items():
                    for operator in OPERATORS:
                        value = _apply(operator, left_value, right_value)
                        if value is None or value in table or not _in_bounds(value):
                            continue
                        table[value] = _format(operator, left, right)

        self._close_unary(table)
        return table

    def _close_unary(self, table: Table) -> None:
        frontier = list(table.items())
        for _ in range(UNARY_ROUNDS):
            added: List[Tuple[Fraction, Candidate]] = []
            for value, candidate in frontier:
                for new_value, new_candidate in _unary_variants(value, candidate):
                    if new_value in table or not _in_bounds(new_value):
                        continue
                    table[new_value] = new_candidate
                    added.append((new_value, new_candidate))
            frontier = added

    def _binary_candidates(self, target: Fraction) -> Iterator[Candidate]:
        """Four-four expressions whose last operation is binary."""
        for left_count in (1, 2, 3):
            left_table = self.table(left_count)
            right_table = self.table(4 - left_count)

            if len(left_table) <= len(right_table):
                for left_value, left in left_table.items():
                    for operator, right_value in self._solve_right(target, left_value):
                        right = right_table.get(right_value)
                        if right is not None:
                            yield _format(operator, left, right)
            else:
                for right_value, right in right_table.items():
                    for operator, left_value in self._solve_left(target, right_value):
                        left = left_table.get(left_value)
                        if left is not None:
                            yield _format(operator, left, right)

    @staticmethod
    def _solve_right(target: Fraction, left: Fraction) -> Iterator[Tuple[str, Fraction]]:
        """Right operands r with ``left op r == target``."""
        yield "+", target - left
        yield "-", left - target
        if left != 0:
            yield "*", target / left
        if target != 0:
            yield "/", left / target
        if left.denominator == 1 and abs(left) >= 2 and target.denominator == 1:
            exponent, value = 1, left
            while abs(value) < abs(target) and exponent < MAX_SEARCH_EXPONENT:
                exponent += 1
                value *= left
            if value == target:
                yield "^", Fraction(exponent)

    @staticmethod
    def _solve_left(target: Fraction, right: Fraction) -> Iterator[Tuple[str, Fraction]]:
        """Left operands l with ``l op right == target``."""
        yield "+", target - right
        yield "-", target + right
        if right != 0:
            yield "*", target / right
            yield "/", target * right
        if right.denominator == 1 and 0 < abs(right) <= MAX_SEARCH_EXPONENT:
            root = _exact_root(target, int(right))
            if root is not None:
                yield "^", root

    def candidates(self, target: Fraction) -> Iterator[str]:
        """Candidate expressions for the target, best first."""
        if target.denominator == 1 and int(target) in KNOWN_ANSWERS:
            yield KNOWN_ANSWERS[int(target)]

        for literal in LITERALS[4]:
            if _literal_value(literal) == target:
                yield literal

        for candidate in self._binary_candidates(target):
            yield candidate.expression

        for operand_value, operator in _unary_preimages(target):
            for candidate in self._binary_candidates(operand_value):
                if operator == "!":
                    yield f"{_wrap(candidate, PRIMARY)}!"
                else:
                    yield f"{operator}{_wrap(candidate, PREFIX)}"

    def solve(self, target: int) -> str:
        """Returns a verified four fours expression for target, or ``""``."""
        if target in self._answers:
            return self._answers[target]

        expected = str(target)
        answer = ""
        for expression in self.candidates(Fraction(target)):
            result = try_evaluate(expression, self._limits)
            if result.success and result.value == expected:
                answer = expression
                break

        if answer:
            logger.debug("answer_found", extra={"target": target, "answer": answer})
        else:
            logger.debug("answer_not_found", extra={"target": target})
        self._answers[target] = answer
        return answer


@lru_cache(maxsize=1)
def _default_solver() -> AnswerSolver:
    return AnswerSolver()


def get_answer(number: int) -> str:
    """
    Returns a four fours expression that evaluates to ``number``.

    Targets outside ``[0, MAX_ANSWER]`` and targets the search cannot
    reach yield an empty string.
    """
    if isinstance(number, bool) or not isinstance(number, int):
        return ""
    if number < 0 or number > MAX_ANSWER:
        return ""
    return _default_solver().solve(number)
