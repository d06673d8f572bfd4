"""
Exact-arithmetic backend.

A thin adaptor over sympy: integers, rationals and radicals stay exact
through evaluation and are only turned into a decimal string at the very
end. Floating point is never used to decide a value.
"""

from typing import Optional, Tuple

import sympy

ExactValue = sympy.Expr

# Digit strings are converted in blocks below the interpreter's int/str
# conversion cap
_DIGIT_BLOCK = 1000


def integer(value: int) -> ExactValue:
    """Returns the exact value of an integer literal."""
    return sympy.Integer(value)


def decimal_fraction(
    integer_part: str, fraction_digits: str, repeating: bool
) -> ExactValue:
    """
    Returns the exact value of a decimal literal.

    ``4.4`` is 44/10. A repeating block ``r`` of length k is r/(10^k - 1),
    so ``.(4)`` is 4/9 and ``4.(4)`` is 4 + 4/9.
    """
    whole = sympy.Integer(parse_digits(integer_part or "0"))
    digits = parse_digits(fraction_digits)
    scale = 10 ** len(fraction_digits)
    if repeating:
        return whole + sympy.Rational(digits, scale - 1)
    return whole + sympy.Rational(digits, scale)


def canonical(value: ExactValue) -> ExactValue:
    """Collapses expressions that are rational but not yet in rational form."""
    if value.is_Rational or value.is_rational is False:
        return value
    simplified = sympy.simplify(value)
    if simplified.is_Rational:
        return simplified
    return value


def as_integer(value: ExactValue) -> Optional[int]:
    """Returns the value as an int, or None if it is not an integer."""
    value = canonical(value)
    if value.is_Integer:
        return int(value)
    return None


def is_zero(value: ExactValue) -> bool:
    if value.is_zero is not None:
        return bool(value.is_zero)
    return value.equals(0) is True


def is_negative(value: ExactValue) -> bool:
    if value.is_negative is not None:
        return bool(value.is_negative)
    if is_zero(value):
        return False
    return bool(value.evalf() < 0)


def digit_count(value: int) -> int:
    """Number of decimal digits of an integer, sign excluded."""
    value = abs(value)
    digits = max(1, (value.bit_length() * 1233) >> 12)
    while digits > 1 and value < 10 ** (digits - 1):
        digits -= 1
    while value >= 10**digits:
        digits += 1
    return digits


def parse_digits(digits: str) -> int:
    """Converts a decimal digit string of any length to an int."""
    value = 0
    for start in range(0, len(digits), _DIGIT_BLOCK):
        block = digits[start : start + _DIGIT_BLOCK]
        value = value * 10 ** len(block) + int(block)
    return value


def format_digits(value: int) -> str:
    """Decimal string of an int of any size."""
    if value < 0:
        return "-" + format_digits(-value)
    if value < 10**_DIGIT_BLOCK:
        return str(value)
    half = digit_count(value) // 2
    high, low = divmod(value, 10**half)
    return format_digits(high) + format_digits(low).rjust(half, "0")


def triangular(n: int) -> ExactValue:
    return sympy.Integer(n * (n + 1) // 2)


def factorial(n: int) -> ExactValue:
    return sympy.factorial(n)


def square_root(value: ExactValue) -> ExactValue:
    return sympy.sqrt(value)


def power(base: ExactValue, exponent: int) -> ExactValue:
    return sympy.Pow(base, sympy.Integer(exponent))


def _terminating_places(denominator: int) -> Optional[int]:
    """Fractional digits of p/denominator if it terminates, else None."""
    counts = []
    for prime in (2, 5):
        count = 0
        while denominator % prime == 0:
            denominator //= prime
            count += 1
        counts.append(count)
    if denominator != 1:
        return None
    return max(counts)


def _format_scaled(scaled: int, places: int) -> str:
    """Formats scaled / 10**places without trailing zeros."""
    if places == 0:
        return format_digits(scaled)

    sign = "-" if scaled < 0 else ""
    digits = format_digits(abs(scaled)).rjust(places + 1, "0")
    whole, fraction = digits[:-places], digits[-places:].rstrip("0")

    if not fraction:
        return "0" if whole == "0" else f"{sign}{whole}"
    return f"{sign}{whole}.{fraction}"


def scaled_rounding(value: ExactValue, places: int) -> Tuple[int, int]:
    """
    Returns (scaled, places) with scaled / 10**places the decimal rendering.

    Terminating rationals keep every digit; other values are rounded half
    up to ``places`` fractional digits.
    """
    if value.is_Rational:
        exact_places = _terminating_places(int(value.q))
        if exact_places is not None:
            return int(value.p) * 10**exact_places // int(value.q), exact_places

    scaled = sympy.floor(value * 10**places + sympy.Rational(1, 2))
    return int(scaled), places


def render(value: ExactValue, decimal_places: int) -> str:
    """
    Renders an exact value as a canonical decimal string.

    Integers render bare. Everything else renders with a finite number of
    fractional digits; fraction notation and radicals never leak out.
    """
    value = canonical(value)
    if value.is_Integer:
        return format_digits(int(value))

    scaled, places = scaled_rounding(value, decimal_places)
    return _format_scaled(scaled, places)
