"""
Normalizer and tokenizer (lexer) for the four fours language.

Normalization removes whitespace, maps a small fixed set of Unicode math
symbols to their ASCII spelling and upper-cases letters. Tokenization
then converts the normalized string into a stream of tokens for the
parser.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from .errors import TokenizerError
from .limits import ExpressionLimits, check_expression_length


class TokenType(Enum):
    """Token types produced by the tokenizer."""

    # Literals
    NUMBER = "NUMBER"
    DECIMAL = "DECIMAL"

    # Operators
    PLUS = "PLUS"
    MINUS = "MINUS"
    STAR = "STAR"
    SLASH = "SLASH"
    CARET = "CARET"
    BANG = "BANG"
    SUM = "SUM"
    ROOT = "ROOT"

    # Delimiters
    LPAREN = "LPAREN"
    RPAREN = "RPAREN"

    # Special
    EOF = "EOF"


@dataclass
class Token:
    """A token produced by the tokenizer."""

    type: TokenType
    value: str
    position: int


# Unicode symbols accepted as aliases of the ASCII operators
SYMBOL_SUBSTITUTIONS: Dict[str, str] = {
    "√": "R",
    "Σ": "S",
    "∑": "S",
    "×": "*",
    "÷": "/",
}

ALLOWED_CHARACTERS = frozenset("0123456789+-*/()!^SR.")

SINGLE_CHAR_TOKENS: Dict[str, TokenType] = {
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.STAR,
    "/": TokenType.SLASH,
    "^": TokenType.CARET,
    "!": TokenType.BANG,
    "S": TokenType.SUM,
    "R": TokenType.ROOT,
}


def _is_digit(ch: str) -> bool:
    """Checks if a character is a digit."""
    return "0" <= ch <= "9"


def normalize(raw: str) -> str:
    """
    Normalizes a raw expression string.

    Args:
        raw: The expression as typed by the user

    Returns:
        The normalized expression

    Raises:
        TokenizerError: If a character outside the language remains
    """
    chars: List[str] = []
    for ch in raw:
        if ch.isspace():
            continue
        ch = SYMBOL_SUBSTITUTIONS.get(ch, ch)
        if "a" <= ch <= "z":
            ch = ch.upper()
        chars.append(ch)

    normalized = "".join(chars)
    for position, ch in enumerate(normalized):
        if ch not in ALLOWED_CHARACTERS:
            raise TokenizerError(
                f"invalid character in expression: '{ch}'", position, normalized
            )
    return normalized


class Tokenizer:
    """Tokenizer for normalized expression strings."""

    def __init__(self, source: str, limits: Optional[ExpressionLimits] = None):
        self._source = source
        self._limits = limits
        self._position = 0
        self._tokens: List[Token] = []

    def tokenize(self) -> List[Token]:
        """Tokenizes the source expression and returns all tokens."""
        check_expression_length(self._source, self._limits)

        while not self._is_at_end():
            self._scan_token()

        self._tokens.append(Token(TokenType.EOF, "", self._position))
        return self._tokens

    def _is_at_end(self) -> bool:
        return self._position >= len(self._source)

    def _peek(self) -> str:
        if self._is_at_end():
            return "\0"
        return self._source[self._position]

    def _advance(self) -> str:
        ch = self._source[self._position]
        self._position += 1
        return ch

    def _add_token(self, token_type: TokenType, value: str, position: int) -> None:
        self._tokens.append(Token(token_type, value, position))

    def _scan_token(self) -> None:
        start_position = self._position
        ch = self._peek()

        if _is_digit(ch) or ch == ".":
            self._scan_number(start_position)
            return

        self._advance()
        if ch in SINGLE_CHAR_TOKENS:
            self._add_token(SINGLE_CHAR_TOKENS[ch], ch, start_position)
            return

        raise TokenizerError(
            f"invalid character in expression: '{ch}'", start_position, self._source
        )

    def _scan_digits(self) -> str:
        value = ""
        while _is_digit(self._peek()):
            value += self._advance()
        return value

    def _scan_number(self, start_position: int) -> None:
        integer_part = self._scan_digits()

        if self._peek() != ".":
            self._add_token(TokenType.NUMBER, integer_part, start_position)
            return

        self._advance()  # consume '.'

        # Repeating block: digits?.(digits+)
        if self._peek() == "(":
            self._advance()
            block = self._scan_digits()
            if not block or self._peek() != ")":
                raise TokenizerError(
                    "invalid decimal literal", start_position, self._source
                )
            self._advance()
            self._add_token(
                TokenType.DECIMAL, f"{integer_part}.({block})", start_position
            )
            return

        fraction = self._scan_digits()
        if not fraction:
            raise TokenizerError("invalid decimal literal", start_position, self._source)
        self._add_token(TokenType.DECIMAL, f"{integer_part}.{fraction}", start_position)


def tokenize(source: str, limits: Optional[ExpressionLimits] = None) -> List[Token]:
    """
    Normalizes and tokenizes an expression string.

    Args:
        source: The expression string to tokenize
        limits: Optional expression limits

    Returns:
        List of tokens

    Raises:
        TokenizerError: If the expression contains invalid characters or literals
    """
    tokenizer = Tokenizer(normalize(source), limits)
    return tokenizer.tokenize()
