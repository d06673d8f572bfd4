"""
Parser for the four fours language.

Parses a stream of tokens into an Abstract Syntax Tree (AST).
Uses recursive descent parsing with operator precedence.

Precedence (lowest to highest):
1. Additive: +, - (folded into one Add node, subtrahends negated)
2. Multiplicative: *, / (folded into Multiply, or Divide of two Multiply)
3. Power: ^ (right-associative)
4. Prefix: sign, S, R
5. Postfix: !
6. Primary: integer and decimal literals, parentheses

A sign is accepted wherever an operand is expected, except right after
another + or -. ``4*-4`` and ``S-4`` parse while ``4--4`` is rejected.
"""

import logging
import re
from typing import List, Optional

from .ast import (
    AstNode,
    BinaryOpNode,
    ConstantNode,
    DecimalConstantNode,
    UnaryOperator,
    UnaryOpNode,
    count_ast_nodes,
)
from .errors import ParseError
from .limits import (
    DEFAULT_EXPRESSION_LIMITS,
    ExpressionLimits,
    check_ast_depth,
    check_ast_node_count,
)
from .numeric import parse_digits
from .tokenizer import Token, Tokenizer, TokenType, normalize

logger = logging.getLogger(__name__)

DECIMAL_LITERAL = re.compile(r"^(\d*)\.(?:(\d+)|\((\d+)\))$")

# Tokens that need an operand on their left
_OPERATOR_TOKENS = frozenset(
    {
        TokenType.PLUS,
        TokenType.MINUS,
        TokenType.STAR,
        TokenType.SLASH,
        TokenType.CARET,
        TokenType.BANG,
    }
)

_PREFIX_OPERATORS = {
    TokenType.SUM: "Sum",
    TokenType.ROOT: "Root",
}

# A sign may not directly follow one of these
_SIGN_TOKENS = frozenset({TokenType.PLUS, TokenType.MINUS})


class Parser:
    """Parser for normalized expression strings."""

    def __init__(
        self,
        tokens: List[Token],
        source: str,
        limits: ExpressionLimits = DEFAULT_EXPRESSION_LIMITS,
    ):
        self._tokens = tokens
        self._source = source
        self._limits = limits
        self._current = 0
        self._depth = 0

    def parse(self) -> AstNode:
        """Parses the token stream into an AST."""
        if self._is_at_end():
            raise ParseError("empty expression", 0, self._source)

        self._check_brackets()

        ast = self._parse_additive()

        if not self._is_at_end():
            token = self._peek()
            raise ParseError(
                f"invalid token: {token.value}", token.position, self._source
            )

        check_ast_node_count(count_ast_nodes(ast), self._limits)
        return ast

    # ============================================================
    # Token Helpers
    # ============================================================

    def _is_at_end(self) -> bool:
        return self._peek().type == TokenType.EOF

    def _peek(self) -> Token:
        return self._tokens[self._current]

    def _peek_next(self) -> Token:
        if self._is_at_end():
            return self._peek()
        return self._tokens[self._current + 1]

    def _previous(self) -> Token:
        return self._tokens[self._current - 1]

    def _advance(self) -> Token:
        if not self._is_at_end():
            self._current += 1
        return self._previous()

    def _check(self, *types: TokenType) -> bool:
        if self._is_at_end():
            return False
        return self._peek().type in types

    def _match(self, *types: TokenType) -> bool:
        if self._check(*types):
            self._advance()
            return True
        return False

    def _check_brackets(self) -> None:
        """Rejects unbalanced brackets before any descent."""
        openings: List[Token] = []
        for token in self._tokens:
            if token.type == TokenType.LPAREN:
                openings.append(token)
            elif token.type == TokenType.RPAREN:
                if not openings:
                    raise ParseError("unmatched bracket", token.position, self._source)
                openings.pop()
        if openings:
            raise ParseError("unmatched bracket", openings[-1].position, self._source)

    def _enter(self, token: Token) -> None:
        self._depth += 1
        check_ast_depth(self._depth, self._limits, token.position, self._source)

    def _leave(self) -> None:
        self._depth -= 1

    def _missing_operand(self, after: Optional[Token]) -> ParseError:
        """Builds the error for a position where an operand was expected."""
        token = self._peek()

        if token.type in _OPERATOR_TOKENS:
            return ParseError(
                f"missing left operand of {token.value} operator",
                token.position,
                self._source,
            )

        if after is not None and token.type in (TokenType.EOF, TokenType.RPAREN):
            if after.type in _PREFIX_OPERATORS:
                message = f"missing operand of {after.value} operator"
            else:
                message = f"missing right operand of {after.value} operator"
            return ParseError(message, after.position, self._source)

        return ParseError(
            f"invalid token: {token.value or token.type.value}",
            token.position,
            self._source,
        )

    # ============================================================
    # Expression Parsing (by precedence, lowest to highest)
    # ============================================================

    def _parse_additive(self) -> AstNode:
        """Parses additive: +, -"""
        position = self._peek().position
        operands = [self._parse_multiplicative(after=None)]

        while self._match(TokenType.PLUS, TokenType.MINUS):
            operator = self._previous()
            operand = self._parse_multiplicative(after=operator)
            if operator.type == TokenType.MINUS:
                operand = UnaryOpNode(
                    position=operator.position,
                    operator="Negate",
                    operand=operand,
                )
            operands.append(operand)

        if len(operands) == 1:
            return operands[0]

        return BinaryOpNode(position=position, operator="Add", operands=tuple(operands))

    def _parse_multiplicative(self, after: Optional[Token]) -> AstNode:
        """Parses multiplicative: *, /"""
        position = self._peek().position
        first = self._parse_power(after)

        multiplicands = [first]
        divisors: List[AstNode] = []
        while self._match(TokenType.STAR, TokenType.SLASH):
            operator = self._previous()
            operand = self._parse_power(operator)
            if operator.type == TokenType.STAR:
                multiplicands.append(operand)
            else:
                divisors.append(operand)

        if len(multiplicands) == 1 and not divisors:
            return first

        numerator = BinaryOpNode(
            position=position, operator="Multiply", operands=tuple(multiplicands)
        )
        if not divisors:
            return numerator

        denominator = BinaryOpNode(
            position=divisors[0].position, operator="Multiply", operands=tuple(divisors)
        )
        return BinaryOpNode(
            position=position, operator="Divide", operands=(numerator, denominator)
        )

    def _parse_power(self, after: Optional[Token]) -> AstNode:
        """Parses power: ^ (right-associative)"""
        position = self._peek().position
        base = self._parse_unary(after)

        if self._match(TokenType.CARET):
            operator = self._previous()
            self._enter(operator)
            try:
                exponent = self._parse_power(operator)
            finally:
                self._leave()
            return BinaryOpNode(
                position=position, operator="Power", operands=(base, exponent)
            )

        return base

    def _parse_unary(self, after: Optional[Token]) -> AstNode:
        """Parses prefix operators: sign, S, R"""
        token = self._peek()
        signed = after is None or after.type not in _SIGN_TOKENS

        if signed and self._match(TokenType.MINUS):
            return self._parse_prefix_operand("Negate", token)

        if (
            signed
            and self._check(TokenType.PLUS)
            and self._peek_next().type in (TokenType.NUMBER, TokenType.DECIMAL)
        ):
            # A '+' sign on a bare literal is an identity
            self._advance()
            return self._parse_postfix(token)

        if self._match(TokenType.SUM, TokenType.ROOT):
            return self._parse_prefix_operand(_PREFIX_OPERATORS[token.type], token)

        return self._parse_postfix(after)

    def _parse_prefix_operand(self, operator: UnaryOperator, token: Token) -> AstNode:
        self._enter(token)
        try:
            operand = self._parse_unary(token)
        finally:
            self._leave()
        return UnaryOpNode(position=token.position, operator=operator, operand=operand)

    def _parse_postfix(self, after: Optional[Token]) -> AstNode:
        """Parses postfix: !"""
        node = self._parse_primary(after)

        depth = self._depth
        while self._match(TokenType.BANG):
            depth += 1
            check_ast_depth(depth, self._limits, self._previous().position, self._source)
            node = UnaryOpNode(
                position=self._previous().position,
                operator="Factorial",
                operand=node,
            )

        return node

    def _parse_primary(self, after: Optional[Token]) -> AstNode:
        """Parses primary expressions: literals and parentheses."""
        token = self._peek()
        position = token.position

        if self._match(TokenType.NUMBER):
            return ConstantNode(position=position, value=parse_digits(token.value))

        if self._match(TokenType.DECIMAL):
            return self._decimal_constant(token)

        if self._match(TokenType.LPAREN):
            if self._check(TokenType.RPAREN):
                raise ParseError("empty bracket", position, self._source)

            self._enter(token)
            try:
                expr = self._parse_additive()
            finally:
                self._leave()

            if not self._match(TokenType.RPAREN):
                unexpected = self._peek()
                raise ParseError(
                    f"invalid token: {unexpected.value}",
                    unexpected.position,
                    self._source,
                )
            return expr

        raise self._missing_operand(after)

    def _decimal_constant(self, token: Token) -> DecimalConstantNode:
        match = DECIMAL_LITERAL.match(token.value)
        if match is None:
            raise ParseError(
                f"invalid decimal literal: {token.value}", token.position, self._source
            )

        integer_part, terminating, repeating = match.groups()
        return DecimalConstantNode(
            position=token.position,
            integer_part=integer_part,
            fraction_digits=repeating if repeating is not None else terminating,
            repeating=repeating is not None,
        )


def parse(source: str, limits: Optional[ExpressionLimits] = None) -> AstNode:
    """
    Parses an expression string into an AST.

    Args:
        source: The expression string to parse (raw or normalized)
        limits: Optional expression limits

    Returns:
        The parsed AST

    Raises:
        TokenizerError: If normalization or tokenization fails
        ParseError: If parsing fails
        LimitExceededError: If the expression is too long or too deep
    """
    limits = limits or DEFAULT_EXPRESSION_LIMITS
    normalized = normalize(source)
    tokens = Tokenizer(normalized, limits).tokenize()
    parser = Parser(tokens, normalized, limits)
    ast = parser.parse()
    logger.debug("expression_parsed", extra={"expression": normalized})
    return ast
