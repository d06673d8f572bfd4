"""
Tests for the expression parser.
"""

import pytest

from fourfours import (
    BinaryOpNode,
    ConstantNode,
    DecimalConstantNode,
    ExpressionSyntaxError,
    LimitExceededError,
    ParseError,
    UnaryOpNode,
    ast_to_string,
    calculate_ast_depth,
    count_ast_nodes,
    node_kind,
    parse,
)
from fourfours.limits import ExpressionLimits


class TestLiterals:
    """Tests for literal parsing."""

    def test_parses_integer(self):
        ast = parse("44")
        assert isinstance(ast, ConstantNode)
        assert ast.value == 44
        assert ast.type == "Constant"

    def test_parses_terminating_decimal(self):
        ast = parse("4.44")
        assert isinstance(ast, DecimalConstantNode)
        assert ast.integer_part == "4"
        assert ast.fraction_digits == "44"
        assert ast.repeating is False

    def test_parses_repeating_decimal(self):
        ast = parse(".(4)")
        assert isinstance(ast, DecimalConstantNode)
        assert ast.integer_part == ""
        assert ast.fraction_digits == "4"
        assert ast.repeating is True
        assert ast.literal == ".(4)"

    def test_parentheses_leave_no_node(self):
        assert parse("((4))") == ConstantNode(position=2, value=4)


class TestAdditive:
    """Tests for addition and subtraction folding."""

    def test_subtraction_is_add_of_negate(self):
        ast = parse("4-4")
        assert isinstance(ast, BinaryOpNode)
        assert ast.operator == "Add"
        assert node_kind(ast.operands[0]) == "Constant"
        assert node_kind(ast.operands[1]) == "Negate"

    def test_chain_folds_into_one_add_in_source_order(self):
        ast = parse("4+44-4.4")
        assert isinstance(ast, BinaryOpNode)
        assert [node_kind(o) for o in ast.operands] == ["Constant", "Constant", "Negate"]
        assert ast.operands[1].value == 44

    def test_leading_minus_negates_first_operand(self):
        ast = parse("-4+4")
        assert isinstance(ast, BinaryOpNode)
        assert node_kind(ast.operands[0]) == "Negate"

    def test_leading_plus_is_identity(self):
        assert parse("+4") == ConstantNode(position=1, value=4)

    def test_sign_after_bracket(self):
        ast = parse("4*(-4)")
        assert node_kind(ast.operands[1]) == "Negate"


class TestMultiplicative:
    """Tests for multiplication and division folding."""

    def test_product_folds_into_one_multiply(self):
        ast = parse("4*4*4")
        assert ast.operator == "Multiply"
        assert len(ast.operands) == 3

    def test_division_collects_numerator_and_denominator(self):
        ast = parse("4/4*4/44")
        assert ast.operator == "Divide"
        numerator, denominator = ast.operands
        assert numerator.operator == "Multiply"
        assert [o.value for o in numerator.operands] == [4, 4]
        assert denominator.operator == "Multiply"
        assert [o.value for o in denominator.operands] == [4, 44]


class TestPowerAndUnary:
    """Tests for power, prefix and postfix operators."""

    def test_power_is_right_associative(self):
        ast = parse("4^4^.4")
        assert ast.operator == "Power"
        assert node_kind(ast.operands[0]) == "Constant"
        exponent = ast.operands[1]
        assert exponent.operator == "Power"

    def test_prefix_binds_tighter_than_power(self):
        ast = parse("R4^4")
        assert ast.operator == "Power"
        assert node_kind(ast.operands[0]) == "Root"

    def test_factorial_binds_tighter_than_prefix(self):
        ast = parse("S4!")
        assert isinstance(ast, UnaryOpNode)
        assert ast.operator == "Sum"
        assert node_kind(ast.operand) == "Factorial"

    def test_bracketed_prefix_under_factorial(self):
        ast = parse("(S4)!")
        assert ast.operator == "Factorial"
        assert node_kind(ast.operand) == "Sum"

    def test_stacked_prefix_operators(self):
        ast = parse("SSR4")
        assert ast.operator == "Sum"
        assert ast.operand.operator == "Sum"
        assert ast.operand.operand.operator == "Root"

    def test_stacked_factorials(self):
        ast = parse("4!!")
        assert ast.operator == "Factorial"
        assert ast.operand.operator == "Factorial"

    def test_leading_minus_binds_tighter_than_power(self):
        ast = parse("-4^4")
        assert ast.operator == "Power"
        assert node_kind(ast.operands[0]) == "Negate"


class TestErrorHandling:
    """Tests for syntax errors."""

    def test_empty_expression(self):
        with pytest.raises(ParseError, match="empty expression"):
            parse("")

    @pytest.mark.parametrize("source", ["(4", "4)", "((4)", ")4("])
    def test_unmatched_bracket(self, source):
        with pytest.raises(ParseError, match="unmatched bracket"):
            parse(source)

    def test_empty_bracket(self):
        with pytest.raises(ParseError, match="empty bracket"):
            parse("4*()")

    def test_missing_right_operand(self):
        with pytest.raises(ParseError, match=r"missing right operand of \+ operator"):
            parse("4+")

    def test_missing_left_operand(self):
        with pytest.raises(ParseError, match=r"missing left operand of \* operator"):
            parse("*4")

    def test_missing_prefix_operand(self):
        with pytest.raises(ParseError, match="missing operand of S operator"):
            parse("S")

    def test_missing_prefix_operand_before_bracket(self):
        with pytest.raises(ParseError, match="missing operand of R operator"):
            parse("(R)")

    def test_double_caret(self):
        with pytest.raises(ParseError, match=r"missing left operand of \^ operator"):
            parse("4^^4")

    def test_sign_inside_product(self):
        assert parse("4*-4") == BinaryOpNode(
            position=0,
            operator="Multiply",
            operands=(
                ConstantNode(position=0, value=4),
                UnaryOpNode(
                    position=2,
                    operator="Negate",
                    operand=ConstantNode(position=3, value=4),
                ),
            ),
        )

    def test_sign_after_prefix(self):
        assert parse("S-4") == UnaryOpNode(
            position=0,
            operator="Sum",
            operand=UnaryOpNode(
                position=1,
                operator="Negate",
                operand=ConstantNode(position=2, value=4),
            ),
        )

    @pytest.mark.parametrize("source", ["4/-4", "4^-4", "4*+4", "-4*-4", "R-4"])
    def test_sign_after_operator_parses(self, source):
        parse(source)

    @pytest.mark.parametrize(
        "source, message",
        [
            ("4--4", r"missing left operand of - operator"),
            ("--4", r"missing left operand of - operator"),
            ("4+-4", r"missing left operand of - operator"),
            ("4-+4", r"missing left operand of \+ operator"),
        ],
    )
    def test_sign_after_sign_is_rejected(self, source, message):
        with pytest.raises(ParseError, match=message):
            parse(source)

    def test_juxtaposition_is_rejected(self):
        with pytest.raises(ParseError, match=r"invalid token: \("):
            parse("4(4)")

    def test_errors_are_syntax_errors(self):
        with pytest.raises(ExpressionSyntaxError) as exc_info:
            parse("(4")
        assert str(exc_info.value) == "syntax error: unmatched bracket"

    def test_error_context_points_at_bracket(self):
        with pytest.raises(ParseError) as exc_info:
            parse("4+(4")
        assert exc_info.value.position == 2
        assert exc_info.value.format_with_context() == (
            "syntax error: unmatched bracket\n  4+(4\n    ^"
        )


class TestLimits:
    """Tests for parser resource limits."""

    def test_rejects_deep_brackets(self):
        with pytest.raises(LimitExceededError, match="nesting depth"):
            parse("(" * 100 + "4" + ")" * 100)

    def test_accepts_brackets_at_depth_limit(self):
        assert parse("(" * 64 + "4" + ")" * 64) == ConstantNode(position=64, value=4)

    def test_rejects_deep_prefix_chain(self):
        with pytest.raises(LimitExceededError):
            parse("R" * 100 + "4")

    def test_rejects_long_factorial_chain(self):
        with pytest.raises(LimitExceededError):
            parse("4" + "!" * 100)

    def test_rejects_too_many_nodes(self):
        with pytest.raises(LimitExceededError, match="AST node count"):
            parse("+".join(["4"] * 1100))

    def test_custom_limits(self):
        limits = ExpressionLimits(max_ast_depth=2)
        assert parse("((4))", limits).value == 4
        with pytest.raises(LimitExceededError):
            parse("(((4)))", limits)


class TestAstUtilities:
    """Tests for AST helper functions."""

    def test_count_ast_nodes(self):
        assert count_ast_nodes(parse("4")) == 1
        assert count_ast_nodes(parse("4-4")) == 4
        assert count_ast_nodes(parse("4/4")) == 5

    def test_calculate_ast_depth(self):
        assert calculate_ast_depth(parse("4")) == 1
        assert calculate_ast_depth(parse("S4!")) == 3

    def test_ast_to_string(self):
        assert ast_to_string(parse("4-.(4)")) == (
            "Add:\n  Constant: 4\n  Negate:\n    DecimalConstant: .(4)"
        )
