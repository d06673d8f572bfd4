"""
Tests for redundant bracket removal.
"""

import pytest

from fourfours import ExpressionError, evaluate, remove_redundant_parentheses


class TestRemoveRedundantParentheses:
    @pytest.mark.parametrize(
        "expression, expected",
        [
            ("(4+4)", "4+4"),
            ("((4))", "4"),
            ("4*(4/4)", "4*4/4"),
            ("(4*4)+(4*4)", "4*4+4*4"),
            (" ( 4 ) ", "4"),
            ("4*(-4)", "4*-4"),
        ],
    )
    def test_removes_redundant_pairs(self, expression, expected):
        assert remove_redundant_parentheses(expression) == expected

    @pytest.mark.parametrize(
        "expression",
        ["(4+4)*4", "4-(4-4)", "4/(4*4)", "(S4)!", "4-(-4)", "4^(4-4)+4"],
    )
    def test_keeps_needed_pairs(self, expression):
        assert remove_redundant_parentheses(expression) == expression

    def test_keeps_repeating_decimal_block(self):
        assert remove_redundant_parentheses("(.(4))*4") == ".(4)*4"

    def test_partial_removal(self):
        assert remove_redundant_parentheses("((4+4))*(4)") == "(4+4)*4"

    def test_huge_result(self):
        assert remove_redundant_parentheses("(44^4444)") == "44^4444"

    @pytest.mark.parametrize(
        "expression",
        ["((4+4))*(4)", "(4*(4-4))+4", "R((SR4+R4)^R4)", "(4/4)*(4/4)"],
    )
    def test_is_idempotent_and_value_preserving(self, expression):
        once = remove_redundant_parentheses(expression)
        assert remove_redundant_parentheses(once) == once
        assert evaluate(once) == evaluate(expression)

    def test_invalid_input_raises(self):
        with pytest.raises(ExpressionError):
            remove_redundant_parentheses("(4")

    def test_failing_input_raises(self):
        with pytest.raises(ExpressionError):
            remove_redundant_parentheses("(4/0)")
