"""
Tests for the puzzle rule check.
"""

from fourfours import check_expression
from fourfours.limits import ExpressionLimits
from fourfours.puzzle import (
    ERROR_NOT_INTEGER,
    ERROR_TOO_LONG,
    WARNING_EMPTY,
    WARNING_FOUR_FOURS,
    WARNING_NOT_MATCH,
    WARNING_ONLY_FOURS,
    sanitize,
    truncate,
)


class TestResult:
    def test_valid_answer(self):
        check = check_expression("4+4+4+4")
        assert check.expression == "4+4+4+4"
        assert check.result == "16"
        assert check.error is None
        assert check.warning is None

    def test_non_integer_result_is_truncated(self):
        check = check_expression("4/(4+4+4)")
        assert check.result == "0.33333333333333..."
        assert check.error == ERROR_NOT_INTEGER

    def test_short_non_integer_result(self):
        check = check_expression("4/4/4/4")
        assert check.result == "0.015625"
        assert check.error == ERROR_NOT_INTEGER

    def test_long_integer_result(self):
        check = check_expression("(4!)!*(4/4)^4")
        assert check.result == "6204484017332394..."
        assert check.error == ERROR_TOO_LONG
        assert check.warning is None

    def test_expression_error(self):
        check = check_expression("4+4+4+")
        assert check.result is None
        assert check.error == "syntax error: missing right operand of + operator"

    def test_evaluation_error(self):
        check = check_expression("4/(4-4)+4")
        assert check.result is None
        assert check.error == "evaluation error: division by zero"

    def test_huge_integer_result(self):
        check = check_expression("44^4444")
        assert check.error == ERROR_TOO_LONG
        assert check.result.endswith("...")
        assert len(check.result) == 16 + len("...")

    def test_signed_operand(self):
        check = check_expression("4*-4+4+4", target=-8)
        assert check.result == "-8"
        assert check.error is None
        assert check.warning is None

    def test_custom_result_length(self):
        check = check_expression("44*44", limits=ExpressionLimits(max_result_length=3))
        assert check.result == "193..."
        assert check.error == ERROR_TOO_LONG


class TestWarnings:
    def test_empty_input(self):
        check = check_expression("")
        assert check.result is None
        assert check.error is None
        assert check.warning == WARNING_EMPTY

    def test_input_of_dropped_characters_only(self):
        assert check_expression("abc").warning == WARNING_EMPTY

    def test_other_digits(self):
        assert check_expression("4+4+4+1").warning == WARNING_ONLY_FOURS

    def test_wrong_number_of_fours(self):
        assert check_expression("4+4").warning == WARNING_FOUR_FOURS
        assert check_expression("4+4+4+44").warning == WARNING_FOUR_FOURS

    def test_target_match(self):
        assert check_expression("4+4+4+4", target=16).warning is None

    def test_target_mismatch(self):
        assert check_expression("4+4+4+4", target=15).warning == WARNING_NOT_MATCH

    def test_failed_evaluation_is_not_a_mismatch(self):
        assert check_expression("4/(4-4)+4", target=4).warning is None


class TestHelpers:
    def test_truncate(self):
        assert truncate("12345", 3) == "123..."
        assert truncate("123", 3) == "123"

    def test_sanitize(self):
        assert sanitize("s4 + √4") == "S4+R4"
        assert sanitize("4a4") == "44"
