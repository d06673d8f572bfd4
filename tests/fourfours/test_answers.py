"""
Tests for the four fours answer search.
"""

import re
from fractions import Fraction

import pytest

from fourfours import MAX_ANSWER, AnswerSolver, check_expression, evaluate, get_answer
from fourfours.answers import KNOWN_ANSWERS, _exact_root, _literal_value


def uses_four_fours(expression: str) -> bool:
    return expression.count("4") == 4 and not re.search(r"[0-35-9]", expression)


class TestGetAnswer:
    @pytest.mark.parametrize("number", range(0, 41))
    def test_small_targets_are_solved(self, number):
        answer = get_answer(number)
        assert answer
        assert uses_four_fours(answer)
        assert evaluate(answer) == str(number)

    @pytest.mark.parametrize("number", [64, 100, 256, 300])
    def test_larger_targets(self, number):
        answer = get_answer(number)
        assert uses_four_fours(answer)
        assert evaluate(answer) == str(number)

    @pytest.mark.parametrize("number", [-1, MAX_ANSWER + 1, 10**9])
    def test_out_of_range_is_empty(self, number):
        assert get_answer(number) == ""

    def test_non_integer_is_empty(self):
        assert get_answer(True) == ""
        assert get_answer(4.0) == ""

    def test_answers_are_memoised(self):
        assert get_answer(7) is get_answer(7)

    @pytest.mark.parametrize("number", [2227, 2379, 2459, 2587, 2617, 2669, 2867, 2879, 2933])
    def test_targets_beyond_the_tables(self, number):
        answer = get_answer(number)
        assert uses_four_fours(answer)
        assert evaluate(answer) == str(number)

    def test_every_target_is_solved(self):
        solver = AnswerSolver()
        missing = [n for n in range(MAX_ANSWER + 1) if not solver.solve(n)]
        assert missing == []


class TestAnswerSolver:
    @pytest.fixture(scope="class")
    def solver(self):
        return AnswerSolver()

    def test_one_four_table(self, solver):
        table = solver.table(1)
        assert table[Fraction(4)].expression == "4"
        assert table[Fraction(2)].expression == "R4"
        assert table[Fraction(10)].expression == "S4"
        assert table[Fraction(24)].expression == "4!"
        assert table[Fraction(4, 9)].expression == ".(4)"

    def test_table_expressions_evaluate_to_their_values(self, solver):
        table = solver.table(2)
        for value in (Fraction(0), Fraction(1), Fraction(8), Fraction(16), Fraction(20)):
            candidate = table[value]
            assert candidate.expression.count("4") == 2
            assert evaluate(candidate.expression) == str(value)

    def test_solve_returns_verified_expression(self, solver):
        answer = solver.solve(17)
        assert uses_four_fours(answer)
        assert evaluate(answer) == "17"

    def test_candidates_use_four_fours(self, solver):
        candidates = list(solver.candidates(Fraction(5)))
        assert candidates
        assert all(c.count("4") == 4 for c in candidates)


class TestKnownAnswers:
    @pytest.mark.parametrize("number, expression", sorted(KNOWN_ANSWERS.items()))
    def test_known_answer_is_a_valid_puzzle_answer(self, number, expression):
        assert uses_four_fours(expression)
        check = check_expression(expression, target=number)
        assert check.result == str(number)
        assert check.error is None
        assert check.warning is None


class TestHelpers:
    def test_literal_value(self):
        assert _literal_value("44") == 44
        assert _literal_value(".4") == Fraction(2, 5)
        assert _literal_value("4.(4)") == Fraction(40, 9)

    def test_exact_root(self):
        assert _exact_root(Fraction(256), 4) == 4
        assert _exact_root(Fraction(-8), 3) == -2
        assert _exact_root(Fraction(1, 16), -2) == 4
        assert _exact_root(Fraction(2), 2) is None
        assert _exact_root(Fraction(-4), 2) is None
