"""Test the normalize function."""

import pytest

from shunting_calculator.common.errors import EmptyExpression, InvalidCharacter, MissingOperator
from shunting_calculator.common.normalizer import mark_unary_minus, normalize


@pytest.mark.parametrize("expr,expected", [
    ("1 + 1", "1+1"),
    (" 2\t*\n3 ", "2*3"),
    ("-15-15", "~15-15"),
    ("-1 + -10", "~1+~10"),
    ("-1 + (-10)", "~1+(~10)"),
    ("- -10", "~~10"),
    ("-(1 + 2)", "~(1+2)"),
    ("3 * - 2", "3*~2"),
    ("4 % -2", "4%~2"),
    ("1 -2", "1-2"),
    ("(1) - 2", "(1)-2"),
])
def test_normalize(expr, expected):
    """normalize strips whitespace and marks unary minus signs."""
    assert normalize(expr) == expected


def test_mark_unary_minus_keeps_whitespace():
    """mark_unary_minus only replaces characters, never moves them."""
    assert mark_unary_minus("- 1 - -2") == "~ 1 - ~2"


@pytest.mark.parametrize("expr", ["-", "1 - * 2", "-+1"])
def test_minus_without_operand_stays_binary(expr):
    """A minus that is not followed by something to negate is left untouched."""
    assert "~" not in normalize(expr)


@pytest.mark.parametrize("expr", ["", "   ", "\t\n"])
def test_normalize_empty(expr):
    """Empty and whitespace-only input is rejected."""
    with pytest.raises(EmptyExpression):
        normalize(expr)


@pytest.mark.parametrize("expr", [
    "1 1 + 2",
    "1 1",
    "3.5 2",
    "(1 + 2) (3)",
    "(1 + 2) 3",
    "2 -(-3) 4",
    "1 + 2 -3 4",
    "1 -1 -2 .5",
])
def test_normalize_missing_operator(expr):
    """Operands separated only by whitespace are rejected."""
    with pytest.raises(MissingOperator):
        normalize(expr)


def test_missing_operator_reports_fragment():
    """MissingOperator carries the offending fragment of the original text."""
    with pytest.raises(MissingOperator) as exc_info:
        normalize("7 + 12  3")
    assert exc_info.value.fragment == "12  3"


def test_normalize_rejects_marker_character():
    """The negation marker is reserved and cannot appear in user input."""
    with pytest.raises(InvalidCharacter) as exc_info:
        normalize("1 + ~2")
    assert exc_info.value.char == "~"
    assert exc_info.value.position == 4


def test_normalize_long_run_of_minus_signs():
    """A long run of unary minus signs is marked in a single pass."""
    assert normalize("-" * 200_000 + "1") == "~" * 200_000 + "1"


def test_normalize_spaced_minus_signs():
    """Whitespace between repeated minus signs is skipped when looking ahead."""
    assert normalize("-   -   - 1") == "~~~1"
