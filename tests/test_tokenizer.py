"""Test the tokenize function."""

from pydantic import ValidationError
import pytest

from shunting_calculator.common.errors import (
    InsufficientOperands,
    InvalidCharacter,
    MalformedNumber,
    NumericOverflow,
)
from shunting_calculator.common.tokenizer import tokenize
from shunting_calculator.common.tokens import (
    LEFT_PAREN,
    RIGHT_PAREN,
    LeftParenToken,
    NumberToken,
    OperatorToken,
    format_rpn,
)


def test_tokenize_basic():
    """tokenize splits a simple expression into typed tokens."""
    tokens = tokenize("3+4*2")
    assert tokens == [
        NumberToken(value=3),
        OperatorToken(symbol="+"),
        NumberToken(value=4),
        OperatorToken(symbol="*"),
        NumberToken(value=2),
    ]


def test_tokenize_parentheses_and_decimals():
    """Parentheses are separate tokens and decimal literals are parsed."""
    tokens = tokenize("(1.5%.25)")
    assert tokens == [
        LEFT_PAREN,
        NumberToken(value=1.5),
        OperatorToken(symbol="%"),
        NumberToken(value=0.25),
        RIGHT_PAREN,
    ]
    assert isinstance(tokens[0], LeftParenToken)


@pytest.mark.parametrize("normalized,expected", [
    ("~5", "( 0 - 5 )"),
    ("~~5", "( 0 - ( 0 - 5 ) )"),
    ("~15-15", "( 0 - 15 ) - 15"),
    ("1+~2.5", "1 + ( 0 - 2.5 )"),
    ("~(1+2)", "( 0 - ( 1 + 2 ) )"),
    ("2*~(3+(4))", "2 * ( 0 - ( 3 + ( 4 ) ) )"),
    ("~~(1)", "( 0 - ( 0 - ( 1 ) ) )"),
    ("(~1)*2", "( ( 0 - 1 ) ) * 2"),
])
def test_tokenize_negation_expansion(normalized, expected):
    """Negation markers expand into "zero minus" groups."""
    assert format_rpn(tokenize(normalized)) == expected


@pytest.mark.parametrize("normalized,char,position", [
    ("1+a", "a", 2),
    ("2^3", "^", 1),
    ("1,5", ",", 1),
    ("x", "x", 0),
])
def test_tokenize_invalid_character(normalized, char, position):
    """Unsupported characters raise InvalidCharacter with their position."""
    with pytest.raises(InvalidCharacter) as exc_info:
        tokenize(normalized)
    assert exc_info.value.char == char
    assert exc_info.value.position == position


@pytest.mark.parametrize("normalized", ["1.2.3", ".", "1+..5"])
def test_tokenize_malformed_number(normalized):
    """Literals that are not valid decimals raise MalformedNumber."""
    with pytest.raises(MalformedNumber):
        tokenize(normalized)


@pytest.mark.parametrize("normalized", ["~", "~+1", "(~)"])
def test_tokenize_dangling_negation(normalized):
    """A marker with nothing to negate raises InsufficientOperands."""
    with pytest.raises(InsufficientOperands):
        tokenize(normalized)


def test_tokens_are_immutable():
    """Tokens cannot be modified once produced."""
    token = tokenize("7")[0]
    with pytest.raises(ValidationError):
        token.value = 8.0


def test_tokenize_literal_too_long():
    """A literal that parses to infinity raises NumericOverflow."""
    with pytest.raises(NumericOverflow):
        tokenize("1+" + "9" * 400)
