"""Split a normalized expression into lexical tokens."""
import math
from typing import List

from shunting_calculator.common.errors import (
    InsufficientOperands,
    InvalidCharacter,
    MalformedNumber,
    NumericOverflow,
)
from shunting_calculator.common.normalizer import NEGATION_MARKER
from shunting_calculator.common.tokens import (
    LEFT_PAREN,
    OPERATOR_SYMBOLS,
    RIGHT_PAREN,
    NumberToken,
    OperatorToken,
    Token,
)

LITERAL_CHARS: frozenset[str] = frozenset("0123456789.")

# Opening of a "zero minus ..." group, used to expand negations
_NEGATION_PREFIX: List[Token] = [LEFT_PAREN, NumberToken(value=0.0), OperatorToken(symbol="-")]


def _parse_literal(literal: str) -> NumberToken:
    try:
        value = float(literal)
    except ValueError:
        raise MalformedNumber(literal) from None
    # Literals too long to be represented parse to inf
    if not math.isfinite(value):
        raise NumericOverflow(literal)
    return NumberToken(value=value)


def _negated_literal(literal: str, negations: int) -> List[Token]:
    """
    Expand a literal preceded by ``negations`` markers into nested "zero minus" groups.

    Examples:
        - "5", 0 -> 5
        - "5", 1 -> ( 0 - 5 )
        - "5", 2 -> ( 0 - ( 0 - 5 ) )
    """
    return _NEGATION_PREFIX * negations + [_parse_literal(literal)] + [RIGHT_PAREN] * negations


def tokenize(normalized: str) -> List[Token]:
    """
    Scan a normalized expression into numbers, operators and parentheses.

    A negation marker before a literal is expanded in place. A marker before an
    opening parenthesis opens a "zero minus" group which is closed together with
    the matching closing parenthesis.

    :param str normalized: Expression returned by ``normalize``

    :return: Token sequence in infix order
    :rtype: List[Token]
    :raises InvalidCharacter: If an unsupported character is found
    :raises MalformedNumber: If a literal is not a valid decimal number
    :raises NumericOverflow: If a literal is too large to be represented
    :raises InsufficientOperands: If a negation marker has nothing to negate
    """
    tokens: List[Token] = []
    literal: List[str] = []
    negations = 0
    # Number of extra groups to close for each currently open parenthesis
    open_groups: List[int] = []

    for position, char in enumerate(normalized):
        if char in LITERAL_CHARS:
            literal.append(char)
            continue

        if char not in OPERATOR_SYMBOLS and char not in "()" and char != NEGATION_MARKER:
            raise InvalidCharacter(char, position)

        if literal:
            tokens.extend(_negated_literal("".join(literal), negations))
            literal.clear()
            negations = 0

        if char == NEGATION_MARKER:
            negations += 1
        elif char == "(":
            tokens.extend(_NEGATION_PREFIX * negations)
            tokens.append(LEFT_PAREN)
            open_groups.append(negations)
            negations = 0
        elif negations:
            # Marker directly followed by an operator or a closing parenthesis
            raise InsufficientOperands("-")
        elif char == ")":
            tokens.append(RIGHT_PAREN)
            if open_groups:
                tokens.extend([RIGHT_PAREN] * open_groups.pop())
        else:
            tokens.append(OperatorToken(symbol=char))

    if literal:
        tokens.extend(_negated_literal("".join(literal), negations))
    elif negations:
        raise InsufficientOperands("-")

    return tokens
