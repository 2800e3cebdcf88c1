"""Normalize raw expression text before tokenization."""
import re
from typing import List, Optional

from shunting_calculator.common.errors import EmptyExpression, InvalidCharacter, MissingOperator

# Marker replacing a unary minus; tags the following literal or group as negated
NEGATION_MARKER = "~"

# Characters after which a minus sign is unary rather than binary
_UNARY_CONTEXT = frozenset("(+-*/%" + NEGATION_MARKER)

# Characters a unary minus may apply to (a literal, a group or another unary minus)
_NEGATABLE = frozenset("0123456789.(-")

# An operand (literal or closing parenthesis) followed only by whitespace and then
# the start of another operand
_MISSING_OPERATOR = re.compile(r"([\d.]+|\))\s+(?=[\d.(" + NEGATION_MARKER + r"])")

_WHITESPACE = re.compile(r"\s+")


def _next_significant(expression: str, start: int) -> Optional[str]:
    """Return the first non-whitespace character at or after ``start``."""
    for index in range(start, len(expression)):
        if not expression[index].isspace():
            return expression[index]
    return None


def mark_unary_minus(expression: str) -> str:
    """
    Replace every unary minus with the negation marker, leaving whitespace in place.

    A minus is unary at the start of the expression or right after an opening
    parenthesis or another operator, provided it is followed by a literal, an
    opening parenthesis or another unary minus.

    :param str expression: Raw expression

    :return: Expression with unary minus signs marked
    :rtype: str
    """
    marked: List[str] = []
    previous: Optional[str] = None

    for index, char in enumerate(expression):
        if (
            char == "-"
            and (previous is None or previous in _UNARY_CONTEXT)
            and _next_significant(expression, index + 1) in _NEGATABLE
        ):
            char = NEGATION_MARKER
        marked.append(char)
        if not char.isspace():
            previous = char

    return "".join(marked)


def normalize(expression: str) -> str:
    """
    Validate and canonicalize an expression for the tokenizer.

    Steps:
        1. Reject empty or whitespace-only input
        2. Mark unary minus signs
        3. Reject operands separated only by whitespace
        4. Remove all whitespace

    :param str expression: Raw expression

    :return: Canonical expression, e.g. "-1 + (-10)" -> "~1+(~10)"
    :rtype: str
    :raises EmptyExpression: If the expression is empty
    :raises InvalidCharacter: If the expression already contains the negation marker
    :raises MissingOperator: If two operands have no operator between them
    """
    if not expression.strip():
        raise EmptyExpression()

    position = expression.find(NEGATION_MARKER)
    if position != -1:
        raise InvalidCharacter(NEGATION_MARKER, position)

    marked = mark_unary_minus(expression)

    match = _MISSING_OPERATOR.search(marked)
    if match:
        raise MissingOperator(expression[match.start() : match.end() + 1])

    return _WHITESPACE.sub("", marked)
