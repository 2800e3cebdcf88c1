"""Parse and evaluate arithmetic operations safely."""
from collections.abc import Callable as ABCCallable
import math
import operator
from types import MappingProxyType
from typing import Callable, List, Mapping, NamedTuple

from shunting_calculator.common.errors import (
    DivisionByZero,
    EmptyResult,
    InsufficientOperands,
    MismatchedParentheses,
    NumericOverflow,
    TooManyOperands,
)
from shunting_calculator.common.logger import logger
from shunting_calculator.common.normalizer import normalize
from shunting_calculator.common.tokenizer import tokenize
from shunting_calculator.common.tokens import (
    LeftParenToken,
    NumberToken,
    OperatorToken,
    RightParenToken,
    Token,
    format_rpn,
)


# Type alias for operator functions (taking two floats, returning a float)
OperatorFn: ABCCallable[[float, float], float] = Callable[[float, float], float]


class OperatorSpec(NamedTuple):
    precedence: int
    function: OperatorFn


# Read-only mapping of operator symbols to (precedence, function), built once
OPERATORS: Mapping[str, OperatorSpec] = MappingProxyType(
    {
        "+": OperatorSpec(1, operator.add),
        "-": OperatorSpec(1, operator.sub),
        "*": OperatorSpec(2, operator.mul),
        "/": OperatorSpec(2, operator.truediv),
        "%": OperatorSpec(2, math.fmod),
    }
)

# Operators whose right operand must not be zero
_ZERO_GUARDED = frozenset("/%")


class ExpressionParser:
    """
    Parse and evaluate arithmetic expressions safely.

    Design constraints:
        - No eval(), no dynamic code execution
        - Safe, deterministic computation
        - No state kept between calls

    Algorithm:
        1. Normalize: validate the raw text, mark unary minus signs, drop whitespace
        2. Tokenize into numbers, operators and parentheses
        3. Convert to Reverse Polish Notation (RPN) using Shunting-yard
        4. Evaluate RPN using a stack

    The Shunting-yard algorithm converts an infix expression into Reverse Polish Notation (RPN), allowing safe, stack-based evaluation without parentheses.
    It handles operator precedence by temporarily storing operators on a stack and outputting them in the correct order.

    Examples:
        - Infix expression (standard notation): 3 + 4 * 2
        - Corresponding Reverse Polish Notation (RPN): 3 4 2 * +

    """

    @staticmethod
    def tokenize(expr: str) -> List[Token]:
        """
        Normalize an arithmetic expression and split it into tokens.

        Whitespace is optional (e.g., "3+4 * 2").

        :param str expr: Arithmetic expression as a string

        :return: List of tokens
        :rtype: List[Token]
        """
        return tokenize(normalize(expr))

    @staticmethod
    def to_rpn(tokens: List[Token]) -> List[Token]:
        """
        Convert a list of tokens into Reverse Polish Notation (RPN) using the Shunting-yard algorithm.

        Operators of equal precedence are popped before pushing, which makes every operator left-associative.

        :param List[Token] tokens: List of arithmetic tokens

        :return: List of tokens in RPN order
        :rtype: List[Token]
        :raises MismatchedParentheses: If parentheses are not balanced
        """
        output: List[Token] = []
        stack: List[Token] = []

        for token in tokens:
            if isinstance(token, NumberToken):
                # Numbers are added directly to the output
                output.append(token)
            elif isinstance(token, OperatorToken):
                # Operator: pop operators from stack with higher or equal precedence
                prec = OPERATORS[token.symbol].precedence
                while (
                    stack
                    and isinstance(stack[-1], OperatorToken)
                    and OPERATORS[stack[-1].symbol].precedence >= prec
                ):
                    output.append(stack.pop())
                stack.append(token)
            elif isinstance(token, LeftParenToken):
                stack.append(token)
            elif isinstance(token, RightParenToken):
                # Unwind to the matching opening parenthesis, which is discarded
                while stack and not isinstance(stack[-1], LeftParenToken):
                    output.append(stack.pop())
                if not stack:
                    raise MismatchedParentheses()
                stack.pop()

        # Append remaining operators in reverse order (stack top first)
        while stack:
            token = stack.pop()
            if isinstance(token, LeftParenToken):
                raise MismatchedParentheses()
            output.append(token)
        return output

    @staticmethod
    def evaluate_rpn(rpn: List[Token]) -> float:
        """
        Evaluate a Reverse Polish Notation token sequence using a stack.

        :param List[Token] rpn: Tokens in RPN order

        :return: Computed result as float
        :rtype: float
        :raises InsufficientOperands: If an operator has fewer than two operands
        :raises DivisionByZero: If the right operand of "/" or "%" is zero
        :raises NumericOverflow: If a value or an intermediate result is not finite
        :raises TooManyOperands: If more than one value remains
        :raises EmptyResult: If no value remains
        """
        stack: List[float] = []
        for token in rpn:
            if isinstance(token, NumberToken):
                if not math.isfinite(token.value):
                    raise NumericOverflow(str(token))
                stack.append(token.value)
                continue

            # Operator requires two operands
            if len(stack) < 2:
                raise InsufficientOperands(token.symbol)
            b: float = stack.pop()
            a: float = stack.pop()
            if token.symbol in _ZERO_GUARDED and b == 0:
                raise DivisionByZero(token.symbol)
            value: float = OPERATORS[token.symbol].function(a, b)
            if not math.isfinite(value):
                raise NumericOverflow(f"{a!r} {token.symbol} {b!r}")
            stack.append(value)

        if not stack:
            raise EmptyResult()
        if len(stack) > 1:
            raise TooManyOperands(len(stack))

        return stack[0]

    @staticmethod
    def evaluate(expr: str) -> float:
        """
        Evaluate an arithmetic expression safely.

        :param str expr: Arithmetic expression string

        :return: Computed result as float
        :rtype: float
        :raises EvaluationError: If expression is invalid or malformed
        """
        tokens: List[Token] = ExpressionParser.tokenize(expr)
        rpn: List[Token] = ExpressionParser.to_rpn(tokens)
        logger.debug(f"🧮 {expr!r} -> RPN {format_rpn(rpn)!r}")
        return ExpressionParser.evaluate_rpn(rpn)


def evaluate(expression: str) -> float:
    """
    Evaluate an arithmetic expression and return its value.

    :param str expression: Arithmetic expression string

    :return: Computed result as float
    :rtype: float
    :raises EvaluationError: If the expression cannot be evaluated
    """
    return ExpressionParser.evaluate(expression)
