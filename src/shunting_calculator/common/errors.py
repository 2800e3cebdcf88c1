"""Error taxonomy raised by the expression evaluation pipeline."""
from typing import ClassVar


class EvaluationError(ValueError):
    """
    Base class of every failure raised while evaluating an expression.

    Each subclass carries a stable ``kind`` identifier so callers can report
    the failure without parsing the message.
    """

    kind: ClassVar[str] = "EvaluationError"


class EmptyExpression(EvaluationError):
    """The expression is empty or only whitespace."""

    kind = "EmptyExpression"

    def __init__(self) -> None:
        super().__init__("Empty expression")


class MissingOperator(EvaluationError):
    """Two operands are adjacent with no operator between them."""

    kind = "MissingOperator"

    def __init__(self, fragment: str) -> None:
        self.fragment = fragment
        super().__init__(f"Missing operator near {fragment!r}")


class InvalidCharacter(EvaluationError):
    kind = "InvalidCharacter"

    def __init__(self, char: str, position: int) -> None:
        self.char = char
        self.position = position
        super().__init__(f"Invalid character {char!r} at position {position}")


class MalformedNumber(EvaluationError):
    """A numeric literal could not be parsed, e.g. ``1.2.3``."""

    kind = "MalformedNumber"

    def __init__(self, literal: str) -> None:
        self.literal = literal
        super().__init__(f"Malformed number {literal!r}")


class MismatchedParentheses(EvaluationError):
    kind = "MismatchedParentheses"

    def __init__(self) -> None:
        super().__init__("Mismatched parentheses")


class InsufficientOperands(EvaluationError):
    """An operator was applied with fewer than two values available."""

    kind = "InsufficientOperands"

    def __init__(self, operator: str) -> None:
        self.operator = operator
        super().__init__(f"Not enough operands for operator {operator!r}")


class TooManyOperands(EvaluationError):
    """Values are left over once every operator has been applied."""

    kind = "TooManyOperands"

    def __init__(self, count: int) -> None:
        self.count = count
        super().__init__(f"Invalid expression ({count} operands remaining)")


class EmptyResult(EvaluationError):
    kind = "EmptyResult"

    def __init__(self) -> None:
        super().__init__("Expression produced no value")


class DivisionByZero(EvaluationError, ZeroDivisionError):
    """Right operand of ``/`` or ``%`` is exactly zero."""

    kind = "DivisionByZero"

    def __init__(self, operator: str = "/") -> None:
        self.operator = operator
        super().__init__(f"Division by zero with operator {operator!r}")


class NumericOverflow(EvaluationError):
    """A literal or an intermediate value is not a finite number."""

    kind = "NumericOverflow"

    def __init__(self, source: str) -> None:
        self.source = source
        super().__init__(f"Value out of range: {source}")
