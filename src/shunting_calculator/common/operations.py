"""Pydantic models for arithmetic operation requests and results."""
from typing import Union

from pydantic import BaseModel, Field

from shunting_calculator.common.errors import EvaluationError
from shunting_calculator.common.parser import ExpressionParser


class OperationRequest(BaseModel):
    """Represents a single arithmetic expression to evaluate."""

    expression: str = Field(..., description="Arithmetic expression as a string")

class OperationResult(BaseModel):
    """Represents the result of an evaluated arithmetic operation."""

    expression: str = Field(..., description="Original arithmetic expression")
    result: float = Field(..., description="Evaluated numeric result of the expression")
    line: int = Field(default=1, ge=1, description="Line number in the input")

    def __str__(self) -> str:
        return f"{self.expression} = {self.result}"

class OperationFailure(BaseModel):
    """Represents an arithmetic operation that could not be evaluated."""

    expression: str = Field(..., description="Original arithmetic expression")
    error: str = Field(..., description="Human readable error message")
    kind: str = Field(..., description="Error kind, e.g. DivisionByZero")
    line: int = Field(default=1, ge=1, description="Line number in the input")

    def __str__(self) -> str:
        return f"{self.expression} -> ERROR: {self.kind}: {self.error}"


def evaluate_request(request: OperationRequest, line: int = 1) -> Union[OperationResult, OperationFailure]:
    """
    Evaluate a request, turning evaluation errors into an OperationFailure.

    :param OperationRequest request: Expression to evaluate
    :param int line: Line number of the expression in its input

    :return: Result or failure model
    :rtype: Union[OperationResult, OperationFailure]
    """
    try:
        result = ExpressionParser.evaluate(request.expression)
    except EvaluationError as exc:
        return OperationFailure(expression=request.expression, error=str(exc), kind=exc.kind, line=line)
    return OperationResult(expression=request.expression, result=result, line=line)
