"""Lexical tokens produced by the tokenizer and consumed by the parser."""
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

# Operator symbols understood by the pipeline
OperatorSymbol = Literal["+", "-", "*", "/", "%"]
OPERATOR_SYMBOLS: frozenset[str] = frozenset("+-*/%")


class NumberToken(BaseModel):
    """Numeric literal."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["number"] = "number"
    value: float = Field(..., description="Parsed value of the literal")

    def __str__(self) -> str:
        # Render integral values without a trailing ".0"
        return str(int(self.value)) if self.value.is_integer() else repr(self.value)


class OperatorToken(BaseModel):
    """Binary operator."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["operator"] = "operator"
    symbol: OperatorSymbol = Field(..., description="Operator symbol")

    def __str__(self) -> str:
        return self.symbol


class LeftParenToken(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["lparen"] = "lparen"

    def __str__(self) -> str:
        return "("


class RightParenToken(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["rparen"] = "rparen"

    def __str__(self) -> str:
        return ")"


Token = Annotated[
    Union[NumberToken, OperatorToken, LeftParenToken, RightParenToken],
    Field(discriminator="kind"),
]

# Parenthesis tokens carry no data, so a single instance of each is shared
LEFT_PAREN = LeftParenToken()
RIGHT_PAREN = RightParenToken()


def format_rpn(tokens: list[Token]) -> str:
    """
    Render a token sequence as space-separated text.

    Examples:
        - [3, 4, 2, *, +] -> "3 4 2 * +"

    :param list tokens: Token sequence

    :return: Space-separated rendering
    :rtype: str
    """
    return " ".join(str(token) for token in tokens)
