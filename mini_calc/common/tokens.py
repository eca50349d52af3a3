"""Token types produced by the tokenizer and consumed by the parser stages."""
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class Associativity(str, Enum):
    LEFT = "left"
    RIGHT = "right"


class _FrozenToken(BaseModel):
    # Tokens never change once the tokenizer has emitted them
    model_config = ConfigDict(frozen=True)


class NumberToken(_FrozenToken):
    """Numeric literal, sign included when a unary sign was fused into it."""

    kind: Literal["number"] = "number"
    value: float = Field(..., description="Parsed numeric value")


class OperatorToken(_FrozenToken):
    """Binary operator with the precedence and associativity of its table entry."""

    kind: Literal["operator"] = "operator"
    symbol: str = Field(..., min_length=1, description="Operator symbol, e.g. '+'")
    precedence: int = Field(..., ge=0, description="Binding strength, higher binds tighter")
    associativity: Associativity = Field(default=Associativity.LEFT)


class LeftParenToken(_FrozenToken):
    kind: Literal["left_paren"] = "left_paren"


class RightParenToken(_FrozenToken):
    kind: Literal["right_paren"] = "right_paren"


# Closed union: every stage handles exactly these four variants
Token = Annotated[
    Union[NumberToken, OperatorToken, LeftParenToken, RightParenToken],
    Field(discriminator="kind"),
]
