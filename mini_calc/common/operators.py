"""Operator table used to parse and evaluate arithmetic expressions."""
from collections.abc import Callable, Iterable, Mapping
import operator
from types import MappingProxyType
from typing import Dict

from pydantic import BaseModel, ConfigDict, Field

from mini_calc.common.errors import DivisionByZeroError
from mini_calc.common.tokens import Associativity, OperatorToken


# Type alias for operator functions (taking two floats, returning a float)
OperatorFn = Callable[[float, float], float]


def divide(a: float, b: float) -> float:
    """
    Divide ``a`` by ``b``.

    :raises DivisionByZeroError: If ``b`` is exactly zero
    """
    if b == 0:
        raise DivisionByZeroError(f"{a} / {b}")
    return a / b


class OperatorSpec(BaseModel):
    """Precedence, associativity and binary function of one operator symbol."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    symbol: str = Field(..., min_length=1, max_length=1)
    precedence: int = Field(..., ge=0)
    associativity: Associativity = Field(default=Associativity.LEFT)
    function: OperatorFn = Field(..., description="Binary function applied as function(left, right)")

    def token(self) -> OperatorToken:
        """Build the operator token the tokenizer emits for this symbol."""
        return OperatorToken(
            symbol=self.symbol,
            precedence=self.precedence,
            associativity=self.associativity,
        )


class OperatorTable(Mapping):
    """
    Immutable mapping of operator symbols to their :class:`OperatorSpec`.

    The table is built once and handed to the parser; nothing can be added or
    removed afterwards.
    """

    def __init__(self, specs: Iterable[OperatorSpec]) -> None:
        entries: Dict[str, OperatorSpec] = {}
        for spec in specs:
            if spec.symbol in entries:
                raise ValueError(f"Duplicate operator symbol: {spec.symbol!r}")
            entries[spec.symbol] = spec
        self._entries = MappingProxyType(entries)

    def __getitem__(self, symbol: str) -> OperatorSpec:
        return self._entries[symbol]

    def __iter__(self):
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"OperatorTable({', '.join(self._entries)})"


def default_operator_table() -> OperatorTable:
    """Return the table for ``+ - * /``: products bind tighter than sums, all left-associative."""
    return OperatorTable(
        [
            OperatorSpec(symbol="+", precedence=1, function=operator.add),
            OperatorSpec(symbol="-", precedence=1, function=operator.sub),
            OperatorSpec(symbol="*", precedence=2, function=operator.mul),
            OperatorSpec(symbol="/", precedence=2, function=divide),
        ]
    )
