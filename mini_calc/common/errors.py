"""Error taxonomy of the calculation pipeline."""
from enum import Enum


class ErrorKind(str, Enum):
    """Kinds of failure a calculation can end with, valued by their display message."""

    INVALID_CHARACTER = "Invalid character"
    MISMATCHED_PARENTHESES = "Mismatched parentheses"
    SYNTAX = "Syntax error"
    DIVISION_BY_ZERO = "Division by zero"
    OVERFLOW = "Overflow"

    @property
    def message(self) -> str:
        return self.value


class CalculationError(ValueError):
    """Base class for every failure raised inside the pipeline."""

    kind: ErrorKind = ErrorKind.SYNTAX

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__(f"{self.kind.message}: {detail}" if detail else self.kind.message)


class InvalidCharacterError(CalculationError):
    kind = ErrorKind.INVALID_CHARACTER


class MismatchedParenthesesError(CalculationError):
    kind = ErrorKind.MISMATCHED_PARENTHESES


class ExpressionSyntaxError(CalculationError):
    kind = ErrorKind.SYNTAX


class DivisionByZeroError(CalculationError):
    kind = ErrorKind.DIVISION_BY_ZERO


class ResultOverflowError(CalculationError):
    kind = ErrorKind.OVERFLOW
