"""Parse and evaluate arithmetic expressions safely."""
import math
import re
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from mini_calc.common.errors import (
    CalculationError,
    ExpressionSyntaxError,
    InvalidCharacterError,
    MismatchedParenthesesError,
    ResultOverflowError,
)
from mini_calc.common.logger import logger
from mini_calc.common.models import CalculationResult
from mini_calc.common.operators import OperatorTable, default_operator_table
from mini_calc.common.tokens import (
    Associativity,
    LeftParenToken,
    NumberToken,
    OperatorToken,
    RightParenToken,
    Token,
)


# Alternate glyphs typed from the keypad, mapped to their ASCII operator
GLYPHS: dict[str, str] = {"×": "*", "÷": "/"}

NUMBER_CHARS: str = "0123456789."
SIGNS: str = "+-"

_WHITESPACE = re.compile(r"\s+")


class ExpressionParser(BaseModel):
    """
    Parse and evaluate arithmetic expressions safely.

    Design constraints:
        - No eval(), no dynamic code execution
        - Safe, deterministic computation
        - The operator table is injected, never looked up globally

    Algorithm:
        1. Normalize alternate glyphs and strip whitespace
        2. Tokenize, fusing unary signs into numeric literals
        3. Convert to Reverse Polish Notation (RPN) using Shunting-yard
        4. Evaluate RPN using a stack

    Examples:
        - Infix expression (standard notation): 3 + 4 * 2
        - Corresponding Reverse Polish Notation (RPN): 3 4 2 * +
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    operators: OperatorTable = Field(default_factory=default_operator_table)

    @staticmethod
    def normalize(raw: str) -> str:
        """
        Replace the ``×`` and ``÷`` glyphs by ``*`` and ``/`` and remove all whitespace.

        :param str raw: Expression as typed

        :return: Canonical expression
        :rtype: str
        """
        for glyph, symbol in GLYPHS.items():
            raw = raw.replace(glyph, symbol)
        return _WHITESPACE.sub("", raw)

    @staticmethod
    def _number(literal: str) -> NumberToken:
        """
        Build a number token from a run of digits and dots, sign included.

        :raises ExpressionSyntaxError: If the literal is not a valid number (e.g. ``1.2.3``)
        :raises ResultOverflowError: If the literal is too large for a float
        """
        try:
            value = float(literal)
        except ValueError as exc:
            raise ExpressionSyntaxError(f"malformed number {literal!r}") from exc
        if not math.isfinite(value):
            raise ResultOverflowError(f"literal {literal[:16]}... out of range")
        return NumberToken(value=value)

    def tokenize(self, expr: str) -> List[Token]:
        """
        Split a normalized expression into tokens in a single left-to-right scan.

        A ``+`` or ``-`` that cannot be a binary operator (at the start, after an
        operator or after ``(``) is fused into the number that follows it, so
        ``3+-2`` gives ``3``, ``+``, ``-2``.

        :param str expr: Normalized expression

        :return: List of tokens
        :rtype: List[Token]
        :raises InvalidCharacterError: If a character is outside the grammar
        :raises ExpressionSyntaxError: If a numeric literal is malformed
        """
        tokens: List[Token] = []
        i, n = 0, len(expr)

        while i < n:
            ch = expr[i]

            if ch in NUMBER_CHARS:
                j = i
                while j < n and expr[j] in NUMBER_CHARS:
                    j += 1
                tokens.append(self._number(expr[i:j]))
                i = j
                continue

            if ch in self.operators:
                prev: Optional[Token] = tokens[-1] if tokens else None
                if ch in SIGNS and (prev is None or isinstance(prev, (OperatorToken, LeftParenToken))):
                    j = i + 1
                    while j < n and expr[j] in NUMBER_CHARS:
                        j += 1
                    if j > i + 1:
                        tokens.append(self._number(expr[i:j]))
                        i = j
                        continue
                # No digits follow: keep the sign as an operator, evaluation rejects it later
                tokens.append(self.operators[ch].token())
                i += 1
                continue

            if ch == "(":
                tokens.append(LeftParenToken())
            elif ch == ")":
                tokens.append(RightParenToken())
            else:
                raise InvalidCharacterError(f"{ch!r} at position {i}")
            i += 1

        return tokens

    @staticmethod
    def _pops_before(incoming: OperatorToken, top: OperatorToken) -> bool:
        """Whether the stacked operator ``top`` must be output before ``incoming`` is pushed."""
        if incoming.associativity is Associativity.LEFT:
            return incoming.precedence <= top.precedence
        return incoming.precedence < top.precedence

    def to_postfix(self, tokens: List[Token]) -> List[Token]:
        """
        Convert a list of tokens into Reverse Polish Notation (RPN) using the Shunting-yard algorithm.

        :param List[Token] tokens: List of arithmetic tokens

        :return: List of tokens in RPN order, without parentheses
        :rtype: List[Token]
        :raises MismatchedParenthesesError: If parentheses are unbalanced
        """
        output: List[Token] = []
        stack: List[Token] = []

        for token in tokens:
            if isinstance(token, NumberToken):
                # Numbers are added directly to the output
                output.append(token)
            elif isinstance(token, OperatorToken):
                while (
                    stack
                    and isinstance(stack[-1], OperatorToken)
                    and self._pops_before(token, stack[-1])
                ):
                    output.append(stack.pop())
                stack.append(token)
            elif isinstance(token, LeftParenToken):
                stack.append(token)
            elif isinstance(token, RightParenToken):
                while stack and not isinstance(stack[-1], LeftParenToken):
                    output.append(stack.pop())
                if not stack:
                    raise MismatchedParenthesesError("unexpected ')'")
                # Discard the matching '('
                stack.pop()
            else:
                raise TypeError(f"Unknown token: {token!r}")

        # Append remaining operators, stack top first
        while stack:
            token = stack.pop()
            if isinstance(token, (LeftParenToken, RightParenToken)):
                raise MismatchedParenthesesError("unclosed '('")
            output.append(token)

        return output

    def evaluate(self, postfix: List[Token]) -> float:
        """
        Evaluate a postfix token sequence with a value stack.

        :param List[Token] postfix: Tokens in RPN order

        :return: Computed result
        :rtype: float
        :raises ExpressionSyntaxError: If operands are missing or left over
        :raises DivisionByZeroError: If a division has a zero right operand
        :raises ResultOverflowError: If any operation yields a non-finite value
        """
        stack: List[float] = []
        for token in postfix:
            if isinstance(token, NumberToken):
                stack.append(token.value)
            elif isinstance(token, OperatorToken):
                # Operator requires two operands
                if len(stack) < 2:
                    raise ExpressionSyntaxError(f"not enough operands for {token.symbol!r}")
                b: float = stack.pop()
                a: float = stack.pop()
                try:
                    value = self.operators[token.symbol].function(a, b)
                except OverflowError as exc:
                    raise ResultOverflowError(f"{a} {token.symbol} {b}") from exc
                if not math.isfinite(value):
                    raise ResultOverflowError(f"{a} {token.symbol} {b}")
                stack.append(value)
            else:
                raise ExpressionSyntaxError(f"unexpected token in postfix: {token!r}")

        if len(stack) != 1:
            raise ExpressionSyntaxError(f"{len(stack)} values remain on the stack")

        return stack[0]

    def calculate(self, raw: str) -> CalculationResult:
        """
        Run the whole pipeline on a raw expression.

        Never raises for a bad expression: every failure is returned as the
        ``error`` of the result.

        :param str raw: Expression as typed

        :return: Value or error, with the normalized expression
        :rtype: CalculationResult
        """
        expression = self.normalize(raw)
        try:
            value = self.evaluate(self.to_postfix(self.tokenize(expression)))
        except CalculationError as exc:
            logger.warning(f"❌ Could not evaluate {expression!r}: {exc}")
            return CalculationResult(expression=expression, error=exc.kind)
        return CalculationResult(expression=expression, value=value)
