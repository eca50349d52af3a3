"""Render calculation results as display text."""
from decimal import ROUND_HALF_UP, Decimal, localcontext
import math

from mini_calc.common.models import MAX_PRECISION, MIN_PRECISION, CalculationResult


# Beyond these magnitudes a non-integral value is shown in exponential notation
EXPONENTIAL_ABOVE: float = 1e12
EXPONENTIAL_BELOW: float = 1e-6

# Default number-to-string conversion switches to exponential outside [1e-6, 1e21)
_PLAIN_BELOW: float = 1e-6
_PLAIN_ABOVE: float = 1e21

# Integers from 2**53 up print their shortest round-trip digits, zero padded
_EXACT_INTEGERS_BELOW: float = 2.0 ** 53


def _clamp_precision(precision: int) -> int:
    return max(MIN_PRECISION, min(MAX_PRECISION, int(precision)))


def _tidy_exponent(text: str) -> str:
    """Rewrite ``1.5e-07`` / ``1.5E+12`` as ``1.5e-7`` / ``1.5e+12``."""
    mantissa, _, exponent = text.lower().partition("e")
    return f"{mantissa}e{int(exponent):+d}"


def number_text(value: float) -> str:
    """
    Default number-to-string conversion.

    Integers print without a decimal point, other values with the shortest
    digits that round-trip; exponential notation is used only below 1e-6 or
    from 1e21 upwards.

    :param float value: Number to render

    :return: Text form of the number
    :rtype: str
    """
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    magnitude = abs(value)
    if value.is_integer() and magnitude < _EXACT_INTEGERS_BELOW:
        return str(int(value))
    if _PLAIN_BELOW <= magnitude < _PLAIN_ABOVE:
        return format(Decimal(repr(value)).normalize(), "f")
    return _tidy_exponent(repr(value))


def _exponential(value: float, digits: int) -> str:
    # Round the exact binary value, ties away from zero
    with localcontext() as ctx:
        ctx.rounding = ROUND_HALF_UP
        return _tidy_exponent(format(Decimal(value), f".{digits}e"))


def _fixed(value: float, digits: int) -> str:
    rounded = Decimal(value).quantize(Decimal(1).scaleb(-digits), rounding=ROUND_HALF_UP)
    return number_text(float(rounded))


def format_result(value: float, precision: int) -> str:
    """
    Render a numeric result for display.

    Rules, applied in order:
        1. Integral values use :func:`number_text`, never a decimal point.
        2. Values with ``|v| >= 1e12`` or ``0 < |v| < 1e-6`` use exponential
           notation with ``precision - 1`` mantissa digits (at least 0).
        3. Other values are rounded to ``precision`` fractional digits and
           trailing zeros are dropped.

    :param float value: Numeric result
    :param int precision: Fractional digits, clamped into [0, 12]

    :return: Display text
    :rtype: str
    """
    precision = _clamp_precision(precision)
    value = float(value)
    if not math.isfinite(value) or value.is_integer():
        return number_text(value)
    magnitude = abs(value)
    if magnitude >= EXPONENTIAL_ABOVE or (magnitude != 0 and magnitude < EXPONENTIAL_BELOW):
        return _exponential(value, max(precision - 1, 0))
    return _fixed(value, precision)


def format_calculation(result: CalculationResult, precision: int) -> str:
    """Render a calculation: its error message, or its value via :func:`format_result`."""
    if result.error is not None:
        return result.error.message
    return format_result(result.value, precision)
