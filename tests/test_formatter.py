"""Test result formatting."""
import pytest

from mini_calc.common.errors import ErrorKind
from mini_calc.common.models import CalculationResult
from mini_calc.engine.formatter import format_calculation, format_result, number_text


@pytest.mark.parametrize("value,precision,expected", [
    (10.0, 6, "10"),
    (-10.0, 6, "-10"),
    (0.0, 6, "0"),
    (-0.0, 6, "0"),
    (1e20, 3, "100000000000000000000"),
    (1e21, 6, "1e+21"),
    (1.2345678901234567e19, 6, "12345678901234567000"),
    (-1.2345678901234567e19, 6, "-12345678901234567000"),
    (2.0 ** 53, 6, "9007199254740992"),
    (9007199254740991.0, 6, "9007199254740991"),
])
def test_integers_have_no_decimal_point(value, precision, expected):
    assert format_result(value, precision) == expected


@pytest.mark.parametrize("value,precision,expected", [
    (1 / 3, 6, "0.333333"),
    (2.5, 6, "2.5"),
    (0.1 + 0.2, 6, "0.3"),
    (2 / 3, 2, "0.67"),
    (-2 / 3, 2, "-0.67"),
    (2.4, 0, "2"),
    (2.5, 0, "3"),
    (-2.5, 0, "-3"),
    (2.9999999, 6, "3"),
    (0.000012345, 6, "0.000012"),
    (123456.789, 1, "123456.8"),
])
def test_fixed_point(value, precision, expected):
    """Fixed-point values are rounded and lose their trailing zeros."""
    assert format_result(value, precision) == expected


@pytest.mark.parametrize("value,precision,expected", [
    (1234567890123.5, 6, "1.23457e+12"),
    (-1234567890123.5, 3, "-1.23e+12"),
    (1.234e-7, 3, "1.23e-7"),
    (2.7e-7, 0, "3e-7"),
    (2.7e-7, 1, "3e-7"),
    (1e12 + 0.5, 6, "1.00000e+12"),
])
def test_exponential(value, precision, expected):
    """Very large or very small fractions use exponential notation."""
    assert format_result(value, precision) == expected


@pytest.mark.parametrize("precision,expected", [
    (20, "0.333333333333"),
    (12, "0.333333333333"),
    (-5, "0"),
])
def test_precision_is_clamped(precision, expected):
    assert format_result(1 / 3, precision) == expected


@pytest.mark.parametrize("value,expected", [
    (0.1, "0.1"),
    (123.456, "123.456"),
    (0.5, "0.5"),
    (0.0000015, "0.0000015"),
    (1e-7, "1e-7"),
    (1.5e300, "1.5e+300"),
    (3.0, "3"),
    (float("inf"), "Infinity"),
    (float("-inf"), "-Infinity"),
    (float("nan"), "NaN"),
])
def test_number_text(value, expected):
    assert number_text(value) == expected


def test_format_calculation_value():
    result = CalculationResult(expression="1/3", value=1 / 3)
    assert format_calculation(result, 4) == "0.3333"


def test_format_calculation_error():
    result = CalculationResult(expression="5/0", error=ErrorKind.DIVISION_BY_ZERO)
    assert format_calculation(result, 6) == "Division by zero"
