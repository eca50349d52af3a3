"""Test class CalculatorSession."""
from pathlib import Path

import pytest

from mini_calc.common.errors import ErrorKind
from mini_calc.session import CalculatorSession


@pytest.fixture
def session() -> CalculatorSession:
    return CalculatorSession()


def test_buffer_editing(session: CalculatorSession) -> None:
    """A digit replaces the initial 0, backspace falls back to 0."""
    assert session.buffer == "0"
    assert session.append("7") == "7"
    assert session.append("×") == "7×"
    assert session.append("2") == "7×2"
    assert session.backspace() == "7×"
    session.clear()
    assert session.append(".") == "0."
    assert session.backspace() == "0"
    assert session.backspace() == "0"


def test_evaluate_buffer_records_history(session: CalculatorSession) -> None:
    for ch in "1÷3":
        session.append(ch)

    result, text = session.evaluate()

    assert result.expression == "1/3"
    assert text == "0.333333"
    entry = session.history.list()[0]
    assert entry.expression == "1÷3"
    assert entry.result == "0.3333333333333333"


def test_failed_evaluation_is_recorded(session: CalculatorSession) -> None:
    """Errors are kept in the history with their message."""
    result, text = session.evaluate("5/0")

    assert result.error is ErrorKind.DIVISION_BY_ZERO
    assert text == "Division by zero"
    assert session.history.list()[0].result == "Division by zero"


def test_evaluate_uses_session_precision(session: CalculatorSession) -> None:
    session.settings.set_precision(2)
    assert session.evaluate("2/3")[1] == "0.67"


def test_percent(session: CalculatorSession) -> None:
    session.append("5")
    session.append("0")
    result = session.percent()
    assert result.value == 0.5
    assert session.buffer == "0.5"


def test_percent_of_expression(session: CalculatorSession) -> None:
    session.buffer = "(2+3)×4"
    session.percent()
    assert session.buffer == "0.2"


def test_percent_error_keeps_buffer(session: CalculatorSession) -> None:
    session.buffer = "5/0"
    result = session.percent()
    assert result.error is ErrorKind.DIVISION_BY_ZERO
    assert session.buffer == "5/0"
    assert len(session.history) == 0


def test_recent_history_limit(session: CalculatorSession) -> None:
    for i in range(60):
        session.evaluate(f"{i}+1")
    recent = session.recent_history()
    assert len(recent) == 50
    assert recent[0].expression == "59+1"


def test_open_persists_between_sessions(tmp_path: Path) -> None:
    first = CalculatorSession.open(tmp_path)
    first.settings.set_precision(3)
    first.evaluate("2+3*4")

    second = CalculatorSession.open(tmp_path)
    assert second.settings.precision == 3
    assert [(e.expression, e.result) for e in second.history.list()] == [("2+3*4", "14")]
