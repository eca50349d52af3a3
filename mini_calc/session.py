"""Calculator session tying the engine to the input buffer and the stores."""
from pathlib import Path
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from mini_calc.common.logger import logger
from mini_calc.common.models import CalculationResult, HistoryEntry
from mini_calc.engine.formatter import format_calculation, number_text
from mini_calc.engine.parser import ExpressionParser
from mini_calc.storage.history import HistoryStore
from mini_calc.storage.settings import SettingsStore
from mini_calc.storage.storage import JsonStorage


EMPTY_BUFFER: str = "0"

# Number of history entries shown to the user
HISTORY_DISPLAY_LIMIT: int = 50


class CalculatorSession(BaseModel):
    """
    One user session: an input buffer, a parser and the persisted stores.

    The session owns every collaborator explicitly; nothing is shared through
    module-level state. It is single-threaded: each action runs to completion
    before the next one.
    """

    model_config = ConfigDict(validate_assignment=True)

    parser: ExpressionParser = Field(default_factory=ExpressionParser)
    settings: SettingsStore = Field(default_factory=SettingsStore)
    history: HistoryStore = Field(default_factory=HistoryStore)
    buffer: str = Field(default=EMPTY_BUFFER, description="Expression currently being typed")

    @classmethod
    def open(cls, data_dir: Optional[Path] = None) -> "CalculatorSession":
        """
        Create a session whose settings and history persist in ``data_dir``.

        :param Optional[Path] data_dir: Storage directory, None keeps everything in memory

        :return: New session
        :rtype: CalculatorSession
        """
        storage = JsonStorage(directory=data_dir) if data_dir is not None else None
        session = cls(settings=SettingsStore(storage=storage), history=HistoryStore(storage=storage))
        logger.info(f"🧮 Session opened (data: {data_dir or 'memory'})")
        return session

    def append(self, ch: str) -> str:
        """Append typed text to the buffer; a lone ``0`` is replaced by a digit."""
        if self.buffer == EMPTY_BUFFER and ch.isdigit():
            self.buffer = ch
        else:
            self.buffer += ch
        return self.buffer

    def backspace(self) -> str:
        self.buffer = self.buffer[:-1] or EMPTY_BUFFER
        return self.buffer

    def clear(self) -> str:
        self.buffer = EMPTY_BUFFER
        return self.buffer

    def calculate(self, raw: str) -> CalculationResult:
        return self.parser.calculate(raw)

    def display(self, result: CalculationResult) -> str:
        """Render a result with the session's precision."""
        return format_calculation(result, self.settings.precision)

    def evaluate(self, expression: Optional[str] = None) -> Tuple[CalculationResult, str]:
        """
        Evaluate the buffer (or ``expression``) and record it in the history.

        Failed evaluations are recorded too, with the error message in place
        of the numeric result.

        :param Optional[str] expression: Expression to evaluate instead of the buffer

        :return: The result and its display text
        :rtype: Tuple[CalculationResult, str]
        """
        source = self.buffer if expression is None else expression
        result = self.calculate(source)
        text = self.display(result)
        recorded = result.message if result.error is not None else number_text(result.value)
        self.history.record(HistoryEntry.create(expression=source, result=recorded))
        return result, text

    def percent(self) -> CalculationResult:
        """
        Replace the buffer by its value divided by 100.

        On error the buffer is left unchanged and the error result returned.

        :return: Result of dividing the buffer's value by 100
        :rtype: CalculationResult
        """
        result = self.calculate(self.buffer)
        if result.error is not None:
            return result
        scaled = CalculationResult(expression=result.expression, value=result.value / 100)
        self.buffer = number_text(scaled.value)
        return scaled

    def recent_history(self, limit: int = HISTORY_DISPLAY_LIMIT) -> list:
        return self.history.list(limit)
