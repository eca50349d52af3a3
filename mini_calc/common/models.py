"""Pydantic models exchanged between the engine, the stores and the caller."""
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from mini_calc.common.errors import ErrorKind


MIN_PRECISION: int = 0
MAX_PRECISION: int = 12
DEFAULT_PRECISION: int = 6

# Last history id handed out, in milliseconds since the epoch
_last_id_ms: int = 0


def next_entry_id(now: datetime) -> str:
    """
    Return a history id for ``now``: its epoch milliseconds, bumped past the
    previous id when the clock has not moved since.

    :param datetime now: Creation time of the entry

    :return: Unique, increasing id
    :rtype: str
    """
    global _last_id_ms
    _last_id_ms = max(int(now.timestamp() * 1000), _last_id_ms + 1)
    return str(_last_id_ms)


class CalculationResult(BaseModel):
    """Outcome of one calculation: either a numeric value or an error kind, never both."""

    model_config = ConfigDict(frozen=True)

    expression: str = Field(..., description="Normalized expression that was evaluated")
    value: Optional[float] = Field(default=None, description="Numeric result on success")
    error: Optional[ErrorKind] = Field(default=None, description="Failure kind on error")

    @model_validator(mode="after")
    def exactly_one_outcome(self) -> "CalculationResult":
        """Ensure that exactly one of value and error is set."""
        if (self.value is None) == (self.error is None):
            raise ValueError("Exactly one of value and error must be set")
        return self

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def message(self) -> Optional[str]:
        """Human-readable error message, or None on success."""
        return self.error.message if self.error is not None else None


class HistoryEntry(BaseModel):
    """One recorded evaluation; never modified after it is stored."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Unique creation time in milliseconds since the epoch")
    expression: str = Field(..., description="Input buffer as typed by the user")
    result: str = Field(..., description="Numeric text or error message")
    timestamp: str = Field(..., description="ISO-8601 creation time")

    @classmethod
    def create(cls, expression: str, result: str) -> "HistoryEntry":
        """Build an entry stamped with the current UTC time."""
        now = datetime.now(timezone.utc)
        return cls(
            id=next_entry_id(now),
            expression=expression,
            result=result,
            timestamp=now.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
        )


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"


class Settings(BaseModel):
    """
    Persisted user preferences.

    Unknown keys found in storage are ignored and missing keys take their
    defaults, so an older or partial record still loads.
    """

    model_config = ConfigDict(extra="ignore", validate_assignment=True)

    theme: Theme = Field(default=Theme.LIGHT)
    precision: int = Field(default=DEFAULT_PRECISION, description="Fractional digits shown")

    @field_validator("precision", mode="before")
    def clamp_precision(cls, v) -> int:
        """Clamp the precision into the displayable range."""
        try:
            precision = int(v)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Precision must be an integer, got {v!r}") from exc
        return max(MIN_PRECISION, min(MAX_PRECISION, precision))
