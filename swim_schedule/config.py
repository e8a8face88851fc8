"""Schedule configuration: turnover, lunch window and fallback heat duration."""

import os
from datetime import date, datetime, time
from pathlib import Path
from typing import Any, Self

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .errors import ConfigurationError
from .timeutils import at_time, parse_duration, parse_time_of_day

# Load .env file if present
load_dotenv()

DEFAULT_ACTUAL_TIMES_FILE = Path("actual_times.json")


class ScheduleConfig(BaseModel):
    """Parameters the schedule projection is computed with."""

    model_config = ConfigDict(frozen=True)

    turnover_seconds: int = Field(
        default=10,
        ge=0,
        description="Gap enforced between the end of one heat and the start of the next",
    )
    lunch_start: time = Field(
        default=time(12, 0),
        description="Start of the daily lunch blackout (HH:MM)",
    )
    lunch_end: time = Field(
        default=time(13, 30),
        description="End of the daily lunch blackout (HH:MM)",
    )
    fallback_duration_seconds: float = Field(
        default=360.0,
        gt=0,
        description="Heat duration used when no entry time exists for the whole event",
    )

    @field_validator('lunch_start', 'lunch_end', mode='before')
    @classmethod
    def parse_clock(cls, v: str | time) -> time:
        """Parse time from HH:MM string if needed."""
        if isinstance(v, time):
            return v
        if isinstance(v, str):
            return parse_time_of_day(v)
        raise ValueError(f"Invalid time format: {v}")

    @field_validator('fallback_duration_seconds', mode='before')
    @classmethod
    def parse_fallback(cls, v: Any) -> Any:
        """Accept "MM:SS" text as well as a number of seconds."""
        if isinstance(v, str):
            seconds = parse_duration(v)
            if seconds is not None:
                return seconds
            try:
                return float(v.strip())
            except ValueError:
                raise ValueError(f"Invalid duration: {v!r}. Expected MM:SS or seconds")
        return v

    @model_validator(mode='after')
    def validate_lunch_window(self) -> Self:
        """Lunch must not end before it starts; equal bounds mean no lunch."""
        if self.lunch_end < self.lunch_start:
            raise ValueError(
                f"lunch_end ({self.lunch_end}) must not be before lunch_start ({self.lunch_start})"
            )
        return self

    def lunch_window(self, base_date: date) -> tuple[datetime, datetime]:
        """Lunch bounds as datetimes on the schedule's base date."""
        return at_time(base_date, self.lunch_start), at_time(base_date, self.lunch_end)

    @classmethod
    def build(cls, **values: Any) -> "ScheduleConfig":
        """Create a config, reporting invalid values as ConfigurationError."""
        try:
            return cls(**{k: v for k, v in values.items() if v is not None})
        except ValidationError as e:
            raise ConfigurationError(str(e)) from e

    @classmethod
    def from_env(cls, **overrides: Any) -> "ScheduleConfig":
        """Load configuration from environment variables, then apply overrides."""
        values: dict[str, Any] = {
            "turnover_seconds": os.getenv("SWIM_TURNOVER_SECONDS"),
            "lunch_start": os.getenv("SWIM_LUNCH_START"),
            "lunch_end": os.getenv("SWIM_LUNCH_END"),
            "fallback_duration_seconds": os.getenv("SWIM_FALLBACK_DURATION"),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls.build(**values)


def actual_times_path() -> Path:
    """Location of the persisted operator actual-end times."""
    return Path(os.getenv("SWIM_ACTUAL_TIMES_FILE", str(DEFAULT_ACTUAL_TIMES_FILE)))
