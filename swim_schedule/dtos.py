"""
Pydantic DTOs for spreadsheet import and schedule export.

Imported rows are lenient: malformed event numbers, heat descriptors and entry
times become zero/absent instead of failing the whole file. Exported rows are
plain strings ready for csv.DictWriter.
"""

from pydantic import BaseModel, Field, field_validator

from .models import ProjectedHeat
from .timeutils import fmt_hms, format_duration, parse_duration


def parse_int(text: str | int | float | None) -> int:
    """Parse a whole number, returning 0 when it cannot be parsed."""
    if isinstance(text, bool):
        return 0
    if isinstance(text, (int, float)):
        return int(text)
    try:
        return int(str(text or "").strip() or "0", 10)
    except ValueError:
        return 0


def parse_heat_descriptor(text: str | None) -> tuple[int, int]:
    """Split a heat descriptor like "3/5" into (index, count).

    A missing part becomes 0, so "3" parses as (3, 0) and "" as (0, 0).
    """
    value = str(text or "").strip()
    index_str, _, count_str = value.partition("/")
    return parse_int(index_str), parse_int(count_str)


class HeatRecordRow(BaseModel):
    """One participant row of the heat spreadsheet."""

    event_number: int = Field(description="Event number, 0 when unparseable")
    heat_index: int = Field(default=0, description="1-based heat position within the event")
    heat_count: int = Field(default=0, description="Number of heats in the event")
    age_group: str = Field(default="", description="Age group label")
    gender: str = Field(default="", description="Gender label")
    event_name: str = Field(default="", description="Stroke/distance description")
    participant: str = Field(default="", description="Swimmer name")
    entry_seconds: float | None = Field(default=None, description="Entry time in seconds")

    @field_validator('event_number', mode='before')
    @classmethod
    def lenient_int(cls, v: str | int | float | None) -> int:
        return parse_int(v)

    @field_validator('age_group', 'gender', 'event_name', 'participant', mode='before')
    @classmethod
    def strip_text(cls, v: object) -> str:
        return str(v if v is not None else "").strip()

    @classmethod
    def from_record(cls, record: dict[str, str]) -> 'HeatRecordRow':
        """Create from a header-keyed record using canonical field names."""
        heat_index, heat_count = parse_heat_descriptor(record.get('heat'))
        return cls(
            event_number=record.get('event_number', ''),
            heat_index=heat_index,
            heat_count=heat_count,
            age_group=record.get('age_group', ''),
            gender=record.get('gender', ''),
            event_name=record.get('event_name', ''),
            participant=record.get('participant', ''),
            entry_seconds=parse_duration(record.get('entry_time', '')),
        )


class ProjectedHeatRow(BaseModel):
    """One row of the exported schedule."""

    day: str
    event_number: int
    heat: str
    age_group: str
    gender: str
    event_name: str
    estimated_duration: str
    scheduled_start: str
    scheduled_end: str
    actual_end: str

    @classmethod
    def from_projected(cls, projected: ProjectedHeat) -> 'ProjectedHeatRow':
        heat = projected.heat
        return cls(
            day=heat.day_label,
            event_number=heat.event_number,
            heat=heat.descriptor,
            age_group=heat.age_group,
            gender=heat.gender,
            event_name=heat.event_name,
            estimated_duration=format_duration(projected.estimated_duration_seconds, always_fraction=True),
            scheduled_start=fmt_hms(projected.scheduled_start),
            scheduled_end=fmt_hms(projected.scheduled_end),
            actual_end=fmt_hms(projected.actual_end),
        )

    def to_csv_dict(self) -> dict[str, str]:
        """Convert to dictionary for CSV writing."""
        return {
            'day': self.day,
            'event_number': str(self.event_number),
            'heat': self.heat,
            'age_group': self.age_group,
            'gender': self.gender,
            'event_name': self.event_name,
            'estimated_duration': self.estimated_duration,
            'scheduled_start': self.scheduled_start,
            'scheduled_end': self.scheduled_end,
            'actual_end': self.actual_end,
        }
