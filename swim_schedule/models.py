from dataclasses import dataclass, field, replace
from datetime import datetime, time


@dataclass(frozen=True)
class Scheduled:
    """No operator override: the heat ends when the estimate says it does."""


@dataclass(frozen=True)
class ManualOverride:
    """Operator-observed finish time for a heat."""

    end: time


ActualEnd = Scheduled | ManualOverride

SCHEDULED = Scheduled()


@dataclass(frozen=True)
class DayRule:
    """One competition day: a contiguous range of event numbers and its start time."""

    key: str
    label: str
    start_event: int
    end_event: int
    day_start: time

    def contains(self, event_number: int) -> bool:
        return self.start_event <= event_number <= self.end_event


@dataclass(frozen=True)
class DayTable:
    """Ordered day rules partitioning the event number space.

    Event numbers outside every rule belong to a pseudo-day with an empty key
    and label; it starts at default_day_start.
    """

    rules: tuple[DayRule, ...]
    default_day_start: time = time(9, 0)

    def day_key_of(self, event_number: int) -> str:
        for rule in self.rules:
            if rule.contains(event_number):
                return rule.key
        return ""

    def day_label_of(self, key: str) -> str:
        rule = self._rule(key)
        return rule.label if rule else ""

    def day_start_of(self, key: str) -> time:
        rule = self._rule(key)
        return rule.day_start if rule else self.default_day_start

    def _rule(self, key: str) -> DayRule | None:
        if not key:
            return None
        return next((rule for rule in self.rules if rule.key == key), None)


# Three-day meet the tool was first used for: day one starts later than the
# weekend days.
DEFAULT_DAY_TABLE = DayTable(
    rules=(
        DayRule("d1", "Day 1 (Fri 19 Sep)", 1, 28, time(9, 0)),
        DayRule("d2", "Day 2 (Sat 20 Sep)", 29, 82, time(8, 15)),
        DayRule("d3", "Day 3 (Sun 21 Sep)", 83, 136, time(8, 15)),
    ),
)


@dataclass(frozen=True)
class Heat:
    """One race within an event, identified by event number and heat index/count."""

    event_number: int
    heat_index: int
    heat_count: int
    age_group: str = ""
    gender: str = ""
    event_name: str = ""
    recorded_durations: tuple[float, ...] = ()
    participants: tuple[str, ...] = ()
    estimated_duration_seconds: float | None = None
    day_key: str = ""
    day_label: str = ""
    actual_end: ActualEnd = field(default=SCHEDULED)

    @property
    def key(self) -> tuple[int, int, int]:
        return (self.event_number, self.heat_index, self.heat_count)

    @property
    def store_key(self) -> tuple[int, int]:
        """Key under which the operator's actual end is persisted."""
        return (self.event_number, self.heat_index)

    @property
    def sort_key(self) -> tuple[int, int]:
        return (self.event_number, self.heat_index)

    @property
    def descriptor(self) -> str:
        return f"{self.heat_index}/{self.heat_count}"

    @property
    def actual_end_time(self) -> time | None:
        if isinstance(self.actual_end, ManualOverride):
            return self.actual_end.end
        return None

    def with_actual_end(self, end: time | None) -> "Heat":
        return replace(self, actual_end=ManualOverride(end) if end is not None else SCHEDULED)

    def with_day(self, day_table: DayTable) -> "Heat":
        key = day_table.day_key_of(self.event_number)
        return replace(self, day_key=key, day_label=day_table.day_label_of(key))


@dataclass(frozen=True)
class ProjectedHeat:
    """A heat with its scheduled start/end on the schedule's base date."""

    heat: Heat
    scheduled_start: datetime
    scheduled_end: datetime
    actual_end: datetime | None = None

    @property
    def display_end(self) -> datetime:
        return self.actual_end or self.scheduled_end

    @property
    def estimated_duration_seconds(self) -> float:
        return self.heat.estimated_duration_seconds or 0.0

    @property
    def event_number(self) -> int:
        return self.heat.event_number

    @property
    def heat_index(self) -> int:
        return self.heat.heat_index

    @property
    def day_key(self) -> str:
        return self.heat.day_key

    @property
    def day_label(self) -> str:
        return self.heat.day_label
