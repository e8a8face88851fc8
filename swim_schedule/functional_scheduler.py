"""
Functional, stateless implementation of the heat scheduler.

The schedule is a left fold over the heats in race order (event number, then
heat index). The accumulator carries the time cursor and the day it belongs to;
each step stamps one heat and advances the cursor past the heat's end (the
operator's actual end when recorded) plus turnover, skipping lunch. Nothing is
cached between calls: every input change means a fresh projection.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Sequence

from .config import ScheduleConfig
from .durations import resolve_durations
from .filters import HeatFilter, apply_filter
from .models import DEFAULT_DAY_TABLE, DayTable, Heat, ProjectedHeat
from .timeutils import add_seconds_skipping_lunch, advance_cursor, at_time, move_out_of_lunch
from .types import ProjectionResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SchedulingWindow:
    """Config values placed on the schedule's base date."""

    base_date: date
    lunch_start: datetime
    lunch_end: datetime
    turnover_seconds: int

    @classmethod
    def from_config(cls, config: ScheduleConfig, base_date: date) -> "SchedulingWindow":
        lunch_start, lunch_end = config.lunch_window(base_date)
        return cls(
            base_date=base_date,
            lunch_start=lunch_start,
            lunch_end=lunch_end,
            turnover_seconds=config.turnover_seconds,
        )


@dataclass(frozen=True)
class CursorState:
    """Fold accumulator. day is None before the first heat."""

    cursor: datetime | None = None
    day: tuple[str, str] | None = None


def schedule_heat(
    state: CursorState,
    heat: Heat,
    window: SchedulingWindow,
    day_table: DayTable,
) -> tuple[ProjectedHeat, CursorState]:
    """Stamp one heat and return it with the accumulator for the next heat."""
    day = (heat.day_key, heat.day_label)
    if state.cursor is None or day != state.day:
        # New day: the previous day's last heat (and its actual end) is irrelevant.
        cursor = at_time(window.base_date, day_table.day_start_of(heat.day_key))
    else:
        # Already advanced past the previous heat's actual end when it had one.
        cursor = state.cursor

    cursor = move_out_of_lunch(cursor, window.lunch_start, window.lunch_end)
    scheduled_end = add_seconds_skipping_lunch(
        cursor,
        heat.estimated_duration_seconds or 0.0,
        window.lunch_start,
        window.lunch_end,
    )

    actual_end_time = heat.actual_end_time
    actual_end = at_time(window.base_date, actual_end_time) if actual_end_time is not None else None

    projected = ProjectedHeat(
        heat=heat,
        scheduled_start=cursor,
        scheduled_end=scheduled_end,
        actual_end=actual_end,
    )
    next_cursor = advance_cursor(
        projected.display_end,
        window.turnover_seconds,
        window.lunch_start,
        window.lunch_end,
    )
    return projected, CursorState(cursor=next_cursor, day=day)


def schedule_heats(
    heats: Sequence[Heat],
    config: ScheduleConfig,
    day_table: DayTable,
    base_date: date,
) -> list[ProjectedHeat]:
    """Compute scheduled start/end for heats already sorted and duration-resolved."""
    window = SchedulingWindow.from_config(config, base_date)

    state = CursorState()
    projected: list[ProjectedHeat] = []
    for heat in heats:
        item, state = schedule_heat(state, heat, window, day_table)
        projected.append(item)
    return projected


def sort_heats(heats: Sequence[Heat]) -> list[Heat]:
    """Race order: event number, then heat index."""
    return sorted(heats, key=lambda h: h.sort_key)


def project(
    heats: Sequence[Heat],
    config: ScheduleConfig,
    day_table: DayTable = DEFAULT_DAY_TABLE,
    heat_filter: HeatFilter | None = None,
    base_date: date | None = None,
) -> ProjectionResult:
    """
    Project the full schedule for a heat set.

    Durations are resolved and times computed over the complete heat list;
    the filter only selects which projected heats are visible.

    Args:
        heats: Heat records from ingestion, in any order
        config: Turnover, lunch window and fallback duration
        day_table: Event number ranges and start time of each day
        heat_filter: Optional display filter
        base_date: Date the wall-clock timestamps are placed on (default today)

    Returns:
        ProjectionResult with both the visible and the full projected heat lists
    """
    base_date = base_date or date.today()

    resolved = resolve_durations(heats, config.fallback_duration_seconds)
    ordered = sort_heats([heat.with_day(day_table) for heat in resolved])

    unscheduled_day = [h for h in ordered if not h.day_key]
    if unscheduled_day:
        logger.warning(
            f"{len(unscheduled_day)} heat(s) have event numbers outside every day range; "
            f"scheduling them from {day_table.default_day_start.strftime('%H:%M')}"
        )

    all_heats = schedule_heats(ordered, config, day_table, base_date)
    visible = apply_filter(all_heats, heat_filter)

    return ProjectionResult(
        heats=visible,
        all_heats=all_heats,
        config=config,
        day_table=day_table,
        base_date=base_date,
    )
