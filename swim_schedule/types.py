"""
Type definitions for the heat schedule projection.

This module contains shared type definitions used across the scheduler modules.
"""

from dataclasses import dataclass
from datetime import date
from itertools import groupby

from .config import ScheduleConfig
from .models import DayTable, ProjectedHeat


@dataclass(frozen=True)
class ProjectionResult:
    """Projected schedule: every heat timed, plus the filtered view of it."""

    heats: list[ProjectedHeat]
    all_heats: list[ProjectedHeat]
    config: ScheduleConfig
    day_table: DayTable
    base_date: date

    def by_day(self) -> list[tuple[str, list[ProjectedHeat]]]:
        """Visible heats grouped into consecutive runs of the same day label."""
        return [
            (label, list(group))
            for label, group in groupby(self.heats, key=lambda p: p.day_label)
        ]

    def find(self, event_number: int, heat_index: int) -> ProjectedHeat | None:
        return next(
            (p for p in self.all_heats if p.heat.store_key == (event_number, heat_index)),
            None,
        )

    def visible_day_heats(self) -> list[ProjectedHeat]:
        """Every heat of the days that have at least one visible heat.

        Days share one base date, so live status only looks at the days on screen.
        """
        days = {(p.day_key, p.day_label) for p in self.heats}
        return [p for p in self.all_heats if (p.day_key, p.day_label) in days]
