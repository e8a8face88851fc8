"""
Operator session: the loaded heat set, its configuration and actual-end edits.

The session owns the only mutable state (the heat list with operator
overrides). Every projection is recomputed from scratch.
"""

import logging
from datetime import date
from typing import Sequence

from .actual_times import ActualEndStore
from .config import ScheduleConfig
from .filters import HeatFilter
from .functional_scheduler import project
from .models import DEFAULT_DAY_TABLE, DayTable, Heat
from .timeutils import at_time, move_out_of_lunch, parse_time_of_day
from .types import ProjectionResult

logger = logging.getLogger(__name__)


class ScheduleSession:
    """Heat set plus the operator's recorded finish times."""

    def __init__(
        self,
        heats: Sequence[Heat],
        config: ScheduleConfig,
        day_table: DayTable = DEFAULT_DAY_TABLE,
        store: ActualEndStore | None = None,
        base_date: date | None = None,
    ):
        self.config = config
        self.day_table = day_table
        self.store = store
        self.base_date = base_date or date.today()
        self.heats: list[Heat] = []
        self.load_heats(heats)

    def load_heats(self, heats: Sequence[Heat]) -> None:
        """Replace the heat set, re-applying persisted actual ends."""
        persisted = self.store.load_all() if self.store else {}
        self.heats = [heat.with_actual_end(persisted.get(heat.store_key)) for heat in heats]
        restored = sum(1 for h in self.heats if h.actual_end_time is not None)
        logger.info(f"Session loaded {len(self.heats)} heats ({restored} with actual end)")

    def update_config(self, config: ScheduleConfig) -> None:
        self.config = config

    def set_actual_end(self, event_number: int, heat_index: int, hhmm: str | None) -> None:
        """
        Record or clear the actual end of a heat.

        A time inside the lunch window is moved to the end of lunch. None or an
        empty string clears the override.

        Raises:
            KeyError: If no heat has this event number and heat index
            ValueError: If hhmm is not a valid time of day
        """
        key = (event_number, heat_index)
        positions = [i for i, h in enumerate(self.heats) if h.store_key == key]
        if not positions:
            raise KeyError(f"No heat {heat_index} in event {event_number}")

        if hhmm is None or not hhmm.strip():
            end = None
        else:
            lunch_start, lunch_end = self.config.lunch_window(self.base_date)
            moment = at_time(self.base_date, parse_time_of_day(hhmm))
            end = move_out_of_lunch(moment, lunch_start, lunch_end).time()

        for i in positions:
            self.heats[i] = self.heats[i].with_actual_end(end)

        if self.store is not None:
            if end is None:
                self.store.remove(event_number, heat_index)
            else:
                self.store.save(event_number, heat_index, end)

        if end is None:
            logger.info(f"Cleared actual end of event {event_number} heat {heat_index}")
        else:
            logger.info(f"Event {event_number} heat {heat_index} finished at {end.strftime('%H:%M')}")

    def projection(self, heat_filter: HeatFilter | None = None) -> ProjectionResult:
        return project(
            self.heats,
            self.config,
            day_table=self.day_table,
            heat_filter=heat_filter,
            base_date=self.base_date,
        )
