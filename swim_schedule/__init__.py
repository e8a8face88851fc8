from .models import DEFAULT_DAY_TABLE, DayRule, DayTable, Heat, ManualOverride, ProjectedHeat, Scheduled
from .config import ScheduleConfig
from .durations import resolve_durations
from .filters import HeatFilter, apply_filter, filter_options
from .functional_scheduler import project, schedule_heats
from .session import ScheduleSession
from .spreadsheet_parser import parse_spreadsheet
from .timeutils import format_duration, parse_duration
from .types import ProjectionResult

__all__ = [
    "DEFAULT_DAY_TABLE",
    "DayRule",
    "DayTable",
    "Heat",
    "HeatFilter",
    "ManualOverride",
    "ProjectedHeat",
    "ProjectionResult",
    "ScheduleConfig",
    "ScheduleSession",
    "Scheduled",
    "apply_filter",
    "filter_options",
    "format_duration",
    "parse_duration",
    "parse_spreadsheet",
    "project",
    "resolve_durations",
    "schedule_heats",
]
