"""
Schedule printing and formatting utilities.

Formats a projected heat schedule for the terminal, one line per heat with a
header line per day.
"""

from datetime import datetime

from .live_status import current_heat, marshalling_heat
from .models import ProjectedHeat
from .timeutils import fmt_hm, fmt_hms, format_duration
from .types import ProjectionResult


def format_heat_line(projected: ProjectedHeat, marker: str = " ") -> str:
    heat = projected.heat
    actual = f"  actual {fmt_hm(projected.actual_end)}" if projected.actual_end else ""
    return (
        f"{marker} #{heat.event_number:<4d}{heat.descriptor:>6}  "
        f"{fmt_hms(projected.scheduled_start)}-{fmt_hms(projected.scheduled_end)}  "
        f"{format_duration(projected.estimated_duration_seconds, always_fraction=True):>8}  "
        f"{heat.age_group} {heat.gender} {heat.event_name}".rstrip()
        + actual
    )


def format_schedule_for_printing(result: ProjectionResult, now: datetime | None = None) -> str:
    """Format a projection for readable printing."""
    if not result.heats:
        return "No heats scheduled"

    day_heats = result.visible_day_heats()
    running = current_heat(day_heats, now) if now else None

    lines: list[str] = []
    for day_label, heats in result.by_day():
        lines.append("")
        lines.append(f"📅 {day_label or 'Unscheduled day'}")
        lines.append("-" * 80)
        for projected in heats:
            marker = "▶" if running is not None and projected.heat.key == running.heat.key else " "
            lines.append(format_heat_line(projected, marker))

    if now is not None:
        called = marshalling_heat(day_heats, now)
        lines.append("")
        lines.append(f"In the water: {_describe(running)}")
        lines.append(f"Marshalling:  {_describe(called)}")

    return "\n".join(lines)


def _describe(projected: ProjectedHeat | None) -> str:
    if projected is None:
        return "none"
    heat = projected.heat
    return f"event {heat.event_number} heat {heat.descriptor} ({heat.age_group} {heat.gender} {heat.event_name})"
