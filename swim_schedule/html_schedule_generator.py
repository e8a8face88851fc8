"""
HTML schedule generator for swim meet heats.

This module renders a projected schedule as an HTML table with one header row
per day, highlighting the heat in the water at a given moment.
"""

from datetime import datetime
from html import escape

from .live_status import current_heat
from .models import ProjectedHeat
from .timeutils import fmt_hm, fmt_hms, format_duration
from .types import ProjectionResult

COLUMNS = [
    "Event",
    "Heat",
    "Age group",
    "Gender",
    "Event name",
    "Est. duration",
    "Scheduled start",
    "Scheduled end",
    "Actual end",
]


def generate_html_schedule_table(
    result: ProjectionResult,
    title: str = "Swim Meet Schedule",
    now: datetime | None = None,
) -> str:
    """
    Generate an HTML table of the visible projected heats.

    Args:
        result: The projection to render
        title: Title for the HTML page
        now: Moment used to highlight the running heat (no highlight if None)

    Returns:
        Complete HTML string with embedded CSS styling
    """
    if not result.heats:
        return _generate_empty_schedule_html(title)

    running = current_heat(result.visible_day_heats(), now) if now is not None else None

    body_rows: list[str] = []
    for day_label, heats in result.by_day():
        body_rows.append(_day_header_row(day_label or "Unscheduled day"))
        body_rows.append(_column_header_row())
        body_rows.extend(_heat_row(p, running) for p in heats)

    c = result.config
    return f"""<!DOCTYPE html>
<html>
<head>
    <title>{escape(title)}</title>
    <meta charset="utf-8">
    <style>{_get_css_styles()}</style>
</head>
<body>
    <div class="container">
        <h1>{escape(title)}</h1>
        <div class="schedule-info">
            <p>Turnover: {c.turnover_seconds}s &middot; Lunch: {c.lunch_start.strftime('%H:%M')}&ndash;{c.lunch_end.strftime('%H:%M')} &middot; Fallback: {format_duration(c.fallback_duration_seconds)}</p>
            <p>Heats shown: {len(result.heats)} of {len(result.all_heats)}</p>
        </div>
        <table class="schedule-table">
            <tbody>
{chr(10).join(body_rows)}
            </tbody>
        </table>
    </div>
</body>
</html>
"""


def _generate_empty_schedule_html(title: str) -> str:
    """Generate HTML for empty schedule."""
    return f"""<!DOCTYPE html>
<html>
<head>
    <title>{escape(title)}</title>
    <meta charset="utf-8">
    <style>
        body {{ font-family: Arial, sans-serif; margin: 20px; }}
        .no-events {{ text-align: center; color: #666; font-size: 18px; }}
    </style>
</head>
<body>
    <h1>{escape(title)}</h1>
    <div class="no-events">No heats loaded</div>
</body>
</html>
"""


def _day_header_row(day_label: str) -> str:
    return f'<tr><td colspan="{len(COLUMNS)}" class="day-header">{escape(day_label)}</td></tr>'


def _column_header_row() -> str:
    cells = "".join(f"<th>{name}</th>" for name in COLUMNS)
    return f"<tr class=\"column-header\">{cells}</tr>"


def _heat_row(projected: ProjectedHeat, running: ProjectedHeat | None) -> str:
    heat = projected.heat
    css_class = "current" if running is not None and running.heat.key == heat.key else ""
    cells = [
        str(heat.event_number),
        heat.descriptor,
        heat.age_group or "-",
        heat.gender or "-",
        heat.event_name or "-",
        format_duration(projected.estimated_duration_seconds, always_fraction=True),
        fmt_hms(projected.scheduled_start),
        fmt_hms(projected.scheduled_end),
        fmt_hm(projected.actual_end),
    ]
    tds = "".join(f"<td>{escape(cell)}</td>" for cell in cells)
    return f'<tr class="{css_class}">{tds}</tr>'


def _get_css_styles() -> str:
    """Return CSS styles for the HTML table."""
    return """
        body {
            font-family: 'Segoe UI', Tahoma, Geneva, Verdana, sans-serif;
            margin: 0;
            padding: 20px;
            background-color: #f5f7fa;
        }

        .container {
            max-width: 1200px;
            margin: 0 auto;
            background-color: white;
            padding: 20px;
            border-radius: 8px;
            box-shadow: 0 2px 10px rgba(0,0,0,0.1);
        }

        h1 {
            color: #1e3a5f;
            text-align: center;
            border-bottom: 3px solid #2196F3;
            padding-bottom: 10px;
        }

        .schedule-info {
            background-color: #f9f9f9;
            padding: 10px 15px;
            border-left: 4px solid #2196F3;
            margin-bottom: 20px;
            color: #555;
        }

        .schedule-table {
            width: 100%;
            border-collapse: collapse;
            font-size: 14px;
        }

        .schedule-table td,
        .schedule-table th {
            border: 1px solid #ddd;
            padding: 6px 10px;
            text-align: left;
        }

        .day-header {
            background-color: #2196F3;
            color: white;
            font-weight: bold;
            text-align: center !important;
            padding: 10px;
        }

        .column-header th {
            background-color: #e3eefa;
        }

        tr.current {
            background-color: #fff4d6;
            border-left: 4px solid #f0a500;
            font-weight: bold;
        }
    """


def save_html_schedule(
    result: ProjectionResult,
    file_path: str,
    title: str = "Swim Meet Schedule",
    now: datetime | None = None,
) -> None:
    """Save HTML schedule to a file."""
    html_content = generate_html_schedule_table(result=result, title=title, now=now)

    with open(file_path, 'w', encoding='utf-8') as f:
        f.write(html_content)
