"""
Time-of-day arithmetic for the heat schedule.

All schedule timestamps are naive wall-clock datetimes on a single base date.
The lunch window is a half-open interval [lunch_start, lunch_end) during which
no racing time is counted: cursors inside it are moved to lunch_end, and a
heat whose duration crosses lunch_start continues after lunch_end.
"""

import re
from datetime import date, datetime, time, timedelta

_DURATION_RE = re.compile(r"^(\d{1,2}):(\d{2})(?:\.(\d{1,2}))?$")


def parse_duration(text: str | None) -> float | None:
    """Parse an entry time like "01:30" or "02:05.50" into seconds.

    Accepts MM:SS with an optional one or two digit fraction. Returns None for
    empty input or any other format.
    """
    if not text:
        return None
    match = _DURATION_RE.match(str(text).strip())
    if not match:
        return None
    minutes = int(match.group(1))
    seconds = int(match.group(2))
    fraction = match.group(3)
    centiseconds = int(fraction.ljust(2, "0")) if fraction else 0
    return minutes * 60 + seconds + centiseconds / 100


def format_duration(seconds: float | None, always_fraction: bool = False) -> str:
    """Format seconds as "MM:SS", or "MM:SS.cc" when there is a fraction.

    With always_fraction=True the centiseconds are always shown, which is how
    estimated durations are displayed in schedule tables.
    """
    if seconds is None:
        return ""
    total_cs = round(seconds * 100)
    minutes, rest = divmod(total_cs, 6000)
    secs, cs = divmod(rest, 100)
    if cs or always_fraction:
        return f"{minutes:02d}:{secs:02d}.{cs:02d}"
    return f"{minutes:02d}:{secs:02d}"


def parse_time_of_day(text: str) -> time:
    """Parse "HH:MM" (or "HH:MM:SS") into a time.

    Raises:
        ValueError: If the text is not a valid time of day.
    """
    value = str(text).strip()
    for fmt in ("%H:%M", "%H:%M:%S"):
        try:
            return datetime.strptime(value, fmt).time()
        except ValueError:
            continue
    raise ValueError(f"Invalid time format: {text!r}. Expected HH:MM")


def at_time(base_date: date, clock: time) -> datetime:
    """Place a time of day on the base date."""
    return datetime.combine(base_date, clock)


def fmt_hm(moment: datetime | None) -> str:
    return moment.strftime("%H:%M") if moment else ""


def fmt_hms(moment: datetime | None) -> str:
    return moment.strftime("%H:%M:%S") if moment else ""


def move_out_of_lunch(moment: datetime, lunch_start: datetime, lunch_end: datetime) -> datetime:
    """Move a moment inside [lunch_start, lunch_end) to lunch_end.

    A zero-width window never contains anything, so the clamp is a no-op.
    """
    if lunch_start <= moment < lunch_end:
        return lunch_end
    return moment


def add_seconds_skipping_lunch(
    start: datetime,
    seconds: float,
    lunch_start: datetime,
    lunch_end: datetime,
) -> datetime:
    """Add a duration to start, excising the lunch window from it."""
    duration = timedelta(seconds=seconds)
    if lunch_start <= start < lunch_end:
        return lunch_end + duration

    end = start + duration
    if start < lunch_start < end:
        return lunch_end + (end - lunch_start)
    return end


def advance_cursor(
    end: datetime,
    turnover_seconds: int,
    lunch_start: datetime,
    lunch_end: datetime,
) -> datetime:
    """Cursor for the next heat: end plus turnover, moved out of lunch."""
    return move_out_of_lunch(end + timedelta(seconds=turnover_seconds), lunch_start, lunch_end)
