"""Command-line interface for the swim meet heat schedule."""

import logging
from datetime import datetime
from pathlib import Path
from typing import Annotated, Optional

import typer

from .actual_times import ActualEndStore
from .config import ScheduleConfig, actual_times_path
from .csv_exporter import export_schedule_csv
from .errors import ScheduleError
from .filters import HeatFilter, filter_options
from .html_schedule_generator import save_html_schedule
from .models import DEFAULT_DAY_TABLE
from .roster_csv import attach_roster, parse_roster_csv
from .schedule_printer import format_heat_line, format_schedule_for_printing
from .session import ScheduleSession
from .spreadsheet_parser import parse_spreadsheet
from .timeutils import parse_time_of_day

app = typer.Typer(
    name="schedule",
    help="Swim meet heat schedule projection",
    no_args_is_help=True,
)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


HeatSheetArg = Annotated[
    Path,
    typer.Argument(help="Heat sheet (.xlsx or .csv), one row per swimmer", exists=True, readable=True),
]
TurnoverOpt = Annotated[
    Optional[int],
    typer.Option("--turnover", help="Seconds between consecutive heats", min=0),
]
LunchStartOpt = Annotated[Optional[str], typer.Option("--lunch-start", help="Lunch start (HH:MM)")]
LunchEndOpt = Annotated[Optional[str], typer.Option("--lunch-end", help="Lunch end (HH:MM)")]
FallbackOpt = Annotated[
    Optional[str],
    typer.Option("--fallback", help="Duration for events without entry times (MM:SS)"),
]
RosterOpt = Annotated[
    Optional[Path],
    typer.Option("--roster", help="Roster CSV adding swimmer names to heats", exists=True, readable=True),
]
TimesFileOpt = Annotated[
    Optional[Path],
    typer.Option("--times-file", help="JSON file with recorded actual end times"),
]
VerboseOpt = Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")]


def _open_session(
    heat_sheet: Path,
    turnover: Optional[int],
    lunch_start: Optional[str],
    lunch_end: Optional[str],
    fallback: Optional[str],
    roster: Optional[Path],
    times_file: Optional[Path],
) -> ScheduleSession:
    try:
        config = ScheduleConfig.from_env(
            turnover_seconds=turnover,
            lunch_start=lunch_start,
            lunch_end=lunch_end,
            fallback_duration_seconds=fallback,
        )
        heats = parse_spreadsheet(heat_sheet)
        if roster is not None:
            heats = attach_roster(heats, parse_roster_csv(roster))
    except ScheduleError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    store = ActualEndStore(times_file or actual_times_path())
    return ScheduleSession(heats, config, day_table=DEFAULT_DAY_TABLE, store=store)


def _parse_now(now: Optional[str]) -> datetime | None:
    if now is None:
        return None
    if now == "now":
        return datetime.now()
    try:
        return datetime.combine(datetime.now().date(), parse_time_of_day(now))
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command("show")
def show(
    heat_sheet: HeatSheetArg,
    day: Annotated[Optional[str], typer.Option("--day", help="Day key, e.g. d1")] = None,
    age_group: Annotated[Optional[str], typer.Option("--age-group", help="Only this age group")] = None,
    gender: Annotated[Optional[str], typer.Option("--gender", help="Only this gender")] = None,
    event_name: Annotated[Optional[str], typer.Option("--event-name", help="Only this event name")] = None,
    swimmer: Annotated[Optional[str], typer.Option("--swimmer", "-s", help="Search swimmer names")] = None,
    now: Annotated[
        Optional[str],
        typer.Option("--now", help="Highlight the heat running at HH:MM, or 'now'"),
    ] = None,
    turnover: TurnoverOpt = None,
    lunch_start: LunchStartOpt = None,
    lunch_end: LunchEndOpt = None,
    fallback: FallbackOpt = None,
    roster: RosterOpt = None,
    times_file: TimesFileOpt = None,
    verbose: VerboseOpt = False,
) -> None:
    """Print the projected schedule."""
    setup_logging(verbose)
    session = _open_session(heat_sheet, turnover, lunch_start, lunch_end, fallback, roster, times_file)
    heat_filter = HeatFilter(
        day_key=day,
        age_group=age_group,
        gender=gender,
        event_name=event_name,
        participant_search=swimmer,
    )
    result = session.projection(heat_filter)
    typer.echo(format_schedule_for_printing(result, now=_parse_now(now)))


@app.command("info")
def info(
    heat_sheet: HeatSheetArg,
    roster: RosterOpt = None,
    verbose: VerboseOpt = False,
) -> None:
    """Show what the heat sheet contains without scheduling."""
    setup_logging(verbose)
    try:
        heats = parse_spreadsheet(heat_sheet)
        if roster is not None:
            heats = attach_roster(heats, parse_roster_csv(roster))
    except ScheduleError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    options = filter_options(heats)
    events = {h.event_number for h in heats}
    without_times = [h for h in heats if not h.recorded_durations]

    typer.echo(f"Heats: {len(heats)} in {len(events)} events")
    typer.echo(f"Heats without entry times: {len(without_times)}")
    for rule in DEFAULT_DAY_TABLE.rules:
        count = sum(1 for h in heats if rule.contains(h.event_number))
        typer.echo(f"  {rule.key}: {rule.label} - {count} heats, starts {rule.day_start.strftime('%H:%M')}")
    unscheduled = sum(1 for h in heats if not DEFAULT_DAY_TABLE.day_key_of(h.event_number))
    if unscheduled:
        typer.echo(f"  (no day): {unscheduled} heats")
    typer.echo(f"Age groups: {', '.join(options.age_groups)}")
    typer.echo(f"Genders: {', '.join(options.genders)}")
    typer.echo(f"Event names: {', '.join(options.event_names)}")
    typer.echo(f"Swimmers: {len(options.participants)}")


@app.command("set-actual")
def set_actual(
    heat_sheet: HeatSheetArg,
    event_number: Annotated[int, typer.Argument(help="Event number")],
    heat_index: Annotated[int, typer.Argument(help="Heat index within the event")],
    end_time: Annotated[str, typer.Argument(help="Actual finish time (HH:MM)")],
    turnover: TurnoverOpt = None,
    lunch_start: LunchStartOpt = None,
    lunch_end: LunchEndOpt = None,
    fallback: FallbackOpt = None,
    times_file: TimesFileOpt = None,
    verbose: VerboseOpt = False,
) -> None:
    """Record the actual finish time of a heat and show the re-timed day."""
    setup_logging(verbose)
    session = _open_session(heat_sheet, turnover, lunch_start, lunch_end, fallback, None, times_file)
    try:
        session.set_actual_end(event_number, heat_index, end_time)
    except KeyError as e:
        typer.echo(f"Error: {e.args[0]}", err=True)
        raise typer.Exit(1)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    result = session.projection()
    edited = result.find(event_number, heat_index)
    if edited is None:
        return
    typer.echo(f"✓ Recorded {format_heat_line(edited)}")
    typer.echo("Following heats the same day:")
    following = [
        p for p in result.all_heats
        if p.day_key == edited.day_key and p.heat.sort_key > edited.heat.sort_key
    ]
    for projected in following[:10]:
        typer.echo(format_heat_line(projected))


@app.command("clear-actual")
def clear_actual(
    event_number: Annotated[Optional[int], typer.Argument(help="Event number")] = None,
    heat_index: Annotated[Optional[int], typer.Argument(help="Heat index within the event")] = None,
    all_times: Annotated[bool, typer.Option("--all", help="Clear every recorded time")] = False,
    times_file: TimesFileOpt = None,
    verbose: VerboseOpt = False,
) -> None:
    """Clear a recorded actual finish time (or all of them)."""
    setup_logging(verbose)
    store = ActualEndStore(times_file or actual_times_path())
    if all_times:
        count = store.count()
        store.clear()
        typer.echo(f"Cleared {count} recorded time(s)")
        return
    if event_number is None or heat_index is None:
        typer.echo("Error: give EVENT_NUMBER and HEAT_INDEX, or --all", err=True)
        raise typer.Exit(1)
    store.remove(event_number, heat_index)
    typer.echo(f"Cleared actual end of event {event_number} heat {heat_index}")


@app.command("export")
def export(
    heat_sheet: HeatSheetArg,
    output: Annotated[
        Path,
        typer.Option("--output", "-o", help="Output file; .csv writes CSV, anything else HTML"),
    ] = Path("schedule.html"),
    title: Annotated[str, typer.Option("--title", help="Title for the HTML schedule")] = "Swim Meet Schedule",
    day: Annotated[Optional[str], typer.Option("--day", help="Day key, e.g. d1")] = None,
    turnover: TurnoverOpt = None,
    lunch_start: LunchStartOpt = None,
    lunch_end: LunchEndOpt = None,
    fallback: FallbackOpt = None,
    roster: RosterOpt = None,
    times_file: TimesFileOpt = None,
    verbose: VerboseOpt = False,
) -> None:
    """Write the projected schedule as HTML or CSV."""
    setup_logging(verbose)
    session = _open_session(heat_sheet, turnover, lunch_start, lunch_end, fallback, roster, times_file)
    result = session.projection(HeatFilter(day_key=day))

    if output.suffix.lower() == ".csv":
        count = export_schedule_csv(result, output)
        typer.echo(f"CSV schedule saved to: {output.absolute()} ({count} heats)")
    else:
        save_html_schedule(result, str(output), title=title, now=datetime.now())
        typer.echo(f"HTML schedule saved to: {output.absolute()}")


if __name__ == "__main__":
    app()
