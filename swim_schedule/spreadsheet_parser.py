"""Parser for heat sheet spreadsheets (.xlsx or .csv) into Heat records."""

import csv
import logging
import zipfile
from datetime import datetime, time
from pathlib import Path
from typing import Any

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from .dtos import HeatRecordRow
from .errors import SpreadsheetFormatError
from .models import Heat

logger = logging.getLogger(__name__)

# Canonical field -> accepted header names. The first name of each list is the
# column title used by the meet organiser's heat sheet export.
HEADER_ALIASES: dict[str, list[str]] = {
    "event_number": ["項次", "event", "event_number", "Event"],
    "heat": ["組次", "heat", "Heat"],
    "age_group": ["年齡組", "age_group", "Age group", "Age"],
    "gender": ["性別", "gender", "Gender"],
    "event_name": ["比賽項目", "event_name", "Event name"],
    "participant": ["姓名", "name", "Name", "participant"],
    "entry_time": ["報名成績", "entry_time", "Entry time", "Seed time"],
}

# Header detection: number of known columns a row needs and rows scanned
MIN_HEADER_HITS = 5
MAX_HEADER_SCAN = 30

PREFERRED_SHEET = "All"

_HEADER_TO_FIELD = {name: fld for fld, names in HEADER_ALIASES.items() for name in names}


def cell_text(value: Any) -> str:
    """Render a spreadsheet cell as the text a person would have typed."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime):
        value = value.time()
    if isinstance(value, time):
        # Entry times typed as mm:ss are stored by Excel as hh:mm times of day
        if value.hour and not value.second and not value.microsecond:
            return f"{value.hour:02d}:{value.minute:02d}"
        # mm:ss.cc entries keep the minutes in the minute field
        minutes = value.hour * 60 + value.minute
        text = f"{minutes:02d}:{value.second:02d}"
        centiseconds = value.microsecond // 10000
        return f"{text}.{centiseconds:02d}" if centiseconds else text
    return str(value).strip()


def find_header_index(rows: list[list[str]]) -> int:
    """Index of the first row naming enough known columns, or -1."""
    for i, row in enumerate(rows[:MAX_HEADER_SCAN]):
        fields = {_HEADER_TO_FIELD.get(str(c).strip()) for c in row}
        fields.discard(None)
        if len(fields) >= MIN_HEADER_HITS:
            return i
    return -1


def rows_to_records(rows: list[list[str]]) -> list[dict[str, str]]:
    """Turn a 2D cell grid into records keyed by canonical field name.

    Raises:
        SpreadsheetFormatError: If no header row is found
    """
    header_idx = find_header_index(rows)
    if header_idx == -1:
        raise SpreadsheetFormatError(
            "No header row found: expected columns such as event, heat, age group, gender, event name"
        )

    header = [_HEADER_TO_FIELD.get(str(c).strip(), "") for c in rows[header_idx]]
    records: list[dict[str, str]] = []
    for row in rows[header_idx + 1:]:
        if not any(str(c).strip() for c in row):
            continue
        record = {
            fld: (row[col] if col < len(row) else "")
            for col, fld in enumerate(header)
            if fld
        }
        records.append(record)
    return records


def build_heats(records: list[dict[str, str]]) -> list[Heat]:
    """Aggregate participant records into heats, sorted in race order."""
    heats: dict[tuple[int, int, int], dict[str, Any]] = {}

    for record in records:
        row = HeatRecordRow.from_record(record)
        key = (row.event_number, row.heat_index, row.heat_count)
        if row.event_number == 0:
            logger.debug(f"Row without a valid event number: {record}")

        if key not in heats:
            heats[key] = {
                "age_group": row.age_group,
                "gender": row.gender,
                "event_name": row.event_name,
                "times": [],
                "participants": [],
            }
        if row.entry_seconds is not None:
            heats[key]["times"].append(row.entry_seconds)
        if row.participant:
            heats[key]["participants"].append(row.participant)

    result = [
        Heat(
            event_number=event_number,
            heat_index=heat_index,
            heat_count=heat_count,
            age_group=data["age_group"],
            gender=data["gender"],
            event_name=data["event_name"],
            recorded_durations=tuple(data["times"]),
            participants=tuple(data["participants"]),
        )
        for (event_number, heat_index, heat_count), data in heats.items()
    ]
    result.sort(key=lambda h: h.sort_key)
    return result


def read_csv_rows(path: Path) -> list[list[str]]:
    with open(path, "r", encoding="utf-8-sig", newline="") as file:
        return [[cell.strip() for cell in row] for row in csv.reader(file)]


def read_xlsx_rows(path: Path) -> list[list[str]]:
    """Read the "All" sheet (or the first sheet) as a grid of cell texts."""
    try:
        workbook = load_workbook(path, read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, OSError, KeyError) as e:
        raise SpreadsheetFormatError(f"Cannot read workbook {path}: {e}") from e

    try:
        sheet_name = PREFERRED_SHEET if PREFERRED_SHEET in workbook.sheetnames else workbook.sheetnames[0]
        worksheet = workbook[sheet_name]
        logger.debug(f"Reading sheet '{sheet_name}' from {path}")
        return [[cell_text(v) for v in row] for row in worksheet.iter_rows(values_only=True)]
    finally:
        workbook.close()


def parse_spreadsheet(path: str | Path) -> list[Heat]:
    """
    Load a heat sheet and build the heat list.

    Args:
        path: .csv or .xlsx file with one row per participant

    Returns:
        Heats sorted by event number and heat index

    Raises:
        SpreadsheetFormatError: If the file cannot be read or has no header row
    """
    path = Path(path)
    if not path.exists():
        raise SpreadsheetFormatError(f"Heat sheet not found: {path}")

    if path.suffix.lower() == ".csv":
        rows = read_csv_rows(path)
    else:
        rows = read_xlsx_rows(path)

    heats = build_heats(rows_to_records(rows))
    logger.info(f"Loaded {len(heats)} heats from {path.name}")
    return heats
