"""Participant roster CSV: heat, age group, gender, event, name per row."""

import csv
import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Sequence

from .models import Heat

logger = logging.getLogger(__name__)

ROSTER_COLUMNS = 5


@dataclass(frozen=True)
class RosterEntry:
    heat: str
    age_group: str
    gender: str
    event_name: str
    participant: str

    @property
    def match_key(self) -> tuple[str, str, str, str]:
        return (self.heat, self.age_group, self.gender, self.event_name)


def parse_roster_csv(path: str | Path) -> list[RosterEntry]:
    """Read roster rows, skipping the header and incomplete rows."""
    entries: list[RosterEntry] = []

    with open(path, "r", encoding="utf-8-sig", newline="") as file:
        reader = csv.reader(file)
        next(reader, None)  # header

        for line_num, row in enumerate(reader, start=2):
            if not any(cell.strip() for cell in row):
                continue
            cells = [cell.strip() for cell in row[:ROSTER_COLUMNS]]
            if len(cells) < ROSTER_COLUMNS or not all(cells):
                logger.warning(f"Skipping incomplete roster line {line_num}: {row}")
                continue
            entries.append(RosterEntry(*cells))

    return entries


def unique_participants(entries: Sequence[RosterEntry]) -> list[str]:
    return sorted({entry.participant for entry in entries})


def attach_roster(heats: Sequence[Heat], entries: Sequence[RosterEntry]) -> list[Heat]:
    """Add roster names to the heats they swim in.

    Heats are matched on heat descriptor, age group, gender and event name.
    Names already on a heat are kept and not duplicated.
    """
    names_by_key: dict[tuple[str, str, str, str], list[str]] = {}
    for entry in entries:
        names_by_key.setdefault(entry.match_key, []).append(entry.participant)

    matched = 0
    result: list[Heat] = []
    for heat in heats:
        key = (heat.descriptor, heat.age_group, heat.gender, heat.event_name)
        extra = [n for n in names_by_key.get(key, []) if n not in heat.participants]
        if extra:
            matched += 1
            heat = replace(heat, participants=heat.participants + tuple(dict.fromkeys(extra)))
        result.append(heat)

    logger.info(f"Roster names attached to {matched} heat(s)")
    return result
