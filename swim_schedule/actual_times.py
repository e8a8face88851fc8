"""Persisted operator actual-end times, keyed by event number and heat index."""

import json
import logging
from datetime import time
from pathlib import Path

from .timeutils import parse_time_of_day

logger = logging.getLogger(__name__)


def store_key(event_number: int, heat_index: int) -> str:
    return f"{event_number}_{heat_index}"


class ActualEndStore:
    """Actual-end times kept in a small JSON file.

    The file holds a single object mapping "<event>_<heat>" to "HH:MM:SS".
    Every change rewrites the whole file; the last write wins.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self.records: dict[str, str] = {}
        self._load()

    def _load(self) -> None:
        """Load existing records, treating an unreadable file as empty."""
        if not self.path.exists():
            return
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            logger.error(f"Failed to read actual times from {self.path}: {e}")
            return
        if not isinstance(data, dict):
            logger.error(f"Ignoring actual times file {self.path}: expected a JSON object")
            return
        self.records = {str(k): str(v) for k, v in data.items()}
        logger.info(f"Loaded {len(self.records)} actual end time(s)")

    def _save(self) -> None:
        self.path.write_text(json.dumps(self.records, indent=2, sort_keys=True), encoding="utf-8")

    def save(self, event_number: int, heat_index: int, actual_end: time) -> None:
        key = store_key(event_number, heat_index)
        self.records[key] = actual_end.strftime("%H:%M:%S")
        self._save()
        logger.debug(f"Actual end for {key} set to {self.records[key]}")

    def remove(self, event_number: int, heat_index: int) -> None:
        key = store_key(event_number, heat_index)
        if self.records.pop(key, None) is not None:
            self._save()
            logger.debug(f"Actual end for {key} cleared")

    def load(self, event_number: int, heat_index: int) -> time | None:
        value = self.records.get(store_key(event_number, heat_index))
        if value is None:
            return None
        try:
            return parse_time_of_day(value)
        except ValueError:
            logger.warning(f"Ignoring malformed actual end {value!r} for {event_number}_{heat_index}")
            return None

    def load_all(self) -> dict[tuple[int, int], time]:
        """All parseable records keyed by (event number, heat index)."""
        result: dict[tuple[int, int], time] = {}
        for key in self.records:
            event_str, _, heat_str = key.partition("_")
            try:
                event_number, heat_index = int(event_str), int(heat_str)
            except ValueError:
                logger.warning(f"Ignoring malformed actual time key {key!r}")
                continue
            value = self.load(event_number, heat_index)
            if value is not None:
                result[(event_number, heat_index)] = value
        return result

    def clear(self) -> None:
        self.records = {}
        if self.path.exists():
            self.path.unlink()

    def count(self) -> int:
        return len(self.records)
