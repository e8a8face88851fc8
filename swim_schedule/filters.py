"""
Display filters for the projected schedule.

Filters are applied after the schedule has been computed over the full heat
list, so hidden heats still occupy pool time and never shift visible ones.
"""

from dataclasses import dataclass
from typing import Iterable, Sequence, TypeVar

from rapidfuzz import fuzz

from .models import Heat, ProjectedHeat

ALL = "all"

# partial_ratio score (0-100) at which a participant name counts as a search hit
FUZZY_MATCH_THRESHOLD = 90

T = TypeVar("T", Heat, ProjectedHeat)


def _unset(value: str | None) -> bool:
    return value is None or value.strip() == "" or value == ALL


def normalize_name(name: str) -> str:
    return " ".join(name.lower().split())


def participant_matches(name: str, search: str) -> bool:
    """Case-insensitive substring match, with fuzzy matching for typos."""
    candidate = normalize_name(name)
    target = normalize_name(search)
    if not target:
        return True
    if target in candidate:
        return True
    # Too short for a meaningful fuzzy score
    if len(target) < 3:
        return False
    return fuzz.partial_ratio(target, candidate) >= FUZZY_MATCH_THRESHOLD


@dataclass(frozen=True)
class HeatFilter:
    """Which heats to show. Empty, None or "all" means no constraint."""

    day_key: str | None = None
    age_group: str | None = None
    gender: str | None = None
    event_name: str | None = None
    participant_search: str | None = None

    @property
    def is_empty(self) -> bool:
        return all(
            _unset(v)
            for v in (self.day_key, self.age_group, self.gender, self.event_name, self.participant_search)
        )

    def matches(self, heat: Heat) -> bool:
        if not _unset(self.day_key) and heat.day_key != self.day_key:
            return False
        if not _unset(self.age_group) and heat.age_group != self.age_group:
            return False
        if not _unset(self.gender) and heat.gender != self.gender:
            return False
        if not _unset(self.event_name) and heat.event_name != self.event_name:
            return False
        if not _unset(self.participant_search):
            search = self.participant_search or ""
            if not any(participant_matches(name, search) for name in heat.participants):
                return False
        return True


def apply_filter(items: Sequence[T], heat_filter: HeatFilter | None) -> list[T]:
    """Keep the heats (or projected heats) matching the filter, in order."""
    if heat_filter is None or heat_filter.is_empty:
        return list(items)
    return [item for item in items if heat_filter.matches(_heat_of(item))]


def _heat_of(item: Heat | ProjectedHeat) -> Heat:
    return item.heat if isinstance(item, ProjectedHeat) else item


@dataclass(frozen=True)
class FilterOptions:
    """Distinct values available for each filter field."""

    age_groups: list[str]
    genders: list[str]
    event_names: list[str]
    participants: list[str]


def _distinct(values: Iterable[str]) -> list[str]:
    return sorted({v for v in values if v})


def filter_options(heats: Sequence[Heat]) -> FilterOptions:
    return FilterOptions(
        age_groups=_distinct(h.age_group for h in heats),
        genders=_distinct(h.gender for h in heats),
        event_names=_distinct(h.event_name for h in heats),
        participants=_distinct(name for h in heats for name in h.participants),
    )
