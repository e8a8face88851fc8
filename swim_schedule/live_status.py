"""Which heat is in the water now, and which one to call to marshalling."""

from datetime import datetime
from typing import Sequence

from .models import ProjectedHeat

# Heats between the one racing and the one being called to marshalling
DEFAULT_MARSHALLING_LOOKAHEAD = 2


def is_running(projected: ProjectedHeat, now: datetime) -> bool:
    return projected.scheduled_start <= now < projected.display_end


def current_heat_index(heats: Sequence[ProjectedHeat], now: datetime) -> int | None:
    for i, projected in enumerate(heats):
        if is_running(projected, now):
            return i
    return None


def current_heat(heats: Sequence[ProjectedHeat], now: datetime) -> ProjectedHeat | None:
    """The heat whose [start, end) window contains now."""
    index = current_heat_index(heats, now)
    return heats[index] if index is not None else None


def marshalling_heat(
    heats: Sequence[ProjectedHeat],
    now: datetime,
    lookahead: int = DEFAULT_MARSHALLING_LOOKAHEAD,
) -> ProjectedHeat | None:
    """The heat to call to marshalling.

    While a heat is running this is the heat `lookahead` places after it. Between
    heats it is the next heat to start.
    """
    index = current_heat_index(heats, now)
    if index is not None:
        target = index + lookahead
        return heats[target] if target < len(heats) else None
    return next((p for p in heats if p.scheduled_start > now), None)
