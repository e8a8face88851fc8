"""
Estimated heat durations.

A heat occupies the pool until its slowest swimmer finishes, so estimates use
the maximum entry time rather than the average. Heats without any entry time
borrow the slowest known heat of the same event, and events without any entry
time at all fall back to the configured duration.
"""

import logging
from dataclasses import replace
from typing import Sequence

from .models import Heat

logger = logging.getLogger(__name__)


def recorded_estimate(heat: Heat) -> float | None:
    """Slowest recorded entry time of a heat, or None when it has none."""
    if not heat.recorded_durations:
        return None
    return max(heat.recorded_durations)


def event_estimates(heats: Sequence[Heat]) -> dict[int, float]:
    """Map event number to the slowest recorded estimate among its heats."""
    estimates: dict[int, float] = {}
    for heat in heats:
        own = recorded_estimate(heat)
        if own is None:
            continue
        current = estimates.get(heat.event_number)
        estimates[heat.event_number] = own if current is None else max(current, own)
    return estimates


def resolve_durations(heats: Sequence[Heat], fallback_seconds: float) -> list[Heat]:
    """Return copies of the heats with estimated_duration_seconds filled in."""
    by_event = event_estimates(heats)

    resolved: list[Heat] = []
    fallback_count = 0
    for heat in heats:
        estimate = recorded_estimate(heat)
        if estimate is None:
            estimate = by_event.get(heat.event_number)
        if estimate is None:
            estimate = fallback_seconds
            fallback_count += 1
        resolved.append(replace(heat, estimated_duration_seconds=estimate))

    if fallback_count:
        logger.debug(f"{fallback_count} heat(s) use the fallback duration of {fallback_seconds}s")
    return resolved
