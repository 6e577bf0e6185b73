from __future__ import annotations

import logging
from datetime import datetime, timedelta

from pacer.constants import FRACTION_CAP, MAX_DAY_STEPS, ActiveHoursConfig, CycleSpec

logger = logging.getLogger(__name__)


# ════════════════════════════════════════════════════════════════════════
#  ACTIVE-HOURS INTERVALS
# ════════════════════════════════════════════════════════════════════════


def _at_hour(day: datetime, hour: int) -> datetime:
    """Wall-clock ``hour`` on ``day``; 24 rolls over to the next midnight."""
    if hour >= 24:
        return day + timedelta(days=1)
    return day.replace(hour=hour)


def _overlap_minutes(s: datetime, e: datetime, lo: float, hi: float) -> float:
    o_start = max(s.timestamp(), lo)
    o_end = min(e.timestamp(), hi)
    if o_end > o_start:
        return (o_end - o_start) / 60
    return 0.0


def active_minutes_between(
    start: datetime, end: datetime, start_hour: int, end_hour: int,
) -> float:
    """Minutes of ``[start, end]`` that fall inside the daily active window.

    The window is ``[start_hour, end_hour)`` in ``start``'s wall clock, with
    ``end_hour == 0`` meaning midnight. Windows that cross midnight are split
    into an evening segment and an early-morning segment on the next day.
    """
    lo, hi = start.timestamp(), end.timestamp()
    if hi <= lo:
        return 0.0

    a_end = 24 if end_hour == 0 else end_hour
    crosses = start_hour >= a_end

    cursor = start.replace(hour=0, minute=0, second=0, microsecond=0)
    if crosses:
        # yesterday's window may still be open in the early morning
        cursor -= timedelta(days=1)

    total = 0.0
    for _ in range(MAX_DAY_STEPS):
        if cursor.timestamp() > hi:
            break
        next_day = cursor + timedelta(days=1)
        if not crosses:
            total += _overlap_minutes(
                _at_hour(cursor, start_hour), _at_hour(cursor, a_end), lo, hi,
            )
        else:
            total += _overlap_minutes(_at_hour(cursor, start_hour), next_day, lo, hi)
            total += _overlap_minutes(next_day, _at_hour(next_day, end_hour), lo, hi)
        cursor = next_day
    return total


# ════════════════════════════════════════════════════════════════════════
#  EXPECTED FRACTION
# ════════════════════════════════════════════════════════════════════════


def _seconds_left(now: datetime, cycle: CycleSpec) -> float:
    # absolute time; same-zone datetime subtraction ignores DST shifts
    return cycle.reset_at.timestamp() - now.timestamp()


def linear_fraction(now: datetime, cycle: CycleSpec) -> float | None:
    length = cycle.length.total_seconds()
    remaining = _seconds_left(now, cycle)
    if remaining <= 0 or remaining > length:
        return None
    return (length - remaining) / length


def active_hours_fraction(
    now: datetime, cycle: CycleSpec, config: ActiveHoursConfig,
) -> float | None:
    """Share of the cycle's active minutes already behind ``now``.

    Capped at 0.999 so an overshoot past the reset never reads as 100%.
    """
    days = cycle.length.days
    total = days * config.minutes_per_day
    if total <= 0:
        logger.debug(
            "empty active window %02d:00-%02d:00", config.start_hour, config.end_hour,
        )
        return None
    start = cycle.reset_at - timedelta(days=days)
    elapsed = active_minutes_between(start, now, config.start_hour, config.end_hour)
    return min(elapsed / total, FRACTION_CAP)


def expected_fraction(
    now: datetime, cycle: CycleSpec, config: ActiveHoursConfig,
) -> float | None:
    """How far through ``cycle`` consumption should be at ``now``.

    Returns a fraction in [0, 1) or ``None`` when the cycle is stale, the
    active window is empty, or the instants cannot be compared.
    """
    if (now.tzinfo is None) != (cycle.reset_at.tzinfo is None):
        logger.debug("cannot compare naive and aware instants")
        return None
    try:
        remaining = _seconds_left(now, cycle)
        if remaining <= 0 or remaining > cycle.length.total_seconds():
            logger.debug("stale cycle: %.0fs remaining of %s", remaining, cycle.length)
            return None
        if cycle.is_multi_day and config.enabled:
            return active_hours_fraction(now, cycle, config)
        return linear_fraction(now, cycle)
    except (TypeError, ValueError, OverflowError) as e:
        logger.debug("cannot resolve cycle fraction: %s", e)
        return None
