from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, tzinfo
from math import isfinite

from pacer.colors import RGB, color_for
from pacer.constants import SESSION_CYCLE, WEEK_CYCLE, ActiveHoursConfig, CycleSpec
from pacer.pace_math import expected_fraction
from pacer.settings import local_zone

logger = logging.getLogger(__name__)

# bucket key -> (label, kind, cycle length)
BUCKETS: dict[str, tuple[str, str, timedelta]] = {
    "five_hour": ("Session", "session", SESSION_CYCLE),
    "seven_day": ("Weekly", "weekly", WEEK_CYCLE),
}


@dataclass(slots=True, frozen=True)
class PaceReading:
    label: str
    kind: str
    utilization: float
    reset_at: datetime
    fraction: float | None
    delta: float | None
    color: RGB

    @property
    def pace_pct(self) -> float | None:
        return None if self.fraction is None else self.fraction * 100


def parse_reset(value) -> datetime | None:
    """ISO-8601 reset instant -> aware datetime, or None if unusable."""
    if not isinstance(value, str) or not value:
        return None
    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.debug("unparseable resets_at %r", value)
        return None
    if dt.tzinfo is None:
        dt = dt.astimezone()
    return dt


def cycle_from_bucket(key: str, bucket) -> tuple[float, CycleSpec] | None:
    if key not in BUCKETS or not isinstance(bucket, dict):
        return None
    util = bucket.get("utilization")
    if isinstance(util, bool) or not isinstance(util, (int, float)) or not isfinite(util):
        return None
    reset_at = parse_reset(bucket.get("resets_at"))
    if reset_at is None:
        return None
    _, _, length = BUCKETS[key]
    return float(util), CycleSpec(reset_at=reset_at, length=length)


def pace_delta(utilization: float, fraction: float | None) -> float | None:
    if fraction is None:
        return None
    return utilization - fraction * 100


def evaluate_usage(
    data: dict, now: datetime, config: ActiveHoursConfig, zone: tzinfo | None = None,
) -> dict[str, PaceReading]:
    """Pace every usable bucket of a usage payload at ``now``.

    Both instants are moved into ``zone`` (the local zone by default) so the
    active window and the cycle start follow its wall clock across DST
    changes. Buckets without a utilization or reset are skipped.
    """
    zone = zone or local_zone()
    now = now.astimezone(zone)
    readings: dict[str, PaceReading] = {}
    for key, (label, kind, _) in BUCKETS.items():
        parsed = cycle_from_bucket(key, data.get(key))
        if parsed is None:
            continue
        util, cycle = parsed
        cycle = CycleSpec(cycle.reset_at.astimezone(zone), cycle.length)
        fraction = expected_fraction(now, cycle, config)
        delta = pace_delta(util, fraction)
        readings[key] = PaceReading(
            label=label, kind=kind, utilization=util, reset_at=cycle.reset_at,
            fraction=fraction, delta=delta, color=color_for(delta),
        )
    return readings


def headline(readings: dict[str, PaceReading]) -> PaceReading | None:
    """Weekly reading if there is one, else the session reading."""
    return readings.get("seven_day") or readings.get("five_hour")
