from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

# ── Cycles ──────────────────────────────────────────────────────────────

SESSION_MIN = 300.0
WEEK_MIN = 10080.0
SESSION_CYCLE = timedelta(minutes=SESSION_MIN)
WEEK_CYCLE = timedelta(minutes=WEEK_MIN)
POLL_INTERVAL = 15.0  # minutes
FRACTION_CAP = 0.999  # expected fraction never reaches 1
MAX_DAY_STEPS = 12  # active-minute walk never needs more than ~9

# ── Active hours ────────────────────────────────────────────────────────

DEFAULT_ACTIVE_ENABLED = True
DEFAULT_ACTIVE_START = 8  # hour
DEFAULT_ACTIVE_END = 0  # hour, 0 = midnight
START_HOUR_CHOICES = tuple(range(5, 13))
END_HOUR_CHOICES = (20, 21, 22, 23, 0, 1, 2, 3)
SETTINGS_KEYS = ("activeEnabled", "activeStart", "activeEnd")

# ── Colors ──────────────────────────────────────────────────────────────

# (delta, r, g, b), ascending in delta
GRADIENT = (
    (-20, 22, 163, 74),
    (-10, 74, 222, 128),
    (0, 234, 179, 8),
    (10, 249, 115, 22),
    (20, 239, 68, 68),
)
NEUTRAL_GRAY = (80, 80, 80)
BADGE_AHEAD = "#ef4444"
BADGE_BEHIND = "#22c55e"
BADGE_IDLE = "#9ca3af"


# ── Data ────────────────────────────────────────────────────────────────


@dataclass(slots=True, frozen=True)
class CycleSpec:
    reset_at: datetime
    length: timedelta

    @property
    def start(self) -> datetime:
        return self.reset_at - self.length

    @property
    def is_multi_day(self) -> bool:
        return self.length >= timedelta(days=1)


@dataclass(slots=True, frozen=True)
class ActiveHoursConfig:
    enabled: bool = DEFAULT_ACTIVE_ENABLED
    start_hour: int = DEFAULT_ACTIVE_START
    end_hour: int = DEFAULT_ACTIVE_END

    @property
    def effective_end(self) -> int:
        return 24 if self.end_hour == 0 else self.end_hour

    @property
    def crosses_midnight(self) -> bool:
        return self.start_hour >= self.effective_end

    @property
    def is_empty(self) -> bool:
        return self.start_hour == self.effective_end

    @property
    def minutes_per_day(self) -> int:
        if self.is_empty:
            return 0
        if self.crosses_midnight:
            # end_hour == 0 adds nothing past midnight
            return ((24 - self.start_hour) + self.end_hour) * 60
        return (self.effective_end - self.start_hour) * 60
