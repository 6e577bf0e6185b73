"""Text helpers for whatever renders pace readings (badge, popup, status line)."""

from __future__ import annotations

from datetime import datetime
from math import floor

from pacer.constants import BADGE_AHEAD, BADGE_BEHIND, BADGE_IDLE


def _round_half_up(x: float) -> int:
    return floor(x + 0.5)


def format_delta(delta: float | None) -> str:
    if delta is None:
        return ""
    sign = "+" if delta >= 0 else ""
    word = "ahead" if delta >= 0 else "behind"
    return f"{sign}{_round_half_up(delta)}% {word}"


def badge_text(delta: float | None) -> str:
    if delta is None:
        return ""
    return ("+" if delta >= 0 else "") + str(_round_half_up(delta))


def badge_color(delta: float | None) -> str:
    if delta is None:
        return BADGE_IDLE
    return BADGE_AHEAD if delta >= 0 else BADGE_BEHIND


def format_countdown(reset_at: datetime | None, now: datetime) -> str | None:
    if reset_at is None:
        return None
    secs = (reset_at - now).total_seconds()
    if secs <= 0:
        return "resetting…"
    mins = int(secs // 60)
    if mins < 60:
        return f"{mins}m left"
    hrs, rem_mins = divmod(mins, 60)
    if hrs < 24:
        return f"{hrs}h {rem_mins}m left"
    days, rem_hrs = divmod(hrs, 24)
    return f"{days}d {rem_hrs}h left"


def pace_marker(utilization: float, delta: float | None) -> float | None:
    """Bar position (percent) of the expected-usage marker, if it fits inside."""
    if delta is None:
        return None
    pos = utilization - delta
    return pos if 0 < pos < 100 else None
