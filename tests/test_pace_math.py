"""
Tests for expected-fraction pacing: linear cycles, active-hours weighting,
and the active-minute interval walk.
"""

from datetime import datetime, timedelta, timezone

import pytest

from pacer.constants import SESSION_CYCLE, WEEK_CYCLE, ActiveHoursConfig, CycleSpec
from pacer.pace_math import (
    active_hours_fraction,
    active_minutes_between,
    expected_fraction,
    linear_fraction,
)

TZ = timezone(timedelta(hours=2))
# Thursday 2026-10-22 08:00
RESET = datetime(2026, 10, 22, 8, 0, tzinfo=TZ)
WEEKLY = CycleSpec(reset_at=RESET, length=WEEK_CYCLE)

DEFAULT = ActiveHoursConfig(True, 8, 0)
FULL_DAY = ActiveHoursConfig(True, 0, 0)
DISABLED = ActiveHoursConfig(False, 8, 0)


def _at(day, hour, minute=0):
    return datetime(2026, 10, day, hour, minute, tzinfo=TZ)


class TestMinutesPerDay:
    @pytest.mark.parametrize("start,end,expected", [
        (8, 0, 16 * 60),
        (0, 0, 24 * 60),
        (9, 17, 8 * 60),
        (20, 2, 6 * 60),
        (10, 2, 16 * 60),
        (10, 10, 0),
    ])
    def test_minutes_per_day(self, start, end, expected):
        assert ActiveHoursConfig(True, start, end).minutes_per_day == expected

    def test_midnight_end_does_not_cross(self):
        cfg = ActiveHoursConfig(True, 8, 0)
        assert cfg.effective_end == 24
        assert not cfg.crosses_midnight

    def test_early_end_crosses(self):
        assert ActiveHoursConfig(True, 20, 2).crosses_midnight


class TestActiveMinutesBetween:
    def test_empty_or_reversed_range(self):
        assert active_minutes_between(_at(19, 12), _at(19, 12), 8, 0) == 0
        assert active_minutes_between(_at(19, 12), _at(19, 10), 8, 0) == 0

    def test_window_inside_one_day(self):
        assert active_minutes_between(_at(19, 0), _at(19, 23), 9, 17) == 8 * 60

    def test_range_cuts_through_window(self):
        assert active_minutes_between(_at(19, 12), _at(19, 15, 30), 9, 17) == 210

    def test_multi_day_span(self):
        assert active_minutes_between(_at(19, 0), _at(22, 0), 9, 17) == 3 * 8 * 60

    def test_crossing_window_across_midnight(self):
        """22:00 → 02:00 inside a 20→2 window equals a plain 4h window."""
        crossing = active_minutes_between(_at(19, 22), _at(20, 2), 20, 2)
        plain = active_minutes_between(_at(19, 10), _at(19, 14), 10, 14)
        assert crossing == plain == 240

    def test_crossing_window_early_morning_from_previous_day(self):
        # 01:00-02:00 belongs to the window that opened the evening before
        assert active_minutes_between(_at(19, 1), _at(19, 3), 20, 2) == 60

    def test_crossing_window_multi_day(self):
        assert active_minutes_between(_at(19, 0), _at(22, 0), 20, 2) == 3 * 6 * 60

    def test_midnight_end_counts_to_end_of_day(self):
        assert active_minutes_between(_at(19, 20), _at(20, 6), 8, 0) == 240

    def test_walk_is_bounded(self):
        # a 30-day range is malformed; the walk stops after 12 day-steps
        minutes = active_minutes_between(_at(1, 0), _at(31, 0), 0, 0)
        assert minutes == 12 * 24 * 60


class TestLinearFraction:
    def test_session_one_hour_left(self):
        now = _at(18, 12)
        cycle = CycleSpec(now + timedelta(hours=1), SESSION_CYCLE)
        assert linear_fraction(now, cycle) == pytest.approx(0.8)

    def test_monotonic_in_remaining(self):
        now = _at(18, 12)
        fractions = [
            linear_fraction(now, CycleSpec(now + timedelta(minutes=m), SESSION_CYCLE))
            for m in range(1, 301)
        ]
        assert all(0 <= f < 1 for f in fractions)
        assert all(a > b for a, b in zip(fractions, fractions[1:]))

    def test_full_remaining_is_zero(self):
        now = _at(18, 12)
        cycle = CycleSpec(now + SESSION_CYCLE, SESSION_CYCLE)
        assert linear_fraction(now, cycle) == 0


class TestExpectedFraction:
    def test_session_ignores_active_hours(self):
        now = _at(18, 3)  # outside the default window
        cycle = CycleSpec(now + timedelta(hours=1), SESSION_CYCLE)
        for cfg in (DEFAULT, FULL_DAY, DISABLED, ActiveHoursConfig(True, 20, 2)):
            assert expected_fraction(now, cycle, cfg) == pytest.approx(0.8)

    @pytest.mark.parametrize("now", [RESET, RESET + timedelta(minutes=1)])
    def test_at_or_after_reset_is_unavailable(self, now):
        assert expected_fraction(now, WEEKLY, DEFAULT) is None
        assert expected_fraction(now, WEEKLY, DISABLED) is None

    def test_remaining_longer_than_cycle_is_unavailable(self):
        now = RESET - WEEK_CYCLE - timedelta(minutes=1)
        assert expected_fraction(now, WEEKLY, DEFAULT) is None

    def test_full_day_window_at_midpoint(self):
        now = RESET - timedelta(days=3, hours=12)
        assert expected_fraction(now, WEEKLY, FULL_DAY) == pytest.approx(0.5)

    def test_full_day_window_matches_linear(self):
        for hours in range(1, 168, 7):
            now = RESET - timedelta(hours=hours)
            assert expected_fraction(now, WEEKLY, FULL_DAY) == pytest.approx(
                linear_fraction(now, WEEKLY)
            )

    def test_default_window_weights_waking_hours(self):
        # Sun 20:00: Thu-Sat 16h each plus Sun 08-20 -> 60 of 112 active hours
        now = RESET - timedelta(days=3, hours=12)
        assert expected_fraction(now, WEEKLY, DEFAULT) == pytest.approx(60 / 112)

    def test_default_window_midpoint(self):
        # 56 of 112 active hours are behind us at Sun 16:00
        assert expected_fraction(_at(18, 16), WEEKLY, DEFAULT) == pytest.approx(0.5)

    def test_flat_overnight(self):
        night = expected_fraction(_at(19, 1), WEEKLY, DEFAULT)
        morning = expected_fraction(_at(19, 8), WEEKLY, DEFAULT)
        assert night == pytest.approx(morning)

    def test_disabled_uses_linear(self):
        now = _at(18, 16)
        assert expected_fraction(now, WEEKLY, DISABLED) == pytest.approx(
            linear_fraction(now, WEEKLY)
        )

    def test_degenerate_window_is_unavailable(self):
        cfg = ActiveHoursConfig(True, 10, 10)
        for hours in (1, 50, 120):
            assert expected_fraction(RESET - timedelta(hours=hours), WEEKLY, cfg) is None

    def test_never_reaches_one(self):
        for cfg in (DEFAULT, FULL_DAY, ActiveHoursConfig(True, 20, 2),
                    ActiveHoursConfig(True, 5, 3)):
            for minutes in range(1, 10080, 97):
                f = expected_fraction(RESET - timedelta(minutes=minutes), WEEKLY, cfg)
                assert f is not None
                assert 0 <= f <= 0.999

    def test_cap_applies_past_reset(self):
        for cfg in (DEFAULT, FULL_DAY):
            assert active_hours_fraction(RESET, WEEKLY, cfg) == 0.999
            assert active_hours_fraction(RESET + timedelta(hours=20), WEEKLY, cfg) == 0.999

    def test_naive_and_aware_mix_is_unavailable(self):
        naive_now = datetime(2026, 10, 18, 12, 0)
        assert expected_fraction(naive_now, WEEKLY, DEFAULT) is None

    def test_naive_instants_work(self):
        reset = datetime(2026, 10, 22, 8, 0)
        cycle = CycleSpec(reset, WEEK_CYCLE)
        now = reset - timedelta(days=3, hours=12)
        assert expected_fraction(now, cycle, DISABLED) == pytest.approx(0.5)
