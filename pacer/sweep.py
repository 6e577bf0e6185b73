"""
Sweep a weekly cycle and compare active-hours pacing against linear pacing.

For each active-hours configuration the expected fraction is sampled every
poll interval from cycle start to reset, then summarised:

  - gap between the weighted and the linear curve (percentage points)
  - weighted fraction at the cycle's time midpoint
  - share of samples where the weighted curve does not move (inactive hours)
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

import numpy as np

from pacer.constants import POLL_INTERVAL, WEEK_CYCLE, ActiveHoursConfig, CycleSpec
from pacer.pace_math import expected_fraction, linear_fraction

SWEEP_CONFIGS = {
    "Default 08-00": ActiveHoursConfig(True, 8, 0),
    "Full day": ActiveHoursConfig(True, 0, 0),
    "Office 09-17": ActiveHoursConfig(True, 9, 17),
    "Late 10-02": ActiveHoursConfig(True, 10, 2),
    "Night 20-02": ActiveHoursConfig(True, 20, 2),
    "Disabled": ActiveHoursConfig(False, 8, 0),
}


@dataclass(slots=True)
class SweepStats:
    max_gap: float
    mean_gap: float
    midpoint_pct: float
    flat_pct: float
    final_pct: float


def sweep_cycle(
    config: ActiveHoursConfig,
    reset_at: datetime,
    length: timedelta = WEEK_CYCLE,
    step: timedelta = timedelta(minutes=POLL_INTERVAL),
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Sample elapsed hours, weighted and linear fractions over one cycle.

    Unavailable samples are ``nan``.
    """
    cycle = CycleSpec(reset_at=reset_at, length=length)
    n = int(length / step)
    hours = np.empty(n)
    weighted = np.empty(n)
    linear = np.empty(n)
    for i in range(n):
        now = cycle.start + step * (i + 1)
        hours[i] = (step * (i + 1)).total_seconds() / 3600
        w = expected_fraction(now, cycle, config)
        ln = linear_fraction(now, cycle)
        weighted[i] = np.nan if w is None else w
        linear[i] = np.nan if ln is None else ln
    return hours, weighted, linear


def compute_sweep_stats(
    hours: np.ndarray, weighted: np.ndarray, linear: np.ndarray,
) -> SweepStats | None:
    ok = ~np.isnan(weighted) & ~np.isnan(linear)
    if ok.sum() < 2:
        return None
    w, ln, h = weighted[ok], linear[ok], hours[ok]
    gap = np.abs(w - ln) * 100
    mid = int(np.argmin(np.abs(h - h[-1] / 2)))
    flat = float(np.mean(np.diff(w) < 1e-9) * 100)
    return SweepStats(
        max_gap=float(gap.max()),
        mean_gap=float(gap.mean()),
        midpoint_pct=float(w[mid] * 100),
        flat_pct=flat,
        final_pct=float(w[-1] * 100),
    )


# ════════════════════════════════════════════════════════════════════════
#  REPORT
# ════════════════════════════════════════════════════════════════════════

SWEEP_METRICS = [
    ("Max |weighted - linear| (pp)", "max_gap", ".1f"),
    ("Mean |weighted - linear| (pp)", "mean_gap", ".1f"),
    ("Expected % at time midpoint", "midpoint_pct", ".1f"),
    ("Flat samples %", "flat_pct", ".1f"),
    ("Expected % at last sample", "final_pct", ".1f"),
]


def print_sweep_table(results: dict[str, SweepStats | None]):
    names = [n for n in results if results[n] is not None]
    if not names:
        print("_No usable samples_")
        return
    print("| Metric | " + " | ".join(names) + " |")
    print("|--------|" + "-------:|" * len(names))
    for label, attr, fmt in SWEEP_METRICS:
        cells = [f"{getattr(results[n], attr):{fmt}}" for n in names]
        print(f"| {label} | " + " | ".join(cells) + " |")
    print()


def run_sweep(
    reset_at: datetime, configs: dict[str, ActiveHoursConfig] | None = None,
) -> dict[str, SweepStats | None]:
    configs = configs or SWEEP_CONFIGS
    print("## Weekly Cycle Sweep\n")
    print(f"Reset {reset_at:%a %Y-%m-%d %H:%M} · sample every {POLL_INTERVAL:.0f}m\n")
    print("| Config | Enabled | Window | Active min/day |")
    print("|--------|---------|--------|---------------:|")
    for name, cfg in configs.items():
        print(f"| {name} | {cfg.enabled} | {cfg.start_hour:02d}:00-{cfg.end_hour:02d}:00 "
              f"| {cfg.minutes_per_day} |")
    print()

    results = {
        name: compute_sweep_stats(*sweep_cycle(cfg, reset_at))
        for name, cfg in configs.items()
    }
    print_sweep_table(results)
    return results
