"""Expected-consumption pacing for usage meters that reset on a cycle."""

from pacer.colors import color_for
from pacer.constants import ActiveHoursConfig, CycleSpec
from pacer.pace_math import active_minutes_between, expected_fraction

__all__ = [
    "ActiveHoursConfig",
    "CycleSpec",
    "active_minutes_between",
    "color_for",
    "expected_fraction",
]
