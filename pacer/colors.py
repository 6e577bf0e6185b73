from __future__ import annotations

from math import isnan

from pacer.constants import GRADIENT, NEUTRAL_GRAY

RGB = tuple[int, int, int]


def color_for(delta: float | None) -> RGB:
    """Color for a pace delta on the green → yellow → red ramp.

    ``None`` (no pace available) maps to neutral gray. Deltas are clamped to
    the outermost stops; between stops each channel is interpolated linearly
    and rounded on its own.
    """
    if delta is None or isnan(delta):
        return NEUTRAL_GRAY

    d = max(GRADIENT[0][0], min(GRADIENT[-1][0], delta))
    # the clamp guarantees a bracketing pair
    (at0, *c0), (at1, *c1) = next(
        pair for pair in zip(GRADIENT, GRADIENT[1:]) if d <= pair[1][0]
    )
    t = (d - at0) / (at1 - at0)
    r, g, b = (round(x + t * (y - x)) for x, y in zip(c0, c1))
    return r, g, b


def css_rgb(rgb: RGB) -> str:
    return "rgb({},{},{})".format(*rgb)


def hex_color(rgb: RGB) -> str:
    return "#{:02x}{:02x}{:02x}".format(*rgb)
