"""Active-hours settings snapshot.

Settings are stored under the same keys the settings UI writes
(``activeEnabled``, ``activeStart``, ``activeEnd``). Every read produces a
fresh, immutable ``ActiveHoursConfig``; nothing here is cached.

Environment overrides (``PACER_`` prefix) win over the settings file::

    PACER_ACTIVE_ENABLED=0 PACER_ACTIVE_START=9 PACER_ACTIVE_END=2 usage-pacer report usage.json

Active windows are read off the local wall clock. The zone is ``PACER_TZ``,
then ``TZ``, then the system zone in ``/etc/localtime``.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from datetime import datetime, tzinfo
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pacer.constants import (
    DEFAULT_ACTIVE_ENABLED, DEFAULT_ACTIVE_END, DEFAULT_ACTIVE_START,
    END_HOUR_CHOICES, START_HOUR_CHOICES, ActiveHoursConfig,
)

logger = logging.getLogger(__name__)

SETTINGS_PATH = Path.home() / ".config/usage-pacer/settings.json"
LOCALTIME_PATH = Path("/etc/localtime")

_ENV_KEYS = {
    "activeEnabled": "PACER_ACTIVE_ENABLED",
    "activeStart": "PACER_ACTIVE_START",
    "activeEnd": "PACER_ACTIVE_END",
}
_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _as_bool(value, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in _TRUE | _FALSE:
        return value.strip().lower() in _TRUE
    if value is not None:
        logger.warning("ignoring activeEnabled=%r, using %s", value, default)
    return default


def _as_hour(key: str, value, default: int, choices: tuple[int, ...]) -> int:
    if value is None:
        return default
    try:
        hour = int(value)
    except (ValueError, TypeError, OverflowError):
        logger.warning("ignoring %s=%r, using %d", key, value, default)
        return default
    if isinstance(value, bool) or not 0 <= hour <= 23:
        logger.warning("ignoring %s=%r, using %d", key, value, default)
        return default
    if hour not in choices:
        logger.debug("%s=%d is outside the offered choices %s", key, hour, choices)
    return hour


def config_from_settings(raw: Mapping | None) -> ActiveHoursConfig:
    """Build a config from stored settings, falling back per key to defaults."""
    raw = raw or {}
    return ActiveHoursConfig(
        enabled=_as_bool(raw.get("activeEnabled"), DEFAULT_ACTIVE_ENABLED),
        start_hour=_as_hour(
            "activeStart", raw.get("activeStart"), DEFAULT_ACTIVE_START, START_HOUR_CHOICES,
        ),
        end_hour=_as_hour(
            "activeEnd", raw.get("activeEnd"), DEFAULT_ACTIVE_END, END_HOUR_CHOICES,
        ),
    )


def _read_settings_file(path: Path) -> dict:
    try:
        raw = json.loads(path.read_text())
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as e:
        logger.warning("could not read settings from %s: %s", path, e)
        return {}
    if not isinstance(raw, dict):
        logger.warning("settings in %s are not an object, ignoring", path)
        return {}
    return raw


def load_settings(
    path: Path | None = None, environ: Mapping[str, str] | None = None,
) -> ActiveHoursConfig:
    raw = _read_settings_file(path or SETTINGS_PATH)
    env = os.environ if environ is None else environ
    for key, var in _ENV_KEYS.items():
        if var in env:
            raw[key] = env[var]
    return config_from_settings(raw)


def _named_zone(name: str) -> ZoneInfo | None:
    try:
        return ZoneInfo(name.lstrip(":"))
    except (ZoneInfoNotFoundError, ValueError) as e:
        logger.warning("unknown time zone %r: %s", name, e)
        return None


def local_zone(
    environ: Mapping[str, str] | None = None, localtime: Path | None = None,
) -> tzinfo:
    """The caller's local zone, with its DST rules.

    Falls back to the current fixed UTC offset only when no zone database
    entry can be found.
    """
    env = os.environ if environ is None else environ
    for var in ("PACER_TZ", "TZ"):
        if env.get(var):
            zone = _named_zone(env[var])
            if zone is not None:
                return zone
    path = localtime or LOCALTIME_PATH
    try:
        with path.open("rb") as f:
            return ZoneInfo.from_file(f, key="localtime")
    except (OSError, ValueError) as e:
        logger.debug("no zone file at %s: %s", path, e)
    return datetime.now().astimezone().tzinfo
