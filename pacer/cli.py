"""
usage-pacer: pace a saved usage payload, or sweep a weekly cycle.

    usage-pacer report usage.json
    usage-pacer report usage.json --now 2026-10-18T14:00:00+02:00
    usage-pacer sweep --reset 2026-10-22T08:00:00
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime, timedelta
from pathlib import Path

from pacer.colors import css_rgb
from pacer.report import format_countdown, format_delta
from pacer.settings import load_settings, local_zone
from pacer.sweep import run_sweep
from pacer.usage import evaluate_usage, headline

logger = logging.getLogger(__name__)


def _instant(value: str) -> datetime:
    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an ISO-8601 instant: {value!r}")
    return dt.astimezone()


def _next_reset(now: datetime) -> datetime:
    """Next Thursday 08:00 local, the usual weekly reset."""
    d = now.replace(hour=8, minute=0, second=0, microsecond=0)
    d += timedelta(days=(3 - d.weekday()) % 7)
    if d <= now:
        d += timedelta(days=7)
    return d


def cmd_report(args) -> int:
    try:
        data = json.loads(Path(args.path).read_text())
    except (OSError, ValueError) as e:
        logger.error("cannot read usage data from %s: %s", args.path, e)
        return 1
    if not isinstance(data, dict):
        logger.error("usage data in %s is not an object", args.path)
        return 1

    zone = local_zone({"PACER_TZ": args.tz} if args.tz else None)
    now = args.now or datetime.now(zone)
    config = load_settings(args.settings)
    readings = evaluate_usage(data, now, config, zone)
    if not readings:
        print("No data yet")
        return 0

    for r in readings.values():
        pace = "--" if r.pace_pct is None else f"{r.pace_pct:.0f}%"
        print(f"{r.label:<8} {r.utilization:5.1f}%  pace {pace:>4}  "
              f"{format_delta(r.delta):<14} {format_countdown(r.reset_at, now) or '':<14} "
              f"{css_rgb(r.color)}")
    top = headline(readings)
    if top is not None and top.delta is not None:
        print(f"\nBadge: {top.label} {format_delta(top.delta)}")
    return 0


def cmd_sweep(args) -> int:
    reset_at = args.reset or _next_reset(datetime.now(local_zone()))
    run_sweep(reset_at)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="usage-pacer", description=__doc__.split("\n")[1])
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    rep = sub.add_parser("report", help="pace each bucket of a saved usage payload")
    rep.add_argument("path", help="usage JSON with five_hour / seven_day buckets")
    rep.add_argument("--settings", type=Path, default=None, help="settings JSON file")
    rep.add_argument("--now", type=_instant, default=None, help="evaluate at this instant")
    rep.add_argument("--tz", default=None, help="IANA zone for active hours, e.g. Europe/Paris")
    rep.set_defaults(func=cmd_report)

    sw = sub.add_parser("sweep", help="compare active-hours and linear pacing over a week")
    sw.add_argument("--reset", type=_instant, default=None, help="weekly reset instant")
    sw.set_defaults(func=cmd_sweep)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
