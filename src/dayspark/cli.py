"""CLI entry point for the daily almanac.

Defaults come from DAYSPARK_* environment variables (a .env file is honoured):
    dayspark --date 2024-06-20
    dayspark --date 2024-12-21 --lat 69.65 --lng 18.96 --json
"""

import argparse
import json
import logging
import sys
from dataclasses import replace
from datetime import date

from dotenv import load_dotenv

from dayspark.compute import TimezoneLookupError, run
from dayspark.config import ConfigError, load_settings
from dayspark.models import QueryInput
from dayspark.renderers.json_payload import build_payload
from dayspark.renderers.markdown import render_markdown

logger = logging.getLogger("dayspark")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dayspark", description="Daily sky almanac.")
    parser.add_argument("--date", default=None, help="Local date YYYY-MM-DD (default: today)")
    parser.add_argument("--lat", type=float, default=None, help="Latitude, north positive")
    parser.add_argument("--lng", type=float, default=None, help="Longitude, east positive")
    parser.add_argument("--tz", default=None, help="IANA timezone (default: looked up)")
    parser.add_argument("--name", default=None, help="Location display name")
    parser.add_argument("--json", action="store_true", help="Emit the JSON payload")
    parser.add_argument("--24h", dest="use_24h", action="store_true", default=None)
    parser.add_argument("--advanced", action="store_true", default=None)
    parser.add_argument("--astrology", action="store_true", default=None)
    parser.add_argument("--deep", action="store_true", default=None)
    parser.add_argument("--cross-quarter", action="store_true", default=None)
    parser.add_argument("--meteorological", action="store_true", default=None)
    parser.add_argument("--no-seasons", dest="seasons", action="store_false", default=None)
    parser.add_argument("--no-lore", dest="lore", action="store_false", default=None)
    parser.add_argument("--no-sun", dest="sun", action="store_false", default=None)
    parser.add_argument("--no-moon", dest="moon", action="store_false", default=None)
    parser.add_argument("--no-planets", dest="planets", action="store_false", default=None)
    parser.add_argument("--no-events", dest="events", action="store_false", default=None)
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def _pick(cli_value, fallback):
    return fallback if cli_value is None else cli_value


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = load_settings()
    except ConfigError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 1

    flags = replace(
        settings.flags,
        advanced_astronomy=_pick(args.advanced, settings.flags.advanced_astronomy),
        astrology_aspects=_pick(args.astrology, settings.flags.astrology_aspects),
        deep_astrology=_pick(args.deep, settings.flags.deep_astrology),
        cross_quarter_days=_pick(args.cross_quarter, settings.flags.cross_quarter_days),
        meteorological_seasons=_pick(args.meteorological, settings.flags.meteorological_seasons),
        seasons=_pick(args.seasons, settings.flags.seasons),
        lore=_pick(args.lore, settings.flags.lore),
        sun=_pick(args.sun, settings.flags.sun),
        moon=_pick(args.moon, settings.flags.moon),
        planets=_pick(args.planets, settings.flags.planets),
        celestial_events=_pick(args.events, settings.flags.celestial_events),
    )
    use_24h = _pick(args.use_24h, settings.use_24h)
    query = QueryInput(
        when=args.date or date.today().isoformat(),
        lat=_pick(args.lat, settings.latitude),
        lng=_pick(args.lng, settings.longitude),
        tz_name=_pick(args.tz, settings.timezone),
        location_name=_pick(args.name, settings.location_name),
    )

    try:
        almanac = run(query, flags)
    except (ValueError, TimezoneLookupError) as exc:
        logger.error("%s", exc)
        return 1

    if args.json:
        payload = build_payload(almanac, use_24h)
        payload["location_name"] = query.location_name
        print(json.dumps(payload, ensure_ascii=False, indent=2))
    else:
        print(f"# {query.location_name}, {almanac.day.isoformat()}\n")
        print(render_markdown(almanac, use_24h, settings.headers), end="")
    return 0


if __name__ == "__main__":
    sys.exit(main())
