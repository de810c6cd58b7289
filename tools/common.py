from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date, timedelta
from typing import Iterable, Optional, Tuple

from lcal.core.config import LuniSolarConfig, debug_enabled


def add_common_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--date", help="YYYY-MM-DD")
    parser.add_argument("--start", help="YYYY-MM-DD")
    parser.add_argument("--end", help="YYYY-MM-DD")
    parser.add_argument("--tz", type=float, default=None, help="UTC offset in hours (default: LCAL_TZ_OFFSET or 7)")
    parser.add_argument("--json", action="store_true")
    parser.add_argument("--verbose", action="store_true")


def setup_logging(args: argparse.Namespace) -> None:
    level = logging.DEBUG if (args.verbose or debug_enabled()) else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)


def resolve_config(args: argparse.Namespace) -> LuniSolarConfig:
    if args.tz is not None:
        return LuniSolarConfig(tz_offset_hours=float(args.tz))
    return LuniSolarConfig.from_env()


def parse_date(s: str) -> date:
    return date.fromisoformat(s)


def iter_dates(start: date, end: date) -> Iterable[date]:
    cur = start
    while cur <= end:
        yield cur
        cur = cur + timedelta(days=1)


def resolve_date_range(args: argparse.Namespace) -> Tuple[Optional[date], Optional[date]]:
    if args.start and args.end:
        return parse_date(args.start), parse_date(args.end)
    if args.date:
        d = parse_date(args.date)
        return d, d
    return None, None


def dump_json(obj: object) -> None:
    print(json.dumps(obj, ensure_ascii=False, indent=2))


def skip(msg: str) -> None:
    print(f"SKIP: {msg}")
    sys.exit(0)
