from __future__ import annotations

"""
Lunisolar check script.

Uses:
- lcal.core.lunisolar.gregorian_to_lunar / lunar_to_solar

Prints the lunar date of every day in the range and verifies that
converting it back gives the same civil date.
"""

import argparse

from lcal.core.julian_day import CivilDate
from lcal.core.lunisolar import InvalidLunarDate, gregorian_to_lunar, lunar_to_solar

from tools.common import add_common_args, dump_json, iter_dates, resolve_config, resolve_date_range, setup_logging


def _format_label(month: int, day: int, is_leap: bool) -> str:
    return f"{'L' if is_leap else ''}{month:02d}/{day:02d}"


def main() -> None:
    parser = argparse.ArgumentParser(description="Lunisolar date check")
    add_common_args(parser)
    args = parser.parse_args()
    setup_logging(args)

    start, end = resolve_date_range(args)
    if start is None or end is None:
        parser.error("--date or --start/--end required")

    cfg = resolve_config(args)
    tz = cfg.tz_offset_hours

    rows = []
    mismatches = 0
    for cur in iter_dates(start, end):
        l = gregorian_to_lunar(cur, tz, leap_scan_limit=cfg.leap_scan_limit)
        back = lunar_to_solar(
            l.lunar_day, l.lunar_month, l.lunar_year, l.is_leap_month, tz, leap_scan_limit=cfg.leap_scan_limit
        )
        ok = not isinstance(back, InvalidLunarDate) and back == CivilDate.from_date(cur)
        if not ok:
            mismatches += 1

        label = _format_label(l.lunar_month, l.lunar_day, l.is_leap_month)
        if args.json:
            rows.append(
                {
                    "date": cur.isoformat(),
                    "year": l.lunar_year,
                    "month": l.lunar_month,
                    "day": l.lunar_day,
                    "leap": l.is_leap_month,
                    "label": label,
                    "round_trip": ok,
                }
            )
        else:
            sep = "\n" if l.lunar_day == 1 and cur != start else ""
            flag = "" if ok else "  ROUND-TRIP MISMATCH"
            print(f"{sep}{cur.isoformat()}  L={label}  year={l.lunar_year}{flag}")

    if args.json:
        dump_json({"tz": tz, "rows": rows, "mismatches": mismatches})
    elif mismatches:
        print(f"\n{mismatches} round-trip mismatches")


if __name__ == "__main__":
    main()
