from __future__ import annotations

"""
Leap month check script.

Uses:
- lcal.core.solstice_anchor.lunar_year_bounds
- lcal.core.leap_month.leap_month_offset / leap_month_number
- lcal.core.lunisolar.lunar_year_months
"""

import argparse

from lcal.core.julian_day import CivilDate, civil_from_jd
from lcal.core.leap_month import leap_month_number, leap_month_offset
from lcal.core.lunisolar import lunar_year_months
from lcal.core.solstice_anchor import lunar_year_bounds

from tools.common import add_common_args, dump_json, resolve_config, resolve_date_range, setup_logging


def _iso(c: CivilDate) -> str:
    return f"{c.year:04d}-{c.month:02d}-{c.day:02d}"


def _years_from_args(args, start, end) -> list[int]:
    if args.year:
        return [int(args.year)]
    if start and end:
        return list(range(start.year, end.year + 1))
    return []


def main() -> None:
    parser = argparse.ArgumentParser(description="Leap month check")
    add_common_args(parser)
    parser.add_argument("--year", type=int, help="target lunar year")
    args = parser.parse_args()
    setup_logging(args)

    start, end = resolve_date_range(args)
    years = _years_from_args(args, start, end)
    if not years:
        parser.error("--year or --date or --start/--end required")

    cfg = resolve_config(args)
    tz = cfg.tz_offset_hours

    out_rows = []
    for year in years:
        bounds = lunar_year_bounds(year, tz)

        leap_info = None
        if bounds.is_leap_year:
            off = leap_month_offset(bounds.a11, tz, limit=cfg.leap_scan_limit)
            leap_info = {"offset": off, "month_no": leap_month_number(off)}

        row = {
            "year": year,
            "month_count": bounds.month_count,
            "month11_start": _iso(civil_from_jd(bounds.a11)),
            "leap": leap_info,
        }

        if args.verbose:
            row["months"] = [
                {
                    "month": m.month_no,
                    "leap": m.is_leap,
                    "start": _iso(m.start),
                    "days": m.length,
                }
                for m in lunar_year_months(year, tz, leap_scan_limit=cfg.leap_scan_limit)
            ]

        out_rows.append(row)

        if not args.json:
            if leap_info is None:
                print(f"{year}: leap=none month_count={bounds.month_count}")
            else:
                print(
                    f"{year}: leap_offset={leap_info['offset']} month_no={leap_info['month_no']} "
                    f"month_count={bounds.month_count}"
                )
            if args.verbose:
                for m in row["months"]:
                    print(f"  {'L' if m['leap'] else ' '}{m['month']:02d} start={m['start']} days={m['days']}")

    if args.json:
        dump_json({"tz": tz, "years": out_rows})


if __name__ == "__main__":
    main()
