from __future__ import annotations

"""
New moon / solar longitude cross-check against the JPL ephemeris.

Uses:
- lcal.core.newmoon.new_moon_jd / lunation_index
- lcal.core.astronomy.sun_longitude_deg
- lcal.core.providers.skyfield_provider.SkyfieldProvider

Reports, for every new moon in the range, the difference in minutes
between the analytic series and skyfield, plus the solar longitude error
at that instant.
"""

import argparse

from lcal.core.astronomy import angdiff180, sun_longitude_deg
from lcal.core.errors import EphemerisUnavailableError
from lcal.core.julian_day import jd_from_date
from lcal.core.newmoon import lunation_index, new_moon_jd
from lcal.core.providers.skyfield_provider import SkyfieldProvider

from tools.common import add_common_args, dump_json, resolve_date_range, setup_logging, skip


def main() -> None:
    parser = argparse.ArgumentParser(description="New moon cross-check (analytic vs ephemeris)")
    add_common_args(parser)
    parser.add_argument("--ephemeris", default=None, help="ephemeris file name or path (default: de440s > de421)")
    args = parser.parse_args()
    setup_logging(args)

    start, end = resolve_date_range(args)
    if start is None or end is None:
        parser.error("--date or --start/--end required")

    try:
        provider = SkyfieldProvider(ephemeris=args.ephemeris)
    except EphemerisUnavailableError as e:
        skip(str(e))

    start_jd = float(jd_from_date(start)) - 0.5
    end_jd = float(jd_from_date(end)) + 0.5
    reference = provider.new_moons_between(start_jd - 2.0, end_jd + 2.0)

    rows = []
    worst = 0.0
    k = lunation_index(start_jd)
    while True:
        jd = new_moon_jd(k)
        if jd >= end_jd:
            break
        if jd >= start_jd and reference:
            ref = min(reference, key=lambda r: abs(r - jd))
            dt_min = (jd - ref) * 1440.0
            dlon = angdiff180(sun_longitude_deg(jd) - provider.sun_ecliptic_longitude_deg(jd))
            worst = max(worst, abs(dt_min))
            rows.append({"k": k, "jd": jd, "ephemeris_jd": ref, "dt_minutes": dt_min, "sun_dlon_deg": dlon})
            if not args.json:
                print(f"k={k:6d} jd={jd:.5f} ref={ref:.5f} dt={dt_min:+8.2f} min  sun_dlon={dlon:+.5f} deg")
        k += 1

    if args.json:
        dump_json({"ephemeris": str(provider.path), "rows": rows, "worst_minutes": worst})
    else:
        print(f"worst |dt| = {worst:.2f} min over {len(rows)} new moons")


if __name__ == "__main__":
    main()
