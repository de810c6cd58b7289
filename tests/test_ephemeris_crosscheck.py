from __future__ import annotations

import pytest

from lcal.core.astronomy import angdiff180, sun_longitude_deg
from lcal.core.errors import EphemerisUnavailableError
from lcal.core.julian_day import jd_from_civil
from lcal.core.newmoon import lunation_index, new_moon_jd


def _require_provider():
    pytest.importorskip("skyfield")
    from lcal.core.providers.skyfield_provider import SkyfieldProvider

    try:
        return SkyfieldProvider()
    except EphemerisUnavailableError:
        pytest.skip("ephemeris not found (set LCAL_EPHEMERIS_PATH or place data/de440s.bsp)")


def test_sun_longitude_matches_ephemeris():
    provider = _require_provider()
    jd = float(jd_from_civil(1, 1, 2020))
    for _ in range(24):
        assert abs(angdiff180(sun_longitude_deg(jd) - provider.sun_ecliptic_longitude_deg(jd))) < 0.05
        jd += 15.2


def test_new_moons_match_ephemeris():
    provider = _require_provider()
    start = float(jd_from_civil(1, 1, 2020))
    end = float(jd_from_civil(1, 1, 2022))
    reference = provider.new_moons_between(start - 2.0, end + 2.0)
    assert reference

    k = lunation_index(start)
    while new_moon_jd(k) < end:
        jd = new_moon_jd(k)
        ref = min(reference, key=lambda r: abs(r - jd))
        assert abs(jd - ref) * 1440.0 < 60.0, k
        k += 1
