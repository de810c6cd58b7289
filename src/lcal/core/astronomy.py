# src/lcal/core/astronomy.py
from __future__ import annotations

import math

from .config import DAYS_PER_JULIAN_CENTURY, J2000_JD

PI = math.pi
DR = PI / 180.0  # degree -> radian


def norm360(deg: float) -> float:
    x = deg % 360.0
    return x + 360.0 if x < 0 else x


def angdiff180(deg: float) -> float:
    """Map angle to (-180, 180]."""
    x = (deg + 180.0) % 360.0 - 180.0
    return 180.0 if x == -180.0 else x


def sun_longitude(jd: float) -> float:
    """
    Apparent ecliptic longitude of the sun (radians, [0, 2*pi)) at Julian day jd.

    Low-precision solar theory (Meeus, Astronomical Algorithms ch. 25):
    mean anomaly and mean longitude as polynomials in Julian centuries from
    J2000.0, plus the equation of centre.
    """
    t = (jd - J2000_JD) / DAYS_PER_JULIAN_CENTURY
    t2 = t * t
    m = 357.5291 + 35999.0503 * t - 0.0001559 * t2 - 0.00000048 * t * t2  # mean anomaly, deg
    l0 = 280.46645 + 36000.76983 * t + 0.0003032 * t2  # mean longitude, deg

    dl = (1.9146 - 0.004817 * t - 0.000014 * t2) * math.sin(DR * m)
    dl = dl + (0.019993 - 0.000101 * t) * math.sin(DR * 2 * m) + 0.00029 * math.sin(DR * 3 * m)

    lon = (l0 + dl) * DR
    return lon - PI * 2 * math.floor(lon / (PI * 2))


def sun_longitude_deg(jd: float) -> float:
    return norm360(math.degrees(sun_longitude(jd)))


def major_term_sector(day_number: int, tz: float) -> int:
    """
    Sector 0..11 of the sun's longitude at local midnight starting day_number.

    Each sector spans 30 degrees; 0 starts at the March equinox (0 deg),
    9 at the winter solstice (270 deg).
    """
    return math.floor(sun_longitude(day_number - 0.5 - tz / 24) / PI * 6)
