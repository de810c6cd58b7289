# src/lcal/core/newmoon.py
from __future__ import annotations

import math
from typing import List

from .astronomy import DR
from .config import (
    LUNATIONS_PER_CENTURY,
    MEAN_NEW_MOON_EPOCH_JD,
    NEW_MOON_EPOCH_JD,
    SYNODIC_MONTH,
)


def _delta_t_days(t: float) -> float:
    """Secular time correction (days) for Julian centuries t from 1900 January 0.5."""
    t2 = t * t
    t3 = t2 * t
    if t < -11:
        return 0.001 + 0.000839 * t + 0.0002261 * t2 - 0.00000845 * t3 - 0.000000081 * t * t3
    return -0.000278 + 0.000265 * t + 0.000262 * t2


def new_moon_jd(k: int) -> float:
    """
    Julian day (UT, fractional) of the k-th new moon after the one of
    1900-01-01 13:52 UT. Negative k counts backwards.

    e.g. k=2 -> 2415079.976104907, k=-2 -> 2414961.93439546

    Algorithm from Meeus, Astronomical Algorithms (1998): mean lunation,
    periodic terms in the sun's mean anomaly (m), the moon's mean anomaly
    (mpr) and the moon's argument of latitude (f), then the delta-T term.
    """
    t = k / LUNATIONS_PER_CENTURY
    t2 = t * t
    t3 = t2 * t

    jd1 = MEAN_NEW_MOON_EPOCH_JD + 29.53058868 * k + 0.0001178 * t2 - 0.000000155 * t3
    jd1 = jd1 + 0.00033 * math.sin((166.56 + 132.87 * t - 0.009173 * t2) * DR)  # mean new moon

    m = 359.2242 + 29.10535608 * k - 0.0000333 * t2 - 0.00000347 * t3
    mpr = 306.0253 + 385.81691806 * k + 0.0107306 * t2 + 0.00001236 * t3
    f = 21.2964 + 390.67050646 * k - 0.0016528 * t2 - 0.00000239 * t3

    c1 = (0.1734 - 0.000393 * t) * math.sin(m * DR) + 0.0021 * math.sin(2 * DR * m)
    c1 = c1 - 0.4068 * math.sin(mpr * DR) + 0.0161 * math.sin(DR * 2 * mpr)
    c1 = c1 - 0.0004 * math.sin(DR * 3 * mpr)
    c1 = c1 + 0.0104 * math.sin(DR * 2 * f) - 0.0051 * math.sin(DR * (m + mpr))
    c1 = c1 - 0.0074 * math.sin(DR * (m - mpr)) + 0.0004 * math.sin(DR * (2 * f + m))
    c1 = c1 - 0.0004 * math.sin(DR * (2 * f - m)) - 0.0006 * math.sin(DR * (2 * f + mpr))
    c1 = c1 + 0.001 * math.sin(DR * (2 * f - mpr)) + 0.0005 * math.sin(DR * (2 * mpr + m))

    return jd1 + c1 - _delta_t_days(t)


def new_moon_day(k: int, tz: float) -> int:
    """Day index, in local time tz (hours from UTC), on which the k-th new moon falls."""
    return math.floor(new_moon_jd(k) + 0.5 + tz / 24)


def lunation_index(jd: float) -> int:
    """Index k of the last mean lunation starting at or before jd."""
    return math.floor((jd - NEW_MOON_EPOCH_JD) / SYNODIC_MONTH)


def new_moon_days_between(start_jd: int, end_jd: int, tz: float) -> List[int]:
    """
    Local new-moon day indices in [start_jd, end_jd).
    """
    if end_jd <= start_jd:
        return []

    out: List[int] = []
    k = lunation_index(start_jd) - 1
    while True:
        nm = new_moon_day(k, tz)
        if nm >= end_jd:
            break
        if nm >= start_jd:
            out.append(nm)
        k += 1
    return out
