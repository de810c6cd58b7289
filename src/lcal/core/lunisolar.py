# src/lcal/core/lunisolar.py
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Union

from .config import DEFAULT_LEAP_SCAN_LIMIT, NEW_MOON_EPOCH_JD, SYNODIC_MONTH, debug_enabled
from .errors import InvalidLunarDateError
from .julian_day import CivilDate, civil_from_jd, jd_from_civil, jd_from_date
from .leap_month import assign_month_numbers, leap_month_number, leap_month_offset
from .newmoon import new_moon_day
from .solstice_anchor import lunar_month11_start, lunar_year_bounds

log = logging.getLogger(__name__)


# ============================================================
# Data models
# ============================================================

@dataclass(frozen=True)
class LunarDate:
    lunar_day: int             # 1..30
    lunar_month: int           # 1..12
    lunar_year: int
    is_leap_month: bool = False


@dataclass(frozen=True)
class InvalidLunarDate:
    """
    "No such date" result of lunar_to_solar().

    Returned instead of a CivilDate when the requested lunar date does not
    exist, e.g. a leap month the lunar year does not have.
    """
    requested: LunarDate
    reason: str

    def __bool__(self) -> bool:
        return False


SolarResult = Union[CivilDate, InvalidLunarDate]


@dataclass(frozen=True)
class LunarMonth:
    """One month of a lunar year: [start_jd, start_jd + length)."""
    month_no: int
    is_leap: bool
    start_jd: int
    length: int                # 29 or 30

    @property
    def start(self) -> CivilDate:
        return civil_from_jd(self.start_jd)


# ============================================================
# Solar -> lunar
# ============================================================

def solar_to_lunar(
    day: int,
    month: int,
    year: int,
    tz: float,
    *,
    leap_scan_limit: int = DEFAULT_LEAP_SCAN_LIMIT,
) -> LunarDate:
    """
    Lunar date of the civil date day/month/year in local time tz (hours from UTC).
    """
    day_number = jd_from_civil(day, month, year)
    k = math.floor((day_number - NEW_MOON_EPOCH_JD) / SYNODIC_MONTH)

    month_start = new_moon_day(k + 1, tz)
    if month_start > day_number:
        month_start = new_moon_day(k, tz)
        # true new moon k can trail the mean estimate past day_number
        if month_start > day_number:
            month_start = new_moon_day(k - 1, tz)

    a11 = lunar_month11_start(year, tz)
    b11 = a11
    if a11 >= month_start:
        lunar_year = year
        a11 = lunar_month11_start(year - 1, tz)
    else:
        lunar_year = year + 1
        b11 = lunar_month11_start(year + 1, tz)

    lunar_day = day_number - month_start + 1
    diff = math.floor((month_start - a11) / 29)

    is_leap = False
    lunar_month = diff + 11
    if b11 - a11 > 365:
        leap_off = leap_month_offset(a11, tz, limit=leap_scan_limit)
        if diff >= leap_off:
            lunar_month = diff + 10
            if diff == leap_off:
                is_leap = True

    if lunar_month > 12:
        lunar_month -= 12
    if lunar_month >= 11 and diff < 4:
        lunar_year -= 1

    if debug_enabled():
        log.debug(
            "solar_to_lunar %04d-%02d-%02d tz=%s jd=%d month_start=%d a11=%d b11=%d diff=%d -> %d/%d/%d leap=%s",
            year, month, day, tz, day_number, month_start, a11, b11, diff,
            lunar_day, lunar_month, lunar_year, is_leap,
        )

    return LunarDate(
        lunar_day=lunar_day,
        lunar_month=lunar_month,
        lunar_year=lunar_year,
        is_leap_month=is_leap,
    )


def gregorian_to_lunar(d: date, tz: float, *, leap_scan_limit: int = DEFAULT_LEAP_SCAN_LIMIT) -> LunarDate:
    """solar_to_lunar() for a datetime.date (proleptic Gregorian)."""
    c = civil_from_jd(jd_from_date(d))
    return solar_to_lunar(c.day, c.month, c.year, tz, leap_scan_limit=leap_scan_limit)


# ============================================================
# Lunar -> solar
# ============================================================

def lunar_to_solar(
    lunar_day: int,
    lunar_month: int,
    lunar_year: int,
    is_leap_month: bool,
    tz: float,
    *,
    leap_scan_limit: int = DEFAULT_LEAP_SCAN_LIMIT,
) -> SolarResult:
    """
    Civil date of a lunar date, or InvalidLunarDate when that date does not exist.

    A leap-month request is only valid for the month actually doubled in a
    13-month lunar year.
    """
    if lunar_month < 11:
        a11 = lunar_month11_start(lunar_year - 1, tz)
        b11 = lunar_month11_start(lunar_year, tz)
    else:
        a11 = lunar_month11_start(lunar_year, tz)
        b11 = lunar_month11_start(lunar_year + 1, tz)

    k = math.floor(0.5 + (a11 - NEW_MOON_EPOCH_JD) / SYNODIC_MONTH)
    off = (lunar_month - 11) % 12

    if b11 - a11 > 365:
        leap_off = leap_month_offset(a11, tz, limit=leap_scan_limit)
        leap_month = leap_month_number(leap_off)
        if is_leap_month and lunar_month != leap_month:
            return InvalidLunarDate(
                requested=LunarDate(lunar_day, lunar_month, lunar_year, True),
                reason=f"lunar year {lunar_year} has leap month {leap_month}, not {lunar_month}",
            )
        if is_leap_month or off >= leap_off:
            off += 1
    elif is_leap_month:
        return InvalidLunarDate(
            requested=LunarDate(lunar_day, lunar_month, lunar_year, True),
            reason=f"lunar year {lunar_year} has no leap month",
        )

    month_start = new_moon_day(k + off, tz)
    return civil_from_jd(month_start + lunar_day - 1)


def lunar_to_gregorian(
    lunar_day: int,
    lunar_month: int,
    lunar_year: int,
    is_leap_month: bool,
    tz: float,
    *,
    leap_scan_limit: int = DEFAULT_LEAP_SCAN_LIMIT,
) -> date:
    """lunar_to_solar() as a datetime.date; raises InvalidLunarDateError for missing dates."""
    res = lunar_to_solar(lunar_day, lunar_month, lunar_year, is_leap_month, tz, leap_scan_limit=leap_scan_limit)
    return require_solar(res).to_date()


def require_solar(result: SolarResult) -> CivilDate:
    if isinstance(result, InvalidLunarDate):
        raise InvalidLunarDateError(result.reason)
    return result


# ============================================================
# Year tables
# ============================================================

def lunar_year_months(
    lunar_year: int,
    tz: float,
    *,
    leap_scan_limit: int = DEFAULT_LEAP_SCAN_LIMIT,
) -> List[LunarMonth]:
    """
    Months 1..12 of lunar_year (13 entries when it has a leap month), in order.
    """
    cur = lunar_year_bounds(lunar_year, tz)
    nxt_b11 = lunar_month11_start(lunar_year + 1, tz)

    k0 = math.floor(0.5 + (cur.a11 - NEW_MOON_EPOCH_JD) / SYNODIC_MONTH)
    leap_pos: Optional[int] = leap_month_offset(cur.a11, tz, limit=leap_scan_limit) if cur.is_leap_year else None
    labels = assign_month_numbers(cur.month_count, leap_span_pos=leap_pos)

    # months 1..10 of this cycle, then 11 and 12 from the next one
    nxt_k0 = math.floor(0.5 + (cur.b11 - NEW_MOON_EPOCH_JD) / SYNODIC_MONTH)
    nxt_count = 13 if nxt_b11 - cur.b11 > 365 else 12
    nxt_leap: Optional[int] = leap_month_offset(cur.b11, tz, limit=leap_scan_limit) if nxt_count == 13 else None
    nxt_labels = assign_month_numbers(nxt_count, leap_span_pos=nxt_leap)

    spans = [(k0 + pos, lab) for pos, lab in enumerate(labels) if lab.month_no < 11]
    spans += [(nxt_k0 + pos, lab) for pos, lab in enumerate(nxt_labels) if lab.month_no >= 11]

    out: List[LunarMonth] = []
    for k, lab in spans:
        start = new_moon_day(k, tz)
        out.append(
            LunarMonth(
                month_no=lab.month_no,
                is_leap=lab.is_leap,
                start_jd=start,
                length=new_moon_day(k + 1, tz) - start,
            )
        )
    return out


def days_in_lunar_month(
    lunar_month: int,
    lunar_year: int,
    is_leap_month: bool,
    tz: float,
    *,
    leap_scan_limit: int = DEFAULT_LEAP_SCAN_LIMIT,
) -> Optional[int]:
    """29 or 30, or None when the month does not exist in that year."""
    for m in lunar_year_months(lunar_year, tz, leap_scan_limit=leap_scan_limit):
        if m.month_no == lunar_month and m.is_leap == is_leap_month:
            return m.length
    return None
