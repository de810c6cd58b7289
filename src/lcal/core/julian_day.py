# src/lcal/core/julian_day.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from .config import GREGORIAN_FIRST_JD, JULIAN_LAST_JD


@dataclass(frozen=True)
class CivilDate:
    """
    Civil calendar date: Julian calendar before 1582-10-15, Gregorian from then on.
    month is 1-based.
    """
    day: int
    month: int
    year: int

    def to_date(self) -> date:
        """
        Convert to datetime.date (proleptic Gregorian).
        Julian-calendar dates are shifted through their day index.
        """
        return date.fromordinal(jd_from_civil(self.day, self.month, self.year) - _ORDINAL_OFFSET)

    @classmethod
    def from_date(cls, d: date) -> "CivilDate":
        """Build from datetime.date; days before the cutover come back in the Julian calendar."""
        return civil_from_jd(jd_from_date(d))


# date(1, 1, 1).toordinal() == 1 and its Julian day number is 1721426.
_ORDINAL_OFFSET = 1721425


def jd_from_civil(day: int, month: int, year: int) -> int:
    """
    Julian day number of day/month/year.

    Months are shifted so that March is month 0. Indices below 2299161 are
    recomputed with the Julian calendar rule. No validation: any integer
    triple is accepted.
    """
    a = (14 - month) // 12
    y = year + 4800 - a
    m = month + 12 * a - 3

    jd = day + (153 * m + 2) // 5 + 365 * y + y // 4 - y // 100 + y // 400 - 32045
    if jd < GREGORIAN_FIRST_JD:
        jd = day + (153 * m + 2) // 5 + 365 * y + y // 4 - 32083
    return jd


def civil_from_jd(jd: int) -> CivilDate:
    """Inverse of jd_from_civil (Gregorian after 2299160, Julian otherwise)."""
    jd = int(jd)
    if jd > JULIAN_LAST_JD:
        a = jd + 32044
        b = (4 * a + 3) // 146097
        c = a - (b * 146097) // 4
    else:
        b = 0
        c = jd + 32082

    d = (4 * c + 3) // 1461
    e = c - (1461 * d) // 4
    m = (5 * e + 2) // 153
    day = e - (153 * m + 2) // 5 + 1
    month = m + 3 - 12 * (m // 10)
    year = b * 100 + d - 4800 + m // 10
    return CivilDate(day=day, month=month, year=year)


def jd_from_date(d: date) -> int:
    """Julian day number of a datetime.date (always proleptic Gregorian)."""
    return d.toordinal() + _ORDINAL_OFFSET
