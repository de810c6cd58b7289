# src/lcal/core/solstice_anchor.py
from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from .astronomy import major_term_sector
from .config import MONTH11_BASE_JD, SYNODIC_MONTH
from .julian_day import jd_from_civil
from .newmoon import new_moon_day

log = logging.getLogger(__name__)

# Sector of the winter solstice (270 deg).
WINTER_SOLSTICE_SECTOR = 9


@dataclass(frozen=True)
class LunarYearBounds:
    """
    Month-11 anchors around one lunar year.

    a11:
        first day of month 11 preceding the lunar new year
    b11:
        first day of month 11 inside the lunar year (start of the next cycle)
    """
    lunar_year: int
    a11: int
    b11: int

    @property
    def is_leap_year(self) -> bool:
        return self.b11 - self.a11 > 365

    @property
    def month_count(self) -> int:
        return 13 if self.is_leap_year else 12


def lunar_month11_start(year: int, tz: float) -> int:
    """
    Day index on which lunar month 11 begins for the given solar year.

    Month 11 is the lunation that contains the winter solstice. Starting
    from the lunation before Dec 31, step back one month when its new moon
    already lies past the solstice.
    """
    off = jd_from_civil(31, 12, year) - MONTH11_BASE_JD
    k = math.floor(off / SYNODIC_MONTH)

    nm = new_moon_day(k, tz)
    sun_sector = major_term_sector(nm, tz)  # sun longitude at local midnight
    if sun_sector >= WINTER_SOLSTICE_SECTOR:
        log.debug("month11 year=%d: new moon %d past solstice (sector=%d), stepping back", year, nm, sun_sector)
        nm = new_moon_day(k - 1, tz)
    return nm


def lunar_year_bounds(lunar_year: int, tz: float) -> LunarYearBounds:
    """Bounds of lunar_year: month 11 of lunar_year-1 up to month 11 of lunar_year."""
    return LunarYearBounds(
        lunar_year=lunar_year,
        a11=lunar_month11_start(lunar_year - 1, tz),
        b11=lunar_month11_start(lunar_year, tz),
    )
