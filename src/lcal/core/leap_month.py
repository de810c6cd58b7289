# src/lcal/core/leap_month.py
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional

from .astronomy import major_term_sector
from .config import DEFAULT_LEAP_SCAN_LIMIT, NEW_MOON_EPOCH_JD, SYNODIC_MONTH, debug_enabled
from .newmoon import new_moon_day
from .solstice_anchor import lunar_year_bounds

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class MonthLabel:
    month_no: int              # 1..12, and 11 is anchor month at winter solstice
    is_leap: bool              # True if this span is the leap month


def leap_month_offset(a11: int, tz: float, *, limit: int = DEFAULT_LEAP_SCAN_LIMIT) -> int:
    """
    Offset (in months, counted from month 11 starting on a11) of the leap month.

    The leap month is the first lunation with no major-term crossing: the
    sun's sector at its start equals the sector at the start of the next
    one. Only meaningful when the year from a11 holds 13 lunations.
    """
    k = math.floor((a11 - NEW_MOON_EPOCH_JD) / SYNODIC_MONTH + 0.5)

    i = 1  # the month following month 11
    arc = major_term_sector(new_moon_day(k + i, tz), tz)
    last = arc
    for _ in range(limit):
        last = arc
        i += 1
        arc = major_term_sector(new_moon_day(k + i, tz), tz)
        if debug_enabled():
            log.debug("leap scan a11=%d i=%d sector=%d last=%d", a11, i, arc, last)
        if arc == last or i >= limit:
            break

    if arc != last:
        log.warning("leap scan hit limit=%d without a month lacking a major term (a11=%d tz=%s)", limit, a11, tz)
    return i - 1


def leap_month_number(leap_offset: int) -> int:
    """Month number (1..12) repeated by the leap month at the given offset from month 11."""
    leap_month = (leap_offset - 2) % 12
    return 12 if leap_month == 0 else leap_month


def _cycle_leap_month(a11: int, b11: int, tz: float, limit: int) -> Optional[int]:
    if b11 - a11 <= 365:
        return None
    return leap_month_number(leap_month_offset(a11, tz, limit=limit))


def leap_month_for_year(lunar_year: int, tz: float, *, limit: int = DEFAULT_LEAP_SCAN_LIMIT) -> Optional[int]:
    """
    Number of the month that is doubled in lunar_year, or None when it has no leap month.

    Months 1..10 come from the cycle starting at month 11 of the previous
    year, months 11 and 12 from the cycle starting inside lunar_year.
    """
    cur = lunar_year_bounds(lunar_year, tz)
    leap = _cycle_leap_month(cur.a11, cur.b11, tz, limit)
    if leap is not None and leap < 11:
        return leap

    nxt = lunar_year_bounds(lunar_year + 1, tz)
    leap = _cycle_leap_month(nxt.a11, nxt.b11, tz, limit)
    if leap is not None and leap >= 11:
        return leap
    return None


def assign_month_numbers(
    span_count: int,
    *,
    leap_span_pos: Optional[int],
    anchor_month_no: int = 11,
) -> List[MonthLabel]:
    """
    Assign month numbers to the lunations of one cycle.
    Rules:
      - span 0 is anchor_month_no (winter-solstice month => 11).
      - normally each next span increments month number (wrap 12->1).
      - leap span repeats previous month number and does NOT advance the cycle.
    """
    if span_count <= 0:
        return []

    labels: List[MonthLabel] = []
    cur = int(anchor_month_no)

    for pos in range(span_count):
        if pos == 0:
            labels.append(MonthLabel(month_no=cur, is_leap=False))
            continue

        if leap_span_pos is not None and pos == leap_span_pos:
            labels.append(MonthLabel(month_no=cur, is_leap=True))
        else:
            cur = 1 if cur == 12 else (cur + 1)
            labels.append(MonthLabel(month_no=cur, is_leap=False))

    return labels
