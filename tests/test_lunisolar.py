from __future__ import annotations

import logging
import math
from datetime import date, timedelta

import pytest

from lcal.core.config import NEW_MOON_EPOCH_JD, SYNODIC_MONTH
from lcal.core.errors import InvalidLunarDateError
from lcal.core.julian_day import CivilDate, jd_from_civil
from lcal.core.lunisolar import (
    InvalidLunarDate,
    LunarDate,
    days_in_lunar_month,
    gregorian_to_lunar,
    lunar_to_gregorian,
    lunar_to_solar,
    lunar_year_months,
    require_solar,
    solar_to_lunar,
)
from lcal.core.newmoon import new_moon_day

TZ = 7.0


# ============================================================
# Reference scenarios (UTC+7)
# ============================================================

def test_lunar_to_solar_reference_date():
    assert lunar_to_solar(6, 6, 2018, False, TZ) == CivilDate(day=18, month=7, year=2018)


def test_solar_to_lunar_reference_date():
    assert solar_to_lunar(18, 7, 2018, TZ) == LunarDate(
        lunar_day=6,
        lunar_month=6,
        lunar_year=2018,
        is_leap_month=False,
    )


def test_reference_round_trip():
    c = lunar_to_solar(6, 6, 2018, False, TZ)
    assert solar_to_lunar(c.day, c.month, c.year, TZ) == LunarDate(6, 6, 2018, False)


@pytest.mark.parametrize(
    "civil,lunar",
    [
        ((25, 1, 2020), (1, 1, 2020, False)),
        ((12, 2, 2021), (1, 1, 2021, False)),
        ((22, 1, 2023), (1, 1, 2023, False)),
        ((10, 2, 2024), (1, 1, 2024, False)),
        ((1, 1, 2020), (7, 12, 2019, False)),
        ((20, 12, 2019), (25, 11, 2019, False)),
    ],
)
def test_new_year_and_year_boundary(civil, lunar):
    assert solar_to_lunar(*civil, TZ) == LunarDate(*lunar)


# ============================================================
# Leap months
# ============================================================

@pytest.mark.parametrize(
    "civil,lunar",
    [
        ((22, 5, 2020), (30, 4, 2020, False)),
        ((23, 5, 2020), (1, 4, 2020, True)),
        ((21, 6, 2020), (1, 5, 2020, False)),
        ((22, 3, 2023), (1, 2, 2023, True)),
        ((23, 7, 2017), (1, 6, 2017, True)),
    ],
)
def test_leap_month_dates(civil, lunar):
    assert solar_to_lunar(*civil, TZ) == LunarDate(*lunar)
    assert lunar_to_solar(*lunar, TZ) == CivilDate(*civil)


def test_regular_and_leap_month_are_distinct():
    assert lunar_to_solar(1, 4, 2020, False, TZ) == CivilDate(23, 4, 2020)
    assert lunar_to_solar(1, 4, 2020, True, TZ) == CivilDate(23, 5, 2020)
    assert lunar_to_solar(1, 5, 2020, False, TZ) == CivilDate(21, 6, 2020)


def test_invalid_leap_request_in_leap_year():
    res = lunar_to_solar(1, 5, 2020, True, TZ)
    assert isinstance(res, InvalidLunarDate)
    assert not res
    assert res.requested == LunarDate(1, 5, 2020, True)
    assert "leap month 4" in res.reason


def test_invalid_leap_request_in_common_year():
    res = lunar_to_solar(1, 4, 2019, True, TZ)
    assert isinstance(res, InvalidLunarDate)
    assert res != CivilDate(0, 0, 0)


def test_require_solar():
    assert require_solar(lunar_to_solar(1, 1, 2020, False, TZ)) == CivilDate(25, 1, 2020)
    with pytest.raises(InvalidLunarDateError):
        require_solar(lunar_to_solar(1, 5, 2020, True, TZ))


# ============================================================
# datetime.date bridges
# ============================================================

def test_date_bridges():
    assert gregorian_to_lunar(date(2018, 7, 18), TZ) == LunarDate(6, 6, 2018, False)
    assert lunar_to_gregorian(6, 6, 2018, False, TZ) == date(2018, 7, 18)
    with pytest.raises(InvalidLunarDateError):
        lunar_to_gregorian(1, 4, 2019, True, TZ)


def test_other_timezone():
    assert solar_to_lunar(22, 1, 2023, 8.0) == LunarDate(1, 1, 2023, False)


# ============================================================
# Round trip
# ============================================================

def test_round_trip_every_day_2019_2021():
    d = date(2019, 1, 1)
    end = date(2021, 12, 31)
    while d <= end:
        l = gregorian_to_lunar(d, TZ)
        back = lunar_to_solar(l.lunar_day, l.lunar_month, l.lunar_year, l.is_leap_month, TZ)
        assert back == CivilDate(d.day, d.month, d.year), (d, l)
        d += timedelta(days=1)


def test_lunar_months_are_contiguous():
    d = date(2016, 1, 1)
    prev = gregorian_to_lunar(d, TZ)
    for _ in range(365 * 4):
        d += timedelta(days=1)
        cur = gregorian_to_lunar(d, TZ)
        if cur.lunar_day == 1:
            assert prev.lunar_day in (29, 30), d
            assert (cur.lunar_month, cur.is_leap_month) != (prev.lunar_month, prev.is_leap_month)
        else:
            assert cur.lunar_day == prev.lunar_day + 1, d
            assert (cur.lunar_month, cur.lunar_year, cur.is_leap_month) == (
                prev.lunar_month,
                prev.lunar_year,
                prev.is_leap_month,
            )
        prev = cur


@pytest.mark.parametrize(
    "civil",
    [(5, 4, 1125), (8, 3, 1133), (27, 2, 1256), (31, 3, 1310), (1, 4, 1470)],
)
def test_month_start_before_mean_lunation_estimate(civil):
    day_number = jd_from_civil(*civil)
    k = math.floor((day_number - NEW_MOON_EPOCH_JD) / SYNODIC_MONTH)
    assert new_moon_day(k, TZ) > day_number

    l = solar_to_lunar(*civil, TZ)
    assert 1 <= l.lunar_day <= 30
    assert lunar_to_solar(l.lunar_day, l.lunar_month, l.lunar_year, l.is_leap_month, TZ) == CivilDate(*civil)


# ============================================================
# Year tables
# ============================================================

def test_lunar_year_months_2020():
    months = lunar_year_months(2020, TZ)
    assert [(m.month_no, m.is_leap) for m in months] == [
        (1, False), (2, False), (3, False), (4, False), (4, True),
        (5, False), (6, False), (7, False), (8, False), (9, False),
        (10, False), (11, False), (12, False),
    ]
    assert months[0].start == CivilDate(25, 1, 2020)
    assert months[4].start == CivilDate(23, 5, 2020)
    assert all(m.length in (29, 30) for m in months)
    assert months[-1].start_jd + months[-1].length == jd_from_civil(12, 2, 2021)
    for a, b in zip(months, months[1:]):
        assert a.start_jd + a.length == b.start_jd


def test_lunar_year_months_common_year():
    months = lunar_year_months(2019, TZ)
    assert [m.month_no for m in months] == list(range(1, 13))
    assert not any(m.is_leap for m in months)


def test_days_in_lunar_month():
    assert days_in_lunar_month(4, 2020, True, TZ) == 29
    assert days_in_lunar_month(4, 2020, False, TZ) == 30
    assert days_in_lunar_month(5, 2020, True, TZ) is None


# ============================================================
# Leap scan limit
# ============================================================

def test_leap_scan_limit_is_passed_through(caplog):
    assert lunar_to_solar(1, 4, 2020, True, TZ) == CivilDate(23, 5, 2020)

    with caplog.at_level(logging.WARNING, logger="lcal.core.leap_month"):
        res = lunar_to_solar(1, 4, 2020, True, TZ, leap_scan_limit=3)
        months = lunar_year_months(2020, TZ, leap_scan_limit=3)
    assert isinstance(res, InvalidLunarDate)
    assert "leap month 12" in res.reason
    assert not any(m.is_leap for m in months)
    assert "leap scan hit limit=3" in caplog.text
