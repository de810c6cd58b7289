from __future__ import annotations

import logging
import time
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, Field

from lcal.core.config import LuniSolarConfig
from lcal.core.julian_day import CivilDate, jd_from_date, civil_from_jd
from lcal.core.leap_month import leap_month_for_year
from lcal.core.lunisolar import (
    InvalidLunarDate,
    LunarDate,
    lunar_to_solar,
    lunar_year_months,
    solar_to_lunar,
)

router = APIRouter(prefix="/api/v1", tags=["public"])

log = logging.getLogger("lcal.api.public")

# UTC-12:00 .. UTC+14:00
TZ_MIN = -12.0
TZ_MAX = 14.0


# ============================================================
# Response Models
# ============================================================
class LunarDateResponse(BaseModel):
    date: date
    tz: float
    year: int
    month: int
    day: int
    is_leap: bool = Field(default=False, description="true for the intercalary month")


class SolarDateResponse(BaseModel):
    date: date
    tz: float
    year: int
    month: int
    day: int


class LunarMonthItem(BaseModel):
    month: int
    is_leap: bool = False
    start: date
    days: int = Field(description="29 or 30")


class LunarYearResponse(BaseModel):
    year: int
    tz: float
    leap_month: Optional[int] = Field(default=None, description="number of the doubled month, if any")
    months: List[LunarMonthItem] = Field(default_factory=list)


# ============================================================
# Helpers: parsing & tz
# ============================================================
def _parse_iso_date(s: str) -> date:
    try:
        return date.fromisoformat(s)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=f"Invalid date format: {s} (expected YYYY-MM-DD)") from e


def _resolve_config(tz: Optional[float]) -> LuniSolarConfig:
    if tz is not None:
        return LuniSolarConfig(tz_offset_hours=float(tz))
    try:
        return LuniSolarConfig.from_env()
    except ValueError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e


def _civil_to_date(c: CivilDate) -> date:
    try:
        return c.to_date()
    except (ValueError, OverflowError) as e:
        raise HTTPException(status_code=422, detail=f"Date out of range: {c.year}-{c.month:02d}-{c.day:02d}") from e


# ============================================================
# Endpoints
# ============================================================
@router.get("/lunar", response_model=LunarDateResponse)
def get_lunar(
    date_str: str = Query(..., alias="date", description="YYYY-MM-DD (Gregorian)"),
    tz: Optional[float] = Query(None, ge=TZ_MIN, le=TZ_MAX, description="UTC offset in hours"),
) -> LunarDateResponse:
    d = _parse_iso_date(date_str)
    cfg = _resolve_config(tz)
    tz_h = cfg.tz_offset_hours

    c = civil_from_jd(jd_from_date(d))
    l: LunarDate = solar_to_lunar(c.day, c.month, c.year, tz_h, leap_scan_limit=cfg.leap_scan_limit)
    return LunarDateResponse(
        date=d,
        tz=tz_h,
        year=l.lunar_year,
        month=l.lunar_month,
        day=l.lunar_day,
        is_leap=l.is_leap_month,
    )


@router.get("/solar", response_model=SolarDateResponse)
def get_solar(
    year: int = Query(..., ge=1, le=9998),
    month: int = Query(..., ge=1, le=12),
    day: int = Query(..., ge=1, le=30),
    leap: bool = Query(False, description="request the intercalary month"),
    tz: Optional[float] = Query(None, ge=TZ_MIN, le=TZ_MAX, description="UTC offset in hours"),
) -> SolarDateResponse:
    cfg = _resolve_config(tz)
    tz_h = cfg.tz_offset_hours

    res = lunar_to_solar(day, month, year, leap, tz_h, leap_scan_limit=cfg.leap_scan_limit)
    if isinstance(res, InvalidLunarDate):
        log.info("invalid lunar date year=%d month=%d day=%d leap=%s tz=%s: %s", year, month, day, leap, tz_h, res.reason)
        raise HTTPException(status_code=422, detail=res.reason)

    return SolarDateResponse(
        date=_civil_to_date(res),
        tz=tz_h,
        year=res.year,
        month=res.month,
        day=res.day,
    )


@router.get("/lunar-year", response_model=LunarYearResponse)
def get_lunar_year(
    year: int = Query(..., ge=2, le=9997),
    tz: Optional[float] = Query(None, ge=TZ_MIN, le=TZ_MAX, description="UTC offset in hours"),
    timing: bool = Query(False, description="log timing (diagnostics)"),
) -> LunarYearResponse:
    cfg = _resolve_config(tz)
    tz_h = cfg.tz_offset_hours

    t0 = time.perf_counter()
    months = lunar_year_months(year, tz_h, leap_scan_limit=cfg.leap_scan_limit)
    leap_month = leap_month_for_year(year, tz_h, limit=cfg.leap_scan_limit)
    t1 = time.perf_counter()

    if timing:
        log.warning("timing /lunar-year year=%d tz=%s total=%.3fs", year, tz_h, t1 - t0)

    return LunarYearResponse(
        year=year,
        tz=tz_h,
        leap_month=leap_month,
        months=[
            LunarMonthItem(
                month=m.month_no,
                is_leap=m.is_leap,
                start=_civil_to_date(m.start),
                days=m.length,
            )
            for m in months
        ],
    )
