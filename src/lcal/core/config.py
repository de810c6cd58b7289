# src/lcal/core/config.py
from __future__ import annotations

import os
from dataclasses import dataclass

# Mean synodic month (days). Every month-boundary search is anchored on it.
SYNODIC_MONTH = 29.530588853

# Julian day of the reference new moon (1900-01-01 13:52 UT), k = 0.
NEW_MOON_EPOCH_JD = 2415021.076998695

# Epoch of the mean new moon polynomial (1900 January 0.5).
MEAN_NEW_MOON_EPOCH_JD = 2415020.75933

# Integral day index used to locate the month-11 lunation.
MONTH11_BASE_JD = 2415021

# First Gregorian / last Julian day index (1582-10-15 / 1582-10-04).
GREGORIAN_FIRST_JD = 2299161
JULIAN_LAST_JD = 2299160

# J2000.0 (2000-01-01 12:00 TT) and days per Julian century.
J2000_JD = 2451545.0
DAYS_PER_JULIAN_CENTURY = 36525.0

# Lunations per Julian century, as used by the new moon series.
LUNATIONS_PER_CENTURY = 1236.85

DEFAULT_TZ_OFFSET_HOURS = 7.0
DEFAULT_LEAP_SCAN_LIMIT = 14

ENV_TZ_OFFSET = "LCAL_TZ_OFFSET"
ENV_DEBUG_LUNISOLAR = "LCAL_DEBUG_LUNISOLAR"


def env_truthy(name: str) -> bool:
    v = os.environ.get(name, "")
    return v.strip().lower() in ("1", "true", "yes", "y", "on")


def debug_enabled() -> bool:
    return env_truthy(ENV_DEBUG_LUNISOLAR)


def default_tz_offset() -> float:
    """
    Timezone offset (hours) used when the caller does not pass one.
    LCAL_TZ_OFFSET=9 switches the default to UTC+9.
    """
    v = os.environ.get(ENV_TZ_OFFSET, "").strip()
    if not v:
        return DEFAULT_TZ_OFFSET_HOURS
    try:
        return float(v)
    except ValueError as e:
        raise ValueError(f"{ENV_TZ_OFFSET} must be a number of hours, got {v!r}") from e


@dataclass(frozen=True)
class LuniSolarConfig:
    """
    Lunisolar conversion settings.

    tz_offset_hours:
        Local time offset from UTC. Decides on which civil day a new moon
        or a major-term boundary falls.
    leap_scan_limit:
        Upper bound on the lunations scanned while looking for the leap
        month. Never reached for real calendar data.
    """
    tz_offset_hours: float = DEFAULT_TZ_OFFSET_HOURS
    leap_scan_limit: int = DEFAULT_LEAP_SCAN_LIMIT

    @classmethod
    def from_env(cls) -> "LuniSolarConfig":
        return cls(tz_offset_hours=default_tz_offset())
