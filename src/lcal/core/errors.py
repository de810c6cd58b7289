# src/lcal/core/errors.py
from __future__ import annotations


class LcalError(Exception):
    """Base error."""


class InvalidLunarDateError(LcalError, ValueError):
    """Raised by require_solar() when a lunar date does not exist (e.g. a missing leap month)."""


class EphemerisUnavailableError(LcalError):
    """Raised when the skyfield ephemeris file cannot be found."""
