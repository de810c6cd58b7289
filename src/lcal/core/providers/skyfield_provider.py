from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Literal, Optional, Tuple, Union
import logging
import os

from skyfield.api import Loader
from skyfield import almanac

from ..errors import EphemerisUnavailableError

log = logging.getLogger(__name__)

ENV_EPHEMERIS = "LCAL_EPHEMERIS"
ENV_EPHEMERIS_PATH = "LCAL_EPHEMERIS_PATH"


# ----------------------------
# Frame selection
# ----------------------------
EclipticFrameName = Literal[
    "of_date",   # ecliptic and equinox of date (what the analytic series approximates)
    "J2000",     # ecliptic J2000
]


def _resolve_ecliptic_frame(name: EclipticFrameName):
    from skyfield.framelib import ecliptic_frame, ecliptic_J2000_frame

    if name == "J2000":
        return ecliptic_J2000_frame
    return ecliptic_frame


# ----------------------------
# Ephemeris path resolution
# ----------------------------
def _project_data_dir() -> Path:
    return Path(__file__).resolve().parents[4] / "data"


def resolve_ephemeris_path(
    ephemeris: Optional[Union[str, Path]] = None,
) -> Path:
    """
    Resolution priority:
      1) ephemeris (str|Path) if provided:
         - absolute path -> use as is
         - relative path / filename -> resolve under project data dir
      2) LCAL_EPHEMERIS_PATH, then LCAL_EPHEMERIS (file name under data dir)
      3) default: prefer de440s if present else de421
    """
    if ephemeris is None:
        env_path = os.environ.get(ENV_EPHEMERIS_PATH, "").strip()
        env_name = os.environ.get(ENV_EPHEMERIS, "").strip()
        ephemeris = env_path or env_name or None

    if ephemeris is not None:
        p = ephemeris if isinstance(ephemeris, Path) else Path(ephemeris).expanduser()
        if p.is_absolute():
            return p
        return _project_data_dir() / p

    data_dir = _project_data_dir()
    p440s = data_dir / "de440s.bsp"
    return p440s if p440s.exists() else data_dir / "de421.bsp"


@dataclass(frozen=True)
class SkyfieldProvider:
    """
    JPL ephemeris positions through skyfield, addressed by Julian day (UT).

    Only used to cross-check the analytic series; the calendar itself never
    touches the ephemeris.
    """

    ephemeris: Optional[Union[str, Path]] = None
    ecliptic_frame: EclipticFrameName = "of_date"

    def __post_init__(self) -> None:
        path = resolve_ephemeris_path(self.ephemeris)
        if not path.exists():
            raise EphemerisUnavailableError(
                f"Ephemeris not found: {path}\n"
                f"Place de440s.bsp or de421.bsp under {_project_data_dir()}, "
                f"or set {ENV_EPHEMERIS_PATH}."
            )

        loader = Loader(str(path.parent))
        eph = loader(path.name)
        ts = loader.timescale()

        object.__setattr__(self, "_path", path)
        object.__setattr__(self, "_eph", eph)
        object.__setattr__(self, "_ts", ts)
        object.__setattr__(self, "_earth", eph["earth"])
        object.__setattr__(self, "_sun", eph["sun"])
        object.__setattr__(self, "_frame", _resolve_ecliptic_frame(self.ecliptic_frame))
        log.debug("skyfield ephemeris loaded: %s", path)

    @property
    def path(self) -> Path:
        return self._path

    def _t(self, jd_ut: float):
        return self._ts.ut1_jd(jd_ut)

    def sun_ecliptic_longitude_deg(self, jd_ut: float) -> float:
        """Apparent geocentric solar longitude (degrees, [0, 360))."""
        obs = self._earth.at(self._t(jd_ut)).observe(self._sun).apparent()
        _lat, lon, _dist = obs.frame_latlon(self._frame)
        return float(lon.degrees % 360.0)

    def new_moons_between(self, start_jd: float, end_jd: float) -> List[float]:
        """New-moon instants (Julian day, UT) in [start_jd, end_jd)."""
        t0 = self._t(start_jd)
        t1 = self._t(end_jd)
        times, phases = almanac.find_discrete(t0, t1, almanac.moon_phases(self._eph))

        out: List[float] = []
        for t, phase in zip(times, phases):
            if int(phase) == 0:
                out.append(float(t.ut1))
        return out

    def coverage_jd(self) -> Tuple[float, float]:
        """(start, end) Julian days (TT) covered by the loaded SPK segments."""
        segs = self._eph.spk.segments
        return min(s.start_jd for s in segs), max(s.end_jd for s in segs)
