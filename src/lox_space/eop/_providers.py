"""EOP factories and the :class:`EOPProvider` supplier.

- :func:`static_eop`: constant values over an MJD span.
- :func:`zero_eop`: all-zero values, equivalent to ignoring Earth
  orientation corrections.
- :func:`eop_from_arrays`: daily columns supplied by the caller, e.g. from
  an IERS ``finals2000A`` file parsed elsewhere.
- :class:`EOPProvider`: binds an ``EOPData`` table to an extrapolation mode
  and answers the questions the time and frame layers ask (UT1-TAI, polar
  motion, celestial pole corrections).
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from typing import TYPE_CHECKING

import jax.numpy as jnp

from lox_space.config import get_dtype
from lox_space.eop._lookup import get_dpsi_deps, get_dxdy, get_lod, get_pm, get_ut1_utc, in_range
from lox_space.eop._types import EOPData, EOPExtrapolation
from lox_space.errors import EopUnavailable
from lox_space.time import leap_seconds
from lox_space.time.deltas import TimeDelta
from lox_space.time.julian_dates import Epoch, Unit

if TYPE_CHECKING:
    from lox_space.frames.iers import ReferenceSystem
    from lox_space.time.time import Time

logger = logging.getLogger(__name__)


def static_eop(
    pm_x: float = 0.0,
    pm_y: float = 0.0,
    ut1_utc: float = 0.0,
    dX: float = 0.0,
    dY: float = 0.0,
    dpsi: float = 0.0,
    deps: float = 0.0,
    lod: float = 0.0,
    mjd_min: float = 0.0,
    mjd_max: float = 99999.0,
) -> EOPData:
    """Create an EOPData with constant values across ``[mjd_min, mjd_max]``.

    Args:
        pm_x: Polar motion x-component [rad]. Default: 0.0.
        pm_y: Polar motion y-component [rad]. Default: 0.0.
        ut1_utc: UT1-UTC [s]. Default: 0.0.
        dX: CIP offset X [rad]. Default: 0.0.
        dY: CIP offset Y [rad]. Default: 0.0.
        dpsi: IAU 1980 nutation correction in longitude [rad]. Default: 0.0.
        deps: IAU 1980 nutation correction in obliquity [rad]. Default: 0.0.
        lod: Excess length of day [s]. Default: 0.0.
        mjd_min: Start of the valid MJD range. Default: 0.0.
        mjd_max: End of the valid MJD range. Default: 99999.0.

    Returns:
        EOPData with constant values.

    Examples:
        ```python
        from lox_space.eop import static_eop, get_ut1_utc
        eop = static_eop(ut1_utc=0.1)
        val = get_ut1_utc(eop, 59569.0)  # ~0.1
        ```
    """
    return eop_from_arrays(
        [mjd_min, mjd_max],
        pm_x=[pm_x, pm_x],
        pm_y=[pm_y, pm_y],
        ut1_utc=[ut1_utc, ut1_utc],
        dX=[dX, dX],
        dY=[dY, dY],
        dpsi=[dpsi, dpsi],
        deps=[deps, deps],
        lod=[lod, lod],
    )


def zero_eop() -> EOPData:
    """Create an EOPData with all-zero values."""
    return static_eop()


def eop_from_arrays(
    mjd: Sequence[float],
    pm_x: Sequence[float],
    pm_y: Sequence[float],
    ut1_utc: Sequence[float],
    dX: Sequence[float] | None = None,
    dY: Sequence[float] | None = None,
    dpsi: Sequence[float] | None = None,
    deps: Sequence[float] | None = None,
    lod: Sequence[float] | None = None,
) -> EOPData:
    """Assemble an EOPData from daily columns.

    Optional columns default to zeros.  NaN marks a missing value and is
    treated as zero by :class:`EOPProvider`.

    Args:
        mjd: Strictly increasing UTC MJDs.
        pm_x: Polar motion x [rad].
        pm_y: Polar motion y [rad].
        ut1_utc: UT1-UTC [s].
        dX: CIP offset X [rad].
        dY: CIP offset Y [rad].
        dpsi: Nutation correction in longitude [rad].
        deps: Nutation correction in obliquity [rad].
        lod: Excess length of day [s].

    Returns:
        EOPData ready for lookups.

    Raises:
        ValueError: If the columns are empty, differ in length, or the MJDs
            are not strictly increasing.
    """
    n = len(mjd)
    if n == 0:
        raise ValueError("EOP data must contain at least one epoch")
    columns = {"pm_x": pm_x, "pm_y": pm_y, "ut1_utc": ut1_utc}
    for name, column in (("dX", dX), ("dY", dY), ("dpsi", dpsi), ("deps", deps), ("lod", lod)):
        columns[name] = [0.0] * n if column is None else column
    for name, column in columns.items():
        if len(column) != n:
            raise ValueError(f"EOP column '{name}' has {len(column)} entries, expected {n}")
    if any(b <= a for a, b in zip(mjd[:-1], mjd[1:])):
        raise ValueError("EOP MJDs must be strictly increasing")

    dtype = get_dtype()
    arrays = {name: jnp.array(column, dtype=dtype) for name, column in columns.items()}
    return EOPData(
        mjd=jnp.array(mjd, dtype=dtype),
        mjd_min=jnp.array(mjd[0], dtype=dtype),
        mjd_max=jnp.array(mjd[-1], dtype=dtype),
        **arrays,
    )


def _finite(value) -> float:
    value = float(value)
    return 0.0 if math.isnan(value) else value


class EOPProvider:
    """Earth orientation supplier backed by an :class:`EOPData` table.

    All lookups are keyed by the UTC MJD.  Outside the tabulated span the
    behaviour follows *extrapolation*: ``HOLD`` clamps and logs a warning,
    ``ZERO`` returns zeros, ``ERROR`` raises.

    Args:
        data: EOP table. Default: :func:`zero_eop`.
        extrapolation: Out-of-range behaviour. Default: ``HOLD``.

    Examples:
        ```python
        provider = EOPProvider(static_eop(ut1_utc=-0.1), EOPExtrapolation.ERROR)
        Time("TAI", 2020, 1, 1).to_scale("UT1", provider)
        ```
    """

    def __init__(
        self,
        data: EOPData | None = None,
        extrapolation: EOPExtrapolation | str = EOPExtrapolation.HOLD,
    ) -> None:
        self.data = zero_eop() if data is None else data
        self.extrapolation = EOPExtrapolation(extrapolation)

    def __repr__(self) -> str:
        return (
            f"EOPProvider(mjd=[{float(self.data.mjd_min)}, {float(self.data.mjd_max)}], "
            f"extrapolation={self.extrapolation.name})"
        )

    @property
    def mjd_range(self) -> tuple[float, float]:
        return float(self.data.mjd_min), float(self.data.mjd_max)

    def _check(self, name: str, mjd: float) -> None:
        if bool(in_range(self.data, mjd)):
            return
        lo, hi = self.mjd_range
        if self.extrapolation is EOPExtrapolation.ERROR:
            raise EopUnavailable(
                f"{name} is only available between MJD {lo} and {hi}; "
                f"value for MJD {mjd} was extrapolated"
            )
        if self.extrapolation is EOPExtrapolation.HOLD:
            logger.warning(
                "%s requested at MJD %.5f outside the EOP range [%.1f, %.1f]; holding the boundary value",
                name,
                mjd,
                lo,
                hi,
            )

    # -----------------------------------------------------------------------
    # Lookups by UTC MJD
    # -----------------------------------------------------------------------

    def delta_ut1_utc(self, mjd: float) -> float:
        """UT1-UTC [s] at UTC MJD *mjd*.

        Raises:
            EopUnavailable: Out of range in ``ERROR`` mode.
        """
        self._check("UT1-UTC", mjd)
        return _finite(get_ut1_utc(self.data, mjd, self.extrapolation))

    def polar_motion_at(self, mjd: float) -> tuple[float, float]:
        self._check("polar motion", mjd)
        x, y = get_pm(self.data, mjd, self.extrapolation)
        return _finite(x), _finite(y)

    def celestial_pole_offsets_at(self, mjd: float) -> tuple[float, float]:
        self._check("celestial pole offsets", mjd)
        dx, dy = get_dxdy(self.data, mjd, self.extrapolation)
        return _finite(dx), _finite(dy)

    def nutation_corrections_at(self, mjd: float) -> tuple[float, float]:
        self._check("nutation corrections", mjd)
        dpsi, deps = get_dpsi_deps(self.data, mjd, self.extrapolation)
        return _finite(dpsi), _finite(deps)

    def lod_at(self, mjd: float) -> float:
        self._check("length of day", mjd)
        return _finite(get_lod(self.data, mjd, self.extrapolation))

    # -----------------------------------------------------------------------
    # Time-scale offsets
    # -----------------------------------------------------------------------

    def delta_ut1_tai(self, tai: TimeDelta) -> TimeDelta:
        """UT1-TAI at the TAI instant *tai* (seconds since J2000).

        Raises:
            EopUnavailable: Out of range in ``ERROR`` mode.
        """
        utc = tai - leap_seconds.delta_tai_utc(tai)
        mjd = utc.julian_date(Epoch.MODIFIED_JULIAN_DATE, Unit.DAYS)
        return TimeDelta.from_seconds_f64(self.delta_ut1_utc(mjd)) + (utc - tai)

    def delta_tai_ut1(self, ut1: TimeDelta) -> TimeDelta:
        """TAI-UT1 at the UT1 instant *ut1*, by fixed-point iteration."""
        value = self.delta_ut1_tai(ut1)
        for _ in range(2):
            value = self.delta_ut1_tai(ut1 - value)
        return -value

    # -----------------------------------------------------------------------
    # Lookups by Time
    # -----------------------------------------------------------------------

    def utc_mjd(self, time: Time) -> float:
        """UTC MJD of *time*, which may be in any continuous scale."""
        tai = time.to_scale("TAI", self).to_delta()
        utc = tai - leap_seconds.delta_tai_utc(tai)
        return utc.julian_date(Epoch.MODIFIED_JULIAN_DATE, Unit.DAYS)

    def polar_motion(self, time: Time) -> tuple[float, float]:
        """Polar motion ``(x_p, y_p)`` [rad] at *time*."""
        return self.polar_motion_at(self.utc_mjd(time))

    def corrections(self, time: Time, system: ReferenceSystem) -> tuple[float, float]:
        """Celestial pole corrections for *system* at *time*.

        IERS 1996 uses the IAU 1980 nutation corrections ``(dpsi, deps)``;
        the CIO-based IERS 2003 and 2010 conventions use ``(dX, dY)``.

        Returns:
            tuple[float, float]: The two corrections [rad].
        """
        from lox_space.frames.iers import ReferenceSystem

        mjd = self.utc_mjd(time)
        if system is ReferenceSystem.IERS1996:
            return self.nutation_corrections_at(mjd)
        return self.celestial_pole_offsets_at(mjd)
