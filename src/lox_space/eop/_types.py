"""Type definitions for Earth Orientation Parameters (EOP).

- :class:`EOPData`: immutable container of sorted daily EOP columns,
  interpolated with ``jnp.searchsorted``.
- :class:`EOPExtrapolation`: behaviour for queries outside the tabulated
  range.

``EOPData`` is a :class:`~typing.NamedTuple` and therefore a JAX pytree, so
the lookup functions in :mod:`lox_space.eop._lookup` can be traced by
``jax.jit`` and ``jax.vmap``.
"""

from __future__ import annotations

import enum
from typing import NamedTuple

from jax import Array


class EOPData(NamedTuple):
    """Earth Orientation Parameter columns indexed by UTC MJD.

    Attributes:
        mjd: Sorted Modified Julian Dates (UTC), shape ``(N,)``.
        pm_x: Polar motion x-component [rad], shape ``(N,)``.
        pm_y: Polar motion y-component [rad], shape ``(N,)``.
        ut1_utc: UT1-UTC [s], shape ``(N,)``.
        dX: CIP offset X w.r.t. IAU 2006/2000A [rad], shape ``(N,)``.
        dY: CIP offset Y w.r.t. IAU 2006/2000A [rad], shape ``(N,)``.
        dpsi: Nutation-in-longitude correction w.r.t. IAU 1980 [rad].
        deps: Nutation-in-obliquity correction w.r.t. IAU 1980 [rad].
        lod: Excess length of day [s], shape ``(N,)``.
        mjd_min: First tabulated MJD.
        mjd_max: Last tabulated MJD.
    """

    mjd: Array
    pm_x: Array
    pm_y: Array
    ut1_utc: Array
    dX: Array
    dY: Array
    dpsi: Array
    deps: Array
    lod: Array
    mjd_min: Array
    mjd_max: Array


class EOPExtrapolation(enum.Enum):
    """Extrapolation mode for EOP queries outside the data range.

    Attributes:
        HOLD: Clamp to the nearest boundary value and log a warning.
        ZERO: Return zero for out-of-range queries.
        ERROR: Raise :class:`~lox_space.errors.EopUnavailable`.
    """

    HOLD = "hold"
    ZERO = "zero"
    ERROR = "error"
