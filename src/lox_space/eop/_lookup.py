"""JIT-compatible EOP interpolation.

Only JAX primitives are used (``jnp.searchsorted``, indexing,
``jnp.where``), so the functions work under ``jax.jit`` and ``jax.vmap``.
The extrapolation mode is resolved at trace time; ``ERROR`` behaves like
``HOLD`` here and is enforced by :class:`~lox_space.eop.EOPProvider`.
"""

from __future__ import annotations

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from lox_space.eop._types import EOPData, EOPExtrapolation


def _interpolate(
    eop: EOPData,
    mjd: Array,
    values: Array,
    extrapolation: EOPExtrapolation = EOPExtrapolation.HOLD,
) -> Array:
    n = eop.mjd.shape[0]
    idx = jnp.searchsorted(eop.mjd, mjd, side="right")
    lo = jnp.clip(idx - 1, 0, n - 1)
    hi = jnp.clip(idx, 0, n - 1)

    mjd_lo = eop.mjd[lo]
    dmjd = eop.mjd[hi] - mjd_lo
    frac = jnp.where(dmjd > 0.0, (mjd - mjd_lo) / dmjd, 0.0)
    frac = jnp.clip(frac, 0.0, 1.0)
    interpolated = values[lo] + frac * (values[hi] - values[lo])

    if extrapolation == EOPExtrapolation.ZERO:
        in_range = (mjd >= eop.mjd_min) & (mjd <= eop.mjd_max)
        return jnp.where(in_range, interpolated, 0.0)
    return interpolated


def in_range(eop: EOPData, mjd: ArrayLike) -> Array:
    """Whether *mjd* lies within the tabulated span."""
    mjd = jnp.asarray(mjd, dtype=eop.mjd.dtype)
    return (mjd >= eop.mjd_min) & (mjd <= eop.mjd_max)


def get_ut1_utc(
    eop: EOPData,
    mjd: ArrayLike,
    extrapolation: EOPExtrapolation = EOPExtrapolation.HOLD,
) -> Array:
    """UT1-UTC [s] at the UTC MJD *mjd*.

    Examples:
        ```python
        from lox_space.eop import static_eop, get_ut1_utc
        get_ut1_utc(static_eop(ut1_utc=0.1), 59569.0)  # 0.1
        ```
    """
    mjd = jnp.asarray(mjd, dtype=eop.mjd.dtype)
    return _interpolate(eop, mjd, eop.ut1_utc, extrapolation)


def get_pm(
    eop: EOPData,
    mjd: ArrayLike,
    extrapolation: EOPExtrapolation = EOPExtrapolation.HOLD,
) -> tuple[Array, Array]:
    """Polar motion ``(x_p, y_p)`` [rad] at *mjd*."""
    mjd = jnp.asarray(mjd, dtype=eop.mjd.dtype)
    return (
        _interpolate(eop, mjd, eop.pm_x, extrapolation),
        _interpolate(eop, mjd, eop.pm_y, extrapolation),
    )


def get_dxdy(
    eop: EOPData,
    mjd: ArrayLike,
    extrapolation: EOPExtrapolation = EOPExtrapolation.HOLD,
) -> tuple[Array, Array]:
    """Celestial pole offsets ``(dX, dY)`` [rad] at *mjd*.

    Entries stored as NaN (no published value) yield NaN.
    """
    mjd = jnp.asarray(mjd, dtype=eop.mjd.dtype)
    return (
        _interpolate(eop, mjd, eop.dX, extrapolation),
        _interpolate(eop, mjd, eop.dY, extrapolation),
    )


def get_dpsi_deps(
    eop: EOPData,
    mjd: ArrayLike,
    extrapolation: EOPExtrapolation = EOPExtrapolation.HOLD,
) -> tuple[Array, Array]:
    """IAU 1980 nutation corrections ``(dpsi, deps)`` [rad] at *mjd*."""
    mjd = jnp.asarray(mjd, dtype=eop.mjd.dtype)
    return (
        _interpolate(eop, mjd, eop.dpsi, extrapolation),
        _interpolate(eop, mjd, eop.deps, extrapolation),
    )


def get_lod(
    eop: EOPData,
    mjd: ArrayLike,
    extrapolation: EOPExtrapolation = EOPExtrapolation.HOLD,
) -> Array:
    """Excess length of day [s] at *mjd*."""
    mjd = jnp.asarray(mjd, dtype=eop.mjd.dtype)
    return _interpolate(eop, mjd, eop.lod, extrapolation)


def get_eop(
    eop: EOPData,
    mjd: ArrayLike,
    extrapolation: EOPExtrapolation = EOPExtrapolation.HOLD,
) -> tuple[Array, Array, Array, Array, Array, Array]:
    """All of ``(pm_x, pm_y, ut1_utc, lod, dX, dY)`` at *mjd*."""
    mjd = jnp.asarray(mjd, dtype=eop.mjd.dtype)
    pm_x, pm_y = get_pm(eop, mjd, extrapolation)
    dx, dy = get_dxdy(eop, mjd, extrapolation)
    return (
        pm_x,
        pm_y,
        _interpolate(eop, mjd, eop.ut1_utc, extrapolation),
        _interpolate(eop, mjd, eop.lod, extrapolation),
        dx,
        dy,
    )
