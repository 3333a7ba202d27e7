"""Fundamental arguments of the nutation theories.

The IERS Conventions 2003 expressions (Delaunay arguments plus planetary
mean longitudes and the general precession) drive the CIO locator and the
equation-of-the-equinoxes complementary terms.  The IAU 1980 theory uses
its own, older Delaunay polynomials; see :func:`delaunay_iau1980`.

All functions take TDB (or TT) Julian centuries since J2000.0 and are
traceable by ``jax.jit``.

Uses routines and computations derived from software provided by SOFA
under license. Does not itself constitute software provided by and/or
endorsed by SOFA.
"""

from __future__ import annotations

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from lox_space.config import get_dtype

DJ00: float = 2451545.0
"""Julian Date of J2000.0."""

DJC: float = 36525.0
"""Days per Julian century."""

DAS2R: float = 4.848136811095359935899141e-6
"""Arcseconds to radians."""

D2PI: float = 6.283185307179586476925287
"""2*pi."""

TURNAS: float = 1296000.0
"""Arcseconds in a full circle."""


def centuries(date1: ArrayLike, date2: ArrayLike) -> Array:
    """Julian centuries since J2000.0 from a two-part Julian Date."""
    return ((jnp.asarray(date1, dtype=get_dtype()) - DJ00) + date2) / DJC


def anp(a: ArrayLike) -> Array:
    """Normalize an angle into ``[0, 2pi)``."""
    return jnp.mod(a, D2PI)


def anpm(a: ArrayLike) -> Array:
    """Normalize an angle into ``[-pi, pi)``."""
    w = jnp.fmod(a, D2PI)
    return jnp.where(jnp.abs(w) >= D2PI / 2.0, w - jnp.copysign(D2PI, a), w)


# ---------------------------------------------------------------------------
# IERS Conventions 2003
# ---------------------------------------------------------------------------


def fal03(t: ArrayLike) -> Array:
    """Mean anomaly of the Moon, l [rad]."""
    return (
        jnp.fmod(
            485868.249036
            + t * (1717915923.2178 + t * (31.8792 + t * (0.051635 + t * (-0.00024470)))),
            TURNAS,
        )
        * DAS2R
    )


def falp03(t: ArrayLike) -> Array:
    """Mean anomaly of the Sun, l' [rad]."""
    return (
        jnp.fmod(
            1287104.793048
            + t * (129596581.0481 + t * (-0.5532 + t * (0.000136 + t * (-0.00001149)))),
            TURNAS,
        )
        * DAS2R
    )


def faf03(t: ArrayLike) -> Array:
    """Mean longitude of the Moon minus that of the ascending node, F [rad]."""
    return (
        jnp.fmod(
            335779.526232
            + t * (1739527262.8478 + t * (-12.7512 + t * (-0.001037 + t * (0.00000417)))),
            TURNAS,
        )
        * DAS2R
    )


def fad03(t: ArrayLike) -> Array:
    """Mean elongation of the Moon from the Sun, D [rad]."""
    return (
        jnp.fmod(
            1072260.703692
            + t * (1602961601.2090 + t * (-6.3706 + t * (0.006593 + t * (-0.00003169)))),
            TURNAS,
        )
        * DAS2R
    )


def faom03(t: ArrayLike) -> Array:
    """Mean longitude of the Moon's ascending node, Omega [rad]."""
    return (
        jnp.fmod(
            450160.398036 + t * (-6962890.5431 + t * (7.4722 + t * (0.007702 + t * (-0.00005939)))),
            TURNAS,
        )
        * DAS2R
    )


def fave03(t: ArrayLike) -> Array:
    """Mean longitude of Venus [rad]."""
    return jnp.fmod(3.176146697 + 1021.3285546211 * t, D2PI)


def fae03(t: ArrayLike) -> Array:
    """Mean longitude of the Earth [rad]."""
    return jnp.fmod(1.753470314 + 628.3075849991 * t, D2PI)


def fapa03(t: ArrayLike) -> Array:
    """General accumulated precession in longitude [rad]."""
    return (0.024381750 + 0.00000538691 * t) * t


def luni_solar_planetary_args(t: ArrayLike) -> Array:
    """The eight arguments ``(l, l', F, D, Om, L_Ve, L_E, p_A)`` [rad].

    This is the argument vector of the CIO locator and of the equation of
    the equinoxes complementary terms.
    """
    return jnp.stack(
        [fal03(t), falp03(t), faf03(t), fad03(t), faom03(t), fave03(t), fae03(t), fapa03(t)]
    )


# ---------------------------------------------------------------------------
# IAU 2000B (truncated Delaunay arguments)
# ---------------------------------------------------------------------------


def delaunay_iau2000b(t: ArrayLike) -> Array:
    """Linear Delaunay arguments ``(l, l', F, D, Om)`` of the IAU 2000B model [rad]."""
    return jnp.stack(
        [
            jnp.fmod(485868.249036 + 1717915923.2178 * t, TURNAS) * DAS2R,
            jnp.fmod(1287104.79305 + 129596581.0481 * t, TURNAS) * DAS2R,
            jnp.fmod(335779.526232 + 1739527262.8478 * t, TURNAS) * DAS2R,
            jnp.fmod(1072260.70369 + 1602961601.2090 * t, TURNAS) * DAS2R,
            jnp.fmod(450160.398036 - 6962890.5431 * t, TURNAS) * DAS2R,
        ]
    )


# ---------------------------------------------------------------------------
# IAU 1980
# ---------------------------------------------------------------------------


def delaunay_iau1980(t: ArrayLike) -> Array:
    """Delaunay arguments ``(l, l', F, D, Om)`` of the IAU 1980 theory [rad].

    Each polynomial is split into an arcsecond part and a whole-revolution
    part to keep precision over long spans.
    """
    el = (485866.733 + (715922.633 + (31.310 + 0.064 * t) * t) * t) * DAS2R + jnp.fmod(1325.0 * t, 1.0) * D2PI
    elp = (1287099.804 + (1292581.224 + (-0.577 - 0.012 * t) * t) * t) * DAS2R + jnp.fmod(99.0 * t, 1.0) * D2PI
    f = (335778.877 + (295263.137 + (-13.257 + 0.011 * t) * t) * t) * DAS2R + jnp.fmod(1342.0 * t, 1.0) * D2PI
    d = (1072261.307 + (1105601.328 + (-6.891 + 0.019 * t) * t) * t) * DAS2R + jnp.fmod(1236.0 * t, 1.0) * D2PI
    om = (450160.280 + (-482890.539 + (7.455 + 0.008 * t) * t) * t) * DAS2R + jnp.fmod(-5.0 * t, 1.0) * D2PI
    return jnp.stack([anpm(el), anpm(elp), anpm(f), anpm(d), anpm(om)])
