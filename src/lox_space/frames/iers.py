"""IERS reference systems and the Earth orientation models behind them.

Each :class:`ReferenceSystem` bundles one set of models:

| System       | Precession / bias   | Nutation       | Sidereal time  |
|--------------|---------------------|----------------|----------------|
| IERS1996     | IAU 1976 + bias     | IAU 1980       | GMST82 + EE94  |
| IERS2003/A   | IAU 2000 + bias     | IAU 2000A      | GMST00 + EE00  |
| IERS2003/B   | IAU 2000 + bias     | IAU 2000B      | GMST00 + EE00  |
| IERS2010     | IAU 2006 (F-W)      | IAU 2006/2000A | GMST06 + EE06  |

The model functions follow the SOFA calling convention: dates are two-part
Julian Dates ``(date1, date2)`` whose sum is the Julian Date, and angles are
returned in radians.  Everything except the IAU 2000A nutation series is a
pure ``jax.numpy`` computation; the IAU 2000A series (1365 terms) is
evaluated by ERFA.

Uses routines and computations derived from software provided by SOFA
under license. Does not itself constitute software provided by and/or
endorsed by SOFA.
"""

from __future__ import annotations

import enum
import logging
from typing import NamedTuple

import erfa
import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from lox_space.config import get_dtype
from lox_space.errors import InvalidInput
from lox_space.frames import _nutation_data as data
from lox_space.frames.fundamental import (
    D2PI,
    DAS2R,
    DJ00,
    DJC,
    anp,
    anpm,
    centuries,
    delaunay_iau1980,
    delaunay_iau2000b,
    luni_solar_planetary_args,
)
from lox_space.frames.rotations import Rx, Ry, Rz

logger = logging.getLogger(__name__)

DateLike = tuple[ArrayLike, ArrayLike]
"""A two-part Julian Date."""

Corrections = tuple[float, float]
"""Celestial pole corrections [rad]: ``(dpsi, deps)`` or ``(dX, dY)``."""

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

EPS0: float = 84381.448 * DAS2R
"""J2000.0 obliquity of the IAU 1980 / IAU 2000 precession models."""

DPSI_BIAS: float = -0.041775 * DAS2R
"""Frame bias in longitude."""

DEPS_BIAS: float = -0.0068192 * DAS2R
"""Frame bias in obliquity."""

DRA0: float = -0.0146 * DAS2R
"""ICRS right ascension of the J2000.0 mean equinox."""

PRECOR: float = -0.29965 * DAS2R
"""IAU 2000 precession-rate correction in longitude [rad/century]."""

OBLCOR: float = -0.02524 * DAS2R
"""IAU 2000 precession-rate correction in obliquity [rad/century]."""

DS2R: float = 7.272205216643039903848712e-5
"""Seconds of time to radians."""


class Nutation(NamedTuple):
    """Nutation in longitude and obliquity [rad]."""

    dpsi: Array
    deps: Array

    def corrected(self, corrections: Corrections) -> Nutation:
        return Nutation(self.dpsi + corrections[0], self.deps + corrections[1])


def _table(rows) -> Array:
    return jnp.array(rows, dtype=get_dtype())


# ---------------------------------------------------------------------------
# Frame bias and precession
# ---------------------------------------------------------------------------


def frame_bias() -> Array:
    """ICRS to J2000.0 mean equator and equinox frame bias matrix (IAU 2000)."""
    return Rx(-DEPS_BIAS) @ Ry(DPSI_BIAS * jnp.sin(EPS0)) @ Rz(DRA0)


def precession_corrections_iau2000(date1: ArrayLike, date2: ArrayLike) -> tuple[Array, Array]:
    """IAU 2000 precession-rate adjustments ``(dpsipr, depspr)`` [rad].

    Args:
        date1: TT as 2-part Julian Date (part 1).
        date2: TT as 2-part Julian Date (part 2).
    """
    t = centuries(date1, date2)
    return PRECOR * t, OBLCOR * t


def precession_matrix_iau1976(date1: ArrayLike, date2: ArrayLike) -> Array:
    """IAU 1976 precession matrix from J2000.0 to the date (TT)."""
    t = centuries(date1, date2)
    zeta = (2306.2181 + (0.30188 + 0.017998 * t) * t) * t * DAS2R
    z = (2306.2181 + (1.09468 + 0.018203 * t) * t) * t * DAS2R
    theta = (2004.3109 + (-0.42665 - 0.041833 * t) * t) * t * DAS2R
    return Rz(-z) @ Ry(theta) @ Rz(-zeta)


def precession_matrix_iau2000(date1: ArrayLike, date2: ArrayLike) -> Array:
    """IAU 2000 precession matrix (Lieske 1977 with IAU 2000 rate corrections)."""
    t = centuries(date1, date2)
    dpsipr, depspr = precession_corrections_iau2000(date1, date2)
    psia = (5038.7784 + (-1.07259 - 0.001147 * t) * t) * t * DAS2R + dpsipr
    oma = EPS0 + ((0.05127 - 0.007726 * t) * t) * t * DAS2R + depspr
    chia = (10.5526 + (-2.38064 - 0.001125 * t) * t) * t * DAS2R
    return Rz(chia) @ Rx(-oma) @ Rz(-psia) @ Rx(EPS0)


def fukushima_williams_iau2006(date1: ArrayLike, date2: ArrayLike) -> tuple[Array, Array, Array, Array]:
    """Precession angles, IAU 2006, Fukushima-Williams 4-angle formulation.

    Args:
        date1: TT as 2-part Julian Date (part 1).
        date2: TT as 2-part Julian Date (part 2).

    Returns:
        Tuple of (gamb, phib, psib, epsa) in radians.
    """
    t = centuries(date1, date2)
    gamb = (
        -0.052928 + t * (10.556378 + t * (0.4932044 + t * (-0.00031238 + t * (-0.000002788 + t * 0.0000000260))))
    ) * DAS2R
    phib = (
        84381.412819 + t * (-46.811016 + t * (0.0511268 + t * (0.00053289 + t * (-0.000000440 + t * -0.0000000176))))
    ) * DAS2R
    psib = (
        -0.041775 + t * (5038.481484 + t * (1.5584175 + t * (-0.00018522 + t * (-0.000026452 + t * -0.0000000148))))
    ) * DAS2R
    return gamb, phib, psib, mean_obliquity_iau2006(date1, date2)


def fw2m(gamb: ArrayLike, phib: ArrayLike, psi: ArrayLike, eps: ArrayLike) -> Array:
    """Fukushima-Williams angles to rotation matrix.

    ``NxPxB = R_1(-eps) . R_3(-psi) . R_1(phib) . R_3(gamb)``
    """
    return Rx(-eps) @ Rz(-psi) @ Rx(phib) @ Rz(gamb)


# ---------------------------------------------------------------------------
# Mean obliquity
# ---------------------------------------------------------------------------


def mean_obliquity_iau1980(date1: ArrayLike, date2: ArrayLike) -> Array:
    """Mean obliquity of the ecliptic, IAU 1980 model (TT)."""
    t = centuries(date1, date2)
    return DAS2R * (84381.448 + (-46.8150 + (-0.00059 + 0.001813 * t) * t) * t)


def mean_obliquity_iau2006(date1: ArrayLike, date2: ArrayLike) -> Array:
    """Mean obliquity of the ecliptic, IAU 2006 precession (TT)."""
    t = centuries(date1, date2)
    eps0 = 84381.406 + t * (
        -46.836769 + t * (-0.0001831 + t * (0.00200340 + t * (-0.000000576 + t * (-0.0000000434))))
    )
    return eps0 * DAS2R


# ---------------------------------------------------------------------------
# Nutation
# ---------------------------------------------------------------------------


def nutation_iau1980(date1: ArrayLike, date2: ArrayLike) -> Nutation:
    """Nutation, IAU 1980 model (TDB).

    Returns:
        Nutation: ``(dpsi, deps)`` [rad].
    """
    t = centuries(date1, date2)
    coeffs = _table(data.IAU1980)
    args = coeffs[:, :5] @ delaunay_iau1980(t)
    dp = jnp.sum((coeffs[:, 5] + coeffs[:, 6] * t) * jnp.sin(args))
    de = jnp.sum((coeffs[:, 7] + coeffs[:, 8] * t) * jnp.cos(args))
    u2r = DAS2R / 1e4
    return Nutation(dp * u2r, de * u2r)


def nutation_iau2000a(date1: ArrayLike, date2: ArrayLike) -> Nutation:
    """Nutation, IAU 2000A model (MHB2000 luni-solar and planetary terms).

    The full series is evaluated by ``erfa.nut00a``; the inputs must be
    concrete values, so this function cannot be traced by ``jax.jit``.
    """
    dpsi, deps = erfa.nut00a(float(date1), float(date2))
    dtype = get_dtype()
    return Nutation(jnp.asarray(dpsi, dtype=dtype), jnp.asarray(deps, dtype=dtype))


def nutation_iau2000b(date1: ArrayLike, date2: ArrayLike) -> Nutation:
    """Nutation, IAU 2000B model: the 77 largest luni-solar terms plus fixed planetary offsets."""
    t = centuries(date1, date2)
    coeffs = _table(data.IAU2000B)
    args = coeffs[:, :5] @ delaunay_iau2000b(t)
    sarg, carg = jnp.sin(args), jnp.cos(args)
    dp = jnp.sum((coeffs[:, 5] + coeffs[:, 6] * t) * sarg + coeffs[:, 7] * carg)
    de = jnp.sum((coeffs[:, 8] + coeffs[:, 9] * t) * carg + coeffs[:, 10] * sarg)
    u2r = DAS2R / 1e7
    dpplan = -0.135e-3 * DAS2R
    deplan = 0.388e-3 * DAS2R
    return Nutation(dp * u2r + dpplan, de * u2r + deplan)


def nutation_iau2006a(date1: ArrayLike, date2: ArrayLike) -> Nutation:
    """Nutation, IAU 2000A adjusted for consistency with the IAU 2006 precession."""
    t = centuries(date1, date2)
    fj2 = -2.7774e-6 * t
    dp, de = nutation_iau2000a(date1, date2)
    return Nutation(dp + dp * (0.4697e-6 + fj2), de + de * fj2)


def nutation_matrix(dpsi: ArrayLike, deps: ArrayLike, epsa: ArrayLike) -> Array:
    """Nutation matrix from the nutation components and the mean obliquity."""
    return Rx(-(epsa + deps)) @ Rz(-dpsi) @ Rx(epsa)


# ---------------------------------------------------------------------------
# CIP and CIO
# ---------------------------------------------------------------------------


def _series(rows, args: Array) -> Array:
    """Sum ``s*sin(a) + c*cos(a)`` over rows of ``((multipliers...), s, c)``."""
    nfa = _table([row[0] for row in rows])
    sc = _table([row[1:] for row in rows])
    arg = nfa @ args
    return jnp.sum(sc[:, 0] * jnp.sin(arg) + sc[:, 1] * jnp.cos(arg))


def _s06_series(nfa, sc, fa: Array) -> Array:
    arg = _table(nfa) @ fa
    sc = _table(sc)
    return jnp.sum(sc[:, 0] * jnp.sin(arg) + sc[:, 1] * jnp.cos(arg))


def cio_locator_iau2006(date1: ArrayLike, date2: ArrayLike, x: ArrayLike, y: ArrayLike) -> Array:
    """CIO locator ``s``, compatible with IAU 2006/2000A precession-nutation.

    The series is for ``s + XY/2``; ``XY/2`` is subtracted before returning.

    Args:
        date1: TT as 2-part Julian Date (part 1).
        date2: TT as 2-part Julian Date (part 2).
        x: CIP x coordinate.
        y: CIP y coordinate.

    Returns:
        CIO locator s in radians.
    """
    t = centuries(date1, date2)
    fa = luni_solar_planetary_args(t)
    sp = data.S06_POLYNOMIAL
    w0 = sp[0] + _s06_series(data.S06_S0_NFA, data.S06_S0_SC, fa)
    w1 = sp[1] + _s06_series(data.S06_S1_NFA, data.S06_S1_SC, fa)
    w2 = sp[2] + _s06_series(data.S06_S2_NFA, data.S06_S2_SC, fa)
    w3 = sp[3] + _s06_series(data.S06_S3_NFA, data.S06_S3_SC, fa)
    w4 = sp[4] + _s06_series(data.S06_S4_NFA, data.S06_S4_SC, fa)
    w5 = sp[5]
    return (w0 + (w1 + (w2 + (w3 + (w4 + w5 * t) * t) * t) * t) * t) * DAS2R - x * y / 2.0


def cip_coordinates_iau2006(date1: ArrayLike, date2: ArrayLike) -> tuple[Array, Array, Array]:
    """CIP ``X``, ``Y`` and CIO locator ``s``, IAU 2006/2000A (TT).

    Returns:
        tuple[Array, Array, Array]: ``(x, y, s)`` [rad].
    """
    gamb, phib, psib, epsa = fukushima_williams_iau2006(date1, date2)
    dpsi, deps = nutation_iau2006a(date1, date2)
    rbpn = fw2m(gamb, phib, psib + dpsi, epsa + deps)
    x, y = rbpn[2, 0], rbpn[2, 1]
    return x, y, cio_locator_iau2006(date1, date2, x, y)


def celestial_to_intermediate(x: ArrayLike, y: ArrayLike, s: ArrayLike) -> Array:
    """Celestial-to-intermediate matrix from the CIP ``X``, ``Y`` and CIO locator ``s``.

    ``Rz(-(e+s)) @ Ry(d) @ Rz(e)`` with ``e = atan2(y, x)`` and
    ``d = atan(sqrt((x^2 + y^2) / (1 - x^2 - y^2)))``.
    """
    r2 = x * x + y * y
    e = jnp.where(r2 > 0.0, jnp.arctan2(y, x), 0.0)
    d = jnp.arctan(jnp.sqrt(r2 / (1.0 - r2)))
    return Rz(-(e + s)) @ Ry(d) @ Rz(e)


# ---------------------------------------------------------------------------
# Earth rotation and sidereal time
# ---------------------------------------------------------------------------


def earth_rotation_angle(date1: ArrayLike, date2: ArrayLike) -> Array:
    """Earth Rotation Angle (IAU 2000 model) in ``[0, 2pi)``.

    Args:
        date1: UT1 as 2-part Julian Date (part 1).
        date2: UT1 as 2-part Julian Date (part 2).
    """
    t = (date1 - DJ00) + date2
    f = jnp.fmod(date1, 1.0) + jnp.fmod(date2, 1.0)
    return anp(D2PI * (f + 0.7790572732640 + 0.00273781191135448 * t))


def gmst_iau1982(date1: ArrayLike, date2: ArrayLike) -> Array:
    """Greenwich mean sidereal time, IAU 1982 model (UT1)."""
    a = 24110.54841 - 86400.0 / 2.0
    b = 8640184.812866
    c = 0.093104
    d = -6.2e-6
    t = centuries(date1, date2)
    f = 86400.0 * (jnp.fmod(date1, 1.0) + jnp.fmod(date2, 1.0))
    return anp(DS2R * ((a + (b + (c + d * t) * t) * t) + f))


def gmst_iau2000(ut1: DateLike, tt: DateLike) -> Array:
    """Greenwich mean sidereal time consistent with IAU 2000 resolutions."""
    t = centuries(*tt)
    poly = 0.014506 + (4612.15739966 + (1.39667721 + (-0.00009344 + 0.00001882 * t) * t) * t) * t
    return anp(earth_rotation_angle(*ut1) + poly * DAS2R)


def gmst_iau2006(ut1: DateLike, tt: DateLike) -> Array:
    """Greenwich mean sidereal time consistent with IAU 2006 precession."""
    t = centuries(*tt)
    poly = 0.014506 + (
        4612.156534 + (1.3915817 + (-0.00000044 + (-0.000029956 + -0.0000000368 * t) * t) * t) * t
    ) * t
    return anp(earth_rotation_angle(*ut1) + poly * DAS2R)


def equation_of_the_equinoxes_iau1994(date1: ArrayLike, date2: ArrayLike) -> Array:
    """Equation of the equinoxes, IAU 1994 model (TDB)."""
    t = centuries(date1, date2)
    om = anpm((450160.280 + (-482890.539 + (7.455 + 0.008 * t) * t) * t) * DAS2R + jnp.fmod(-5.0 * t, 1.0) * D2PI)
    dpsi, _ = nutation_iau1980(date1, date2)
    eps0 = mean_obliquity_iau1980(date1, date2)
    return dpsi * jnp.cos(eps0) + DAS2R * (0.00264 * jnp.sin(om) + 0.000063 * jnp.sin(om + om))


def equation_of_the_equinoxes_complementary_terms(date1: ArrayLike, date2: ArrayLike) -> Array:
    """Complementary terms of the equation of the equinoxes, IAU 2000 (TT)."""
    t = centuries(date1, date2)
    fa = luni_solar_planetary_args(t)
    s0 = _series(data.EE_COMPLEMENTARY_T0, fa)
    s1 = _series(data.EE_COMPLEMENTARY_T1, fa)
    return (s0 + s1 * t) * DAS2R


def equation_of_the_equinoxes_iau2000(tt: DateLike, epsa: ArrayLike, dpsi: ArrayLike) -> Array:
    """Equation of the equinoxes from a mean obliquity and nutation in longitude."""
    return dpsi * jnp.cos(epsa) + equation_of_the_equinoxes_complementary_terms(*tt)


def equation_of_the_equinoxes_iau2000a(date1: ArrayLike, date2: ArrayLike) -> Array:
    """Equation of the equinoxes, IAU 2000A nutation (TT)."""
    _, depspr = precession_corrections_iau2000(date1, date2)
    epsa = mean_obliquity_iau1980(date1, date2) + depspr
    dpsi, _ = nutation_iau2000a(date1, date2)
    return equation_of_the_equinoxes_iau2000((date1, date2), epsa, dpsi)


def equation_of_the_equinoxes_iau2000b(date1: ArrayLike, date2: ArrayLike) -> Array:
    """Equation of the equinoxes, IAU 2000B nutation (TT)."""
    _, depspr = precession_corrections_iau2000(date1, date2)
    epsa = mean_obliquity_iau1980(date1, date2) + depspr
    dpsi, _ = nutation_iau2000b(date1, date2)
    return equation_of_the_equinoxes_iau2000((date1, date2), epsa, dpsi)


def equation_of_the_equinoxes_iau2006a(date1: ArrayLike, date2: ArrayLike) -> Array:
    """Equation of the equinoxes, IAU 2006 precession with IAU 2006/2000A nutation (TT)."""
    epsa = mean_obliquity_iau2006(date1, date2)
    dpsi, _ = nutation_iau2006a(date1, date2)
    return equation_of_the_equinoxes_iau2000((date1, date2), epsa, dpsi)


def gast_iau1994(date1: ArrayLike, date2: ArrayLike) -> Array:
    """Greenwich apparent sidereal time, IAU 1982/94 (UT1)."""
    return anp(gmst_iau1982(date1, date2) + equation_of_the_equinoxes_iau1994(date1, date2))


def gast_iau2000a(ut1: DateLike, tt: DateLike) -> Array:
    return anp(gmst_iau2000(ut1, tt) + equation_of_the_equinoxes_iau2000a(*tt))


def gast_iau2000b(ut1: DateLike, tt: DateLike) -> Array:
    return anp(gmst_iau2000(ut1, tt) + equation_of_the_equinoxes_iau2000b(*tt))


def gast_iau2006a(ut1: DateLike, tt: DateLike) -> Array:
    return anp(gmst_iau2006(ut1, tt) + equation_of_the_equinoxes_iau2006a(*tt))


# ---------------------------------------------------------------------------
# Polar motion
# ---------------------------------------------------------------------------


def tio_locator(date1: ArrayLike, date2: ArrayLike) -> Array:
    """TIO locator ``s'`` (TT), approximated by its secular term ``-47 uas/century``."""
    return -47e-6 * centuries(date1, date2) * DAS2R


def polar_motion_matrix(xp: ArrayLike, yp: ArrayLike, sp: ArrayLike) -> Array:
    """Polar motion matrix ``Rx(-yp) @ Ry(-xp) @ Rz(sp)`` (TIRS to ITRS).

    Args:
        xp: Polar motion x-component [rad].
        yp: Polar motion y-component [rad].
        sp: TIO locator [rad].
    """
    return Rx(-yp) @ Ry(-xp) @ Rz(sp)


# ---------------------------------------------------------------------------
# Reference systems
# ---------------------------------------------------------------------------


class ReferenceSystem(enum.Enum):
    """IERS conventions selecting the precession, nutation and sidereal-time models.

    Examples:
        ```python
        from lox_space.frames.iers import ReferenceSystem
        ReferenceSystem.parse("IERS2003/IAU2000B")  # ReferenceSystem.IERS2003_B
        ```
    """

    IERS1996 = "IERS1996"
    IERS2003_A = "IERS2003/IAU2000A"
    IERS2003_B = "IERS2003/IAU2000B"
    IERS2010 = "IERS2010"

    @classmethod
    def parse(cls, value: ReferenceSystem | str) -> ReferenceSystem:
        """Parse a system name; a bare ``"IERS2003"`` selects the IAU 2000A variant.

        Raises:
            InvalidInput: For an unknown name.
        """
        if isinstance(value, ReferenceSystem):
            return value
        key = value.strip().upper()
        if key == "IERS2003":
            return cls.IERS2003_A
        for system in cls:
            if system.value == key or system.name == key:
                return system
        raise InvalidInput(f"unknown reference system: {value}")

    def id(self) -> int:
        return _IDS[self]

    def __str__(self) -> str:
        return self.value

    # -----------------------------------------------------------------------
    # Models
    # -----------------------------------------------------------------------

    def bias_precession_matrix(self, date1: ArrayLike, date2: ArrayLike) -> Array:
        """Frame bias and precession matrix, ICRF to mean of date (TT)."""
        if self is ReferenceSystem.IERS1996:
            return precession_matrix_iau1976(date1, date2) @ frame_bias()
        if self is ReferenceSystem.IERS2010:
            return fw2m(*fukushima_williams_iau2006(date1, date2))
        return precession_matrix_iau2000(date1, date2) @ frame_bias()

    def mean_obliquity(self, date1: ArrayLike, date2: ArrayLike) -> Array:
        if self is ReferenceSystem.IERS2010:
            return mean_obliquity_iau2006(date1, date2)
        return mean_obliquity_iau1980(date1, date2)

    def nutation(self, date1: ArrayLike, date2: ArrayLike) -> Nutation:
        if self is ReferenceSystem.IERS1996:
            return nutation_iau1980(date1, date2)
        if self is ReferenceSystem.IERS2003_A:
            return nutation_iau2000a(date1, date2)
        if self is ReferenceSystem.IERS2003_B:
            return nutation_iau2000b(date1, date2)
        return nutation_iau2006a(date1, date2)

    def ecliptic_corrections(
        self, corrections: Corrections, nutation: Nutation, epsa: ArrayLike, rpb: Array
    ) -> Corrections:
        """Express celestial pole corrections as ``(ddpsi, ddeps)``.

        IERS 1996 corrections already are nutation corrections.  The
        ``(dX, dY)`` offsets of the later systems are rotated from the
        celestial pole into the ecliptic of date.
        """
        if self is ReferenceSystem.IERS1996:
            return corrections
        rbpn = nutation_matrix(nutation.dpsi, nutation.deps, epsa) @ rpb
        dtype = get_dtype()
        v2 = rbpn @ jnp.array([corrections[0], corrections[1], 0.0], dtype=dtype)
        return v2[0] / jnp.sin(epsa), v2[1]

    def nutation_matrix(self, date1: ArrayLike, date2: ArrayLike, corrections: Corrections | None = None) -> Array:
        """Mean-of-date to true-of-date matrix including pole corrections."""
        epsa = self.mean_obliquity(date1, date2)
        nut = self.nutation(date1, date2)
        if self is not ReferenceSystem.IERS1996 and corrections is not None:
            rpb = self.bias_precession_matrix(date1, date2)
            nut = nut.corrected(self.ecliptic_corrections(corrections, nut, epsa, rpb))
        return nutation_matrix(nut.dpsi, nut.deps, epsa)

    def gmst(self, ut1: DateLike, tt: DateLike) -> Array:
        """Greenwich mean sidereal time [rad]."""
        if self is ReferenceSystem.IERS1996:
            return gmst_iau1982(*ut1)
        if self is ReferenceSystem.IERS2010:
            return gmst_iau2006(ut1, tt)
        return gmst_iau2000(ut1, tt)

    def gast(self, ut1: DateLike, tt: DateLike, corrections: Corrections | None = None) -> Array:
        """Greenwich apparent sidereal time [rad], optionally with pole corrections.

        Args:
            ut1: UT1 as a 2-part Julian Date.
            tt: TT as a 2-part Julian Date.
            corrections: Celestial pole corrections. Default: none.
        """
        if corrections is None or (corrections[0] == 0.0 and corrections[1] == 0.0):
            if self is ReferenceSystem.IERS1996:
                return gast_iau1994(*ut1)
            if self is ReferenceSystem.IERS2003_A:
                return gast_iau2000a(ut1, tt)
            if self is ReferenceSystem.IERS2003_B:
                return gast_iau2000b(ut1, tt)
            return gast_iau2006a(ut1, tt)

        gmst = self.gmst(ut1, tt)
        epsa = self.mean_obliquity(*tt)
        nut = self.nutation(*tt)
        rpb = self.bias_precession_matrix(*tt)
        ecl = self.ecliptic_corrections(corrections, nut, epsa, rpb)
        if self is ReferenceSystem.IERS1996:
            return anp(gmst + equation_of_the_equinoxes_iau1994(*tt) + jnp.cos(epsa) * ecl[0])
        nut = nut.corrected(ecl)
        return anp(gmst + equation_of_the_equinoxes_iau2000(tt, epsa, nut.dpsi))

    def earth_rotation(self, ut1: DateLike, tt: DateLike, corrections: Corrections | None = None) -> Array:
        """True-of-date to pseudo-Earth-fixed matrix ``Rz(GAST)``."""
        return Rz(self.gast(ut1, tt, corrections))

    def polar_motion_matrix(self, tt: DateLike, pole: tuple[float, float]) -> Array:
        """Pseudo-Earth-fixed (or TIRF) to ITRF matrix.

        IERS 1996 ignores the TIO locator.  A zero pole gives the identity.
        """
        xp, yp = pole
        if xp == 0.0 and yp == 0.0:
            return jnp.eye(3, dtype=get_dtype())
        sp = 0.0 if self is ReferenceSystem.IERS1996 else tio_locator(*tt)
        return polar_motion_matrix(xp, yp, sp)


_IDS = {
    ReferenceSystem.IERS1996: 0,
    ReferenceSystem.IERS2003_A: 1,
    ReferenceSystem.IERS2003_B: 2,
    ReferenceSystem.IERS2010: 3,
}
