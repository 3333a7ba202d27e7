"""Ephemeris supplier interface and a built-in analytical Sun/Moon model.

An :class:`Ephemeris` returns the state of a *target* body relative to an
*origin* body in ICRF.  Body chains follow the NAIF convention: a planet or
moon ``XYY`` orbits its system barycenter ``X``, which orbits the solar
system barycenter ``0``.  :func:`path_from_ids` lists the bodies visited
between two origins, and :meth:`lox_space.orbits.State.to_origin` sums the
ephemeris states along it.

:class:`AnalyticalEphemeris` covers the Sun, the Earth, the Moon and the
Earth-Moon barycenter with the low-precision series of Montenbruck & Gill
(about 0.1 deg); the Sun is placed at the solar system barycenter.  Any
other body raises :class:`~lox_space.errors.MissingEphemerisData`.

References:
    1. O. Montenbruck and E. Gill, *Satellite Orbits: Models, Methods
       and Applications*, 2012, pp. 70-73.
"""

from __future__ import annotations

from typing import Protocol

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from lox_space.bodies import EARTH, MOON, SSB, SUN, Origin
from lox_space.config import get_dtype
from lox_space.constants import AS2RAD, DEG2RAD
from lox_space.errors import MissingEphemerisData
from lox_space.frames import Rx
from lox_space.time import Epoch, Time, TimeDelta, TimeScale, Unit


class Ephemeris(Protocol):
    """Supplier of body states."""

    def state(self, origin: Origin, target: Origin, time: Time) -> tuple[ArrayLike, ArrayLike]:
        """Position [km] and velocity [km/s] of *target* relative to *origin* in ICRF at *time* (TDB)."""
        ...


# ---------------------------------------------------------------------------
# Body chains
# ---------------------------------------------------------------------------


def ancestors(naif_id: int) -> list[int]:
    """*naif_id* followed by its barycenters up to the solar system barycenter.

    Examples:
        ```python
        ancestors(399)  # [399, 3, 0]
        ```
    """
    chain = [naif_id]
    current = naif_id
    while current != 0:
        current = int(current / 100)
        chain.append(current)
    return chain


def path_from_ids(origin: int, target: int) -> list[int]:
    """NAIF ids visited going from *origin* to *target* through their barycenters.

    A common planetary-system barycenter short-circuits the route through
    the solar system barycenter.

    Examples:
        ```python
        path_from_ids(399, 499)  # [399, 3, 0, 4, 499]
        path_from_ids(399, 301)  # [399, 3, 301]
        ```
    """
    path = ancestors(origin)
    path.extend(reversed(ancestors(target)[:-1]))
    if path[0] != 0 and path[-1] != 0:
        idx = path.index(0)
        if path[idx - 1] == path[idx + 1]:
            path[idx - 1 : idx + 2] = [path[idx - 1]]
    return path


def path_to_ssb(origin: Origin | str | int) -> list[Origin]:
    """Origins from *origin* to the solar system barycenter, inclusive."""
    return [Origin(i) for i in ancestors(Origin(origin).id())]


# ---------------------------------------------------------------------------
# Montenbruck & Gill series
# ---------------------------------------------------------------------------

# Obliquity of the J2000 ecliptic [rad]
_EPSILON = 23.43929111 * DEG2RAD


def _frac(x):
    return x - jnp.floor(x)


def sun_position(t: ArrayLike) -> Array:
    """Geocentric position of the Sun in EME2000 [km].

    Args:
        t: TT Julian centuries since J2000.
    """
    dtype = get_dtype()
    t = jnp.asarray(t, dtype=dtype)
    pi2 = 2.0 * jnp.pi

    m = pi2 * _frac(0.9931267 + 99.9973583 * t)
    lon = pi2 * _frac(0.7859444 + m / pi2 + (6892.0 * jnp.sin(m) + 72.0 * jnp.sin(2.0 * m)) / 1296.0e3)
    r = 149.619e6 - 2.499e6 * jnp.cos(m) - 0.021e6 * jnp.cos(2.0 * m)

    r_ecliptic = jnp.array([r * jnp.cos(lon), r * jnp.sin(lon), jnp.zeros_like(r)])
    return Rx(-_EPSILON) @ r_ecliptic


def moon_position(t: ArrayLike) -> Array:
    """Geocentric position of the Moon in EME2000 [km].

    Args:
        t: TT Julian centuries since J2000.
    """
    dtype = get_dtype()
    t = jnp.asarray(t, dtype=dtype)
    pi2 = 2.0 * jnp.pi

    l0 = _frac(0.606433 + 1336.851344 * t)  # mean longitude [rev]
    lm = pi2 * _frac(0.374897 + 1325.552410 * t)  # Moon mean anomaly
    ls = pi2 * _frac(0.993133 + 99.997361 * t)  # Sun mean anomaly
    d = pi2 * _frac(0.827361 + 1236.853086 * t)  # Moon-Sun elongation
    f = pi2 * _frac(0.259086 + 1342.227825 * t)  # argument of latitude

    # longitude perturbation [arcsec]
    dl = (
        22640.0 * jnp.sin(lm)
        - 4586.0 * jnp.sin(lm - 2.0 * d)
        + 2370.0 * jnp.sin(2.0 * d)
        + 769.0 * jnp.sin(2.0 * lm)
        - 668.0 * jnp.sin(ls)
        - 412.0 * jnp.sin(2.0 * f)
        - 212.0 * jnp.sin(2.0 * lm - 2.0 * d)
        - 206.0 * jnp.sin(lm + ls - 2.0 * d)
        + 192.0 * jnp.sin(lm + 2.0 * d)
        - 165.0 * jnp.sin(ls - 2.0 * d)
        - 125.0 * jnp.sin(d)
        - 110.0 * jnp.sin(lm + ls)
        + 148.0 * jnp.sin(lm - ls)
        - 55.0 * jnp.sin(2.0 * f - 2.0 * d)
    )
    lon = pi2 * _frac(l0 + dl / 1296.0e3)

    s = f + (dl + 412.0 * jnp.sin(2.0 * f) + 541.0 * jnp.sin(ls)) * AS2RAD
    h = f - 2.0 * d
    n = (
        -526.0 * jnp.sin(h)
        + 44.0 * jnp.sin(lm + h)
        - 31.0 * jnp.sin(-lm + h)
        - 23.0 * jnp.sin(ls + h)
        + 11.0 * jnp.sin(-ls + h)
        - 25.0 * jnp.sin(-2.0 * lm + f)
        + 21.0 * jnp.sin(-lm + f)
    )
    lat = (18520.0 * jnp.sin(s) + n) * AS2RAD

    r = (
        385000.0
        - 20905.0 * jnp.cos(lm)
        - 3699.0 * jnp.cos(2.0 * d - lm)
        - 2956.0 * jnp.cos(2.0 * d)
        - 570.0 * jnp.cos(2.0 * lm)
        + 246.0 * jnp.cos(2.0 * lm - 2.0 * d)
        - 205.0 * jnp.cos(ls - 2.0 * d)
        - 171.0 * jnp.cos(lm + 2.0 * d)
        - 152.0 * jnp.cos(lm + ls - 2.0 * d)
    )

    r_ecliptic = jnp.array(
        [
            r * jnp.cos(lon) * jnp.cos(lat),
            r * jnp.sin(lon) * jnp.cos(lat),
            r * jnp.sin(lat),
        ]
    )
    return Rx(-_EPSILON) @ r_ecliptic


class AnalyticalEphemeris:
    """Low-precision ephemeris of the Sun, Earth, Moon and their barycenters.

    Velocities are central differences of the position series.

    Args:
        step: Half-width of the central difference. Default: 60 s

    Examples:
        ```python
        from lox_space.bodies import EARTH, SUN
        from lox_space.ephemeris import AnalyticalEphemeris
        r, v = AnalyticalEphemeris().state(EARTH, SUN, time)
        ```
    """

    __slots__ = ("_step", "_emb_ratio")

    _SUPPORTED = frozenset({SSB.id(), SUN.id(), 3, EARTH.id(), MOON.id()})

    def __init__(self, step: float = 60.0) -> None:
        self._step = float(step)
        gm_earth = EARTH.gravitational_parameter()
        gm_moon = MOON.gravitational_parameter()
        self._emb_ratio = gm_moon / (gm_earth + gm_moon)

    def bodies(self) -> list[Origin]:
        return [Origin(i) for i in sorted(self._SUPPORTED)]

    def _geocentric(self, naif_id: int, t: float) -> Array:
        if naif_id == EARTH.id():
            return jnp.zeros(3, dtype=get_dtype())
        if naif_id == MOON.id():
            return moon_position(t)
        if naif_id == 3:
            return self._emb_ratio * moon_position(t)
        # Sun and solar system barycenter coincide in this model
        return sun_position(t)

    def position(self, origin: Origin, target: Origin, time: Time) -> Array:
        """Position of *target* relative to *origin* in ICRF [km]."""
        origin, target = Origin(origin), Origin(target)
        for body in (origin, target):
            if body.id() not in self._SUPPORTED:
                raise MissingEphemerisData(f"no analytical ephemeris for {body.name()}")
        t = time.to_scale(TimeScale.TT).julian_date(Epoch.J2000, Unit.CENTURIES)
        return self._geocentric(target.id(), t) - self._geocentric(origin.id(), t)

    def state(self, origin: Origin, target: Origin, time: Time) -> tuple[Array, Array]:
        """Position [km] and velocity [km/s] of *target* relative to *origin*.

        Raises:
            MissingEphemerisData: If either body is not covered.
        """
        h = TimeDelta.from_seconds_f64(self._step)
        r = self.position(origin, target, time)
        r_plus = self.position(origin, target, time + h)
        r_minus = self.position(origin, target, time - h)
        return r, (r_plus - r_minus) / (2.0 * self._step)
