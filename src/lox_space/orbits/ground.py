"""Geodetic ground locations and topocentric observables.

A :class:`GroundLocation` is a point given by geodetic longitude, latitude
and altitude above the reference ellipsoid of its origin.  Topocentric
coordinates use the South-East-Zenith (SEZ) convention; azimuth is measured
clockwise from north.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, NamedTuple

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from lox_space.bodies import Origin
from lox_space.config import get_dtype
from lox_space.frames import Frame, Ry, Rz
from lox_space.math import Secant

if TYPE_CHECKING:
    from lox_space.frames import RotationProvider
    from lox_space.orbits.states import State


class Observables(NamedTuple):
    """Look angles and range of a target seen from a ground location.

    Attributes:
        azimuth: Clockwise from north in ``(-pi, pi]``. Units: *rad*
        elevation: Above the local horizon. Units: *rad*
        range: Distance to the target. Units: *km*
        range_rate: Time derivative of the range. Units: *km/s*
    """

    azimuth: float
    elevation: float
    range: float
    range_rate: float


# ──────────────────────────────────────────────
# Geodetic conversions
# ──────────────────────────────────────────────


def geodetic_to_body_fixed(
    longitude: ArrayLike,
    latitude: ArrayLike,
    altitude: ArrayLike,
    equatorial_radius: float,
    flattening: float,
) -> Array:
    """Body-fixed position of a geodetic point.

    Args:
        longitude: Geodetic longitude. Units: *rad*
        latitude: Geodetic latitude. Units: *rad*
        altitude: Height above the ellipsoid. Units: *km*
        equatorial_radius: Ellipsoid semi-major axis. Units: *km*
        flattening: Ellipsoid flattening.

    Returns:
        Position ``[x, y, z]``. Units: *km*
    """
    dtype = get_dtype()
    lon = jnp.asarray(longitude, dtype=dtype)
    lat = jnp.asarray(latitude, dtype=dtype)
    alt = jnp.asarray(altitude, dtype=dtype)

    e2 = 2.0 * flattening - flattening**2
    c = equatorial_radius / jnp.sqrt(1.0 - e2 * jnp.sin(lat) ** 2)
    s = c * (1.0 - e2)
    return jnp.array(
        [
            (c + alt) * jnp.cos(lat) * jnp.cos(lon),
            (c + alt) * jnp.cos(lat) * jnp.sin(lon),
            (s + alt) * jnp.sin(lat),
        ]
    )


def body_fixed_to_geodetic(
    position: ArrayLike,
    equatorial_radius: float,
    flattening: float,
    solver: Secant | None = None,
) -> tuple[float, float, float]:
    """Geodetic longitude, latitude and altitude of a body-fixed position.

    The latitude is the root of
    ``(z + c e^2 sin(lat)) / rho - tan(lat)`` with ``rho`` the distance from
    the spin axis, found by a secant iteration that starts from the
    geocentric latitude.

    Args:
        position: Body-fixed position. Units: *km*
        equatorial_radius: Ellipsoid semi-major axis. Units: *km*
        flattening: Ellipsoid flattening.
        solver: Secant configuration. Default: ``Secant()``

    Returns:
        tuple[float, float, float]: Longitude [rad], latitude [rad] and
        altitude [km].

    Raises:
        DidNotConverge: If the latitude iteration fails.
    """
    x, y, z = (float(c) for c in jnp.asarray(position))
    rho = math.hypot(x, y)
    lon = math.atan2(y, x)
    e2 = 2.0 * flattening - flattening**2

    def radius_of_curvature(lat: float) -> float:
        return equatorial_radius / math.sqrt(1.0 - e2 * math.sin(lat) ** 2)

    def residual(lat: float) -> float:
        return (z + radius_of_curvature(lat) * e2 * math.sin(lat)) / rho - math.tan(lat)

    solver = solver or Secant()
    lat = solver.find(residual, math.asin(z / math.sqrt(rho**2 + z**2)))
    alt = rho / math.cos(lat) - radius_of_curvature(lat)
    return lon, lat, alt


def rotation_to_topocentric(longitude: ArrayLike, latitude: ArrayLike) -> Array:
    """Rotation from body-fixed axes to South-East-Zenith axes."""
    return Ry(jnp.pi / 2.0 - latitude) @ Rz(longitude)


# ──────────────────────────────────────────────
# Ground location
# ──────────────────────────────────────────────


class GroundLocation:
    """A fixed location on the surface of a body.

    Args:
        origin: Central body; must define radii.
        longitude: Geodetic longitude. Units: *rad*
        latitude: Geodetic latitude. Units: *rad*
        altitude: Height above the reference ellipsoid. Units: *km*

    Raises:
        UndefinedOriginProperty: If the origin has no radii.

    Examples:
        ```python
        import math
        from lox_space.orbits import GroundLocation
        darmstadt = GroundLocation("Earth", math.radians(8.6512), math.radians(49.8728), 0.108)
        darmstadt.body_fixed_position()
        ```
    """

    __slots__ = ("_origin", "_longitude", "_latitude", "_altitude", "_position", "_rotation")

    def __init__(self, origin: Origin | str | int, longitude: float, latitude: float, altitude: float) -> None:
        self._origin = Origin(origin)
        self._longitude = float(longitude)
        self._latitude = float(latitude)
        self._altitude = float(altitude)
        self._position = geodetic_to_body_fixed(
            self._longitude,
            self._latitude,
            self._altitude,
            self._origin.equatorial_radius(),
            self._origin.flattening(),
        )
        self._rotation = rotation_to_topocentric(self._longitude, self._latitude)

    def origin(self) -> Origin:
        return self._origin

    def longitude(self) -> float:
        return self._longitude

    def latitude(self) -> float:
        return self._latitude

    def altitude(self) -> float:
        return self._altitude

    def body_fixed_position(self) -> Array:
        """Position in the body-fixed frame of the origin. Units: *km*"""
        return self._position

    def rotation_to_topocentric(self) -> Array:
        """3x3 matrix from body-fixed to South-East-Zenith axes."""
        return self._rotation

    def observables(
        self,
        state: State,
        provider: RotationProvider | None = None,
        frame: Frame | str | None = None,
    ) -> Observables:
        """Azimuth, elevation, range and range rate of *state*.

        Args:
            state: Target state with the same origin as this location.
            provider: Earth orientation data for *frame*. Default: ``None``
            frame: Body-fixed frame the location is defined in. Default:
                the IAU frame of the origin.

        Returns:
            Observables: Look angles and range.
        """
        frame = Frame.iau(self._origin) if frame is None else Frame(frame)
        body_fixed = state.to_frame(frame, provider)
        return self.observables_body_fixed(body_fixed.position(), body_fixed.velocity())

    def observables_body_fixed(self, position: ArrayLike, velocity: ArrayLike) -> Observables:
        """Observables of a target already expressed in the body-fixed frame."""
        dtype = get_dtype()
        p = self._rotation @ (jnp.asarray(position, dtype=dtype) - self._position)
        v = self._rotation @ jnp.asarray(velocity, dtype=dtype)
        rng = jnp.linalg.norm(p)
        return Observables(
            azimuth=float(jnp.arctan2(p[1], -p[0])),
            elevation=float(jnp.arcsin(p[2] / rng)),
            range=float(rng),
            range_rate=float(jnp.dot(p, v) / rng),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GroundLocation):
            return NotImplemented
        return (self._origin, self._longitude, self._latitude, self._altitude) == (
            other._origin,
            other._longitude,
            other._latitude,
            other._altitude,
        )

    def __hash__(self) -> int:
        return hash((self._origin, self._longitude, self._latitude, self._altitude))

    def __reduce__(self):
        return (GroundLocation, (self._origin, self._longitude, self._latitude, self._altitude))

    def __repr__(self) -> str:
        return (
            f'GroundLocation(Origin("{self._origin.name()}"), {self._longitude!r}, '
            f"{self._latitude!r}, {self._altitude!r})"
        )
