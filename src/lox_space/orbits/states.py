"""Cartesian states and Keplerian orbits.

- :class:`State`: position and velocity at an epoch, relative to an origin
  and expressed in a reference frame.
- :class:`Keplerian`: classical orbital elements at an epoch.

States convert between frames through :func:`lox_space.frames.rotation`
and between origins through an :class:`~lox_space.ephemeris.Ephemeris`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import jax.numpy as jnp
import numpy as np
from jax import Array
from jax.typing import ArrayLike

from lox_space.bodies import EARTH, Origin
from lox_space.config import get_dtype
from lox_space.errors import ContractViolation, FrameRequiresInertial, InvalidOrbitalElements, OriginMismatch
from lox_space.frames import ICRF, Frame, rotation
from lox_space.math import isclose
from lox_space.orbits.elements import (
    KEPLERIAN_TOLERANCE,
    cartesian_to_keplerian,
    keplerian_to_cartesian,
    orbital_period,
    rotation_lvlh,
)
from lox_space.orbits.ground import GroundLocation, body_fixed_to_geodetic
from lox_space.time import Time, TimeDelta, TimeScale

if TYPE_CHECKING:
    from lox_space.ephemeris import Ephemeris
    from lox_space.frames import RotationProvider

logger = logging.getLogger(__name__)


def _vec3(value: ArrayLike, name: str) -> Array:
    arr = jnp.asarray(value, dtype=get_dtype())
    if arr.shape != (3,):
        raise ValueError(f"{name} must have shape (3,) but has shape {arr.shape}")
    return arr


class State:
    """Cartesian state of an object.

    Args:
        time: Epoch of the state.
        position: Position ``[x, y, z]``. Units: *km*
        velocity: Velocity ``[vx, vy, vz]``. Units: *km/s*
        origin: Central body. Default: Earth
        frame: Reference frame. Default: ICRF

    Examples:
        ```python
        from lox_space.orbits import State
        from lox_space.time import Time
        s = State(Time("TDB", 2023, 3, 25, 21, 8), [6678.0, 0.0, 0.0], [0.0, 7.73, 0.0])
        s.to_keplerian().orbital_period()
        ```
    """

    __slots__ = ("_time", "_position", "_velocity", "_origin", "_frame")

    def __init__(
        self,
        time: Time,
        position: ArrayLike,
        velocity: ArrayLike,
        origin: Origin | str | int = EARTH,
        frame: Frame | str = ICRF,
    ) -> None:
        self._time = time
        self._position = _vec3(position, "position")
        self._velocity = _vec3(velocity, "velocity")
        self._origin = Origin(origin)
        self._frame = Frame(frame)

    @classmethod
    def _from_internal(cls, time: Time, position: Array, velocity: Array, origin: Origin, frame: Frame) -> State:
        obj = object.__new__(cls)
        obj._time = time
        obj._position = position
        obj._velocity = velocity
        obj._origin = origin
        obj._frame = frame
        return obj

    @classmethod
    def from_array(
        cls,
        time: Time,
        x: ArrayLike,
        origin: Origin | str | int = EARTH,
        frame: Frame | str = ICRF,
    ) -> State:
        """Build from a 6-vector ``[x, y, z, vx, vy, vz]``."""
        x = jnp.asarray(x, dtype=get_dtype())
        return cls(time, x[:3], x[3:6], origin, frame)

    # -----------------------------------------------------------------------
    # Accessors
    # -----------------------------------------------------------------------

    def time(self) -> Time:
        return self._time

    def position(self) -> Array:
        return self._position

    def velocity(self) -> Array:
        return self._velocity

    def origin(self) -> Origin:
        return self._origin

    def reference_frame(self) -> Frame:
        return self._frame

    def to_array(self) -> Array:
        """State as a 6-vector ``[x, y, z, vx, vy, vz]``."""
        return jnp.concatenate([self._position, self._velocity])

    def with_time(self, time: Time) -> State:
        return State._from_internal(time, self._position, self._velocity, self._origin, self._frame)

    # -----------------------------------------------------------------------
    # Transformations
    # -----------------------------------------------------------------------

    def to_frame(self, frame: Frame | str, provider: RotationProvider | None = None) -> State:
        """Express this state in another reference frame.

        Args:
            frame: Target frame.
            provider: Earth orientation data, needed when the path includes
                UT1-dependent rotations. Default: ``None``

        Returns:
            State: Same epoch and origin, new frame.

        Raises:
            EopUnavailable: If UT1 is needed and *provider* cannot supply it.
            IncompatibleReferenceSystems: For mismatched equinox-based frames.
        """
        frame = Frame(frame)
        if frame == self._frame:
            return self
        rot = rotation(self._frame, frame, self._time, provider)
        r, v = rot.apply(self._position, self._velocity)
        return State._from_internal(self._time, r, v, self._origin, frame)

    def to_origin(
        self,
        target: Origin | str | int,
        ephemeris: Ephemeris,
        provider: RotationProvider | None = None,
    ) -> State:
        """Re-centre this state on another origin.

        The state is shifted by the ephemeris states along the chain of
        barycenters connecting the two origins.  Non-ICRF states are
        shifted in ICRF and rotated back.

        Args:
            target: New central body.
            ephemeris: Supplier of body states.
            provider: Earth orientation data for the frame round trip.
                Default: ``None``

        Raises:
            MissingEphemerisData: If *ephemeris* does not cover a body on the
                path.
        """
        from lox_space.ephemeris import path_from_ids

        target = Origin(target)
        if target == self._origin:
            return self
        frame = self._frame
        icrf = self.to_frame(ICRF, provider)
        tdb = self._time.to_scale(TimeScale.TDB, provider)
        path = path_from_ids(self._origin.id(), target.id())
        logger.debug("origin path: %s", " -> ".join(str(i) for i in path))

        dtype = get_dtype()
        r_eph = jnp.zeros(3, dtype=dtype)
        v_eph = jnp.zeros(3, dtype=dtype)
        for a, b in zip(path[:-1], path[1:]):
            r, v = ephemeris.state(Origin(a), Origin(b), tdb)
            r_eph = r_eph + jnp.asarray(r, dtype=dtype)
            v_eph = v_eph + jnp.asarray(v, dtype=dtype)

        shifted = State._from_internal(
            self._time, icrf._position - r_eph, icrf._velocity - v_eph, target, ICRF
        )
        return shifted.to_frame(frame, provider)

    def to_keplerian(self, tol: float = KEPLERIAN_TOLERANCE) -> Keplerian:
        """Osculating Keplerian elements of this state.

        Raises:
            FrameRequiresInertial: If the frame is not inertial.
            UndefinedOriginProperty: If the origin has no gravitational
                parameter.
        """
        self._require_inertial()
        mu = self._origin.gravitational_parameter()
        oe = cartesian_to_keplerian(self._position, self._velocity, mu, tol)
        return Keplerian._from_internal(self._time, oe, self._origin, self._frame)

    def rotation_lvlh(self) -> Array:
        """Rotation matrix whose columns are the LVLH axes.

        Raises:
            FrameRequiresInertial: If the frame is not inertial.
        """
        self._require_inertial()
        return rotation_lvlh(self._position, self._velocity)

    def to_ground_location(self, provider: RotationProvider | None = None) -> GroundLocation:
        """Geodetic location below this state.

        States in frames that are not body-fixed are first rotated into the
        IAU frame of their origin.

        Raises:
            UndefinedOriginProperty: If the origin has no radii.
            DidNotConverge: If the latitude iteration fails.
        """
        state = self if self._frame.is_rotating() else self.to_frame(Frame.iau(self._origin), provider)
        lon, lat, alt = body_fixed_to_geodetic(
            state._position, self._origin.equatorial_radius(), self._origin.flattening()
        )
        return GroundLocation(self._origin, lon, lat, alt)

    def _require_inertial(self) -> None:
        if not self._frame.is_inertial():
            raise FrameRequiresInertial(self._frame)

    # -----------------------------------------------------------------------
    # Protocols
    # -----------------------------------------------------------------------

    def __sub__(self, other: State) -> State:
        if not isinstance(other, State):
            return NotImplemented
        if other._origin != self._origin:
            raise OriginMismatch("cannot subtract states with different origins")
        if other._frame != self._frame:
            raise ContractViolation("cannot subtract states in different reference frames")
        return State._from_internal(
            self._time,
            self._position - other._position,
            self._velocity - other._velocity,
            self._origin,
            self._frame,
        )

    def isclose(self, other: State, rel_tol: float | None = None, abs_tol: float | None = None) -> bool:
        """Approximate equality of epoch, position and velocity; origin and frame must match."""
        return (
            self._origin == other._origin
            and self._frame == other._frame
            and self._time.isclose(other._time)
            and isclose(self.to_array(), other.to_array(), rel_tol, abs_tol)
        )

    def __reduce__(self):
        return (
            State,
            (self._time, np.asarray(self._position), np.asarray(self._velocity), self._origin, self._frame),
        )

    def __repr__(self) -> str:
        r = ", ".join(repr(float(c)) for c in self._position)
        v = ", ".join(repr(float(c)) for c in self._velocity)
        return f'State({self._time!r}, ({r}), ({v}), Origin("{self._origin.name()}"), Frame("{self._frame}"))'


class Keplerian:
    """Osculating Keplerian elements.

    Args:
        time: Epoch of the elements.
        semi_major_axis: Units: *km* (negative for hyperbolic orbits)
        eccentricity: ``0 <= e``
        inclination: ``0 <= i <= pi``. Units: *rad*
        longitude_of_ascending_node: Units: *rad*
        argument_of_periapsis: Units: *rad*
        true_anomaly: Units: *rad*
        origin: Central body. Default: Earth
        frame: Inertial reference frame. Default: ICRF

    Raises:
        InvalidOrbitalElements: If the elements violate their domain.
        FrameRequiresInertial: If *frame* is not inertial.

    Examples:
        ```python
        from lox_space.orbits import Keplerian
        k = Keplerian(time, 7000.0, 0.01, 0.9, 0.5, 0.3, 1.2)
        k.to_cartesian().position()
        ```
    """

    __slots__ = ("_time", "_elements", "_origin", "_frame")

    def __init__(
        self,
        time: Time,
        semi_major_axis: float,
        eccentricity: float,
        inclination: float,
        longitude_of_ascending_node: float,
        argument_of_periapsis: float,
        true_anomaly: float,
        origin: Origin | str | int = EARTH,
        frame: Frame | str = ICRF,
    ) -> None:
        _validate(semi_major_axis, eccentricity, inclination)
        frame = Frame(frame)
        if not frame.is_inertial():
            raise FrameRequiresInertial(frame)
        self._time = time
        self._elements = jnp.array(
            [
                semi_major_axis,
                eccentricity,
                inclination,
                longitude_of_ascending_node,
                argument_of_periapsis,
                true_anomaly,
            ],
            dtype=get_dtype(),
        )
        self._origin = Origin(origin)
        self._frame = frame

    @classmethod
    def _from_internal(cls, time: Time, elements: Array, origin: Origin, frame: Frame) -> Keplerian:
        obj = object.__new__(cls)
        obj._time = time
        obj._elements = elements
        obj._origin = origin
        obj._frame = frame
        return obj

    def time(self) -> Time:
        return self._time

    def origin(self) -> Origin:
        return self._origin

    def reference_frame(self) -> Frame:
        return self._frame

    def semi_major_axis(self) -> float:
        return float(self._elements[0])

    def eccentricity(self) -> float:
        return float(self._elements[1])

    def inclination(self) -> float:
        return float(self._elements[2])

    def longitude_of_ascending_node(self) -> float:
        return float(self._elements[3])

    def argument_of_periapsis(self) -> float:
        return float(self._elements[4])

    def true_anomaly(self) -> float:
        return float(self._elements[5])

    def to_array(self) -> Array:
        """Elements as ``[a, e, i, raan, argp, nu]``."""
        return self._elements

    def orbital_period(self) -> TimeDelta:
        """Period of the orbit.

        Raises:
            UndefinedOriginProperty: If the origin has no gravitational
                parameter.
            InvalidOrbitalElements: If the orbit is not elliptic.
        """
        if self.eccentricity() >= 1.0:
            raise InvalidOrbitalElements("the orbital period is only defined for elliptic orbits")
        mu = self._origin.gravitational_parameter()
        return TimeDelta.from_seconds_f64(float(orbital_period(self._elements[0], mu)))

    def to_cartesian(self) -> State:
        """Cartesian state at the same epoch, origin and frame.

        Raises:
            UndefinedOriginProperty: If the origin has no gravitational
                parameter.
        """
        mu = self._origin.gravitational_parameter()
        r, v = keplerian_to_cartesian(self._elements, mu)
        return State._from_internal(self._time, r, v, self._origin, self._frame)

    def isclose(self, other: Keplerian, rel_tol: float | None = None, abs_tol: float | None = None) -> bool:
        return (
            self._origin == other._origin
            and self._frame == other._frame
            and self._time.isclose(other._time)
            and isclose(self._elements, other._elements, rel_tol, abs_tol)
        )

    def __reduce__(self):
        return (Keplerian, (self._time, *(float(x) for x in self._elements), self._origin, self._frame))

    def __repr__(self) -> str:
        elements = ", ".join(repr(float(x)) for x in self._elements)
        return f'Keplerian({self._time!r}, {elements}, Origin("{self._origin.name()}"))'


def _validate(semi_major_axis: float, eccentricity: float, inclination: float) -> None:
    if eccentricity < 0.0:
        raise InvalidOrbitalElements(f"eccentricity must be non-negative but was {eccentricity}")
    if eccentricity < 1.0 and semi_major_axis <= 0.0:
        raise InvalidOrbitalElements(
            f"semi-major axis must be positive for elliptic orbits but was {semi_major_axis}"
        )
    if eccentricity > 1.0 and semi_major_axis >= 0.0:
        raise InvalidOrbitalElements(
            f"semi-major axis must be negative for hyperbolic orbits but was {semi_major_axis}"
        )
    if not 0.0 <= inclination <= jnp.pi:
        raise InvalidOrbitalElements(f"inclination must be in the range [0, pi] but was {inclination}")
