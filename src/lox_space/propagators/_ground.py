"""Inertial states of a fixed ground location."""

from __future__ import annotations

import jax.numpy as jnp

from lox_space.config import get_dtype
from lox_space.frames import ICRF, Frame, RotationProvider
from lox_space.orbits import GroundLocation, State
from lox_space.propagators._base import Propagator
from lox_space.time import Time


class GroundPropagator(Propagator):
    """Propagates a ground location as it rotates with its body.

    The body-fixed position (zero velocity in the IAU frame of the origin)
    is rotated into *frame*.

    Args:
        location: Location to propagate.
        frame: Output frame. Default: ICRF
        provider: Earth orientation data, needed only for UT1-based output
            frames. Default: ``None``

    Raises:
        UnknownFrame: If the origin has no rotational elements.

    Examples:
        ```python
        from lox_space.propagators import GroundPropagator
        prop = GroundPropagator(GroundLocation(EARTH, lon, lat, 0.0))
        prop.propagate(Time("TAI", 2022, 1, 31, 23)).position()
        ```
    """

    __slots__ = ("_location", "_frame", "_provider")

    def __init__(
        self,
        location: GroundLocation,
        frame: Frame | str = ICRF,
        provider: RotationProvider | None = None,
    ) -> None:
        self._location = location
        self._frame = Frame(frame)
        self._provider = provider
        # fail early for bodies without a body-fixed frame
        Frame.iau(location.origin())

    def location(self) -> GroundLocation:
        return self._location

    def _propagate(self, time: Time) -> State:
        origin = self._location.origin()
        state = State._from_internal(
            time,
            self._location.body_fixed_position(),
            jnp.zeros(3, dtype=get_dtype()),
            origin,
            Frame.iau(origin),
        )
        return state.to_frame(self._frame, self._provider)

    def __repr__(self) -> str:
        return f"GroundPropagator({self._location!r})"
