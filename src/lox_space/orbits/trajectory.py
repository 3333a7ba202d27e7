"""Time-ordered sequences of states with cubic Hermite interpolation.

Each segment between two consecutive states is a cubic polynomial in the
normalised segment time ``s in [0, 1]`` matching position and velocity at
both ends::

    r(s) = c0 + c1 s + c2 s^2 + c3 s^3
    v(s) = (c1 + 2 c2 s + 3 c3 s^2) / h

with ``h`` the segment length in seconds.  The coefficients are computed
once on construction.
"""

from __future__ import annotations

import logging
import warnings
from collections.abc import Callable, Iterator, Sequence
from typing import TYPE_CHECKING

import jax.numpy as jnp
import numpy as np
from jax import Array
from jax.typing import ArrayLike

from lox_space.bodies import EARTH, Origin
from lox_space.config import get_dtype
from lox_space.errors import InvalidTrajectory, TimeOutOfRange
from lox_space.events import Event, Window, find_events, find_windows
from lox_space.frames import ICRF, Frame
from lox_space.math import Brent
from lox_space.orbits.states import State
from lox_space.time import Time, TimeDelta

if TYPE_CHECKING:
    from lox_space.ephemeris import Ephemeris
    from lox_space.frames import RotationProvider

logger = logging.getLogger(__name__)


def hermite_coefficients(t: Array, r: Array, v: Array) -> Array:
    """Per-segment cubic coefficients.

    Args:
        t: Sample offsets, shape ``(n,)``. Units: *s*
        r: Positions, shape ``(n, 3)``.
        v: Velocities, shape ``(n, 3)``.

    Returns:
        Array of shape ``(n - 1, 4, 3)`` holding ``c0..c3`` per segment.
    """
    h = (t[1:] - t[:-1])[:, None]
    r0, r1 = r[:-1], r[1:]
    m0, m1 = h * v[:-1], h * v[1:]
    c2 = 3.0 * (r1 - r0) - 2.0 * m0 - m1
    c3 = 2.0 * (r0 - r1) + m0 + m1
    return jnp.stack([r0, m0, c2, c3], axis=1)


def hermite_evaluate(coeffs: Array, h: ArrayLike, s: ArrayLike) -> tuple[Array, Array]:
    """Position and velocity of one segment at normalised time *s*."""
    c0, c1, c2, c3 = coeffs
    r = c0 + s * (c1 + s * (c2 + s * c3))
    v = (c1 + s * (2.0 * c2 + s * 3.0 * c3)) / h
    return r, v


class Trajectory:
    """An ordered sequence of states sharing origin and frame.

    Args:
        states: At least two states with strictly increasing epochs in one
            time scale.

    Raises:
        InvalidTrajectory: If fewer than two states are given, the epochs
            are not strictly increasing, or origins, frames or time scales
            differ.

    Examples:
        ```python
        traj = Trajectory(states)
        traj.interpolate(TimeDelta.from_minutes(30.0)).position()
        traj.find_windows(lambda s: float(s.position()[2]))
        ```
    """

    __slots__ = ("_states", "_index", "_t", "_coeffs")

    def __init__(self, states: Sequence[State]) -> None:
        states = list(states)
        if len(states) < 2:
            raise InvalidTrajectory(f"at least 2 states are required but only {len(states)} were provided")
        first = states[0]
        scale = first.time().scale()
        for s in states[1:]:
            if s.origin() != first.origin():
                raise InvalidTrajectory("all states must share the same origin")
            if s.reference_frame() != first.reference_frame():
                raise InvalidTrajectory("all states must share the same reference frame")
            if s.time().scale() is not scale:
                raise InvalidTrajectory("all states must share the same time scale")

        start = first.time()
        offsets = [(s.time() - start).to_decimal_seconds() for s in states]
        if any(b <= a for a, b in zip(offsets[:-1], offsets[1:])):
            raise InvalidTrajectory("state epochs must be strictly increasing")

        dtype = get_dtype()
        self._states = states
        self._index = {s.time(): i for i, s in enumerate(states)}
        self._t = jnp.asarray(offsets, dtype=dtype)
        r = jnp.stack([s.position() for s in states])
        v = jnp.stack([s.velocity() for s in states])
        self._coeffs = hermite_coefficients(self._t, r, v)

    @classmethod
    def from_numpy(
        cls,
        start_time: Time,
        array: ArrayLike,
        origin: Origin | str | int = EARTH,
        frame: Frame | str = ICRF,
    ) -> Trajectory:
        """Build from rows of ``[t, x, y, z, vx, vy, vz]``.

        Args:
            start_time: Epoch the ``t`` column is measured from.
            array: Array of shape ``(n, 7)``; ``t`` in *s*, position in
                *km*, velocity in *km/s*.
            origin: Central body. Default: Earth
            frame: Reference frame. Default: ICRF

        Raises:
            InvalidTrajectory: If *array* does not have seven columns.
        """
        array = np.asarray(array, dtype=np.float64)
        if array.ndim != 2 or array.shape[1] != 7:
            raise InvalidTrajectory(f"expected an array of shape (n, 7) but got {array.shape}")
        origin, frame = Origin(origin), Frame(frame)
        states = [
            State(start_time + TimeDelta.from_seconds_f64(row[0]), row[1:4], row[4:7], origin, frame)
            for row in array
        ]
        return cls(states)

    # -----------------------------------------------------------------------
    # Accessors
    # -----------------------------------------------------------------------

    def states(self) -> list[State]:
        return list(self._states)

    def times(self) -> list[Time]:
        return [s.time() for s in self._states]

    def start_time(self) -> Time:
        return self._states[0].time()

    def end_time(self) -> Time:
        return self._states[-1].time()

    def origin(self) -> Origin:
        return self._states[0].origin()

    def reference_frame(self) -> Frame:
        return self._states[0].reference_frame()

    def to_numpy(self) -> np.ndarray:
        """Rows of ``[t, x, y, z, vx, vy, vz]`` with ``t`` in seconds since the start."""
        t = np.asarray(self._t)[:, None]
        x = np.stack([np.asarray(s.to_array()) for s in self._states])
        return np.hstack([t, x])

    def __len__(self) -> int:
        return len(self._states)

    def __iter__(self) -> Iterator[State]:
        return iter(self._states)

    # -----------------------------------------------------------------------
    # Interpolation
    # -----------------------------------------------------------------------

    def interpolate(self, time: Time | TimeDelta) -> State:
        """State at an epoch or at an offset from the start.

        Sample epochs return the stored state unchanged.  Requests outside
        the trajectory span are evaluated on the first or last segment and
        issue a :class:`~lox_space.errors.TimeOutOfRange` warning.

        Args:
            time: Absolute epoch, or offset from :meth:`start_time`.

        Returns:
            State: Interpolated state.

        Raises:
            TimeScaleMismatch: If *time* is in a different scale.
        """
        if isinstance(time, TimeDelta):
            time = self.start_time() + time
        i = self._index.get(time)
        if i is not None:
            return self._states[i]
        return self._interpolate_seconds(time, (time - self.start_time()).to_decimal_seconds())

    def interpolate_at(self, time: Time, provider: RotationProvider | None = None) -> State:
        """State at an absolute epoch in any time scale.

        Args:
            time: Epoch; converted to the trajectory's scale first.
            provider: Earth orientation data, needed when either scale is
                UT1. Default: ``None``
        """
        return self.interpolate(time.to_scale(self.start_time().scale(), provider))


    def _interpolate_seconds(self, time: Time, t: float) -> State:
        t_first, t_last = float(self._t[0]), float(self._t[-1])
        if t < t_first or t > t_last:
            logger.warning("interpolation at %r s is outside the trajectory span [%r, %r] s", t, t_first, t_last)
            warnings.warn(
                f"{time} is outside the trajectory span; extrapolating from the nearest segment",
                TimeOutOfRange,
                stacklevel=3,
            )
        n = self._coeffs.shape[0]
        i = int(jnp.clip(jnp.searchsorted(self._t, t, side="right") - 1, 0, n - 1))
        h = self._t[i + 1] - self._t[i]
        r, v = hermite_evaluate(self._coeffs[i], h, (t - self._t[i]) / h)
        first = self._states[0]
        return State._from_internal(time, r, v, first.origin(), first.reference_frame())

    def _seconds_function(self, func: Callable[[State], float]) -> Callable[[float], float]:
        start = self.start_time()

        def f(t: float) -> float:
            return float(func(self.interpolate(start + TimeDelta.from_seconds_f64(t))))

        return f

    # -----------------------------------------------------------------------
    # Analysis
    # -----------------------------------------------------------------------

    def find_events(self, func: Callable[[State], float], root_finder: Brent | None = None) -> list[Event]:
        """Zero crossings of ``func(state)`` between the sample epochs.

        Raises:
            CallbackError: If *func* raises.
        """
        steps = [float(t) for t in self._t]
        return find_events(self._seconds_function(func), self.start_time(), steps, root_finder)

    def find_windows(self, func: Callable[[State], float], root_finder: Brent | None = None) -> list[Window]:
        """Intervals where ``func(state)`` is positive.

        Raises:
            CallbackError: If *func* raises.
        """
        steps = [float(t) for t in self._t]
        return find_windows(self._seconds_function(func), self.start_time(), self.end_time(), steps, root_finder)

    # -----------------------------------------------------------------------
    # Transformations
    # -----------------------------------------------------------------------

    def to_frame(self, frame: Frame | str, provider: RotationProvider | None = None) -> Trajectory:
        """Rotate every state into *frame*."""
        frame = Frame(frame)
        if frame == self.reference_frame():
            return self
        return Trajectory([s.to_frame(frame, provider) for s in self._states])

    def to_origin(
        self,
        target: Origin | str | int,
        ephemeris: Ephemeris,
        provider: RotationProvider | None = None,
    ) -> Trajectory:
        """Re-centre every state on *target*."""
        target = Origin(target)
        if target == self.origin():
            return self
        return Trajectory([s.to_origin(target, ephemeris, provider) for s in self._states])

    def __repr__(self) -> str:
        return (
            f"Trajectory({len(self._states)} states, {self.start_time()} to {self.end_time()}, "
            f'Origin("{self.origin().name()}"), Frame("{self.reference_frame()}"))'
        )
