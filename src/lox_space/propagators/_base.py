"""Shared single-epoch / multi-epoch dispatch for propagators."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from lox_space.orbits import State, Trajectory
from lox_space.time import Time

logger = logging.getLogger(__name__)


class Propagator:
    """Base class: subclasses implement :meth:`_propagate` for one epoch."""

    __slots__ = ()

    def _propagate(self, time: Time) -> State:
        raise NotImplementedError

    def propagate(self, time: Time | Sequence[Time]) -> State | Trajectory:
        """State at one epoch, or a :class:`Trajectory` over several.

        Args:
            time: An epoch, or a sorted sequence of at least two epochs.

        Returns:
            State for a single epoch, Trajectory for a sequence.
        """
        if isinstance(time, Time):
            return self._propagate(time)
        return self.propagate_all(time)

    def propagate_all(self, times: Sequence[Time]) -> Trajectory:
        """Trajectory through the states at *times*.

        Raises:
            InvalidTrajectory: If fewer than two epochs are given or they are
                not strictly increasing.
        """
        times = list(times)
        logger.debug("%s: propagating %d epochs", type(self).__name__, len(times))
        return Trajectory([self._propagate(t) for t in times])
