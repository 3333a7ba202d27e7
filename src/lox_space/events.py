"""Zero-crossing events and windows of scalar functions of time.

A function ``f(t)`` of seconds since a start epoch is sampled on a grid of
steps.  Every pair of neighbouring samples whose signs differ brackets an
:class:`Event`, which Brent's method locates.  :func:`find_windows` pairs
the events into the :class:`Window` intervals where ``f`` is positive.

Failures raised by ``f`` are wrapped in
:class:`~lox_space.errors.CallbackError`, which carries the events found
before the failure.  If the root finder exhausts its iteration cap, the
scan stops, a :class:`~lox_space.errors.RootFinderCapWarning` is issued and
the events found so far are returned.
"""

from __future__ import annotations

import enum
import logging
import warnings
from collections.abc import Callable, Sequence
from typing import NamedTuple

from lox_space.errors import CallbackError, DidNotConverge, RootFinderCapWarning
from lox_space.math import Brent
from lox_space.time import Time, TimeDelta

logger = logging.getLogger(__name__)


class ZeroCrossing(enum.Enum):
    """Direction of a sign change."""

    UP = "up"
    DOWN = "down"

    @classmethod
    def between(cls, s0: float, s1: float) -> ZeroCrossing | None:
        if s0 < 0.0 and s1 > 0.0:
            return cls.UP
        if s0 > 0.0 and s1 < 0.0:
            return cls.DOWN
        return None

    def __str__(self) -> str:
        return self.value


class Event(NamedTuple):
    """A located zero crossing.

    Attributes:
        time: Epoch of the crossing.
        crossing: ``UP`` for negative to positive, ``DOWN`` otherwise.
    """

    time: Time
    crossing: ZeroCrossing

    def __repr__(self) -> str:
        return f'Event({self.time!r}, "{self.crossing}")'


class Window(NamedTuple):
    """A closed time interval ``[start, end]``.

    Examples:
        ```python
        from lox_space.events import Window
        w = Window(t0, t1)
        w.duration().to_decimal_seconds()
        w.contains(t0)  # True
        ```
    """

    start: Time
    end: Time

    def duration(self) -> TimeDelta:
        return self.end - self.start

    def contains(self, other: Time | Window) -> bool:
        """Whether *other* (an epoch or a window) lies inside this window."""
        if isinstance(other, Window):
            return self.start <= other.start and self.end >= other.end
        return self.start <= other <= self.end

    def intersect(self, other: Window) -> Window | None:
        """Overlap with *other*, or ``None`` if the windows are disjoint."""
        start = max(self.start, other.start)
        end = min(self.end, other.end)
        if start < end or (start == end and (self.contains(other) or other.contains(self))):
            return Window(start, end)
        return None

    def __repr__(self) -> str:
        return f"Window({self.start!r}, {self.end!r})"


def intersect_windows(w1: Sequence[Window], w2: Sequence[Window]) -> list[Window]:
    """Pairwise overlaps of two window lists, ordered by start time."""
    output = []
    for a in w1:
        for b in w2:
            w = a.intersect(b)
            if w is not None:
                output.append(w)
    return sorted(output, key=lambda w: w.start)


# ---------------------------------------------------------------------------
# Scanning
# ---------------------------------------------------------------------------


def _call(func: Callable[[float], float], t: float, events: list[Event]) -> float:
    try:
        return float(func(t))
    except Exception as exc:
        raise CallbackError(f"event function failed at t = {t!r} s: {exc}", events) from exc


def _signs(func: Callable[[float], float], steps: Sequence[float]) -> list[float]:
    # zero, signed or not, counts as positive
    return [1.0 if _call(func, t, []) >= 0.0 else -1.0 for t in steps]


def _locate(
    func: Callable[[float], float],
    start: Time,
    steps: Sequence[float],
    signs: list[float],
    root_finder: Brent,
) -> list[Event]:
    events: list[Event] = []

    def wrapped(t: float) -> float:
        return _call(func, t, events)

    for i in range(len(steps) - 1):
        crossing = ZeroCrossing.between(signs[i], signs[i + 1])
        if crossing is None:
            continue
        try:
            t = root_finder.find(wrapped, (steps[i], steps[i + 1]))
        except DidNotConverge as exc:
            logger.warning("root finder cap reached in [%s, %s] s: %s", steps[i], steps[i + 1], exc)
            warnings.warn(
                f"root finder did not converge between {steps[i]} s and {steps[i + 1]} s; "
                f"returning the {len(events)} events found so far",
                RootFinderCapWarning,
                stacklevel=3,
            )
            break
        events.append(Event(start + TimeDelta.from_seconds_f64(t), crossing))
    return events


def find_events(
    func: Callable[[float], float],
    start: Time,
    steps: Sequence[float],
    root_finder: Brent | None = None,
) -> list[Event]:
    """Zero crossings of *func* between consecutive *steps*.

    Args:
        func: Scalar function of seconds since *start*.
        start: Reference epoch of the steps.
        steps: Sorted sample offsets. Units: *s*
        root_finder: Bracketing solver. Default: ``Brent()``

    Returns:
        list[Event]: Crossings in chronological order; empty if *func* never
        changes sign on the grid.

    Raises:
        CallbackError: If *func* raises; ``.events`` holds the crossings
            located before the failure.

    Examples:
        ```python
        import math
        from lox_space.events import find_events
        from lox_space.time import Time
        events = find_events(math.sin, Time("TAI", 2000, 1, 1, 12), range(8))
        [str(e.crossing) for e in events]  # ['down', 'up']
        ```
    """
    steps = [float(t) for t in steps]
    signs = _signs(func, steps)
    events = _locate(func, start, steps, signs, root_finder or Brent())
    logger.debug("found %d events over %d steps", len(events), len(steps))
    return events


def find_windows(
    func: Callable[[float], float],
    start: Time,
    end: Time,
    steps: Sequence[float],
    root_finder: Brent | None = None,
) -> list[Window]:
    """Intervals where *func* is positive.

    A function positive at the first (last) step opens (closes) a window at
    *start* (*end*).  A function positive everywhere yields the single
    window ``[start, end]``; one negative everywhere yields none.

    Args:
        func: Scalar function of seconds since *start*.
        start: Reference epoch and lower bound.
        end: Upper bound.
        steps: Sorted sample offsets. Units: *s*
        root_finder: Bracketing solver. Default: ``Brent()``

    Returns:
        list[Window]: Disjoint windows ordered by start time.

    Raises:
        CallbackError: If *func* raises.
    """
    steps = [float(t) for t in steps]
    signs = _signs(func, steps)
    if not signs or all(s < 0.0 for s in signs):
        return []
    if all(s > 0.0 for s in signs):
        return [Window(start, end)]

    events = _locate(func, start, steps, signs, root_finder or Brent())
    if not events:
        return []
    if events[0].crossing is ZeroCrossing.DOWN:
        events.insert(0, Event(start, ZeroCrossing.UP))
    if events[-1].crossing is ZeroCrossing.UP:
        events.append(Event(end, ZeroCrossing.DOWN))

    windows = [Window(rise.time, fall.time) for rise, fall in zip(events[0::2], events[1::2])]
    logger.debug("found %d windows from %d events", len(windows), len(events))
    return windows
