"""Time representation and conversion.

- :class:`TimeDelta`: exact signed offsets (integer seconds + attoseconds).
- :class:`Time`: an instant on a continuous scale (TAI, TT, TCG, TCB, TDB,
  UT1).
- :class:`UTC`: civil time with leap seconds.
- :func:`offset`: the offset between two scales at a given instant.
"""

from lox_space.time.calendar_dates import Calendar, Date
from lox_space.time.deltas import TimeDelta, TimeDeltaBuilder
from lox_space.time.julian_dates import Epoch, Unit
from lox_space.time.seconds import Seconds
from lox_space.time.subsecond import Subsecond
from lox_space.time.time import Time, time_range
from lox_space.time.time_of_day import TimeOfDay
from lox_space.time.time_scales import TimeScale, offset
from lox_space.time.utc import UTC

__all__ = [
    "Calendar",
    "Date",
    "Epoch",
    "Seconds",
    "Subsecond",
    "Time",
    "TimeDelta",
    "TimeDeltaBuilder",
    "TimeOfDay",
    "TimeScale",
    "UTC",
    "Unit",
    "offset",
    "time_range",
]
