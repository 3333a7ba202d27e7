"""The ``Time`` class: an instant on a continuous astronomical time scale.

A ``Time`` pairs a :class:`~lox_space.time.time_scales.TimeScale` with a
:class:`~lox_space.time.deltas.TimeDelta` counted from J2000 (2000-01-01T12:00
in that scale).  Calendar fields are derived on demand, so arithmetic and
scale conversion never go through a broken-down representation.

UTC is not a valid scale for ``Time``; it is handled by
:class:`~lox_space.time.utc.UTC`, which knows about leap seconds.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from lox_space.constants import SECONDS_BETWEEN_JD_AND_J2000, SECONDS_PER_DAY
from lox_space.errors import (
    InvalidIsoString,
    LeapSecondOutsideUtc,
    TimeScaleMismatch,
    UnknownTimeScale,
)
from lox_space.time.calendar_dates import Date
from lox_space.time.deltas import TimeDelta, format_float
from lox_space.time.julian_dates import Epoch, Unit
from lox_space.time.subsecond import Subsecond
from lox_space.time.time_of_day import TimeOfDay
from lox_space.time.time_scales import DeltaUt1TaiProvider, TimeScale, offset

if TYPE_CHECKING:
    from lox_space.time.utc import UTC

_ISO_DATETIME = re.compile(
    r"^(?P<date>-?\d{4,}-\d{2}-\d{2})T(?P<time>\d{2}:\d{2}:\d{2}(?:\.\d+)?)(?: (?P<scale>[A-Za-z0-9]+))?$"
)


def parse_time_scale(scale: TimeScale | str) -> TimeScale:
    """Resolve a continuous time scale, rejecting UTC.

    Raises:
        UnknownTimeScale: If *scale* is unknown or UTC.
    """
    parsed = TimeScale.parse(scale)
    if parsed is TimeScale.UTC:
        raise UnknownTimeScale("UTC")
    return parsed


def split_iso(iso: str) -> tuple[Date, TimeOfDay, str | None]:
    """Split ``YYYY-MM-DDThh:mm:ss[.f] [SCALE]`` into its parts.

    Raises:
        InvalidIsoString: If *iso* does not match the format.
        DateError: If the date does not exist.
        TimeOfDayError: If the time of day is out of range.
    """
    m = _ISO_DATETIME.match(iso.strip())
    if m is None:
        raise InvalidIsoString(iso)
    date = Date.from_iso(m["date"])
    tod = TimeOfDay.from_iso(m["time"])
    return date, tod, m["scale"]


class CivilAccessors:
    """Calendar and clock accessors shared by ``Time`` and ``UTC``.

    Subclasses provide :meth:`date` and :meth:`time_of_day`.
    """

    __slots__ = ()

    def date(self) -> Date:
        raise NotImplementedError

    def time_of_day(self) -> TimeOfDay:
        raise NotImplementedError

    def year(self) -> int:
        return self.date().year

    def month(self) -> int:
        return self.date().month

    def day(self) -> int:
        return self.date().day

    def day_of_year(self) -> int:
        return self.date().day_of_year()

    def hour(self) -> int:
        return self.time_of_day().hour

    def minute(self) -> int:
        return self.time_of_day().minute

    def second(self) -> int:
        return self.time_of_day().second

    def millisecond(self) -> int:
        return self.time_of_day().subsecond.milliseconds()

    def microsecond(self) -> int:
        return self.time_of_day().subsecond.microseconds()

    def nanosecond(self) -> int:
        return self.time_of_day().subsecond.nanoseconds()

    def picosecond(self) -> int:
        return self.time_of_day().subsecond.picoseconds()

    def femtosecond(self) -> int:
        return self.time_of_day().subsecond.femtoseconds()

    def attosecond(self) -> int:
        return self.time_of_day().subsecond.attoseconds()

    def decimal_seconds(self) -> float:
        """Seconds within the minute including the fraction."""
        return self.time_of_day().decimal_seconds()


class Time(CivilAccessors):
    """An instant in a continuous time scale.

    Args:
        scale: Time scale (``"TAI"``, ``"TT"``, ``"TCG"``, ``"TCB"``,
            ``"TDB"`` or ``"UT1"``).
        year: Year.
        month: Month 1-12.
        day: Day of month.
        hour: Hour 0-23. Default: 0
        minute: Minute 0-59. Default: 0
        seconds: Decimal seconds in ``[0, 60)``. Default: 0.0

    Raises:
        UnknownTimeScale: If *scale* is unknown or UTC.
        DateError: If the date does not exist.
        TimeOfDayError: If a clock field is out of range.
        LeapSecondOutsideUtc: If *seconds* is 60 or more.

    Examples:
        ```python
        t = Time("TAI", 2000, 1, 1, 0, 0, 12.5)
        t.to_scale("TT")
        ```
    """

    __slots__ = ("_scale", "_delta")

    def __init__(
        self,
        scale: TimeScale | str,
        year: int,
        month: int,
        day: int,
        hour: int = 0,
        minute: int = 0,
        seconds: float = 0.0,
    ) -> None:
        scale = parse_time_scale(scale)
        date = Date.new(year, month, day)
        tod = TimeOfDay.from_hms(hour, minute, seconds)
        other = Time.from_date_and_time(scale, date, tod)
        self._scale = other._scale
        self._delta = other._delta

    @classmethod
    def _from_internal(cls, scale: TimeScale, delta: TimeDelta) -> Time:
        obj = object.__new__(cls)
        obj._scale = scale
        obj._delta = delta
        return obj

    # -----------------------------------------------------------------------
    # Constructors
    # -----------------------------------------------------------------------

    @classmethod
    def from_delta(cls, scale: TimeScale | str, delta: TimeDelta) -> Time:
        """Build from a ``TimeDelta`` since J2000 in *scale*."""
        return cls._from_internal(parse_time_scale(scale), delta)

    @classmethod
    def from_seconds(cls, scale: TimeScale | str, seconds: int, subsecond: float = 0.0) -> Time:
        """Build from integer seconds since J2000 and a fraction in ``[0, 1)``."""
        delta = TimeDelta.from_seconds_and_subsecond(int(seconds), Subsecond.from_float(subsecond))
        return cls.from_delta(scale, delta)

    @classmethod
    def j2000(cls, scale: TimeScale | str = TimeScale.TAI) -> Time:
        return cls.from_delta(scale, TimeDelta.zero())

    @classmethod
    def from_date_and_time(cls, scale: TimeScale | str, date: Date, tod: TimeOfDay) -> Time:
        """Combine a date and a time of day.

        Raises:
            LeapSecondOutsideUtc: If the time of day is a leap second.
        """
        scale = parse_time_scale(scale)
        if tod.second == 60:
            raise LeapSecondOutsideUtc(f"leap seconds are only valid in UTC, not in {scale}")
        delta = TimeDelta.new(
            date.seconds_since_j2000() + tod.second_of_day(), tod.subsecond.as_attoseconds()
        )
        return cls._from_internal(scale, delta)

    @classmethod
    def from_iso(cls, iso: str, scale: TimeScale | str | None = None) -> Time:
        """Parse ``YYYY-MM-DDThh:mm:ss[.f] [SCALE]``.

        The scale suffix is optional.  Without *scale* the suffix decides and
        TAI is the default; with *scale* a suffix must agree with it.

        Args:
            iso: ISO 8601 date-time string.
            scale: Expected time scale.

        Returns:
            Time: The parsed instant.

        Raises:
            InvalidIsoString: On malformed input or a mismatching suffix.
            UnknownTimeScale: If *scale* is unknown or UTC.
        """
        expected = parse_time_scale(scale) if scale is not None else None
        date, tod, suffix = split_iso(iso)
        if suffix is None:
            actual = expected or TimeScale.TAI
        else:
            try:
                actual = parse_time_scale(suffix)
            except UnknownTimeScale:
                raise InvalidIsoString(iso, f"unsupported time scale `{suffix}`") from None
            if expected is not None and actual is not expected:
                raise InvalidIsoString(iso, f"expected time scale {expected}")
        return cls.from_date_and_time(actual, date, tod)

    @classmethod
    def from_julian_date(cls, scale: TimeScale | str, jd: float, epoch: Epoch | str = Epoch.JULIAN_DATE) -> Time:
        """Build from a Julian date in days relative to *epoch*.

        Examples:
            ```python
            Time.from_julian_date("TAI", 2451545.0, "jd")  # J2000
            ```
        """
        return cls.from_delta(scale, TimeDelta.from_julian_date(jd, epoch))

    @classmethod
    def from_two_part_julian_date(cls, scale: TimeScale | str, jd1: float, jd2: float) -> Time:
        return cls.from_delta(scale, TimeDelta.from_two_part_julian_date(jd1, jd2))

    @classmethod
    def from_day_of_year(
        cls,
        scale: TimeScale | str,
        year: int,
        day: int,
        hour: int = 0,
        minute: int = 0,
        seconds: float = 0.0,
    ) -> Time:
        """Build from a year and 1-based day of year.

        Raises:
            DateError: If *day* is out of range for *year*.
        """
        date = Date.from_day_of_year(year, day)
        return cls.from_date_and_time(scale, date, TimeOfDay.from_hms(hour, minute, seconds))

    @classmethod
    def range(cls, start: Time, end: Time, step: TimeDelta | None = None) -> list[Time]:
        """Times from *start* to *end* inclusive, spaced by *step* (default one second).

        Raises:
            TimeScaleMismatch: If *start* and *end* differ in scale.
        """
        if start.scale() is not end.scale():
            raise TimeScaleMismatch("cannot build a range between `Time` objects with different time scales")
        return [cls._from_internal(start._scale, d) for d in TimeDelta.range(start._delta, end._delta, step)]

    # -----------------------------------------------------------------------
    # Accessors
    # -----------------------------------------------------------------------

    def scale(self) -> TimeScale:
        return self._scale

    def to_delta(self) -> TimeDelta:
        """Offset from J2000 in this time's scale."""
        return self._delta

    def seconds(self) -> int:
        return self._delta.seconds()

    def subsecond(self) -> float:
        return self._delta.subsecond()

    def date(self) -> Date:
        return Date.from_seconds_since_j2000(self._delta.seconds())

    def time_of_day(self) -> TimeOfDay:
        seconds, subsecond = self._delta.as_seconds_and_subsecond()
        return TimeOfDay.from_seconds_since_j2000(seconds, subsecond)

    def julian_date(self, epoch: Epoch | str = Epoch.JULIAN_DATE, unit: Unit | str = Unit.DAYS) -> float:
        """Julian date relative to *epoch* in *unit*.

        Raises:
            InvalidInput: For an unknown epoch or unit.
        """
        return self._delta.julian_date(epoch, unit)

    def two_part_julian_date(self) -> tuple[float, float]:
        """Julian date split into whole days and the day fraction."""
        seconds, subsecond = self._delta.as_seconds_and_subsecond()
        seconds += SECONDS_BETWEEN_JD_AND_J2000
        days, remainder = divmod(seconds, SECONDS_PER_DAY)
        return float(days), (remainder + subsecond.to_float()) / SECONDS_PER_DAY

    def centuries_since_j2000(self) -> float:
        return self.julian_date(Epoch.J2000, Unit.CENTURIES)

    def days_since_j2000(self) -> float:
        return self.julian_date(Epoch.J2000, Unit.DAYS)

    # -----------------------------------------------------------------------
    # Conversion
    # -----------------------------------------------------------------------

    def to_scale(self, scale: TimeScale | str, provider: DeltaUt1TaiProvider | None = None) -> Time:
        """Express this instant in another scale.

        Args:
            scale: Target scale.
            provider: Earth orientation provider, needed for UT1.

        Returns:
            Time: The same instant in *scale*.

        Raises:
            EopUnavailable: If UT1 is involved and no usable provider is given.
        """
        scale = parse_time_scale(scale)
        if scale is self._scale:
            return self
        return Time._from_internal(scale, self._delta + offset(self._scale, scale, self._delta, provider))

    def to_utc(self, provider: DeltaUt1TaiProvider | None = None) -> UTC:
        """Convert to UTC via TAI.

        Raises:
            DateError: Before 1960-01-01.
            EopUnavailable: If this time is UT1 and no usable provider is given.
        """
        from lox_space.time.utc import UTC

        return UTC.from_tai(self.to_scale(TimeScale.TAI, provider))

    # -----------------------------------------------------------------------
    # Arithmetic and comparison
    # -----------------------------------------------------------------------

    def __add__(self, delta: TimeDelta) -> Time:
        if not isinstance(delta, TimeDelta):
            return NotImplemented
        return Time._from_internal(self._scale, self._delta + delta)

    def __sub__(self, other: Time | TimeDelta) -> Time | TimeDelta:
        if isinstance(other, TimeDelta):
            return Time._from_internal(self._scale, self._delta - other)
        if isinstance(other, Time):
            if other._scale is not self._scale:
                raise TimeScaleMismatch("cannot subtract `Time` objects with different time scales")
            return self._delta - other._delta
        return NotImplemented

    def _check_scale(self, other: Time) -> None:
        if other._scale is not self._scale:
            raise TimeScaleMismatch("cannot compare `Time` objects with different time scales")

    def isclose(self, other: Time, rel_tol: float = 1e-8, abs_tol: float = 1e-14) -> bool:
        """Approximate equality of the offsets from J2000.

        Raises:
            TimeScaleMismatch: If the scales differ.
        """
        self._check_scale(other)
        return self._delta.isclose(other._delta, rel_tol=rel_tol, abs_tol=abs_tol)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Time):
            return NotImplemented
        return self._scale is other._scale and self._delta == other._delta

    def __hash__(self) -> int:
        return hash((self._scale, self._delta))

    def __lt__(self, other: Time) -> bool:
        self._check_scale(other)
        return self._delta < other._delta

    def __le__(self, other: Time) -> bool:
        self._check_scale(other)
        return self._delta <= other._delta

    def __gt__(self, other: Time) -> bool:
        self._check_scale(other)
        return self._delta > other._delta

    def __ge__(self, other: Time) -> bool:
        self._check_scale(other)
        return self._delta >= other._delta

    # -----------------------------------------------------------------------
    # Formatting
    # -----------------------------------------------------------------------

    def isoformat(self, precision: int = 3) -> str:
        return f"{self.date()}T{self.time_of_day().format(precision)}"

    def __str__(self) -> str:
        return f"{self.isoformat()} {self._scale}"

    def __repr__(self) -> str:
        return (
            f'Time("{self._scale}", {self.year()}, {self.month()}, {self.day()}, '
            f"{self.hour()}, {self.minute()}, {format_float(self.decimal_seconds())})"
        )


def time_range(start: Time, end: Time, step: TimeDelta | None = None) -> list[Time]:
    """Uniformly spaced times from *start* to *end*, including *end* when on the grid.

    Examples:
        ```python
        t0 = Time("TAI", 2024, 1, 1)
        times = time_range(t0, t0 + TimeDelta.from_minutes(10), TimeDelta(60.0))
        ```
    """
    return Time.range(start, end, step)
