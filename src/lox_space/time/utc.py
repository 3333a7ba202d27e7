"""Coordinated Universal Time with leap seconds."""

from __future__ import annotations

from lox_space.errors import DateError, InvalidIsoString, LeapSecondOutsideUtc, TimeScaleMismatch
from lox_space.time import leap_seconds
from lox_space.time.calendar_dates import Date
from lox_space.time.deltas import TimeDelta, format_float
from lox_space.time.time import CivilAccessors, Time, split_iso
from lox_space.time.time_of_day import TimeOfDay
from lox_space.time.time_scales import DeltaUt1TaiProvider, TimeScale

_UTC_SUFFIXES = ("Z", " UTC")


class UTC(CivilAccessors):
    """A UTC calendar date and time of day.

    Unlike :class:`~lox_space.time.time.Time`, a UTC value keeps its
    broken-down fields because 23:59:60 on a leap-second day has no unique
    representation as a continuous count.

    Args:
        year: Year, 1960 or later.
        month: Month 1-12.
        day: Day of month.
        hour: Hour 0-23. Default: 0
        minute: Minute 0-59. Default: 0
        seconds: Decimal seconds in ``[0, 61)``. Default: 0.0

    Raises:
        DateError: If the date does not exist or precedes 1960.
        TimeOfDayError: If a clock field is out of range.
        LeapSecondOutsideUtc: If second 60 is used on a day without a leap
            second.
    """

    __slots__ = ("_date", "_time")

    def __init__(
        self,
        year: int,
        month: int,
        day: int,
        hour: int = 0,
        minute: int = 0,
        seconds: float = 0.0,
    ) -> None:
        other = UTC.from_date_and_time(Date.new(year, month, day), TimeOfDay.from_hms(hour, minute, seconds))
        self._date = other._date
        self._time = other._time

    @classmethod
    def _from_internal(cls, date: Date, tod: TimeOfDay) -> UTC:
        obj = object.__new__(cls)
        obj._date = date
        obj._time = tod
        return obj

    @classmethod
    def from_date_and_time(cls, date: Date, tod: TimeOfDay) -> UTC:
        """Validate and combine a date and time of day.

        Raises:
            DateError: Before 1960-01-01.
            LeapSecondOutsideUtc: If second 60 falls on a non-leap-second day.
        """
        if date.year < 1960:
            raise DateError("UTC is not defined before 1960-01-01")
        if tod.second == 60:
            if not (tod.hour == 23 and tod.minute == 59 and leap_seconds.is_leap_second_date(date)):
                raise LeapSecondOutsideUtc(f"no leap second on {date} at {tod.hour:02d}:{tod.minute:02d}")
        return cls._from_internal(date, tod)

    @classmethod
    def from_iso(cls, iso: str) -> UTC:
        """Parse ``YYYY-MM-DDThh:mm:ss[.f]`` with an optional ``Z`` or `` UTC`` suffix.

        Raises:
            InvalidIsoString: On malformed input or a foreign scale suffix.
        """
        text = iso.strip()
        for suffix in _UTC_SUFFIXES:
            if text.endswith(suffix):
                text = text[: -len(suffix)]
                break
        date, tod, scale = split_iso(text)
        if scale is not None:
            raise InvalidIsoString(iso, "UTC timestamps accept only a `Z` or ` UTC` suffix")
        return cls.from_date_and_time(date, tod)

    @classmethod
    def from_delta(cls, delta: TimeDelta) -> UTC:
        """Build from seconds since J2000 on the UTC clock (no leap second)."""
        seconds, subsecond = delta.as_seconds_and_subsecond()
        return cls.from_date_and_time(
            Date.from_seconds_since_j2000(seconds),
            TimeOfDay.from_seconds_since_j2000(seconds, subsecond),
        )

    @classmethod
    def from_tai(cls, tai: Time) -> UTC:
        """Convert a TAI time, producing second 60 during leap seconds.

        Raises:
            TimeScaleMismatch: If *tai* is not TAI.
            DateError: Before 1960-01-01.
        """
        if tai.scale() is not TimeScale.TAI:
            raise TimeScaleMismatch(f"expected a TAI time but got {tai.scale()}")
        delta = tai.to_delta()
        utc = cls.from_delta(delta - leap_seconds.delta_tai_utc(delta))
        if leap_seconds.is_leap_second(delta):
            return cls._from_internal(utc._date, utc._time.with_second(60))
        return utc

    # -----------------------------------------------------------------------
    # Accessors
    # -----------------------------------------------------------------------

    def date(self) -> Date:
        return self._date

    def time_of_day(self) -> TimeOfDay:
        return self._time

    def is_leap_second(self) -> bool:
        return self._time.second == 60

    def to_delta(self) -> TimeDelta:
        """Seconds since J2000 on the UTC clock; 23:59:60 maps to the next midnight."""
        seconds = self._date.seconds_since_j2000() + self._time.second_of_day()
        return TimeDelta.new(seconds, self._time.subsecond.as_attoseconds())

    # -----------------------------------------------------------------------
    # Conversion
    # -----------------------------------------------------------------------

    def to_tai(self) -> Time:
        """The same instant on the TAI scale."""
        utc = self.to_delta()
        tai = utc - leap_seconds.delta_utc_tai(utc, leap_second=self.is_leap_second())
        return Time.from_delta(TimeScale.TAI, tai)

    def to_scale(self, scale: TimeScale | str, provider: DeltaUt1TaiProvider | None = None) -> Time:
        """Convert to a continuous scale via TAI.

        Raises:
            UnknownTimeScale: If *scale* is unknown or UTC.
            EopUnavailable: For UT1 without a usable provider.
        """
        return self.to_tai().to_scale(scale, provider)

    def to_time(self) -> Time:
        """Continuous representation of this instant (TAI)."""
        return self.to_tai()

    # -----------------------------------------------------------------------
    # Comparison and formatting
    # -----------------------------------------------------------------------

    def _key(self) -> tuple:
        return (self._date.j2000_day_number(), self._time.second_of_day(), self._time.subsecond)

    def isclose(self, other: UTC, rel_tol: float = 1e-8, abs_tol: float = 1e-14) -> bool:
        return self.to_delta().isclose(other.to_delta(), rel_tol=rel_tol, abs_tol=abs_tol)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UTC):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __lt__(self, other: UTC) -> bool:
        return self._key() < other._key()

    def __le__(self, other: UTC) -> bool:
        return self._key() <= other._key()

    def __gt__(self, other: UTC) -> bool:
        return self._key() > other._key()

    def __ge__(self, other: UTC) -> bool:
        return self._key() >= other._key()

    def isoformat(self, precision: int = 3) -> str:
        return f"{self._date}T{self._time.format(precision)}"

    def __str__(self) -> str:
        return f"{self.isoformat()} UTC"

    def __repr__(self) -> str:
        return (
            f"UTC({self.year()}, {self.month()}, {self.day()}, {self.hour()}, "
            f"{self.minute()}, {format_float(self.decimal_seconds())})"
        )
