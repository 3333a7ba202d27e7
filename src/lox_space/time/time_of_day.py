"""Time of day with leap-second support."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from fractions import Fraction

from lox_space.constants import (
    ATTOSECONDS_IN_SECOND,
    SECONDS_PER_DAY,
    SECONDS_PER_HALF_DAY,
    SECONDS_PER_HOUR,
    SECONDS_PER_MINUTE,
)
from lox_space.errors import InvalidIsoString, TimeOfDayError
from lox_space.time.subsecond import Subsecond, parse_fraction, split_decimal_seconds

_ISO_TIME = re.compile(r"^(?P<hour>\d{2}):(?P<minute>\d{2}):(?P<second>\d{2})(?:\.(?P<fraction>\d+))?$")


@dataclass(frozen=True, order=True)
class TimeOfDay:
    """Hour, minute, second and sub-second within a day.

    ``second`` may be 60 to represent a UTC leap second; whether that is
    legal for a given date is decided by the UTC layer.

    Raises:
        TimeOfDayError: If a field is out of range.
    """

    hour: int = 0
    minute: int = 0
    second: int = 0
    subsecond: Subsecond = field(default_factory=Subsecond)

    def __post_init__(self) -> None:
        if not 0 <= self.hour < 24:
            raise TimeOfDayError(f"hour must be in the range [0..24) but was {self.hour}")
        if not 0 <= self.minute < 60:
            raise TimeOfDayError(f"minute must be in the range [0..60) but was {self.minute}")
        if not 0 <= self.second < 61:
            raise TimeOfDayError(f"second must be in the range [0..61) but was {self.second}")

    @classmethod
    def from_hms(cls, hour: int, minute: int, seconds: float) -> TimeOfDay:
        """Build from hour, minute and decimal seconds.

        Args:
            hour: Hour 0-23.
            minute: Minute 0-59.
            seconds: Decimal seconds in ``[0.0, 61.0)``.

        Raises:
            TimeOfDayError: If a field is out of range.
        """
        if not 0.0 <= seconds < 61.0:
            raise TimeOfDayError(f"seconds must be in the range [0.0..61.0) but was {seconds}")
        second, subsecond = split_decimal_seconds(seconds)
        if second > 60:
            raise TimeOfDayError(f"seconds must be in the range [0.0..61.0) but was {seconds}")
        return cls(int(hour), int(minute), second, subsecond)

    @classmethod
    def from_iso(cls, iso: str) -> TimeOfDay:
        """Parse ``hh:mm:ss[.fff...]``.

        Raises:
            InvalidIsoString: If *iso* is not a time string.
            TimeOfDayError: If a field is out of range.
        """
        m = _ISO_TIME.match(iso)
        if m is None:
            raise InvalidIsoString(iso)
        subsecond = parse_fraction(m["fraction"]) if m["fraction"] else Subsecond()
        return cls(int(m["hour"]), int(m["minute"]), int(m["second"]), subsecond)

    @classmethod
    def from_second_of_day(cls, second_of_day: int) -> TimeOfDay:
        """Build from whole seconds since midnight; 86400 maps to 23:59:60."""
        if not 0 <= second_of_day < SECONDS_PER_DAY + 1:
            raise TimeOfDayError(
                f"second must be in the range [0..86401) but was {second_of_day}"
            )
        if second_of_day == SECONDS_PER_DAY:
            return cls(23, 59, 60)
        return cls(
            second_of_day // SECONDS_PER_HOUR,
            (second_of_day % SECONDS_PER_HOUR) // SECONDS_PER_MINUTE,
            second_of_day % SECONDS_PER_MINUTE,
        )

    @classmethod
    def from_seconds_since_j2000(cls, seconds: int, subsecond: Subsecond | None = None) -> TimeOfDay:
        tod = cls.from_second_of_day((seconds + SECONDS_PER_HALF_DAY) % SECONDS_PER_DAY)
        if subsecond is not None:
            tod = tod.with_subsecond(subsecond)
        return tod

    def with_subsecond(self, subsecond: Subsecond) -> TimeOfDay:
        return TimeOfDay(self.hour, self.minute, self.second, subsecond)

    def with_second(self, second: int) -> TimeOfDay:
        return TimeOfDay(self.hour, self.minute, second, self.subsecond)

    def second_of_day(self) -> int:
        return self.hour * SECONDS_PER_HOUR + self.minute * SECONDS_PER_MINUTE + self.second

    def decimal_seconds(self) -> float:
        attoseconds = self.second * ATTOSECONDS_IN_SECOND + self.subsecond.as_attoseconds()
        return float(Fraction(attoseconds, ATTOSECONDS_IN_SECOND))

    def format(self, precision: int = 3) -> str:
        return f"{self.hour:02d}:{self.minute:02d}:{self.second:02d}{self.subsecond.format(precision)}"

    def __str__(self) -> str:
        return self.format()
