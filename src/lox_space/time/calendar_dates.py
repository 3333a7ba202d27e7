"""Calendar dates in the proleptic Julian, Julian and Gregorian calendars.

Day numbers are counted from the J2000 day (2000-01-01).  Dates before
1582-10-15 use the Julian calendar, dates before year 1 the proleptic Julian
calendar.  All divisions in the day-number algorithms truncate toward zero.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass

from lox_space.constants import (
    SECONDS_PER_DAY,
    SECONDS_PER_HALF_DAY,
)
from lox_space.errors import DateError, InvalidIsoString
from lox_space.time.julian_dates import Epoch, Unit

_ISO_DATE = re.compile(r"^(?P<year>-?\d{4,})-(?P<month>\d{2})-(?P<day>\d{2})$")

_LAST_PROLEPTIC_JULIAN_DAY_J2K = -730122
_LAST_JULIAN_DAY_J2K = -152384

_PREVIOUS_MONTH_END_DAY_LEAP = (0, 31, 60, 91, 121, 152, 182, 213, 244, 274, 305, 335)
_PREVIOUS_MONTH_END_DAY = (0, 31, 59, 90, 120, 151, 181, 212, 243, 273, 304, 334)


def _tdiv(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


class Calendar(enum.Enum):
    PROLEPTIC_JULIAN = "proleptic_julian"
    JULIAN = "julian"
    GREGORIAN = "gregorian"


def _calendar(year: int, month: int, day: int) -> Calendar:
    if year < 1:
        return Calendar.PROLEPTIC_JULIAN
    if year < 1582 or (year == 1582 and (month < 10 or (month == 10 and day < 5))):
        return Calendar.JULIAN
    return Calendar.GREGORIAN


def is_leap_year(calendar: Calendar, year: int) -> bool:
    if calendar is Calendar.GREGORIAN:
        return year % 4 == 0 and (year % 400 == 0 or year % 100 != 0)
    return year % 4 == 0


def _last_day_of_year_j2k(calendar: Calendar, year: int) -> int:
    if calendar is Calendar.PROLEPTIC_JULIAN:
        return 365 * year + _tdiv(year + 1, 4) - 730123
    if calendar is Calendar.JULIAN:
        return 365 * year + _tdiv(year, 4) - 730122
    return 365 * year + _tdiv(year, 4) - _tdiv(year, 100) + _tdiv(year, 400) - 730120


def _find_year(calendar: Calendar, j2000_day: int) -> int:
    if calendar is Calendar.PROLEPTIC_JULIAN:
        return -_tdiv(-4 * j2000_day - 2920488, 1461)
    if calendar is Calendar.JULIAN:
        return -_tdiv(-4 * j2000_day - 2921948, 1461)
    year = _tdiv(400 * j2000_day + 292194288, 146097)
    if j2000_day <= _last_day_of_year_j2k(Calendar.GREGORIAN, year - 1):
        return year - 1
    return year


def _find_month(day_of_year: int, leap: bool) -> int:
    if day_of_year < 32:
        return 1
    return (10 * day_of_year + (313 if leap else 323)) // 306


def _find_day(day_of_year: int, month: int, leap: bool) -> int:
    if not leap and day_of_year > 365:
        raise DateError("day of year cannot be 366 for a non-leap year")
    previous = _PREVIOUS_MONTH_END_DAY_LEAP if leap else _PREVIOUS_MONTH_END_DAY
    return day_of_year - previous[month - 1]


def _day_of_year(month: int, day: int, leap: bool) -> int:
    previous = _PREVIOUS_MONTH_END_DAY_LEAP if leap else _PREVIOUS_MONTH_END_DAY
    return day + previous[month - 1]


def j2000_day_number(calendar: Calendar, year: int, month: int, day: int) -> int:
    """Days from 2000-01-01 to the given date.

    Args:
        calendar: Calendar the date is expressed in.
        year: Year.
        month: Month 1-12.
        day: Day of month.

    Returns:
        int: Day number, 0 for 2000-01-01.
    """
    return _last_day_of_year_j2k(calendar, year - 1) + _day_of_year(
        month, day, is_leap_year(calendar, year)
    )


@dataclass(frozen=True, order=True)
class Date:
    """A calendar date.

    Use :meth:`new` to validate input; the raw constructor trusts its
    fields.

    Attributes:
        year: Year, negative for BCE in astronomical numbering.
        month: Month 1-12.
        day: Day of month.
        calendar: Calendar the date belongs to.
    """

    year: int
    month: int
    day: int
    calendar: Calendar = Calendar.GREGORIAN

    @classmethod
    def new(cls, year: int, month: int, day: int) -> Date:
        """Validate and build a date.

        Raises:
            DateError: If the month or day does not exist.
        """
        year, month, day = int(year), int(month), int(day)
        if not 1 <= month <= 12 or not 1 <= day <= 31:
            raise DateError(f"invalid date `{year}-{month}-{day}`")
        calendar = _calendar(year, month, day)
        check = cls.from_days_since_j2000(j2000_day_number(calendar, year, month, day))
        if (check.year, check.month, check.day) != (year, month, day):
            raise DateError(f"invalid date `{year}-{month}-{day}`")
        return cls(year, month, day, calendar)

    @classmethod
    def from_iso(cls, iso: str) -> Date:
        """Parse ``YYYY-MM-DD``.

        Raises:
            InvalidIsoString: If *iso* is not a date string.
            DateError: If the date does not exist.
        """
        m = _ISO_DATE.match(iso.strip())
        if m is None:
            raise InvalidIsoString(iso)
        return cls.new(int(m["year"]), int(m["month"]), int(m["day"]))

    @classmethod
    def from_days_since_j2000(cls, days: int) -> Date:
        if days < _LAST_JULIAN_DAY_J2K:
            if days > _LAST_PROLEPTIC_JULIAN_DAY_J2K:
                calendar = Calendar.JULIAN
            else:
                calendar = Calendar.PROLEPTIC_JULIAN
        else:
            calendar = Calendar.GREGORIAN
        year = _find_year(calendar, days)
        leap = is_leap_year(calendar, year)
        day_of_year = days - _last_day_of_year_j2k(calendar, year - 1)
        month = _find_month(day_of_year, leap)
        day = _find_day(day_of_year, month, leap)
        return cls(year, month, day, calendar)

    @classmethod
    def from_seconds_since_j2000(cls, seconds: int) -> Date:
        """Date containing the instant *seconds* after J2000 noon."""
        seconds = seconds + SECONDS_PER_HALF_DAY
        return cls.from_days_since_j2000((seconds - seconds % SECONDS_PER_DAY) // SECONDS_PER_DAY)

    @classmethod
    def from_day_of_year(cls, year: int, day_of_year: int) -> Date:
        """Build from a year and a 1-based day of year.

        Raises:
            DateError: If *day_of_year* is out of range for *year*.
        """
        if not 1 <= day_of_year <= 366:
            raise DateError(f"day of year must be in the range [1..366] but was {day_of_year}")
        calendar = _calendar(year, 1, 1)
        leap = is_leap_year(calendar, year)
        month = _find_month(day_of_year, leap)
        day = _find_day(day_of_year, month, leap)
        return cls(int(year), month, day, calendar)

    def j2000_day_number(self) -> int:
        return j2000_day_number(self.calendar, self.year, self.month, self.day)

    def seconds_since_j2000(self) -> int:
        """Seconds from J2000 noon to midnight starting this date."""
        return self.j2000_day_number() * SECONDS_PER_DAY - SECONDS_PER_HALF_DAY

    def day_of_year(self) -> int:
        return _day_of_year(self.month, self.day, is_leap_year(self.calendar, self.year))

    def is_leap_year(self) -> bool:
        return is_leap_year(self.calendar, self.year)

    def julian_date(self, epoch: Epoch | str = Epoch.JULIAN_DATE, unit: Unit | str = Unit.DAYS) -> float:
        """Julian date of midnight at the start of this date."""
        epoch = Epoch.parse(epoch)
        unit = Unit.parse(unit)
        seconds = self.seconds_since_j2000() + epoch.seconds_to_j2000
        return seconds / unit.seconds

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"
