"""TAI-UTC offsets: the leap-second table and the 1960-1972 drift model.

Since 1972-01-01 TAI-UTC is an integer number of seconds that changes at
leap-second insertions.  Between 1960-01-01 and 1972-01-01 UTC followed
TAI at a slightly different rate; the offset is a piecewise-linear function
of the MJD (USNO ``tai-utc.dat``).  UTC is undefined before 1960.
"""

from __future__ import annotations

from bisect import bisect_right

from lox_space.constants import MJD_J2000, SECONDS_PER_DAY
from lox_space.errors import DateError
from lox_space.time.calendar_dates import Date
from lox_space.time.deltas import TimeDelta

# Seconds since J2000 (UTC and TAI respectively) at which each TAI-UTC value takes effect.
LEAP_SECOND_EPOCHS_UTC = (
    -883656000, -867931200, -852033600, -820497600, -788961600, -757425600, -725803200,
    -694267200, -662731200, -631195200, -583934400, -552398400, -520862400, -457704000,
    -378734400, -315576000, -284040000, -236779200, -205243200, -173707200, -126273600,
    -79012800, -31579200, 189345600, 284040000, 394372800, 488980800, 536500800,
)  # fmt: skip

LEAP_SECOND_EPOCHS_TAI = (
    -883655991, -867931190, -852033589, -820497588, -788961587, -757425586, -725803185,
    -694267184, -662731183, -631195182, -583934381, -552398380, -520862379, -457703978,
    -378734377, -315575976, -284039975, -236779174, -205243173, -173707172, -126273571,
    -79012770, -31579169, 189345632, 284040033, 394372834, 488980835, 536500836,
)  # fmt: skip

LEAP_SECONDS = tuple(range(10, 38))

# 1960-1972: epoch (MJD), offset (s), drift epoch (MJD), drift rate (s/day).
_DRIFT_EPOCHS_MJD = (
    36934, 37300, 37512, 37665, 38334, 38395, 38486, 38639, 38761, 38820, 38942, 39004, 39126,
    39887,
)  # fmt: skip
_DRIFT_OFFSETS = (
    1.417818, 1.422818, 1.372818, 1.845858, 1.945858, 3.240130, 3.340130, 3.440130, 3.540130,
    3.640130, 3.740130, 3.840130, 4.313170, 4.213170,
)  # fmt: skip
_DRIFT_REFERENCE_MJD = (
    37300, 37300, 37300, 37665, 37665, 38761, 38761, 38761, 38761, 38761, 38761, 38761, 39126,
    39126,
)  # fmt: skip
_DRIFT_RATES = (
    0.0012960, 0.0012960, 0.0012960, 0.0011232, 0.0011232, 0.0012960, 0.0012960, 0.0012960,
    0.0012960, 0.0012960, 0.0012960, 0.0012960, 0.0025920, 0.0025920,
)  # fmt: skip

_UTC_UNDEFINED_MJD = 36934

# The first entry starts the integer-offset era and is not a leap second.
_LEAP_SECOND_DAYS = frozenset(
    (epoch + SECONDS_PER_DAY // 2) // SECONDS_PER_DAY - 1 for epoch in LEAP_SECOND_EPOCHS_UTC[1:]
)
_LEAP_SECOND_SET_TAI = frozenset(LEAP_SECOND_EPOCHS_TAI[1:])


def _mjd(delta: TimeDelta) -> float:
    return delta.to_decimal_seconds() / SECONDS_PER_DAY + MJD_J2000


def _drift_index(mjd: float) -> int:
    if mjd < _UTC_UNDEFINED_MJD:
        raise DateError("UTC is not defined before 1960-01-01")
    return bisect_right(_DRIFT_EPOCHS_MJD, int(mjd // 1)) - 1


def delta_tai_utc(tai: TimeDelta) -> TimeDelta:
    """TAI-UTC at the TAI instant *tai* (seconds from J2000).

    Args:
        tai: TAI seconds since J2000.

    Returns:
        TimeDelta: The offset to subtract from TAI to obtain UTC.

    Raises:
        DateError: Before 1960-01-01.
    """
    seconds = tai.seconds()
    if seconds >= LEAP_SECOND_EPOCHS_TAI[0]:
        idx = bisect_right(LEAP_SECOND_EPOCHS_TAI, seconds) - 1
        return TimeDelta.from_seconds(LEAP_SECONDS[idx])
    mjd = _mjd(tai)
    i = _drift_index(mjd)
    rate_utc = _DRIFT_RATES[i] / SECONDS_PER_DAY
    rate_tai = rate_utc / (1.0 + rate_utc) * SECONDS_PER_DAY
    offset = _DRIFT_OFFSETS[i]
    dt = mjd - _DRIFT_REFERENCE_MJD[i] - offset / SECONDS_PER_DAY
    return TimeDelta.from_seconds_f64(offset + dt * rate_tai)


def delta_utc_tai(utc: TimeDelta, leap_second: bool = False) -> TimeDelta:
    """UTC-TAI at the UTC instant *utc*.

    *utc* counts seconds since J2000 on the UTC clock, with 23:59:60 mapped
    onto the following midnight; pass ``leap_second=True`` for that case so
    the offset of the day being extended is used.

    Args:
        utc: UTC seconds since J2000.
        leap_second: Whether *utc* denotes second 60 of a leap-second day.

    Returns:
        TimeDelta: The offset such that ``tai = utc - delta_utc_tai(utc)``.

    Raises:
        DateError: Before 1960-01-01.
    """
    seconds = utc.seconds()
    if seconds >= LEAP_SECOND_EPOCHS_UTC[0]:
        idx = bisect_right(LEAP_SECOND_EPOCHS_UTC, seconds) - 1
        ls = LEAP_SECONDS[idx]
        if leap_second:
            ls -= 1
        return TimeDelta.from_seconds(-ls)
    mjd = _mjd(utc)
    i = _drift_index(mjd)
    offset = _DRIFT_OFFSETS[i] + (mjd - _DRIFT_REFERENCE_MJD[i]) * _DRIFT_RATES[i]
    return TimeDelta.from_seconds_f64(-offset)


def is_leap_second_date(date: Date) -> bool:
    """Whether a leap second was inserted at the end of *date*."""
    return date.j2000_day_number() in _LEAP_SECOND_DAYS


def is_leap_second(tai: TimeDelta) -> bool:
    """Whether the TAI second starting at *tai* is an inserted leap second."""
    return tai.is_finite() and tai.seconds() in _LEAP_SECOND_SET_TAI
