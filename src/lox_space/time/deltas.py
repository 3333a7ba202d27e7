"""Exact signed time offsets.

:class:`TimeDelta` is the primitive underlying every continuous time value
in lox_space.  A finite delta is stored as an integer number of seconds and
an attosecond count in ``[0, 10**18)``; the ``seconds`` part carries the
sign, so -1.5 s is ``(-2, 5 * 10**17)``.  Besides finite values a delta can
be NaN or +/- infinity.  Arithmetic follows IEEE-like rules for the
non-finite variants (``inf + -inf`` is NaN, anything with NaN is NaN) and
saturates to an infinity when the seconds leave the signed 64-bit range.

Integer arithmetic is exact.  Conversions to floating point go through the
double-double :class:`~lox_space.time.seconds.Seconds` so that values far
from J2000 keep their sub-nanosecond digits.
"""

from __future__ import annotations

import enum
import math
from fractions import Fraction

from lox_space.constants import (
    ATTOSECONDS_IN_FEMTOSECOND,
    ATTOSECONDS_IN_MICROSECOND,
    ATTOSECONDS_IN_MILLISECOND,
    ATTOSECONDS_IN_NANOSECOND,
    ATTOSECONDS_IN_PICOSECOND,
    ATTOSECONDS_IN_SECOND,
    SECONDS_BETWEEN_JD_AND_J2000,
    SECONDS_PER_DAY,
    SECONDS_PER_HOUR,
    SECONDS_PER_JULIAN_CENTURY,
    SECONDS_PER_JULIAN_YEAR,
    SECONDS_PER_MINUTE,
)
from lox_space.errors import NonFiniteTimeDeltaError
from lox_space.time.julian_dates import Epoch, Unit
from lox_space.time.seconds import Seconds
from lox_space.time.subsecond import Subsecond

_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1


class _Kind(enum.IntEnum):
    # Values define the total order NaN < -inf < finite < +inf.
    NAN = 0
    NEG_INF = 1
    VALID = 2
    POS_INF = 3


def _normalize(seconds: int, attoseconds: int) -> tuple[int, int]:
    carry, attoseconds = divmod(attoseconds, ATTOSECONDS_IN_SECOND)
    return seconds + carry, attoseconds


def format_float(value: float) -> str:
    """Format a float the way ``TimeDelta`` displays it (``3`` rather than ``3.0``)."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return repr(value)


class TimeDelta:
    """A signed time offset with attosecond resolution.

    ``TimeDelta(1.5)`` builds a delta from decimal seconds.  Use the class
    methods for other units or for exact integer construction.

    Args:
        seconds: Decimal seconds.  NaN and values beyond the signed 64-bit
            range produce the NaN and infinite variants.
    """

    __slots__ = ("_kind", "_seconds", "_attoseconds")

    def __init__(self, seconds: float = 0.0) -> None:
        other = TimeDelta.from_seconds_f64(seconds)
        self._kind = other._kind
        self._seconds = other._seconds
        self._attoseconds = other._attoseconds

    @classmethod
    def _from_internal(cls, kind: _Kind, seconds: int = 0, attoseconds: int = 0) -> TimeDelta:
        obj = object.__new__(cls)
        obj._kind = kind
        obj._seconds = seconds
        obj._attoseconds = attoseconds
        return obj

    @classmethod
    def _saturating(cls, seconds: int, attoseconds: int) -> TimeDelta:
        seconds, attoseconds = _normalize(seconds, attoseconds)
        if seconds > _I64_MAX:
            return cls._from_internal(_Kind.POS_INF)
        if seconds < _I64_MIN:
            return cls._from_internal(_Kind.NEG_INF)
        return cls._from_internal(_Kind.VALID, seconds, attoseconds)

    # -----------------------------------------------------------------------
    # Constructors
    # -----------------------------------------------------------------------

    @classmethod
    def new(cls, seconds: int, attoseconds: int = 0) -> TimeDelta:
        """Build a finite delta, carrying or borrowing attoseconds into seconds.

        Args:
            seconds: Integer seconds.
            attoseconds: Attoseconds, any sign or magnitude.

        Returns:
            TimeDelta: Normalized delta with ``0 <= attoseconds < 10**18``.

        Examples:
            ```python
            TimeDelta.new(1, -500)  # (0, 10**18 - 500)
            ```
        """
        seconds, attoseconds = _normalize(int(seconds), int(attoseconds))
        return cls._from_internal(_Kind.VALID, seconds, attoseconds)

    @classmethod
    def nan(cls) -> TimeDelta:
        return cls._from_internal(_Kind.NAN)

    @classmethod
    def pos_inf(cls) -> TimeDelta:
        return cls._from_internal(_Kind.POS_INF)

    @classmethod
    def neg_inf(cls) -> TimeDelta:
        return cls._from_internal(_Kind.NEG_INF)

    @classmethod
    def zero(cls) -> TimeDelta:
        return cls._from_internal(_Kind.VALID, 0, 0)

    @classmethod
    def from_seconds(cls, seconds: int) -> TimeDelta:
        """Build from an integer number of seconds."""
        return cls.new(seconds, 0)

    @classmethod
    def from_seconds_f64(cls, value: float) -> TimeDelta:
        """Build from decimal seconds.

        The float is converted exactly and rounded half-to-even to the
        nearest attosecond.

        Args:
            value: Decimal seconds.

        Returns:
            TimeDelta: NaN for NaN input, an infinity for values outside the
            signed 64-bit seconds range, a finite delta otherwise.
        """
        value = float(value)
        if math.isnan(value):
            return cls.nan()
        if value > _I64_MAX:
            return cls.pos_inf()
        if value < _I64_MIN:
            return cls.neg_inf()
        total = round(Fraction(value) * ATTOSECONDS_IN_SECOND)
        seconds, attoseconds = divmod(total, ATTOSECONDS_IN_SECOND)
        return cls._from_internal(_Kind.VALID, seconds, attoseconds)

    from_decimal_seconds = from_seconds_f64

    @classmethod
    def from_seconds_pair(cls, value: Seconds) -> TimeDelta:
        """Build from a double-double value without rounding away ``lo``."""
        return cls.from_seconds_f64(value.hi) + cls.from_seconds_f64(value.lo)

    @classmethod
    def from_minutes(cls, value: float) -> TimeDelta:
        return cls.from_seconds_pair(Seconds(float(value)) * SECONDS_PER_MINUTE)

    @classmethod
    def from_hours(cls, value: float) -> TimeDelta:
        return cls.from_seconds_pair(Seconds(float(value)) * SECONDS_PER_HOUR)

    @classmethod
    def from_days(cls, value: float) -> TimeDelta:
        return cls.from_seconds_pair(Seconds(float(value)) * SECONDS_PER_DAY)

    @classmethod
    def from_julian_years(cls, value: float) -> TimeDelta:
        return cls.from_seconds_pair(Seconds(float(value)) * SECONDS_PER_JULIAN_YEAR)

    @classmethod
    def from_julian_centuries(cls, value: float) -> TimeDelta:
        return cls.from_seconds_pair(Seconds(float(value)) * SECONDS_PER_JULIAN_CENTURY)

    @classmethod
    def from_seconds_and_subsecond(cls, seconds: int, subsecond: Subsecond) -> TimeDelta:
        return cls.new(seconds, subsecond.as_attoseconds())

    @classmethod
    def from_julian_date(cls, days: float, epoch: Epoch | str = Epoch.J2000) -> TimeDelta:
        """Convert a Julian date in days since *epoch* to a delta from J2000.

        Args:
            days: Julian date in days.
            epoch: Epoch of the Julian date (``"jd"``, ``"mjd"``,
                ``"j1950"`` or ``"j2000"``).

        Returns:
            TimeDelta: Offset from J2000.
        """
        epoch = Epoch.parse(epoch)
        seconds = Seconds(float(days)) * SECONDS_PER_DAY
        return cls.from_seconds_pair(seconds) - cls.from_seconds(epoch.seconds_to_j2000)

    @classmethod
    def from_two_part_julian_date(cls, jd1: float, jd2: float) -> TimeDelta:
        """Convert a two-part Julian date ``jd1 + jd2`` to a delta from J2000."""
        return (
            cls.from_seconds_pair(Seconds(float(jd1)) * SECONDS_PER_DAY)
            + cls.from_seconds_pair(Seconds(float(jd2)) * SECONDS_PER_DAY)
            - cls.from_seconds(SECONDS_BETWEEN_JD_AND_J2000)
        )

    @classmethod
    def builder(cls) -> TimeDeltaBuilder:
        return TimeDeltaBuilder()

    @classmethod
    def range(
        cls,
        start: TimeDelta | int,
        end: TimeDelta | int,
        step: TimeDelta | int | None = None,
    ) -> list[TimeDelta]:
        """Evenly spaced deltas from *start* to *end* inclusive.

        Args:
            start: First delta (or integer seconds).
            end: Upper bound, included when it falls on the grid.
            step: Spacing, one second when omitted.  A negative step counts
                down from *start* to *end*.

        Returns:
            list[TimeDelta]: The grid.
        """
        start = start if isinstance(start, TimeDelta) else cls.from_seconds(start)
        end = end if isinstance(end, TimeDelta) else cls.from_seconds(end)
        if step is None:
            step = cls.from_seconds(1)
        elif not isinstance(step, TimeDelta):
            step = cls.from_seconds(step)
        if step.is_zero() or not step.is_finite():
            raise ValueError("step must be finite and non-zero")
        out = []
        current = start
        if step.is_positive():
            while current <= end:
                out.append(current)
                current = current + step
        else:
            while current >= end:
                out.append(current)
                current = current + step
        return out

    # -----------------------------------------------------------------------
    # Accessors
    # -----------------------------------------------------------------------

    def _require_finite(self) -> None:
        if self._kind is not _Kind.VALID:
            raise NonFiniteTimeDeltaError(f"cannot access the value of a non-finite time delta: {self}")

    def seconds(self) -> int:
        """Integer seconds (floor of the value).

        Raises:
            NonFiniteTimeDeltaError: If the delta is NaN or infinite.
        """
        self._require_finite()
        return self._seconds

    def attoseconds(self) -> int:
        """Attoseconds in ``[0, 10**18)``.

        Raises:
            NonFiniteTimeDeltaError: If the delta is NaN or infinite.
        """
        self._require_finite()
        return self._attoseconds

    def subsecond(self) -> float:
        """Fractional part in ``[0.0, 1.0)``."""
        self._require_finite()
        return self._attoseconds / ATTOSECONDS_IN_SECOND

    def as_seconds_and_subsecond(self) -> tuple[int, Subsecond]:
        self._require_finite()
        return self._seconds, Subsecond(self._attoseconds)

    def to_seconds(self) -> Seconds:
        """Promote to a double-double ``(hi, lo)`` pair.

        ``hi`` holds the integer seconds and ``lo`` the fraction (plus any
        rounding remainder of very large second counts).
        """
        if self._kind is _Kind.NAN:
            return Seconds(math.nan, math.nan)
        if self._kind is _Kind.POS_INF:
            return Seconds(math.inf, 0.0)
        if self._kind is _Kind.NEG_INF:
            return Seconds(-math.inf, 0.0)
        hi = float(self._seconds)
        remainder = self._seconds - int(hi)
        return Seconds.from_parts(hi, remainder + self._attoseconds / ATTOSECONDS_IN_SECOND)

    def to_decimal_seconds(self) -> float:
        return self.to_seconds().to_float()

    as_seconds_f64 = to_decimal_seconds

    def __float__(self) -> float:
        return self.to_decimal_seconds()

    def julian_date(self, epoch: Epoch | str = Epoch.J2000, unit: Unit | str = Unit.DAYS) -> float:
        """Express the delta (from J2000) as a Julian date.

        Args:
            epoch: Zero point of the result.
            unit: Unit of the result.

        Returns:
            float: Julian date.
        """
        epoch = Epoch.parse(epoch)
        unit = Unit.parse(unit)
        seconds = self.to_seconds() + epoch.seconds_to_j2000
        if unit is Unit.SECONDS:
            return seconds.to_float()
        return seconds.hi / unit.seconds + seconds.lo / unit.seconds

    def is_finite(self) -> bool:
        return self._kind is _Kind.VALID

    def is_nan(self) -> bool:
        return self._kind is _Kind.NAN

    def is_infinite(self) -> bool:
        return self._kind in (_Kind.POS_INF, _Kind.NEG_INF)

    def is_negative(self) -> bool:
        if self._kind is _Kind.VALID:
            return self._seconds < 0
        return self._kind is _Kind.NEG_INF

    def is_zero(self) -> bool:
        return self._kind is _Kind.VALID and self._seconds == 0 and self._attoseconds == 0

    def is_positive(self) -> bool:
        if self._kind is _Kind.VALID:
            return self._seconds > 0 or (self._seconds == 0 and self._attoseconds > 0)
        return self._kind is _Kind.POS_INF

    # -----------------------------------------------------------------------
    # Arithmetic
    # -----------------------------------------------------------------------

    def __neg__(self) -> TimeDelta:
        if self._kind is _Kind.NAN:
            return self
        if self._kind is _Kind.POS_INF:
            return TimeDelta.neg_inf()
        if self._kind is _Kind.NEG_INF:
            return TimeDelta.pos_inf()
        if self._attoseconds == 0:
            return TimeDelta._saturating(-self._seconds, 0)
        return TimeDelta._saturating(-self._seconds - 1, ATTOSECONDS_IN_SECOND - self._attoseconds)

    def __add__(self, other: TimeDelta) -> TimeDelta:
        if not isinstance(other, TimeDelta):
            return NotImplemented
        kinds = {self._kind, other._kind}
        if _Kind.NAN in kinds or kinds == {_Kind.POS_INF, _Kind.NEG_INF}:
            return TimeDelta.nan()
        if _Kind.POS_INF in kinds:
            return TimeDelta.pos_inf()
        if _Kind.NEG_INF in kinds:
            return TimeDelta.neg_inf()
        return TimeDelta._saturating(
            self._seconds + other._seconds, self._attoseconds + other._attoseconds
        )

    def __sub__(self, other: TimeDelta) -> TimeDelta:
        if not isinstance(other, TimeDelta):
            return NotImplemented
        return self + (-other)

    def __mul__(self, factor: float) -> TimeDelta:
        if isinstance(factor, TimeDelta):
            return NotImplemented
        factor = float(factor)
        if self._kind is _Kind.NAN or math.isnan(factor):
            return TimeDelta.nan()
        if self._kind is not _Kind.VALID:
            if factor == 0.0:
                return TimeDelta.nan()
            positive = (self._kind is _Kind.POS_INF) == (factor > 0.0)
            return TimeDelta.pos_inf() if positive else TimeDelta.neg_inf()
        if math.isinf(factor):
            if self.is_zero():
                return TimeDelta.nan()
            positive = (factor > 0.0) != self.is_negative()
            return TimeDelta.pos_inf() if positive else TimeDelta.neg_inf()
        return TimeDelta.from_seconds_pair(self.to_seconds() * factor)

    __rmul__ = __mul__

    # -----------------------------------------------------------------------
    # Comparison
    # -----------------------------------------------------------------------

    def _key(self) -> tuple:
        if self._kind is _Kind.VALID:
            return (int(self._kind), self._seconds, self._attoseconds)
        return (int(self._kind),)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TimeDelta):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __lt__(self, other: TimeDelta) -> bool:
        if not isinstance(other, TimeDelta):
            return NotImplemented
        return self._key() < other._key()

    def __le__(self, other: TimeDelta) -> bool:
        if not isinstance(other, TimeDelta):
            return NotImplemented
        return self._key() <= other._key()

    def __gt__(self, other: TimeDelta) -> bool:
        if not isinstance(other, TimeDelta):
            return NotImplemented
        return self._key() > other._key()

    def __ge__(self, other: TimeDelta) -> bool:
        if not isinstance(other, TimeDelta):
            return NotImplemented
        return self._key() >= other._key()

    def isclose(self, other: TimeDelta, rel_tol: float = 1e-9, abs_tol: float = 0.0) -> bool:
        return math.isclose(float(self), float(other), rel_tol=rel_tol, abs_tol=abs_tol)

    def __str__(self) -> str:
        return f"{format_float(self.to_decimal_seconds())} seconds"

    def __repr__(self) -> str:
        return f"TimeDelta({format_float(self.to_decimal_seconds())})"


class TimeDeltaBuilder:
    """Fluent construction of a ``TimeDelta`` from decimal sub-second positions.

    Each sub-second setter accepts values of 1000 or more, which carry into
    the coarser positions.  A negative ``seconds`` value extends the
    magnitude downward (``seconds(-1).milliseconds(500)`` is -1.5 s), and
    ``negative()`` negates the assembled magnitude.

    Examples:
        ```python
        TimeDelta.builder().seconds(32).milliseconds(184).build()
        TimeDelta.builder().microseconds(65).nanoseconds(500).negative().build()
        ```
    """

    __slots__ = ("_seconds", "_digits", "_negative")

    def __init__(self) -> None:
        self._seconds = 0
        self._digits = [0, 0, 0, 0, 0, 0]
        self._negative = False

    def _set(self, index: int, value: int) -> TimeDeltaBuilder:
        if value < 0:
            raise ValueError("sub-second components must be non-negative")
        self._digits[index] = int(value)
        return self

    def seconds(self, seconds: int) -> TimeDeltaBuilder:
        self._seconds = int(seconds)
        return self

    def milliseconds(self, value: int) -> TimeDeltaBuilder:
        return self._set(0, value)

    def microseconds(self, value: int) -> TimeDeltaBuilder:
        return self._set(1, value)

    def nanoseconds(self, value: int) -> TimeDeltaBuilder:
        return self._set(2, value)

    def picoseconds(self, value: int) -> TimeDeltaBuilder:
        return self._set(3, value)

    def femtoseconds(self, value: int) -> TimeDeltaBuilder:
        return self._set(4, value)

    def attoseconds(self, value: int) -> TimeDeltaBuilder:
        return self._set(5, value)

    def negative(self) -> TimeDeltaBuilder:
        self._negative = True
        return self

    def build(self) -> TimeDelta:
        units = (
            ATTOSECONDS_IN_MILLISECOND,
            ATTOSECONDS_IN_MICROSECOND,
            ATTOSECONDS_IN_NANOSECOND,
            ATTOSECONDS_IN_PICOSECOND,
            ATTOSECONDS_IN_FEMTOSECOND,
            1,
        )
        attoseconds = sum(d * u for d, u in zip(self._digits, units))
        if self._seconds < 0:
            delta = TimeDelta.new(self._seconds, -attoseconds)
        else:
            delta = TimeDelta.new(self._seconds, attoseconds)
        return -delta if self._negative else delta
