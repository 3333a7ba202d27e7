"""Fractions of a second with attosecond resolution."""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import ROUND_FLOOR, ROUND_HALF_EVEN, Decimal

from lox_space.constants import (
    ATTOSECONDS_IN_FEMTOSECOND,
    ATTOSECONDS_IN_MICROSECOND,
    ATTOSECONDS_IN_MILLISECOND,
    ATTOSECONDS_IN_NANOSECOND,
    ATTOSECONDS_IN_PICOSECOND,
    ATTOSECONDS_IN_SECOND,
)
from lox_space.errors import InvalidInput

_UNITS = (
    ATTOSECONDS_IN_MILLISECOND,
    ATTOSECONDS_IN_MICROSECOND,
    ATTOSECONDS_IN_NANOSECOND,
    ATTOSECONDS_IN_PICOSECOND,
    ATTOSECONDS_IN_FEMTOSECOND,
    1,
)


@dataclass(frozen=True, order=True)
class Subsecond:
    """A non-negative fraction of a second stored as an attosecond count.

    The count is always in ``[0, 10**18)``.  The accessors return the digits
    at each decimal sub-second position, e.g. for 0.123456789 s
    ``milliseconds() == 123``, ``microseconds() == 456`` and
    ``nanoseconds() == 789``.

    Args:
        attoseconds_total: Number of attoseconds.

    Raises:
        InvalidInput: If *attoseconds_total* is outside ``[0, 10**18)``.
    """

    attoseconds_total: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.attoseconds_total < ATTOSECONDS_IN_SECOND:
            raise InvalidInput(
                f"subsecond must be in the range [0, 10^18) attoseconds but was {self.attoseconds_total}"
            )

    @classmethod
    def from_float(cls, fraction: float) -> Subsecond:
        """Build from a fraction in ``[0.0, 1.0)``, rounded to the nearest attosecond.

        Raises:
            InvalidInput: If *fraction* is outside ``[0.0, 1.0)``.
        """
        if not (math.isfinite(fraction) and 0.0 <= fraction < 1.0):
            raise InvalidInput(f"subsecond must be in the range [0.0, 1.0), but was `{fraction}`")
        return cls(min(round(fraction * ATTOSECONDS_IN_SECOND), ATTOSECONDS_IN_SECOND - 1))

    @classmethod
    def from_digits(
        cls,
        milliseconds: int = 0,
        microseconds: int = 0,
        nanoseconds: int = 0,
        picoseconds: int = 0,
        femtoseconds: int = 0,
        attoseconds: int = 0,
    ) -> Subsecond:
        """Assemble from the six three-digit decimal positions.

        Values of 1000 or more carry into the next coarser position.

        Raises:
            InvalidInput: If the assembled value reaches one second or any
                digit group is negative.
        """
        digits = (milliseconds, microseconds, nanoseconds, picoseconds, femtoseconds, attoseconds)
        if any(d < 0 for d in digits):
            raise InvalidInput("subsecond digits must be non-negative")
        return cls(sum(d * unit for d, unit in zip(digits, _UNITS)))

    def _digit(self, unit: int) -> int:
        return (self.attoseconds_total // unit) % 1000

    def milliseconds(self) -> int:
        return self.attoseconds_total // ATTOSECONDS_IN_MILLISECOND

    def microseconds(self) -> int:
        return self._digit(ATTOSECONDS_IN_MICROSECOND)

    def nanoseconds(self) -> int:
        return self._digit(ATTOSECONDS_IN_NANOSECOND)

    def picoseconds(self) -> int:
        return self._digit(ATTOSECONDS_IN_PICOSECOND)

    def femtoseconds(self) -> int:
        return self._digit(ATTOSECONDS_IN_FEMTOSECOND)

    def attoseconds(self) -> int:
        return self.attoseconds_total % 1000

    def as_attoseconds(self) -> int:
        return self.attoseconds_total

    def to_float(self) -> float:
        """The fraction of a second as a float in ``[0.0, 1.0)``."""
        return self.attoseconds_total / ATTOSECONDS_IN_SECOND

    def __float__(self) -> float:
        return self.to_float()

    def format(self, precision: int = 3) -> str:
        """Format as ``.fff`` with *precision* truncated digits, empty for zero precision."""
        if precision <= 0:
            return ""
        digits = f"{self.attoseconds_total:018d}"
        if precision <= 18:
            return "." + digits[:precision]
        return "." + digits + "0" * (precision - 18)


def split_decimal_seconds(value: float) -> tuple[int, Subsecond]:
    """Split decimal seconds into whole seconds and a ``Subsecond``.

    The split uses the shortest decimal representation of *value*, so
    ``12.123456789123`` yields exactly 123456789123 picoseconds rather than
    the binary expansion of the float.

    Args:
        value: Non-negative, finite decimal seconds.

    Returns:
        tuple[int, Subsecond]: Whole seconds and the fraction.
    """
    if not math.isfinite(value):
        raise InvalidInput(f"seconds must be finite but was {value}")
    exact = Decimal(repr(float(value)))
    whole = int(exact.to_integral_value(rounding=ROUND_FLOOR))
    attoseconds = int(
        ((exact - whole) * ATTOSECONDS_IN_SECOND).to_integral_value(rounding=ROUND_HALF_EVEN)
    )
    if attoseconds >= ATTOSECONDS_IN_SECOND:
        whole += 1
        attoseconds -= ATTOSECONDS_IN_SECOND
    return whole, Subsecond(attoseconds)


def parse_fraction(digits: str) -> Subsecond:
    """Parse the digits after a decimal point, truncating beyond attoseconds."""
    digits = digits[:18].ljust(18, "0")
    return Subsecond(int(digits))
