"""Julian date epochs and units."""

from __future__ import annotations

import enum

from lox_space.constants import (
    SECONDS_BETWEEN_J1950_AND_J2000,
    SECONDS_BETWEEN_JD_AND_J2000,
    SECONDS_BETWEEN_MJD_AND_J2000,
    SECONDS_PER_DAY,
    SECONDS_PER_JULIAN_CENTURY,
    SECONDS_PER_JULIAN_YEAR,
)
from lox_space.errors import InvalidInput


class Epoch(enum.Enum):
    """Zero point of a Julian date."""

    JULIAN_DATE = "jd"
    MODIFIED_JULIAN_DATE = "mjd"
    J1950 = "j1950"
    J2000 = "j2000"

    @classmethod
    def parse(cls, value: Epoch | str) -> Epoch:
        """Resolve an ``Epoch`` from itself or its lower-case name.

        Raises:
            InvalidInput: If *value* names no epoch.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise InvalidInput(f"unknown epoch: {value}") from None

    @property
    def seconds_to_j2000(self) -> int:
        """Seconds from this epoch to J2000."""
        return _EPOCH_OFFSETS[self]


class Unit(enum.Enum):
    """Unit in which a Julian date is expressed."""

    SECONDS = "seconds"
    DAYS = "days"
    YEARS = "years"
    CENTURIES = "centuries"

    @classmethod
    def parse(cls, value: Unit | str) -> Unit:
        """Resolve a ``Unit`` from itself or its lower-case name.

        Raises:
            InvalidInput: If *value* names no unit.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise InvalidInput(f"unknown unit: {value}") from None

    @property
    def seconds(self) -> int:
        """Length of one unit in seconds."""
        return _UNIT_SECONDS[self]


_EPOCH_OFFSETS = {
    Epoch.JULIAN_DATE: SECONDS_BETWEEN_JD_AND_J2000,
    Epoch.MODIFIED_JULIAN_DATE: SECONDS_BETWEEN_MJD_AND_J2000,
    Epoch.J1950: SECONDS_BETWEEN_J1950_AND_J2000,
    Epoch.J2000: 0,
}

_UNIT_SECONDS = {
    Unit.SECONDS: 1,
    Unit.DAYS: SECONDS_PER_DAY,
    Unit.YEARS: SECONDS_PER_JULIAN_YEAR,
    Unit.CENTURIES: SECONDS_PER_JULIAN_CENTURY,
}
