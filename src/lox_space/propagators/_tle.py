"""Two-Line Element set validation and epoch extraction.

Lines are checked for length, line number, checksum, fixed columns and
matching catalogue numbers before they are handed to the SGP4 model.
"""

from __future__ import annotations

from typing import NamedTuple

from lox_space.errors import InvalidTle
from lox_space.time import UTC, Date, Time, TimeDelta, TimeOfDay

_TLE_LINE_LENGTH = 69

# Blank separator columns of each line.
_SEPARATORS = {
    1: (1, 8, 17, 32, 43, 52, 61, 63),
    2: (1, 7, 16, 25, 33, 42, 51),
}

# Fixed numeric fields: (line, start, stop, name).
_NUMERIC_FIELDS = (
    (1, 18, 32, "epoch"),
    (2, 8, 16, "inclination"),
    (2, 17, 25, "right ascension of the ascending node"),
    (2, 26, 33, "eccentricity"),
    (2, 34, 42, "argument of perigee"),
    (2, 43, 51, "mean anomaly"),
    (2, 52, 63, "mean motion"),
)


def compute_checksum(line: str) -> int:
    """TLE checksum: sum of the digits plus one per minus sign, modulo 10.

    Computed over the first 68 characters.
    """
    return sum((int(c) if c.isdigit() else c == "-") for c in line[:68]) % 10


def validate_tle_line(line: str, line_number: int) -> str:
    """Check the format of one TLE line.

    Args:
        line: Line text; trailing whitespace is ignored.
        line_number: Expected line number (1 or 2).

    Returns:
        The line without trailing whitespace.

    Raises:
        InvalidTle: On a wrong length, line number or checksum.
    """
    line = line.rstrip()
    if len(line) != _TLE_LINE_LENGTH:
        raise InvalidTle(f"TLE line {line_number} must have {_TLE_LINE_LENGTH} characters but has {len(line)}: {line}")
    if line[0] != str(line_number):
        raise InvalidTle(f"TLE line {line_number} does not start with '{line_number}': {line}")
    checksum = line[68]
    if not checksum.isdigit():
        raise InvalidTle(f"TLE line {line_number} has a non-digit checksum: {line}")
    expected = compute_checksum(line)
    if expected != int(checksum):
        raise InvalidTle(f"TLE line {line_number} checksum mismatch: computed {expected}, found {checksum}")
    return line


def _check_columns(lines: dict[int, str]) -> None:
    for n, columns in _SEPARATORS.items():
        for i in columns:
            if lines[n][i] != " ":
                raise InvalidTle(f"TLE line {n} has {lines[n][i]!r} in blank column {i + 1}: {lines[n]}")
    for n, start, stop, name in _NUMERIC_FIELDS:
        field = lines[n][start:stop]
        try:
            float(field)
        except ValueError:
            raise InvalidTle(f"TLE line {n} has an invalid {name} field: {field!r}") from None
        if name == "eccentricity" and not field.isdigit():
            raise InvalidTle(f"TLE line 2 has an invalid eccentricity field: {field!r}")


class Tle(NamedTuple):
    """A validated Two-Line Element set.

    Attributes:
        name: Object name from the optional title line, else ``None``.
        line1: First element line.
        line2: Second element line.
    """

    name: str | None
    line1: str
    line2: str

    @classmethod
    def from_lines(cls, line1: str, line2: str, name: str | None = None) -> Tle:
        """Validate two element lines.

        Raises:
            InvalidTle: If a line is malformed, a fixed column holds the wrong
                kind of character or the catalogue numbers differ.
        """
        line1 = validate_tle_line(line1, 1)
        line2 = validate_tle_line(line2, 2)
        _check_columns({1: line1, 2: line2})
        if line1[2:7] != line2[2:7]:
            raise InvalidTle("catalogue numbers in lines 1 and 2 do not match")
        return cls(name.strip() if name else None, line1, line2)

    @classmethod
    def parse(cls, text: str) -> Tle:
        """Parse two-line or three-line (title + elements) text.

        Raises:
            InvalidTle: If the text does not hold two or three lines.

        Examples:
            ```python
            tle = Tle.parse(\"\"\"ISS (ZARYA)
            1 25544U 98067A   24170.37528350  .00016566  00000+0  30244-3 0  9996
            2 25544  51.6410 309.3890 0010444 339.5369 107.8830 15.49495945458731\"\"\")
            tle.name  # 'ISS (ZARYA)'
            ```
        """
        lines = [ln for ln in text.strip().splitlines() if ln.strip()]
        if len(lines) == 2:
            return cls.from_lines(lines[0], lines[1])
        if len(lines) == 3:
            return cls.from_lines(lines[1], lines[2], name=lines[0])
        raise InvalidTle(f"expected 2 or 3 lines but got {len(lines)}")

    def catalogue_number(self) -> str:
        return self.line1[2:7].strip()

    def epoch(self) -> Time:
        """Element set epoch as a TAI time.

        The day fraction is rounded to 1e-8 days like the reference SGP4
        implementation.

        Raises:
            InvalidTle: If the epoch field is not numeric.
        """
        try:
            two_digit_year = int(self.line1[18:20])
            epoch_days = float(self.line1[20:32])
        except ValueError as exc:
            raise InvalidTle(f"invalid epoch field: {self.line1[18:32]!r}") from exc
        year = two_digit_year + 2000 if two_digit_year < 57 else two_digit_year + 1900
        day, fraction = divmod(epoch_days, 1.0)
        midnight = UTC.from_date_and_time(Date.from_day_of_year(year, int(day)), TimeOfDay.from_hms(0, 0, 0.0))
        return midnight.to_tai() + TimeDelta.from_seconds_f64(round(fraction, 8) * 86400.0)

    def __str__(self) -> str:
        lines = [self.line1, self.line2]
        if self.name:
            lines.insert(0, self.name)
        return "\n".join(lines)
