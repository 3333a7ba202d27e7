"""Error and warning taxonomy for lox_space.

Every exception raised by the package derives from :class:`LoxError` and
belongs to exactly one family:

- :class:`InvalidInput`: the caller supplied a malformed value (bad date,
  ISO string, TLE, orbital elements, unknown names).
- :class:`MissingData`: a required external value is unavailable (EOP data,
  an origin property, ephemeris coverage) or a reference-system mismatch
  makes a rotation undefined.
- :class:`NumericFailure`: an iteration failed to converge or a value left
  the representable range.
- :class:`ContractViolation`: the operation is not defined for the given
  combination of arguments (leap seconds outside UTC, non-inertial frames,
  mismatched scales or origins).
- :class:`Propagated`: a user callback failed; the original exception is
  chained as ``__cause__``.

The families also subclass the closest built-in exception so that callers
can catch ``ValueError``/``LookupError``/``ArithmeticError`` as usual.

Non-fatal diagnostics are emitted through :mod:`warnings` using the
:class:`LoxWarning` hierarchy.
"""

from __future__ import annotations

from typing import Any


class LoxError(Exception):
    """Base class for all lox_space errors."""


# ---------------------------------------------------------------------------
# Families
# ---------------------------------------------------------------------------


class InvalidInput(LoxError, ValueError):
    """A caller-supplied value is malformed or out of range."""


class MissingData(LoxError, LookupError):
    """Data required for the computation is not available."""


class NumericFailure(LoxError, ArithmeticError):
    """A numerical routine failed."""


class ContractViolation(LoxError, ValueError):
    """The operation is not defined for the supplied arguments."""


class Propagated(LoxError):
    """Wraps a failure raised by user-supplied code."""


# ---------------------------------------------------------------------------
# InvalidInput
# ---------------------------------------------------------------------------


class DateError(InvalidInput):
    """Invalid calendar date."""


class TimeOfDayError(InvalidInput):
    """Invalid time of day."""


class InvalidIsoString(InvalidInput):
    """String is not a valid ISO 8601 timestamp for the expected scale."""

    def __init__(self, iso: str, detail: str | None = None) -> None:
        msg = f"invalid ISO string `{iso}`"
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(msg)
        self.iso = iso


class InvalidTle(InvalidInput):
    """Two-line element set failed format or checksum validation."""


class InvalidOrbitalElements(InvalidInput):
    """Orbital elements violate their domain constraints."""


class UnknownTimeScale(InvalidInput):
    """Unrecognised time scale abbreviation."""

    def __init__(self, name: str) -> None:
        super().__init__(f"unknown time scale: {name}")
        self.name = name


class UnknownFrame(InvalidInput):
    """Unrecognised reference frame name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"unknown frame: {name}")
        self.name = name


class UnknownOrigin(InvalidInput):
    """Unrecognised origin name or NAIF id."""

    def __init__(self, name: str | int) -> None:
        super().__init__(f"unknown origin: {name}")
        self.name = name


class InvalidTrajectory(InvalidInput):
    """Trajectory states are empty, unordered or inconsistent."""


class InvalidElevationMask(InvalidInput):
    """Elevation mask samples do not cover azimuths from -pi to pi."""


class SeriesError(InvalidInput):
    """Interpolation samples are too few, mismatched or not strictly increasing."""


class RootNotBracketed(InvalidInput):
    """The interval handed to a bracketing root finder contains no sign change."""

    def __init__(self, a: float, b: float) -> None:
        super().__init__(f"root not in bracket [{a!r}, {b!r}]")
        self.bracket = (a, b)


# ---------------------------------------------------------------------------
# MissingData
# ---------------------------------------------------------------------------


class EopUnavailable(MissingData):
    """Earth orientation parameters are missing for the requested epoch."""


class UndefinedOriginProperty(MissingData):
    """An origin lacks a physical property required by the computation."""

    def __init__(self, origin: str, prop: str) -> None:
        super().__init__(f"undefined property '{prop}' for origin '{origin}'")
        self.origin = origin
        self.prop = prop


class IncompatibleReferenceSystems(MissingData):
    """Equinox-based frames with different IERS conventions were combined."""

    def __init__(self, origin: Any, target: Any) -> None:
        super().__init__(f"incompatible reference systems: {origin} and {target}")


class MissingEphemerisData(MissingData):
    """The ephemeris cannot supply the requested body state."""


# ---------------------------------------------------------------------------
# NumericFailure
# ---------------------------------------------------------------------------


class DidNotConverge(NumericFailure):
    """An iterative solver exhausted its iteration cap."""

    def __init__(self, solver: str, iterations: int, last: float | None = None) -> None:
        msg = f"{solver} did not converge after {iterations} iterations"
        if last is not None:
            msg = f"{msg} (last estimate {last!r})"
        super().__init__(msg)
        self.iterations = iterations
        self.last = last


class Sgp4Error(NumericFailure):
    """The SGP4 model reported an error (decay, eccentricity out of range, ...)."""

    def __init__(self, code: int, message: str) -> None:
        super().__init__(f"SGP4 error {code}: {message}")
        self.code = code


class TimeOverflow(NumericFailure):
    """A time value does not fit the integer seconds range."""


class NonFiniteTimeDeltaError(NumericFailure):
    """A finite value was requested from a NaN or infinite ``TimeDelta``."""


# ---------------------------------------------------------------------------
# ContractViolation
# ---------------------------------------------------------------------------


class LeapSecondOutsideUtc(ContractViolation):
    """Second 60 was used outside a UTC leap second."""


class FrameRequiresInertial(ContractViolation):
    """The operation needs an inertial reference frame."""

    def __init__(self, frame: Any) -> None:
        super().__init__(f"frame '{frame}' is not inertial")
        self.frame = frame


class TimeScaleMismatch(ContractViolation):
    """Two times in different scales were combined directly."""


class OriginMismatch(ContractViolation):
    """Objects with different central bodies were combined."""


# ---------------------------------------------------------------------------
# Propagated
# ---------------------------------------------------------------------------


class CallbackError(Propagated):
    """A user callback raised during event detection.

    Attributes:
        events: Events located before the callback failed.
    """

    def __init__(self, message: str, events: list | None = None) -> None:
        super().__init__(message)
        self.events = list(events or [])


# ---------------------------------------------------------------------------
# Warnings
# ---------------------------------------------------------------------------


class LoxWarning(UserWarning):
    """Base class for lox_space warnings."""


class TimeOutOfRange(LoxWarning):
    """An interpolation request fell outside the trajectory span and was clamped."""


class PropagationOutsideValidity(LoxWarning):
    """SGP4 was evaluated far from the TLE epoch."""


class RootFinderCapWarning(LoxWarning):
    """A root finder hit its iteration cap; the bracket was skipped."""
