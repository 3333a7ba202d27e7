"""Astronomical time scales and the offsets between them.

Offsets are defined on deltas from J2000 expressed in the *origin* scale:
``delta_target = delta_origin + offset(origin, target, delta_origin)``.

Directly connected scale pairs are

- TAI <-> TT: constant 32.184 s.
- TT <-> TCG: linear rate ``L_G`` anchored at 1977-01-01T00:00:32.184 TT.
- TT <-> TDB: the dominant annual term of the Fairhead & Bretagnon series.
- TDB <-> TCB: linear rate ``L_B`` with the IAU 2006 ``TDB_0`` offset.
- TAI <-> UTC: leap seconds (see :mod:`lox_space.time.leap_seconds`).
- TAI <-> UT1: Earth orientation data from a user-supplied provider.

Every other pair is resolved as a two-step path through TT, TDB or TAI,
taken from a static routing table.
"""

from __future__ import annotations

import enum
import math
from typing import Callable, Protocol

from lox_space.errors import EopUnavailable, UnknownTimeScale
from lox_space.time import leap_seconds
from lox_space.time.deltas import TimeDelta


class TimeScale(enum.Enum):
    """The supported time scales."""

    TAI = "TAI"
    TT = "TT"
    TCG = "TCG"
    TCB = "TCB"
    TDB = "TDB"
    UT1 = "UT1"
    UTC = "UTC"

    @classmethod
    def parse(cls, value: TimeScale | str) -> TimeScale:
        """Resolve a scale from itself or its abbreviation.

        Raises:
            UnknownTimeScale: If *value* is not a known abbreviation.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise UnknownTimeScale(str(value)) from None

    def abbreviation(self) -> str:
        return self.value

    def name_(self) -> str:
        return _NAMES[self]

    @property
    def is_continuous(self) -> bool:
        """``False`` only for UTC, whose count is interrupted by leap seconds."""
        return self is not TimeScale.UTC

    def __str__(self) -> str:
        return self.value


_NAMES = {
    TimeScale.TAI: "International Atomic Time",
    TimeScale.TT: "Terrestrial Time",
    TimeScale.TCG: "Geocentric Coordinate Time",
    TimeScale.TCB: "Barycentric Coordinate Time",
    TimeScale.TDB: "Barycentric Dynamical Time",
    TimeScale.UT1: "Universal Time",
    TimeScale.UTC: "Coordinated Universal Time",
}


class DeltaUt1TaiProvider(Protocol):
    """Supplier of UT1-TAI, e.g. :class:`lox_space.eop.EOPProvider`."""

    def delta_ut1_tai(self, tai: TimeDelta) -> TimeDelta: ...

    def delta_tai_ut1(self, ut1: TimeDelta) -> TimeDelta: ...


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

D_TAI_TT = TimeDelta.builder().seconds(32).milliseconds(184).build()

# 1977-01-01T00:00:32.184 TT
J77_TT = TimeDelta.builder().seconds(-725803167).milliseconds(816).build()

LG = 6.969290134e-10
INV_LG = LG / (1.0 - LG)

LB = 1.550519768e-8
INV_LB = LB / (1.0 - LB)
ONE_MINUS_LB_INV = 1.0 / (1.0 - LB)

TDB_0 = TimeDelta.builder().microseconds(65).nanoseconds(500).negative().build()
TCB_77 = TDB_0 + J77_TT * LB

_K = 1.657e-3
_EB = 1.671e-2
_M_0 = 6.239996
_M_1 = 1.99096871e-7


# ---------------------------------------------------------------------------
# Direct offsets
# ---------------------------------------------------------------------------


def tai_to_tt(delta: TimeDelta) -> TimeDelta:
    return D_TAI_TT


def tt_to_tai(delta: TimeDelta) -> TimeDelta:
    return -D_TAI_TT


def tt_to_tcg(delta: TimeDelta) -> TimeDelta:
    return INV_LG * (delta - J77_TT)


def tcg_to_tt(delta: TimeDelta) -> TimeDelta:
    return -LG * (delta - J77_TT)


def tdb_to_tcb(delta: TimeDelta) -> TimeDelta:
    return INV_LB * delta - ONE_MINUS_LB_INV * TCB_77


def tcb_to_tdb(delta: TimeDelta) -> TimeDelta:
    return TCB_77 - LB * delta


def tt_to_tdb(delta: TimeDelta) -> TimeDelta:
    tt = delta.to_decimal_seconds()
    g = _M_0 + _M_1 * tt
    return TimeDelta.from_seconds_f64(_K * math.sin(g + _EB * math.sin(g)))


def tdb_to_tt(delta: TimeDelta) -> TimeDelta:
    tdb = delta.to_decimal_seconds()
    offset = 0.0
    for _ in range(2):
        g = _M_0 + _M_1 * (tdb + offset)
        offset = -_K * math.sin(g + _EB * math.sin(g))
    return TimeDelta.from_seconds_f64(offset)


def tai_to_utc(delta: TimeDelta) -> TimeDelta:
    return -leap_seconds.delta_tai_utc(delta)


def utc_to_tai(delta: TimeDelta) -> TimeDelta:
    return -leap_seconds.delta_utc_tai(delta)


_DIRECT: dict[tuple[TimeScale, TimeScale], Callable[[TimeDelta], TimeDelta]] = {
    (TimeScale.TAI, TimeScale.TT): tai_to_tt,
    (TimeScale.TT, TimeScale.TAI): tt_to_tai,
    (TimeScale.TT, TimeScale.TCG): tt_to_tcg,
    (TimeScale.TCG, TimeScale.TT): tcg_to_tt,
    (TimeScale.TDB, TimeScale.TCB): tdb_to_tcb,
    (TimeScale.TCB, TimeScale.TDB): tcb_to_tdb,
    (TimeScale.TT, TimeScale.TDB): tt_to_tdb,
    (TimeScale.TDB, TimeScale.TT): tdb_to_tt,
    (TimeScale.TAI, TimeScale.UTC): tai_to_utc,
    (TimeScale.UTC, TimeScale.TAI): utc_to_tai,
}

_VIA: dict[tuple[TimeScale, TimeScale], TimeScale] = {}
for _a, _via, _b in (
    (TimeScale.TAI, TimeScale.TT, TimeScale.TDB),
    (TimeScale.TDB, TimeScale.TT, TimeScale.TCG),
    (TimeScale.TAI, TimeScale.TT, TimeScale.TCG),
    (TimeScale.TAI, TimeScale.TDB, TimeScale.TCB),
    (TimeScale.TT, TimeScale.TDB, TimeScale.TCB),
    (TimeScale.TCB, TimeScale.TDB, TimeScale.TCG),
):
    _VIA[(_a, _b)] = _via
    _VIA[(_b, _a)] = _via
del _a, _via, _b


def offset(
    origin: TimeScale | str,
    target: TimeScale | str,
    delta: TimeDelta,
    provider: DeltaUt1TaiProvider | None = None,
) -> TimeDelta:
    """Offset to add to *delta* (in *origin*) to express it in *target*.

    Args:
        origin: Scale of *delta*.
        target: Scale to convert to.
        delta: Seconds since J2000 in *origin*.
        provider: UT1-TAI supplier, required whenever UT1 is on the path.

    Returns:
        TimeDelta: The offset.

    Raises:
        EopUnavailable: If UT1 is involved and *provider* is ``None``, or the
            provider cannot supply a value.

    Examples:
        ```python
        offset("TAI", "TT", TimeDelta.zero())  # 32.184 seconds
        ```
    """
    origin = TimeScale.parse(origin)
    target = TimeScale.parse(target)
    if origin is target:
        return TimeDelta.zero()
    if origin is TimeScale.TAI and target is TimeScale.UT1:
        return _require(provider).delta_ut1_tai(delta)
    if origin is TimeScale.UT1 and target is TimeScale.TAI:
        return _require(provider).delta_tai_ut1(delta)
    direct = _DIRECT.get((origin, target))
    if direct is not None:
        return direct(delta)
    via = _VIA.get((origin, target), TimeScale.TAI)
    first = offset(origin, via, delta, provider)
    return first + offset(via, target, delta + first, provider)


def _require(provider: DeltaUt1TaiProvider | None) -> DeltaUt1TaiProvider:
    if provider is None:
        raise EopUnavailable("an EOP provider is required for transformations involving UT1")
    return provider
