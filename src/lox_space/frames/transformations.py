"""Time-dependent rotations between reference frames.

The frame graph has nine direct edges::

    IAU_<body> -- ICRF -- CIRF -- TIRF -- ITRF
                   |                       |
                  MOD ---- TOD ---------- PEF -- TEME

Any other pair is reached by composing direct edges along a fixed path
(:func:`frame_path`).  Paths into or out of TEME run through the IERS 1996
equinox-based frames, as TEME is only defined with respect to them.

Each edge evaluates its models in the time scale they are defined in
(TT, TDB or UT1); the supplied :class:`~lox_space.time.Time` is converted
on demand.  UT1 and the IERS pole corrections come from an optional
:class:`RotationProvider`; without one, the pole corrections and polar
motion are zero and edges that need UT1 raise
:class:`~lox_space.errors.EopUnavailable`.
"""

from __future__ import annotations

import logging
from typing import Protocol, Union

import jax.numpy as jnp

from lox_space.constants import ROTATION_RATE_EARTH, TAU
from lox_space.errors import IncompatibleReferenceSystems
from lox_space.frames.frames import CIRF, ICRF, ITRF, TIRF, Frame, FrameKind
from lox_space.frames.iers import (
    ReferenceSystem,
    celestial_to_intermediate,
    cip_coordinates_iau2006,
    earth_rotation_angle,
    equation_of_the_equinoxes_iau1994,
)
from lox_space.frames.rotations import Rotation, Rx, Rz
from lox_space.time import Epoch, Time, TimeDelta, TimeScale, Unit

logger = logging.getLogger(__name__)


class RotationProvider(Protocol):
    """Earth orientation supplier for frame rotations, e.g. :class:`lox_space.eop.EOPProvider`."""

    def delta_ut1_tai(self, tai: TimeDelta) -> TimeDelta: ...

    def delta_tai_ut1(self, ut1: TimeDelta) -> TimeDelta: ...

    def corrections(self, time: Time, system: ReferenceSystem) -> tuple[float, float]: ...

    def polar_motion(self, time: Time) -> tuple[float, float]: ...


FrameLike = Union[Frame, str]


# ---------------------------------------------------------------------------
# Epoch bookkeeping
# ---------------------------------------------------------------------------


class _Epochs:
    """One instant in every scale an edge asks for, converted once."""

    __slots__ = ("time", "provider", "_cache")

    def __init__(self, time: Time, provider: RotationProvider | None) -> None:
        self.time = time
        self.provider = provider
        self._cache: dict[TimeScale, Time] = {}

    def at(self, scale: TimeScale) -> Time:
        if scale not in self._cache:
            self._cache[scale] = self.time.to_scale(scale, self.provider)
        return self._cache[scale]

    def jd(self, scale: TimeScale) -> tuple[float, float]:
        return self.at(scale).two_part_julian_date()

    def seconds(self, scale: TimeScale) -> float:
        return self.at(scale).julian_date(Epoch.J2000, Unit.SECONDS)

    def corrections(self, system: ReferenceSystem) -> tuple[float, float]:
        if self.provider is None:
            return 0.0, 0.0
        return self.provider.corrections(self.time, system)

    def polar_motion(self) -> tuple[float, float]:
        if self.provider is None:
            return 0.0, 0.0
        return self.provider.polar_motion(self.time)


# ---------------------------------------------------------------------------
# Direct edges
# ---------------------------------------------------------------------------


def _icrf_to_iau(target: Frame, ep: _Epochs) -> Rotation:
    origin = target.origin()
    et = ep.seconds(TimeScale.TDB)
    ra, dec, w = origin.rotational_elements(et)
    ra_dot, dec_dot, w_dot = origin.rotational_element_rates(et)
    m = Rz(w % TAU) @ Rx(jnp.pi / 2.0 - dec) @ Rz(ra + jnp.pi / 2.0)
    # pole rates applied about the body axes; the terms from rotating them
    # through the intermediate frames are neglected
    return Rotation.from_matrix(m).with_angular_velocity([ra_dot, -dec_dot, w_dot])


def _icrf_to_cirf(ep: _Epochs) -> Rotation:
    x, y, s = cip_coordinates_iau2006(*ep.jd(TimeScale.TT))
    dx, dy = ep.corrections(ReferenceSystem.IERS2010)
    return Rotation.from_matrix(celestial_to_intermediate(x + dx, y + dy, s))


def _cirf_to_tirf(ep: _Epochs) -> Rotation:
    era = earth_rotation_angle(*ep.jd(TimeScale.UT1))
    return Rotation.from_matrix(Rz(era)).with_angular_velocity([0.0, 0.0, ROTATION_RATE_EARTH])


def _tirf_to_itrf(ep: _Epochs) -> Rotation:
    m = ReferenceSystem.IERS2010.polar_motion_matrix(ep.jd(TimeScale.TT), ep.polar_motion())
    return Rotation.from_matrix(m)


def _icrf_to_mod(target: Frame, ep: _Epochs) -> Rotation:
    system = target.reference_system()
    return Rotation.from_matrix(system.bias_precession_matrix(*ep.jd(TimeScale.TT)))


def _mod_to_tod(origin: Frame, ep: _Epochs) -> Rotation:
    system = origin.reference_system()
    m = system.nutation_matrix(*ep.jd(TimeScale.TDB), corrections=ep.corrections(system))
    return Rotation.from_matrix(m)


def _tod_to_pef(origin: Frame, ep: _Epochs) -> Rotation:
    system = origin.reference_system()
    gast = system.gast(ep.jd(TimeScale.UT1), ep.jd(TimeScale.TT), ep.corrections(system))
    return Rotation.from_matrix(Rz(gast)).with_angular_velocity([0.0, 0.0, ROTATION_RATE_EARTH])


def _pef_to_itrf(origin: Frame, ep: _Epochs) -> Rotation:
    system = origin.reference_system()
    return Rotation.from_matrix(system.polar_motion_matrix(ep.jd(TimeScale.TT), ep.polar_motion()))


def _pef_to_teme(ep: _Epochs) -> Rotation:
    eqeq = equation_of_the_equinoxes_iau1994(*ep.jd(TimeScale.TDB))
    return Rotation.from_matrix(Rz(-eqeq))


def _forward_edge(origin: Frame, target: Frame, ep: _Epochs) -> Rotation | None:
    kinds = (origin.kind(), target.kind())
    if kinds == (FrameKind.ICRF, FrameKind.IAU):
        return _icrf_to_iau(target, ep)
    if kinds == (FrameKind.ICRF, FrameKind.CIRF):
        return _icrf_to_cirf(ep)
    if kinds == (FrameKind.CIRF, FrameKind.TIRF):
        return _cirf_to_tirf(ep)
    if kinds == (FrameKind.TIRF, FrameKind.ITRF):
        return _tirf_to_itrf(ep)
    if kinds == (FrameKind.ICRF, FrameKind.MOD):
        return _icrf_to_mod(target, ep)
    if kinds == (FrameKind.MOD, FrameKind.TOD):
        return _mod_to_tod(origin, ep)
    if kinds == (FrameKind.TOD, FrameKind.PEF):
        return _tod_to_pef(origin, ep)
    if kinds == (FrameKind.PEF, FrameKind.ITRF):
        return _pef_to_itrf(origin, ep)
    if kinds == (FrameKind.PEF, FrameKind.TEME):
        return _pef_to_teme(ep)
    return None


def _edge(origin: Frame, target: Frame, ep: _Epochs) -> Rotation:
    rot = _forward_edge(origin, target, ep)
    if rot is not None:
        return rot
    rot = _forward_edge(target, origin, ep)
    if rot is None:
        raise AssertionError(f"no direct rotation between {origin} and {target}")
    return rot.transpose()


_DIRECT = frozenset(
    {
        (FrameKind.ICRF, FrameKind.IAU),
        (FrameKind.ICRF, FrameKind.CIRF),
        (FrameKind.CIRF, FrameKind.TIRF),
        (FrameKind.TIRF, FrameKind.ITRF),
        (FrameKind.ICRF, FrameKind.MOD),
        (FrameKind.MOD, FrameKind.TOD),
        (FrameKind.TOD, FrameKind.PEF),
        (FrameKind.PEF, FrameKind.ITRF),
        (FrameKind.PEF, FrameKind.TEME),
    }
)

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------

# Intermediate frames per kind pair.  A ``None`` system is taken from the
# equinox-based endpoint.  Reverse paths are the same frames reversed.
_S = None
_96 = ReferenceSystem.IERS1996

_ICRF = (FrameKind.ICRF, _S)
_CIRF = (FrameKind.CIRF, _S)
_TIRF = (FrameKind.TIRF, _S)
_ITRF = (FrameKind.ITRF, _S)
_MOD = (FrameKind.MOD, _S)
_TOD = (FrameKind.TOD, _S)
_PEF = (FrameKind.PEF, _S)
_MOD96 = (FrameKind.MOD, _96)
_TOD96 = (FrameKind.TOD, _96)
_PEF96 = (FrameKind.PEF, _96)

_VIA: dict[tuple[FrameKind, FrameKind], tuple[tuple[FrameKind, ReferenceSystem | None], ...]] = {
    (FrameKind.CIRF, FrameKind.IAU): (_ICRF,),
    (FrameKind.CIRF, FrameKind.ITRF): (_TIRF,),
    (FrameKind.CIRF, FrameKind.MOD): (_ICRF,),
    (FrameKind.CIRF, FrameKind.TOD): (_ICRF, _MOD),
    (FrameKind.CIRF, FrameKind.PEF): (_ICRF, _MOD, _TOD),
    (FrameKind.CIRF, FrameKind.TEME): (_ICRF, _MOD96, _TOD96, _PEF96),
    (FrameKind.IAU, FrameKind.TIRF): (_ICRF, _CIRF),
    (FrameKind.IAU, FrameKind.ITRF): (_ICRF, _CIRF, _TIRF),
    (FrameKind.IAU, FrameKind.MOD): (_ICRF,),
    (FrameKind.IAU, FrameKind.TOD): (_ICRF, _MOD),
    (FrameKind.IAU, FrameKind.PEF): (_ICRF, _MOD, _TOD),
    (FrameKind.IAU, FrameKind.TEME): (_ICRF, _MOD96, _TOD96, _PEF96),
    (FrameKind.ICRF, FrameKind.TIRF): (_CIRF,),
    (FrameKind.ICRF, FrameKind.ITRF): (_CIRF, _TIRF),
    (FrameKind.ICRF, FrameKind.TOD): (_MOD,),
    (FrameKind.ICRF, FrameKind.PEF): (_MOD, _TOD),
    (FrameKind.ICRF, FrameKind.TEME): (_MOD96, _TOD96, _PEF96),
    (FrameKind.ITRF, FrameKind.MOD): (_PEF, _TOD),
    (FrameKind.ITRF, FrameKind.TOD): (_PEF,),
    (FrameKind.ITRF, FrameKind.TEME): (_PEF96,),
    (FrameKind.MOD, FrameKind.TIRF): (_ICRF, _CIRF),
    (FrameKind.MOD, FrameKind.PEF): (_TOD,),
    (FrameKind.MOD, FrameKind.TEME): (_TOD, _PEF),
    (FrameKind.PEF, FrameKind.TIRF): (_ITRF,),
    (FrameKind.TEME, FrameKind.TIRF): (_PEF96, _ITRF),
    (FrameKind.TEME, FrameKind.TOD): (_PEF,),
    (FrameKind.TIRF, FrameKind.TOD): (_CIRF, _ICRF, _MOD),
}

_MISMATCH_CHECKED = frozenset(
    {
        frozenset({FrameKind.MOD, FrameKind.TOD}),
        frozenset({FrameKind.MOD, FrameKind.PEF}),
        frozenset({FrameKind.TOD, FrameKind.PEF}),
    }
)


def _frame(kind: FrameKind, system: ReferenceSystem | None) -> Frame:
    if kind is FrameKind.ICRF:
        return ICRF
    if kind is FrameKind.CIRF:
        return CIRF
    if kind is FrameKind.TIRF:
        return TIRF
    if kind is FrameKind.ITRF:
        return ITRF
    return Frame._from_internal(kind, system)


def _same_kind_path(origin: Frame, target: Frame) -> list[Frame]:
    kind = origin.kind()
    if kind is FrameKind.TOD:
        return [Frame.mod(origin.reference_system()), ICRF, Frame.mod(target.reference_system())]
    if kind is FrameKind.PEF:
        return [ITRF]
    # MOD with two systems, or two distinct IAU bodies
    return [ICRF]


def frame_path(origin: FrameLike, target: FrameLike) -> list[Frame]:
    """Frames visited between *origin* and *target*, endpoints included.

    Raises:
        IncompatibleReferenceSystems: For MOD, TOD and PEF frames of
            different IERS systems connected through the equinox chain.

    Examples:
        ```python
        [str(f) for f in frame_path("ICRF", "TEME")]
        # ['ICRF', 'MOD(IERS1996)', 'TOD(IERS1996)', 'PEF(IERS1996)', 'TEME']
        ```
    """
    origin, target = Frame(origin), Frame(target)
    if origin == target:
        return [origin]
    ko, kt = origin.kind(), target.kind()
    if ko is kt:
        return [origin, *_same_kind_path(origin, target), target]
    so, st = origin.reference_system(), target.reference_system()
    if frozenset({ko, kt}) in _MISMATCH_CHECKED and so is not st:
        raise IncompatibleReferenceSystems(origin, target)
    if (ko, kt) in _DIRECT or (kt, ko) in _DIRECT:
        return [origin, target]
    system = so or st
    if (ko, kt) in _VIA:
        via = _VIA[(ko, kt)]
    else:
        via = tuple(reversed(_VIA[(kt, ko)]))
    return [origin, *(_frame(kind, fixed or system) for kind, fixed in via), target]


def rotation(
    origin: FrameLike,
    target: FrameLike,
    time: Time,
    provider: RotationProvider | None = None,
) -> Rotation:
    """Rotation (matrix and derivative) from *origin* to *target* at *time*.

    Args:
        origin: Source frame.
        target: Destination frame.
        time: Epoch in any continuous scale.
        provider: Earth orientation data for UT1, pole corrections and
            polar motion. Default: ``None``.

    Returns:
        Rotation: Maps ``(r, v)`` in *origin* to *target*.

    Raises:
        IncompatibleReferenceSystems: See :func:`frame_path`.
        EopUnavailable: If an edge needs UT1 and *provider* cannot supply it.

    Examples:
        ```python
        from lox_space.frames import rotation
        from lox_space.time import Time
        rot = rotation("ICRF", "ITRF", Time("TAI", 2024, 1, 1), provider)
        r_itrf, v_itrf = rot.apply(r_icrf, v_icrf)
        ```
    """
    path = frame_path(origin, target)
    logger.debug("rotation path: %s", " -> ".join(str(frame) for frame in path))
    ep = _Epochs(time, provider)
    rot = Rotation.identity()
    for a, b in zip(path[:-1], path[1:]):
        rot = rot.compose(_edge(a, b, ep))
    return rot
