"""Reference frame identifiers.

A :class:`Frame` is a value: a :class:`FrameKind` plus, for the
equinox-based frames (MOD, TOD, PEF), the IERS :class:`ReferenceSystem`
whose models define it, or, for body-fixed IAU frames, the
:class:`~lox_space.bodies.Origin` whose rotational elements define it.

Frames are parsed from their abbreviations::

    Frame("ICRF")
    Frame("MOD(IERS1996)")
    Frame("TOD")            # IERS2003/IAU2000A
    Frame("IAU_MOON")
"""

from __future__ import annotations

import enum

from lox_space.bodies import Origin
from lox_space.errors import InvalidInput, UnknownFrame, UnknownOrigin
from lox_space.frames.iers import ReferenceSystem


class FrameKind(enum.Enum):
    ICRF = "ICRF"
    CIRF = "CIRF"
    TIRF = "TIRF"
    ITRF = "ITRF"
    MOD = "MOD"
    TOD = "TOD"
    PEF = "PEF"
    TEME = "TEME"
    IAU = "IAU"


_NAMES = {
    FrameKind.ICRF: "International Celestial Reference Frame",
    FrameKind.CIRF: "Celestial Intermediate Reference Frame",
    FrameKind.TIRF: "Terrestrial Intermediate Reference Frame",
    FrameKind.ITRF: "International Terrestrial Reference Frame",
    FrameKind.MOD: "Mean of Date",
    FrameKind.TOD: "True of Date",
    FrameKind.PEF: "Pseudo-Earth Fixed",
    FrameKind.TEME: "True Equator Mean Equinox",
}

_EQUINOX_BASED = (FrameKind.MOD, FrameKind.TOD, FrameKind.PEF)
_INERTIAL = (FrameKind.ICRF, FrameKind.MOD, FrameKind.TOD)
_ROTATING = (FrameKind.TIRF, FrameKind.ITRF, FrameKind.PEF, FrameKind.IAU)

DEFAULT_SYSTEM = ReferenceSystem.IERS2003_A
"""System of a bare ``MOD``/``TOD``/``PEF``."""


class Frame:
    """A reference frame.

    Args:
        name: Abbreviation such as ``"ICRF"``, ``"TOD(IERS1996)"`` or
            ``"IAU_EARTH"``.

    Raises:
        UnknownFrame: If *name* is not a known frame.

    Examples:
        ```python
        from lox_space.frames import Frame
        Frame("MOD(IERS2010)").reference_system()  # ReferenceSystem.IERS2010
        Frame("IAU_JUPITER").origin().id()  # 599
        ```
    """

    __slots__ = ("_kind", "_system", "_origin")

    def __new__(cls, name: str | Frame) -> Frame:
        if isinstance(name, Frame):
            return name
        return cls.from_name(name)

    @classmethod
    def _from_internal(
        cls,
        kind: FrameKind,
        system: ReferenceSystem | None = None,
        origin: Origin | None = None,
    ) -> Frame:
        obj = object.__new__(cls)
        obj._kind = kind
        obj._system = system
        obj._origin = origin
        return obj

    @classmethod
    def from_name(cls, name: str) -> Frame:
        key = name.strip()
        upper = key.upper()
        if upper.startswith("IAU_"):
            return cls._iau_from_name(name, key[4:])
        base, _, rest = upper.partition("(")
        try:
            kind = FrameKind(base.strip())
        except ValueError:
            raise UnknownFrame(name) from None
        if kind is FrameKind.IAU:
            raise UnknownFrame(name)
        if kind not in _EQUINOX_BASED:
            if rest:
                raise UnknownFrame(name)
            return cls._from_internal(kind)
        if not rest:
            return cls._from_internal(kind, DEFAULT_SYSTEM)
        if not rest.endswith(")"):
            raise UnknownFrame(name)
        try:
            system = ReferenceSystem.parse(rest[:-1])
        except InvalidInput:
            raise UnknownFrame(name) from None
        return cls._from_internal(kind, system)

    @classmethod
    def _iau_from_name(cls, name: str, body: str) -> Frame:
        try:
            origin = Origin(body.replace("_", " "))
        except UnknownOrigin:
            raise UnknownFrame(name) from None
        if not origin.has_rotational_elements():
            raise UnknownFrame(name)
        return cls._from_internal(FrameKind.IAU, origin=origin)

    # -----------------------------------------------------------------------
    # Factories
    # -----------------------------------------------------------------------

    @classmethod
    def icrf(cls) -> Frame:
        return cls._from_internal(FrameKind.ICRF)

    @classmethod
    def cirf(cls) -> Frame:
        return cls._from_internal(FrameKind.CIRF)

    @classmethod
    def tirf(cls) -> Frame:
        return cls._from_internal(FrameKind.TIRF)

    @classmethod
    def itrf(cls) -> Frame:
        return cls._from_internal(FrameKind.ITRF)

    @classmethod
    def teme(cls) -> Frame:
        return cls._from_internal(FrameKind.TEME)

    @classmethod
    def mod(cls, system: ReferenceSystem | str = DEFAULT_SYSTEM) -> Frame:
        return cls._from_internal(FrameKind.MOD, ReferenceSystem.parse(system))

    @classmethod
    def tod(cls, system: ReferenceSystem | str = DEFAULT_SYSTEM) -> Frame:
        return cls._from_internal(FrameKind.TOD, ReferenceSystem.parse(system))

    @classmethod
    def pef(cls, system: ReferenceSystem | str = DEFAULT_SYSTEM) -> Frame:
        return cls._from_internal(FrameKind.PEF, ReferenceSystem.parse(system))

    @classmethod
    def iau(cls, origin: Origin | str | int) -> Frame:
        """Body-fixed frame of *origin*.

        Raises:
            UnknownFrame: If the origin has no rotational elements.
        """
        origin = Origin(origin)
        if not origin.has_rotational_elements():
            raise UnknownFrame(f"IAU_{origin.name()}")
        return cls._from_internal(FrameKind.IAU, origin=origin)

    # -----------------------------------------------------------------------
    # Accessors
    # -----------------------------------------------------------------------

    def kind(self) -> FrameKind:
        return self._kind

    def reference_system(self) -> ReferenceSystem | None:
        """IERS system of an equinox-based frame, ``None`` otherwise."""
        return self._system

    def origin(self) -> Origin | None:
        """Body of an IAU frame, ``None`` otherwise."""
        return self._origin

    def name(self) -> str:
        if self._kind is FrameKind.IAU:
            body = self._origin.name()
            if body in ("Sun", "Moon"):
                body = f"the {body}"
            return f"IAU Body-Fixed Reference Frame for {body}"
        return _NAMES[self._kind]

    def abbreviation(self) -> str:
        if self._kind is FrameKind.IAU:
            body = self._origin.name().upper().replace(" ", "_").replace("-", "_")
            return f"IAU_{body}"
        if self._system is not None:
            return f"{self._kind.value}({self._system.value})"
        return self._kind.value

    def is_inertial(self) -> bool:
        return self._kind in _INERTIAL

    def is_rotating(self) -> bool:
        return self._kind in _ROTATING

    # -----------------------------------------------------------------------
    # Protocols
    # -----------------------------------------------------------------------

    def _key(self) -> tuple:
        return (self._kind, self._system, self._origin)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Frame):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __reduce__(self):
        return (Frame.from_name, (self.abbreviation(),))

    def __str__(self) -> str:
        return self.abbreviation()

    def __repr__(self) -> str:
        return f'Frame("{self.abbreviation()}")'


ICRF = Frame.icrf()
CIRF = Frame.cirf()
TIRF = Frame.tirf()
ITRF = Frame.itrf()
TEME = Frame.teme()
