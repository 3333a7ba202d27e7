"""Celestial origins: bodies, barycenters and their physical properties.

The catalogue is generated from the records in :mod:`lox_space.bodies._data`
by :func:`_build_catalogue`; there is one :class:`Origin` per record and no
per-body code.  Properties a body does not define raise
:class:`~lox_space.errors.UndefinedOriginProperty` when requested.

Rotational elements follow the IAU WGCCRE model.  For an epoch ``t`` in TDB
seconds since J2000:

- right ascension ``alpha = a0 + a1*T + a2*T^2 + sum(a_i * sin(theta_i))``,
- declination ``delta = d0 + d1*T + d2*T^2 + sum(d_i * cos(theta_i))``,
- prime meridian ``W = w0 + w1*d + w2*d^2 + sum(w_i * sin(theta_i))``,

with ``T`` in Julian centuries, ``d`` in days and
``theta_i = theta0_i + theta1_i * T`` the nutation/precession angles of the
body's system barycenter.
"""

from __future__ import annotations

import enum
import math
from typing import NamedTuple

from lox_space.bodies._data import BODIES, NUTATION_PRECESSION, BodyRecord
from lox_space.constants import DEG2RAD, SECONDS_PER_DAY, SECONDS_PER_JULIAN_CENTURY
from lox_space.errors import UndefinedOriginProperty, UnknownOrigin


class ElementKind(enum.Enum):
    RIGHT_ASCENSION = "right_ascension"
    DECLINATION = "declination"
    ROTATION = "rotation"


class RotationalElement(NamedTuple):
    """One rotational element in radians.

    Attributes:
        kind: Which element this is; selects the time unit and the periodic
            function (``cos`` for the declination, ``sin`` otherwise).
        c0: Constant term [rad].
        c1: Linear rate [rad/century] or [rad/day] for the rotation.
        c2: Quadratic rate.
        c: Periodic-term amplitudes [rad].
    """

    kind: ElementKind
    c0: float
    c1: float
    c2: float
    c: tuple[float, ...] = ()

    @property
    def _dt(self) -> float:
        return SECONDS_PER_DAY if self.kind is ElementKind.ROTATION else SECONDS_PER_JULIAN_CENTURY

    def angle(self, theta: tuple[tuple[float, float], ...], t: float) -> float:
        """Element value [rad] at *t* seconds since J2000 TDB."""
        dt = self._dt
        value = self.c0 + self.c1 * t / dt + self.c2 * t**2 / dt**2
        trig = math.cos if self.kind is ElementKind.DECLINATION else math.sin
        centuries = t / SECONDS_PER_JULIAN_CENTURY
        for ci, (theta0, theta1) in zip(self.c, theta):
            value += ci * trig(theta0 + theta1 * centuries)
        return value

    def angle_dot(self, theta: tuple[tuple[float, float], ...], t: float) -> float:
        """Element rate [rad/s] at *t* seconds since J2000 TDB."""
        dt = self._dt
        value = self.c1 / dt + 2.0 * self.c2 * t / dt**2
        centuries = t / SECONDS_PER_JULIAN_CENTURY
        for ci, (theta0, theta1) in zip(self.c, theta):
            arg = theta0 + theta1 * centuries
            rate = ci * theta1 / SECONDS_PER_JULIAN_CENTURY
            if self.kind is ElementKind.DECLINATION:
                value -= rate * math.sin(arg)
            else:
                value += rate * math.cos(arg)
        return value


class RotationalElements(NamedTuple):
    """Right ascension, declination and prime meridian of a body."""

    right_ascension: RotationalElement
    declination: RotationalElement
    rotation: RotationalElement
    theta: tuple[tuple[float, float], ...] = ()

    def at(self, t: float) -> tuple[float, float, float]:
        return (
            self.right_ascension.angle(self.theta, t),
            self.declination.angle(self.theta, t),
            self.rotation.angle(self.theta, t),
        )

    def rates_at(self, t: float) -> tuple[float, float, float]:
        return (
            self.right_ascension.angle_dot(self.theta, t),
            self.declination.angle_dot(self.theta, t),
            self.rotation.angle_dot(self.theta, t),
        )


class Origin:
    """A celestial body or barycenter identified by its NAIF id.

    ``Origin("Earth")``, ``Origin("earth")`` and ``Origin(399)`` all return
    the same catalogue entry.

    Args:
        name_or_id: Name or alias (case-insensitive) or NAIF id.

    Raises:
        UnknownOrigin: If no origin matches.

    Examples:
        ```python
        from lox_space.bodies import Origin
        earth = Origin("Earth")
        earth.gravitational_parameter()  # 398600.435...
        ```
    """

    __slots__ = ("_id", "_name", "_gm", "_radii", "_mean_radius", "_elements")

    def __new__(cls, name_or_id: str | int | Origin) -> Origin:
        if isinstance(name_or_id, Origin):
            return name_or_id
        if isinstance(name_or_id, int):
            return cls.from_id(name_or_id)
        return cls.from_name(name_or_id)

    @classmethod
    def _from_internal(
        cls,
        naif_id: int,
        name: str,
        gm: float | None,
        radii: tuple[float, float, float] | None,
        mean_radius: float | None,
        elements: RotationalElements | None,
    ) -> Origin:
        obj = object.__new__(cls)
        obj._id = naif_id
        obj._name = name
        obj._gm = gm
        obj._radii = radii
        obj._mean_radius = mean_radius
        obj._elements = elements
        return obj

    @classmethod
    def from_name(cls, name: str) -> Origin:
        try:
            return _BY_NAME[name.strip().lower()]
        except KeyError:
            raise UnknownOrigin(name) from None

    @classmethod
    def from_id(cls, naif_id: int) -> Origin:
        try:
            return _BY_ID[int(naif_id)]
        except KeyError:
            raise UnknownOrigin(naif_id) from None

    def __reduce__(self):
        return (Origin.from_id, (self._id,))

    # -----------------------------------------------------------------------
    # Identity
    # -----------------------------------------------------------------------

    def id(self) -> int:
        return self._id

    def name(self) -> str:
        return self._name

    def is_barycenter(self) -> bool:
        return 0 <= self._id < 10

    def barycenter(self) -> Origin:
        """System barycenter this origin orbits.

        Planets and their satellites map to their planetary system
        barycenter; everything else, including the barycenters themselves,
        maps to the solar system barycenter.
        """
        if 100 < self._id < 1000 and self._id % 100 != 0:
            return _BY_ID[self._id // 100]
        return _BY_ID[0]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Origin):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __str__(self) -> str:
        return self._name

    def __repr__(self) -> str:
        return f'Origin("{self._name}")'

    # -----------------------------------------------------------------------
    # Physical properties
    # -----------------------------------------------------------------------

    def gravitational_parameter(self) -> float:
        """Gravitational parameter [km^3/s^2].

        Raises:
            UndefinedOriginProperty: If the origin has no GM.
        """
        if self._gm is None:
            raise UndefinedOriginProperty(self._name, "gravitational parameter")
        return self._gm

    def radii(self) -> tuple[float, float, float]:
        """Tri-axial radii ``(a, b, c)`` [km]."""
        if self._radii is None:
            raise UndefinedOriginProperty(self._name, "radii")
        return self._radii

    def equatorial_radius(self) -> float:
        return self.radii()[0]

    def polar_radius(self) -> float:
        return self.radii()[2]

    def flattening(self) -> float:
        equatorial, polar = self.equatorial_radius(), self.polar_radius()
        return (equatorial - polar) / equatorial

    def mean_radius(self) -> float:
        if self._mean_radius is None:
            raise UndefinedOriginProperty(self._name, "mean radius")
        return self._mean_radius

    def has_rotational_elements(self) -> bool:
        return self._elements is not None

    def rotational_elements(self, et: float) -> tuple[float, float, float]:
        """Right ascension, declination and prime meridian angle [rad].

        Args:
            et: TDB seconds since J2000.

        Raises:
            UndefinedOriginProperty: If the body has no rotational elements.
        """
        if self._elements is None:
            raise UndefinedOriginProperty(self._name, "rotational elements")
        return self._elements.at(et)

    def rotational_element_rates(self, et: float) -> tuple[float, float, float]:
        """Rates of :meth:`rotational_elements` [rad/s]."""
        if self._elements is None:
            raise UndefinedOriginProperty(self._name, "rotational elements")
        return self._elements.rates_at(et)

    def right_ascension(self, et: float) -> float:
        return self.rotational_elements(et)[0]

    def declination(self, et: float) -> float:
        return self.rotational_elements(et)[1]

    def rotation_angle(self, et: float) -> float:
        return self.rotational_elements(et)[2]

    def rotation_rate(self, et: float) -> float:
        return self.rotational_element_rates(et)[2]


# ---------------------------------------------------------------------------
# Catalogue generation
# ---------------------------------------------------------------------------


def _element(kind: ElementKind, coefficients: tuple[float, float, float], terms: tuple[float, ...]) -> RotationalElement:
    c0, c1, c2 = (value * DEG2RAD for value in coefficients)
    return RotationalElement(kind, float(c0), float(c1), float(c2), tuple(float(a * DEG2RAD) for a in terms))


def _rotational_elements(record: BodyRecord) -> RotationalElements | None:
    if record.right_ascension is None:
        return None
    barycenter = record.naif_id // 100 if 100 < record.naif_id < 1000 else None
    theta = tuple(
        (float(theta0 * DEG2RAD), float(theta1 * DEG2RAD))
        for theta0, theta1 in NUTATION_PRECESSION.get(barycenter, ())
    )
    return RotationalElements(
        _element(ElementKind.RIGHT_ASCENSION, record.right_ascension, record.right_ascension_terms),
        _element(ElementKind.DECLINATION, record.declination, record.declination_terms),
        _element(ElementKind.ROTATION, record.prime_meridian, record.prime_meridian_terms),
        theta,
    )


def _build_origin(record: BodyRecord) -> Origin:
    mean_radius = record.mean_radius
    if mean_radius is None and record.radii is not None:
        mean_radius = sum(record.radii) / 3.0
    return Origin._from_internal(
        record.naif_id,
        record.name,
        record.gm,
        record.radii,
        mean_radius,
        _rotational_elements(record),
    )


def _build_catalogue(records: tuple[BodyRecord, ...]) -> tuple[dict[int, Origin], dict[str, Origin]]:
    by_id: dict[int, Origin] = {}
    by_name: dict[str, Origin] = {}
    for record in records:
        origin = _build_origin(record)
        by_id[record.naif_id] = origin
        for key in (record.name, *record.aliases):
            by_name[key.lower()] = origin
            by_name[key.lower().replace(" ", "_")] = origin
    return by_id, by_name


_BY_ID, _BY_NAME = _build_catalogue(BODIES)


def all_origins() -> list[Origin]:
    """Every catalogue entry, ordered by NAIF id."""
    return [_BY_ID[naif_id] for naif_id in sorted(_BY_ID)]
