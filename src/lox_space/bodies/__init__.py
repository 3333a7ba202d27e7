"""Celestial bodies and barycenters.

- :class:`Origin`: catalogue entry with GM, radii and rotational elements.
- Module constants for the most common origins (``EARTH``, ``MOON``, ...).
"""

from lox_space.bodies.origins import (
    ElementKind,
    Origin,
    RotationalElement,
    RotationalElements,
    all_origins,
)

SSB = Origin(0)
SUN = Origin("Sun")
MERCURY = Origin("Mercury")
VENUS = Origin("Venus")
EARTH = Origin("Earth")
MOON = Origin("Moon")
MARS = Origin("Mars")
JUPITER = Origin("Jupiter")
SATURN = Origin("Saturn")
URANUS = Origin("Uranus")
NEPTUNE = Origin("Neptune")
PLUTO = Origin("Pluto")

__all__ = [
    "EARTH",
    "JUPITER",
    "MARS",
    "MERCURY",
    "MOON",
    "NEPTUNE",
    "PLUTO",
    "SATURN",
    "SSB",
    "SUN",
    "URANUS",
    "VENUS",
    "ElementKind",
    "Origin",
    "RotationalElement",
    "RotationalElements",
    "all_origins",
]
