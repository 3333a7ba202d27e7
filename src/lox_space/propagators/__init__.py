"""Orbit propagators.

- :class:`Vallado`: two-body propagation with universal variables.
- :class:`SGP4`: SGP4/SDP4 propagation of Two-Line Element sets.
- :class:`GroundPropagator`: inertial states of a fixed ground location.

Every propagator accepts a single :class:`~lox_space.time.Time`, returning a
:class:`~lox_space.orbits.State`, or a sequence of epochs, returning a
:class:`~lox_space.orbits.Trajectory`.
"""

from lox_space.propagators._base import Propagator
from lox_space.propagators._ground import GroundPropagator
from lox_space.propagators._sgp4 import GRAVITY_MODELS, SGP4, SGP4_VALIDITY_HORIZON
from lox_space.propagators._tle import Tle, compute_checksum, validate_tle_line
from lox_space.propagators._vallado import (
    VALLADO_MAX_ITER,
    VALLADO_TOLERANCE,
    Vallado,
    stumpff_c2,
    stumpff_c3,
    universal_kepler,
)

__all__ = [
    "GRAVITY_MODELS",
    "GroundPropagator",
    "Propagator",
    "SGP4",
    "SGP4_VALIDITY_HORIZON",
    "Tle",
    "VALLADO_MAX_ITER",
    "VALLADO_TOLERANCE",
    "Vallado",
    "compute_checksum",
    "stumpff_c2",
    "stumpff_c3",
    "universal_kepler",
    "validate_tle_line",
]
