"""Orbit representations.

- :class:`State`: Cartesian position and velocity in a frame.
- :class:`Keplerian`: classical orbital elements.
- :class:`Trajectory`: interpolated sequence of states.
- :class:`GroundLocation`: geodetic point on a body, with topocentric
  :class:`Observables`.
- Anomaly conversions for elliptic, parabolic and hyperbolic orbits.
"""

from lox_space.orbits.anomalies import (
    eccentric_to_mean,
    eccentric_to_true,
    hyperbolic_asymptote_angle,
    hyperbolic_to_mean,
    hyperbolic_to_true,
    mean_to_eccentric,
    mean_to_hyperbolic,
    mean_to_parabolic,
    mean_to_true,
    parabolic_to_mean,
    parabolic_to_true,
    true_to_eccentric,
    true_to_hyperbolic,
    true_to_mean,
    true_to_parabolic,
)
from lox_space.orbits.elements import (
    KEPLERIAN_TOLERANCE,
    cartesian_to_keplerian,
    eccentricity_vector,
    keplerian_to_cartesian,
    orbital_period,
    rotation_lvlh,
)
from lox_space.orbits.ground import (
    GroundLocation,
    Observables,
    body_fixed_to_geodetic,
    geodetic_to_body_fixed,
    rotation_to_topocentric,
)
from lox_space.orbits.states import Keplerian, State
from lox_space.orbits.trajectory import Trajectory

__all__ = [
    "GroundLocation",
    "KEPLERIAN_TOLERANCE",
    "Keplerian",
    "Observables",
    "State",
    "Trajectory",
    "body_fixed_to_geodetic",
    "cartesian_to_keplerian",
    "eccentric_to_mean",
    "eccentric_to_true",
    "eccentricity_vector",
    "geodetic_to_body_fixed",
    "hyperbolic_asymptote_angle",
    "hyperbolic_to_mean",
    "hyperbolic_to_true",
    "keplerian_to_cartesian",
    "mean_to_eccentric",
    "mean_to_hyperbolic",
    "mean_to_parabolic",
    "mean_to_true",
    "orbital_period",
    "parabolic_to_mean",
    "parabolic_to_true",
    "rotation_lvlh",
    "rotation_to_topocentric",
    "true_to_eccentric",
    "true_to_hyperbolic",
    "true_to_mean",
    "true_to_parabolic",
]
