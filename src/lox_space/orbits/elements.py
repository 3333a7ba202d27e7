"""Conversions between Cartesian states and Keplerian elements.

The element set is ``[a, e, i, raan, argp, nu]`` with distances in *km* and
angles in *rad*.  Circular orbits (``e < tol``) have no periapsis, so the
argument of periapsis is fixed at zero and the true anomaly is measured from
the ascending node; equatorial orbits (``i < tol``) have no node, so the
right ascension of the ascending node is fixed at zero and angles are
measured from the x-axis.  Both functions are JAX-traceable.
"""

from __future__ import annotations

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from lox_space.config import get_dtype
from lox_space.orbits.anomalies import eccentric_to_true, hyperbolic_to_true

KEPLERIAN_TOLERANCE = 1e-11
"""Eccentricity and inclination below which an orbit counts as circular or equatorial."""

_TWO_PI = 2.0 * jnp.pi


def _azimuth(v: Array) -> Array:
    return jnp.arctan2(v[1], v[0])


def _rx(angle: Array) -> Array:
    # active rotation: rotates vectors, not axes
    c, s = jnp.cos(angle), jnp.sin(angle)
    zero, one = jnp.zeros_like(c), jnp.ones_like(c)
    return jnp.array([[one, zero, zero], [zero, c, -s], [zero, s, c]])


def _rz(angle: Array) -> Array:
    c, s = jnp.cos(angle), jnp.sin(angle)
    zero, one = jnp.zeros_like(c), jnp.ones_like(c)
    return jnp.array([[c, -s, zero], [s, c, zero], [zero, zero, one]])


def eccentricity_vector(r: ArrayLike, v: ArrayLike, mu: float) -> Array:
    """Eccentricity vector ``((v^2 - mu/|r|) r - (r.v) v) / mu``."""
    dtype = get_dtype()
    r = jnp.asarray(r, dtype=dtype)
    v = jnp.asarray(v, dtype=dtype)
    rm = jnp.linalg.norm(r)
    return (r * (jnp.dot(v, v) - mu / rm) - v * jnp.dot(r, v)) / mu


def cartesian_to_keplerian(
    r: ArrayLike,
    v: ArrayLike,
    mu: float,
    tol: float = KEPLERIAN_TOLERANCE,
) -> Array:
    """Convert an inertial Cartesian state to Keplerian elements.

    Args:
        r: Position. Units: *km*
        v: Velocity. Units: *km/s*
        mu: Gravitational parameter of the central body. Units: *km^3/s^2*
        tol: Circular/equatorial threshold. Default: 1e-11

    Returns:
        Array of ``[a, e, i, raan, argp, nu]``. ``raan`` and ``argp`` are in
        ``[0, 2pi)``, ``nu`` in ``[0, 2pi)``. Hyperbolic orbits have ``a < 0``.

    Examples:
        ```python
        from lox_space.orbits.elements import cartesian_to_keplerian
        oe = cartesian_to_keplerian([7000.0, 0.0, 0.0], [0.0, 7.5, 1.0], 398600.4418)
        ```
    """
    dtype = get_dtype()
    r = jnp.asarray(r, dtype=dtype)
    v = jnp.asarray(v, dtype=dtype)
    ez = jnp.array([0.0, 0.0, 1.0], dtype=dtype)

    rm = jnp.linalg.norm(r)
    v2 = jnp.dot(v, v)
    rv = jnp.dot(r, v)
    h = jnp.cross(r, v)
    hm = jnp.linalg.norm(h)
    node = jnp.cross(ez, h)
    e_vec = eccentricity_vector(r, v, mu)
    ecc = jnp.linalg.norm(e_vec)
    inc = jnp.arctan2(jnp.linalg.norm(h[:2]), h[2])

    circular = ecc < tol
    equatorial = jnp.abs(inc) < tol

    sma = jnp.where(circular, hm**2 / mu, -mu / (2.0 * (v2 / 2.0 - mu / rm)))

    # General case
    e_se = rv / jnp.sqrt(mu * jnp.abs(sma))
    e_ce = rm * v2 / mu - 1.0
    nu_ell = eccentric_to_true(jnp.arctan2(e_se, e_ce), ecc)
    nu_hyp = hyperbolic_to_true(jnp.log((e_ce + e_se) / (e_ce - e_se)) / 2.0, ecc)
    nu_gen = jnp.where(sma > 0.0, nu_ell, nu_hyp)
    u = jnp.arctan2(jnp.dot(r, jnp.cross(h, node)) / hm, jnp.dot(r, node))

    # Equatorial, eccentric
    nu_eq = jnp.arctan2(jnp.dot(h, jnp.cross(e_vec, r)) / hm, jnp.dot(r, e_vec))

    raan = jnp.where(equatorial, 0.0, _azimuth(node))
    argp = jnp.where(
        circular,
        0.0,
        jnp.where(equatorial, _azimuth(e_vec), u - nu_gen),
    )
    nu = jnp.where(
        circular,
        jnp.where(equatorial, _azimuth(r), u),
        jnp.where(equatorial, nu_eq, nu_gen),
    )

    return jnp.array([sma, ecc, inc, raan % _TWO_PI, argp % _TWO_PI, nu % _TWO_PI])


def keplerian_to_cartesian(oe: ArrayLike, mu: float, tol: float = KEPLERIAN_TOLERANCE) -> tuple[Array, Array]:
    """Convert Keplerian elements to an inertial Cartesian state.

    The state is built in the perifocal frame and rotated by
    ``Rz(raan) Rx(i) Rz(argp)``.

    Args:
        oe: ``[a, e, i, raan, argp, nu]``. Units: *km*, *rad*
        mu: Gravitational parameter. Units: *km^3/s^2*
        tol: Circular threshold. Default: 1e-11

    Returns:
        tuple[Array, Array]: Position [km] and velocity [km/s].
    """
    oe = jnp.asarray(oe, dtype=get_dtype())
    sma, ecc, inc, raan, argp, nu = oe[0], oe[1], oe[2], oe[3], oe[4], oe[5]

    p = jnp.where(ecc < tol, sma, sma * (1.0 - ecc**2))
    cos_nu, sin_nu = jnp.cos(nu), jnp.sin(nu)
    zero = jnp.zeros_like(nu)

    r_pqw = p / (1.0 + ecc * cos_nu) * jnp.array([cos_nu, sin_nu, zero])
    v_pqw = jnp.sqrt(mu / p) * jnp.array([-sin_nu, ecc + cos_nu, zero])

    rot = _rz(raan) @ _rx(inc) @ _rz(argp)
    return rot @ r_pqw, rot @ v_pqw


def orbital_period(sma: ArrayLike, mu: float) -> Array:
    """Period of an elliptic orbit, ``2 pi sqrt(a^3 / mu)``. Units: *s*"""
    sma = jnp.asarray(sma, dtype=get_dtype())
    return _TWO_PI * jnp.sqrt(sma**3 / mu)


def rotation_lvlh(r: ArrayLike, v: ArrayLike) -> Array:
    """Rotation matrix whose columns are the LVLH axes in the inertial frame.

    ``Z`` points to the central body (``-r``), ``Y`` opposite the orbit
    normal and ``X = Y x Z`` completes the triad (along-track for circular
    orbits).  ``M.T @ x_inertial`` expresses a vector in LVLH.
    """
    dtype = get_dtype()
    r = jnp.asarray(r, dtype=dtype)
    v = jnp.asarray(v, dtype=dtype)
    h = jnp.cross(r, v)
    z = -r / jnp.linalg.norm(r)
    y = -h / jnp.linalg.norm(h)
    x = jnp.cross(y, z)
    return jnp.stack([x, y, z], axis=1)
