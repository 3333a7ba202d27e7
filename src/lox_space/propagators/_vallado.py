"""Two-body propagation with universal variables (Vallado, Algorithm 8).

The universal anomaly ``xi`` solves the time equation

    sqrt(mu) dt = xi^3 c3(psi) + (r0.v0 / sqrt(mu)) xi^2 c2(psi)
                  + |r0| xi (1 - psi c3(psi)),        psi = alpha xi^2

with Newton-Raphson, for elliptic, parabolic and hyperbolic orbits alike.
The state follows from the Lagrange f and g coefficients.

References:
    1. D. Vallado, *Fundamentals of Astrodynamics and Applications*,
       4th ed., 2013, pp. 93-98.
"""

from __future__ import annotations

from functools import partial

import jax
import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from lox_space.config import get_dtype
from lox_space.errors import DidNotConverge, FrameRequiresInertial
from lox_space.orbits import State
from lox_space.propagators._base import Propagator
from lox_space.time import Time

VALLADO_MAX_ITER = 50
VALLADO_TOLERANCE = 1e-9

# Number of terms of the Stumpff series used for |psi| <= 1
_SERIES_TERMS = 10


def _series(psi: Array, offset: int) -> Array:
    """``sum_k (-psi)^k / (2k + offset)!`` by Horner's rule."""
    total = jnp.ones_like(psi)
    for k in range(_SERIES_TERMS, 0, -1):
        total = 1.0 - psi * total / ((2 * k + offset) * (2 * k + offset - 1))
    fact = 1.0
    for n in range(2, offset + 1):
        fact *= n
    return total / fact


def stumpff_c2(psi: ArrayLike) -> Array:
    """Stumpff function ``c2(psi) = (1 - cos sqrt(psi)) / psi``."""
    psi = jnp.asarray(psi, dtype=get_dtype())
    small = jnp.abs(psi) <= 1.0
    safe = jnp.where(small, 2.0, psi)
    sq = jnp.sqrt(jnp.abs(safe))
    closed = jnp.where(safe > 0.0, (1.0 - jnp.cos(sq)) / safe, (1.0 - jnp.cosh(sq)) / safe)
    return jnp.where(small, _series(psi, 2), closed)


def stumpff_c3(psi: ArrayLike) -> Array:
    """Stumpff function ``c3(psi) = (sqrt(psi) - sin sqrt(psi)) / sqrt(psi)^3``."""
    psi = jnp.asarray(psi, dtype=get_dtype())
    small = jnp.abs(psi) <= 1.0
    safe = jnp.where(small, 2.0, psi)
    sq = jnp.sqrt(jnp.abs(safe))
    closed = jnp.where(
        safe > 0.0,
        (sq - jnp.sin(sq)) / sq**3,
        (jnp.sinh(sq) - sq) / sq**3,
    )
    return jnp.where(small, _series(psi, 3), closed)


def _initial_guess(r0: Array, v0: Array, dt: Array, mu: float, alpha: Array) -> Array:
    sqrt_mu = jnp.sqrt(mu)
    norm_r0 = jnp.linalg.norm(r0)
    rv = jnp.dot(r0, v0)
    sign = jnp.sign(dt)

    elliptic = sqrt_mu * dt * alpha
    parabolic = sqrt_mu * dt / norm_r0

    a_hyp = jnp.where(alpha < 0.0, alpha, -1.0)
    hyperbolic = (
        sign
        * jnp.sqrt(-1.0 / a_hyp)
        * jnp.log(-2.0 * mu * a_hyp * dt / (rv + sign * jnp.sqrt(-mu / a_hyp) * (1.0 - norm_r0 * a_hyp)))
    )
    return jnp.where(alpha > 0.0, elliptic, jnp.where(alpha < 0.0, hyperbolic, parabolic))


@partial(jax.jit, static_argnames=("max_iter",))
def universal_kepler(
    r0: ArrayLike,
    v0: ArrayLike,
    dt: float,
    mu: float,
    tol: float = VALLADO_TOLERANCE,
    max_iter: int = VALLADO_MAX_ITER,
) -> tuple[Array, Array, Array, Array]:
    """Propagate ``(r0, v0)`` by *dt* seconds on a Keplerian orbit.

    Iterates until ``|d xi| / sqrt(mu) < tol`` or *max_iter* steps.

    Args:
        r0: Initial position. Units: *km*
        v0: Initial velocity. Units: *km/s*
        dt: Time of flight. Units: *s*
        mu: Gravitational parameter. Units: *km^3/s^2*
        tol: Convergence threshold. Default: 1e-9
        max_iter: Iteration cap. Default: 50

    Returns:
        ``(r, v, converged, iterations)``.
    """
    dtype = get_dtype()
    r0 = jnp.asarray(r0, dtype=dtype)
    v0 = jnp.asarray(v0, dtype=dtype)
    dt = jnp.asarray(dt, dtype=dtype)

    sqrt_mu = jnp.sqrt(mu)
    norm_r0 = jnp.linalg.norm(r0)
    rv = jnp.dot(r0, v0)
    alpha = -jnp.dot(v0, v0) / mu + 2.0 / norm_r0

    def radius(xi):
        psi = xi * xi * alpha
        c2, c3 = stumpff_c2(psi), stumpff_c3(psi)
        r = xi**2 * c2 + rv / sqrt_mu * xi * (1.0 - psi * c3) + norm_r0 * (1.0 - psi * c2)
        return psi, c2, c3, r

    def cond(carry):
        i, _, delta = carry
        return (i < max_iter) & (jnp.abs(delta) / sqrt_mu >= tol)

    def body(carry):
        i, xi, _ = carry
        psi, c2, c3, r = radius(xi)
        delta = (
            sqrt_mu * dt - xi**3 * c3 - rv / sqrt_mu * xi**2 * c2 - norm_r0 * xi * (1.0 - psi * c3)
        ) / r
        return i + 1, xi + delta, delta

    xi0 = _initial_guess(r0, v0, dt, mu, alpha)
    iterations, xi, delta = jax.lax.while_loop(cond, body, (0, xi0, jnp.asarray(jnp.inf, dtype=dtype)))

    _, c2, c3, r = radius(xi)
    f = 1.0 - xi**2 / norm_r0 * c2
    g = dt - xi**3 / sqrt_mu * c3
    gdot = 1.0 - xi**2 / r * c2
    fdot = sqrt_mu / (r * norm_r0) * xi * (xi * xi * alpha * c3 - 1.0)

    converged = jnp.abs(delta) / sqrt_mu < tol
    return f * r0 + g * v0, fdot * r0 + gdot * v0, converged, iterations


class Vallado(Propagator):
    """Keplerian propagator using Vallado's universal-variable algorithm.

    Args:
        initial_state: State in an inertial frame around a body with a
            known gravitational parameter.
        max_iter: Newton iteration cap. Default: 50
        tol: Convergence threshold on ``|d xi| / sqrt(mu)``. Default: 1e-9

    Raises:
        FrameRequiresInertial: If the state is not in an inertial frame.
        UndefinedOriginProperty: If the origin has no gravitational parameter.

    Examples:
        ```python
        from lox_space.propagators import Vallado
        prop = Vallado(state)
        prop.propagate(state.time() + TimeDelta.from_minutes(90.0))
        prop.propagate([t0, t1, t2])  # Trajectory
        ```
    """

    __slots__ = ("_initial_state", "_mu", "_max_iter", "_tol")

    def __init__(self, initial_state: State, max_iter: int = VALLADO_MAX_ITER, tol: float = VALLADO_TOLERANCE) -> None:
        if not initial_state.reference_frame().is_inertial():
            raise FrameRequiresInertial(initial_state.reference_frame())
        self._mu = initial_state.origin().gravitational_parameter()
        self._initial_state = initial_state
        self._max_iter = int(max_iter)
        self._tol = float(tol)

    def initial_state(self) -> State:
        return self._initial_state

    def max_iter(self) -> int:
        return self._max_iter

    def _propagate(self, time: Time) -> State:
        s0 = self._initial_state
        dt = (time - s0.time()).to_decimal_seconds()
        if dt == 0.0:
            return s0.with_time(time)
        r, v, converged, iterations = universal_kepler(
            s0.position(), s0.velocity(), dt, self._mu, self._tol, max_iter=self._max_iter
        )
        if not bool(converged):
            raise DidNotConverge("Vallado universal-variable solver", int(iterations))
        return State._from_internal(time, r, v, s0.origin(), s0.reference_frame())

    def __repr__(self) -> str:
        return f"Vallado({self._initial_state!r}, max_iter={self._max_iter})"
