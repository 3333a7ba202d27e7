"""Conversions between true, eccentric and mean anomalies.

Elliptic orbits (``0 <= e < 1``) use the eccentric anomaly ``E`` and
Kepler's equation ``M = E - e sin E``; hyperbolic orbits (``e > 1``) use
the hyperbolic anomaly ``F`` and ``M = e sinh F - F``; parabolic orbits use
the parabolic anomaly ``D = tan(nu / 2)`` and Barker's equation.

All functions are JAX-traceable.  Angles are in radians; elliptic results
are wrapped to ``(-pi, pi]``.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from lox_space.config import get_dtype


def _wrap(angle: Array) -> Array:
    """Wrap *angle* into ``(-pi, pi]``."""
    wrapped = jnp.mod(angle + jnp.pi, 2.0 * jnp.pi) - jnp.pi
    return jnp.where(wrapped == -jnp.pi, jnp.pi, wrapped)


# ──────────────────────────────────────────────
# Elliptic
# ──────────────────────────────────────────────


def true_to_eccentric(nu: ArrayLike, e: ArrayLike) -> Array:
    """Convert true anomaly to eccentric anomaly.

    Args:
        nu: True anomaly. Units: *rad*
        e: Eccentricity, ``0 <= e < 1``.

    Returns:
        Eccentric anomaly in ``(-pi, pi]``. Units: *rad*
    """
    nu = jnp.asarray(nu, dtype=get_dtype())
    e = jnp.asarray(e, dtype=get_dtype())
    factor = jnp.sqrt((1.0 - e) / (1.0 + e))
    return _wrap(2.0 * jnp.arctan(factor * jnp.tan(nu / 2.0)))


def eccentric_to_true(ecc: ArrayLike, e: ArrayLike) -> Array:
    """Convert eccentric anomaly to true anomaly.

    Uses the half-angle form ``tan(nu/2) = sqrt((1+e)/(1-e)) tan(E/2)``.

    Args:
        ecc: Eccentric anomaly. Units: *rad*
        e: Eccentricity, ``0 <= e < 1``.

    Returns:
        True anomaly in ``(-pi, pi]``. Units: *rad*

    Examples:
        ```python
        import math
        from lox_space.orbits import eccentric_to_true
        eccentric_to_true(math.pi / 2, 0.2)  # 1.7721542475852272
        ```
    """
    ecc = jnp.asarray(ecc, dtype=get_dtype())
    e = jnp.asarray(e, dtype=get_dtype())
    factor = jnp.sqrt((1.0 + e) / (1.0 - e))
    return _wrap(2.0 * jnp.arctan(factor * jnp.tan(ecc / 2.0)))


def eccentric_to_mean(ecc: ArrayLike, e: ArrayLike) -> Array:
    """Kepler's equation ``M = E - e sin E``, wrapped to ``(-pi, pi]``."""
    ecc = jnp.asarray(ecc, dtype=get_dtype())
    e = jnp.asarray(e, dtype=get_dtype())
    return _wrap(ecc - e * jnp.sin(ecc))


def mean_to_eccentric(mean: ArrayLike, e: ArrayLike, tol: float = 1e-10, max_iter: int = 50) -> Array:
    """Solve Kepler's equation for the eccentric anomaly.

    Newton-Raphson with a second-order correction, implemented with
    ``jax.lax.while_loop``.  The iteration stops when the step falls below
    *tol* or after *max_iter* steps.

    Args:
        mean: Mean anomaly. Units: *rad*
        e: Eccentricity, ``0 <= e < 1``.
        tol: Step tolerance. Default: 1e-10
        max_iter: Iteration cap. Default: 50

    Returns:
        Eccentric anomaly in ``(-pi, pi]``. Units: *rad*
    """
    dtype = get_dtype()
    m = _wrap(jnp.asarray(mean, dtype=dtype))
    e = jnp.asarray(e, dtype=dtype)

    guess = jnp.where(e < 0.8, m, jnp.where(m < jnp.pi, m + e / 2.0, m - e / 2.0))

    def cond(carry):
        i, _, step = carry
        return (i < max_iter) & (jnp.abs(step) >= tol)

    def body(carry):
        i, ecc, _ = carry
        sin_e = jnp.sin(ecc)
        f = ecc - e * sin_e - m
        df = 1.0 - e * jnp.cos(ecc)
        step = f / (df + 0.5 * f * e * sin_e / df)
        return i + 1, ecc - step, step

    _, ecc, _ = jax.lax.while_loop(cond, body, (0, guess, jnp.asarray(jnp.inf, dtype=dtype)))
    return _wrap(ecc)


def true_to_mean(nu: ArrayLike, e: ArrayLike) -> Array:
    """Convert true anomaly to mean anomaly (true -> eccentric -> mean)."""
    return eccentric_to_mean(true_to_eccentric(nu, e), e)


def mean_to_true(mean: ArrayLike, e: ArrayLike) -> Array:
    """Convert mean anomaly to true anomaly (mean -> eccentric -> true)."""
    return eccentric_to_true(mean_to_eccentric(mean, e), e)


# ──────────────────────────────────────────────
# Hyperbolic
# ──────────────────────────────────────────────


def true_to_hyperbolic(nu: ArrayLike, e: ArrayLike) -> Array:
    """Convert true anomaly to hyperbolic anomaly.

    Returns NaN when ``|nu|`` is beyond the asymptote angle
    :func:`hyperbolic_asymptote_angle`.
    """
    nu = jnp.asarray(nu, dtype=get_dtype())
    e = jnp.asarray(e, dtype=get_dtype())
    factor = jnp.sqrt((e - 1.0) / (e + 1.0))
    f = 2.0 * jnp.arctanh(factor * jnp.tan(nu / 2.0))
    return jnp.where(jnp.abs(nu) < hyperbolic_asymptote_angle(e), f, jnp.nan)


def hyperbolic_to_true(hyp: ArrayLike, e: ArrayLike) -> Array:
    """Convert hyperbolic anomaly to true anomaly.

    Uses ``tan(nu/2) = sqrt((e+1)/(e-1)) tanh(F/2)``.

    Examples:
        ```python
        import math
        from lox_space.orbits import hyperbolic_to_true
        hyperbolic_to_true(math.pi / 2, 1.2)  # 2.2797028138935547
        ```
    """
    hyp = jnp.asarray(hyp, dtype=get_dtype())
    e = jnp.asarray(e, dtype=get_dtype())
    factor = jnp.sqrt((e + 1.0) / (e - 1.0))
    return 2.0 * jnp.arctan(factor * jnp.tanh(hyp / 2.0))


def hyperbolic_to_mean(hyp: ArrayLike, e: ArrayLike) -> Array:
    """Hyperbolic Kepler equation ``M = e sinh F - F``."""
    hyp = jnp.asarray(hyp, dtype=get_dtype())
    e = jnp.asarray(e, dtype=get_dtype())
    return e * jnp.sinh(hyp) - hyp


def mean_to_hyperbolic(mean: ArrayLike, e: ArrayLike, tol: float = 1e-10, max_iter: int = 50) -> Array:
    """Solve the hyperbolic Kepler equation, starting from ``asinh(M / e)``."""
    dtype = get_dtype()
    m = jnp.asarray(mean, dtype=dtype)
    e = jnp.asarray(e, dtype=dtype)

    def cond(carry):
        i, _, step = carry
        return (i < max_iter) & (jnp.abs(step) >= tol)

    def body(carry):
        i, f, _ = carry
        step = (e * jnp.sinh(f) - f - m) / (e * jnp.cosh(f) - 1.0)
        return i + 1, f - step, step

    _, hyp, _ = jax.lax.while_loop(cond, body, (0, jnp.arcsinh(m / e), jnp.asarray(jnp.inf, dtype=dtype)))
    return hyp


def hyperbolic_asymptote_angle(e: ArrayLike) -> Array:
    """Largest true anomaly reachable on a hyperbola, ``acos(-1/e)``."""
    e = jnp.asarray(e, dtype=get_dtype())
    return jnp.arccos(-1.0 / e)


# ──────────────────────────────────────────────
# Parabolic
# ──────────────────────────────────────────────


def true_to_parabolic(nu: ArrayLike) -> Array:
    nu = jnp.asarray(nu, dtype=get_dtype())
    return jnp.tan(nu / 2.0)


def parabolic_to_true(d: ArrayLike) -> Array:
    d = jnp.asarray(d, dtype=get_dtype())
    return 2.0 * jnp.arctan(d)


def parabolic_to_mean(d: ArrayLike) -> Array:
    """Barker's equation ``M = D + D^3 / 3``."""
    d = jnp.asarray(d, dtype=get_dtype())
    return d + d**3 / 3.0


def mean_to_parabolic(mean: ArrayLike) -> Array:
    """Invert Barker's equation with Cardano's closed form."""
    a = 1.5 * jnp.asarray(mean, dtype=get_dtype())
    z = jnp.cbrt(a + jnp.sqrt(a * a + 1.0))
    return z - 1.0 / z
