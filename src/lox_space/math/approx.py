"""Approximate equality for scalars and arrays."""

from __future__ import annotations

import jax.numpy as jnp
from jax.typing import ArrayLike

from lox_space.config import get_isclose_tolerance


def isclose(a: ArrayLike, b: ArrayLike, rel_tol: float | None = None, abs_tol: float | None = None) -> bool:
    """Whether every element of *a* is close to the matching element of *b*.

    Uses the symmetric test ``|a - b| <= max(rel_tol * max(|a|, |b|), abs_tol)``
    element-wise.  Tolerances default to :func:`~lox_space.config.get_isclose_tolerance`.

    Args:
        a: First value.
        b: Second value, broadcastable against *a*.
        rel_tol: Relative tolerance.
        abs_tol: Absolute tolerance.

    Returns:
        bool: ``True`` if all elements are close.
    """
    default_rel, default_abs = get_isclose_tolerance()
    rel_tol = default_rel if rel_tol is None else rel_tol
    abs_tol = default_abs if abs_tol is None else abs_tol
    a = jnp.asarray(a)
    b = jnp.asarray(b)
    bound = jnp.maximum(rel_tol * jnp.maximum(jnp.abs(a), jnp.abs(b)), abs_tol)
    return bool(jnp.all(jnp.abs(a - b) <= bound))
