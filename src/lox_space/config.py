"""Module-wide floating-point precision configuration.

Provides ``set_dtype`` and ``get_dtype`` to control the float dtype used
for the JAX arrays created by lox_space (rotation matrices, state vectors,
series evaluations, trajectory coefficients).  The default is
``jnp.float64``: the time-scale and frame layers carry sub-nanosecond and
sub-milliarcsecond quantities that single precision cannot represent.
JAX's 64-bit mode (``jax_enable_x64``) is therefore enabled on import.

Lower precision can still be selected for throughput-oriented work such as
large visibility batches; time arithmetic itself is always exact because
``TimeDelta`` stores integer seconds and attoseconds.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp

_VALID_DTYPES = (jnp.float16, jnp.bfloat16, jnp.float32, jnp.float64)

jax.config.update("jax_enable_x64", True)

_dtype = jnp.float64


def set_dtype(dtype) -> None:
    """Set the module-wide float dtype for lox_space.

    If *dtype* is ``jnp.float64``, JAX's 64-bit mode is (re-)enabled via
    ``jax.config.update("jax_enable_x64", True)``.

    Args:
        dtype: One of ``jnp.float16``, ``jnp.bfloat16``, ``jnp.float32``,
            or ``jnp.float64``.

    Raises:
        ValueError: If *dtype* is not a supported float type.
    """
    global _dtype
    if dtype not in _VALID_DTYPES:
        raise ValueError(
            f"Unsupported dtype {dtype}. Must be one of: "
            f"jnp.float16, jnp.bfloat16, jnp.float32, jnp.float64"
        )
    if dtype == jnp.float64:
        jax.config.update("jax_enable_x64", True)
    _dtype = dtype


def get_dtype():
    """Return the current module-wide float dtype.

    Returns:
        The active float dtype (default ``jnp.float64``).
    """
    return _dtype


def get_isclose_tolerance() -> tuple[float, float]:
    """Return the dtype-adaptive ``(rel_tol, abs_tol)`` used by ``isclose`` helpers.

    - ``float64``: ``(1e-8, 1e-13)``
    - ``float32``: ``(1e-5, 1e-6)``
    - ``float16``/``bfloat16``: ``(1e-2, 1e-3)``

    Returns:
        tuple[float, float]: Relative and absolute tolerance.
    """
    if _dtype == jnp.float64:
        return 1e-8, 1e-13
    if _dtype == jnp.float32:
        return 1e-5, 1e-6
    return 1e-2, 1e-3
