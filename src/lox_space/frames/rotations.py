"""Elementary rotation matrices and the :class:`Rotation` value type.

The elementary matrices :func:`Rx`, :func:`Ry` and :func:`Rz` rotate the
*coordinate axes* by a counter-clockwise angle (the SOFA/ERFA convention),
so ``Rz(theta) @ r`` expresses a fixed vector ``r`` in axes rotated by
``theta`` about z.

A :class:`Rotation` pairs such a matrix with its time derivative and maps a
full state: position transforms as ``R r`` and velocity as ``R v + dR r``.
"""

from __future__ import annotations

from typing import NamedTuple

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from lox_space.config import get_dtype


def Rx(angle: ArrayLike) -> Array:
    """Rotation matrix for a rotation about the x-axis.

    Args:
        angle: Counter-clockwise angle of rotation [rad] as viewed looking
            back along the positive direction of the rotation axis.

    Returns:
        3x3 rotation matrix.

    References:

        1. O. Montenbruck, and E. Gill, *Satellite Orbits: Models, Methods and Applications*, 2012, p.27.
    """
    c = jnp.cos(angle)
    s = jnp.sin(angle)
    return jnp.array([[1.0, 0.0, 0.0],
                      [0.0,  +c,  +s],
                      [0.0,  -s,  +c]], dtype=get_dtype())  # fmt: skip


def Ry(angle: ArrayLike) -> Array:
    """Rotation matrix for a rotation about the y-axis.

    Args:
        angle: Counter-clockwise angle of rotation [rad].

    Returns:
        3x3 rotation matrix.
    """
    c = jnp.cos(angle)
    s = jnp.sin(angle)
    return jnp.array([[ +c, 0.0,  -s],
                      [0.0, 1.0, 0.0],
                      [ +s, 0.0,  +c]], dtype=get_dtype())  # fmt: skip


def Rz(angle: ArrayLike) -> Array:
    """Rotation matrix for a rotation about the z-axis.

    Args:
        angle: Counter-clockwise angle of rotation [rad].

    Returns:
        3x3 rotation matrix.
    """
    c = jnp.cos(angle)
    s = jnp.sin(angle)
    return jnp.array([[ +c,  +s, 0.0],
                      [ -s,  +c, 0.0],
                      [0.0, 0.0, 1.0]], dtype=get_dtype())  # fmt: skip


def skew(v: ArrayLike) -> Array:
    """Cross-product matrix ``[v]x`` such that ``skew(v) @ u == cross(v, u)``."""
    v = jnp.asarray(v, dtype=get_dtype())
    zero = jnp.zeros((), dtype=v.dtype)
    return jnp.array(
        [
            [zero, -v[2], v[1]],
            [v[2], zero, -v[0]],
            [-v[1], v[0], zero],
        ]
    )


class Rotation(NamedTuple):
    """A rotation matrix and its time derivative.

    Attributes:
        m: 3x3 rotation matrix.
        dm: 3x3 time derivative of ``m`` [1/s].

    Examples:
        ```python
        from lox_space.frames.rotations import Rotation, Rz
        rot = Rotation.from_matrix(Rz(0.1))
        r, v = rot.apply(r, v)
        ```
    """

    m: Array
    dm: Array

    @classmethod
    def identity(cls) -> Rotation:
        dtype = get_dtype()
        return cls(jnp.eye(3, dtype=dtype), jnp.zeros((3, 3), dtype=dtype))

    @classmethod
    def from_matrix(cls, m: ArrayLike) -> Rotation:
        """Static rotation with a zero derivative."""
        m = jnp.asarray(m, dtype=get_dtype())
        return cls(m, jnp.zeros_like(m))

    def with_angular_velocity(self, omega: ArrayLike) -> Rotation:
        """Attach the derivative ``dm = -[omega]x m`` of axes spinning at *omega* [rad/s]."""
        return Rotation(self.m, -skew(omega) @ self.m)

    def compose(self, other: Rotation) -> Rotation:
        """Apply ``self`` first, then *other*."""
        return Rotation(other.m @ self.m, other.dm @ self.m + other.m @ self.dm)

    def transpose(self) -> Rotation:
        """Inverse rotation."""
        return Rotation(self.m.T, self.dm.T)

    def rotate_position(self, r: ArrayLike) -> Array:
        return self.m @ jnp.asarray(r, dtype=get_dtype())

    def rotate_velocity(self, r: ArrayLike, v: ArrayLike) -> Array:
        dtype = get_dtype()
        return self.dm @ jnp.asarray(r, dtype=dtype) + self.m @ jnp.asarray(v, dtype=dtype)

    def apply(self, r: ArrayLike, v: ArrayLike) -> tuple[Array, Array]:
        """Rotate a position/velocity pair.

        Returns:
            tuple[Array, Array]: ``(m @ r, m @ v + dm @ r)``.
        """
        return self.rotate_position(r), self.rotate_velocity(r, v)
