"""One-dimensional interpolated series.

:class:`Series` holds strictly increasing abscissae and matching ordinates
and interpolates them either piecewise-linearly or with a not-a-knot cubic
spline.  Queries outside the sampled span extrapolate with the first or
last segment.  Evaluation is vectorised with ``jnp.searchsorted``, so an
array of query points is interpolated in one call.
"""

from __future__ import annotations

import enum

import jax
import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from lox_space.config import get_dtype
from lox_space.errors import SeriesError

_MIN_POINTS_LINEAR = 2
_MIN_POINTS_SPLINE = 4


class Interpolation(enum.Enum):
    """Interpolation scheme of a :class:`Series`."""

    LINEAR = "linear"
    CUBIC_SPLINE = "cubic_spline"


def tridiagonal_solve(dl: ArrayLike, d: ArrayLike, du: ArrayLike, b: ArrayLike) -> Array:
    """Solve a tridiagonal system with the Thomas algorithm.

    Args:
        dl: Sub-diagonal, length ``n - 1``.
        d: Main diagonal, length ``n``.
        du: Super-diagonal, length ``n - 1``.
        b: Right-hand side, length ``n``.

    Returns:
        Solution vector of length ``n``.
    """
    dl = jnp.asarray(dl)
    d = jnp.asarray(d)
    du = jnp.asarray(du)
    b = jnp.asarray(b)

    w0 = du[0] / d[0]
    g0 = b[0] / d[0]
    du_padded = jnp.concatenate([du, jnp.zeros(1, dtype=du.dtype)])

    def forward(carry, row):
        w_prev, g_prev = carry
        a, diag, upper, rhs = row
        denom = diag - a * w_prev
        w = upper / denom
        g = (rhs - a * g_prev) / denom
        return (w, g), (w, g)

    _, (w_rest, g_rest) = jax.lax.scan(forward, (w0, g0), (dl, d[1:], du_padded[1:], b[1:]))
    w = jnp.concatenate([w0[None], w_rest])
    g = jnp.concatenate([g0[None], g_rest])

    def backward(p_next, row):
        g_i, w_i = row
        p = g_i - w_i * p_next
        return p, p

    _, p_head = jax.lax.scan(backward, g[-1], (g[:-1], w[:-1]), reverse=True)
    return jnp.concatenate([p_head, g[-1:]])


def _spline_coefficients(x: Array, y: Array) -> Array:
    n = x.shape[0]
    dx = jnp.diff(x)
    slope = jnp.diff(y) / dx

    d = 2.0 * (dx[:-1] + dx[1:])
    du = dx[:-1]
    dl = dx[1:]
    b = 3.0 * (dx[1:] * slope[:-1] + dx[:-1] * slope[1:])

    # not-a-knot end conditions
    delta0 = x[2] - x[0]
    b0 = ((dx[0] + 2.0 * delta0) * dx[1] * slope[0] + dx[0] ** 2 * slope[1]) / delta0
    delta1 = x[n - 1] - x[n - 3]
    b1 = (dx[-1] ** 2 * slope[-2] + (2.0 * delta1 + dx[-1]) * dx[-2] * slope[-1]) / delta1

    d = jnp.concatenate([dx[1:2], d, dx[-2:-1]])
    du = jnp.concatenate([delta0[None], du])
    dl = jnp.concatenate([dl, delta1[None]])
    b = jnp.concatenate([b0[None], b, b1[None]])

    s = tridiagonal_solve(dl, d, du, b)
    t = (s[:-1] + s[1:] - 2.0 * slope) / dx
    return jnp.stack([y[:-1], s[:-1], (slope - s[:-1]) / dx - t, t / dx], axis=1)


class Series:
    """Interpolated samples ``y(x)``.

    Args:
        x: Strictly increasing abscissae.
        y: Ordinates, same length as *x*.
        interpolation: ``"linear"`` or ``"cubic_spline"``. Splines need at
            least four points and fall back to linear interpolation below
            that. Default: ``"linear"``.

    Raises:
        SeriesError: If fewer than two points are given, the lengths differ
            or *x* is not strictly increasing.

    Examples:
        ```python
        s = Series([1.0, 2.0, 3.0], [1.0, 4.0, 9.0])
        s.interpolate(2.5)  # 6.5
        ```
    """

    __slots__ = ("_x", "_y", "_interpolation", "_coefficients")

    def __init__(
        self,
        x: ArrayLike,
        y: ArrayLike,
        interpolation: Interpolation | str = Interpolation.LINEAR,
    ) -> None:
        dtype = get_dtype()
        x = jnp.asarray(x, dtype=dtype)
        y = jnp.asarray(y, dtype=dtype)
        n = x.shape[0]
        if y.shape[0] != n:
            raise SeriesError(f"`x` and `y` must have the same length but were {n} and {y.shape[0]}")
        if n < _MIN_POINTS_LINEAR:
            raise SeriesError(f"length of `x` and `y` must at least 2 but was {n}")
        if not bool(jnp.all(jnp.diff(x) > 0.0)):
            raise SeriesError("x-axis must be strictly monotonic")

        interpolation = Interpolation(interpolation)
        if interpolation is Interpolation.CUBIC_SPLINE and n < _MIN_POINTS_SPLINE:
            interpolation = Interpolation.LINEAR

        self._x = x
        self._y = y
        self._interpolation = interpolation
        self._coefficients = _spline_coefficients(x, y) if interpolation is Interpolation.CUBIC_SPLINE else None

    @property
    def x(self) -> Array:
        return self._x

    @property
    def y(self) -> Array:
        return self._y

    @property
    def interpolation(self) -> Interpolation:
        return self._interpolation

    def first(self) -> tuple[float, float]:
        return float(self._x[0]), float(self._y[0])

    def last(self) -> tuple[float, float]:
        return float(self._x[-1]), float(self._y[-1])

    def interpolate(self, xp: ArrayLike) -> Array:
        """Evaluate the series at *xp* (scalar or array)."""
        xp = jnp.asarray(xp, dtype=self._x.dtype)
        n = self._x.shape[0]
        idx = jnp.clip(jnp.searchsorted(self._x, xp, side="left") - 1, 0, n - 2)
        x0 = self._x[idx]
        if self._coefficients is None:
            x1 = self._x[idx + 1]
            y0 = self._y[idx]
            y1 = self._y[idx + 1]
            return y0 + (y1 - y0) * (xp - x0) / (x1 - x0)
        c = self._coefficients[idx]
        h = xp - x0
        return c[..., 0] + h * (c[..., 1] + h * (c[..., 2] + h * c[..., 3]))

    def __call__(self, xp: ArrayLike) -> Array:
        return self.interpolate(xp)

    def __len__(self) -> int:
        return int(self._x.shape[0])

    def __repr__(self) -> str:
        return f"Series(n={len(self)}, interpolation={self._interpolation.value!r})"
