"""Scalar root finders.

- :class:`Brent`: bracketing solver used by the event finder.
- :class:`Secant`: derivative-free solver from one or two starting points.
- :class:`Newton`: Newton-Raphson with a user-supplied derivative.

The solvers are configuration :class:`~typing.NamedTuple` instances with a
``find`` method.  They run on host floats because the functions they solve
are arbitrary Python callables (e.g. an elevation computed through the frame
graph).  Exceptions raised by the callable propagate unchanged; exhausting
the iteration cap raises :class:`~lox_space.errors.DidNotConverge`.
"""

from __future__ import annotations

import math
import sys
from collections.abc import Callable
from typing import NamedTuple

from lox_space.errors import DidNotConverge, RootNotBracketed

_EPS = sys.float_info.epsilon
_SQRT_EPS = math.sqrt(_EPS)


def _isclose(a: float, b: float, rel_tol: float, abs_tol: float) -> bool:
    return abs(a - b) <= max(rel_tol * max(abs(a), abs(b)), abs_tol)


class Brent(NamedTuple):
    """Brent's bracketing root finder.

    Combines bisection, the secant rule and inverse quadratic interpolation.
    Convergence is declared when ``|f(x)| <= abs_tol`` or when the bracket
    half-width drops below ``(abs_tol + rel_tol * |x|) / 2``.

    Attributes:
        abs_tol: Absolute tolerance. Default: 1e-12.
        rel_tol: Relative tolerance. Default: 1e-12.
        max_iter: Iteration cap. Default: 100.

    Examples:
        ```python
        from lox_space.math import Brent
        root = Brent().find(lambda x: x**3 + 4 * x**2 - 10, (1.0, 1.5))
        ```
    """

    abs_tol: float = 1e-12
    rel_tol: float = 1e-12
    max_iter: int = 100

    def find(self, f: Callable[[float], float], bracket: tuple[float, float]) -> float:
        """Locate a root of *f* inside *bracket*.

        Args:
            f: Scalar function.
            bracket: Interval ``(a, b)`` with ``f(a)`` and ``f(b)`` of
                opposite sign (or one of them zero).

        Returns:
            float: The root.

        Raises:
            RootNotBracketed: If ``f(a)`` and ``f(b)`` share a sign.
            DidNotConverge: If ``max_iter`` is exhausted.
        """
        xpre, xcur = float(bracket[0]), float(bracket[1])
        fpre, fcur = float(f(xpre)), float(f(xcur))

        if fpre * fcur > 0.0:
            raise RootNotBracketed(xpre, xcur)
        if abs(fpre) <= self.abs_tol:
            return xpre
        if abs(fcur) <= self.abs_tol:
            return xcur

        xblk = fblk = spre = scur = 0.0
        for _ in range(self.max_iter):
            if fpre * fcur < 0.0:
                xblk, fblk = xpre, fpre
                spre = scur = xcur - xpre
            if abs(fblk) < abs(fcur):
                xpre, xcur, xblk = xcur, xblk, xcur
                fpre, fcur, fblk = fcur, fblk, fcur

            delta = (self.abs_tol + self.rel_tol * abs(xcur)) / 2.0
            sbis = (xblk - xcur) / 2.0
            if abs(fcur) <= self.abs_tol or abs(sbis) < delta:
                return xcur

            if abs(spre) > delta and abs(fcur) < abs(fpre):
                if _isclose(xpre, xblk, _SQRT_EPS, 0.0):
                    # secant
                    stry = -fcur * (xcur - xpre) / (fcur - fpre)
                else:
                    # inverse quadratic interpolation
                    dpre = (fpre - fcur) / (xpre - xcur)
                    dblk = (fblk - fcur) / (xblk - xcur)
                    stry = -fcur * (fblk * dblk - fpre * dpre) / (dblk * dpre * (fblk - fpre))
                if 2.0 * abs(stry) < min(abs(spre), 3.0 * abs(sbis) - delta):
                    spre, scur = scur, stry
                else:
                    spre = scur = sbis
            else:
                spre = scur = sbis

            xpre, fpre = xcur, fcur
            if abs(scur) > delta:
                xcur += scur
            else:
                xcur += delta if sbis > 0.0 else -delta
            fcur = float(f(xcur))

        raise DidNotConverge("Brent", self.max_iter, xcur)


class Secant(NamedTuple):
    """Secant method.

    Attributes:
        max_iter: Iteration cap. Default: 100.
        rel_tol: Relative tolerance on successive iterates. Default: sqrt(eps).
        abs_tol: Absolute tolerance on successive iterates. Default: 1e-6.
    """

    max_iter: int = 100
    rel_tol: float = _SQRT_EPS
    abs_tol: float = 1e-6

    def find(self, f: Callable[[float], float], x0: float) -> float:
        """Find a root starting from a single guess *x0*.

        The second point is placed a small step away from *x0*.
        """
        x0 = float(x0)
        step = 1e-4 if x0 >= 0.0 else -1e-4
        return self.find_in_bracket(f, (x0, x0 * (1.0 + 1e-4) + step))

    def find_in_bracket(self, f: Callable[[float], float], bracket: tuple[float, float]) -> float:
        """Find a root starting from the two points in *bracket*.

        The points need not bracket a sign change.

        Raises:
            DidNotConverge: If the iteration stalls or ``max_iter`` is
                exhausted.
        """
        p0, p1 = float(bracket[0]), float(bracket[1])
        q0, q1 = float(f(p0)), float(f(p1))
        if abs(q1) > abs(q0):
            p0, p1, q0, q1 = p1, p0, q1, q0

        for _ in range(self.max_iter):
            if q1 == q0:
                if p1 != p0:
                    raise DidNotConverge("Secant", self.max_iter, p1)
                return (p1 + p0) / 2.0
            if abs(q1) > abs(q0):
                p = (-q0 / q1 * p1 + p0) / (1.0 - q0 / q1)
            else:
                p = (-q1 / q0 * p0 + p1) / (1.0 - q1 / q0)
            if _isclose(p, p1, self.rel_tol, self.abs_tol):
                return p
            p0, q0 = p1, q1
            p1 = p
            q1 = float(f(p1))

        raise DidNotConverge("Secant", self.max_iter, p1)


class Newton(NamedTuple):
    """Newton-Raphson iteration.

    Attributes:
        max_iter: Iteration cap. Default: 50.
        tolerance: Step size below which the iteration stops. Default:
            sqrt(eps).
    """

    max_iter: int = 50
    tolerance: float = _SQRT_EPS

    def find(
        self,
        f: Callable[[float], float],
        derivative: Callable[[float], float],
        x0: float,
    ) -> float:
        """Find a root of *f* from the initial guess *x0*.

        Raises:
            DidNotConverge: If ``max_iter`` is exhausted.
        """
        p0 = float(x0)
        for _ in range(self.max_iter):
            p = p0 - float(f(p0)) / float(derivative(p0))
            if abs(p - p0) <= self.tolerance:
                return p
            p0 = p
        raise DidNotConverge("Newton", self.max_iter, p0)

