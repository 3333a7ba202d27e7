"""Numerical building blocks: root finders, interpolated series and
approximate comparison."""

from lox_space.math.approx import isclose
from lox_space.math.roots import Brent, Newton, Secant
from lox_space.math.series import Interpolation, Series, tridiagonal_solve

__all__ = [
    "Brent",
    "Interpolation",
    "Newton",
    "Secant",
    "Series",
    "isclose",
    "tridiagonal_solve",
]
