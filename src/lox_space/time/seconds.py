"""Double-double floating-point seconds.

:class:`Seconds` carries a value as the unevaluated sum ``hi + lo`` of two
floats with ``|lo| <= ulp(hi) / 2``.  It is used when an integer
seconds/attoseconds pair has to be promoted to floating point (or scaled
by a floating-point factor) without losing the sub-nanosecond digits that a
single double cannot hold at 1e9-1e10 seconds from J2000.

The error-free transformations follow Knuth (``two_sum``) and Dekker
(``two_prod`` via Veltkamp splitting).
"""

from __future__ import annotations

import math
from dataclasses import dataclass

# 2**27 + 1, splits a double into two 26-bit halves.
_SPLITTER = 134217729.0


def two_sum(a: float, b: float) -> tuple[float, float]:
    """Error-free sum: ``a + b == s + e`` exactly.

    Args:
        a: First addend.
        b: Second addend.

    Returns:
        tuple[float, float]: Rounded sum ``s`` and its rounding error ``e``.
    """
    s = a + b
    bb = s - a
    e = (a - (s - bb)) + (b - bb)
    return s, e


def quick_two_sum(a: float, b: float) -> tuple[float, float]:
    """Error-free sum assuming ``|a| >= |b|``."""
    s = a + b
    e = b - (s - a)
    return s, e


def _split(a: float) -> tuple[float, float]:
    t = _SPLITTER * a
    hi = t - (t - a)
    return hi, a - hi


def two_prod(a: float, b: float) -> tuple[float, float]:
    """Error-free product: ``a * b == p + e`` exactly.

    Args:
        a: First factor.
        b: Second factor.

    Returns:
        tuple[float, float]: Rounded product ``p`` and its rounding error ``e``.
    """
    p = a * b
    if not math.isfinite(p):
        return p, 0.0
    a_hi, a_lo = _split(a)
    b_hi, b_lo = _split(b)
    e = ((a_hi * b_hi - p) + a_hi * b_lo + a_lo * b_hi) + a_lo * b_lo
    return p, e


@dataclass(frozen=True)
class Seconds:
    """A double-double number of seconds ``hi + lo``.

    Args:
        hi: Leading component.
        lo: Trailing correction.
    """

    hi: float
    lo: float = 0.0

    @classmethod
    def from_parts(cls, seconds: float, fraction: float) -> Seconds:
        """Build a normalized value from an integral part and a fraction."""
        hi, lo = two_sum(float(seconds), float(fraction))
        return cls(hi, lo)

    def __float__(self) -> float:
        return self.hi + self.lo

    def to_float(self) -> float:
        """Round to the nearest double."""
        return self.hi + self.lo

    def __neg__(self) -> Seconds:
        return Seconds(-self.hi, -self.lo)

    def __add__(self, other: Seconds | float) -> Seconds:
        if not isinstance(other, Seconds):
            other = Seconds(float(other))
        s, e = two_sum(self.hi, other.hi)
        t, f = two_sum(self.lo, other.lo)
        e += t
        s, e = quick_two_sum(s, e)
        e += f
        return Seconds(*quick_two_sum(s, e))

    __radd__ = __add__

    def __sub__(self, other: Seconds | float) -> Seconds:
        if not isinstance(other, Seconds):
            other = Seconds(float(other))
        return self + (-other)

    def __rsub__(self, other: float) -> Seconds:
        return Seconds(float(other)) - self

    def __mul__(self, other: Seconds | float) -> Seconds:
        if isinstance(other, Seconds):
            p, e = two_prod(self.hi, other.hi)
            e += self.hi * other.lo + self.lo * other.hi
        else:
            other = float(other)
            p, e = two_prod(self.hi, other)
            e += self.lo * other
        if not math.isfinite(p):
            return Seconds(p, 0.0)
        return Seconds(*quick_two_sum(p, e))

    __rmul__ = __mul__
