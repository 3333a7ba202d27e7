"""Tests for root finders, interpolated series and approximate comparison."""

import math

import jax.numpy as jnp
import pytest

from lox_space.errors import DidNotConverge, RootNotBracketed, SeriesError
from lox_space.math import Brent, Newton, Secant, Series, isclose, tridiagonal_solve

CUBIC_ROOT = 1.3652300134140969
KEPLER_ROOT = 1.85846841205333


def cubic(x):
    return x**3 + 4.0 * x**2 - 10.0


def kepler(e):
    return e - 0.3 * math.sin(e) - math.pi / 2.0


# ---------------------------------------------------------------------------
# Root finders
# ---------------------------------------------------------------------------


class TestBrent:
    def test_defaults(self):
        brent = Brent()
        assert brent.abs_tol == 1e-12
        assert brent.rel_tol == 1e-12
        assert brent.max_iter == 100

    def test_cubic(self):
        assert Brent().find(cubic, (1.0, 1.5)) == pytest.approx(CUBIC_ROOT, rel=1e-12)

    def test_kepler(self):
        assert Brent().find(kepler, (0.0, math.pi)) == pytest.approx(KEPLER_ROOT, rel=1e-12)

    def test_reversed_bracket(self):
        assert Brent().find(cubic, (1.5, 1.0)) == pytest.approx(CUBIC_ROOT, rel=1e-12)

    def test_root_at_endpoint(self):
        assert Brent().find(lambda x: x - 1.0, (1.0, 2.0)) == 1.0

    def test_not_bracketed(self):
        with pytest.raises(RootNotBracketed, match="root not in bracket"):
            Brent().find(cubic, (2.0, 3.0))

    def test_not_converged(self):
        with pytest.raises(DidNotConverge, match="Brent did not converge after 1 iterations"):
            Brent(max_iter=1).find(cubic, (0.0, 10.0))

    def test_callback_error_propagates(self):
        def failing(x):
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            Brent().find(failing, (0.0, 1.0))


class TestSecant:
    def test_cubic_bracket(self):
        assert Secant().find_in_bracket(cubic, (1.0, 1.5)) == pytest.approx(CUBIC_ROOT, rel=1e-8)

    def test_cubic_single_guess(self):
        assert Secant().find(cubic, 1.0) == pytest.approx(CUBIC_ROOT, rel=1e-8)

    def test_kepler(self):
        assert Secant().find(kepler, math.pi / 2.0) == pytest.approx(KEPLER_ROOT, rel=1e-8)

    def test_not_converged(self):
        with pytest.raises(DidNotConverge):
            Secant(max_iter=1).find(cubic, 10.0)


class TestNewton:
    def test_cubic(self):
        root = Newton().find(cubic, lambda x: 3.0 * x**2 + 8.0 * x, 1.0)
        assert root == pytest.approx(CUBIC_ROOT, rel=1e-12)

    def test_kepler(self):
        root = Newton().find(kepler, lambda e: 1.0 - 0.3 * math.cos(e), math.pi / 2.0)
        assert root == pytest.approx(KEPLER_ROOT, rel=1e-12)

    def test_not_converged(self):
        with pytest.raises(DidNotConverge, match="Newton"):
            Newton(max_iter=1).find(cubic, lambda x: 3.0 * x**2 + 8.0 * x, 100.0)


# ---------------------------------------------------------------------------
# Series
# ---------------------------------------------------------------------------

_SPLINE_Y = [
    0.08138419591321655,
    1.6543878900257172,
    -0.7644606583671828,
    -0.6587179995856219,
    -0.7254418066056914,
]


class TestSeries:
    @pytest.mark.parametrize("xp", [0.5, 1.0, 1.5, 2.5, 5.5])
    def test_linear(self, xp):
        s = Series([1.0, 2.0, 3.0, 4.0, 5.0], [1.0, 2.0, 3.0, 4.0, 5.0])
        assert float(s.interpolate(xp)) == pytest.approx(xp, rel=1e-15)

    @pytest.mark.parametrize(
        ("xp", "expected"),
        [
            (0.0, -14.303290471048534),
            (0.5, -4.958255595315013),
            (1.0, 0.08138419591321655),
            (1.3, 1.4972090040654928),
            (1.7, 2.002933019485679),
            (2.0, 1.6543878900257172),
            (2.6, 0.11763263134861876),
            (3.4, -1.021495327991328),
            (4.5, -0.3579945352679478),
            (5.0, -0.7254418066056914),
            (6.0, -5.965065033067472),
        ],
    )
    def test_cubic_spline(self, xp, expected):
        s = Series([1.0, 2.0, 3.0, 4.0, 5.0], _SPLINE_Y, "cubic_spline")
        assert float(s.interpolate(xp)) == pytest.approx(expected, rel=1e-12)

    def test_vectorised(self):
        s = Series([1.0, 2.0, 3.0, 4.0, 5.0], _SPLINE_Y, "cubic_spline")
        values = s(jnp.array([1.0, 2.0, 5.0]))
        assert values.shape == (3,)
        assert float(values[1]) == pytest.approx(_SPLINE_Y[1], rel=1e-12)

    def test_spline_falls_back_to_linear(self):
        s = Series([1.0, 2.0, 3.0], [1.0, 4.0, 9.0], "cubic_spline")
        assert s.interpolation.value == "linear"
        assert float(s.interpolate(2.5)) == pytest.approx(6.5)

    def test_first_last(self):
        s = Series([1.0, 2.0], [3.0, 4.0])
        assert s.first() == (1.0, 3.0)
        assert s.last() == (2.0, 4.0)
        assert len(s) == 2

    @pytest.mark.parametrize(
        ("x", "y", "match"),
        [
            ([1.0], [1.0], "at least 2 but was 1"),
            ([1.0, 2.0], [1.0], "same length but were 2 and 1"),
            ([1.0, 1.0, 2.0], [1.0, 2.0, 3.0], "strictly monotonic"),
        ],
    )
    def test_errors(self, x, y, match):
        with pytest.raises(SeriesError, match=match):
            Series(x, y)


class TestTridiagonal:
    def test_solve(self):
        dl = jnp.array([1.0, 1.0, 1.0])
        d = jnp.array([4.0, 4.0, 4.0, 4.0])
        du = jnp.array([1.0, 1.0, 1.0])
        b = jnp.array([5.0, 6.0, 6.0, 5.0])
        x = tridiagonal_solve(dl, d, du, b)
        assert jnp.allclose(x, jnp.ones(4), atol=1e-14)


class TestIsClose:
    def test_scalars(self):
        assert isclose(1.0, 1.0 + 1e-10)
        assert not isclose(1.0, 1.0 + 1e-6)

    def test_arrays(self):
        a = jnp.array([1.0, 2.0, 0.0])
        assert isclose(a, a + jnp.array([1e-12, 0.0, 1e-14]))

    def test_explicit_tolerance(self):
        assert isclose(100.0, 101.0, rel_tol=0.02)
