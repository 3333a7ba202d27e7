"""Tests for the lox_space.config module."""

import math

import jax
import jax.numpy as jnp
import pytest

from lox_space.config import get_dtype, get_isclose_tolerance, set_dtype
from lox_space.frames import Rz
from lox_space.math import isclose
from lox_space.orbits import orbital_period
from lox_space.propagators import stumpff_c2


@pytest.fixture(autouse=True)
def reset_dtype():
    """Restore the float64 default after each test."""
    yield
    set_dtype(jnp.float64)


class TestGetSetDtype:
    def test_default_dtype(self):
        assert get_dtype() == jnp.float64

    def test_set_float32(self):
        set_dtype(jnp.float32)
        assert get_dtype() == jnp.float32

    def test_roundtrip(self):
        for dtype in (jnp.float16, jnp.bfloat16, jnp.float32, jnp.float64):
            set_dtype(dtype)
            assert get_dtype() == dtype

    def test_invalid_dtype_raises(self):
        with pytest.raises(ValueError, match="Unsupported dtype"):
            set_dtype(jnp.int32)

    def test_invalid_dtype_string_raises(self):
        with pytest.raises(ValueError, match="Unsupported dtype"):
            set_dtype("float64")

    def test_float64_enables_x64(self):
        set_dtype(jnp.float64)
        assert jax.config.jax_enable_x64 is True


class TestIscloseTolerance:
    @pytest.mark.parametrize(
        "dtype, expected",
        [
            (jnp.float64, (1e-8, 1e-13)),
            (jnp.float32, (1e-5, 1e-6)),
            (jnp.float16, (1e-2, 1e-3)),
            (jnp.bfloat16, (1e-2, 1e-3)),
        ],
    )
    def test_tolerance(self, dtype, expected):
        set_dtype(dtype)
        assert get_isclose_tolerance() == expected

    def test_isclose_follows_dtype(self):
        set_dtype(jnp.float32)
        assert isclose(1.0, 1.0 + 5e-6)
        set_dtype(jnp.float64)
        assert not isclose(1.0, 1.0 + 5e-6)


class TestDtypeSwitchingOutputs:
    """Output dtypes follow the configured dtype."""

    def test_rotation_matrix_dtype(self):
        set_dtype(jnp.float32)
        assert Rz(0.5).dtype == jnp.float32
        set_dtype(jnp.float64)
        assert Rz(0.5).dtype == jnp.float64

    def test_stumpff_dtype(self):
        set_dtype(jnp.float32)
        assert stumpff_c2(0.5).dtype == jnp.float32

    def test_orbital_period_float64(self):
        period = orbital_period(7000.0, 398600.435507)
        assert period.dtype == jnp.float64
        assert float(period) == pytest.approx(2.0 * math.pi * math.sqrt(7000.0**3 / 398600.435507), rel=1e-12)
