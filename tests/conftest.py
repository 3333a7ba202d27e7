import jax.numpy as jnp
import pytest

from lox_space.config import set_dtype
from lox_space.eop import EOPExtrapolation, EOPProvider, static_eop


@pytest.fixture(autouse=True)
def _ensure_float64():
    """Set float64 precision before every test.

    Tests that exercise reduced precision override the dtype themselves.
    """
    set_dtype(jnp.float64)


@pytest.fixture()
def provider() -> EOPProvider:
    """Constant EOP values covering 1992-2030, raising outside that span."""
    return EOPProvider(
        static_eop(ut1_utc=-0.1, mjd_min=48622.0, mjd_max=62502.0),
        EOPExtrapolation.ERROR,
    )
