"""Earth Orientation Parameters (EOP).

EOP tables are stored as sorted JAX arrays and interpolated with
``jnp.searchsorted``; the lookup functions work inside ``jax.jit`` and
``jax.vmap``.  :class:`EOPProvider` wraps a table for use by the time-scale
and frame layers.

Typical usage::

    from lox_space.eop import EOPProvider, static_eop
    provider = EOPProvider(static_eop(ut1_utc=-0.17))
    provider.delta_ut1_utc(59569.5)
"""

from lox_space.eop._lookup import (
    get_dpsi_deps,
    get_dxdy,
    get_eop,
    get_lod,
    get_pm,
    get_ut1_utc,
    in_range,
)
from lox_space.eop._providers import EOPProvider, eop_from_arrays, static_eop, zero_eop
from lox_space.eop._types import EOPData, EOPExtrapolation

__all__ = [
    "EOPData",
    "EOPExtrapolation",
    "EOPProvider",
    "eop_from_arrays",
    "get_dpsi_deps",
    "get_dxdy",
    "get_eop",
    "get_lod",
    "get_pm",
    "get_ut1_utc",
    "in_range",
    "static_eop",
    "zero_eop",
]
