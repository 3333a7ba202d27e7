"""
lox_space is an astrodynamics core built on JAX: exact time scales, IERS
reference frames, orbit representations, propagators, event detection and
ground station visibility.
"""

from .config import set_dtype, get_dtype

from .errors import (
    LoxError,
    InvalidInput,
    MissingData,
    NumericFailure,
    ContractViolation,
    Propagated,
    LoxWarning,
)

from .time import (
    Date,
    Epoch,
    Time,
    TimeDelta,
    TimeOfDay,
    TimeScale,
    UTC,
    Unit,
    time_range,
)

from .eop import (
    EOPData,
    EOPExtrapolation,
    EOPProvider,
    static_eop,
    zero_eop,
)

from .bodies import (
    EARTH,
    MOON,
    SSB,
    SUN,
    Origin,
)

from .frames import (
    CIRF,
    ICRF,
    ITRF,
    TEME,
    TIRF,
    Frame,
    ReferenceSystem,
    Rotation,
    rotation,
)

from .orbits import (
    GroundLocation,
    Keplerian,
    Observables,
    State,
    Trajectory,
)

from .events import (
    Event,
    Window,
    ZeroCrossing,
    find_events,
    find_windows,
    intersect_windows,
)

from .propagators import (
    SGP4,
    GroundPropagator,
    Tle,
    Vallado,
)

from .ephemeris import AnalyticalEphemeris, Ephemeris

from .visibility import (
    ElevationMask,
    Ensemble,
    Pass,
    visibility,
    visibility_all,
)

__version__ = "0.1.0"
