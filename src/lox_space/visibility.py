"""Ground station visibility of spacecraft.

A spacecraft is visible from a ground station while

    g(t) = elevation(t) - mask(azimuth(t))

is positive.  When occulting bodies are given, ``g`` is also capped by the
normalised miss distance ``(d - R) / R`` of each body's centre from the
station-spacecraft line of sight, with ``R`` the body's mean radius, so an
eclipse of the line of sight closes the window.

:func:`visibility` finds the windows of one station/spacecraft pair with
:func:`lox_space.events.find_windows` and samples a :class:`Pass` for each.
:func:`visibility_all` evaluates every pair of an :class:`Ensemble` against a
set of stations, on a thread pool for large workloads.
"""

from __future__ import annotations

import logging
import math
import os
from collections.abc import Iterator, Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from lox_space.bodies import Origin
from lox_space.ephemeris import Ephemeris
from lox_space.errors import InvalidElevationMask, OriginMismatch
from lox_space.events import Window, find_windows
from lox_space.frames import ICRF, Frame, RotationProvider, rotation
from lox_space.math import Series
from lox_space.orbits import GroundLocation, Observables, Trajectory
from lox_space.time import Time, TimeDelta, TimeScale

logger = logging.getLogger(__name__)

PARALLEL_MIN_PAIRS = 100
PARALLEL_MIN_SPACECRAFT = 10
PARALLEL_MIN_STATIONS = 8
MIN_CHUNK_SIZE = 1
MAX_CHUNK_SIZE = 50


def _wrap(angle: float) -> float:
    wrapped = math.remainder(angle, 2.0 * math.pi)
    return math.pi if wrapped == -math.pi else wrapped


# ---------------------------------------------------------------------------
# Elevation mask
# ---------------------------------------------------------------------------


class ElevationMask:
    """Minimum elevation as a function of azimuth.

    Either a constant (``min_elevation``) or a piecewise-linear profile
    sampled at azimuths spanning ``[-pi, pi]``.

    Args:
        azimuth: Sample azimuths, strictly increasing from -pi to pi. Units: *rad*
        elevation: Minimum elevation at each sample. Units: *rad*
        min_elevation: Constant minimum elevation. Units: *rad*

    Raises:
        InvalidElevationMask: If the samples do not span ``[-pi, pi]``.
        SeriesError: If the samples are not strictly increasing.

    Examples:
        ```python
        import math
        from lox_space.visibility import ElevationMask
        ElevationMask.fixed(math.radians(5.0)).min_elevation(0.0)
        mask = ElevationMask.variable([-math.pi, 0.0, math.pi], [0.0, 5.0, 0.0])
        mask.min_elevation(math.pi / 2)  # 2.5
        ```
    """

    __slots__ = ("_fixed", "_series")

    def __init__(
        self,
        azimuth: ArrayLike | None = None,
        elevation: ArrayLike | None = None,
        min_elevation: float | None = None,
    ) -> None:
        if azimuth is not None and elevation is not None:
            az = [float(a) for a in azimuth]
            if not az or not (math.isclose(az[0], -math.pi) and math.isclose(az[-1], math.pi)):
                lo = az[0] if az else float("nan")
                hi = az[-1] if az else float("nan")
                raise InvalidElevationMask(f"invalid azimuth range: [{lo}, {hi}] does not span [-pi, pi]")
            self._fixed = None
            self._series = Series(az, elevation)
        elif min_elevation is not None:
            self._fixed = float(min_elevation)
            self._series = None
        else:
            raise InvalidElevationMask("either `azimuth` and `elevation` or `min_elevation` must be given")

    @classmethod
    def fixed(cls, min_elevation: float) -> ElevationMask:
        return cls(min_elevation=min_elevation)

    @classmethod
    def variable(cls, azimuth: ArrayLike, elevation: ArrayLike) -> ElevationMask:
        return cls(azimuth=azimuth, elevation=elevation)

    def is_fixed(self) -> bool:
        return self._fixed is not None

    def azimuth(self) -> Array | None:
        return None if self._series is None else self._series.x

    def elevation(self) -> Array | None:
        return None if self._series is None else self._series.y

    def min_elevation(self, azimuth: float = 0.0) -> float:
        """Minimum elevation at *azimuth* (wrapped into ``(-pi, pi]``)."""
        if self._fixed is not None:
            return self._fixed
        return float(self._series.interpolate(_wrap(float(azimuth))))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ElevationMask):
            return NotImplemented
        if self._fixed is not None or other._fixed is not None:
            return self._fixed == other._fixed
        return bool(jnp.array_equal(self._series.x, other._series.x)) and bool(
            jnp.array_equal(self._series.y, other._series.y)
        )

    def __reduce__(self):
        if self._fixed is not None:
            return (ElevationMask, (None, None, self._fixed))
        return (ElevationMask, ([float(a) for a in self._series.x], [float(e) for e in self._series.y]))

    def __repr__(self) -> str:
        if self._fixed is not None:
            return f"ElevationMask.fixed({self._fixed!r})"
        return f"ElevationMask.variable(n={len(self._series)})"


# ---------------------------------------------------------------------------
# Passes
# ---------------------------------------------------------------------------


class Pass:
    """A visibility window with observables sampled inside it.

    Args:
        window: Visibility window.
        times: Sample epochs, sorted, within the window.
        observables: Observables at each sample.
    """

    __slots__ = ("_window", "_times", "_observables")

    def __init__(self, window: Window, times: Sequence[Time], observables: Sequence[Observables]) -> None:
        if len(times) != len(observables):
            raise ValueError(f"got {len(times)} times but {len(observables)} observables")
        self._window = window
        self._times = list(times)
        self._observables = list(observables)

    def window(self) -> Window:
        return self._window

    def times(self) -> list[Time]:
        return list(self._times)

    def observables(self) -> list[Observables]:
        return list(self._observables)

    def interpolate(self, time: Time) -> Observables | None:
        """Observables at *time* by linear interpolation between samples.

        Azimuth is interpolated along the shorter arc.  Returns ``None``
        outside the window.
        """
        if not self._window.contains(time) or not self._times:
            return None
        if len(self._times) == 1:
            return self._observables[0]
        for i in range(len(self._times) - 1):
            t0, t1 = self._times[i], self._times[i + 1]
            if time <= t1 or i == len(self._times) - 2:
                break
        span = (t1 - t0).to_decimal_seconds()
        f = (time - t0).to_decimal_seconds() / span if span > 0.0 else 0.0
        o0, o1 = self._observables[i], self._observables[i + 1]
        azimuth = _wrap(o0.azimuth + f * _wrap(o1.azimuth - o0.azimuth))
        return Observables(
            azimuth=azimuth,
            elevation=o0.elevation + f * (o1.elevation - o0.elevation),
            range=o0.range + f * (o1.range - o0.range),
            range_rate=o0.range_rate + f * (o1.range_rate - o0.range_rate),
        )

    def __repr__(self) -> str:
        return f"Pass({self._window!r}, {len(self._times)} samples)"


class Ensemble(Mapping):
    """Named spacecraft trajectories.

    Examples:
        ```python
        ensemble = Ensemble({"SC1": traj1, "SC2": traj2})
        visibility_all(times, stations, ensemble, ephemeris)
        ```
    """

    __slots__ = ("_trajectories",)

    def __init__(self, ensemble: Mapping[str, Trajectory]) -> None:
        self._trajectories = dict(ensemble)

    def __getitem__(self, name: str) -> Trajectory:
        return self._trajectories[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._trajectories)

    def __len__(self) -> int:
        return len(self._trajectories)

    def __repr__(self) -> str:
        return f"Ensemble({sorted(self._trajectories)})"


# ---------------------------------------------------------------------------
# Single pair
# ---------------------------------------------------------------------------


def line_of_sight_clearance(station: ArrayLike, target: ArrayLike, body: ArrayLike, radius: float) -> float:
    """Normalised miss distance ``(d - R) / R`` of a body from a line of sight.

    ``d`` is the distance of the body centre from the segment between
    *station* and *target*; a negative result means the body blocks it.
    """
    a = jnp.asarray(station)
    u = jnp.asarray(target) - a
    c = jnp.asarray(body)
    s = jnp.clip(jnp.dot(c - a, u) / jnp.dot(u, u), 0.0, 1.0)
    d = jnp.linalg.norm(a + s * u - c)
    return float((d - radius) / radius)


def _visibility_function(
    gs: GroundLocation,
    mask: ElevationMask,
    sc: Trajectory,
    ephemeris: Ephemeris,
    bodies: Sequence[Origin],
    start: Time,
    provider: RotationProvider | None,
):
    origin = gs.origin()
    body_fixed = Frame.iau(origin)
    occulting = [b for b in bodies if b != origin]

    def g(t: float) -> float:
        time = start + TimeDelta.from_seconds_f64(t)
        state = sc.interpolate(time)
        obs = gs.observables(state, provider, body_fixed)
        value = obs.elevation - mask.min_elevation(obs.azimuth)
        if occulting:
            sc_icrf = state.to_frame(ICRF, provider).position()
            gs_icrf = rotation(body_fixed, ICRF, time, provider).rotate_position(gs.body_fixed_position())
            tdb = time.to_scale(TimeScale.TDB, provider)
            for body in occulting:
                r_body, _ = ephemeris.state(origin, body, tdb)
                value = min(value, line_of_sight_clearance(gs_icrf, sc_icrf, r_body, body.mean_radius()))
        return value

    return g


def _sample_pass(
    window: Window,
    times: Sequence[Time],
    gs: GroundLocation,
    sc: Trajectory,
    provider: RotationProvider | None,
) -> Pass:
    samples = [window.start]
    samples.extend(t for t in times if window.start < t < window.end)
    if window.end != window.start:
        samples.append(window.end)
    observables = [gs.observables(sc.interpolate(t), provider) for t in samples]
    return Pass(window, samples, observables)


def visibility(
    times: Sequence[Time],
    gs: GroundLocation,
    mask: ElevationMask,
    sc: Trajectory,
    ephemeris: Ephemeris,
    bodies: Sequence[Origin | str | int] | None = None,
    provider: RotationProvider | None = None,
) -> list[Pass]:
    """Passes of a spacecraft over a ground station.

    Args:
        times: Sorted sample epochs bounding the analysis; windows are
            located between consecutive samples.
        gs: Ground station.
        mask: Elevation mask of the station.
        sc: Spacecraft trajectory with the same origin as *gs*.
        ephemeris: Body states for occultation checks.
        bodies: Occulting bodies. Default: none
        provider: Earth orientation data for UT1-based epochs or frames.
            Default: ``None``

    Returns:
        list[Pass]: Passes ordered by start time.

    Raises:
        OriginMismatch: If *gs* and *sc* have different origins.
        CallbackError: If evaluating the visibility function fails, e.g.
            because of missing ephemeris data.
    """
    if gs.origin() != sc.origin():
        raise OriginMismatch("ground station and spacecraft must have the same origin")
    times = list(times)
    if len(times) < 2:
        return []
    start, end = times[0], times[-1]
    steps = [(t - start).to_decimal_seconds() for t in times]
    bodies = [Origin(b) for b in bodies or []]
    g = _visibility_function(gs, mask, sc, ephemeris, bodies, start, provider)
    windows = find_windows(g, start, end, steps)
    return [_sample_pass(w, times, gs, sc, provider) for w in windows]


# ---------------------------------------------------------------------------
# Batch
# ---------------------------------------------------------------------------


def should_use_parallel(spacecraft_count: int, ground_station_count: int) -> bool:
    """Whether a batch is large enough to run on a thread pool."""
    pairs = spacecraft_count * ground_station_count
    return pairs > PARALLEL_MIN_PAIRS and (
        spacecraft_count > PARALLEL_MIN_SPACECRAFT or ground_station_count > PARALLEL_MIN_STATIONS
    )


def chunk_size(pairs: int, threads: int) -> int:
    return max(MIN_CHUNK_SIZE, min(MAX_CHUNK_SIZE, pairs // (threads * 2)))


def _run_chunk(chunk, times, ephemeris, bodies, provider):
    out = []
    for sc_name, sc, gs_name, gs, mask in chunk:
        out.append((sc_name, gs_name, visibility(times, gs, mask, sc, ephemeris, bodies, provider)))
    return out


def visibility_all(
    times: Sequence[Time],
    ground_stations: Mapping[str, tuple[GroundLocation, ElevationMask]],
    spacecraft: Ensemble | Mapping[str, Trajectory],
    ephemeris: Ephemeris,
    bodies: Sequence[Origin | str | int] | None = None,
    provider: RotationProvider | None = None,
    max_workers: int | None = None,
) -> dict[str, dict[str, list[Pass]]]:
    """Passes for every spacecraft/ground station pair.

    Batches of more than 100 pairs with more than 10 spacecraft or more
    than 8 stations are split into chunks and evaluated on a
    :class:`~concurrent.futures.ThreadPoolExecutor`; smaller batches run
    sequentially.  Both paths give the same passes.

    The workers run the event scan and the frame transformations in Python
    and hold the GIL for most of the work; only the JAX and numpy kernels
    release it, so the speed-up is bounded by how much time those take.

    Args:
        times: Sorted sample epochs.
        ground_stations: Station name to ``(location, mask)``.
        spacecraft: Spacecraft name to trajectory.
        ephemeris: Body states for occultation checks.
        bodies: Occulting bodies. Default: none
        provider: Earth orientation data. Default: ``None``
        max_workers: Thread pool size. Default: CPU count

    Returns:
        ``{spacecraft_name: {station_name: [Pass, ...]}}``.

    Raises:
        OriginMismatch: If a station and a spacecraft have different origins.
    """
    times = list(times)
    bodies = [Origin(b) for b in bodies or []]
    pairs = [
        (sc_name, sc, gs_name, gs, mask)
        for sc_name, sc in spacecraft.items()
        for gs_name, (gs, mask) in ground_stations.items()
    ]
    result: dict[str, dict[str, list[Pass]]] = {name: {} for name in spacecraft}

    if not should_use_parallel(len(spacecraft), len(ground_stations)):
        logger.debug("visibility_all: %d pairs, sequential", len(pairs))
        for sc_name, gs_name, passes in _run_chunk(pairs, times, ephemeris, bodies, provider):
            result[sc_name][gs_name] = passes
        return result

    threads = max_workers or os.cpu_count() or 1
    size = chunk_size(len(pairs), threads)
    chunks = [pairs[i : i + size] for i in range(0, len(pairs), size)]
    logger.debug("visibility_all: %d pairs, %d threads, %d chunks of %d", len(pairs), threads, len(chunks), size)
    with ThreadPoolExecutor(max_workers=threads) as executor:
        futures = [executor.submit(_run_chunk, ch, times, ephemeris, bodies, provider) for ch in chunks]
        for future in as_completed(futures):
            for sc_name, gs_name, passes in future.result():
                result[sc_name][gs_name] = passes
    return result
