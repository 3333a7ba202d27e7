"""Tests for elevation masks, passes and ground station visibility."""

from __future__ import annotations

import importlib
import math
import pickle

import numpy as np
import pytest

vis = importlib.import_module("lox_space.visibility")
from lox_space.bodies import EARTH, MOON
from lox_space.ephemeris import AnalyticalEphemeris
from lox_space.errors import (
    CallbackError,
    InvalidElevationMask,
    MissingEphemerisData,
    OriginMismatch,
)
from lox_space.events import Window
from lox_space.orbits import GroundLocation, Observables, State, Trajectory
from lox_space.propagators import GroundPropagator, Vallado
from lox_space.time import Time, TimeDelta
from lox_space.visibility import (
    ElevationMask,
    Ensemble,
    Pass,
    chunk_size,
    line_of_sight_clearance,
    should_use_parallel,
    visibility,
    visibility_all,
)

MU_EARTH = 398600.435507
ALTITUDE = 500.0
MASK = math.radians(5.0)


@pytest.fixture()
def t0() -> Time:
    return Time("TAI", 2024, 1, 1, 12)


@pytest.fixture()
def station() -> GroundLocation:
    return GroundLocation(EARTH, 0.0, 0.0, 0.0)


def _overhead_polar_orbit(station: GroundLocation, t0: Time) -> State:
    """Circular polar orbit passing directly over an equatorial station at *t0*."""
    r_gs = np.asarray(GroundPropagator(station).propagate(t0).position())
    r_hat = r_gs / np.linalg.norm(r_gs)
    r = (np.linalg.norm(r_gs) + ALTITUDE) * r_hat
    north = np.array([0.0, 0.0, 1.0]) - r_hat[2] * r_hat
    v = math.sqrt(MU_EARTH / np.linalg.norm(r)) * north / np.linalg.norm(north)
    return State(t0, r, v)


@pytest.fixture()
def times(t0: Time) -> list[Time]:
    # one orbital period centred on the overhead pass
    return Time.range(t0 - TimeDelta.from_minutes(47.0), t0 + TimeDelta.from_minutes(47.0), TimeDelta.from_seconds(30))


@pytest.fixture()
def trajectory(station: GroundLocation, t0: Time, times: list[Time]) -> Trajectory:
    return Vallado(_overhead_polar_orbit(station, t0)).propagate(times)


class _UnavailableEphemeris:
    def state(self, origin, target, time):
        raise MissingEphemerisData(f"no data for {target.name()}")


# ──────────────────────────────────────────────
# Elevation mask
# ──────────────────────────────────────────────


class TestElevationMask:
    def test_fixed(self) -> None:
        mask = ElevationMask.fixed(MASK)
        assert mask.is_fixed()
        assert mask.min_elevation(1.234) == MASK
        assert mask.azimuth() is None

    def test_variable(self) -> None:
        mask = ElevationMask.variable([-math.pi, 0.0, math.pi], [0.0, 5.0, 0.0])
        assert not mask.is_fixed()
        assert mask.min_elevation(math.pi / 2) == pytest.approx(2.5)
        assert mask.min_elevation(0.0) == pytest.approx(5.0)

    def test_variable_wraps_azimuth(self) -> None:
        mask = ElevationMask.variable([-math.pi, 0.0, math.pi], [0.0, 5.0, 0.0])
        assert mask.min_elevation(-math.pi / 2 + 2.0 * math.pi) == pytest.approx(2.5)

    @pytest.mark.parametrize(
        "azimuth",
        [
            [0.0, math.pi],
            [-math.pi, 0.0],
            [-math.pi / 2, 0.0, math.pi / 2],
        ],
    )
    def test_invalid_azimuth_range(self, azimuth: list[float]) -> None:
        with pytest.raises(InvalidElevationMask, match="invalid azimuth range"):
            ElevationMask.variable(azimuth, [0.0] * len(azimuth))

    def test_requires_arguments(self) -> None:
        with pytest.raises(InvalidElevationMask):
            ElevationMask()

    def test_equality_and_pickle(self) -> None:
        fixed = ElevationMask.fixed(MASK)
        variable = ElevationMask.variable([-math.pi, 0.0, math.pi], [0.0, 5.0, 0.0])
        assert pickle.loads(pickle.dumps(fixed)) == fixed
        assert pickle.loads(pickle.dumps(variable)) == variable
        assert fixed != variable


# ──────────────────────────────────────────────
# Pass
# ──────────────────────────────────────────────


class TestPass:
    @pytest.fixture()
    def sample_pass(self, t0: Time) -> Pass:
        times = [t0, t0 + TimeDelta.from_seconds(10), t0 + TimeDelta.from_seconds(20)]
        observables = [
            Observables(3.0, 0.1, 1000.0, -1.0),
            Observables(-3.0, 0.3, 800.0, 0.0),
            Observables(-2.8, 0.2, 900.0, 1.0),
        ]
        return Pass(Window(times[0], times[-1]), times, observables)

    def test_accessors(self, sample_pass: Pass, t0: Time) -> None:
        assert sample_pass.window().start == t0
        assert len(sample_pass.times()) == 3
        assert sample_pass.observables()[1].range == 800.0

    def test_interpolate(self, sample_pass: Pass, t0: Time) -> None:
        obs = sample_pass.interpolate(t0 + TimeDelta.from_seconds(15))
        assert obs.elevation == pytest.approx(0.25)
        assert obs.range == pytest.approx(850.0)
        assert obs.range_rate == pytest.approx(0.5)
        assert obs.azimuth == pytest.approx(-2.9)

    def test_interpolate_across_azimuth_wrap(self, sample_pass: Pass, t0: Time) -> None:
        obs = sample_pass.interpolate(t0 + TimeDelta.from_seconds(5))
        assert abs(obs.azimuth) == pytest.approx(math.pi, abs=1e-12)

    def test_interpolate_at_sample(self, sample_pass: Pass, t0: Time) -> None:
        obs = sample_pass.interpolate(t0 + TimeDelta.from_seconds(10))
        assert obs.elevation == pytest.approx(0.3)

    def test_outside_window(self, sample_pass: Pass, t0: Time) -> None:
        assert sample_pass.interpolate(t0 - TimeDelta.from_seconds(1)) is None
        assert sample_pass.interpolate(t0 + TimeDelta.from_seconds(21)) is None

    def test_mismatched_lengths(self, t0: Time) -> None:
        with pytest.raises(ValueError):
            Pass(Window(t0, t0), [t0], [])


# ──────────────────────────────────────────────
# Line of sight
# ──────────────────────────────────────────────


class TestLineOfSight:
    @pytest.mark.parametrize(
        "body, expected",
        [
            ([0.0, 1.0, 0.0], -0.5),
            ([0.0, 4.0, 0.0], 1.0),
            ([20.0, 0.0, 0.0], 4.0),
        ],
    )
    def test_clearance(self, body: list[float], expected: float) -> None:
        clearance = line_of_sight_clearance([-10.0, 0.0, 0.0], [10.0, 0.0, 0.0], body, 2.0)
        assert clearance == pytest.approx(expected)


# ──────────────────────────────────────────────
# Visibility
# ──────────────────────────────────────────────


class TestVisibility:
    def test_overhead_pass(self, times, station, trajectory) -> None:
        mask = ElevationMask.fixed(MASK)
        passes = visibility(times, station, mask, trajectory, AnalyticalEphemeris())
        assert len(passes) >= 1
        longest = max(passes, key=lambda p: p.window().duration().to_decimal_seconds())
        assert longest.window().duration().to_decimal_seconds() >= 6.0 * 60.0

        for p in passes:
            assert times[0] <= p.window().start <= p.window().end <= times[-1]
            assert p.times()[0] == p.window().start
            assert p.times()[-1] == p.window().end
            for obs in p.observables()[1:-1]:
                assert obs.elevation >= mask.min_elevation(obs.azimuth) - 1e-9

    def test_peak_elevation(self, times, station, trajectory, t0) -> None:
        passes = visibility(times, station, ElevationMask.fixed(MASK), trajectory, AnalyticalEphemeris())
        (overhead,) = [p for p in passes if p.window().contains(t0)]
        assert overhead.interpolate(t0).elevation > math.radians(85.0)

    def test_windows_match_with_distant_occulting_body(self, times, station, trajectory) -> None:
        mask = ElevationMask.fixed(MASK)
        ephemeris = AnalyticalEphemeris()
        plain = visibility(times, station, mask, trajectory, ephemeris)
        occulted = visibility(times, station, mask, trajectory, ephemeris, bodies=[MOON, EARTH])
        assert len(plain) == len(occulted)
        for a, b in zip(plain, occulted):
            assert a.window().start.isclose(b.window().start)
            assert a.window().end.isclose(b.window().end)

    def test_missing_ephemeris(self, times, station, trajectory) -> None:
        with pytest.raises(CallbackError) as excinfo:
            visibility(times, station, ElevationMask.fixed(MASK), trajectory, _UnavailableEphemeris(), bodies=["Moon"])
        assert isinstance(excinfo.value.__cause__, MissingEphemerisData)

    def test_origin_mismatch(self, times, trajectory) -> None:
        lunar = GroundLocation(MOON, 0.0, 0.0, 0.0)
        with pytest.raises(OriginMismatch, match="same origin"):
            visibility(times, lunar, ElevationMask.fixed(MASK), trajectory, AnalyticalEphemeris())

    def test_too_few_times(self, times, station, trajectory) -> None:
        assert visibility(times[:1], station, ElevationMask.fixed(MASK), trajectory, AnalyticalEphemeris()) == []


# ──────────────────────────────────────────────
# Batch
# ──────────────────────────────────────────────


class TestBatch:
    @pytest.mark.parametrize(
        "spacecraft, stations, expected",
        [
            (5, 5, False),
            (50, 2, False),
            (20, 10, True),
            (13, 8, True),
            (8, 13, True),
            (10, 8, False),
        ],
    )
    def test_should_use_parallel(self, spacecraft: int, stations: int, expected: bool) -> None:
        assert should_use_parallel(spacecraft, stations) is expected

    @pytest.mark.parametrize(
        "pairs, threads, expected",
        [
            (1000, 4, 50),
            (10, 8, 1),
            (200, 4, 25),
        ],
    )
    def test_chunk_size(self, pairs: int, threads: int, expected: int) -> None:
        assert chunk_size(pairs, threads) == expected

    def test_ensemble(self, trajectory) -> None:
        ensemble = Ensemble({"SC1": trajectory})
        assert len(ensemble) == 1
        assert list(ensemble) == ["SC1"]
        assert ensemble["SC1"] is trajectory

    def test_parallel_matches_sequential(self, monkeypatch, t0, station) -> None:
        times = Time.range(t0 - TimeDelta.from_minutes(20.0), t0 + TimeDelta.from_minutes(20.0), TimeDelta.from_seconds(60))
        sc1 = Vallado(_overhead_polar_orbit(station, t0)).propagate(times)
        sc2 = Vallado(_overhead_polar_orbit(station, t0 + TimeDelta.from_minutes(5.0))).propagate(times)
        spacecraft = Ensemble({"SC1": sc1, "SC2": sc2})
        stations = {
            "Null Island": (station, ElevationMask.fixed(MASK)),
            "East": (GroundLocation(EARTH, math.radians(10.0), 0.0, 0.0), ElevationMask.fixed(MASK)),
        }
        ephemeris = AnalyticalEphemeris()

        sequential = visibility_all(times, stations, spacecraft, ephemeris)

        monkeypatch.setattr(vis, "PARALLEL_MIN_PAIRS", 0)
        monkeypatch.setattr(vis, "PARALLEL_MIN_SPACECRAFT", 0)
        assert should_use_parallel(len(spacecraft), len(stations))
        parallel = visibility_all(times, stations, spacecraft, ephemeris, max_workers=2)

        assert set(parallel) == {"SC1", "SC2"}
        for sc_name, by_station in sequential.items():
            assert set(by_station) == set(stations)
            for gs_name, passes in by_station.items():
                other = parallel[sc_name][gs_name]
                assert [p.window() for p in passes] == [p.window() for p in other]
                assert [p.times() for p in passes] == [p.times() for p in other]
        assert len(sequential["SC1"]["Null Island"]) == 1
