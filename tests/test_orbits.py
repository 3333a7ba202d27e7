"""Tests for states, Keplerian elements, anomalies, trajectories and ground locations."""

from __future__ import annotations

import math
import pickle

import jax.numpy as jnp
import numpy as np
import pytest

from lox_space.bodies import EARTH, MOON
from lox_space.errors import (
    CallbackError,
    ContractViolation,
    FrameRequiresInertial,
    InvalidOrbitalElements,
    InvalidTrajectory,
    OriginMismatch,
    TimeOutOfRange,
    UndefinedOriginProperty,
)
from lox_space.events import ZeroCrossing
from lox_space.frames import ICRF, ITRF, Frame
from lox_space.orbits import (
    GroundLocation,
    Keplerian,
    State,
    Trajectory,
    eccentric_to_mean,
    eccentric_to_true,
    hyperbolic_to_mean,
    hyperbolic_to_true,
    mean_to_eccentric,
    mean_to_hyperbolic,
    mean_to_parabolic,
    mean_to_true,
    parabolic_to_mean,
    true_to_eccentric,
    true_to_hyperbolic,
    true_to_mean,
)
from lox_space.time import Time, TimeDelta, TimeScale


@pytest.fixture()
def t0():
    return Time("TDB", 2023, 3, 25, 21, 8)


# ──────────────────────────────────────────────
# Anomalies
# ──────────────────────────────────────────────


class TestAnomalies:
    def test_eccentric_to_true(self) -> None:
        assert float(eccentric_to_true(math.pi / 2, 0.2)) == pytest.approx(1.7721542475852272, rel=1e-14)

    def test_hyperbolic_to_true(self) -> None:
        assert float(hyperbolic_to_true(math.pi / 2, 1.2)) == pytest.approx(2.2797028138935547, rel=1e-14)

    @pytest.mark.parametrize("e", [0.0, 0.1, 0.5, 0.9])
    @pytest.mark.parametrize("nu", [-2.5, -0.3, 0.0, 1.0, 3.0])
    def test_elliptic_roundtrip(self, nu: float, e: float) -> None:
        ecc = true_to_eccentric(nu, e)
        assert float(eccentric_to_true(ecc, e)) == pytest.approx(nu, abs=1e-12)
        mean = eccentric_to_mean(ecc, e)
        assert float(mean_to_eccentric(mean, e)) == pytest.approx(float(ecc), abs=1e-10)
        assert float(mean_to_true(true_to_mean(nu, e), e)) == pytest.approx(nu, abs=1e-10)

    @pytest.mark.parametrize("e", [1.2, 2.0, 5.0])
    def test_hyperbolic_roundtrip(self, e: float) -> None:
        nu = 0.8
        f = true_to_hyperbolic(nu, e)
        assert float(hyperbolic_to_true(f, e)) == pytest.approx(nu, abs=1e-12)
        mean = hyperbolic_to_mean(f, e)
        assert float(mean_to_hyperbolic(mean, e)) == pytest.approx(float(f), abs=1e-10)

    def test_parabolic_roundtrip(self) -> None:
        d = 0.7
        assert float(mean_to_parabolic(parabolic_to_mean(d))) == pytest.approx(d, abs=1e-12)

    def test_jit_compatible(self) -> None:
        import jax

        f = jax.jit(mean_to_eccentric)
        assert float(f(1.0, 0.3)) == pytest.approx(float(mean_to_eccentric(1.0, 0.3)), abs=1e-14)


# ──────────────────────────────────────────────
# Keplerian elements
# ──────────────────────────────────────────────


class TestKeplerian:
    def test_roundtrip(self, t0) -> None:
        k = Keplerian(t0, 7000.0, 0.01, 0.9, 0.5, 0.3, 1.2)
        k2 = k.to_cartesian().to_keplerian()
        assert k2.semi_major_axis() == pytest.approx(7000.0, rel=1e-12)
        assert k2.eccentricity() == pytest.approx(0.01, abs=1e-12)
        assert k2.inclination() == pytest.approx(0.9, abs=1e-12)
        assert k2.longitude_of_ascending_node() == pytest.approx(0.5, abs=1e-12)
        assert k2.argument_of_periapsis() == pytest.approx(0.3, abs=1e-10)
        assert k2.true_anomaly() == pytest.approx(1.2, abs=1e-10)
        assert k2.time() == t0
        assert k2.origin() == EARTH

    def test_cartesian_roundtrip(self, t0) -> None:
        s = State(t0, [6678.0, 100.0, -300.0], [0.1, 7.73, 1.2])
        assert s.to_keplerian().to_cartesian().isclose(s, rel_tol=1e-9, abs_tol=1e-9)

    def test_hyperbolic_roundtrip(self, t0) -> None:
        k = Keplerian(t0, -20000.0, 1.5, 0.4, 1.0, 2.0, 0.5)
        k2 = k.to_cartesian().to_keplerian()
        assert k2.semi_major_axis() == pytest.approx(-20000.0, rel=1e-10)
        assert k2.eccentricity() == pytest.approx(1.5, rel=1e-12)
        assert k2.true_anomaly() == pytest.approx(0.5, abs=1e-10)

    def test_circular_equatorial(self, t0) -> None:
        r = 7000.0
        v = math.sqrt(EARTH.gravitational_parameter() / r)
        k = State(t0, [r, 0.0, 0.0], [0.0, v, 0.0]).to_keplerian()
        assert k.eccentricity() == pytest.approx(0.0, abs=1e-12)
        assert k.inclination() == pytest.approx(0.0, abs=1e-12)
        assert k.longitude_of_ascending_node() == 0.0
        assert k.argument_of_periapsis() == 0.0

    def test_orbital_period(self, t0) -> None:
        k = Keplerian(t0, 7000.0, 0.01, 0.9, 0.5, 0.3, 1.2)
        expected = 2.0 * math.pi * math.sqrt(7000.0**3 / EARTH.gravitational_parameter())
        assert k.orbital_period().to_decimal_seconds() == pytest.approx(expected, rel=1e-12)

    def test_orbital_period_hyperbolic(self, t0) -> None:
        with pytest.raises(InvalidOrbitalElements):
            Keplerian(t0, -20000.0, 1.5, 0.4, 1.0, 2.0, 0.5).orbital_period()

    @pytest.mark.parametrize(
        "a, e, i, match",
        [
            (7000.0, -0.1, 0.5, "eccentricity"),
            (-7000.0, 0.1, 0.5, "semi-major axis"),
            (7000.0, 1.5, 0.5, "semi-major axis"),
            (7000.0, 0.1, 4.0, "inclination"),
        ],
    )
    def test_invalid_elements(self, t0, a, e, i, match) -> None:
        with pytest.raises(InvalidOrbitalElements, match=match):
            Keplerian(t0, a, e, i, 0.0, 0.0, 0.0)

    def test_non_inertial_frame(self, t0) -> None:
        with pytest.raises(FrameRequiresInertial):
            Keplerian(t0, 7000.0, 0.01, 0.9, 0.5, 0.3, 1.2, frame=ITRF)

    def test_missing_gravitational_parameter(self, t0) -> None:
        s = State(t0, [7000.0, 0.0, 0.0], [0.0, 7.5, 0.0], origin="SSB")
        with pytest.raises(UndefinedOriginProperty):
            s.to_keplerian()


# ──────────────────────────────────────────────
# States
# ──────────────────────────────────────────────


class TestState:
    def test_accessors(self, t0) -> None:
        s = State(t0, [1.0, 2.0, 3.0], [4.0, 5.0, 6.0], MOON)
        assert s.time() == t0
        assert s.origin() == MOON
        assert s.reference_frame() == ICRF
        np.testing.assert_array_equal(np.asarray(s.to_array()), [1.0, 2.0, 3.0, 4.0, 5.0, 6.0])

    def test_invalid_shape(self, t0) -> None:
        with pytest.raises(ValueError, match="shape"):
            State(t0, [1.0, 2.0], [4.0, 5.0, 6.0])

    def test_subtraction(self, t0) -> None:
        a = State(t0, [10.0, 20.0, 30.0], [1.0, 2.0, 3.0])
        b = State(t0, [3.0, 5.0, 7.0], [0.5, 0.5, 0.5])
        d = a - b
        np.testing.assert_allclose(np.asarray(d.position()), [7.0, 15.0, 23.0])
        np.testing.assert_allclose(np.asarray(d.velocity()), [0.5, 1.5, 2.5])

    def test_subtraction_mismatch(self, t0) -> None:
        a = State(t0, [10.0, 20.0, 30.0], [1.0, 2.0, 3.0])
        with pytest.raises(OriginMismatch):
            a - State(t0, [3.0, 5.0, 7.0], [0.0, 0.0, 0.0], MOON)
        with pytest.raises(ContractViolation):
            a - State(t0, [3.0, 5.0, 7.0], [0.0, 0.0, 0.0], frame=Frame.iau(EARTH))

    def test_rotation_lvlh(self, t0) -> None:
        s = State(t0, [6678.0, 0.0, 0.0], [0.0, 7.73, 0.0])
        m = np.asarray(s.rotation_lvlh())
        np.testing.assert_allclose(m[:, 0], [0.0, 1.0, 0.0], atol=1e-15)
        np.testing.assert_allclose(m[:, 1], [0.0, 0.0, -1.0], atol=1e-15)
        np.testing.assert_allclose(m[:, 2], [-1.0, 0.0, 0.0], atol=1e-15)
        np.testing.assert_allclose(m.T @ m, np.eye(3), atol=1e-14)

    def test_rotation_lvlh_requires_inertial(self, t0) -> None:
        s = State(t0, [6678.0, 0.0, 0.0], [0.0, 7.73, 0.0], frame=Frame.iau(EARTH))
        with pytest.raises(FrameRequiresInertial):
            s.rotation_lvlh()

    def test_frame_roundtrip(self, t0) -> None:
        s = State(t0, [6678.0, 100.0, -300.0], [0.1, 7.73, 1.2])
        back = s.to_frame(Frame.iau(EARTH)).to_frame(ICRF)
        assert back.isclose(s, rel_tol=1e-12, abs_tol=1e-9)

    def test_to_ground_location_icrf(self) -> None:
        t = Time("TAI", 2024, 7, 5, 9, 9, 18.173)
        s = State(
            t,
            [-5530.01774359, -3487.0895338, -1850.03476185],
            [1.29534407, -5.02456882, 5.6391936],
        )
        gl = s.to_ground_location()
        assert gl.longitude() == pytest.approx(2.646276127963636, rel=1e-5)
        assert gl.latitude() == pytest.approx(-0.2794495715104036, rel=1e-5)
        assert gl.altitude() == pytest.approx(417.8524158044338, rel=1e-5)

    def test_to_ground_location_body_fixed(self, t0) -> None:
        s = State(t0, [3359.927, -2398.072, 5153.0], [5.0657, 5.485, -0.744], frame=Frame.iau(EARTH))
        gl = s.to_ground_location()
        assert math.degrees(gl.latitude()) == pytest.approx(51.484, rel=1e-4)
        assert math.degrees(gl.longitude()) == pytest.approx(-35.516, rel=1e-4)
        assert gl.altitude() == pytest.approx(237.434, rel=1e-4)

    def test_pickle(self, t0) -> None:
        s = State(t0, [1.0, 2.0, 3.0], [4.0, 5.0, 6.0], MOON)
        assert pickle.loads(pickle.dumps(s)).isclose(s)


# ──────────────────────────────────────────────
# Trajectories
# ──────────────────────────────────────────────

_R0 = np.array([7000.0, 0.0, 0.0])
_V = np.array([1.0, 2.0, 3.0])


def _linear_states(t0, offsets=(0.0, 10.0, 20.0, 30.0)):
    return [State(t0 + TimeDelta.from_seconds_f64(dt), _R0 + _V * dt, _V) for dt in offsets]


class TestTrajectory:
    def test_exact_at_samples(self, t0) -> None:
        states = _linear_states(t0)
        traj = Trajectory(states)
        for s in states:
            got = traj.interpolate(s.time())
            np.testing.assert_array_equal(np.asarray(got.position()), np.asarray(s.position()))
            np.testing.assert_array_equal(np.asarray(got.velocity()), np.asarray(s.velocity()))

    def test_interpolate_linear_motion(self, t0) -> None:
        traj = Trajectory(_linear_states(t0))
        s = traj.interpolate(TimeDelta.from_seconds_f64(15.0))
        np.testing.assert_allclose(np.asarray(s.position()), _R0 + 15.0 * _V, rtol=1e-12)
        np.testing.assert_allclose(np.asarray(s.velocity()), _V, rtol=1e-12)
        assert s.time() == t0 + TimeDelta.from_seconds_f64(15.0)

    def test_interpolate_at(self, t0) -> None:
        traj = Trajectory(_linear_states(t0))
        t = t0 + TimeDelta.from_seconds_f64(25.0)
        np.testing.assert_allclose(np.asarray(traj.interpolate_at(t).position()), _R0 + 25.0 * _V, rtol=1e-12)

    def test_interpolate_at_other_scale(self, t0) -> None:
        t0_tai = t0.to_scale(TimeScale.TAI)
        traj = Trajectory(_linear_states(t0_tai))
        t = (t0_tai + TimeDelta.from_seconds_f64(15.0)).to_scale(TimeScale.TT)
        s = traj.interpolate_at(t)
        assert s.time().scale() is TimeScale.TAI
        assert s.time().isclose(t0_tai + TimeDelta.from_seconds_f64(15.0))
        np.testing.assert_allclose(np.asarray(s.position()), _R0 + 15.0 * _V, rtol=1e-12)


    def test_out_of_range_warns(self, t0) -> None:
        traj = Trajectory(_linear_states(t0))
        with pytest.warns(TimeOutOfRange):
            s = traj.interpolate(TimeDelta.from_seconds_f64(40.0))
        np.testing.assert_allclose(np.asarray(s.position()), _R0 + 40.0 * _V, rtol=1e-12)

    def test_too_few_states(self, t0) -> None:
        with pytest.raises(InvalidTrajectory, match="at least 2 states are required but only 1 were provided"):
            Trajectory(_linear_states(t0, (0.0,)))

    def test_not_increasing(self, t0) -> None:
        with pytest.raises(InvalidTrajectory, match="strictly increasing"):
            Trajectory(_linear_states(t0, (0.0, 20.0, 10.0)))

    def test_mixed_frames(self, t0) -> None:
        states = _linear_states(t0)
        states[1] = State(states[1].time(), states[1].position(), states[1].velocity(), frame=Frame.iau(EARTH))
        with pytest.raises(InvalidTrajectory, match="reference frame"):
            Trajectory(states)

    def test_numpy_roundtrip(self, t0) -> None:
        traj = Trajectory(_linear_states(t0))
        arr = traj.to_numpy()
        assert arr.shape == (4, 7)
        np.testing.assert_allclose(arr[:, 0], [0.0, 10.0, 20.0, 30.0])
        again = Trajectory.from_numpy(t0, arr)
        assert len(again) == 4
        assert again.end_time() == traj.end_time()
        np.testing.assert_allclose(again.to_numpy(), arr)

    def test_from_numpy_bad_shape(self, t0) -> None:
        with pytest.raises(InvalidTrajectory, match="shape"):
            Trajectory.from_numpy(t0, np.zeros((3, 6)))

    def test_find_events(self, t0) -> None:
        traj = Trajectory(_linear_states(t0))
        events = traj.find_events(lambda s: float(s.position()[0]) - 7015.0)
        assert len(events) == 1
        assert events[0].crossing is ZeroCrossing.UP
        assert (events[0].time - t0).to_decimal_seconds() == pytest.approx(15.0, abs=1e-6)

    def test_find_windows(self, t0) -> None:
        traj = Trajectory(_linear_states(t0))
        windows = traj.find_windows(lambda s: float(s.position()[1]) - 30.0)
        assert len(windows) == 1
        assert (windows[0].start - t0).to_decimal_seconds() == pytest.approx(15.0, abs=1e-6)
        assert windows[0].end == traj.end_time()

    def test_callback_error(self, t0) -> None:
        traj = Trajectory(_linear_states(t0))

        def boom(state):
            raise RuntimeError("boom")

        with pytest.raises(CallbackError) as info:
            traj.find_events(boom)
        assert isinstance(info.value.__cause__, RuntimeError)

    def test_to_frame(self, t0) -> None:
        traj = Trajectory(_linear_states(t0))
        rotated = traj.to_frame(Frame.iau(EARTH))
        assert rotated.reference_frame() == Frame.iau(EARTH)
        assert rotated.to_frame(ICRF).states()[2].isclose(traj.states()[2], rel_tol=1e-12, abs_tol=1e-9)


# ──────────────────────────────────────────────
# Ground locations
# ──────────────────────────────────────────────


class TestGroundLocation:
    def test_body_fixed_position(self) -> None:
        gl = GroundLocation(EARTH, math.radians(-4.3676), math.radians(40.4527), 0.0)
        np.testing.assert_allclose(
            np.asarray(gl.body_fixed_position()),
            [4846.130017870638, -370.1328551351891, 4116.364272747229],
            rtol=1e-10,
        )

    def test_rotation_to_topocentric(self) -> None:
        gl = GroundLocation(EARTH, math.radians(-4.0), math.radians(41.0), 0.0)
        m = np.asarray(gl.rotation_to_topocentric())
        np.testing.assert_allclose(m @ m.T, np.eye(3), atol=1e-14)
        # zenith axis points along the geodetic normal
        lon, lat = math.radians(-4.0), math.radians(41.0)
        normal = [math.cos(lat) * math.cos(lon), math.cos(lat) * math.sin(lon), math.sin(lat)]
        np.testing.assert_allclose(m[2], normal, atol=1e-14)

    def test_observables(self) -> None:
        gl = GroundLocation(EARTH, math.radians(-4.0), math.radians(41.0), 0.0)
        t = Time("TDB", 2012, 7, 1)
        s = State(t, [3359.927, -2398.072, 5153.0], [5.0657, 5.485, -0.744], frame=Frame.iau(EARTH))
        obs = gl.observables(s)
        assert obs.range == pytest.approx(2707.7, rel=1e-2)
        assert obs.range_rate == pytest.approx(-7.16, rel=1e-2)
        assert math.degrees(obs.azimuth) == pytest.approx(-53.418, rel=1e-2)
        assert math.degrees(obs.elevation) == pytest.approx(-7.077, rel=1e-2)

    def test_geodetic_roundtrip(self, t0) -> None:
        gl = GroundLocation(EARTH, 0.3, -0.7, 1.5)
        s = State(t0, gl.body_fixed_position(), jnp.zeros(3), frame=Frame.iau(EARTH))
        back = s.to_ground_location()
        assert back.longitude() == pytest.approx(0.3, abs=1e-12)
        assert back.latitude() == pytest.approx(-0.7, abs=1e-8)
        assert back.altitude() == pytest.approx(1.5, abs=1e-4)

    def test_pickle_and_equality(self) -> None:
        gl = GroundLocation(EARTH, 0.1, 0.2, 0.3)
        assert pickle.loads(pickle.dumps(gl)) == gl
        assert hash(gl) == hash(GroundLocation("Earth", 0.1, 0.2, 0.3))
