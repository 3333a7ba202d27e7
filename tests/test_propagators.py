"""Tests for the Vallado, SGP4 and ground propagators and TLE handling."""

from __future__ import annotations

import math

import numpy as np
import pytest
from sgp4.api import WGS72, Satrec

from lox_space.bodies import EARTH
from lox_space.errors import (
    FrameRequiresInertial,
    InvalidInput,
    InvalidTle,
    PropagationOutsideValidity,
    UnknownFrame,
)
from lox_space.events import ZeroCrossing
from lox_space.frames import ICRF, ITRF, TEME
from lox_space.orbits import GroundLocation, Keplerian, State, Trajectory
from lox_space.propagators import (
    SGP4,
    GroundPropagator,
    Tle,
    Vallado,
    compute_checksum,
    stumpff_c2,
    stumpff_c3,
    universal_kepler,
    validate_tle_line,
)
from lox_space.time import UTC, Time, TimeDelta, TimeScale

ISS_NAME = "ISS (ZARYA)"
ISS_LINE1 = "1 25544U 98067A   24170.37528350  .00016566  00000+0  30244-3 0  9996"
ISS_LINE2 = "2 25544  51.6410 309.3890 0010444 339.5369 107.8830 15.49495945458731"
ISS_TLE = f"{ISS_NAME}\n{ISS_LINE1}\n{ISS_LINE2}\n"

# Geostationary, deep-space branch of the model
INTELSAT_LINE1 = "1 41747U 16053A   25026.69560333 -.00000008  00000+0  00000+0 0  9995"
INTELSAT_LINE2 = "2 41747   0.0093  36.1594 0001240 298.1404 110.8362  1.00272270 30870"


def _with_checksum(line: str) -> str:
    return line[:68] + str(compute_checksum(line))


MU_EARTH = 398600.435507


@pytest.fixture()
def molniya() -> Keplerian:
    time = UTC(2023, 3, 25, 21, 8, 0.0).to_scale(TimeScale.TDB)
    return Keplerian(
        time,
        24464.560,
        0.7311,
        0.122138,
        1.00681,
        3.10686,
        0.44369564302687126,
    )


# ──────────────────────────────────────────────
# Stumpff functions and the universal Kepler solver
# ──────────────────────────────────────────────


class TestStumpff:
    @pytest.mark.parametrize("psi", [-30.0, -1.5, -0.5, 0.5, 1.5, 30.0])
    def test_c2_closed_form(self, psi: float) -> None:
        if psi > 0:
            expected = (1.0 - math.cos(math.sqrt(psi))) / psi
        else:
            expected = (1.0 - math.cosh(math.sqrt(-psi))) / psi
        assert float(stumpff_c2(psi)) == pytest.approx(expected, rel=1e-8)

    @pytest.mark.parametrize("psi", [-30.0, -1.5, -0.5, 0.5, 1.5, 30.0])
    def test_c3_closed_form(self, psi: float) -> None:
        sq = math.sqrt(abs(psi))
        if psi > 0:
            expected = (sq - math.sin(sq)) / sq**3
        else:
            expected = (math.sinh(sq) - sq) / sq**3
        assert float(stumpff_c3(psi)) == pytest.approx(expected, rel=1e-10)

    def test_limits_at_zero(self) -> None:
        assert float(stumpff_c2(0.0)) == pytest.approx(0.5, rel=1e-15)
        assert float(stumpff_c3(0.0)) == pytest.approx(1.0 / 6.0, rel=1e-15)


class TestUniversalKepler:
    def test_circular_quarter_orbit(self) -> None:
        r = 7000.0
        v = math.sqrt(MU_EARTH / r)
        period = 2.0 * math.pi * math.sqrt(r**3 / MU_EARTH)
        r1, v1, converged, _ = universal_kepler([r, 0.0, 0.0], [0.0, v, 0.0], period / 4.0, MU_EARTH)
        assert bool(converged)
        np.testing.assert_allclose(np.asarray(r1), [0.0, r, 0.0], atol=1e-6)
        np.testing.assert_allclose(np.asarray(v1), [-v, 0.0, 0.0], atol=1e-9)

    def test_backwards_in_time(self) -> None:
        r0 = np.array([7000.0, 100.0, -300.0])
        v0 = np.array([0.1, 7.4, 1.2])
        r1, v1, converged, _ = universal_kepler(r0, v0, 1234.5, MU_EARTH)
        assert bool(converged)
        r2, v2, converged, _ = universal_kepler(r1, v1, -1234.5, MU_EARTH)
        assert bool(converged)
        np.testing.assert_allclose(np.asarray(r2), r0, atol=1e-6)
        np.testing.assert_allclose(np.asarray(v2), v0, atol=1e-9)

    def test_hyperbolic_conserves_energy(self) -> None:
        r0 = np.array([7000.0, 0.0, 0.0])
        v0 = np.array([0.0, 12.0, 0.0])
        r1, v1, converged, _ = universal_kepler(r0, v0, 3600.0, MU_EARTH)
        assert bool(converged)
        energy0 = 0.5 * v0 @ v0 - MU_EARTH / np.linalg.norm(r0)
        r1, v1 = np.asarray(r1), np.asarray(v1)
        energy1 = 0.5 * v1 @ v1 - MU_EARTH / np.linalg.norm(r1)
        assert energy1 == pytest.approx(energy0, rel=1e-9)
        h0 = np.cross(r0, v0)
        np.testing.assert_allclose(np.cross(r1, v1), h0, rtol=1e-9)

    def test_iteration_cap(self) -> None:
        _, _, converged, iterations = universal_kepler(
            [7000.0, 0.0, 0.0], [0.0, 7.0, 1.0], 5000.0, MU_EARTH, 1e-30, max_iter=2
        )
        assert not bool(converged)
        assert int(iterations) == 2


# ──────────────────────────────────────────────
# Vallado propagator
# ──────────────────────────────────────────────


class TestVallado:
    def test_one_period_round_trip(self, molniya: Keplerian) -> None:
        s0 = molniya.to_cartesian()
        period = molniya.orbital_period()
        s1 = Vallado(s0).propagate(s0.time() + period)
        assert s1.time() == s0.time() + period
        np.testing.assert_allclose(np.asarray(s1.position()), np.asarray(s0.position()), atol=1e-6)
        np.testing.assert_allclose(np.asarray(s1.velocity()), np.asarray(s0.velocity()), atol=1e-9)

    def test_elements_after_one_period(self, molniya: Keplerian) -> None:
        s0 = molniya.to_cartesian()
        k1 = Vallado(s0).propagate(s0.time() + molniya.orbital_period()).to_keplerian()
        assert k1.semi_major_axis() == pytest.approx(molniya.semi_major_axis(), rel=1e-8)
        assert k1.eccentricity() == pytest.approx(molniya.eccentricity(), rel=1e-8)
        assert k1.inclination() == pytest.approx(molniya.inclination(), rel=1e-8)
        assert k1.longitude_of_ascending_node() == pytest.approx(molniya.longitude_of_ascending_node(), rel=1e-8)
        assert k1.argument_of_periapsis() == pytest.approx(molniya.argument_of_periapsis(), rel=1e-8)
        assert k1.true_anomaly() == pytest.approx(molniya.true_anomaly(), rel=1e-8)

    def test_zero_time_of_flight(self, molniya: Keplerian) -> None:
        s0 = molniya.to_cartesian()
        assert Vallado(s0).propagate(s0.time()).isclose(s0)

    def test_rejects_rotating_frame(self, molniya: Keplerian) -> None:
        s0 = molniya.to_cartesian()
        rotating = State(s0.time(), s0.position(), s0.velocity(), EARTH, ITRF)
        with pytest.raises(FrameRequiresInertial):
            Vallado(rotating)

    def test_trajectory(self, molniya: Keplerian) -> None:
        s0 = molniya.to_cartesian()
        period = molniya.orbital_period().to_decimal_seconds()
        end = math.ceil(period / 60.0) * 60
        times = [s0.time() + dt for dt in TimeDelta.range(0, end, 60)]
        prop = Vallado(s0)
        trajectory = prop.propagate(times)

        assert isinstance(trajectory, Trajectory)
        assert len(trajectory) == len(times)
        assert trajectory.start_time() == s0.time()

        t1 = s0.time() + molniya.orbital_period()
        expected = prop.propagate(t1)
        actual = trajectory.interpolate_at(t1)
        np.testing.assert_allclose(np.asarray(actual.position()), np.asarray(expected.position()), atol=1e-2)
        np.testing.assert_allclose(np.asarray(actual.velocity()), np.asarray(expected.velocity()), atol=1e-4)

        # apoapsis then periapsis
        events = trajectory.find_events(lambda s: float(s.position() @ s.velocity()))
        assert [e.crossing for e in events] == [ZeroCrossing.DOWN, ZeroCrossing.UP]
        nu_apo = trajectory.interpolate_at(events[0].time).to_keplerian().true_anomaly()
        nu_peri = trajectory.interpolate_at(events[1].time).to_keplerian().true_anomaly()
        assert nu_apo == pytest.approx(math.pi, abs=1e-3)
        assert min(nu_peri, 2.0 * math.pi - nu_peri) == pytest.approx(0.0, abs=1e-3)

        # one pass north of the equator
        windows = trajectory.find_windows(lambda s: float(s.position()[2]))
        assert len(windows) == 1
        assert trajectory.start_time() < windows[0].start < windows[0].end < trajectory.end_time()

    def test_repr(self, molniya: Keplerian) -> None:
        assert repr(Vallado(molniya.to_cartesian())).startswith("Vallado(")


# ──────────────────────────────────────────────
# TLE
# ──────────────────────────────────────────────


class TestTle:
    def test_checksum(self) -> None:
        assert compute_checksum(ISS_LINE1) == 6
        assert compute_checksum(ISS_LINE2) == 1

    def test_validate_line(self) -> None:
        assert validate_tle_line(ISS_LINE1 + "  ", 1) == ISS_LINE1

    def test_bad_checksum(self) -> None:
        with pytest.raises(InvalidTle, match="checksum"):
            validate_tle_line(ISS_LINE1[:-1] + "0", 1)

    def test_bad_length(self) -> None:
        with pytest.raises(InvalidTle, match="69 characters"):
            validate_tle_line(ISS_LINE1[:60], 1)

    def test_wrong_line_number(self) -> None:
        with pytest.raises(InvalidTle, match="does not start"):
            validate_tle_line(ISS_LINE2, 1)

    def test_parse_three_lines(self) -> None:
        tle = Tle.parse(ISS_TLE)
        assert tle.name == ISS_NAME
        assert tle.line1 == ISS_LINE1
        assert tle.catalogue_number() == "25544"
        assert str(tle) == ISS_TLE.strip()

    def test_parse_two_lines(self) -> None:
        tle = Tle.parse(f"{ISS_LINE1}\n{ISS_LINE2}")
        assert tle.name is None
        assert tle.line2 == ISS_LINE2

    def test_parse_wrong_line_count(self) -> None:
        with pytest.raises(InvalidTle, match="2 or 3 lines"):
            Tle.parse(ISS_LINE1)

    def test_catalogue_mismatch(self) -> None:
        with pytest.raises(InvalidTle, match="catalogue numbers"):
            Tle.from_lines(ISS_LINE1, INTELSAT_LINE2)

    @pytest.mark.parametrize(
        "line1, line2, match",
        [
            (ISS_LINE1, ISS_LINE2.replace(" 51.6410", " 5X.6410"), "inclination"),
            (ISS_LINE1, ISS_LINE2.replace("0010444", "0.10444"), "eccentricity"),
            (ISS_LINE1, ISS_LINE2.replace(" 107.8830", " 107.88 0"), "mean anomaly"),
            (ISS_LINE1, ISS_LINE2[:16] + "0" + ISS_LINE2[17:], "blank column 17"),
            (ISS_LINE1.replace("24170.37528350", "24170.3752835X"), ISS_LINE2, "epoch"),
            (ISS_LINE1[:8] + "9" + ISS_LINE1[9:], ISS_LINE2, "blank column 9"),
        ],
    )
    def test_malformed_columns(self, line1: str, line2: str, match: str) -> None:
        line1, line2 = _with_checksum(line1), _with_checksum(line2)
        with pytest.raises(InvalidTle, match=match):
            Tle.from_lines(line1, line2)
        with pytest.raises(InvalidTle, match=match):
            SGP4(f"{line1}\n{line2}")


    def test_epoch(self) -> None:
        epoch = Tle.parse(ISS_TLE).epoch()
        assert epoch.scale() is TimeScale.TAI
        # 2024 day 170 is June 18th, TAI - UTC = 37 s
        midnight = Time("TAI", 2024, 6, 18, 0, 0, 37.0)
        assert (epoch - midnight).to_decimal_seconds() == pytest.approx(0.37528350 * 86400.0, abs=1e-6)


# ──────────────────────────────────────────────
# SGP4
# ──────────────────────────────────────────────


class TestSGP4:
    def test_unknown_gravity_model(self) -> None:
        with pytest.raises(InvalidInput, match="wgs72, wgs72old, wgs84"):
            SGP4(ISS_TLE, gravity="egm96")

    def test_gravity_model_name_is_case_insensitive(self) -> None:
        assert SGP4(ISS_TLE, gravity="WGS84").tle() == Tle.parse(ISS_TLE)

    def test_matches_reference_model(self) -> None:
        sgp4 = SGP4(ISS_TLE)
        state = sgp4.propagate(sgp4.time() + TimeDelta.from_minutes(90.0))
        _, r, v = Satrec.twoline2rv(ISS_LINE1, ISS_LINE2, WGS72).sgp4_tsince(90.0)
        assert state.reference_frame() == TEME
        assert state.origin() == EARTH
        np.testing.assert_allclose(np.asarray(state.position()), r, atol=1e-8)
        np.testing.assert_allclose(np.asarray(state.velocity()), v, atol=1e-11)

    def test_epoch_state(self) -> None:
        sgp4 = SGP4(Tle.parse(ISS_TLE))
        state = sgp4.propagate(sgp4.time())
        _, r, _ = Satrec.twoline2rv(ISS_LINE1, ISS_LINE2, WGS72).sgp4_tsince(0.0)
        np.testing.assert_allclose(np.asarray(state.position()), r, atol=1e-8)

    def test_orbital_period(self, provider) -> None:
        sgp4 = SGP4(ISS_TLE)
        t1 = sgp4.time() + TimeDelta.from_minutes(92.821)
        k1 = sgp4.propagate(t1, provider, frame=ICRF).to_keplerian()
        assert k1.orbital_period().to_decimal_seconds() == pytest.approx(92.821 * 60.0, rel=1e-4)

    def test_deep_space(self) -> None:
        sgp4 = SGP4(f"{INTELSAT_LINE1}\n{INTELSAT_LINE2}")
        state = sgp4.propagate(sgp4.time() + TimeDelta.from_minutes(720.0))
        _, r, _ = Satrec.twoline2rv(INTELSAT_LINE1, INTELSAT_LINE2, WGS72).sgp4_tsince(720.0)
        np.testing.assert_allclose(np.asarray(state.position()), r, atol=1e-8)
        assert float(np.linalg.norm(np.asarray(state.position()))) == pytest.approx(42164.0, rel=1e-3)

    def test_other_time_scale(self) -> None:
        sgp4 = SGP4(ISS_TLE)
        t_tai = sgp4.time() + TimeDelta.from_minutes(10.0)
        t_tt = t_tai.to_scale(TimeScale.TT)
        a = sgp4.propagate(t_tai)
        b = sgp4.propagate(t_tt)
        np.testing.assert_allclose(np.asarray(a.position()), np.asarray(b.position()), atol=1e-8)

    def test_trajectory(self) -> None:
        sgp4 = SGP4(ISS_TLE)
        times = Time.range(sgp4.time(), sgp4.time() + TimeDelta.from_minutes(10.0), TimeDelta.from_minutes(1.0))
        trajectory = sgp4.propagate(times)
        assert isinstance(trajectory, Trajectory)
        assert len(trajectory) == 11
        assert trajectory.reference_frame() == TEME

    def test_invalid_tle(self) -> None:
        with pytest.raises(InvalidTle):
            SGP4(f"{ISS_LINE1[:-1]}0\n{ISS_LINE2}")

    def test_outside_validity_warns(self) -> None:
        sgp4 = SGP4(ISS_TLE)
        t1 = sgp4.time() + TimeDelta.from_days(40.0)
        with pytest.warns(PropagationOutsideValidity):
            state, warning = sgp4.propagate(t1, return_warning=True)
        assert isinstance(warning, PropagationOutsideValidity)
        assert state.time() == t1

    def test_inside_validity_returns_none(self) -> None:
        sgp4 = SGP4(ISS_TLE)
        _, warning = sgp4.propagate(sgp4.time() + TimeDelta.from_days(1.0), return_warning=True)
        assert warning is None


# ──────────────────────────────────────────────
# Ground propagator
# ──────────────────────────────────────────────


class TestGroundPropagator:
    def test_icrf_position(self) -> None:
        location = GroundLocation(EARTH, math.radians(-4.3676), math.radians(40.4527), 0.0)
        tai = UTC.from_iso("2022-01-31T23:00:00").to_tai()
        state = GroundPropagator(location).propagate(tai)
        expected = [-1765.9535510583582, 4524.585984442561, 4120.189198495323]
        assert state.reference_frame() == ICRF
        np.testing.assert_allclose(np.asarray(state.position()), expected, rtol=1e-4)

    def test_radius_is_constant(self) -> None:
        location = GroundLocation(EARTH, 0.3, -0.2, 0.5)
        t0 = Time("TAI", 2022, 1, 31, 23)
        trajectory = GroundPropagator(location).propagate([t0, t0 + TimeDelta.from_hours(6.0)])
        radii = [float(np.linalg.norm(np.asarray(s.position()))) for s in trajectory]
        assert radii[0] == pytest.approx(radii[1], rel=1e-12)

    def test_body_without_rotation_model(self) -> None:
        with pytest.raises(UnknownFrame):
            GroundPropagator(GroundLocation("Phobos", 0.0, 0.0, 0.0))
