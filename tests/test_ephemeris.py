"""Tests for body chains and the analytical Sun/Moon ephemeris."""

from __future__ import annotations

import numpy as np
import pytest

from lox_space.bodies import EARTH, MOON, SSB, SUN, Origin
from lox_space.ephemeris import (
    AnalyticalEphemeris,
    ancestors,
    moon_position,
    path_from_ids,
    path_to_ssb,
    sun_position,
)
from lox_space.errors import MissingEphemerisData
from lox_space.orbits import State
from lox_space.time import Epoch, Time, TimeScale, Unit

AU = 149597870.7


@pytest.fixture()
def epoch() -> Time:
    return Time("TDB", 2024, 3, 20, 3, 6)


# ──────────────────────────────────────────────
# Body chains
# ──────────────────────────────────────────────


class TestPaths:
    def test_ancestors(self) -> None:
        assert ancestors(399) == [399, 3, 0]
        assert ancestors(3) == [3, 0]
        assert ancestors(0) == [0]

    @pytest.mark.parametrize(
        "origin, target, expected",
        [
            (399, 499, [399, 3, 0, 4, 499]),
            (399, 0, [399, 3, 0]),
            (0, 399, [0, 3, 399]),
            (399, 3, [399, 3]),
            (3, 399, [3, 399]),
            (399, 301, [399, 3, 301]),
            (301, 399, [301, 3, 399]),
            (10, 399, [10, 0, 3, 399]),
        ],
    )
    def test_path_from_ids(self, origin: int, target: int, expected: list[int]) -> None:
        assert path_from_ids(origin, target) == expected

    def test_path_to_ssb(self) -> None:
        assert path_to_ssb("Moon") == [MOON, Origin(3), SSB]


# ──────────────────────────────────────────────
# Analytical series
# ──────────────────────────────────────────────


class TestSeries:
    def test_sun_distance(self, epoch: Time) -> None:
        t = epoch.to_scale(TimeScale.TT).julian_date(Epoch.J2000, Unit.CENTURIES)
        distance = float(np.linalg.norm(np.asarray(sun_position(t))))
        assert distance == pytest.approx(AU, rel=0.02)

    def test_sun_near_equinox(self, epoch: Time) -> None:
        # March equinox 2024: the Sun crosses the equator towards +x
        t = epoch.to_scale(TimeScale.TT).julian_date(Epoch.J2000, Unit.CENTURIES)
        r = np.asarray(sun_position(t))
        assert abs(r[2]) / np.linalg.norm(r) < 5e-3
        assert r[0] > 0.99 * np.linalg.norm(r)

    @pytest.mark.parametrize("days", [0.0, 3.5, 7.0, 14.0, 21.0])
    def test_moon_distance(self, epoch: Time, days: float) -> None:
        t = epoch.to_scale(TimeScale.TT).julian_date(Epoch.J2000, Unit.CENTURIES) + days / 36525.0
        distance = float(np.linalg.norm(np.asarray(moon_position(t))))
        assert 356000.0 < distance < 407000.0


# ──────────────────────────────────────────────
# AnalyticalEphemeris
# ──────────────────────────────────────────────


class TestAnalyticalEphemeris:
    def test_bodies(self) -> None:
        ids = [b.id() for b in AnalyticalEphemeris().bodies()]
        assert ids == [0, 3, 10, 301, 399]

    def test_earth_sun_state(self, epoch: Time) -> None:
        r, v = AnalyticalEphemeris().state(EARTH, SUN, epoch)
        assert float(np.linalg.norm(np.asarray(r))) == pytest.approx(AU, rel=0.02)
        assert float(np.linalg.norm(np.asarray(v))) == pytest.approx(29.8, rel=0.03)

    def test_earth_moon_state(self, epoch: Time) -> None:
        r, v = AnalyticalEphemeris().state(EARTH, MOON, epoch)
        assert 356000.0 < float(np.linalg.norm(np.asarray(r))) < 407000.0
        assert 0.9 < float(np.linalg.norm(np.asarray(v))) < 1.1

    def test_antisymmetric(self, epoch: Time) -> None:
        ephemeris = AnalyticalEphemeris()
        r1, v1 = ephemeris.state(EARTH, MOON, epoch)
        r2, v2 = ephemeris.state(MOON, EARTH, epoch)
        np.testing.assert_allclose(np.asarray(r1), -np.asarray(r2))
        np.testing.assert_allclose(np.asarray(v1), -np.asarray(v2))

    def test_barycenter_lies_between_earth_and_moon(self, epoch: Time) -> None:
        ephemeris = AnalyticalEphemeris()
        r_emb = np.asarray(ephemeris.position(EARTH, Origin(3), epoch))
        r_moon = np.asarray(ephemeris.position(EARTH, MOON, epoch))
        ratio = np.linalg.norm(r_emb) / np.linalg.norm(r_moon)
        assert ratio == pytest.approx(0.01215, rel=1e-2)
        np.testing.assert_allclose(np.cross(r_emb, r_moon), 0.0, atol=1e-3)

    def test_missing_body(self, epoch: Time) -> None:
        with pytest.raises(MissingEphemerisData, match="Mars"):
            AnalyticalEphemeris().state(EARTH, Origin("Mars"), epoch)


# ──────────────────────────────────────────────
# Origin changes
# ──────────────────────────────────────────────


class TestToOrigin:
    def test_earth_to_moon_and_back(self, epoch: Time) -> None:
        ephemeris = AnalyticalEphemeris()
        s0 = State(epoch, [7000.0, 0.0, 0.0], [0.0, 7.5, 0.0])
        s1 = s0.to_origin(MOON, ephemeris)
        assert s1.origin() == MOON

        r_moon, _ = ephemeris.state(EARTH, MOON, epoch)
        np.testing.assert_allclose(
            np.asarray(s1.position()), np.asarray(s0.position()) - np.asarray(r_moon), atol=1e-8
        )

        s2 = s1.to_origin(EARTH, ephemeris)
        np.testing.assert_allclose(np.asarray(s2.position()), np.asarray(s0.position()), atol=1e-6)
        np.testing.assert_allclose(np.asarray(s2.velocity()), np.asarray(s0.velocity()), atol=1e-9)

    def test_same_origin(self, epoch: Time) -> None:
        s0 = State(epoch, [7000.0, 0.0, 0.0], [0.0, 7.5, 0.0])
        assert s0.to_origin(EARTH, AnalyticalEphemeris()) is s0

    def test_missing_data(self, epoch: Time) -> None:
        s0 = State(epoch, [7000.0, 0.0, 0.0], [0.0, 7.5, 0.0])
        with pytest.raises(MissingEphemerisData):
            s0.to_origin("Mars", AnalyticalEphemeris())
