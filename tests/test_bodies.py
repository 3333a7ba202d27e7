"""Tests for the origin catalogue."""

import math
import pickle

import pytest

from lox_space.bodies import EARTH, JUPITER, MOON, SSB, SUN, Origin, all_origins
from lox_space.errors import UndefinedOriginProperty, UnknownOrigin


class TestLookup:
    @pytest.mark.parametrize("key", ["Earth", "earth", " EARTH ", 399])
    def test_earth(self, key):
        assert Origin(key) is EARTH

    @pytest.mark.parametrize(
        ("key", "naif_id"),
        [
            ("Luna", 301),
            ("ssb", 0),
            ("Solar System Barycenter", 0),
            ("earth_barycenter", 3),
            ("EMB", 3),
            ("Ceres", 2000001),
            ("Io", 501),
        ],
    )
    def test_aliases(self, key, naif_id):
        assert Origin(key).id() == naif_id

    def test_unknown_name(self):
        with pytest.raises(UnknownOrigin, match="unknown origin: Rupert"):
            Origin("Rupert")

    def test_unknown_id(self):
        with pytest.raises(UnknownOrigin):
            Origin(1099)

    def test_identity_and_hash(self):
        assert Origin("Moon") == MOON
        assert len({Origin(301), MOON}) == 1
        assert str(MOON) == "Moon"
        assert repr(MOON) == 'Origin("Moon")'

    def test_pickle(self):
        assert pickle.loads(pickle.dumps(EARTH)) is EARTH

    def test_all_origins_sorted(self):
        ids = [origin.id() for origin in all_origins()]
        assert ids == sorted(ids)
        assert 399 in ids


class TestBarycenters:
    @pytest.mark.parametrize(
        ("body", "barycenter"),
        [("Earth", 3), ("Moon", 3), ("Jupiter", 5), ("Io", 5), ("Sun", 0), ("Ceres", 0), ("Earth Barycenter", 0)],
    )
    def test_barycenter(self, body, barycenter):
        assert Origin(body).barycenter().id() == barycenter

    def test_is_barycenter(self):
        assert SSB.is_barycenter()
        assert not SUN.is_barycenter()


class TestProperties:
    def test_earth(self):
        assert EARTH.gravitational_parameter() == 398600.43550702266
        assert EARTH.equatorial_radius() == 6378.1366
        assert EARTH.polar_radius() == 6356.7519
        assert EARTH.mean_radius() == pytest.approx(6371.008366666666, rel=1e-15)
        assert EARTH.flattening() == pytest.approx((6378.1366 - 6356.7519) / 6378.1366)

    def test_sun(self):
        assert SUN.gravitational_parameter() == 132712440041.27942
        assert SUN.mean_radius() == 695700.0

    def test_barycenter_has_only_gm(self):
        emb = Origin("Earth Barycenter")
        assert emb.gravitational_parameter() == 403503.2356254802
        with pytest.raises(UndefinedOriginProperty, match="undefined property 'radii' for origin 'Earth Barycenter'"):
            emb.radii()

    def test_missing_gm(self):
        with pytest.raises(UndefinedOriginProperty, match="gravitational parameter"):
            SSB.gravitational_parameter()

    def test_missing_rotational_elements(self):
        with pytest.raises(UndefinedOriginProperty, match="rotational elements"):
            Origin("Io").rotational_elements(0.0)


class TestRotationalElements:
    def test_jupiter(self):
        ra, dec, w = JUPITER.rotational_elements(0.0)
        assert ra == pytest.approx(4.678480799964803, rel=1e-8)
        assert dec == pytest.approx(1.1256642372977634, rel=1e-8)
        assert w == pytest.approx(4.973315703557842, rel=1e-8)

    def test_jupiter_rates(self):
        ra_dot, dec_dot, w_dot = JUPITER.rotational_element_rates(0.0)
        assert ra_dot == pytest.approx(-1.3266588500099516e-13, rel=1e-8)
        assert dec_dot == pytest.approx(3.004482367136341e-15, rel=1e-8)
        assert w_dot == pytest.approx(0.00017585323445765458, rel=1e-8)

    def test_earth_rotation_rate(self):
        assert EARTH.rotation_rate(0.0) == pytest.approx(360.9856235 * math.pi / 180.0 / 86400.0, rel=1e-12)

    def test_rates_match_finite_differences(self):
        t, h = 1.0e8, 10.0
        for origin in (MOON, JUPITER, EARTH):
            forward = origin.rotational_elements(t + h)
            backward = origin.rotational_elements(t - h)
            rates = origin.rotational_element_rates(t)
            for hi, lo, rate in zip(forward, backward, rates):
                assert (hi - lo) / (2.0 * h) == pytest.approx(rate, rel=1e-5, abs=1e-15)

    def test_accessors(self):
        et = 86400.0 * 365.25
        ra, dec, w = MOON.rotational_elements(et)
        assert MOON.right_ascension(et) == ra
        assert MOON.declination(et) == dec
        assert MOON.rotation_angle(et) == w
