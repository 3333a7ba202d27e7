"""Tests for Time, UTC and time-scale offsets."""

from __future__ import annotations

import pytest

from lox_space.errors import (
    DateError,
    EopUnavailable,
    InvalidIsoString,
    LeapSecondOutsideUtc,
    TimeOfDayError,
    TimeScaleMismatch,
    UnknownTimeScale,
)
from lox_space.time import UTC, Date, Time, TimeDelta, TimeScale, offset, time_range
from lox_space.time.leap_seconds import delta_tai_utc, delta_utc_tai, is_leap_second_date

# ---------------------------------------------------------------------------
# Time
# ---------------------------------------------------------------------------


class TestTime:
    def test_iso_round_trip(self):
        expected = Time("TAI", 2000, 1, 1)
        assert Time.from_iso("2000-01-01T00:00:00.000 TAI") == expected
        assert Time.from_iso("2000-01-01T00:00:00") == expected
        assert Time.from_iso("2000-01-01T00:00:00", scale="TAI") == expected

    def test_iso_scale_suffix(self):
        assert Time.from_iso("2000-01-01T00:00:00 TT").scale() is TimeScale.TT

    def test_repr_and_str(self):
        time = Time("TAI", 2000, 1, 1, 0, 0, 12.123456789123)
        assert repr(time) == 'Time("TAI", 2000, 1, 1, 0, 0, 12.123456789123)'
        assert str(time) == "2000-01-01T00:00:12.123 TAI"

    def test_accessors(self):
        time = Time("TAI", 2000, 1, 1, 0, 0, 12.123456789123)
        assert time.scale().abbreviation() == "TAI"
        assert (time.year(), time.month(), time.day()) == (2000, 1, 1)
        assert (time.hour(), time.minute(), time.second()) == (0, 0, 12)
        assert time.millisecond() == 123
        assert time.microsecond() == 456
        assert time.nanosecond() == 789
        assert time.picosecond() == 123
        assert time.femtosecond() == 0
        assert time.decimal_seconds() == pytest.approx(12.123456789123, rel=1e-15)

    def test_j2000_is_noon(self):
        time = Time("TT", 2000, 1, 1, 12)
        assert time.to_delta() == TimeDelta.zero()
        assert time == Time.j2000("TT")

    def test_day_of_year(self):
        assert Time.from_day_of_year("TAI", 2024, 366) == Time("TAI", 2024, 12, 31)
        assert Time("TAI", 2024, 3, 1).day_of_year() == 61

    @pytest.mark.parametrize(
        ("args", "error", "match"),
        [
            (("TAI", 2000, 13, 1), DateError, "invalid date"),
            (("TAI", 2001, 2, 29), DateError, "invalid date `2001-2-29`"),
            (("TAI", 2000, 12, 1, 24, 0, 0.0), TimeOfDayError, r"hour must be in the range \[0..24\) but was 24"),
            (("TAI", 2000, 12, 1, 0, 60, 0.0), TimeOfDayError, "minute must be in the range"),
            (("UTC", 2000, 1, 1), UnknownTimeScale, "unknown time scale: UTC"),
            (("XYZ", 2000, 1, 1), UnknownTimeScale, "unknown time scale: XYZ"),
            (("TAI", 2016, 12, 31, 23, 59, 60.0), LeapSecondOutsideUtc, "only valid in UTC"),
        ],
    )
    def test_invalid_construction(self, args, error, match):
        with pytest.raises(error, match=match):
            Time(*args)

    def test_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            Time("TAI", 2000, 13, 1)

    @pytest.mark.parametrize(
        ("iso", "scale", "error", "match"),
        [
            ("2000-01-01X00:00:00 TAI", None, InvalidIsoString, "invalid ISO"),
            ("2000-01-01T00:00:00 UTC", None, InvalidIsoString, "invalid ISO"),
            ("2000-01-01T00:00:00 TT", "TAI", InvalidIsoString, "invalid ISO"),
            ("2000-01-01T00:00:00 TAI", "UTC", UnknownTimeScale, "unknown time scale: UTC"),
        ],
    )
    def test_invalid_iso(self, iso, scale, error, match):
        with pytest.raises(error, match=match):
            Time.from_iso(iso, scale=scale)

    def test_arithmetic(self):
        t0 = Time("TAI", 2000, 1, 1)
        t1 = Time("TAI", 2000, 1, 1, 0, 0, 0.5)
        dt = TimeDelta(0.5)
        assert t0 + dt == t1
        assert t1 - dt == t0
        assert float(t1 - t0) == pytest.approx(0.5)

    def test_ordering(self):
        t0 = Time("TAI", 2000, 1, 1)
        t1 = Time("TAI", 2000, 1, 1, 0, 0, 0.5)
        assert t1 > t0
        assert t1 >= t0
        assert t0 < t1
        assert t0 <= t1
        assert t0 != t1

    def test_different_scales(self):
        tai = Time("TAI", 2000, 1, 1, 0, 0, 1.0)
        tt = Time("TT", 2000, 1, 1, 0, 0, 1.0)
        with pytest.raises(TimeScaleMismatch, match="cannot subtract.*different time scales"):
            tai - tt
        with pytest.raises(TimeScaleMismatch, match="cannot compare.*different time scales"):
            tai.isclose(tt)
        with pytest.raises(ValueError, match="cannot compare"):
            tai < tt
        assert tai != tt

    def test_julian_date(self):
        time = Time.from_julian_date("TAI", 0.0, "j2000")
        assert time.julian_date("j2000", "seconds") == 0.0
        assert time.julian_date("j2000", "days") == 0.0
        assert time.julian_date("j2000", "centuries") == 0.0
        assert time.julian_date("jd", "days") == 2451545.0
        assert time.julian_date("mjd", "days") == 51544.5
        assert time.julian_date("j1950", "days") == 18262.5

    @pytest.mark.parametrize("epoch", ["jd", "mjd", "j1950", "j2000"])
    def test_julian_date_epoch_origin(self, epoch):
        assert Time.from_julian_date("TAI", 0.0, epoch).julian_date(epoch, "days") == 0.0

    def test_julian_date_errors(self):
        time = Time("TAI", 2000, 1, 1)
        with pytest.raises(ValueError, match="unknown epoch: unknown"):
            time.julian_date("unknown", "days")
        with pytest.raises(ValueError, match="unknown unit: unknown"):
            time.julian_date("jd", "unknown")

    def test_two_part_julian_date(self):
        expected = Time("TAI", 2024, 7, 11, 8, 2, 14.0)
        jd1, jd2 = expected.two_part_julian_date()
        assert jd1 == 2460502.0
        assert 0.0 <= jd2 < 1.0
        assert Time.from_two_part_julian_date("TAI", jd1, jd2).isclose(expected)

    def test_range(self):
        t0 = Time("TDB", 2024, 1, 1)
        times = time_range(t0, t0 + TimeDelta(10.0), TimeDelta(2.5))
        assert len(times) == 5
        assert times[-1] == t0 + TimeDelta(10.0)

    def test_range_mismatch(self):
        with pytest.raises(TimeScaleMismatch):
            Time.range(Time("TAI", 2024, 1, 1), Time("TT", 2024, 1, 1))

    def test_from_seconds(self):
        time = Time.from_seconds("TT", 86400, 0.25)
        assert time == Time("TT", 2000, 1, 2, 12, 0, 0.25)
        assert time.seconds() == 86400
        assert time.subsecond() == 0.25


# ---------------------------------------------------------------------------
# Time scales
# ---------------------------------------------------------------------------


# Offsets at 2024-12-30T10:27:13.145 in the origin scale.
_OFFSETS = [
    ("TAI", "TCB", 55.66851419888016),
    ("TAI", "TCG", 33.239589335894145),
    ("TAI", "TDB", 32.183882324981056),
    ("TAI", "TT", 32.184),
    ("TCB", "TAI", -55.668513317090046),
    ("TCB", "TCG", -22.4289240199929),
    ("TCB", "TDB", -23.484631010747805),
    ("TCB", "TT", -23.484513317090048),
    ("TCG", "TAI", -33.23958931272851),
    ("TCG", "TCB", 22.428924359636042),
    ("TCG", "TDB", -1.0557069988766656),
    ("TCG", "TT", -1.0555893127285145),
    ("TDB", "TAI", -32.18388231420531),
    ("TDB", "TCB", 23.48463137488165),
    ("TDB", "TCG", 1.0557069992589518),
    ("TDB", "TT", 1.176857946845189e-4),
    ("TT", "TAI", -32.184),
    ("TT", "TCB", 23.484513689085105),
    ("TT", "TCG", 1.055589313464182),
    ("TT", "TDB", -1.1768579472004603e-4),
]


class TestTimeScales:
    @pytest.mark.parametrize(("origin", "target", "expected"), _OFFSETS)
    def test_offsets(self, origin, target, expected):
        delta = Time(origin, 2024, 12, 30, 10, 27, 13.145).to_delta()
        tol = 1e-4 if "TCB" in (origin, target) else 1e-7
        assert float(offset(origin, target, delta)) == pytest.approx(expected, abs=tol)

    @pytest.mark.parametrize(("a", "b"), [("TT", "TCG"), ("TDB", "TCB"), ("TAI", "TDB")])
    def test_offset_round_trip(self, a, b):
        delta = Time(a, 2024, 12, 30, 10, 27, 13.145).to_delta()
        forward = offset(a, b, delta)
        backward = offset(b, a, delta + forward)
        assert float(forward + backward) == pytest.approx(0.0, abs=1e-12)

    def test_identity(self):
        assert offset("TDB", "TDB", TimeDelta(100.0)) == TimeDelta.zero()

    def test_parse(self):
        assert TimeScale.parse("tdb") is TimeScale.TDB
        assert TimeScale.TT.name_() == "Terrestrial Time"
        with pytest.raises(UnknownTimeScale, match="unknown time scale: XYZ"):
            TimeScale.parse("XYZ")

    @pytest.mark.parametrize("scale", ["TCB", "TCG", "TDB", "TT"])
    def test_time_round_trip(self, scale):
        tai = Time("TAI", 2000, 1, 1)
        assert tai.to_scale(scale).to_scale("TAI").isclose(tai)

    def test_ut1_requires_provider(self):
        with pytest.raises(EopUnavailable, match="provider"):
            Time("TAI", 2000, 1, 1).to_scale("UT1")

    def test_ut1_round_trip(self, provider):
        tai = Time("TAI", 2000, 1, 1)
        assert tai.to_scale("UT1", provider).to_scale("TAI", provider).isclose(tai)

    def test_ut1_to_tdb_goes_through_tai(self, provider):
        ut1 = Time("UT1", 2020, 1, 1)
        direct = ut1.to_scale("TDB", provider)
        stepwise = ut1.to_scale("TAI", provider).to_scale("TDB")
        assert direct.isclose(stepwise)


# ---------------------------------------------------------------------------
# UTC and leap seconds
# ---------------------------------------------------------------------------


class TestUTC:
    def test_iso(self):
        expected = UTC(2000, 1, 1)
        assert UTC.from_iso("2000-01-01T00:00:00.000") == expected
        assert UTC.from_iso("2000-01-01T00:00:00.000Z") == expected
        assert UTC.from_iso("2000-01-01T00:00:00.000 UTC") == expected

    @pytest.mark.parametrize("iso", ["2000-01-01X00:00:00 UTC", "2000-01-01T00:00:00 TAI"])
    def test_invalid_iso(self, iso):
        with pytest.raises(InvalidIsoString, match="invalid ISO"):
            UTC.from_iso(iso)

    def test_accessors(self):
        utc = UTC(2000, 1, 1, 12, 13, 14.123456789123)
        assert (utc.year(), utc.month(), utc.day()) == (2000, 1, 1)
        assert (utc.hour(), utc.minute(), utc.second()) == (12, 13, 14)
        assert utc.millisecond() == 123
        assert utc.microsecond() == 456
        assert utc.nanosecond() == 789
        assert utc.picosecond() == 123
        assert utc.decimal_seconds() == 14.123456789123
        assert str(utc) == "2000-01-01T12:13:14.123 UTC"
        assert repr(utc) == "UTC(2000, 1, 1, 12, 13, 14.123456789123)"

    def test_invalid_date(self):
        with pytest.raises(ValueError, match="invalid date"):
            UTC(2000, 0, 1)

    def test_before_1960(self):
        with pytest.raises(DateError, match="UTC is not defined before 1960-01-01"):
            UTC(1959, 12, 31)

    def test_round_trips(self, provider):
        utc = UTC(2000, 1, 1)
        assert utc.to_scale("TAI").to_utc() == utc
        assert utc.to_scale("TT").to_utc() == utc
        for scale in ("TCB", "TCG", "TDB"):
            assert utc.to_scale(scale).to_utc().isclose(utc)
        assert utc.to_scale("UT1", provider).to_utc(provider).isclose(utc)

    def test_to_tai_at_j2000(self):
        assert UTC(2000, 1, 1, 12).to_tai() == Time("TAI", 2000, 1, 1, 12, 0, 32.0)
        assert UTC(2000, 1, 1, 12).to_time() == UTC(2000, 1, 1, 12).to_tai()

    def test_leap_second(self):
        leap = UTC(2016, 12, 31, 23, 59, 60.0)
        assert leap.is_leap_second()
        assert leap.to_tai() == Time("TAI", 2017, 1, 1, 0, 0, 36.0)
        assert leap.to_tai().to_utc() == leap
        assert UTC(2017, 1, 1).to_tai() == Time("TAI", 2017, 1, 1, 0, 0, 37.0)
        assert UTC(2016, 12, 31, 23, 59, 59.0).to_tai() == Time("TAI", 2017, 1, 1, 0, 0, 35.0)

    def test_leap_second_fraction(self):
        leap = UTC(2016, 12, 31, 23, 59, 60.5)
        assert leap.to_tai().to_utc() == leap

    def test_leap_second_on_wrong_day(self):
        with pytest.raises(LeapSecondOutsideUtc, match="no leap second on 2015-12-31"):
            UTC(2015, 12, 31, 23, 59, 60.0)

    def test_ordering(self):
        assert UTC(2016, 12, 31, 23, 59, 59.0) < UTC(2016, 12, 31, 23, 59, 60.0) < UTC(2017, 1, 1)

    def test_pre_1972_drift(self):
        tai = UTC(1970, 1, 1).to_tai()
        # 4.213170 s + (40587 - 39126) d * 0.002592 s/d
        assert float(tai - Time("TAI", 1970, 1, 1)) == pytest.approx(8.000082, abs=1e-6)
        assert tai.to_utc().isclose(UTC(1970, 1, 1))


class TestLeapSeconds:
    @pytest.mark.parametrize(
        ("date", "expected"),
        [
            (Date.new(2016, 12, 31), True),
            (Date.new(2015, 6, 30), True),
            (Date.new(1972, 6, 30), True),
            (Date.new(1971, 12, 31), False),
            (Date.new(2015, 12, 31), False),
        ],
    )
    def test_leap_second_dates(self, date, expected):
        assert is_leap_second_date(date) is expected

    @pytest.mark.parametrize(
        ("utc", "expected"),
        [((1972, 1, 1), 10), ((1999, 1, 1), 32), ((2006, 1, 1), 33), ((2024, 1, 1), 37)],
    )
    def test_tai_minus_utc(self, utc, expected):
        tai = UTC(*utc).to_tai().to_delta()
        assert float(delta_tai_utc(tai)) == expected
        assert float(delta_utc_tai(UTC(*utc).to_delta())) == -expected

    def test_before_1960_raises(self):
        with pytest.raises(DateError):
            delta_tai_utc(Time("TAI", 1950, 1, 1).to_delta())
