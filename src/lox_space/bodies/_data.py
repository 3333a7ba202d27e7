"""Physical data for the built-in origins.

One :class:`BodyRecord` per origin.  Values follow the IAU WGCCRE report and
the JPL planetary constants kernels:

- gravitational parameters [km^3/s^2],
- radii ``(a, b, c)`` [km] where ``a`` points to the primary, ``b`` along
  the orbit and ``c`` along the spin axis,
- rotational elements as polynomial coefficients in degrees (right
  ascension and declination per Julian century, prime meridian per day,
  all measured from J2000 TDB),
- periodic-term amplitudes in degrees, applied to the nutation/precession
  angles of the system barycenter listed in :data:`NUTATION_PRECESSION`.

:mod:`lox_space.bodies.origins` turns the records into ``Origin`` objects.
"""

from __future__ import annotations

from typing import NamedTuple


class BodyRecord(NamedTuple):
    naif_id: int
    name: str
    aliases: tuple[str, ...] = ()
    gm: float | None = None
    radii: tuple[float, float, float] | None = None
    mean_radius: float | None = None
    right_ascension: tuple[float, float, float] | None = None
    declination: tuple[float, float, float] | None = None
    prime_meridian: tuple[float, float, float] | None = None
    right_ascension_terms: tuple[float, ...] = ()
    declination_terms: tuple[float, ...] = ()
    prime_meridian_terms: tuple[float, ...] = ()


# Nutation/precession angles per system barycenter: (theta0 [deg], theta1 [deg/century])
NUTATION_PRECESSION: dict[int, tuple[tuple[float, float], ...]] = {
    1: (
        (174.7910857, 149472.53587500003),
        (349.5821714, 298945.07175000006),
        (164.3732571, 448417.60762500006),
        (339.1643429, 597890.1435000001),
        (153.9554286, 747362.679375),
    ),
    3: (
        (125.045, -1935.5364525),
        (250.089, -3871.072905),
        (260.008, 475263.3328725),
        (176.625, 487269.629985),
        (357.529, 35999.0509575),
        (311.589, 964468.49931),
        (134.963, 477198.869325),
        (276.617, 12006.300765),
        (34.226, 63863.5132425),
        (15.134, -5806.6093575),
        (119.743, 131.84064),
        (239.961, 6003.1503825),
        (25.053, 473327.79642),
    ),
    5: (
        (73.32, 91472.9),
        (24.62, 45137.2),
        (283.9, 4850.7),
        (355.8, 1191.3),
        (119.9, 262.1),
        (229.8, 64.3),
        (352.25, 2382.6),
        (113.35, 6070.0),
        (146.64, 182945.8),
        (49.24, 90274.4),
        (99.360714, 4850.4046),
        (175.895369, 1191.9605),
        (300.323162, 262.5475),
        (114.012305, 6070.2476),
        (49.511251, 64.3),
    ),
    8: ((357.85, 52.316),),
}

_J0 = (0.0,) * 10

BODIES: tuple[BodyRecord, ...] = (
    # Sun
    BodyRecord(
        10,
        "Sun",
        gm=132712440041.27942,
        radii=(695700.0, 695700.0, 695700.0),
        right_ascension=(286.13, 0.0, 0.0),
        declination=(63.87, 0.0, 0.0),
        prime_meridian=(84.176, 14.1844, 0.0),
    ),
    # Planets
    BodyRecord(
        199,
        "Mercury",
        gm=22031.868551400003,
        radii=(2440.53, 2440.53, 2438.26),
        right_ascension=(281.0103, -0.0328, 0.0),
        declination=(61.4155, -0.0049, 0.0),
        prime_meridian=(329.5988, 6.1385108, 0.0),
        prime_meridian_terms=(0.01067257, -0.00112309, -0.0001104, -0.00002539, -0.00000571),
    ),
    BodyRecord(
        299,
        "Venus",
        gm=324858.592,
        radii=(6051.8, 6051.8, 6051.8),
        right_ascension=(272.76, 0.0, 0.0),
        declination=(67.16, 0.0, 0.0),
        prime_meridian=(160.2, -1.4813688, 0.0),
    ),
    BodyRecord(
        399,
        "Earth",
        gm=398600.43550702266,
        radii=(6378.1366, 6378.1366, 6356.7519),
        right_ascension=(0.0, -0.641, 0.0),
        declination=(90.0, -0.557, 0.0),
        prime_meridian=(190.147, 360.9856235, 0.0),
    ),
    BodyRecord(
        499,
        "Mars",
        gm=42828.37362069909,
        radii=(3396.19, 3396.19, 3376.2),
        right_ascension=(317.68143, -0.1061, 0.0),
        declination=(52.8865, -0.0609, 0.0),
        prime_meridian=(176.63, 350.89198226, 0.0),
    ),
    BodyRecord(
        599,
        "Jupiter",
        gm=126686531.9003704,
        radii=(71492.0, 71492.0, 66854.0),
        mean_radius=69946.0,
        right_ascension=(268.056595, -0.006499, 0.0),
        declination=(64.495303, 0.002413, 0.0),
        prime_meridian=(284.95, 870.536, 0.0),
        right_ascension_terms=_J0 + (0.000117, 0.000938, 0.001432, 0.00003, 0.00215),
        declination_terms=_J0 + (0.00005, 0.000404, 0.000617, -0.000013, 0.000926),
    ),
    BodyRecord(
        699,
        "Saturn",
        gm=37931206.23436167,
        radii=(60268.0, 60268.0, 54364.0),
        mean_radius=58300.0,
        right_ascension=(40.589, -0.036, 0.0),
        declination=(83.537, -0.004, 0.0),
        prime_meridian=(38.9, 810.7939024, 0.0),
    ),
    BodyRecord(
        799,
        "Uranus",
        gm=5793951.256527211,
        radii=(25559.0, 25559.0, 24973.0),
        right_ascension=(257.311, 0.0, 0.0),
        declination=(-15.175, 0.0, 0.0),
        prime_meridian=(203.81, -501.1600928, 0.0),
    ),
    BodyRecord(
        899,
        "Neptune",
        gm=6835103.145462294,
        radii=(24764.0, 24764.0, 24341.0),
        right_ascension=(299.36, 0.0, 0.0),
        declination=(43.46, 0.0, 0.0),
        prime_meridian=(249.978, 541.1397757, 0.0),
        right_ascension_terms=(0.7,),
        declination_terms=(-0.51,),
        prime_meridian_terms=(-0.48,),
    ),
    BodyRecord(
        999,
        "Pluto",
        gm=869.6138177608748,
        radii=(1188.3, 1188.3, 1188.3),
        right_ascension=(132.993, 0.0, 0.0),
        declination=(-6.163, 0.0, 0.0),
        prime_meridian=(302.695, 56.3625225, 0.0),
    ),
    # Barycenters
    BodyRecord(0, "Solar System Barycenter", aliases=("SSB",)),
    BodyRecord(1, "Mercury Barycenter", gm=22031.868551400003),
    BodyRecord(2, "Venus Barycenter", gm=324858.592),
    BodyRecord(3, "Earth Barycenter", aliases=("Earth-Moon Barycenter", "EMB"), gm=403503.2356254802),
    BodyRecord(4, "Mars Barycenter", gm=42828.3758157561),
    BodyRecord(5, "Jupiter Barycenter", gm=126712764.09999998),
    BodyRecord(6, "Saturn Barycenter", gm=37940584.8418),
    BodyRecord(7, "Uranus Barycenter", gm=5794556.3999999985),
    BodyRecord(8, "Neptune Barycenter", gm=6836527.100580399),
    BodyRecord(9, "Pluto Barycenter", gm=975.5),
    # Satellites
    BodyRecord(
        301,
        "Moon",
        aliases=("Luna",),
        gm=4902.80011845755,
        radii=(1737.4, 1737.4, 1737.4),
        right_ascension=(269.9949, 0.0031, 0.0),
        declination=(66.5392, 0.013, 0.0),
        prime_meridian=(38.3213, 13.17635815, -1.4e-12),
        right_ascension_terms=(
            -3.8787, -0.1204, 0.07, -0.0172, 0.0, 0.0072, 0.0, 0.0, 0.0, -0.0052, 0.0, 0.0, 0.0043,
        ),
        declination_terms=(
            1.5419, 0.0239, -0.0278, 0.0068, 0.0, -0.0029, 0.0009, 0.0, 0.0, 0.0008, 0.0, 0.0, -0.0009,
        ),
        prime_meridian_terms=(
            3.561, 0.1208, -0.0642, 0.0158, 0.0252, -0.0066, -0.0047, -0.0046, 0.0028, 0.0052, 0.004, 0.0019,
            -0.0044,
        ),
    ),
    BodyRecord(401, "Phobos", gm=0.0007087546066894452, radii=(13.0, 11.4, 9.1)),
    BodyRecord(402, "Deimos", gm=0.00009615569648120313, radii=(7.8, 6.0, 5.1)),
    BodyRecord(501, "Io", gm=5959.915466180539, radii=(1829.4, 1819.4, 1815.7)),
    BodyRecord(502, "Europa", gm=3202.712099607295, radii=(1562.6, 1560.3, 1559.5)),
    BodyRecord(503, "Ganymede", gm=9887.832752719638, radii=(2631.2, 2631.2, 2631.2)),
    BodyRecord(504, "Callisto", gm=7179.283402579837, radii=(2410.3, 2410.3, 2410.3)),
    BodyRecord(606, "Titan", gm=8978.137095521046, radii=(2575.15, 2574.78, 2574.47)),
    # Minor bodies
    BodyRecord(
        2000001,
        "Ceres",
        gm=62.62888864440993,
        radii=(487.3, 487.3, 446.0),
        right_ascension=(291.418, 0.0, 0.0),
        declination=(66.764, 0.0, 0.0),
        prime_meridian=(170.65, 952.1532, 0.0),
    ),
    BodyRecord(
        2000002,
        "Pallas",
        gm=13.665878145967422,
        right_ascension=(33.0, 0.0, 0.0),
        declination=(-3.0, 0.0, 0.0),
        prime_meridian=(38.0, 1105.8036, 0.0),
    ),
    BodyRecord(
        2000004,
        "Vesta",
        gm=17.288232879171513,
        radii=(289.0, 280.0, 229.0),
        right_ascension=(309.031, 0.0, 0.0),
        declination=(42.235, 0.0, 0.0),
        prime_meridian=(285.39, 1617.3329428, 0.0),
    ),
    BodyRecord(
        2000433,
        "Eros",
        gm=0.0004463,
        radii=(17.0, 5.5, 5.5),
        right_ascension=(11.35, 0.0, 0.0),
        declination=(17.22, 0.0, 0.0),
        prime_meridian=(326.07, 1639.38864745, 0.0),
    ),
    BodyRecord(
        2000511,
        "Davida",
        gm=3.8944831481705644,
        radii=(180.0, 147.0, 127.0),
        right_ascension=(297.0, 0.0, 0.0),
        declination=(5.0, 0.0, 0.0),
        prime_meridian=(268.1, 1684.4193549, 0.0),
    ),
)
