"""
The `constants` module defines the mathematical, time and physical constants used across lox_space.

Distances are expressed in *km* and velocities in *km/s* throughout the package.
"""

from math import pi as PI

# Mathematical Constants
"""
Constant to convert degrees to radians. Equal to 2pi/360. Units: *rad/deg*
"""
DEG2RAD = 2.0 * PI / 360.0

"""
Constant to convert radians to degrees. Equal to 360/2pi. Units: *deg/rad*
"""
RAD2DEG = 360.0 / (PI * 2.0)

"""
Constant to convert arcseconds to radians. Equal to 2pi/(360*3600). Units: *rad/as*
"""
AS2RAD = 2.0 * PI / 360.0 / 3600.0

"""
Full turn in radians. Units: *rad*
"""
TAU = 2.0 * PI

# Time Constants

"""
Seconds per minute, hour, day and half day. Units: *s*
"""
SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 3600
SECONDS_PER_DAY = 86400
SECONDS_PER_HALF_DAY = 43200

"""
Days per Julian year and century. Units: *days*
"""
DAYS_PER_JULIAN_YEAR = 365.25
DAYS_PER_JULIAN_CENTURY = 36525.0

"""
Seconds per Julian year and century. Units: *s*
"""
SECONDS_PER_JULIAN_YEAR = 31557600
SECONDS_PER_JULIAN_CENTURY = 3155760000

"""
Attoseconds per second and the decimal sub-second units. Units: *as*
"""
ATTOSECONDS_IN_SECOND = 10**18
ATTOSECONDS_IN_MILLISECOND = 10**15
ATTOSECONDS_IN_MICROSECOND = 10**12
ATTOSECONDS_IN_NANOSECOND = 10**9
ATTOSECONDS_IN_PICOSECOND = 10**6
ATTOSECONDS_IN_FEMTOSECOND = 10**3

"""
Offset between Julian Date and Modified Julian Date. Units: *days*
"""
JD_MJD_OFFSET = 2400000.5

"""
Julian Date of the J2000.0 epoch. Units: *days*
"""
JD_J2000 = 2451545.0

"""
Modified Julian Date of the J2000.0 epoch. Units: *days*
"""
MJD_J2000 = 51544.5

"""
Julian Date of the J1950.0 epoch. Units: *days*
"""
JD_J1950 = 2433282.5

"""
Seconds between the Julian Date, MJD and J1950 zero points and J2000. Units: *s*
"""
SECONDS_BETWEEN_JD_AND_J2000 = 211813488000
SECONDS_BETWEEN_MJD_AND_J2000 = 4453444800
SECONDS_BETWEEN_J1950_AND_J2000 = 1577880000

# Physical Constants

"""
Nominal rotation rate of the Earth. Units: *rad/s*

References:

1. IERS Conventions (2010), Technical Note No. 36, Table 1.1
"""
ROTATION_RATE_EARTH = 7.2921150e-5

"""
Astronomical Unit. Units: *km*
"""
AU = 149597870.7

"""
Speed of light in vacuum. Units: *km/s*
"""
C_LIGHT = 299792.458
