"""Reference frames and the rotations between them.

- :class:`Frame`: frame identifiers (ICRF, CIRF, TIRF, ITRF, MOD, TOD, PEF,
  TEME and IAU body-fixed frames).
- :class:`ReferenceSystem`: the IERS 1996/2003/2010 model sets behind the
  equinox-based frames.
- :func:`rotation`: the time-dependent :class:`Rotation` between two frames.

Typical usage::

    from lox_space.frames import Frame, rotation
    rot = rotation(Frame("ICRF"), Frame("TEME"), time)
    r_teme, v_teme = rot.apply(r, v)
"""

from lox_space.frames.frames import CIRF, ICRF, ITRF, TEME, TIRF, Frame, FrameKind
from lox_space.frames.iers import Nutation, ReferenceSystem
from lox_space.frames.rotations import Rotation, Rx, Ry, Rz
from lox_space.frames.transformations import RotationProvider, frame_path, rotation

__all__ = [
    "CIRF",
    "Frame",
    "FrameKind",
    "ICRF",
    "ITRF",
    "Nutation",
    "ReferenceSystem",
    "Rotation",
    "RotationProvider",
    "Rx",
    "Ry",
    "Rz",
    "TEME",
    "TIRF",
    "frame_path",
    "rotation",
]
