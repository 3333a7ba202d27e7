"""SGP4/SDP4 propagation of Two-Line Element sets.

The model itself is evaluated by python-sgp4 (:class:`sgp4.api.Satrec`);
this module validates the element set, maps epochs to minutes since the TLE
epoch and wraps the TEME output into :class:`~lox_space.orbits.State`.
"""

from __future__ import annotations

import logging
import warnings
from collections.abc import Sequence

from sgp4.api import SGP4_ERRORS, WGS72, WGS72OLD, WGS84, Satrec

from lox_space.bodies import EARTH
from lox_space.errors import InvalidInput, InvalidTle, PropagationOutsideValidity, Sgp4Error
from lox_space.frames import TEME, Frame, RotationProvider
from lox_space.orbits import State, Trajectory
from lox_space.propagators._base import Propagator
from lox_space.propagators._tle import Tle
from lox_space.time import Time, TimeDelta, TimeScale

logger = logging.getLogger(__name__)

SGP4_VALIDITY_HORIZON = TimeDelta.from_days(30.0)

GRAVITY_MODELS = {
    "wgs72old": WGS72OLD,
    "wgs72": WGS72,
    "wgs84": WGS84,
}


class SGP4(Propagator):
    """SGP4/SDP4 propagator for a NORAD Two-Line Element set.

    States are produced in TEME, or in *frame* when requested.  Epochs more
    than 30 days from the TLE epoch still propagate but issue a
    :class:`~lox_space.errors.PropagationOutsideValidity` warning.

    Args:
        tle: Two-line or three-line element text, or a parsed :class:`Tle`.
        gravity: Gravity model, ``"wgs72"`` (default), ``"wgs72old"`` or
            ``"wgs84"``.

    Raises:
        InvalidTle: If the element set is malformed.
        InvalidInput: If *gravity* is not a known model.

    Examples:
        ```python
        from lox_space.propagators import SGP4
        sgp4 = SGP4(tle_text)
        state = sgp4.propagate(sgp4.time() + TimeDelta.from_minutes(90.0))
        state.reference_frame()  # Frame("TEME")
        ```
    """

    __slots__ = ("_tle", "_satrec", "_epoch")

    def __init__(self, tle: str | Tle, gravity: str = "wgs72") -> None:
        if not isinstance(tle, Tle):
            tle = Tle.parse(tle)
        try:
            model = GRAVITY_MODELS[gravity.lower()]
        except KeyError:
            raise InvalidInput(
                f"unknown gravity model {gravity!r}, expected one of {', '.join(sorted(GRAVITY_MODELS))}"
            ) from None
        self._tle = tle
        self._satrec = Satrec.twoline2rv(tle.line1, tle.line2, model)
        if self._satrec.error != 0:
            error = self._satrec.error
            raise InvalidTle(f"SGP4 rejected the element set: {SGP4_ERRORS.get(error, 'unknown error')} (code {error})")
        self._epoch = tle.epoch()


    def tle(self) -> Tle:
        return self._tle

    def time(self) -> Time:
        """TLE epoch (TAI)."""
        return self._epoch

    def _minutes_since_epoch(self, time: Time, provider: RotationProvider | None) -> float:
        if time.scale() is not TimeScale.TAI:
            time = time.to_scale(TimeScale.TAI, provider)
        return (time - self._epoch).to_decimal_seconds() / 60.0

    def _validity_warning(self, time: Time, tsince: float) -> PropagationOutsideValidity | None:
        if abs(tsince) * 60.0 <= SGP4_VALIDITY_HORIZON.to_decimal_seconds():
            return None
        message = f"{time} is {abs(tsince) / 1440.0:.1f} days from the TLE epoch {self._epoch}"
        logger.warning("SGP4 propagation outside validity: %s", message)
        warnings.warn(message, PropagationOutsideValidity, stacklevel=4)
        return PropagationOutsideValidity(message)

    def _evaluate(self, time: Time, provider: RotationProvider | None) -> tuple[State, PropagationOutsideValidity | None]:
        tsince = self._minutes_since_epoch(time, provider)
        error, r, v = self._satrec.sgp4_tsince(tsince)
        if error != 0:
            raise Sgp4Error(error, SGP4_ERRORS.get(error, "unknown error"))
        return State(time, r, v, EARTH, TEME), self._validity_warning(time, tsince)

    def _propagate(self, time: Time) -> State:
        return self._evaluate(time, None)[0]

    def propagate(
        self,
        time: Time | Sequence[Time],
        provider: RotationProvider | None = None,
        frame: Frame | str = TEME,
        return_warning: bool = False,
    ):
        """Evaluate the model at one or more epochs.

        Args:
            time: An epoch or a sorted sequence of epochs, in any scale
                (UT1 needs *provider*).
            provider: Earth orientation data for UT1 epochs and for frames
                reached through UT1. Default: ``None``
            frame: Output frame. Default: TEME
            return_warning: Also return the validity warning (or ``None``).

        Returns:
            State or Trajectory; with *return_warning*, a ``(result,
            warning)`` tuple where ``warning`` is the first validity warning
            raised, if any.

        Raises:
            Sgp4Error: If the model fails (e.g. the satellite has decayed).
            EopUnavailable: If UT1 is needed and *provider* cannot supply it.
        """
        frame = Frame(frame)
        if isinstance(time, Time):
            state, warning = self._evaluate(time, provider)
            result = state.to_frame(frame, provider)
        else:
            times = list(time)
            logger.debug("SGP4: propagating %d epochs", len(times))
            states = []
            warning = None
            for t in times:
                state, w = self._evaluate(t, provider)
                warning = warning or w
                states.append(state.to_frame(frame, provider))
            result = Trajectory(states)
        if return_warning:
            return result, warning
        return result

    def __repr__(self) -> str:
        return f"SGP4({self._tle.name or self._tle.catalogue_number()!r}, epoch={self._epoch})"
