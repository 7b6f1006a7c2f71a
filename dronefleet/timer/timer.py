"""Countdown timer used to throttle periodic work.

The live runner keeps one timer per cadence (for example the P95 refresh,
at most every 0.25 s of wall time). Each frame advances the timer by the
elapsed wall time; when it runs out the work is done and the timer re-armed
with :meth:`Timer.rearm`, which carries any overshoot so the cadence does
not drift.

Example:
    >>> from dronefleet.unit import Second
    >>> timer = Timer(Second(0.25))
    >>> timer.advance(Second(0.1))
    >>> timer.done
    False
    >>> timer.advance(Second(0.2))
    >>> timer.done
    True
"""

from dronefleet.unit import Second, Time

_ZERO_TIME = Second(0.0)


class Timer:
    """Countdown from a fixed period.

    Attributes:
        period (Time): Length of one countdown.
    """

    _duration: Time

    def __init__(self, period: Time) -> None:
        if period < _ZERO_TIME:
            msg = f"timer period must be non-negative, got {period}"
            raise ValueError(msg)
        self.period = Second.coerce(period)
        self._duration = self.period

    @property
    def duration(self) -> Time:
        """Remaining time; zero or negative once the timer is done."""
        return self._duration

    @property
    def done(self) -> bool:
        return self._duration <= _ZERO_TIME

    def advance(self, delta: Time) -> None:
        self._duration -= delta

    def reset(self, duration: Time | None = None) -> None:
        """Restart the countdown from ``duration`` (the period by default)."""
        self._duration = self.period if duration is None else Second.coerce(duration)

    def rearm(self) -> None:
        """Start the next period, keeping the overshoot of the finished one.

        An overshoot longer than a whole period is dropped rather than
        replayed, so a stalled frame triggers the work once, not repeatedly.
        """
        remaining = self._duration + self.period
        self._duration = remaining if remaining > _ZERO_TIME else self.period
