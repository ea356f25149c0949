"""Periodic deadlines with an optional deterministic bias."""

from __future__ import annotations

import time
from collections.abc import Callable
from datetime import timedelta
from fractions import Fraction
from typing import Optional, Union

__all__ = ["Ticks", "PERIOD_THRESHOLD"]

_NANOS_PER_SEC = 1_000_000_000

# Periods of a year or longer disable ticking.
PERIOD_THRESHOLD = 365 * 24 * 3600 * _NANOS_PER_SEC

PeriodLike = Union[timedelta, int, float, None]


def _seconds_to_nanos(seconds: float) -> int:
    return round(Fraction(seconds) * _NANOS_PER_SEC)


def _period_to_nanos(period: PeriodLike) -> Optional[int]:
    if period is None:
        return None
    if isinstance(period, timedelta):
        nanos = (period // timedelta(microseconds=1)) * 1000
    else:
        nanos = _seconds_to_nanos(period)
    if nanos < 0:
        raise ValueError("period must not be negative")
    return nanos


def _mul_f64(nanos: int, factor: float) -> int:
    """Scale a duration the way a floating point seconds multiplication does."""
    seconds = (nanos // _NANOS_PER_SEC) + (nanos % _NANOS_PER_SEC) / 1e9
    return _seconds_to_nanos(seconds * factor)


class Ticks:
    """Schedules the next deadline on a grid of periods since creation.

    The clock is a callable returning a monotonic time in nanoseconds.
    With a bias set, each deadline is shifted by up to ``period * bias``
    in either direction, derived from the elapsed time.
    """

    def __init__(self, clock: Optional[Callable[[], int]] = None) -> None:
        self._clock: Callable[[], int] = clock if clock is not None else time.monotonic_ns
        self._period: Optional[int] = None
        self._max_bias = 0.0
        self._origin = self._clock()
        self._next_at: Optional[int] = None

    def set_period(self, period: PeriodLike) -> None:
        """Set the period (timedelta or seconds); None disables the ticks."""
        self._period = _period_to_nanos(period)

    def set_period_bias(self, max_bias: float) -> None:
        """Set the maximal bias as a fraction of the period, clamped to [0, 1]."""
        self._max_bias = min(max(float(max_bias), 0.0), 1.0)

    def time_left(self) -> Optional[float]:
        """Seconds until the scheduled deadline, or None if nothing is scheduled."""
        if self._next_at is None:
            return None
        return max(self._next_at - self._clock(), 0) / 1e9

    def reached(self) -> bool:
        """Whether the scheduled deadline has passed."""
        return self._next_at is not None and self._clock() >= self._next_at

    def reschedule(self) -> None:
        """Compute the next deadline from the current time."""
        self._next_at = self._calc_next_at()

    def _calc_next_at(self) -> Optional[int]:
        period = self._period
        if period is None or period >= PERIOD_THRESHOLD or period == 0:
            return None

        now = self._clock()
        elapsed = now - self._origin

        coef = ((elapsed % _NANOS_PER_SEC) & 0xFFFF) / 65535.0
        max_bias = _mul_f64(period, self._max_bias)
        bias = _mul_f64(max_bias, coef)
        n = elapsed // period

        next_at = self._origin + period * (n + 1) + 2 * bias - max_bias

        # After skipping ticks the deadline may land in the biased zone.
        if next_at <= now:
            return next_at + period
        return next_at