import pytest

from chquery.ticks import PERIOD_THRESHOLD, Ticks

SEC = 1_000_000_000


class FakeClock:
    def __init__(self, start=1_000 * SEC):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, nanos):
        self.now += nanos


@pytest.fixture
def clock():
    return FakeClock()


def test_smoke(clock):
    ticks = Ticks(clock)
    ticks.set_period(10)
    ticks.reschedule()

    assert ticks.time_left() == 10.0
    assert not ticks.reached()
    clock.advance(3 * SEC)
    ticks.reschedule()
    assert ticks.time_left() == 7.0
    assert not ticks.reached()
    clock.advance(7 * SEC)
    assert ticks.reached()
    ticks.reschedule()
    assert ticks.time_left() == 10.0
    assert not ticks.reached()

    # Up to 10% bias.
    ticks.set_period_bias(0.1)
    ticks.reschedule()
    assert ticks.time_left() == 9.0
    assert not ticks.reached()
    clock.advance(12 * SEC)
    assert ticks.reached()
    ticks.reschedule()
    assert ticks.time_left() == 7.0
    assert not ticks.reached()

    # Other seeds.
    clock.advance(32768)
    ticks.reschedule()
    assert ticks.time_left() == 7.999982492

    clock.advance(32767)
    ticks.reschedule()
    assert ticks.time_left() == 8.999934465


def test_skip_extra_ticks(clock):
    ticks = Ticks(clock)
    ticks.set_period(10)
    ticks.set_period_bias(0.1)
    ticks.reschedule()

    assert ticks.time_left() == 9.0
    assert not ticks.reached()
    clock.advance(30 * SEC)
    assert ticks.reached()
    ticks.reschedule()
    assert ticks.time_left() == 9.0
    assert not ticks.reached()

    # Hit biased zone.
    clock.advance(19 * SEC)
    assert ticks.reached()
    ticks.reschedule()
    assert ticks.time_left() == 10.0
    assert not ticks.reached()


def test_disabled():
    ticks = Ticks()
    assert ticks.time_left() is None
    assert not ticks.reached()
    ticks.reschedule()
    assert ticks.time_left() is None
    assert not ticks.reached()

    # Not disabled.
    ticks.set_period(10)
    ticks.reschedule()
    assert ticks.time_left() <= 10.0
    assert not ticks.reached()

    # Explicitly.
    ticks.set_period(None)
    ticks.reschedule()
    assert ticks.time_left() is None
    assert not ticks.reached()

    # Zero duration.
    ticks.set_period(0)
    ticks.reschedule()
    assert ticks.time_left() is None
    assert not ticks.reached()

    # Too big duration.
    ticks.set_period(PERIOD_THRESHOLD / SEC)
    ticks.reschedule()
    assert ticks.time_left() is None
    assert not ticks.reached()


def test_timedelta_period(clock):
    from datetime import timedelta

    ticks = Ticks(clock)
    ticks.set_period(timedelta(seconds=5))
    ticks.reschedule()
    assert ticks.time_left() == 5.0


def test_bias_is_clamped(clock):
    ticks = Ticks(clock)
    ticks.set_period(10)
    ticks.set_period_bias(5.0)
    ticks.reschedule()
    # Bias clamped to 1.0: deadline shifted back by a full period, then pushed forward.
    assert ticks.time_left() == 10.0

    ticks.set_period_bias(-1.0)
    ticks.reschedule()
    assert ticks.time_left() == 10.0


def test_time_left_saturates_at_zero(clock):
    ticks = Ticks(clock)
    ticks.set_period(10)
    ticks.reschedule()
    clock.advance(25 * SEC)
    assert ticks.reached()
    assert ticks.time_left() == 0.0


def test_negative_period_rejected(clock):
    ticks = Ticks(clock)
    with pytest.raises(ValueError):
        ticks.set_period(-1)