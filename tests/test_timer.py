import pytest

from choochoo.timer import TICK_TIME, TickTimer, next_compare


class FakeClock:
    def __init__(self, now=0):
        self.now = now

    def __call__(self):
        return self.now


def test_default_tick_is_ten_ms():
    timer = TickTimer(FakeClock(0))
    timer.start()
    assert timer.compare == TICK_TIME == 10000


@pytest.mark.parametrize(
    "compare, now",
    [(0, 0), (0, 9999), (0, 10000), (10000, 25000), (500, 123456), (7, 7)],
)
def test_next_compare_invariants(compare, now):
    result = next_compare(compare, now)
    assert result > now
    assert result - now <= TICK_TIME
    assert (result - compare) % TICK_TIME == 0


def test_next_compare_worked_example():
    assert next_compare(0, 25000) == 30000


def test_start_arms_one_tick_ahead():
    clock = FakeClock(5)
    timer = TickTimer(clock)
    timer.start()
    assert timer.compare == 5 + TICK_TIME
    assert not timer.due()
    clock.now = 5 + TICK_TIME
    assert timer.due()


def test_reset_moves_past_now():
    clock = FakeClock(0)
    timer = TickTimer(clock, tick=100)
    timer.start()
    clock.now = 350
    assert timer.due()
    timer.reset()
    assert timer.compare > 350
    assert timer.compare % 100 == 0
    assert not timer.due()


def test_unstarted_timer_raises():
    timer = TickTimer(FakeClock())
    with pytest.raises(RuntimeError):
        timer.due()
    with pytest.raises(RuntimeError):
        timer.reset()


def test_bad_tick():
    with pytest.raises(ValueError):
        TickTimer(FakeClock(), tick=0)