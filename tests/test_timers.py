"""Tests for the Countdown primitive."""
from ball_storm.timers import Countdown


class TestCountdown:
    """Countdown start/tick/is_active semantics."""

    def test_new_countdown_is_idle(self):
        timer = Countdown()
        assert timer.remaining == 0
        assert not timer.is_active()

    def test_start_then_tick_to_zero(self):
        """start(3) stays active for exactly three ticks."""
        timer = Countdown()
        timer.start(3)
        active = []
        for _ in range(3):
            active.append(timer.is_active())
            timer.tick()
        assert active == [True, True, True]
        assert not timer.is_active()

    def test_tick_clamps_at_zero(self):
        timer = Countdown()
        timer.start(1)
        timer.tick()
        timer.tick()
        timer.tick()
        assert timer.remaining == 0

    def test_negative_duration_clamps(self):
        timer = Countdown()
        timer.start(-5)
        assert timer.remaining == 0

    def test_restart_overrides_remaining(self):
        timer = Countdown()
        timer.start(10)
        timer.tick()
        timer.start(2)
        assert timer.remaining == 2

    def test_clear(self):
        timer = Countdown(7)
        timer.clear()
        assert not timer.is_active()
