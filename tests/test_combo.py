"""Tests for combo growth, penalty loss and passive decay."""
import pytest

from ball_storm.combo import (
    ComboState, hit_score, register_bonus_hit, register_penalty_hit,
    combo_decay, clamp_multiplier,
)
from ball_storm.constants import MAX_MULTIPLIER, COMBO_TIME_LIMIT


class TestGrowth:
    """Bonus hits raise the multiplier."""

    def test_bonus_hit(self):
        combo = ComboState()
        register_bonus_hit(combo)
        assert combo.multiplier == 1.5
        assert combo.timer.remaining == COMBO_TIME_LIMIT
        assert combo.animation_scale > 1.0

    def test_capped_at_max(self):
        combo = ComboState(multiplier=7.8)
        register_bonus_hit(combo)
        assert combo.multiplier == MAX_MULTIPLIER
        assert combo.maxed

    def test_score_uses_current_multiplier(self):
        combo = ComboState(multiplier=2.0)
        assert hit_score(5, combo) == 10
        assert hit_score(5, combo, zone_factor=2.0) == 20

    def test_score_floors(self):
        assert hit_score(5, ComboState(multiplier=1.5)) == 7

    def test_clamp(self):
        assert clamp_multiplier(0.2) == 1.0
        assert clamp_multiplier(99) == MAX_MULTIPLIER
        assert clamp_multiplier(float('nan')) == 1.0


class TestPenalty:
    """Penalty hits cost a step above the threshold and everything below."""

    def test_high_combo_loses_one_step(self):
        combo = ComboState(multiplier=6.0)
        register_penalty_hit(combo)
        assert combo.multiplier == 5.0
        assert combo.timer.remaining == COMBO_TIME_LIMIT // 2

    def test_low_combo_resets(self):
        combo = ComboState(multiplier=3.5)
        combo.timer.start(50)
        register_penalty_hit(combo)
        assert combo.multiplier == 1.0
        assert not combo.timer.is_active()


class TestDecay:
    """Timer expiry behavior on either side of the threshold."""

    def test_max_combo_drains_slowly(self):
        combo = ComboState(multiplier=8.0)
        combo.timer.start(1)
        combo_decay(combo)
        assert combo.multiplier == pytest.approx(7.985)

    def test_drain_continues_each_frame(self):
        combo = ComboState(multiplier=8.0)
        for _ in range(10):
            combo_decay(combo)
        assert combo.multiplier == pytest.approx(8.0 - 10 * 0.015)

    def test_low_combo_resets_on_expiry(self):
        combo = ComboState(multiplier=3.0)
        combo.timer.start(1)
        combo_decay(combo)
        assert combo.multiplier == 1.0

    def test_active_timer_holds_multiplier(self):
        combo = ComboState(multiplier=3.0)
        combo.timer.start(10)
        combo_decay(combo)
        assert combo.multiplier == 3.0
        assert combo.timer.remaining == 9

    def test_drain_stops_at_threshold_then_resets(self):
        combo = ComboState(multiplier=4.01)
        combo_decay(combo)
        assert combo.multiplier == pytest.approx(3.995)
        combo_decay(combo)
        assert combo.multiplier == 1.0

    def test_animation_scale_relaxes(self):
        combo = ComboState()
        register_bonus_hit(combo)
        for _ in range(100):
            combo_decay(combo)
        assert combo.animation_scale == 1.0
