"""
Combo & Score
==============
Multiplier growth on bonus hits, partial loss on penalty hits, and the
asymmetric passive decay: above the drain threshold the multiplier
bleeds off slowly once the timer runs out, at or below it the combo
drops straight back to 1.
"""

import math
from dataclasses import dataclass, field

from .timers import Countdown
from .constants import (
    MAX_MULTIPLIER, DRAIN_THRESHOLD, COMBO_TIME_LIMIT, COMBO_INCREMENT,
    PENALTY_STEP, DRAIN_RATE, COMBO_POP_SCALE, COMBO_SCALE_RELAX,
)


@dataclass
class ComboState:
    """Combo multiplier, its decay timer, and the cosmetic pop scale."""
    multiplier: float = 1.0
    timer: Countdown = field(default_factory=Countdown)
    animation_scale: float = 1.0

    @property
    def timer_fraction(self) -> float:
        return min(1.0, self.timer.remaining / COMBO_TIME_LIMIT)

    @property
    def maxed(self) -> bool:
        return self.multiplier >= MAX_MULTIPLIER


def clamp_multiplier(value: float) -> float:
    if math.isnan(value):
        return 1.0
    return max(1.0, min(MAX_MULTIPLIER, value))


def hit_score(base: float, combo: ComboState, zone_factor: float = 1.0) -> int:
    """Points for a bonus hit at the current multiplier."""
    return int(math.floor(base * combo.multiplier * zone_factor))


def register_bonus_hit(combo: ComboState, increment: float = COMBO_INCREMENT):
    """Grow the multiplier and refill the combo timer."""
    combo.timer.start(COMBO_TIME_LIMIT)
    combo.multiplier = clamp_multiplier(combo.multiplier + increment)
    combo.animation_scale = COMBO_POP_SCALE


def register_penalty_hit(combo: ComboState):
    """
    A high combo loses one step and gets half the timer back as a
    recovery window. A low combo is simply lost.
    """
    if combo.multiplier > DRAIN_THRESHOLD:
        combo.multiplier = clamp_multiplier(combo.multiplier - PENALTY_STEP)
        combo.timer.start(COMBO_TIME_LIMIT // 2)
    else:
        combo.multiplier = 1.0
        combo.timer.clear()


def combo_decay(combo: ComboState):
    """Per-frame timer countdown and multiplier drain."""
    if combo.timer.is_active():
        combo.timer.tick()
        if combo.timer.is_active():
            _relax_scale(combo)
            return

    if combo.multiplier > DRAIN_THRESHOLD:
        combo.multiplier = clamp_multiplier(combo.multiplier - DRAIN_RATE)
        # Hold the timer at one frame so the drain continues next tick
        combo.timer.start(1)
    else:
        combo.multiplier = 1.0

    _relax_scale(combo)


def _relax_scale(combo: ComboState):
    excess = (combo.animation_scale - 1.0) * COMBO_SCALE_RELAX
    combo.animation_scale = 1.0 if excess < 0.01 else 1.0 + excess
