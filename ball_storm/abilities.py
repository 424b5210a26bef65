"""
Abilities
==========
Bomb (earned by a bonus streak), the multiplier zone, and the
lightning storm (earned by a maxed combo). Each is a small timed,
triggerable effect acting on the shared ball and particle pools.
"""

import logging
import math
import random
from dataclasses import dataclass, field
from typing import List, Tuple

from .ecs import World
from .timers import Countdown
from .balls import clear_balls
from .chain import LightningArc, make_arc
from .combo import ComboState, hit_score, register_bonus_hit
from .particles import spawn_explosion, spawn_gather
from .constants import (
    BOMB_STREAK, BOMB_PENALTY_SCORE, BOMB_BONUS_SCORE, AMBIENT_INCREMENT,
    ZONE_SPAWN_CHANCE, ZONE_RADIUS, ZONE_DURATION, ZONE_FACTOR,
    STORM_DURATION, STORM_BOLT_INTERVAL, STORM_BOLT_LIFE,
    STORM_BONUS_SCORE, STORM_PENALTY_SCORE,
)

logger = logging.getLogger(__name__)

Point = Tuple[float, float]


# =============================================================================
# BOMB
# =============================================================================

@dataclass
class BombState:
    """Consecutive bonus hits and whether they have earned a bomb."""
    streak: int = 0
    available: bool = False


def extend_streak(bomb: BombState) -> bool:
    """Count a bonus hit. Returns True on the hit that unlocks the bomb."""
    bomb.streak += 1
    if bomb.streak >= BOMB_STREAK and not bomb.available:
        bomb.available = True
        return True
    return False


def break_streak(bomb: BombState) -> bool:
    """A penalty hit ends the streak. Returns True if there was one to lose."""
    had_streak = bomb.streak > 0
    bomb.streak = 0
    return had_streak


def activate_bomb(world: World, rng: random.Random, bomb: BombState,
                  combo: ComboState, player_center: Point) -> int:
    """
    Clear the field. Penalty balls explode for a halved penalty, bonus
    balls are gathered into the player for a reduced bonus and a small
    combo boost. Returns the score change, 0 if no bomb was ready.
    """
    if not bomb.available:
        return 0

    score_delta = 0
    px, py = player_center
    cleared = clear_balls(world)
    for is_bonus, cx, cy in cleared:
        if is_bonus:
            spawn_gather(world, rng, cx, cy, px, py)
            register_bonus_hit(combo, AMBIENT_INCREMENT)
            score_delta += BOMB_BONUS_SCORE
        else:
            spawn_explosion(world, rng, cx, cy)
            score_delta -= BOMB_PENALTY_SCORE

    bomb.available = False
    bomb.streak = 0
    logger.info("Bomb cleared %d ball(s) for %+d", len(cleared), score_delta)
    return score_delta


# =============================================================================
# MULTIPLIER ZONE
# =============================================================================

@dataclass
class MultiplierZone:
    """Circular region that multiplies bonus scores landing inside it."""
    x: float = 0.0
    y: float = 0.0
    radius: float = ZONE_RADIUS
    factor: float = ZONE_FACTOR
    timer: Countdown = field(default_factory=Countdown)

    def is_active(self) -> bool:
        return self.timer.is_active()

    @property
    def fraction(self) -> float:
        return self.timer.remaining / ZONE_DURATION

    def contains(self, x: float, y: float) -> bool:
        return self.is_active() and math.hypot(x - self.x, y - self.y) <= self.radius

    def factor_at(self, x: float, y: float) -> float:
        """Score factor for a hit at (x, y); 1 outside the zone."""
        return self.factor if self.contains(x, y) else 1.0

    def place(self, x: float, y: float, duration: int = ZONE_DURATION):
        self.x = x
        self.y = y
        self.timer.start(duration)


def zone_system(zone: MultiplierZone, rng: random.Random,
                field_width: float, field_height: float,
                chance: float = ZONE_SPAWN_CHANCE) -> bool:
    """
    Tick an active zone, or roll to open a new one when none is up.
    Returns True when a zone spawned this frame.
    """
    if zone.is_active():
        zone.timer.tick()
        return False

    if rng.random() >= chance:
        return False

    r = zone.radius
    zone.place(
        rng.uniform(r, max(r, field_width - r)),
        rng.uniform(r, max(r, field_height - r)),
    )
    logger.info("Multiplier zone opened at (%.0f, %.0f)", zone.x, zone.y)
    return True


# =============================================================================
# LIGHTNING STORM
# =============================================================================

@dataclass
class StormState:
    """Storm unlock flag, running timer and decorative bolt cadence."""
    unlocked: bool = False
    timer: Countdown = field(default_factory=Countdown)
    bolt_timer: Countdown = field(default_factory=Countdown)

    def is_active(self) -> bool:
        return self.timer.is_active()

    @property
    def fraction(self) -> float:
        return self.timer.remaining / STORM_DURATION


def check_storm_unlock(storm: StormState, combo: ComboState) -> bool:
    """Unlock the storm once the combo is maxed. Returns True on unlock."""
    if combo.maxed and not storm.unlocked and not storm.is_active():
        storm.unlocked = True
        return True
    return False


def activate_storm(storm: StormState) -> bool:
    """Spend the unlock and start the storm. Returns True if it started."""
    if not storm.unlocked or storm.is_active():
        return False
    storm.unlocked = False
    storm.timer.start(STORM_DURATION)
    storm.bolt_timer.clear()
    logger.info("Lightning storm started")
    return True


def storm_sweep(world: World, rng: random.Random, storm: StormState,
                combo: ComboState, player_center: Point) -> int:
    """While the storm runs, every ball on the field is taken for points."""
    if not storm.is_active():
        return 0

    score_delta = 0
    px, py = player_center
    for is_bonus, cx, cy in clear_balls(world):
        if is_bonus:
            spawn_gather(world, rng, cx, cy, px, py)
            score_delta += hit_score(STORM_BONUS_SCORE, combo)
        else:
            spawn_explosion(world, rng, cx, cy)
            score_delta += STORM_PENALTY_SCORE
    return score_delta


def storm_system(storm: StormState, rng: random.Random,
                 field_width: float, field_height: float) -> List[LightningArc]:
    """Advance the storm timer. Returns decorative bolts spawned this frame."""
    if not storm.is_active():
        return []

    bolts = []
    if not storm.bolt_timer.is_active():
        top_x = rng.uniform(0, field_width)
        bottom = (
            min(field_width, max(0.0, top_x + rng.uniform(-100, 100))),
            rng.uniform(field_height * 0.3, field_height * 0.8),
        )
        bolts.append(make_arc(rng, (top_x, 0.0), bottom,
                              duration=STORM_BOLT_LIFE, jitter=25.0))
        storm.bolt_timer.start(STORM_BOLT_INTERVAL)
    storm.bolt_timer.tick()

    storm.timer.tick()
    if not storm.is_active():
        logger.info("Lightning storm ended")
    return bolts
