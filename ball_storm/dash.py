"""
Dash
=====
Dash state machine: IDLE -> DASHING -> (IDLE | COOLDOWN) -> IDLE.

The player holds up to two charges. Each dash spends one; cooldown
only starts once the last charge is spent, and refills both.
"""

import logging
import math
import random
from typing import Optional, Tuple

from .ecs import World
from .components import Position, CollisionBox, DashState, DashPhase
from .constants import (
    DASH_DEADZONE, DASH_SHAKE_INTENSITY, DASH_SHAKE_FRAMES,
)
from .feedback import ScreenShake
from .intents import InputIntent
from .particles import spawn_dash_burst, spawn_trail
from .player import player_center

logger = logging.getLogger(__name__)


def resolve_dash_direction(intent: InputIntent) -> Optional[Tuple[float, float]]:
    """
    Work out which way a dash trigger points, or None if nothing fired.

    An explicit dash direction wins. Otherwise a left/right trigger
    follows the movement stick (snapped to its signs) when it is held
    past the deadzone, and falls back to its own side when it is not.
    """
    if not intent.dash_triggered:
        return None

    if intent.dash_direction is not None:
        return intent.dash_direction

    dx = _snap(intent.move_x)
    dy = _snap(intent.move_y)
    if dx != 0 or dy != 0:
        return dx, dy

    return (-1.0, 0.0) if intent.dash_left else (1.0, 0.0)


def _snap(axis: float) -> float:
    if abs(axis) <= DASH_DEADZONE:
        return 0.0
    return 1.0 if axis > 0 else -1.0


def start_dash(world: World, rng: random.Random, entity_id: int,
               direction: Tuple[float, float],
               shake: Optional[ScreenShake] = None) -> bool:
    """
    Begin a dash if the player is idle with a charge in hand.

    Returns True when the dash started.
    """
    dash = world.get_component(entity_id, DashState)
    pos = world.get_component(entity_id, Position)
    box = world.get_component(entity_id, CollisionBox)
    if dash is None or pos is None or box is None:
        return False

    if dash.phase is not DashPhase.IDLE or dash.dashes_available <= 0:
        return False

    dx, dy = direction
    length = math.hypot(dx, dy)
    if length == 0:
        return False

    dash.direction_x = dx / length
    dash.direction_y = dy / length
    dash.dashes_available = max(0, dash.dashes_available - 1)
    dash.timer.start(dash.duration)
    dash.phase = DashPhase.DASHING

    cx, cy = player_center(pos, box)
    spawn_dash_burst(world, rng, cx, cy, dash.direction_x, dash.direction_y)
    if shake is not None:
        shake.trigger(DASH_SHAKE_INTENSITY, DASH_SHAKE_FRAMES)

    logger.debug("Dash started toward (%.2f, %.2f), %d charge(s) left",
                 dash.direction_x, dash.direction_y, dash.dashes_available)
    return True


def dash_system(world: World, field_width: float, field_height: float):
    """
    Advance active dashes and cooldowns by one frame.

    A dashing player moves at dash speed regardless of input and
    wraps around the field edges instead of stopping at them.
    """
    for entity_id, pos, box, dash in world.query(Position, CollisionBox, DashState):
        if dash.phase is DashPhase.DASHING:
            pos.x += dash.speed * dash.direction_x
            pos.y += dash.speed * dash.direction_y
            _wrap(pos, box, field_width, field_height)

            if dash.timer.remaining % 2 == 0:
                cx, cy = player_center(pos, box)
                spawn_trail(world, cx, cy, box.width / 2)

            dash.timer.tick()
            if not dash.timer.is_active():
                if dash.dashes_available > 0:
                    dash.phase = DashPhase.IDLE
                else:
                    dash.phase = DashPhase.COOLDOWN
                    dash.cooldown_timer.start(dash.cooldown)

        elif dash.phase is DashPhase.COOLDOWN:
            dash.cooldown_timer.tick()
            if not dash.cooldown_timer.is_active():
                dash.dashes_available = dash.max_dashes
                dash.phase = DashPhase.IDLE

        dash.dashes_available = max(0, min(dash.max_dashes, dash.dashes_available))


def _wrap(pos: Position, box: CollisionBox, field_width: float, field_height: float):
    """Re-enter from the opposite edge once the center leaves the field."""
    cx, cy = player_center(pos, box)
    if cx < 0:
        pos.x += field_width
    elif cx >= field_width:
        pos.x -= field_width
    if cy < 0:
        pos.y += field_height
    elif cy >= field_height:
        pos.y -= field_height
