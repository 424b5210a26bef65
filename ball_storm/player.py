"""
Player Module
==============
Player entity creation and normal (non-dash) movement.
"""

from typing import Tuple

from .ecs import World
from .components import (
    Position, CollisionBox, Renderable,
    PlayerControlled, DashState, DashPhase,
)
from .constants import PLAYER_SIZE, PLAYER_COLOR, TRAIL_INTERVAL
from .intents import InputIntent
from .particles import spawn_trail


def create_player(world: World, x: float, y: float) -> int:
    """Create the player entity with all required components."""
    entity_id = world.create_entity()

    world.add_component(entity_id, Position(x, y))
    world.add_component(entity_id, CollisionBox(PLAYER_SIZE, PLAYER_SIZE))
    world.add_component(entity_id, Renderable(color=PLAYER_COLOR, size=PLAYER_SIZE))
    world.add_component(entity_id, PlayerControlled())
    world.add_component(entity_id, DashState())

    return entity_id


def player_movement_system(world: World, intent: InputIntent,
                           field_width: float, field_height: float) -> None:
    """
    Apply the movement vector to the player, clamped to the field.

    Skipped entirely while dashing. Drops a trail marker at most once
    every TRAIL_INTERVAL frames while the player is moving.
    """
    for entity_id, pos, box, ctrl, dash in world.query(
        Position, CollisionBox, PlayerControlled, DashState
    ):
        ctrl.trail_timer.tick()

        if dash.phase is DashPhase.DASHING:
            continue

        dx, dy = intent.move_x, intent.move_y
        ctrl.moving = dx != 0 or dy != 0
        if not ctrl.moving:
            continue

        pos.x = _clamp(pos.x + ctrl.speed * dx, 0.0, field_width - box.width)
        pos.y = _clamp(pos.y + ctrl.speed * dy, 0.0, field_height - box.height)

        if not ctrl.trail_timer.is_active():
            cx, cy = player_center(pos, box)
            spawn_trail(world, cx, cy, box.width / 2)
            ctrl.trail_timer.start(TRAIL_INTERVAL)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def player_center(pos: Position, box: CollisionBox) -> Tuple[float, float]:
    return pos.x + box.width / 2, pos.y + box.height / 2
