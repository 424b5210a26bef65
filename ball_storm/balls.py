"""
Ball Manager
=============
Ball lifecycle: spawn at the top, fall, leave the field or get caught.
"""

import random
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from .ecs import World
from .components import Position, CollisionBox, Renderable, Ball
from .constants import (
    BALL_SIZE, BALL_SPAWN_CHANCE, BALL_BONUS_CHANCE,
    BALL_SPEED_MIN, BALL_SPEED_MAX, BONUS_COLOR, PENALTY_COLOR,
)


class HitKind(Enum):
    BONUS = 'bonus'
    PENALTY = 'penalty'


@dataclass(frozen=True)
class HitEvent:
    """A ball the player caught this frame, located at the ball's center."""
    kind: HitKind
    x: float
    y: float

    @property
    def is_bonus(self) -> bool:
        return self.kind is HitKind.BONUS


def spawn_ball(
    world: World,
    x: float, y: float,
    is_bonus: bool,
    speed: float,
    size: float = BALL_SIZE,
) -> int:
    """Spawn a single ball entity."""
    eid = world.create_entity()

    world.add_component(eid, Position(x, y))
    world.add_component(eid, CollisionBox(size, size))
    world.add_component(eid, Renderable(
        color=BONUS_COLOR if is_bonus else PENALTY_COLOR,
        size=size,
    ))
    world.add_component(eid, Ball(is_bonus=is_bonus, speed=speed))

    return eid


def try_spawn_ball(world: World, rng: random.Random, field_width: float,
                   chance: float = BALL_SPAWN_CHANCE) -> Optional[int]:
    """Roll once per frame; on success drop a new ball in at the top edge."""
    if rng.random() >= chance:
        return None

    is_bonus = rng.random() < BALL_BONUS_CHANCE
    return spawn_ball(
        world,
        x=rng.random() * (field_width - BALL_SIZE),
        y=0.0,
        is_bonus=is_bonus,
        speed=BALL_SPEED_MIN + rng.random() * (BALL_SPEED_MAX - BALL_SPEED_MIN),
    )


def ball_fall_system(world: World, field_height: float) -> int:
    """Move every ball down by its speed. Returns how many fell out."""
    fallen = 0
    for eid, pos, ball in world.query(Position, Ball):
        pos.y += ball.speed
        if pos.y > field_height:
            world.destroy_entity(eid)
            fallen += 1
    world.process_dead_entities()
    return fallen


def resolve_collisions(world: World, player_pos: Position,
                       player_box: CollisionBox) -> List[HitEvent]:
    """
    Catch every ball overlapping the player, newest ball first.

    All overlaps are resolved in the same frame; each caught ball is
    removed and reported as a HitEvent at its center.
    """
    events = []

    for eid, pos, box, ball in world.query(
        Position, CollisionBox, Ball, newest_first=True
    ):
        if not collision_check(player_pos, player_box, pos, box):
            continue
        cx, cy = box_center(pos, box)
        events.append(HitEvent(
            HitKind.BONUS if ball.is_bonus else HitKind.PENALTY, cx, cy
        ))
        world.destroy_entity(eid)

    world.process_dead_entities()
    return events


def clear_balls(world: World) -> List[Tuple[bool, float, float]]:
    """Remove every ball. Returns (is_bonus, center_x, center_y) for each."""
    cleared = []
    for eid, pos, box, ball in world.query(Position, CollisionBox, Ball):
        cx, cy = box_center(pos, box)
        cleared.append((ball.is_bonus, cx, cy))
        world.destroy_entity(eid)
    world.process_dead_entities()
    return cleared


# =============================================================================
# COLLISION UTILITIES
# =============================================================================

def collision_check(
    pos1: Position, box1: CollisionBox,
    pos2: Position, box2: CollisionBox
) -> bool:
    """Check AABB overlap between two boxes."""
    return (
        pos1.x < pos2.x + box2.width and
        pos1.x + box1.width > pos2.x and
        pos1.y < pos2.y + box2.height and
        pos1.y + box1.height > pos2.y
    )


def box_center(pos: Position, box: CollisionBox) -> Tuple[float, float]:
    return pos.x + box.width / 2, pos.y + box.height / 2
