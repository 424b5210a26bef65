"""
Particle System
================
Particle emitters and per-kind physics.

Every particle is an entity with Position, Velocity, Renderable,
Lifetime and a ParticleTag naming its kind. Kind-specific state lives
in its own component (Spin, GatherTarget, TrailMarker, FloatingText).
"""

import logging
import math
import random
from typing import Dict, List, Optional, Tuple

from .ecs import World
from .components import (
    Position, Velocity, Renderable, Lifetime, Gravity,
    ParticleTag, ParticleKind, Spin, GatherTarget, TrailMarker, FloatingText,
)
from .constants import (
    MAX_PARTICLES, EXPLOSION_COUNT, CONFETTI_COUNT, GATHER_COUNT, DASH_BURST_COUNT,
    CONFETTI_GRAVITY, GATHER_ARRIVAL_RADIUS, GATHER_FADE_BASE, TRAIL_LIFE, FLOATING_TEXT_LIFE,
    CONFETTI_COLORS, EXPLOSION_COLORS, PLAYER_COLOR, WHITE,
)
from .snapshot import ParticleView

logger = logging.getLogger(__name__)


def spawn_particle(
    world: World,
    kind: ParticleKind,
    x: float, y: float,
    vx: float = 0.0, vy: float = 0.0,
    color: int = WHITE,
    size: float = 2.0,
    lifetime: float = 20,
    target: Optional[Tuple[float, float]] = None,
    rotation: float = 0.0,
    spin: float = 0.0,
    text: str = '',
) -> int:
    """Spawn a single particle entity of the given kind."""
    entity_id = world.create_entity()

    world.add_component(entity_id, Position(x, y))
    world.add_component(entity_id, Velocity(vx, vy))
    world.add_component(entity_id, Renderable(color=color, size=size))
    world.add_component(entity_id, Lifetime(lifetime, lifetime))
    world.add_component(entity_id, ParticleTag(kind))

    if kind is ParticleKind.CONFETTI:
        world.add_component(entity_id, Spin(rotation, spin))
        world.add_component(entity_id, Gravity(CONFETTI_GRAVITY))
    elif kind is ParticleKind.GATHER:
        tx, ty = target if target is not None else (x, y)
        world.add_component(entity_id, GatherTarget(tx, ty))
    elif kind is ParticleKind.TRAIL:
        world.add_component(entity_id, TrailMarker())
    elif kind is ParticleKind.TEXT:
        world.add_component(entity_id, FloatingText(text=text))

    return entity_id


# =============================================================================
# EFFECT RECIPES
# =============================================================================

def spawn_explosion(world: World, rng: random.Random, x: float, y: float,
                    count: int = EXPLOSION_COUNT):
    """Hot orange-red burst for a penalty ball."""
    for _ in range(count):
        spawn_particle(
            world, ParticleKind.DECAY, x, y,
            vx=(rng.random() - 0.5) * 8,
            vy=(rng.random() - 0.5) * 8,
            color=rng.choice(EXPLOSION_COLORS),
            size=rng.random() * 5 + 2,
            lifetime=30 + rng.random() * 20,
        )


def spawn_confetti(world: World, rng: random.Random, x: float, y: float,
                   count: int = CONFETTI_COUNT):
    """Colorful spinning confetti for a bonus ball, thrown mostly upward."""
    for _ in range(count):
        spawn_particle(
            world, ParticleKind.CONFETTI, x, y,
            vx=(rng.random() - 0.5) * 6,
            vy=(rng.random() * -6) - 2,
            color=rng.choice(CONFETTI_COLORS),
            size=rng.random() * 6 + 2,
            lifetime=40 + rng.random() * 20,
            rotation=rng.random() * 360,
            spin=(rng.random() - 0.5) * 10,
        )


def spawn_gather(world: World, rng: random.Random,
                 start_x: float, start_y: float,
                 end_x: float, end_y: float,
                 count: int = GATHER_COUNT):
    """Particles that fly from a ball toward the player."""
    dx = end_x - start_x
    dy = end_y - start_y
    distance = math.hypot(dx, dy)
    if distance > 0:
        dir_x, dir_y = dx / distance, dy / distance
    else:
        dir_x, dir_y = 0.0, -1.0

    for _ in range(count):
        jitter_x = dir_x + (rng.random() - 0.5) * 0.5
        jitter_y = dir_y + (rng.random() - 0.5) * 0.5
        speed = 2 + rng.random() * 3
        spawn_particle(
            world, ParticleKind.GATHER, start_x, start_y,
            vx=jitter_x * speed,
            vy=jitter_y * speed,
            color=rng.choice(CONFETTI_COLORS),
            size=rng.random() * 4 + 2,
            lifetime=40 + rng.random() * 20,
            target=(end_x, end_y),
        )


def spawn_dash_burst(world: World, rng: random.Random, x: float, y: float,
                     direction_x: float, direction_y: float,
                     count: int = DASH_BURST_COUNT):
    """Decay particles kicked out opposite the dash direction."""
    for _ in range(count):
        spawn_particle(
            world, ParticleKind.DECAY, x, y,
            vx=-direction_x * (rng.random() * 4 + 2),
            vy=-direction_y * (rng.random() * 4 + 2),
            color=PLAYER_COLOR,
            size=rng.random() * 4 + 2,
            lifetime=15 + rng.random() * 10,
        )


def spawn_trail(world: World, x: float, y: float, size: float,
                color: int = PLAYER_COLOR) -> int:
    """Stationary fading marker at the player's center."""
    return spawn_particle(
        world, ParticleKind.TRAIL, x, y,
        color=color, size=size, lifetime=TRAIL_LIFE,
    )


def spawn_floating_text(world: World, x: float, y: float, text: str,
                        color: int = WHITE) -> int:
    """Score text that drifts upward and fades."""
    return spawn_particle(
        world, ParticleKind.TEXT, x, y,
        color=color, size=1.0, lifetime=FLOATING_TEXT_LIFE, text=text,
    )


# =============================================================================
# UPDATE
# =============================================================================

def particle_system(world: World, limit: int = MAX_PARTICLES):
    """
    Advance every particle one frame and drop expired ones.

    Dead particles are removed before returning, so nothing with
    life <= 0 survives into the next frame.
    """
    enforce_particle_cap(world, limit)

    for entity_id, pos, vel, life, tag in world.query(
        Position, Velocity, Lifetime, ParticleTag
    ):
        kind = tag.kind

        if kind is ParticleKind.GATHER:
            target = world.get_component(entity_id, GatherTarget)
            if target and _steer_toward(pos, vel, target):
                world.destroy_entity(entity_id)
                continue

        if kind is ParticleKind.TEXT:
            text = world.get_component(entity_id, FloatingText)
            pos.y -= text.rise if text else 0.0
        else:
            pos.x += vel.x
            pos.y += vel.y

        if kind is ParticleKind.CONFETTI:
            grav = world.get_component(entity_id, Gravity)
            if grav:
                vel.y += grav.strength
            spin = world.get_component(entity_id, Spin)
            if spin:
                spin.rotation = (spin.rotation + spin.speed) % 360

        life.frames_remaining -= 1
        if life.frames_remaining <= 0:
            world.destroy_entity(entity_id)
            continue

        if kind is ParticleKind.TRAIL:
            marker = world.get_component(entity_id, TrailMarker)
            if marker:
                marker.opacity = life.frames_remaining / life.total

    world.process_dead_entities()


def _steer_toward(pos: Position, vel: Velocity, target: GatherTarget) -> bool:
    """
    Re-aim a gather particle at its target, accelerating up to its cap.
    Returns True once the particle has arrived.
    """
    dx = target.x - pos.x
    dy = target.y - pos.y
    distance = math.hypot(dx, dy)
    if distance < GATHER_ARRIVAL_RADIUS:
        return True

    speed = math.hypot(vel.x, vel.y) * target.acceleration
    speed = min(speed, target.max_speed)
    vel.x = dx / distance * speed
    vel.y = dy / distance * speed
    return False


def enforce_particle_cap(world: World, limit: int = MAX_PARTICLES) -> int:
    """Evict the oldest particles beyond `limit`. Returns how many were dropped."""
    particle_ids = list(world.get_entities_with(ParticleTag))
    excess = len(particle_ids) - limit
    if excess <= 0:
        return 0
    for entity_id in particle_ids[:excess]:
        world.destroy_entity(entity_id)
    world.process_dead_entities()
    logger.debug("Particle cap reached, evicted %d oldest", excess)
    return excess


# =============================================================================
# SNAPSHOT
# =============================================================================

def particle_snapshot(world: World) -> Dict[ParticleKind, Tuple[ParticleView, ...]]:
    """Current particles grouped by kind, with per-kind draw parameters."""
    groups: Dict[ParticleKind, List[ParticleView]] = {kind: [] for kind in ParticleKind}

    for entity_id, pos, rend, life, tag in world.query(
        Position, Renderable, Lifetime, ParticleTag
    ):
        if not rend.visible:
            continue
        kind = tag.kind
        alpha = 1.0
        rotation = 0.0
        text = ''

        if kind is ParticleKind.CONFETTI:
            spin = world.get_component(entity_id, Spin)
            rotation = spin.rotation if spin else 0.0
        elif kind is ParticleKind.TRAIL:
            marker = world.get_component(entity_id, TrailMarker)
            alpha = marker.opacity if marker else 0.0
        elif kind is ParticleKind.TEXT:
            floating = world.get_component(entity_id, FloatingText)
            if floating:
                text = floating.text
                alpha = life.frames_remaining / floating.base_life
        elif kind is ParticleKind.GATHER:
            alpha = life.frames_remaining / GATHER_FADE_BASE

        groups[kind].append(ParticleView(
            kind=kind,
            x=pos.x, y=pos.y,
            size=rend.size,
            color=rend.color,
            alpha=max(0.0, min(1.0, alpha)),
            rotation=rotation,
            text=text,
        ))

    return {kind: tuple(views) for kind, views in groups.items()}
