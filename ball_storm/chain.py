"""
Chain Lightning
================
A caught bonus ball arcs lightning to every nearby bonus ball, and
from each of those on to their neighbors, until no unclaimed bonus
ball is left in reach.

The walk is a depth-first flood fill over the proximity graph using
an explicit stack. A ball is flagged `has_lightning` the moment it is
reached, so no ball is visited twice and cycles cannot loop.
"""

import logging
import math
import random
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .ecs import World
from .components import Position, CollisionBox, Ball
from .timers import Countdown
from .balls import box_center
from .constants import CHAIN_RADIUS, CHAIN_SEGMENTS, CHAIN_JITTER, CHAIN_DURATION

logger = logging.getLogger(__name__)

Point = Tuple[float, float]


@dataclass
class LightningArc:
    """A jagged bolt between two points that lives for a few frames."""
    start: Point
    end: Point
    timer: Countdown = field(default_factory=Countdown)
    points: Tuple[Point, ...] = ()
    segments: int = CHAIN_SEGMENTS
    jitter: float = CHAIN_JITTER

    def rejitter(self, rng: random.Random):
        self.points = lightning_path(rng, self.start, self.end,
                                     self.segments, self.jitter)


def make_arc(rng: random.Random, start: Point, end: Point,
             duration: int = CHAIN_DURATION,
             segments: int = CHAIN_SEGMENTS,
             jitter: float = CHAIN_JITTER) -> LightningArc:
    arc = LightningArc(start=start, end=end, segments=segments, jitter=jitter)
    arc.timer.start(duration)
    arc.rejitter(rng)
    return arc


def lightning_path(rng: random.Random, start: Point, end: Point,
                   segments: int = CHAIN_SEGMENTS,
                   jitter: float = CHAIN_JITTER) -> Tuple[Point, ...]:
    """
    Polyline from start to end split into `segments` pieces. Interior
    points are pushed sideways by a random offset; endpoints are exact.
    """
    segments = max(1, segments)
    x1, y1 = start
    x2, y2 = end
    dx, dy = x2 - x1, y2 - y1
    length = math.hypot(dx, dy)
    if length > 0:
        nx, ny = -dy / length, dx / length
    else:
        nx, ny = 0.0, 0.0

    points = [start]
    for i in range(1, segments):
        t = i / segments
        offset = rng.uniform(-jitter, jitter)
        points.append((x1 + dx * t + nx * offset, y1 + dy * t + ny * offset))
    points.append(end)
    return tuple(points)


def _first_unclaimed_in_reach(world: World, x: float, y: float,
                              radius: float) -> Optional[Tuple[Ball, Point]]:
    """First unclaimed bonus ball (creation order) within radius of (x, y)."""
    for eid, pos, box, ball in world.query(Position, CollisionBox, Ball):
        if not ball.is_bonus or ball.has_lightning:
            continue
        cx, cy = box_center(pos, box)
        if math.hypot(cx - x, cy - y) <= radius:
            return ball, (cx, cy)
    return None


def propagate_chain(world: World, rng: random.Random, origin: Point,
                    radius: float = CHAIN_RADIUS,
                    duration: int = CHAIN_DURATION) -> List[LightningArc]:
    """
    Flood-fill lightning out from `origin` across live bonus balls.

    Returns one arc per newly chained ball. Balls already carrying
    lightning from an earlier cascade are never chained again.
    """
    arcs = []
    stack = [origin]

    while stack:
        current = stack[-1]
        found = _first_unclaimed_in_reach(world, current[0], current[1], radius)
        if found is None:
            stack.pop()
            continue
        ball, center = found
        ball.has_lightning = True
        arcs.append(make_arc(rng, current, center, duration))
        stack.append(center)

    if arcs:
        logger.debug("Chain lightning linked %d ball(s)", len(arcs))
    return arcs


def arc_system(arcs: List[LightningArc], rng: random.Random) -> List[LightningArc]:
    """Age every arc by one frame, re-jitter survivors, drop the expired."""
    alive = []
    for arc in arcs:
        arc.timer.tick()
        if arc.timer.is_active():
            arc.rejitter(rng)
            alive.append(arc)
    return alive
