"""
Game Session
=============
Owns every piece of simulation state for one play session and
advances it one frame at a time in a fixed order:

    pause / restart -> ball spawn -> dash & movement -> ball fall
    -> collisions -> hit routing & abilities -> particles
    -> combo / chain / zone / storm timers -> shake & banners
    -> snapshot
"""

import logging
import random
import time
from typing import Any, Optional

from .ecs import World
from .components import Position, CollisionBox, Renderable, Ball, DashState, DashPhase
from .intents import InputIntent, sanitize_intent
from .player import create_player, player_movement_system, player_center
from .dash import resolve_dash_direction, start_dash, dash_system
from .balls import HitEvent, try_spawn_ball, ball_fall_system, resolve_collisions
from .particles import (
    particle_system, particle_snapshot,
    spawn_confetti, spawn_explosion, spawn_floating_text,
)
from .combo import (
    ComboState, hit_score, register_bonus_hit, register_penalty_hit, combo_decay,
)
from .chain import propagate_chain, arc_system
from .abilities import (
    BombState, MultiplierZone, StormState,
    extend_streak, break_streak, activate_bomb,
    zone_system, check_storm_unlock, activate_storm, storm_sweep, storm_system,
)
from .feedback import FeedbackState
from .snapshot import (
    Snapshot, PlayerView, BallView, ComboView, AbilityView, ZoneView, BannerView,
)
from .constants import (
    FIELD_WIDTH, FIELD_HEIGHT, TARGET_FPS, PACING_TOLERANCE, RECOVERY_DELAY,
    PLAYER_START_OFFSET_Y, PLAYER_DASH_COLOR,
    BONUS_SCORE, PENALTY_SCORE, CHAIN_LINK_SCORE, AMBIENT_INCREMENT,
    PENALTY_SHAKE_INTENSITY, PENALTY_SHAKE_FRAMES,
    BOMB_SHAKE_INTENSITY, BOMB_SHAKE_FRAMES,
    NEON_CYAN, NEON_MAGENTA, NEON_YELLOW, NEON_RED, WHITE,
)

logger = logging.getLogger(__name__)


class FramePacer:
    """
    Lets a tick through only once enough wall time has passed, so the
    simulation rate stays fixed however fast the caller renders.
    """

    def __init__(self, target_fps: float = TARGET_FPS, tolerance: float = PACING_TOLERANCE):
        self.min_interval = tolerance / target_fps if target_fps > 0 else 0.0
        self.last_tick: Optional[float] = None

    def ready(self, now: float) -> bool:
        if self.last_tick is not None and now - self.last_tick < self.min_interval:
            return False
        self.last_tick = now
        return True


class GameSession:
    """Central game state container. Every subsystem is driven from here."""

    def __init__(self, width: float = FIELD_WIDTH, height: float = FIELD_HEIGHT,
                 seed: Optional[int] = None, target_fps: float = TARGET_FPS):
        self.width = width
        self.height = height
        self.seed = seed
        self.pacer = FramePacer(target_fps)
        self._resume_at = 0.0
        self.restart()

    def restart(self):
        """Reinitialize every piece of session state in one go."""
        self.rng = random.Random(self.seed)
        self.world = World()
        self.player_id = create_player(
            self.world,
            self.width / 2,
            self.height - PLAYER_START_OFFSET_Y,
        )

        self.frame_count = 0
        self.score = 0
        self.paused = False

        self.combo = ComboState()
        self.bomb = BombState()
        self.zone = MultiplierZone()
        self.storm = StormState()
        self.arcs = []
        self.feedback = FeedbackState()

        self._last_snapshot = self.snapshot()
        logger.info("Session started (seed=%s)", self.seed)

    # -------------------------------------------------------------------------
    # Frame entry points
    # -------------------------------------------------------------------------

    def frame(self, intent: Any = None, now: Optional[float] = None) -> Snapshot:
        """
        Paced, fault-tolerant tick for the main loop.

        Returns the previous snapshot when called too soon, or while
        backing off after a failed tick.
        """
        if now is None:
            now = time.perf_counter()
        if now < self._resume_at or not self.pacer.ready(now):
            return self._last_snapshot

        try:
            self._last_snapshot = self.tick(intent)
        except Exception:
            logger.exception("Tick %d failed, resuming in %.1fs",
                             self.frame_count, RECOVERY_DELAY)
            self._resume_at = now + RECOVERY_DELAY
        return self._last_snapshot

    def tick(self, intent: Any = None) -> Snapshot:
        """Advance the session exactly one frame and return its snapshot."""
        intent = sanitize_intent(intent)

        if intent.restart:
            self.restart()
            return self._last_snapshot

        if intent.pause:
            self.paused = not self.paused
            logger.info("Paused" if self.paused else "Resumed")

        if not self.paused:
            self._simulate(intent)
            self.frame_count += 1

        self.feedback.update_banners()

        self._last_snapshot = self.snapshot()
        return self._last_snapshot

    # -------------------------------------------------------------------------
    # Simulation
    # -------------------------------------------------------------------------

    def _simulate(self, intent: InputIntent):
        world = self.world
        rng = self.rng

        try_spawn_ball(world, rng, self.width)

        dash_system(world, self.width, self.height)
        player_movement_system(world, intent, self.width, self.height)
        direction = resolve_dash_direction(intent)
        if direction is not None:
            start_dash(world, rng, self.player_id, direction, self.feedback.shake)

        ball_fall_system(world, self.height)
        pos = world.get_component(self.player_id, Position)
        box = world.get_component(self.player_id, CollisionBox)
        for event in resolve_collisions(world, pos, box):
            self._handle_hit(event)

        center = player_center(pos, box)
        if intent.bomb and self.bomb.available:
            self.score += activate_bomb(world, rng, self.bomb, self.combo, center)
            self.feedback.shake.trigger(BOMB_SHAKE_INTENSITY, BOMB_SHAKE_FRAMES)
        if intent.storm and activate_storm(self.storm):
            self.feedback.show_banner('LIGHTNING STORM', NEON_CYAN)
        self.score += storm_sweep(world, rng, self.storm, self.combo, center)

        particle_system(world)

        combo_decay(self.combo)
        if check_storm_unlock(self.storm, self.combo):
            self.feedback.show_banner('STORM READY', NEON_MAGENTA)
        self.arcs = arc_system(self.arcs, rng)
        zone_system(self.zone, rng, self.width, self.height)
        self.arcs.extend(storm_system(self.storm, rng, self.width, self.height))

        self.feedback.shake.update(rng)

    def _handle_hit(self, event: HitEvent):
        """Route one caught ball into score, combo, streak and chain."""
        world = self.world
        rng = self.rng

        if event.is_bonus:
            factor = self.zone.factor_at(event.x, event.y)
            points = hit_score(BONUS_SCORE, self.combo, factor)
            self.score += points
            register_bonus_hit(self.combo)
            spawn_confetti(world, rng, event.x, event.y)
            spawn_floating_text(world, event.x, event.y, f'+{points}',
                                NEON_YELLOW if factor > 1 else WHITE)

            if extend_streak(self.bomb):
                self.feedback.show_banner('STREAK! BOMB READY', NEON_CYAN)

            arcs = propagate_chain(world, rng, (event.x, event.y))
            for arc in arcs:
                self.score += CHAIN_LINK_SCORE
                register_bonus_hit(self.combo, AMBIENT_INCREMENT)
                spawn_floating_text(world, arc.end[0], arc.end[1],
                                    f'+{CHAIN_LINK_SCORE}', NEON_CYAN)
            self.arcs.extend(arcs)
        else:
            self.score -= PENALTY_SCORE
            register_penalty_hit(self.combo)
            spawn_explosion(world, rng, event.x, event.y)
            spawn_floating_text(world, event.x, event.y, f'-{PENALTY_SCORE}', NEON_RED)
            self.feedback.shake.trigger(PENALTY_SHAKE_INTENSITY, PENALTY_SHAKE_FRAMES)

            if break_streak(self.bomb):
                self.feedback.show_banner('STREAK LOST', NEON_RED)

    # -------------------------------------------------------------------------
    # Snapshot
    # -------------------------------------------------------------------------

    @property
    def dash(self) -> DashState:
        return self.world.get_component(self.player_id, DashState)

    def snapshot(self) -> Snapshot:
        """Immutable view of the current frame for the renderer."""
        world = self.world
        pos = world.get_component(self.player_id, Position)
        box = world.get_component(self.player_id, CollisionBox)
        rend = world.get_component(self.player_id, Renderable)
        dash = self.dash

        cooldown_fraction = 0.0
        if dash.phase is DashPhase.COOLDOWN and dash.cooldown > 0:
            cooldown_fraction = dash.cooldown_timer.remaining / dash.cooldown

        player = PlayerView(
            x=pos.x, y=pos.y,
            width=box.width, height=box.height,
            dash_phase=dash.phase,
            dashes_available=dash.dashes_available,
            dash_cooldown_fraction=cooldown_fraction,
            color=PLAYER_DASH_COLOR if dash.phase is DashPhase.DASHING else rend.color,
        )

        balls = tuple(
            BallView(
                x=b_pos.x, y=b_pos.y,
                size=b_box.width,
                is_bonus=ball.is_bonus,
                has_lightning=ball.has_lightning,
                color=b_rend.color,
            )
            for _, b_pos, b_box, b_rend, ball in world.query(
                Position, CollisionBox, Renderable, Ball
            )
        )

        zone = None
        if self.zone.is_active():
            zone = ZoneView(
                x=self.zone.x, y=self.zone.y,
                radius=self.zone.radius,
                fraction=self.zone.fraction,
            )

        return Snapshot(
            frame=self.frame_count,
            paused=self.paused,
            score=self.score,
            player=player,
            balls=balls,
            particles=particle_snapshot(world),
            combo=ComboView(
                multiplier=self.combo.multiplier,
                timer_fraction=self.combo.timer_fraction,
                animation_scale=self.combo.animation_scale,
            ),
            abilities=AbilityView(
                bomb_available=self.bomb.available,
                streak=self.bomb.streak,
                storm_unlocked=self.storm.unlocked,
                storm_active=self.storm.is_active(),
                storm_fraction=self.storm.fraction,
            ),
            shake_offset=self.feedback.shake.offset,
            zone=zone,
            lightning=tuple(arc.points for arc in self.arcs),
            banners=tuple(
                BannerView(text=b.text, alpha=b.alpha, color=b.color)
                for b in self.feedback.banners
            ),
        )
