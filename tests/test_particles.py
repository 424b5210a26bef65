"""Tests for particle kinds, update rules and snapshots."""
import math
import random

import pytest

from ball_storm.ecs import World
from ball_storm.components import (
    Position, Velocity, Lifetime, ParticleKind, ParticleTag, Spin, TrailMarker,
)
from ball_storm.particles import (
    spawn_particle, spawn_explosion, spawn_confetti, spawn_gather,
    spawn_dash_burst, spawn_trail, spawn_floating_text,
    particle_system, particle_snapshot, enforce_particle_cap,
)
from ball_storm.constants import (
    EXPLOSION_COUNT, CONFETTI_COUNT, GATHER_COUNT, DASH_BURST_COUNT,
    CONFETTI_GRAVITY, GATHER_MAX_SPEED,
)


@pytest.fixture
def world():
    return World()


@pytest.fixture
def rng():
    return random.Random(7)


class TestDecay:
    """Linear motion and expiry."""

    def test_moves_by_velocity(self, world):
        eid = spawn_particle(world, ParticleKind.DECAY, 10, 10, vx=2, vy=-1, lifetime=5)
        particle_system(world)
        pos = world.get_component(eid, Position)
        assert (pos.x, pos.y) == (12, 9)

    def test_removed_in_the_pass_it_expires(self, world):
        eid = spawn_particle(world, ParticleKind.DECAY, 0, 0, lifetime=2)
        particle_system(world)
        assert world.get_component(eid, Position) is not None
        particle_system(world)
        assert world.get_component(eid, Position) is None
        assert world.get_component(eid, Lifetime) is None

    def test_no_particle_survives_with_nonpositive_life(self, world, rng):
        spawn_explosion(world, rng, 100, 100)
        for _ in range(60):
            particle_system(world)
            for _, life in world.query(Lifetime):
                assert life.frames_remaining > 0


class TestGather:
    """Homing toward a target."""

    def test_arrival_removes_regardless_of_life(self, world):
        eid = spawn_particle(world, ParticleKind.GATHER, 100, 100,
                             vx=1, vy=0, lifetime=500, target=(105, 100))
        particle_system(world)
        assert world.get_component(eid, Position) is None

    def test_velocity_points_at_target_and_accelerates(self, world):
        eid = spawn_particle(world, ParticleKind.GATHER, 0, 0,
                             vx=0, vy=4, lifetime=50, target=(300, 0))
        particle_system(world)
        vel = world.get_component(eid, Velocity)
        assert vel.y == pytest.approx(0.0)
        assert vel.x == pytest.approx(4 * 1.05)

    def test_slow_particle_only_accelerates(self, world):
        """No minimum speed: a slow particle grows by the factor alone."""
        eid = spawn_particle(world, ParticleKind.GATHER, 0, 0,
                             vx=0.5, vy=0, lifetime=50, target=(300, 0))
        particle_system(world)
        vel = world.get_component(eid, Velocity)
        assert vel.x == pytest.approx(0.5 * 1.05)
        assert world.get_component(eid, Position).x == pytest.approx(0.5 * 1.05)

    def test_speed_capped(self, world):
        eid = spawn_particle(world, ParticleKind.GATHER, 0, 0,
                             vx=9.9, vy=0, lifetime=50, target=(500, 0))
        for _ in range(5):
            particle_system(world)
            vel = world.get_component(eid, Velocity)
            assert math.hypot(vel.x, vel.y) <= GATHER_MAX_SPEED + 1e-9

    def test_gather_effect_converges(self, world, rng):
        spawn_gather(world, rng, 0, 0, 200, 200)
        assert world.count_with(ParticleTag) == GATHER_COUNT
        for _ in range(60):
            particle_system(world)
        assert world.count_with(ParticleTag) == 0


class TestConfetti:
    """Gravity and spin."""

    def test_gravity_and_rotation(self, world):
        eid = spawn_particle(world, ParticleKind.CONFETTI, 0, 0, vx=0, vy=-3,
                             lifetime=20, rotation=10, spin=4)
        particle_system(world)
        vel = world.get_component(eid, Velocity)
        spin = world.get_component(eid, Spin)
        pos = world.get_component(eid, Position)
        assert pos.y == -3
        assert vel.y == pytest.approx(-3 + CONFETTI_GRAVITY)
        assert spin.rotation == pytest.approx(14)

    def test_recipe_count(self, world, rng):
        spawn_confetti(world, rng, 50, 50)
        assert world.count_with(Spin) == CONFETTI_COUNT


class TestTrailAndText:
    """Opacity-driven kinds."""

    def test_trail_is_stationary_and_fades(self, world):
        eid = spawn_trail(world, 40, 40, 16)
        particle_system(world)
        pos = world.get_component(eid, Position)
        marker = world.get_component(eid, TrailMarker)
        assert (pos.x, pos.y) == (40, 40)
        assert marker.opacity == pytest.approx(0.9)

    def test_floating_text_rises(self, world):
        eid = spawn_floating_text(world, 10, 100, '+5')
        particle_system(world)
        particle_system(world)
        assert world.get_component(eid, Position).y == pytest.approx(98)
        views = particle_snapshot(world)[ParticleKind.TEXT]
        assert views[0].text == '+5'
        assert views[0].alpha == pytest.approx(58 / 60)


class TestSnapshotAndCap:
    """Grouping by kind and the live-particle cap."""

    def test_snapshot_groups_every_kind(self, world, rng):
        spawn_explosion(world, rng, 0, 0, count=3)
        spawn_confetti(world, rng, 0, 0, count=2)
        spawn_trail(world, 0, 0, 8)
        snap = particle_snapshot(world)
        assert set(snap) == set(ParticleKind)
        assert len(snap[ParticleKind.DECAY]) == 3
        assert len(snap[ParticleKind.CONFETTI]) == 2
        assert len(snap[ParticleKind.TRAIL]) == 1
        assert snap[ParticleKind.GATHER] == ()

    def test_dash_burst_flies_backwards(self, world, rng):
        spawn_dash_burst(world, rng, 0, 0, 1.0, 0.0)
        vels = [vel for _, vel, _ in world.query(Velocity, ParticleTag)]
        assert len(vels) == DASH_BURST_COUNT
        assert all(vel.x < 0 and vel.y == 0 for vel in vels)

    def test_cap_evicts_oldest(self, world):
        first = spawn_particle(world, ParticleKind.DECAY, 0, 0, lifetime=50)
        for _ in range(9):
            spawn_particle(world, ParticleKind.DECAY, 0, 0, lifetime=50)
        dropped = enforce_particle_cap(world, limit=5)
        assert dropped == 5
        assert world.get_component(first, Position) is None
        assert world.count_with(ParticleTag) == 5

    def test_update_applies_cap(self, world, rng):
        spawn_explosion(world, rng, 0, 0, count=EXPLOSION_COUNT)
        particle_system(world, limit=10)
        assert world.count_with(ParticleTag) <= 10
