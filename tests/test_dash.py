"""Tests for the dash state machine and direction resolution."""
import random

import pytest

from ball_storm.ecs import World
from ball_storm.components import Position, DashState, DashPhase, ParticleTag
from ball_storm.constants import DASH_DURATION, DASH_COOLDOWN, DASH_SPEED, MAX_DASHES
from ball_storm.dash import resolve_dash_direction, start_dash, dash_system
from ball_storm.feedback import ScreenShake
from ball_storm.intents import InputIntent
from ball_storm.player import create_player


@pytest.fixture
def setup():
    world = World()
    eid = create_player(world, 400, 300)
    return world, eid, random.Random(3)


def _run_dash(world, eid):
    for _ in range(DASH_DURATION):
        dash_system(world, 800, 600)


class TestDirection:
    """Which way a trigger points."""

    def test_no_trigger(self):
        assert resolve_dash_direction(InputIntent(move_x=1.0)) is None

    def test_trigger_side_without_stick(self):
        assert resolve_dash_direction(InputIntent(dash_right=True)) == (1.0, 0.0)
        assert resolve_dash_direction(InputIntent(dash_left=True)) == (-1.0, 0.0)

    def test_stick_snaps_to_signs(self):
        intent = InputIntent(dash_left=True, move_x=0.4, move_y=-0.9)
        assert resolve_dash_direction(intent) == (1.0, -1.0)

    def test_deadzone(self):
        intent = InputIntent(dash_right=True, move_x=0.1, move_y=-0.15)
        assert resolve_dash_direction(intent) == (1.0, 0.0)

    def test_explicit_direction_alone_triggers(self):
        intent = InputIntent(dash_direction=(-1.0, 1.0))
        assert intent.dash_triggered
        assert resolve_dash_direction(intent) == (-1.0, 1.0)

    def test_explicit_direction_wins(self):
        intent = InputIntent(dash_right=True, dash_direction=(0.0, 1.0), move_x=-1.0)
        assert resolve_dash_direction(intent) == (0.0, 1.0)


class TestStateMachine:
    """IDLE -> DASHING -> IDLE/COOLDOWN -> IDLE."""

    def test_dash_right_from_idle(self, setup):
        world, eid, rng = setup
        assert start_dash(world, rng, eid, (1.0, 0.0))
        dash = world.get_component(eid, DashState)
        assert dash.phase is DashPhase.DASHING
        assert dash.dashes_available == MAX_DASHES - 1
        assert (dash.direction_x, dash.direction_y) == (1.0, 0.0)

    def test_diagonal_is_normalized(self, setup):
        world, eid, rng = setup
        start_dash(world, rng, eid, (1.0, 1.0))
        dash = world.get_component(eid, DashState)
        assert dash.direction_x == pytest.approx(0.7071, abs=1e-4)
        assert dash.direction_y == pytest.approx(0.7071, abs=1e-4)

    def test_start_emits_burst_and_shake(self, setup):
        world, eid, rng = setup
        shake = ScreenShake()
        start_dash(world, rng, eid, (1.0, 0.0), shake)
        assert world.count_with(ParticleTag) > 0
        assert shake.frames_remaining > 0

    def test_cannot_dash_while_dashing(self, setup):
        world, eid, rng = setup
        start_dash(world, rng, eid, (1.0, 0.0))
        assert not start_dash(world, rng, eid, (-1.0, 0.0))
        assert world.get_component(eid, DashState).dashes_available == MAX_DASHES - 1

    def test_moves_at_dash_speed(self, setup):
        world, eid, rng = setup
        start_dash(world, rng, eid, (1.0, 0.0))
        dash_system(world, 800, 600)
        assert world.get_component(eid, Position).x == 400 + DASH_SPEED

    def test_charge_left_returns_to_idle(self, setup):
        world, eid, rng = setup
        start_dash(world, rng, eid, (1.0, 0.0))
        _run_dash(world, eid)
        dash = world.get_component(eid, DashState)
        assert dash.phase is DashPhase.IDLE
        assert dash.dashes_available == 1

    def test_last_charge_enters_cooldown_then_refills(self, setup):
        world, eid, rng = setup
        start_dash(world, rng, eid, (1.0, 0.0))
        _run_dash(world, eid)
        start_dash(world, rng, eid, (-1.0, 0.0))
        _run_dash(world, eid)
        dash = world.get_component(eid, DashState)
        assert dash.phase is DashPhase.COOLDOWN
        assert dash.dashes_available == 0
        assert not start_dash(world, rng, eid, (1.0, 0.0))

        for _ in range(DASH_COOLDOWN):
            dash_system(world, 800, 600)
        assert dash.phase is DashPhase.IDLE
        assert dash.dashes_available == MAX_DASHES

    def test_charges_stay_in_range(self, setup):
        world, eid, rng = setup
        dash = world.get_component(eid, DashState)
        for _ in range(200):
            start_dash(world, rng, eid, (0.0, 1.0))
            dash_system(world, 800, 600)
            assert 0 <= dash.dashes_available <= MAX_DASHES


class TestWrap:
    """Dashing through an edge re-enters from the opposite side."""

    def test_wraps_right_edge(self, setup):
        world, eid, rng = setup
        pos = world.get_component(eid, Position)
        pos.x = 780
        start_dash(world, rng, eid, (1.0, 0.0))
        dash_system(world, 800, 600)
        assert pos.x == pytest.approx(795 - 800)

    def test_wraps_top_edge(self, setup):
        world, eid, rng = setup
        pos = world.get_component(eid, Position)
        pos.y = -10
        start_dash(world, rng, eid, (0.0, -1.0))
        dash_system(world, 800, 600)
        assert pos.y == pytest.approx(-25 + 600)
