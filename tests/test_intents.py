"""Tests for input intent sanitizing."""
import math

from ball_storm.intents import InputIntent, sanitize_intent


class TestFromMapping:
    """Loose mappings become clean intents."""

    def test_empty_and_none(self):
        assert InputIntent.from_mapping(None) == InputIntent()
        assert InputIntent.from_mapping({}) == InputIntent()

    def test_missing_fields_default(self):
        intent = InputIntent.from_mapping({'move_x': 0.5})
        assert intent.move_x == 0.5
        assert intent.move_y == 0.0
        assert not intent.dash_left

    def test_nan_and_inf_become_zero(self):
        intent = InputIntent.from_mapping({'move_x': math.nan, 'move_y': math.inf})
        assert intent.move_x == 0.0
        assert intent.move_y == 0.0

    def test_non_numeric_becomes_zero(self):
        intent = InputIntent.from_mapping({'move_x': 'left', 'move_y': None})
        assert intent.move_x == 0.0
        assert intent.move_y == 0.0

    def test_axes_are_clamped(self):
        intent = InputIntent.from_mapping({'move_x': 3.0, 'move_y': -7})
        assert intent.move_x == 1.0
        assert intent.move_y == -1.0

    def test_nan_flag_is_false(self):
        assert not InputIntent.from_mapping({'bomb': math.nan}).bomb

    def test_dash_direction(self):
        assert InputIntent.from_mapping({'dash_direction': (1, -1)}).dash_direction == (1.0, -1.0)
        assert InputIntent.from_mapping({'dash_direction': (0, 0)}).dash_direction is None
        assert InputIntent.from_mapping({'dash_direction': 'up'}).dash_direction is None
        assert InputIntent.from_mapping({'dash_direction': (math.nan, 0)}).dash_direction is None


class TestSanitize:
    """sanitize_intent accepts anything."""

    def test_none(self):
        assert sanitize_intent(None) == InputIntent()

    def test_dict(self):
        assert sanitize_intent({'pause': True}).pause

    def test_object_with_bad_fields(self):
        class Loose:
            move_x = math.nan
            dash_right = 1

        intent = sanitize_intent(Loose())
        assert intent.move_x == 0.0
        assert intent.dash_right is True
        assert intent.dash_triggered

    def test_clean_intent_round_trips(self):
        intent = InputIntent(move_x=-0.5, bomb=True)
        assert sanitize_intent(intent) == intent
