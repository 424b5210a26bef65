"""
Input Intents
==============
Normalized, per-tick input consumed by the simulation.

Device polling lives outside the core. Whatever produces an intent,
the session only ever sees sanitized values: movement in [-1, 1],
booleans for trigger edges, and an optional explicit dash direction.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple
import math


@dataclass(frozen=True)
class InputIntent:
    """One tick worth of player intent. Triggers are edge events."""
    move_x: float = 0.0
    move_y: float = 0.0
    dash_left: bool = False
    dash_right: bool = False
    dash_direction: Optional[Tuple[float, float]] = None
    bomb: bool = False
    storm: bool = False
    pause: bool = False
    restart: bool = False

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> 'InputIntent':
        """Build an intent from a loose mapping. Missing or bad fields become no-ops."""
        if not data:
            return cls()
        getter = data.get
        return cls(
            move_x=_axis(getter('move_x')),
            move_y=_axis(getter('move_y')),
            dash_left=_flag(getter('dash_left')),
            dash_right=_flag(getter('dash_right')),
            dash_direction=_direction(getter('dash_direction')),
            bomb=_flag(getter('bomb')),
            storm=_flag(getter('storm')),
            pause=_flag(getter('pause')),
            restart=_flag(getter('restart')),
        )

    @property
    def dash_triggered(self) -> bool:
        return self.dash_left or self.dash_right or self.dash_direction is not None


def sanitize_intent(intent: Any) -> InputIntent:
    """Return a clean InputIntent for anything the caller hands over."""
    if intent is None:
        return InputIntent()
    if isinstance(intent, Mapping):
        return InputIntent.from_mapping(intent)
    return InputIntent(
        move_x=_axis(getattr(intent, 'move_x', 0.0)),
        move_y=_axis(getattr(intent, 'move_y', 0.0)),
        dash_left=_flag(getattr(intent, 'dash_left', False)),
        dash_right=_flag(getattr(intent, 'dash_right', False)),
        dash_direction=_direction(getattr(intent, 'dash_direction', None)),
        bomb=_flag(getattr(intent, 'bomb', False)),
        storm=_flag(getattr(intent, 'storm', False)),
        pause=_flag(getattr(intent, 'pause', False)),
        restart=_flag(getattr(intent, 'restart', False)),
    )


def _axis(value: Any) -> float:
    """Coerce to a finite float in [-1, 1]; anything else is 0."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return max(-1.0, min(1.0, number))


def _flag(value: Any) -> bool:
    if isinstance(value, float) and math.isnan(value):
        return False
    return bool(value)


def _direction(value: Any) -> Optional[Tuple[float, float]]:
    """An explicit dash direction, or None when absent or zero."""
    if value is None:
        return None
    try:
        dx, dy = value
    except (TypeError, ValueError):
        return None
    dx, dy = _axis(dx), _axis(dy)
    if dx == 0 and dy == 0:
        return None
    return dx, dy
