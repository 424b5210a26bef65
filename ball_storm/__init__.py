"""BALL_STORM - falling-ball arcade simulation core."""

from .intents import InputIntent
from .session import GameSession, FramePacer
from .snapshot import Snapshot

__version__ = '0.1.0'

__all__ = ['GameSession', 'FramePacer', 'InputIntent', 'Snapshot']
