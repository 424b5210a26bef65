"""
Component Definitions
======================
All components are plain dataclasses with no behavior.
"""

from dataclasses import dataclass, field
from enum import Enum

from .timers import Countdown
from .constants import (
    DASH_SPEED, DASH_DURATION, DASH_COOLDOWN, MAX_DASHES, PLAYER_SPEED,
    GATHER_ACCELERATION, GATHER_MAX_SPEED, FLOATING_TEXT_LIFE, FLOATING_TEXT_RISE,
    WHITE,
)


# =============================================================================
# PHYSICS COMPONENTS
# =============================================================================

@dataclass
class Position:
    """World position in field units."""
    x: float = 0.0
    y: float = 0.0


@dataclass
class Velocity:
    """Movement velocity in units per frame."""
    x: float = 0.0
    y: float = 0.0


@dataclass
class CollisionBox:
    """Axis-aligned bounding box anchored at Position (top-left corner)."""
    width: float = 1.0
    height: float = 1.0


@dataclass
class Gravity:
    """Gravity applied to velocity."""
    strength: float = 0.15


# =============================================================================
# RENDERING COMPONENTS
# =============================================================================

@dataclass
class Renderable:
    """Visual representation of an entity."""
    color: int = WHITE  # ANSI 256 color
    size: float = 2.0
    visible: bool = True


@dataclass
class Lifetime:
    """Entity lifetime in frames."""
    frames_remaining: float = 30
    total: float = 30


# =============================================================================
# PARTICLE KINDS
# =============================================================================

class ParticleKind(Enum):
    """Particle variants. Each kind carries its own extra component."""
    DECAY = 'decay'
    CONFETTI = 'confetti'
    TRAIL = 'trail'
    TEXT = 'text'
    GATHER = 'gather'


@dataclass
class ParticleTag:
    """Marks a particle entity and names its kind."""
    kind: ParticleKind = ParticleKind.DECAY


@dataclass
class Spin:
    """Confetti rotation in degrees."""
    rotation: float = 0.0
    speed: float = 0.0


@dataclass
class GatherTarget:
    """Point a gather particle homes in on."""
    x: float = 0.0
    y: float = 0.0
    acceleration: float = GATHER_ACCELERATION
    max_speed: float = GATHER_MAX_SPEED


@dataclass
class TrailMarker:
    """Fading marker left behind a moving player."""
    opacity: float = 1.0


@dataclass
class FloatingText:
    """Rising score text."""
    text: str = ''
    rise: float = FLOATING_TEXT_RISE
    base_life: int = FLOATING_TEXT_LIFE


# =============================================================================
# BALL COMPONENTS
# =============================================================================

@dataclass
class Ball:
    """A falling ball. Bonus balls are blue, penalty balls red."""
    is_bonus: bool = False
    speed: float = 2.0
    has_lightning: bool = False


# =============================================================================
# PLAYER COMPONENTS
# =============================================================================

class DashPhase(Enum):
    """Dash state machine states."""
    IDLE = 'idle'
    DASHING = 'dashing'
    COOLDOWN = 'cooldown'


@dataclass
class PlayerControlled:
    """Normal movement settings for the player."""
    speed: float = PLAYER_SPEED
    trail_timer: Countdown = field(default_factory=Countdown)
    moving: bool = False


@dataclass
class DashState:
    """Dash ability state."""
    phase: DashPhase = DashPhase.IDLE
    speed: float = DASH_SPEED
    duration: int = DASH_DURATION
    cooldown: int = DASH_COOLDOWN
    max_dashes: int = MAX_DASHES
    dashes_available: int = MAX_DASHES
    direction_x: float = 0.0
    direction_y: float = 0.0
    timer: Countdown = field(default_factory=Countdown)
    cooldown_timer: Countdown = field(default_factory=Countdown)
