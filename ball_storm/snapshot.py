"""
Render Snapshot
================
Immutable per-frame description of everything a renderer needs.
The core says what to draw; drawing is someone else's job.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from .components import DashPhase, ParticleKind


Point = Tuple[float, float]


@dataclass(frozen=True)
class PlayerView:
    x: float
    y: float
    width: float
    height: float
    dash_phase: DashPhase
    dashes_available: int
    dash_cooldown_fraction: float  # 1.0 just started, 0.0 ready
    color: int


@dataclass(frozen=True)
class BallView:
    x: float
    y: float
    size: float
    is_bonus: bool
    has_lightning: bool
    color: int


@dataclass(frozen=True)
class ParticleView:
    """One particle. Only the fields its kind uses are meaningful."""
    kind: ParticleKind
    x: float
    y: float
    size: float
    color: int
    alpha: float = 1.0
    rotation: float = 0.0
    text: str = ''


@dataclass(frozen=True)
class ComboView:
    multiplier: float
    timer_fraction: float
    animation_scale: float


@dataclass(frozen=True)
class AbilityView:
    bomb_available: bool
    streak: int
    storm_unlocked: bool
    storm_active: bool
    storm_fraction: float


@dataclass(frozen=True)
class ZoneView:
    x: float
    y: float
    radius: float
    fraction: float  # Remaining lifetime fraction


@dataclass(frozen=True)
class BannerView:
    text: str
    alpha: float
    color: int


@dataclass(frozen=True)
class Snapshot:
    """Everything rendered for one frame."""
    frame: int
    paused: bool
    score: int
    player: PlayerView
    balls: Tuple[BallView, ...]
    particles: Mapping[ParticleKind, Tuple[ParticleView, ...]]
    combo: ComboView
    abilities: AbilityView
    shake_offset: Tuple[int, int] = (0, 0)
    zone: Optional[ZoneView] = None
    lightning: Tuple[Tuple[Point, ...], ...] = field(default_factory=tuple)
    banners: Tuple[BannerView, ...] = field(default_factory=tuple)

    def __post_init__(self):
        # Freeze the per-kind groups along with the rest of the frame
        object.__setattr__(self, 'particles', MappingProxyType(dict(self.particles)))

    def particle_count(self) -> int:
        return sum(len(group) for group in self.particles.values())
