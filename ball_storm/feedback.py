"""
Screen Feedback
================
Screen shake and transient banners. Both keep animating while the
game is paused so a banner never freezes half-faded.
"""

import random
from dataclasses import dataclass, field
from typing import List, Tuple

from .constants import BANNER_FADE_IN, BANNER_HOLD, BANNER_FADE_OUT, WHITE


@dataclass
class ScreenShake:
    """
    Screen shake state.

    While frames remain, each update rolls a fresh offset within the
    intensity; the intensity itself eases off as the shake runs out.
    """
    intensity: int = 0
    frames_remaining: int = 0
    offset_x: int = 0
    offset_y: int = 0

    def trigger(self, intensity: int = 2, frames: int = 3):
        """Start or extend a shake. Never weakens one already running."""
        self.intensity = max(self.intensity, intensity)
        self.frames_remaining = max(self.frames_remaining, frames)

    def update(self, rng: random.Random):
        """Tick the shake timer and roll this frame's offset."""
        if self.frames_remaining > 0:
            self.offset_x = rng.randint(-self.intensity, self.intensity)
            self.offset_y = rng.randint(-max(1, self.intensity // 2),
                                        max(1, self.intensity // 2))
            self.frames_remaining -= 1
            if self.frames_remaining < self.intensity:
                self.intensity = self.frames_remaining
        else:
            self.intensity = 0
            self.offset_x = 0
            self.offset_y = 0

    @property
    def offset(self) -> Tuple[int, int]:
        return self.offset_x, self.offset_y


@dataclass
class Banner:
    """Transient headline: fade in, hold, fade out."""
    text: str
    color: int = WHITE
    fade_in: int = BANNER_FADE_IN
    hold: int = BANNER_HOLD
    fade_out: int = BANNER_FADE_OUT
    age: int = 0

    @property
    def duration(self) -> int:
        return self.fade_in + self.hold + self.fade_out

    @property
    def finished(self) -> bool:
        return self.age >= self.duration

    @property
    def alpha(self) -> float:
        if self.age < self.fade_in:
            return (self.age + 1) / self.fade_in
        if self.age < self.fade_in + self.hold:
            return 1.0
        remaining = self.duration - self.age
        if remaining <= 0:
            return 0.0
        return remaining / self.fade_out


@dataclass
class FeedbackState:
    """Everything purely cosmetic that still advances per frame."""
    shake: ScreenShake = field(default_factory=ScreenShake)
    banners: List[Banner] = field(default_factory=list)

    def show_banner(self, text: str, color: int = WHITE):
        """Show a banner, restarting it if the same text is already up."""
        self.banners = [b for b in self.banners if b.text != text]
        self.banners.append(Banner(text=text, color=color))

    def update_banners(self):
        for banner in self.banners:
            banner.age += 1
        self.banners = [b for b in self.banners if not b.finished]
