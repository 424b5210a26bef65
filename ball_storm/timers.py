"""
Countdown Timers
=================
The one countdown primitive behind every timed mechanic.
"""

from dataclasses import dataclass


@dataclass
class Countdown:
    """Frame counter that runs down to zero and stays there."""
    remaining: int = 0

    def start(self, duration: int) -> None:
        """Set the counter to `duration` frames."""
        self.remaining = max(0, int(duration))

    def tick(self) -> None:
        """Advance one frame, clamped at zero."""
        if self.remaining > 0:
            self.remaining -= 1

    def is_active(self) -> bool:
        return self.remaining > 0

    def clear(self) -> None:
        self.remaining = 0
