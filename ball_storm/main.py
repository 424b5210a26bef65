#!/usr/bin/env python3
"""
BALL_STORM - Terminal Ball Catcher
===================================
Catch the blue balls, dodge the red ones, chain lightning between
the blues and cash in your streaks.

Controls:
    ARROWS/WASD - Move
    Q / E       - Dash left / right (dashes along the held direction)
    B           - Bomb (after a 5 blue streak)
    F           - Lightning storm (after a maxed combo)
    P / ESC     - Pause
    R           - Restart
    TAB         - Toggle FPS display
    X           - Quit
"""

import argparse
import logging
import sys
import time
from typing import Optional

try:
    from blessed import Terminal
except ImportError:
    print("ERROR: 'blessed' library required. Install with: pip install blessed")
    sys.exit(1)

from .engine import GameRenderer
from .intents import InputIntent
from .session import GameSession
from .constants import TARGET_FPS

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

MIN_WIDTH = 60
MIN_HEIGHT = 20

MOVE_KEYS = {
    'w': (0, -1), 's': (0, 1), 'a': (-1, 0), 'd': (1, 0),
    'KEY_UP': (0, -1), 'KEY_DOWN': (0, 1), 'KEY_LEFT': (-1, 0), 'KEY_RIGHT': (1, 0),
}


class InputHandler:
    """
    Turns terminal key presses into InputIntents.

    Terminals report key-down repeats but no key-up, so movement keys
    stay "held" for a few frames after each press. Trigger keys are
    latched until the session actually ticks and consumes them.
    """

    def __init__(self, hold_duration: int = 8):
        self.keys_held: dict = {}  # key -> frames remaining
        self.hold_duration = hold_duration

        self._dash_left = False
        self._dash_right = False
        self._bomb = False
        self._storm = False
        self._pause = False
        self._restart = False
        self.quit_requested = False
        self.toggle_fps = False

    def process_key(self, key) -> None:
        """Process a single key press from blessed's inkey()."""
        if key is None or not key:
            return

        name = key.name if key.is_sequence else key.lower()

        if name in MOVE_KEYS:
            self.keys_held[name] = self.hold_duration
        elif name == 'q':
            self._dash_left = True
        elif name == 'e':
            self._dash_right = True
        elif name == 'b':
            self._bomb = True
        elif name == 'f':
            self._storm = True
        elif name in ('p', 'KEY_ESCAPE'):
            self._pause = True
        elif name == 'r':
            self._restart = True
        elif name == 'KEY_TAB':
            self.toggle_fps = True
        elif name == 'x':
            self.quit_requested = True

    def update(self) -> None:
        """Update key hold timers (call once per tick)."""
        expired = []
        for key, frames in self.keys_held.items():
            self.keys_held[key] = frames - 1
            if self.keys_held[key] <= 0:
                expired.append(key)
        for key in expired:
            del self.keys_held[key]

    def get_movement_vector(self) -> tuple:
        """Current movement direction from held keys, each axis in [-1, 1]."""
        dx = sum(MOVE_KEYS[key][0] for key in self.keys_held)
        dy = sum(MOVE_KEYS[key][1] for key in self.keys_held)
        return max(-1, min(1, dx)), max(-1, min(1, dy))

    def peek_intent(self) -> InputIntent:
        """Intent for the next tick, without consuming triggers."""
        dx, dy = self.get_movement_vector()
        return InputIntent(
            move_x=float(dx),
            move_y=float(dy),
            dash_left=self._dash_left,
            dash_right=self._dash_right,
            bomb=self._bomb,
            storm=self._storm,
            pause=self._pause,
            restart=self._restart,
        )

    def consume_triggers(self) -> None:
        """Clear latched triggers once a tick has used them."""
        self._dash_left = False
        self._dash_right = False
        self._bomb = False
        self._storm = False
        self._pause = False
        self._restart = False


def drain_input(term: Terminal, handler: InputHandler) -> None:
    """Drain all pending input from the terminal."""
    key = term.inkey(timeout=0)
    while key:
        handler.process_key(key)
        key = term.inkey(timeout=0)


# =============================================================================
# MAIN LOOP
# =============================================================================

def parse_args(argv: Optional[list] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='BALL_STORM terminal arcade')
    parser.add_argument('--seed', type=int, default=None,
                        help='Random seed for a reproducible session')
    parser.add_argument('--fps', type=int, default=TARGET_FPS,
                        help='Simulation ticks per second')
    parser.add_argument('--log-file', default='ball_storm.log',
                        help='Where to write the log (the screen is busy)')
    parser.add_argument('--log-level', default='INFO',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'])
    return parser.parse_args(argv)


def main(argv: Optional[list] = None):
    """Entry point. Sets up terminal and runs the game loop."""
    args = parse_args(argv)
    logging.basicConfig(
        filename=args.log_file,
        level=getattr(logging, args.log_level),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    term = Terminal()
    if term.width < MIN_WIDTH or term.height < MIN_HEIGHT:
        print(
            f'Terminal too small: {term.width}x{term.height}. '
            f'Minimum: {MIN_WIDTH}x{MIN_HEIGHT}'
        )
        sys.exit(1)

    frame_time = 1.0 / max(1, args.fps)

    with term.fullscreen(), term.cbreak(), term.hidden_cursor():
        session = GameSession(seed=args.seed, target_fps=args.fps)
        renderer = GameRenderer(term)
        handler = InputHandler()
        snapshot = session.snapshot()

        fps_timer = 0.0
        fps_frame_count = 0
        last_time = time.perf_counter()

        print(term.home + term.clear, end='', flush=True)

        while not handler.quit_requested:
            now = time.perf_counter()
            fps_timer += now - last_time
            last_time = now

            drain_input(term, handler)
            if handler.toggle_fps:
                renderer.show_fps = not renderer.show_fps
                handler.toggle_fps = False

            previous = snapshot
            snapshot = session.frame(handler.peek_intent(), now)
            if snapshot is not previous:
                handler.consume_triggers()
                handler.update()
                fps_frame_count += 1

            print(renderer.render(snapshot), end='', flush=True)

            if fps_timer >= 0.5:
                renderer.current_fps = fps_frame_count / fps_timer
                fps_frame_count = 0
                fps_timer = 0.0

            elapsed = time.perf_counter() - now
            sleep_time = frame_time - elapsed
            if sleep_time > 0.001:
                time.sleep(sleep_time * 0.9)

        print(term.normal, end='', flush=True)

    logger.info("Quit with score %d", session.score)


if __name__ == '__main__':
    main()
