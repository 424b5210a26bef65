#!/usr/bin/env python3
"""
BALL_STORM Launcher
====================
Run this script to start the game.
"""

from ball_storm.main import main

if __name__ == "__main__":
    main()
