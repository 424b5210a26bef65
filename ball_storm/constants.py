"""
Tuning Constants
=================
Field geometry, timings and scores shared by every subsystem.
All durations are in frames at TARGET_FPS.
"""

# =============================================================================
# FIELD & PACING
# =============================================================================

FIELD_WIDTH = 800
FIELD_HEIGHT = 600

TARGET_FPS = 60
PACING_TOLERANCE = 0.9  # Fraction of a frame that must pass between ticks
RECOVERY_DELAY = 1.0  # Seconds to hold off after a failed tick


# =============================================================================
# PLAYER & DASH
# =============================================================================

PLAYER_SIZE = 32
PLAYER_SPEED = 5.0
PLAYER_START_OFFSET_Y = 50  # Spawn distance from the bottom edge

DASH_SPEED = 15.0
DASH_DURATION = 10
DASH_COOLDOWN = 30
MAX_DASHES = 2
DASH_BURST_COUNT = 20
DASH_DEADZONE = 0.15
DASH_SHAKE_INTENSITY = 3
DASH_SHAKE_FRAMES = 6

TRAIL_INTERVAL = 3  # ~50 ms between movement trail markers
TRAIL_LIFE = 10


# =============================================================================
# BALLS
# =============================================================================

BALL_SIZE = 20
BALL_SPAWN_CHANCE = 0.02
BALL_BONUS_CHANCE = 0.3
BALL_SPEED_MIN = 2.0
BALL_SPEED_MAX = 5.0


# =============================================================================
# SCORING & COMBO
# =============================================================================

BONUS_SCORE = 5
PENALTY_SCORE = 10
BOMB_PENALTY_SCORE = 5  # Half a normal penalty
BOMB_BONUS_SCORE = 3
STORM_BONUS_SCORE = 3
STORM_PENALTY_SCORE = 1
CHAIN_LINK_SCORE = 2

MAX_MULTIPLIER = 8.0
DRAIN_THRESHOLD = MAX_MULTIPLIER / 2
COMBO_TIME_LIMIT = 120
COMBO_INCREMENT = 0.5
AMBIENT_INCREMENT = 0.2
PENALTY_STEP = 1.0
DRAIN_RATE = 0.015
COMBO_POP_SCALE = 1.5
COMBO_SCALE_RELAX = 0.9


# =============================================================================
# ABILITIES
# =============================================================================

BOMB_STREAK = 5

CHAIN_RADIUS = 150.0
CHAIN_SEGMENTS = 8
CHAIN_JITTER = 12.0
CHAIN_DURATION = 20

ZONE_SPAWN_CHANCE = 0.005
ZONE_RADIUS = 80.0
ZONE_DURATION = 300
ZONE_FACTOR = 2

STORM_DURATION = 300
STORM_BOLT_INTERVAL = 15
STORM_BOLT_LIFE = 10


# =============================================================================
# PARTICLES
# =============================================================================

MAX_PARTICLES = 1500

EXPLOSION_COUNT = 30
CONFETTI_COUNT = 40
GATHER_COUNT = 15
CONFETTI_GRAVITY = 0.15
GATHER_ACCELERATION = 1.05
GATHER_MAX_SPEED = 10.0
GATHER_ARRIVAL_RADIUS = 10.0
GATHER_FADE_BASE = 60
FLOATING_TEXT_LIFE = 60
FLOATING_TEXT_RISE = 1.0


# =============================================================================
# SCREEN FEEDBACK
# =============================================================================

PENALTY_SHAKE_INTENSITY = 5
PENALTY_SHAKE_FRAMES = 10
BOMB_SHAKE_INTENSITY = 8
BOMB_SHAKE_FRAMES = 20

BANNER_FADE_IN = 10
BANNER_HOLD = 40
BANNER_FADE_OUT = 20


# =============================================================================
# PALETTE (ANSI 256)
# =============================================================================

NEON_CYAN = 51
NEON_BLUE = 33
NEON_MAGENTA = 201
NEON_YELLOW = 226
NEON_GREEN = 46
NEON_RED = 196
NEON_ORANGE = 208
NEON_PURPLE = 135
NEON_TEAL = 43

GRAY_LIGHT = 252
GRAY_MED = 245
GRAY_DARK = 238

WHITE = 255

PLAYER_COLOR = NEON_BLUE
PLAYER_DASH_COLOR = NEON_GREEN
BONUS_COLOR = NEON_BLUE
PENALTY_COLOR = NEON_RED
CONFETTI_COLORS = [NEON_BLUE, NEON_GREEN, NEON_YELLOW, NEON_RED, NEON_PURPLE, NEON_TEAL]
EXPLOSION_COLORS = [NEON_RED, NEON_ORANGE, 202, 166, 214]
