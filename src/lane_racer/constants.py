"""
constants.py: Centralized configuration for game, traffic and storage settings.
"""

# -------- Timing --------
TARGET_FPS = 60
FRAME_PERIOD_MS = 1000.0 / TARGET_FPS   # Nominal frame period (one "tick")
MAX_DT_TICKS = 2.0                      # Clamp for stalled / backgrounded frames

# -------- Game World Config --------
SCREEN_WIDTH = 400
SCREEN_HEIGHT = 650                     # Obstacles past this y are "passed"
SHOULDER_WIDTH = 40                     # Dirt shoulder on each side
CURB_WIDTH = 15                         # Curb between shoulder and road
LANE_MIN_X = SHOULDER_WIDTH + CURB_WIDTH
LANE_MAX_X = SCREEN_WIDTH - LANE_MIN_X
LANE_COUNT = 4

# -------- Player Config --------
PLAYER_WIDTH = 35
PLAYER_HEIGHT = 70
PLAYER_START_X = SCREEN_WIDTH / 2 - PLAYER_WIDTH / 2
PLAYER_Y = SCREEN_HEIGHT - 150

# -------- Physics Config (pixels / nominal frame) --------
MAX_SPEED = 8.0
ACCELERATION = 0.5
FRICTION = 0.85                         # Per-frame velocity retention when coasting
DECELERATION_RATE = 0.5                 # Extra braking when reversing direction
VELOCITY_EPSILON = 0.1                  # Below this the car is considered stopped
TILT_FACTOR = 0.05                      # Radians of tilt per unit of velocity

# -------- Traffic Config --------
SPEED_NORMAL = 5.0
SPEED_BOOST = 12.0
ROAD_SCROLL_FACTOR = 0.2                # Road texture moves slower than traffic
BASE_SPAWN_INTERVAL_MS = 1000
SPAWN_REDUCTION_PER_POINT_MS = 5
MAX_SPAWN_REDUCTION_MS = 400
MIN_SPAWN_INTERVAL_MS = 600
MIN_SPACING = 10                        # Extra lateral gap between obstacles
SPAWN_ATTEMPTS = 10
FAST_OBSTACLE_CHANCE = 0.1
FAST_SPEED_MULTIPLIER = 1.2

# -------- Scoring --------
POINTS_NORMAL = 1
POINTS_BOOST = 2

# -------- Storage Config --------
DB_FILE = "lane_racer.db"
BEST_SCORE_KEY = "bestScore"
LEADERBOARD_KEY = "leaderboardEntries"
MAX_NAME_LENGTH = 20
DEFAULT_PLAYER_NAME = "Unknown"
MAX_SUBMITTED_SCORE = 999999
HOUR_MS = 3_600_000
DAY_MS = 86_400_000
HOUR_BOARD_LIMIT = 10
DAY_BOARD_LIMIT = 40
