"""
Configuration constants for the Tournament Scheduling System.
All configurable settings are defined here.
"""

import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Timezone the tournament day is played in.
# Every wall-clock time (day start/end, slot labels) is interpreted in this zone.
DEFAULT_TIMEZONE = os.getenv("SCHEDULER_TIMEZONE", "America/Los_Angeles")

# Day window and game length (HH:MM, 24-hour)
DEFAULT_START_TIME = os.getenv("SCHEDULER_DEFAULT_START_TIME", "08:00")
DEFAULT_END_TIME = os.getenv("SCHEDULER_DEFAULT_END_TIME", "22:00")
GAME_DURATION_MINUTES = int(os.getenv("GAME_DURATION_MINUTES", "60"))
MIN_REST_MINUTES = int(os.getenv("MIN_REST_MINUTES", "60"))

# Redis connection URL for the task queue
REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")

# Scheduling Priorities (higher = scheduled first)
GAME_TYPE_PRIORITY = {
    "CHAMPIONSHIP": 5,
    "CONSOLATION": 4,
    "BRACKET": 3,
    "POOL": 2,
    "EXHIBITION": 1,
}
UNKNOWN_GAME_TYPE_PRIORITY = 0

# Round names, by distance from the final
ROUND_NAME_CHAMPIONSHIP = "Championship"
ROUND_NAME_SEMIFINAL = "Semifinal"
ROUND_NAME_QUARTERFINAL = "Quarterfinal"

# Pools this size or smaller are a single round robin, larger ones are pool play
POOL_ROUND_ROBIN_MAX_TEAMS = 4

# Reported for a game that never reached a team check
NO_SLOTS_REASON = "No available time slots"
REST_CONFLICT_REASON = "{team} has a scheduling conflict or insufficient rest time"

UNKNOWN_VENUE_NAME = "Unknown Venue"
