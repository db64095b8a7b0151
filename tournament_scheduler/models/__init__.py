"""
Data models for the scheduling system.
"""

from .models import (
    GameType,
    GameStatus,
    BracketType,
    Team,
    Court,
    Venue,
    Event,
    Game,
    Bracket,
    BracketSlot,
    TimeSlot,
    ResourceSlot,
    ProposedAssignment,
    UnscheduledEntry,
    SchedulingStats,
    SchedulerResult,
    GenerationResult,
    SchedulingConstraint,
    ScheduleValidationResult
)
from .settings import (
    SchedulerSettings,
    GenerationSettings,
    PoolSettings,
    SingleElimSettings
)

__all__ = [
    "GameType",
    "GameStatus",
    "BracketType",
    "Team",
    "Court",
    "Venue",
    "Event",
    "Game",
    "Bracket",
    "BracketSlot",
    "TimeSlot",
    "ResourceSlot",
    "ProposedAssignment",
    "UnscheduledEntry",
    "SchedulingStats",
    "SchedulerResult",
    "GenerationResult",
    "SchedulingConstraint",
    "ScheduleValidationResult",
    "SchedulerSettings",
    "GenerationSettings",
    "PoolSettings",
    "SingleElimSettings"
]
