"""
Services for bracket generation, scheduling, storage, and validation.
"""

from .time_slots import TimeSlotGenerator
from .round_robin import RoundRobinGenerator
from .bracket_generator import BracketTopologyCalculator, BracketGenerator
from .prioritizer import GamePrioritizer
from .rest_tracker import RestConstraintTracker
from .scheduler import AssignmentEngine
from .schedule_store import ScheduleStore, InMemoryScheduleStore
from .auto_scheduler import AutoScheduleService
from .validator import ScheduleValidator

__all__ = [
    "TimeSlotGenerator",
    "RoundRobinGenerator",
    "BracketTopologyCalculator",
    "BracketGenerator",
    "GamePrioritizer",
    "RestConstraintTracker",
    "AssignmentEngine",
    "ScheduleStore",
    "InMemoryScheduleStore",
    "AutoScheduleService",
    "ScheduleValidator"
]
