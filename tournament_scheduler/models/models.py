"""
Data models for the Tournament Scheduling System.
Defines all data structures used throughout the application.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from typing import List, Optional, Union
from enum import Enum


class GameType(Enum):
    POOL = "POOL"
    BRACKET = "BRACKET"
    CONSOLATION = "CONSOLATION"
    CHAMPIONSHIP = "CHAMPIONSHIP"
    EXHIBITION = "EXHIBITION"

class GameStatus(Enum):
    SCHEDULED = "SCHEDULED"
    IN_PROGRESS = "IN_PROGRESS"
    FINAL = "FINAL"
    CANCELED = "CANCELED"

class BracketType(Enum):
    ROUND_ROBIN = "ROUND_ROBIN"
    POOL_PLAY = "POOL_PLAY"
    SINGLE_ELIM = "SINGLE_ELIM"


@dataclass
class Team:
    id: str
    name: str

    def __hash__(self):
        return hash(self.id)

    def __eq__(self, other):
        if isinstance(other, Team):
            return self.id == other.id
        return False


@dataclass
class Court:
    id: str
    name: str
    venue_id: str
    venue_name: Optional[str] = None

    def __hash__(self):
        return hash(self.id)

    def __eq__(self, other):
        if isinstance(other, Court):
            return self.id == other.id
        return False


@dataclass
class Venue:
    id: str
    name: str
    courts: List[Court] = field(default_factory=list)


@dataclass
class Event:
    id: str
    name: str
    start_date: date
    venues: List[Venue] = field(default_factory=list)

    def get_courts(self) -> List[Court]:
        """All courts of all venues, in venue order then court order."""
        return [court for venue in self.venues for court in venue.courts]


@dataclass
class Game:
    """
    A game between two teams.

    Unscheduled while ``court_id`` is None. ``game_type`` is normally a
    GameType, but a raw string from an unknown source is kept as-is so it can
    be ranked below every known type.
    """
    id: str
    home_team: Team
    away_team: Team
    game_type: Union[GameType, str] = GameType.POOL
    division: Optional[str] = None
    bracket_round: Optional[str] = None  # round number or round label
    bracket_position: Optional[int] = None
    event_id: Optional[str] = None
    bracket_id: Optional[str] = None
    pool_code: Optional[str] = None
    age_group: Optional[str] = None
    status: GameStatus = GameStatus.SCHEDULED
    court_id: Optional[str] = None
    scheduled_at: Optional[datetime] = None

    def __str__(self):
        return f"{self.away_team.name} @ {self.home_team.name} ({self.game_type_name})"

    @property
    def game_type_name(self) -> str:
        if isinstance(self.game_type, GameType):
            return self.game_type.value
        return str(self.game_type)

    @property
    def is_scheduled(self) -> bool:
        return self.court_id is not None

    def involves_team(self, team_id: str) -> bool:
        return self.home_team.id == team_id or self.away_team.id == team_id


@dataclass
class BracketSlot:
    bracket_id: str
    round: int
    position: int
    game_id: Optional[str] = None
    is_bye: bool = False
    bye_team_id: Optional[str] = None  # team advancing through a bye, if any

    @property
    def key(self):
        return (self.round, self.position)


@dataclass
class Bracket:
    id: str
    event_id: str
    name: str
    type: BracketType
    settings: object = None  # PoolSettings or SingleElimSettings
    slots: List[BracketSlot] = field(default_factory=list)

    def get_round_slots(self, round_number: int) -> List[BracketSlot]:
        return [slot for slot in self.slots if slot.round == round_number]


@dataclass
class TimeSlot:
    """Half-open interval [start, end) on one tournament day."""
    start: datetime
    end: datetime
    label: str

    def __str__(self):
        return self.label


@dataclass
class ResourceSlot:
    """One (court, time slot) cell of the scheduling grid."""
    court_index: int
    time_slot_index: int
    is_occupied: bool = False


@dataclass
class ProposedAssignment:
    game_id: str
    court: Court
    scheduled_at: datetime
    game: Game
    time_slot: str

    @property
    def court_id(self) -> str:
        return self.court.id


@dataclass
class UnscheduledEntry:
    game: Game
    reason: str


@dataclass
class SchedulingStats:
    total_games: int = 0
    scheduled_count: int = 0
    unscheduled_count: int = 0
    utilization_percent: int = 0

    def to_dict(self) -> dict:
        return {
            "totalGames": self.total_games,
            "scheduledCount": self.scheduled_count,
            "unscheduledCount": self.unscheduled_count,
            "utilizationPercent": self.utilization_percent,
        }


@dataclass
class SchedulerResult:
    scheduled: List[ProposedAssignment] = field(default_factory=list)
    unscheduled: List[UnscheduledEntry] = field(default_factory=list)
    stats: SchedulingStats = field(default_factory=SchedulingStats)

    def get_team_starts(self, team_id: str) -> List[datetime]:
        return sorted(
            assignment.scheduled_at for assignment in self.scheduled
            if assignment.game.involves_team(team_id)
        )


@dataclass
class GenerationResult:
    bracket: Bracket
    games: List[Game] = field(default_factory=list)
    slots: List[BracketSlot] = field(default_factory=list)
    message: str = ""


@dataclass
class SchedulingConstraint:
    constraint_type: str
    severity: str
    description: str
    affected_teams: List[str] = field(default_factory=list)  # team ids
    affected_games: List[str] = field(default_factory=list)  # game ids
    penalty_score: float = 0.0


@dataclass
class ScheduleValidationResult:
    is_valid: bool
    hard_constraint_violations: List[SchedulingConstraint] = field(default_factory=list)
    soft_constraint_violations: List[SchedulingConstraint] = field(default_factory=list)
    total_penalty_score: float = 0.0

    def add_violation(self, constraint: SchedulingConstraint):
        if constraint.severity == 'hard':
            self.hard_constraint_violations.append(constraint)
            self.is_valid = False
        else:
            self.soft_constraint_violations.append(constraint)
        self.total_penalty_score += constraint.penalty_score

    def get_summary(self) -> str:
        summary = f"Schedule Valid: {self.is_valid}\n"
        summary += f"Hard Violations: {len(self.hard_constraint_violations)}\n"
        summary += f"Soft Violations: {len(self.soft_constraint_violations)}\n"
        summary += f"Total Penalty Score: {self.total_penalty_score:.2f}\n"
        return summary
