"""
Team rest enforcement for a single scheduling run.
"""

from collections import defaultdict
from datetime import datetime, timedelta
from typing import Dict, List

from tournament_scheduler.core.config import GAME_DURATION_MINUTES, MIN_REST_MINUTES


class RestConstraintTracker:
    """
    Ledger of the start times already committed for each team.

    Built fresh for every run and owned by one engine. A proposed start is
    legal for a team when, against every game the team already has, the two
    games do not overlap and at least one of the gaps between them (proposed
    after existing, or existing after proposed) reaches the minimum rest.
    """

    def __init__(self, game_duration_minutes: int = GAME_DURATION_MINUTES,
                 min_rest_minutes: int = MIN_REST_MINUTES):
        self.game_duration = timedelta(minutes=game_duration_minutes)
        self.min_rest = timedelta(minutes=min_rest_minutes)
        self.team_starts: Dict[str, List[datetime]] = defaultdict(list)

    def can_play_at(self, team_id: str, proposed_start: datetime) -> bool:
        proposed_end = proposed_start + self.game_duration

        for existing_start in self.team_starts.get(team_id, []):
            existing_end = existing_start + self.game_duration

            # Overlap
            if proposed_start < existing_end and proposed_end > existing_start:
                return False

            gap_after = abs(proposed_start - existing_end)
            gap_before = abs(existing_start - proposed_end)
            if gap_after < self.min_rest and gap_before < self.min_rest:
                return False

        return True

    def commit(self, team_id: str, start: datetime):
        self.team_starts[team_id].append(start)

    def get_starts(self, team_id: str) -> List[datetime]:
        return list(self.team_starts.get(team_id, []))
