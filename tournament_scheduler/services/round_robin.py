"""
Round-robin pairing for pool play.
"""

from typing import List, Sequence, Tuple

from tournament_scheduler.core.exceptions import InvalidInputError


class RoundRobinGenerator:
    """
    Every team plays every other team once.

    Pairs come out in input order (team 0's games first). Home/away
    alternates on the parity of the two indices, which spreads home games
    around without guaranteeing an exact split.
    """

    def __init__(self, team_ids: Sequence[str]):
        if len(team_ids) < 2:
            raise InvalidInputError("At least 2 teams are required")
        self.team_ids = list(team_ids)

    def generate_matchups(self) -> List[Tuple[str, str]]:
        """Return (home_team_id, away_team_id) pairs."""
        matchups = []
        for i in range(len(self.team_ids)):
            for j in range(i + 1, len(self.team_ids)):
                if (i + j) % 2 == 0:
                    matchups.append((self.team_ids[i], self.team_ids[j]))
                else:
                    matchups.append((self.team_ids[j], self.team_ids[i]))
        return matchups

    @property
    def games_per_team(self) -> int:
        return len(self.team_ids) - 1
