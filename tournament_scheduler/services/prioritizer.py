"""
Game ordering for the auto-scheduler.
"""

from functools import cmp_to_key
from typing import List, Optional, Sequence

from tournament_scheduler.models import Game
from tournament_scheduler.core.config import GAME_TYPE_PRIORITY, UNKNOWN_GAME_TYPE_PRIORITY


def get_type_priority(game: Game) -> int:
    return GAME_TYPE_PRIORITY.get(game.game_type_name, UNKNOWN_GAME_TYPE_PRIORITY)


def get_round_number(game: Game) -> Optional[int]:
    """Numeric bracket round, or None for labels like "Semifinal"."""
    value = game.bracket_round
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def compare_games(a: Game, b: Game) -> int:
    priority_a = get_type_priority(a)
    priority_b = get_type_priority(b)
    if priority_a != priority_b:
        return priority_b - priority_a

    # Earlier rounds first
    round_a = get_round_number(a)
    round_b = get_round_number(b)
    if round_a is not None and round_b is not None and round_a != round_b:
        return round_a - round_b

    if a.bracket_position is not None and b.bracket_position is not None:
        return a.bracket_position - b.bracket_position

    return 0


class GamePrioritizer:
    """
    Orders games by competitive importance.

    CHAMPIONSHIP > CONSOLATION > BRACKET > POOL > EXHIBITION, then bracket
    round, then bracket position. The sort is stable, so games that compare
    equal keep their input order.
    """

    def sort(self, games: Sequence[Game]) -> List[Game]:
        return sorted(games, key=cmp_to_key(compare_games))
