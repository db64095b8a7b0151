"""
Pool and bracket generation.

Builds the graph of games that the auto-scheduler later places on courts:
round-robin pools, and single-elimination brackets with byes and named
rounds. Seeds are paired in the order given (1v2, 3v4, ...); no standard
tournament seeding is applied.
"""

import uuid
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from tournament_scheduler.models import (
    Game, GameType, GameStatus, Bracket, BracketType, BracketSlot, Team,
    GenerationResult, GenerationSettings, PoolSettings, SingleElimSettings
)
from tournament_scheduler.core.config import (
    ROUND_NAME_CHAMPIONSHIP, ROUND_NAME_SEMIFINAL, ROUND_NAME_QUARTERFINAL,
    POOL_ROUND_ROBIN_MAX_TEAMS
)
from tournament_scheduler.core.exceptions import InvalidInputError, NotFoundError
from tournament_scheduler.core.logging_config import get_logger
from tournament_scheduler.services.round_robin import RoundRobinGenerator

logger = get_logger(__name__)

GENERATION_TYPES = ("POOL", "BRACKET")


def get_round_name(round_number: int, total_rounds: int) -> str:
    """Name a round by its distance from the final."""
    rounds_from_end = total_rounds - round_number + 1

    if rounds_from_end == 1:
        return ROUND_NAME_CHAMPIONSHIP
    if rounds_from_end == 2:
        return ROUND_NAME_SEMIFINAL
    if rounds_from_end == 3:
        return ROUND_NAME_QUARTERFINAL
    return f"Round {round_number}"


@dataclass
class FirstRoundPairing:
    position: int
    home_team_id: Optional[str] = None
    away_team_id: Optional[str] = None

    @property
    def is_game(self) -> bool:
        return self.home_team_id is not None and self.away_team_id is not None

    @property
    def is_bye(self) -> bool:
        return not self.is_game


@dataclass
class BracketTopology:
    team_count: int
    total_slots: int
    rounds: int
    positions: List[Tuple[int, int]] = field(default_factory=list)  # (round, position)

    def get_slot_count(self, round_number: int) -> int:
        return self.total_slots // (2 ** round_number)

    def get_round_name(self, round_number: int) -> str:
        return get_round_name(round_number, self.rounds)

    @property
    def open_seats(self) -> int:
        """First-round team seats left empty."""
        return self.total_slots - self.team_count


class BracketTopologyCalculator:
    """
    Single-elimination bracket shape for a team count.

    The field is padded to the next power of two; round r holds
    total_slots / 2**r slots, so every round is half the one before it.
    """

    def __init__(self, team_count: int):
        if team_count < 2:
            raise InvalidInputError("At least 2 teams are required")
        self.team_count = team_count

    def calculate(self) -> BracketTopology:
        # Smallest power of two >= team_count
        total_slots = 1 << (self.team_count - 1).bit_length()
        rounds = total_slots.bit_length() - 1

        positions = []
        for round_number in range(1, rounds + 1):
            games_in_round = total_slots // (2 ** round_number)
            for position in range(1, games_in_round + 1):
                positions.append((round_number, position))

        return BracketTopology(
            team_count=self.team_count,
            total_slots=total_slots,
            rounds=rounds,
            positions=positions
        )

    def pair_first_round(self, seeds: Sequence[str]) -> List[FirstRoundPairing]:
        """
        Fill first-round slots two seeds at a time.

        A slot with a single team (or none) is a bye.
        """
        topology = self.calculate()
        pairings = []
        for index in range(topology.get_slot_count(1)):
            home_index = index * 2
            away_index = index * 2 + 1
            pairings.append(FirstRoundPairing(
                position=index + 1,
                home_team_id=seeds[home_index] if home_index < len(seeds) else None,
                away_team_id=seeds[away_index] if away_index < len(seeds) else None
            ))
        return pairings


class BracketGenerator:
    """
    Creates pools and brackets for an event.

    Looks up the event and teams through the store, builds the bracket record
    with its games and slots, and saves them as one batch.
    """

    def __init__(self, store, id_factory: Optional[Callable[[], str]] = None):
        """
        Args:
            store: ScheduleStore holding events, teams and games
            id_factory: Produces ids for new brackets and games (uuid4 by default)
        """
        self.store = store
        self.id_factory = id_factory or (lambda: str(uuid.uuid4()))

    def generate(self, event_id: str, generation_type: str, name: str,
                 team_ids: Sequence[str], settings: Optional[Dict] = None) -> GenerationResult:
        """
        Generate a pool (round robin) or a single-elimination bracket.

        Raises:
            InvalidInputError: missing event id or name, fewer than 2 teams,
                duplicate team ids or an unknown generation type
            NotFoundError: the event or a team does not exist
        """
        if not event_id:
            raise InvalidInputError("Event ID is required")
        if not name:
            raise InvalidInputError("Bracket/Pool name is required")
        if not team_ids or len(team_ids) < 2:
            raise InvalidInputError("At least 2 teams are required")
        if generation_type not in GENERATION_TYPES:
            raise InvalidInputError("Invalid type. Must be POOL or BRACKET")

        options = GenerationSettings.from_options(settings)

        event = self.store.get_event(event_id)
        if event is None:
            raise NotFoundError("Event", event_id)

        teams = self._resolve_teams(team_ids)

        if generation_type == "POOL":
            result = self._generate_pool(event_id, name, team_ids, teams, options)
        else:
            seeds = list(options.seeds) if options.seeds else list(team_ids)
            teams.update(self._resolve_teams(seeds))
            result = self._generate_bracket(event_id, name, seeds, teams, options)

        self.store.save_generation(result)
        logger.info("%s for event %s: %s", name, event_id, result.message)
        return result

    def _resolve_teams(self, team_ids: Sequence[str]) -> Dict[str, Team]:
        if len(set(team_ids)) != len(team_ids):
            raise InvalidInputError("Duplicate team ids are not allowed")

        teams = {}
        for team_id in team_ids:
            team = self.store.get_team(team_id)
            if team is None:
                raise NotFoundError("Team", team_id)
            teams[team_id] = team
        return teams

    def _generate_pool(self, event_id: str, name: str, team_ids: Sequence[str],
                       teams: Dict[str, Team], options: GenerationSettings) -> GenerationResult:
        round_robin = RoundRobinGenerator(team_ids)
        bracket_type = (BracketType.ROUND_ROBIN if len(team_ids) <= POOL_ROUND_ROBIN_MAX_TEAMS
                        else BracketType.POOL_PLAY)

        bracket = Bracket(
            id=self.id_factory(),
            event_id=event_id,
            name=name,
            type=bracket_type,
            settings=PoolSettings(
                pool_code=options.pool_code,
                team_count=len(team_ids),
                games_per_team=round_robin.games_per_team
            )
        )

        games = []
        for home_id, away_id in round_robin.generate_matchups():
            games.append(Game(
                id=self.id_factory(),
                home_team=teams[home_id],
                away_team=teams[away_id],
                game_type=GameType.POOL,
                division=options.division,
                event_id=event_id,
                bracket_id=bracket.id,
                pool_code=options.pool_code,
                age_group=options.age_group,
                status=GameStatus.SCHEDULED
            ))

        return GenerationResult(
            bracket=bracket,
            games=games,
            message=f"Created {len(games)} pool play games"
        )

    def _generate_bracket(self, event_id: str, name: str, seeds: List[str],
                          teams: Dict[str, Team], options: GenerationSettings) -> GenerationResult:
        calculator = BracketTopologyCalculator(len(seeds))
        topology = calculator.calculate()

        bracket = Bracket(
            id=self.id_factory(),
            event_id=event_id,
            name=name,
            type=BracketType.SINGLE_ELIM,
            settings=SingleElimSettings(
                team_count=len(seeds),
                rounds=topology.rounds,
                seeds=seeds
            )
        )

        games = []
        round_name = topology.get_round_name(1)
        for pairing in calculator.pair_first_round(seeds):
            if pairing.is_game:
                game = Game(
                    id=self.id_factory(),
                    home_team=teams[pairing.home_team_id],
                    away_team=teams[pairing.away_team_id],
                    game_type=GameType.BRACKET,
                    division=options.division,
                    bracket_round=round_name,
                    bracket_position=pairing.position,
                    event_id=event_id,
                    bracket_id=bracket.id,
                    age_group=options.age_group,
                    status=GameStatus.SCHEDULED
                )
                games.append(game)
                bracket.slots.append(BracketSlot(
                    bracket_id=bracket.id, round=1, position=pairing.position, game_id=game.id
                ))
            else:
                # Lone team advances without playing
                bracket.slots.append(BracketSlot(
                    bracket_id=bracket.id, round=1, position=pairing.position,
                    is_bye=True, bye_team_id=pairing.home_team_id
                ))

        # Later rounds are filled as winners advance
        later_round_count = 0
        for round_number, position in topology.positions:
            if round_number > 1:
                bracket.slots.append(BracketSlot(
                    bracket_id=bracket.id, round=round_number, position=position
                ))
                later_round_count += 1

        return GenerationResult(
            bracket=bracket,
            games=games,
            slots=list(bracket.slots),
            message=(f"Created bracket with {len(games)} first-round games and "
                     f"{later_round_count} slots for later rounds")
        )
