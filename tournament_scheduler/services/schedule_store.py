"""
Storage boundary for events, teams, games and brackets.

The scheduling core never talks to a database directly. It reads and writes
through a ScheduleStore; InMemoryScheduleStore is the process-local
implementation used by the CLI, the task worker and the tests, and it can be
loaded from and dumped to a JSON-compatible snapshot.
"""

import threading
from abc import ABC, abstractmethod
from collections import OrderedDict
from typing import Dict, List, Optional, Sequence

from pydantic import ValidationError

from tournament_scheduler.models import (
    Event, Venue, Court, Team, Game, GameType, GameStatus, Bracket, BracketType,
    BracketSlot, ProposedAssignment, GenerationResult, PoolSettings, SingleElimSettings
)
from tournament_scheduler.models.settings import describe_validation_error
from tournament_scheduler.core.exceptions import InvalidInputError, NotFoundError, PersistenceError
from tournament_scheduler.core.logging_config import get_logger
from tournament_scheduler.services.time_slots import (
    parse_date, parse_instant, format_instant
)

logger = get_logger(__name__)


class ScheduleStore(ABC):
    """What the scheduling core needs from persistent storage."""

    @abstractmethod
    def get_event(self, event_id: str) -> Optional[Event]:
        ...

    @abstractmethod
    def get_team(self, team_id: str) -> Optional[Team]:
        ...

    @abstractmethod
    def list_games(self, event_id: str) -> List[Game]:
        ...

    @abstractmethod
    def save_generation(self, result: GenerationResult):
        """Store a new bracket with its games and slots, all or nothing."""

    @abstractmethod
    def apply_assignments(self, assignments: Sequence[ProposedAssignment]):
        """
        Write court and start time for every assignment in one transaction.

        Raises:
            PersistenceError: nothing from the batch was written
        """


def _parse_enum(value, enum_class):
    if not value:
        return None

    value = str(value).strip()

    for enum_item in enum_class:
        if enum_item.value == value:
            return enum_item

    value_upper = value.upper()
    for enum_item in enum_class:
        if enum_item.value == value_upper:
            return enum_item

    return None


def _require(row: Dict, key: str, kind: str):
    value = row.get(key)
    if value in (None, ""):
        raise InvalidInputError(f"{kind} is missing '{key}': {row}")
    return value


def _optional_int(row: Dict, key: str, kind: str, identifier: str) -> Optional[int]:
    value = row.get(key)
    if value is None:
        return None
    if isinstance(value, bool):
        raise InvalidInputError(f"{kind} {identifier} has invalid {key} {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidInputError(f"{kind} {identifier} has invalid {key} {value!r}")


def _require_int(row: Dict, key: str, kind: str, identifier: str) -> int:
    _require(row, key, kind)
    return _optional_int(row, key, kind, identifier)


class InMemoryScheduleStore(ScheduleStore):
    """
    Dictionary-backed store.

    Batch writes take a lock and check the whole batch before changing
    anything, so two applies for the same day cannot both book a court at
    the same time and a rejected batch leaves no trace.
    """

    def __init__(self):
        self.events: Dict[str, Event] = OrderedDict()
        self.teams: Dict[str, Team] = OrderedDict()
        self.games: Dict[str, Game] = OrderedDict()
        self.brackets: Dict[str, Bracket] = OrderedDict()
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_event(self, event_id: str) -> Optional[Event]:
        return self.events.get(event_id)

    def get_team(self, team_id: str) -> Optional[Team]:
        return self.teams.get(team_id)

    def get_game(self, game_id: str) -> Optional[Game]:
        return self.games.get(game_id)

    def list_games(self, event_id: str) -> List[Game]:
        return [game for game in self.games.values() if game.event_id == event_id]

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def add_event(self, event: Event):
        self.events[event.id] = event

    def add_team(self, team: Team):
        self.teams[team.id] = team

    def add_game(self, game: Game):
        self.games[game.id] = game

    def save_generation(self, result: GenerationResult):
        with self._lock:
            if result.bracket.id in self.brackets:
                raise PersistenceError(f"Bracket already exists: {result.bracket.id}")
            new_ids = set()
            for game in result.games:
                if game.id in self.games or game.id in new_ids:
                    raise PersistenceError(f"Game already exists: {game.id}")
                new_ids.add(game.id)

            self.brackets[result.bracket.id] = result.bracket
            for game in result.games:
                self.games[game.id] = game

    def apply_assignments(self, assignments: Sequence[ProposedAssignment]):
        with self._lock:
            booked = {
                (game.court_id, game.scheduled_at): game.id
                for game in self.games.values()
                if game.is_scheduled and game.status != GameStatus.CANCELED
            }

            for assignment in assignments:
                game = self.games.get(assignment.game_id)
                if game is None:
                    raise PersistenceError(f"Game not found: {assignment.game_id}")
                if game.is_scheduled:
                    raise PersistenceError(f"Game {game.id} is already scheduled")

                key = (assignment.court.id, assignment.scheduled_at)
                if key in booked:
                    raise PersistenceError(
                        f"Court {assignment.court.name} is already booked at "
                        f"{format_instant(assignment.scheduled_at)} (game {booked[key]})"
                    )
                booked[key] = game.id

            for assignment in assignments:
                game = self.games[assignment.game_id]
                game.court_id = assignment.court.id
                game.scheduled_at = assignment.scheduled_at

        logger.info("Applied %d game assignments", len(assignments))

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    @classmethod
    def from_snapshot(cls, data: Dict) -> "InMemoryScheduleStore":
        """
        Load a store from a snapshot dict.

        Raises:
            InvalidInputError: a row is missing a required field or has a bad value
            NotFoundError: a game references a team that is not in the snapshot
        """
        store = cls()

        for row in data.get("teams", []):
            store.add_team(Team(id=_require(row, "id", "Team"), name=row.get("name") or row["id"]))

        for row in data.get("events", []):
            event_id = _require(row, "id", "Event")
            venues = []
            for venue_row in row.get("venues", []):
                venue_id = _require(venue_row, "id", "Venue")
                venue_name = venue_row.get("name") or venue_id
                courts = [
                    Court(
                        id=_require(court_row, "id", "Court"),
                        name=court_row.get("name") or court_row["id"],
                        venue_id=venue_id,
                        venue_name=venue_name
                    )
                    for court_row in venue_row.get("courts", [])
                ]
                venues.append(Venue(id=venue_id, name=venue_name, courts=courts))

            store.add_event(Event(
                id=event_id,
                name=row.get("name") or event_id,
                start_date=parse_date(_require(row, "startDate", "Event")),
                venues=venues
            ))

        for row in data.get("games", []):
            store.add_game(store._game_from_row(row))

        for row in data.get("brackets", []):
            bracket = store._bracket_from_row(row)
            store.brackets[bracket.id] = bracket

        logger.info(
            "Loaded snapshot: %d events, %d teams, %d games, %d brackets",
            len(store.events), len(store.teams), len(store.games), len(store.brackets)
        )
        return store

    def _resolve_team(self, team_id: str) -> Team:
        team = self.teams.get(team_id)
        if team is None:
            raise NotFoundError("Team", team_id)
        return team

    def _game_from_row(self, row: Dict) -> Game:
        game_id = _require(row, "id", "Game")
        raw_type = row.get("gameType") or GameType.POOL.value
        status = row.get("status")

        parsed_status = _parse_enum(status, GameStatus)
        if status and parsed_status is None:
            raise InvalidInputError(f"Game {game_id} has unknown status {status!r}")

        bracket_round = row.get("bracketRound")
        return Game(
            id=game_id,
            home_team=self._resolve_team(_require(row, "homeTeamId", "Game")),
            away_team=self._resolve_team(_require(row, "awayTeamId", "Game")),
            game_type=_parse_enum(raw_type, GameType) or raw_type,
            division=row.get("division"),
            bracket_round=str(bracket_round) if bracket_round is not None else None,
            bracket_position=_optional_int(row, "bracketPosition", "Game", game_id),
            event_id=row.get("eventId"),
            bracket_id=row.get("bracketId"),
            pool_code=row.get("poolCode"),
            age_group=row.get("ageGroup"),
            status=parsed_status or GameStatus.SCHEDULED,
            court_id=row.get("courtId"),
            scheduled_at=parse_instant(row.get("scheduledAt"))
        )

    def _bracket_from_row(self, row: Dict) -> Bracket:
        bracket_id = _require(row, "id", "Bracket")
        bracket_type = _parse_enum(row.get("type"), BracketType)
        if bracket_type is None:
            raise InvalidInputError(f"Bracket {bracket_id} has unknown type {row.get('type')!r}")

        settings_model = SingleElimSettings if bracket_type == BracketType.SINGLE_ELIM else PoolSettings
        settings = None
        if row.get("settings"):
            try:
                settings = settings_model.model_validate(row["settings"])
            except ValidationError as e:
                raise InvalidInputError(
                    f"Bracket {bracket_id} has invalid settings: {describe_validation_error(e)}"
                )

        slots = [
            BracketSlot(
                bracket_id=bracket_id,
                round=_require_int(slot_row, "round", "Bracket slot", bracket_id),
                position=_require_int(slot_row, "position", "Bracket slot", bracket_id),
                game_id=slot_row.get("gameId"),
                is_bye=bool(slot_row.get("isBye", False)),
                bye_team_id=slot_row.get("byeTeamId")
            )
            for slot_row in row.get("slots", [])
        ]

        return Bracket(
            id=bracket_id,
            event_id=row.get("eventId"),
            name=row.get("name") or bracket_id,
            type=bracket_type,
            settings=settings,
            slots=slots
        )

    def to_snapshot(self) -> Dict:
        """Dump the store in the same shape from_snapshot reads."""
        return {
            "events": [
                {
                    "id": event.id,
                    "name": event.name,
                    "startDate": event.start_date.isoformat(),
                    "venues": [
                        {
                            "id": venue.id,
                            "name": venue.name,
                            "courts": [{"id": court.id, "name": court.name} for court in venue.courts]
                        }
                        for venue in event.venues
                    ]
                }
                for event in self.events.values()
            ],
            "teams": [{"id": team.id, "name": team.name} for team in self.teams.values()],
            "games": [game_to_row(game) for game in self.games.values()],
            "brackets": [bracket_to_row(bracket) for bracket in self.brackets.values()]
        }


def game_to_row(game: Game) -> Dict:
    return {
        "id": game.id,
        "eventId": game.event_id,
        "bracketId": game.bracket_id,
        "homeTeamId": game.home_team.id,
        "awayTeamId": game.away_team.id,
        "gameType": game.game_type_name,
        "division": game.division,
        "poolCode": game.pool_code,
        "ageGroup": game.age_group,
        "bracketRound": game.bracket_round,
        "bracketPosition": game.bracket_position,
        "status": game.status.value,
        "courtId": game.court_id,
        "scheduledAt": format_instant(game.scheduled_at) if game.scheduled_at else None
    }


def bracket_to_row(bracket: Bracket) -> Dict:
    return {
        "id": bracket.id,
        "eventId": bracket.event_id,
        "name": bracket.name,
        "type": bracket.type.value,
        "settings": bracket.settings.model_dump(by_alias=True) if bracket.settings is not None else None,
        "slots": [
            {
                "round": slot.round,
                "position": slot.position,
                "gameId": slot.game_id,
                "isBye": slot.is_bye,
                "byeTeamId": slot.bye_team_id
            }
            for slot in bracket.slots
        ]
    }
