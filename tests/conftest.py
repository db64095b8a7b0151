import pytest

from tournament_scheduler.models import Court, Game, GameType, Team
from tournament_scheduler.services.schedule_store import InMemoryScheduleStore

EVENT_ID = "evt-1"
GAME_DAY = "2025-06-14"


def make_team(team_id):
    return Team(id=team_id, name=f"Team {team_id.upper()}")


def make_game(game_id, home, away, game_type=GameType.POOL, **kwargs):
    """Unscheduled game between two Team objects."""
    return Game(id=game_id, home_team=home, away_team=away, game_type=game_type,
                event_id=EVENT_ID, **kwargs)


def base_snapshot(court_count=2, team_count=8):
    return {
        "events": [
            {
                "id": EVENT_ID,
                "name": "Summer Classic",
                "startDate": GAME_DAY,
                "venues": [
                    {
                        "id": "v1",
                        "name": "Main Gym",
                        "courts": [
                            {"id": f"c{i}", "name": f"Court {i}"}
                            for i in range(1, court_count + 1)
                        ]
                    }
                ]
            }
        ],
        "teams": [
            {"id": f"t{i}", "name": f"Team {i}"} for i in range(1, team_count + 1)
        ],
        "games": [],
        "brackets": []
    }


@pytest.fixture
def snapshot():
    return base_snapshot()


@pytest.fixture
def store(snapshot):
    return InMemoryScheduleStore.from_snapshot(snapshot)


@pytest.fixture
def teams():
    return [make_team(team_id) for team_id in ("a", "b", "c", "d", "e", "f", "g", "h")]


@pytest.fixture
def one_court():
    return [Court(id="c1", name="Court 1", venue_id="v1", venue_name="Main Gym")]


@pytest.fixture
def two_courts():
    return [
        Court(id="c1", name="Court 1", venue_id="v1", venue_name="Main Gym"),
        Court(id="c2", name="Court 2", venue_id="v1", venue_name="Main Gym"),
    ]


@pytest.fixture
def id_factory():
    """Deterministic ids: id-1, id-2, ..."""
    counter = {"next": 0}

    def next_id():
        counter["next"] += 1
        return f"id-{counter['next']}"

    return next_id
