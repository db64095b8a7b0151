"""
Tests for the preview/apply auto-scheduling service.
"""

import pytest

from tournament_scheduler.core.exceptions import InvalidInputError, NotFoundError, PersistenceError
from tournament_scheduler.services.auto_scheduler import AutoScheduleService
from tournament_scheduler.services.bracket_generator import BracketGenerator
from tournament_scheduler.services.schedule_store import InMemoryScheduleStore

from conftest import EVENT_ID, GAME_DAY, base_snapshot

MORNING = {"startTime": "08:00", "endTime": "12:00"}


@pytest.fixture
def pool_store(store, id_factory):
    BracketGenerator(store, id_factory=id_factory).generate(
        EVENT_ID, "POOL", "Pool A", ["t1", "t2", "t3", "t4"],
        settings={"ageGroup": "12U", "division": "Boys"}
    )
    return store


def test_preview_payload(pool_store):
    payload = AutoScheduleService(pool_store).preview(EVENT_ID, GAME_DAY, MORNING)

    assert payload["success"] is True
    assert payload["mode"] == "PREVIEW"
    assert payload["stats"] == {
        "totalGames": 6,
        "scheduledCount": 6,
        "unscheduledCount": 0,
        "utilizationPercent": 75,
    }
    first = payload["scheduled"][0]
    assert first["courtId"] == "c1"
    assert first["courtName"] == "Court 1"
    assert first["venueName"] == "Main Gym"
    assert first["scheduledAt"] == "2025-06-14T15:00:00Z"
    assert first["timeSlot"] == "8:00 AM"
    assert first["homeTeam"] == "Team 2"
    assert first["awayTeam"] == "Team 1"
    assert first["gameType"] == "POOL"
    assert first["ageGroup"] == "12U"
    assert first["division"] == "Boys"
    assert payload["settings"]["startTime"] == "08:00"
    assert payload["settings"]["minRestMinutes"] == 60


def test_preview_saves_nothing(pool_store):
    AutoScheduleService(pool_store).preview(EVENT_ID, GAME_DAY, MORNING)
    assert not any(game.is_scheduled for game in pool_store.list_games(EVENT_ID))


def test_apply_saves_the_proposal(pool_store):
    service = AutoScheduleService(pool_store)
    preview = service.preview(EVENT_ID, GAME_DAY, {"startTime": "08:00", "endTime": "10:00"})

    payload = service.apply(EVENT_ID, GAME_DAY, {"startTime": "08:00", "endTime": "10:00"})

    assert payload["success"] is True
    assert payload["message"] == "Successfully scheduled 4 games"
    assert payload["stats"]["unscheduledCount"] == 2
    assert [u["reason"] for u in payload["unscheduled"]] == [
        "Team 1 has a scheduling conflict or insufficient rest time",
        "Team 3 has a scheduling conflict or insufficient rest time",
    ]

    saved = {g.id: (g.court_id, g.scheduled_at) for g in pool_store.list_games(EVENT_ID) if g.is_scheduled}
    assert {(s["gameId"], s["courtId"]) for s in preview["scheduled"]} == {
        (game_id, court_id) for game_id, (court_id, _) in saved.items()
    }


def test_second_run_only_takes_unscheduled_games(pool_store):
    service = AutoScheduleService(pool_store)
    service.apply(EVENT_ID, GAME_DAY, {"startTime": "08:00", "endTime": "10:00"})

    payload = service.preview(EVENT_ID, GAME_DAY, {"startTime": "12:00", "endTime": "14:00"})

    assert payload["stats"]["totalGames"] == 2
    assert payload["stats"]["scheduledCount"] == 2


def test_second_apply_into_booked_cells_fails_cleanly(pool_store):
    service = AutoScheduleService(pool_store)
    service.apply(EVENT_ID, GAME_DAY, {"startTime": "08:00", "endTime": "10:00"})

    with pytest.raises(PersistenceError):
        service.apply(EVENT_ID, GAME_DAY, {"startTime": "08:00", "endTime": "10:00"})

    assert sum(game.is_scheduled for game in pool_store.list_games(EVENT_ID)) == 4


def test_canceled_games_are_skipped():
    data = base_snapshot()
    data["games"] = [
        {"id": "g1", "eventId": EVENT_ID, "homeTeamId": "t1", "awayTeamId": "t2", "status": "CANCELED"},
        {"id": "g2", "eventId": EVENT_ID, "homeTeamId": "t3", "awayTeamId": "t4"},
    ]
    store = InMemoryScheduleStore.from_snapshot(data)

    payload = AutoScheduleService(store).preview(EVENT_ID, GAME_DAY)

    assert [s["gameId"] for s in payload["scheduled"]] == ["g2"]


def test_missing_inputs(pool_store):
    service = AutoScheduleService(pool_store)

    with pytest.raises(InvalidInputError, match="Event ID is required"):
        service.preview("", GAME_DAY)
    with pytest.raises(InvalidInputError, match="Date is required"):
        service.preview(EVENT_ID, "")
    with pytest.raises(InvalidInputError, match="Invalid date format"):
        service.preview(EVENT_ID, "June 14")
    with pytest.raises(NotFoundError):
        service.preview("evt-404", GAME_DAY)
    with pytest.raises(InvalidInputError, match="Invalid mode"):
        service.run(EVENT_ID, GAME_DAY, mode="DRY_RUN")
    with pytest.raises(InvalidInputError, match="Invalid scheduler settings"):
        service.preview(EVENT_ID, GAME_DAY, {"gameDuration": -5})


def test_event_without_courts():
    store = InMemoryScheduleStore.from_snapshot(base_snapshot(court_count=0))

    with pytest.raises(InvalidInputError, match="No courts available for this event"):
        AutoScheduleService(store).preview(EVENT_ID, GAME_DAY)


def test_event_without_unscheduled_games(store):
    with pytest.raises(InvalidInputError, match="No unscheduled games found for this event."):
        AutoScheduleService(store).preview(EVENT_ID, GAME_DAY)
