"""
Tests for schedule validation.
"""

from datetime import datetime, timedelta, timezone

from tournament_scheduler.models import ProposedAssignment, SchedulerResult, SchedulerSettings
from tournament_scheduler.services.round_robin import RoundRobinGenerator
from tournament_scheduler.services.scheduler import AssignmentEngine
from tournament_scheduler.services.validator import ScheduleValidator

from conftest import GAME_DAY, make_game

EIGHT_AM = datetime(2025, 6, 14, 15, 0, tzinfo=timezone.utc)


def place(game, court, minutes_after_eight):
    return ProposedAssignment(
        game_id=game.id,
        court=court,
        scheduled_at=EIGHT_AM + timedelta(minutes=minutes_after_eight),
        game=game,
        time_slot=""
    )


def test_engine_output_is_valid(teams, two_courts):
    by_id = {team.id: team for team in teams[:6]}
    games = [
        make_game(f"g{i}", by_id[home], by_id[away])
        for i, (home, away) in enumerate(RoundRobinGenerator(list(by_id)).generate_matchups())
    ]
    settings = SchedulerSettings()
    result = AssignmentEngine(games, two_courts, GAME_DAY, settings).schedule()

    validation = ScheduleValidator(settings).validate_result(result)

    assert validation.is_valid
    assert validation.hard_constraint_violations == []


def test_court_double_booking(teams, one_court):
    a, b, c, d = teams[:4]
    court = one_court[0]
    assignments = [place(make_game("g1", a, b), court, 0), place(make_game("g2", c, d), court, 0)]

    validation = ScheduleValidator().validate_assignments(assignments)

    assert not validation.is_valid
    [violation] = validation.hard_constraint_violations
    assert violation.constraint_type == "court_double_booking"
    assert violation.affected_games == ["g1", "g2"]


def test_team_in_two_places_at_once(teams, two_courts):
    a, b, c = teams[:3]
    assignments = [
        place(make_game("g1", a, b), two_courts[0], 0),
        place(make_game("g2", a, c), two_courts[1], 0),
    ]

    validation = ScheduleValidator().validate_assignments(assignments)

    assert not validation.is_valid
    [violation] = validation.hard_constraint_violations
    assert violation.constraint_type == "team_rest_conflict"
    assert violation.affected_teams == ["a"]
    assert violation.affected_games == ["g1", "g2"]


def test_insufficient_rest(teams, two_courts):
    a, b, c = teams[:3]
    settings = SchedulerSettings(game_duration=30, min_rest_minutes=90)
    assignments = [
        place(make_game("g1", a, b), two_courts[0], 0),
        place(make_game("g2", a, c), two_courts[1], 30),
    ]

    validation = ScheduleValidator(settings).validate_assignments(assignments)

    assert [v.constraint_type for v in validation.hard_constraint_violations] == ["team_rest_conflict"]


def test_home_away_imbalance_is_soft(teams, one_court):
    a, b, c, d = teams[:4]
    court = one_court[0]
    assignments = [
        place(make_game("g1", a, b), court, 0),
        place(make_game("g2", a, c), court, 120),
        place(make_game("g3", a, d), court, 240),
    ]

    validation = ScheduleValidator().validate_assignments(assignments)

    assert validation.is_valid
    [violation] = validation.soft_constraint_violations
    assert violation.constraint_type == "home_away_imbalance"
    assert violation.affected_teams == ["a"]
    assert validation.total_penalty_score == 30.0
    assert "Soft Violations: 1" in validation.get_summary()


def test_empty_schedule_is_valid():
    validation = ScheduleValidator().validate_result(SchedulerResult())
    assert validation.is_valid
    assert validation.total_penalty_score == 0.0
