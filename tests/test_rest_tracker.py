"""
Tests for per-team rest enforcement.
"""

from datetime import datetime, timedelta, timezone

from tournament_scheduler.services.rest_tracker import RestConstraintTracker

EIGHT_AM = datetime(2025, 6, 14, 15, 0, tzinfo=timezone.utc)


def at(minutes):
    return EIGHT_AM + timedelta(minutes=minutes)


def test_team_with_no_games_can_play_anytime():
    tracker = RestConstraintTracker(60, 60)
    assert tracker.can_play_at("x", EIGHT_AM)


def test_overlapping_start_is_rejected():
    """Team X plays 08:00-09:00, so 08:30 is refused."""
    tracker = RestConstraintTracker(game_duration_minutes=60, min_rest_minutes=60)
    tracker.commit("x", at(0))

    assert not tracker.can_play_at("x", at(30))
    assert not tracker.can_play_at("x", at(0))
    assert not tracker.can_play_at("x", at(-30))


def test_other_teams_are_unaffected():
    tracker = RestConstraintTracker(60, 60)
    tracker.commit("x", at(0))
    assert tracker.can_play_at("y", at(0))


def test_short_rest_is_rejected_when_neither_gap_is_long_enough():
    """30 minute games with 90 minutes rest: 08:00 and 08:30 are too close."""
    tracker = RestConstraintTracker(game_duration_minutes=30, min_rest_minutes=90)
    tracker.commit("x", at(0))

    assert not tracker.can_play_at("x", at(30))
    assert not tracker.can_play_at("x", at(-30))
    assert tracker.can_play_at("x", at(120))


def test_one_long_enough_gap_is_accepted():
    """The gap measured in the other direction is a full game plus the break."""
    tracker = RestConstraintTracker(game_duration_minutes=60, min_rest_minutes=60)
    tracker.commit("x", at(0))

    assert tracker.can_play_at("x", at(60))
    assert tracker.can_play_at("x", at(-60))


def test_every_committed_game_is_checked():
    tracker = RestConstraintTracker(game_duration_minutes=30, min_rest_minutes=90)
    tracker.commit("x", at(0))
    tracker.commit("x", at(240))

    assert tracker.can_play_at("x", at(120))
    assert not tracker.can_play_at("x", at(210))
    assert tracker.get_starts("x") == [at(0), at(240)]
