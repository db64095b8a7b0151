"""
Schedule validation for the auto-scheduler.
Checks a proposed day schedule against the hard constraints (court
double-booking, team overlap and rest) and one soft preference
(home/away balance).
"""

from collections import defaultdict
from typing import Dict, List, Optional

from tournament_scheduler.models import (
    ProposedAssignment, SchedulerResult, SchedulerSettings,
    SchedulingConstraint, ScheduleValidationResult
)
from tournament_scheduler.core.logging_config import get_logger
from tournament_scheduler.services.rest_tracker import RestConstraintTracker
from tournament_scheduler.services.time_slots import format_instant

logger = get_logger(__name__)

HOME_AWAY_IMBALANCE_LIMIT = 2


class ScheduleValidator:
    """
    Validates a proposed schedule.
    Hard violations make the result invalid; soft ones only add penalty.
    """

    def __init__(self, settings: Optional[SchedulerSettings] = None):
        self.settings = settings or SchedulerSettings()

    def validate_result(self, result: SchedulerResult) -> ScheduleValidationResult:
        """
        Validate every placed game of a scheduling run.

        Args:
            result: Output of AssignmentEngine.schedule()

        Returns:
            ScheduleValidationResult with all violations found
        """
        return self.validate_assignments(result.scheduled)

    def validate_assignments(self, assignments: List[ProposedAssignment]) -> ScheduleValidationResult:
        validation = ScheduleValidationResult(is_valid=True)

        self._check_court_conflicts(assignments, validation)
        self._check_team_rest(assignments, validation)
        self._check_home_away_balance(assignments, validation)

        logger.info(
            "Validated %d assignments: valid=%s, %d hard, %d soft violations",
            len(assignments), validation.is_valid,
            len(validation.hard_constraint_violations),
            len(validation.soft_constraint_violations)
        )
        for violation in validation.hard_constraint_violations[:10]:
            logger.warning("%s: %s", violation.constraint_type, violation.description)

        return validation

    def _check_court_conflicts(self, assignments: List[ProposedAssignment],
                               validation: ScheduleValidationResult):
        """A court hosts at most one game per start time."""
        court_games = defaultdict(list)

        for assignment in assignments:
            court_games[(assignment.court_id, assignment.scheduled_at)].append(assignment)

        for (_, start), booked in court_games.items():
            if len(booked) > 1:
                validation.add_violation(SchedulingConstraint(
                    constraint_type="court_double_booking",
                    severity="hard",
                    description=(
                        f"Multiple games ({len(booked)}) scheduled on {booked[0].court.name} "
                        f"at {format_instant(start)}"
                    ),
                    affected_games=[a.game_id for a in booked],
                    penalty_score=3000.0
                ))

    def _check_team_rest(self, assignments: List[ProposedAssignment],
                         validation: ScheduleValidationResult):
        """
        Replay each team's games in start order through a fresh rest tracker.
        Any start the tracker would have refused is an overlap or a rest violation.
        """
        team_games: Dict[str, List[ProposedAssignment]] = defaultdict(list)

        for assignment in assignments:
            team_games[assignment.game.home_team.id].append(assignment)
            team_games[assignment.game.away_team.id].append(assignment)

        for team_id, games in team_games.items():
            tracker = RestConstraintTracker(
                game_duration_minutes=self.settings.game_duration,
                min_rest_minutes=self.settings.min_rest_minutes
            )
            previous = None

            for assignment in sorted(games, key=lambda a: a.scheduled_at):
                if not tracker.can_play_at(team_id, assignment.scheduled_at):
                    affected = [previous.game_id, assignment.game_id] if previous else [assignment.game_id]
                    validation.add_violation(SchedulingConstraint(
                        constraint_type="team_rest_conflict",
                        severity="hard",
                        description=(
                            f"Team {team_id} plays at {format_instant(assignment.scheduled_at)} "
                            f"without {self.settings.min_rest_minutes} minutes of rest"
                        ),
                        affected_teams=[team_id],
                        affected_games=affected,
                        penalty_score=2000.0
                    ))
                tracker.commit(team_id, assignment.scheduled_at)
                previous = assignment

    def _check_home_away_balance(self, assignments: List[ProposedAssignment],
                                 validation: ScheduleValidationResult):
        """Check if teams have balanced home/away games (soft constraint)."""
        home_counts = defaultdict(int)
        away_counts = defaultdict(int)

        for assignment in assignments:
            home_counts[assignment.game.home_team.id] += 1
            away_counts[assignment.game.away_team.id] += 1

        for team_id in sorted(set(home_counts) | set(away_counts)):
            imbalance = abs(home_counts[team_id] - away_counts[team_id])

            if imbalance > HOME_AWAY_IMBALANCE_LIMIT:
                validation.add_violation(SchedulingConstraint(
                    constraint_type="home_away_imbalance",
                    severity="soft",
                    description=(
                        f"{team_id} has imbalanced home/away: "
                        f"{home_counts[team_id]} home, {away_counts[team_id]} away"
                    ),
                    affected_teams=[team_id],
                    penalty_score=imbalance * 10.0
                ))
