"""
Auto-scheduler engine.
Places games onto courts and time slots for one tournament day using a
greedy first-fit algorithm.
"""

from datetime import date
from typing import List, Optional, Sequence, Union

from tournament_scheduler.models import (
    Court, Game, TimeSlot, ResourceSlot, ProposedAssignment, UnscheduledEntry,
    SchedulingStats, SchedulerResult, SchedulerSettings
)
from tournament_scheduler.core.config import NO_SLOTS_REASON, REST_CONFLICT_REASON
from tournament_scheduler.core.logging_config import get_logger
from tournament_scheduler.services.prioritizer import GamePrioritizer
from tournament_scheduler.services.rest_tracker import RestConstraintTracker
from tournament_scheduler.services.time_slots import TimeSlotGenerator, parse_date

logger = get_logger(__name__)


class AssignmentEngine:
    """
    Greedy first-fit allocator of games to (court, time slot) cells.

    Cells are scanned court-major: every slot of the first court, then every
    slot of the second, and so on. Games are taken in priority order and each
    one gets the first free cell where both teams are rested. A placed game is
    never moved, so the result is deterministic for a given input but not
    necessarily the best possible packing.
    """

    def __init__(self, games: Sequence[Game], courts: Sequence[Court],
                 game_date: Union[str, date], settings: Optional[SchedulerSettings] = None):
        """
        Initialize the engine with the games to place and the courts to use.

        Args:
            games: Unscheduled games
            courts: Courts available for the day, in scan order
            game_date: Tournament day (date or YYYY-MM-DD)
            settings: Day window, game length and minimum rest
        """
        self.games = list(games)
        self.courts = list(courts)
        self.game_date = parse_date(game_date)
        self.settings = settings or SchedulerSettings()

        self.time_slot_generator = TimeSlotGenerator(
            start_time=self.settings.start_time,
            end_time=self.settings.end_time,
            duration_minutes=self.settings.game_duration,
            tz_name=self.settings.timezone
        )
        self.prioritizer = GamePrioritizer()

    def _build_resource_slots(self, time_slots: List[TimeSlot]) -> List[ResourceSlot]:
        """Court-major arena of cells, indexed by (court_index, time_slot_index)."""
        return [
            ResourceSlot(court_index=court_index, time_slot_index=slot_index)
            for court_index in range(len(self.courts))
            for slot_index in range(len(time_slots))
        ]

    def schedule(self) -> SchedulerResult:
        """
        Run the assignment.

        Every call starts from an empty grid and an empty rest ledger, so
        repeated calls with the same input return the same result.
        """
        time_slots = self.time_slot_generator.generate(self.game_date)
        resource_slots = self._build_resource_slots(time_slots)
        tracker = RestConstraintTracker(
            game_duration_minutes=self.settings.game_duration,
            min_rest_minutes=self.settings.min_rest_minutes
        )
        sorted_games = self.prioritizer.sort(self.games)

        logger.info(
            "Scheduling %d games on %d courts x %d time slots for %s",
            len(self.games), len(self.courts), len(time_slots), self.game_date
        )

        result = SchedulerResult()

        for game in sorted_games:
            placed = False
            failure_reason = NO_SLOTS_REASON

            for resource_slot in resource_slots:
                if resource_slot.is_occupied:
                    continue

                time_slot = time_slots[resource_slot.time_slot_index]
                start = time_slot.start

                # Home team is checked first, so its conflict wins a tie
                if not tracker.can_play_at(game.home_team.id, start):
                    failure_reason = REST_CONFLICT_REASON.format(team=game.home_team.name)
                    continue

                if not tracker.can_play_at(game.away_team.id, start):
                    failure_reason = REST_CONFLICT_REASON.format(team=game.away_team.name)
                    continue

                resource_slot.is_occupied = True
                tracker.commit(game.home_team.id, start)
                tracker.commit(game.away_team.id, start)

                court = self.courts[resource_slot.court_index]
                result.scheduled.append(ProposedAssignment(
                    game_id=game.id,
                    court=court,
                    scheduled_at=start,
                    game=game,
                    time_slot=time_slot.label
                ))
                logger.debug("Placed %s on %s at %s", game, court.name, time_slot.label)

                placed = True
                break

            if not placed:
                result.unscheduled.append(UnscheduledEntry(game=game, reason=failure_reason))
                logger.debug("Could not place %s: %s", game, failure_reason)

        total_slots = len(resource_slots)
        # Rounded half up
        utilization = (len(result.scheduled) * 200 + total_slots) // (2 * total_slots) if total_slots > 0 else 0

        result.stats = SchedulingStats(
            total_games=len(self.games),
            scheduled_count=len(result.scheduled),
            unscheduled_count=len(result.unscheduled),
            utilization_percent=utilization
        )

        logger.info(
            "Scheduling complete: %d scheduled, %d unscheduled, %d%% utilization",
            result.stats.scheduled_count, result.stats.unscheduled_count, utilization
        )

        return result
