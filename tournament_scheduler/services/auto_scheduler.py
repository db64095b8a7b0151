"""
Preview and apply entry points for the auto-scheduler.
"""

from typing import Any, Dict, List, Optional, Tuple

from tournament_scheduler.models import (
    Court, Game, GameStatus, SchedulerResult, SchedulerSettings
)
from tournament_scheduler.core.config import UNKNOWN_VENUE_NAME
from tournament_scheduler.core.exceptions import InvalidInputError, NotFoundError
from tournament_scheduler.core.logging_config import get_logger
from tournament_scheduler.services.scheduler import AssignmentEngine
from tournament_scheduler.services.schedule_store import ScheduleStore
from tournament_scheduler.services.time_slots import parse_date, format_instant

logger = get_logger(__name__)

MODE_PREVIEW = "PREVIEW"
MODE_APPLY = "APPLY"


def normalize_mode(mode: Optional[str]) -> str:
    mode = (mode or MODE_PREVIEW).upper()
    if mode not in (MODE_PREVIEW, MODE_APPLY):
        raise InvalidInputError(f"Invalid mode {mode!r}. Must be PREVIEW or APPLY")
    return mode


def format_preview(result: SchedulerResult, settings: SchedulerSettings) -> Dict[str, Any]:
    """Proposed schedule, nothing saved."""
    return {
        "success": True,
        "mode": MODE_PREVIEW,
        "scheduled": [
            {
                "gameId": s.game_id,
                "courtId": s.court.id,
                "courtName": s.court.name,
                "venueName": s.court.venue_name or UNKNOWN_VENUE_NAME,
                "scheduledAt": format_instant(s.scheduled_at),
                "timeSlot": s.time_slot,
                "homeTeam": s.game.home_team.name,
                "awayTeam": s.game.away_team.name,
                "gameType": s.game.game_type_name,
                "ageGroup": s.game.age_group,
                "division": s.game.division,
            }
            for s in result.scheduled
        ],
        "unscheduled": [
            {
                "gameId": u.game.id,
                "homeTeam": u.game.home_team.name,
                "awayTeam": u.game.away_team.name,
                "gameType": u.game.game_type_name,
                "reason": u.reason,
            }
            for u in result.unscheduled
        ],
        "stats": result.stats.to_dict(),
        "settings": settings.to_dict(),
    }


def format_apply(result: SchedulerResult) -> Dict[str, Any]:
    """Confirmation after the batch was saved."""
    return {
        "success": True,
        "message": f"Successfully scheduled {result.stats.scheduled_count} games",
        "stats": result.stats.to_dict(),
        "unscheduled": [
            {
                "gameId": u.game.id,
                "homeTeam": u.game.home_team.name,
                "awayTeam": u.game.away_team.name,
                "reason": u.reason,
            }
            for u in result.unscheduled
        ],
    }


class AutoScheduleService:
    """
    Runs the assignment engine for one event day.

    All input checks happen before the engine runs. In APPLY mode the whole
    proposal is written through the store in one batch; if that write fails
    the error propagates and nothing is saved.

    The engine only sees the games it is placing, not courts already booked
    by earlier applies. A second APPLY for a day that already has saved
    games proposes the same first cells again and the store rejects the
    whole batch, so games added later should be scheduled on another day
    or previewed with a window that avoids the booked times.
    """

    def __init__(self, store: ScheduleStore):
        self.store = store

    def _collect_inputs(self, event_id: str, date_str: str):
        if not event_id:
            raise InvalidInputError("Event ID is required")
        if not date_str:
            raise InvalidInputError("Date is required")

        game_date = parse_date(date_str)

        event = self.store.get_event(event_id)
        if event is None:
            raise NotFoundError("Event", event_id)

        games: List[Game] = [
            game for game in self.store.list_games(event_id)
            if not game.is_scheduled and game.status != GameStatus.CANCELED
        ]
        courts: List[Court] = event.get_courts()

        if not courts:
            raise InvalidInputError(
                "No courts available for this event. Please add venues with courts first."
            )
        if not games:
            raise InvalidInputError("No unscheduled games found for this event.")

        return games, courts, game_date

    def plan(self, event_id: str, date_str: str,
             settings: Optional[Dict[str, Any]] = None) -> Tuple[SchedulerResult, SchedulerSettings]:
        """
        Run the engine for one event day without saving anything.

        Returns:
            The engine result and the settings it ran with
        """
        scheduler_settings = SchedulerSettings.from_options(settings)
        games, courts, game_date = self._collect_inputs(event_id, date_str)

        engine = AssignmentEngine(games, courts, game_date, scheduler_settings)
        return engine.schedule(), scheduler_settings

    def commit(self, result: SchedulerResult) -> Dict[str, Any]:
        """Save every proposed assignment as one batch."""
        self.store.apply_assignments(result.scheduled)
        logger.info("Applied %d assignments", result.stats.scheduled_count)
        return format_apply(result)

    def run(self, event_id: str, date_str: str, settings: Optional[Dict[str, Any]] = None,
            mode: str = MODE_PREVIEW) -> Dict[str, Any]:
        """
        Schedule the event's unscheduled games for one day.

        Args:
            event_id: Event whose games and venues are used
            date_str: Tournament day, YYYY-MM-DD
            settings: startTime, endTime, gameDuration, minRestMinutes, timezone
            mode: PREVIEW (nothing saved) or APPLY (saved as one batch)

        Returns:
            Preview or apply payload
        """
        mode = normalize_mode(mode)
        result, scheduler_settings = self.plan(event_id, date_str, settings)

        if mode == MODE_APPLY:
            return self.commit(result)

        return format_preview(result, scheduler_settings)

    def preview(self, event_id: str, date_str: str,
                settings: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self.run(event_id, date_str, settings, mode=MODE_PREVIEW)

    def apply(self, event_id: str, date_str: str,
              settings: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self.run(event_id, date_str, settings, mode=MODE_APPLY)
