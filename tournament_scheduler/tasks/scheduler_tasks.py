"""
Celery tasks for auto-scheduling.
"""

from tournament_scheduler.core.celery_app import celery_app
from tournament_scheduler.core.logging_config import get_logger
from tournament_scheduler.services.auto_scheduler import (
    AutoScheduleService, MODE_APPLY, format_preview, normalize_mode
)
from tournament_scheduler.services.schedule_store import InMemoryScheduleStore
from tournament_scheduler.services.validator import ScheduleValidator
from datetime import datetime
import traceback

logger = get_logger(__name__)


def validation_summary(validation_result) -> dict:
    return {
        "is_valid": validation_result.is_valid,
        "hard_violations": len(validation_result.hard_constraint_violations),
        "soft_violations": len(validation_result.soft_constraint_violations),
        "total_penalty": validation_result.total_penalty_score
    }


@celery_app.task(bind=True, name="auto_schedule")
def auto_schedule_task(self, snapshot, event_id, date, settings=None, mode="PREVIEW"):
    """
    Async task to auto-schedule one event day.

    Args:
        snapshot: Tournament snapshot (events, teams, games, brackets)
        event_id: Event to schedule
        date: Tournament day, YYYY-MM-DD
        settings: Scheduler settings (camelCase keys)
        mode: PREVIEW or APPLY

    Returns:
        dict: Preview or apply payload plus validation results. In APPLY
        mode the updated snapshot is included under "snapshot".
    """
    try:
        mode = normalize_mode(mode)

        self.update_state(
            state="PROGRESS",
            meta={"status": "Loading tournament snapshot..."}
        )

        start_time = datetime.now()

        store = InMemoryScheduleStore.from_snapshot(snapshot)
        service = AutoScheduleService(store)

        self.update_state(
            state="PROGRESS",
            meta={"status": f"Scheduling event {event_id} on {date}..."}
        )

        result, scheduler_settings = service.plan(event_id, date, settings)

        self.update_state(
            state="PROGRESS",
            meta={"status": "Validating schedule..."}
        )

        validator = ScheduleValidator(scheduler_settings)
        validation_result = validator.validate_result(result)

        if mode == MODE_APPLY:
            response = service.commit(result)
            response["snapshot"] = store.to_snapshot()
        else:
            response = format_preview(result, scheduler_settings)

        response["validation"] = validation_summary(validation_result)
        response["generation_time"] = (datetime.now() - start_time).total_seconds()
        return response

    except Exception as e:
        error_trace = traceback.format_exc()
        logger.error("Error in auto_schedule_task: %s", error_trace)

        return {
            "success": False,
            "message": f"Auto-scheduling failed: {str(e)}",
            "error": str(e),
            "traceback": error_trace
        }
