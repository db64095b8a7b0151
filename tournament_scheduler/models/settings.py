"""
Typed settings for bracket generation and scheduling runs.

Every recognized option is a named field with a documented default.
Field aliases accept the camelCase names used by JSON callers.
"""

import re
from typing import Any, Dict, List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from tournament_scheduler.core.config import (
    DEFAULT_START_TIME, DEFAULT_END_TIME, DEFAULT_TIMEZONE,
    GAME_DURATION_MINUTES, MIN_REST_MINUTES
)
from tournament_scheduler.core.exceptions import InvalidInputError

CLOCK_TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def describe_validation_error(error: ValidationError) -> str:
    messages = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail["loc"])
        messages.append(f"{location}: {detail['msg']}")
    return "; ".join(messages)


class SchedulerSettings(BaseModel):
    """
    Settings for one auto-scheduling run.

    Empty values (None, "", 0) fall back to the defaults, so a caller can
    forward a partially filled form unchanged.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    start_time: str = Field(DEFAULT_START_TIME, alias="startTime")
    end_time: str = Field(DEFAULT_END_TIME, alias="endTime")
    game_duration: int = Field(GAME_DURATION_MINUTES, alias="gameDuration")
    min_rest_minutes: int = Field(MIN_REST_MINUTES, alias="minRestMinutes")
    timezone: str = DEFAULT_TIMEZONE

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def _check_clock_time(cls, value: Any, info) -> Any:
        if not value:
            return DEFAULT_START_TIME if info.field_name == "start_time" else DEFAULT_END_TIME
        if not isinstance(value, str) or not CLOCK_TIME_PATTERN.match(value.strip()):
            raise ValueError(f"expected HH:MM (24-hour), got {value!r}")
        return value.strip()

    @field_validator("game_duration", "min_rest_minutes", mode="before")
    @classmethod
    def _default_minutes(cls, value: Any, info) -> Any:
        if not value:
            return GAME_DURATION_MINUTES if info.field_name == "game_duration" else MIN_REST_MINUTES
        return value

    @field_validator("game_duration", "min_rest_minutes")
    @classmethod
    def _check_minutes(cls, value: int) -> int:
        if value < 0:
            raise ValueError("must not be negative")
        return value

    @field_validator("timezone", mode="before")
    @classmethod
    def _check_timezone(cls, value: Any) -> Any:
        if not value:
            return DEFAULT_TIMEZONE
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError, TypeError):
            raise ValueError(f"unknown timezone {value!r}")
        return value

    @classmethod
    def from_options(cls, options: Optional[Dict[str, Any]] = None) -> "SchedulerSettings":
        """Build settings from a loose dict, raising InvalidInputError on bad values."""
        try:
            return cls.model_validate(options or {})
        except ValidationError as e:
            raise InvalidInputError(f"Invalid scheduler settings: {describe_validation_error(e)}")

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class GenerationSettings(BaseModel):
    """Optional settings for a pool or bracket generation request."""
    model_config = ConfigDict(populate_by_name=True)

    pool_code: Optional[str] = Field(None, alias="poolCode")
    age_group: Optional[str] = Field(None, alias="ageGroup")
    division: Optional[str] = None
    seeds: Optional[List[str]] = None

    @classmethod
    def from_options(cls, options: Optional[Dict[str, Any]] = None) -> "GenerationSettings":
        try:
            return cls.model_validate(options or {})
        except ValidationError as e:
            raise InvalidInputError(f"Invalid generation settings: {describe_validation_error(e)}")


class PoolSettings(BaseModel):
    """Recorded on a ROUND_ROBIN or POOL_PLAY bracket."""
    model_config = ConfigDict(populate_by_name=True)

    pool_code: Optional[str] = Field(None, alias="poolCode")
    team_count: int = Field(alias="teamCount")
    games_per_team: int = Field(alias="gamesPerTeam")


class SingleElimSettings(BaseModel):
    """Recorded on a SINGLE_ELIM bracket. ``seeds`` is the pairing order used."""
    model_config = ConfigDict(populate_by_name=True)

    team_count: int = Field(alias="teamCount")
    rounds: int
    seeds: List[str] = Field(default_factory=list)
