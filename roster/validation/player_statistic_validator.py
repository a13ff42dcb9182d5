"""
Validation rules for per-game statistics.
"""

from datetime import date
from typing import Optional, Union

from roster.models.entities import PlayerStatistic
from roster.models.results import ValidationResult
from roster.models.schemas import CreatePlayerStatisticRequest, UpdatePlayerStatisticRequest
from roster.utils.constants import MAX_JERSEY_NUMBER, MAX_MINUTES_PLAYED, MIN_JERSEY_NUMBER
from roster.utils.datetime_utils import utctoday
from roster.validation.common import ErrorMap, add_error, build_result, is_blank

StatisticInput = Union[CreatePlayerStatisticRequest, UpdatePlayerStatisticRequest, PlayerStatistic]


def validate_create_player_statistic(
    request: CreatePlayerStatisticRequest, today: Optional[date] = None
) -> ValidationResult:
    if request is None:
        raise ValueError("Create player statistic request is required.")
    return _validate_fields(request, today)


def validate_update_player_statistic(
    request: UpdatePlayerStatisticRequest, today: Optional[date] = None
) -> ValidationResult:
    if request is None:
        raise ValueError("Update player statistic request is required.")
    return _validate_fields(request, today)


def validate_player_statistic(
    statistic: PlayerStatistic, today: Optional[date] = None
) -> ValidationResult:
    if statistic is None:
        raise ValueError("Player statistic is required.")
    result = _validate_fields(statistic, today)
    if is_blank(statistic.created_by):
        errors = {k: list(v) for k, v in result.errors.items()}
        add_error(errors, "created_by", "Created by is required.")
        return build_result(errors)
    return result


def _validate_fields(source: StatisticInput, today: Optional[date]) -> ValidationResult:
    errors: ErrorMap = {}

    if source.team_player_id <= 0:
        add_error(
            errors,
            "team_player_id",
            "Team player ID is required and must be a positive integer.",
        )

    if source.game_date is None:
        add_error(errors, "game_date", "Game date is required.")
    elif source.game_date > (today or utctoday()):
        add_error(errors, "game_date", "Game date cannot be in the future.")

    if source.minutes_played < 0:
        add_error(errors, "minutes_played", "Minutes played must be a non-negative integer.")
    elif source.minutes_played > MAX_MINUTES_PLAYED:
        add_error(
            errors,
            "minutes_played",
            f"Minutes played must not exceed {MAX_MINUTES_PLAYED}.",
        )

    if source.jersey_number < MIN_JERSEY_NUMBER:
        add_error(errors, "jersey_number", "Jersey number must be a positive integer.")
    elif source.jersey_number > MAX_JERSEY_NUMBER:
        add_error(
            errors,
            "jersey_number",
            f"Jersey number must not exceed {MAX_JERSEY_NUMBER}.",
        )

    if source.goals < 0:
        add_error(errors, "goals", "Goals must be a non-negative integer.")
    if source.assists < 0:
        add_error(errors, "assists", "Assists must be a non-negative integer.")

    return build_result(errors)
