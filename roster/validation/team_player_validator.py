"""
Validation rules for team memberships.
"""

from datetime import datetime
from typing import Optional

from roster.models.entities import TeamPlayer
from roster.models.results import ValidationResult
from roster.models.schemas import CreateTeamPlayerRequest
from roster.utils.constants import (
    MAX_CHAMPIONSHIP_NAME_LENGTH,
    MAX_FUTURE_YEARS_FOR_JOINED_DATE,
    MAX_TEAM_NAME_LENGTH,
)
from roster.utils.datetime_utils import add_years, ensure_utc, utcnow
from roster.validation.common import ErrorMap, add_error, build_result, check_required_text, is_blank


def validate_create_team_player(
    request: CreateTeamPlayerRequest, now: Optional[datetime] = None
) -> ValidationResult:
    """
    Validate a request to add a player to a team.

    Args:
        request: Incoming membership data
        now: Reference time, defaults to the current UTC time

    Returns:
        ValidationResult keyed by field name
    """
    if request is None:
        raise ValueError("Create team player request is required.")
    errors: ErrorMap = {}
    _validate_team_name(request.team_name, errors)
    _validate_championship_name(request.championship_name, errors)
    _validate_joined_date(request.joined_date, errors, now)
    return build_result(errors)


def validate_left_date(
    left_date: Optional[datetime],
    joined_date: datetime,
    now: Optional[datetime] = None,
) -> ValidationResult:
    """Check a left date against the membership's joined date; None means still active."""
    errors: ErrorMap = {}
    _validate_left_date(left_date, joined_date, errors, now)
    return build_result(errors)


def validate_team_player(
    team_player: TeamPlayer, now: Optional[datetime] = None
) -> ValidationResult:
    """Validate a TeamPlayer entity, including its left date when set."""
    if team_player is None:
        raise ValueError("Team player is required.")
    errors: ErrorMap = {}
    _validate_team_name(team_player.team_name, errors)
    _validate_championship_name(team_player.championship_name, errors)
    _validate_joined_date(team_player.joined_date, errors, now)
    _validate_left_date(team_player.left_date, team_player.joined_date, errors, now)
    if is_blank(team_player.created_by):
        add_error(errors, "created_by", "Created by is required.")
    return build_result(errors)


def _validate_team_name(team_name: Optional[str], errors: ErrorMap) -> None:
    check_required_text(
        errors,
        "team_name",
        team_name,
        MAX_TEAM_NAME_LENGTH,
        "Team name is required.",
        f"Team name must not exceed {MAX_TEAM_NAME_LENGTH} characters.",
    )


def _validate_championship_name(championship_name: Optional[str], errors: ErrorMap) -> None:
    check_required_text(
        errors,
        "championship_name",
        championship_name,
        MAX_CHAMPIONSHIP_NAME_LENGTH,
        "Championship name is required.",
        f"Championship name must not exceed {MAX_CHAMPIONSHIP_NAME_LENGTH} characters.",
    )


def _validate_joined_date(
    joined_date: Optional[datetime], errors: ErrorMap, now: Optional[datetime]
) -> None:
    if joined_date is None:
        add_error(errors, "joined_date", "Joined date is required.")
        return

    now = ensure_utc(now) if now is not None else utcnow()
    latest = add_years(now, MAX_FUTURE_YEARS_FOR_JOINED_DATE)
    if ensure_utc(joined_date) > latest:
        add_error(
            errors,
            "joined_date",
            f"Joined date cannot be more than {MAX_FUTURE_YEARS_FOR_JOINED_DATE} year in the future.",
        )


def _validate_left_date(
    left_date: Optional[datetime],
    joined_date: Optional[datetime],
    errors: ErrorMap,
    now: Optional[datetime],
) -> None:
    if left_date is None:
        return

    now = ensure_utc(now) if now is not None else utcnow()
    left = ensure_utc(left_date)
    # Both rules are reported together
    if joined_date is not None and left <= ensure_utc(joined_date):
        add_error(errors, "left_date", "Left date must be after the joined date.")
    if left > now:
        add_error(errors, "left_date", "Left date cannot be in the future.")
