"""
Validation rules for players.

Every rule runs and every failure is collected, so callers can show all field
errors at once.
"""

from datetime import date
from typing import Optional
from urllib.parse import urlparse

from roster.models.entities import Player
from roster.models.results import ValidationResult
from roster.models.schemas import CreatePlayerRequest, UpdatePlayerRequest
from roster.utils.constants import (
    MAX_AGE_IN_YEARS,
    MAX_NAME_LENGTH,
    MAX_PHOTO_URL_LENGTH,
    VALID_GENDER_OPTIONS,
)
from roster.utils.datetime_utils import add_years, utctoday
from roster.validation.common import ErrorMap, add_error, build_result, check_required_text, is_blank


def validate_create_player(
    request: CreatePlayerRequest, today: Optional[date] = None
) -> ValidationResult:
    """
    Validate a create request.

    Args:
        request: Incoming player data
        today: Reference date for date-of-birth checks, defaults to the UTC date

    Returns:
        ValidationResult keyed by field name
    """
    if request is None:
        raise ValueError("Create player request is required.")
    errors: ErrorMap = {}
    _validate_user_id(request.user_id, errors)
    _validate_name(request.name, errors)
    _validate_date_of_birth(request.date_of_birth, errors, today)
    _validate_gender(request.gender, errors)
    _validate_photo_url(request.photo_url, errors)
    return build_result(errors)


def validate_update_player(
    request: UpdatePlayerRequest, today: Optional[date] = None
) -> ValidationResult:
    """Validate an update request; the owning user cannot change so it is not checked."""
    if request is None:
        raise ValueError("Update player request is required.")
    errors: ErrorMap = {}
    _validate_name(request.name, errors)
    _validate_date_of_birth(request.date_of_birth, errors, today)
    _validate_gender(request.gender, errors)
    _validate_photo_url(request.photo_url, errors)
    return build_result(errors)


def validate_player(player: Player, today: Optional[date] = None) -> ValidationResult:
    """Validate a stored or freshly built Player entity, audit fields included."""
    if player is None:
        raise ValueError("Player is required.")
    errors: ErrorMap = {}
    _validate_user_id(player.user_id, errors)
    _validate_name(player.name, errors)
    _validate_date_of_birth(player.date_of_birth, errors, today)
    _validate_gender(player.gender, errors)
    _validate_photo_url(player.photo_url, errors)
    if is_blank(player.created_by):
        add_error(errors, "created_by", "Created by is required.")
    return build_result(errors)


def is_valid_gender(gender: str) -> bool:
    wanted = gender.strip().casefold()
    return any(option.casefold() == wanted for option in VALID_GENDER_OPTIONS)


def is_absolute_http_url(url: str) -> bool:
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def _validate_user_id(user_id: Optional[str], errors: ErrorMap) -> None:
    if is_blank(user_id):
        add_error(errors, "user_id", "User ID is required.")


def _validate_name(name: Optional[str], errors: ErrorMap) -> None:
    check_required_text(
        errors,
        "name",
        name,
        MAX_NAME_LENGTH,
        "Name is required.",
        f"Name cannot exceed {MAX_NAME_LENGTH} characters.",
    )


def _validate_date_of_birth(
    date_of_birth: Optional[date], errors: ErrorMap, today: Optional[date]
) -> None:
    if date_of_birth is None:
        add_error(errors, "date_of_birth", "Date of birth is required.")
        return

    today = today or utctoday()
    if date_of_birth >= today:
        add_error(errors, "date_of_birth", "Date of birth must be in the past.")
        return

    if date_of_birth < add_years(today, -MAX_AGE_IN_YEARS):
        add_error(
            errors,
            "date_of_birth",
            f"Date of birth cannot be more than {MAX_AGE_IN_YEARS} years ago.",
        )


def _validate_gender(gender: Optional[str], errors: ErrorMap) -> None:
    # Optional field
    if is_blank(gender):
        return
    if not is_valid_gender(gender):
        options = ", ".join(VALID_GENDER_OPTIONS)
        add_error(errors, "gender", f"Gender must be one of: {options}.")


def _validate_photo_url(photo_url: Optional[str], errors: ErrorMap) -> None:
    if is_blank(photo_url):
        return

    trimmed = photo_url.strip()
    if len(trimmed) > MAX_PHOTO_URL_LENGTH:
        add_error(
            errors,
            "photo_url",
            f"Photo URL cannot exceed {MAX_PHOTO_URL_LENGTH} characters.",
        )
        return

    if not is_absolute_http_url(trimmed):
        add_error(errors, "photo_url", "Photo URL must be a valid HTTP or HTTPS URL.")
