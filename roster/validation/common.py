"""
Helpers shared by the entity validators.
"""

from typing import Dict, List, Optional

from roster.models.results import ValidationResult

ErrorMap = Dict[str, List[str]]


def add_error(errors: ErrorMap, field: str, message: str) -> None:
    """Append a message to a field, keeping insertion order."""
    errors.setdefault(field, []).append(message)


def build_result(errors: ErrorMap) -> ValidationResult:
    if not errors:
        return ValidationResult.valid()
    return ValidationResult.invalid(errors)


def is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def check_required_text(
    errors: ErrorMap,
    field: str,
    value: Optional[str],
    max_length: int,
    required_message: str,
    too_long_message: str,
) -> None:
    """Non-blank and at most max_length characters once trimmed."""
    if is_blank(value):
        add_error(errors, field, required_message)
        return
    if len(value.strip()) > max_length:
        add_error(errors, field, too_long_message)
