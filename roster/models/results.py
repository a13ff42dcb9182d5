"""
Result types returned by validators, entity transitions and services.

Expected failures (bad input, missing records, duplicate assignments, storage
trouble) travel back to the caller inside these values. Exceptions are kept for
caller bugs such as a blank actor id.
"""

import enum
from typing import Dict, Generic, List, Mapping, Optional, Sequence, TypeVar
from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class FailureKind(str, enum.Enum):
    """Classification of a failed operation."""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    TRANSIENT = "transient"


def _require_text(value: Optional[str], label: str) -> str:
    if value is None or not value.strip():
        raise ValueError(f"{label} cannot be blank.")
    return value


class ValidationResult(BaseModel):
    """Outcome of a validator: a mapping of field name to ordered messages."""

    model_config = ConfigDict(frozen=True)

    errors: Dict[str, List[str]] = Field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @classmethod
    def valid(cls) -> "ValidationResult":
        return cls()

    @classmethod
    def invalid(cls, errors: Mapping[str, Sequence[str]]) -> "ValidationResult":
        """
        Build a failed result from a field -> messages mapping.

        Raises:
            ValueError: If the mapping is empty or any field has no messages
        """
        if not errors:
            raise ValueError("An invalid result needs at least one error.")
        copied = {}
        for field, messages in errors.items():
            _require_text(field, "Field name")
            if not messages:
                raise ValueError(f"Field '{field}' needs at least one message.")
            copied[field] = list(messages)
        return cls(errors=copied)

    @classmethod
    def invalid_field(cls, field: str, message: str) -> "ValidationResult":
        _require_text(field, "Field name")
        _require_text(message, "Error message")
        return cls(errors={field: [message]})

    def messages(self) -> List[str]:
        """All messages flattened in field order, for logging."""
        return [message for messages in self.errors.values() for message in messages]


class OperationResult(BaseModel, Generic[T]):
    """
    Outcome of a domain operation.

    Exactly one of these holds:
    - success is True and data carries the payload (possibly None)
    - success is False, failure_kind is set, and error_messages and/or
      validation_errors describe what went wrong
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    success: bool
    data: Optional[T] = None
    failure_kind: Optional[FailureKind] = None
    error_messages: List[str] = Field(default_factory=list)
    validation_errors: Dict[str, List[str]] = Field(default_factory=dict)

    @classmethod
    def ok(cls, data: Optional[T] = None) -> "OperationResult[T]":
        return cls(success=True, data=data)

    @classmethod
    def fail(
        cls,
        message: str,
        kind: FailureKind = FailureKind.TRANSIENT,
    ) -> "OperationResult[T]":
        _require_text(message, "Error message")
        return cls(success=False, failure_kind=kind, error_messages=[message])

    @classmethod
    def fail_many(
        cls,
        messages: Sequence[str],
        kind: FailureKind = FailureKind.TRANSIENT,
    ) -> "OperationResult[T]":
        if not messages:
            raise ValueError("Error messages cannot be empty.")
        return cls(success=False, failure_kind=kind, error_messages=list(messages))

    @classmethod
    def not_found(cls, message: str) -> "OperationResult[T]":
        return cls.fail(message, kind=FailureKind.NOT_FOUND)

    @classmethod
    def validation_failed(cls, result: ValidationResult) -> "OperationResult[T]":
        if result.is_valid:
            raise ValueError("Cannot build a failure from a valid ValidationResult.")
        return cls(
            success=False,
            failure_kind=FailureKind.VALIDATION,
            validation_errors={k: list(v) for k, v in result.errors.items()},
        )

    @classmethod
    def field_failed(
        cls,
        field: str,
        message: str,
        kind: FailureKind = FailureKind.VALIDATION,
    ) -> "OperationResult[T]":
        """Failure for a single field; CONFLICT is used for duplicate assignments."""
        _require_text(field, "Field name")
        _require_text(message, "Error message")
        return cls(success=False, failure_kind=kind, validation_errors={field: [message]})

    @classmethod
    def conflict(cls, field: str, message: str) -> "OperationResult[T]":
        return cls.field_failed(field, message, kind=FailureKind.CONFLICT)

    def propagate(self) -> "OperationResult":
        """Re-wrap this failure so it can be returned from an operation with another payload type."""
        if self.success:
            raise ValueError("Only failures can be propagated.")
        return OperationResult(
            success=False,
            failure_kind=self.failure_kind,
            error_messages=list(self.error_messages),
            validation_errors={k: list(v) for k, v in self.validation_errors.items()},
        )
