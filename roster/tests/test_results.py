"""
Tests for ValidationResult and OperationResult.
"""
import pytest

from roster.models.results import FailureKind, OperationResult, ValidationResult


class TestValidationResult:
    """Tests for building validation outcomes."""

    def test_valid_has_no_errors(self):
        result = ValidationResult.valid()
        assert result.is_valid
        assert result.errors == {}

    def test_invalid_field(self):
        result = ValidationResult.invalid_field("name", "Name is required.")
        assert not result.is_valid
        assert result.errors == {"name": ["Name is required."]}

    def test_invalid_copies_mapping(self):
        source = {"goals": ["Goals must be a non-negative integer."]}
        result = ValidationResult.invalid(source)
        source["goals"].append("changed")
        assert result.errors["goals"] == ["Goals must be a non-negative integer."]

    def test_invalid_rejects_empty_mapping(self):
        with pytest.raises(ValueError):
            ValidationResult.invalid({})

    def test_invalid_rejects_field_without_messages(self):
        with pytest.raises(ValueError):
            ValidationResult.invalid({"name": []})

    @pytest.mark.parametrize("field,message", [("", "msg"), ("  ", "msg"), ("name", ""), ("name", "   ")])
    def test_invalid_field_rejects_blank_input(self, field, message):
        with pytest.raises(ValueError):
            ValidationResult.invalid_field(field, message)

    def test_messages_flattens_in_field_order(self):
        result = ValidationResult.invalid({"a": ["one", "two"], "b": ["three"]})
        assert result.messages() == ["one", "two", "three"]


class TestOperationResult:
    """Tests for the success/failure envelope."""

    def test_ok_carries_data(self):
        result = OperationResult.ok(42)
        assert result.success
        assert result.data == 42
        assert result.failure_kind is None
        assert result.error_messages == []

    def test_ok_without_data(self):
        result = OperationResult.ok()
        assert result.success
        assert result.data is None

    def test_fail_defaults_to_transient(self):
        result = OperationResult.fail("Unable to save player. Please try again.")
        assert not result.success
        assert result.failure_kind == FailureKind.TRANSIENT
        assert result.error_messages == ["Unable to save player. Please try again."]

    def test_fail_rejects_blank_message(self):
        with pytest.raises(ValueError):
            OperationResult.fail("  ")

    def test_fail_many_rejects_empty(self):
        with pytest.raises(ValueError):
            OperationResult.fail_many([])

    def test_not_found(self):
        result = OperationResult.not_found("Player with ID 9 could not be found.")
        assert result.failure_kind == FailureKind.NOT_FOUND

    def test_validation_failed_copies_errors(self):
        validation = ValidationResult.invalid_field("name", "Name is required.")
        result = OperationResult.validation_failed(validation)
        assert not result.success
        assert result.failure_kind == FailureKind.VALIDATION
        assert result.validation_errors == {"name": ["Name is required."]}

    def test_validation_failed_rejects_valid_result(self):
        with pytest.raises(ValueError):
            OperationResult.validation_failed(ValidationResult.valid())

    def test_conflict_uses_field_key(self):
        result = OperationResult.conflict("DuplicateAssignment", "Already assigned.")
        assert result.failure_kind == FailureKind.CONFLICT
        assert result.validation_errors == {"DuplicateAssignment": ["Already assigned."]}

    def test_propagate_keeps_failure_details(self):
        original = OperationResult.field_failed("left_date", "Left date cannot be in the future.")
        propagated = original.propagate()
        assert not propagated.success
        assert propagated.failure_kind == FailureKind.VALIDATION
        assert propagated.validation_errors == original.validation_errors

    def test_propagate_rejects_success(self):
        with pytest.raises(ValueError):
            OperationResult.ok(1).propagate()

    def test_results_are_immutable(self):
        result = OperationResult.ok(1)
        with pytest.raises(Exception):
            result.success = False
