"""
Tests for the Validation Framework.

Tests validators, composition, and convenience functions.
"""
import pytest

from strategy_builder.shared.application.validation import (
    All,
    ChoicesValidator,
    RangeValidator,
    RequiredValidator,
    TypeValidator,
    LengthValidator,
    ValidationResult,
    validate,
)


# =============================================================================
# ValidationResult Tests
# =============================================================================

class TestValidationResult:
    """Tests for ValidationResult dataclass."""

    def test_default_is_valid(self):
        """Test that default result is valid."""
        result = ValidationResult()
        assert result.valid is True
        assert result.errors == []
        assert result.warnings == []

    def test_add_error_with_field_name(self):
        """Test adding error includes field name."""
        result = ValidationResult(field_name="period")
        result.add_error("is required")
        assert result.valid is False
        assert "period: is required" in result.errors

    def test_add_warning(self):
        """Test adding a warning doesn't affect validity."""
        result = ValidationResult()
        result.add_warning("unusually long period")
        assert result.valid is True
        assert result.warnings == ["unusually long period"]

    def test_merge(self):
        """Test merging results."""
        first = ValidationResult()
        first.add_error("error 1")
        second = ValidationResult()
        second.add_error("error 2")
        second.add_warning("warning 1")

        first.merge(second)
        assert first.valid is False
        assert first.errors == ["error 1", "error 2"]
        assert first.warnings == ["warning 1"]


# =============================================================================
# Validator Tests
# =============================================================================

class TestRequiredValidator:
    """Tests for RequiredValidator."""

    @pytest.mark.parametrize("value", [None, "", "   ", [], (), {}, set()])
    def test_empty_values_are_invalid(self, value):
        """Test None, blank strings and empty collections fail."""
        assert not RequiredValidator().validate(value, "field").valid

    @pytest.mark.parametrize("value", ["hello", 0, False, [1], ("a",)])
    def test_values_are_valid(self, value):
        """Test falsy scalars still count as present."""
        assert RequiredValidator().validate(value, "field").valid

    def test_custom_message(self):
        result = RequiredValidator(message="cannot be blank").validate(None, "field")
        assert "cannot be blank" in result.errors[0]


class TestRangeValidator:
    """Tests for RangeValidator."""

    def test_bounds_are_inclusive(self):
        validator = RangeValidator(min_value=1, max_value=200)
        assert validator.validate(1, "period").valid
        assert validator.validate(200, "period").valid

    def test_below_min(self):
        result = RangeValidator(min_value=1).validate(0, "period")
        assert not result.valid
        assert "at least 1" in result.errors[0]

    def test_above_max(self):
        result = RangeValidator(max_value=100).validate(101, "period")
        assert "at most 100" in result.errors[0]

    def test_none_is_valid(self):
        """Test None passes (handled by RequiredValidator)."""
        assert RangeValidator(min_value=0).validate(None, "field").valid

    def test_numeric_string_is_accepted(self):
        assert RangeValidator(min_value=0).validate("12.5", "field").valid

    def test_non_numeric(self):
        result = RangeValidator(min_value=0).validate("abc", "field")
        assert "must be a number" in result.errors[0]


class TestChoicesValidator:
    """Tests for ChoicesValidator."""

    def test_single_choice(self):
        validator = ChoicesValidator(["sma", "ema"])
        assert validator.validate("ema", "kind").valid
        assert not validator.validate("wma", "kind").valid

    def test_many_reports_each_bad_item(self):
        """Test multiselect values check every item."""
        validator = ChoicesValidator(["mon", "tue", "wed"], many=True)
        assert validator.validate(("mon", "wed"), "days").valid

        result = validator.validate(["mon", "sun", "xyz"], "days")
        assert len(result.errors) == 2

    def test_many_requires_sequence(self):
        result = ChoicesValidator(["a"], many=True).validate("a", "field")
        assert "must be a list" in result.errors[0]


class TestTypeValidator:

    def test_tuple_of_types(self):
        validator = TypeValidator((int, float))
        assert validator.validate(3.14, "value").valid
        result = validator.validate("3", "value")
        assert "must be int or float" in result.errors[0]

    def test_bool_is_not_a_number(self):
        assert not TypeValidator((int, float)).validate(True, "period").valid
        assert TypeValidator(bool).validate(True, "flag").valid


class TestLengthValidator:

    def test_max_length(self):
        validator = LengthValidator(max_length=5)
        assert validator.validate("short", "name").valid
        assert validator.validate(None, "name").valid
        result = validator.validate("too long", "name")
        assert result.errors == ["name: length 8 is above maximum 5"]

    def test_min_length_ignores_surrounding_space(self):
        assert not LengthValidator(min_length=2).validate("  a  ", "name").valid


# =============================================================================
# Composition Tests
# =============================================================================

class TestComposition:
    """Tests for All and the convenience function."""

    def test_all_collects_every_error(self):
        validator = All(TypeValidator(int), RangeValidator(min_value=10))
        result = validator.validate(2.5, "period")
        assert len(result.errors) == 2

    def test_stop_on_first_error(self):
        result = validate(None, [RequiredValidator(), RangeValidator(min_value=1)], "period",
                          stop_on_first_error=True)
        assert len(result.errors) == 1

    def test_single_validator(self):
        assert validate(5, RangeValidator(max_value=10)).valid

    def test_field_name_prefix(self):
        result = validate(0, [RangeValidator(min_value=1)], field_name="period")
        assert result.errors == ["period: must be at least 1"]
