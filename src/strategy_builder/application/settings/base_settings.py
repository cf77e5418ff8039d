"""
Base Settings

Provides a standardized foundation for engine settings dataclasses.

Features:
- Dataclass-based schema with type safety
- Backwards-compatible loading (handles missing and unknown fields)
- Field validation through the shared validation framework

Usage:
    1. Create a dataclass for your settings schema deriving BaseSettings
    2. Declare fields with validated_field() to attach rules
    3. Call validate() before applying the settings
"""
from dataclasses import dataclass, asdict, fields, field
from typing import Optional, Dict, Any, List, Union

from strategy_builder.shared.application.validation import (
    ChoicesValidator,
    LengthValidator,
    RangeValidator,
    RequiredValidator,
    ValidationResult,
    Validator,
    validate,
)


@dataclass
class FieldValidator:
    """
    Validation rules for a settings field, stored in the field metadata.

    Example:
        @dataclass
        class MySettings(BaseSettings):
            max_undo_steps: int = field(default=100, metadata={
                'validator': FieldValidator(min_value=1, max_value=10000)
            })
    """
    min_value: Optional[Union[int, float]] = None
    max_value: Optional[Union[int, float]] = None
    choices: Optional[List[Any]] = None
    max_length: Optional[int] = None
    required: bool = False
    allow_none: bool = True

    def rules(self) -> List[Validator]:
        """Framework validators equivalent to these settings."""
        rules: List[Validator] = []
        if self.required:
            rules.append(RequiredValidator("required field cannot be empty"))
        if self.min_value is not None or self.max_value is not None:
            rules.append(RangeValidator(self.min_value, self.max_value))
        if self.choices is not None:
            rules.append(ChoicesValidator(self.choices))
        if self.max_length is not None:
            rules.append(LengthValidator(max_length=self.max_length))
        return rules

    def validate(self, value: Any, field_name: str) -> ValidationResult:
        if value is None and not self.allow_none:
            result = ValidationResult(field_name=field_name)
            result.add_error("cannot be None")
            return result
        return validate(value, self.rules(), field_name=field_name, stop_on_first_error=True)


def validated_field(
    default: Any = None,
    *,
    min_value: Optional[Union[int, float]] = None,
    max_value: Optional[Union[int, float]] = None,
    choices: Optional[List[Any]] = None,
    max_length: Optional[int] = None,
    required: bool = False,
    allow_none: bool = True,
    **kwargs
):
    """
    Create a dataclass field with validation metadata.

    Example:
        @dataclass
        class MySettings(BaseSettings):
            log_level: str = validated_field('INFO', choices=['DEBUG', 'INFO'])
    """
    validator = FieldValidator(
        min_value=min_value,
        max_value=max_value,
        choices=choices,
        max_length=max_length,
        required=required,
        allow_none=allow_none,
    )

    metadata = kwargs.pop('metadata', {})
    metadata['validator'] = validator

    return field(default=default, metadata=metadata, **kwargs)


@dataclass
class BaseSettings:
    """
    Base class for all settings dataclasses.

    Subclasses should define fields with default values for backwards compatibility.
    Fields can optionally include validation using validated_field() or FieldValidator.
    """

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings to dictionary for storage."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BaseSettings':
        """
        Create settings from dictionary.

        Missing keys fall back to defaults and unknown keys are ignored.
        """
        defaults = cls()

        valid_keys = {f.name for f in fields(cls)}
        filtered_data = {k: v for k, v in data.items() if k in valid_keys}

        merged = asdict(defaults)
        merged.update(filtered_data)

        return cls(**merged)

    def validate(self) -> ValidationResult:
        """
        Validate all settings fields against their validators.

        Fields without validators are skipped (assumed valid).

        Returns:
            ValidationResult with valid=True if all validations pass,
            otherwise valid=False with error messages.
        """
        result = ValidationResult()

        for f in fields(self):
            validator = f.metadata.get('validator') if f.metadata else None
            if isinstance(validator, FieldValidator):
                result.merge(validator.validate(getattr(self, f.name), f.name))

        return result

    def validate_field(self, field_name: str) -> ValidationResult:
        """
        Validate a single field by name.

        Raises:
            AttributeError: If field doesn't exist
        """
        value = getattr(self, field_name)

        for f in fields(self):
            if f.name == field_name:
                validator = f.metadata.get('validator') if f.metadata else None
                if isinstance(validator, FieldValidator):
                    return validator.validate(value, field_name)
                return ValidationResult()

        raise AttributeError(f"Field '{field_name}' not found in {self.__class__.__name__}")

    def is_valid(self) -> bool:
        return self.validate().valid
