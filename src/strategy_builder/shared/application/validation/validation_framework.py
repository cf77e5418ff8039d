"""
Validation Framework

Composable value checks shared by block property validation and the
settings layer.

Usage:
    result = validate(prop.value, [
        TypeValidator((int, float)),
        RangeValidator(min_value=1, max_value=200),
    ], field_name="period", stop_on_first_error=True)
    if not result.valid:
        report(result.errors)
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional, Type, Union


@dataclass
class ValidationResult:
    """
    Outcome of one or more checks.

    Attributes:
        valid: False once any error was added
        errors: Blocking messages, prefixed with field_name when set
        warnings: Non-blocking messages
        field_name: Name prefixed to messages
    """
    valid: bool = True
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    field_name: Optional[str] = None

    def _prefixed(self, message: str) -> str:
        if self.field_name and not message.startswith(self.field_name):
            return f"{self.field_name}: {message}"
        return message

    def add_error(self, message: str) -> None:
        self.errors.append(self._prefixed(message))
        self.valid = False

    def add_warning(self, message: str) -> None:
        self.warnings.append(self._prefixed(message))

    def merge(self, other: 'ValidationResult') -> None:
        if not other.valid:
            self.valid = False
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)

    def __bool__(self) -> bool:
        return self.valid


class Validator(ABC):
    """A single rule. None values pass every rule except RequiredValidator."""

    @abstractmethod
    def validate(self, value: Any, field_name: str = "") -> ValidationResult:
        pass

    def __call__(self, value: Any, field_name: str = "") -> ValidationResult:
        return self.validate(value, field_name)


class RequiredValidator(Validator):
    """None, blank strings and empty collections are missing."""

    def __init__(self, message: str = "is required"):
        self.message = message

    def validate(self, value: Any, field_name: str = "") -> ValidationResult:
        result = ValidationResult(field_name=field_name)
        if value is None:
            result.add_error(self.message)
        elif isinstance(value, str) and not value.strip():
            result.add_error(self.message)
        elif isinstance(value, (list, tuple, dict, set)) and len(value) == 0:
            result.add_error(self.message)
        return result


class RangeValidator(Validator):
    """
    Inclusive numeric bounds; either bound may be None.

    Numeric strings are converted before comparing.
    """

    def __init__(
        self,
        min_value: Optional[Union[int, float]] = None,
        max_value: Optional[Union[int, float]] = None,
        message: Optional[str] = None,
    ):
        self.min_value = min_value
        self.max_value = max_value
        self.message = message

    def validate(self, value: Any, field_name: str = "") -> ValidationResult:
        result = ValidationResult(field_name=field_name)
        if value is None:
            return result

        try:
            number = float(value)
        except (TypeError, ValueError):
            result.add_error(f"must be a number, got {type(value).__name__}")
            return result

        if self.min_value is not None and number < self.min_value:
            result.add_error(self.message or f"must be at least {self.min_value}")
        if self.max_value is not None and number > self.max_value:
            result.add_error(self.message or f"must be at most {self.max_value}")
        return result


class ChoicesValidator(Validator):
    """
    Value must be one of the choices.

    With many=True the value is a list or tuple and every item is checked.
    """

    def __init__(self, choices: Iterable[Any], message: Optional[str] = None, many: bool = False):
        self.choices = list(choices)
        self.message = message
        self.many = many

    def _describe(self) -> str:
        return ", ".join(repr(c) for c in sorted(str(c) for c in self.choices))

    def validate(self, value: Any, field_name: str = "") -> ValidationResult:
        result = ValidationResult(field_name=field_name)
        if value is None:
            return result

        if self.many:
            if not isinstance(value, (list, tuple)):
                result.add_error(f"must be a list, got {type(value).__name__}")
                return result
            for item in value:
                if item not in self.choices:
                    result.add_error(self.message or f"'{item}' must be one of: {self._describe()}")
            return result

        if value not in self.choices:
            result.add_error(self.message or f"'{value}' must be one of: {self._describe()}")
        return result


class TypeValidator(Validator):
    """
    Value must be an instance of the expected type(s).

    bool is rejected where int is expected unless bool itself is listed.
    """

    def __init__(self, expected_type: Union[Type, tuple], message: Optional[str] = None):
        self.expected_type = expected_type if isinstance(expected_type, tuple) else (expected_type,)
        self.message = message

    def validate(self, value: Any, field_name: str = "") -> ValidationResult:
        result = ValidationResult(field_name=field_name)
        if value is None:
            return result

        matches = isinstance(value, self.expected_type)
        if isinstance(value, bool) and bool not in self.expected_type:
            matches = False
        if not matches:
            names = " or ".join(t.__name__ for t in self.expected_type)
            result.add_error(self.message or f"must be {names}, got {type(value).__name__}")
        return result


class LengthValidator(Validator):
    """Upper and lower bounds on len(value); stripped for strings."""

    def __init__(self, min_length: Optional[int] = None, max_length: Optional[int] = None):
        self.min_length = min_length
        self.max_length = max_length

    def validate(self, value: Any, field_name: str = "") -> ValidationResult:
        result = ValidationResult(field_name=field_name)
        if value is None or not hasattr(value, "__len__"):
            return result

        length = len(value.strip()) if isinstance(value, str) else len(value)
        if self.min_length is not None and length < self.min_length:
            result.add_error(f"length {length} is below minimum {self.min_length}")
        if self.max_length is not None and length > self.max_length:
            result.add_error(f"length {length} is above maximum {self.max_length}")
        return result


class All(Validator):
    """AND composition; collects every error unless stop_on_first_error."""

    def __init__(self, *validators: Validator, stop_on_first_error: bool = False):
        self.validators = validators
        self.stop_on_first_error = stop_on_first_error

    def validate(self, value: Any, field_name: str = "") -> ValidationResult:
        result = ValidationResult(field_name=field_name)
        for validator in self.validators:
            sub_result = validator.validate(value, field_name)
            result.merge(sub_result)
            if self.stop_on_first_error and not sub_result.valid:
                break
        return result


def validate(
    value: Any,
    validators: Union[Validator, List[Validator]],
    field_name: str = "",
    stop_on_first_error: bool = False,
) -> ValidationResult:
    """Run one validator or a list of them against value."""
    if isinstance(validators, Validator):
        return validators.validate(value, field_name)
    return All(*validators, stop_on_first_error=stop_on_first_error).validate(value, field_name)
