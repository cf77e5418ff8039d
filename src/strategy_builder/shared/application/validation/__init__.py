"""
Validation framework.
"""
from strategy_builder.shared.application.validation.validation_framework import (
    ValidationResult,
    Validator,
    RequiredValidator,
    RangeValidator,
    ChoicesValidator,
    TypeValidator,
    LengthValidator,
    All,
    validate,
)

__all__ = [
    'ValidationResult',
    'Validator',
    'RequiredValidator',
    'RangeValidator',
    'ChoicesValidator',
    'TypeValidator',
    'LengthValidator',
    'All',
    'validate',
]
