"""
Shared value objects.
"""
from strategy_builder.shared.domain.value_objects.data_kind import (
    DataKind,
    is_compatible,
    conversion_expression,
)
from strategy_builder.shared.domain.value_objects.validation_error import (
    ValidationError,
    Severity,
    ErrorCode,
    has_errors,
    split_findings,
)

__all__ = [
    'DataKind',
    'is_compatible',
    'conversion_expression',
    'ValidationError',
    'Severity',
    'ErrorCode',
    'has_errors',
    'split_findings',
]
