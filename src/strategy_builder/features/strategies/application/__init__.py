"""
Application layer for strategies feature.
"""
from strategy_builder.features.strategies.application.strategy_validator import (
    StrategyValidator,
    validate_block,
    validate_property,
)
from strategy_builder.features.strategies.application.strategy_editor import StrategyEditor

__all__ = [
    'StrategyValidator',
    'validate_block',
    'validate_property',
    'StrategyEditor',
]
