"""
Domain layer for strategies feature.
"""
from strategy_builder.features.strategies.domain.strategy_definition import (
    StrategyDefinition,
    StrategyMetadata,
    utc_now,
)

__all__ = [
    'StrategyDefinition',
    'StrategyMetadata',
    'utc_now',
]
