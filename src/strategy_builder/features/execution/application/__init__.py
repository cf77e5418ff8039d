"""
Application layer for execution feature.
"""
from strategy_builder.features.execution.application.topological_sort import (
    order_blocks,
    find_cycle,
    has_circular_dependency,
    would_create_cycle,
)

__all__ = [
    'order_blocks',
    'find_cycle',
    'has_circular_dependency',
    'would_create_cycle',
]
