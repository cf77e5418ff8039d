"""
Domain layer for blocks feature.

Contains:
- StrategyBlock entity with BlockPosition / BlockSize geometry
- BlockInput / BlockOutput ports
- BlockProperty with PropertyKind / PropertyOption
- BlockTemplate and its InputSpec / OutputSpec / PropertySpec
- BlockType / BlockCategory value objects
"""
from strategy_builder.features.blocks.domain.block import StrategyBlock, BlockPosition, BlockSize
from strategy_builder.features.blocks.domain.block_property import BlockProperty, PropertyKind, PropertyOption
from strategy_builder.features.blocks.domain.block_template import (
    BlockTemplate,
    InputSpec,
    OutputSpec,
    PropertySpec,
    options,
)
from strategy_builder.features.blocks.domain.block_type import BlockType, BlockCategory
from strategy_builder.features.blocks.domain.port import BlockInput, BlockOutput

__all__ = [
    'StrategyBlock',
    'BlockPosition',
    'BlockSize',
    'BlockProperty',
    'PropertyKind',
    'PropertyOption',
    'BlockTemplate',
    'InputSpec',
    'OutputSpec',
    'PropertySpec',
    'options',
    'BlockType',
    'BlockCategory',
    'BlockInput',
    'BlockOutput',
]
