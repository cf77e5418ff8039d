"""
Application layer for blocks feature.
"""
from strategy_builder.features.blocks.application.block_service import BlockService, new_block_id

__all__ = [
    'BlockService',
    'new_block_id',
]
