"""
Domain layer for connections feature.
"""
from strategy_builder.features.connections.domain.connection import BlockConnection, new_connection_id

__all__ = [
    'BlockConnection',
    'new_connection_id',
]
