"""
Application layer for connections feature.
"""
from strategy_builder.features.connections.application.connection_validator import (
    validate_connection,
    validate_connections,
)
from strategy_builder.features.connections.application.graph_queries import (
    get_input_connections,
    get_output_connections,
    connections_into,
    find_dependent_blocks,
    find_dependency_blocks,
    find_shortest_path,
)

__all__ = [
    'validate_connection',
    'validate_connections',
    'get_input_connections',
    'get_output_connections',
    'connections_into',
    'find_dependent_blocks',
    'find_dependency_blocks',
    'find_shortest_path',
]
