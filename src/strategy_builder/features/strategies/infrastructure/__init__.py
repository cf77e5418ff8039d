"""
Infrastructure layer for strategies feature.
"""
from strategy_builder.features.strategies.infrastructure.strategy_serializer import (
    FORMAT_VERSION,
    export_strategy,
    import_strategy,
    to_document,
    from_document,
    write_strategy_file,
    read_strategy_file,
)

__all__ = [
    'FORMAT_VERSION',
    'export_strategy',
    'import_strategy',
    'to_document',
    'from_document',
    'write_strategy_file',
    'read_strategy_file',
]
