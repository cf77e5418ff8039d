"""
Domain layer for codegen feature.
"""
from strategy_builder.features.codegen.domain.source_map import (
    SourceLocation,
    SourceMap,
    CompiledStrategy,
    CompilationResult,
)

__all__ = [
    'SourceLocation',
    'SourceMap',
    'CompiledStrategy',
    'CompilationResult',
]
