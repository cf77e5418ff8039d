"""
Strategy Builder graph engine.

Assemble trading strategies from typed blocks, validate the graph, order it
topologically and compile it into an executable Python strategy class.

Quick start:
    from strategy_builder import StrategyEditor, instantiate

    editor = StrategyEditor()
    source = editor.add_block("market_data").data
    ...
    compiled = editor.compile().data
    strategy = instantiate(compiled)
    signals = strategy.execute({"open": 1, "high": 2, "low": 0.5, "close": 1.5, "timestamp": 0})
"""
from strategy_builder.application.api.result_types import CommandResult, ResultStatus
from strategy_builder.application.block_registry import BlockCatalog, get_block_catalog
from strategy_builder.application.settings import EngineSettings, configure_logging
from strategy_builder.features.blocks.application import BlockService
from strategy_builder.features.blocks.domain import (
    BlockCategory,
    BlockPosition,
    BlockTemplate,
    BlockType,
    StrategyBlock,
)
from strategy_builder.features.codegen.application import (
    CodeGenerator,
    compile_strategy,
    instantiate,
    load_strategy_class,
)
from strategy_builder.features.codegen.domain import CompilationResult, CompiledStrategy, SourceMap
from strategy_builder.features.connections.application import validate_connection
from strategy_builder.features.connections.domain import BlockConnection
from strategy_builder.features.execution.application import (
    has_circular_dependency,
    order_blocks,
    would_create_cycle,
)
from strategy_builder.features.strategies.application import StrategyEditor, StrategyValidator
from strategy_builder.features.strategies.domain import StrategyDefinition
from strategy_builder.features.strategies.infrastructure import export_strategy, import_strategy
from strategy_builder.shared.domain.exceptions import (
    CompilationError,
    CyclicDependencyError,
    GraphIntegrityError,
    SerializationError,
    StrategyBuilderError,
    StrategyLoadError,
    UnknownBlockTypeError,
    UnsupportedBlockTypeError,
)
from strategy_builder.shared.domain.value_objects import (
    DataKind,
    ErrorCode,
    Severity,
    ValidationError,
    has_errors,
    is_compatible,
    split_findings,
)

__version__ = "1.0.0"

__all__ = [
    'CommandResult',
    'ResultStatus',
    'BlockCatalog',
    'get_block_catalog',
    'EngineSettings',
    'configure_logging',
    'BlockService',
    'BlockCategory',
    'BlockPosition',
    'BlockTemplate',
    'BlockType',
    'StrategyBlock',
    'CodeGenerator',
    'compile_strategy',
    'instantiate',
    'load_strategy_class',
    'CompilationResult',
    'CompiledStrategy',
    'SourceMap',
    'validate_connection',
    'BlockConnection',
    'has_circular_dependency',
    'order_blocks',
    'would_create_cycle',
    'StrategyEditor',
    'StrategyValidator',
    'StrategyDefinition',
    'export_strategy',
    'import_strategy',
    'CompilationError',
    'CyclicDependencyError',
    'GraphIntegrityError',
    'SerializationError',
    'StrategyBuilderError',
    'StrategyLoadError',
    'UnknownBlockTypeError',
    'UnsupportedBlockTypeError',
    'DataKind',
    'ErrorCode',
    'Severity',
    'ValidationError',
    'has_errors',
    'is_compatible',
    'split_findings',
]
