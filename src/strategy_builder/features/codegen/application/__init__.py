"""
Application layer for codegen feature.
"""
from strategy_builder.features.codegen.application.block_emitters import (
    BLOCK_EMITTERS,
    BlockCode,
    EmitContext,
    INPUT_FALLBACKS,
    fallback_expression,
)
from strategy_builder.features.codegen.application.code_generator import (
    CodeGenerator,
    compile_strategy,
    class_name_for,
    parameter_keys,
    parameter_rule,
)
from strategy_builder.features.codegen.application.strategy_loader import (
    check_syntax,
    load_strategy_class,
    instantiate,
)

__all__ = [
    'BLOCK_EMITTERS',
    'BlockCode',
    'EmitContext',
    'INPUT_FALLBACKS',
    'fallback_expression',
    'CodeGenerator',
    'compile_strategy',
    'class_name_for',
    'parameter_keys',
    'parameter_rule',
    'check_syntax',
    'load_strategy_class',
    'instantiate',
]
