"""
Strategy Loader

Turns generated source into a live strategy instance. The source is parsed
first so a syntax problem is reported against the generated line before
anything executes.
"""
import ast
from typing import Any, Dict, Optional

from strategy_builder.features.codegen.domain import CompiledStrategy
from strategy_builder.shared.domain.exceptions import StrategyLoadError
from strategy_builder.utils.message import Log


def check_syntax(code: str, filename: str = "<strategy>") -> ast.Module:
    """
    Parse generated code without executing it.

    Raises:
        StrategyLoadError: If the code is not valid Python
    """
    try:
        return ast.parse(code, filename=filename)
    except SyntaxError as e:
        raise StrategyLoadError(f"Generated code has a syntax error at line {e.lineno}: {e.msg}") from e


def _failing_block(compiled: CompiledStrategy, error: BaseException, filename: str) -> Optional[str]:
    """Block id whose generated code raised, from the innermost generated frame."""
    line = None
    tb = error.__traceback__
    while tb is not None:
        if tb.tb_frame.f_code.co_filename == filename:
            line = tb.tb_lineno
        tb = tb.tb_next
    return compiled.source_map.block_at(line) if line is not None else None


def load_strategy_class(compiled: CompiledStrategy) -> type:
    """
    Execute the generated module in a fresh namespace and return its class.

    Raises:
        StrategyLoadError: If the code does not parse, fails at import time,
            or does not define the expected class
    """
    filename = f"<strategy {compiled.class_name}>"
    tree = check_syntax(compiled.code, filename)
    namespace: Dict[str, Any] = {"__name__": f"strategy_builder.generated.{compiled.class_name}"}
    try:
        exec(compile(tree, filename, "exec"), namespace)
    except Exception as e:
        block_id = _failing_block(compiled, e, filename)
        raise StrategyLoadError(
            f"Generated module for '{compiled.class_name}' failed to load: {e}"
            + (f" (block {block_id})" if block_id else "")
        ) from e

    strategy_class = namespace.get(compiled.class_name)
    if not isinstance(strategy_class, type):
        raise StrategyLoadError(f"Generated module does not define class '{compiled.class_name}'")
    Log.debug(f"StrategyLoader: Loaded {compiled.class_name} v{compiled.version}")
    return strategy_class


def instantiate(compiled: CompiledStrategy, parameters: Optional[Dict[str, Any]] = None) -> Any:
    """
    Load and construct the generated strategy, optionally overriding parameters.

    Raises:
        StrategyLoadError: If loading or construction fails
        KeyError: If parameters names an unknown key
        ValueError: If a parameter value breaks its property constraints
    """
    strategy_class = load_strategy_class(compiled)
    try:
        strategy = strategy_class()
    except Exception as e:
        raise StrategyLoadError(f"Could not construct '{compiled.class_name}': {e}") from e
    if parameters:
        strategy.set_parameters(parameters)
    return strategy
