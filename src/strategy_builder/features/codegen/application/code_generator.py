"""
Code Generator

Compiles a validated StrategyDefinition into the source of a Python strategy
class, one emitter call per block in topological order.

Generated class surface:
- execute(tick) -> list of signal dicts
- get_parameters() / set_parameters(params) keyed by <blockName>_<propertyName>;
  set_parameters checks PARAMETER_RULES and applies nothing on failure
- reset()

Generation is deterministic: the same definition always yields the same
source text, byte for byte.
"""
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from strategy_builder.application.settings import EngineSettings
from strategy_builder.features.blocks.domain import BlockProperty, PropertyKind, StrategyBlock
from strategy_builder.features.codegen.application.block_emitters import (
    BLOCK_EMITTERS,
    BlockCode,
    EmitContext,
    Emitter,
    fallback_expression,
)
from strategy_builder.features.codegen.domain import (
    CompilationResult,
    CompiledStrategy,
    SourceLocation,
    SourceMap,
)
from strategy_builder.features.connections.application import connections_into
from strategy_builder.features.execution.application import order_blocks
from strategy_builder.features.strategies.application.strategy_validator import StrategyValidator
from strategy_builder.features.strategies.domain import StrategyDefinition
from strategy_builder.shared.domain.exceptions import (
    CompilationError,
    CyclicDependencyError,
    UnsupportedBlockTypeError,
)
from strategy_builder.shared.domain.value_objects import (
    ErrorCode,
    ValidationError,
    conversion_expression,
    split_findings,
)
from strategy_builder.utils.message import Log


BASE_IMPORTS = (
    "import json",
    "import logging",
    "import math",
    "from collections import deque",
)

RUNTIME_HELPERS = '''
_log = logging.getLogger("strategy_builder.generated")
_file_log = logging.getLogger("strategy_builder.generated.file")
_LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def _to_float(value, default=0.0):
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _is_blank(value):
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return isinstance(value, (list, tuple)) and not value


def _parameter_problem(key, value, rule):
    if _is_blank(value):
        return f"{key}: required parameter cannot be empty" if rule.get("required") else None
    kind = rule["kind"]
    if kind == "number":
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return f"{key}: must be int or float, got {type(value).__name__}"
        if "min" in rule and value < rule["min"]:
            return f"{key}: must be at least {rule['min']}"
        if "max" in rule and value > rule["max"]:
            return f"{key}: must be at most {rule['max']}"
    elif kind == "select" and "options" in rule:
        if value not in rule["options"]:
            return f"{key}: {value!r} must be one of: {', '.join(map(repr, rule['options']))}"
    elif kind == "multiselect" and "options" in rule:
        if not isinstance(value, (list, tuple)):
            return f"{key}: must be a list, got {type(value).__name__}"
        bad = [item for item in value if item not in rule["options"]]
        if bad:
            return f"{key}: {', '.join(map(repr, bad))} not in: {', '.join(map(repr, rule['options']))}"
    return None


def _parse_hhmm(text):
    try:
        hours, minutes = str(text).split(":")
        return int(hours) * 60 + int(minutes)
    except ValueError:
        return None


def _format_signals(entries, fmt):
    if fmt == "csv":
        headers = sorted({key for entry in entries for key in entry})
        rows = [",".join(headers)]
        rows.extend(",".join(str(entry.get(h, "")) for h in headers) for entry in entries)
        return "\\n".join(rows)
    if fmt == "xml":
        items = "".join(
            "<signal>" + "".join(f"<{k}>{entry[k]}</{k}>" for k in sorted(entry)) + "</signal>"
            for entry in entries
        )
        return f"<signals>{items}</signals>"
    if fmt == "custom":
        return "\\n".join("|".join(str(entry[k]) for k in sorted(entry)) for entry in entries)
    return json.dumps(entries, sort_keys=True, default=str)
'''

INDENT = "    "


def slugify(name: str, fallback: str) -> str:
    """Lowercase identifier fragment for a port name ("MACD Line" -> "macd_line")."""
    slug = re.sub(r"[^0-9a-zA-Z]+", "_", name).strip("_").lower()
    return slug or fallback


def class_name_for(strategy_name: str) -> str:
    """CamelCase class name ("rsi dip buyer" -> "RsiDipBuyerStrategy")."""
    words = re.findall(r"[0-9a-zA-Z]+", strategy_name)
    name = "".join(w[:1].upper() + w[1:] for w in words)
    if not name:
        return "GeneratedStrategy"
    if name[0].isdigit():
        name = f"S{name}"
    if not name.endswith("Strategy"):
        name += "Strategy"
    return name


def parameter_keys(blocks: List[StrategyBlock]) -> Dict[str, Dict[str, str]]:
    """
    Parameter-table keys per block id and property name.

    Keys are <blockName>_<propertyName> with spaces replaced by underscores.
    Repeated block names get _2, _3 suffixes in block order. The suffix keeps
    counting while any of the block's keys is already taken, so a block
    literally named "EMA_2" never shares a key with the second "EMA".
    """
    used_prefixes = set()
    used_keys = set()
    keys: Dict[str, Dict[str, str]] = {}
    for block in blocks:
        base = block.name.replace(" ", "_")
        suffix = 1
        while True:
            prefix = base if suffix == 1 else f"{base}_{suffix}"
            block_keys = {
                prop.name: f"{prefix}_{prop.name.replace(' ', '_')}" for prop in block.properties
            }
            if prefix not in used_prefixes and used_keys.isdisjoint(block_keys.values()):
                break
            suffix += 1
        used_prefixes.add(prefix)
        used_keys.update(block_keys.values())
        keys[block.id] = block_keys
    return keys


def _comment(text: str) -> str:
    return " ".join(text.split())


class _SourceWriter:
    """Line buffer that reports 1-based line numbers for the source map."""

    def __init__(self):
        self.lines: List[str] = []

    @property
    def next_line(self) -> int:
        return len(self.lines) + 1

    def write(self, text: str = "", depth: int = 0) -> int:
        self.lines.append(f"{INDENT * depth}{text}" if text else "")
        return len(self.lines)

    def write_block(self, statements: List[str], depth: int) -> Tuple[int, int]:
        """Write statements at depth; return (first_line, last_line)."""
        first = self.next_line
        for statement in statements:
            self.write(statement, depth)
        return first, self.next_line - 1

    def text(self) -> str:
        return "\n".join(self.lines) + "\n"


@dataclass
class _BlockPlan:
    block: StrategyBlock
    var: str
    code: BlockCode
    # (input local, expression, winning connection id, all connection ids)
    input_lines: List[Tuple[str, str, Optional[str], List[str]]] = field(default_factory=list)


class CodeGenerator:
    """
    Turns a StrategyDefinition into a CompiledStrategy.

    Preconditions checked on every call: the structural validator reports no
    errors and a topological order exists.
    """

    def __init__(
        self,
        emitters: Optional[Dict[Any, Emitter]] = None,
        settings: Optional[EngineSettings] = None,
        validator: Optional[StrategyValidator] = None,
    ):
        self._emitters = dict(BLOCK_EMITTERS if emitters is None else emitters)
        self._settings = settings or EngineSettings()
        self._validator = validator or StrategyValidator()

    def generate(self, definition: StrategyDefinition) -> CompiledStrategy:
        """
        Generate the strategy class source.

        Raises:
            UnsupportedBlockTypeError: A block type has no emitter
            CompilationError: Validation errors, or the graph has a cycle
        """
        for block in definition.blocks:
            if block.type not in self._emitters:
                raise UnsupportedBlockTypeError(block.id, block.type.value)

        findings = self._validator.validate(definition)
        errors, warnings = split_findings(findings)
        if errors:
            Log.warning(f"CodeGenerator: Refusing to compile '{definition.name}' ({len(errors)} error(s))")
            raise CompilationError(
                f"Strategy '{definition.name}' has {len(errors)} validation error(s)", errors
            )

        try:
            ordered = order_blocks(definition.blocks, definition.connections)
        except CyclicDependencyError as e:
            finding = ValidationError.error(
                ErrorCode.CIRCULAR_DEPENDENCY,
                str(e),
                block_id=e.cycle[0] if e.cycle else None,
            )
            raise CompilationError(str(e), [finding]) from e

        keys = parameter_keys(list(definition.blocks))
        plans = self._plan(definition, ordered, keys)
        class_name = class_name_for(definition.name)
        parameters = {
            keys[block.id][prop.name]: prop.value
            for block in definition.blocks
            for prop in block.properties
        }

        code, source_map = self._render(definition, class_name, plans, keys)
        Log.info(
            f"CodeGenerator: Compiled '{definition.name}' v{definition.version} "
            f"({len(ordered)} blocks, {len(code.splitlines())} lines)"
        )
        return CompiledStrategy(
            code=code,
            source_map=source_map,
            class_name=class_name,
            execution_order=[block.id for block in ordered],
            parameters=parameters,
            strategy_id=definition.id,
            version=definition.version,
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # Planning
    # ------------------------------------------------------------------

    def _plan(
        self,
        definition: StrategyDefinition,
        ordered: List[StrategyBlock],
        keys: Dict[str, Dict[str, str]],
    ) -> List[_BlockPlan]:
        block_map = definition.block_map()
        output_locals: Dict[str, str] = {}
        plans: List[_BlockPlan] = []

        for index, block in enumerate(ordered):
            var = f"{block.type.value}_{index}"
            outputs = {}
            for i, port in enumerate(block.outputs):
                local = f"{var}_{slugify(port.name, f'out{i}')}"
                outputs[port.name] = local
                output_locals[port.id] = local

            inputs: Dict[str, str] = {}
            input_lines = []
            for i, port in enumerate(block.inputs):
                local = f"{var}_in_{slugify(port.name, f'in{i}')}"
                inputs[port.name] = local
                incoming = connections_into(port.id, definition.connections)
                if incoming:
                    # Last connection in definition order wins
                    winner = incoming[-1]
                    source = block_map[winner.source_block_id]
                    source_port = source.get_output(winner.source_output_id)
                    try:
                        expression = conversion_expression(
                            output_locals[winner.source_output_id],
                            source_port.data_kind,
                            port.data_kind,
                        )
                    except ValueError as e:
                        finding = ValidationError.error(
                            ErrorCode.TYPE_MISMATCH, str(e), connection_id=winner.id
                        )
                        raise CompilationError(str(e), [finding]) from e
                    input_lines.append((local, expression, winner.id, [c.id for c in incoming]))
                else:
                    expression = fallback_expression(
                        block.type, port.name, self._settings.fallback_price_field
                    )
                    input_lines.append((local, expression, None, []))

            ctx = EmitContext(
                block=block,
                var=var,
                inputs=inputs,
                outputs=outputs,
                param_keys=keys[block.id],
            )
            code = self._emitters[block.type](ctx)
            Log.debug(f"CodeGenerator: Emitted {block.type.value} '{block.name}' as {var}")
            plans.append(_BlockPlan(block=block, var=var, code=code, input_lines=input_lines))
        return plans

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _render(
        self,
        definition: StrategyDefinition,
        class_name: str,
        plans: List[_BlockPlan],
        keys: Dict[str, Dict[str, str]],
    ) -> Tuple[str, SourceMap]:
        out = _SourceWriter()
        source_map = SourceMap()

        def record(block_id: str, section: str, span: Tuple[int, int], depth: int) -> None:
            first, last = span
            if last >= first:
                source_map.add_block(block_id, SourceLocation(first, len(INDENT) * depth + 1, section, last))

        extra_imports = sorted({imp for plan in plans for imp in plan.code.imports})
        out.write(f"# Generated strategy: {_comment(definition.name)} (version {definition.version})")
        out.write(f"# Strategy id: {definition.id}")
        for statement in list(BASE_IMPORTS) + extra_imports:
            out.write(statement)
        for line in RUNTIME_HELPERS.splitlines():
            out.write(line)
        out.write()
        out.write()

        out.write(f"class {class_name}:")
        out.write(f"STRATEGY_ID = {definition.id!r}", 1)
        out.write(f"STRATEGY_NAME = {definition.name!r}", 1)
        out.write(f"VERSION = {definition.version!r}", 1)
        out.write(f"ORDER_COOLDOWN_MS = {int(self._settings.order_cooldown_ms)!r}", 1)
        out.write(f"PRICE_FIELD = {self._settings.fallback_price_field!r}", 1)
        out.write(f"EXECUTION_ORDER = {tuple(plan.block.id for plan in plans)!r}", 1)
        out.write("PARAMETER_RULES = {", 1)
        for block in definition.blocks:
            for prop in block.properties:
                out.write(f"{keys[block.id][prop.name]!r}: {parameter_rule(prop)!r},", 2)
        out.write("}", 1)
        out.write()

        # __init__: parameter table and state declarations
        out.write("def __init__(self):", 1)
        out.write("self._params = {", 2)
        for block in definition.blocks:
            first = out.next_line
            for prop in block.properties:
                out.write(f"{keys[block.id][prop.name]!r}: {_literal(prop.value)},", 3)
            record(block.id, "params", (first, out.next_line - 1), 3)
        out.write("}", 2)
        for plan in plans:
            if plan.code.state:
                out.write(f"# {_comment(plan.block.name)} ({plan.block.type.value})", 2)
                record(plan.block.id, "state", out.write_block(plan.code.state, 2), 2)
        out.write("self._initialize()", 2)
        out.write()

        out.write("def get_parameters(self):", 1)
        out.write("return dict(self._params)", 2)
        out.write()

        out.write("def set_parameters(self, params):", 1)
        out.write("unknown = sorted(set(params) - set(self._params))", 2)
        out.write("if unknown:", 2)
        out.write("raise KeyError(f\"Unknown parameters: {', '.join(unknown)}\")", 3)
        out.write("problems = [", 2)
        out.write("_parameter_problem(key, params[key], self.PARAMETER_RULES[key]) for key in sorted(params)", 3)
        out.write("]", 2)
        out.write("problems = [problem for problem in problems if problem]", 2)
        out.write("if problems:", 2)
        out.write("raise ValueError(f\"Invalid parameters: {'; '.join(problems)}\")", 3)
        out.write("previous = self._params", 2)
        out.write("self._params = dict(previous)", 2)
        out.write("self._params.update(params)", 2)
        out.write("try:", 2)
        out.write("self._initialize()", 3)
        out.write("except (TypeError, ValueError):", 2)
        out.write("self._params = previous", 3)
        out.write("self._initialize()", 3)
        out.write("raise", 3)
        out.write()

        out.write("def _initialize(self):", 1)
        out.write("p = self._params", 2)
        for plan in plans:
            if plan.code.init:
                out.write(f"# {_comment(plan.block.name)} ({plan.block.type.value})", 2)
                record(plan.block.id, "init", out.write_block(plan.code.init, 2), 2)
        out.write("self.reset()", 2)
        out.write()

        out.write("def reset(self):", 1)
        wrote_reset = False
        for plan in plans:
            if plan.code.reset:
                out.write(f"# {_comment(plan.block.name)} ({plan.block.type.value})", 2)
                record(plan.block.id, "reset", out.write_block(plan.code.reset, 2), 2)
                wrote_reset = True
        if not wrote_reset:
            out.write("pass", 2)
        out.write()

        out.write("def execute(self, tick):", 1)
        out.write("signals = []", 2)
        for plan in plans:
            out.write(f"# {_comment(plan.block.name)} ({plan.block.type.value}) [{plan.block.id}]", 2)
            first = out.next_line
            for local, expression, winner, connection_ids in plan.input_lines:
                prefix = f"{local} = "
                line = out.write(prefix + expression, 2)
                column = len(INDENT) * 2 + len(prefix) + 1
                for connection_id in connection_ids:
                    source_map.add_connection(connection_id, SourceLocation(line, column, "update", line))
            out.write_block(plan.code.update, 2)
            record(plan.block.id, "update", (first, out.next_line - 1), 2)
        out.write("return signals", 2)

        return out.text(), source_map


def parameter_rule(prop: BlockProperty) -> Dict[str, Any]:
    """Constraint entry checked by the generated set_parameters."""
    rule: Dict[str, Any] = {"kind": prop.kind.value}
    if prop.required:
        rule["required"] = True
    if prop.kind == PropertyKind.NUMBER:
        if prop.min is not None:
            rule["min"] = prop.min
        if prop.max is not None:
            rule["max"] = prop.max
    elif prop.kind in (PropertyKind.SELECT, PropertyKind.MULTISELECT) and prop.options:
        rule["options"] = prop.option_values
    return rule


def _literal(value: Any) -> str:
    """Python literal for a property value; multiselect tuples become lists."""
    if isinstance(value, tuple):
        value = list(value)
    return repr(value)


def compile_strategy(
    definition: StrategyDefinition,
    generator: Optional[CodeGenerator] = None,
) -> CompilationResult:
    """
    Non-throwing wrapper around CodeGenerator.generate.

    Expected failures (validation errors, cycles) come back as a failed
    CompilationResult carrying the findings. UnsupportedBlockTypeError still
    propagates: it means the emitter table is incomplete.
    """
    generator = generator or CodeGenerator()
    try:
        compiled = generator.generate(definition)
    except CompilationError as e:
        return CompilationResult(success=False, errors=list(e.findings))
    return CompilationResult(success=True, strategy=compiled, warnings=list(compiled.warnings))
