"""
Strategy Validator

Whole-strategy structural checks. Runs every step in order and returns all
findings at once; never raises for a problem in the strategy itself.

Steps:
1. strategy name
2. empty strategy (stops here)
3. block properties
4. connections
5. data flow (entry points, effects, required inputs, fan-in)
6. orphaned blocks
7. cycles
"""
from collections import Counter
from typing import List

from strategy_builder.features.blocks.domain import BlockProperty, PropertyKind, StrategyBlock
from strategy_builder.features.connections.application import validate_connection
from strategy_builder.features.execution.application import find_cycle
from strategy_builder.features.strategies.domain import StrategyDefinition
from strategy_builder.shared.application.validation import (
    ChoicesValidator,
    RangeValidator,
    RequiredValidator,
    TypeValidator,
    validate,
)
from strategy_builder.shared.domain.value_objects import ErrorCode, ValidationError
from strategy_builder.utils.message import Log


def _is_empty(value) -> bool:
    return not RequiredValidator().validate(value).valid


def validate_property(prop: BlockProperty, block_id: str) -> List[ValidationError]:
    """Check one property value against its constraints."""
    if prop.required and _is_empty(prop.value):
        return [ValidationError.error(
            ErrorCode.MISSING_PROPERTY,
            f"Required property '{prop.name}' is not set",
            block_id=block_id,
            suggestion=f"Set a value for the '{prop.name}' property",
        )]
    if _is_empty(prop.value):
        return []

    validators = []
    if prop.kind == PropertyKind.NUMBER:
        validators.extend([TypeValidator((int, float)), RangeValidator(prop.min, prop.max)])
    elif prop.kind == PropertyKind.SELECT and prop.options:
        validators.append(ChoicesValidator(prop.option_values))
    elif prop.kind == PropertyKind.MULTISELECT and prop.options:
        validators.append(ChoicesValidator(prop.option_values, many=True))

    result = validate(prop.value, validators, field_name=prop.name, stop_on_first_error=True)
    return [
        ValidationError.error(ErrorCode.INVALID_PROPERTY, message, block_id=block_id)
        for message in result.errors
    ]


def validate_block(block: StrategyBlock) -> List[ValidationError]:
    """Property checks for one block."""
    errors: List[ValidationError] = []
    for prop in block.properties:
        errors.extend(validate_property(prop, block.id))
    return errors


class StrategyValidator:
    """
    Validates a StrategyDefinition snapshot.

    Only ERROR findings block compilation; WARNING findings are informational.
    """

    def validate(self, definition: StrategyDefinition) -> List[ValidationError]:
        findings: List[ValidationError] = []

        # 1. Name
        if not definition.name or not definition.name.strip():
            findings.append(ValidationError.error(
                ErrorCode.MISSING_PROPERTY,
                "Strategy name is required",
                suggestion="Give the strategy a name",
            ))

        # 2. Empty strategy
        if definition.is_empty:
            findings.append(ValidationError.warning(
                ErrorCode.EMPTY_STRATEGY,
                "Strategy must contain at least one block",
                suggestion="Add blocks from the palette",
            ))
            return findings

        # 3. Blocks
        for block in definition.blocks:
            findings.extend(validate_block(block))

        # 4. Connections
        block_map = definition.block_map()
        for conn in definition.connections:
            findings.extend(validate_connection(conn, block_map, definition.connections))

        # 5. Data flow
        findings.extend(self._check_data_flow(definition))

        # 6. Orphans
        findings.extend(self._check_orphans(definition))

        # 7. Cycles
        cycle = find_cycle(definition.connections)
        if cycle:
            findings.append(ValidationError.error(
                ErrorCode.CIRCULAR_DEPENDENCY,
                f"Strategy contains circular dependencies: {' -> '.join(cycle)} -> {cycle[0]}",
                block_id=cycle[0],
                suggestion="Remove one of the connections in the loop",
            ))

        Log.debug(f"StrategyValidator: Validated '{definition.name}' ({len(findings)} finding(s))")
        return findings

    def _check_data_flow(self, definition: StrategyDefinition) -> List[ValidationError]:
        findings: List[ValidationError] = []

        if not any(not block.inputs for block in definition.blocks):
            findings.append(ValidationError.warning(
                ErrorCode.NO_INPUT_BLOCKS,
                "Strategy has no entry point (a block without inputs)",
                suggestion="Add a Market Data or Parameter block",
            ))

        if not any(block.category.has_effect for block in definition.blocks):
            findings.append(ValidationError.error(
                ErrorCode.NO_OUTPUT_BLOCKS,
                "Strategy has no output or action blocks",
                suggestion="Add an order, notification or output block",
            ))

        incoming = Counter(conn.target_input_id for conn in definition.connections)
        for block in definition.blocks:
            for port in block.inputs:
                count = incoming.get(port.id, 0)
                if port.required and count == 0:
                    findings.append(ValidationError.error(
                        ErrorCode.MISSING_CONNECTION,
                        f"Required input '{port.name}' on '{block.name}' is not connected",
                        block_id=block.id,
                        suggestion=f"Connect a {port.data_kind.value} output to '{port.name}'",
                    ))
                elif count > 1:
                    findings.append(ValidationError.warning(
                        ErrorCode.MULTIPLE_CONNECTIONS,
                        f"Input '{port.name}' on '{block.name}' has {count} connections; "
                        f"the last one is used",
                        block_id=block.id,
                    ))
        return findings

    def _check_orphans(self, definition: StrategyDefinition) -> List[ValidationError]:
        orphans = set(definition.orphaned_block_ids())
        return [
            ValidationError.warning(
                ErrorCode.ORPHANED_BLOCK,
                f"Block '{block.name}' is not connected to any other blocks",
                block_id=block.id,
                suggestion="Connect the block or remove it",
            )
            for block in definition.blocks
            if block.inputs and block.outputs and block.id in orphans
        ]
