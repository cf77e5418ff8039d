"""
Connection Validator

Structural checks on a single connection: endpoint existence, self-loop,
duplicate endpoints and type compatibility. Pure; called when a connection
is drawn and again for every connection during whole-strategy validation.
"""
from typing import Dict, Iterable, List, Mapping, Optional, Union

from strategy_builder.features.blocks.domain import StrategyBlock
from strategy_builder.features.connections.domain import BlockConnection
from strategy_builder.shared.domain.value_objects import ErrorCode, ValidationError, is_compatible
from strategy_builder.utils.message import Log


BlockLookup = Union[Mapping[str, StrategyBlock], Iterable[StrategyBlock]]


def _block_map(blocks: BlockLookup) -> Mapping[str, StrategyBlock]:
    if isinstance(blocks, Mapping):
        return blocks
    return {block.id: block for block in blocks}


def validate_connection(
    candidate: BlockConnection,
    blocks: BlockLookup,
    existing_connections: Optional[Iterable[BlockConnection]] = None,
) -> List[ValidationError]:
    """
    Validate one connection against the blocks it references.

    Checks accumulate; only a missing endpoint block stops further checks
    because its ports cannot be resolved.

    Args:
        candidate: Connection to check
        blocks: Blocks of the strategy (list or id -> block map)
        existing_connections: Other connections in the strategy, for the
            duplicate check (the candidate's own id is ignored)

    Returns:
        List of findings (empty when the connection is valid)
    """
    block_map = _block_map(blocks)
    errors: List[ValidationError] = []
    connection_id = candidate.id

    source_block = block_map.get(candidate.source_block_id)
    target_block = block_map.get(candidate.target_block_id)

    if source_block is None:
        errors.append(ValidationError.error(
            ErrorCode.INVALID_CONNECTION,
            f"Source block not found: {candidate.source_block_id}",
            connection_id=connection_id,
        ))
    if target_block is None:
        errors.append(ValidationError.error(
            ErrorCode.INVALID_CONNECTION,
            f"Target block not found: {candidate.target_block_id}",
            connection_id=connection_id,
        ))
    if errors:
        return errors

    source_output = source_block.get_output(candidate.source_output_id)
    target_input = target_block.get_input(candidate.target_input_id)

    if source_output is None:
        errors.append(ValidationError.error(
            ErrorCode.INVALID_CONNECTION,
            f"Source output not found on '{source_block.name}': {candidate.source_output_id}",
            block_id=source_block.id,
            connection_id=connection_id,
        ))
    if target_input is None:
        errors.append(ValidationError.error(
            ErrorCode.INVALID_CONNECTION,
            f"Target input not found on '{target_block.name}': {candidate.target_input_id}",
            block_id=target_block.id,
            connection_id=connection_id,
        ))

    if candidate.source_block_id == candidate.target_block_id:
        errors.append(ValidationError.error(
            ErrorCode.INVALID_CONNECTION,
            f"Cannot connect block '{source_block.name}' to itself",
            block_id=source_block.id,
            connection_id=connection_id,
        ))

    for other in existing_connections or ():
        if other.id != candidate.id and other.same_endpoints(candidate):
            errors.append(ValidationError.error(
                ErrorCode.INVALID_CONNECTION,
                f"Connection already exists between '{source_block.name}' and '{target_block.name}'",
                connection_id=connection_id,
                suggestion=f"Remove the duplicate of connection '{other.id}'",
            ))
            break

    if source_output is not None and target_input is not None:
        if not is_compatible(source_output.data_kind, target_input.data_kind):
            errors.append(ValidationError.error(
                ErrorCode.TYPE_MISMATCH,
                f"Cannot connect {source_output.data_kind.value} output "
                f"'{source_output.name}' to {target_input.data_kind.value} input '{target_input.name}'",
                block_id=target_block.id,
                connection_id=connection_id,
                suggestion="Use a converter block to transform data types",
            ))

    Log.debug(f"ConnectionValidator: Checked {connection_id} ({len(errors)} finding(s))")
    return errors


def validate_connections(
    connections: Iterable[BlockConnection],
    blocks: BlockLookup,
) -> Dict[str, List[ValidationError]]:
    """Validate every connection of a strategy, keyed by connection id."""
    connections = list(connections)
    block_map = _block_map(blocks)
    return {
        connection.id: validate_connection(connection, block_map, connections)
        for connection in connections
    }
