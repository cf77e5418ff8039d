"""
Strategy Editor

Applies discrete editing operations to an immutable StrategyDefinition and
keeps undo/redo history of snapshots.

Every operation returns a CommandResult. A rejected operation leaves the
current snapshot untouched and reports why through errors and findings;
it never raises for a problem the user caused.
"""
from collections import deque
from datetime import datetime
from typing import Any, Deque, List, Optional, Sequence, Union

from strategy_builder.application.api.result_types import CommandResult
from strategy_builder.application.block_registry import BlockCatalog
from strategy_builder.application.settings import EngineSettings
from strategy_builder.features.blocks.application import BlockService
from strategy_builder.features.blocks.domain import BlockPosition, BlockType, StrategyBlock
from strategy_builder.features.connections.application import connections_into, validate_connection
from strategy_builder.features.connections.domain import BlockConnection, new_connection_id
from strategy_builder.features.execution.application import would_create_cycle
from strategy_builder.features.strategies.application.strategy_validator import (
    StrategyValidator,
    validate_property,
)
from strategy_builder.features.strategies.domain import StrategyDefinition
from strategy_builder.shared.domain.exceptions import StrategyBuilderError
from strategy_builder.shared.domain.value_objects import DataKind, ErrorCode, ValidationError, has_errors
from strategy_builder.utils.message import Log


class StrategyEditor:
    """
    Editing session over one strategy.

    Holds the current snapshot plus bounded undo/redo stacks. Mutations
    build a new snapshot and push the previous one onto the undo stack;
    any new mutation clears the redo stack.
    """

    def __init__(
        self,
        definition: Optional[StrategyDefinition] = None,
        catalog: Optional[BlockCatalog] = None,
        settings: Optional[EngineSettings] = None,
    ):
        self._settings = settings or EngineSettings()
        self._block_service = BlockService(catalog)
        self._validator = StrategyValidator()
        self._definition = definition or StrategyDefinition.new(self._settings.default_strategy_name)
        self._undo: Deque[StrategyDefinition] = deque(maxlen=self._settings.max_undo_steps)
        self._redo: Deque[StrategyDefinition] = deque(maxlen=self._settings.max_undo_steps)
        # Highest version handed out by save(); undo must not reuse it
        self._saved_version = self._definition.version

    @property
    def definition(self) -> StrategyDefinition:
        return self._definition

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    def _commit(self, updated: StrategyDefinition) -> None:
        self._undo.append(self._definition)
        self._redo.clear()
        self._definition = updated

    # ------------------------------------------------------------------
    # Blocks
    # ------------------------------------------------------------------

    def add_block(
        self,
        block_type: Union[BlockType, str],
        position: Optional[BlockPosition] = None,
        name: Optional[str] = None,
        block_id: Optional[str] = None,
    ) -> CommandResult[StrategyBlock]:
        """
        Instantiate a template and append it to the strategy.

        Without a position the block is placed right of the existing blocks.
        """
        try:
            block = self._block_service.create_block(
                block_type,
                position=position or self._block_service.suggest_position(self._definition.blocks),
                block_id=block_id,
                name=name,
            )
            updated = self._definition.with_block(block)
        except StrategyBuilderError as e:
            Log.warning(f"StrategyEditor: Failed to add block: {e}")
            return CommandResult.error_result(message=f"Failed to add block: {e}", errors=[str(e)])

        self._commit(updated)
        Log.info(f"StrategyEditor: Added block '{block.name}' ({block.type.value})")
        return CommandResult.success_result(
            message=f"Added block '{block.name}' (type: {block.type.value})",
            data=block,
        )

    def duplicate_block(self, block_id: str) -> CommandResult[StrategyBlock]:
        """Copy a block (properties included, connections not)."""
        try:
            original = self._definition.require_block(block_id)
            copy = self._block_service.duplicate_block(original)
            updated = self._definition.with_block(copy)
        except StrategyBuilderError as e:
            return CommandResult.error_result(message=f"Failed to duplicate block: {e}", errors=[str(e)])
        self._commit(updated)
        return CommandResult.success_result(message=f"Duplicated block '{original.name}'", data=copy)

    def move_block(self, block_id: str, position: BlockPosition) -> CommandResult[StrategyBlock]:
        try:
            updated = self._definition.with_block_moved(block_id, position)
        except StrategyBuilderError as e:
            return CommandResult.error_result(message=f"Failed to move block: {e}", errors=[str(e)])
        self._commit(updated)
        return CommandResult.success_result(
            message=f"Moved block to ({position.x}, {position.y})",
            data=updated.get_block(block_id),
        )

    def rename_block(self, block_id: str, new_name: str) -> CommandResult[StrategyBlock]:
        if not new_name or not new_name.strip():
            return CommandResult.error_result(message="Block name cannot be empty")
        try:
            block = self._definition.require_block(block_id)
            updated = self._definition.with_block_replaced(block.with_name(new_name))
        except StrategyBuilderError as e:
            return CommandResult.error_result(message=f"Failed to rename block: {e}", errors=[str(e)])
        self._commit(updated)
        Log.info(f"StrategyEditor: Renamed block '{block.name}' to '{new_name}'")
        return CommandResult.success_result(
            message=f"Renamed block '{block.name}' to '{new_name}'",
            data=updated.get_block(block_id),
        )

    def update_property(self, block_id: str, property_name: str, value: Any) -> CommandResult[StrategyBlock]:
        """
        Set a property value.

        Out-of-range or unknown-option values are still applied (the editor
        must be able to hold a work-in-progress value) and reported as a
        warning result carrying the INVALID_PROPERTY / MISSING_PROPERTY findings.
        """
        try:
            updated = self._definition.with_property_value(block_id, property_name, value)
        except StrategyBuilderError as e:
            return CommandResult.error_result(message=f"Failed to update property: {e}", errors=[str(e)])

        block = updated.get_block(block_id)
        findings = validate_property(block.get_property(property_name), block_id)
        self._commit(updated)
        Log.debug(f"StrategyEditor: Set {block.name}.{property_name} = {value!r}")
        if findings:
            return CommandResult.warning_result(
                message=f"Updated '{property_name}' with {len(findings)} problem(s)",
                data=block,
                findings=findings,
            )
        return CommandResult.success_result(message=f"Updated '{property_name}'", data=block)

    def delete_block(self, block_id: str) -> CommandResult[StrategyBlock]:
        """Remove a block and every connection touching it."""
        block = self._definition.get_block(block_id)
        if block is None:
            return CommandResult.error_result(message=f"Block not found: {block_id}")
        removed = len(self._definition.connections_for_block(block_id))
        self._commit(self._definition.without_block(block_id))
        Log.info(f"StrategyEditor: Deleted block '{block.name}' and {removed} connection(s)")
        return CommandResult.success_result(
            message=f"Deleted block '{block.name}' and {removed} connection(s)",
            data=block,
        )

    def remove_orphans(self) -> CommandResult[List[StrategyBlock]]:
        """
        Delete every block that touches no connection.

        Returns the removed blocks. With nothing to remove the definition and
        the history are left as they are.
        """
        orphans = [self._definition.get_block(block_id) for block_id in self._definition.orphaned_block_ids()]
        if not orphans:
            return CommandResult.success_result(message="No unconnected blocks", data=[])
        self._commit(self._definition.without_orphans())
        names = ", ".join(f"'{block.name}'" for block in orphans)
        Log.info(f"StrategyEditor: Removed {len(orphans)} unconnected block(s): {names}")
        return CommandResult.success_result(
            message=f"Removed {len(orphans)} unconnected block(s)",
            data=orphans,
        )

    # ------------------------------------------------------------------
    # Connections
    # ------------------------------------------------------------------

    def connect(
        self,
        source_block_id: str,
        source_output_id: str,
        target_block_id: str,
        target_input_id: str,
        connection_id: Optional[str] = None,
    ) -> CommandResult[BlockConnection]:
        """
        Create a connection between an output port and an input port.

        The connection is created only when the connection validator reports
        no errors and it would not close a cycle. Connecting into an input
        that already has a connection succeeds with a MULTIPLE_CONNECTIONS
        warning; the newest connection wins at execution time.
        """
        source = self._definition.get_block(source_block_id)
        output = source.get_output(source_output_id) if source else None
        candidate = BlockConnection(
            id=connection_id or new_connection_id(),
            source_block_id=source_block_id,
            source_output_id=source_output_id,
            target_block_id=target_block_id,
            target_input_id=target_input_id,
            data_kind=output.data_kind if output else DataKind.ANY,
        )

        findings = validate_connection(candidate, self._definition.block_map(), self._definition.connections)
        if has_errors(findings):
            Log.debug(f"StrategyEditor: Rejected connection ({', '.join(f.code for f in findings)})")
            return CommandResult.error_result(message="Connection rejected", findings=findings)

        if would_create_cycle(candidate, self._definition.connections):
            finding = ValidationError.error(
                ErrorCode.CIRCULAR_DEPENDENCY,
                "Connection would create a circular dependency",
                block_id=target_block_id,
                connection_id=candidate.id,
            )
            return CommandResult.error_result(message="Connection rejected", findings=[finding])

        existing = connections_into(target_input_id, self._definition.connections)
        self._commit(self._definition.with_connection(candidate))
        Log.info(f"StrategyEditor: Connected {source_block_id}.{source_output_id} -> "
                 f"{target_block_id}.{target_input_id}")

        if existing:
            target_input = self._definition.require_block(target_block_id).get_input(target_input_id)
            warning = ValidationError.warning(
                ErrorCode.MULTIPLE_CONNECTIONS,
                f"Input '{target_input.name}' now has {len(existing) + 1} connections; the newest one is used",
                block_id=target_block_id,
                connection_id=candidate.id,
            )
            return CommandResult.warning_result(message="Connected", data=candidate, findings=[warning])
        return CommandResult.success_result(message="Connected", data=candidate)

    def connect_by_name(
        self,
        source_block_id: str,
        output_name: str,
        target_block_id: str,
        input_name: str,
    ) -> CommandResult[BlockConnection]:
        """connect() addressed by port names instead of port ids."""
        source = self._definition.get_block(source_block_id)
        target = self._definition.get_block(target_block_id)
        if source is None or target is None:
            missing = source_block_id if source is None else target_block_id
            finding = ValidationError.error(
                ErrorCode.INVALID_CONNECTION, f"Block not found: {missing}", block_id=missing
            )
            return CommandResult.error_result(message="Connection rejected", findings=[finding])

        output = source.get_output_by_name(output_name)
        target_input = target.get_input_by_name(input_name)
        if output is None or target_input is None:
            detail = (f"Output '{output_name}' not found on '{source.name}'" if output is None
                      else f"Input '{input_name}' not found on '{target.name}'")
            finding = ValidationError.error(ErrorCode.INVALID_CONNECTION, detail)
            return CommandResult.error_result(message="Connection rejected", findings=[finding])

        return self.connect(source_block_id, output.id, target_block_id, target_input.id)

    def disconnect(self, connection_id: str) -> CommandResult[BlockConnection]:
        connection = self._definition.get_connection(connection_id)
        if connection is None:
            return CommandResult.error_result(message=f"Connection not found: {connection_id}")
        self._commit(self._definition.without_connection(connection_id))
        Log.info(f"StrategyEditor: Disconnected {connection_id}")
        return CommandResult.success_result(message=f"Disconnected: {connection_id}", data=connection)

    # ------------------------------------------------------------------
    # Strategy
    # ------------------------------------------------------------------

    def update_info(
        self,
        name: Optional[str] = None,
        description: Optional[str] = None,
        tags: Optional[Sequence[str]] = None,
    ) -> CommandResult[StrategyDefinition]:
        if name is not None and not name.strip():
            return CommandResult.error_result(message="Strategy name cannot be empty")
        self._commit(self._definition.with_info(name=name, description=description, tags=tags))
        return CommandResult.success_result(message="Updated strategy info", data=self._definition)

    def rename(self, name: str) -> CommandResult[StrategyDefinition]:
        return self.update_info(name=name)

    def save(self, now: Optional[datetime] = None) -> CommandResult[StrategyDefinition]:
        """
        Produce the snapshot handed to persistence: version + 1, fresh updated_at.

        Saving is not an undoable edit; history is kept as is. The version
        keeps rising across undo and redo, so two different saved documents
        never share a version number.
        """
        self._definition = self._definition.saved(now, after_version=self._saved_version)
        self._saved_version = self._definition.version
        Log.info(f"StrategyEditor: Saved '{self._definition.name}' as version {self._definition.version}")
        return CommandResult.success_result(
            message=f"Saved version {self._definition.version}",
            data=self._definition,
        )

    def validate(self) -> List[ValidationError]:
        return self._validator.validate(self._definition)

    def compile(self):
        """
        Compile the current snapshot.

        Returns:
            CommandResult[CompiledStrategy]; errors carry the blocking findings
        """
        from strategy_builder.features.codegen.application import compile_strategy

        result = compile_strategy(self._definition)
        if not result.success:
            return CommandResult.error_result(
                message=f"Compilation failed with {len(result.errors)} error(s)",
                findings=result.errors,
            )
        if result.warnings:
            return CommandResult.warning_result(
                message="Compiled with warnings",
                data=result.strategy,
                findings=result.warnings,
            )
        return CommandResult.success_result(message="Compiled", data=result.strategy)

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def undo(self) -> CommandResult[StrategyDefinition]:
        if not self._undo:
            return CommandResult.error_result(message="Nothing to undo")
        self._redo.append(self._definition)
        self._definition = self._undo.pop()
        return CommandResult.success_result(message="Undone", data=self._definition)

    def redo(self) -> CommandResult[StrategyDefinition]:
        if not self._redo:
            return CommandResult.error_result(message="Nothing to redo")
        self._undo.append(self._definition)
        self._definition = self._redo.pop()
        return CommandResult.success_result(message="Redone", data=self._definition)
