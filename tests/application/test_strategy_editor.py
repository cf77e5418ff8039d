"""
Tests for the strategy editor: editing commands, connection rules and history.
"""
from strategy_builder.application.api.result_types import ResultStatus
from strategy_builder.application.settings import EngineSettings
from strategy_builder.features.blocks.domain import BlockPosition, BlockType
from strategy_builder.features.codegen.domain import CompiledStrategy
from strategy_builder.features.strategies.application import StrategyEditor
from strategy_builder.shared.domain.value_objects import ErrorCode

from conftest import FIXED_NOW, wire


class TestBlocks:

    def test_add_block(self, editor):
        result = editor.add_block(BlockType.EMA, block_id="ema")

        assert result.success
        assert result.data.id == "ema"
        assert [b.id for b in editor.definition.blocks] == ["ema"]
        assert editor.can_undo

    def test_add_unknown_type_leaves_definition(self, editor):
        before = editor.definition
        result = editor.add_block("hologram")

        assert result.failed
        assert editor.definition is before
        assert not editor.can_undo

    def test_add_duplicate_id(self, editor):
        editor.add_block(BlockType.EMA, block_id="ema")
        result = editor.add_block(BlockType.SMA, block_id="ema")
        assert result.failed
        assert "Duplicate block id" in result.errors[0]

    def test_auto_position_to_the_right(self, editor):
        first = editor.add_block(BlockType.EMA).data
        second = editor.add_block(BlockType.EMA).data
        assert second.position.x > first.position.x

    def test_move_rename_duplicate(self, editor):
        editor.add_block(BlockType.EMA, block_id="ema")
        editor.update_property("ema", "period", 9)

        assert editor.move_block("ema", BlockPosition(5, 6)).data.position == BlockPosition(5, 6)
        assert editor.rename_block("ema", "Signal EMA").data.name == "Signal EMA"
        assert editor.rename_block("ema", " ").failed

        copy = editor.duplicate_block("ema").data
        assert copy.id != "ema"
        assert copy.property_value("period") == 9
        assert len(editor.definition.blocks) == 2

    def test_update_property_warns_but_applies(self, editor):
        """Out-of-range values are kept and reported."""
        editor.add_block(BlockType.EMA, block_id="ema")
        result = editor.update_property("ema", "period", 0)

        assert result.status == ResultStatus.WARNING
        assert result.error_codes == [ErrorCode.INVALID_PROPERTY]
        assert editor.definition.get_block("ema").property_value("period") == 0

    def test_update_unknown_property(self, editor):
        editor.add_block(BlockType.EMA, block_id="ema")
        assert editor.update_property("ema", "colour", "red").failed
        assert editor.update_property("ghost", "period", 3).failed

    def test_delete_cascades(self, crossover_editor):
        result = crossover_editor.delete_block("fast")

        assert result.success
        assert "2 connection(s)" in result.message
        assert len(crossover_editor.definition.connections) == 3
        assert all(not c.touches("fast") for c in crossover_editor.definition.connections)

    def test_delete_missing(self, editor):
        assert editor.delete_block("nope").failed

    def test_remove_orphans(self, crossover_editor):
        crossover_editor.add_block(BlockType.SMA, block_id="sma")
        crossover_editor.add_block(BlockType.RSI, block_id="rsi")
        result = crossover_editor.remove_orphans()

        assert result.success
        assert [b.id for b in result.data] == ["sma", "rsi"]
        assert [b.id for b in crossover_editor.definition.blocks] == ["md", "fast", "slow", "cross", "buy"]
        assert len(crossover_editor.definition.connections) == 5

    def test_remove_orphans_is_undoable(self, crossover_editor):
        crossover_editor.add_block(BlockType.SMA, block_id="sma")
        crossover_editor.remove_orphans()

        assert crossover_editor.undo().success
        assert crossover_editor.definition.get_block("sma") is not None

    def test_remove_orphans_without_orphans_keeps_history(self, crossover_editor):
        """No history entry: undo still reverts the last wiring."""
        before = crossover_editor.definition
        result = crossover_editor.remove_orphans()

        assert result.success
        assert result.data == []
        assert crossover_editor.definition is before
        crossover_editor.undo()
        assert len(crossover_editor.definition.connections) == 4


class TestConnections:

    def test_connect_copies_source_kind(self, crossover_editor):
        conn = crossover_editor.definition.connections[0]
        assert conn.source_block_id == "md"
        assert conn.data_kind.value == "number"

    def test_type_mismatch_rejected_without_mutation(self, crossover_editor):
        before = crossover_editor.definition
        result = crossover_editor.connect_by_name("buy", "Order Details", "cross", "Left Value")

        assert result.failed
        assert result.error_codes == [ErrorCode.TYPE_MISMATCH]
        assert crossover_editor.definition is before

    def test_cycle_rejected(self, editor):
        editor.add_block(BlockType.ARITHMETIC, block_id="a1")
        editor.add_block(BlockType.ARITHMETIC, block_id="a2")
        wire(editor, "a1", "Result", "a2", "Left Value")

        result = editor.connect_by_name("a2", "Result", "a1", "Left Value")
        assert result.failed
        assert result.error_codes == [ErrorCode.CIRCULAR_DEPENDENCY]
        assert len(editor.definition.connections) == 1

    def test_self_loop_rejected(self, editor):
        editor.add_block(BlockType.ARITHMETIC, block_id="a1")
        result = editor.connect_by_name("a1", "Result", "a1", "Left Value")
        assert result.error_codes == [ErrorCode.INVALID_CONNECTION]

    def test_duplicate_rejected(self, crossover_editor):
        result = crossover_editor.connect_by_name("md", "Close", "fast", "Price")
        assert result.failed
        assert result.error_codes == [ErrorCode.INVALID_CONNECTION]

    def test_second_connection_into_input_warns(self, crossover_editor):
        result = crossover_editor.connect_by_name("md", "High", "slow", "Price")
        assert result.status == ResultStatus.WARNING
        assert result.data in crossover_editor.definition.connections

    def test_unknown_port_names(self, crossover_editor):
        assert crossover_editor.connect_by_name("md", "Bid", "fast", "Price").failed
        assert crossover_editor.connect_by_name("md", "Close", "ghost", "Price").failed

    def test_disconnect(self, crossover_editor):
        conn = crossover_editor.definition.connections[-1]
        assert crossover_editor.disconnect(conn.id).data == conn
        assert crossover_editor.disconnect(conn.id).failed


class TestHistory:

    def test_undo_redo(self, editor):
        editor.add_block(BlockType.EMA, block_id="ema")

        assert editor.undo().success
        assert editor.definition.is_empty
        assert editor.redo().success
        assert editor.definition.get_block("ema") is not None

    def test_new_edit_clears_redo(self, editor):
        editor.add_block(BlockType.EMA, block_id="ema")
        editor.undo()
        editor.add_block(BlockType.SMA, block_id="sma")
        assert not editor.can_redo
        assert editor.redo().failed

    def test_nothing_to_undo(self, editor):
        assert editor.undo().failed

    def test_history_is_bounded(self, empty_definition):
        editor = StrategyEditor(empty_definition, settings=EngineSettings(max_undo_steps=2))
        for block_id in ("a", "b", "c"):
            editor.add_block(BlockType.EMA, block_id=block_id)

        assert editor.undo().success
        assert editor.undo().success
        assert editor.undo().failed
        assert [b.id for b in editor.definition.blocks] == ["a"]


class TestStrategyCommands:

    def test_update_info(self, editor):
        assert editor.update_info(name="Momentum", tags=["trend"]).data.name == "Momentum"
        assert editor.definition.metadata.tags == ("trend",)
        assert editor.rename("").failed

    def test_save_bumps_version_without_history(self, editor):
        editor.add_block(BlockType.EMA, block_id="ema")
        result = editor.save(now=FIXED_NOW)

        assert result.data.version == 2
        assert editor.definition.version == 2
        editor.undo()
        assert editor.definition.is_empty

    def test_save_after_undo_never_reuses_a_version(self, editor):
        """Undo can restore a pre-save snapshot; the next save still moves forward."""
        editor.add_block(BlockType.EMA, block_id="ema")
        first = editor.save(now=FIXED_NOW).data
        editor.undo()
        second = editor.save(now=FIXED_NOW).data

        assert (first.version, len(first.blocks)) == (2, 1)
        assert (second.version, len(second.blocks)) == (3, 0)

        editor.redo()
        assert editor.save(now=FIXED_NOW).data.version == 4

    def test_default_name_from_settings(self):
        editor = StrategyEditor(settings=EngineSettings(default_strategy_name="Scratch"))
        assert editor.definition.name == "Scratch"

    def test_compile(self, crossover_editor):
        result = crossover_editor.compile()
        assert result.success
        assert isinstance(result.data, CompiledStrategy)
        assert result.data.class_name == "TestStrategy"

    def test_compile_reports_findings(self, editor):
        editor.add_block(BlockType.BUY_ORDER, block_id="buy")
        result = editor.compile()
        assert result.failed
        assert ErrorCode.MISSING_CONNECTION in result.error_codes

    def test_validate(self, crossover_editor):
        assert crossover_editor.validate() == []
