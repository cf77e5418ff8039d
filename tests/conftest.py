"""
Shared fixtures: the default block catalog, an empty strategy and a small
EMA-crossover strategy built through the editor.
"""
from datetime import datetime, timezone

import pytest

from strategy_builder.application.block_registry import get_block_catalog
from strategy_builder.features.blocks.application import BlockService
from strategy_builder.features.blocks.domain import (
    BlockCategory,
    BlockInput,
    BlockOutput,
    BlockType,
    StrategyBlock,
)
from strategy_builder.features.connections.domain import BlockConnection
from strategy_builder.features.strategies.application import StrategyEditor
from strategy_builder.features.strategies.domain import StrategyDefinition
from strategy_builder.shared.domain.value_objects import DataKind


FIXED_NOW = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def wire(editor, source_id, output_name, target_id, input_name):
    """Connect two blocks by port names; fail the test if the editor refuses."""
    result = editor.connect_by_name(source_id, output_name, target_id, input_name)
    assert not result.failed, result.errors
    return result.data


def make_block(block_id, inputs=(), outputs=(), block_type=BlockType.MATH_FUNCTION,
               category=BlockCategory.MATH, name=None):
    """
    Build a bare block with the given ports.

    inputs: (name, DataKind, required) tuples
    outputs: (name, DataKind) tuples
    """
    return StrategyBlock(
        id=block_id,
        type=block_type,
        category=category,
        name=name or block_id,
        inputs=tuple(
            BlockInput(id=f"{block_id}_input_{i}", name=n, data_kind=k, required=r)
            for i, (n, k, r) in enumerate(inputs)
        ),
        outputs=tuple(
            BlockOutput(id=f"{block_id}_output_{i}", name=n, data_kind=k)
            for i, (n, k) in enumerate(outputs)
        ),
    )


def connect(connection_id, source, target, output_index=0, input_index=0):
    """Connection between two make_block() blocks by port index."""
    output = source.outputs[output_index]
    return BlockConnection(
        id=connection_id,
        source_block_id=source.id,
        source_output_id=output.id,
        target_block_id=target.id,
        target_input_id=target.inputs[input_index].id,
        data_kind=output.data_kind,
    )


def number_node(block_id):
    """One required NUMBER input, one NUMBER output."""
    return make_block(block_id, inputs=(("in", DataKind.NUMBER, True),), outputs=(("out", DataKind.NUMBER),))


@pytest.fixture
def catalog():
    return get_block_catalog()


@pytest.fixture
def block_service(catalog):
    return BlockService(catalog)


@pytest.fixture
def empty_definition():
    return StrategyDefinition.new("Test Strategy", strategy_id="strategy-1", now=FIXED_NOW)


@pytest.fixture
def editor(empty_definition):
    return StrategyEditor(empty_definition)


@pytest.fixture
def crossover_editor(editor):
    """
    Market Data -> Fast EMA (2) / Slow EMA (4) -> Comparison (crosses_above) -> Buy Order.
    """
    editor.add_block(BlockType.MARKET_DATA, block_id="md")
    editor.add_block(BlockType.EMA, block_id="fast", name="Fast EMA")
    editor.add_block(BlockType.EMA, block_id="slow", name="Slow EMA")
    editor.add_block(BlockType.COMPARISON, block_id="cross")
    editor.add_block(BlockType.BUY_ORDER, block_id="buy")

    editor.update_property("fast", "period", 2)
    editor.update_property("slow", "period", 4)
    editor.update_property("cross", "operator", "crosses_above")

    wire(editor, "md", "Close", "fast", "Price")
    wire(editor, "md", "Close", "slow", "Price")
    wire(editor, "fast", "EMA Value", "cross", "Left Value")
    wire(editor, "slow", "EMA Value", "cross", "Right Value")
    wire(editor, "cross", "Result", "buy", "Condition")
    return editor


@pytest.fixture
def crossover_definition(crossover_editor):
    return crossover_editor.definition


def make_tick(close, index=0, spread=1.0):
    """OHLCV tick one minute apart per index."""
    return {
        "open": close,
        "high": close + spread,
        "low": close - spread,
        "close": close,
        "volume": 1000.0,
        "timestamp": index * 60_000,
    }
