"""
End-to-end tests: build strategies through the editor, compile them, load the
generated class and feed it ticks.
"""
import logging
import math
from datetime import datetime, timezone

import pytest

from strategy_builder.features.blocks.domain import BlockType
from strategy_builder.features.codegen.application import instantiate

from conftest import make_tick, wire


GENERATED_LOGGER = "strategy_builder.generated"


def compile_ok(editor):
    result = editor.compile()
    assert not result.failed, result.errors
    return result.data


def run(strategy, closes):
    """Feed closes one minute apart; return the signals of each tick."""
    return [strategy.execute(make_tick(close, index)) for index, close in enumerate(closes)]


def epoch_ms(*args, tz=timezone.utc):
    return int(datetime(*args, tzinfo=tz).timestamp() * 1000)


CROSSOVER_CLOSES = [10.0, 9.0, 8.0, 7.0, 12.0, 15.0]


class TestCrossoverStrategy:
    """EMA(2) crossing above EMA(4) places a single buy."""

    def test_single_buy_on_cross(self, crossover_editor):
        strategy = instantiate(compile_ok(crossover_editor))
        per_tick = run(strategy, CROSSOVER_CLOSES)

        fired = [i for i, signals in enumerate(per_tick) if signals]
        assert fired == [4]
        (order,) = per_tick[4]
        assert order == {
            "type": "BUY",
            "order_type": "market",
            "quantity": 1.0,
            "quantity_type": "fixed",
            "price": 12.0,
            "timestamp": 240_000,
            "status": "PENDING",
            "block_id": "buy",
        }

    def test_reset_reproduces_run(self, crossover_editor):
        strategy = instantiate(compile_ok(crossover_editor))
        first = run(strategy, CROSSOVER_CLOSES)
        strategy.reset()
        assert run(strategy, CROSSOVER_CLOSES) == first

    def test_set_parameters(self, crossover_editor):
        strategy = instantiate(compile_ok(crossover_editor))
        strategy.set_parameters({"Buy_Order_quantity": 3})

        assert strategy.get_parameters()["Buy_Order_quantity"] == 3
        assert run(strategy, CROSSOVER_CLOSES)[4][0]["quantity"] == 3.0

    def test_unknown_parameter(self, crossover_editor):
        compiled = compile_ok(crossover_editor)
        with pytest.raises(KeyError):
            instantiate(compiled).set_parameters({"Buy_Order_colour": "red"})
        with pytest.raises(KeyError):
            instantiate(compiled, {"nope": 1})

    @pytest.mark.parametrize("params,message", [
        ({"Fast_EMA_period": -3}, "Fast_EMA_period: must be at least 1"),
        ({"Fast_EMA_period": "fast"}, "Fast_EMA_period: must be int or float, got str"),
        ({"Buy_Order_orderType": "bogus"}, "Buy_Order_orderType: 'bogus' must be one of"),
        ({"Buy_Order_quantity": None}, "Buy_Order_quantity: required parameter cannot be empty"),
    ])
    def test_out_of_constraint_parameters_rejected(self, crossover_editor, params, message):
        strategy = instantiate(compile_ok(crossover_editor))
        before = strategy.get_parameters()

        with pytest.raises(ValueError, match=message):
            strategy.set_parameters(params)
        assert strategy.get_parameters() == before
        assert [i for i, s in enumerate(run(strategy, CROSSOVER_CLOSES)) if s] == [4]

    def test_rejected_batch_applies_nothing(self, crossover_editor):
        """One bad value rejects the whole update, valid keys included."""
        crossover_editor.add_block(BlockType.SMA, block_id="sma")
        wire(crossover_editor, "md", "Close", "sma", "Price")
        strategy = instantiate(compile_ok(crossover_editor))

        with pytest.raises(ValueError, match="Simple_Moving_Average_period: must be at least 1"):
            strategy.set_parameters({"Buy_Order_quantity": 5, "Simple_Moving_Average_period": -1})
        assert strategy.get_parameters()["Buy_Order_quantity"] == 1
        assert strategy.get_parameters()["Simple_Moving_Average_period"] == 20

    def test_override_rejected_at_instantiation(self, crossover_editor):
        with pytest.raises(ValueError):
            instantiate(compile_ok(crossover_editor), {"Slow_EMA_period": 0})

    def test_parameter_rules_table(self, crossover_editor):
        strategy = instantiate(compile_ok(crossover_editor))
        rules = strategy.PARAMETER_RULES

        assert set(rules) == set(strategy.get_parameters())
        assert rules["Fast_EMA_period"] == {"kind": "number", "required": True, "min": 1, "max": 200}
        assert rules["Buy_Order_orderType"]["options"] == ["market", "limit", "stop"]
        assert rules["Buy_Order_orderType"]["required"] is True

    def test_parameter_override_at_instantiation(self, crossover_editor):
        """Slowing the fast EMA to the slow period removes the cross."""
        strategy = instantiate(compile_ok(crossover_editor), {"Fast_EMA_period": 4})
        assert all(not signals for signals in run(strategy, CROSSOVER_CLOSES))

    def test_limit_order_price(self, crossover_editor):
        crossover_editor.update_property("buy", "orderType", "limit")
        crossover_editor.update_property("buy", "limitOffset", -1.0)
        order = run(instantiate(compile_ok(crossover_editor)), CROSSOVER_CLOSES)[4][0]
        assert order["order_type"] == "limit"
        assert order["price"] == pytest.approx(11.88)

    def test_connected_zero_price_is_used(self, crossover_editor):
        """A wired price of 0.0 is a value, not a missing input."""
        crossover_editor.add_block(BlockType.PARAMETER, block_id="px", name="Price")
        wire(crossover_editor, "px", "Value", "buy", "Price")
        order = run(instantiate(compile_ok(crossover_editor)), CROSSOVER_CLOSES)[4][0]
        assert order["price"] == 0.0

    def test_signal_output_after_buy(self, crossover_editor):
        crossover_editor.add_block(BlockType.SIGNAL_OUTPUT, block_id="sig")
        wire(crossover_editor, "buy", "Order Placed", "sig", "Signal")
        per_tick = run(instantiate(compile_ok(crossover_editor)), CROSSOVER_CLOSES)

        order, published = per_tick[4]
        assert order["type"] == "BUY"
        assert published["type"] == "SIGNAL"
        assert published["format"] == "json"
        assert published["signals"] == [
            {"signal": True, "confidence": 1.0, "metadata": "", "timestamp": 240_000}
        ]
        assert '"confidence": 1.0' in published["payload"]


@pytest.fixture
def threshold_editor(editor):
    """
    Close > Parameter(100) drives a notification and a log of the close.
    """
    editor.add_block(BlockType.MARKET_DATA, block_id="md")
    editor.add_block(BlockType.PARAMETER, block_id="limit", name="Limit")
    editor.add_block(BlockType.COMPARISON, block_id="above")
    editor.add_block(BlockType.NOTIFICATION, block_id="note")
    editor.add_block(BlockType.LOG_OUTPUT, block_id="log")

    editor.update_property("limit", "defaultValue", "100")
    editor.update_property("above", "operator", ">")
    editor.update_property("log", "prefix", "close")

    wire(editor, "md", "Close", "above", "Left Value")
    wire(editor, "limit", "Value", "above", "Right Value")
    wire(editor, "above", "Result", "note", "Trigger")
    wire(editor, "md", "Close", "log", "Data")
    return editor


class TestThresholdStrategy:

    def test_notifications(self, threshold_editor):
        per_tick = run(instantiate(compile_ok(threshold_editor)), [90.0, 110.0, 120.0])

        assert per_tick[0] == []
        assert per_tick[1] == [{
            "type": "NOTIFICATION",
            "channels": ["browser"],
            "message": "Strategy alert",
            "priority": "normal",
            "timestamp": 60_000,
            "block_id": "note",
        }]
        assert len(per_tick[2]) == 1

    def test_notification_cooldown(self, threshold_editor):
        strategy = instantiate(compile_ok(threshold_editor), {"Notification_cooldownMinutes": 5})
        per_tick = run(strategy, [110.0, 120.0, 130.0])
        assert [len(signals) for signals in per_tick] == [1, 0, 0]

    def test_parameter_value_is_tunable(self, threshold_editor):
        strategy = instantiate(compile_ok(threshold_editor), {"Limit_defaultValue": "115"})
        assert [len(s) for s in run(strategy, [110.0, 120.0])] == [0, 1]

    def test_parameter_clamped(self, threshold_editor):
        """Number parameters are clamped to [minValue, maxValue] when max > min."""
        strategy = instantiate(compile_ok(threshold_editor), {
            "Limit_defaultValue": "500", "Limit_minValue": 0, "Limit_maxValue": 150,
        })
        assert [len(s) for s in run(strategy, [140.0, 160.0])] == [0, 1]

    def test_log_output(self, threshold_editor, caplog):
        caplog.set_level(logging.DEBUG, logger=GENERATED_LOGGER)
        run(instantiate(compile_ok(threshold_editor)), [90.0, 110.0])

        messages = [r.getMessage() for r in caplog.records if r.name == GENERATED_LOGGER]
        assert messages == ["close 90.0", "close 110.0"]
        assert all(r.levelno == logging.INFO for r in caplog.records if r.name == GENERATED_LOGGER)


def _math_pipeline(editor, operation=None, function=None, right="0"):
    """Close (op) Parameter -> [Math Function] -> Log Output."""
    editor.add_block(BlockType.MARKET_DATA, block_id="md")
    editor.add_block(BlockType.PARAMETER, block_id="rhs")
    editor.add_block(BlockType.ARITHMETIC, block_id="arith")
    editor.add_block(BlockType.LOG_OUTPUT, block_id="log")
    editor.update_property("rhs", "defaultValue", right)
    editor.update_property("arith", "operation", operation or "add")
    wire(editor, "md", "Close", "arith", "Left Value")
    wire(editor, "rhs", "Value", "arith", "Right Value")
    if function:
        editor.add_block(BlockType.MATH_FUNCTION, block_id="fn")
        editor.update_property("fn", "function", function)
        wire(editor, "arith", "Result", "fn", "Input")
        wire(editor, "fn", "Result", "log", "Data")
    else:
        wire(editor, "arith", "Result", "log", "Data")
    return editor


def _logged_value(editor, close, caplog):
    caplog.set_level(logging.DEBUG, logger=GENERATED_LOGGER)
    instantiate(compile_ok(editor)).execute(make_tick(close))
    (record,) = [r for r in caplog.records if r.name == GENERATED_LOGGER]
    return float(record.getMessage())


class TestMathSemantics:

    @pytest.mark.parametrize("operation,close,right,expected", [
        ("divide", 10.0, "0", 0.0),
        ("modulo", 10.0, "0", 0.0),
        ("modulo", -7.0, "3", -1.0),
        ("power", 2.0, "10", 1024.0),
        ("subtract", 5.0, "7.5", -2.5),
    ])
    def test_arithmetic(self, editor, caplog, operation, close, right, expected):
        _math_pipeline(editor, operation=operation, right=right)
        assert _logged_value(editor, close, caplog) == expected

    @pytest.mark.parametrize("function,close,expected", [
        ("round", 2.5, 3.0),
        ("round", -2.5, -2.0),
        ("sqrt", -16.0, 4.0),
        ("log", 0.0, 0.0),
        ("log10", 1000.0, 3.0),
        ("ceil", 1.2, 2.0),
    ])
    def test_functions(self, editor, caplog, function, close, expected):
        _math_pipeline(editor, function=function)
        assert _logged_value(editor, close, caplog) == pytest.approx(expected)


@pytest.fixture
def session_editor(editor):
    editor.add_block(BlockType.TIME_CONDITION, block_id="session")
    editor.add_block(BlockType.NOTIFICATION, block_id="note")
    wire(editor, "session", "Is Active", "note", "Trigger")
    return editor


class TestTimeCondition:

    @pytest.mark.parametrize("timestamp,active", [
        (epoch_ms(2024, 1, 2, 10, 0), True),     # Tuesday
        (epoch_ms(2024, 1, 2, 9, 29), False),    # before the open
        (epoch_ms(2024, 1, 2, 16, 0), False),    # at the close
        (epoch_ms(2024, 1, 6, 10, 0), False),    # Saturday
    ])
    def test_market_hours_utc(self, session_editor, timestamp, active):
        strategy = instantiate(compile_ok(session_editor))
        assert bool(strategy.execute({"timestamp": timestamp})) == active

    def test_market_hours_in_new_york(self, session_editor):
        session_editor.update_property("session", "timezone", "America/New_York")
        strategy = instantiate(compile_ok(session_editor))

        assert strategy.execute({"timestamp": epoch_ms(2024, 1, 2, 15, 0)})
        strategy.reset()
        assert not strategy.execute({"timestamp": epoch_ms(2024, 1, 2, 14, 0)})

    def test_day_of_week(self, session_editor):
        session_editor.update_property("session", "conditionType", "day_of_week")
        session_editor.update_property("session", "daysOfWeek", [0, 6])
        strategy = instantiate(compile_ok(session_editor))

        assert strategy.execute({"timestamp": epoch_ms(2024, 1, 7, 12, 0)})      # Sunday
        assert not strategy.execute({"timestamp": epoch_ms(2024, 1, 8, 12, 0)})  # Monday

    def test_time_range(self, session_editor):
        session_editor.update_property("session", "conditionType", "time_range")
        session_editor.update_property("session", "startTime", "08:00")
        session_editor.update_property("session", "endTime", "09:00")
        strategy = instantiate(compile_ok(session_editor))

        assert strategy.execute({"timestamp": epoch_ms(2024, 1, 2, 9, 0)})
        assert not strategy.execute({"timestamp": epoch_ms(2024, 1, 2, 9, 1)})


class TestRiskExits:

    @pytest.fixture
    def stop_editor(self, editor):
        editor.add_block(BlockType.MARKET_DATA, block_id="md")
        editor.add_block(BlockType.PARAMETER, block_id="entry")
        editor.add_block(BlockType.STOP_LOSS, block_id="stop")
        editor.update_property("entry", "defaultValue", "100")
        wire(editor, "md", "Close", "stop", "Current Price")
        wire(editor, "entry", "Value", "stop", "Entry Price")
        return editor

    def test_percentage_stop(self, stop_editor):
        per_tick = run(instantiate(compile_ok(stop_editor)), [99.0, 98.5, 97.0])
        assert [bool(s) for s in per_tick] == [False, False, True]
        assert per_tick[2][0]["reason"] == "STOP_LOSS"
        assert per_tick[2][0]["type"] == "SELL"

    def test_trailing_stop_tracks_peak(self, stop_editor):
        stop_editor.update_property("stop", "stopType", "trailing")
        stop_editor.update_property("stop", "stopValue", 10)
        per_tick = run(instantiate(compile_ok(stop_editor)), [100.0, 150.0, 136.0, 134.0])
        assert [bool(s) for s in per_tick] == [False, False, False, True]

    def test_atr_multiple_never_triggers(self, stop_editor):
        stop_editor.update_property("stop", "stopType", "atr_multiple")
        per_tick = run(instantiate(compile_ok(stop_editor)), [100.0, 1.0, 0.01])
        assert all(s == [] for s in per_tick)


@pytest.fixture
def every_block_editor(editor):
    """One block of every type, all wired."""
    blocks = [
        ("md", BlockType.MARKET_DATA), ("limit", BlockType.PARAMETER), ("session", BlockType.TIME_CONDITION),
        ("ema", BlockType.EMA), ("sma", BlockType.SMA), ("rsi", BlockType.RSI), ("macd", BlockType.MACD),
        ("bb", BlockType.BOLLINGER_BANDS), ("stoch", BlockType.STOCHASTIC), ("cmp", BlockType.COMPARISON),
        ("and", BlockType.LOGICAL_AND), ("or", BlockType.LOGICAL_OR), ("not", BlockType.LOGICAL_NOT),
        ("cond", BlockType.CONDITIONAL), ("arith", BlockType.ARITHMETIC), ("fn", BlockType.MATH_FUNCTION),
        ("buy", BlockType.BUY_ORDER), ("sell", BlockType.SELL_ORDER), ("close", BlockType.CLOSE_POSITION),
        ("stop", BlockType.STOP_LOSS), ("tp", BlockType.TAKE_PROFIT), ("note", BlockType.NOTIFICATION),
        ("sig", BlockType.SIGNAL_OUTPUT), ("log", BlockType.LOG_OUTPUT),
    ]
    for block_id, block_type in blocks:
        editor.add_block(block_type, block_id=block_id)

    editor.update_property("ema", "period", 3)
    editor.update_property("sma", "period", 5)
    editor.update_property("rsi", "period", 4)
    editor.update_property("session", "conditionType", "time_range")
    editor.update_property("session", "startTime", "00:00")
    editor.update_property("session", "endTime", "23:59")
    editor.update_property("log", "logToConsole", False)

    for indicator in ("ema", "sma", "rsi", "macd", "bb"):
        wire(editor, "md", "Close", indicator, "Price")
    wire(editor, "md", "Close", "stoch", "Close")
    wire(editor, "ema", "EMA Value", "cmp", "Left Value")
    wire(editor, "sma", "SMA Value", "cmp", "Right Value")
    wire(editor, "cmp", "Result", "and", "Input A")
    wire(editor, "session", "Is Active", "and", "Input B")
    wire(editor, "and", "Result", "or", "Input A")
    wire(editor, "session", "Is Active", "or", "Input B")
    wire(editor, "or", "Result", "not", "Input")
    wire(editor, "not", "Result", "cond", "Condition")
    wire(editor, "rsi", "RSI Value", "cond", "True Value")
    wire(editor, "macd", "Histogram", "cond", "False Value")
    wire(editor, "cond", "Result", "arith", "Left Value")
    wire(editor, "limit", "Value", "arith", "Right Value")
    wire(editor, "arith", "Result", "fn", "Input")
    wire(editor, "cmp", "Result", "buy", "Condition")
    wire(editor, "not", "Result", "sell", "Condition")
    wire(editor, "bb", "Upper Band", "sell", "Price")
    wire(editor, "cmp", "Result", "close", "Condition")
    wire(editor, "md", "Close", "stop", "Current Price")
    wire(editor, "sma", "SMA Value", "stop", "Entry Price")
    wire(editor, "md", "Close", "tp", "Current Price")
    wire(editor, "bb", "Middle Band", "tp", "Entry Price")
    wire(editor, "stop", "Stop Triggered", "note", "Trigger")
    wire(editor, "fn", "Result", "note", "Message")
    wire(editor, "buy", "Order Placed", "sig", "Signal")
    wire(editor, "stoch", "%K", "sig", "Confidence")
    wire(editor, "tp", "Target Reached", "sig", "Metadata")
    wire(editor, "md", "Candle", "log", "Data")
    return editor


class TestEveryBlockType:

    def test_compiles_without_findings(self, every_block_editor):
        assert every_block_editor.validate() == []
        compiled = compile_ok(every_block_editor)
        assert {b.type for b in every_block_editor.definition.blocks} == set(BlockType)
        assert len(compiled.execution_order) == len(BlockType)
        assert set(compiled.source_map.blocks) == set(compiled.execution_order)

    def test_runs_a_session(self, every_block_editor):
        strategy = instantiate(compile_ok(every_block_editor))
        closes = [100.0 + 10.0 * math.sin(i / 3.0) for i in range(30)]

        signal_types = set()
        for signals in run(strategy, closes):
            assert isinstance(signals, list)
            signal_types.update(s["type"] for s in signals)

        assert "BUY" in signal_types
        assert "SIGNAL" in signal_types
        assert signal_types <= {"BUY", "SELL", "SIGNAL", "NOTIFICATION"}

    def test_reset_after_session(self, every_block_editor):
        strategy = instantiate(compile_ok(every_block_editor))
        closes = [100.0 + (i % 7) - 3.0 for i in range(20)]
        first = run(strategy, closes)
        strategy.reset()
        assert run(strategy, closes) == first
