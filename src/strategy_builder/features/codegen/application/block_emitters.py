"""
Block emitters

Closed table mapping each BlockType to a function that returns the Python
statements implementing that block inside a generated strategy class.

Every emitter receives an EmitContext and returns a BlockCode with four
statement groups:
- state: attributes declared in __init__
- init: configuration read from the parameter table (local `p`) in _initialize
- update: per-tick statements in execute(tick); `signals` collects side effects
- reset: statements restoring per-tick state

Statements are indented relative to their method body. Each block prefixes its
names with ctx.var (e.g. ``ema_2``), so emitted names never collide.
"""
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Tuple

from strategy_builder.features.blocks.domain import BlockType, StrategyBlock


@dataclass
class BlockCode:
    state: List[str] = field(default_factory=list)
    init: List[str] = field(default_factory=list)
    update: List[str] = field(default_factory=list)
    reset: List[str] = field(default_factory=list)
    imports: Tuple[str, ...] = ()


@dataclass(frozen=True)
class EmitContext:
    """
    Names an emitter may reference.

    Attributes:
        block: Block being emitted
        var: Unique variable prefix, ``{type}_{topo_index}``
        inputs: Input port name -> local holding the resolved input value
        outputs: Output port name -> local the block must assign
        param_keys: Property name -> key in the parameter table
    """
    block: StrategyBlock
    var: str
    inputs: Dict[str, str]
    outputs: Dict[str, str]
    param_keys: Dict[str, str]

    def param(self, name: str) -> str:
        return f"p[{self.param_keys[name]!r}]"

    def state(self, name: str) -> str:
        return f"self.{self.var}_{name}"

    def local(self, name: str) -> str:
        return f"{self.var}_{name}"

    def input(self, name: str) -> str:
        return self.inputs[name]

    def output(self, name: str) -> str:
        return self.outputs[name]


Emitter = Callable[[EmitContext], BlockCode]


# Expressions used for unconnected inputs; {price} is the configured fallback
# price field. Inputs not listed fall back to None.
INPUT_FALLBACKS: Dict[BlockType, Dict[str, str]] = {
    BlockType.STOCHASTIC: {"High": 'tick["high"]', "Low": 'tick["low"]'},
    BlockType.BUY_ORDER: {"Price": "tick[{price!r}]"},
    BlockType.SELL_ORDER: {"Price": "tick[{price!r}]"},
    BlockType.CLOSE_POSITION: {"Price": "tick[{price!r}]"},
    BlockType.SIGNAL_OUTPUT: {"Confidence": "1.0", "Metadata": "''"},
}


def fallback_expression(block_type: BlockType, input_name: str, price_field: str = "close") -> str:
    template = INPUT_FALLBACKS.get(block_type, {}).get(input_name)
    if template is None:
        return "None"
    return template.format(price=price_field)


# ----------------------------------------------------------------------
# Inputs
# ----------------------------------------------------------------------

def emit_market_data(ctx: EmitContext) -> BlockCode:
    return BlockCode(
        init=[
            f"{ctx.state('symbol')} = {ctx.param('symbol')}",
            f"{ctx.state('timeframe')} = {ctx.param('timeframe')}",
        ],
        update=[
            f"{ctx.output('Open')} = tick['open']",
            f"{ctx.output('High')} = tick['high']",
            f"{ctx.output('Low')} = tick['low']",
            f"{ctx.output('Close')} = tick['close']",
            f"{ctx.output('Volume')} = tick.get('volume', 0.0)",
            f"{ctx.output('Candle')} = tick",
        ],
    )


def emit_parameter(ctx: EmitContext) -> BlockCode:
    kind, raw, value = ctx.local("type"), ctx.local("raw"), ctx.local("value")
    low, high = ctx.local("min"), ctx.local("max")
    return BlockCode(
        init=[
            f"{kind} = {ctx.param('dataType')}",
            f"{raw} = {ctx.param('defaultValue')}",
            f"if {kind} == 'number':",
            f"    {value} = _to_float({raw})",
            f"    {low} = _to_float({ctx.param('minValue')})",
            f"    {high} = _to_float({ctx.param('maxValue')})",
            f"    if {high} > {low}:",
            f"        {value} = min(max({value}, {low}), {high})",
            f"elif {kind} == 'boolean':",
            f"    {value} = str({raw}).strip().lower() in ('true', '1', 'yes', 'on')",
            "else:",
            f"    {value} = '' if {raw} is None else str({raw})",
            f"{ctx.state('value')} = {value}",
        ],
        update=[f"{ctx.output('Value')} = {ctx.state('value')}"],
    )


def emit_time_condition(ctx: EmitContext) -> BlockCode:
    tz_name, now = ctx.local("tz_name"), ctx.local("now")
    minutes, day, out = ctx.local("minutes"), ctx.local("day"), ctx.output("Is Active")
    start, end = ctx.state("start"), ctx.state("end")
    condition = ctx.state("condition")
    return BlockCode(
        init=[
            f"{condition} = {ctx.param('conditionType')}",
            f"{start} = _parse_hhmm({ctx.param('startTime')})",
            f"{end} = _parse_hhmm({ctx.param('endTime')})",
            f"{ctx.state('days')} = tuple(int(d) for d in ({ctx.param('daysOfWeek')} or ()))",
            f"{tz_name} = {ctx.param('timezone')}",
            f"{ctx.state('tz')} = timezone.utc if {tz_name} == 'UTC' else ZoneInfo({tz_name})",
        ],
        update=[
            f"{now} = datetime.fromtimestamp(tick.get('timestamp', 0) / 1000, tz={ctx.state('tz')})",
            f"{minutes} = {now}.hour * 60 + {now}.minute",
            f"{day} = ({now}.weekday() + 1) % 7",
            f"if {condition} == 'market_hours':",
            f"    {out} = 1 <= {day} <= 5 and 570 <= {minutes} < 960",
            f"elif {condition} == 'specific_time':",
            f"    {out} = {start} is not None and {minutes} == {start}",
            f"elif {condition} == 'time_range':",
            f"    {out} = {start} is not None and {end} is not None and {start} <= {minutes} <= {end}",
            f"elif {condition} == 'day_of_week':",
            f"    {out} = not {ctx.state('days')} or {day} in {ctx.state('days')}",
            "else:",
            f"    {out} = True",
        ],
        imports=("from datetime import datetime, timezone", "from zoneinfo import ZoneInfo"),
    )


# ----------------------------------------------------------------------
# Indicators
# ----------------------------------------------------------------------

def emit_ema(ctx: EmitContext) -> BlockCode:
    price, value = ctx.local("price"), ctx.state("value")
    period, alpha = ctx.state("period"), ctx.state("alpha")
    return BlockCode(
        state=[f"{value} = None"],
        init=[
            f"{period} = int({ctx.param('period')})",
            f"{alpha} = 2.0 / ({period} + 1)",
        ],
        update=[
            f"{price} = _to_float({ctx.input('Price')}, None)",
            f"if {price} is not None:",
            f"    if {value} is None:",
            f"        {value} = {price}",
            "    else:",
            f"        {value} = {price} * {alpha} + {value} * (1 - {alpha})",
            f"{ctx.output('EMA Value')} = {value}",
        ],
        reset=[f"{value} = None"],
    )


def emit_sma(ctx: EmitContext) -> BlockCode:
    price, window = ctx.local("price"), ctx.state("window")
    return BlockCode(
        state=[f"{window} = None"],
        init=[f"{ctx.state('period')} = int({ctx.param('period')})"],
        update=[
            f"{price} = _to_float({ctx.input('Price')}, None)",
            f"if {price} is not None:",
            f"    {window}.append({price})",
            f"{ctx.output('SMA Value')} = sum({window}) / len({window}) if {window} else None",
        ],
        reset=[f"{window} = deque(maxlen={ctx.state('period')})"],
    )


def emit_rsi(ctx: EmitContext) -> BlockCode:
    price, change = ctx.local("price"), ctx.local("change")
    prev, gains, losses = ctx.state("prev"), ctx.state("gains"), ctx.state("losses")
    period = ctx.state("period")
    avg_gain, avg_loss = ctx.local("avg_gain"), ctx.local("avg_loss")
    out = ctx.output("RSI Value")
    return BlockCode(
        state=[f"{prev} = None", f"{gains} = None", f"{losses} = None"],
        init=[f"{period} = int({ctx.param('period')})"],
        update=[
            f"{price} = _to_float({ctx.input('Price')}, None)",
            f"if {price} is not None:",
            f"    if {prev} is not None:",
            f"        {change} = {price} - {prev}",
            f"        {gains}.append(max({change}, 0.0))",
            f"        {losses}.append(max(-{change}, 0.0))",
            f"    {prev} = {price}",
            f"if len({gains}) >= {period}:",
            f"    {avg_gain} = sum({gains}) / {period}",
            f"    {avg_loss} = sum({losses}) / {period}",
            f"    {out} = 100.0 if {avg_loss} == 0 else 100.0 - 100.0 / (1.0 + {avg_gain} / {avg_loss})",
            "else:",
            f"    {out} = 50.0",
        ],
        reset=[
            f"{prev} = None",
            f"{gains} = deque(maxlen={period})",
            f"{losses} = deque(maxlen={period})",
        ],
    )


def emit_macd(ctx: EmitContext) -> BlockCode:
    price = ctx.local("price")
    fast, slow, signal = ctx.state("fast"), ctx.state("slow"), ctx.state("signal")
    fast_a, slow_a, signal_a = ctx.state("fast_alpha"), ctx.state("slow_alpha"), ctx.state("signal_alpha")
    line = ctx.local("line")
    return BlockCode(
        state=[f"{fast} = None", f"{slow} = None", f"{signal} = None"],
        init=[
            f"{fast_a} = 2.0 / (int({ctx.param('fastPeriod')}) + 1)",
            f"{slow_a} = 2.0 / (int({ctx.param('slowPeriod')}) + 1)",
            f"{signal_a} = 2.0 / (int({ctx.param('signalPeriod')}) + 1)",
        ],
        update=[
            f"{price} = _to_float({ctx.input('Price')}, None)",
            f"if {price} is not None:",
            f"    {fast} = {price} if {fast} is None else {price} * {fast_a} + {fast} * (1 - {fast_a})",
            f"    {slow} = {price} if {slow} is None else {price} * {slow_a} + {slow} * (1 - {slow_a})",
            f"    {line} = {fast} - {slow}",
            f"    {signal} = {line} if {signal} is None else {line} * {signal_a} + {signal} * (1 - {signal_a})",
            f"if {fast} is None:",
            f"    {ctx.output('MACD Line')} = {ctx.output('Signal Line')} = {ctx.output('Histogram')} = None",
            "else:",
            f"    {ctx.output('MACD Line')} = {fast} - {slow}",
            f"    {ctx.output('Signal Line')} = {signal}",
            f"    {ctx.output('Histogram')} = ({fast} - {slow}) - {signal}",
        ],
        reset=[f"{fast} = None", f"{slow} = None", f"{signal} = None"],
    )


def emit_bollinger_bands(ctx: EmitContext) -> BlockCode:
    price, window = ctx.local("price"), ctx.state("window")
    mean, std = ctx.local("mean"), ctx.local("std")
    width = ctx.state("width")
    upper, middle, lower = ctx.output("Upper Band"), ctx.output("Middle Band"), ctx.output("Lower Band")
    return BlockCode(
        state=[f"{window} = None"],
        init=[
            f"{ctx.state('period')} = int({ctx.param('period')})",
            f"{width} = _to_float({ctx.param('standardDeviation')}, 2.0)",
        ],
        update=[
            f"{price} = _to_float({ctx.input('Price')}, None)",
            f"if {price} is not None:",
            f"    {window}.append({price})",
            f"if {window}:",
            f"    {mean} = sum({window}) / len({window})",
            f"    {std} = math.sqrt(sum((x - {mean}) ** 2 for x in {window}) / len({window}))",
            f"    {upper} = {mean} + {width} * {std}",
            f"    {middle} = {mean}",
            f"    {lower} = {mean} - {width} * {std}",
            "else:",
            f"    {upper} = {middle} = {lower} = None",
        ],
        reset=[f"{window} = deque(maxlen={ctx.state('period')})"],
    )


def emit_stochastic(ctx: EmitContext) -> BlockCode:
    close, high, low = ctx.local("close"), ctx.local("high"), ctx.local("low")
    highs, lows, ks = ctx.state("highs"), ctx.state("lows"), ctx.state("ks")
    top, bottom = ctx.local("top"), ctx.local("bottom")
    k, d = ctx.state("k"), ctx.state("d")
    return BlockCode(
        state=[f"{highs} = None", f"{lows} = None", f"{ks} = None", f"{k} = None", f"{d} = None"],
        init=[
            f"{ctx.state('k_period')} = int({ctx.param('kPeriod')})",
            f"{ctx.state('d_period')} = int({ctx.param('dPeriod')})",
        ],
        update=[
            f"{close} = _to_float({ctx.input('Close')}, None)",
            f"if {close} is not None:",
            f"    {high} = _to_float({ctx.input('High')}, {close})",
            f"    {low} = _to_float({ctx.input('Low')}, {close})",
            f"    {highs}.append({high})",
            f"    {lows}.append({low})",
            f"    {top} = max({highs})",
            f"    {bottom} = min({lows})",
            f"    {k} = 50.0 if {top} == {bottom} else ({close} - {bottom}) / ({top} - {bottom}) * 100.0",
            f"    {ks}.append({k})",
            f"    {d} = sum({ks}) / len({ks})",
            f"{ctx.output('%K')} = {k}",
            f"{ctx.output('%D')} = {d}",
        ],
        reset=[
            f"{highs} = deque(maxlen={ctx.state('k_period')})",
            f"{lows} = deque(maxlen={ctx.state('k_period')})",
            f"{ks} = deque(maxlen={ctx.state('d_period')})",
            f"{k} = None",
            f"{d} = None",
        ],
    )


# ----------------------------------------------------------------------
# Logic and math
# ----------------------------------------------------------------------

def emit_comparison(ctx: EmitContext) -> BlockCode:
    left, right, op = ctx.local("left"), ctx.local("right"), ctx.state("operator")
    prev_l, prev_r = ctx.state("prev_left"), ctx.state("prev_right")
    out = ctx.output("Result")
    return BlockCode(
        state=[f"{prev_l} = None", f"{prev_r} = None"],
        init=[f"{op} = {ctx.param('operator')}"],
        update=[
            f"{left} = _to_float({ctx.input('Left Value')}, None)",
            f"{right} = _to_float({ctx.input('Right Value')}, None)",
            f"if {left} is None or {right} is None:",
            f"    {out} = False",
            f"elif {op} == '>':",
            f"    {out} = {left} > {right}",
            f"elif {op} == '<':",
            f"    {out} = {left} < {right}",
            f"elif {op} == '>=':",
            f"    {out} = {left} >= {right}",
            f"elif {op} == '<=':",
            f"    {out} = {left} <= {right}",
            f"elif {op} == '==':",
            f"    {out} = abs({left} - {right}) < 0.0001",
            f"elif {op} == '!=':",
            f"    {out} = abs({left} - {right}) >= 0.0001",
            f"elif {op} == 'crosses_above':",
            f"    {out} = {prev_l} is not None and {prev_l} <= {prev_r} and {left} > {right}",
            f"elif {op} == 'crosses_below':",
            f"    {out} = {prev_l} is not None and {prev_l} >= {prev_r} and {left} < {right}",
            "else:",
            f"    {out} = False",
            f"if {left} is not None and {right} is not None:",
            f"    {prev_l}, {prev_r} = {left}, {right}",
        ],
        reset=[f"{prev_l} = None", f"{prev_r} = None"],
    )


def emit_logical_and(ctx: EmitContext) -> BlockCode:
    return BlockCode(update=[
        f"{ctx.output('Result')} = bool({ctx.input('Input A')}) and bool({ctx.input('Input B')})",
    ])


def emit_logical_or(ctx: EmitContext) -> BlockCode:
    return BlockCode(update=[
        f"{ctx.output('Result')} = bool({ctx.input('Input A')}) or bool({ctx.input('Input B')})",
    ])


def emit_logical_not(ctx: EmitContext) -> BlockCode:
    return BlockCode(update=[f"{ctx.output('Result')} = not {ctx.input('Input')}"])


def emit_conditional(ctx: EmitContext) -> BlockCode:
    return BlockCode(update=[
        f"{ctx.output('Result')} = {ctx.input('True Value')} if {ctx.input('Condition')} "
        f"else {ctx.input('False Value')}",
    ])


def emit_arithmetic(ctx: EmitContext) -> BlockCode:
    left, right, op = ctx.local("left"), ctx.local("right"), ctx.state("operation")
    out = ctx.output("Result")
    return BlockCode(
        init=[f"{op} = {ctx.param('operation')}"],
        update=[
            f"{left} = _to_float({ctx.input('Left Value')})",
            f"{right} = _to_float({ctx.input('Right Value')})",
            f"if {op} == 'add':",
            f"    {out} = {left} + {right}",
            f"elif {op} == 'subtract':",
            f"    {out} = {left} - {right}",
            f"elif {op} == 'multiply':",
            f"    {out} = {left} * {right}",
            f"elif {op} == 'divide':",
            f"    {out} = {left} / {right} if {right} != 0 else 0.0",
            f"elif {op} == 'power':",
            "    try:",
            f"        {out} = math.pow({left}, {right})",
            "    except (OverflowError, ValueError):",
            f"        {out} = 0.0",
            f"elif {op} == 'modulo':",
            f"    {out} = math.fmod({left}, {right}) if {right} != 0 else 0.0",
            "else:",
            f"    {out} = 0.0",
        ],
    )


def emit_math_function(ctx: EmitContext) -> BlockCode:
    x, fn, out = ctx.local("x"), ctx.state("function"), ctx.output("Result")
    return BlockCode(
        init=[f"{fn} = {ctx.param('function')}"],
        update=[
            f"{x} = _to_float({ctx.input('Input')})",
            f"if {fn} == 'abs':",
            f"    {out} = abs({x})",
            f"elif {fn} == 'sqrt':",
            f"    {out} = math.sqrt(abs({x}))",
            f"elif {fn} == 'log':",
            f"    {out} = math.log({x}) if {x} > 0 else 0.0",
            f"elif {fn} == 'log10':",
            f"    {out} = math.log10({x}) if {x} > 0 else 0.0",
            f"elif {fn} == 'sin':",
            f"    {out} = math.sin({x})",
            f"elif {fn} == 'cos':",
            f"    {out} = math.cos({x})",
            f"elif {fn} == 'tan':",
            f"    {out} = math.tan({x})",
            f"elif {fn} == 'round':",
            f"    {out} = float(math.floor({x} + 0.5))",
            f"elif {fn} == 'floor':",
            f"    {out} = float(math.floor({x}))",
            f"elif {fn} == 'ceil':",
            f"    {out} = float(math.ceil({x}))",
            "else:",
            f"    {out} = {x}",
        ],
    )


# ----------------------------------------------------------------------
# Actions
# ----------------------------------------------------------------------

def _emit_order(ctx: EmitContext, side: str) -> BlockCode:
    now, base, price = ctx.local("now"), ctx.local("base"), ctx.local("price")
    last = ctx.state("last_order_ms")
    placed, details = ctx.output("Order Placed"), ctx.output("Order Details")
    return BlockCode(
        state=[f"{last} = None"],
        init=[
            f"{ctx.state('order_type')} = {ctx.param('orderType')}",
            f"{ctx.state('quantity')} = _to_float({ctx.param('quantity')}, 1.0)",
            f"{ctx.state('quantity_type')} = {ctx.param('quantityType')}",
            f"{ctx.state('limit_offset')} = _to_float({ctx.param('limitOffset')})",
        ],
        update=[
            f"{placed} = False",
            f"{details} = None",
            f"{now} = tick.get('timestamp', 0)",
            f"if {ctx.input('Condition')} and ({last} is None or {now} - {last} >= self.ORDER_COOLDOWN_MS):",
            f"    {base} = _to_float({ctx.input('Price')}, None)",
            f"    if {base} is None:",
            f"        {base} = _to_float(tick[self.PRICE_FIELD])",
            f"    if {ctx.state('order_type')} == 'limit':",
            f"        {price} = {base} * (1 + {ctx.state('limit_offset')} / 100.0)",
            "    else:",
            f"        {price} = {base}",
            f"    {details} = {{",
            f"        'type': {side!r},",
            f"        'order_type': {ctx.state('order_type')},",
            f"        'quantity': {ctx.state('quantity')},",
            f"        'quantity_type': {ctx.state('quantity_type')},",
            f"        'price': {price},",
            f"        'timestamp': {now},",
            "        'status': 'PENDING',",
            f"        'block_id': {ctx.block.id!r},",
            "    }",
            f"    signals.append({details})",
            f"    {placed} = True",
            f"    {last} = {now}",
        ],
        reset=[f"{last} = None"],
    )


def emit_buy_order(ctx: EmitContext) -> BlockCode:
    return _emit_order(ctx, "BUY")


def emit_sell_order(ctx: EmitContext) -> BlockCode:
    return _emit_order(ctx, "SELL")


def emit_close_position(ctx: EmitContext) -> BlockCode:
    now, price = ctx.local("now"), ctx.local("price")
    last, position = ctx.state("last_order_ms"), ctx.state("position")
    placed, details = ctx.output("Order Placed"), ctx.output("Order Details")
    return BlockCode(
        state=[f"{last} = None"],
        init=[
            f"{position} = {ctx.param('positionType')}",
            f"{ctx.state('percentage')} = _to_float({ctx.param('percentage')}, 100.0)",
        ],
        update=[
            f"{placed} = False",
            f"{details} = None",
            f"{now} = tick.get('timestamp', 0)",
            f"if {ctx.input('Condition')} and ({last} is None or {now} - {last} >= self.ORDER_COOLDOWN_MS):",
            f"    {price} = _to_float({ctx.input('Price')}, None)",
            f"    if {price} is None:",
            f"        {price} = _to_float(tick[self.PRICE_FIELD])",
            f"    {details} = {{",
            f"        'type': 'SELL' if {position} == 'long' else 'BUY',",
            "        'order_type': 'market',",
            f"        'percentage': {ctx.state('percentage')},",
            f"        'price': {price},",
            f"        'timestamp': {now},",
            "        'status': 'PENDING',",
            "        'reason': 'CLOSE_POSITION',",
            f"        'block_id': {ctx.block.id!r},",
            "    }",
            f"    signals.append({details})",
            f"    {placed} = True",
            f"    {last} = {now}",
        ],
        reset=[f"{last} = None"],
    )


def _exit_order_lines(ctx: EmitContext, order: str, price: str, position: str, reason: str) -> List[str]:
    return [
        f"    {order} = {{",
        f"        'type': 'SELL' if {position} == 'long' else 'BUY',",
        "        'order_type': 'market',",
        f"        'price': {price},",
        f"        'timestamp': tick.get('timestamp', 0),",
        "        'status': 'PENDING',",
        f"        'reason': {reason!r},",
        f"        'block_id': {ctx.block.id!r},",
        "    }",
        f"    signals.append({order})",
    ]


def emit_stop_loss(ctx: EmitContext) -> BlockCode:
    price, entry_in = ctx.local("price"), ctx.local("entry_in")
    entry, peak, trough = ctx.state("entry"), ctx.state("peak"), ctx.state("trough")
    kind, value, position = ctx.state("stop_type"), ctx.state("stop_value"), ctx.state("position")
    hit, order = ctx.output("Stop Triggered"), ctx.output("Stop Order")
    return BlockCode(
        state=[f"{entry} = None", f"{peak} = None", f"{trough} = None"],
        init=[
            f"{kind} = {ctx.param('stopType')}",
            f"{value} = _to_float({ctx.param('stopValue')})",
            f"{position} = {ctx.param('positionType')}",
        ],
        update=[
            f"{price} = _to_float({ctx.input('Current Price')}, None)",
            f"{entry_in} = _to_float({ctx.input('Entry Price')}, None)",
            f"if {entry_in}:",
            f"    {entry} = {entry_in}",
            f"{hit} = False",
            f"{order} = None",
            f"if {price} is not None and {entry}:",
            f"    {peak} = {price} if {peak} is None else max({peak}, {price})",
            f"    {trough} = {price} if {trough} is None else min({trough}, {price})",
            f"    if {kind} == 'fixed_price':",
            f"        {hit} = {price} <= {value} if {position} == 'long' else {price} >= {value}",
            f"    elif {kind} == 'percentage':",
            f"        if {position} == 'long':",
            f"            {hit} = {price} < {entry} and ({entry} - {price}) / {entry} * 100.0 >= {value}",
            "        else:",
            f"            {hit} = {price} > {entry} and ({price} - {entry}) / {entry} * 100.0 >= {value}",
            f"    elif {kind} == 'trailing':",
            f"        if {position} == 'long':",
            f"            {hit} = {price} <= {peak} * (1 - {value} / 100.0)",
            "        else:",
            f"            {hit} = {price} >= {trough} * (1 + {value} / 100.0)",
            f"if {hit}:",
        ] + _exit_order_lines(ctx, order, price, position, "STOP_LOSS"),
        reset=[f"{entry} = None", f"{peak} = None", f"{trough} = None"],
    )


def emit_take_profit(ctx: EmitContext) -> BlockCode:
    price, entry_in, entry = ctx.local("price"), ctx.local("entry_in"), ctx.state("entry")
    kind, value, position = ctx.state("target_type"), ctx.state("target_value"), ctx.state("position")
    hit, order = ctx.output("Target Reached"), ctx.output("Profit Order")
    return BlockCode(
        state=[f"{entry} = None"],
        init=[
            f"{kind} = {ctx.param('targetType')}",
            f"{value} = _to_float({ctx.param('targetValue')})",
            f"{position} = {ctx.param('positionType')}",
        ],
        update=[
            f"{price} = _to_float({ctx.input('Current Price')}, None)",
            f"{entry_in} = _to_float({ctx.input('Entry Price')}, None)",
            f"if {entry_in}:",
            f"    {entry} = {entry_in}",
            f"{hit} = False",
            f"{order} = None",
            f"if {price} is not None and {entry}:",
            f"    if {kind} == 'fixed_price':",
            f"        {hit} = {price} >= {value} if {position} == 'long' else {price} <= {value}",
            f"    elif {kind} == 'percentage':",
            f"        if {position} == 'long':",
            f"            {hit} = {price} > {entry} and ({price} - {entry}) / {entry} * 100.0 >= {value}",
            "        else:",
            f"            {hit} = {price} < {entry} and ({entry} - {price}) / {entry} * 100.0 >= {value}",
            f"    elif {kind} == 'risk_reward':",
            f"        {hit} = abs({price} - {entry}) >= {entry} * {value} / 100.0",
            f"if {hit}:",
        ] + _exit_order_lines(ctx, order, price, position, "TAKE_PROFIT"),
        reset=[f"{entry} = None"],
    )


def emit_notification(ctx: EmitContext) -> BlockCode:
    now, message = ctx.local("now"), ctx.local("message")
    last, cooldown = ctx.state("last_sent_ms"), ctx.state("cooldown_ms")
    sent = ctx.output("Notification Sent")
    return BlockCode(
        state=[f"{last} = None"],
        init=[
            f"{ctx.state('channels')} = list({ctx.param('notificationType')} or ('browser',))",
            f"{ctx.state('default_message')} = {ctx.param('defaultMessage')}",
            f"{ctx.state('priority')} = {ctx.param('priority')}",
            f"{cooldown} = _to_float({ctx.param('cooldownMinutes')}) * 60000",
        ],
        update=[
            f"{sent} = False",
            f"{now} = tick.get('timestamp', 0)",
            f"if {ctx.input('Trigger')} and ({last} is None or {now} - {last} >= {cooldown}):",
            f"    {message} = {ctx.input('Message')}",
            "    signals.append({",
            "        'type': 'NOTIFICATION',",
            f"        'channels': list({ctx.state('channels')}),",
            f"        'message': str({message}) if {message} else {ctx.state('default_message')},",
            f"        'priority': {ctx.state('priority')},",
            f"        'timestamp': {now},",
            f"        'block_id': {ctx.block.id!r},",
            "    })",
            f"    {sent} = True",
            f"    {last} = {now}",
        ],
        reset=[f"{last} = None"],
    )


# ----------------------------------------------------------------------
# Outputs
# ----------------------------------------------------------------------

def emit_signal_output(ctx: EmitContext) -> BlockCode:
    entry, buffer = ctx.local("entry"), ctx.state("buffer")
    fmt = ctx.state("format")
    metadata = ctx.local("metadata")
    return BlockCode(
        state=[f"{buffer} = []"],
        init=[
            f"{fmt} = {ctx.param('outputFormat')}",
            f"{ctx.state('destination')} = {ctx.param('destination')}",
            f"{ctx.state('webhook_url')} = {ctx.param('webhookUrl')}",
            f"{ctx.state('include_timestamp')} = bool({ctx.param('includeTimestamp')})",
            f"{ctx.state('buffer_size')} = max(1, int(_to_float({ctx.param('bufferSize')}, 1.0)))",
        ],
        update=[
            f"if {ctx.input('Signal')}:",
            f"    {metadata} = {ctx.input('Metadata')}",
            f"    {entry} = {{",
            f"        'signal': {ctx.input('Signal')},",
            f"        'confidence': _to_float({ctx.input('Confidence')}, 1.0),",
            f"        'metadata': '' if {metadata} is None else str({metadata}),",
            "    }",
            f"    if {ctx.state('include_timestamp')}:",
            f"        {entry}['timestamp'] = tick.get('timestamp', 0)",
            f"    {buffer}.append({entry})",
            f"    if len({buffer}) >= {ctx.state('buffer_size')}:",
            "        signals.append({",
            "            'type': 'SIGNAL',",
            f"            'format': {fmt},",
            f"            'destination': {ctx.state('destination')},",
            f"            'webhook_url': {ctx.state('webhook_url')},",
            f"            'signals': list({buffer}),",
            f"            'payload': _format_signals({buffer}, {fmt}),",
            f"            'block_id': {ctx.block.id!r},",
            "        })",
            f"        {buffer} = []",
        ],
        reset=[f"{buffer} = []"],
    )


def emit_log_output(ctx: EmitContext) -> BlockCode:
    level, entry, text = ctx.local("level"), ctx.local("entry"), ctx.local("text")
    entries, prefix = ctx.state("entries"), ctx.state("prefix")
    return BlockCode(
        state=[f"{entries} = None"],
        init=[
            f"{ctx.state('level')} = {ctx.param('logLevel')}",
            f"{prefix} = {ctx.param('prefix')} or ''",
            f"{ctx.state('include_timestamp')} = bool({ctx.param('includeTimestamp')})",
            f"{ctx.state('to_console')} = bool({ctx.param('logToConsole')})",
            f"{ctx.state('to_file')} = bool({ctx.param('logToFile')})",
            f"{ctx.state('max_size')} = max(1, int(_to_float({ctx.param('maxLogSize')}, 1000.0)))",
        ],
        update=[
            f"{level} = str({ctx.input('Level')}).lower() if {ctx.input('Level')} else {ctx.state('level')}",
            f"{entry} = {{'level': {level}, 'data': {ctx.input('Data')}, 'block_id': {ctx.block.id!r}}}",
            f"if {ctx.state('include_timestamp')}:",
            f"    {entry}['timestamp'] = tick.get('timestamp', 0)",
            f"{entries}.append({entry})",
            f"{text} = f\"{{{prefix}}} {{{ctx.input('Data')}}}\" if {prefix} else str({ctx.input('Data')})",
            f"if {ctx.state('to_console')}:",
            f"    _log.log(_LOG_LEVELS.get({level}, logging.INFO), {text})",
            f"if {ctx.state('to_file')}:",
            f"    _file_log.log(_LOG_LEVELS.get({level}, logging.INFO), {text})",
        ],
        reset=[f"{entries} = deque(maxlen={ctx.state('max_size')})"],
    )


BLOCK_EMITTERS: Dict[BlockType, Emitter] = {
    BlockType.MARKET_DATA: emit_market_data,
    BlockType.PARAMETER: emit_parameter,
    BlockType.TIME_CONDITION: emit_time_condition,
    BlockType.EMA: emit_ema,
    BlockType.SMA: emit_sma,
    BlockType.RSI: emit_rsi,
    BlockType.MACD: emit_macd,
    BlockType.BOLLINGER_BANDS: emit_bollinger_bands,
    BlockType.STOCHASTIC: emit_stochastic,
    BlockType.COMPARISON: emit_comparison,
    BlockType.LOGICAL_AND: emit_logical_and,
    BlockType.LOGICAL_OR: emit_logical_or,
    BlockType.LOGICAL_NOT: emit_logical_not,
    BlockType.CONDITIONAL: emit_conditional,
    BlockType.ARITHMETIC: emit_arithmetic,
    BlockType.MATH_FUNCTION: emit_math_function,
    BlockType.BUY_ORDER: emit_buy_order,
    BlockType.SELL_ORDER: emit_sell_order,
    BlockType.CLOSE_POSITION: emit_close_position,
    BlockType.STOP_LOSS: emit_stop_loss,
    BlockType.TAKE_PROFIT: emit_take_profit,
    BlockType.NOTIFICATION: emit_notification,
    BlockType.SIGNAL_OUTPUT: emit_signal_output,
    BlockType.LOG_OUTPUT: emit_log_output,
}
