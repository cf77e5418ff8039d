"""
Input block templates: market data, user parameters and time gates.
"""
from strategy_builder.features.blocks.domain import (
    BlockCategory,
    BlockSize,
    BlockTemplate,
    BlockType,
    OutputSpec,
    PropertyKind,
    PropertyOption,
    PropertySpec,
    options,
)
from strategy_builder.shared.domain.value_objects import DataKind


MARKET_DATA = BlockTemplate(
    type=BlockType.MARKET_DATA,
    category=BlockCategory.INPUT,
    name="Market Data",
    description="Provides real-time market data (OHLCV) for a symbol",
    outputs=(
        OutputSpec("Open", DataKind.NUMBER, "Opening price"),
        OutputSpec("High", DataKind.NUMBER, "Highest price"),
        OutputSpec("Low", DataKind.NUMBER, "Lowest price"),
        OutputSpec("Close", DataKind.NUMBER, "Closing price"),
        OutputSpec("Volume", DataKind.NUMBER, "Trading volume"),
        OutputSpec("Candle", DataKind.CANDLE, "Complete candle"),
    ),
    properties=(
        PropertySpec(
            "symbol", PropertyKind.SELECT, required=True,
            options=(
                PropertyOption("BTC/USD", "BTCUSD"),
                PropertyOption("ETH/USD", "ETHUSD"),
                PropertyOption("SPY", "SPY"),
                PropertyOption("AAPL", "AAPL"),
                PropertyOption("TSLA", "TSLA"),
            ),
            description="Trading symbol",
        ),
        PropertySpec(
            "timeframe", PropertyKind.SELECT, required=True,
            options=(
                PropertyOption("1 minute", "1m"),
                PropertyOption("5 minutes", "5m"),
                PropertyOption("15 minutes", "15m"),
                PropertyOption("1 hour", "1h"),
                PropertyOption("4 hours", "4h"),
                PropertyOption("1 day", "1d"),
            ),
            default="5m",
            description="Candle timeframe",
        ),
    ),
    default_size=BlockSize(200, 180),
    tags=("price", "ohlcv", "candle", "source"),
)

PARAMETER = BlockTemplate(
    type=BlockType.PARAMETER,
    category=BlockCategory.INPUT,
    name="Parameter",
    description="User-configurable strategy parameter",
    outputs=(OutputSpec("Value", DataKind.ANY, "Parameter value"),),
    properties=(
        PropertySpec("parameterName", PropertyKind.STRING, required=True, default="param",
                     description="Parameter name"),
        PropertySpec("dataType", PropertyKind.SELECT, required=True,
                     options=options("number", "boolean", "string"),
                     description="Parameter data type"),
        PropertySpec("defaultValue", PropertyKind.STRING, required=True, default="0",
                     description="Value the parameter starts with"),
        PropertySpec("minValue", PropertyKind.NUMBER, description="Lower clamp for number parameters"),
        PropertySpec("maxValue", PropertyKind.NUMBER, description="Upper clamp for number parameters"),
    ),
    default_size=BlockSize(160, 140),
    tags=("input", "config", "variable"),
)

TIME_CONDITION = BlockTemplate(
    type=BlockType.TIME_CONDITION,
    category=BlockCategory.INPUT,
    name="Time Condition",
    description="Active only during configured times or days",
    outputs=(OutputSpec("Is Active", DataKind.BOOLEAN, "True while the condition holds"),),
    properties=(
        PropertySpec(
            "conditionType", PropertyKind.SELECT, required=True,
            options=(
                PropertyOption("Market Hours", "market_hours"),
                PropertyOption("Specific Time", "specific_time"),
                PropertyOption("Time Range", "time_range"),
                PropertyOption("Day of Week", "day_of_week"),
            ),
        ),
        PropertySpec("startTime", PropertyKind.STRING, description="HH:MM"),
        PropertySpec("endTime", PropertyKind.STRING, description="HH:MM"),
        PropertySpec(
            "daysOfWeek", PropertyKind.MULTISELECT,
            options=(
                PropertyOption("Monday", 1),
                PropertyOption("Tuesday", 2),
                PropertyOption("Wednesday", 3),
                PropertyOption("Thursday", 4),
                PropertyOption("Friday", 5),
                PropertyOption("Saturday", 6),
                PropertyOption("Sunday", 0),
            ),
            description="Days on which the condition is active (Sunday = 0)",
        ),
        PropertySpec(
            "timezone", PropertyKind.SELECT, required=True,
            options=(
                PropertyOption("UTC", "UTC"),
                PropertyOption("EST", "America/New_York"),
                PropertyOption("PST", "America/Los_Angeles"),
                PropertyOption("GMT", "Europe/London"),
                PropertyOption("JST", "Asia/Tokyo"),
            ),
        ),
    ),
    default_size=BlockSize(180, 160),
    tags=("time", "schedule", "session", "filter"),
)

INPUT_TEMPLATES = [MARKET_DATA, PARAMETER, TIME_CONDITION]
