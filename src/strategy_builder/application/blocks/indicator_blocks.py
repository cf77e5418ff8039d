"""
Indicator block templates.
"""
from strategy_builder.features.blocks.domain import (
    BlockCategory,
    BlockSize,
    BlockTemplate,
    BlockType,
    InputSpec,
    OutputSpec,
    PropertyKind,
    PropertySpec,
)
from strategy_builder.shared.domain.value_objects import DataKind


PRICE_INPUT = InputSpec("Price", DataKind.NUMBER, required=True, description="Price series to analyze")


def _period(name: str, minimum: int, maximum: int, default: int, description: str) -> PropertySpec:
    return PropertySpec(name, PropertyKind.NUMBER, required=True, min=minimum, max=maximum,
                        step=1, default=default, description=description)


EMA = BlockTemplate(
    type=BlockType.EMA,
    category=BlockCategory.INDICATORS,
    name="Exponential Moving Average",
    description="Calculates exponential moving average",
    inputs=(PRICE_INPUT,),
    outputs=(OutputSpec("EMA Value", DataKind.NUMBER, "Current EMA value"),),
    properties=(_period("period", 1, 200, 20, "Number of periods for EMA calculation"),),
    default_size=BlockSize(180, 120),
    tags=("trend", "moving average"),
)

SMA = BlockTemplate(
    type=BlockType.SMA,
    category=BlockCategory.INDICATORS,
    name="Simple Moving Average",
    description="Calculates simple moving average",
    inputs=(PRICE_INPUT,),
    outputs=(OutputSpec("SMA Value", DataKind.NUMBER, "Current SMA value"),),
    properties=(_period("period", 1, 200, 20, "Number of periods for SMA calculation"),),
    default_size=BlockSize(180, 120),
    tags=("trend", "moving average"),
)

RSI = BlockTemplate(
    type=BlockType.RSI,
    category=BlockCategory.INDICATORS,
    name="Relative Strength Index",
    description="Momentum oscillator between 0 and 100 (50 until warmed up)",
    inputs=(PRICE_INPUT,),
    outputs=(OutputSpec("RSI Value", DataKind.NUMBER, "Current RSI value (0-100)"),),
    properties=(_period("period", 2, 50, 14, "Number of periods for RSI calculation"),),
    default_size=BlockSize(180, 120),
    tags=("momentum", "oscillator"),
)

MACD = BlockTemplate(
    type=BlockType.MACD,
    category=BlockCategory.INDICATORS,
    name="MACD",
    description="Moving Average Convergence Divergence",
    inputs=(PRICE_INPUT,),
    outputs=(
        OutputSpec("MACD Line", DataKind.NUMBER, "Fast EMA minus slow EMA"),
        OutputSpec("Signal Line", DataKind.NUMBER, "EMA of the MACD line"),
        OutputSpec("Histogram", DataKind.NUMBER, "MACD line minus signal line"),
    ),
    properties=(
        _period("fastPeriod", 1, 50, 12, "Fast EMA period"),
        _period("slowPeriod", 1, 100, 26, "Slow EMA period"),
        _period("signalPeriod", 1, 50, 9, "Signal line EMA period"),
    ),
    default_size=BlockSize(200, 150),
    tags=("trend", "momentum"),
)

BOLLINGER_BANDS = BlockTemplate(
    type=BlockType.BOLLINGER_BANDS,
    category=BlockCategory.INDICATORS,
    name="Bollinger Bands",
    description="Moving average with standard deviation bands",
    inputs=(PRICE_INPUT,),
    outputs=(
        OutputSpec("Upper Band", DataKind.NUMBER, "Middle band plus k standard deviations"),
        OutputSpec("Middle Band", DataKind.NUMBER, "Simple moving average"),
        OutputSpec("Lower Band", DataKind.NUMBER, "Middle band minus k standard deviations"),
    ),
    properties=(
        _period("period", 2, 200, 20, "Number of periods"),
        PropertySpec("standardDeviation", PropertyKind.NUMBER, required=True, min=0.1, max=5,
                     step=0.1, default=2, description="Band width in standard deviations"),
    ),
    default_size=BlockSize(200, 150),
    tags=("volatility", "bands"),
)

STOCHASTIC = BlockTemplate(
    type=BlockType.STOCHASTIC,
    category=BlockCategory.INDICATORS,
    name="Stochastic Oscillator",
    description="Position of the close within the recent high/low range",
    inputs=(
        InputSpec("Close", DataKind.NUMBER, required=True, description="Closing price"),
        InputSpec("High", DataKind.NUMBER, description="High price (defaults to the tick high)"),
        InputSpec("Low", DataKind.NUMBER, description="Low price (defaults to the tick low)"),
    ),
    outputs=(
        OutputSpec("%K", DataKind.NUMBER, "Fast stochastic"),
        OutputSpec("%D", DataKind.NUMBER, "Moving average of %K"),
    ),
    properties=(
        _period("kPeriod", 1, 100, 14, "Look-back period for %K"),
        _period("dPeriod", 1, 50, 3, "Smoothing period for %D"),
    ),
    default_size=BlockSize(200, 150),
    tags=("momentum", "oscillator"),
)

INDICATOR_TEMPLATES = [EMA, SMA, RSI, MACD, BOLLINGER_BANDS, STOCHASTIC]
