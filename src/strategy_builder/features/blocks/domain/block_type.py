"""
Block type and category value objects

The set of block types is closed: every member has a catalog template and a
code emitter.
"""
from enum import Enum


class BlockCategory(Enum):
    """Palette category of a block."""
    INPUT = "input"
    INDICATORS = "indicators"
    LOGIC = "logic"
    MATH = "math"
    ACTIONS = "actions"
    OUTPUTS = "outputs"

    @classmethod
    def from_string(cls, value: str) -> 'BlockCategory':
        try:
            return cls(value.lower())
        except ValueError:
            raise ValueError(f"Invalid block category: {value}")

    @property
    def has_effect(self) -> bool:
        """True for categories whose blocks act on the outside world."""
        return self in (BlockCategory.ACTIONS, BlockCategory.OUTPUTS)


class BlockType(Enum):
    """Closed set of block types."""
    # Input
    MARKET_DATA = "market_data"
    PARAMETER = "parameter"
    TIME_CONDITION = "time_condition"

    # Indicators
    EMA = "ema"
    SMA = "sma"
    RSI = "rsi"
    MACD = "macd"
    BOLLINGER_BANDS = "bollinger_bands"
    STOCHASTIC = "stochastic"

    # Logic
    COMPARISON = "comparison"
    LOGICAL_AND = "logical_and"
    LOGICAL_OR = "logical_or"
    LOGICAL_NOT = "logical_not"
    CONDITIONAL = "conditional"

    # Math
    ARITHMETIC = "arithmetic"
    MATH_FUNCTION = "math_function"

    # Actions
    BUY_ORDER = "buy_order"
    SELL_ORDER = "sell_order"
    CLOSE_POSITION = "close_position"
    STOP_LOSS = "stop_loss"
    TAKE_PROFIT = "take_profit"

    # Outputs
    NOTIFICATION = "notification"
    SIGNAL_OUTPUT = "signal_output"
    LOG_OUTPUT = "log_output"

    @classmethod
    def from_string(cls, value: str) -> 'BlockType':
        """Create BlockType from string (case-insensitive)"""
        try:
            return cls(value.lower())
        except ValueError:
            raise ValueError(f"Invalid block type: {value}")
