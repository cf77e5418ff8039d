"""
Action block templates: orders, exits and notifications.
"""
from strategy_builder.features.blocks.domain import (
    BlockCategory,
    BlockSize,
    BlockTemplate,
    BlockType,
    InputSpec,
    OutputSpec,
    PropertyKind,
    PropertyOption,
    PropertySpec,
)
from strategy_builder.shared.domain.value_objects import DataKind


CONDITION_INPUT = InputSpec("Condition", DataKind.BOOLEAN, required=True, description="Execute when true")
PRICE_INPUT = InputSpec("Price", DataKind.NUMBER, description="Custom price (defaults to the market price)")
ORDER_OUTPUTS = (
    OutputSpec("Order Placed", DataKind.SIGNAL, "True on the tick an order is placed"),
    OutputSpec("Order Details", DataKind.ORDER, "Placed order, or None"),
)
ORDER_TYPE = PropertySpec(
    "orderType", PropertyKind.SELECT, required=True,
    options=(
        PropertyOption("Market Order", "market"),
        PropertyOption("Limit Order", "limit"),
        PropertyOption("Stop Order", "stop"),
    ),
)
QUANTITY = PropertySpec("quantity", PropertyKind.NUMBER, required=True, min=0.001, max=10000,
                        step=0.001, default=1, description="Order quantity")
LIMIT_OFFSET = PropertySpec("limitOffset", PropertyKind.NUMBER, min=-10, max=10, step=0.01, default=0,
                            description="Limit price offset in percent")
POSITION_TYPE = PropertySpec(
    "positionType", PropertyKind.SELECT, required=True,
    options=(PropertyOption("Long Position", "long"), PropertyOption("Short Position", "short")),
)
CURRENT_PRICE_INPUT = InputSpec("Current Price", DataKind.NUMBER, required=True)
ENTRY_PRICE_INPUT = InputSpec("Entry Price", DataKind.NUMBER, description="Position entry price")


BUY_ORDER = BlockTemplate(
    type=BlockType.BUY_ORDER,
    category=BlockCategory.ACTIONS,
    name="Buy Order",
    description="Places a buy order when the condition is met",
    inputs=(CONDITION_INPUT, PRICE_INPUT),
    outputs=ORDER_OUTPUTS,
    properties=(
        ORDER_TYPE,
        QUANTITY,
        PropertySpec(
            "quantityType", PropertyKind.SELECT, required=True,
            options=(
                PropertyOption("Fixed Amount", "fixed"),
                PropertyOption("Percentage of Portfolio", "percentage"),
                PropertyOption("Risk-Based", "risk_based"),
            ),
        ),
        LIMIT_OFFSET,
    ),
    default_size=BlockSize(180, 140),
    tags=("buy", "long", "entry", "order"),
)

SELL_ORDER = BlockTemplate(
    type=BlockType.SELL_ORDER,
    category=BlockCategory.ACTIONS,
    name="Sell Order",
    description="Places a sell order when the condition is met",
    inputs=(CONDITION_INPUT, PRICE_INPUT),
    outputs=ORDER_OUTPUTS,
    properties=(
        ORDER_TYPE,
        QUANTITY,
        PropertySpec(
            "quantityType", PropertyKind.SELECT, required=True,
            options=(
                PropertyOption("Fixed Amount", "fixed"),
                PropertyOption("Percentage of Position", "percentage"),
                PropertyOption("Close All", "close_all"),
            ),
        ),
        LIMIT_OFFSET,
    ),
    default_size=BlockSize(180, 140),
    tags=("sell", "short", "exit", "order"),
)

CLOSE_POSITION = BlockTemplate(
    type=BlockType.CLOSE_POSITION,
    category=BlockCategory.ACTIONS,
    name="Close Position",
    description="Closes all or part of the open position when the condition is met",
    inputs=(CONDITION_INPUT, PRICE_INPUT),
    outputs=ORDER_OUTPUTS,
    properties=(
        POSITION_TYPE,
        PropertySpec("percentage", PropertyKind.NUMBER, required=True, min=1, max=100, step=1,
                     default=100, description="Share of the position to close"),
    ),
    default_size=BlockSize(180, 120),
    tags=("close", "exit", "flatten"),
)

STOP_LOSS = BlockTemplate(
    type=BlockType.STOP_LOSS,
    category=BlockCategory.ACTIONS,
    name="Stop Loss",
    description="Exits the position when the loss limit is hit",
    inputs=(CURRENT_PRICE_INPUT, ENTRY_PRICE_INPUT),
    outputs=(
        OutputSpec("Stop Triggered", DataKind.BOOLEAN),
        OutputSpec("Stop Order", DataKind.ORDER),
    ),
    properties=(
        PropertySpec(
            "stopType", PropertyKind.SELECT, required=True,
            options=(
                PropertyOption("Fixed Price", "fixed_price"),
                PropertyOption("Percentage Loss", "percentage"),
                PropertyOption("ATR Multiple", "atr_multiple"),
                PropertyOption("Trailing Stop", "trailing"),
            ),
            default="percentage",
        ),
        PropertySpec("stopValue", PropertyKind.NUMBER, required=True, min=0.01, max=50, step=0.01,
                     default=2, description="Stop price, or percent for percentage/trailing stops"),
        POSITION_TYPE,
    ),
    default_size=BlockSize(160, 130),
    tags=("risk", "stop", "exit"),
)

TAKE_PROFIT = BlockTemplate(
    type=BlockType.TAKE_PROFIT,
    category=BlockCategory.ACTIONS,
    name="Take Profit",
    description="Exits the position when the profit target is reached",
    inputs=(CURRENT_PRICE_INPUT, ENTRY_PRICE_INPUT),
    outputs=(
        OutputSpec("Target Reached", DataKind.BOOLEAN),
        OutputSpec("Profit Order", DataKind.ORDER),
    ),
    properties=(
        PropertySpec(
            "targetType", PropertyKind.SELECT, required=True,
            options=(
                PropertyOption("Fixed Price", "fixed_price"),
                PropertyOption("Percentage Profit", "percentage"),
                PropertyOption("Risk-Reward Ratio", "risk_reward"),
            ),
            default="percentage",
        ),
        PropertySpec("targetValue", PropertyKind.NUMBER, required=True, min=0.01, max=1000, step=0.01,
                     default=5, description="Target price, or percent for percentage targets"),
        POSITION_TYPE,
    ),
    default_size=BlockSize(160, 130),
    tags=("profit", "target", "exit"),
)

NOTIFICATION = BlockTemplate(
    type=BlockType.NOTIFICATION,
    category=BlockCategory.ACTIONS,
    name="Notification",
    description="Sends notifications when conditions are met",
    inputs=(
        InputSpec("Trigger", DataKind.BOOLEAN, required=True, description="Condition to trigger notification"),
        InputSpec("Message", DataKind.STRING, description="Dynamic message content"),
    ),
    outputs=(OutputSpec("Notification Sent", DataKind.BOOLEAN, "True when notification is sent"),),
    properties=(
        PropertySpec(
            "notificationType", PropertyKind.MULTISELECT, required=True,
            options=(
                PropertyOption("Browser Notification", "browser"),
                PropertyOption("Email", "email"),
                PropertyOption("SMS", "sms"),
                PropertyOption("Discord Webhook", "discord"),
                PropertyOption("Telegram Bot", "telegram"),
            ),
            default=("browser",),
            description="Channels to notify",
        ),
        PropertySpec("defaultMessage", PropertyKind.STRING, required=True, default="Strategy alert",
                     description="Default notification message"),
        PropertySpec(
            "priority", PropertyKind.SELECT, required=True,
            options=(
                PropertyOption("Low", "low"),
                PropertyOption("Normal", "normal"),
                PropertyOption("High", "high"),
                PropertyOption("Critical", "critical"),
            ),
            default="normal",
        ),
        PropertySpec("cooldownMinutes", PropertyKind.NUMBER, min=0, max=1440, step=1, default=0,
                     description="Minimum minutes between notifications (0 = no cooldown)"),
    ),
    default_size=BlockSize(160, 140),
    tags=("alert", "notify", "message"),
)

ACTION_TEMPLATES = [BUY_ORDER, SELL_ORDER, CLOSE_POSITION, STOP_LOSS, TAKE_PROFIT, NOTIFICATION]
