"""
Output block templates.
"""
from strategy_builder.features.blocks.domain import (
    BlockCategory,
    BlockSize,
    BlockTemplate,
    BlockType,
    InputSpec,
    PropertyKind,
    PropertyOption,
    PropertySpec,
)
from strategy_builder.shared.domain.value_objects import DataKind


SIGNAL_OUTPUT = BlockTemplate(
    type=BlockType.SIGNAL_OUTPUT,
    category=BlockCategory.OUTPUTS,
    name="Signal Output",
    description="Publishes trading signals",
    inputs=(
        InputSpec("Signal", DataKind.SIGNAL, required=True, description="Signal to publish"),
        InputSpec("Confidence", DataKind.NUMBER, description="Signal confidence (defaults to 1.0)"),
        InputSpec("Metadata", DataKind.STRING, description="Additional signal metadata"),
    ),
    properties=(
        PropertySpec(
            "outputFormat", PropertyKind.SELECT, required=True,
            options=(
                PropertyOption("JSON", "json"),
                PropertyOption("CSV", "csv"),
                PropertyOption("XML", "xml"),
                PropertyOption("Custom", "custom"),
            ),
        ),
        PropertySpec(
            "destination", PropertyKind.SELECT, required=True,
            options=(
                PropertyOption("Console Log", "console"),
                PropertyOption("File Export", "file"),
                PropertyOption("Webhook", "webhook"),
                PropertyOption("Database", "database"),
                PropertyOption("WebSocket", "websocket"),
            ),
        ),
        PropertySpec("webhookUrl", PropertyKind.STRING, description="Webhook URL"),
        PropertySpec("includeTimestamp", PropertyKind.BOOLEAN, default=True,
                     description="Attach the tick timestamp to each signal"),
        PropertySpec("bufferSize", PropertyKind.NUMBER, min=1, max=1000, step=1, default=1,
                     description="Number of signals to buffer before sending"),
    ),
    default_size=BlockSize(180, 120),
    tags=("signal", "publish", "webhook"),
)

LOG_OUTPUT = BlockTemplate(
    type=BlockType.LOG_OUTPUT,
    category=BlockCategory.OUTPUTS,
    name="Log Output",
    description="Logs values for debugging",
    inputs=(
        InputSpec("Data", DataKind.ANY, required=True, description="Value to log"),
        InputSpec("Level", DataKind.STRING, description="Log level override"),
    ),
    properties=(
        PropertySpec(
            "logLevel", PropertyKind.SELECT, required=True,
            options=(
                PropertyOption("Debug", "debug"),
                PropertyOption("Info", "info"),
                PropertyOption("Warning", "warning"),
                PropertyOption("Error", "error"),
            ),
            default="info",
        ),
        PropertySpec("prefix", PropertyKind.STRING, description="Text prepended to each entry"),
        PropertySpec("includeTimestamp", PropertyKind.BOOLEAN, default=True),
        PropertySpec("logToConsole", PropertyKind.BOOLEAN, default=True),
        PropertySpec("logToFile", PropertyKind.BOOLEAN, default=False),
        PropertySpec("maxLogSize", PropertyKind.NUMBER, min=100, max=10000, step=100, default=1000,
                     description="Maximum number of log entries to keep"),
    ),
    default_size=BlockSize(160, 100),
    tags=("log", "debug", "print"),
)

OUTPUT_TEMPLATES = [SIGNAL_OUTPUT, LOG_OUTPUT]
