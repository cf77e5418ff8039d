"""
Engine Settings

Runtime configuration for the strategy builder engine: logging, editor
history depth, generated-code runtime constants and serializer defaults.

Settings can be built from a dict (unknown keys ignored) or from
STRATEGY_BUILDER_* environment variables.
"""
import os
from dataclasses import dataclass, fields
from typing import Dict, Any, Optional

from strategy_builder.application.settings.base_settings import BaseSettings, validated_field
from strategy_builder.utils.message import Log, init_logger


ENV_PREFIX = "STRATEGY_BUILDER_"

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
PRICE_FIELDS = ["open", "high", "low", "close"]
EXPORT_FORMATS = ["json", "yaml"]


@dataclass
class EngineSettings(BaseSettings):
    """
    Engine configuration.

    Attributes:
        log_level: Level applied to the Log facade
        filter_repetitive_debug: Drop per-pass DEBUG chatter (validator runs, catalog lookups)
        file_logging: Write a timestamped log file in addition to the console
        log_folder: Folder for log files (platform default when None)
        max_undo_steps: Depth of the editor's undo history
        order_cooldown_ms: Minimum gap between two orders from one action block
        fallback_price_field: Tick field read by unconnected optional price inputs
        default_strategy_name: Name given to strategies created without one
        export_format: Default document format for the serializer
    """
    log_level: str = validated_field("INFO", choices=LOG_LEVELS)
    filter_repetitive_debug: bool = True
    file_logging: bool = False
    log_folder: Optional[str] = None
    max_undo_steps: int = validated_field(100, min_value=1, max_value=10000)
    order_cooldown_ms: int = validated_field(1000, min_value=0, max_value=86_400_000)
    fallback_price_field: str = validated_field("close", choices=PRICE_FIELDS)
    default_strategy_name: str = validated_field("Untitled Strategy", required=True, max_length=200)
    export_format: str = validated_field("json", choices=EXPORT_FORMATS)

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> 'EngineSettings':
        """
        Build settings from STRATEGY_BUILDER_<FIELD> environment variables.

        Values are coerced to the field's default type; variables that fail
        to parse are logged and ignored.
        """
        environ = os.environ if environ is None else environ
        defaults = cls()
        data: Dict[str, Any] = {}

        for f in fields(cls):
            raw = environ.get(f"{ENV_PREFIX}{f.name.upper()}")
            if raw is None:
                continue
            try:
                data[f.name] = _coerce(raw, getattr(defaults, f.name))
            except ValueError:
                Log.warning(f"EngineSettings: Ignoring {ENV_PREFIX}{f.name.upper()}={raw!r} (cannot parse)")

        return cls.from_dict(data)


def _coerce(raw: str, default: Any) -> Any:
    if isinstance(default, bool):
        lowered = raw.strip().lower()
        if lowered in ("1", "true", "yes", "on"):
            return True
        if lowered in ("0", "false", "no", "off"):
            return False
        raise ValueError(raw)
    if isinstance(default, int):
        return int(raw)
    if isinstance(default, str) and default.isupper():
        return raw.strip().upper()
    return raw


def configure_logging(settings: EngineSettings) -> None:
    """
    Apply logging settings to the Log facade.

    Invalid settings are reported and the current logger is left unchanged.
    """
    result = settings.validate()
    if not result.valid:
        for error in result.errors:
            Log.warning(f"EngineSettings: {error}")
        return

    if settings.file_logging:
        logger = init_logger(
            name="StrategyBuilderFileLogger",
            log_folder=settings.log_folder,
            console_logging=True,
            file_logging=True,
        )
        Log.set_logger(logger)

    Log.set_level(settings.log_level)
    Log.enable_repetitive_filter(settings.filter_repetitive_debug)
    Log.debug(f"EngineSettings: Logging configured at {settings.log_level}")
