"""
Engine settings.
"""
from strategy_builder.application.settings.base_settings import (
    BaseSettings,
    FieldValidator,
    validated_field,
)
from strategy_builder.application.settings.engine_settings import (
    EngineSettings,
    configure_logging,
)

__all__ = [
    'BaseSettings',
    'FieldValidator',
    'validated_field',
    'EngineSettings',
    'configure_logging',
]
