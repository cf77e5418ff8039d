"""
Tests for engine settings: defaults, validation, env loading and logging setup.
"""
import logging

import pytest

from strategy_builder.application.settings import EngineSettings, configure_logging
from strategy_builder.utils.message import Log, RepetitiveMessageFilter


@pytest.fixture
def restore_log_level():
    level = Log.get_logger().level
    yield
    Log.set_level(level)


class TestDefaults:

    def test_defaults_are_valid(self):
        settings = EngineSettings()
        assert settings.validate().valid
        assert settings.max_undo_steps == 100
        assert settings.order_cooldown_ms == 1000
        assert settings.fallback_price_field == "close"

    def test_from_dict_ignores_unknown_keys(self):
        """Unknown keys are dropped and missing keys keep defaults."""
        settings = EngineSettings.from_dict({"max_undo_steps": 5, "theme": "dark"})
        assert settings.max_undo_steps == 5
        assert settings.export_format == "json"

    def test_round_trip(self):
        settings = EngineSettings(log_level="DEBUG", export_format="yaml")
        assert EngineSettings.from_dict(settings.to_dict()) == settings


class TestValidation:

    def test_bad_choice(self):
        result = EngineSettings(fallback_price_field="vwap").validate()
        assert not result.valid
        assert "fallback_price_field" in result.errors[0]

    def test_out_of_range(self):
        result = EngineSettings(max_undo_steps=0).validate()
        assert result.errors == ["max_undo_steps: must be at least 1"]

    def test_blank_required_name(self):
        assert not EngineSettings(default_strategy_name="  ").is_valid()

    def test_name_too_long(self):
        result = EngineSettings(default_strategy_name="x" * 201).validate()
        assert result.errors == ["default_strategy_name: length 201 is above maximum 200"]

    def test_validate_single_field(self):
        settings = EngineSettings(order_cooldown_ms=-1)
        assert not settings.validate_field("order_cooldown_ms").valid
        with pytest.raises(AttributeError):
            settings.validate_field("nope")


class TestFromEnv:

    def test_values_are_coerced(self):
        """Integers, booleans and upper-case choices are parsed from strings."""
        settings = EngineSettings.from_env({
            "STRATEGY_BUILDER_MAX_UNDO_STEPS": "25",
            "STRATEGY_BUILDER_FILE_LOGGING": "yes",
            "STRATEGY_BUILDER_LOG_LEVEL": "debug",
            "STRATEGY_BUILDER_EXPORT_FORMAT": "yaml",
        })
        assert settings.max_undo_steps == 25
        assert settings.file_logging is True
        assert settings.log_level == "DEBUG"
        assert settings.export_format == "yaml"

    def test_unparseable_value_is_ignored(self):
        settings = EngineSettings.from_env({"STRATEGY_BUILDER_MAX_UNDO_STEPS": "lots"})
        assert settings.max_undo_steps == 100

    def test_unrelated_variables_ignored(self):
        assert EngineSettings.from_env({"PATH": "/bin"}) == EngineSettings()


class TestConfigureLogging:

    def test_applies_level(self, restore_log_level):
        configure_logging(EngineSettings(log_level="WARNING"))
        assert Log.get_logger().level == logging.WARNING

    def test_invalid_settings_leave_logger_unchanged(self, restore_log_level):
        Log.set_level("INFO")
        configure_logging(EngineSettings(log_level="LOUD"))
        assert Log.get_logger().level == logging.INFO

    def test_repetitive_filter_follows_setting(self, restore_log_level):
        """Per-pass DEBUG chatter is dropped by the handlers unless disabled."""
        handler = Log.get_logger().handlers[0]

        configure_logging(EngineSettings(log_level="DEBUG"))
        chatter = logging.LogRecord("x", logging.DEBUG, __file__, 1, "StrategyValidator: Validated 's'", None, None)
        assert not handler.filter(chatter)

        configure_logging(EngineSettings(log_level="DEBUG", filter_repetitive_debug=False))
        assert handler.filter(chatter)


class TestRepetitiveMessageFilter:

    def test_only_debug_is_filtered(self):
        noisy = RepetitiveMessageFilter()
        debug = logging.LogRecord("x", logging.DEBUG, __file__, 1, "BlockCatalog: Lookup 'ema'", None, None)
        info = logging.LogRecord("x", logging.INFO, __file__, 1, "BlockCatalog: Lookup 'ema'", None, None)
        other = logging.LogRecord("x", logging.DEBUG, __file__, 1, "CodeGenerator: Emitted ema", None, None)

        assert not noisy.filter(debug)
        assert noisy.filter(info)
        assert noisy.filter(other)
