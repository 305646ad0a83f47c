"""Tests for EngineConfig, environment loading and logging setup."""

from decimal import Decimal

import pytest
import structlog

from quickshop import configure_logging
from quickshop.config import EngineConfig


class TestEngineConfig:
    def test_defaults(self):
        config = EngineConfig()

        assert config.delivery_fee == Decimal(25)
        assert config.tip_options == (10, 20, 30)
        assert config.debounce_seconds == 0.5
        assert config.jitter_meters == 10.0
        assert config.minimum_eta_minutes == 6

    def test_with_methods_return_new_config(self):
        base = EngineConfig()

        changed = base.with_delivery_fee("30.5").with_debounce(seconds=1.0)

        assert base.delivery_fee == Decimal(25)
        assert changed.delivery_fee == Decimal("30.5")
        assert changed.debounce_seconds == 1.0
        assert changed.jitter_meters == 10.0

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"delivery_fee": -1},
            {"max_tip": 0},
            {"default_tip": 15},
            {"debounce_seconds": -0.1},
            {"travel_speed_km_per_minute": 0},
        ],
    )
    def test_invalid(self, kwargs):
        with pytest.raises(ValueError):
            EngineConfig(**kwargs)


class TestFromEnv:
    def test_empty_environment_gives_defaults(self):
        assert EngineConfig.from_env({}) == EngineConfig()

    def test_reads_variables(self):
        config = EngineConfig.from_env({
            "QUICKSHOP_DELIVERY_FEE": "40",
            "QUICKSHOP_DEBOUNCE_SECONDS": "1.5",
            "QUICKSHOP_JITTER_METERS": "25",
            "QUICKSHOP_BASE_PREPARATION_MINUTES": "7",
            "QUICKSHOP_TRAVEL_SPEED_KM_PER_MINUTE": "0.5",
            "QUICKSHOP_MINIMUM_ETA_MINUTES": "8",
            "QUICKSHOP_MAX_TIP": "500",
            "QUICKSHOP_LOG_LEVEL": "debug",
            "QUICKSHOP_LOG_JSON": "false",
        })

        assert config.delivery_fee == Decimal(40)
        assert config.debounce_seconds == 1.5
        assert config.jitter_meters == 25.0
        assert config.base_preparation_minutes == 7
        assert config.travel_speed_km_per_minute == 0.5
        assert config.minimum_eta_minutes == 8
        assert config.max_tip == 500
        assert config.log_level == "DEBUG"
        assert config.log_json is False

    def test_blank_values_ignored(self):
        assert EngineConfig.from_env({"QUICKSHOP_DELIVERY_FEE": "  "}) == EngineConfig()

    @pytest.mark.parametrize(
        ("name", "value"),
        [
            ("QUICKSHOP_DELIVERY_FEE", "free"),
            ("QUICKSHOP_MAX_TIP", "1.5"),
            ("QUICKSHOP_DEBOUNCE_SECONDS", "soon"),
            ("QUICKSHOP_LOG_JSON", "maybe"),
            ("QUICKSHOP_DELIVERY_FEE", "NaN"),
            ("QUICKSHOP_DELIVERY_FEE", "sNaN"),
            ("QUICKSHOP_DEBOUNCE_SECONDS", "inf"),
            ("QUICKSHOP_MAX_TIP", "5"),
            ("QUICKSHOP_TRAVEL_SPEED_KM_PER_MINUTE", "0"),
        ],
    )
    def test_bad_value_names_the_variable(self, name, value):
        with pytest.raises(ValueError, match=name):
            EngineConfig.from_env({name: value})


class TestLogging:
    def test_configure_json(self, capfd):
        configure_logging("INFO", json=True)

        structlog.get_logger("quickshop.test").info("order_written", order_id="OD-1")

        out = capfd.readouterr().out
        assert '"event": "order_written"' in out
        assert '"order_id": "OD-1"' in out
        assert '"level": "info"' in out

    def test_level_filters(self, capfd):
        configure_logging("WARNING", json=True)

        structlog.get_logger("quickshop.test").info("hidden")

        assert capfd.readouterr().out == ""

    def test_unknown_level(self):
        with pytest.raises(ValueError):
            configure_logging("LOUD")

    def teardown_method(self):
        structlog.reset_defaults()
