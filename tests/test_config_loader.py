"""Tests for configuration loading and validation."""

from __future__ import annotations

import os
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from pydantic import ValidationError

from stockstats.config_loader import (
    ConfigLoader,
    ConfigurationError,
    TrackerConfig,
    interpolate_env_vars,
    load_config,
    load_config_with_overrides,
    parse_period_start,
    process_config_dict,
)
from stockstats.constants import LogLevel, PriceField, ProviderName


class TestEnvVarInterpolation:
    """Tests for environment variable interpolation."""

    def test_no_interpolation_needed(self) -> None:
        """Test that plain strings pass through unchanged."""
        assert interpolate_env_vars("hello") == "hello"
        assert interpolate_env_vars(123) == 123
        assert interpolate_env_vars(None) is None

    def test_simple_env_var(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test simple ${VAR} interpolation."""
        monkeypatch.setenv("TEST_VAR", "test_value")
        assert interpolate_env_vars("${TEST_VAR}") == "test_value"

    def test_env_var_with_default(self) -> None:
        """Test ${VAR:default} interpolation with missing var."""
        os.environ.pop("MISSING_VAR", None)
        assert interpolate_env_vars("${MISSING_VAR:default_value}") == "default_value"

    def test_missing_var_no_default(self) -> None:
        """Test ${VAR} with missing var returns empty string."""
        os.environ.pop("TOTALLY_MISSING", None)
        assert interpolate_env_vars("${TOTALLY_MISSING}") == ""

    def test_nested_and_list_processing(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test processing nested dicts and lists."""
        monkeypatch.setenv("SYM", "NVDA")
        data = {"tracker": {"symbols": ["AAPL", "${SYM}"]}}
        result = process_config_dict(data)
        assert result["tracker"]["symbols"] == ["AAPL", "NVDA"]


class TestParsePeriodStart:
    def test_plain_date_is_midnight_utc(self) -> None:
        assert parse_period_start("2020-01-01") == datetime(2020, 1, 1, tzinfo=timezone.utc)

    def test_zulu_timestamp(self) -> None:
        assert parse_period_start("2020-01-01T10:30:00Z") == datetime(
            2020, 1, 1, 10, 30, tzinfo=timezone.utc
        )

    def test_offset_timestamp_converted_to_utc(self) -> None:
        parsed = parse_period_start("2020-01-01T10:30:00+02:00")
        assert parsed == datetime(2020, 1, 1, 8, 30, tzinfo=timezone.utc)
        assert parsed.utcoffset() == timedelta(0)

    @pytest.mark.parametrize("value", ["yesterday", "2020-13-01", "", "01/02/2020"])
    def test_unparsable_value_is_named(self, value: str) -> None:
        with pytest.raises(ConfigurationError, match="Couldn't parse 'from' date"):
            parse_period_start(value)


class TestTrackerConfig:
    def test_defaults(self) -> None:
        config = TrackerConfig()
        assert config.symbols == ("AAPL", "MSFT", "UBER", "GOOG")
        assert config.tick_interval_seconds == 10.0
        assert config.sma_window == 30
        assert config.quote_interval == "1h"
        assert config.price_field == PriceField.CLOSE
        assert config.period_start is None

    def test_comma_separated_symbols(self) -> None:
        config = TrackerConfig(symbols="AAPL, TSLA,,NVDA")
        assert config.symbols == ("AAPL", "TSLA", "NVDA")

    def test_empty_symbols_rejected(self) -> None:
        with pytest.raises(ValidationError, match="Symbol list must not be empty"):
            TrackerConfig(symbols=" , ")

    def test_bad_period_start_rejected(self) -> None:
        with pytest.raises(ValidationError, match="Couldn't parse 'from' date"):
            TrackerConfig(period_start="not-a-date")

    @pytest.mark.parametrize(
        "field, value",
        [
            ("tick_interval_seconds", 0),
            ("fetch_timeout_seconds", -1),
            ("sma_window", 1),
            ("quote_interval", "7h"),
        ],
    )
    def test_invalid_values_rejected(self, field: str, value) -> None:
        with pytest.raises(ValidationError):
            TrackerConfig(**{field: value})

    def test_config_is_immutable(self) -> None:
        config = TrackerConfig()
        with pytest.raises(ValidationError):
            config.symbols = ("TSLA",)


class TestConfigLoader:
    """Tests for ConfigLoader class."""

    def test_load_valid_config(self, tmp_path: Path) -> None:
        config_content = """
environment:
  log_level: DEBUG

tracker:
  symbols: [AAPL, MSFT]
  period_start: 2024-01-01
  tick_interval_seconds: 5
  price_field: adjclose

provider:
  name: sim
  sim:
    seed: 7
"""
        config_file = tmp_path / "config.yaml"
        config_file.write_text(config_content)

        config = ConfigLoader(config_file).load()

        assert config.environment.log_level == LogLevel.DEBUG
        assert config.tracker.symbols == ("AAPL", "MSFT")
        assert config.tracker.period_start == datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert config.tracker.tick_interval_seconds == 5
        assert config.tracker.price_field == PriceField.ADJCLOSE
        assert config.provider.name == ProviderName.SIM
        assert config.provider.sim.seed == 7

    def test_file_not_found(self) -> None:
        loader = ConfigLoader(Path("/nonexistent/path/config.yaml"))
        with pytest.raises(FileNotFoundError):
            loader.load()

    def test_empty_config_uses_defaults(self, tmp_path: Path) -> None:
        config_file = tmp_path / "empty.yaml"
        config_file.write_text("")

        config = load_config(config_file)

        assert config.provider.name == ProviderName.YAHOO
        assert config.tracker.symbols == ("AAPL", "MSFT", "UBER", "GOOG")


class TestOverrides:
    def test_overrides_without_file(self) -> None:
        config = load_config_with_overrides(
            symbols="TSLA,NVDA",
            period_start="2023-06-01",
            tick_interval_seconds=2.5,
            fetch_timeout_seconds=4.0,
            provider="SIM",
            log_level="warning",
        )

        assert config.tracker.symbols == ("TSLA", "NVDA")
        assert config.tracker.period_start == datetime(2023, 6, 1, tzinfo=timezone.utc)
        assert config.tracker.tick_interval_seconds == 2.5
        assert config.tracker.fetch_timeout_seconds == 4.0
        assert config.provider.name == ProviderName.SIM
        assert config.environment.log_level == LogLevel.WARNING

    def test_overrides_take_precedence_over_file(self, tmp_path: Path) -> None:
        config_file = tmp_path / "config.yaml"
        config_file.write_text("tracker:\n  symbols: [AAPL]\n  sma_window: 10\n")

        config = load_config_with_overrides(config_file, symbols="UBER")

        assert config.tracker.symbols == ("UBER",)
        assert config.tracker.sma_window == 10

    def test_overrides_are_validated(self) -> None:
        with pytest.raises(ValidationError):
            load_config_with_overrides(tick_interval_seconds=-5)
