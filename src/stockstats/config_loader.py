"""Configuration loader with Pydantic validation and environment variable interpolation."""

from __future__ import annotations

import os
import re
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any

import yaml
from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

# Load environment variables at module level
load_dotenv(find_dotenv(usecwd=True))

from stockstats.constants import (
    DEFAULT_FETCH_TIMEOUT_SECONDS,
    DEFAULT_QUOTE_INTERVAL,
    DEFAULT_SMA_WINDOW,
    DEFAULT_SYMBOLS,
    DEFAULT_TICK_INTERVAL_SECONDS,
    QUOTE_INTERVALS,
    LogLevel,
    PriceField,
    ProviderName,
)


class ConfigurationError(ValueError):
    """Invalid or incomplete startup configuration."""


def interpolate_env_vars(value: Any) -> Any:
    """
    Interpolate environment variables in string values.

    Supports formats:
    - ${VAR_NAME} - empty string if not set
    - ${VAR_NAME:default} - optional with default value
    """
    if not isinstance(value, str):
        return value

    pattern = r"\$\{([^}:]+)(?::([^}]*))?\}"

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1)
        default = match.group(2)

        env_value = os.environ.get(var_name)

        if env_value is not None:
            return env_value
        elif default is not None:
            return default
        else:
            return ""

    return re.sub(pattern, replacer, value)


def process_config_dict(data: dict[str, Any]) -> dict[str, Any]:
    """Recursively process config dict to interpolate env vars."""
    result = {}
    for key, value in data.items():
        if isinstance(value, dict):
            result[key] = process_config_dict(value)
        elif isinstance(value, list):
            result[key] = [
                process_config_dict(item) if isinstance(item, dict) else interpolate_env_vars(item)
                for item in value
            ]
        else:
            result[key] = interpolate_env_vars(value)
    return result


def parse_period_start(value: str | date | datetime) -> datetime:
    """
    Parse the period start into a timezone-aware UTC datetime.

    Accepts ``YYYY-MM-DD`` (midnight UTC) or a full ISO-8601 timestamp.
    Naive timestamps are taken to be UTC.

    Raises:
        ConfigurationError: If the value cannot be parsed.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        text = str(value).strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as e:
            raise ConfigurationError(f"Couldn't parse 'from' date: {value!r}") from e

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


# ============================================
# Pydantic Configuration Models
# ============================================


class EnvironmentConfig(BaseModel):
    """Environment and runtime settings."""

    log_level: LogLevel = LogLevel.INFO


class TrackerConfig(BaseModel):
    """Tracked symbols and tick schedule. Fixed for the life of the process."""

    model_config = ConfigDict(frozen=True)

    symbols: tuple[str, ...] = DEFAULT_SYMBOLS
    period_start: datetime | None = None
    tick_interval_seconds: float = DEFAULT_TICK_INTERVAL_SECONDS
    fetch_timeout_seconds: float | None = DEFAULT_FETCH_TIMEOUT_SECONDS
    quote_interval: str = DEFAULT_QUOTE_INTERVAL
    sma_window: int = DEFAULT_SMA_WINDOW
    price_field: PriceField = PriceField.CLOSE
    require_full_window: bool = False

    @field_validator("symbols", mode="before")
    @classmethod
    def split_symbols(cls, v: Any) -> Any:
        """Accept a comma-separated string as well as a list."""
        if isinstance(v, str):
            v = v.split(",")
        if isinstance(v, (list, tuple)):
            v = tuple(str(s).strip() for s in v if str(s).strip())
        return v

    @field_validator("symbols")
    @classmethod
    def validate_symbols(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Validate at least one symbol is tracked."""
        if not v:
            raise ValueError("Symbol list must not be empty")
        return v

    @field_validator("period_start", mode="before")
    @classmethod
    def validate_period_start(cls, v: Any) -> datetime | None:
        """Parse dates and ISO-8601 timestamps into UTC datetimes."""
        if v is None or v == "":
            return None
        return parse_period_start(v)

    @field_validator("tick_interval_seconds")
    @classmethod
    def validate_tick_interval(cls, v: float) -> float:
        """Validate tick interval is positive."""
        if v <= 0:
            raise ValueError(f"Tick interval must be positive, got: {v}")
        return v

    @field_validator("fetch_timeout_seconds")
    @classmethod
    def validate_fetch_timeout(cls, v: float | None) -> float | None:
        """Validate timeout is positive when set."""
        if v is not None and v <= 0:
            raise ValueError(f"Fetch timeout must be positive, got: {v}")
        return v

    @field_validator("quote_interval")
    @classmethod
    def validate_quote_interval(cls, v: str) -> str:
        """Validate the provider bar size."""
        if v not in QUOTE_INTERVALS:
            raise ValueError(f"Quote interval must be one of {QUOTE_INTERVALS}, got: {v}")
        return v

    @field_validator("sma_window")
    @classmethod
    def validate_sma_window(cls, v: int) -> int:
        """A moving average needs at least two samples per window."""
        if v <= 1:
            raise ValueError(f"SMA window must be greater than 1, got: {v}")
        return v


class SimProviderConfig(BaseModel):
    """Random-walk provider settings."""

    seed: int | None = None
    start_price: float = 100.0
    volatility: float = 0.01

    @field_validator("start_price")
    @classmethod
    def validate_start_price(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"Start price must be positive, got: {v}")
        return v


class ProviderConfig(BaseModel):
    """Market-data provider configuration."""

    name: ProviderName = ProviderName.YAHOO
    sim: SimProviderConfig = Field(default_factory=SimProviderConfig)


class AppConfig(BaseModel):
    """Root application configuration."""

    environment: EnvironmentConfig = Field(default_factory=EnvironmentConfig)
    tracker: TrackerConfig = Field(default_factory=TrackerConfig)
    provider: ProviderConfig = Field(default_factory=ProviderConfig)


# ============================================
# Configuration Loader
# ============================================


class ConfigLoader:
    """Load and validate configuration from YAML files with env var interpolation."""

    def __init__(self, config_path: str | Path) -> None:
        """
        Initialize config loader.

        Args:
            config_path: Path to the YAML configuration file.
        """
        self.config_path = Path(config_path)

    def load_raw(self) -> dict[str, Any]:
        """
        Read the YAML file and interpolate environment variables.

        Raises:
            FileNotFoundError: If config file doesn't exist.
            yaml.YAMLError: If YAML is invalid.
        """
        if not self.config_path.exists():
            raise FileNotFoundError(f"Config file not found: {self.config_path}")

        with open(self.config_path, encoding="utf-8") as f:
            raw_config = yaml.safe_load(f)

        if raw_config is None:
            raw_config = {}

        return process_config_dict(raw_config)

    def load(self) -> AppConfig:
        """
        Load and validate configuration.

        Returns:
            Validated AppConfig instance.

        Raises:
            FileNotFoundError: If config file doesn't exist.
            yaml.YAMLError: If YAML is invalid.
            pydantic.ValidationError: If config validation fails.
        """
        return AppConfig.model_validate(self.load_raw())


def load_config(config_path: str | Path) -> AppConfig:
    """
    Convenience function to load configuration.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        Validated AppConfig instance.
    """
    loader = ConfigLoader(config_path)
    return loader.load()


def load_config_with_overrides(
    config_path: str | Path | None = None,
    *,
    symbols: str | list[str] | None = None,
    period_start: str | datetime | None = None,
    tick_interval_seconds: float | None = None,
    fetch_timeout_seconds: float | None = None,
    provider: str | None = None,
    log_level: str | None = None,
) -> AppConfig:
    """
    Load configuration with CLI overrides.

    Overrides are merged into the raw config before validation, so they go
    through the same checks as values read from the file.

    Args:
        config_path: Path to the YAML configuration file, or None for defaults.
        symbols: Override tracked symbols.
        period_start: Override period start.
        tick_interval_seconds: Override tick interval.
        fetch_timeout_seconds: Override per-fetch timeout.
        provider: Override provider name.
        log_level: Override log level.

    Returns:
        Validated AppConfig instance with overrides applied.
    """
    raw: dict[str, Any] = ConfigLoader(config_path).load_raw() if config_path else {}

    tracker = dict(raw.get("tracker") or {})
    if symbols is not None:
        tracker["symbols"] = symbols
    if period_start is not None:
        tracker["period_start"] = period_start
    if tick_interval_seconds is not None:
        tracker["tick_interval_seconds"] = tick_interval_seconds
    if fetch_timeout_seconds is not None:
        tracker["fetch_timeout_seconds"] = fetch_timeout_seconds
    raw["tracker"] = tracker

    if provider is not None:
        provider_section = dict(raw.get("provider") or {})
        provider_section["name"] = ProviderName(provider.lower())
        raw["provider"] = provider_section

    if log_level is not None:
        environment = dict(raw.get("environment") or {})
        environment["log_level"] = LogLevel(log_level.upper())
        raw["environment"] = environment

    return AppConfig.model_validate(raw)
