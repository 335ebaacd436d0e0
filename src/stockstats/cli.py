"""stockstats CLI."""

import asyncio
import sys

import click
import yaml
from pydantic import ValidationError

from stockstats.app import StockStatsApp
from stockstats.config_loader import (
    AppConfig,
    ConfigurationError,
    load_config_with_overrides,
    parse_period_start,
)
from stockstats.constants import DEFAULT_SYMBOLS, LogLevel, ProviderName


def _parse_from(ctx, param, value):
    """Validate --from early so a bad date fails before any output."""
    if value is None:
        return None
    try:
        return parse_period_start(value)
    except ConfigurationError as e:
        raise click.BadParameter(str(e), ctx=ctx, param=param) from e


def _common_options(func):
    options = [
        click.option(
            "--config",
            type=click.Path(exists=True, dir_okay=False),
            default=None,
            help="Path to configuration file",
        ),
        click.option(
            "--symbols",
            "-s",
            default=None,
            help=f"Comma-separated ticker symbols [default: {','.join(DEFAULT_SYMBOLS)}]",
        ),
        click.option(
            "--from",
            "-f",
            "period_start",
            callback=_parse_from,
            help="Period start, YYYY-MM-DD or ISO-8601 timestamp",
        ),
        click.option(
            "--provider",
            type=click.Choice([p.value for p in ProviderName]),
            default=None,
            help="Market-data provider",
        ),
        click.option("--timeout", type=float, default=None, help="Per-fetch timeout in seconds"),
        click.option(
            "--log-level",
            type=click.Choice([lvl.value for lvl in LogLevel], case_sensitive=False),
            default=None,
            help="Diagnostic log level",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _load(config, symbols, period_start, provider, timeout, log_level, interval=None) -> AppConfig:
    try:
        cfg = load_config_with_overrides(
            config,
            symbols=symbols,
            period_start=period_start,
            tick_interval_seconds=interval,
            fetch_timeout_seconds=timeout,
            provider=provider,
            log_level=log_level,
        )
    except (ConfigurationError, ValidationError, yaml.YAMLError) as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)

    if cfg.tracker.period_start is None:
        click.echo(
            "Configuration error: period start is required (--from or tracker.period_start)",
            err=True,
        )
        sys.exit(1)
    return cfg


@click.group()
def cli():
    """stockstats Command Line Interface."""
    pass


@cli.command()
@_common_options
@click.option("--interval", type=float, default=None, help="Seconds between ticks [default: 10]")
def run(config, symbols, period_start, provider, timeout, log_level, interval):
    """Continuously print CSV statistics for the tracked symbols."""
    cfg = _load(config, symbols, period_start, provider, timeout, log_level, interval)
    app = StockStatsApp(cfg)
    try:
        asyncio.run(app.run())
    except KeyboardInterrupt:
        pass


@cli.command()
@_common_options
def snapshot(config, symbols, period_start, provider, timeout, log_level):
    """Print the CSV statistics once and exit."""
    cfg = _load(config, symbols, period_start, provider, timeout, log_level)
    app = StockStatsApp(cfg)
    asyncio.run(app.run(max_ticks=1))


if __name__ == "__main__":
    cli()

# Alias for __main__.py
main = cli
