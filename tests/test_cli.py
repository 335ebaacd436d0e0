"""Tests for the CLI and application bootstrap."""

from __future__ import annotations

import io
from pathlib import Path

import pytest
from click.testing import CliRunner

from stockstats.app import StockStatsApp
from stockstats.cli import cli
from stockstats.config_loader import load_config_with_overrides
from stockstats.providers.sim import SimQuoteProvider

HEADER = "period_start,symbol,price,change_%,min,max,30d_avg"


@pytest.fixture
def runner():
    return CliRunner()


def test_invalid_from_date_is_fatal(runner):
    result = runner.invoke(cli, ["snapshot", "--from", "tomorrow-ish", "--provider", "sim"])

    assert result.exit_code != 0
    assert "tomorrow-ish" in result.output
    assert HEADER not in result.output


def test_missing_from_date_is_fatal(runner):
    result = runner.invoke(cli, ["snapshot", "--provider", "sim"])

    assert result.exit_code == 1
    assert "period start is required" in result.output


def test_empty_symbol_list_is_fatal(runner):
    result = runner.invoke(cli, ["snapshot", "--from", "2024-01-01", "--symbols", ",", "--provider", "sim"])

    assert result.exit_code == 1
    assert "Symbol list must not be empty" in result.output


def test_snapshot_with_sim_provider(runner):
    result = runner.invoke(
        cli,
        ["snapshot", "--from", "2024-01-01", "--symbols", "AAPL,MSFT", "--provider", "sim"],
    )

    assert result.exit_code == 0, result.output
    # Drop any diagnostic log lines the runner mixed in from stderr
    lines = [line for line in result.output.splitlines() if " | " not in line]
    assert lines[0] == HEADER
    assert [line.split(",")[1] for line in lines[1:]] == ["AAPL", "MSFT"]
    for line in lines[1:]:
        fields = line.split(",")
        assert len(fields) == 7
        assert fields[2].startswith("$")
        assert fields[3].endswith("%")


def test_snapshot_with_config_file(runner, tmp_path: Path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text(
        "tracker:\n  symbols: [UBER]\n  period_start: 2024-02-01\nprovider:\n  name: sim\n"
    )

    result = runner.invoke(cli, ["snapshot", "--config", str(config_file)])

    assert result.exit_code == 0, result.output
    assert ",UBER,$" in result.output



def test_malformed_config_file_is_fatal(runner, tmp_path: Path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("tracker:\n  symbols: [AAPL, MSFT\n")

    result = runner.invoke(cli, ["snapshot", "--config", str(config_file), "--from", "2024-01-01"])

    assert result.exit_code == 1
    assert "Configuration error" in result.output
    assert HEADER not in result.output

@pytest.mark.asyncio
async def test_app_runs_bounded_ticks():
    config = load_config_with_overrides(
        symbols="GOOG", period_start="2024-01-01", tick_interval_seconds=0.01, provider="sim"
    )
    provider = SimQuoteProvider(config.provider.sim)
    closed = []

    async def close():
        closed.append(True)

    provider.close = close
    stream = io.StringIO()
    app = StockStatsApp(config, provider=provider, stream=stream)

    completed = await app.run(max_ticks=2)

    assert completed == 2
    assert closed == [True]
    lines = stream.getvalue().splitlines()
    assert lines[0] == HEADER
    assert len(lines) == 3
    assert all(",GOOG,$" in line for line in lines[1:])
