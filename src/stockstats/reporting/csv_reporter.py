"""CSV reporting of per-symbol statistics."""

from __future__ import annotations

import csv
import logging
import sys
from typing import TextIO

from stockstats.constants import CSV_HEADER, CURRENCY_SYMBOL
from stockstats.data.market_data import StatsResult

logger = logging.getLogger(__name__)


def _money(value: float | None) -> str:
    return f"{CURRENCY_SYMBOL}{(value or 0.0):.2f}"


def format_row(result: StatsResult) -> list[str]:
    """Format a StatsResult into the seven CSV fields."""
    return [
        result.timestamp.isoformat(),
        result.symbol,
        _money(result.last_price),
        f"{result.pct_change_percent:.2f}%",
        _money(result.period_min),
        _money(result.period_max),
        _money(result.sma),
    ]


class CsvReporter:
    """
    Writes statistics as CSV lines to a text stream.

    The header is written once, before the first row, for the lifetime of
    the reporter.
    """

    def __init__(self, stream: TextIO | None = None):
        self.stream = stream if stream is not None else sys.stdout
        self._writer = csv.writer(self.stream, lineterminator="\n")
        self._header_written = False
        self.rows_written = 0

    @property
    def header_written(self) -> bool:
        return self._header_written

    def write_header(self) -> None:
        """Write the header line unless it was already written."""
        if self._header_written:
            return
        self._writer.writerow(CSV_HEADER)
        self.stream.flush()
        self._header_written = True

    def report(self, result: StatsResult) -> None:
        """Write one statistics line."""
        self.write_header()
        self._writer.writerow(format_row(result))
        self.stream.flush()
        self.rows_written += 1
