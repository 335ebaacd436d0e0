"""Market data structures and types."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from stockstats.constants import DEFAULT_QUOTE_INTERVAL


@dataclass(frozen=True)
class Quote:
    """One provider bar for a symbol."""

    symbol: str
    timestamp: datetime
    open: float
    high: float
    low: float
    close: float
    adjclose: float
    volume: int = 0


@dataclass(frozen=True)
class PeriodRequest:
    """Quote history request for one symbol over [start, end]."""

    symbol: str
    start: datetime
    end: datetime
    interval: str = DEFAULT_QUOTE_INTERVAL


@dataclass(frozen=True)
class StatsResult:
    """Summary statistics of one symbol for one tick."""

    symbol: str
    timestamp: datetime
    last_price: float
    abs_change: float
    pct_change: float
    period_min: float
    period_max: float
    sma: float | None = None

    @property
    def pct_change_percent(self) -> float:
        """Relative change expressed in percent."""
        return self.pct_change * 100.0
