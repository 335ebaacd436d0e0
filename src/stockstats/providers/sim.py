"""Simulated quote provider."""

from __future__ import annotations

import logging
import random
import re
from datetime import timedelta

from stockstats.config_loader import SimProviderConfig
from stockstats.data.market_data import PeriodRequest, Quote
from stockstats.providers.base import FetchError, QuoteProvider

logger = logging.getLogger(__name__)

_UNIT_SECONDS = {
    "m": 60,
    "h": 3600,
    "d": 86400,
    "wk": 7 * 86400,
    "mo": 30 * 86400,
}


def interval_to_timedelta(interval: str) -> timedelta:
    """Convert a bar size such as ``1h`` or ``15m`` into a timedelta."""
    match = re.fullmatch(r"(\d+)(m|h|d|wk|mo)", interval)
    if not match:
        raise ValueError(f"Unsupported interval: {interval}")
    count, unit = match.groups()
    return timedelta(seconds=int(count) * _UNIT_SECONDS[unit])


class SimQuoteProvider(QuoteProvider):
    """
    Generates synthetic quote history for dry runs.

    Produces a random walk per symbol. The walk for a given symbol and start
    is reproducible, so successive ticks see the same history growing.
    """

    name = "sim"

    def __init__(self, config: SimProviderConfig | None = None):
        self.config = config or SimProviderConfig()

    def _rng(self, request: PeriodRequest) -> random.Random:
        seed = request.symbol if self.config.seed is None else f"{self.config.seed}:{request.symbol}"
        return random.Random(f"{seed}:{request.start.isoformat()}")

    async def fetch_quotes(self, request: PeriodRequest) -> list[Quote]:
        try:
            step = interval_to_timedelta(request.interval)
        except ValueError as e:
            raise FetchError(request.symbol, str(e)) from e

        rng = self._rng(request)
        price = self.config.start_price
        quotes = []

        current = request.start
        while current <= request.end:
            # Random walk
            change = price * rng.gauss(0.0, self.config.volatility)
            open_price = price
            price = max(0.01, price + change)
            spread = abs(change) + price * self.config.volatility * rng.random()

            quotes.append(
                Quote(
                    symbol=request.symbol,
                    timestamp=current,
                    open=open_price,
                    high=max(open_price, price) + spread / 2,
                    low=max(0.01, min(open_price, price) - spread / 2),
                    close=price,
                    adjclose=price,
                    volume=rng.randint(100, 10_000),
                )
            )
            current += step

        logger.debug(f"Generated {len(quotes)} sim quotes for {request.symbol}")
        return quotes
