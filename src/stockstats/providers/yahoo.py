"""Yahoo Finance quote provider.

All yfinance specifics (Ticker.history, DataFrame columns) are confined here;
the rest of the package only sees Quote objects and FetchError.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import timezone

import pandas as pd
import yfinance as yf
from yfinance.exceptions import YFPricesMissingError

from stockstats.data.market_data import PeriodRequest, Quote
from stockstats.providers.base import FetchError, QuoteProvider

logger = logging.getLogger(__name__)


def _utc_timestamp(index_value) -> pd.Timestamp:
    ts = pd.Timestamp(index_value)
    if ts.tzinfo is None:
        return ts.tz_localize("UTC")
    return ts.tz_convert("UTC")


def quotes_from_history(symbol: str, history: pd.DataFrame) -> list[Quote]:
    """Convert a yfinance history frame into Quote objects."""
    if history is None or history.empty:
        return []

    has_adj = "Adj Close" in history.columns
    has_volume = "Volume" in history.columns

    quotes = []
    for idx, row in history.iterrows():
        ts = _utc_timestamp(idx).to_pydatetime().replace(microsecond=0)
        close = float(row["Close"])
        volume = row["Volume"] if has_volume else 0
        quotes.append(
            Quote(
                symbol=symbol,
                timestamp=ts.astimezone(timezone.utc),
                open=float(row["Open"]),
                high=float(row["High"]),
                low=float(row["Low"]),
                close=close,
                adjclose=float(row["Adj Close"]) if has_adj else close,
                volume=0 if pd.isna(volume) else int(volume),
            )
        )
    return quotes


class YahooQuoteProvider(QuoteProvider):
    """Fetches quote history from Yahoo Finance via the yfinance library."""

    name = "yahoo"

    def _history(self, request: PeriodRequest) -> pd.DataFrame:
        ticker = yf.Ticker(request.symbol)
        return ticker.history(
            start=request.start,
            end=request.end,
            interval=request.interval,
            auto_adjust=False,
            raise_errors=True,
        )

    async def fetch_quotes(self, request: PeriodRequest) -> list[Quote]:
        logger.debug(
            f"Requesting {request.symbol} {request.interval} bars "
            f"from {request.start.isoformat()} to {request.end.isoformat()}"
        )
        try:
            history = await asyncio.to_thread(self._history, request)
            quotes = quotes_from_history(request.symbol, history)
        except YFPricesMissingError as e:
            logger.info(f"No price data for {request.symbol} in requested period: {e}")
            return []
        except Exception as e:
            raise FetchError(request.symbol, str(e) or e.__class__.__name__) from e

        logger.debug(f"Received {len(quotes)} quotes for {request.symbol}")
        return quotes
