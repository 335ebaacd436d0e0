"""Base quote provider interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from stockstats.data.market_data import PeriodRequest, Quote


class FetchError(Exception):
    """A quote history request failed for one symbol."""

    def __init__(self, symbol: str, message: str):
        super().__init__(f"{symbol}: {message}")
        self.symbol = symbol
        self.message = message


class QuoteProvider(ABC):
    """Abstract market-data provider."""

    name: str = "base"

    @abstractmethod
    async def fetch_quotes(self, request: PeriodRequest) -> list[Quote]:
        """
        Fetch the quote history for one symbol and period.

        Args:
            request: Symbol, period bounds and bar interval.

        Returns:
            Quotes in whatever order the provider delivers them.

        Raises:
            FetchError: If the provider could not deliver the history.
        """

    async def close(self) -> None:
        """Release provider resources."""
        pass
