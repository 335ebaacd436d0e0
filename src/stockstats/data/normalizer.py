"""Quote normalization: time ordering and price extraction."""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence

from stockstats.constants import PriceField
from stockstats.data.market_data import Quote


def sort_quotes(quotes: Iterable[Quote]) -> list[Quote]:
    """Return quotes in ascending timestamp order.

    ``sorted`` is stable, so quotes sharing a timestamp keep their input order.
    """
    return sorted(quotes, key=lambda q: q.timestamp)


def priced_quotes(
    quotes: Iterable[Quote], price_field: PriceField = PriceField.CLOSE
) -> list[Quote]:
    """Keep only quotes whose selected price is not NaN, preserving order."""
    field_name = PriceField(price_field).value
    return [q for q in quotes if not math.isnan(float(getattr(q, field_name)))]


def closing_prices(
    quotes: Sequence[Quote], price_field: PriceField = PriceField.CLOSE
) -> list[float]:
    """Extract one price per quote, in input order, skipping NaN values."""
    field_name = PriceField(price_field).value
    prices = []
    for quote in quotes:
        price = float(getattr(quote, field_name))
        if math.isnan(price):
            continue
        prices.append(price)
    return prices


def normalize_quotes(
    quotes: Iterable[Quote], price_field: PriceField = PriceField.CLOSE
) -> list[float]:
    """
    Turn a raw quote set into an ascending price series.

    Args:
        quotes: Quotes for one symbol and one period, in any order.
        price_field: Which quote field to extract.

    Returns:
        Prices ordered by time. Empty when no quotes were given.
    """
    return closing_prices(sort_quotes(quotes), price_field)
