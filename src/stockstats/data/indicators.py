"""Summary statistics over ordered price series."""

from __future__ import annotations

from collections.abc import Sequence

from stockstats.constants import DEFAULT_SMA_WINDOW, PriceField
from stockstats.data.market_data import Quote, StatsResult
from stockstats.data.normalizer import closing_prices, priced_quotes, sort_quotes


def period_min(series: Sequence[float]) -> float | None:
    """Smallest value of the series, or None if it is empty."""
    if not series:
        return None
    return min(series)


def period_max(series: Sequence[float]) -> float | None:
    """Largest value of the series, or None if it is empty."""
    if not series:
        return None
    return max(series)


def window_average(n: int, series: Sequence[float]) -> list[float] | None:
    """
    Calculate a simple moving average.

    Every contiguous window of ``n`` values, sliding one step at a time,
    is averaged. The result has ``max(0, len(series) - n + 1)`` values.

    Args:
        n: Window length. Must be greater than 1.
        series: Values in time order.

    Returns:
        The window means, an empty list if the window is longer than the
        series, or None if the series is empty or ``n <= 1``.
    """
    if not series or n <= 1:
        return None

    return [sum(series[i : i + n]) / n for i in range(len(series) - n + 1)]


def start_end_diff(series: Sequence[float]) -> tuple[float, float] | None:
    """
    Calculate the absolute and relative difference between first and last value.

    The relative difference is relative to the first value. A first value of
    0.0 is replaced by 1.0 in the denominator.

    Returns:
        Tuple ``(absolute, relative)``, or None if the series is empty.
    """
    if not series:
        return None

    first, last = series[0], series[-1]
    abs_diff = last - first
    denominator = 1.0 if first == 0.0 else first
    return abs_diff, abs_diff / denominator


def compute_stats(
    symbol: str,
    quotes: Sequence[Quote],
    window: int = DEFAULT_SMA_WINDOW,
    price_field: PriceField = PriceField.CLOSE,
) -> StatsResult | None:
    """
    Build the summary statistics for one symbol.

    Args:
        symbol: Ticker symbol the quotes belong to.
        quotes: Raw quotes for the period, in any order.
        window: Moving-average window length.
        price_field: Quote field used as price.

    Returns:
        StatsResult, or None when there is no usable price.
    """
    # Drop unpriced bars so timestamp and price come from the same bar
    ordered = priced_quotes(sort_quotes(quotes), price_field)
    series = closing_prices(ordered, price_field)
    if not series:
        return None

    abs_change, pct_change = start_end_diff(series)
    sma = window_average(window, series) or []

    return StatsResult(
        symbol=symbol,
        timestamp=ordered[-1].timestamp,
        last_price=series[-1],
        abs_change=abs_change,
        pct_change=pct_change,
        period_min=period_min(series),
        period_max=period_max(series),
        sma=sma[-1] if sma else None,
    )
