"""Tests for quote normalization."""

from datetime import datetime, timedelta, timezone

from stockstats.constants import PriceField
from stockstats.data.market_data import Quote
from stockstats.data.normalizer import (
    closing_prices,
    normalize_quotes,
    priced_quotes,
    sort_quotes,
)

T0 = datetime(2024, 3, 1, 14, 30, tzinfo=timezone.utc)


def quote(offset_hours: int, close: float, adjclose: float | None = None) -> Quote:
    return Quote(
        symbol="MSFT",
        timestamp=T0 + timedelta(hours=offset_hours),
        open=close,
        high=close,
        low=close,
        close=close,
        adjclose=close if adjclose is None else adjclose,
    )


def test_out_of_order_matches_presorted():
    q0, q1, q2 = quote(0, 100.0), quote(1, 101.5), quote(2, 99.25)

    assert normalize_quotes([q2, q0, q1]) == normalize_quotes([q0, q1, q2])
    assert normalize_quotes([q2, q0, q1]) == [100.0, 101.5, 99.25]


def test_empty_input_gives_empty_series():
    assert normalize_quotes([]) == []


def test_sort_is_stable_for_duplicate_timestamps():
    first = quote(1, 50.0)
    duplicate = quote(1, 51.0)
    earlier = quote(0, 49.0)

    ordered = sort_quotes([first, duplicate, earlier])

    assert ordered == [earlier, first, duplicate]


def test_nan_prices_are_skipped():
    quotes = [quote(0, 10.0), quote(1, float("nan")), quote(2, 12.0)]

    assert closing_prices(quotes) == [10.0, 12.0]


def test_adjusted_close_extraction():
    quotes = [quote(1, 20.0, adjclose=19.5), quote(0, 18.0, adjclose=17.5)]

    assert normalize_quotes(quotes, PriceField.ADJCLOSE) == [17.5, 19.5]


def test_priced_quotes_checks_the_selected_field():
    unadjusted_gap = quote(0, float("nan"), adjclose=98.0)
    adjusted_gap = quote(1, 101.0, adjclose=float("nan"))

    assert priced_quotes([unadjusted_gap, adjusted_gap]) == [adjusted_gap]
    assert priced_quotes([unadjusted_gap, adjusted_gap], PriceField.ADJCLOSE) == [unadjusted_gap]
