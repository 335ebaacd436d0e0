"""Quote providers."""

from stockstats.providers.base import FetchError, QuoteProvider
from stockstats.providers.registry import get_provider

__all__ = [
    "QuoteProvider",
    "FetchError",
    "get_provider",
]
