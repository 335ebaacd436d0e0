"""Core constants for stockstats."""

from enum import Enum


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class ProviderName(str, Enum):
    """Market-data provider selection."""

    YAHOO = "yahoo"
    SIM = "sim"


class PriceField(str, Enum):
    """Quote field used to build the price series."""

    CLOSE = "close"
    ADJCLOSE = "adjclose"


# Bar sizes accepted by Yahoo Finance chart requests
QUOTE_INTERVALS = (
    "1m",
    "2m",
    "5m",
    "15m",
    "30m",
    "60m",
    "90m",
    "1h",
    "1d",
    "5d",
    "1wk",
    "1mo",
    "3mo",
)


# ============================================
# Default Values
# ============================================

DEFAULT_SYMBOLS = ("AAPL", "MSFT", "UBER", "GOOG")
DEFAULT_TICK_INTERVAL_SECONDS = 10.0
DEFAULT_FETCH_TIMEOUT_SECONDS = 30.0
DEFAULT_QUOTE_INTERVAL = "1h"
DEFAULT_SMA_WINDOW = 30

# ============================================
# Output
# ============================================

CSV_HEADER = ("period_start", "symbol", "price", "change_%", "min", "max", "30d_avg")
CURRENCY_SYMBOL = "$"

# ============================================
# Application Constants
# ============================================

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
