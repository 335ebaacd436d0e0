"""stockstats - periodic quote statistics as CSV."""

__version__ = "0.1.0"
