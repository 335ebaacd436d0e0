"""Market data types, normalization and statistics."""
