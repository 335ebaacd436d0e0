"""CSV reporting."""
