"""Market data and portfolio service access."""
