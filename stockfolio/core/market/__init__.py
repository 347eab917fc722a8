"""Quote snapshots, price history and market summaries."""
