"""Core domain logic for Stockfolio."""
