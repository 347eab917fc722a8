"""
Stockfolio - GSE market data and personal portfolio tracker.

Live equity quotes, price history, and valuation of named portfolios
against current market prices.
"""

__version__ = "0.1.0"
