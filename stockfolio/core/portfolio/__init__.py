"""Portfolio valuation engine and growth simulator."""

from stockfolio.core.portfolio.models import (
    Portfolio,
    PortfolioItem,
    PriceMap,
    Transaction,
    TransactionType,
)
from stockfolio.core.portfolio.simulator import (
    SimulationResult,
    project_growth,
    simulate,
)
from stockfolio.core.portfolio.valuation import (
    HoldingStat,
    PortfolioTotals,
    PortfolioValuation,
    aggregate,
    valuate,
    valuate_portfolio,
)

__all__ = [
    # Domain types
    "Portfolio",
    "PortfolioItem",
    "PriceMap",
    "Transaction",
    "TransactionType",
    # Valuation
    "HoldingStat",
    "PortfolioTotals",
    "PortfolioValuation",
    "aggregate",
    "valuate",
    "valuate_portfolio",
    # Simulation
    "SimulationResult",
    "project_growth",
    "simulate",
]
