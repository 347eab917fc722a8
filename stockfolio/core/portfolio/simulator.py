"""
Toy growth simulator for "what if I invested X for N months".

NOT a forecast and NOT a statistical model. A single annual rate is drawn
uniformly from [-10%, +20%], divided by 12, and compounded monthly for the
whole horizon. Each call gives one random path; two calls with the same
inputs differ unless a seeded random source is passed in.
"""

import random
from dataclasses import dataclass
from typing import Any, Optional, Protocol

from stockfolio.core.portfolio.constants import (
    MONTHS_PER_YEAR,
    SIM_MAX_ANNUAL_RATE,
    SIM_MIN_ANNUAL_RATE,
)


class RandomSource(Protocol):
    """Anything that can draw a uniform float, e.g. random.Random."""

    def uniform(self, a: float, b: float) -> float: ...


@dataclass(frozen=True)
class SimulationResult:
    """Outcome of one simulated growth path."""

    principal: float
    months: int
    annual_rate: float
    monthly_rate: float
    projected_value: float
    growth_pct: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "principal": self.principal,
            "months": self.months,
            "annual_rate": self.annual_rate,
            "monthly_rate": self.monthly_rate,
            "projected_value": self.projected_value,
            "growth_pct": self.growth_pct,
        }


def project_growth(principal: float, months: int, monthly_rate: float) -> tuple[float, float]:
    """
    Compound a principal at a fixed monthly rate.

    Args:
        principal: Starting amount
        months: Number of months to compound
        monthly_rate: Rate per month (0.01 = 1%)

    Returns:
        Tuple of (projected_value, growth_pct). growth_pct is 0.0 when
        principal is 0.
    """
    projected_value = principal * (1 + monthly_rate) ** months
    growth_pct = (projected_value - principal) / principal * 100 if principal != 0 else 0.0
    return projected_value, growth_pct


def simulate(
    principal: float,
    months: int,
    rng: Optional[RandomSource] = None,
) -> SimulationResult:
    """
    Project a principal forward with one randomly drawn growth rate.

    Inputs are not validated; principal <= 0 or months <= 0 give a defined
    but meaningless result.

    Args:
        principal: Amount invested
        months: Investment horizon in months
        rng: Random source. Pass random.Random(seed) for repeatable results.

    Returns:
        SimulationResult with the drawn rate and projected value
    """
    if rng is None:
        rng = random.Random()

    annual_rate = rng.uniform(SIM_MIN_ANNUAL_RATE, SIM_MAX_ANNUAL_RATE)
    monthly_rate = annual_rate / MONTHS_PER_YEAR
    projected_value, growth_pct = project_growth(principal, months, monthly_rate)

    return SimulationResult(
        principal=principal,
        months=months,
        annual_rate=annual_rate,
        monthly_rate=monthly_rate,
        projected_value=projected_value,
        growth_pct=growth_pct,
    )
