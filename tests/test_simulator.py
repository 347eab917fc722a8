"""Tests for the growth simulator."""

import random

import pytest

from stockfolio.core.portfolio.constants import SIM_MAX_ANNUAL_RATE, SIM_MIN_ANNUAL_RATE
from stockfolio.core.portfolio.simulator import project_growth, simulate


class FixedRandom:
    """Random source that always returns one end of the range."""

    def __init__(self, pick_max: bool):
        self.pick_max = pick_max
        self.calls = []

    def uniform(self, a: float, b: float) -> float:
        self.calls.append((a, b))
        return b if self.pick_max else a


class TestProjectGrowth:
    """Tests for project_growth()."""

    def test_zero_rate(self):
        value, pct = project_growth(1000.0, 12, 0.0)

        assert value == 1000.0
        assert pct == 0.0

    def test_compounds_monthly(self):
        value, pct = project_growth(1000.0, 2, 0.01)

        assert value == pytest.approx(1020.1)
        assert pct == pytest.approx(2.01)

    def test_zero_principal(self):
        value, pct = project_growth(0.0, 12, 0.01)

        assert value == 0.0
        assert pct == 0.0


class TestSimulate:
    """Tests for simulate()."""

    def test_within_bounds_for_any_draw(self):
        low = 1000 * (1 + SIM_MIN_ANNUAL_RATE / 12) ** 12
        high = 1000 * (1 + SIM_MAX_ANNUAL_RATE / 12) ** 12

        for seed in range(200):
            result = simulate(1000, 12, rng=random.Random(seed))
            assert low <= result.projected_value <= high

        assert low == pytest.approx(904.46, abs=0.01)
        assert high == pytest.approx(1219.39, abs=0.01)

    def test_default_rng_within_bounds(self):
        result = simulate(1000, 12)

        assert 904.0 < result.projected_value < 1220.0
        assert SIM_MIN_ANNUAL_RATE <= result.annual_rate <= SIM_MAX_ANNUAL_RATE

    def test_draws_from_rate_range(self):
        rng = FixedRandom(pick_max=True)
        simulate(500, 6, rng=rng)

        assert rng.calls == [(SIM_MIN_ANNUAL_RATE, SIM_MAX_ANNUAL_RATE)]

    def test_max_rate(self):
        result = simulate(1000, 12, rng=FixedRandom(pick_max=True))

        assert result.annual_rate == SIM_MAX_ANNUAL_RATE
        assert result.monthly_rate == pytest.approx(SIM_MAX_ANNUAL_RATE / 12)
        assert result.projected_value == pytest.approx(1219.39, abs=0.01)
        assert result.growth_pct == pytest.approx(21.939, abs=0.001)

    def test_min_rate(self):
        result = simulate(1000, 12, rng=FixedRandom(pick_max=False))

        assert result.projected_value == pytest.approx(904.46, abs=0.01)
        assert result.growth_pct < 0

    def test_seeded_is_reproducible(self):
        a = simulate(2500, 24, rng=random.Random(42))
        b = simulate(2500, 24, rng=random.Random(42))

        assert a == b

    def test_zero_principal(self):
        result = simulate(0, 12, rng=random.Random(1))

        assert result.projected_value == 0.0
        assert result.growth_pct == 0.0

    def test_zero_months(self):
        result = simulate(1000, 0, rng=random.Random(1))

        assert result.projected_value == 1000.0
        assert result.growth_pct == 0.0

    def test_to_dict(self):
        data = simulate(1000, 12, rng=FixedRandom(pick_max=False)).to_dict()

        assert data["principal"] == 1000
        assert data["months"] == 12
        assert set(data) == {
            "principal", "months", "annual_rate", "monthly_rate", "projected_value", "growth_pct",
        }
