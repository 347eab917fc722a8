"""Tests for the market summary."""

from datetime import datetime, timezone
from decimal import Decimal

from stockfolio.core.data.quotes import parse_quotes
from stockfolio.core.market.summary import summarize_market


class TestSummarizeMarket:
    """Tests for summarize_market()."""

    def test_breadth_and_volume(self, live_payload):
        summary = summarize_market(parse_quotes(live_payload))

        assert summary.total_stocks == 4
        assert summary.total_volume == 132400
        assert summary.advancers == 2
        assert summary.decliners == 1

    def test_movers_ordered(self, live_payload):
        summary = summarize_market(parse_quotes(live_payload))

        assert [q.symbol for q in summary.top_gainers] == ["MTNGH", "CAL"]
        assert [q.symbol for q in summary.top_losers] == ["GCB"]

    def test_unchanged_excluded(self, live_payload):
        summary = summarize_market(parse_quotes(live_payload))
        movers = {q.symbol for q in summary.top_gainers + summary.top_losers}

        assert "SCB" not in movers

    def test_top_n(self, live_payload):
        summary = summarize_market(parse_quotes(live_payload), top_n=1)

        assert len(summary.top_gainers) == 1
        assert summary.top_gainers[0].change == Decimal("0.05")
        assert summary.advancers == 2

    def test_empty(self):
        now = datetime(2024, 1, 17, 12, 0, tzinfo=timezone.utc)
        summary = summarize_market([], now=now)

        assert summary.total_stocks == 0
        assert summary.total_volume == 0
        assert summary.top_gainers == ()
        assert summary.last_updated == now


class TestMarketCap:
    """Tests for total market capitalization."""

    def test_sums_price_times_shares(self, live_payload):
        summary = summarize_market(parse_quotes(live_payload), shares={"MTNGH": 1000, "GCB": 10})

        # 3.00 * 1000 + 5.20 * 10
        assert summary.total_market_cap == Decimal("3052")

    def test_symbols_without_shares_left_out(self, live_payload):
        summary = summarize_market(parse_quotes(live_payload), shares={"cal": 500, "XYZ": 10})

        assert summary.total_market_cap == Decimal("200")

    def test_unknown_without_share_counts(self, live_payload):
        assert summarize_market(parse_quotes(live_payload)).total_market_cap is None
        assert summarize_market(parse_quotes(live_payload), shares={"XYZ": 10}).total_market_cap is None
