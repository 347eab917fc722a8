"""
Tests for GSE quote payload parsing.

Tests cover:
- Shape dispatch (live, summary, detail)
- Field validation errors
- Price map construction
"""

from decimal import Decimal

import pytest

from stockfolio.core.data.exceptions import QuotePayloadError
from stockfolio.core.data.quotes import (
    EquityDetail,
    EquitySummary,
    LiveQuote,
    build_price_map,
    parse_quote,
    parse_quotes,
)


class TestParseQuote:
    """Tests for parse_quote() dispatch."""

    def test_live(self):
        quote = parse_quote({"name": "mtngh", "price": 3.0, "change": -0.05, "volume": 1000})

        assert isinstance(quote, LiveQuote)
        assert quote.kind == "live"
        assert quote.symbol == "MTNGH"
        assert quote.price == Decimal("3.0")
        assert quote.change == Decimal("-0.05")
        assert quote.volume == 1000

    def test_summary(self):
        quote = parse_quote({"name": "GCB", "price": "5.20"})

        assert isinstance(quote, EquitySummary)
        assert quote.kind == "summary"
        assert quote.price == Decimal("5.20")

    def test_change_without_volume_is_summary(self):
        assert isinstance(parse_quote({"name": "GCB", "price": 5, "change": 0.1}), EquitySummary)

    def test_detail(self, equity_detail_payload):
        quote = parse_quote(equity_detail_payload)

        assert isinstance(quote, EquityDetail)
        assert quote.kind == "detail"
        assert quote.company.name == "Scancom PLC"
        assert quote.company.sector == "Communication Services"
        assert quote.company.facsimile is None
        assert [d.name for d in quote.company.directors] == ["Ishmael Yamson", "Selorm Adadevoh"]
        assert quote.eps == Decimal("0.35")
        assert quote.shares == 12290474360

    def test_detail_market_cap(self, equity_detail_payload):
        quote = parse_quote(equity_detail_payload)

        assert quote.market_cap == Decimal("3.0") * 12290474360

    def test_detail_without_shares(self, equity_detail_payload):
        del equity_detail_payload["shares"]
        quote = parse_quote(equity_detail_payload)

        assert quote.shares is None
        assert quote.market_cap is None

    def test_not_an_object(self):
        with pytest.raises(QuotePayloadError, match="object"):
            parse_quote(["MTNGH", 3.0])

    def test_missing_price(self):
        with pytest.raises(QuotePayloadError, match="price"):
            parse_quote({"name": "GCB"})

    def test_null_price(self):
        with pytest.raises(QuotePayloadError, match="price"):
            parse_quote({"name": "GCB", "price": None})

    def test_non_numeric_price(self):
        with pytest.raises(QuotePayloadError, match="price"):
            parse_quote({"name": "GCB", "price": "n/a"})

    def test_bool_price_rejected(self):
        with pytest.raises(QuotePayloadError):
            parse_quote({"name": "GCB", "price": True})

    def test_fractional_volume_rejected(self):
        with pytest.raises(QuotePayloadError, match="volume"):
            parse_quote({"name": "GCB", "price": 1, "change": 0, "volume": 1.5})

    def test_company_must_be_object(self, equity_detail_payload):
        equity_detail_payload["company"] = "Scancom"
        with pytest.raises(QuotePayloadError, match="company"):
            parse_quote(equity_detail_payload)

    def test_directors_skip_non_objects(self, equity_detail_payload):
        equity_detail_payload["company"]["directors"].append("unnamed")
        quote = parse_quote(equity_detail_payload)

        assert len(quote.company.directors) == 2


class TestParseQuotes:
    """Tests for parse_quotes()."""

    def test_list(self, live_payload):
        quotes = parse_quotes(live_payload)

        assert len(quotes) == 4
        assert all(isinstance(q, LiveQuote) for q in quotes)

    def test_not_a_list(self):
        with pytest.raises(QuotePayloadError, match="list"):
            parse_quotes({"name": "GCB", "price": 1})


class TestBuildPriceMap:
    """Tests for build_price_map()."""

    def test_keys_upper_cased(self):
        prices = build_price_map([parse_quote({"name": "mtngh", "price": 3})])

        assert prices == {"MTNGH": Decimal("3")}

    def test_mixed_shapes(self, equity_detail_payload):
        quotes = [
            parse_quote({"name": "GCB", "price": 5.2}),
            parse_quote(equity_detail_payload),
        ]

        assert build_price_map(quotes) == {"GCB": Decimal("5.2"), "MTNGH": Decimal("3.0")}

    def test_later_quote_wins(self):
        quotes = [
            parse_quote({"name": "GCB", "price": 5.0}),
            parse_quote({"name": "GCB", "price": 5.5}),
        ]

        assert build_price_map(quotes)["GCB"] == Decimal("5.5")

    @pytest.mark.parametrize("bad", ["NaN", "Infinity", -1])
    def test_unusable_prices_skipped(self, bad):
        quotes = [
            parse_quote({"name": "GCB", "price": bad}),
            parse_quote({"name": "SCB", "price": 20}),
        ]

        assert build_price_map(quotes) == {"SCB": Decimal("20")}

    def test_empty(self):
        assert build_price_map([]) == {}
