"""
GSE quote payloads as a tagged union.

The GSE API returns three loosely related JSON shapes. Each is validated
here once, at the boundary, into a frozen dataclass carrying a ``kind`` tag:

- LiveQuote ("live"):       GET /live               {name, price, change, volume}
- EquitySummary ("summary"): GET /equities          {name, price}
- EquityDetail ("detail"):  GET /equities/{symbol}  {name, price, company, ...}

Downstream code dispatches on the type rather than probing optional keys.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Literal, Mapping, Optional, Union

from stockfolio.core.data.exceptions import QuotePayloadError

logger = logging.getLogger(__name__)


def _require(payload: Mapping[str, Any], key: str) -> Any:
    if not isinstance(payload, Mapping):
        raise QuotePayloadError(f"Quote payload must be an object, got {type(payload).__name__}")
    if key not in payload or payload[key] is None:
        raise QuotePayloadError(f"Quote payload missing field: {key}")
    return payload[key]


def _price(value: Any, field_name: str) -> Decimal:
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise QuotePayloadError(f"{field_name} must be a number, got {value!r}")
    try:
        return Decimal(str(value))
    except InvalidOperation as e:
        raise QuotePayloadError(f"{field_name} must be a number, got {value!r}") from e


def _optional_price(payload: Mapping[str, Any], key: str) -> Optional[Decimal]:
    value = payload.get(key)
    return _price(value, key) if value is not None else None


def _int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise QuotePayloadError(f"{field_name} must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raise QuotePayloadError(f"{field_name} must be an integer, got {value!r}")


def _optional_str(payload: Mapping[str, Any], key: str) -> Optional[str]:
    value = payload.get(key)
    return str(value) if value is not None else None


@dataclass(frozen=True)
class Director:
    """Company director listed on an equity detail page."""

    name: str
    position: Optional[str] = None


@dataclass(frozen=True)
class Company:
    """Company profile attached to an equity detail."""

    name: str
    sector: Optional[str] = None
    industry: Optional[str] = None
    address: Optional[str] = None
    email: Optional[str] = None
    telephone: Optional[str] = None
    facsimile: Optional[str] = None
    website: Optional[str] = None
    directors: tuple[Director, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Company":
        if not isinstance(payload, Mapping):
            raise QuotePayloadError("company must be an object")
        directors = payload.get("directors") or []
        if not isinstance(directors, list):
            raise QuotePayloadError("company.directors must be a list")
        return cls(
            name=str(_require(payload, "name")),
            sector=_optional_str(payload, "sector"),
            industry=_optional_str(payload, "industry"),
            address=_optional_str(payload, "address"),
            email=_optional_str(payload, "email"),
            telephone=_optional_str(payload, "telephone"),
            facsimile=_optional_str(payload, "facsimile"),
            website=_optional_str(payload, "website"),
            directors=tuple(
                Director(name=str(_require(d, "name")), position=_optional_str(d, "position"))
                for d in directors
                if isinstance(d, Mapping)
            ),
        )


@dataclass(frozen=True)
class LiveQuote:
    """Intraday trading data for one equity."""

    name: str  # Ticker symbol, e.g. "MTNGH"
    price: Decimal
    change: Decimal
    volume: int
    kind: Literal["live"] = "live"

    @property
    def symbol(self) -> str:
        return self.name.upper()


@dataclass(frozen=True)
class EquitySummary:
    """Symbol and last price from the equities listing."""

    name: str
    price: Decimal
    kind: Literal["summary"] = "summary"

    @property
    def symbol(self) -> str:
        return self.name.upper()


@dataclass(frozen=True)
class EquityDetail:
    """Full equity profile with fundamentals."""

    name: str
    price: Decimal
    company: Company
    capital: Optional[Decimal] = None
    dps: Optional[Decimal] = None  # Dividend per share
    eps: Optional[Decimal] = None  # Earnings per share
    shares: Optional[int] = None
    kind: Literal["detail"] = "detail"

    @property
    def symbol(self) -> str:
        return self.name.upper()

    @property
    def market_cap(self) -> Optional[Decimal]:
        if self.shares is None:
            return None
        return self.price * self.shares


Quote = Union[LiveQuote, EquitySummary, EquityDetail]


def parse_live(payload: Mapping[str, Any]) -> LiveQuote:
    return LiveQuote(
        name=str(_require(payload, "name")),
        price=_price(_require(payload, "price"), "price"),
        change=_price(_require(payload, "change"), "change"),
        volume=_int(_require(payload, "volume"), "volume"),
    )


def parse_summary(payload: Mapping[str, Any]) -> EquitySummary:
    return EquitySummary(
        name=str(_require(payload, "name")),
        price=_price(_require(payload, "price"), "price"),
    )


def parse_detail(payload: Mapping[str, Any]) -> EquityDetail:
    shares = payload.get("shares")
    return EquityDetail(
        name=str(_require(payload, "name")),
        price=_price(_require(payload, "price"), "price"),
        company=Company.from_dict(_require(payload, "company")),
        capital=_optional_price(payload, "capital"),
        dps=_optional_price(payload, "dps"),
        eps=_optional_price(payload, "eps"),
        shares=_int(shares, "shares") if shares is not None else None,
    )


def parse_quote(payload: Mapping[str, Any]) -> Quote:
    """
    Validate a GSE payload into the matching quote type.

    Shape is decided by keys: ``company`` -> detail, ``change`` and
    ``volume`` -> live, otherwise summary.

    Args:
        payload: One decoded JSON object from the GSE API

    Returns:
        LiveQuote, EquitySummary or EquityDetail

    Raises:
        QuotePayloadError: If the payload is not an object or a required
            field is missing or malformed
    """
    if not isinstance(payload, Mapping):
        raise QuotePayloadError(f"Quote payload must be an object, got {type(payload).__name__}")

    if "company" in payload:
        return parse_detail(payload)
    if "change" in payload and "volume" in payload:
        return parse_live(payload)
    return parse_summary(payload)


def parse_quotes(payloads: Any) -> list[Quote]:
    """Parse a JSON array of quote payloads."""
    if not isinstance(payloads, list):
        raise QuotePayloadError(f"Expected a list of quotes, got {type(payloads).__name__}")
    return [parse_quote(p) for p in payloads]


def build_price_map(quotes: Iterable[Quote]) -> dict[str, Decimal]:
    """
    Collapse quotes into a symbol -> price map.

    Keys are upper-cased. Non-finite or negative prices are skipped so
    that they surface as missing prices rather than bogus values. Later
    quotes for the same symbol win.
    """
    prices: dict[str, Decimal] = {}
    for quote in quotes:
        if not quote.price.is_finite() or quote.price < 0:
            logger.debug("Skipping unusable price for %s: %s", quote.symbol, quote.price)
            continue
        prices[quote.symbol] = quote.price
    return prices
