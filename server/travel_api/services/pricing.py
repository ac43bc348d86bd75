"""Price resolution for tour packages and dated events."""

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Mapping, Optional

from ..models.booking import HotelCategory
from ..models.package import TourPackage

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
CHILD_PRICE_RATIO = Decimal("0.7")


def quantize(amount: Decimal) -> Decimal:
    """Round a money amount to two decimal places, half up."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def to_decimal(value: Any) -> Optional[Decimal]:
    """Parse a stored price (number or decimal string); None if absent or unparsable."""
    if value is None or isinstance(value, bool):
        return None
    try:
        amount = Decimal(str(value))
        if not amount.is_finite() or amount < 0:
            return None
        return quantize(amount)
    except (InvalidOperation, ValueError):
        return None


def child_price(adult_price: Decimal) -> Decimal:
    return quantize(adult_price * CHILD_PRICE_RATIO)


@dataclass(frozen=True)
class PriceQuote:
    """Unit prices for one booking configuration."""

    price: Decimal
    strike_through_price: Optional[Decimal]
    children_price: Decimal
    children_strike_through_price: Optional[Decimal]


def flat_quote(price: Decimal, strike_through_price: Optional[Decimal] = None) -> PriceQuote:
    """Quote from a single adult price, children at 70%."""
    price = quantize(Decimal(str(price)))
    strike = quantize(Decimal(str(strike_through_price))) if strike_through_price is not None else None
    return PriceQuote(
        price=price,
        strike_through_price=strike,
        children_price=child_price(price),
        children_strike_through_price=child_price(strike) if strike is not None else None,
    )


def _bucket_quote(bucket: Any) -> Optional[PriceQuote]:
    if not isinstance(bucket, Mapping):
        return None
    price = to_decimal(bucket.get("price"))
    if price is None:
        return None
    strike = to_decimal(bucket.get("strikethrough_price"))
    children = to_decimal(bucket.get("children_price"))
    children_strike = to_decimal(bucket.get("children_strikethrough_price"))
    if children_strike is None and strike is not None:
        children_strike = child_price(strike)
    return PriceQuote(
        price=price,
        strike_through_price=strike,
        children_price=children if children is not None else child_price(price),
        children_strike_through_price=children_strike,
    )


def resolve_price(
    package: TourPackage,
    hotel_category: HotelCategory | str = HotelCategory.THREE_STAR,
    flight_included: bool = False,
) -> PriceQuote:
    """
    Resolve the unit prices of a package for a hotel tier and flight option.

    Tiered buckets win when present and well formed; anything else falls back
    to the package's flat ``starting_price``. Never raises on bad tier data.
    """
    category = hotel_category.value if isinstance(hotel_category, HotelCategory) else str(hotel_category)
    fallback = flat_quote(package.starting_price, package.strike_through_price)

    tiers = package.pricing_tiers
    if not isinstance(tiers, Mapping) or category not in tiers:
        return fallback

    buckets = tiers[category]
    if not isinstance(buckets, Mapping):
        return fallback

    flight_key = "with_flights" if flight_included else "without_flights"
    quote = _bucket_quote(buckets.get(flight_key))
    if quote is None:
        logger.warning(
            "Malformed pricing tier, using flat price",
            extra={
                "package_id": package.id,
                "hotel_category": category,
                "flight_key": flight_key
            }
        )
        return fallback
    return quote


def compute_total(quote: PriceQuote, adults: int, children: int) -> Decimal:
    """Booking total for ``adults`` and ``children`` at the quoted unit prices."""
    return quantize(quote.price * adults + quote.children_price * children)


def to_minor_units(amount: Decimal) -> int:
    """Convert a major-unit amount (rupees) to gateway minor units (paise)."""
    return int(quantize(amount) * 100)
