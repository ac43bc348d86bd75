"""Unit tests for package and event price resolution."""

from decimal import Decimal

from travel_api.models.booking import HotelCategory
from travel_api.models.package import TourPackage
from travel_api.services.pricing import (
    child_price,
    compute_total,
    flat_quote,
    resolve_price,
    to_decimal,
    to_minor_units,
)


def make_package(starting_price="1000", strike=None, tiers=None) -> TourPackage:
    return TourPackage(
        id=7,
        name="Test Package",
        starting_price=Decimal(starting_price),
        strike_through_price=Decimal(strike) if strike is not None else None,
        pricing_tiers=tiers,
    )


def test_flat_price_without_tiers():
    quote = resolve_price(make_package("1000", strike="1200"))

    assert quote.price == Decimal("1000.00")
    assert quote.strike_through_price == Decimal("1200.00")
    assert quote.children_price == Decimal("700.00")
    assert quote.children_strike_through_price == Decimal("840.00")


def test_tier_bucket_wins_over_flat_price():
    package = make_package(tiers={
        "3_star": {
            "without_flights": {"price": 1500},
            "with_flights": {"price": "2400", "strikethrough_price": "2800", "children_price": "1600"},
        }
    })

    quote = resolve_price(package, HotelCategory.THREE_STAR, flight_included=True)

    assert quote.price == Decimal("2400.00")
    assert quote.strike_through_price == Decimal("2800.00")
    assert quote.children_price == Decimal("1600.00")
    # Missing child strikethrough falls back to 70% of the adult one
    assert quote.children_strike_through_price == Decimal("1960.00")


def test_tier_without_children_price_uses_ratio():
    package = make_package(tiers={"4_5_star": {"without_flights": {"price": "3000"}}})

    quote = resolve_price(package, "4_5_star", flight_included=False)

    assert quote.price == Decimal("3000.00")
    assert quote.children_price == Decimal("2100.00")


def test_missing_category_falls_back_to_flat_price():
    package = make_package("900", tiers={"4_5_star": {"without_flights": {"price": "3000"}}})

    quote = resolve_price(package, HotelCategory.THREE_STAR)

    assert quote.price == Decimal("900.00")


def test_malformed_tier_falls_back_to_flat_price():
    for bucket in ({"price": "not-a-number"}, {"price": -10}, {"price": None}, "oops", None):
        package = make_package("900", tiers={"3_star": {"without_flights": bucket}})
        assert resolve_price(package).price == Decimal("900.00")


def test_non_mapping_tiers_fall_back_to_flat_price():
    assert resolve_price(make_package("900", tiers=["3_star"])).price == Decimal("900.00")
    assert resolve_price(make_package("900", tiers={"3_star": [1, 2]})).price == Decimal("900.00")


def test_compute_total():
    quote = flat_quote(Decimal("1000"))

    assert compute_total(quote, adults=2, children=1) == Decimal("2700.00")
    assert compute_total(quote, adults=1, children=0) == Decimal("1000.00")


def test_child_price_rounds_half_up():
    assert child_price(Decimal("0.05")) == Decimal("0.04")
    assert child_price(Decimal("999.99")) == Decimal("699.99")


def test_to_decimal():
    assert to_decimal("12.345") == Decimal("12.35")
    assert to_decimal(5) == Decimal("5.00")
    assert to_decimal(True) is None
    assert to_decimal("NaN") is None
    assert to_decimal("-1") is None
    assert to_decimal(None) is None


def test_to_minor_units():
    assert to_minor_units(Decimal("12500.50")) == 1250050
    assert to_minor_units(Decimal("0.01")) == 1
    assert to_minor_units(Decimal("19.999")) == 2000
