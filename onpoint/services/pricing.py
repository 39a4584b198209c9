"""Booking price computation.

Trip and add-on prices are per traveler:

    addons_unit_total = sum(addon prices)
    subtotal          = trip_price * people
    addons_total      = addons_unit_total * people
    final_total       = subtotal + addons_total

Amounts are Decimals quantized to cents; a missing (NULL) price counts as 0.
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional

CENTS = Decimal("0.01")


def to_money(value) -> Decimal:
    if value is None:
        return Decimal("0.00")
    if not isinstance(value, Decimal):
        # str() keeps 0.1 as 0.1 instead of its binary float expansion
        value = Decimal(str(value))
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def clamp_people(people_count: Optional[int]) -> int:
    try:
        n = int(people_count or 0)
    except (TypeError, ValueError):
        n = 0
    return max(1, n)


@dataclass(frozen=True)
class PriceQuote:
    unit_price: Decimal
    people: int
    addons_unit_total: Decimal
    subtotal: Decimal
    addons_total: Decimal
    final_total: Decimal


def quote(trip_price, people_count: int, addon_prices: Iterable) -> PriceQuote:
    people = clamp_people(people_count)
    unit_price = to_money(trip_price)
    addons_unit_total = to_money(sum((to_money(p) for p in addon_prices), Decimal("0")))
    subtotal = to_money(unit_price * people)
    addons_total = to_money(addons_unit_total * people)
    return PriceQuote(
        unit_price=unit_price,
        people=people,
        addons_unit_total=addons_unit_total,
        subtotal=subtotal,
        addons_total=addons_total,
        final_total=to_money(subtotal + addons_total),
    )
