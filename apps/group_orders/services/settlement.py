"""
Settlement calculation for fulfilled group orders.

Pure functions over plain values. Nothing here touches the database, so the
same inputs always give the same settlement.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Sequence, Tuple
from uuid import UUID

PAISE = Decimal('0.01')
HUNDRED = Decimal('100')


@dataclass(frozen=True)
class TierSpec:
    threshold: int
    discount_percentage: Decimal


@dataclass(frozen=True)
class EntrySpec:
    entry_id: UUID
    vendor_id: UUID
    quantity: int


@dataclass(frozen=True)
class SettlementLine:
    entry_id: UUID
    vendor_id: UUID
    quantity: int
    unit_price: Decimal
    total_price: Decimal


@dataclass(frozen=True)
class Settlement:
    committed_quantity: int
    base_price: Decimal
    discount_percentage: Decimal
    unit_price: Decimal
    lines: Tuple[SettlementLine, ...]

    @property
    def total(self) -> Decimal:
        return sum((line.total_price for line in self.lines), Decimal('0.00'))


def select_discount(tiers: Iterable[TierSpec], quantity: int) -> Decimal:
    """
    Return the percentage of the highest tier whose threshold is <= quantity.

    Thresholds are inclusive. Returns 0 when no tier is reached.
    """
    reached = [tier for tier in tiers if tier.threshold <= quantity]
    if not reached:
        return Decimal('0')
    return Decimal(max(reached, key=lambda tier: tier.threshold).discount_percentage)


def discounted_unit_price(base_price: Decimal, discount_percentage: Decimal) -> Decimal:
    """Apply a percentage discount and round half-up to paise."""
    price = Decimal(base_price) * (HUNDRED - Decimal(discount_percentage)) / HUNDRED
    return price.quantize(PAISE, rounding=ROUND_HALF_UP)


def calculate_settlement(
    *,
    committed_quantity: int,
    tiers: Sequence[TierSpec],
    entries: Sequence[EntrySpec],
    base_price: Decimal
) -> Settlement:
    """
    Price every participant at the tier reached by the committed quantity.

    Args:
        committed_quantity: Total quantity across active entries
        tiers: Discount tiers of the group order
        entries: Active participant entries
        base_price: Undiscounted unit price of the product

    Returns:
        Settlement with one line per entry, in the order given
    """
    discount = select_discount(tiers, committed_quantity)
    unit_price = discounted_unit_price(base_price, discount)

    lines: List[SettlementLine] = [
        SettlementLine(
            entry_id=entry.entry_id,
            vendor_id=entry.vendor_id,
            quantity=entry.quantity,
            unit_price=unit_price,
            total_price=(unit_price * entry.quantity).quantize(PAISE, rounding=ROUND_HALF_UP),
        )
        for entry in entries
    ]

    return Settlement(
        committed_quantity=committed_quantity,
        base_price=Decimal(base_price).quantize(PAISE, rounding=ROUND_HALF_UP),
        discount_percentage=discount,
        unit_price=unit_price,
        lines=tuple(lines),
    )
