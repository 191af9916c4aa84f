"""
Pricing — subtotal, delivery fee and total for one product line.

Pure and synchronous: recomputed from scratch on every call, so the quote
always reflects the current quantity and the current validation result.

    quote = pricing.quote(Decimal("15.00"), 1, validation)
    quote.total   # Decimal("20.00") with a deliverable result and a 5.00 fee
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from fiori._types import ZERO, to_money
from fiori.address import AddressValidationResult


@dataclass(frozen=True, slots=True)
class PriceQuote:
    subtotal: Decimal
    delivery_fee: Decimal
    total: Decimal

    @property
    def has_delivery_fee(self) -> bool:
        return self.delivery_fee > ZERO


def subtotal(unit_price: Decimal, quantity: int) -> Decimal:
    """``unit_price × quantity`` in the minor currency unit."""
    if quantity < 1:
        raise ValueError(f"quantity must be >= 1, got {quantity}")
    if unit_price < ZERO:
        raise ValueError(f"unit price must be >= 0, got {unit_price}")
    return to_money(unit_price * quantity)


def delivery_fee(validation: AddressValidationResult | None) -> Decimal:
    """Fee of a deliverable result; zero for absent, invalid or out-of-zone."""
    if validation is None:
        return ZERO
    return to_money(validation.applicable_fee)


def quote(
    unit_price: Decimal,
    quantity: int,
    validation: AddressValidationResult | None,
) -> PriceQuote:
    sub = subtotal(unit_price, quantity)
    fee = delivery_fee(validation)
    return PriceQuote(subtotal=sub, delivery_fee=fee, total=sub + fee)


__all__ = ("PriceQuote", "subtotal", "delivery_fee", "quote")
