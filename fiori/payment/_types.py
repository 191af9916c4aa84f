"""
Payment types — what the gateway receives and returns.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Protocol

from kungfu import Result

from fiori.address import AddressValidationResult
from fiori.order import OrderDraft, Product
from fiori.pricing import PriceQuote

# ═══════════════════════════════════════════════════════════════════════════════
# Gateway Payload
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class CheckoutItem:
    """One line sent to the gateway's hosted checkout."""

    product_id: str
    name: str
    price: Decimal
    quantity: int
    image: str | None = None
    description: str | None = None

    @classmethod
    def of(cls, product: Product, quantity: int) -> CheckoutItem:
        return cls(
            product_id=product.id,
            name=product.name,
            price=product.price,
            quantity=quantity,
            image=product.image_url,
            description=product.description,
        )


@dataclass(frozen=True, slots=True)
class CustomerInfo:
    name: str
    email: str
    phone: str | None = None

    @classmethod
    def of(cls, draft: OrderDraft) -> CustomerInfo:
        return cls(
            name=draft.customer_name,
            email=draft.customer_email,
            phone=draft.customer_phone or None,
        )


@dataclass(frozen=True, slots=True)
class PaymentReceipt:
    order_id: str
    transaction_id: str
    provider: str


# ═══════════════════════════════════════════════════════════════════════════════
# Gateway Protocol
# ═══════════════════════════════════════════════════════════════════════════════


class PaymentGateway(Protocol):
    """
    External card-payment collaborator.

    Receives the concrete order id of an already written order. Errors are
    user-facing strings and are shown verbatim.
    """

    async def charge(
        self,
        order_id: str,
        items: list[CheckoutItem],
        customer: CustomerInfo,
    ) -> Result[PaymentReceipt, str]: ...


# ═══════════════════════════════════════════════════════════════════════════════
# Gate — Payment Preconditions
# ═══════════════════════════════════════════════════════════════════════════════


class Gate(Enum):
    READY = "ready"
    MISSING_FIELDS = "missing_fields"
    ADDRESS_UNVALIDATED = "address_unvalidated"

    @property
    def guidance(self) -> str:
        return _GUIDANCE[self]


_GUIDANCE = {
    Gate.READY: "",
    Gate.MISSING_FIELDS: "Fill in all required fields above to proceed to payment.",
    Gate.ADDRESS_UNVALIDATED: "Validate the delivery address before proceeding to payment.",
}


# ═══════════════════════════════════════════════════════════════════════════════
# What the controller needs from an ordering session
# ═══════════════════════════════════════════════════════════════════════════════


class CheckoutSession(Protocol):
    @property
    def product(self) -> Product: ...

    @property
    def draft(self) -> OrderDraft: ...

    @property
    def validation(self) -> AddressValidationResult | None: ...

    @property
    def quote(self) -> PriceQuote: ...

    def complete(self) -> None:
        """Clear the draft and close after a successful submission."""
        ...


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "CheckoutItem",
    "CustomerInfo",
    "PaymentReceipt",
    "PaymentGateway",
    "Gate",
    "CheckoutSession",
)
