"""
Order types — draft, durable records and errors.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal
from enum import Enum, auto

from kungfu import Result, Ok, Error

from fiori._types import ZERO

# ═══════════════════════════════════════════════════════════════════════════════
# Product — Catalogue Entry (read-only here)
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Product:
    id: str
    name: str
    price: Decimal
    description: str | None = None
    image_url: str | None = None

    def __post_init__(self) -> None:
        if self.price < ZERO:
            raise ValueError(f"product {self.id} has a negative price")


# ═══════════════════════════════════════════════════════════════════════════════
# OrderDraft — Form State of the Active Session
# ═══════════════════════════════════════════════════════════════════════════════

REQUIRED_FIELDS = ("customer_name", "customer_email", "delivery_address")


@dataclass(frozen=True, slots=True)
class OrderDraft:
    """
    What the customer has typed so far.

    Immutable: every edit goes through a transition that returns a new
    draft, so the session always holds one consistent value.
    """

    customer_name: str = ""
    customer_email: str = ""
    customer_phone: str = ""
    quantity: int = 1
    special_requests: str = ""
    delivery_date: str = ""
    delivery_address: str = ""

    def with_field(self, **changes: str) -> OrderDraft:
        """Replace text fields. Quantity goes through ``with_quantity``."""
        if "quantity" in changes:
            raise TypeError("use with_quantity() to change the quantity")
        return replace(self, **changes)

    def with_quantity(self, quantity: int) -> Result[OrderDraft, CheckoutError]:
        if quantity < 1:
            return Error(CheckoutErrors.input(f"Quantity must be at least 1, got {quantity}."))
        return Ok(replace(self, quantity=quantity))

    def incremented(self) -> OrderDraft:
        return replace(self, quantity=self.quantity + 1)

    def decremented(self) -> OrderDraft:
        """One less, never below 1."""
        return replace(self, quantity=max(1, self.quantity - 1))

    def missing_fields(self) -> tuple[str, ...]:
        return tuple(f for f in REQUIRED_FIELDS if not getattr(self, f).strip())

    @property
    def is_complete(self) -> bool:
        return not self.missing_fields()


# ═══════════════════════════════════════════════════════════════════════════════
# Status Enums
# ═══════════════════════════════════════════════════════════════════════════════


class OrderStatus(Enum):
    """
    Order lifecycle.

    This package only produces PAYMENT_PENDING (pay now) and PENDING
    (pay later); later transitions belong to fulfilment and payments.
    """

    PAYMENT_PENDING = "payment_pending"
    PENDING = "pending"
    PAID = "paid"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class PaymentStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class NotificationKind(Enum):
    NEW_ORDER = "new_order"


# ═══════════════════════════════════════════════════════════════════════════════
# Durable Records
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class PostalAddress:
    """
    Address snapshot stored on the order.

    The form collects one free-text line, so city and postal code stay
    blank and the whole text goes to ``street``.
    """

    street: str
    city: str = ""
    postal_code: str = ""
    country: str = "Italy"

    def as_dict(self) -> dict[str, str]:
        return {
            "street": self.street,
            "city": self.city,
            "postalCode": self.postal_code,
            "country": self.country,
        }

    @classmethod
    def from_dict(cls, data: dict[str, str]) -> PostalAddress:
        return cls(
            street=data.get("street", ""),
            city=data.get("city", ""),
            postal_code=data.get("postalCode", ""),
            country=data.get("country", ""),
        )


@dataclass(frozen=True, slots=True)
class OrderRecord:
    """Insert payload for an order; the store assigns id and timestamp."""

    order_number: str
    customer_name: str
    customer_email: str
    customer_phone: str | None
    total_amount: Decimal
    status: OrderStatus
    payment_status: PaymentStatus
    billing_address: PostalAddress
    shipping_address: PostalAddress
    notes: str


@dataclass(frozen=True, slots=True)
class Order:
    id: str
    order_number: str
    customer_name: str
    customer_email: str
    customer_phone: str | None
    total_amount: Decimal
    status: OrderStatus
    payment_status: PaymentStatus
    billing_address: PostalAddress
    shipping_address: PostalAddress
    notes: str
    created_at: datetime

    @classmethod
    def from_record(cls, id: str, record: OrderRecord, created_at: datetime) -> Order:
        return cls(
            id=id,
            order_number=record.order_number,
            customer_name=record.customer_name,
            customer_email=record.customer_email,
            customer_phone=record.customer_phone,
            total_amount=record.total_amount,
            status=record.status,
            payment_status=record.payment_status,
            billing_address=record.billing_address,
            shipping_address=record.shipping_address,
            notes=record.notes,
            created_at=created_at,
        )


@dataclass(frozen=True, slots=True)
class OrderItem:
    """
    One line of an order.

    Name and price are copied from the product at submission so later
    catalogue changes never rewrite history.
    """

    order_id: str
    product_id: str
    product_name: str
    quantity: int
    price: Decimal
    id: str | None = None


@dataclass(frozen=True, slots=True)
class OrderNotification:
    order_id: str
    kind: NotificationKind = NotificationKind.NEW_ORDER
    is_read: bool = False
    id: str | None = None


@dataclass(frozen=True, slots=True)
class OrphanedOrder:
    """An order whose dependent write failed; needs manual reconciliation."""

    order_id: str
    order_number: str
    failed_step: str
    message: str
    recorded_at: datetime


# ═══════════════════════════════════════════════════════════════════════════════
# Errors
# ═══════════════════════════════════════════════════════════════════════════════


class CheckoutErrorKind(Enum):
    """Kinds of ordering errors."""

    INPUT = auto()  # Missing required field, bad quantity
    ZONE = auto()  # Address absent, invalid or outside the delivery zone
    GATE = auto()  # Payment attempted before the gate was satisfied
    IN_PROGRESS = auto()  # A submission is already running
    ORDER_WRITE = auto()  # Order insert failed, nothing persisted
    ITEM_WRITE = auto()  # Order exists without its line item
    NOTIFICATION_WRITE = auto()  # Order exists without its staff notification
    GATEWAY = auto()  # Payment gateway reported an error


PARTIAL_FAILURES = frozenset({CheckoutErrorKind.ITEM_WRITE, CheckoutErrorKind.NOTIFICATION_WRITE})


@dataclass(frozen=True, slots=True)
class CheckoutError:
    """
    Ordering error.

    Note: order_id is set whenever an order row already exists (partial
    failures, gateway errors after order creation).
    """

    kind: CheckoutErrorKind
    message: str
    order_id: str | None = None

    @property
    def is_partial(self) -> bool:
        return self.kind in PARTIAL_FAILURES


class CheckoutErrors:
    @staticmethod
    def input(msg: str) -> CheckoutError:
        return CheckoutError(CheckoutErrorKind.INPUT, msg)

    @staticmethod
    def zone(msg: str) -> CheckoutError:
        return CheckoutError(CheckoutErrorKind.ZONE, msg)

    @staticmethod
    def gate(msg: str) -> CheckoutError:
        return CheckoutError(CheckoutErrorKind.GATE, msg)

    @staticmethod
    def in_progress() -> CheckoutError:
        return CheckoutError(CheckoutErrorKind.IN_PROGRESS, "An order is already being submitted.")

    @staticmethod
    def order_write(msg: str) -> CheckoutError:
        return CheckoutError(CheckoutErrorKind.ORDER_WRITE, msg)

    @staticmethod
    def item_write(msg: str, order_id: str) -> CheckoutError:
        return CheckoutError(CheckoutErrorKind.ITEM_WRITE, msg, order_id)

    @staticmethod
    def notification_write(msg: str, order_id: str) -> CheckoutError:
        return CheckoutError(CheckoutErrorKind.NOTIFICATION_WRITE, msg, order_id)

    @staticmethod
    def gateway(msg: str, order_id: str | None = None) -> CheckoutError:
        return CheckoutError(CheckoutErrorKind.GATEWAY, msg, order_id)


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "Product",
    "REQUIRED_FIELDS",
    "OrderDraft",
    "OrderStatus",
    "PaymentStatus",
    "NotificationKind",
    "PostalAddress",
    "OrderRecord",
    "Order",
    "OrderItem",
    "OrderNotification",
    "OrphanedOrder",
    "CheckoutErrorKind",
    "CheckoutError",
    "CheckoutErrors",
)
