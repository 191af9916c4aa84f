"""
Order — the order aggregate and its coordinated creation.

    from fiori import order as O

    coordinator = O.OrderCoordinator(O.MemoryStore(), ledger=O.MemoryLedger())
    match await coordinator.create_order(draft, product, quote.total, validation):
        case Ok(order):
            print(order.order_number)
        case Error(e) if e.is_partial:
            print(f"order {e.order_id} needs reconciliation")
        case Error(e):
            print(e.message)
"""

from fiori.order._types import (
    Product,
    REQUIRED_FIELDS,
    OrderDraft,
    OrderStatus,
    PaymentStatus,
    NotificationKind,
    PostalAddress,
    OrderRecord,
    Order,
    OrderItem,
    OrderNotification,
    OrphanedOrder,
    CheckoutErrorKind,
    CheckoutError,
    CheckoutErrors,
)
from fiori.order._number import generate_order_number
from fiori.order._store import (
    StoreError,
    OrderStore,
    FunctionalStore,
    store_from,
    MemoryStore,
)
from fiori.order._ledger import ReconciliationLedger, LogLedger, MemoryLedger
from fiori.order._coordinator import (
    OrderCoordinator,
    order_notes,
    ORDER_STEP,
    ITEM_STEP,
    NOTIFICATION_STEP,
)
from fiori.order._sqlalchemy import SQLAlchemyStore, create_database

__all__ = (
    # Types
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
    # Errors
    "CheckoutErrorKind",
    "CheckoutError",
    "CheckoutErrors",
    "StoreError",
    # Numbering
    "generate_order_number",
    # Storage
    "OrderStore",
    "FunctionalStore",
    "store_from",
    "MemoryStore",
    "SQLAlchemyStore",
    "create_database",
    # Reconciliation
    "ReconciliationLedger",
    "LogLedger",
    "MemoryLedger",
    # Coordination
    "OrderCoordinator",
    "order_notes",
    "ORDER_STEP",
    "ITEM_STEP",
    "NOTIFICATION_STEP",
)
