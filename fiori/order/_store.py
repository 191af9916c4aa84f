"""
Order store — typed storage protocol for the order aggregate.

Three inserts, no queries: the ordering flow only writes. All methods
return Result for explicit error handling.
"""

from __future__ import annotations

import asyncio
import itertools
from dataclasses import dataclass, replace
from datetime import datetime, UTC
from typing import Protocol, Callable, Awaitable

from kungfu import Result, Ok, Error

from fiori.order._types import (
    OrderRecord,
    Order,
    OrderItem,
    OrderNotification,
)


# ═══════════════════════════════════════════════════════════════════════════════
# Store Error
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class StoreError:
    """Storage operation error."""

    message: str
    cause: Exception | None = None

    @classmethod
    def from_exception(cls, e: Exception) -> StoreError:
        return cls(str(e) or type(e).__name__, e)


# ═══════════════════════════════════════════════════════════════════════════════
# Store Protocol — Result-based
# ═══════════════════════════════════════════════════════════════════════════════


class OrderStore(Protocol):
    """
    Order data-store protocol.

    Note: the three writes are independent; there is no transaction
    spanning them. OrderCoordinator sequences them and handles partial
    completion.

    Example — custom implementation:

        class RestStore:
            async def insert_order(self, record: OrderRecord) -> Result[Order, StoreError]:
                try:
                    row = await self.client.post("/orders", json=encode(record))
                    return Ok(Order.from_record(row["id"], record, parse(row["created_at"])))
                except Exception as e:
                    return Error(StoreError.from_exception(e))

            # ... other methods
    """

    async def insert_order(self, record: OrderRecord) -> Result[Order, StoreError]:
        """Insert order, return it with the generated id."""
        ...

    async def insert_item(self, item: OrderItem) -> Result[OrderItem, StoreError]:
        """Insert line item of an existing order."""
        ...

    async def insert_notification(
        self, notification: OrderNotification
    ) -> Result[OrderNotification, StoreError]:
        """Insert staff notification of an existing order."""
        ...


# ═══════════════════════════════════════════════════════════════════════════════
# Function-based Store Builder
# ═══════════════════════════════════════════════════════════════════════════════

type InsertOrderFn = Callable[[OrderRecord], Awaitable[Result[Order, StoreError]]]
type InsertItemFn = Callable[[OrderItem], Awaitable[Result[OrderItem, StoreError]]]
type InsertNotificationFn = Callable[
    [OrderNotification], Awaitable[Result[OrderNotification, StoreError]]
]


@dataclass(frozen=True)
class FunctionalStore:
    """
    Store built from functions.

    Example:
        store = store_from(
            insert_order=repo.create_order,
            insert_item=repo.add_item,
            insert_notification=repo.notify_staff,
        )
    """

    _insert_order: InsertOrderFn
    _insert_item: InsertItemFn
    _insert_notification: InsertNotificationFn

    async def insert_order(self, record: OrderRecord) -> Result[Order, StoreError]:
        return await self._insert_order(record)

    async def insert_item(self, item: OrderItem) -> Result[OrderItem, StoreError]:
        return await self._insert_item(item)

    async def insert_notification(
        self, notification: OrderNotification
    ) -> Result[OrderNotification, StoreError]:
        return await self._insert_notification(notification)


def store_from(
    insert_order: InsertOrderFn,
    insert_item: InsertItemFn,
    insert_notification: InsertNotificationFn,
) -> FunctionalStore:
    """
    Create Store from functions.

    Example — wrap a MemoryStore to fail item writes:
        memory = MemoryStore()

        async def broken_item(item: OrderItem) -> Result[OrderItem, StoreError]:
            return Error(StoreError("order_items unavailable"))

        store = store_from(memory.insert_order, broken_item, memory.insert_notification)
    """
    return FunctionalStore(
        _insert_order=insert_order,
        _insert_item=insert_item,
        _insert_notification=insert_notification,
    )


# ═══════════════════════════════════════════════════════════════════════════════
# Memory Store — For Testing
# ═══════════════════════════════════════════════════════════════════════════════


class MemoryStore:
    """
    In-memory order store.

    Note: single process only; data does not survive a restart.
    Enforces the parent link: an item or notification for an unknown
    order is rejected, as a foreign key would.
    """

    def __init__(self) -> None:
        self.orders: dict[str, Order] = {}
        self.items: list[OrderItem] = []
        self.notifications: list[OrderNotification] = []
        self._ids = itertools.count(1)
        self._lock = asyncio.Lock()

    async def insert_order(self, record: OrderRecord) -> Result[Order, StoreError]:
        async with self._lock:
            order_id = f"order-{next(self._ids)}"
            order = Order.from_record(order_id, record, datetime.now(UTC))
            self.orders[order_id] = order
            return Ok(order)

    async def insert_item(self, item: OrderItem) -> Result[OrderItem, StoreError]:
        async with self._lock:
            if item.order_id not in self.orders:
                return Error(StoreError(f"No order with id: {item.order_id}"))
            stored = replace(item, id=f"item-{next(self._ids)}")
            self.items.append(stored)
            return Ok(stored)

    async def insert_notification(
        self, notification: OrderNotification
    ) -> Result[OrderNotification, StoreError]:
        async with self._lock:
            if notification.order_id not in self.orders:
                return Error(StoreError(f"No order with id: {notification.order_id}"))
            stored = replace(notification, id=f"notification-{next(self._ids)}")
            self.notifications.append(stored)
            return Ok(stored)

    def items_of(self, order_id: str) -> list[OrderItem]:
        return [i for i in self.items if i.order_id == order_id]


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "StoreError",
    "OrderStore",
    "FunctionalStore",
    "store_from",
    "MemoryStore",
)
