"""
SQLAlchemy integration — durable order store and reconciliation ledger.

Usage:
    session_factory, engine = await create_database("sqlite+aiosqlite:///fiori.db")
    store = SQLAlchemyStore(session_factory)

    coordinator = OrderCoordinator(store, ledger=store)

Each insert commits in its own session: the order, its item and its
notification are separate writes, exactly like the remote store this
package talks to in production.
"""

from __future__ import annotations

import uuid
from datetime import datetime, UTC
from decimal import Decimal
from typing import Any

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, JSON, Numeric, String, Text, event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from kungfu import Result, Ok, Error

from fiori.log import get_logger
from fiori.order._store import StoreError
from fiori.order._types import (
    Order,
    OrderItem,
    OrderNotification,
    OrderRecord,
    OrphanedOrder,
)

logger = get_logger(__name__)


# ═══════════════════════════════════════════════════════════════════════════════
# Base
# ═══════════════════════════════════════════════════════════════════════════════

class Base(DeclarativeBase):
    pass


# ═══════════════════════════════════════════════════════════════════════════════
# Tables
# ═══════════════════════════════════════════════════════════════════════════════

class OrderTable(Base):
    __tablename__ = "orders"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    order_number: Mapped[str] = mapped_column(String(20), nullable=False, index=True)

    customer_name: Mapped[str] = mapped_column(String(200), nullable=False)
    customer_email: Mapped[str] = mapped_column(String(320), nullable=False, index=True)
    customer_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)

    total_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    payment_status: Mapped[str] = mapped_column(String(20), nullable=False)

    # {"street", "city", "postalCode", "country"}
    billing_address: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    shipping_address: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class OrderItemTable(Base):
    __tablename__ = "order_items"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    order_id: Mapped[str] = mapped_column(ForeignKey("orders.id"), nullable=False, index=True)
    product_id: Mapped[str] = mapped_column(String(50), nullable=False)
    product_name: Mapped[str] = mapped_column(String(200), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)


class OrderNotificationTable(Base):
    __tablename__ = "order_notifications"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    order_id: Mapped[str] = mapped_column(ForeignKey("orders.id"), nullable=False, index=True)
    notification_type: Mapped[str] = mapped_column(String(30), nullable=False)
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class OrphanedOrderTable(Base):
    """Orders left without a dependent row; cleared by an operator."""

    __tablename__ = "orphaned_orders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_id: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    order_number: Mapped[str] = mapped_column(String(20), nullable=False)
    failed_step: Mapped[str] = mapped_column(String(30), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    recorded_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


# ═══════════════════════════════════════════════════════════════════════════════
# Store
# ═══════════════════════════════════════════════════════════════════════════════

def _new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


class SQLAlchemyStore:
    """
    OrderStore and ReconciliationLedger over an async SQLAlchemy engine.

    Database errors are returned as ``Error(StoreError)``; ledger writes
    that fail are logged and re-raised so the saga counts them as failed
    compensations.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session = session_factory

    async def insert_order(self, record: OrderRecord) -> Result[Order, StoreError]:
        order_id = _new_id("ord")
        created_at = datetime.now(UTC)
        row = OrderTable(
            id=order_id,
            order_number=record.order_number,
            customer_name=record.customer_name,
            customer_email=record.customer_email,
            customer_phone=record.customer_phone,
            total_amount=record.total_amount,
            status=record.status.value,
            payment_status=record.payment_status.value,
            billing_address=record.billing_address.as_dict(),
            shipping_address=record.shipping_address.as_dict(),
            notes=record.notes,
            created_at=created_at,
        )
        try:
            async with self._session() as session, session.begin():
                session.add(row)
        except Exception as e:
            return Error(StoreError.from_exception(e))
        return Ok(Order.from_record(order_id, record, created_at))

    async def insert_item(self, item: OrderItem) -> Result[OrderItem, StoreError]:
        item_id = _new_id("item")
        row = OrderItemTable(
            id=item_id,
            order_id=item.order_id,
            product_id=item.product_id,
            product_name=item.product_name,
            quantity=item.quantity,
            price=item.price,
        )
        try:
            async with self._session() as session, session.begin():
                session.add(row)
        except Exception as e:
            return Error(StoreError.from_exception(e))
        return Ok(OrderItem(
            order_id=item.order_id,
            product_id=item.product_id,
            product_name=item.product_name,
            quantity=item.quantity,
            price=item.price,
            id=item_id,
        ))

    async def insert_notification(
        self, notification: OrderNotification
    ) -> Result[OrderNotification, StoreError]:
        notification_id = _new_id("ntf")
        row = OrderNotificationTable(
            id=notification_id,
            order_id=notification.order_id,
            notification_type=notification.kind.value,
            is_read=notification.is_read,
            created_at=datetime.now(UTC),
        )
        try:
            async with self._session() as session, session.begin():
                session.add(row)
        except Exception as e:
            return Error(StoreError.from_exception(e))
        return Ok(OrderNotification(
            order_id=notification.order_id,
            kind=notification.kind,
            is_read=notification.is_read,
            id=notification_id,
        ))

    async def record(self, orphan: OrphanedOrder) -> None:
        logger.error(
            "Orphaned order needs reconciliation",
            order_id=orphan.order_id,
            order_number=orphan.order_number,
            failed_step=orphan.failed_step,
            reason=orphan.message,
        )
        async with self._session() as session, session.begin():
            session.add(OrphanedOrderTable(
                order_id=orphan.order_id,
                order_number=orphan.order_number,
                failed_step=orphan.failed_step,
                message=orphan.message,
                recorded_at=orphan.recorded_at,
            ))


# ═══════════════════════════════════════════════════════════════════════════════
# Database Setup
# ═══════════════════════════════════════════════════════════════════════════════

def _enable_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


async def create_database(
    url: str = "sqlite+aiosqlite:///:memory:",
    echo: bool = False,
) -> tuple[async_sessionmaker[AsyncSession], AsyncEngine]:
    """
    Create tables and return (session_factory, engine).

    SQLite connections get ``PRAGMA foreign_keys=ON`` so an item or
    notification cannot be written for an order that does not exist.
    """
    engine = create_async_engine(url, echo=echo)
    if engine.dialect.name == "sqlite":
        event.listen(engine.sync_engine, "connect", _enable_foreign_keys)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    return async_sessionmaker(engine, expire_on_commit=False), engine


__all__ = (
    "Base",
    "OrderTable",
    "OrderItemTable",
    "OrderNotificationTable",
    "OrphanedOrderTable",
    "SQLAlchemyStore",
    "create_database",
)
