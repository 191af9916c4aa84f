"""Tests for the SQLAlchemy order store over in-memory SQLite."""

from datetime import datetime, UTC
from decimal import Decimal

import pytest
import pytest_asyncio
from kungfu import Error, Ok
from sqlalchemy import select

from fiori.address import AddressValidationResult
from fiori.order import (
    OrderCoordinator,
    OrderItem,
    OrderNotification,
    OrderRecord,
    OrderStatus,
    OrphanedOrder,
    PaymentStatus,
    PostalAddress,
    SQLAlchemyStore,
    create_database,
)
from fiori.order._sqlalchemy import (
    OrderItemTable,
    OrderNotificationTable,
    OrderTable,
    OrphanedOrderTable,
)


@pytest_asyncio.fixture
async def database():
    session_factory, engine = await create_database()
    yield session_factory
    await engine.dispose()


@pytest.fixture
def sql_store(database) -> SQLAlchemyStore:
    return SQLAlchemyStore(database)


def record() -> OrderRecord:
    address = PostalAddress(street="Via Roma 1, Milano")
    return OrderRecord(
        order_number="ORD-123456789",
        customer_name="Giulia Bianchi",
        customer_email="giulia@example.com",
        customer_phone=None,
        total_amount=Decimal("64.80"),
        status=OrderStatus.PENDING,
        payment_status=PaymentStatus.PENDING,
        billing_address=address,
        shipping_address=address,
        notes="Product Order - Red Roses Bouquet",
    )


async def insert(store: SQLAlchemyStore):
    match await store.insert_order(record()):
        case Ok(order):
            return order
        case Error(e):
            pytest.fail(f"insert failed: {e}")


class TestSQLAlchemyStore:
    @pytest.mark.asyncio
    async def test_insert_order(self, sql_store, database):
        order = await insert(sql_store)

        assert order.id.startswith("ord_")
        assert order.order_number == "ORD-123456789"

        async with database() as session:
            row = (await session.execute(select(OrderTable))).scalar_one()

        assert row.id == order.id
        assert row.status == "pending"
        assert row.payment_status == "pending"
        assert row.total_amount == Decimal("64.80")
        assert row.shipping_address == {
            "street": "Via Roma 1, Milano",
            "city": "",
            "postalCode": "",
            "country": "Italy",
        }

    @pytest.mark.asyncio
    async def test_insert_item_and_notification(self, sql_store, database):
        order = await insert(sql_store)

        item = await sql_store.insert_item(OrderItem(
            order_id=order.id,
            product_id="prod-roses",
            product_name="Red Roses Bouquet",
            quantity=2,
            price=Decimal("29.90"),
        ))
        notification = await sql_store.insert_notification(OrderNotification(order_id=order.id))

        match item, notification:
            case Ok(i), Ok(n):
                assert i.id is not None
                assert n.id is not None
            case _:
                pytest.fail(f"unexpected results: {item}, {notification}")

        async with database() as session:
            items = (await session.execute(select(OrderItemTable))).scalars().all()
            notifications = (await session.execute(select(OrderNotificationTable))).scalars().all()

        assert [(i.order_id, i.quantity, i.price) for i in items] == [(order.id, 2, Decimal("29.90"))]
        assert [(n.order_id, n.notification_type, n.is_read) for n in notifications] == [
            (order.id, "new_order", False)
        ]

    @pytest.mark.asyncio
    async def test_database_error_is_returned(self, sql_store):
        order = await insert(sql_store)

        broken = OrderItem(
            order_id=order.id,
            product_id="prod-roses",
            product_name=None,  # violates NOT NULL
            quantity=1,
            price=Decimal("1.00"),
        )

        match await sql_store.insert_item(broken):
            case Error(e):
                assert e.message
                assert e.cause is not None
            case Ok(_):
                pytest.fail("insert should have failed")

    @pytest.mark.asyncio
    async def test_rows_need_a_parent_order(self, sql_store, database):
        await insert(sql_store)

        item = await sql_store.insert_item(OrderItem(
            order_id="ord_missing",
            product_id="prod-roses",
            product_name="Red Roses Bouquet",
            quantity=1,
            price=Decimal("29.90"),
        ))
        notification = await sql_store.insert_notification(OrderNotification(order_id="ord_missing"))

        match item, notification:
            case Error(_), Error(_):
                pass
            case _:
                pytest.fail(f"rows without a parent order were accepted: {item}, {notification}")

        async with database() as session:
            items = (await session.execute(select(OrderItemTable))).scalars().all()
            notifications = (await session.execute(select(OrderNotificationTable))).scalars().all()

        assert items == []
        assert notifications == []

    @pytest.mark.asyncio
    async def test_record_orphan(self, sql_store, database):
        await sql_store.record(OrphanedOrder(
            order_id="ord_abc",
            order_number="ORD-123456789",
            failed_step="item",
            message="order_items unavailable",
            recorded_at=datetime.now(UTC),
        ))

        async with database() as session:
            row = (await session.execute(select(OrphanedOrderTable))).scalar_one()

        assert (row.order_id, row.failed_step) == ("ord_abc", "item")


class TestCoordinatorOverSQL:
    @pytest.mark.asyncio
    async def test_pay_later_aggregate(self, sql_store, database, settings, complete_draft, product):
        coordinator = OrderCoordinator(sql_store, ledger=sql_store, settings=settings)
        validation = AddressValidationResult(
            address="Via Roma 1, Milano", sequence=1, is_valid=True, is_within_zone=True
        )

        match await coordinator.create_order(
            complete_draft, product, Decimal("59.80"), validation, status=OrderStatus.PENDING
        ):
            case Ok(order):
                await coordinator.flag_for_follow_up(order)
            case Error(e):
                pytest.fail(f"unexpected error: {e}")

        async with database() as session:
            orders = (await session.execute(select(OrderTable))).scalars().all()
            items = (await session.execute(select(OrderItemTable))).scalars().all()
            notifications = (await session.execute(select(OrderNotificationTable))).scalars().all()

        assert [o.status for o in orders] == ["pending"]
        assert len(items) == 1
        assert len(notifications) == 1
