"""
OrderCoordinator — writes the order aggregate as a saga.

    order ──then──▶ item [──then──▶ notification | charge]

Every later step needs the order id, so it waits for the order write. If
the item or notification write fails, the order row already exists: it is
not deleted (the store has no transaction spanning the rows), the order
step's compensator records it in the reconciliation ledger and the caller
gets a distinct ITEM_WRITE / NOTIFICATION_WRITE error.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, UTC
from decimal import Decimal

from kungfu import Result, Ok, Error

from fiori import saga as S
from fiori.address import AddressValidationResult, is_deliverable
from fiori.config import Settings, get_settings
from fiori.lift import from_result_async
from fiori.log import get_logger
from fiori.order._ledger import LogLedger, ReconciliationLedger
from fiori.order._number import generate_order_number
from fiori.order._store import OrderStore
from fiori.order._types import (
    CheckoutError,
    CheckoutErrors,
    Order,
    OrderDraft,
    OrderItem,
    OrderNotification,
    OrderRecord,
    OrderStatus,
    OrphanedOrder,
    PaymentStatus,
    PostalAddress,
    Product,
)

logger = get_logger(__name__)

ORDER_STEP = "order"
ITEM_STEP = "item"
NOTIFICATION_STEP = "notification"

# Failures of these steps leave an incomplete aggregate behind.
AGGREGATE_STEPS = frozenset({ITEM_STEP, NOTIFICATION_STEP})


def order_notes(product: Product, draft: OrderDraft) -> str:
    """Free-text summary stored on the order for staff."""
    return (
        f"Product Order - {product.name}\n"
        f"Quantity: {draft.quantity}\n"
        f"Special Requests: {draft.special_requests}\n"
        f"Delivery Date: {draft.delivery_date}"
    )


class OrderCoordinator:
    """
    Creates orders, their line item and staff notifications.

    Not idempotent: every successful ``create_order`` writes a new order.
    Duplicate submissions are the caller's to prevent.
    """

    def __init__(
        self,
        store: OrderStore,
        ledger: ReconciliationLedger | None = None,
        settings: Settings | None = None,
        order_number: Callable[[], str] = generate_order_number,
    ) -> None:
        settings = settings or get_settings()
        self._store = store
        self._ledger = ledger or LogLedger()
        self._country = settings.default_country
        self._order_number = order_number

    # ─────────────────────────────────────────────────────────────────────────
    # Public API
    # ─────────────────────────────────────────────────────────────────────────

    async def create_order(
        self,
        draft: OrderDraft,
        product: Product,
        total: Decimal,
        validation: AddressValidationResult | None,
        status: OrderStatus = OrderStatus.PAYMENT_PENDING,
    ) -> Result[Order, CheckoutError]:
        """
        Write order + item.

        Rejected before any write when the draft is incomplete or the
        address is not deliverable.
        """
        match self.check(draft, validation):
            case Error(e):
                return Error(e)

        return await self.run(self.order_saga(draft, product, total, status))

    async def flag_for_follow_up(self, order: Order) -> Result[OrderNotification, CheckoutError]:
        """Write the ``new_order`` notification that tells staff to call back."""
        return await from_result_async(
            lambda: self._write_notification(order),
            on_error=lambda e: CheckoutErrors.notification_write(str(e), order.id),
        )

    def check(
        self,
        draft: OrderDraft,
        validation: AddressValidationResult | None,
    ) -> Result[None, CheckoutError]:
        """Preconditions of an order write; no side effects."""
        missing = draft.missing_fields()
        if missing:
            return Error(CheckoutErrors.input(f"Missing required fields: {', '.join(missing)}."))
        if draft.quantity < 1:
            return Error(CheckoutErrors.input("Quantity must be at least 1."))
        if validation is None or not is_deliverable(validation):
            return Error(CheckoutErrors.zone("The delivery address has not been validated."))
        if validation.address != draft.delivery_address.strip():
            return Error(CheckoutErrors.zone("The delivery address changed since it was validated."))
        return Ok(None)

    async def run[T](self, saga: S.SagaExpr[T, CheckoutError]) -> Result[T, CheckoutError]:
        """Run a saga built from this coordinator's steps, unwrapping metadata."""
        result = await S.run(saga)
        match result:
            case Ok(done):
                return Ok(done.value)
            case Error(failure):
                if failure.compensators_failed:
                    logger.error(
                        "Reconciliation record could not be written",
                        step=failure.failed_step,
                    )
                return Error(failure.error)

        raise AssertionError("unreachable")

    # ─────────────────────────────────────────────────────────────────────────
    # Saga building blocks
    # ─────────────────────────────────────────────────────────────────────────

    def order_saga(
        self,
        draft: OrderDraft,
        product: Product,
        total: Decimal,
        status: OrderStatus,
    ) -> S.Then[Order, Order, CheckoutError, CheckoutError]:
        """
        ``order → item``, yielding the Order.

        Extend with ``.then`` for steps that need the order id. Does not
        check preconditions; call ``check`` first.
        """
        record = self._record(draft, product, total, status)

        def item_step(order: Order) -> S.SagaStep[Order, CheckoutError]:
            item = OrderItem(
                order_id=order.id,
                product_id=product.id,
                product_name=product.name,
                quantity=draft.quantity,
                price=product.price,
            )
            return self._item_step(order, item)

        return self._order_step(record).then(item_step)

    def notification_step(self, order: Order) -> S.SagaStep[Order, CheckoutError]:
        """``flag_for_follow_up`` as a saga step that yields the order again."""

        async def write() -> Result[Order, CheckoutError]:
            match await self.flag_for_follow_up(order):
                case Ok(_):
                    return Ok(order)
                case Error(e):
                    return Error(e)
            raise AssertionError("unreachable")

        return S.from_result(
            write,
            on_error=lambda e: CheckoutErrors.notification_write(str(e), order.id),
            name=NOTIFICATION_STEP,
        )

    # ─────────────────────────────────────────────────────────────────────────
    # Internals
    # ─────────────────────────────────────────────────────────────────────────

    async def _write_notification(self, order: Order) -> Result[OrderNotification, CheckoutError]:
        match await self._store.insert_notification(OrderNotification(order_id=order.id)):
            case Ok(notification):
                logger.info("Staff notification created", order_id=order.id)
                return Ok(notification)
            case Error(e):
                logger.error("Notification write failed", order_id=order.id, error=e.message)
                return Error(CheckoutErrors.notification_write(
                    f"Order {order.order_number} was saved but the shop was not notified: {e.message}",
                    order.id,
                ))
        raise AssertionError("unreachable")

    def _order_step(self, record: OrderRecord) -> S.SagaStep[Order, CheckoutError]:
        async def write() -> Result[Order, CheckoutError]:
            match await self._store.insert_order(record):
                case Ok(order):
                    logger.info(
                        "Order created",
                        order_id=order.id,
                        order_number=order.order_number,
                        status=order.status.value,
                        total=str(order.total_amount),
                    )
                    return Ok(order)
                case Error(e):
                    logger.error("Order write failed", order_number=record.order_number, error=e.message)
                    return Error(CheckoutErrors.order_write(f"Could not save the order: {e.message}"))
            raise AssertionError("unreachable")

        return S.from_result(
            write,
            on_error=lambda e: CheckoutErrors.order_write(f"Could not save the order: {e}"),
            compensate=self._record_orphan,
            name=ORDER_STEP,
        )

    def _item_step(self, order: Order, item: OrderItem) -> S.SagaStep[Order, CheckoutError]:
        async def write() -> Result[Order, CheckoutError]:
            match await self._store.insert_item(item):
                case Ok(_):
                    return Ok(order)
                case Error(e):
                    return Error(CheckoutErrors.item_write(
                        f"Order {order.order_number} was saved without its items: {e.message}",
                        order.id,
                    ))
            raise AssertionError("unreachable")

        return S.from_result(
            write,
            on_error=lambda e: CheckoutErrors.item_write(str(e), order.id),
            name=ITEM_STEP,
        )

    async def _record_orphan(self, order: Order, failure: S.StepFailure[CheckoutError]) -> None:
        """Order step compensator: no rollback, write the order down instead."""
        if failure.step not in AGGREGATE_STEPS:
            return
        await self._ledger.record(OrphanedOrder(
            order_id=order.id,
            order_number=order.order_number,
            failed_step=failure.step,
            message=failure.error.message,
            recorded_at=datetime.now(UTC),
        ))

    def _record(
        self,
        draft: OrderDraft,
        product: Product,
        total: Decimal,
        status: OrderStatus,
    ) -> OrderRecord:
        address = PostalAddress(street=draft.delivery_address, country=self._country)
        return OrderRecord(
            order_number=self._order_number(),
            customer_name=draft.customer_name,
            customer_email=draft.customer_email,
            customer_phone=draft.customer_phone or None,
            total_amount=total,
            status=status,
            payment_status=PaymentStatus.PENDING,
            billing_address=address,
            shipping_address=address,
            notes=order_notes(product, draft),
        )


__all__ = (
    "OrderCoordinator",
    "order_notes",
    "ORDER_STEP",
    "ITEM_STEP",
    "NOTIFICATION_STEP",
)
