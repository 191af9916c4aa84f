"""
PaymentPathController — pay now or pay later.

    pay_now:   order (payment_pending) ──▶ item ──▶ charge
    pay_later: order (pending)         ──▶ item ──▶ notification

Both branches are gated on a complete draft and a deliverable address,
and only one submission runs at a time.
"""

from __future__ import annotations

from kungfu import Result, Ok, Error

from fiori import notices
from fiori import saga as S
from fiori.address import AddressValidationResult, is_deliverable
from fiori.log import get_logger
from fiori.notices import Notifier
from fiori.order import (
    CheckoutError,
    CheckoutErrors,
    Order,
    OrderCoordinator,
    OrderDraft,
    OrderStatus,
)
from fiori.payment._types import (
    CheckoutItem,
    CheckoutSession,
    CustomerInfo,
    Gate,
    PaymentGateway,
    PaymentReceipt,
)

logger = get_logger(__name__)

CHARGE_STEP = "charge"


def evaluate_gate(draft: OrderDraft, validation: AddressValidationResult | None) -> Gate:
    """Which precondition, if any, blocks payment."""
    if not draft.is_complete:
        return Gate.MISSING_FIELDS
    if not is_deliverable(validation):
        return Gate.ADDRESS_UNVALIDATED
    return Gate.READY


class PaymentPathController:
    def __init__(
        self,
        coordinator: OrderCoordinator,
        gateway: PaymentGateway,
        notifier: Notifier,
    ) -> None:
        self._coordinator = coordinator
        self._gateway = gateway
        self._notifier = notifier
        self._submitting = False

    # ─────────────────────────────────────────────────────────────────────────
    # Gate
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def submitting(self) -> bool:
        return self._submitting

    def gate(self, session: CheckoutSession) -> Gate:
        return evaluate_gate(session.draft, session.validation)

    def can_pay_now(self, session: CheckoutSession) -> bool:
        return not self._submitting and self.gate(session) is Gate.READY

    def can_pay_later(self, session: CheckoutSession) -> bool:
        return not self._submitting and self.gate(session) is Gate.READY

    # ─────────────────────────────────────────────────────────────────────────
    # Branches
    # ─────────────────────────────────────────────────────────────────────────

    async def pay_now(self, session: CheckoutSession) -> Result[PaymentReceipt, CheckoutError]:
        """
        Write the order, then hand its id to the gateway.

        On a gateway error the draft is kept and the gateway message is
        shown verbatim. The order row written for this attempt stays in
        ``payment_pending``.
        """
        match self._admit(session):
            case Error(e):
                return Error(e)

        self._submitting = True
        try:
            draft, product = session.draft, session.product
            items = [CheckoutItem.of(product, draft.quantity)]
            customer = CustomerInfo.of(draft)

            saga = self._coordinator.order_saga(
                draft, product, session.quote.total, OrderStatus.PAYMENT_PENDING
            ).then(lambda order: self._charge_step(order, items, customer))

            result = await self._coordinator.run(saga)
        finally:
            self._submitting = False

        match result:
            case Ok(receipt):
                logger.info(
                    "Payment completed",
                    order_id=receipt.order_id,
                    transaction_id=receipt.transaction_id,
                )
                self._notifier.notify(notices.payment_succeeded())
                session.complete()
            case Error(e):
                logger.warning("Pay-now failed", kind=e.kind.name, order_id=e.order_id, error=e.message)
                self._notifier.notify(notices.payment_failed(e.message))
        return result

    async def pay_later(self, session: CheckoutSession) -> Result[Order, CheckoutError]:
        """Write the order and flag it for a call back."""
        match self._admit(session):
            case Error(e):
                return Error(e)

        self._submitting = True
        try:
            saga = self._coordinator.order_saga(
                session.draft, session.product, session.quote.total, OrderStatus.PENDING
            ).then(self._coordinator.notification_step)
            result = await self._coordinator.run(saga)
        finally:
            self._submitting = False

        match result:
            case Ok(order):
                self._notifier.notify(notices.order_received(order.order_number))
                session.complete()
            case Error(e):
                logger.warning("Pay-later failed", kind=e.kind.name, order_id=e.order_id, error=e.message)
                self._notifier.notify(notices.order_failed(e.message))
        return result

    # ─────────────────────────────────────────────────────────────────────────
    # Internals
    # ─────────────────────────────────────────────────────────────────────────

    def _admit(self, session: CheckoutSession) -> Result[None, CheckoutError]:
        if self._submitting:
            logger.info("Submission rejected, already in progress")
            return Error(CheckoutErrors.in_progress())

        gate = self.gate(session)
        if gate is not Gate.READY:
            return Error(CheckoutErrors.gate(gate.guidance))

        return self._coordinator.check(session.draft, session.validation)

    def _charge_step(
        self,
        order: Order,
        items: list[CheckoutItem],
        customer: CustomerInfo,
    ) -> S.SagaStep[PaymentReceipt, CheckoutError]:
        async def charge() -> Result[PaymentReceipt, CheckoutError]:
            match await self._gateway.charge(order.id, items, customer):
                case Ok(receipt):
                    return Ok(receipt)
                case Error(message):
                    return Error(CheckoutErrors.gateway(message, order.id))
            raise AssertionError("unreachable")

        return S.from_result(
            charge,
            on_error=lambda e: CheckoutErrors.gateway(str(e) or "Payment failed.", order.id),
            name=CHARGE_STEP,
        )



__all__ = (
    "PaymentPathController",
    "evaluate_gate",
    "CHARGE_STEP",
)
