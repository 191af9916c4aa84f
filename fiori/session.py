"""
OrderingSession — one customer ordering one product.

Owns the draft and the address validator for as long as the ordering form
is open, and hands itself to the payment controller on submission.

    session = OrderingSession.open(product, zone=zone, controller=controller, notifier=n)
    session.set_customer_name("Giulia")
    session.set_customer_email("giulia@example.com")
    session.set_delivery_address("Via Roma 1, Milano")
    await session.validate_address()
    session.quote.total
    await session.pay_later()
"""

from __future__ import annotations

from kungfu import Result, Ok, Error

from fiori import pricing
from fiori.address import AddressValidationResult, AddressValidator, ZoneValidator
from fiori.config import Settings, get_settings
from fiori.log import get_logger
from fiori.notices import Notifier
from fiori.order import CheckoutError, CheckoutErrors, Order, OrderDraft, Product
from fiori.payment import Gate, PaymentPathController, PaymentReceipt
from fiori.pricing import PriceQuote

logger = get_logger(__name__)

SESSION_CLOSED = "The ordering form is closed."


class OrderingSession:
    """
    Exclusive owner of one OrderDraft.

    Edits after ``close`` are ignored. ``close`` cancels the pending
    debounced validation and discards the draft; closing twice is harmless.
    """

    def __init__(
        self,
        product: Product,
        zone: ZoneValidator,
        controller: PaymentPathController,
        notifier: Notifier,
        settings: Settings | None = None,
    ) -> None:
        settings = settings or get_settings()
        self._product = product
        self._controller = controller
        self._draft = OrderDraft()
        self._validator = AddressValidator(
            zone,
            order_value=lambda: pricing.subtotal(self._product.price, self._draft.quantity),
            notifier=notifier,
            settings=settings,
        )
        self._open = True
        logger.debug("Ordering session opened", product_id=product.id)

    @classmethod
    def open(
        cls,
        product: Product,
        *,
        zone: ZoneValidator,
        controller: PaymentPathController,
        notifier: Notifier,
        settings: Settings | None = None,
    ) -> OrderingSession:
        return cls(product, zone, controller, notifier, settings)

    # ─────────────────────────────────────────────────────────────────────────
    # State
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def product(self) -> Product:
        return self._product

    @property
    def draft(self) -> OrderDraft:
        return self._draft

    @property
    def validator(self) -> AddressValidator:
        return self._validator

    @property
    def validation(self) -> AddressValidationResult | None:
        return self._validator.current

    @property
    def quote(self) -> PriceQuote:
        """Recomputed on every access from the current quantity and validation."""
        return pricing.quote(self._product.price, self._draft.quantity, self.validation)

    @property
    def gate(self) -> Gate:
        return self._controller.gate(self)

    @property
    def is_open(self) -> bool:
        return self._open

    @property
    def is_validating(self) -> bool:
        return self._validator.is_validating

    @property
    def is_submitting(self) -> bool:
        return self._controller.submitting

    @property
    def can_pay_now(self) -> bool:
        return self._open and self._controller.can_pay_now(self)

    @property
    def can_pay_later(self) -> bool:
        return self._open and self._controller.can_pay_later(self)

    # ─────────────────────────────────────────────────────────────────────────
    # Input
    # ─────────────────────────────────────────────────────────────────────────

    def set_customer_name(self, value: str) -> None:
        self._edit(customer_name=value)

    def set_customer_email(self, value: str) -> None:
        self._edit(customer_email=value)

    def set_customer_phone(self, value: str) -> None:
        self._edit(customer_phone=value)

    def set_special_requests(self, value: str) -> None:
        self._edit(special_requests=value)

    def set_delivery_date(self, value: str) -> None:
        self._edit(delivery_date=value)

    def set_delivery_address(self, value: str) -> None:
        if not self._open:
            return
        self._draft = self._draft.with_field(delivery_address=value)
        self._validator.on_address_changed(value)

    def increment_quantity(self) -> None:
        if self._open:
            self._draft = self._draft.incremented()

    def decrement_quantity(self) -> None:
        if self._open:
            self._draft = self._draft.decremented()

    def set_quantity(self, quantity: int) -> Result[OrderDraft, CheckoutError]:
        if not self._open:
            return Error(CheckoutErrors.input(SESSION_CLOSED))
        match self._draft.with_quantity(quantity):
            case Ok(draft):
                self._draft = draft
                return Ok(draft)
            case Error(e):
                return Error(e)
        raise AssertionError("unreachable")

    # ─────────────────────────────────────────────────────────────────────────
    # Actions
    # ─────────────────────────────────────────────────────────────────────────

    async def validate_address(self) -> bool:
        """Manual "validate" button: immediate call, always followed by a notice."""
        if not self._open:
            return False
        return await self._validator.validate_now()

    async def pay_now(self) -> Result[PaymentReceipt, CheckoutError]:
        if not self._open:
            return Error(CheckoutErrors.gate(SESSION_CLOSED))
        return await self._controller.pay_now(self)

    async def pay_later(self) -> Result[Order, CheckoutError]:
        if not self._open:
            return Error(CheckoutErrors.gate(SESSION_CLOSED))
        return await self._controller.pay_later(self)

    def complete(self) -> None:
        """Successful submission: clear the draft and close."""
        self._draft = OrderDraft()
        self.close()

    def close(self) -> None:
        if not self._open:
            return
        self._open = False
        self._validator.close()
        self._draft = OrderDraft()
        logger.debug("Ordering session closed", product_id=self._product.id)

    # ─────────────────────────────────────────────────────────────────────────
    # Internals
    # ─────────────────────────────────────────────────────────────────────────

    def _edit(self, **changes: str) -> None:
        if self._open:
            self._draft = self._draft.with_field(**changes)


__all__ = ("OrderingSession", "SESSION_CLOSED")
