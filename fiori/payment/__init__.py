"""
Payment — the two submission paths of an ordering session.

    from fiori import payment as P

    controller = P.PaymentPathController(coordinator, P.FakeGateway(), notifier)

    if controller.can_pay_now(session):
        await controller.pay_now(session)     # order, then card charge
    else:
        print(controller.gate(session).guidance)

    await controller.pay_later(session)       # order, then staff notification
"""

from fiori.payment._types import (
    CheckoutItem,
    CustomerInfo,
    PaymentReceipt,
    PaymentGateway,
    Gate,
    CheckoutSession,
)
from fiori.payment._fake import FakeGateway, ChargeCall
from fiori.payment._controller import (
    PaymentPathController,
    evaluate_gate,
    CHARGE_STEP,
)

__all__ = (
    "CheckoutItem",
    "CustomerInfo",
    "PaymentReceipt",
    "PaymentGateway",
    "Gate",
    "CheckoutSession",
    "FakeGateway",
    "ChargeCall",
    "PaymentPathController",
    "evaluate_gate",
    "CHARGE_STEP",
)
