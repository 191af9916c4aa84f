"""Configurable fake payment gateway for development and testing."""

from __future__ import annotations

import asyncio
import uuid
from dataclasses import dataclass

from kungfu import Result, Ok, Error

from fiori.payment._types import CheckoutItem, CustomerInfo, PaymentReceipt


@dataclass(frozen=True, slots=True)
class ChargeCall:
    order_id: str
    items: list[CheckoutItem]
    customer: CustomerInfo


class FakeGateway:
    """
    Gateway that never leaves the process.

    Succeeds by default; ``configure`` switches it to failing with a given
    reason. Every charge is kept in ``calls``.
    """

    def __init__(self, latency: float = 0.0) -> None:
        self.should_succeed = True
        self.failure_reason = "Card declined"
        self.latency = latency
        self.calls: list[ChargeCall] = []

    def configure(self, should_succeed: bool, failure_reason: str = "Card declined") -> None:
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    async def charge(
        self,
        order_id: str,
        items: list[CheckoutItem],
        customer: CustomerInfo,
    ) -> Result[PaymentReceipt, str]:
        self.calls.append(ChargeCall(order_id, list(items), customer))
        if self.latency:
            await asyncio.sleep(self.latency)

        if self.should_succeed:
            return Ok(PaymentReceipt(
                order_id=order_id,
                transaction_id=f"fake_txn_{uuid.uuid4().hex[:12]}",
                provider="fake",
            ))
        return Error(self.failure_reason)


__all__ = ("FakeGateway", "ChargeCall")
