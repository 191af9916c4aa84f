"""
Notices — the user-facing notification channel.

Every terminal outcome of the ordering flow (manual address validation,
submission result) is published as a Notice: a short title plus a longer
description, optionally marked destructive.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from fiori.log import get_logger

logger = get_logger(__name__)


class Variant(Enum):
    DEFAULT = "default"
    DESTRUCTIVE = "destructive"


@dataclass(frozen=True, slots=True)
class Notice:
    title: str
    description: str
    variant: Variant = Variant.DEFAULT

    @property
    def is_error(self) -> bool:
        return self.variant is Variant.DESTRUCTIVE


class Notifier(Protocol):
    """Anything that can show a Notice to the user."""

    def notify(self, notice: Notice) -> None: ...


@dataclass(slots=True)
class MemoryNotifier:
    """Keeps every notice; used by tests and headless runs."""

    notices: list[Notice] = field(default_factory=list)

    def notify(self, notice: Notice) -> None:
        self.notices.append(notice)

    @property
    def last(self) -> Notice | None:
        return self.notices[-1] if self.notices else None

    def errors(self) -> list[Notice]:
        return [n for n in self.notices if n.is_error]


class LogNotifier:
    """Writes notices to the structured log."""

    def notify(self, notice: Notice) -> None:
        log = logger.warning if notice.is_error else logger.info
        log("Notice", title=notice.title, description=notice.description)


# ═══════════════════════════════════════════════════════════════════════════════
# Catalogue of notices published by the ordering flow
# ═══════════════════════════════════════════════════════════════════════════════


def error(title: str, description: str) -> Notice:
    return Notice(title, description, Variant.DESTRUCTIVE)


def info(title: str, description: str) -> Notice:
    return Notice(title, description)


ADDRESS_REQUIRED = error(
    "Address required",
    "Enter a delivery address to continue.",
)
ADDRESS_VALIDATION_FAILED = error(
    "Validation error",
    "Unable to validate the address. Please try again.",
)
UNDELIVERABLE_DEFAULT = "We cannot deliver to this address."


def address_validated(estimated_time: str | None) -> Notice:
    when = estimated_time or "time to be confirmed"
    return info("Address validated", f"Delivery available - {when}")


def address_undeliverable(message: str | None) -> Notice:
    return error("Delivery not available", message or UNDELIVERABLE_DEFAULT)


def payment_succeeded() -> Notice:
    return info("Order completed", "Your payment was processed successfully.")


def payment_failed(message: str) -> Notice:
    return error("Payment error", message)


def order_received(order_number: str) -> Notice:
    return info(
        "Order sent",
        f"Your order #{order_number} has been received. "
        "We will contact you shortly to confirm the details.",
    )


def order_failed(message: str | None) -> Notice:
    return error(
        "Order could not be sent",
        message or "Please try again or contact us directly.",
    )


__all__ = (
    "Variant",
    "Notice",
    "Notifier",
    "MemoryNotifier",
    "LogNotifier",
    "ADDRESS_REQUIRED",
    "ADDRESS_VALIDATION_FAILED",
    "address_validated",
    "address_undeliverable",
    "payment_succeeded",
    "payment_failed",
    "order_received",
    "order_failed",
)
