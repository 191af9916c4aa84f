"""
Reconciliation ledger — where orphaned orders are written down.

An order row whose line item (or staff notification) could not be written
is not rolled back: the writes live in an external store outside any
shared transaction. It is recorded here for an operator instead.
"""

from __future__ import annotations

from typing import Protocol

from fiori.log import get_logger
from fiori.order._types import OrphanedOrder

logger = get_logger(__name__)


class ReconciliationLedger(Protocol):
    async def record(self, orphan: OrphanedOrder) -> None: ...


class LogLedger:
    """Logs every orphan at error level; the default ledger."""

    async def record(self, orphan: OrphanedOrder) -> None:
        logger.error(
            "Orphaned order needs reconciliation",
            order_id=orphan.order_id,
            order_number=orphan.order_number,
            failed_step=orphan.failed_step,
            reason=orphan.message,
        )


class MemoryLedger(LogLedger):
    """Logs and keeps orphans in memory."""

    def __init__(self) -> None:
        self.orphans: list[OrphanedOrder] = []

    async def record(self, orphan: OrphanedOrder) -> None:
        await super().record(orphan)
        self.orphans.append(orphan)


__all__ = ("ReconciliationLedger", "LogLedger", "MemoryLedger")
