"""
Partial failure — an order whose line item could not be written.

The order row stays; the coordinator records it for reconciliation and
reports ITEM_WRITE with the order id.
"""

from decimal import Decimal

from kungfu import Ok, Error

from fiori import order as O
from fiori.address import AddressValidationResult
from examples._infra import ROSES, banner, run


async def main() -> None:
    banner("Order written, item lost")

    memory = O.MemoryStore()

    async def broken_items(item: O.OrderItem):
        print(f"  ✗ Insert item for {item.order_id}")
        return Error(O.StoreError("order_items unavailable"))

    ledger = O.MemoryLedger()
    coordinator = O.OrderCoordinator(
        O.store_from(memory.insert_order, broken_items, memory.insert_notification),
        ledger=ledger,
    )

    draft = O.OrderDraft(
        customer_name="Giulia Bianchi",
        customer_email="giulia@example.com",
        delivery_address="Via Roma 1, Milano",
    )
    validation = AddressValidationResult(
        address="Via Roma 1, Milano", sequence=1, is_valid=True, is_within_zone=True
    )

    match await coordinator.create_order(draft, ROSES, Decimal("29.90"), validation):
        case Ok(order):
            print(f"\n✓ Created: {order.order_number}")
        case Error(e):
            print(f"\n✗ {e.kind.name}: {e.message}")
            print(f"  Partial: {e.is_partial}, order id: {e.order_id}")

    for orphan in ledger.orphans:
        print(f"  ⚑ Reconcile {orphan.order_number} (failed at {orphan.failed_step})")


if __name__ == "__main__":
    run(main)
