"""
Checkout — one ordering session end to end, persisted with SQLAlchemy.

Level 5: fiori.session / fiori.payment
Level 4: fiori.order (saga over SQLAlchemyStore)
Level 2: kungfu.Result
"""

from kungfu import Ok, Error

from fiori import configure_logging, Settings
from fiori import order as O
from fiori import payment as P
from fiori.address import zone_validator_from
from fiori.notices import LogNotifier
from fiori.session import OrderingSession
from examples._infra import ROSES, banner, milan_only, run


async def main() -> None:
    settings = Settings(debounce_seconds=0.2)
    configure_logging(settings)

    session_factory, engine = await O.create_database(settings.database_url)
    store = O.SQLAlchemyStore(session_factory)
    coordinator = O.OrderCoordinator(store, ledger=store, settings=settings)
    gateway = P.FakeGateway()
    notifier = LogNotifier()
    controller = P.PaymentPathController(coordinator, gateway, notifier)
    zone = zone_validator_from(milan_only)

    def open_session() -> OrderingSession:
        return OrderingSession.open(
            ROSES, zone=zone, controller=controller, notifier=notifier, settings=settings
        )

    banner("Pay later")
    session = open_session()
    session.set_customer_name("Giulia Bianchi")
    session.set_customer_email("giulia@example.com")
    for prefix in ("Via Roma", "Via Roma 1", "Via Roma 1, Milano"):
        session.set_delivery_address(prefix)
    await session.validator.settle()

    print(f"Gate: {session.gate.name}  total: {session.quote.total}")

    match await session.pay_later():
        case Ok(order):
            print(f"✓ Order {order.order_number} ({order.status.value})")
        case Error(e):
            print(f"✗ {e.kind.name}: {e.message}")

    banner("Pay now, card declined")
    gateway.configure(should_succeed=False, failure_reason="Your card was declined.")
    session = open_session()
    session.set_customer_name("Marco Rossi")
    session.set_customer_email("marco@example.com")
    session.set_delivery_address("Corso Buenos Aires 10, Milano")
    session.increment_quantity()
    await session.validate_address()

    match await session.pay_now():
        case Ok(receipt):
            print(f"✓ Paid: {receipt.transaction_id}")
        case Error(e):
            print(f"✗ {e.kind.name}: {e.message} (order {e.order_id} kept, draft kept: {session.is_open})")

    banner("Pay now, retry")
    gateway.configure(should_succeed=True)

    match await session.pay_now():
        case Ok(receipt):
            print(f"✓ Paid: {receipt.transaction_id} for order {receipt.order_id}")
        case Error(e):
            print(f"✗ {e.kind.name}: {e.message}")

    session.close()
    await engine.dispose()


if __name__ == "__main__":
    run(main)
