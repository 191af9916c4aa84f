"""Shared fixtures: in-memory collaborators and a fast-debounce configuration."""

import asyncio
from decimal import Decimal

import pytest
import pytest_asyncio

from fiori.address import ZoneVerdict
from fiori.config import Settings
from fiori.notices import MemoryNotifier
from fiori.order import MemoryLedger, MemoryStore, OrderCoordinator, OrderDraft, Product
from fiori.payment import FakeGateway, PaymentPathController
from fiori.session import OrderingSession

DEBOUNCE = 0.05

IN_ZONE = ZoneVerdict(
    is_valid=True,
    is_within_zone=True,
    estimated_time="2-3 hours",
    delivery_fee=Decimal("5.00"),
)
OUT_OF_ZONE = ZoneVerdict(
    is_valid=True,
    is_within_zone=False,
    error="Address is outside the delivery zone",
)


class ScriptedZone:
    """
    Zone validator answering from a script.

    Unknown addresses get ``default``. Per-address latency and failures
    make out-of-order and failing calls reproducible.
    """

    def __init__(self, default: ZoneVerdict = IN_ZONE) -> None:
        self.default = default
        self.verdicts: dict[str, ZoneVerdict] = {}
        self.delays: dict[str, float] = {}
        self.failures: dict[str, Exception] = {}
        self.calls: list[tuple[str, Decimal]] = []

    async def validate_delivery_address(self, address: str, order_value: Decimal) -> ZoneVerdict:
        self.calls.append((address, order_value))
        delay = self.delays.get(address, 0.0)
        if delay:
            await asyncio.sleep(delay)
        if address in self.failures:
            raise self.failures[address]
        return self.verdicts.get(address, self.default)

    @property
    def addresses(self) -> list[str]:
        return [address for address, _ in self.calls]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        debounce_seconds=DEBOUNCE,
        validation_timeout_seconds=1.0,
        min_address_length=10,
    )


@pytest.fixture
def product() -> Product:
    return Product(
        id="prod-roses",
        name="Red Roses Bouquet",
        price=Decimal("29.90"),
        description="Twelve long-stem red roses",
        image_url="https://cdn.example.com/roses.jpg",
    )


@pytest.fixture
def zone() -> ScriptedZone:
    return ScriptedZone()


@pytest.fixture
def notifier() -> MemoryNotifier:
    return MemoryNotifier()


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def ledger() -> MemoryLedger:
    return MemoryLedger()


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def coordinator(store, ledger, settings) -> OrderCoordinator:
    return OrderCoordinator(store, ledger=ledger, settings=settings)


@pytest.fixture
def controller(coordinator, gateway, notifier) -> PaymentPathController:
    return PaymentPathController(coordinator, gateway, notifier)


@pytest_asyncio.fixture
async def session(product, zone, controller, notifier, settings):
    session = OrderingSession.open(
        product,
        zone=zone,
        controller=controller,
        notifier=notifier,
        settings=settings,
    )
    yield session
    session.close()


@pytest.fixture
def complete_draft() -> OrderDraft:
    return OrderDraft(
        customer_name="Giulia Bianchi",
        customer_email="giulia@example.com",
        customer_phone="+39 333 1234567",
        quantity=2,
        special_requests="No lilies",
        delivery_date="2026-11-02",
        delivery_address="Via Roma 1, Milano",
    )


async def _fill(session: OrderingSession, address: str = "Via Roma 1, Milano") -> None:
    session.set_customer_name("Giulia Bianchi")
    session.set_customer_email("giulia@example.com")
    session.set_customer_phone("+39 333 1234567")
    session.set_delivery_address(address)
    await session.validate_address()


@pytest.fixture
def fill():
    """Complete the form and validate the address manually."""
    return _fill
