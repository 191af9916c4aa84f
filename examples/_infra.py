"""Shared infrastructure for examples."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Coroutine
from decimal import Decimal

from fiori.address import ZoneVerdict
from fiori.order import Product

# Catalogue
ROSES = Product(
    id="prod-roses",
    name="Red Roses Bouquet",
    price=Decimal("29.90"),
    description="Twelve long-stem red roses",
    image_url="https://cdn.example.com/roses.jpg",
)


# Fake zone service: Milan addresses are in zone
async def milan_only(address: str, order_value: Decimal) -> ZoneVerdict:
    await asyncio.sleep(0.05)
    if "milano" not in address.lower():
        return ZoneVerdict(
            is_valid=True,
            is_within_zone=False,
            error="We only deliver within Milan.",
        )
    fee = Decimal("0") if order_value >= Decimal("50") else Decimal("5.00")
    return ZoneVerdict(
        is_valid=True,
        is_within_zone=True,
        estimated_time="2-3 hours",
        delivery_fee=fee,
    )


# Helpers
def banner(title: str) -> None:
    print(f"\n{'─' * 50}\n{title}\n{'─' * 50}")


def run(main: Callable[[], Coroutine[object, object, None]]) -> None:
    asyncio.run(main())
