"""
fiori — delivery validation and order/payment coordination for a flower shop.

    from fiori import address as A   # Debounced delivery-zone validation
    from fiori import order as O     # Order aggregate, stores, coordinator
    from fiori import payment as P   # Pay now / pay later
    from fiori import saga as S      # Sequential steps with compensation
"""

from fiori import saga
from fiori import lift
from fiori import address
from fiori import pricing
from fiori import notices
from fiori import order
from fiori import payment
from fiori.config import Settings, get_settings
from fiori.log import configure_logging, get_logger
from fiori.session import OrderingSession
from fiori._types import (
    Lazy,
    Pure,
    LCR,
    to_money,
)

__version__ = "0.1.0"

__all__ = (
    "saga",
    "lift",
    "address",
    "pricing",
    "notices",
    "order",
    "payment",
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    "OrderingSession",
    "Lazy",
    "Pure",
    "LCR",
    "to_money",
)
