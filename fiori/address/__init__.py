"""
Address — debounced delivery-zone validation.

    from fiori import address as A

    validator = A.AddressValidator(zone, order_value=lambda: subtotal, notifier=n)
    validator.on_address_changed("Via Roma 1, Milano")   # debounced, silent
    await validator.validate_now()                       # immediate, notifies
"""

from fiori.address._types import (
    ZoneVerdict,
    AddressValidationResult,
    is_deliverable,
    ZoneValidator,
    FunctionalZoneValidator,
    zone_validator_from,
)
from fiori.address._debounce import Debouncer, DebouncerClosed
from fiori.address._validator import (
    AddressValidator,
    VALIDATION_FAILED_MESSAGE,
)

__all__ = (
    "ZoneVerdict",
    "AddressValidationResult",
    "is_deliverable",
    "ZoneValidator",
    "FunctionalZoneValidator",
    "zone_validator_from",
    "Debouncer",
    "DebouncerClosed",
    "AddressValidator",
    "VALIDATION_FAILED_MESSAGE",
)
