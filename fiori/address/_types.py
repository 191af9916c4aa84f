"""
Address validation types.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Protocol

from fiori._types import ZERO, to_money

# ═══════════════════════════════════════════════════════════════════════════════
# ZoneVerdict — Collaborator Answer
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class ZoneVerdict:
    """
    Raw answer of the zone-validation service.

    Note: delivery_fee is only meaningful when the address is valid and
    within the zone.
    """

    is_valid: bool
    is_within_zone: bool
    error: str | None = None
    estimated_time: str | None = None
    delivery_fee: Decimal = ZERO

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> ZoneVerdict:
        """
        Parse the service payload.

            {"isValid": true, "isWithinZone": true,
             "estimatedTime": "2-3 hours", "deliveryFee": 5.0}

        A missing, malformed or negative fee counts as zero.
        """
        return cls(
            is_valid=bool(payload.get("isValid", False)),
            is_within_zone=bool(payload.get("isWithinZone", False)),
            error=payload.get("error") or None,
            estimated_time=payload.get("estimatedTime") or None,
            delivery_fee=_fee(payload.get("deliveryFee")),
        )


def _fee(raw: object) -> Decimal:
    if raw is None or isinstance(raw, bool):
        return ZERO
    try:
        fee = to_money(raw)  # type: ignore[arg-type]
    except (InvalidOperation, TypeError, ValueError):
        return ZERO
    return fee if fee > ZERO else ZERO


# ═══════════════════════════════════════════════════════════════════════════════
# AddressValidationResult — Stored Verdict
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class AddressValidationResult:
    """
    Verdict for one address, tagged with what produced it.

    ``address`` and ``sequence`` identify the validation call; a result
    whose tag is not the latest issued one is stale and never stored.
    Replaced as a whole, never updated in place.
    """

    address: str
    sequence: int
    is_valid: bool
    is_within_zone: bool
    error: str | None = None
    estimated_time: str | None = None
    delivery_fee: Decimal = ZERO

    @property
    def deliverable(self) -> bool:
        return self.is_valid and self.is_within_zone

    @property
    def applicable_fee(self) -> Decimal:
        """Fee to charge: zero unless the address is deliverable."""
        return self.delivery_fee if self.deliverable else ZERO

    @classmethod
    def from_verdict(
        cls, address: str, sequence: int, verdict: ZoneVerdict
    ) -> AddressValidationResult:
        return cls(
            address=address,
            sequence=sequence,
            is_valid=verdict.is_valid,
            is_within_zone=verdict.is_within_zone,
            error=verdict.error,
            estimated_time=verdict.estimated_time,
            delivery_fee=verdict.delivery_fee,
        )

    @classmethod
    def failed(cls, address: str, sequence: int, message: str) -> AddressValidationResult:
        """Invalid verdict for a call that could not complete."""
        return cls(
            address=address,
            sequence=sequence,
            is_valid=False,
            is_within_zone=False,
            error=message,
        )


def is_deliverable(result: AddressValidationResult | None) -> bool:
    """True only for a present, valid, in-zone result."""
    return result is not None and result.deliverable


# ═══════════════════════════════════════════════════════════════════════════════
# ZoneValidator — External Collaborator Protocol
# ═══════════════════════════════════════════════════════════════════════════════


class ZoneValidator(Protocol):
    """
    Zone-validation service.

    May be slow and may raise; no retry is performed by the validator.
    ``order_value`` is the pre-fee subtotal (free-delivery thresholds).
    """

    async def validate_delivery_address(
        self, address: str, order_value: Decimal
    ) -> ZoneVerdict: ...


type ValidateFn = Callable[[str, Decimal], Awaitable[ZoneVerdict | Mapping[str, Any]]]


@dataclass(frozen=True, slots=True)
class FunctionalZoneValidator:
    """
    ZoneValidator built from a function.

    The function may return a ZoneVerdict or the raw payload mapping.
    """

    _validate: ValidateFn

    async def validate_delivery_address(
        self, address: str, order_value: Decimal
    ) -> ZoneVerdict:
        answer = await self._validate(address, order_value)
        if isinstance(answer, ZoneVerdict):
            return answer
        return ZoneVerdict.from_payload(answer)


def zone_validator_from(validate: ValidateFn) -> FunctionalZoneValidator:
    """
    Create ZoneValidator from an async function.

    Example:
        validator = zone_validator_from(
            lambda address, value: http.post_json("/zones/validate", ...)
        )
    """
    return FunctionalZoneValidator(_validate=validate)


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "ZoneVerdict",
    "AddressValidationResult",
    "is_deliverable",
    "ZoneValidator",
    "FunctionalZoneValidator",
    "zone_validator_from",
)
