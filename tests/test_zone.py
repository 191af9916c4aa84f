"""Tests for zone-service payload parsing and function adapters."""

from decimal import Decimal

import pytest

from fiori.address import ZoneVerdict, zone_validator_from


class TestZoneVerdict:
    def test_full_payload(self):
        verdict = ZoneVerdict.from_payload({
            "isValid": True,
            "isWithinZone": True,
            "estimatedTime": "2-3 hours",
            "deliveryFee": 5.0,
        })

        assert verdict == ZoneVerdict(
            is_valid=True,
            is_within_zone=True,
            estimated_time="2-3 hours",
            delivery_fee=Decimal("5.00"),
        )

    def test_empty_payload_is_invalid(self):
        verdict = ZoneVerdict.from_payload({})

        assert not verdict.is_valid
        assert not verdict.is_within_zone
        assert verdict.delivery_fee == Decimal("0")

    @pytest.mark.parametrize("fee", [None, "n/a", -3, True])
    def test_unusable_fee_is_zero(self, fee):
        verdict = ZoneVerdict.from_payload({"isValid": True, "isWithinZone": True, "deliveryFee": fee})

        assert verdict.delivery_fee == Decimal("0")


class TestFunctionalZoneValidator:
    @pytest.mark.asyncio
    async def test_accepts_payload_mapping(self):
        async def service(address, order_value):
            return {"isValid": True, "isWithinZone": False, "error": f"{address} is too far"}

        verdict = await zone_validator_from(service).validate_delivery_address("Via X 1", Decimal("10"))

        assert verdict.error == "Via X 1 is too far"
        assert not verdict.is_within_zone

    @pytest.mark.asyncio
    async def test_accepts_verdict(self):
        expected = ZoneVerdict(is_valid=True, is_within_zone=True)

        async def service(address, order_value):
            return expected

        assert await zone_validator_from(service).validate_delivery_address("Via X 1", Decimal("10")) is expected
