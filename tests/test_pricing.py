"""Tests for price quotes."""

from decimal import Decimal

import pytest

from fiori import pricing
from fiori.address import AddressValidationResult


def result(is_valid=True, is_within_zone=True, fee="5.00") -> AddressValidationResult:
    return AddressValidationResult(
        address="Via Roma 1, Milano",
        sequence=1,
        is_valid=is_valid,
        is_within_zone=is_within_zone,
        delivery_fee=Decimal(fee),
    )


class TestSubtotal:
    def test_exact_multiplication(self):
        assert pricing.subtotal(Decimal("29.90"), 2) == Decimal("59.80")

    def test_free_product(self):
        assert pricing.subtotal(Decimal("0"), 3) == Decimal("0.00")

    def test_rejects_zero_quantity(self):
        with pytest.raises(ValueError):
            pricing.subtotal(Decimal("10.00"), 0)

    def test_rejects_negative_price(self):
        with pytest.raises(ValueError):
            pricing.subtotal(Decimal("-1.00"), 1)


class TestQuote:
    def test_no_validation_no_fee(self):
        quote = pricing.quote(Decimal("29.90"), 2, None)

        assert quote.subtotal == Decimal("59.80")
        assert quote.delivery_fee == Decimal("0")
        assert quote.total == Decimal("59.80")
        assert not quote.has_delivery_fee

    def test_deliverable_adds_fee(self):
        quote = pricing.quote(Decimal("15.00"), 1, result())

        assert quote.delivery_fee == Decimal("5.00")
        assert quote.total == Decimal("20.00")
        assert quote.has_delivery_fee

    @pytest.mark.parametrize(
        ("is_valid", "is_within_zone"),
        [(False, True), (True, False), (False, False)],
    )
    def test_undeliverable_fee_is_ignored(self, is_valid, is_within_zone):
        quote = pricing.quote(Decimal("15.00"), 1, result(is_valid, is_within_zone))

        assert quote.total == Decimal("15.00")

    def test_quantity_changes_only_the_subtotal(self):
        validation = result(fee="4.50")

        one = pricing.quote(Decimal("12.25"), 1, validation)
        three = pricing.quote(Decimal("12.25"), 3, validation)

        assert three.subtotal == one.subtotal * 3
        assert three.delivery_fee == one.delivery_fee
        assert three.total == Decimal("41.25")
