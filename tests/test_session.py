"""Tests for the ordering session: draft transitions, live quote, teardown."""

import asyncio
from decimal import Decimal

import pytest
from kungfu import Error, Ok

from fiori.order import CheckoutErrorKind, OrderDraft

from conftest import DEBOUNCE, OUT_OF_ZONE


class TestDraftTransitions:
    @pytest.mark.asyncio
    async def test_fields(self, session):
        session.set_customer_name("Giulia Bianchi")
        session.set_customer_email("giulia@example.com")
        session.set_customer_phone("+39 333 1234567")
        session.set_special_requests("Ring twice")
        session.set_delivery_date("2026-11-02")

        draft = session.draft
        assert draft.customer_name == "Giulia Bianchi"
        assert draft.special_requests == "Ring twice"
        assert draft.delivery_date == "2026-11-02"
        assert draft.missing_fields() == ("delivery_address",)

    @pytest.mark.asyncio
    async def test_quantity_never_below_one(self, session):
        session.decrement_quantity()
        assert session.draft.quantity == 1

        session.increment_quantity()
        session.increment_quantity()
        session.decrement_quantity()
        assert session.draft.quantity == 2

    @pytest.mark.asyncio
    async def test_set_quantity(self, session):
        match session.set_quantity(5):
            case Ok(draft):
                assert draft.quantity == 5
            case Error(e):
                pytest.fail(f"unexpected error: {e}")

        match session.set_quantity(0):
            case Error(e):
                assert e.kind is CheckoutErrorKind.INPUT
            case Ok(_):
                pytest.fail("quantity 0 accepted")
        assert session.draft.quantity == 5

    def test_draft_rejects_quantity_through_with_field(self):
        with pytest.raises(TypeError):
            OrderDraft().with_field(quantity="3")


class TestLiveQuote:
    @pytest.mark.asyncio
    async def test_quote_follows_quantity_and_validation(self, session):
        assert session.quote.total == Decimal("29.90")

        session.set_quantity(2)
        session.set_delivery_address("Via Roma 1, Milano")
        await session.validator.settle()

        assert session.validation.deliverable
        assert session.quote.subtotal == Decimal("59.80")
        assert session.quote.delivery_fee == Decimal("5.00")
        assert session.quote.total == Decimal("64.80")

        session.set_delivery_address("Via Roma 1, Milan")
        assert session.validation is None
        assert session.quote.total == Decimal("59.80")

    @pytest.mark.asyncio
    async def test_out_of_zone_has_no_fee(self, session, zone):
        zone.verdicts["Via Lontana 99, Bergamo"] = OUT_OF_ZONE
        session.set_delivery_address("Via Lontana 99, Bergamo")
        await session.validator.settle()

        assert session.validation is not None
        assert session.quote.total == Decimal("29.90")

    @pytest.mark.asyncio
    async def test_validation_uses_current_subtotal(self, session, zone):
        session.set_quantity(3)
        session.set_delivery_address("Via Roma 1, Milano")
        await session.validator.settle()

        assert zone.calls == [("Via Roma 1, Milano", Decimal("89.70"))]

    @pytest.mark.asyncio
    async def test_quantity_change_keeps_validated_fee(self, session, zone):
        session.set_delivery_address("Via Roma 1, Milano")
        await session.validator.settle()

        session.set_quantity(2)
        await asyncio.sleep(DEBOUNCE * 2)

        assert zone.calls == [("Via Roma 1, Milano", Decimal("29.90"))]
        assert session.validation.deliverable
        assert session.quote.delivery_fee == Decimal("5.00")
        assert session.quote.total == Decimal("64.80")


class TestTeardown:
    @pytest.mark.asyncio
    async def test_close_cancels_pending_validation(self, session, zone):
        session.set_delivery_address("Via Roma 1, Milano")
        session.close()

        await asyncio.sleep(DEBOUNCE * 2)

        assert zone.calls == []
        assert not session.is_open
        assert session.draft == OrderDraft()

    @pytest.mark.asyncio
    async def test_close_twice(self, session):
        session.close()
        session.close()

        assert not session.is_open

    @pytest.mark.asyncio
    async def test_closed_session_ignores_input(self, session, store):
        session.close()
        session.set_customer_name("Giulia Bianchi")
        session.increment_quantity()

        assert session.draft == OrderDraft()
        assert await session.validate_address() is False

        match await session.pay_later():
            case Error(e):
                assert e.kind is CheckoutErrorKind.GATE
            case Ok(_):
                pytest.fail("closed session submitted an order")
        assert store.orders == {}

    @pytest.mark.asyncio
    async def test_complete_clears_draft(self, session, fill):
        await fill(session)

        session.complete()

        assert session.draft == OrderDraft()
        assert not session.is_open
