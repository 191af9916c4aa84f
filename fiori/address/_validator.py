"""
AddressValidator — debounced zone validation with stale-result rejection.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from decimal import Decimal

from combinators import lift as L
from kungfu import Result, Ok, Error

from fiori import notices
from fiori.address._debounce import Debouncer
from fiori.address._types import AddressValidationResult, ZoneValidator
from fiori.config import Settings, get_settings
from fiori.log import get_logger
from fiori.notices import Notifier

logger = get_logger(__name__)

ADDRESS_KEY = "address"
VALIDATION_FAILED_MESSAGE = "Unable to validate the address. Please try again."


class AddressValidator:
    """
    Owns the latest AddressValidationResult of one ordering session.

    Two entry points:

    - ``on_address_changed`` (every keystroke): clears the stored result and
      re-arms the debounce timer; the call it eventually issues is silent.
    - ``validate_now`` (explicit user action): validates immediately and
      publishes a notice with the verdict.

    Every issued call is tagged with a sequence number and the address it
    was issued for. Its result is stored only if no newer call was issued
    and the address field still holds that address, so an older call
    resolving late can never overwrite a newer verdict.
    """

    def __init__(
        self,
        zone: ZoneValidator,
        order_value: Callable[[], Decimal],
        notifier: Notifier,
        settings: Settings | None = None,
    ) -> None:
        settings = settings or get_settings()
        self._zone = zone
        self._order_value = order_value
        self._notifier = notifier
        self._min_length = settings.min_address_length
        self._timeout = settings.validation_timeout_seconds
        self._debouncer = Debouncer(settings.debounce_seconds)
        self._address = ""
        self._current: AddressValidationResult | None = None
        self._sequence = 0
        self._in_flight = 0
        self._closed = False

    # ─────────────────────────────────────────────────────────────────────────
    # State
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def current(self) -> AddressValidationResult | None:
        """Latest fresh result; None while unknown."""
        return self._current

    @property
    def address(self) -> str:
        return self._address

    @property
    def is_validating(self) -> bool:
        return self._in_flight > 0

    @property
    def is_scheduled(self) -> bool:
        return self._debouncer.is_pending(ADDRESS_KEY)

    @property
    def closed(self) -> bool:
        return self._closed

    # ─────────────────────────────────────────────────────────────────────────
    # Input
    # ─────────────────────────────────────────────────────────────────────────

    def on_address_changed(self, text: str) -> None:
        """
        React to an edit of the address field.

        The minimum is inclusive: a trimmed address of exactly
        ``min_address_length`` characters is validated. Shorter input is
        never validated and the result stays unknown.
        """
        if self._closed:
            return
        address = text.strip()
        self._address = address
        self._current = None
        self._debouncer.cancel(ADDRESS_KEY)
        if len(address) >= self._min_length:
            self._debouncer.schedule(ADDRESS_KEY, lambda: self.validate(address))

    async def validate_now(self) -> bool:
        """
        Validate the current address immediately and notify the user.

        Returns True only when the address is deliverable.
        """
        if self._closed:
            return False
        self._debouncer.cancel(ADDRESS_KEY)
        address = self._address
        if not address:
            self._notifier.notify(notices.ADDRESS_REQUIRED)
            return False

        result = await self._request(address)

        match result:
            case Error(failed):
                if self._is_fresh(failed):
                    self._notifier.notify(notices.ADDRESS_VALIDATION_FAILED)
                return False
            case Ok(verdict):
                if not self._is_fresh(verdict):
                    return False
                if verdict.deliverable:
                    self._notifier.notify(notices.address_validated(verdict.estimated_time))
                    return True
                self._notifier.notify(notices.address_undeliverable(verdict.error))
                return False

        return False

    async def validate(self, address: str) -> AddressValidationResult:
        """
        Issue one validation call for ``address``.

        The returned result is stored only if it is still fresh when it
        arrives. Never raises: failures become invalid results.
        """
        match await self._request(address):
            case Ok(result) | Error(result):
                return result
        raise AssertionError("unreachable")

    async def settle(self) -> None:
        """Wait for the pending debounce timer and its call to finish."""
        await self._debouncer.idle()

    def close(self) -> None:
        """Tear down: cancel the debounce timer, ignore late results."""
        self._closed = True
        self._debouncer.close()

    # ─────────────────────────────────────────────────────────────────────────
    # Internals
    # ─────────────────────────────────────────────────────────────────────────

    async def _request(
        self, address: str
    ) -> Result[AddressValidationResult, AddressValidationResult]:
        """Ok with the verdict, or Error with an invalid result on failure."""
        self._sequence += 1
        sequence = self._sequence
        order_value = self._order_value()
        logger.debug("Address validation issued", sequence=sequence, address=address)

        self._in_flight += 1
        try:
            outcome = await L.catching_async(
                lambda: asyncio.wait_for(
                    self._zone.validate_delivery_address(address, order_value),
                    timeout=self._timeout,
                ),
                on_error=lambda e: e,
            )
        finally:
            self._in_flight -= 1

        match outcome:
            case Ok(verdict):
                result = AddressValidationResult.from_verdict(address, sequence, verdict)
                self._apply(result)
                return Ok(result)
            case Error(exc):
                logger.warning(
                    "Address validation failed",
                    sequence=sequence,
                    error=repr(exc),
                )
                failed = AddressValidationResult.failed(
                    address, sequence, VALIDATION_FAILED_MESSAGE
                )
                self._apply(failed)
                return Error(failed)

        raise AssertionError("unreachable")

    def _is_fresh(self, result: AddressValidationResult) -> bool:
        return (
            not self._closed
            and result.sequence == self._sequence
            and result.address == self._address
        )

    def _apply(self, result: AddressValidationResult) -> None:
        if not self._is_fresh(result):
            logger.debug(
                "Discarded stale address validation",
                sequence=result.sequence,
                latest=self._sequence,
            )
            return
        self._current = result
        logger.info(
            "Address validation applied",
            sequence=result.sequence,
            deliverable=result.deliverable,
            fee=str(result.delivery_fee),
        )


__all__ = ("AddressValidator", "ADDRESS_KEY", "VALIDATION_FAILED_MESSAGE")
