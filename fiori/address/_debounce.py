"""
Debouncer — keyed cancel-and-replace scheduling on the running event loop.

    debouncer = Debouncer(delay=1.0)
    debouncer.schedule("address", lambda: validator.validate(text))
    ...
    debouncer.close()   # teardown: pending timers never fire
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

from fiori.log import get_logger

logger = get_logger(__name__)

type Action = Callable[[], Awaitable[object]]


class DebouncerClosed(RuntimeError):
    """Raised when scheduling on a debouncer that was torn down."""


class Debouncer:
    """
    At most one pending timer per key.

    ``schedule`` cancels the key's not-yet-fired timer and starts a new one.
    Once the quiet period elapses the action is no longer pending: it runs
    to completion even if the key is rescheduled, so callers must tag the
    work they issue and discard stale outcomes themselves.
    """

    __slots__ = ("_delay", "_pending", "_running", "_closed")

    def __init__(self, delay: float) -> None:
        if delay < 0:
            raise ValueError("delay must be >= 0")
        self._delay = delay
        self._pending: dict[str, asyncio.Task[None]] = {}
        self._running: set[asyncio.Task[None]] = set()
        self._closed = False

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def closed(self) -> bool:
        return self._closed

    def is_pending(self, key: str) -> bool:
        return key in self._pending

    def schedule(self, key: str, action: Action) -> None:
        """Replace the key's pending timer with one that runs ``action``."""
        if self._closed:
            raise DebouncerClosed(f"cannot schedule {key!r}: debouncer closed")
        self.cancel(key)
        task = asyncio.get_running_loop().create_task(self._fire(key, action))
        self._pending[key] = task
        self._running.add(task)
        task.add_done_callback(self._running.discard)

    def cancel(self, key: str) -> bool:
        """Cancel the key's pending timer. Returns True if one was pending."""
        task = self._pending.pop(key, None)
        if task is None:
            return False
        task.cancel()
        return True

    def close(self) -> None:
        """Cancel every pending timer and refuse further scheduling."""
        self._closed = True
        for key in list(self._pending):
            self.cancel(key)

    async def idle(self) -> None:
        """Wait until no timer is pending and no fired action is running."""
        while busy := [t for t in self._running if not t.done()]:
            await asyncio.gather(*busy, return_exceptions=True)

    async def _fire(self, key: str, action: Action) -> None:
        await asyncio.sleep(self._delay)
        if self._pending.get(key) is asyncio.current_task():
            del self._pending[key]
        try:
            await action()
        except Exception:
            logger.exception("Debounced action failed", key=key)


__all__ = ("Debouncer", "DebouncerClosed")
