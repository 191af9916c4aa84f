"""
Lift — Helpers for lifting values into lazy Results.

Re-exports from combinators.lift with fiori-specific additions.
"""

from __future__ import annotations

from collections.abc import Callable, Awaitable

from kungfu import LazyCoroResult, Result, Error

# Re-export from combinators.lift
from combinators.lift import (
    pure,
    fail,
    catching_async,
)


# ═══════════════════════════════════════════════════════════════════════════════
# fiori-specific helpers
# ═══════════════════════════════════════════════════════════════════════════════

def from_result[T, E](result: Result[T, E]) -> LazyCoroResult[T, E]:
    """Lift a Result into LazyCoroResult."""
    async def _run() -> Result[T, E]:
        return result
    return LazyCoroResult(_run)


def from_result_async[T, E](
    fn: Callable[[], Awaitable[Result[T, E]]],
    on_error: Callable[[Exception], E],
) -> LazyCoroResult[T, E]:
    """
    Lift an async function that already returns Result.

    Exceptions escaping ``fn`` are mapped with ``on_error`` instead of
    propagating, so a misbehaving collaborator still yields ``Error``.

    Example:
        from_result_async(
            lambda: store.insert_order(record),
            on_error=lambda e: StoreError(str(e), e),
        )
    """
    async def _run() -> Result[T, E]:
        try:
            return await fn()
        except Exception as e:
            return Error(on_error(e))
    return LazyCoroResult(_run)


__all__ = (
    # From combinators.lift
    "pure",
    "fail",
    "catching_async",
    # fiori additions
    "from_result",
    "from_result_async",
)
