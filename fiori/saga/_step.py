"""
Saga step creation.
"""

from __future__ import annotations

from collections.abc import Callable, Awaitable
from typing import Any
from kungfu import LazyCoroResult, Result
from combinators import lift as L

from fiori.lift import from_result_async
from fiori.saga._types import SagaStep, Compensator

# ═══════════════════════════════════════════════════════════════════════════════
# step() — Primary Constructor
# ═══════════════════════════════════════════════════════════════════════════════


def step[T, E](
    action: LazyCoroResult[T, E],
    compensate: Compensator[T, Any] | None = None,
    *,
    name: str = "step",
) -> SagaStep[T, E]:
    """
    Create a compensated saga step.

    Args:
        action: The operation to perform (LazyCoroResult)
        compensate: Runs with the action's value if a later step fails
        name: Label reported in SagaError.failed_step and in logs

    Example:
        from fiori import saga as S
        from combinators import lift as L

        write_order = S.step(
            action=L.catching_async(
                lambda: db.insert_order(record),
                on_error=lambda e: StoreError(str(e), e),
            ),
            compensate=lambda order, failure: ledger.record(orphan_of(order, failure)),
            name="order",
        )

        # Chain steps
        aggregate = write_order.then(lambda order: S.step(
            action=L.catching_async(
                lambda: db.insert_item(item_for(order)),
                on_error=lambda e: StoreError(str(e), e),
            ),
            name="item",
        ))
    """
    return SagaStep(action=action, compensate=compensate, name=name)


# ═══════════════════════════════════════════════════════════════════════════════
# from_async() — Create step from async callable
# ═══════════════════════════════════════════════════════════════════════════════


def from_async[T, E](
    action: Callable[[], Awaitable[T]],
    on_error: Callable[[Exception], E],
    compensate: Compensator[T, Any] | None = None,
    *,
    name: str = "step",
) -> SagaStep[T, E]:
    """
    Create step from async callable with error handling.

    Example:
        S.from_async(
            lambda: gateway.capture(order_id),
            on_error=lambda e: str(e),
            name="capture",
        )
    """
    return SagaStep(
        action=L.catching_async(action, on_error=on_error),
        compensate=compensate,
        name=name,
    )


# ═══════════════════════════════════════════════════════════════════════════════
# from_result() — Create step from Result-returning async callable
# ═══════════════════════════════════════════════════════════════════════════════


def from_result[T, E](
    action: Callable[[], Awaitable[Result[T, E]]],
    on_error: Callable[[Exception], E],
    compensate: Compensator[T, Any] | None = None,
    *,
    name: str = "step",
) -> SagaStep[T, E]:
    """
    Create step from an async callable that already returns Result.

    Store and gateway protocols return Result; raised exceptions are still
    mapped with ``on_error``.

    Example:
        S.from_result(
            lambda: store.insert_item(item),
            on_error=lambda e: StoreError(str(e), e),
            name="item",
        )
    """
    return SagaStep(
        action=from_result_async(action, on_error=on_error),
        compensate=compensate,
        name=name,
    )


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = ("step", "from_async", "from_result")
