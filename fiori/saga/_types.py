"""
Saga types — core data structures.
"""

from __future__ import annotations

from dataclasses import dataclass
from collections.abc import Callable, Awaitable
from typing import Any

from kungfu import LazyCoroResult

# ═══════════════════════════════════════════════════════════════════════════════
# Compensator — Undo or Record Action
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class StepFailure[E]:
    """The step that failed and its error, handed to every compensator."""

    step: str
    error: E


type Compensator[T, E] = Callable[[T, StepFailure[E]], Awaitable[None]]
"""
Compensation function that receives the action result and the failure.

Undoes the step, or, when the write cannot be undone from here, records
the value for reconciliation.
"""

# ═══════════════════════════════════════════════════════════════════════════════
# SagaStep — Single Step with Compensation
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class SagaStep[T, E]:
    """
    A single saga step: action + compensator.

    When action succeeds, compensator is recorded.
    If later step fails, compensators run in reverse.
    """

    action: LazyCoroResult[T, E]
    compensate: Compensator[T, Any] | None
    name: str = "step"

    def then[U, E2](
        self,
        f: Callable[[T], SagaExpr[U, E2]],
    ) -> Then[T, U, E, E2]:
        """Chain another saga step after this one."""
        return Then(self, f)


# ═══════════════════════════════════════════════════════════════════════════════
# Saga AST — Sequential Composition
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Then[T, U, E, E2]:
    """
    Sequential composition (monadic bind).

    ``f`` receives the value produced by ``inner``: the next step cannot
    start before the previous one has returned a concrete value.
    """

    inner: SagaExpr[T, E]
    f: Callable[[T], SagaExpr[U, E2]]

    def then[V, E3](
        self,
        g: Callable[[U], SagaExpr[V, E3]],
    ) -> Then[U, V, E | E2, E3]:
        """Extend the chain with one more step."""
        return Then(self, g)


# ═══════════════════════════════════════════════════════════════════════════════
# Result Types
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class SagaResult[T]:
    """Successful saga result with metadata."""

    value: T
    steps_executed: int
    compensators_recorded: int


@dataclass(frozen=True, slots=True)
class SagaError[E]:
    """
    Saga error with compensation status.

    ``step_failed`` is 1-based and ``failed_step`` is the failing step's
    name, so callers can tell a first-step failure (nothing written)
    from a later one (earlier writes exist).
    """

    error: E
    step_failed: int
    failed_step: str
    compensators_run: int
    compensators_failed: int
    rollback_complete: bool


# ═══════════════════════════════════════════════════════════════════════════════
# Saga Type (union for run())
# ═══════════════════════════════════════════════════════════════════════════════

type SagaExpr[T, E] = SagaStep[T, E] | Then[object, T, object, E]

# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "StepFailure",
    "Compensator",
    "SagaStep",
    "Then",
    "SagaExpr",
    "SagaResult",
    "SagaError",
)
