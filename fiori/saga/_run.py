"""
Saga execution with compensation on failure.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from kungfu import Result, Ok, Error

from fiori.log import get_logger
from fiori.saga._types import (
    SagaStep,
    SagaExpr,
    SagaResult,
    SagaError,
    Then,
    StepFailure,
    Compensator,
)

logger = get_logger(__name__)

# ═══════════════════════════════════════════════════════════════════════════════
# Recorded Compensator
# ═══════════════════════════════════════════════════════════════════════════════

type RecordedCompensator[T] = tuple[str, T, Compensator[T, Any]]


@dataclass(slots=True)
class _Progress:
    """Mutable bookkeeping for one run."""

    steps: int = 0
    current: str = ""


# ═══════════════════════════════════════════════════════════════════════════════
# run_step() — Execute single step
# ═══════════════════════════════════════════════════════════════════════════════

async def run_step[T, E](
    step: SagaStep[T, E],
    compensators: list[RecordedCompensator[T]],
) -> Result[T, E]:
    """Execute single step, recording compensator on success."""
    result = await step.action
    match result:
        case Ok(value):
            if step.compensate is not None:
                compensators.append((step.name, value, step.compensate))
            return Ok(value)
        case Error(e):
            return Error(e)


# ═══════════════════════════════════════════════════════════════════════════════
# run_compensators() — Rollback / reconciliation
# ═══════════════════════════════════════════════════════════════════════════════

async def run_compensators[T, E](
    compensators: list[RecordedCompensator[T]],
    failure: StepFailure[E],
) -> tuple[int, int]:
    """Run compensators in reverse. Returns (run, failed)."""
    comp_run = 0
    comp_failed = 0

    for name, value, comp in reversed(compensators):
        try:
            await comp(value, failure)
            comp_run += 1
        except Exception:
            comp_failed += 1
            logger.exception("Saga compensator failed", step=name)

    return comp_run, comp_failed


# ═══════════════════════════════════════════════════════════════════════════════
# Expression walker
# ═══════════════════════════════════════════════════════════════════════════════

async def _run_expr(
    expr: SagaExpr[object, object],
    compensators: list[RecordedCompensator[object]],
    progress: _Progress,
) -> Result[object, object]:
    match expr:
        case SagaStep():
            progress.steps += 1
            progress.current = expr.name
            return await run_step(expr, compensators)
        case Then(inner, f):
            inner_result = await _run_expr(inner, compensators, progress)
            match inner_result:
                case Ok(value):
                    return await _run_expr(f(value), compensators, progress)
                case Error(e):
                    return Error(e)
    raise TypeError(f"Not a saga expression: {expr!r}")


# ═══════════════════════════════════════════════════════════════════════════════
# run() — Execute Saga
# ═══════════════════════════════════════════════════════════════════════════════

async def run[T, E](
    saga: SagaExpr[T, E],
) -> Result[SagaResult[T], SagaError[E]]:
    """
    Execute a saga step or chain.

    Steps run strictly in order; each ``.then`` receives the previous value.
    On success: returns SagaResult with value and metadata.
    On failure: runs recorded compensators in reverse, returns SagaError.

    Example:
        from fiori import saga as S

        placement = (
            S.step(write_order, record_orphan, name="order")
            .then(lambda order: S.step(write_item(order), name="item"))
        )

        result = await S.run(placement)

        match result:
            case Ok(r):
                print(f"Success: {r.value}")
            case Error(e):
                print(f"Failed at step {e.step_failed} ({e.failed_step})")
    """
    compensators: list[RecordedCompensator[object]] = []
    progress = _Progress()

    result = await _run_expr(saga, compensators, progress)  # type: ignore[arg-type]

    match result:
        case Ok(value):
            return Ok(SagaResult(
                value=value,  # type: ignore[arg-type]
                steps_executed=progress.steps,
                compensators_recorded=len(compensators),
            ))

        case Error(error):
            failure = StepFailure(step=progress.current, error=error)
            comp_run, comp_failed = await run_compensators(compensators, failure)

            return Error(SagaError(
                error=error,  # type: ignore[arg-type]
                step_failed=progress.steps,
                failed_step=progress.current,
                compensators_run=comp_run,
                compensators_failed=comp_failed,
                rollback_complete=comp_failed == 0,
            ))

    raise TypeError(f"Saga produced a non-Result value: {result!r}")


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = ("run", "run_step", "run_compensators")
