"""
Saga — ordered multi-step writes with compensation.

    from fiori import saga as S

    saga = S.step(action, compensate).then(lambda v: S.step(action2, compensate2))
    result = await S.run(saga)
"""

from __future__ import annotations

from fiori.saga._types import (
    StepFailure,
    Compensator,
    SagaStep,
    SagaExpr,
    SagaResult,
    SagaError,
    Then,
)
from fiori.saga._step import step, from_async, from_result
from fiori.saga._run import run

__all__ = (
    "StepFailure",
    "Compensator",
    "SagaStep",
    "SagaExpr",
    "SagaResult",
    "SagaError",
    "Then",
    "step",
    "from_async",
    "from_result",
    "run",
)
