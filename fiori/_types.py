"""
Core types for fiori.

Re-exports from kungfu/combinators + money helpers shared by every module.
"""

from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from typing import Never

# Re-export from kungfu
from kungfu import Result, Ok, Error, LazyCoroResult

# Re-export from combinators
from combinators import LCR

# ═══════════════════════════════════════════════════════════════════════════════
# Lazy Computation Aliases
# ═══════════════════════════════════════════════════════════════════════════════

type Lazy[T, E] = LazyCoroResult[T, E]
"""Lazy async computation that may fail."""

type Pure[T] = Lazy[T, Never]
"""Lazy computation that cannot fail."""

# ═══════════════════════════════════════════════════════════════════════════════
# Money
# ═══════════════════════════════════════════════════════════════════════════════

CENT = Decimal("0.01")
ZERO = Decimal("0")


def to_money(value: Decimal | int | float | str) -> Decimal:
    """
    Normalize an amount to the minor currency unit.

    Floats go through ``str`` so 29.9 becomes Decimal("29.90"), not
    Decimal("29.899999999999998578914528479799628257751464843750").
    """
    if isinstance(value, float):
        value = str(value)
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    # Re-exports from kungfu
    "Result",
    "Ok",
    "Error",
    "LazyCoroResult",
    # Re-exports from combinators
    "LCR",
    # Type aliases
    "Lazy",
    "Pure",
    # Money
    "CENT",
    "ZERO",
    "to_money",
)
