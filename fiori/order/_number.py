"""
Order numbers — short, display-friendly identifiers.

    ORD-482913057
        ^^^^^^      last 6 digits of the millisecond timestamp
              ^^^   zero-padded random suffix

Unique enough for display; collisions are possible and accepted. The store
id, not the order number, is the real key.
"""

from __future__ import annotations

import random
import time

PREFIX = "ORD-"


def generate_order_number(
    now_ms: int | None = None,
    rng: random.Random | None = None,
) -> str:
    timestamp = str(now_ms if now_ms is not None else time.time_ns() // 1_000_000)
    suffix = (rng or random).randrange(1000)
    return f"{PREFIX}{timestamp[-6:].zfill(6)}{suffix:03d}"


__all__ = ("PREFIX", "generate_order_number")
