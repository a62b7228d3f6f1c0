from __future__ import annotations

"""Transit time models.

A courier sleeps once per order to simulate the ride to the customer. The
delay comes from a zero-argument callable returning seconds:

- `fixed_transit(seconds)`: the same delay every time (default 1 second).
- `random_transit(min_seconds, max_seconds)`: uniform delay, for realism.

Passing an explicit `random.Random` makes the random model deterministic,
which is what the tests do.
"""

import random
from typing import Callable

TransitTime = Callable[[], float]

DEFAULT_TRANSIT_SECONDS = 1.0


def fixed_transit(seconds: float = DEFAULT_TRANSIT_SECONDS) -> TransitTime:
    """Return a transit model that always takes `seconds` (>= 0)."""
    if seconds < 0:
        raise ValueError("seconds must be >= 0")

    value = float(seconds)
    return lambda: value


def random_transit(*, min_seconds: float, max_seconds: float, rng: random.Random | None = None) -> TransitTime:
    """Return a transit model sampling uniformly in [min_seconds, max_seconds].

    Args:
        min_seconds: lower bound (>= 0).
        max_seconds: upper bound (>= min_seconds).
        rng: optional RNG (useful for deterministic tests).
    """
    if min_seconds < 0:
        raise ValueError("min_seconds must be >= 0")
    if max_seconds < min_seconds:
        raise ValueError("max_seconds must be >= min_seconds")

    r = rng or random
    return lambda: float(r.uniform(min_seconds, max_seconds))
