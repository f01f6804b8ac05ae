"""Timing capture for benchmark iterations.

Every invocation is treated the same way: call the function, and if it
handed back something awaitable (a coroutine, task or future), wait for
it to complete.  Elapsed time is taken from a monotonic nanosecond clock
around the whole call-and-wait and reported in milliseconds.
"""

from __future__ import annotations

import inspect
import time
from typing import Any, Callable

NS_PER_MS = 1_000_000

# Type alias for a nanosecond clock such as time.perf_counter_ns.
Clock = Callable[[], int]


async def invoke(fn: Callable[[], Any]) -> None:
    """Call *fn* and wait for its completion.

    Synchronous return values are dropped without suspending.  Awaitable
    return values are awaited.  Exceptions from either path propagate
    unchanged.
    """
    outcome = fn()
    if inspect.isawaitable(outcome):
        await outcome


async def time_call(fn: Callable[[], Any], clock: Clock = time.perf_counter_ns) -> float:
    """Invoke *fn* once and return the elapsed wall time in milliseconds.

    Same call-and-wait as :func:`invoke`, inlined so a synchronous call is
    timed without creating an extra coroutine.
    """
    start = clock()
    outcome = fn()
    if inspect.isawaitable(outcome):
        await outcome
    end = clock()
    return (end - start) / NS_PER_MS
