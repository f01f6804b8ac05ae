"""Shared test fixtures for benchmark tests."""

from __future__ import annotations

from typing import Iterable

from microbench.config import BenchmarkEntry
from microbench.results import BenchmarkResult
from microbench.timing import NS_PER_MS


class FakeClock:
    """Nanosecond clock that only moves when a test advances it."""

    def __init__(self) -> None:
        self.now = 0
        self.calls = 0

    def __call__(self) -> int:
        self.calls += 1
        return self.now

    def advance_ms(self, ms: float) -> None:
        self.now += int(ms * NS_PER_MS)


def make_timed_entry(
    name: str,
    clock: FakeClock,
    durations_ms: Iterable[float],
) -> tuple[BenchmarkEntry, list[int]]:
    """Entry whose n-th call advances *clock* by the n-th duration.

    Returns the entry and a list that records the 1-based index of every
    call made.
    """
    durations = iter(durations_ms)
    calls: list[int] = []

    def fn() -> None:
        calls.append(len(calls) + 1)
        clock.advance_ms(next(durations))

    return BenchmarkEntry(name=name, fn=fn), calls


def make_result(
    name: str = "fn",
    times: list[float] | None = None,
    *,
    unit: str = "ms",
) -> BenchmarkResult:
    """Create a BenchmarkResult with stats derived from *times*."""
    from microbench.stats import describe

    samples = times if times is not None else [1.0, 2.0, 3.0]
    stats = describe(samples)
    return BenchmarkResult(
        name=name,
        times=tuple(samples),
        median=stats.median,
        mean=stats.mean,
        min=stats.min,
        max=stats.max,
        sd=stats.stdev,
        unit=unit,
    )
