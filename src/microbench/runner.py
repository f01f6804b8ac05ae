"""Benchmark execution engine.

For each entry, strictly in the order given:

1. Warm-up: invoke ``options.warmup`` times, waiting for each call
   (including asynchronous completion) before the next.  Nothing is
   recorded.
2. Measure: invoke ``options.iterations`` times, timing each call with a
   monotonic clock.  Samples keep execution order.
3. Reduce the millisecond samples (see :mod:`microbench.stats`) and scale
   them into ``options.unit``.

Entries never overlap.  The first exception raised by a benchmarked
callable aborts the whole run and reaches the caller unchanged; results
already computed for earlier entries are dropped with it.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Sequence

from microbench.config import BenchmarkEntry, BenchmarkOptions, check_options
from microbench.logging import ITERATION_EXTRA
from microbench.results import BenchmarkResult, RunMeta
from microbench.stats import describe
from microbench.timing import Clock, invoke, time_call

log = logging.getLogger("microbench")


# ---------------------------------------------------------------------------
# Progress callback
# ---------------------------------------------------------------------------


@dataclass
class BenchmarkProgress:
    """Progress info passed to the callback."""

    phase: str  # "warmup", "measure", "done"
    name: str
    iteration: int  # 1-based
    total_iterations: int
    entries_done: int
    entries_total: int
    elapsed_ms: float = 0.0


ProgressCallback = Callable[[BenchmarkProgress], None]


# ---------------------------------------------------------------------------
# BenchmarkRunner
# ---------------------------------------------------------------------------


class BenchmarkRunner:
    """Executes benchmark entries according to BenchmarkOptions.

    Usage::

        runner = BenchmarkRunner(BenchmarkOptions(iterations=50, unit="us"))
        results = await runner.run(entries)
    """

    def __init__(
        self,
        options: BenchmarkOptions | None = None,
        progress_callback: ProgressCallback | None = None,
        clock: Clock | None = None,
    ) -> None:
        self.options = options or BenchmarkOptions()
        self.progress: ProgressCallback = progress_callback or self._default_progress
        self.clock: Clock = clock or time.perf_counter_ns
        self.meta: RunMeta | None = None

    async def run(self, entries: Sequence[BenchmarkEntry]) -> list[BenchmarkResult]:
        """Benchmark every entry in order.

        Returns:
            One BenchmarkResult per entry, in entry order.

        Raises:
            InvalidConfigurationError: Before anything runs, if the
                options or entries are invalid.
            Exception: Whatever a benchmarked callable raised, unchanged.
        """
        check_options(self.options, entries)

        meta = RunMeta(started_at=RunMeta.now(), options=self.options)
        log.info(
            "Benchmarking %d entries: %d iterations + %d warmup, unit=%s",
            len(entries),
            self.options.iterations,
            self.options.warmup,
            self.options.unit,
        )

        # Only handed back once every entry has completed.
        results: list[BenchmarkResult] = []
        for idx, entry in enumerate(entries):
            results.append(await self._benchmark_entry(entry, idx, len(entries)))

        meta.finished_at = RunMeta.now()
        self.meta = meta
        return results

    def run_blocking(self, entries: Sequence[BenchmarkEntry]) -> list[BenchmarkResult]:
        """Run :meth:`run` to completion on a fresh event loop."""
        return asyncio.run(self.run(entries))

    async def _benchmark_entry(
        self,
        entry: BenchmarkEntry,
        entry_idx: int,
        entry_total: int,
    ) -> BenchmarkResult:
        """Warm up, measure and reduce a single entry."""
        warmup = self.options.warmup
        iterations = self.options.iterations

        log.debug("Entry '%s': %d warmup iterations", entry.name, warmup)
        for i in range(warmup):
            try:
                await invoke(entry.fn)
            except Exception:
                log.error("Entry '%s' failed during warmup iteration %d", entry.name, i + 1)
                raise
            self.progress(
                BenchmarkProgress(
                    phase="warmup",
                    name=entry.name,
                    iteration=i + 1,
                    total_iterations=warmup,
                    entries_done=entry_idx,
                    entries_total=entry_total,
                )
            )

        samples: list[float] = []
        for i in range(iterations):
            try:
                elapsed = await time_call(entry.fn, self.clock)
            except Exception:
                log.error("Entry '%s' failed during measured iteration %d", entry.name, i + 1)
                raise
            samples.append(elapsed)
            self.progress(
                BenchmarkProgress(
                    phase="measure",
                    name=entry.name,
                    iteration=i + 1,
                    total_iterations=iterations,
                    entries_done=entry_idx,
                    entries_total=entry_total,
                    elapsed_ms=elapsed,
                )
            )

        stats = describe(samples)
        result = BenchmarkResult.from_samples(entry.name, samples, stats, self.options.unit)

        self.progress(
            BenchmarkProgress(
                phase="done",
                name=entry.name,
                iteration=iterations,
                total_iterations=iterations,
                entries_done=entry_idx + 1,
                entries_total=entry_total,
                elapsed_ms=stats.mean,
            )
        )
        return result

    @staticmethod
    def _default_progress(progress: BenchmarkProgress) -> None:
        """Default progress callback.

        One INFO line per finished entry.  Iteration lines go out at DEBUG
        tagged with ITERATION_EXTRA, so the console hides them unless
        iterations were asked for (see :func:`microbench.logging.setup_logging`).
        """
        if progress.phase == "done":
            current = progress.entries_done
        else:
            current = progress.entries_done + 1
        position = f"[{current}/{progress.entries_total}]"

        if progress.phase == "done":
            log.info("  %s %-30s mean %.6f ms", position, progress.name, progress.elapsed_ms)
            return

        marker = "W" if progress.phase == "warmup" else "M"
        line = (
            f"  {position} {progress.name:30s} "
            f"{marker}{progress.iteration}/{progress.total_iterations}"
        )
        if progress.elapsed_ms:
            line += f" {progress.elapsed_ms:.6f}ms"
        log.debug(line, extra=ITERATION_EXTRA)


# ---------------------------------------------------------------------------
# Convenience entry points
# ---------------------------------------------------------------------------


async def run(
    entries: Sequence[BenchmarkEntry],
    options: BenchmarkOptions | None = None,
    **runner_kwargs: Any,
) -> list[BenchmarkResult]:
    """Benchmark *entries* with *options*; see :class:`BenchmarkRunner`."""
    return await BenchmarkRunner(options, **runner_kwargs).run(entries)


def run_sync(
    entries: Sequence[BenchmarkEntry],
    options: BenchmarkOptions | None = None,
    **runner_kwargs: Any,
) -> list[BenchmarkResult]:
    """Blocking wrapper around :func:`run` for callers without an event loop."""
    return BenchmarkRunner(options, **runner_kwargs).run_blocking(entries)
