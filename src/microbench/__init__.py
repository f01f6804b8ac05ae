"""microbench — time named callables and summarise the samples.

Runs each benchmark entry through a warm-up phase and a measured phase,
then reduces the per-call wall-clock durations into median, mean, min,
max and population standard deviation in the requested time unit.
"""

from __future__ import annotations

__version__ = "0.1.0"

from microbench.config import (  # noqa: E402
    BenchmarkEntry,
    BenchmarkOptions,
    InvalidConfigurationError,
)
from microbench.results import BenchmarkResult  # noqa: E402
from microbench.runner import BenchmarkRunner, run, run_sync  # noqa: E402
from microbench.units import scale_factor  # noqa: E402

__all__ = [
    "BenchmarkEntry",
    "BenchmarkOptions",
    "BenchmarkResult",
    "BenchmarkRunner",
    "InvalidConfigurationError",
    "__version__",
    "run",
    "run_sync",
    "scale_factor",
]
