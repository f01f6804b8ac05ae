"""Descriptive statistics for benchmark samples.

The reductions are intentionally simple:

- ``median`` is the element at index ``n // 2`` of the sorted sample.
  For an even count this is the upper of the two middle values, not
  their average.
- ``stdev`` is the population standard deviation (divides by ``n``).

Mean and standard deviation go through :mod:`statistics`, which sums
exactly, so a sample of identical values has a mean equal to that value
and a standard deviation of exactly zero.
"""

from __future__ import annotations

import statistics
from dataclasses import dataclass
from typing import Sequence


@dataclass(frozen=True)
class DescriptiveStats:
    """Summary statistics for one sample."""

    n: int
    mean: float
    median: float
    stdev: float
    min: float
    max: float

    def scaled(self, factor: float) -> DescriptiveStats:
        """Return a copy with every scalar multiplied by *factor*."""
        return DescriptiveStats(
            n=self.n,
            mean=self.mean * factor,
            median=self.median * factor,
            stdev=self.stdev * factor,
            min=self.min * factor,
            max=self.max * factor,
        )

    def to_dict(self) -> dict[str, float | int]:
        """Serialize to a dict with rounded values."""
        return {
            "n": self.n,
            "mean": round(self.mean, 6),
            "median": round(self.median, 6),
            "stdev": round(self.stdev, 6),
            "min": round(self.min, 6),
            "max": round(self.max, 6),
        }


def upper_median(sorted_values: Sequence[float]) -> float:
    """Element at index ``n // 2`` of an already sorted sequence."""
    return sorted_values[len(sorted_values) // 2]


def describe(values: Sequence[float]) -> DescriptiveStats:
    """Compute descriptive statistics for a sample.

    The input is not modified; a sorted copy is used for the order
    statistics.

    Raises:
        ValueError: If *values* is empty.
    """
    if not values:
        raise ValueError("Cannot describe an empty sample")

    sorted_v = sorted(values)
    mean = float(statistics.mean(sorted_v))
    stdev = float(statistics.pstdev(sorted_v, mean))

    return DescriptiveStats(
        n=len(sorted_v),
        mean=mean,
        median=upper_median(sorted_v),
        stdev=stdev,
        min=sorted_v[0],
        max=sorted_v[-1],
    )
