"""Benchmark result data structures and serialization.

One :class:`BenchmarkResult` is produced per entry.  A saved run is a
single JSON document::

    {
      "meta": {...},        # RunMeta, optional
      "results": [...]      # BenchmarkResult dicts, in entry order
    }
"""

from __future__ import annotations

import json
import logging
import platform
import sys
from datetime import datetime, timezone
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Sequence

from microbench.config import BenchmarkOptions
from microbench.stats import DescriptiveStats
from microbench.units import scale_factor

log = logging.getLogger("microbench")


# ---------------------------------------------------------------------------
# Per-entry result
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BenchmarkResult:
    """Timing summary for one entry.

    ``times`` keeps execution order; the scalar fields come from a sorted
    copy.  Every value is expressed in ``unit``.
    """

    name: str
    times: tuple[float, ...]
    median: float
    mean: float
    min: float
    max: float
    sd: float
    unit: str

    @classmethod
    def from_samples(
        cls,
        name: str,
        samples_ms: Sequence[float],
        stats_ms: DescriptiveStats,
        unit: str,
    ) -> BenchmarkResult:
        """Scale millisecond samples and their statistics into *unit*."""
        factor = scale_factor(unit)
        scaled = stats_ms.scaled(factor)
        return cls(
            name=name,
            times=tuple(t * factor for t in samples_ms),
            median=scaled.median,
            mean=scaled.mean,
            min=scaled.min,
            max=scaled.max,
            sd=scaled.stdev,
            unit=unit,
        )

    @property
    def iterations(self) -> int:
        """Number of measured iterations."""
        return len(self.times)

    def converted(self, unit: str) -> BenchmarkResult:
        """Re-express this result in another unit."""
        ratio = scale_factor(unit) / scale_factor(self.unit)
        return BenchmarkResult(
            name=self.name,
            times=tuple(t * ratio for t in self.times),
            median=self.median * ratio,
            mean=self.mean * ratio,
            min=self.min * ratio,
            max=self.max * ratio,
            sd=self.sd * ratio,
            unit=unit,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        return {
            "name": self.name,
            "times": list(self.times),
            "median": self.median,
            "mean": self.mean,
            "min": self.min,
            "max": self.max,
            "sd": self.sd,
            "unit": self.unit,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BenchmarkResult:
        """Deserialize from a dict, ignoring unknown fields."""
        known = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in data.items() if k in known}
        filtered["times"] = tuple(filtered.get("times", ()))
        return cls(**filtered)


# ---------------------------------------------------------------------------
# Run metadata
# ---------------------------------------------------------------------------


@dataclass
class RunMeta:
    """Provenance of one benchmark run."""

    started_at: str = ""
    finished_at: str = ""
    python_version: str = field(default_factory=lambda: sys.version.split()[0])
    platform: str = field(default_factory=platform.platform)
    options: BenchmarkOptions = field(default_factory=BenchmarkOptions)

    @staticmethod
    def now() -> str:
        """Timestamp in the format used for started_at / finished_at."""
        return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        return {
            "started_at": self.started_at,
            "finished_at": self.finished_at,
            "python_version": self.python_version,
            "platform": self.platform,
            "options": self.options.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RunMeta:
        """Deserialize from a dict, ignoring unknown fields."""
        known = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in data.items() if k in known}
        if isinstance(filtered.get("options"), dict):
            filtered["options"] = BenchmarkOptions.from_dict(filtered["options"])
        return cls(**filtered)


# ---------------------------------------------------------------------------
# Persistence
# ---------------------------------------------------------------------------


def save_results(
    path: Path,
    results: Sequence[BenchmarkResult],
    meta: RunMeta | None = None,
) -> None:
    """Write results (and optional metadata) as a JSON document."""
    doc: dict[str, Any] = {"results": [r.to_dict() for r in results]}
    if meta is not None:
        doc["meta"] = meta.to_dict()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(doc, indent=2) + "\n", encoding="utf-8")
    log.debug("Saved %d results to %s", len(results), path)


def load_results(path: Path) -> tuple[RunMeta | None, list[BenchmarkResult]]:
    """Load a document written by :func:`save_results`.

    Raises:
        FileNotFoundError: If *path* does not exist.
        ValueError: If the file is not a results document.
    """
    if not path.exists():
        raise FileNotFoundError(f"Results file not found: {path}")

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc

    if not isinstance(data, dict) or not isinstance(data.get("results"), list):
        raise ValueError(f"{path} is not a microbench results file")

    meta = RunMeta.from_dict(data["meta"]) if isinstance(data.get("meta"), dict) else None
    results = []
    for index, item in enumerate(data["results"]):
        _check_result_dict(item, index, path)
        results.append(BenchmarkResult.from_dict(item))
    return meta, results


_RESULT_KEYS = ("name", "times", "median", "mean", "min", "max", "sd", "unit")


def _check_result_dict(item: Any, index: int, path: Path) -> None:
    """Raise ValueError unless *item* can be turned into a BenchmarkResult."""
    if not isinstance(item, dict):
        raise ValueError(f"{path}: result {index} is not a mapping")
    missing = [k for k in _RESULT_KEYS if k not in item]
    if missing:
        raise ValueError(f"{path}: result {index} is missing {', '.join(missing)}")
    if not isinstance(item["times"], list):
        raise ValueError(f"{path}: result {index} has non-list 'times'")
