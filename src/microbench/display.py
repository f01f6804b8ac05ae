"""Terminal display formatting for benchmark results."""

from __future__ import annotations

from typing import Sequence

from microbench.formatting import format_table, format_value
from microbench.results import BenchmarkResult, RunMeta
from microbench.units import unit_label

_HEADERS = ["Function", "Median", "Mean", "Min", "Max", "SD", "Unit"]
_NUMERIC_COLUMNS = range(1, 6)


def format_results(
    results: Sequence[BenchmarkResult],
    title: str | None = None,
    *,
    precision: int = 4,
) -> str:
    """Format results as an aligned terminal table.

    Entries keep their run order.  An empty result list renders a short
    notice instead of an empty table.
    """
    lines: list[str] = []
    if title:
        lines.append(title)
        lines.append("─" * len(title))

    if not results:
        lines.append("  (no benchmark entries)")
        return "\n".join(lines)

    rows = [
        [
            r.name,
            format_value(r.median, precision),
            format_value(r.mean, precision),
            format_value(r.min, precision),
            format_value(r.max, precision),
            format_value(r.sd, precision),
            r.unit,
        ]
        for r in results
    ]
    lines.append(
        format_table(_HEADERS, rows, right=_NUMERIC_COLUMNS, label_width=40)
    )
    return "\n".join(lines)


def format_meta(meta: RunMeta) -> str:
    """One-paragraph description of how a run was configured."""
    opts = meta.options
    lines = [
        f"Iterations: {opts.iterations} measured + {opts.warmup} warmup",
        f"Unit: {unit_label(opts.unit)}",
        f"Python: {meta.python_version} on {meta.platform}",
    ]
    if meta.started_at and meta.finished_at:
        lines.append(f"Time: {meta.started_at} → {meta.finished_at}")
    return "\n".join(lines)
