"""Export benchmark results to Markdown and CSV.

Markdown format: a summary table with one row per entry, suitable for
READMEs and issue reports.

CSV formats: the raw per-iteration samples in long format, or one
summary row per entry.
"""

from __future__ import annotations

import csv
import io
import logging
from pathlib import Path
from typing import Sequence

from microbench.formatting import format_value
from microbench.results import BenchmarkResult

log = logging.getLogger("microbench")

DEFAULT_REPORT_NAME = "benchmark-results.md"
DEFAULT_TITLE = "Benchmark Results"


# ---------------------------------------------------------------------------
# Markdown export
# ---------------------------------------------------------------------------


def to_table(
    results: Sequence[BenchmarkResult],
    title: str | None = None,
    *,
    precision: int = 4,
) -> str:
    """Render results as a Markdown document with a single table.

    Columns: Function, Median, Mean, Min, Max, SD, Unit.
    """
    lines = [
        f"# {title or DEFAULT_TITLE}",
        "",
        "| Function | Median | Mean | Min | Max | SD | Unit |",
        "|----------|-------:|-----:|----:|----:|---:|------|",
    ]
    for r in results:
        cells = [
            _escape_cell(r.name),
            format_value(r.median, precision),
            format_value(r.mean, precision),
            format_value(r.min, precision),
            format_value(r.max, precision),
            format_value(r.sd, precision),
            r.unit,
        ]
        lines.append("| " + " | ".join(cells) + " |")
    return "\n".join(lines) + "\n"


def _escape_cell(text: str) -> str:
    return text.replace("|", "\\|")


def write_markdown(
    results: Sequence[BenchmarkResult],
    output_path: Path | None = None,
    title: str | None = None,
) -> Path:
    """Write :func:`to_table` output to a file.

    Args:
        results: Results to render.
        output_path: Destination.  Defaults to ``benchmark-results.md``
            in the current working directory at call time.
        title: Optional document title.

    Returns:
        The path written.
    """
    path = output_path if output_path is not None else Path.cwd() / DEFAULT_REPORT_NAME
    path.write_text(to_table(results, title), encoding="utf-8")
    log.info("Benchmark results written to %s", path)
    return path


# ---------------------------------------------------------------------------
# CSV export
# ---------------------------------------------------------------------------


def export_csv(results: Sequence[BenchmarkResult]) -> str:
    """Export every measured sample as CSV (long format).

    One row per entry x iteration, in execution order.

    Columns:
        name, iteration, time, unit
    """
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(["name", "iteration", "time", "unit"])
    for r in results:
        for index, t in enumerate(r.times, start=1):
            writer.writerow([r.name, index, f"{t:.6f}", r.unit])
    return output.getvalue()


def export_csv_summary(results: Sequence[BenchmarkResult]) -> str:
    """Export summary statistics as CSV, one row per entry."""
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(["name", "n", "median", "mean", "min", "max", "sd", "unit"])
    for r in results:
        writer.writerow(
            [
                r.name,
                r.iterations,
                f"{r.median:.6f}",
                f"{r.mean:.6f}",
                f"{r.min:.6f}",
                f"{r.max:.6f}",
                f"{r.sd:.6f}",
                r.unit,
            ]
        )
    return output.getvalue()
