"""Shared text formatting helpers for microbench."""

from __future__ import annotations

import math
from typing import Collection, Sequence


def format_value(value: float, precision: int = 4) -> str:
    """Format a timing value with fixed precision.

    NaN and infinities are rendered as ``N/A``.
    """
    if math.isnan(value) or math.isinf(value):
        return "N/A"
    return f"{value:.{precision}f}"


def shorten(text: str, width: int) -> str:
    """Cut *text* to *width* characters, marking the cut with ``...``."""
    if len(text) <= width:
        return text
    return text[: width - 3] + "..."


def format_table(
    headers: Sequence[str],
    rows: Sequence[Sequence[str]],
    *,
    right: Collection[int] = (),
    label_width: int | None = None,
    indent: int = 2,
) -> str:
    """Lay out *rows* under *headers* as a plain-text table.

    Every row has one cell per header.

    Column 0 holds row labels and is shortened to *label_width* when given.
    Columns listed in *right* are right-aligned (numbers); the rest are
    left-aligned.  A rule of ``─`` separates the header from the body.
    """
    if not headers:
        return ""

    table = [list(headers)] + [list(row) for row in rows]
    if label_width is not None:
        for line in table:
            line[0] = shorten(line[0], label_width)
    widths = [max(len(line[ci]) for line in table) for ci in range(len(headers))]

    def render(cells: list[str]) -> str:
        padded = [
            cell.rjust(w) if ci in right else cell.ljust(w)
            for ci, (cell, w) in enumerate(zip(cells, widths))
        ]
        return (" " * indent + "  ".join(padded)).rstrip()

    rule = " " * indent + "  ".join("─" * w for w in widths)
    return "\n".join([render(table[0]), rule] + [render(line) for line in table[1:]])
