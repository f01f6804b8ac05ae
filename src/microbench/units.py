"""Time unit scaling.

All samples are recorded in milliseconds.  ``scale_factor`` maps a unit
tag to the multiplier that converts a millisecond value into that unit.
"""

from __future__ import annotations

import logging

log = logging.getLogger("microbench")

DEFAULT_UNIT = "ms"

_FACTORS: dict[str, float] = {
    "ns": 1e6,
    "us": 1e3,
    "ms": 1.0,
    "s": 1e-3,
}

_LABELS: dict[str, str] = {
    "ns": "nanoseconds",
    "us": "microseconds",
    "ms": "milliseconds",
    "s": "seconds",
}

UNITS: tuple[str, ...] = tuple(_FACTORS)


def is_known_unit(unit: str) -> bool:
    """Return True if *unit* is one of the recognised tags."""
    return unit in _FACTORS


def scale_factor(unit: str) -> float:
    """Return the multiplier from milliseconds to *unit*.

    Unrecognised tags scale like milliseconds (factor 1) instead of
    raising; the unit only affects presentation.
    """
    try:
        return _FACTORS[unit]
    except (KeyError, TypeError):
        log.debug("Unknown time unit %r, using milliseconds", unit)
        return 1.0


def unit_label(unit: str) -> str:
    """Long human-readable name for *unit*, or the tag itself."""
    return _LABELS.get(unit, unit)
