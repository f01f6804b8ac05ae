"""Logging setup for microbench.

The console shows one line per finished benchmark entry.  The runner also
emits a DEBUG line for every warm-up and measured iteration; those are
tagged with :data:`ITERATION_EXTRA` and only reach the console when
*show_iterations* is set.  A log file, when given, receives everything.
"""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "microbench"
_FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
_CONSOLE_FORMAT = "%(levelname)-8s %(message)s"

# Pass as ``extra=`` on per-iteration progress records.
ITERATION_EXTRA = {"bench_iteration": True}


class IterationFilter(logging.Filter):
    """Drop per-iteration progress records unless *show* is true."""

    def __init__(self, show: bool = False) -> None:
        super().__init__()
        self.show = show

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "bench_iteration", False):
            return self.show
        return True


def setup_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    show_iterations: bool = False,
    log_file: Path | None = None,
) -> logging.Logger:
    """Configure and return the ``microbench`` logger.

    Args:
        verbose: Console shows DEBUG records (per-iteration lines excepted).
        quiet: Console shows warnings and errors only.  Loses to *verbose*
            and *show_iterations*.
        show_iterations: Console shows every warm-up and measured iteration.
        log_file: Also write every record, iterations included, to this path.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(logging.DEBUG)

    # Handlers from an earlier call (same process, e.g. repeated CLI runs)
    # may hold open files.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    if verbose or show_iterations:
        console.setLevel(logging.DEBUG)
    elif quiet:
        console.setLevel(logging.WARNING)
    else:
        console.setLevel(logging.INFO)
    console.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    console.addFilter(IterationFilter(show=show_iterations))
    logger.addHandler(console)

    if log_file is not None:
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(fh)

    return logger
