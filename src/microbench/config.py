"""Benchmark configuration.

Handles:
- The entry and option value types handed to the runner.
- Validating options and entries before any measurement starts.
- Loading benchmark profiles from YAML files.
- Resolving ``module:attr`` targets into callables.
"""

from __future__ import annotations

import importlib
import importlib.util
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Sequence

import yaml

from microbench.units import DEFAULT_UNIT, UNITS, is_known_unit

log = logging.getLogger("microbench")


# ---------------------------------------------------------------------------
# Entries and options
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BenchmarkEntry:
    """One named unit of work.

    *fn* takes no arguments.  It may return a plain value or an
    awaitable; the runner waits for either.
    """

    name: str
    fn: Callable[[], Any]


@dataclass(frozen=True)
class BenchmarkOptions:
    """Iteration counts and output unit for a benchmark run."""

    iterations: int = 100  # Measured iterations per entry
    warmup: int = 10  # Unmeasured iterations before measuring
    unit: str = DEFAULT_UNIT  # "ns", "us", "ms" or "s"

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        return {
            "iterations": self.iterations,
            "warmup": self.warmup,
            "unit": self.unit,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BenchmarkOptions:
        """Deserialize from a dict, ignoring unknown fields."""
        known = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in data.items() if k in known}
        return cls(**filtered)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


@dataclass
class ValidationError:
    """A single configuration validation error."""

    field: str
    message: str
    severity: str = "error"  # "error" or "warning"


class InvalidConfigurationError(ValueError):
    """Raised when options or entries fail validation."""

    def __init__(self, errors: list[ValidationError]) -> None:
        self.errors = errors
        messages = [f"  {e.field}: {e.message}" for e in errors]
        super().__init__("Invalid benchmark configuration:\n" + "\n".join(messages))


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_options(
    options: BenchmarkOptions,
    entries: Sequence[BenchmarkEntry] = (),
) -> list[ValidationError]:
    """Validate options and entries.

    Returns a list of validation errors.  Empty list means valid.
    """
    errors: list[ValidationError] = []

    if not _is_int(options.iterations) or options.iterations <= 0:
        errors.append(
            ValidationError(
                field="iterations",
                message=f"Iterations must be a positive integer (got {options.iterations!r}).",
            )
        )

    if not _is_int(options.warmup) or options.warmup < 0:
        errors.append(
            ValidationError(
                field="warmup",
                message=f"Warmup iterations cannot be negative (got {options.warmup!r}).",
            )
        )

    if not is_known_unit(options.unit):
        errors.append(
            ValidationError(
                field="unit",
                message=(
                    f"Unknown unit {options.unit!r}; results will be reported "
                    f"in milliseconds. Known units: {', '.join(UNITS)}."
                ),
                severity="warning",
            )
        )

    for index, entry in enumerate(entries):
        name = entry.name
        if not isinstance(name, str) or not name.strip():
            errors.append(
                ValidationError(
                    field=f"entries[{index}].name",
                    message="Entry names must be non-empty.",
                )
            )
        if not callable(entry.fn):
            errors.append(
                ValidationError(
                    field=f"entries[{index}].fn",
                    message=f"Entry '{name}' is not callable.",
                )
            )

    return errors


def check_options(
    options: BenchmarkOptions,
    entries: Sequence[BenchmarkEntry] = (),
) -> None:
    """Validate, log warnings and raise on errors.

    Raises:
        InvalidConfigurationError: If any error-severity problem is found.
    """
    problems = validate_options(options, entries)
    for w in problems:
        if w.severity == "warning":
            log.warning("Config warning: %s: %s", w.field, w.message)
    fatal = [e for e in problems if e.severity == "error"]
    if fatal:
        raise InvalidConfigurationError(fatal)


# ---------------------------------------------------------------------------
# Target resolution
# ---------------------------------------------------------------------------


def resolve_target(target: str) -> Callable[[], Any]:
    """Resolve ``module:attr`` or ``path/to/file.py:attr`` to a callable.

    Dotted attribute paths (``module:Class.method``) are followed.

    Raises:
        ValueError: If the target is malformed, cannot be imported, or
            does not name a callable.
    """
    module_part, sep, attr_path = target.rpartition(":")
    if not sep or not module_part or not attr_path:
        raise ValueError(f"Target must look like 'module:function', got {target!r}")

    if module_part.endswith(".py"):
        module = _load_module_from_path(Path(module_part))
    else:
        try:
            module = importlib.import_module(module_part)
        except Exception as exc:
            raise ValueError(f"Cannot import module '{module_part}': {exc}") from exc

    obj: Any = module
    for part in attr_path.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as exc:
            raise ValueError(f"'{module_part}' has no attribute '{attr_path}'") from exc

    if not callable(obj):
        raise ValueError(f"Target {target!r} is not callable")
    return obj  # type: ignore[no-any-return]


def _load_module_from_path(path: Path) -> Any:
    """Import a Python source file as an anonymous module."""
    if not path.is_file():
        raise ValueError(f"Benchmark file not found: {path}")
    spec = importlib.util.spec_from_file_location(f"microbench_target_{path.stem}", path)
    if spec is None or spec.loader is None:
        raise ValueError(f"Cannot load benchmark file: {path}")
    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as exc:
        raise ValueError(f"Cannot load benchmark file {path}: {exc}") from exc
    return module


# ---------------------------------------------------------------------------
# YAML profile loading
# ---------------------------------------------------------------------------


def load_profile(profile_path: Path) -> dict[str, Any]:
    """Load a benchmark profile from a YAML file.

    Profile format::

        iterations: 50
        warmup: 5
        unit: us

        entries:
          - name: "list comprehension"
            target: "mypkg.benches:listcomp"
          - target: "benches/io.py:read_small"   # name defaults to attr

    Returns:
        The parsed YAML as a dict.
    """
    if not profile_path.exists():
        raise FileNotFoundError(f"Profile not found: {profile_path}")

    try:
        data = yaml.safe_load(profile_path.read_text())
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in profile {profile_path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ValueError(f"Profile must be a YAML mapping, got {type(data).__name__}")

    return data


def options_from_profile(
    profile_data: dict[str, Any],
    *,
    cli_overrides: dict[str, Any] | None = None,
) -> BenchmarkOptions:
    """Build BenchmarkOptions from a parsed profile.

    CLI overrides take precedence over profile values when they are
    not None.
    """
    cli = cli_overrides or {}
    defaults = BenchmarkOptions()

    def pick(key: str, default: Any) -> Any:
        if cli.get(key) is not None:
            return cli[key]
        return profile_data.get(key, default)

    return BenchmarkOptions(
        iterations=pick("iterations", defaults.iterations),
        warmup=pick("warmup", defaults.warmup),
        unit=pick("unit", defaults.unit),
    )


def entries_from_profile(profile_data: dict[str, Any]) -> list[BenchmarkEntry]:
    """Resolve the ``entries`` list of a parsed profile, in order."""
    raw_entries = profile_data.get("entries", [])
    if not isinstance(raw_entries, list):
        raise ValueError("Profile 'entries' must be a list of {name, target} mappings")

    entries: list[BenchmarkEntry] = []
    for index, item in enumerate(raw_entries):
        if isinstance(item, str):
            item = {"target": item}
        if not isinstance(item, dict) or "target" not in item:
            raise ValueError(f"Profile entry {index} must be a mapping with a 'target' key")
        target = str(item["target"])
        name = item.get("name") or default_entry_name(target)
        entries.append(BenchmarkEntry(name=name, fn=resolve_target(target)))
    return entries


def default_entry_name(target: str) -> str:
    """Display name for a target: the attribute path after the colon."""
    return target.rpartition(":")[2] or target
