"""Command-line interface for microbench.

Subcommands:
    microbench run    Benchmark callables named by module:function targets
    microbench show   Display a saved results file
"""

from __future__ import annotations

import logging
from pathlib import Path

import click

from microbench import __version__
from microbench.config import (
    BenchmarkEntry,
    InvalidConfigurationError,
    default_entry_name,
    entries_from_profile,
    load_profile,
    options_from_profile,
    resolve_target,
)
from microbench.logging import setup_logging
from microbench.units import UNITS

log = logging.getLogger("microbench")


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """microbench — time Python callables and summarise the results."""


# ---------------------------------------------------------------------------
# run
# ---------------------------------------------------------------------------


@main.command()
@click.argument("targets", nargs=-1)
@click.option(
    "--profile",
    "profile_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML profile listing entries and options.",
)
@click.option("--iterations", type=int, default=None, help="Measured iterations (default: 100).")
@click.option("--warmup", type=int, default=None, help="Warm-up iterations (default: 10).")
@click.option(
    "--unit",
    type=click.Choice(UNITS),
    default=None,
    help="Time unit for results (default: ms).",
)
@click.option("--title", type=str, default=None, help="Title for the results table.")
@click.option(
    "--markdown",
    "markdown_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write a Markdown table to this path.",
)
@click.option(
    "--json",
    "json_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Save full results (including every sample) as JSON.",
)
@click.option(
    "--csv",
    "csv_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write per-iteration samples as CSV.",
)
@click.option("-v", "--verbose", is_flag=True, help="Show debug output.")
@click.option(
    "--show-iterations",
    is_flag=True,
    help="Log every warm-up and measured iteration to the console.",
)
@click.option("-q", "--quiet", is_flag=True, help="Only show warnings and errors.")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Also log at DEBUG level to this file.",
)
def run(
    targets: tuple[str, ...],
    profile_path: Path | None,
    iterations: int | None,
    warmup: int | None,
    unit: str | None,
    title: str | None,
    markdown_path: Path | None,
    json_path: Path | None,
    csv_path: Path | None,
    verbose: bool,
    show_iterations: bool,
    quiet: bool,
    log_file: Path | None,
) -> None:
    """Benchmark one or more callables.

    Each TARGET is ``package.module:function`` or ``path/to/file.py:function``.
    Targets are run in the order given, after any entries from --profile.

    \b
    Examples:
        microbench run mypkg.benches:build_index --iterations 50 --unit us
        microbench run benches.py:parse benches.py:dump --markdown results.md
        microbench run --profile bench.yaml --json run.json
    """
    from microbench.display import format_results
    from microbench.export import export_csv, write_markdown
    from microbench.results import save_results
    from microbench.runner import BenchmarkRunner

    setup_logging(
        verbose=verbose,
        quiet=quiet,
        show_iterations=show_iterations,
        log_file=log_file,
    )

    cli_overrides: dict[str, object] = {
        "iterations": iterations,
        "warmup": warmup,
        "unit": unit,
    }

    entries: list[BenchmarkEntry] = []
    try:
        if profile_path:
            profile_data = load_profile(profile_path)
            options = options_from_profile(profile_data, cli_overrides=cli_overrides)
            entries.extend(entries_from_profile(profile_data))
        else:
            options = options_from_profile({}, cli_overrides=cli_overrides)
        for target in targets:
            entries.append(
                BenchmarkEntry(name=default_entry_name(target), fn=resolve_target(target))
            )
    except ValueError as exc:
        raise click.UsageError(str(exc)) from exc

    if not entries:
        raise click.UsageError("Nothing to benchmark. Pass TARGET arguments or --profile.")

    runner = BenchmarkRunner(options)
    try:
        results = runner.run_blocking(entries)
    except InvalidConfigurationError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc
    except KeyboardInterrupt:
        click.echo("\nBenchmark interrupted.", err=True)
        raise SystemExit(130)  # noqa: B904
    except Exception as exc:  # noqa: BLE001
        click.echo(f"Error: benchmarked function raised {type(exc).__name__}: {exc}", err=True)
        raise SystemExit(1) from exc

    click.echo()
    click.echo(format_results(results, title))

    if markdown_path:
        write_markdown(results, markdown_path, title)
    if json_path:
        save_results(json_path, results, runner.meta)
        log.info("Results saved to %s", json_path)
    if csv_path:
        csv_path.write_text(export_csv(results), encoding="utf-8")
        log.info("Samples written to %s", csv_path)


# ---------------------------------------------------------------------------
# show
# ---------------------------------------------------------------------------


@main.command("show")
@click.argument("results_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["table", "markdown", "csv", "summary-csv"]),
    default="table",
    show_default=True,
    help="Output format.",
)
@click.option(
    "--unit",
    type=click.Choice(UNITS),
    default=None,
    help="Re-express results in this unit.",
)
@click.option("--title", type=str, default=None, help="Title for table output.")
def show(results_file: Path, fmt: str, unit: str | None, title: str | None) -> None:
    """Display results from a saved JSON file.

    RESULTS_FILE is a file written by ``microbench run --json``.
    """
    from microbench.display import format_meta, format_results
    from microbench.export import export_csv, export_csv_summary, to_table
    from microbench.results import load_results

    try:
        meta, results = load_results(results_file)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc

    if unit:
        results = [r.converted(unit) for r in results]

    if fmt == "markdown":
        click.echo(to_table(results, title), nl=False)
    elif fmt == "csv":
        click.echo(export_csv(results), nl=False)
    elif fmt == "summary-csv":
        click.echo(export_csv_summary(results), nl=False)
    else:
        if meta is not None:
            click.echo(format_meta(meta))
            click.echo()
        click.echo(format_results(results, title))
