"""Command-line interface for best-of.

Usage::

    best-of [options] -- command [args...]
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import click

from bestof import __version__
from bestof.bench.config import check_config, config_from_profile, load_profile
from bestof.bench.display import ProgressBar, format_results, stream_is_terminal
from bestof.bench.export import export_csv, export_json
from bestof.bench.runner import run_session
from bestof.bench.stats import PERCENTILE_METHODS
from bestof.formatting import UNITS, parse_duration
from bestof.logging import setup_logging


class DurationType(click.ParamType):
    """Click parameter type for delays such as ``250ms`` or ``1m30s``."""

    name = "duration"

    def convert(
        self,
        value: Any,
        param: click.Parameter | None,
        ctx: click.Context | None,
    ) -> float:
        if isinstance(value, float):
            return value
        try:
            return parse_duration(value)
        except ValueError as exc:
            self.fail(str(exc), param, ctx)


DURATION = DurationType()


@click.command(
    context_settings={
        "allow_interspersed_args": False,
        "help_option_names": ["-h", "--help"],
    }
)
@click.version_option(version=__version__, prog_name="best-of")
@click.argument("command", nargs=-1, type=click.UNPROCESSED)
@click.option(
    "-n",
    "--runs",
    type=int,
    default=None,
    help="Number of times to run the command. [default: 10]",
)
@click.option(
    "-c",
    "--concurrency",
    type=int,
    default=None,
    help="Number of commands to run in parallel. [default: 1]",
)
@click.option(
    "-o",
    "--unit",
    type=click.Choice(list(UNITS)),
    default=None,
    help="Output unit: m, s, ms, us or ns. [default: s]",
)
@click.option("-q", "--quiet", is_flag=True, default=False, help="Suppress output of the command.")
@click.option("-p", "--percentiles", is_flag=True, default=False, help="Print percentile values.")
@click.option(
    "-w",
    "--wait",
    type=DURATION,
    default=None,
    help="Wait time before each run, e.g. 250ms or 1s. [default: 0]",
)
@click.option(
    "--percentile-method",
    type=click.Choice(list(PERCENTILE_METHODS)),
    default=None,
    help="Percentile interpolation. [default: linear]",
)
@click.option("--progress", is_flag=True, default=False, help="Show progress bar.")
@click.option("--no-color", is_flag=True, default=False, help="Disable colored output.")
@click.option(
    "--json", "as_json", is_flag=True, default=False, help="Output results in JSON format."
)
@click.option("--csv", "as_csv", is_flag=True, default=False, help="Output results in CSV format.")
@click.option(
    "--profile",
    "profile_path",
    type=click.Path(path_type=Path),
    default=None,
    help="YAML profile with default settings.",
)
@click.option("-v", "--verbose", is_flag=True, default=False, help="Show debug logging.")
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Also write a DEBUG log to this file.",
)
@click.pass_context
def main(  # noqa: PLR0913
    ctx: click.Context,
    command: tuple[str, ...],
    runs: int | None,
    concurrency: int | None,
    unit: str | None,
    quiet: bool,
    percentiles: bool,
    wait: float | None,
    percentile_method: str | None,
    progress: bool,
    no_color: bool,
    as_json: bool,
    as_csv: bool,
    profile_path: Path | None,
    verbose: bool,
    log_file: Path | None,
) -> None:
    """best-of - Measure execution time of commands.

    Runs COMMAND repeatedly and reports the best, worst and average
    wall-clock time.

    \b
    Examples:
        best-of -n 5 -- grep -r "foo" .
        best-of -o ms -q -- curl https://example.com
        best-of -p -c 10 --progress -- find . -name "*.py"
    """
    if as_json and as_csv:
        raise click.UsageError("--json and --csv are mutually exclusive.")

    output_format = None
    if as_json:
        output_format = "json"
    elif as_csv:
        output_format = "csv"

    cli_overrides: dict[str, object] = {
        "command": list(command) or None,
        "trials": runs,
        "concurrency": concurrency,
        "delay_s": wait,
        "unit": unit,
        "percentile_method": percentile_method,
        "output_format": output_format,
        # Flags only override the profile when given.
        "quiet": quiet or None,
        "percentiles": percentiles or None,
        "progress": progress or None,
        "color": False if no_color else None,
    }

    try:
        profile_data = load_profile(profile_path) if profile_path else {}
        config = config_from_profile(profile_data, cli_overrides=cli_overrides)
    except (OSError, ValueError) as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc

    if not config.command:
        click.echo(ctx.get_help())
        return

    setup_logging(
        verbose=verbose,
        use_colors=config.color and stream_is_terminal(sys.stderr),
        log_file=log_file,
    )

    try:
        check_config(config)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc

    use_colors = config.color and stream_is_terminal()

    bar = None
    if config.progress:
        bar = ProgressBar(config.trials, use_colors=use_colors)
        bar.start()

    try:
        report = run_session(config, bar, validate=False)
    except KeyboardInterrupt:
        click.echo("\nBenchmark interrupted.", err=True)
        raise SystemExit(130)  # noqa: B904

    if config.output_format == "json":
        click.echo(export_json(report.results, config.unit))
    elif config.output_format == "csv":
        click.echo(export_csv(report.results, config.unit), nl=False)
    else:
        click.echo(
            format_results(report.results, config.unit, use_colors=use_colors),
            color=use_colors,
        )
