"""CLI entry point — command definitions using Click.

Commands:
    init      Generate a template config file
    report    Markdown (or summary) coverage report from an LCOV file

Exit status is 0 on success and 1 when the input is missing or malformed,
the configuration is invalid, or coverage is below --fail-under.
"""

import sys

import click

from lcov_report import __version__


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _verbose(ctx: click.Context, message: str) -> None:
    if ctx.obj["verbose"]:
        click.echo(f"[verbose] {message}", err=True)


def _make_config(ctx: click.Context, **overrides):
    """Load the config file and apply command-line values. Exits on error."""
    from lcov_report.config import ConfigError, load

    try:
        config = load(ctx.obj["config_path"]).with_overrides(**overrides)
    except ConfigError as exc:
        click.echo(f"Configuration error: {exc}", err=True)
        sys.exit(1)

    _verbose(ctx, f"Configuration: {config}")
    return config


def _emit_report(text: str, output_path: str | None) -> None:
    """Write the report to stdout or to *output_path*."""
    from lcov_report.reporter import write_report

    if output_path:
        write_report(text, output_path)
        click.echo(f"Report written to '{output_path}'", err=True)
    else:
        click.echo(text)


def _handle_input_errors(func):
    """Decorator that catches coverage input errors and exits cleanly."""
    import functools

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        from lcov_report.parser import (
            CoverageFileNotFoundError,
            LcovError,
            LcovParseError,
        )

        try:
            return func(*args, **kwargs)
        except CoverageFileNotFoundError as exc:
            click.echo(f"Error: {exc}", err=True)
            sys.exit(1)
        except LcovParseError as exc:
            click.echo(f"Parse error: {exc}", err=True)
            sys.exit(1)
        except LcovError as exc:
            click.echo(f"Coverage input error: {exc}", err=True)
            sys.exit(1)

    return wrapper


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------

@click.group()
@click.option("--config", "config_path", default=None,
              help="Path to a YAML config file (default: .lcov-report.yaml if present).")
@click.option("-v", "--verbose", is_flag=True, default=False,
              help="Show additional command output on stderr.")
@click.version_option(__version__, prog_name="lcov-report")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, verbose: bool) -> None:
    """LCOV report tool — turn lcov.info into a Markdown coverage report."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["verbose"] = verbose


# ---------------------------------------------------------------------------
# init
# ---------------------------------------------------------------------------

@cli.command("init")
@click.option("--output", "output_path", default=".lcov-report.yaml", show_default=True,
              help="Path where the template config file will be written.")
def init_command(output_path: str) -> None:
    """Generate a template .lcov-report.yaml file."""
    from lcov_report.config import ConfigError, generate_template
    try:
        generate_template(output_path)
        click.echo(f"Template written to '{output_path}'.")
    except ConfigError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)


# ---------------------------------------------------------------------------
# report
# ---------------------------------------------------------------------------

@cli.command("report")
@click.option("-i", "--input", "input_path", default=None,
              help="Input LCOV file path (default: coverage/lcov.info).")
@click.option("-o", "--output", "output_path", default=None,
              help="Write the report to a file instead of stdout.")
@click.option("-e", "--exclude", "exclude_pattern", default=None,
              help="Exclude files whose path matches this glob, e.g. '**/test/**'.")
@click.option("--uncovered-only", is_flag=True, default=False,
              help="Only consider files with uncovered lines, also for the total.")
@click.option("-f", "--fail-under", default=None,
              help="Exit with status 1 if total coverage is below this percentage.")
@click.option("-s", "--summary", is_flag=True, default=False,
              help="One line per file instead of code snippets.")
@click.option("--no-filter", is_flag=True, default=False,
              help="Keep braces, blank lines and annotations among uncovered lines.")
@click.pass_context
@_handle_input_errors
def report_command(
    ctx: click.Context,
    input_path: str | None,
    output_path: str | None,
    exclude_pattern: str | None,
    uncovered_only: bool,
    fail_under: str | None,
    summary: bool,
    no_filter: bool,
) -> None:
    """Generate a coverage report from an LCOV file."""
    from lcov_report.reporter import generate_report

    config = _make_config(
        ctx,
        input_path=input_path,
        output_path=output_path,
        exclude_pattern=exclude_pattern,
        uncovered_only=uncovered_only,
        fail_under=fail_under,
        summary=summary,
        no_filter=no_filter,
    )

    _verbose(ctx, f"Reading coverage data from '{config.input_path}'")
    result = generate_report(config)
    _verbose(
        ctx,
        f"{result.parsed_files} file(s) parsed, {result.reported_files} after filtering, "
        f"total coverage {result.coverage:.2f}%",
    )

    _emit_report(result.text, config.output_path)

    if not result.threshold.passed:
        click.echo(f"Error: {result.threshold.message}", err=True)
        sys.exit(1)
