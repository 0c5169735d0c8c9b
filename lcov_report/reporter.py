"""Report pipeline for one run.

Usage:
    result = generate_report(config)          # ReportResult(text, coverage, threshold)
    if config.output_path:
        write_report(result.text, config.output_path)

File access is injectable: *read_input* returns the LCOV text for a path and
*source_reader* supplies source lines, so tests can run without a disk.
"""

from collections.abc import Callable
from pathlib import Path

from lcov_report.config import ReportConfig
from lcov_report.filters import apply_policy
from lcov_report.models import ReportResult
from lcov_report.parser import parse_lcov, read_coverage_file
from lcov_report.reports.markdown import render_markdown
from lcov_report.reports.summary import render_summary
from lcov_report.sources import FileSourceReader, SourceReader
from lcov_report.threshold import evaluate_threshold


def generate_report(
    config: ReportConfig,
    *,
    source_reader: SourceReader | None = None,
    read_input: Callable[[str], str] = read_coverage_file,
    cwd: str | None = None,
) -> ReportResult:
    """Parse, filter and render the coverage data named by *config*.

    Raises:
        CoverageFileNotFoundError: if the input file does not exist.
        LcovParseError:            if the input contains a malformed entry.
    """
    parsed = parse_lcov(read_input(config.input_path))
    dataset = apply_policy(parsed, config)

    if config.summary:
        text = render_summary(dataset, cwd=cwd)
    else:
        text = render_markdown(
            dataset,
            source_reader if source_reader is not None else FileSourceReader(),
            apply_noise_filter=not config.no_filter,
            cwd=cwd,
        )

    threshold = evaluate_threshold(dataset, config.fail_under)
    return ReportResult(
        text=text,
        coverage=threshold.coverage,
        threshold=threshold,
        parsed_files=len(parsed),
        reported_files=len(dataset),
    )


def write_report(text: str, output_path: str) -> None:
    """Write *text* to *output_path*, creating parent directories."""
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text + "\n", encoding="utf-8")
