"""Condensed report: one line per partially covered file plus the total."""

from lcov_report.models import CoverageDataset
from lcov_report.reports.markdown import format_percentage, relative_path


def render_summary(dataset: CoverageDataset, *, cwd: str | None = None) -> str:
    """Return the summary report for *dataset*.

    Fully covered files are left out of the listing but still count toward
    the total line.
    """
    lines = [
        f"File '{relative_path(r.path, cwd)}' coverage: "
        f"{format_percentage(r.covered_lines, r.total_lines)}"
        for r in dataset.values()
        if r.covered_lines < r.total_lines
    ]

    total = sum(r.total_lines for r in dataset.values())
    covered = sum(r.covered_lines for r in dataset.values())
    lines.append(f"Total Coverage: {format_percentage(covered, total)}")
    return "\n".join(lines)
