"""Aggregate coverage and the fail-under check.

Functions:
    total_coverage(dataset)                  -> float
    evaluate_threshold(dataset, fail_under)  -> ThresholdResult

Nothing here prints or exits; the CLI decides what a failed check does.
"""

from lcov_report.models import CoverageDataset, ThresholdResult


def total_coverage(dataset: CoverageDataset) -> float:
    """Covered lines over total lines across *dataset*, as a percentage.

    Returns 0.0 when the dataset has no lines at all.
    """
    total = sum(r.total_lines for r in dataset.values())
    covered = sum(r.covered_lines for r in dataset.values())
    if total == 0:
        return 0.0
    return covered * 100 / total


def evaluate_threshold(dataset: CoverageDataset, fail_under: float | None) -> ThresholdResult:
    """Compare total coverage with *fail_under*.

    Coverage exactly equal to the threshold passes. With no threshold the
    check always passes.
    """
    coverage = total_coverage(dataset)
    if fail_under is None:
        return ThresholdResult(coverage=coverage, fail_under=None, passed=True)

    if coverage >= fail_under:
        return ThresholdResult(coverage=coverage, fail_under=fail_under, passed=True)

    return ThresholdResult(
        coverage=coverage,
        fail_under=fail_under,
        passed=False,
        message=(
            f"Coverage {coverage:.2f}% is below the required threshold "
            f"of {fail_under:.2f}%"
        ),
    )
