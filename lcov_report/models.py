"""Data models for LCOV reports.

Contains the dataclasses passed between pipeline stages:
    - CoverageRecord    one per source file in the LCOV input
    - CoverageDataset   ordered mapping of path -> CoverageRecord
    - ThresholdResult   outcome of the fail-under check
    - ReportResult      rendered text plus the numbers the CLI needs
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class CoverageRecord:
    path: str
    total_lines: int = 0
    covered_lines: int = 0
    uncovered_line_numbers: tuple[int, ...] = ()

    @property
    def uncovered_count(self) -> int:
        return len(self.uncovered_line_numbers)

    @property
    def is_fully_covered(self) -> bool:
        return not self.uncovered_line_numbers


#: Insertion order is the order in which paths first appear in the input.
CoverageDataset = dict[str, CoverageRecord]


@dataclass(frozen=True)
class ThresholdResult:
    coverage: float
    fail_under: float | None
    passed: bool
    message: str = ""


@dataclass(frozen=True)
class ReportResult:
    text: str
    coverage: float
    threshold: ThresholdResult
    parsed_files: int = 0
    reported_files: int = 0
