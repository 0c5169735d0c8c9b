"""LCOV tracefile parsing.

Usage:
    text    = read_coverage_file("coverage/lcov.info")  # raises CoverageFileNotFoundError
    dataset = parse_lcov(text)                           # raises LcovParseError
    dataset = load_dataset("coverage/lcov.info")         # both of the above

Only ``SF:`` (source file) and ``DA:`` (line data) entries are used. Every
other record type (``TN:``, ``FN:``, ``BRDA:``, ``LF:``, ``end_of_record``...)
is skipped.
"""

from pathlib import Path

from lcov_report.models import CoverageDataset, CoverageRecord

_SOURCE_FILE_PREFIX = "SF:"
_LINE_DATA_PREFIX = "DA:"


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class LcovError(Exception):
    """Base exception for problems with the coverage input."""


class CoverageFileNotFoundError(LcovError):
    """Raised when the LCOV file does not exist."""


class LcovParseError(LcovError):
    """Raised on a ``DA:`` entry that cannot be parsed."""

    def __init__(self, message: str, line_number: int) -> None:
        super().__init__(f"line {line_number}: {message}")
        self.line_number = line_number


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def read_coverage_file(path: str) -> str:
    """Return the text of the LCOV file at *path*.

    Raises:
        CoverageFileNotFoundError: if the file does not exist.
        LcovError:                 if the file cannot be read or is not UTF-8.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise CoverageFileNotFoundError(
            f"'{path}' not found. Run your tests with coverage enabled first."
        )
    try:
        return file_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise LcovError(
            f"'{path}' is not valid UTF-8 (byte {exc.start}): not an LCOV tracefile?"
        ) from exc
    except OSError as exc:
        raise LcovError(f"Cannot read '{path}': {exc.strerror or exc}") from exc


def parse_lcov(text: str) -> CoverageDataset:
    """Parse LCOV *text* into a dataset keyed by source path.

    A second ``SF:`` block for a path already seen replaces the earlier one
    but keeps its position. ``DA:`` entries outside an ``SF:`` block are
    ignored. When a block lists the same line twice, the line is counted once
    and the last hit count wins; counting every entry would let a line be both
    covered and uncovered, breaking covered + uncovered == total.

    Raises:
        LcovParseError: if a ``DA:`` entry has missing or non-integer fields.
    """
    hits_by_path: dict[str, dict[int, int]] = {}
    current: dict[int, int] | None = None

    for index, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if line.startswith(_SOURCE_FILE_PREFIX):
            current = {}
            hits_by_path[line[len(_SOURCE_FILE_PREFIX):]] = current
        elif line.startswith(_LINE_DATA_PREFIX) and current is not None:
            line_number, hit_count = _parse_line_data(line, index)
            current[line_number] = hit_count

    return {path: _build_record(path, hits) for path, hits in hits_by_path.items()}


def load_dataset(path: str) -> CoverageDataset:
    """Read and parse the LCOV file at *path*."""
    return parse_lcov(read_coverage_file(path))


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _parse_line_data(line: str, index: int) -> tuple[int, int]:
    # DA:<line number>,<execution count>[,<checksum>]
    parts = line[len(_LINE_DATA_PREFIX):].split(",")
    if len(parts) < 2:
        raise LcovParseError(f"expected 'DA:<line>,<hits>', got '{line}'", index)
    try:
        return int(parts[0]), int(parts[1])
    except ValueError as exc:
        raise LcovParseError(f"non-integer field in '{line}'", index) from exc


def _build_record(path: str, hits: dict[int, int]) -> CoverageRecord:
    uncovered = tuple(sorted(n for n, count in hits.items() if count <= 0))
    return CoverageRecord(
        path=path,
        total_lines=len(hits),
        covered_lines=len(hits) - len(uncovered),
        uncovered_line_numbers=uncovered,
    )
