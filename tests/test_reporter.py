"""Tests for lcov_report/reporter.py — the full pipeline without disk access."""

import textwrap

import pytest

from lcov_report.config import ReportConfig
from lcov_report.parser import CoverageFileNotFoundError, LcovParseError
from lcov_report.reporter import generate_report, write_report
from lcov_report.sources import MemorySourceReader

CWD = "/work/app"

# File A: 10 lines, 7 covered, uncovered 3, 4, 8. File B: 5 lines, all covered.
SCENARIO = textwrap.dedent("""\
    SF:/work/app/lib/a.dart
    DA:1,1
    DA:2,1
    DA:3,0
    DA:4,0
    DA:5,2
    DA:6,1
    DA:7,1
    DA:8,0
    DA:9,1
    DA:10,1
    end_of_record
    SF:/work/app/lib/b.dart
    DA:1,1
    DA:2,1
    DA:3,1
    DA:4,1
    DA:5,1
    end_of_record
    SF:/work/app/test/a_test.dart
    DA:1,0
    DA:2,0
    end_of_record
    """)

A_SOURCE = "\n".join(f"line {n}" for n in range(1, 11))


def _run(config: ReportConfig, text: str = SCENARIO, files=None):
    files = files if files is not None else {"/work/app/lib/a.dart": A_SOURCE}
    return generate_report(
        config,
        source_reader=MemorySourceReader(files),
        read_input=lambda path: text,
        cwd=CWD,
    )


# ---------------------------------------------------------------------------
# Summary mode
# ---------------------------------------------------------------------------

def test_summary_two_file_scenario():
    config = ReportConfig(summary=True, exclude_pattern="**/test/**")
    result = _run(config)
    assert result.text == "File 'lib/a.dart' coverage: 70.0%\nTotal Coverage: 80.0%"
    assert result.coverage == 80.0


def test_summary_without_exclusion_includes_test_file():
    result = _run(ReportConfig(summary=True))
    assert "File 'test/a_test.dart' coverage: 0.0%" in result.text
    assert result.text.endswith("Total Coverage: 70.6%")


# ---------------------------------------------------------------------------
# Detailed mode
# ---------------------------------------------------------------------------

def test_detailed_report_sections():
    result = _run(ReportConfig(exclude_pattern="**/test/**"))
    text = result.text
    assert text.startswith("# LCOV Report\n\n## Total Coverage: 80.0%")
    assert "## File: lib/a.dart" in text
    assert "```dart\n   3: line 3\n   4: line 4\n```" in text
    assert "```dart\n   8: line 8\n```" in text
    assert "lib/b.dart" not in text


def test_detailed_report_noise_filter_toggle():
    files = {"/work/app/lib/a.dart": A_SOURCE.replace("line 4", "}")}
    filtered = _run(ReportConfig(exclude_pattern="**/test/**"), files=files)
    unfiltered = _run(ReportConfig(exclude_pattern="**/test/**", no_filter=True), files=files)
    assert "   4: }" not in filtered.text
    assert "   4: }" in unfiltered.text


def test_fully_covered_after_exclusion():
    text = "SF:/work/app/lib/b.dart\nDA:1,1\nend_of_record\nSF:/work/app/test/t.dart\nDA:1,0\n"
    result = _run(ReportConfig(exclude_pattern="**/test/**"), text=text)
    assert "Code fully covered!" in result.text
    assert result.coverage == 100.0


# ---------------------------------------------------------------------------
# Uncovered-only and total accounting
# ---------------------------------------------------------------------------

def test_uncovered_only_removes_covered_files_from_total():
    config = ReportConfig(summary=True, exclude_pattern="**/test/**", uncovered_only=True)
    result = _run(config)
    # b.dart no longer counts: 7 / 10 instead of 12 / 15
    assert result.text == "File 'lib/a.dart' coverage: 70.0%\nTotal Coverage: 70.0%"
    assert result.coverage == 70.0
    assert result.reported_files == 1
    assert result.parsed_files == 3


def test_uncovered_only_changes_threshold_outcome():
    base = ReportConfig(summary=True, exclude_pattern="**/test/**", fail_under=75)
    assert _run(base).threshold.passed
    assert not _run(base.with_overrides(uncovered_only=True)).threshold.passed


# ---------------------------------------------------------------------------
# Threshold
# ---------------------------------------------------------------------------

def test_threshold_result_attached():
    result = _run(ReportConfig(exclude_pattern="**/test/**", fail_under=80))
    assert result.threshold.passed
    assert result.threshold.fail_under == 80


def test_below_threshold_still_renders_report():
    result = _run(ReportConfig(fail_under=90))
    assert not result.threshold.passed
    assert "## File: lib/a.dart" in result.text


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

def test_missing_input_propagates(tmp_path):
    config = ReportConfig(input_path=str(tmp_path / "missing.info"))
    with pytest.raises(CoverageFileNotFoundError):
        generate_report(config, source_reader=MemorySourceReader())


def test_malformed_input_propagates():
    with pytest.raises(LcovParseError):
        _run(ReportConfig(), text="SF:a.dart\nDA:x,1\n")


def test_reads_configured_input_path():
    seen = []

    def read_input(path):
        seen.append(path)
        return ""

    generate_report(ReportConfig(input_path="ci/lcov.info"), read_input=read_input,
                    source_reader=MemorySourceReader())
    assert seen == ["ci/lcov.info"]


# ---------------------------------------------------------------------------
# write_report()
# ---------------------------------------------------------------------------

def test_write_report_creates_parent_directories(tmp_path):
    out = tmp_path / "reports" / "coverage.md"
    write_report("# LCOV Report", str(out))
    assert out.read_text(encoding="utf-8") == "# LCOV Report\n"
