"""Detailed Markdown report.

Functions:
    format_percentage(covered, total)  -> str
    relative_path(path, cwd=None)      -> str
    detect_language(path)              -> str
    render_markdown(dataset, source_reader, ...) -> str

Layout::

    # LCOV Report

    ## Total Coverage: 80.0%

    ## File: lib/todo.dart

    ### Coverage: 70.0% (7/10)

    ### Uncovered Lines:

    ```dart
       3:   if (title.isEmpty) {
       4:     throw ArgumentError('empty');
    ```
"""

import os

from lcov_report.filters import filter_noise
from lcov_report.grouping import group_consecutive
from lcov_report.models import CoverageDataset, CoverageRecord
from lcov_report.sources import SourceReader

TITLE = "# LCOV Report"
FULLY_COVERED_NOTICE = "**Code fully covered!**"
LINE_NOT_FOUND = "[Line not found]"

# --------------------------------------------------------------------------- #
# Extension -> fenced code block language
# --------------------------------------------------------------------------- #

_EXTENSION_LANGUAGES: dict[str, str] = {
    "dart": "dart",
    "js": "javascript",
    "jsx": "javascript",
    "ts": "typescript",
    "tsx": "typescript",
    "py": "python",
    "java": "java",
    "kt": "kotlin",
    "swift": "swift",
    "c": "c",
    "h": "c",
    "cpp": "cpp",
    "cc": "cpp",
    "cxx": "cpp",
    "hpp": "cpp",
    "cs": "csharp",
    "go": "go",
    "rs": "rust",
    "php": "php",
    "rb": "ruby",
    "scala": "scala",
    "sh": "bash",
    "bash": "bash",
    "zsh": "bash",
    "ps1": "powershell",
    "sql": "sql",
    "html": "html",
    "css": "css",
    "scss": "scss",
    "sass": "sass",
    "less": "less",
    "xml": "xml",
    "json": "json",
    "yaml": "yaml",
    "yml": "yaml",
    "toml": "toml",
    "md": "markdown",
    "dockerfile": "dockerfile",
}

_DEFAULT_LANGUAGE = "text"


# --------------------------------------------------------------------------- #
# Helpers
# --------------------------------------------------------------------------- #

def format_percentage(covered: int, total: int) -> str:
    """Return ``"85.0%"`` style text, or ``"N/A"`` when *total* is zero."""
    if total == 0:
        return "N/A"
    return f"{covered * 100 / total:.1f}%"


def relative_path(path: str, cwd: str | None = None) -> str:
    """Strip the working directory prefix from *path* and use forward slashes."""
    base = (cwd if cwd is not None else os.getcwd()).rstrip("/\\")
    result = path
    if base and path.startswith(base) and path[len(base):len(base) + 1] in ("/", "\\"):
        result = path[len(base) + 1:]
    return result.replace("\\", "/")


def detect_language(path: str) -> str:
    """Return the code block language for *path* based on its extension."""
    name = path.replace("\\", "/").rsplit("/", 1)[-1]
    extension = name.rsplit(".", 1)[-1].lower()
    return _EXTENSION_LANGUAGES.get(extension, _DEFAULT_LANGUAGE)


def _code_block(group: list[int], source_lines: list[str] | None, language: str) -> str:
    lines = source_lines or []
    rendered = []
    for number in group:
        code = lines[number - 1] if 0 < number <= len(lines) else LINE_NOT_FOUND
        rendered.append(f"{number:>4}: {code}")
    return f"```{language}\n" + "\n".join(rendered) + "\n```"


def _file_section(
    record: CoverageRecord,
    line_numbers: list[int],
    source_lines: list[str] | None,
    cwd: str | None,
) -> list[str]:
    language = detect_language(record.path)
    parts = [
        f"## File: {relative_path(record.path, cwd)}",
        f"### Coverage: {format_percentage(record.covered_lines, record.total_lines)}"
        f" ({record.covered_lines}/{record.total_lines})",
        "### Uncovered Lines:",
    ]
    parts.extend(
        _code_block(group, source_lines, language)
        for group in group_consecutive(line_numbers)
    )
    return parts


# --------------------------------------------------------------------------- #
# Public API
# --------------------------------------------------------------------------- #

def render_markdown(
    dataset: CoverageDataset,
    source_reader: SourceReader,
    *,
    apply_noise_filter: bool = True,
    cwd: str | None = None,
) -> str:
    """Render the detailed report for *dataset*.

    Each record with uncovered lines gets a section with one code block per
    run of consecutive lines. Sources are only read for those records. When
    the noise filter leaves a record with nothing to show, the record is
    skipped; when no record is left, the fully covered notice is shown.
    """
    total = sum(r.total_lines for r in dataset.values())
    covered = sum(r.covered_lines for r in dataset.values())
    blocks = [TITLE, f"## Total Coverage: {format_percentage(covered, total)}"]

    sections: list[str] = []
    for record in dataset.values():
        if record.is_fully_covered:
            continue

        source_lines = source_reader.read_lines(record.path)
        line_numbers = list(record.uncovered_line_numbers)
        if apply_noise_filter:
            line_numbers = filter_noise(line_numbers, source_lines)
        if not line_numbers:
            continue

        sections.extend(_file_section(record, line_numbers, source_lines, cwd))

    blocks.extend(sections or [FULLY_COVERED_NOTICE])
    return "\n\n".join(blocks).rstrip()
