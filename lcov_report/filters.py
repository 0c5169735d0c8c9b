"""Dataset and line filters.

Policy filters work on the whole dataset and return a new one:
    exclude_records(dataset, pattern)    drop paths matching a glob
    keep_uncovered_only(dataset)         drop fully covered records
    apply_policy(dataset, config)        both, in that order

The noise filter works on one file's uncovered lines:
    filter_noise(line_numbers, source_lines)
"""

import re

from lcov_report.config import ReportConfig
from lcov_report.models import CoverageDataset

# --------------------------------------------------------------------------- #
# Path patterns
# --------------------------------------------------------------------------- #

# Splits a glob into literal runs and the wildcard tokens between them
_GLOB_TOKEN_RE = re.compile(r"(\*|\?|\[[^\]]*\])")


def glob_to_regex(pattern: str) -> re.Pattern | None:
    """Translate a glob into a compiled full-path expression.

    ``*`` matches any run of characters (``**`` behaves the same), ``?``
    exactly one, and ``[ab]`` / ``[!ab]`` a character class. Every other
    character is literal, except an unclosed ``[``, which makes the result
    fail to compile. Returns None when the result does not compile.
    """
    parts = []
    for index, token in enumerate(_GLOB_TOKEN_RE.split(pattern)):
        if index % 2 == 0:
            parts.append("".join(c if c == "[" else re.escape(c) for c in token))
        elif token == "*":
            parts.append(".*")
        elif token == "?":
            parts.append(".")
        else:
            body = token[1:-1]
            if body.startswith("!"):
                body = "^" + body[1:]
            parts.append(f"[{body}]")
    try:
        return re.compile("".join(parts))
    except re.error:
        return None


def matches_pattern(path: str, pattern: str) -> bool:
    """Return True if *path* matches the glob *pattern*.

    Falls back to a plain substring test when the pattern is not a valid
    expression once translated.
    """
    regex = glob_to_regex(pattern)
    if regex is None:
        return pattern in path
    return regex.fullmatch(path) is not None


# --------------------------------------------------------------------------- #
# Policy filter
# --------------------------------------------------------------------------- #

def exclude_records(dataset: CoverageDataset, pattern: str | None) -> CoverageDataset:
    if not pattern:
        return dict(dataset)
    return {
        path: record for path, record in dataset.items()
        if not matches_pattern(path, pattern)
    }


def keep_uncovered_only(dataset: CoverageDataset) -> CoverageDataset:
    return {
        path: record for path, record in dataset.items()
        if not record.is_fully_covered
    }


def apply_policy(dataset: CoverageDataset, config: ReportConfig) -> CoverageDataset:
    """Apply the exclusion pattern, then the uncovered-only flag.

    Records removed here are gone for every later stage, including the total
    coverage figure and the fail-under check.
    """
    filtered = exclude_records(dataset, config.exclude_pattern)
    if config.uncovered_only:
        filtered = keep_uncovered_only(filtered)
    return filtered


# --------------------------------------------------------------------------- #
# Noise filter
# --------------------------------------------------------------------------- #

_NOISE_PATTERNS: list[re.Pattern] = [
    # Empty or punctuation only: "}", "});", "],", ")"
    re.compile(r"[{}()\[\];,]*"),
    # Comment only; "#" needs a space or "!" after it so "#define" is code
    re.compile(r"(//|/\*|\*/).*|#([\s!].*)?"),
    # Keyword with nothing but braces around it: "} else {", "try {"
    re.compile(r"\}?\s*(else|try|finally|do)\s*\{?:?"),
    # No-op annotations
    re.compile(
        r"@(override|Override|visibleForTesting|protected|mustCallSuper|"
        r"immutable|deprecated|Deprecated|nonVirtual)"
    ),
    re.compile(r"@(SuppressWarnings|pragma)\(.*\)"),
]


def is_noise_line(source_line: str) -> bool:
    """Return True if *source_line* is not worth reporting as uncovered."""
    stripped = source_line.strip()
    return any(p.fullmatch(stripped) for p in _NOISE_PATTERNS)


def filter_noise(line_numbers, source_lines: list[str] | None) -> list[int]:
    """Drop line numbers whose source text is noise.

    Lines past the end of the file, and every line when *source_lines* is
    None (unreadable file), are kept.
    """
    if source_lines is None:
        return list(line_numbers)
    return [
        n for n in line_numbers
        if not (0 < n <= len(source_lines) and is_noise_line(source_lines[n - 1]))
    ]
