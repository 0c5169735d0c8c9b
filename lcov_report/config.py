"""Configuration loading and validation.

Usage:
    config = load()                              # .lcov-report.yaml if present, else defaults
    config = load("ci/lcov-report.yaml")         # raises ConfigError if missing or invalid
    config = config.with_overrides(summary=True) # CLI values win over file values
    generate_template(".lcov-report.yaml")       # writes example file to disk
"""

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path

import yaml

DEFAULT_CONFIG_PATH = ".lcov-report.yaml"
DEFAULT_INPUT_PATH = "coverage/lcov.info"

# YAML key -> ReportConfig field
_FILE_KEYS = {
    "input": "input_path",
    "output": "output_path",
    "exclude": "exclude_pattern",
    "uncovered_only": "uncovered_only",
    "fail_under": "fail_under",
    "summary": "summary",
    "no_filter": "no_filter",
}

_BOOL_FIELDS = ("uncovered_only", "summary", "no_filter")


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class ConfigError(Exception):
    """Raised when the configuration is missing or invalid."""


# ---------------------------------------------------------------------------
# Config dataclass
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ReportConfig:
    input_path: str = DEFAULT_INPUT_PATH
    output_path: str | None = None
    exclude_pattern: str | None = None
    uncovered_only: bool = False
    fail_under: float | None = None
    summary: bool = False
    no_filter: bool = False

    def with_overrides(self, **values) -> "ReportConfig":
        """Return a copy with every non-None value in *values* applied.

        Boolean flags can only be switched on: passing False keeps the
        current setting, since a CLI flag that was not given is False.

        Raises:
            ConfigError: if the merged configuration is invalid.
        """
        known = {f.name for f in fields(self)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ConfigError(f"Unknown configuration fields: {', '.join(unknown)}")

        changes = {}
        for name, value in values.items():
            if value is None:
                continue
            if name in _BOOL_FIELDS:
                value = bool(value) or getattr(self, name)
            elif name == "fail_under":
                value = _coerce_percentage(value)
            changes[name] = value

        merged = replace(self, **changes)
        _validate(merged)
        return merged


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------

def load(config_path: str | None = None) -> ReportConfig:
    """Load and validate configuration from a YAML file.

    With no *config_path*, ``.lcov-report.yaml`` is read when it exists and
    defaults are used otherwise. Environment variables LCOV_REPORT_INPUT and
    LCOV_REPORT_FAIL_UNDER override file values.

    Raises:
        ConfigError: if an explicit file is missing, the file is malformed,
                     or a value is invalid.
    """
    raw: dict = {}
    if config_path is not None:
        raw = _read_yaml(Path(config_path))
    elif Path(DEFAULT_CONFIG_PATH).exists():
        raw = _read_yaml(Path(DEFAULT_CONFIG_PATH))

    unknown = sorted(set(raw) - set(_FILE_KEYS))
    if unknown:
        raise ConfigError(
            f"Unknown keys in configuration: {', '.join(unknown)}. "
            f"Allowed: {', '.join(_FILE_KEYS)}"
        )

    values = {_FILE_KEYS[key]: value for key, value in raw.items() if value is not None}

    env_input = os.environ.get("LCOV_REPORT_INPUT")
    if env_input:
        values["input_path"] = env_input
    env_fail_under = os.environ.get("LCOV_REPORT_FAIL_UNDER")
    if env_fail_under:
        values["fail_under"] = env_fail_under

    if "fail_under" in values:
        values["fail_under"] = _coerce_percentage(values["fail_under"])
    for name in _BOOL_FIELDS:
        if name in values:
            values[name] = bool(values[name])

    config = ReportConfig(**values)
    _validate(config)
    return config


def _read_yaml(path: Path) -> dict:
    if not path.exists():
        raise ConfigError(f"Config file not found: '{path}'")

    try:
        with path.open(encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse '{path}': {exc}") from exc

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f"'{path}' must be a YAML mapping at the top level.")
    return raw


def _coerce_percentage(value):
    # Left as-is when not numeric so _validate can report it
    try:
        return float(value)
    except (TypeError, ValueError):
        return value


def _validate(config: ReportConfig) -> None:
    """Raise ConfigError listing every invalid field."""
    errors: list[str] = []

    if not config.input_path or not str(config.input_path).strip():
        errors.append("  - 'input' must be a non-empty path")

    if config.fail_under is not None:
        if isinstance(config.fail_under, bool) or not isinstance(config.fail_under, (int, float)):
            errors.append(f"  - 'fail_under' must be a number, got '{config.fail_under}'")
        elif not 0 <= config.fail_under <= 100:
            errors.append(
                f"  - 'fail_under' must be between 0 and 100, got {config.fail_under}"
            )

    if errors:
        raise ConfigError("Invalid configuration:\n" + "\n".join(errors))


# ---------------------------------------------------------------------------
# Template generator (used by `init` command)
# ---------------------------------------------------------------------------

TEMPLATE = """\
# lcov-report configuration. Command-line options take precedence.
input: "coverage/lcov.info"

# Write the report here instead of stdout
# output: "coverage/report.md"

# Skip files whose path matches this glob (* and ? wildcards)
# exclude: "**/test/**"

# Only consider files with at least one uncovered line
uncovered_only: false

# Exit with status 1 when total coverage is below this percentage
# fail_under: 80

# One line per file instead of code snippets
summary: false

# Keep braces, blank lines and annotations in the uncovered listing
no_filter: false
"""


def generate_template(output_path: str = DEFAULT_CONFIG_PATH) -> None:
    """Write a template config file to *output_path*.

    Raises:
        ConfigError: if the file already exists.
    """
    path = Path(output_path)
    if path.exists():
        raise ConfigError(
            f"'{output_path}' already exists. Remove it first or choose a different path."
        )
    path.write_text(TEMPLATE, encoding="utf-8")
