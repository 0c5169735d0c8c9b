"""Access to the source files named in the coverage data.

Usage:
    reader = FileSourceReader()                  # reads from disk, relative to cwd
    lines  = reader.read_lines("lib/main.dart")  # list of lines, or None if unreadable

    reader = MemorySourceReader({"lib/main.dart": "void main() {\\n}\\n"})

Rendering and noise filtering only depend on the ``read_lines`` method, so
any object providing it can be passed to the report pipeline.
"""

import warnings
from pathlib import Path
from typing import Protocol


class SourceReader(Protocol):
    def read_lines(self, path: str) -> list[str] | None:
        """Return the lines of *path*, or None when it cannot be read."""


# ---------------------------------------------------------------------------
# Readers
# ---------------------------------------------------------------------------

class FileSourceReader:
    """Read source files from disk, caching each file for the run."""

    def __init__(self, root: str | None = None) -> None:
        self._root = Path(root) if root else None
        self._cache: dict[str, list[str] | None] = {}

    def read_lines(self, path: str) -> list[str] | None:
        if path not in self._cache:
            self._cache[path] = self._load(path)
        return self._cache[path]

    def _load(self, path: str) -> list[str] | None:
        file_path = Path(path)
        if self._root is not None and not file_path.is_absolute():
            file_path = self._root / file_path
        try:
            text = file_path.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            warnings.warn(
                f"Cannot read source file '{file_path}': {exc.strerror or exc}. "
                "Its uncovered lines are listed without source text.",
                UserWarning,
                stacklevel=3,
            )
            return None
        return text.splitlines()


class MemorySourceReader:
    """Serve source text from a ``{path: text}`` mapping.

    Test support: lets the pipeline and renderers run without a disk, and
    records every requested path in ``requested``. Also usable by callers
    that already hold the sources in memory.
    """

    def __init__(self, files: dict[str, str] | None = None) -> None:
        self._files = dict(files or {})
        self.requested: list[str] = []

    def read_lines(self, path: str) -> list[str] | None:
        self.requested.append(path)
        text = self._files.get(path)
        return None if text is None else text.splitlines()
