"""Turn LCOV coverage data into a Markdown report."""

__version__ = "1.0.0"
