"""
styleguide-lint

Editorial linter for Markdown style guides: checks that the table of
contents resolves, that no section is duplicated, and that Bad/Good code
samples are paired and written in current syntax. Also compares
near-duplicate revisions of the same guide.

Example:
    >>> from styleguide_lint import Linter, LintConfig
    >>> from pathlib import Path
    >>> report = Linter(LintConfig()).lint_paths([Path("README.md")])
    >>> report.has_failures()
    False
"""

__version__ = "0.1.0"

from styleguide_lint.config import LintConfig
from styleguide_lint.linter import Linter, LintReport, LintResult
from styleguide_lint.parser import ExampleExtractor, MarkdownParser
from styleguide_lint.revisions import compare_revisions, group_revisions
from styleguide_lint.rules import Severity, Violation

__all__ = [
    "LintConfig",
    "Linter",
    "LintReport",
    "LintResult",
    "MarkdownParser",
    "ExampleExtractor",
    "compare_revisions",
    "group_revisions",
    "Severity",
    "Violation",
    "__version__",
]
