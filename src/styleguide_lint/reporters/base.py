"""
Base reporter for lint output.

Reporters turn a LintReport into text: a rich console table for people,
JSON for tools, Markdown for pull-request comments. They read the report
and never modify it.
"""

from abc import ABC, abstractmethod
from typing import TextIO

from styleguide_lint.linter import LintReport


class BaseReporter(ABC):
    """Base class for report formats.

    Subclasses set ``format_name`` and implement ``render``.
    """

    format_name: str = ""

    @abstractmethod
    def render(self, report: LintReport) -> str:
        """Render the report as a string."""

    def write(self, report: LintReport, stream: TextIO) -> None:
        """Render the report into an open text stream."""
        content = self.render(report)
        stream.write(content)
        if not content.endswith("\n"):
            stream.write("\n")
