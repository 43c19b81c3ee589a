"""
Reporters module for lint output.

Provides the console, JSON and Markdown report formats and a factory
to pick one by name.
"""

from styleguide_lint.errors import UnknownReporterError
from styleguide_lint.reporters.base import BaseReporter
from styleguide_lint.reporters.json_reporter import JsonReporter
from styleguide_lint.reporters.markdown import MarkdownReporter
from styleguide_lint.reporters.text import TextReporter

REPORTERS: dict[str, type[BaseReporter]] = {
    "text": TextReporter,
    "json": JsonReporter,
    "markdown": MarkdownReporter,
}


def get_reporter(name: str, **kwargs) -> BaseReporter:
    """Instantiate the reporter registered under ``name``."""
    try:
        reporter_class = REPORTERS[name.lower()]
    except KeyError:
        raise UnknownReporterError(name, sorted(REPORTERS)) from None
    return reporter_class(**kwargs)


__all__ = [
    "BaseReporter",
    "TextReporter",
    "JsonReporter",
    "MarkdownReporter",
    "REPORTERS",
    "get_reporter",
]
