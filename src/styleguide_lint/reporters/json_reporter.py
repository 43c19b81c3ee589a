"""JSON reporter."""

import json

from styleguide_lint.linter import LintReport
from styleguide_lint.reporters.base import BaseReporter


class JsonReporter(BaseReporter):
    """Stable JSON: ``{"files": [...], "summary": {...}}``."""

    format_name = "json"

    def __init__(self, indent: int | None = 2):
        self.indent = indent

    def render(self, report: LintReport) -> str:
        return json.dumps(report.to_dict(), indent=self.indent, ensure_ascii=False)
