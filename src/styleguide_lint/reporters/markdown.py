"""
Markdown report renderer.

Renders ``report.md.j2`` from the template directory; when a custom
directory lacks the template the report is assembled inline.
"""

from datetime import datetime
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, TemplateNotFound, select_autoescape

from styleguide_lint.linter import LintReport
from styleguide_lint.logging import get_logger
from styleguide_lint.reporters.base import BaseReporter

logger = get_logger(__name__)

DEFAULT_TEMPLATE_DIR = Path(__file__).parent.parent / "templates"


class MarkdownReporter(BaseReporter):
    """Render a Markdown report with Jinja2.

    Features:
        - Summary table by severity
        - One section per file, violations as a Markdown table
        - Pipe characters in messages escaped for table cells

    Tags:
        - reporter
        - template
        - jinja2
    """

    format_name = "markdown"
    template_name = "report.md.j2"

    def __init__(self, template_dir: Path | None = None, include_timestamp: bool = True):
        self.template_dir = Path(template_dir) if template_dir else DEFAULT_TEMPLATE_DIR
        self.include_timestamp = include_timestamp
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape(['html', 'xml']),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters['cell'] = self._cell_filter

    def render(self, report: LintReport) -> str:
        metadata = self._get_metadata(report)
        try:
            template = self.env.get_template(self.template_name)
        except TemplateNotFound:
            logger.debug("template_missing", template=self.template_name, directory=str(self.template_dir))
            return self._render_inline(report, metadata)
        return template.render(report=report, results=report.results, **metadata)

    def _get_metadata(self, report: LintReport) -> dict[str, Any]:
        return {
            "generated_at": datetime.now() if self.include_timestamp else None,
            "summary": report.summary(),
        }

    @staticmethod
    def _cell_filter(value: Any) -> str:
        """Make a value safe for a Markdown table cell."""
        return str(value).replace("|", "\\|").replace("\n", " ")

    def _render_inline(self, report: LintReport, metadata: dict[str, Any]) -> str:
        """Render without template (fallback)."""
        summary = metadata["summary"]
        lines = ["# Style Guide Lint Report", ""]
        if metadata["generated_at"]:
            lines.extend([f"*Generated {metadata['generated_at'].strftime('%Y-%m-%d %H:%M')}*", ""])

        lines.extend([
            f"**{summary['files']}** file(s), **{summary['violations']}** violation(s)",
            "",
            "| Severity | Count |",
            "|---|---:|",
        ])
        for severity, count in summary["by_severity"].items():
            lines.append(f"| {severity} | {count} |")
        lines.append("")

        for result in report.results:
            if not (result.violations or result.errors):
                continue
            lines.extend([f"## `{result.path}`", ""])
            for error in result.errors:
                lines.append(f"- **tool error:** {self._cell_filter(error)}")
            if result.errors:
                lines.append("")
            if result.violations:
                lines.extend(["| Line | Severity | Rule | Message |", "|---:|---|---|---|"])
                for v in result.violations:
                    lines.append(
                        f"| {v.line} | {v.severity.value} | {v.rule_id} | {self._cell_filter(v.message)} |"
                    )
                lines.append("")

        return "\n".join(lines)
