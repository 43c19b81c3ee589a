"""Console reporter built on rich."""

import io
from typing import TextIO

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from styleguide_lint.linter import LintReport, LintResult
from styleguide_lint.reporters.base import BaseReporter

SEVERITY_STYLES = {
    "error": "bold red",
    "warning": "yellow",
    "info": "cyan",
}

SEVERITY_ICONS = {
    "error": "❌",
    "warning": "⚠️ ",
    "info": "ℹ️ ",
}


class TextReporter(BaseReporter):
    """One rich table per file with violations, then a summary line."""

    format_name = "text"

    def __init__(self, show_clean: bool = False):
        self.show_clean = show_clean

    def render(self, report: LintReport) -> str:
        buffer = io.StringIO()
        self._print(report, Console(file=buffer, width=120, no_color=True, highlight=False))
        return buffer.getvalue()

    def write(self, report: LintReport, stream: TextIO) -> None:
        self._print(report, Console(file=stream, highlight=False))

    def _print(self, report: LintReport, console: Console) -> None:
        for result in report.results:
            if result.violations or result.errors:
                self._print_result(result, console)
            elif self.show_clean:
                console.print(f"[green]✅ {escape(result.path)}[/green]")

        counts = report.count_by_severity()
        summary = ", ".join(f"{count} {severity}" for severity, count in counts.items())
        if report.has_failures("info"):
            console.print(
                f"[bold]{len(report.results)} file(s) checked:[/bold] {summary}"
                + (f", {len(report.errors)} tool error(s)" if report.errors else "")
            )
        else:
            console.print(f"[bold green]✅ {len(report.results)} file(s) checked, no problems found[/bold green]")

    def _print_result(self, result: LintResult, console: Console) -> None:
        console.print(f"\n[bold blue]📄 {escape(result.path)}[/bold blue]")

        for error in result.errors:
            console.print(f"  [red]tool error:[/red] {escape(error)}")

        if not result.violations:
            return

        table = Table(show_header=True, header_style="bold")
        table.add_column("Line", justify="right")
        table.add_column("Severity")
        table.add_column("Rule", style="cyan")
        table.add_column("Message")

        for violation in result.violations:
            severity = violation.severity.value
            location = str(violation.line)
            if violation.column:
                location = f"{location}:{violation.column}"
            table.add_row(
                location,
                f"[{SEVERITY_STYLES[severity]}]{SEVERITY_ICONS[severity]} {severity}[/]",
                violation.rule_id,
                escape(violation.message),
            )

        console.print(table)
