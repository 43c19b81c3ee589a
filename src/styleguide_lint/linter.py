"""
Linter: runs the rule table over style-guide documents.

Example:
    >>> linter = Linter(LintConfig.discover(Path(".")))
    >>> report = linter.lint_paths([Path("README.md")])
    >>> report.count_by_severity()
    {'error': 2, 'warning': 5, 'info': 1}
"""

import re
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable

from styleguide_lint.config import LintConfig
from styleguide_lint.document import Document
from styleguide_lint.errors import DocumentError, RuleExecutionError
from styleguide_lint.logging import LogContext, get_logger
from styleguide_lint.parser.markdown_parser import MarkdownParser
from styleguide_lint.rules.base import Severity, Violation, iter_enabled

logger = get_logger(__name__)

SUPPRESSION = re.compile(
    r"<!--\s*styleguide-lint:\s*disable(?P<file>-file)?\s*=\s*(?P<rules>[A-Za-z0-9_,\s-]+?)\s*-->"
)


@dataclass
class LintResult:
    """Outcome of linting one document.

    Attributes:
        path: Document path
        violations: Violations after overrides and suppressions, sorted
        errors: Tool-level problems (unreadable file, crashed rule)
        document: Parsed document, None if parsing failed
    """
    path: str
    violations: list[Violation] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    document: Document | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "violations": [v.to_dict() for v in self.violations],
            "errors": list(self.errors),
        }


@dataclass
class LintReport:
    """Outcome of linting a set of documents."""
    results: list[LintResult] = field(default_factory=list)

    @property
    def violations(self) -> list[Violation]:
        flattened = [v for result in self.results for v in result.violations]
        return sorted(flattened, key=Violation.sort_key)

    @property
    def errors(self) -> list[str]:
        return [e for result in self.results for e in result.errors]

    def count_by_severity(self) -> dict[str, int]:
        counts = Counter(v.severity.value for v in self.violations)
        return {s.value: counts.get(s.value, 0) for s in reversed(list(Severity))}

    def has_failures(self, threshold: Severity | str = Severity.ERROR) -> bool:
        """True if any violation is at or above ``threshold`` or a file failed."""
        if self.errors:
            return True
        return any(v.severity.at_least(threshold) for v in self.violations)

    def summary(self) -> dict[str, Any]:
        return {
            "files": len(self.results),
            "violations": len(self.violations),
            "errors": len(self.errors),
            "by_severity": self.count_by_severity(),
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "files": [r.to_dict() for r in self.results],
            "summary": self.summary(),
        }


class Linter:
    """Run enabled rules over documents and collect violations.

    Manifesto:
        One broken anchor must never hide the rest of the report. Rules
        run independently; a rule that crashes is recorded as an error
        and the remaining rules still run.

    Features:
        - Lint text, single files, or whole directories
        - Severity overrides from config
        - Inline suppressions:
          ``<!-- styleguide-lint: disable=TOC001 -->`` on the line or the line above,
          ``<!-- styleguide-lint: disable-file=SEC002 -->`` anywhere in the file

    Guardrails:
        - Do NOT stop at the first unreadable file
          ✅ Record the error on its LintResult and continue
    """

    def __init__(self, config: LintConfig | None = None):
        self.config = config or LintConfig()
        self.parser = MarkdownParser(toc_titles=self.config.toc_titles)

    def lint_text(self, text: str, path: str | Path = "<string>") -> LintResult:
        document = self.parser.parse_text(text, path)
        return self.lint_document(document)

    def lint_file(self, path: Path) -> LintResult:
        path = Path(path)
        with LogContext(path=str(path)):
            try:
                document = self.parser.parse_file(path)
            except DocumentError as e:
                logger.warning("document_unreadable", error=e.message)
                return LintResult(path=str(path), errors=[str(e)])
            return self.lint_document(document)

    def lint_document(self, document: Document) -> LintResult:
        result = LintResult(path=str(document.path), document=document)
        line_suppressions, file_suppressions = self._suppressions(document)

        for rule in iter_enabled(self.config):
            try:
                found = list(rule.check(document, self.config))
            except Exception as e:
                error = RuleExecutionError(
                    f"Rule {rule.rule_id} failed: {e}", cause=e
                ).with_context(path=str(document.path), rule_id=rule.rule_id)
                logger.error("rule_failed", **error.to_dict())
                result.errors.append(str(error))
                continue

            override = self.config.severity_overrides.get(rule.rule_id)
            for violation in found:
                if override:
                    violation.severity = Severity(override)
                if self._is_suppressed(violation, line_suppressions, file_suppressions):
                    continue
                result.violations.append(violation)

        result.violations.sort(key=Violation.sort_key)
        logger.info(
            "document_linted",
            path=result.path,
            violations=len(result.violations),
            errors=len(result.errors),
        )
        return result

    def lint_paths(self, paths: Iterable[Path]) -> LintReport:
        report = LintReport()
        for path in self.collect_files(paths):
            report.results.append(self.lint_file(path))
        return report

    def collect_files(self, paths: Iterable[Path]) -> list[Path]:
        """Expand directories into matching files; keep explicit files as given."""
        found: set[Path] = set()
        for path in paths:
            path = Path(path)
            if path.is_dir():
                for pattern in self.config.include:
                    for candidate in path.rglob(pattern):
                        relative = candidate.relative_to(path)
                        if candidate.is_file() and not self.config.should_skip(relative):
                            found.add(candidate)
            else:
                found.add(path)
        files = sorted(found)
        logger.debug("files_collected", count=len(files))
        return files

    @staticmethod
    def _suppressions(document: Document) -> tuple[dict[int, set[str]], set[str]]:
        by_line: dict[int, set[str]] = {}
        whole_file: set[str] = set()
        for number, line in enumerate(document.lines, start=1):
            for match in SUPPRESSION.finditer(line):
                rules = {r.strip().upper() for r in match.group("rules").split(",") if r.strip()}
                if match.group("file"):
                    whole_file |= rules
                else:
                    by_line.setdefault(number, set()).update(rules)
                    by_line.setdefault(number + 1, set()).update(rules)
        return by_line, whole_file

    @staticmethod
    def _is_suppressed(violation: Violation, by_line: dict[int, set[str]], whole_file: set[str]) -> bool:
        rules = whole_file | by_line.get(violation.line, set())
        return violation.rule_id in rules or "ALL" in rules
