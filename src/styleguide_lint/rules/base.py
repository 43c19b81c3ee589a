"""
Rule table for styleguide-lint.

Every rule is a small class registered under a stable id (``TOC001``).
The linter looks rules up in the registry, runs the enabled ones and
collects their Violations.

Manifesto:
    An editorial defect is data, not an exception. Rules return
    Violations and never raise for anything found in the guide, so a
    single broken anchor never hides the rest of the report.

Tags:
    rules, registry, violations
"""

import difflib
from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from styleguide_lint.errors import UnknownRuleError
from styleguide_lint.logging import get_logger

if TYPE_CHECKING:
    from styleguide_lint.config import LintConfig
    from styleguide_lint.document import Document

logger = get_logger(__name__)


class Severity(str, Enum):
    """Violation severity, ordered info < warning < error."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    @property
    def rank(self) -> int:
        return ["info", "warning", "error"].index(self.value)

    def at_least(self, other: "Severity | str") -> bool:
        return self.rank >= Severity(other).rank


@dataclass
class Violation:
    """One editorial defect found in a document.

    Attributes:
        rule_id: Stable rule id, e.g. ``TOC001``
        rule_name: Human-readable rule name
        severity: Effective severity after config overrides
        message: What is wrong
        path: Document path
        line: 1-based line number
        column: 1-based column, when meaningful
        section: Anchor of the enclosing section
    """
    rule_id: str
    rule_name: str
    severity: Severity
    message: str
    path: str
    line: int
    column: int | None = None
    section: str | None = None

    def sort_key(self) -> tuple:
        return (self.path, self.line, self.column or 0, self.rule_id)

    def to_dict(self) -> dict[str, Any]:
        result = {
            "rule_id": self.rule_id,
            "rule_name": self.rule_name,
            "severity": self.severity.value,
            "message": self.message,
            "path": self.path,
            "line": self.line,
        }
        if self.column is not None:
            result["column"] = self.column
        if self.section is not None:
            result["section"] = self.section
        return result


class Rule(ABC):
    """Base class for lint rules.

    Subclasses set ``rule_id``, ``name``, ``severity`` and ``description``
    and implement ``check``.
    """

    rule_id: str = ""
    name: str = ""
    severity: Severity = Severity.WARNING
    description: str = ""

    @abstractmethod
    def check(self, document: "Document", config: "LintConfig") -> Iterable[Violation]:
        """Yield violations found in ``document``."""

    def violation(
        self,
        document: "Document",
        message: str,
        line: int,
        *,
        column: int | None = None,
        section: str | None = None,
    ) -> Violation:
        if section is None:
            owner = document.section_for_line(line)
            section = owner.anchor if owner else None
        return Violation(
            rule_id=self.rule_id,
            rule_name=self.name,
            severity=self.severity,
            message=message,
            path=str(document.path),
            line=line,
            column=column,
            section=section,
        )


def suggest_anchor(anchor: str, candidates: set[str]) -> str:
    """Hint naming the closest existing anchor, or an empty string."""
    matches = difflib.get_close_matches(anchor, sorted(candidates), n=1, cutoff=0.6)
    return f" (did you mean #{matches[0]}?)" if matches else ""


# Global rule registry, keyed by rule id
_registry: dict[str, type[Rule]] = {}
_loaded: bool = False


def register_rule(cls: type[Rule]) -> type[Rule]:
    """Class decorator registering a rule under its ``rule_id``."""
    if not cls.rule_id:
        raise ValueError(f"Rule {cls.__name__} has no rule_id")
    if cls.rule_id in _registry and _registry[cls.rule_id] is not cls:
        raise ValueError(f"Rule '{cls.rule_id}' is already registered")
    _registry[cls.rule_id] = cls
    logger.debug("rule_registered", rule_id=cls.rule_id, name=cls.name)
    return cls


def _ensure_loaded() -> None:
    """Import the built-in rule modules so they register themselves."""
    global _loaded
    if not _loaded:
        from styleguide_lint.rules import examples, formatting, links, sections, toc  # noqa: F401

        _loaded = True
        logger.debug("rule_registry_loaded", registered=len(_registry))


def get_rule(key: str) -> type[Rule]:
    """Get a rule class by id (``TOC001``) or name (``toc-anchor-unresolved``)."""
    _ensure_loaded()
    if key.upper() in _registry:
        return _registry[key.upper()]
    for cls in _registry.values():
        if cls.name == key.lower():
            return cls
    raise UnknownRuleError(key)


def list_rules() -> list[type[Rule]]:
    """All registered rule classes in id order."""
    _ensure_loaded()
    return [_registry[rule_id] for rule_id in sorted(_registry)]


def iter_enabled(config: "LintConfig") -> Iterator[Rule]:
    """Instantiate the rules ``config`` enables, in id order."""
    for cls in list_rules():
        if config.is_rule_enabled(cls.rule_id):
            yield cls()


def unregister_rule(rule_id: str) -> None:
    """Remove a rule from the registry (plugins and tests)."""
    _registry.pop(rule_id.upper(), None)
