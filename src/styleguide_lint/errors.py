"""
Structured error types for styleguide-lint.

Editorial defects in a style guide (broken anchors, duplicated sections,
stale samples) are never raised: they are reported as Violations. The
exceptions in this module describe failures of the tool itself, such as a
missing file, an unreadable config, or a rule that crashed.

Manifesto:
    - **Typed Error Hierarchy:** One subclass per failure domain
    - **Rich Context:** Errors carry the path, line and rule involved
    - **Error Chaining:** The original exception is kept as ``cause``

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────────┐
        │                    StyleGuideLintError                        │
        │              (category, context, cause)                       │
        ├──────────────────────────────────────────────────────────────┤
        │  ConfigError            DocumentError        RuleError        │
        │  (CONFIG)               (PARSE / IO)         (RULE)           │
        │     │                       │                   │             │
        │  ConfigNotFoundError    DocumentNotFound    UnknownRuleError  │
        │  InvalidConfigError     DocumentParseError  RuleExecutionError│
        │                                                               │
        │  ReportError (REPORT)                                         │
        │     │                                                         │
        │  UnknownReporterError                                         │
        └──────────────────────────────────────────────────────────────┘

Examples:
    >>> error = DocumentParseError("not valid UTF-8")
    >>> error.with_context(path="guide.md", line=3).context.path
    'guide.md'
    >>> error.to_dict()["category"]
    'PARSE'

Guardrails:
    ❌ DON'T: Raise for a defect inside the guide
    ✅ DO: Return a Violation from the rule

    ❌ DON'T: Swallow the original exception
    ✅ DO: Pass it as cause= for error chaining

Tags:
    error-handling, exception-hierarchy, error-context
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Failure domains used for classification and CLI messages."""

    CONFIG = "CONFIG"
    PARSE = "PARSE"
    IO = "IO"
    RULE = "RULE"
    REPORT = "REPORT"
    INTERNAL = "INTERNAL"


@dataclass
class ErrorContext:
    """Structured metadata attached to an error.

    Attributes:
        path: Document or config file involved
        line: 1-based line number, when known
        rule_id: Rule that was executing
        metadata: Additional key-value pairs
    """

    path: str | None = None
    line: int | None = None
    rule_id: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["path", "line", "rule_id"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class StyleGuideLintError(Exception):
    """Base exception for every styleguide-lint failure.

    Subclasses set ``default_category``; callers may override it.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> StyleGuideLintError:
        """Add context to this error (fluent API).

        Usage:
            raise DocumentParseError("bad bytes").with_context(path="guide.md")
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __str__(self) -> str:
        location = self.context.path
        if location and self.context.line is not None:
            location = f"{location}:{self.context.line}"
        if location:
            return f"{location}: {self.message}"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(StyleGuideLintError):
    """Configuration error. The config file must be fixed."""

    default_category = ErrorCategory.CONFIG


class ConfigNotFoundError(ConfigError):
    """Config file passed explicitly does not exist."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Config file not found: {path}", context=ErrorContext(path=path))


class InvalidConfigError(ConfigError):
    """Configuration value is invalid."""

    def __init__(self, key: str, value: Any, message: str | None = None):
        self.key = key
        self.value = value
        super().__init__(message or f"Invalid configuration for {key}: {value!r}")


# =============================================================================
# DOCUMENT ERRORS
# =============================================================================


class DocumentError(StyleGuideLintError):
    """A document could not be read or parsed."""

    default_category = ErrorCategory.PARSE


class DocumentNotFoundError(DocumentError):
    """Document path does not exist."""

    default_category = ErrorCategory.IO

    def __init__(self, path: str):
        self.path = path
        super().__init__("Document not found", context=ErrorContext(path=path))


class DocumentParseError(DocumentError):
    """Document exists but cannot be decoded or parsed."""


# =============================================================================
# RULE ERRORS
# =============================================================================


class RuleError(StyleGuideLintError):
    """Problem with a lint rule (lookup or execution)."""

    default_category = ErrorCategory.RULE


class UnknownRuleError(RuleError):
    """No rule is registered under the given id or name."""

    def __init__(self, rule: str):
        self.rule = rule
        super().__init__(f"Unknown rule: {rule}", context=ErrorContext(rule_id=rule))


class RuleExecutionError(RuleError):
    """A rule raised while checking a document."""


# =============================================================================
# REPORT ERRORS
# =============================================================================


class ReportError(StyleGuideLintError):
    """A report could not be produced."""

    default_category = ErrorCategory.REPORT


class UnknownReporterError(ReportError):
    """Requested output format has no reporter."""

    def __init__(self, name: str, available: list[str] | None = None):
        self.name = name
        choices = ", ".join(available or [])
        message = f"Unknown report format: {name}"
        if choices:
            message = f"{message} (available: {choices})"
        super().__init__(message)


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "StyleGuideLintError",
    "ConfigError",
    "ConfigNotFoundError",
    "InvalidConfigError",
    "DocumentError",
    "DocumentNotFoundError",
    "DocumentParseError",
    "RuleError",
    "UnknownRuleError",
    "RuleExecutionError",
    "ReportError",
    "UnknownReporterError",
]
