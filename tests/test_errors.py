"""Tests for the error hierarchy."""

import pytest

from styleguide_lint.errors import (
    ConfigError,
    ConfigNotFoundError,
    DocumentError,
    DocumentNotFoundError,
    DocumentParseError,
    ErrorCategory,
    InvalidConfigError,
    RuleExecutionError,
    StyleGuideLintError,
    UnknownReporterError,
    UnknownRuleError,
)


class TestCategories:
    """Each subclass carries its failure domain."""

    @pytest.mark.parametrize("error,category", [
        (ConfigNotFoundError("x.yaml"), ErrorCategory.CONFIG),
        (InvalidConfigError("fail_on", "never"), ErrorCategory.CONFIG),
        (DocumentNotFoundError("guide.md"), ErrorCategory.IO),
        (DocumentParseError("bad bytes"), ErrorCategory.PARSE),
        (UnknownRuleError("NOPE"), ErrorCategory.RULE),
        (RuleExecutionError("boom"), ErrorCategory.RULE),
        (UnknownReporterError("html"), ErrorCategory.REPORT),
        (StyleGuideLintError("oops"), ErrorCategory.INTERNAL),
    ])
    def test_category(self, error, category):
        assert error.category == category

    def test_hierarchy(self):
        assert issubclass(ConfigNotFoundError, ConfigError)
        assert issubclass(DocumentNotFoundError, DocumentError)
        assert issubclass(DocumentError, StyleGuideLintError)

    def test_category_override(self):
        error = DocumentParseError("odd", category=ErrorCategory.INTERNAL)
        assert error.category == ErrorCategory.INTERNAL


class TestContext:
    """Tests for with_context, to_dict and __str__."""

    def test_with_context_sets_fields_and_metadata(self):
        error = DocumentParseError("bad bytes").with_context(path="guide.md", line=3, encoding="latin-1")

        assert error.context.path == "guide.md"
        assert error.context.line == 3
        assert error.context.metadata == {"encoding": "latin-1"}

    def test_str_includes_location(self):
        assert str(DocumentParseError("bad bytes").with_context(path="guide.md", line=3)) == "guide.md:3: bad bytes"
        assert str(DocumentNotFoundError("guide.md")) == "guide.md: Document not found"
        assert str(StyleGuideLintError("plain")) == "plain"

    def test_to_dict(self):
        cause = ValueError("inner")
        error = RuleExecutionError("Rule X failed", cause=cause).with_context(rule_id="X")

        assert error.to_dict() == {
            "error_type": "RuleExecutionError",
            "message": "Rule X failed",
            "category": "RULE",
            "context": {"rule_id": "X"},
            "cause": "inner",
        }
        assert error.__cause__ is cause

    def test_invalid_config_message(self):
        error = InvalidConfigError("fail_on", "never")
        assert error.message == "Invalid configuration for fail_on: 'never'"
        assert error.key == "fail_on"
