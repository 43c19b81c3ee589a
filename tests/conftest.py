"""Pytest configuration and shared fixtures."""

import pytest
from pathlib import Path

from styleguide_lint.config import LintConfig
from styleguide_lint.linter import Linter
from styleguide_lint.logging import clear_context, configure_logging
from styleguide_lint.parser.markdown_parser import MarkdownParser
from styleguide_lint.rules import get_rule


@pytest.fixture(autouse=True)
def quiet_logging():
    """Route structlog through stdlib logging at WARNING for every test."""
    configure_logging(level="WARNING", json_format=False, add_timestamp=False)
    yield
    clear_context()


@pytest.fixture(scope="session")
def fixtures_path():
    """Path to test fixtures."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture(scope="session")
def sample_guide_path(fixtures_path):
    """Swift guide seeded with one instance of most editorial defects."""
    return fixtures_path / "swift_style_guide.md"


@pytest.fixture(scope="session")
def clean_guide_path(fixtures_path):
    """Guide with no defects."""
    return fixtures_path / "clean_guide.md"


@pytest.fixture(scope="session")
def revisions_path(fixtures_path):
    """Two drafts of one guide plus an unrelated document."""
    return fixtures_path / "revisions"


@pytest.fixture
def parser():
    """Parser with default TOC titles."""
    return MarkdownParser()


@pytest.fixture
def config():
    """Default configuration."""
    return LintConfig()


@pytest.fixture
def linter(config):
    """Linter with default configuration."""
    return Linter(config)


@pytest.fixture
def sample_guide(parser, sample_guide_path):
    """Parsed sample guide."""
    return parser.parse_file(sample_guide_path)


@pytest.fixture
def find_line():
    """Return the 1-based line number of the first line containing ``needle``."""

    def _find(document, needle, start=1):
        for number, line in enumerate(document.lines, start=1):
            if number >= start and needle in line:
                return number
        raise AssertionError(f"{needle!r} not found in {document.path}")

    return _find


@pytest.fixture
def run_rule(parser, config):
    """Run a single rule over Markdown text and return its violations."""

    def _run(rule_id, text, rule_config=None, path="guide.md"):
        document = parser.parse_text(text, path)
        rule = get_rule(rule_id)()
        return list(rule.check(document, rule_config or config))

    return _run
