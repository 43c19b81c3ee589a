"""Tests for configuration loading and validation."""

import pytest
from pathlib import Path

from styleguide_lint.config import DEFAULT_DEPRECATED_PATTERNS, DeprecatedPattern, LintConfig
from styleguide_lint.errors import ConfigNotFoundError, ErrorCategory, InvalidConfigError


class TestDefaults:
    """Default configuration values."""

    def test_defaults(self):
        config = LintConfig()

        assert config.include == ["*.md", "*.markdown"]
        assert config.enabled_rules is None
        assert config.toc_max_depth == 2
        assert config.code_language == "swift"
        assert config.fail_on == "error"
        assert len(config.deprecated_patterns) == len(DEFAULT_DEPRECATED_PATTERNS)
        assert config.source is None

    def test_every_rule_enabled_by_default(self):
        assert LintConfig().is_rule_enabled("TOC001")

    def test_rule_ids_normalised(self):
        config = LintConfig(enabled_rules=["toc001"], disabled_rules=["sec002"], severity_overrides={"hdg001": "ERROR"})

        assert config.enabled_rules == ["TOC001"]
        assert config.disabled_rules == ["SEC002"]
        assert config.severity_overrides == {"HDG001": "error"}

    def test_disabled_wins_over_enabled(self):
        config = LintConfig(enabled_rules=["TOC001"], disabled_rules=["TOC001"])
        assert not config.is_rule_enabled("TOC001")


class TestValidation:
    """Invalid values raise InvalidConfigError."""

    @pytest.mark.parametrize("kwargs", [
        {"severity_overrides": {"TOC001": "fatal"}},
        {"fail_on": "never"},
        {"revision_threshold": 1.5},
        {"toc_max_depth": 0},
        {"toc_max_depth": 7},
        {"deprecated_patterns": [42]},
        {"deprecated_patterns": "println"},
        {"deprecated_patterns": [{"pattern": "x", "languages": "swift"}]},
        {"toc_max_depth": "two"},
        {"toc_max_depth": True},
        {"revision_threshold": "high"},
        {"disabled_rules": "TOC003"},
        {"enabled_rules": ["TOC001", 2]},
        {"include": "*.md"},
        {"severity_overrides": ["TOC001"]},
        {"code_language": ["swift"]},
    ])
    def test_invalid_values(self, kwargs):
        with pytest.raises(InvalidConfigError) as exc_info:
            LintConfig(**kwargs)
        assert exc_info.value.category == ErrorCategory.CONFIG

    def test_invalid_regex(self):
        with pytest.raises(InvalidConfigError, match="Invalid regex"):
            DeprecatedPattern(pattern="(unclosed", message="never matches")

    def test_pattern_from_string(self):
        config = LintConfig(deprecated_patterns=[r"\bNSLog\("])

        pattern = config.deprecated_patterns[0]
        assert pattern.regex.search('NSLog(@"hi")')
        assert "NSLog" in pattern.message

    def test_scalar_rule_list_not_split(self):
        with pytest.raises(InvalidConfigError, match="disabled_rules must be a list of strings"):
            LintConfig.from_dict({"disabled_rules": "TOC003"})

    def test_integer_threshold_accepted(self):
        assert LintConfig(revision_threshold=1).revision_threshold == 1.0

    def test_unknown_key_rejected(self):
        with pytest.raises(InvalidConfigError, match="Unknown configuration key: colour"):
            LintConfig.from_dict({"colour": "red"})


# =============================================================================
# YAML files
# =============================================================================

class TestYamlLoading:
    """Tests for from_yaml and discover."""

    def test_from_yaml(self, tmp_path):
        path = tmp_path / ".styleguide-lint.yaml"
        path.write_text(
            "disabled_rules: [TOC003]\n"
            "severity_overrides:\n"
            "  HDG001: error\n"
            "code_language: kotlin\n"
            "deprecated_patterns:\n"
            "  - pattern: '\\bval\\s+\\w+\\s*=\\s*arrayListOf'\n"
            "    message: use listOf\n"
            "    languages: [Kotlin]\n",
            encoding="utf-8",
        )

        config = LintConfig.from_yaml(path)

        assert config.disabled_rules == ["TOC003"]
        assert config.severity_overrides == {"HDG001": "error"}
        assert config.code_language == "kotlin"
        assert config.deprecated_patterns[0].languages == ["kotlin"]
        assert config.source == path

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert LintConfig.from_yaml(path).include == ["*.md", "*.markdown"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigNotFoundError):
            LintConfig.from_yaml(tmp_path / "nope.yaml")

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("include: [unclosed\n", encoding="utf-8")

        with pytest.raises(InvalidConfigError, match="Cannot parse"):
            LintConfig.from_yaml(path)

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(InvalidConfigError, match="must contain a mapping"):
            LintConfig.from_yaml(path)

    def test_discover_walks_up(self, tmp_path):
        (tmp_path / ".styleguide-lint.yml").write_text("toc_max_depth: 3\n", encoding="utf-8")
        nested = tmp_path / "docs" / "swift"
        nested.mkdir(parents=True)
        guide = nested / "README.md"
        guide.write_text("# Guide\n", encoding="utf-8")

        config = LintConfig.discover(guide)

        assert config.toc_max_depth == 3
        assert config.source == (tmp_path / ".styleguide-lint.yml").resolve()

    def test_discover_without_file(self, tmp_path):
        assert LintConfig.discover(tmp_path).source is None

    def test_to_dict_loads_back(self):
        config = LintConfig(disabled_rules=["TOC003"], toc_max_depth=3)
        assert LintConfig.from_dict(config.to_dict()).to_dict() == config.to_dict()


class TestShouldSkip:
    """Tests for exclude matching."""

    @pytest.fixture
    def config(self):
        return LintConfig(exclude=["node_modules", "CHANGELOG.md", "drafts/*.md"])

    @pytest.mark.parametrize("path,skipped", [
        ("node_modules/pkg/README.md", True),
        ("docs/CHANGELOG.md", True),
        ("drafts/old.md", True),
        ("docs/guide.md", False),
        ("README.md", False),
    ])
    def test_should_skip(self, config, path, skipped):
        assert config.should_skip(Path(path)) is skipped
