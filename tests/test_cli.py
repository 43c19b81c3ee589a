"""Tests for the guidelint command line."""

import json

import pytest
from click.testing import CliRunner

from styleguide_lint import __version__
from styleguide_lint.cli import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def info_only_guide(tmp_path):
    """Guide whose only defect is an info-level MARK comment."""
    path = tmp_path / "marks.md"
    path.write_text("# Guide\n\n```swift\n// MARK: Private\n```\n", encoding="utf-8")
    return path


# =============================================================================
# check
# =============================================================================

class TestCheck:
    """Tests for `guidelint check`."""

    def test_defects_fail(self, runner, sample_guide_path):
        result = runner.invoke(cli, ["check", str(sample_guide_path)])

        assert result.exit_code == 1
        assert "TOC001" in result.output

    def test_clean_guide_passes(self, runner, clean_guide_path):
        result = runner.invoke(cli, ["check", str(clean_guide_path)])

        assert result.exit_code == 0
        assert "no problems found" in result.output

    def test_json_format(self, runner, sample_guide_path):
        result = runner.invoke(cli, ["check", "--format", "json", str(sample_guide_path)])

        data = json.loads(result.stdout)
        assert data["summary"]["violations"] == 10
        assert result.exit_code == 1

    def test_select(self, runner, sample_guide_path):
        result = runner.invoke(cli, ["check", "-f", "json", "--select", "TOC001,TOC002", str(sample_guide_path)])

        data = json.loads(result.stdout)
        ids = {v["rule_id"] for v in data["files"][0]["violations"]}
        assert ids == {"TOC001", "TOC002"}

    def test_ignore(self, runner, sample_guide_path):
        result = runner.invoke(
            cli, ["check", "-f", "json", "--ignore", "TOC001", "--ignore", "LNK001,SEC001", str(sample_guide_path)]
        )

        data = json.loads(result.stdout)
        assert data["summary"]["by_severity"]["error"] == 0
        assert result.exit_code == 0

    def test_unknown_rule_id(self, runner, sample_guide_path):
        result = runner.invoke(cli, ["check", "--ignore", "NOPE999", str(sample_guide_path)])

        assert result.exit_code == 2
        assert "Unknown rule: NOPE999" in result.output

    def test_fail_on(self, runner, info_only_guide):
        assert runner.invoke(cli, ["check", str(info_only_guide)]).exit_code == 0
        assert runner.invoke(cli, ["check", "--fail-on", "info", str(info_only_guide)]).exit_code == 1

    def test_output_file(self, runner, sample_guide_path, tmp_path):
        output = tmp_path / "report.md"
        result = runner.invoke(cli, ["check", "-f", "markdown", "-o", str(output), str(sample_guide_path)])

        assert result.exit_code == 1
        assert output.read_text(encoding="utf-8").startswith("# Style Guide Lint Report")

    def test_directory(self, runner, revisions_path):
        result = runner.invoke(cli, ["check", "-f", "json", str(revisions_path)])

        data = json.loads(result.stdout)
        assert data["summary"]["files"] == 3

    def test_config_file(self, runner, sample_guide_path, tmp_path):
        config = tmp_path / "lint.yaml"
        config.write_text("enabled_rules: [HDG001]\nseverity_overrides:\n  HDG001: info\n", encoding="utf-8")

        result = runner.invoke(cli, ["-c", str(config), "check", str(sample_guide_path)])

        assert result.exit_code == 0
        assert "HDG001" in result.output
        assert "TOC001" not in result.output

    def test_invalid_config_file(self, runner, sample_guide_path, tmp_path):
        config = tmp_path / "lint.yaml"
        config.write_text("fail_on: never\n", encoding="utf-8")

        result = runner.invoke(cli, ["-c", str(config), "check", str(sample_guide_path)])

        assert result.exit_code == 2
        assert "Invalid configuration for fail_on" in result.output

    @pytest.mark.parametrize("body,message", [
        ("toc_max_depth: two\n", "toc_max_depth must be an integer"),
        ("revision_threshold: high\n", "revision_threshold must be a number"),
        ("disabled_rules: TOC003\n", "disabled_rules must be a list of strings"),
    ])
    def test_wrongly_typed_config_value(self, runner, sample_guide_path, tmp_path, body, message):
        config = tmp_path / "lint.yaml"
        config.write_text(body, encoding="utf-8")

        result = runner.invoke(cli, ["-c", str(config), "check", str(sample_guide_path)])

        assert result.exit_code == 2
        assert message in result.output


# =============================================================================
# Inspection commands
# =============================================================================

class TestInspection:
    """Tests for outline, toc, examples and rules."""

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert __version__ in result.output

    def test_outline_json(self, runner, sample_guide_path):
        result = runner.invoke(cli, ["outline", "--json", str(sample_guide_path)])

        assert result.exit_code == 0
        outline = json.loads(result.stdout)
        assert [entry["anchor"] for entry in outline][:3] == ["swift-style-guide", "table-of-contents", "naming"]

    def test_outline_text(self, runner, sample_guide_path):
        result = runner.invoke(cli, ["outline", str(sample_guide_path)])

        assert result.exit_code == 0
        assert "#spacing--indentation" in result.output

    def test_toc(self, runner, sample_guide_path):
        result = runner.invoke(cli, ["toc", str(sample_guide_path)])

        assert result.exit_code == 0
        assert "#closure-expressions" in result.output
        assert "1 unresolved entry" in result.output

    def test_no_toc(self, runner, tmp_path):
        path = tmp_path / "plain.md"
        path.write_text("# Guide\n\nProse only.\n", encoding="utf-8")

        result = runner.invoke(cli, ["toc", str(path)])

        assert "No table of contents found" in result.output

    def test_examples(self, runner, sample_guide_path):
        result = runner.invoke(cli, ["examples", str(sample_guide_path)])

        assert result.exit_code == 0
        assert "Example pairs (2)" in result.output
        assert "Unpaired samples (1)" in result.output

    def test_rules(self, runner):
        result = runner.invoke(cli, ["rules"])

        assert result.exit_code == 0
        for rule_id in ["TOC001", "LNK001", "SEC002", "EX003", "MARK001"]:
            assert rule_id in result.output


# =============================================================================
# Revisions
# =============================================================================

class TestRevisionCommands:
    """Tests for diff and revisions."""

    def test_diff_json(self, runner, revisions_path):
        result = runner.invoke(
            cli, ["diff", "--json", str(revisions_path / "guide_v1.md"), str(revisions_path / "guide_v2.md")]
        )

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert [c["title"] for c in data["changed"]] == ["Naming > Enumerations"]
        assert [a["title"] for a in data["added"]] == ["Semicolons"]

    def test_diff_text(self, runner, revisions_path):
        result = runner.invoke(
            cli, ["diff", "--show-diff", str(revisions_path / "guide_v1.md"), str(revisions_path / "guide_v2.md")]
        )

        assert result.exit_code == 0
        assert "+ Semicolons" in result.output
        assert "-Use UpperCamelCase for enumeration values:" in result.output

    def test_diff_identical(self, runner, sample_guide_path):
        result = runner.invoke(cli, ["diff", str(sample_guide_path), str(sample_guide_path)])
        assert "No section differences" in result.output

    def test_revisions(self, runner, revisions_path):
        result = runner.invoke(cli, ["revisions", str(revisions_path)])

        assert result.exit_code == 0
        assert "3 file(s), 2 group(s), 1 with multiple revisions" in result.output

    def test_revisions_threshold(self, runner, revisions_path):
        result = runner.invoke(cli, ["revisions", "--threshold", "0.95", str(revisions_path)])
        assert "3 file(s), 3 group(s), 0 with multiple revisions" in result.output
