"""
Configuration for styleguide-lint.

Settings live in a ``.styleguide-lint.yaml`` file at (or above) the
directory being linted. Every key is optional.

Example ``.styleguide-lint.yaml``::

    include: ["*.md"]
    exclude: ["CHANGELOG.md"]
    disabled_rules: [TOC003]
    severity_overrides:
      HDG001: error
    code_language: swift
    deprecated_patterns:
      - pattern: '\\bprintln\\('
        message: "println() was removed; use print()"
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from styleguide_lint.errors import ConfigNotFoundError, InvalidConfigError
from styleguide_lint.logging import get_logger

logger = get_logger(__name__)

CONFIG_FILENAMES = (".styleguide-lint.yaml", ".styleguide-lint.yml")

SEVERITIES = ("info", "warning", "error")


@dataclass
class DeprecatedPattern:
    """A regex that flags outdated syntax in code samples.

    Attributes:
        pattern: Regular expression searched line by line
        message: Violation message shown when it matches
        languages: Fence languages the pattern applies to (empty = config code_language)
    """

    pattern: str
    message: str
    languages: list[str] = field(default_factory=list)

    def __post_init__(self):
        try:
            self.regex = re.compile(self.pattern)
        except re.error as e:
            raise InvalidConfigError(
                "deprecated_patterns", self.pattern, f"Invalid regex {self.pattern!r}: {e}"
            ) from e

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"pattern": self.pattern, "message": self.message}
        if self.languages:
            result["languages"] = list(self.languages)
        return result


# Syntax that a style guide written against an older language release
# tends to carry in its samples.
DEFAULT_DEPRECATED_PATTERNS = [
    {"pattern": r"\bprintln\(", "message": "println() no longer exists; use print()"},
    # prefix form only in operand position, so "swiftlint --fix" is not a decrement
    {"pattern": r"\b[A-Za-z_]\w*(\+\+|--)(?=\s*(;|\)|$))|(?:^|[=(\[,:]|\breturn\b)\s*(\+\+|--)[A-Za-z_]\w*(?=\s*(;|\)|\]|,|$))", "message": "increment/decrement operators were removed; use += 1 / -= 1"},
    {"pattern": r"\bfor\s*\(\s*var\b", "message": "C-style for loops were removed; use for-in with a range"},
    {"pattern": r"\bfunc\s+\w+\s*\(\s*var\s", "message": "var parameters were removed"},
    {"pattern": r"\b(let|var)\s+\w+\s*:\s*Array<", "message": "use the [Element] shorthand instead of Array<Element>"},
    {"pattern": r"#selector\(\s*\"|Selector\(\"", "message": "string-based selectors are deprecated; use #selector(Type.method)"},
    {"pattern": r"\b__FILE__\b|\b__LINE__\b|\b__FUNCTION__\b", "message": "use #file, #line and #function"},
]


def _string_list(key: str, value: Any) -> list[str]:
    """Validate a list-of-strings setting. A bare string is rejected, not split."""
    if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
        raise InvalidConfigError(key, value, f"{key} must be a list of strings")
    return list(value)


@dataclass
class LintConfig:
    """Configuration for the linter.

    Attributes:
        include: Glob patterns of files to lint when a directory is given
        exclude: Substrings or globs of paths to skip
        enabled_rules: Rule ids to run (None runs every registered rule)
        disabled_rules: Rule ids never to run
        severity_overrides: rule id -> severity
        toc_titles: Heading titles recognised as the table of contents
        toc_max_depth: Deepest heading level the TOC is expected to list
        code_language: Fence language of the guide's code samples
        deprecated_patterns: Outdated syntax table for code samples
        bad_labels: Labels that mark a "bad" example
        good_labels: Labels that mark a "good" example
        revision_threshold: Similarity above which two files are revisions
        fail_on: Lowest severity that makes ``check`` fail
        source: Config file this was loaded from, if any
    """

    include: list[str] = field(default_factory=lambda: ["*.md", "*.markdown"])
    exclude: list[str] = field(default_factory=lambda: [
        ".git", "node_modules", ".venv", "venv", "__pycache__",
    ])

    enabled_rules: list[str] | None = None
    disabled_rules: list[str] = field(default_factory=list)
    severity_overrides: dict[str, str] = field(default_factory=dict)

    toc_titles: list[str] = field(default_factory=lambda: [
        "Table of Contents", "Contents", "TOC",
    ])
    toc_max_depth: int = 2

    code_language: str = "swift"
    deprecated_patterns: list[DeprecatedPattern] = field(
        default_factory=lambda: [DeprecatedPattern(**p) for p in DEFAULT_DEPRECATED_PATTERNS]
    )

    bad_labels: list[str] = field(default_factory=lambda: [
        "Bad", "Not Preferred", "Incorrect", "Avoid", "Don't", "Wrong",
    ])
    good_labels: list[str] = field(default_factory=lambda: [
        "Good", "Preferred", "Correct", "Do", "Right",
    ])

    revision_threshold: float = 0.6
    fail_on: str = "error"

    source: Path | None = None

    def __post_init__(self):
        """Normalise types and validate values."""
        if isinstance(self.source, str):
            self.source = Path(self.source)

        for key in ("include", "exclude", "disabled_rules", "toc_titles", "bad_labels", "good_labels"):
            setattr(self, key, _string_list(key, getattr(self, key)))
        if self.enabled_rules is not None:
            self.enabled_rules = _string_list("enabled_rules", self.enabled_rules)
        if not isinstance(self.code_language, str):
            raise InvalidConfigError("code_language", self.code_language, "code_language must be a string")
        if not isinstance(self.severity_overrides, dict):
            raise InvalidConfigError(
                "severity_overrides", self.severity_overrides, "severity_overrides must be a mapping"
            )
        if not isinstance(self.deprecated_patterns, list):
            raise InvalidConfigError(
                "deprecated_patterns", self.deprecated_patterns, "deprecated_patterns must be a list"
            )

        self.deprecated_patterns = [
            p if isinstance(p, DeprecatedPattern) else self._pattern_from_raw(p)
            for p in self.deprecated_patterns
        ]

        if self.enabled_rules is not None:
            self.enabled_rules = [r.upper() for r in self.enabled_rules]
        self.disabled_rules = [r.upper() for r in self.disabled_rules]

        overrides = {}
        for rule_id, severity in self.severity_overrides.items():
            severity = str(severity).lower()
            if severity not in SEVERITIES:
                raise InvalidConfigError(f"severity_overrides.{rule_id}", severity)
            overrides[str(rule_id).upper()] = severity
        self.severity_overrides = overrides

        self.fail_on = str(self.fail_on).lower()
        if self.fail_on not in SEVERITIES:
            raise InvalidConfigError("fail_on", self.fail_on)

        # bool is an int subclass; YAML "yes" must not pass as 1
        threshold = self.revision_threshold
        if isinstance(threshold, bool) or not isinstance(threshold, (int, float)):
            raise InvalidConfigError("revision_threshold", threshold, "revision_threshold must be a number")
        if not 0.0 <= threshold <= 1.0:
            raise InvalidConfigError(
                "revision_threshold", threshold, "revision_threshold must be between 0 and 1"
            )
        self.revision_threshold = float(threshold)

        depth = self.toc_max_depth
        if isinstance(depth, bool) or not isinstance(depth, int):
            raise InvalidConfigError("toc_max_depth", depth, "toc_max_depth must be an integer")
        if depth < 1 or depth > 6:
            raise InvalidConfigError("toc_max_depth", depth)

    @staticmethod
    def _pattern_from_raw(raw: Any) -> DeprecatedPattern:
        if isinstance(raw, str):
            return DeprecatedPattern(pattern=raw, message=f"deprecated syntax matches {raw!r}")
        if isinstance(raw, dict) and isinstance(raw.get("pattern"), str):
            languages = _string_list("deprecated_patterns.languages", raw.get("languages") or [])
            return DeprecatedPattern(
                pattern=raw["pattern"],
                message=str(raw.get("message") or f"deprecated syntax matches {raw['pattern']!r}"),
                languages=[lang.lower() for lang in languages],
            )
        raise InvalidConfigError("deprecated_patterns", raw)

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> "LintConfig":
        """Load configuration from YAML file.

        Args:
            yaml_path: Path to YAML configuration file

        Returns:
            LintConfig instance
        """
        yaml_path = Path(yaml_path)
        if not yaml_path.is_file():
            raise ConfigNotFoundError(str(yaml_path))

        try:
            with open(yaml_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise InvalidConfigError(
                str(yaml_path), None, f"Cannot parse {yaml_path}: {e}"
            ).with_context(path=str(yaml_path)) from e

        if not isinstance(data, dict):
            raise InvalidConfigError(str(yaml_path), data, "Config file must contain a mapping")

        config = cls.from_dict(data)
        config.source = yaml_path
        logger.debug("config_loaded", path=str(yaml_path))
        return config

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LintConfig":
        """Create config from dictionary, rejecting unknown keys."""
        known = {f.name for f in fields(cls)} - {"source"}
        unknown = sorted(set(data) - known)
        if unknown:
            raise InvalidConfigError(unknown[0], data[unknown[0]], f"Unknown configuration key: {unknown[0]}")
        return cls(**data)

    @classmethod
    def discover(cls, start: Path | None = None) -> "LintConfig":
        """Find a config file walking up from ``start``; defaults if none."""
        start = Path(start or Path.cwd()).resolve()
        if start.is_file():
            start = start.parent

        for directory in [start, *start.parents]:
            for name in CONFIG_FILENAMES:
                candidate = directory / name
                if candidate.is_file():
                    return cls.from_yaml(candidate)

        logger.debug("config_not_found", start=str(start))
        return cls()

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "include": list(self.include),
            "exclude": list(self.exclude),
            "enabled_rules": list(self.enabled_rules) if self.enabled_rules is not None else None,
            "disabled_rules": list(self.disabled_rules),
            "severity_overrides": dict(self.severity_overrides),
            "toc_titles": list(self.toc_titles),
            "toc_max_depth": self.toc_max_depth,
            "code_language": self.code_language,
            "deprecated_patterns": [p.to_dict() for p in self.deprecated_patterns],
            "bad_labels": list(self.bad_labels),
            "good_labels": list(self.good_labels),
            "revision_threshold": self.revision_threshold,
            "fail_on": self.fail_on,
        }

    def is_rule_enabled(self, rule_id: str) -> bool:
        """Check whether a rule should run."""
        rule_id = rule_id.upper()
        if rule_id in self.disabled_rules:
            return False
        if self.enabled_rules is None:
            return True
        return rule_id in self.enabled_rules

    def should_skip(self, file_path: Path) -> bool:
        """Check if a file should be skipped during directory scanning."""
        path = Path(file_path)
        for pattern in self.exclude:
            if any(ch in pattern for ch in "*?["):
                if path.match(pattern):
                    return True
            elif pattern in path.parts or path.name == pattern:
                return True
        return False


DEFAULT_CONFIG = LintConfig()
