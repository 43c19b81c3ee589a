"""Duplicate-section rules.

Guides assembled from several drafts tend to carry the same section twice,
sometimes under the same heading, sometimes pasted under a new one.
"""

import re

from styleguide_lint.rules.base import Rule, Severity, register_rule

# Stub text left in unfinished sections; matched case-insensitively
# after trailing punctuation is dropped.
PLACEHOLDER_BODIES = frozenset({
    "tbd", "tba", "todo", "wip", "n/a", "fixme", "coming soon", "to be written",
})

_HAS_WORD = re.compile(r"\w")


def is_placeholder(body: str) -> bool:
    """True for bodies that stand in for missing text ("TBD", "...")."""
    if not _HAS_WORD.search(body):
        return True
    return body.casefold().rstrip(".!:; ") in PLACEHOLDER_BODIES


@register_rule
class DuplicateSection(Rule):
    """No two sections share a title under the same parent."""

    rule_id = "SEC001"
    name = "duplicate-section"
    severity = Severity.ERROR
    description = "Two sections with the same title under the same parent heading"

    def check(self, document, config):
        seen: dict[tuple, int] = {}
        for section in document.sections:
            key = (section.parent, section.level, section.title.casefold())
            if key in seen:
                yield self.violation(
                    document,
                    f"Section '{section.title}' duplicates the heading at line {seen[key]}",
                    section.line,
                    section=section.anchor,
                )
            else:
                seen[key] = section.line


@register_rule
class DuplicateSectionBody(Rule):
    """No two sections carry the same text."""

    rule_id = "SEC002"
    name = "duplicate-section-body"
    severity = Severity.WARNING
    description = "Two sections whose bodies are identical apart from whitespace"

    def check(self, document, config):
        seen = {}
        for section in document.sections:
            body = section.normalized_body
            if not body or is_placeholder(body):
                continue
            first = seen.get(body)
            if first is None:
                seen[body] = section
                continue
            yield self.violation(
                document,
                f"Section '{section.title}' repeats the text of '{first.title}' (line {first.line})",
                section.line,
                section=section.anchor,
            )
