"""Markdown structure rules."""

from styleguide_lint.rules.base import Rule, Severity, register_rule


@register_rule
class UnterminatedCodeFence(Rule):
    """Every opening fence has a closing fence.

    An unclosed fence swallows the rest of the guide into one code block,
    so every heading after it disappears from the rendered page.
    """

    rule_id = "FMT001"
    name = "unterminated-code-fence"
    severity = Severity.ERROR
    description = "Code fence is never closed"

    def check(self, document, config):
        for block in document.code_blocks:
            if not block.closed:
                yield self.violation(
                    document,
                    f"Code fence {block.fence} opened here is never closed",
                    block.line,
                )


@register_rule
class HeadingLevelSkipped(Rule):
    rule_id = "HDG001"
    name = "heading-level-skipped"
    severity = Severity.WARNING
    description = "Heading is more than one level deeper than the heading before it"

    def check(self, document, config):
        previous = None
        for section in document.sections:
            if previous is not None and section.level > previous.level + 1:
                yield self.violation(
                    document,
                    f"Heading '{section.title}' jumps from level {previous.level} to {section.level}",
                    section.line,
                    section=section.anchor,
                )
            previous = section
