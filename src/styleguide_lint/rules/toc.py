"""Table-of-contents rules."""

from styleguide_lint.parser.anchors import normalize_anchor
from styleguide_lint.rules.base import Rule, Severity, register_rule, suggest_anchor


@register_rule
class TocAnchorUnresolved(Rule):
    """Every TOC entry must link to an existing heading."""

    rule_id = "TOC001"
    name = "toc-anchor-unresolved"
    severity = Severity.ERROR
    description = "Table-of-contents entry links to an anchor no heading produces"

    def check(self, document, config):
        anchors = {normalize_anchor(a) for a in document.anchors()}
        for entry in document.toc:
            target = normalize_anchor(entry.anchor)
            if not target or target in anchors:
                continue
            yield self.violation(
                document,
                f"TOC entry '{entry.text}' links to #{entry.anchor}, which matches no heading"
                + suggest_anchor(target, anchors),
                entry.line,
            )


@register_rule
class TocEntryDuplicated(Rule):
    """The TOC lists each anchor once."""

    rule_id = "TOC002"
    name = "toc-entry-duplicated"
    severity = Severity.WARNING
    description = "Table of contents lists the same anchor more than once"

    def check(self, document, config):
        seen: dict[str, int] = {}
        for entry in document.toc:
            target = normalize_anchor(entry.anchor)
            if target in seen:
                yield self.violation(
                    document,
                    f"TOC lists #{entry.anchor} again (first listed at line {seen[target]})",
                    entry.line,
                )
            else:
                seen[target] = entry.line


@register_rule
class HeadingMissingFromToc(Rule):
    """Headings after the TOC, down to ``toc_max_depth``, appear in it."""

    rule_id = "TOC003"
    name = "heading-missing-from-toc"
    severity = Severity.INFO
    description = "Heading below the table of contents is not listed in it"

    def check(self, document, config):
        if not document.toc:
            return

        listed = {normalize_anchor(e.anchor) for e in document.toc}
        listed_levels = [
            s.level for s in document.sections if normalize_anchor(s.anchor) in listed
        ]
        top_level = min(listed_levels) if listed_levels else 2
        toc_start = document.toc_line or 0

        for section in document.sections:
            if section.line <= toc_start or section.anchor == document.toc_section:
                continue
            if not top_level <= section.level <= config.toc_max_depth:
                continue
            if normalize_anchor(section.anchor) not in listed:
                yield self.violation(
                    document,
                    f"Heading '{section.title}' (#{section.anchor}) is missing from the table of contents",
                    section.line,
                    section=section.anchor,
                )
