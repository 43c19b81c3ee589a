"""Internal link rules."""

from pathlib import PurePosixPath

from styleguide_lint.parser.anchors import normalize_anchor
from styleguide_lint.rules.base import Rule, Severity, register_rule, suggest_anchor


@register_rule
class InternalLinkUnresolved(Rule):
    """Links to ``#anchor`` in the body resolve to a heading.

    TOC entries are left to TOC001. A link to the document's own file name
    (``README.md#naming``) counts as internal.
    """

    rule_id = "LNK001"
    name = "internal-link-unresolved"
    severity = Severity.ERROR
    description = "Link to an anchor in the same document that no heading produces"

    def check(self, document, config):
        anchors = {normalize_anchor(a) for a in document.anchors()}
        toc_lines = {e.line for e in document.toc}
        own_name = document.path.name

        for link in document.links:
            if link.line in toc_lines:
                continue
            if not self._targets_self(link.target, own_name):
                continue
            target = normalize_anchor(link.anchor)
            if not target or target in anchors:
                continue
            yield self.violation(
                document,
                f"Link '{link.text}' points to #{link.anchor}, which matches no heading"
                + suggest_anchor(target, anchors),
                link.line,
            )

    @staticmethod
    def _targets_self(target: str, own_name: str) -> bool:
        if target.startswith("#"):
            return True
        if "#" not in target or "://" in target:
            return False
        file_part = target.split("#", 1)[0]
        return str(PurePosixPath(file_part)) == own_name
