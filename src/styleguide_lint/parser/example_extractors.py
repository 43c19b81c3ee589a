"""
Example extraction for style-guide code samples.

Style guides teach by contrast: a "Not Preferred" sample followed by the
"Preferred" one. This module finds those labels, pairs the samples inside
each section, and collects ``// MARK:`` comments written in the samples.
"""

import re
from dataclasses import dataclass, field

from styleguide_lint.document import CodeBlock, Document

BAD = "bad"
GOOD = "good"

DEFAULT_BAD_LABELS = ["Bad", "Not Preferred", "Incorrect", "Avoid", "Don't", "Wrong"]
DEFAULT_GOOD_LABELS = ["Good", "Preferred", "Correct", "Do", "Right"]

MARK_COMMENT = re.compile(r"^\s*//\s*MARK\s*:")


@dataclass
class ExamplePair:
    """A bad sample and the good sample that corrects it."""
    section: str | None
    bad: CodeBlock
    good: CodeBlock

    @property
    def languages_match(self) -> bool:
        return self.bad.language == self.good.language


@dataclass
class MarkComment:
    """A ``// MARK:`` line inside a code sample."""
    line: int
    text: str
    block: CodeBlock


@dataclass
class ExampleSet:
    """Pairing outcome for one document."""
    pairs: list[ExamplePair] = field(default_factory=list)
    unpaired: list[CodeBlock] = field(default_factory=list)

    def by_section(self) -> dict[str | None, list[ExamplePair]]:
        grouped: dict[str | None, list[ExamplePair]] = {}
        for pair in self.pairs:
            grouped.setdefault(pair.section, []).append(pair)
        return grouped


class ExampleExtractor:
    """Label and pair Bad/Good code samples.

    Features:
        - Labels written before the block: ``**Not Preferred:**``,
          ``*Preferred*:``, ``Bad:``
        - Labels written as the first line of the block: ``// bad``,
          ``# good``
        - Pairing in order within a section, whichever sample comes first

    Examples:
        >>> extractor = ExampleExtractor()
        >>> examples = extractor.extract_pairs(document)
        >>> [(p.bad.line, p.good.line) for p in examples.pairs]
        [(58, 66), (90, 97)]
    """

    def __init__(
        self,
        bad_labels: list[str] | None = None,
        good_labels: list[str] | None = None,
    ):
        self.bad_labels = bad_labels if bad_labels is not None else DEFAULT_BAD_LABELS
        self.good_labels = good_labels if good_labels is not None else DEFAULT_GOOD_LABELS

        self._kinds = {label.casefold(): BAD for label in self.bad_labels}
        self._kinds.update({label.casefold(): GOOD for label in self.good_labels})

        alternatives = "|".join(
            re.escape(label) for label in sorted(self._kinds, key=len, reverse=True)
        )
        # "**Preferred:**", "**Preferred**:", "Preferred:" with optional trailing remark
        self._label_with_colon = re.compile(
            rf"^\s*[*_]{{0,3}}\s*({alternatives})\s*(?::\s*[*_]{{0,3}}|[*_]{{0,3}}\s*:)(.*)$",
            re.IGNORECASE,
        )
        # "**Preferred**" alone on the line
        self._label_alone = re.compile(
            rf"^\s*[*_]{{0,3}}\s*({alternatives})\s*[*_]{{0,3}}\s*$",
            re.IGNORECASE,
        )
        self._label_comment = re.compile(
            rf"^\s*(?://|#|--|/\*)\s*({alternatives})\s*:?\s*(?:\*/)?\s*$",
            re.IGNORECASE,
        )

    def label_blocks(self, document: Document) -> list[CodeBlock]:
        """Set ``label`` on every example block and return them in order."""
        labelled = []
        for block in document.code_blocks:
            text = self._label_before(document, block) or self._label_inside(block)
            if text is None:
                continue
            block.label = self._kinds[text.casefold()]
            block.label_text = text
            labelled.append(block)
        return labelled

    def extract_pairs(self, document: Document) -> ExampleSet:
        """Pair labelled blocks within each section."""
        result = ExampleSet()
        by_section: dict[str | None, list[CodeBlock]] = {}
        for block in self.label_blocks(document):
            by_section.setdefault(block.section, []).append(block)

        for section, blocks in by_section.items():
            pending: list[CodeBlock] = []
            for block in blocks:
                partner = next((p for p in pending if p.label != block.label), None)
                if partner is None:
                    pending.append(block)
                    continue
                pending.remove(partner)
                bad, good = (partner, block) if partner.label == BAD else (block, partner)
                result.pairs.append(ExamplePair(section=section, bad=bad, good=good))
            result.unpaired.extend(pending)

        result.pairs.sort(key=lambda p: min(p.bad.line, p.good.line))
        result.unpaired.sort(key=lambda b: b.line)
        return result

    def extract_mark_comments(self, document: Document) -> list[MarkComment]:
        marks = []
        for block in document.code_blocks:
            for number, text in block.code_lines():
                if MARK_COMMENT.match(text):
                    marks.append(MarkComment(line=number, text=text.strip(), block=block))
        return marks

    def _label_before(self, document: Document, block: CodeBlock) -> str | None:
        """Label on the nearest non-blank line above the opening fence."""
        number = block.line - 1
        while number >= 1 and not document.lines[number - 1].strip():
            number -= 1
        if number < 1:
            return None

        line = document.lines[number - 1]
        if line.lstrip().startswith("#"):
            return None
        match = self._label_with_colon.match(line) or self._label_alone.match(line)
        return match.group(1) if match else None

    def _label_inside(self, block: CodeBlock) -> str | None:
        first = next((text for _, text in block.code_lines() if text.strip()), None)
        if first is None:
            return None
        match = self._label_comment.match(first)
        return match.group(1) if match else None
