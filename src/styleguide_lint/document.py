"""
Document model for parsed style guides.

A style guide is presentation structure, not data: headings, the prose
under them, and embedded code samples. These dataclasses hold exactly that
so rules can ask questions such as "does this anchor exist?" or "which
section is line 120 in?".

Example:
    >>> doc = MarkdownParser().parse_text(text, "guide.md")
    >>> [s.anchor for s in doc.sections][:3]
    ['swift-style-guide', 'table-of-contents', 'naming']
    >>> doc.section_for_line(40).title
    'Naming'
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator


@dataclass
class Link:
    """A Markdown inline link.

    Attributes:
        text: Link text
        target: Raw link target
        line: Line number (1-based)
    """
    text: str
    target: str
    line: int

    @property
    def is_internal(self) -> bool:
        """True for same-document anchor links (``#anchor``)."""
        return self.target.startswith("#")

    @property
    def anchor(self) -> str:
        """Anchor part of the target, without the leading ``#``."""
        if "#" not in self.target:
            return ""
        return self.target.split("#", 1)[1]


@dataclass
class CodeBlock:
    """A fenced code block.

    Attributes:
        language: First word of the info string ("" if none)
        code: Block content without the fences
        line: Line of the opening fence
        end_line: Line of the closing fence (last line if unterminated)
        fence: The opening fence characters
        closed: Whether a closing fence was found
        label: Example label ("bad" / "good") if the block is an example
        label_text: The label as written in the document
        section: Anchor of the enclosing section
    """
    language: str
    code: str
    line: int
    end_line: int
    fence: str = "```"
    closed: bool = True
    label: str | None = None
    label_text: str | None = None
    section: str | None = None

    def code_lines(self) -> Iterator[tuple[int, str]]:
        """Yield (document line number, text) for each line of code."""
        for offset, text in enumerate(self.code.splitlines(), start=1):
            yield self.line + offset, text


@dataclass
class TocEntry:
    """One entry of the table of contents.

    Attributes:
        text: Entry text as written
        anchor: Target anchor without ``#``
        line: Line number of the entry
        depth: Nesting depth of the list item (0 = top level)
    """
    text: str
    anchor: str
    line: int
    depth: int = 0


@dataclass
class Section:
    """A heading and everything up to the next heading.

    Attributes:
        title: Heading text with inline markup stripped
        raw_title: Heading text as written
        level: Heading level 1-6
        anchor: Unique slug assigned to the heading
        line: Heading line number
        end_line: Last line belonging to this section
        body: Text between this heading and the next one
        parent: Anchor of the nearest shallower heading
        code_blocks: Code blocks inside the section body
        links: Links inside the section body
    """
    title: str
    level: int
    anchor: str
    line: int
    end_line: int = 0
    body: str = ""
    raw_title: str = ""
    parent: str | None = None
    code_blocks: list[CodeBlock] = field(default_factory=list)
    links: list[Link] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.body.strip()

    @property
    def normalized_body(self) -> str:
        """Body with runs of whitespace collapsed, for comparisons."""
        return " ".join(self.body.split())


@dataclass
class Document:
    """A parsed Markdown style guide.

    Attributes:
        path: Source path ("<string>" for in-memory text)
        lines: Raw lines of the document
        sections: Sections in document order
        toc: Table-of-contents entries (empty if the guide has none)
        toc_section: Anchor of the TOC heading, if the TOC has one
        toc_line: First line of the TOC list
        code_blocks: Every fenced code block
        links: Every inline link
        explicit_anchors: Targets of ``<a name>`` / ``<a id>`` tags
    """
    path: Path
    lines: list[str] = field(default_factory=list)
    sections: list[Section] = field(default_factory=list)
    toc: list[TocEntry] = field(default_factory=list)
    toc_section: str | None = None
    toc_line: int | None = None
    code_blocks: list[CodeBlock] = field(default_factory=list)
    links: list[Link] = field(default_factory=list)
    explicit_anchors: dict[str, int] = field(default_factory=dict)

    @property
    def text(self) -> str:
        return "\n".join(self.lines)

    @property
    def title(self) -> str:
        """First level-1 heading, else the file name."""
        for section in self.sections:
            if section.level == 1:
                return section.title
        return Path(self.path).name

    def anchors(self) -> set[str]:
        """Every anchor a link in this document can resolve to."""
        return {s.anchor for s in self.sections} | set(self.explicit_anchors)

    def find_section(self, anchor: str) -> Section | None:
        for section in self.sections:
            if section.anchor == anchor:
                return section
        return None

    def section_for_line(self, line: int) -> Section | None:
        """Section containing the given line, or None before the first heading."""
        found = None
        for section in self.sections:
            if section.line > line:
                break
            found = section
        return found

    def title_path(self, section: Section) -> tuple[str, ...]:
        """Titles from the outermost ancestor down to ``section``."""
        by_anchor = {s.anchor: s for s in self.sections}
        titles = [section.title]
        parent = section.parent
        while parent is not None and parent in by_anchor:
            titles.append(by_anchor[parent].title)
            parent = by_anchor[parent].parent
        return tuple(reversed(titles))

    def outline(self) -> list[dict]:
        """Flat outline suitable for display or JSON."""
        return [
            {
                "title": s.title,
                "level": s.level,
                "anchor": s.anchor,
                "line": s.line,
                "end_line": s.end_line,
                "code_blocks": len(s.code_blocks),
            }
            for s in self.sections
        ]
