"""
Markdown parser for style-guide documents.

Reads a Markdown file into a Document: sections with unique anchors, fenced
code blocks, inline links, explicit HTML anchors and the table of contents.
Only the structure a style guide uses is recognised; inline rendering is
limited to what anchor generation needs.

Example:
    >>> parser = MarkdownParser()
    >>> doc = parser.parse_file(Path("README.md"))
    >>> len(doc.sections), len(doc.toc), len(doc.code_blocks)
    (48, 31, 112)
"""

import re
from dataclasses import dataclass
from pathlib import Path

from styleguide_lint.document import CodeBlock, Document, Link, Section, TocEntry
from styleguide_lint.errors import DocumentNotFoundError, DocumentParseError
from styleguide_lint.logging import get_logger
from styleguide_lint.parser.anchors import AnchorRegistry, normalize_anchor, strip_inline_markup

logger = get_logger(__name__)

ATX_HEADING = re.compile(r"^ {0,3}(#{1,6})[ \t]+(.+?)(?:[ \t]+#+)?[ \t]*$")
SETEXT_UNDERLINE = re.compile(r"^ {0,3}(=+|-+)[ \t]*$")
FENCE_OPEN = re.compile(r"^([ \t]*)(`{3,}|~{3,})[ \t]*([^\s`]*)[^`]*$")
LIST_ITEM = re.compile(r"^([ \t]*)(?:[-*+]|\d+[.)])[ \t]+(.*)$")
INLINE_CODE = re.compile(r"(`+).+?\1")
INLINE_LINK = re.compile(r"(?<!!)\[((?:[^\[\]]|\[[^\]]*\])*)\]\(\s*<?([^)\s>]*)>?(?:\s+\"[^\"]*\")?\s*\)")
HTML_ANCHOR = re.compile(r"<a\s+[^>]*?\b(?:name|id)\s*=\s*[\"']([^\"']+)[\"'][^>]*>", re.IGNORECASE)
HTML_COMMENT = re.compile(r"^\s*<!--")


@dataclass
class _Heading:
    line: int
    level: int
    raw_title: str
    body_start: int


class MarkdownParser:
    """Parse Markdown text into a Document.

    Manifesto:
        The guide is the source of truth and we never rewrite it. The
        parser only reads structure, so every rule works on the same
        view of the document a reader gets from the rendered page.

    Architecture:
        ```
        text
          │
          ▼
        _scan_lines() ──► headings, fences, links, explicit anchors
          │
          ▼
        _build_sections() ──► Section (anchor, parent, body, blocks)
          │
          ▼
        _extract_toc() ──► TocEntry list
          │
          ▼
        Document
        ```

    Features:
        - ATX and setext headings
        - Backtick and tilde fences, unterminated fences flagged
        - Headings inside fences are ignored
        - Duplicate titles receive -1, -2 anchor suffixes
        - TOC found by heading title or as the leading list of anchor links

    Guardrails:
        - Do NOT treat ``# comment`` lines in code samples as headings
          ✅ Fence state is tracked before heading detection
        - Do NOT fail on malformed Markdown
          ✅ Unclosed fences run to end of file and are reported by a rule

    Tags:
        - parser
        - markdown
        - anchors
    """

    def __init__(self, toc_titles: list[str] | None = None):
        titles = toc_titles if toc_titles is not None else ["Table of Contents", "Contents", "TOC"]
        self.toc_titles = {t.casefold() for t in titles}

    def parse_file(self, path: Path) -> Document:
        """Read and parse a Markdown file.

        Raises:
            DocumentNotFoundError: If the path is not a file
            DocumentParseError: If the file is not valid UTF-8
        """
        path = Path(path)
        if not path.is_file():
            raise DocumentNotFoundError(str(path))

        try:
            text = path.read_bytes().decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise DocumentParseError(
                f"File is not valid UTF-8 (byte offset {e.start})", cause=e
            ).with_context(path=str(path))
        except OSError as e:
            raise DocumentParseError(f"Cannot read file: {e}", cause=e).with_context(path=str(path))

        return self.parse_text(text, path)

    def parse_text(self, text: str, path: Path | str = "<string>") -> Document:
        """Parse Markdown text held in memory."""
        lines = text.replace("\r\n", "\n").replace("\r", "\n").split("\n")
        if lines and lines[-1] == "":
            lines.pop()

        document = Document(path=Path(path), lines=lines)

        headings = self._scan_lines(lines, document)
        self._build_sections(headings, document)
        self._extract_toc(document)

        logger.debug(
            "document_parsed",
            path=str(path),
            sections=len(document.sections),
            code_blocks=len(document.code_blocks),
            toc_entries=len(document.toc),
        )
        return document

    # ------------------------------------------------------------------
    # Line scanning
    # ------------------------------------------------------------------

    def _scan_lines(self, lines: list[str], document: Document) -> list[_Heading]:
        headings: list[_Heading] = []
        fence: tuple[str, int, int, str] | None = None  # char, length, start line, language
        fence_body: list[str] = []
        paragraph_line: int | None = None

        for number, line in enumerate(lines, start=1):
            if fence is not None:
                char, length, start, language = fence
                stripped = line.strip()
                if (
                    stripped
                    and set(stripped) == {char}
                    and len(stripped) >= length
                ):
                    document.code_blocks.append(CodeBlock(
                        language=language,
                        code="\n".join(fence_body),
                        line=start,
                        end_line=number,
                        fence=char * length,
                    ))
                    fence = None
                    fence_body = []
                else:
                    fence_body.append(line)
                continue

            fence_match = FENCE_OPEN.match(line)
            if fence_match:
                marker = fence_match.group(2)
                fence = (marker[0], len(marker), number, fence_match.group(3).lower())
                paragraph_line = None
                continue

            atx = ATX_HEADING.match(line)
            if atx:
                headings.append(_Heading(number, len(atx.group(1)), atx.group(2).strip(), number + 1))
                paragraph_line = None
                continue

            setext = SETEXT_UNDERLINE.match(line)
            if setext and paragraph_line == number - 1:
                level = 1 if setext.group(1).startswith("=") else 2
                headings.append(_Heading(paragraph_line, level, lines[paragraph_line - 1].strip(), number + 1))
                paragraph_line = None
                continue

            self._scan_inline(line, number, document)

            if self._starts_paragraph(line, paragraph_line):
                paragraph_line = number
            elif not line.strip():
                paragraph_line = None

        if fence is not None:
            char, length, start, language = fence
            document.code_blocks.append(CodeBlock(
                language=language,
                code="\n".join(fence_body),
                line=start,
                end_line=len(lines),
                fence=char * length,
                closed=False,
            ))

        headings.sort(key=lambda h: h.line)
        return headings

    @staticmethod
    def _starts_paragraph(line: str, paragraph_line: int | None) -> bool:
        """True if ``line`` is single-line paragraph text a setext underline may follow."""
        stripped = line.strip()
        if not stripped or paragraph_line is not None:
            return False
        if LIST_ITEM.match(line) or stripped.startswith(("|", ">", "<")) or HTML_COMMENT.match(line):
            return False
        return len(line) - len(line.lstrip(" ")) < 4

    def _scan_inline(self, line: str, number: int, document: Document) -> None:
        visible = INLINE_CODE.sub(lambda m: " " * len(m.group(0)), line)
        for match in INLINE_LINK.finditer(visible):
            document.links.append(Link(text=match.group(1), target=match.group(2), line=number))
        for match in HTML_ANCHOR.finditer(visible):
            document.explicit_anchors.setdefault(match.group(1), number)

    # ------------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------------

    def _build_sections(self, headings: list[_Heading], document: Document) -> None:
        registry = AnchorRegistry()
        stack: list[Section] = []
        total = len(document.lines)

        for index, heading in enumerate(headings):
            end_line = headings[index + 1].line - 1 if index + 1 < len(headings) else total
            while stack and stack[-1].level >= heading.level:
                stack.pop()

            section = Section(
                title=strip_inline_markup(heading.raw_title),
                raw_title=heading.raw_title,
                level=heading.level,
                anchor=registry.claim(heading.raw_title),
                line=heading.line,
                end_line=end_line,
                body="\n".join(document.lines[heading.body_start - 1:end_line]),
                parent=stack[-1].anchor if stack else None,
            )
            document.sections.append(section)
            stack.append(section)

        for block in document.code_blocks:
            owner = document.section_for_line(block.line)
            if owner is not None:
                block.section = owner.anchor
                owner.code_blocks.append(block)

        for link in document.links:
            owner = document.section_for_line(link.line)
            if owner is not None:
                owner.links.append(link)

    # ------------------------------------------------------------------
    # Table of contents
    # ------------------------------------------------------------------

    def _extract_toc(self, document: Document) -> None:
        for section in document.sections:
            if section.title.casefold().rstrip(":") in self.toc_titles:
                entries = self._list_entries(document, section.line + 1, section.end_line)
                document.toc_section = section.anchor
                document.toc = entries
                document.toc_line = entries[0].line if entries else None
                return

        # No TOC heading: accept a leading list made only of anchor links.
        limit = document.sections[1].line - 1 if len(document.sections) > 1 else len(document.lines)
        entries = self._leading_link_list(document, limit)
        if len(entries) >= 2:
            document.toc = entries
            document.toc_line = entries[0].line

    def _list_entries(self, document: Document, start: int, end: int) -> list[TocEntry]:
        entries = []
        fenced = self._fenced_lines(document)
        for number in range(start, end + 1):
            if number in fenced:
                continue
            line = document.lines[number - 1]
            item = LIST_ITEM.match(line)
            if not item:
                continue
            depth = len(item.group(1).expandtabs(4)) // 2
            for link in (lk for lk in document.links if lk.line == number and lk.is_internal):
                entries.append(TocEntry(
                    text=strip_inline_markup(link.text),
                    anchor=link.anchor,
                    line=number,
                    depth=depth,
                ))
        return entries

    def _leading_link_list(self, document: Document, limit: int) -> list[TocEntry]:
        fenced = self._fenced_lines(document)
        block_start = None
        for number in range(1, limit + 1):
            if number in fenced:
                continue
            if LIST_ITEM.match(document.lines[number - 1]):
                block_start = number
                break
        if block_start is None:
            return []

        block_end = block_start
        while block_end < limit:
            nxt = document.lines[block_end]
            if not nxt.strip() or not (LIST_ITEM.match(nxt) or nxt.startswith((" ", "\t"))):
                break
            block_end += 1

        for number in range(block_start, block_end + 1):
            line = document.lines[number - 1]
            item = LIST_ITEM.match(line)
            if item is None:
                continue
            links = [lk for lk in document.links if lk.line == number]
            if not links or not all(lk.is_internal for lk in links):
                return []
        return self._list_entries(document, block_start, block_end)

    @staticmethod
    def _fenced_lines(document: Document) -> set[int]:
        fenced: set[int] = set()
        for block in document.code_blocks:
            fenced.update(range(block.line, block.end_line + 1))
        return fenced


def resolve_anchor(document: Document, anchor: str) -> bool:
    """True if ``#anchor`` points at a heading or explicit anchor of ``document``."""
    wanted = normalize_anchor(anchor)
    return wanted in {normalize_anchor(a) for a in document.anchors()}
