"""
Revision comparison for near-duplicate drafts of a style guide.

A guide is often kept as several copies (``README.md``, ``README-old.md``,
a translated draft...) that drift apart: one draft says enum cases are
UpperCamelCase, the next says lowerCamelCase. This module finds which files
are revisions of each other and reports how their sections and samples
differ.

Example:
    >>> diff = compare_revisions(parser.parse_file(old), parser.parse_file(new))
    >>> [c.title for c in diff.changed]
    ['Naming > Enumerations']
"""

import difflib
from dataclasses import dataclass, field
from typing import Any

from styleguide_lint.document import CodeBlock, Document, Section
from styleguide_lint.logging import get_logger
from styleguide_lint.parser.example_extractors import ExampleExtractor

logger = get_logger(__name__)

TITLE_SEPARATOR = " > "


def _normalized_lines(text: str) -> list[str]:
    return [" ".join(line.split()) for line in text.splitlines() if line.strip()]


def text_similarity(a: str, b: str) -> float:
    """Line-based similarity ratio in [0, 1]."""
    lines_a, lines_b = _normalized_lines(a), _normalized_lines(b)
    if not lines_a and not lines_b:
        return 1.0
    return difflib.SequenceMatcher(None, lines_a, lines_b, autojunk=False).ratio()


def similarity(doc_a: Document, doc_b: Document) -> float:
    """Similarity of two documents in [0, 1]."""
    return text_similarity(doc_a.text, doc_b.text)


def group_revisions(documents: list[Document], threshold: float = 0.6) -> list[list[Document]]:
    """Cluster documents that are revisions of each other.

    Single-link: a document joins every group holding a member at least
    ``threshold`` similar to it, merging those groups. Groups keep input
    order, and so do their members.
    """
    groups: list[list[Document]] = []
    for document in documents:
        matching = [
            g for g in groups
            if any(similarity(document, member) >= threshold for member in g)
        ]
        if not matching:
            groups.append([document])
            continue
        merged = [m for g in matching for m in g] + [document]
        first = next(i for i, g in enumerate(groups) if g is matching[0])
        groups = [g for g in groups if not any(g is m for m in matching)]
        groups.insert(first, merged)

    order = {id(d): i for i, d in enumerate(documents)}
    for group in groups:
        group.sort(key=lambda d: order[id(d)])
    return groups


@dataclass
class SectionRef:
    """A section identified by its title path."""
    title: str
    line: int

    def to_dict(self) -> dict[str, Any]:
        return {"title": self.title, "line": self.line}


@dataclass
class SectionMove:
    title: str
    old_title: str
    new_title: str
    old_line: int
    new_line: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "old_title": self.old_title,
            "new_title": self.new_title,
            "old_line": self.old_line,
            "new_line": self.new_line,
        }


@dataclass
class SectionChange:
    """Same section in both drafts, different text."""
    title: str
    old_line: int
    new_line: int
    similarity: float
    diff: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "old_line": self.old_line,
            "new_line": self.new_line,
            "similarity": round(self.similarity, 3),
            "diff": list(self.diff),
        }


@dataclass
class ExampleChange:
    """A code sample that differs between drafts.

    ``old_code`` is None for a sample only the new draft has; ``new_code``
    is None for one it dropped.
    """
    section: str
    index: int
    label: str | None
    old_code: str | None
    new_code: str | None
    old_line: int | None = None
    new_line: int | None = None

    @property
    def kind(self) -> str:
        if self.old_code is None:
            return "added"
        if self.new_code is None:
            return "removed"
        return "changed"

    def to_dict(self) -> dict[str, Any]:
        return {
            "section": self.section,
            "index": self.index,
            "kind": self.kind,
            "label": self.label,
            "old_line": self.old_line,
            "new_line": self.new_line,
            "old_code": self.old_code,
            "new_code": self.new_code,
        }


@dataclass
class RevisionDiff:
    """Section-level comparison of two drafts."""
    old_path: str
    new_path: str
    similarity: float
    added: list[SectionRef] = field(default_factory=list)
    removed: list[SectionRef] = field(default_factory=list)
    moved: list[SectionMove] = field(default_factory=list)
    changed: list[SectionChange] = field(default_factory=list)
    unchanged: int = 0
    example_changes: list[ExampleChange] = field(default_factory=list)

    @property
    def is_identical(self) -> bool:
        return not (self.added or self.removed or self.moved or self.changed or self.example_changes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "old_path": self.old_path,
            "new_path": self.new_path,
            "similarity": round(self.similarity, 3),
            "identical": self.is_identical,
            "added": [s.to_dict() for s in self.added],
            "removed": [s.to_dict() for s in self.removed],
            "moved": [m.to_dict() for m in self.moved],
            "changed": [c.to_dict() for c in self.changed],
            "unchanged": self.unchanged,
            "example_changes": [e.to_dict() for e in self.example_changes],
        }


def _title_path(document: Document, section: Section) -> tuple[str, ...]:
    """Title path without the guide title when the guide has a single H1."""
    path = document.title_path(section)
    if len(path) > 1 and sum(1 for s in document.sections if s.level == 1) == 1:
        return path[1:]
    return path


def _keyed_sections(document: Document) -> dict[tuple[str, ...], Section]:
    """Sections keyed by casefolded title path; repeats get an ordinal suffix."""
    keyed: dict[tuple[str, ...], Section] = {}
    for section in document.sections:
        base = tuple(t.casefold() for t in _title_path(document, section))
        key = base
        ordinal = 1
        while key in keyed:
            ordinal += 1
            key = base[:-1] + (f"{base[-1]}#{ordinal}",)
        keyed[key] = section
    return keyed


def compare_revisions(
    old: Document,
    new: Document,
    extractor: ExampleExtractor | None = None,
) -> RevisionDiff:
    """Compare two drafts section by section."""
    extractor = extractor or ExampleExtractor()
    extractor.label_blocks(old)
    extractor.label_blocks(new)

    old_sections = _keyed_sections(old)
    new_sections = _keyed_sections(new)

    diff = RevisionDiff(
        old_path=str(old.path),
        new_path=str(new.path),
        similarity=similarity(old, new),
    )

    removed_keys = [k for k in old_sections if k not in new_sections]
    added_keys = [k for k in new_sections if k not in old_sections]

    # A section whose title survives under a different parent was moved.
    for old_key in list(removed_keys):
        match = next((k for k in added_keys if k[-1] == old_key[-1]), None)
        if match is None:
            continue
        removed_keys.remove(old_key)
        added_keys.remove(match)
        old_section, new_section = old_sections[old_key], new_sections[match]
        diff.moved.append(SectionMove(
            title=new_section.title,
            old_title=TITLE_SEPARATOR.join(_title_path(old, old_section)),
            new_title=TITLE_SEPARATOR.join(_title_path(new, new_section)),
            old_line=old_section.line,
            new_line=new_section.line,
        ))
        _compare_bodies(old, new, old_section, new_section, diff)

    for key in removed_keys:
        section = old_sections[key]
        diff.removed.append(SectionRef(TITLE_SEPARATOR.join(_title_path(old, section)), section.line))
    for key in added_keys:
        section = new_sections[key]
        diff.added.append(SectionRef(TITLE_SEPARATOR.join(_title_path(new, section)), section.line))

    for key, old_section in old_sections.items():
        if key not in new_sections:
            continue
        if not _compare_bodies(old, new, old_section, new_sections[key], diff):
            diff.unchanged += 1

    logger.debug(
        "revisions_compared",
        old=diff.old_path,
        new=diff.new_path,
        added=len(diff.added),
        removed=len(diff.removed),
        changed=len(diff.changed),
    )
    return diff


def _compare_bodies(
    old: Document,
    new: Document,
    old_section: Section,
    new_section: Section,
    diff: RevisionDiff,
) -> bool:
    """Record body and sample differences; return True if anything differs."""
    title = TITLE_SEPARATOR.join(_title_path(new, new_section))
    changed = False

    if old_section.normalized_body != new_section.normalized_body:
        changed = True
        diff.changed.append(SectionChange(
            title=title,
            old_line=old_section.line,
            new_line=new_section.line,
            similarity=text_similarity(old_section.body, new_section.body),
            diff=list(difflib.unified_diff(
                old_section.body.splitlines(),
                new_section.body.splitlines(),
                fromfile=f"{old.path}:{old_section.line}",
                tofile=f"{new.path}:{new_section.line}",
                lineterm="",
            )),
        ))

    old_blocks = old_section.code_blocks
    new_blocks = new_section.code_blocks
    for index in range(max(len(old_blocks), len(new_blocks))):
        before: CodeBlock | None = old_blocks[index] if index < len(old_blocks) else None
        after: CodeBlock | None = new_blocks[index] if index < len(new_blocks) else None
        if before is not None and after is not None and before.code.strip() == after.code.strip():
            continue
        changed = True
        diff.example_changes.append(ExampleChange(
            section=title,
            index=index,
            label=(after or before).label,
            old_code=before.code if before else None,
            new_code=after.code if after else None,
            old_line=before.line if before else None,
            new_line=after.line if after else None,
        ))
    return changed
