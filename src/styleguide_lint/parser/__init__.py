"""
Parser module for styleguide-lint.

Reads Markdown style guides into Document objects and extracts the
structures rules inspect: anchors, the table of contents and Bad/Good
example pairs.
"""

from styleguide_lint.parser.anchors import AnchorRegistry, normalize_anchor, slugify, strip_inline_markup
from styleguide_lint.parser.example_extractors import (
    BAD,
    GOOD,
    ExampleExtractor,
    ExamplePair,
    ExampleSet,
    MarkComment,
)
from styleguide_lint.parser.markdown_parser import MarkdownParser, resolve_anchor

__all__ = [
    "AnchorRegistry",
    "normalize_anchor",
    "slugify",
    "strip_inline_markup",
    "BAD",
    "GOOD",
    "ExampleExtractor",
    "ExamplePair",
    "ExampleSet",
    "MarkComment",
    "MarkdownParser",
    "resolve_anchor",
]
