"""
Heading anchors the way a repository hosting UI assigns them.

The table of contents of a style guide links to ``#anchor`` targets that
are never written in the document: the renderer derives them from heading
text. To check that a TOC entry resolves we must derive them identically.

Algorithm (GitHub):
    1. Render inline markup to text (``**Naming**`` -> ``Naming``,
       ``[Enums](#x)`` -> ``Enums``, backticks dropped)
    2. Lowercase
    3. Drop every character that is not a letter, digit, space, ``-`` or ``_``
    4. Replace each space with ``-`` (runs are NOT collapsed)
    5. Repeated slugs get ``-1``, ``-2``, ... in order of appearance

Example:
    >>> slugify("Spacing & Indentation")
    'spacing--indentation'
    >>> registry = AnchorRegistry()
    >>> registry.claim("Examples"), registry.claim("Examples")
    ('examples', 'examples-1')
"""

import re
from urllib.parse import unquote

_CODE_SPAN = re.compile(r"(`+)(.+?)\1")
_IMAGE = re.compile(r"!\[([^\]]*)\]\([^)]*\)")
_LINK = re.compile(r"\[([^\]]*)\]\([^)]*\)")
_REF_LINK = re.compile(r"\[([^\]]*)\]\[[^\]]*\]")
_HTML_TAG = re.compile(r"</?[A-Za-z][^>]*>")
_EMPHASIS_STAR = re.compile(r"\*+")
_EMPHASIS_UNDERSCORE = re.compile(r"(?<!\w)(_{1,3})(?!\s)(.+?)(?<!\s)\1(?!\w)")
_STRIKE = re.compile(r"~~")
_NOT_SLUG_CHAR = re.compile(r"[^\w\- ]", re.UNICODE)


def strip_inline_markup(text: str) -> str:
    """Render inline Markdown to the plain text a reader sees."""
    parts = []
    last = 0
    for match in _CODE_SPAN.finditer(text):
        parts.append(_strip_outside_code(text[last:match.start()]))
        parts.append(match.group(2).strip())
        last = match.end()
    parts.append(_strip_outside_code(text[last:]))
    return "".join(parts).strip()


def _strip_outside_code(text: str) -> str:
    text = _IMAGE.sub(r"\1", text)
    text = _LINK.sub(r"\1", text)
    text = _REF_LINK.sub(r"\1", text)
    text = _HTML_TAG.sub("", text)
    text = _EMPHASIS_STAR.sub("", text)
    text = _EMPHASIS_UNDERSCORE.sub(r"\2", text)
    text = _STRIKE.sub("", text)
    return text


def slugify(title: str) -> str:
    """Anchor slug for a heading title (without duplicate suffixes)."""
    text = strip_inline_markup(title).lower()
    text = _NOT_SLUG_CHAR.sub("", text)
    return text.replace(" ", "-")


def normalize_anchor(anchor: str) -> str:
    """Normalise a link target anchor for comparison.

    Browsers match anchors after percent-decoding; the UI lowercases
    generated anchors, so an ``#Naming`` link still resolves.
    """
    return unquote(anchor).strip().lower()


class AnchorRegistry:
    """Hand out unique anchors in document order."""

    def __init__(self):
        self._counts: dict[str, int] = {}
        self._taken: set[str] = set()

    def claim(self, title: str) -> str:
        """Return the unique anchor for the next heading titled ``title``."""
        base = slugify(title)
        anchor = base
        count = self._counts.get(base, 0)
        while anchor in self._taken:
            count += 1
            anchor = f"{base}-{count}"
        self._counts[base] = count
        self._taken.add(anchor)
        return anchor

    def __contains__(self, anchor: str) -> bool:
        return anchor in self._taken
