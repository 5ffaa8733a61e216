"""
Heading extraction and table-of-contents helpers.

Headings are numbered by their ordinal position in the document. The ordinal
is what gets persisted as a reading position, so it must not depend on how
the document is chunked.
"""

import re
from dataclasses import dataclass
from typing import Iterable

HEADING_PATTERN = re.compile(r"^(#{1,6})[ \t]+(.+)$", re.MULTILINE)

HEADING_ID_PREFIX = "heading-"

_INLINE_RULES = [
    (re.compile(r"\*\*(.+?)\*\*"), r"\1"),  # **bold**
    (re.compile(r"\*(.+?)\*"), r"\1"),  # *italic*
    (re.compile(r"__(.+?)__"), r"\1"),  # __bold__
    (re.compile(r"_(.+?)_"), r"\1"),  # _italic_
    (re.compile(r"`(.+?)`"), r"\1"),  # `code`
    (re.compile(r"\[(.+?)\]\(.+?\)"), r"\1"),  # [text](url)
    (re.compile(r"<[^>]+>"), ""),  # HTML tags
]

_ENTITIES = [
    ("&nbsp;", " "),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&amp;", "&"),
]


@dataclass(frozen=True)
class Heading:
    """A markdown heading with its absolute position."""

    index: int
    level: int
    text: str
    character_offset: int
    has_children: bool = False

    @property
    def anchor_id(self) -> str:
        """Identifier the renderer uses for this heading."""
        return f"{HEADING_ID_PREFIX}{self.index}"


def clean_heading_text(text: str) -> str:
    """
    Strip inline markdown from heading text.

    Removes emphasis markers, inline code, links (keeping their text),
    HTML tags, and decodes common HTML entities.

    Args:
        text: Raw heading text

    Returns:
        Plain heading text
    """
    cleaned = text
    for pattern, replacement in _INLINE_RULES:
        cleaned = pattern.sub(replacement, cleaned)
    for entity, char in _ENTITIES:
        cleaned = cleaned.replace(entity, char)
    return cleaned.strip()


def extract_headings(content: str) -> list[Heading]:
    """
    Extract all headings (h1-h6) in document order.

    Args:
        content: Full markdown document

    Returns:
        Headings with ordinals, levels, cleaned text and offsets
    """
    found = [
        (len(match.group(1)), clean_heading_text(match.group(2)), match.start())
        for match in HEADING_PATTERN.finditer(content)
    ]

    headings: list[Heading] = []
    for i, (level, text, offset) in enumerate(found):
        # A heading has children when the next one is nested deeper
        has_children = i + 1 < len(found) and found[i + 1][0] > level
        headings.append(
            Heading(
                index=i,
                level=level,
                text=text,
                character_offset=offset,
                has_children=has_children,
            )
        )

    return headings


def heading_positions(headings: Iterable[Heading]) -> dict[str, int]:
    """Map anchor ids to character offsets."""
    return {h.anchor_id: h.character_offset for h in headings}


def should_show_toc_item(
    index: int,
    headings: list[Heading],
    expanded: set[int],
) -> bool:
    """
    Check whether a TOC entry is visible in a collapsible tree.

    An entry is visible when it has no parent, or when every ancestor is
    expanded.

    Args:
        index: Heading ordinal to check
        headings: Full heading list
        expanded: Ordinals of expanded entries

    Returns:
        True if the entry should be shown
    """
    level = headings[index].level
    for i in range(index - 1, -1, -1):
        if headings[i].level < level:
            return i in expanded and should_show_toc_item(i, headings, expanded)
    return True
