"""Offset location: maps document positions to segments and headings.

Positions are always absolute character offsets into the unchunked document,
so they stay valid when the segment size changes between sessions:
- Offset → Segment: find the segment to load for a saved or clicked position
- Heading → Offset: resolve a saved heading ordinal in the current document
- Offset → Heading: pick the heading the reader is currently in
"""

from bisect import bisect_right
from typing import Optional, Sequence

from ..chunking.chunker import Segment
from ..errors import HeadingNotFound
from ..parsing.headings import HEADING_ID_PREFIX, Heading

DEFAULT_VIEWPORT_FRACTION = 0.3


def segment_for_offset(offset: int, segments: Sequence[Segment]) -> int:
    """Return the index of the segment containing ``offset``.

    Offsets outside the document are clamped to the first or last segment;
    ``offset == len(content)`` maps to the last segment.
    """
    if not segments:
        return 0

    starts = [s.start_offset for s in segments]
    idx = bisect_right(starts, offset) - 1

    # Zero-length segments only occur for the empty document
    return max(0, min(idx, len(segments) - 1))


def segment_for_scroll_fraction(fraction: float, total_segments: int) -> int:
    """Estimate a segment from a scroll fraction of the whole document."""
    if total_segments <= 1:
        return 0
    idx = int(fraction * total_segments)
    return max(0, min(idx, total_segments - 1))


def heading_index_to_offset(heading_index: int, headings: Sequence[Heading]) -> int:
    """Resolve a heading ordinal to its character offset.

    Raises:
        HeadingNotFound: If the ordinal is outside the heading list
    """
    if not 0 <= heading_index < len(headings):
        raise HeadingNotFound(heading_index, len(headings))
    return headings[heading_index].character_offset


def offset_to_nearest_heading(
    offset: int,
    headings: Sequence[Heading],
    viewport_length: int = 0,
    viewport_fraction: float = DEFAULT_VIEWPORT_FRACTION,
) -> Optional[int]:
    """Find the heading the reader is in at ``offset``.

    With a viewport, this is the last heading that starts above
    ``viewport_fraction`` of the way down the visible text, not just the last
    heading above its top edge.

    Returns:
        Heading ordinal, or None above the first heading
    """
    if not headings:
        return None

    probe = offset + int(max(0, viewport_length) * viewport_fraction)
    starts = [h.character_offset for h in headings]
    idx = bisect_right(starts, probe) - 1
    if idx < 0:
        return None
    return headings[idx].index


def parse_heading_id(anchor_id: str) -> Optional[int]:
    """Parse a renderer anchor id like ``heading-7`` into its ordinal."""
    if not anchor_id.startswith(HEADING_ID_PREFIX):
        return None
    suffix = anchor_id[len(HEADING_ID_PREFIX):]
    if not suffix.isdigit():
        return None
    return int(suffix)
