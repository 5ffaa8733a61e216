"""
Line-based markdown chunker with heading-aligned boundaries.

Segments are cut at whole lines only:
- prefer a top-level heading (# or ##) once a segment passes 80% of the target
- force a cut once a segment passes 150% of the target
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator


@dataclass(frozen=True)
class Segment:
    """A contiguous slice of the document, in absolute character offsets."""

    index: int
    start_offset: int
    end_offset: int

    @property
    def length(self) -> int:
        return self.end_offset - self.start_offset

    def text(self, content: str) -> str:
        """Return this segment's slice of ``content``."""
        return content[self.start_offset:self.end_offset]

    def contains(self, offset: int) -> bool:
        return self.start_offset <= offset < self.end_offset


# ── Configuration ──────────────────────────────────────────────────────────

DEFAULT_TARGET_SIZE = 25000
DEFAULT_HEADING_SPLIT_RATIO = 0.8
DEFAULT_FORCE_SPLIT_RATIO = 1.5

SPLIT_HEADING_PATTERN = re.compile(r"#{1,2}\s")


class Chunker:
    """
    Split markdown documents into segments for incremental loading.

    Segment boundaries never fall inside a line. Offsets are exact, so
    joining every segment's text in order gives back the original document.
    """

    def __init__(
        self,
        target_size: int = DEFAULT_TARGET_SIZE,
        heading_split_ratio: float = DEFAULT_HEADING_SPLIT_RATIO,
        force_split_ratio: float = DEFAULT_FORCE_SPLIT_RATIO,
    ) -> None:
        """
        Initialize chunker.

        Args:
            target_size: Nominal segment size in characters
            heading_split_ratio: Fill level after which a heading starts a new segment
            force_split_ratio: Fill level after which a segment is cut at the next line end
        """
        if target_size <= 0:
            raise ValueError(f"target_size must be positive, got {target_size}")
        if not 0 < heading_split_ratio <= force_split_ratio:
            raise ValueError("heading_split_ratio must be in (0, force_split_ratio]")

        self.target_size = target_size
        self.heading_split_ratio = heading_split_ratio
        self.force_split_ratio = force_split_ratio

    @property
    def heading_threshold(self) -> float:
        return self.target_size * self.heading_split_ratio

    @property
    def force_threshold(self) -> float:
        return self.target_size * self.force_split_ratio

    def chunk(self, content: str) -> list[Segment]:
        """
        Split content into segments.

        Args:
            content: Full document text

        Returns:
            Segments in document order, never empty
        """
        if not content:
            return [Segment(index=0, start_offset=0, end_offset=0)]

        if len(content) <= self.target_size:
            return [Segment(index=0, start_offset=0, end_offset=len(content))]

        bounds: list[tuple[int, int]] = []
        seg_start = 0

        for line_start, line_end in _iter_lines(content):
            size = line_start - seg_start

            if (
                size > self.heading_threshold
                and _is_split_heading(content, line_start, line_end)
            ):
                # Heading opens the next segment
                bounds.append((seg_start, line_start))
                seg_start = line_start
                continue

            if line_end - seg_start > self.force_threshold:
                bounds.append((seg_start, line_end))
                seg_start = line_end

        if seg_start < len(content):
            bounds.append((seg_start, len(content)))

        return [
            Segment(index=i, start_offset=start, end_offset=end)
            for i, (start, end) in enumerate(bounds)
        ]


def chunk_document(
    content: str,
    *,
    target_size: int = DEFAULT_TARGET_SIZE,
    heading_split_ratio: float = DEFAULT_HEADING_SPLIT_RATIO,
    force_split_ratio: float = DEFAULT_FORCE_SPLIT_RATIO,
) -> list[Segment]:
    """Split content with a one-off Chunker."""
    return Chunker(
        target_size=target_size,
        heading_split_ratio=heading_split_ratio,
        force_split_ratio=force_split_ratio,
    ).chunk(content)


def _iter_lines(content: str) -> Iterator[tuple[int, int]]:
    """Yield (start, end) of each line; ``end`` includes the trailing newline."""
    pos = 0
    length = len(content)
    while pos < length:
        newline = content.find("\n", pos)
        end = length if newline == -1 else newline + 1
        yield pos, end
        pos = end


def _is_split_heading(content: str, start: int, end: int) -> bool:
    line = content[start:end].rstrip("\r\n")
    return SPLIT_HEADING_PATTERN.match(line) is not None
