"""
Position binding between document offsets, headings and segments.
"""

from .locator import (
    heading_index_to_offset,
    offset_to_nearest_heading,
    parse_heading_id,
    segment_for_offset,
    segment_for_scroll_fraction,
)

__all__ = [
    "heading_index_to_offset",
    "offset_to_nearest_heading",
    "parse_heading_id",
    "segment_for_offset",
    "segment_for_scroll_fraction",
]
