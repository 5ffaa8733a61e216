"""
Tests for offset location.
"""

import pytest

from mdreader.binding.locator import (
    heading_index_to_offset,
    offset_to_nearest_heading,
    parse_heading_id,
    segment_for_offset,
    segment_for_scroll_fraction,
)
from mdreader.chunking.chunker import Chunker, Segment
from mdreader.errors import HeadingNotFound
from mdreader.parsing.headings import extract_headings


class TestSegmentForOffset:
    """Tests for segment_for_offset."""

    def test_every_offset_maps_to_containing_segment(self, document_text):
        """Test offset → segment agrees with segment ranges."""
        segments = Chunker(target_size=4000).chunk(document_text)

        for offset in range(0, len(document_text), 97):
            idx = segment_for_offset(offset, segments)
            assert segments[idx].contains(offset)

    def test_boundaries(self, document_text):
        """Test segment starts belong to the segment they open."""
        segments = Chunker(target_size=4000).chunk(document_text)

        for seg in segments:
            assert segment_for_offset(seg.start_offset, segments) == seg.index
            assert segment_for_offset(seg.end_offset - 1, segments) == seg.index

    def test_end_of_document_maps_to_last(self, document_text):
        segments = Chunker(target_size=4000).chunk(document_text)
        assert segment_for_offset(len(document_text), segments) == len(segments) - 1

    def test_clamps_out_of_range(self):
        """Test offsets outside the document are clamped."""
        segments = [Segment(0, 0, 10), Segment(1, 10, 20)]

        assert segment_for_offset(-5, segments) == 0
        assert segment_for_offset(1000, segments) == 1

    def test_empty_document(self):
        segments = Chunker().chunk("")
        assert segment_for_offset(0, segments) == 0
        assert segment_for_offset(0, []) == 0


class TestSegmentForScrollFraction:
    """Tests for segment_for_scroll_fraction."""

    def test_fractions(self):
        assert segment_for_scroll_fraction(0.0, 10) == 0
        assert segment_for_scroll_fraction(0.55, 10) == 5
        assert segment_for_scroll_fraction(1.0, 10) == 9
        assert segment_for_scroll_fraction(-1.0, 10) == 0

    def test_single_segment(self):
        assert segment_for_scroll_fraction(0.9, 1) == 0
        assert segment_for_scroll_fraction(0.9, 0) == 0


class TestHeadingLookups:
    """Tests for heading ↔ offset lookups."""

    DOC = "Preface text.\n# One\nbody\n## Two\nbody\n## Three\nbody\n"

    def test_heading_index_to_offset(self):
        headings = extract_headings(self.DOC)

        assert heading_index_to_offset(0, headings) == self.DOC.index("# One")
        assert heading_index_to_offset(2, headings) == self.DOC.index("## Three")

    def test_heading_not_found(self):
        """Test out-of-range ordinals raise HeadingNotFound."""
        headings = extract_headings(self.DOC)

        with pytest.raises(HeadingNotFound) as exc_info:
            heading_index_to_offset(3, headings)
        assert exc_info.value.heading_index == 3
        assert exc_info.value.total == 3

        with pytest.raises(LookupError):
            heading_index_to_offset(-1, headings)

    def test_nearest_heading(self):
        """Test the last heading at or before the offset wins."""
        headings = extract_headings(self.DOC)
        two = self.DOC.index("## Two")

        assert offset_to_nearest_heading(two, headings) == 1
        assert offset_to_nearest_heading(two - 1, headings) == 0
        assert offset_to_nearest_heading(len(self.DOC), headings) == 2

    def test_above_first_heading(self):
        headings = extract_headings(self.DOC)

        assert offset_to_nearest_heading(0, headings) is None
        assert offset_to_nearest_heading(5, []) is None

    def test_viewport_fraction(self):
        """Test a heading 30% down the viewport counts as current."""
        headings = extract_headings(self.DOC)
        two = self.DOC.index("## Two")
        top = two - 6

        assert offset_to_nearest_heading(top, headings) == 0
        assert offset_to_nearest_heading(top, headings, viewport_length=30) == 1
        # Heading below the 30% line is not yet current
        assert offset_to_nearest_heading(top, headings, viewport_length=10) == 0


class TestParseHeadingId:
    def test_parse(self):
        assert parse_heading_id("heading-7") == 7
        assert parse_heading_id("heading-") is None
        assert parse_heading_id("heading-x") is None
        assert parse_heading_id("section-1") is None
