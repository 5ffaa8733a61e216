"""
Tests for heading extraction and TOC helpers.
"""

from mdreader.parsing.headings import (
    Heading,
    clean_heading_text,
    extract_headings,
    heading_positions,
    should_show_toc_item,
)

SAMPLE = """# Main Title
Intro.

## Subsection
Body.

### Detail
More.

## Another **Section**
#not a heading
####### too deep
"""


class TestExtractHeadings:
    """Tests for extract_headings."""

    def test_extracts_in_order(self):
        """Test headings are numbered in document order."""
        headings = extract_headings(SAMPLE)

        assert [h.index for h in headings] == [0, 1, 2, 3]
        assert [h.level for h in headings] == [1, 2, 3, 2]
        assert [h.text for h in headings] == [
            "Main Title",
            "Subsection",
            "Detail",
            "Another Section",
        ]

    def test_offsets_point_at_heading_lines(self):
        """Test character offsets are exact line starts."""
        for h in extract_headings(SAMPLE):
            assert SAMPLE[h.character_offset] == "#"
            assert h.character_offset == 0 or SAMPLE[h.character_offset - 1] == "\n"

    def test_has_children(self):
        """Test parent headings are marked."""
        headings = extract_headings(SAMPLE)

        assert headings[0].has_children
        assert headings[1].has_children
        assert not headings[2].has_children
        assert not headings[3].has_children

    def test_empty_document(self):
        """Test a document without headings."""
        assert extract_headings("") == []
        assert extract_headings("plain text\nno headings") == []

    def test_anchor_id(self):
        heading = Heading(index=5, level=2, text="x", character_offset=0)
        assert heading.anchor_id == "heading-5"

    def test_heading_positions(self):
        headings = extract_headings(SAMPLE)
        positions = heading_positions(headings)

        assert positions["heading-0"] == 0
        assert positions["heading-1"] == SAMPLE.index("## Subsection")


class TestCleanHeadingText:
    """Tests for clean_heading_text."""

    def test_strips_inline_markdown(self):
        assert clean_heading_text("**Bold** and *italic* and `code`") == "Bold and italic and code"

    def test_keeps_link_text(self):
        assert clean_heading_text("See [the docs](https://example.com)") == "See the docs"

    def test_html_tags_and_entities(self):
        assert clean_heading_text("<em>A</em>&nbsp;&lt;B&gt; &amp; C") == "A <B> & C"


class TestShouldShowTocItem:
    """Tests for collapsible TOC visibility."""

    def test_top_level_always_visible(self):
        headings = extract_headings(SAMPLE)
        assert should_show_toc_item(0, headings, set())

    def test_child_of_collapsed_parent_hidden(self):
        headings = extract_headings(SAMPLE)
        assert not should_show_toc_item(3, headings, set())
        assert should_show_toc_item(3, headings, {0})

    def test_nested_requires_expanded_ancestors(self):
        headings = extract_headings(SAMPLE)

        assert not should_show_toc_item(2, headings, {0})
        assert not should_show_toc_item(2, headings, {1})
        assert should_show_toc_item(2, headings, {0, 1})
