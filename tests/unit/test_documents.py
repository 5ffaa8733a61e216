"""
Tests for document discovery and reading.
"""

import asyncio

import pytest

from mdreader.errors import DocumentLoadError
from mdreader.parsing.documents import (
    DocumentRef,
    FileSystemDocumentSource,
    find_markdown_in_folder,
    list_subfolders,
    read_markdown_file,
    resolve_markdown_file,
)


@pytest.fixture
def docs_dir(tmp_path):
    """Documents directory with two documents, a hidden folder and a stray file."""
    (tmp_path / "beta").mkdir()
    (tmp_path / "beta" / "notes.md").write_text("# Beta\n", encoding="utf-8")
    (tmp_path / "Alpha").mkdir()
    (tmp_path / "Alpha" / "b.md").write_text("# B\n", encoding="utf-8")
    (tmp_path / "Alpha" / "a.md").write_text("# Alpha\nbody\n", encoding="utf-8")
    (tmp_path / "Alpha" / "cover.png").write_bytes(b"\x89PNG")
    (tmp_path / ".mdreader").mkdir()
    (tmp_path / "readme.txt").write_text("not a document", encoding="utf-8")
    return tmp_path


class TestListSubfolders:
    """Tests for list_subfolders."""

    def test_lists_visible_folders_sorted(self, docs_dir):
        docs = list_subfolders(str(docs_dir))

        assert [d.id for d in docs] == ["Alpha", "beta"]
        assert docs[0].folder_path == docs_dir / "Alpha"
        assert docs[0].markdown_file is None

    def test_blank_or_missing_path(self, tmp_path):
        assert list_subfolders("") == []
        assert list_subfolders("   ") == []
        assert list_subfolders(str(tmp_path / "missing")) == []


class TestReading:
    """Tests for markdown lookup and reading."""

    def test_first_markdown_file_by_name(self, docs_dir):
        assert find_markdown_in_folder(docs_dir / "Alpha") == docs_dir / "Alpha" / "a.md"
        assert find_markdown_in_folder(docs_dir / ".mdreader") is None

    def test_resolve_without_markdown(self, docs_dir):
        doc = DocumentRef(id="hidden", title="hidden", folder_path=docs_dir / ".mdreader")

        with pytest.raises(DocumentLoadError):
            resolve_markdown_file(doc)

    def test_read_missing_file(self, tmp_path):
        with pytest.raises(DocumentLoadError):
            read_markdown_file(tmp_path / "gone.md")

    def test_read_invalid_utf8(self, tmp_path):
        path = tmp_path / "bad.md"
        path.write_bytes(b"\xff\xfe\xfa")

        with pytest.raises(DocumentLoadError):
            read_markdown_file(path)

    def test_file_system_source(self, docs_dir):
        source = FileSystemDocumentSource()

        docs = asyncio.run(source.list_documents(str(docs_dir)))
        content = asyncio.run(source.read_full_content(docs[0]))

        assert content == "# Alpha\nbody\n"
