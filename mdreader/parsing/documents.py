"""
Document discovery and reading.

Each subfolder of the documents directory is one document; its markdown file
is looked up lazily when the document is opened.
"""

import asyncio
import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional, Protocol

from ..errors import DocumentLoadError

logger = logging.getLogger(__name__)

MARKDOWN_SUFFIX = ".md"


@dataclass(frozen=True)
class DocumentRef:
    """A document folder and (once resolved) its markdown file."""

    id: str
    title: str
    folder_path: Path
    markdown_file: Optional[Path] = None


class DocumentSource(Protocol):
    """Where documents come from."""

    async def list_documents(self, docs_path: str) -> list[DocumentRef]: ...

    async def read_full_content(self, document: DocumentRef) -> str: ...


def list_subfolders(docs_path: str) -> list[DocumentRef]:
    """
    List document folders under a directory.

    Hidden folders (such as the ``.mdreader`` cache folder) are skipped.
    A blank or missing path yields an empty list.

    Args:
        docs_path: Directory holding one folder per document

    Returns:
        DocumentRefs sorted by name
    """
    if not docs_path or not docs_path.strip():
        return []

    root = Path(docs_path.strip()).expanduser()
    if not root.is_dir():
        logger.warning(f"Documents directory not found: {root}")
        return []

    return [
        DocumentRef(id=item.name, title=item.name, folder_path=item)
        for item in sorted(root.iterdir(), key=lambda p: p.name.lower())
        if item.is_dir() and not item.name.startswith(".")
    ]


def find_markdown_in_folder(folder: Path) -> Optional[Path]:
    """Return the first markdown file in a folder (by name), or None."""
    if not folder.is_dir():
        return None

    candidates = sorted(
        p for p in folder.iterdir()
        if p.is_file() and p.suffix.lower() == MARKDOWN_SUFFIX
    )
    return candidates[0] if candidates else None


def read_markdown_file(path: Path) -> str:
    """
    Read a markdown file as UTF-8 text.

    Raises:
        DocumentLoadError: If the file cannot be read or decoded
    """
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise DocumentLoadError(f"Failed to read {path}: {e}") from e


def resolve_markdown_file(document: DocumentRef) -> DocumentRef:
    """
    Fill in ``markdown_file`` for a document that has not been opened yet.

    Raises:
        DocumentLoadError: If the folder holds no markdown file
    """
    if document.markdown_file is not None:
        return document

    markdown = find_markdown_in_folder(document.folder_path)
    if markdown is None:
        raise DocumentLoadError(f"No markdown file in {document.folder_path}")
    return replace(document, markdown_file=markdown)


class FileSystemDocumentSource:
    """DocumentSource backed by the local file system."""

    async def list_documents(self, docs_path: str) -> list[DocumentRef]:
        return await asyncio.to_thread(list_subfolders, docs_path)

    async def read_full_content(self, document: DocumentRef) -> str:
        resolved = await asyncio.to_thread(resolve_markdown_file, document)
        content = await asyncio.to_thread(read_markdown_file, resolved.markdown_file)
        logger.info(f"Read {resolved.markdown_file} ({len(content)} chars)")
        return content
