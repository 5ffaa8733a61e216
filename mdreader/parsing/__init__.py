"""
Document parsing module.

Finds markdown documents on disk and extracts their headings.
"""

from .documents import DocumentRef, DocumentSource, FileSystemDocumentSource
from .headings import Heading, extract_headings

__all__ = [
    "DocumentRef",
    "DocumentSource",
    "FileSystemDocumentSource",
    "Heading",
    "extract_headings",
]
