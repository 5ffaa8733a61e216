"""
Document chunking module.

Splits markdown documents into segments aligned with heading lines.
"""

from .chunker import Chunker, Segment, chunk_document

__all__ = ["Chunker", "Segment", "chunk_document"]
