"""
Example: Read a long markdown document through a segment window.

This example demonstrates the basic usage of a ReaderSession.
"""

import asyncio
from pathlib import Path

from mdreader.config import ReaderConfig
from mdreader.parsing.documents import DocumentRef
from mdreader.reader.session import ReaderSession
from mdreader.storage.kv import MemoryKeyValueStore
from mdreader.storage.positions import PositionStore


class SampleSource:
    """Serve one generated document."""

    def __init__(self, content: str) -> None:
        self.content = content

    async def list_documents(self, docs_path: str) -> list[DocumentRef]:
        return [DocumentRef(id="ml_intro", title="ML Intro", folder_path=Path("ml_intro"))]

    async def read_full_content(self, document: DocumentRef) -> str:
        return self.content


def build_sample() -> str:
    """Generate a book-sized document with one heading per chapter."""
    parts = ["# Introduction to Machine Learning\n\n"]
    paragraph = (
        "Machine learning is a subset of artificial intelligence that enables "
        "computers to learn from data without being explicitly programmed.\n\n"
    )
    for i in range(1, 13):
        parts.append(f"## Chapter {i}\n\n")
        parts.append(paragraph * 40)
    return "".join(parts)


async def main():
    """Run example reading session."""

    content = build_sample()
    positions = PositionStore(MemoryKeyValueStore())

    # Smaller segments for this example
    config = ReaderConfig(target_segment_size=5000, autosave_interval_ms=0)
    document = DocumentRef(id="ml_intro", title="ML Intro", folder_path=Path("ml_intro"))

    print("Opening document...")
    async with ReaderSession(document, SampleSource(content), positions, config=config) as session:
        print(f"\n{session.state.summary()}")

        print("\n## Table of Contents")
        for heading in session.headings:
            print(f"  {'  ' * (heading.level - 1)}- {heading.text} (offset {heading.character_offset})")

        print("\n## Scrolling")
        result = session.on_scroll(0.95)
        print(f"  extend forward: {result.status.value} → window {result.window}")

        print("\n## Jump")
        jump = session.jump_to_heading(7)
        print(f"  heading 7 → window {jump.window}, scroll to {jump.scroll_fraction:.0%}")

    record = await positions.load(document.id)
    print(f"\nSaved position: heading {record.heading_index}, offset {record.legacy_character_offset}")


if __name__ == "__main__":
    asyncio.run(main())
